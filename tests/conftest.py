"""Shared fixtures: a small synthetic catalog built in code.

The catalog is independent of the packaged sample data so tests pin exact
prices, MPG figures and colors.
"""

from __future__ import annotations

from typing import Any

import pytest

from showroom.core.catalog import CatalogIndex
from showroom.core.intent import QueryParser
from showroom.core.models import Vehicle


def make_vehicle(**overrides: Any) -> Vehicle:
    """Build a Vehicle with defaults for everything not under test."""
    record: dict[str, Any] = {
        "id": "test-vehicle",
        "make": "Toyota",
        "model": "Testmodel",
        "trim": "",
        "year": 2025,
        "msrp": 30000,
        "type": "Sedan",
        "category": "Midsize",
        "fuelType": "Gasoline",
        "drivetrain": "FWD",
        "electrified": False,
        "engine": {"horsepower": 200},
        "mpg": {"city": 30, "highway": 38, "combined": 33},
        "colors": [],
        "description": "",
    }
    record.update(overrides)
    return Vehicle.model_validate(record)


CATALOG_RECORDS: list[dict[str, Any]] = [
    {
        "id": "camry-le-hybrid-2025",
        "make": "Toyota",
        "model": "Camry",
        "trim": "LE Hybrid",
        "msrp": 30000,
        "type": "Sedan",
        "category": "Midsize",
        "fuelType": "Hybrid",
        "drivetrain": "FWD",
        "electrified": True,
        "engine": {"horsepower": 225},
        "mpg": {"city": 53, "highway": 50, "combined": 52},
        "colors": [
            {"name": "Wind Chill Pearl", "code": "089", "hex": "#f4f4f2"},
            {"name": "Midnight Black Metallic", "code": "218", "hex": "#1c1c1e"},
            {"name": "Blueprint", "code": "8X8", "hex": "#2d4a6b"},
            {"name": "Celestial Silver Metallic", "code": "1J9", "hex": "#b8bcc0"},
        ],
        "description": "Comfortable family sedan.",
    },
    {
        "id": "accord-sport-hybrid-2025",
        "make": "Honda",
        "model": "Accord",
        "trim": "Sport Hybrid",
        "msrp": 32000,
        "type": "Sedan",
        "category": "Midsize",
        "fuelType": "Hybrid",
        "drivetrain": "FWD",
        "electrified": True,
        "engine": {"horsepower": 204},
        "mpg": {"city": 46, "highway": 50, "combined": 48},
        "colors": [
            {"name": "Platinum White Pearl", "code": "NH-883P", "hex": "#f2f2f0"},
            {"name": "Lunar Silver Metallic", "code": "NH-830M", "hex": "#a7a9ac"},
            {"name": "Still Night Pearl", "code": "B-640P", "hex": "#1f2a44"},
        ],
        "description": "Roomy sedan with a sporty edge.",
    },
    {
        "id": "rav4-xle-hybrid-2025",
        "make": "Toyota",
        "model": "RAV4",
        "trim": "XLE Hybrid",
        "msrp": 34000,
        "type": "SUV",
        "category": "Compact",
        "fuelType": "Hybrid",
        "drivetrain": "AWD",
        "electrified": True,
        "engine": {"horsepower": 219},
        "mpg": {"city": 41, "highway": 38, "combined": 39},
        "colors": [
            {"name": "Blueprint", "code": "8X8", "hex": "#2d4a6b"},
            {"name": "Lunar Rock", "code": "1L5", "hex": "#8c8f88"},
        ],
        "description": "Versatile crossover for weekend trips.",
    },
    {
        "id": "corolla-le-2025",
        "make": "Toyota",
        "model": "Corolla",
        "trim": "LE",
        "msrp": 23000,
        "type": "Sedan",
        "category": "Compact",
        "fuelType": "Gasoline",
        "drivetrain": "FWD",
        "electrified": False,
        "engine": {"horsepower": 169},
        "mpg": {"city": 32, "highway": 41, "combined": 35},
        "colors": [
            {"name": "Classic Silver Metallic", "code": "1K3", "hex": "#c0c0c0"},
            {"name": "Blue Crush Metallic", "code": "8X2", "hex": "#2255aa"},
        ],
        "description": "Dependable commuter.",
    },
    {
        "id": "4runner-trd-off-road-2025",
        "make": "Toyota",
        "model": "4Runner",
        "trim": "TRD Off-Road",
        "msrp": 48000,
        "type": "SUV",
        "category": "Midsize",
        "fuelType": "Gasoline",
        "drivetrain": "4WD",
        "electrified": False,
        "engine": {"horsepower": 278},
        "mpg": {"city": 19, "highway": 22, "combined": 20},
        "colors": [{"name": "Midnight Black Metallic", "code": "218", "hex": "#1c1c1e"}],
        "description": "Body-on-frame adventurer.",
    },
    {
        "id": "tacoma-trd-sport-2025",
        "make": "Toyota",
        "model": "Tacoma",
        "trim": "TRD Sport",
        "msrp": 39000,
        "type": "Truck",
        "category": "Midsize",
        "fuelType": "Gasoline",
        "drivetrain": "4WD",
        "electrified": False,
        "engine": {"horsepower": 278},
        "mpg": {"city": 20, "highway": 23, "combined": 21},
        "colors": [{"name": "Ice Cap", "code": "040", "hex": "#fafafa"}],
        "description": "Midsize pickup for work and play.",
    },
    {
        "id": "cr-v-ex-2025",
        "make": "Honda",
        "model": "CR-V",
        "trim": "EX",
        "msrp": 33000,
        "type": "SUV",
        "category": "Compact",
        "fuelType": "Gasoline",
        "drivetrain": "AWD",
        "electrified": False,
        "engine": {"horsepower": 190},
        "mpg": {"city": 27, "highway": 32, "combined": 30},
        "colors": [{"name": "Radiant Red Metallic", "code": "R-580M", "hex": "#8b1a1a"}],
        "description": "Practical family hauler.",
    },
    {
        "id": "mazda3-preferred-2025",
        "make": "Mazda",
        "model": "Mazda3",
        "trim": "Preferred",
        "msrp": 27000,
        "type": "Sedan",
        "category": "Compact",
        "fuelType": "Gasoline",
        "drivetrain": "FWD",
        "electrified": False,
        "engine": {"horsepower": 191},
        "mpg": {"city": 28, "highway": 37, "combined": 31},
        "colors": [{"name": "Soul Red Crystal Metallic", "code": "46V", "hex": "#9b111e"}],
        "description": "Upscale-feeling small car.",
    },
    {
        "id": "soul-lx-2025",
        "make": "Kia",
        "model": "Soul",
        "trim": "LX",
        "msrp": 21000,
        "type": "Hatchback",
        "category": "Compact",
        "fuelType": "Gasoline",
        "drivetrain": "FWD",
        "electrified": False,
        "engine": {"horsepower": 147},
        "mpg": {"city": 28, "highway": 33, "combined": 30},
        "colors": [],
        "description": "Boxy city runabout.",
    },
]


@pytest.fixture
def vehicles() -> list[Vehicle]:
    return [make_vehicle(**record) for record in CATALOG_RECORDS]


@pytest.fixture
def catalog(vehicles: list[Vehicle]) -> CatalogIndex:
    return CatalogIndex(vehicles)


@pytest.fixture
def parser(catalog: CatalogIndex) -> QueryParser:
    return QueryParser(catalog)


@pytest.fixture
def camry(catalog: CatalogIndex) -> Vehicle:
    return catalog.find_by_id("camry-le-hybrid-2025")


@pytest.fixture
def accord(catalog: CatalogIndex) -> Vehicle:
    return catalog.find_by_id("accord-sport-hybrid-2025")


@pytest.fixture
def soul(catalog: CatalogIndex) -> Vehicle:
    return catalog.find_by_id("soul-lx-2025")


@pytest.fixture
def vehicle_factory():
    """Build one-off vehicles: vehicle_factory(id="x", model="Y", ...)."""
    return make_vehicle
