"""Structured search filters produced by the NLU layer.

A field left as None means "unconstrained". An empty FilterSet matches the
whole catalog; it never matches nothing.
"""

from __future__ import annotations

from dataclasses import dataclass, fields
from typing import Any

from .colors import color_terms
from .models import Vehicle


@dataclass(frozen=True)
class PriceRange:
    """Inclusive MSRP bounds; either side may be open."""

    min: float | None = None
    max: float | None = None

    def is_empty(self) -> bool:
        return self.min is None and self.max is None

    def contains(self, price: float) -> bool:
        if self.min is not None and price < self.min:
            return False
        if self.max is not None and price > self.max:
            return False
        return True

    def to_dict(self) -> dict[str, float]:
        return {k: v for k, v in (("min", self.min), ("max", self.max)) if v is not None}


# FilterSet field name -> boundary (camelCase) key
_BOUNDARY_KEYS: dict[str, str] = {
    "body_type": "type",
    "category": "category",
    "drivetrain": "drivetrain",
    "fuel_type": "fuelType",
    "electrified": "electrified",
    "make": "make",
    "model": "model",
    "price_range": "priceRange",
    "min_mpg": "minMpg",
    "color": "color",
}


@dataclass(frozen=True)
class FilterSet:
    """Optional constraints on catalog vehicles.

    Attributes:
        body_type: SUV, Sedan, Truck
        category: Size class (Compact, Midsize, Full-Size)
        drivetrain: FWD, RWD, AWD, 4WD
        fuel_type: Gasoline, Hybrid, Plug-in Hybrid, Electric
        electrified: True for any hybrid or electric powertrain
        make: Manufacturer (canonical capitalization)
        model: Model name as it appears in the catalog
        price_range: MSRP bounds
        min_mpg: Minimum combined MPG
        color: Canonical color name ("blue")
    """

    body_type: str | None = None
    category: str | None = None
    drivetrain: str | None = None
    fuel_type: str | None = None
    electrified: bool | None = None
    make: str | None = None
    model: str | None = None
    price_range: PriceRange | None = None
    min_mpg: float | None = None
    color: str | None = None

    def is_empty(self) -> bool:
        """True when no field constrains the catalog."""
        return not self.to_dict()

    def matches(self, vehicle: Vehicle) -> bool:
        """Check a vehicle against every set field."""
        if not _same(self.body_type, vehicle.body_type):
            return False
        if not _same(self.category, vehicle.category):
            return False
        if not _same(self.drivetrain, vehicle.drivetrain):
            return False
        if not _same(self.fuel_type, vehicle.fuel_type):
            return False
        if self.electrified is not None and vehicle.electrified != self.electrified:
            return False
        if not _same(self.make, vehicle.make):
            return False
        if not _same(self.model, vehicle.model):
            return False
        if self.price_range is not None and not self.price_range.contains(vehicle.msrp):
            return False
        if self.min_mpg is not None and vehicle.mpg.combined < self.min_mpg:
            return False
        if self.color is not None and not _offers_color(vehicle, self.color):
            return False
        return True

    def to_dict(self) -> dict[str, Any]:
        """Convert to boundary keys, excluding unset and empty values."""
        out: dict[str, Any] = {}
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None:
                continue
            if isinstance(value, PriceRange):
                if value.is_empty():
                    continue
                value = value.to_dict()
            out[_BOUNDARY_KEYS[f.name]] = value
        return out


def _same(wanted: str | None, actual: str) -> bool:
    return wanted is None or wanted.lower() == (actual or "").lower()


def _offers_color(vehicle: Vehicle, color: str) -> bool:
    terms = color_terms(color)
    for variant in vehicle.colors:
        name = variant.name.lower()
        if any(term in name for term in terms) or variant.code.lower() == color.lower():
            return True
    return False


__all__ = ["FilterSet", "PriceRange"]
