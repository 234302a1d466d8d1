"""Catalog record models for showroom.

Vehicles are loaded once from the static catalog and never mutated, so every
model here is frozen. The catalog file uses camelCase keys (``dealerPrice``,
``fuelType``, ``imageUrl``); fields accept either spelling.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

PLACEHOLDER_COLOR_NAME = "Default"
PLACEHOLDER_COLOR_CODE = "DEF"
PLACEHOLDER_COLOR_HEX = "#1a1a1a"


class CatalogModel(BaseModel):
    """Base for catalog records: frozen, camelCase aliases, extra keys ignored."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class ColorVariant(CatalogModel):
    """A paint option offered for a vehicle.

    Attributes:
        name: Marketing name (e.g., "Blueprint", "Celestial Silver Metallic")
        code: Short manufacturer code (e.g., "8X8")
        hex: Display swatch color
        image_url: Image reference for this color (resolved elsewhere)
    """

    name: str
    code: str
    hex: str = "#000000"
    image_url: str = ""

    @classmethod
    def placeholder(cls) -> "ColorVariant":
        """Synthesized variant for vehicles that list no colors."""
        return cls(
            name=PLACEHOLDER_COLOR_NAME,
            code=PLACEHOLDER_COLOR_CODE,
            hex=PLACEHOLDER_COLOR_HEX,
        )

    @property
    def is_placeholder(self) -> bool:
        return self.code == PLACEHOLDER_COLOR_CODE and self.name == PLACEHOLDER_COLOR_NAME


class EngineSpec(CatalogModel):
    displacement: str = ""
    cylinders: int = 0
    type: str = ""
    horsepower: int = 0
    torque: int = 0


class MpgRating(CatalogModel):
    city: float = 0
    highway: float = 0
    combined: float = 0
    electric_range: float | None = None


class Dimensions(CatalogModel):
    length: float = 0
    width: float = 0
    height: float = 0
    wheelbase: float = 0


class Vehicle(CatalogModel):
    """Immutable catalog record for one make/model/trim/year.

    ``body_type`` is stored under the catalog key ``type`` (SUV, Sedan, Truck).
    """

    id: str
    vin: str = ""
    make: str
    model: str
    trim: str = ""
    year: int
    msrp: float = Field(ge=0)
    dealer_price: float | None = None
    body_type: str = Field(default="", alias="type")
    category: str = ""
    fuel_type: str = ""
    drivetrain: str = ""
    electrified: bool = False
    engine: EngineSpec = Field(default_factory=EngineSpec)
    transmission: str = ""
    seats: int = 5
    mpg: MpgRating = Field(default_factory=MpgRating)
    dimensions: Dimensions = Field(default_factory=Dimensions)
    colors: tuple[ColorVariant, ...] = ()
    features: tuple[str, ...] = ()
    description: str = ""

    @field_validator("colors", mode="after")
    @classmethod
    def validate_unique_colors(cls, v: tuple[ColorVariant, ...]) -> tuple[ColorVariant, ...]:
        """Color names and codes must be unique (case-insensitive) per vehicle."""
        names = [c.name.lower() for c in v]
        codes = [c.code.lower() for c in v]
        if len(set(names)) != len(names):
            raise ValueError("duplicate color name in vehicle colors")
        if len(set(codes)) != len(codes):
            raise ValueError("duplicate color code in vehicle colors")
        return v

    @property
    def display_name(self) -> str:
        """Get "Make Model Trim" for messages and suggestions."""
        return " ".join(part for part in (self.make, self.model, self.trim) if part)

    def color_options(self) -> tuple[ColorVariant, ...]:
        """Colors to offer, never empty: falls back to the placeholder variant."""
        return self.colors or (ColorVariant.placeholder(),)


__all__ = [
    "ColorVariant",
    "Dimensions",
    "EngineSpec",
    "MpgRating",
    "Vehicle",
]
