"""Entity extraction for showroom's NLU layer.

Every extractor here is a pure function of its input text (plus, for model
matching, the read-only catalog). Matching tables are module-level ordered
data so the precedence between rules is reviewable in one place:

- extract_color: color word -> canonical color (+ vehicle variant)
- extract_price_range: qualitative keywords, then "under/over $X", then ranges
- extract_filters: body type, category, drivetrain, fuel, MPG, make, color, price
- ModelExtractor: alias table first, then fuzzy catalog search
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field, replace
from typing import TYPE_CHECKING, Any

from ..colors import COLOR_SYNONYMS, color_code, find_color_in_text, match_variant
from ..filters import FilterSet, PriceRange
from ..models import ColorVariant, Vehicle

if TYPE_CHECKING:
    from ..catalog import CatalogIndex

logger = logging.getLogger(__name__)


# =============================================================================
# Color
# =============================================================================


@dataclass(frozen=True)
class ColorSelection:
    """A color named in a query.

    Attributes:
        canonical: Canonical color ("blue")
        synonym: Word that matched in the query ("blueprint")
        variant: Vehicle paint option, when a vehicle was supplied and offers it
    """

    canonical: str
    synonym: str
    variant: ColorVariant | None = None

    @property
    def name(self) -> str:
        return self.variant.name if self.variant else self.canonical

    @property
    def code(self) -> str:
        return self.variant.code if self.variant else color_code(self.canonical)

    def to_dict(self) -> dict[str, str]:
        if self.variant is not None:
            return {
                "name": self.variant.name,
                "code": self.variant.code,
                "hex": self.variant.hex,
                "imageUrl": self.variant.image_url,
            }
        return {"name": self.canonical, "code": self.code}


def _variant_for(vehicle: Vehicle, canonical: str, synonym: str) -> ColorVariant | None:
    # The exact word the shopper used beats the rest of the synonym group
    return match_variant(vehicle.colors, (synonym, *COLOR_SYNONYMS[canonical]))


def extract_color(text: str, vehicle: Vehicle | None = None) -> ColorSelection | None:
    """Extract the first canonical color mentioned in text.

    Args:
        text: Query text
        vehicle: Optional vehicle to resolve the color against

    Returns:
        ColorSelection (with a variant when the vehicle offers one), or None
    """
    found = find_color_in_text(text)
    if found is None:
        return None
    canonical, synonym = found
    variant = _variant_for(vehicle, canonical, synonym) if vehicle is not None else None
    return ColorSelection(canonical=canonical, synonym=synonym, variant=variant)


# =============================================================================
# Price
# =============================================================================


def _amount(tag: str) -> str:
    return (
        rf"(?P<{tag}_cur>\$)?\s*"
        rf"(?P<{tag}_num>\d{{1,3}}(?:,\d{{3}})+|\d+(?:\.\d+)?)"
        rf"(?:\s*(?P<{tag}_suf>k|thousand))?\b"
    )


# (name, pattern, bound, fixed value) in application order. Later rules
# override earlier ones; a None value means "read the number from the match".
PRICE_RULES: list[tuple[str, str, str, float | None]] = [
    ("affordable", r"\b(?:affordable|economical)\b", "max", 30000),
    ("budget", r"\b(?:budget|cheap|cheaper|cheapest|inexpensive)\b", "max", 25000),
    ("premium", r"\b(?:premium|expensive|pricey)\b", "min", 40000),
    ("luxury", r"\b(?:luxury|high-end|upscale)\b", "min", 50000),
    (
        "under",
        r"\b(?:under|below|less\s+than|max(?:imum)?|up\s+to|at\s+most|no\s+more\s+than)\s+"
        + _amount("a"),
        "max",
        None,
    ),
    (
        "over",
        r"\b(?:over|above|more\s+than|at\s+least|min(?:imum)?|starting\s+at)\s+" + _amount("a"),
        "min",
        None,
    ),
    (
        "range",
        r"(?<![\w.])" + _amount("a") + r"\s*(?:-|–|—|to)\s*" + _amount("b"),
        "range",
        None,
    ),
    ("between", r"\bbetween\s+" + _amount("a") + r"\s+and\s+" + _amount("b"), "range", None),
]

_PRICE_COMPILED: list[tuple[str, re.Pattern[str], str, float | None]] = [
    (name, re.compile(pattern, re.IGNORECASE), bound, value)
    for name, pattern, bound, value in PRICE_RULES
]

_MPG_AFTER = re.compile(r"\s*\+?\s*mpg\b", re.IGNORECASE)

# Bare model years ("2022-2024 camry") are not prices
_MODEL_YEAR = re.compile(r"(?:19|20)\d\d")


def _read_amount(match: re.Match[str], tag: str) -> tuple[float, bool]:
    """Return (dollars, has_money_evidence) for one amount group."""
    raw = match.group(f"{tag}_num")
    number = float(raw.replace(",", ""))
    currency = match.group(f"{tag}_cur")
    suffix = match.group(f"{tag}_suf")
    if suffix:
        number *= 1000
    if currency or suffix:
        return number, True
    return number, number >= 1000 and not _MODEL_YEAR.fullmatch(raw)


def _numeric_bounds(match: re.Match[str], bound: str, text: str) -> dict[str, float] | None:
    # "over 30 mpg" is a fuel-economy floor, not a price
    if _MPG_AFTER.match(text, match.end()):
        return None

    if bound != "range":
        value, evidence = _read_amount(match, "a")
        return {bound: value} if evidence else None

    low, low_evidence = _read_amount(match, "a")
    high, high_evidence = _read_amount(match, "b")
    if not (low_evidence or high_evidence):
        return None
    # "30-40k": the suffix on the upper bound applies to both
    if match.group("b_suf") and not match.group("a_suf") and low < 1000:
        low *= 1000
    if low > high:
        low, high = high, low
    return {"min": low, "max": high}


def extract_price_range(text: str) -> PriceRange:
    """Extract MSRP bounds from text.

    Rules apply in PRICE_RULES order, so explicit numbers override the
    qualitative keywords and an explicit range overrides both. A keyword
    bound that contradicts a numeric one is dropped.

    Examples:
        "under $30k"        -> max 30000
        "$25,000-$35,000"   -> min 25000, max 35000
        "affordable"        -> max 30000
    """
    lowered = text.lower()
    bounds: dict[str, tuple[float, str]] = {}

    for name, pattern, bound, value in _PRICE_COMPILED:
        if value is not None:
            if pattern.search(lowered):
                bounds[bound] = (float(value), "keyword")
            continue

        for match in pattern.finditer(lowered):
            found = _numeric_bounds(match, bound, lowered)
            if found is None:
                continue
            for side, amount in found.items():
                bounds[side] = (amount, name)
            break

    low = bounds.get("min")
    high = bounds.get("max")
    if low and high and low[0] > high[0]:
        if low[1] == "keyword":
            bounds.pop("min")
        elif high[1] == "keyword":
            bounds.pop("max")

    return PriceRange(
        min=bounds["min"][0] if "min" in bounds else None,
        max=bounds["max"][0] if "max" in bounds else None,
    )


# =============================================================================
# Filters
# =============================================================================

BODY_TYPE_RULES: list[tuple[str, str]] = [
    (r"\b(?:suvs?|sport\s+utility|crossovers?)\b", "SUV"),
    (r"\bsedans?\b", "Sedan"),
    (r"\b(?:trucks?|pickups?)\b", "Truck"),
]

CATEGORY_RULES: list[tuple[str, str]] = [
    (r"\bcompact\b", "Compact"),
    (r"\bmid-?size\b", "Midsize"),
    (r"\bfull[-\s]?size\b", "Full-Size"),
]

# Whole-token matches only, so "awd" never fires inside another word
DRIVETRAIN_RULES: list[tuple[str, str]] = [
    (r"\b(?:awd|all[-\s]wheel(?:\s+drive)?)\b", "AWD"),
    (r"\b(?:4wd|4x4|four[-\s]wheel(?:\s+drive)?|4[-\s]wheel(?:\s+drive)?|off[-\s]?road)\b", "4WD"),
    (r"\b(?:fwd|front[-\s]wheel(?:\s+drive)?)\b", "FWD"),
    (r"\b(?:rwd|rear[-\s]wheel(?:\s+drive)?)\b", "RWD"),
]

# (pattern, fuel type, electrified); plug-in is checked before plain hybrid
FUEL_RULES: list[tuple[str, str, bool]] = [
    (r"\b(?:phev|plug-?in(?:\s+hybrids?)?)\b", "Plug-in Hybrid", True),
    (r"\bhybrids?\b", "Hybrid", True),
    (r"\b(?:electric|evs?|bev|battery)\b", "Electric", True),
    (r"\b(?:gas(?!\s+mileage)|gasoline|petrol)\b", "Gasoline", False),
]

DEFAULT_EFFICIENT_MPG = 35
MPG_PATTERN = r"\b(\d+)\s*\+?\s*mpg\b"
EFFICIENT_PATTERN = r"\b(?:fuel[-\s]efficient|efficient|good\s+gas\s+mileage|fuel\s+economy)\b"

# Canonical make -> aliases (misspellings and short forms)
MAKE_ALIASES: dict[str, tuple[str, ...]] = {
    "Toyota": ("toyota", "toyo", "toy"),
    "Honda": ("honda", "hond"),
    "Mazda": ("mazda", "maz"),
    "Ford": ("ford", "frd"),
    "Nissan": ("nissan", "nisan"),
    "Chevrolet": ("chevrolet", "chevy"),
    "Subaru": ("subaru", "subie"),
    "Hyundai": ("hyundai", "hyundia"),
    "Kia": ("kia",),
    "Lexus": ("lexus",),
    "Volkswagen": ("volkswagen", "volkswagon", "vw"),
}


def _compile_table(rules: list[tuple[str, Any]]) -> list[tuple[re.Pattern[str], Any]]:
    return [(re.compile(pattern, re.IGNORECASE), value) for pattern, value in rules]


_BODY_TYPES = _compile_table(BODY_TYPE_RULES)
_CATEGORIES = _compile_table(CATEGORY_RULES)
_DRIVETRAINS = _compile_table(DRIVETRAIN_RULES)
_FUELS = [(re.compile(p, re.IGNORECASE), fuel, electrified) for p, fuel, electrified in FUEL_RULES]
_MPG = re.compile(MPG_PATTERN, re.IGNORECASE)
_EFFICIENT = re.compile(EFFICIENT_PATTERN, re.IGNORECASE)

# Longest alias first so "toyota" is consumed before "toy"
_MAKES: list[tuple[re.Pattern[str], str]] = [
    (re.compile(rf"\b{re.escape(alias)}\b", re.IGNORECASE), make)
    for alias, make in sorted(
        ((alias, make) for make, aliases in MAKE_ALIASES.items() for alias in aliases),
        key=lambda pair: len(pair[0]),
        reverse=True,
    )
]


def _first(table: list[tuple[re.Pattern[str], str]], text: str) -> str | None:
    for pattern, value in table:
        if pattern.search(text):
            return value
    return None


def extract_make(text: str) -> str | None:
    """Canonical make named in text, if any."""
    return _first(_MAKES, text)


def extract_min_mpg(text: str) -> float | None:
    """Minimum combined MPG: explicit "N mpg", else the efficiency default."""
    match = _MPG.search(text)
    if match:
        return float(match.group(1))
    if _EFFICIENT.search(text):
        return float(DEFAULT_EFFICIENT_MPG)
    return None


def extract_filters(text: str) -> FilterSet:
    """Extract catalog constraints from free text.

    Model names are not handled here; see ModelExtractor, which needs the
    catalog.

    Args:
        text: Query text

    Returns:
        FilterSet with every detected constraint (empty if none)
    """
    fuel_type: str | None = None
    electrified: bool | None = None
    for pattern, fuel, is_electrified in _FUELS:
        if pattern.search(text):
            fuel_type, electrified = fuel, is_electrified
            break

    color = extract_color(text)
    price_range = extract_price_range(text)

    return FilterSet(
        body_type=_first(_BODY_TYPES, text),
        category=_first(_CATEGORIES, text),
        drivetrain=_first(_DRIVETRAINS, text),
        fuel_type=fuel_type,
        electrified=electrified,
        make=extract_make(text),
        price_range=None if price_range.is_empty() else price_range,
        min_mpg=extract_min_mpg(text),
        color=color.canonical if color else None,
    )


# =============================================================================
# Models
# =============================================================================

# Catalog model (lower-case, no spaces) -> common misspellings and short forms
MODEL_ALIASES: dict[str, tuple[str, ...]] = {
    "camry": ("camery", "camary"),
    "rav4": ("rav 4", "rav-4", "rav"),
    "corolla": ("corola", "corala"),
    "accord": ("acord",),
    "mazda3": ("mazda 3", "mazda-3", "m3"),
    "prius": ("prious",),
    "highlander": ("highland",),
    "4runner": ("4 runner", "four runner"),
    "tacoma": ("tocoma",),
    "sequoia": ("sequoya",),
}

MAX_MODEL_CANDIDATES = 5


def _model_key(model: str) -> str:
    return re.sub(r"[\s-]+", "", model.lower())


@dataclass
class ModelMatch:
    """A vehicle resolved from query text.

    Attributes:
        vehicle: Best matching vehicle
        score: Match strength (1.0 for alias hits)
        source: "alias" or "fuzzy"
        vehicle_ids: Ids of all plausible vehicles, best first
    """

    vehicle: Vehicle
    score: float
    source: str
    vehicle_ids: list[str] = field(default_factory=list)


class ModelExtractor:
    """Resolve model mentions against a catalog.

    Alias hits take precedence over raw fuzzy scores; fuzzy hits only count
    when the model field itself matched (a make-only hit is not a model).
    """

    def __init__(self, catalog: "CatalogIndex") -> None:
        self.catalog = catalog
        self._aliases: list[tuple[re.Pattern[str], str]] = [
            (re.compile(rf"(?<![a-z0-9]){re.escape(alias)}(?![a-z0-9])", re.IGNORECASE), key)
            for alias, key in sorted(
                ((alias, key) for key, aliases in MODEL_ALIASES.items() for alias in aliases),
                key=lambda pair: len(pair[0]),
                reverse=True,
            )
        ]

    def match(self, text: str) -> ModelMatch | None:
        """Find the vehicle text refers to.

        Args:
            text: Query text or one half of a comparison

        Returns:
            ModelMatch, or None when no model is recognizable
        """
        if not text.strip():
            return None

        hits = self.catalog.score(text, limit=None)

        for pattern, key in self._aliases:
            if not pattern.search(text):
                continue
            same_model = [v for v in self.catalog if _model_key(v.model) == key]
            if not same_model:
                logger.debug(f"Alias for '{key}' matched but catalog has no such model")
                continue
            # Prefer the trim the rest of the text points at
            ranked = [h.vehicle for h in hits if _model_key(h.vehicle.model) == key]
            ordered = ranked + [v for v in same_model if v not in ranked]
            return ModelMatch(
                vehicle=ordered[0],
                score=1.0,
                source="alias",
                vehicle_ids=[v.id for v in ordered[:MAX_MODEL_CANDIDATES]],
            )

        candidates = [h for h in hits if h.model_score > 0]
        if not candidates:
            return None
        best = candidates[0]
        return ModelMatch(
            vehicle=best.vehicle,
            score=best.score,
            source="fuzzy",
            vehicle_ids=[h.vehicle.id for h in candidates[:MAX_MODEL_CANDIDATES]],
        )


# =============================================================================
# Bundle
# =============================================================================


@dataclass
class ExtractedEntities:
    """Everything the extractors found in one query.

    Attributes:
        filters: Constraints, with make/model taken from the model match
        model: Resolved vehicle, if any
        color: Color named in the query (resolved against model.vehicle)
        price_range: MSRP bounds (possibly empty)
    """

    filters: FilterSet = field(default_factory=FilterSet)
    model: ModelMatch | None = None
    color: ColorSelection | None = None
    price_range: PriceRange = field(default_factory=PriceRange)

    @property
    def vehicle_ids(self) -> list[str]:
        return list(self.model.vehicle_ids) if self.model else []

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary, excluding empty values."""
        out: dict[str, Any] = {}
        if not self.filters.is_empty():
            out["filters"] = self.filters.to_dict()
        if self.model is not None:
            out["vehicleIds"] = self.vehicle_ids
        if self.color is not None:
            out["color"] = self.color.to_dict()
        if not self.price_range.is_empty():
            out["priceRange"] = self.price_range.to_dict()
        return out


class EntityExtractor:
    """Run every extractor over one query."""

    def __init__(self, catalog: "CatalogIndex") -> None:
        self.models = ModelExtractor(catalog)

    def extract(self, text: str) -> ExtractedEntities:
        """Extract filters, model, color and price range from text."""
        filters = extract_filters(text)
        model = self.models.match(text)
        if model is not None:
            # A recognized model pins its make too
            filters = replace(filters, make=model.vehicle.make, model=model.vehicle.model)

        return ExtractedEntities(
            filters=filters,
            model=model,
            color=extract_color(text, model.vehicle if model else None),
            price_range=filters.price_range or PriceRange(),
        )


__all__ = [
    "BODY_TYPE_RULES",
    "CATEGORY_RULES",
    "DEFAULT_EFFICIENT_MPG",
    "DRIVETRAIN_RULES",
    "FUEL_RULES",
    "MAKE_ALIASES",
    "MODEL_ALIASES",
    "PRICE_RULES",
    "ColorSelection",
    "EntityExtractor",
    "ExtractedEntities",
    "ModelExtractor",
    "ModelMatch",
    "extract_color",
    "extract_filters",
    "extract_make",
    "extract_min_mpg",
    "extract_price_range",
]
