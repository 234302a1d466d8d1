"""Compare entry point: resolve two vehicles and line them up.

Subjects come from a free-text query first; explicit vehicle ids fill any
side the query left unresolved, and explicit colors override parsed ones.
When either side stays unresolved the result is a ComparisonFailure with
suggestions, never an exception.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from ..config import FinancingAssumptions, FinancingTerms
from .catalog import DEFAULT_SEARCH_LIMIT, CatalogIndex
from .financing import FinancingParams, ScenarioSet, calculate_all_scenarios
from .intent import QueryParser
from .models import ColorVariant, Vehicle

logger = logging.getLogger(__name__)

# Vehicles closer than this in MSRP count as the same price range
SIMILAR_PRICE_DELTA = 5000


@dataclass
class ResolvedVehicle:
    """A vehicle with the paint option to show."""

    vehicle: Vehicle
    color: ColorVariant

    def to_dict(self) -> dict[str, Any]:
        out = self.vehicle.model_dump(by_alias=True)
        out["selectedColor"] = self.color.model_dump(by_alias=True)
        return out


@dataclass
class VehicleComparison:
    """Successful comparison.

    Attributes:
        first: Left-hand vehicle
        second: Right-hand vehicle
        differences: second minus first for price, mpg, horsepower
        similarities: Human-readable shared traits
        financing: ScenarioSet per side ("vehicle1", "vehicle2")
    """

    first: ResolvedVehicle
    second: ResolvedVehicle
    differences: dict[str, float] = field(default_factory=dict)
    similarities: list[str] = field(default_factory=list)
    financing: dict[str, ScenarioSet] = field(default_factory=dict)

    def to_dict(self) -> dict[str, Any]:
        return {
            "vehicle1": self.first.to_dict(),
            "vehicle2": self.second.to_dict(),
            "differences": dict(self.differences),
            "similarities": list(self.similarities),
            "financing": {side: s.to_dict() for side, s in self.financing.items()},
        }


@dataclass
class ComparisonFailure:
    """One or both sides could not be resolved.

    Attributes:
        reason: Message for the shopper
        missing: Which sides are missing ("vehicle1", "vehicle2")
        suggestions: Up to five vehicles to offer instead
    """

    reason: str
    missing: list[str] = field(default_factory=list)
    suggestions: list[Vehicle] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.reason,
            "missing": list(self.missing),
            "suggestions": [{"id": v.id, "name": v.display_name} for v in self.suggestions],
        }


def _params_for(vehicle: Vehicle, terms: FinancingTerms) -> FinancingParams:
    return FinancingParams(
        price=vehicle.msrp,
        down_payment=terms.down_payment,
        apr=terms.apr,
        term_months=terms.term_months,
        trade_in_value=terms.trade_in_value,
        tax_rate=terms.tax_rate,
    )


def _similarities(v1: Vehicle, v2: Vehicle) -> list[str]:
    found: list[str] = []
    if v1.body_type == v2.body_type:
        found.append("Same vehicle type")
    if v1.drivetrain == v2.drivetrain:
        found.append("Same drivetrain")
    if v1.fuel_type == v2.fuel_type:
        found.append("Same fuel type")
    if abs(v1.msrp - v2.msrp) < SIMILAR_PRICE_DELTA:
        found.append("Similar price range")
    return found


def compare_vehicles(
    catalog: CatalogIndex,
    parser: QueryParser,
    query: str | None = None,
    vehicle1_id: str | None = None,
    vehicle2_id: str | None = None,
    color1: str | None = None,
    color2: str | None = None,
    terms: FinancingTerms | None = None,
    assumptions: FinancingAssumptions | None = None,
    suggestion_limit: int = DEFAULT_SEARCH_LIMIT,
) -> VehicleComparison | ComparisonFailure:
    """Resolve and compare two vehicles.

    Args:
        catalog: Catalog index
        parser: Query parser built over the same catalog
        query: Free-text comparison ("blue Camry vs silver Accord")
        vehicle1_id: Explicit id for the first side
        vehicle2_id: Explicit id for the second side
        color1: Explicit color name or code for the first side
        color2: Explicit color name or code for the second side
        terms: Loan terms for the financing figures (defaults apply if None)
        assumptions: Lease / subscription business constants
        suggestion_limit: Maximum suggestions on failure

    Returns:
        VehicleComparison, or ComparisonFailure when a side is unresolved

    Raises:
        FinancingValidationError: If the terms are invalid for a vehicle
    """
    v1: Vehicle | None = None
    v2: Vehicle | None = None
    parsed_color1: str | None = None
    parsed_color2: str | None = None
    segments: list[str] = []

    if query and query.strip():
        parsed = parser.comparisons.parse(query)
        segments = parsed.segments
        if parsed.first is not None:
            v1 = parsed.first.vehicle
            parsed_color1 = parsed.first.color.name if parsed.first.color else None
        if parsed.second is not None:
            v2 = parsed.second.vehicle
            parsed_color2 = parsed.second.color.name if parsed.second.color else None

    if v1 is None and vehicle1_id:
        v1 = catalog.find_by_id(vehicle1_id)
    if v2 is None and vehicle2_id:
        v2 = catalog.find_by_id(vehicle2_id)

    if v1 is None or v2 is None:
        missing = [side for side, v in (("vehicle1", v1), ("vehicle2", v2)) if v is None]
        hint = " ".join(segments) or query
        logger.warning(f"Could not resolve {missing} for comparison {query!r}")
        return ComparisonFailure(
            reason="Could not find both vehicles to compare",
            missing=missing,
            suggestions=catalog.suggestions(hint, limit=suggestion_limit),
        )

    terms = terms or FinancingTerms()
    first = ResolvedVehicle(v1, catalog.resolve_color(v1, color1 or parsed_color1))
    second = ResolvedVehicle(v2, catalog.resolve_color(v2, color2 or parsed_color2))

    comparison = VehicleComparison(
        first=first,
        second=second,
        differences={
            "price": v2.msrp - v1.msrp,
            "mpg": v2.mpg.combined - v1.mpg.combined,
            "horsepower": v2.engine.horsepower - v1.engine.horsepower,
        },
        similarities=_similarities(v1, v2),
        financing={
            "vehicle1": calculate_all_scenarios(_params_for(v1, terms), assumptions),
            "vehicle2": calculate_all_scenarios(_params_for(v2, terms), assumptions),
        },
    )
    logger.debug(f"Compared {v1.id} with {v2.id}: {comparison.differences}")
    return comparison


__all__ = [
    "ComparisonFailure",
    "ResolvedVehicle",
    "VehicleComparison",
    "compare_vehicles",
]
