"""Intent taxonomy and result types for showroom's NLU layer.

This module defines the four shopping intents, the advisory confidence
weights, and the NLUResult structure handed to the search / compare / chat
handlers.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import TYPE_CHECKING, Any

from ..filters import FilterSet

if TYPE_CHECKING:
    from .comparison import ParsedComparison
    from .entities import ColorSelection


class IntentType(str, Enum):
    """Core intent types for shopping queries."""

    SEARCH = "search"  # Browse the catalog
    COMPARE = "compare"  # Two vehicles side by side
    FILTER = "filter"  # Narrow a result list
    FINANCE = "finance"  # Payments, leases, affordability


class ConfidenceWeights:
    """Additive weights for the advisory confidence score.

    The score starts at BASE and gains a fixed amount per resolved entity,
    capped at MAX. It is logged for tuning and never used to reject a parse.
    """

    BASE = 0.5
    VEHICLE = 0.3  # At least one vehicle resolved
    COLOR = 0.1  # A color resolved
    PRICE = 0.1  # A price bound resolved
    MAX = 1.0


def score_confidence(has_vehicle: bool, has_color: bool, has_price: bool) -> float:
    """Combine entity evidence into a confidence value in [0, 1]."""
    score = ConfidenceWeights.BASE
    if has_vehicle:
        score += ConfidenceWeights.VEHICLE
    if has_color:
        score += ConfidenceWeights.COLOR
    if has_price:
        score += ConfidenceWeights.PRICE
    return round(min(ConfidenceWeights.MAX, score), 2)


@dataclass(frozen=True)
class ChatMessage:
    """One turn of the caller-supplied recent history."""

    role: str  # "user" or "assistant"
    text: str

    def to_message(self) -> dict[str, str]:
        return {"role": self.role, "content": self.text}


@dataclass
class NLUResult:
    """Structured reading of one shopping query.

    Attributes:
        intent: search, compare, filter or finance
        filters: Extracted constraints (empty means "whole catalog")
        vehicle_ids: Catalog ids the query mentioned, best first
        color: Color named in the query, if any
        comparison: Two-subject payload, only for compare intents
        confidence: Advisory score in [0, 1]
        source: Classification source (pattern, fallback, llm)
        matched_patterns: Rule patterns that fired (for debugging)
        text: The (possibly truncated) query text
    """

    intent: IntentType
    filters: FilterSet = field(default_factory=FilterSet)
    vehicle_ids: list[str] = field(default_factory=list)
    color: ColorSelection | None = None
    comparison: ParsedComparison | None = None
    confidence: float = ConfidenceWeights.BASE
    source: str = "pattern"
    matched_patterns: list[str] = field(default_factory=list)
    text: str = ""

    @classmethod
    def empty(cls) -> "NLUResult":
        """Result for blank input: search everything."""
        return cls(intent=IntentType.SEARCH, source="fallback")

    def to_dict(self) -> dict[str, Any]:
        """Boundary representation (camelCase keys, None-free)."""
        out: dict[str, Any] = {
            "intent": self.intent.value,
            "filters": self.filters.to_dict(),
            "vehicleIds": list(self.vehicle_ids),
            "confidence": self.confidence,
        }
        if self.color is not None:
            out["color"] = self.color.to_dict()
        if self.comparison is not None:
            out["comparison"] = self.comparison.to_dict()
        return out


__all__ = [
    "ChatMessage",
    "ConfidenceWeights",
    "IntentType",
    "NLUResult",
    "score_confidence",
]
