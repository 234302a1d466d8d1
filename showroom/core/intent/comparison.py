"""Two-subject comparison parsing.

"blue Camry vs silver Accord" is split into two halves and each half is
resolved independently to a catalog vehicle plus an optional color.

Splitting uses separator keywords, so a vehicle whose own name contains one
("Versus Edition") would be split in the wrong place. That is a known
limitation of keyword splitting and is left as is.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass, field
from typing import Any

from ..models import Vehicle
from .entities import ColorSelection, ModelExtractor, ModelMatch, extract_color

logger = logging.getLogger(__name__)

# Comparison verb; it and any preamble before it ("can you compare the")
# are dropped before splitting
COMPARE_VERB = re.compile(
    r"\b(?:compare|comparing|comparison\s+(?:of|between))\b\s*(?:the\s+)?",
    re.IGNORECASE,
)

SEPARATORS = re.compile(
    r"\s*\b(?:versus|vs|compared\s+(?:to|with)|against|compare)\b\.?\s*",
    re.IGNORECASE,
)

# Only used after a leading "compare" verb consumed the real separator
FALLBACK_SEPARATORS = re.compile(r"\s*(?:\b(?:and|with|or)\b|&)\s*", re.IGNORECASE)


@dataclass
class ComparisonSubject:
    """One resolved side of a comparison.

    Attributes:
        text: The half of the query this subject came from
        vehicle: Resolved catalog vehicle
        color: Color named in this half, resolved against the vehicle
        match: How the vehicle was found
    """

    text: str
    vehicle: Vehicle
    color: ColorSelection | None = None
    match: ModelMatch | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {"vehicleId": self.vehicle.id, "text": self.text}
        if self.color is not None:
            out["color"] = self.color.to_dict()
        return out


@dataclass
class ParsedComparison:
    """Both sides of a comparison query.

    A side is None when its half named nothing in the catalog; the caller
    should then offer suggestions instead of comparing.
    """

    first: ComparisonSubject | None = None
    second: ComparisonSubject | None = None
    segments: list[str] = field(default_factory=list)

    @property
    def is_resolved(self) -> bool:
        return self.first is not None and self.second is not None

    @property
    def subjects(self) -> list[ComparisonSubject]:
        return [s for s in (self.first, self.second) if s is not None]

    def to_dict(self) -> dict[str, Any]:
        return {
            "vehicle1": self.first.to_dict() if self.first else None,
            "vehicle2": self.second.to_dict() if self.second else None,
        }


class ComparisonParser:
    """Split comparison queries and resolve each side."""

    def __init__(self, models: ModelExtractor) -> None:
        self.models = models

    def split(self, text: str) -> list[str]:
        """Split a comparison query into subject segments.

        Args:
            text: Full query text

        Returns:
            Non-empty stripped segments (one when no separator was found)
        """
        body = text.strip()
        had_verb = False
        verb = COMPARE_VERB.search(body)
        # "Camry compare Accord" uses the verb as a separator; only strip it
        # when nothing before it names a vehicle
        if verb is not None and self.models.match(body[: verb.start()]) is None:
            body = body[verb.end() :]
            had_verb = True

        segments = [s.strip(" ,.?!") for s in SEPARATORS.split(body)]
        if len(segments) == 1 and had_verb:
            segments = [s.strip(" ,.?!") for s in FALLBACK_SEPARATORS.split(body)]
        return [s for s in segments if s]

    def resolve(self, segment: str) -> ComparisonSubject | None:
        """Resolve one segment to a vehicle and optional color."""
        match = self.models.match(segment)
        if match is None:
            return None
        return ComparisonSubject(
            text=segment,
            vehicle=match.vehicle,
            color=extract_color(segment, match.vehicle),
            match=match,
        )

    def parse(self, text: str) -> ParsedComparison:
        """Parse a comparison query into two subjects.

        Args:
            text: "blue Camry vs silver Accord" and similar

        Returns:
            ParsedComparison; unresolved sides are None
        """
        segments = self.split(text)

        if len(segments) <= 2:
            padded = segments + [""] * (2 - len(segments))
            first, second = (self.resolve(s) if s else None for s in padded)
        else:
            resolved = [subject for subject in map(self.resolve, segments) if subject]
            logger.info(
                f"Comparison named {len(segments)} subjects; "
                f"comparing the first two resolvable of {len(resolved)}"
            )
            first, second = (resolved + [None, None])[:2]

        result = ParsedComparison(first=first, second=second, segments=segments)
        if not result.is_resolved:
            logger.debug(f"Unresolved comparison: {segments!r}")
        return result


__all__ = [
    "ComparisonParser",
    "ComparisonSubject",
    "ParsedComparison",
]
