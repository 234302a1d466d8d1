"""Color vocabulary shared by the extractors, filters and catalog.

One table maps each canonical color to the words shoppers and manufacturers
use for it, marketing names included ("Blueprint" is a Toyota blue). Table
order is precedence: when a phrase could belong to two colors, the earlier
canonical color wins.
"""

from __future__ import annotations

import re
from typing import TYPE_CHECKING, Iterable, Sequence

if TYPE_CHECKING:
    from .models import ColorVariant

COLOR_SYNONYMS: dict[str, tuple[str, ...]] = {
    "white": ("white", "pearl", "ice", "snow", "wht", "wind chill"),
    "black": ("black", "midnight", "jet", "onyx", "blk", "obsidian"),
    "red": ("red", "ruby", "flare", "supersonic", "soul red", "radiant", "crimson", "scarlet"),
    "blue": ("blue", "blueprint", "still night", "navy", "azure", "cobalt"),
    "silver": ("silver", "celestial", "slv", "chrome"),
    "gray": ("gray", "grey", "lunar", "meteoroid", "polymetal", "charcoal", "graphite"),
}

# Whole-word patterns for free text, longest synonym first within each color
# so "soul red" is consumed before "red".
_COLOR_PATTERNS: list[tuple[str, str, re.Pattern[str]]] = [
    (canonical, synonym, re.compile(rf"\b{re.escape(synonym)}\b", re.IGNORECASE))
    for canonical, synonyms in COLOR_SYNONYMS.items()
    for synonym in sorted(synonyms, key=len, reverse=True)
]


def find_color_in_text(text: str) -> tuple[str, str] | None:
    """Find the first canonical color mentioned in free text.

    Args:
        text: Query text (any case)

    Returns:
        (canonical color, synonym that matched), or None
    """
    for canonical, synonym, pattern in _COLOR_PATTERNS:
        if pattern.search(text):
            return canonical, synonym
    return None


def canonical_color(name: str) -> str | None:
    """Map a color word ("grey", "navy") to its canonical name, if known."""
    key = name.strip().lower()
    if key in COLOR_SYNONYMS:
        return key
    for canonical, synonyms in COLOR_SYNONYMS.items():
        if key in synonyms:
            return canonical
    return None


def color_terms(name: str) -> tuple[str, ...]:
    """Terms that identify a color inside a variant name.

    A canonical name expands to all of its synonyms; anything else is used
    as-is.
    """
    key = name.strip().lower()
    canonical = canonical_color(key)
    if canonical is None:
        return (key,)
    return COLOR_SYNONYMS[canonical]


def match_variant(
    variants: Sequence[ColorVariant], terms: Iterable[str]
) -> ColorVariant | None:
    """First variant whose name contains a term, trying terms in order.

    Every variant is checked against a term before the next term is tried,
    so an exact name ("white" in "Super White") beats a looser synonym
    ("pearl" in "Ruby Flare Pearl").
    """
    for term in terms:
        for variant in variants:
            if term in variant.name.lower():
                return variant
    return None


def color_code(canonical: str) -> str:
    """Short code for a bare canonical color ("blue" -> "BLU")."""
    return canonical.upper()[:3]


__all__ = [
    "COLOR_SYNONYMS",
    "canonical_color",
    "color_code",
    "color_terms",
    "find_color_in_text",
    "match_variant",
]
