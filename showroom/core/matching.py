"""Fuzzy token matching for catalog search.

Scores a free-text query against a vehicle's model, make, trim and
description. Each field gets a score in 0.0-1.0 and the vehicle's score is
the weighted sum, so a clean model hit (0.5) outranks a make-only hit (0.3),
which outranks trim and description noise.

Token similarity:
- exact token match scores 1.0
- otherwise difflib's SequenceMatcher ratio, kept only when it is at least
  MIN_TOKEN_SIMILARITY and both tokens are long enough for a typo to be
  meaningful ("camery" ~ "camry" = 0.91, "camaro" ~ "camry" = 0.73)
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from difflib import SequenceMatcher

from .models import Vehicle

FIELD_WEIGHTS: dict[str, float] = {
    "model": 0.5,
    "make": 0.3,
    "trim": 0.2,
    "description": 0.1,
}

# A vehicle counts as a hit at or above this weighted score
MIN_VEHICLE_SCORE = 0.25

MIN_TOKEN_SIMILARITY = 0.8
MIN_FUZZY_TOKEN_LENGTH = 3

STOPWORDS: frozenset[str] = frozenset(
    {
        "a", "an", "and", "any", "are", "between", "can", "car", "cars", "compare",
        "compared", "difference", "do", "find", "for", "from", "get", "give", "have",
        "how", "i", "in", "is", "it", "like", "look", "looking", "me", "my", "new",
        "of", "on", "or", "please", "price", "see", "show", "some", "than", "that",
        "the", "to", "under", "over", "versus", "vs", "want", "what", "which",
        "with", "would", "you",
    }
)

_TOKEN_RE = re.compile(r"[a-z0-9]+(?:[-'][a-z0-9]+)*")


def tokenize(text: str, drop_stopwords: bool = False) -> list[str]:
    """Split text into lower-case tokens.

    Hyphenated names stay whole ("cr-v") and are also offered without the
    hyphen ("crv") so either spelling matches.
    """
    tokens: list[str] = []
    for token in _TOKEN_RE.findall(text.lower()):
        if drop_stopwords and token in STOPWORDS:
            continue
        tokens.append(token)
        if "-" in token:
            tokens.append(token.replace("-", ""))
    return tokens


@dataclass(frozen=True)
class QueryTokens:
    """Query-side tokens.

    Attributes:
        plain: Tokens as written (stopwords removed)
        expanded: plain plus joins of adjacent tokens, so "rav 4" meets
            "rav4" and "mazda 3" meets "mazda3"
    """

    plain: tuple[str, ...]
    expanded: tuple[str, ...]

    def __bool__(self) -> bool:
        return bool(self.plain)


def query_tokens(text: str) -> QueryTokens:
    """Tokenize a query for scoring against catalog fields."""
    tokens = tokenize(text, drop_stopwords=True)
    joined = [a + b for a, b in zip(tokens, tokens[1:])]
    return QueryTokens(plain=tuple(tokens), expanded=tuple(tokens + joined))


def token_similarity(a: str, b: str) -> float:
    """Similarity of two tokens in 0.0-1.0 (0.0 below the typo threshold)."""
    if a == b:
        return 1.0
    if len(a) < MIN_FUZZY_TOKEN_LENGTH or len(b) < MIN_FUZZY_TOKEN_LENGTH:
        return 0.0
    ratio = SequenceMatcher(None, a, b).ratio()
    return ratio if ratio >= MIN_TOKEN_SIMILARITY else 0.0


def best_token_match(query: tuple[str, ...] | list[str], candidates: list[str]) -> float:
    """Best similarity between any query token and any candidate token."""
    best = 0.0
    for q in query:
        for c in candidates:
            sim = token_similarity(q, c)
            if sim > best:
                best = sim
                if best == 1.0:
                    return best
    return best


def overlap_fraction(query: tuple[str, ...] | list[str], candidates: list[str]) -> float:
    """Share of query tokens found verbatim among candidate tokens."""
    if not query:
        return 0.0
    pool = set(candidates)
    return sum(1 for q in query if q in pool) / len(query)


@dataclass
class FieldScores:
    """Per-field similarity for one vehicle.

    Attributes:
        fields: Score per field name in FIELD_WEIGHTS
        total: Weighted sum of the field scores
    """

    fields: dict[str, float] = field(default_factory=dict)
    total: float = 0.0

    @property
    def model(self) -> float:
        return self.fields.get("model", 0.0)


def score_vehicle(query: QueryTokens, vehicle: Vehicle) -> FieldScores:
    """Score query tokens against one vehicle's weighted fields.

    Args:
        query: Output of query_tokens()
        vehicle: Catalog record

    Returns:
        FieldScores with per-field values and the weighted total
    """
    if not query:
        return FieldScores()

    scores = {
        "model": best_token_match(query.expanded, _field_tokens(vehicle.model)),
        "make": best_token_match(query.expanded, _field_tokens(vehicle.make)),
        "trim": best_token_match(query.expanded, _field_tokens(vehicle.trim)),
        "description": overlap_fraction(query.plain, tokenize(vehicle.description)),
    }
    total = sum(FIELD_WEIGHTS[name] * value for name, value in scores.items())
    return FieldScores(fields=scores, total=total)


def _field_tokens(value: str) -> list[str]:
    tokens = tokenize(value)
    # Multi-word model names also match their joined form ("grand highlander")
    if len(tokens) > 1:
        tokens.append("".join(t for t in tokens if "-" not in t))
    return tokens


__all__ = [
    "FIELD_WEIGHTS",
    "MIN_VEHICLE_SCORE",
    "FieldScores",
    "QueryTokens",
    "query_tokens",
    "score_vehicle",
    "token_similarity",
    "tokenize",
]
