"""Ordered intent rules for showroom.

Rules are checked top to bottom and the first match wins. Comparison comes
first because compare queries routinely carry finance words ("compare the
price of the Camry vs Accord") and a misrouted compare query produces a
useless single list. Anything no rule recognizes is a search.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass

from .taxonomy import IntentType

logger = logging.getLogger(__name__)

# (intent, pattern) in precedence order
INTENT_RULES: list[tuple[IntentType, str]] = [
    (
        IntentType.COMPARE,
        r"\b(?:vs|versus|compare|compared\s+(?:to|with)|comparison|comparing)\b",
    ),
    (
        IntentType.FINANCE,
        r"\b(?:financ\w*|payments?|lease|leasing|buy|buying|purchase|monthly"
        r"|afford|cost|costs|price|apr|loan|subscription|subscribe)\b",
    ),
    (
        IntentType.FILTER,
        r"\b(?:filter|only|just|with|has|need|must)\b",
    ),
]


@dataclass
class IntentMatch:
    """Outcome of intent classification.

    Attributes:
        intent: Winning intent
        pattern: Rule pattern that fired (None for the default)
        source: "pattern" when a rule fired, "fallback" otherwise
    """

    intent: IntentType
    pattern: str | None = None
    source: str = "pattern"

    @property
    def is_fallback(self) -> bool:
        return self.source == "fallback"


class IntentClassifier:
    """First-match-wins classifier over INTENT_RULES."""

    def __init__(self, rules: list[tuple[IntentType, str]] | None = None) -> None:
        self._compiled: list[tuple[IntentType, re.Pattern[str]]] = [
            (intent, re.compile(pattern, re.IGNORECASE))
            for intent, pattern in (rules if rules is not None else INTENT_RULES)
        ]

    def classify(self, text: str) -> IntentMatch:
        """Classify text into one of the four intents.

        Args:
            text: Raw query text

        Returns:
            IntentMatch; search with source "fallback" when nothing fired
        """
        for intent, pattern in self._compiled:
            if pattern.search(text):
                logger.debug(f"Intent {intent.value} matched rule {pattern.pattern!r}")
                return IntentMatch(intent=intent, pattern=pattern.pattern)
        return IntentMatch(intent=IntentType.SEARCH, source="fallback")


_classifier = IntentClassifier()


def classify_intent(text: str) -> IntentType:
    """Classify text with the default rule table."""
    return _classifier.classify(text).intent


__all__ = [
    "INTENT_RULES",
    "IntentClassifier",
    "IntentMatch",
    "classify_intent",
]
