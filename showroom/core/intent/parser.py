"""Query parsing orchestrator for showroom.

Turns one free-text shopping query into an NLUResult:
1. Intent rules (~1ms) - ordered regex table, compare first
2. Entity extraction (~1ms) - filters, model, color, price range
3. Comparison parsing - only for compare intents
4. LLM enrichment (optional) - only when no rule fired and nothing was
   extracted; any failure falls back to the deterministic result

Steps 1-3 are pure and synchronous; parse_sync() runs them alone.
"""

from __future__ import annotations

import json
import logging
import re
from dataclasses import replace
from typing import TYPE_CHECKING, Sequence

from ..backends.base import complete
from .comparison import ComparisonParser
from .entities import EntityExtractor
from .patterns import IntentClassifier
from .taxonomy import ChatMessage, IntentType, NLUResult, score_confidence

if TYPE_CHECKING:
    from ..backends import CompletionBackend
    from ..catalog import CatalogIndex

logger = logging.getLogger(__name__)

# Security: Maximum input length to bound regex and fuzzy-matching work
MAX_INPUT_LENGTH = 10_000

DEFAULT_HISTORY_TURNS = 10


LLM_INTENT_PROMPT = """\
You classify messages sent to a car dealership shopping assistant. Output JSON.

INTENT TYPES:
- search: browsing or looking for vehicles
- compare: putting two vehicles side by side
- filter: narrowing down a list of vehicles
- finance: payments, leases, subscriptions, affordability

RECENT CONVERSATION:
{history}

USER MESSAGE: "{message}"

Output ONLY valid JSON:
{{
  "intent": "search|compare|filter|finance",
  "confidence": 0.0-1.0,
  "reasoning": "brief explanation"
}}"""


class QueryParser:
    """Main NLU orchestrator.

    Attributes:
        catalog: Read-only catalog index
        classifier: Ordered intent rules
        entities: Filter / model / color / price extractors
        comparisons: Two-subject comparison parser
        llm_backend: Optional completion backend for enrichment
        max_history_turns: How many recent turns the LLM prompt may see
    """

    def __init__(
        self,
        catalog: "CatalogIndex",
        llm_backend: "CompletionBackend | None" = None,
        max_history_turns: int = DEFAULT_HISTORY_TURNS,
    ) -> None:
        self.catalog = catalog
        self.classifier = IntentClassifier()
        self.entities = EntityExtractor(catalog)
        self.comparisons = ComparisonParser(self.entities.models)
        self.llm_backend = llm_backend
        self.max_history_turns = max_history_turns

    def parse_sync(self, text: str) -> NLUResult:
        """Deterministic parse (no LLM).

        Args:
            text: Raw query text

        Returns:
            NLUResult; blank input yields a search over the whole catalog
        """
        text = text.strip()

        if not text:
            return NLUResult.empty()

        # Security: truncate excessively long input
        if len(text) > MAX_INPUT_LENGTH:
            logger.warning(f"Input truncated from {len(text)} to {MAX_INPUT_LENGTH} chars")
            text = text[:MAX_INPUT_LENGTH]

        intent = self.classifier.classify(text)
        entities = self.entities.extract(text)

        comparison = None
        vehicle_ids = entities.vehicle_ids
        color = entities.color
        if intent.intent == IntentType.COMPARE:
            comparison = self.comparisons.parse(text)
            if comparison.subjects:
                vehicle_ids = [s.vehicle.id for s in comparison.subjects]
                color = next((s.color for s in comparison.subjects if s.color), color)

        confidence = score_confidence(
            has_vehicle=bool(vehicle_ids),
            has_color=color is not None,
            has_price=not entities.price_range.is_empty(),
        )

        result = NLUResult(
            intent=intent.intent,
            filters=entities.filters,
            vehicle_ids=vehicle_ids,
            color=color,
            comparison=comparison,
            confidence=confidence,
            source=intent.source,
            matched_patterns=[intent.pattern] if intent.pattern else [],
            text=text,
        )
        logger.debug(
            f"Parsed {text[:60]!r}: intent={result.intent.value} "
            f"confidence={confidence} filters={result.filters.to_dict()}"
        )
        return result

    async def parse(
        self,
        text: str,
        history: Sequence[ChatMessage] | None = None,
    ) -> NLUResult:
        """Parse with optional LLM enrichment.

        The LLM is only consulted when no intent rule fired, no filters were
        extracted and a backend is loaded. It may change the intent; the
        extracted entities are always the deterministic ones.

        Args:
            text: Raw query text
            history: Recent conversation, oldest first (trimmed to
                max_history_turns)

        Returns:
            NLUResult
        """
        result = self.parse_sync(text)

        if not (result.source == "fallback" and result.filters.is_empty() and result.text):
            return result
        if not self._llm_available():
            return result

        try:
            intent = await self._llm_classify(result.text, history or [])
        except Exception as e:
            logger.warning(f"LLM classification failed: {e}")
            return result

        if intent is None:
            return result
        logger.debug(f"LLM classified {result.text[:60]!r} as {intent.value}")
        return replace(result, intent=intent, source="llm")

    def _llm_available(self) -> bool:
        """Check if an LLM backend is ready for enrichment."""
        return (
            self.llm_backend is not None
            and hasattr(self.llm_backend, "is_loaded")
            and self.llm_backend.is_loaded
        )

    def _render_history(self, history: Sequence[ChatMessage]) -> str:
        recent = list(history)[-self.max_history_turns :] if self.max_history_turns > 0 else []
        if not recent:
            return "(none)"
        return "\n".join(f"{m.role}: {m.text[:500]}" for m in recent)

    async def _llm_classify(
        self, text: str, history: Sequence[ChatMessage]
    ) -> IntentType | None:
        """Ask the LLM for an intent.

        Returns:
            IntentType, or None when the reply names no known intent

        Raises:
            json.JSONDecodeError: If the reply holds no parseable JSON
        """
        prompt = LLM_INTENT_PROMPT.format(
            history=self._render_history(history),
            message=text.replace('"', "'"),
        )
        response = await complete(
            self.llm_backend,
            [{"role": "user", "content": prompt}],
            max_tokens=200,
            temperature=0.1,  # Low temp for consistent classification
        )

        json_match = re.search(r"\{[^{}]*\}", response, re.DOTALL)
        data = json.loads(json_match.group() if json_match else response)
        if not isinstance(data, dict):
            return None

        raw = str(data.get("intent", "")).strip().lower()
        try:
            return IntentType(raw)
        except ValueError:
            logger.warning(f"LLM returned unknown intent: {raw!r}")
            return None


def create_parser(
    catalog: "CatalogIndex",
    llm_backend: "CompletionBackend | None" = None,
    max_history_turns: int = DEFAULT_HISTORY_TURNS,
) -> QueryParser:
    """Factory function to create a QueryParser.

    Args:
        catalog: Catalog index shared by all extractors
        llm_backend: Optional backend for enrichment
        max_history_turns: Recent turns shown to the LLM

    Returns:
        Configured QueryParser instance
    """
    return QueryParser(
        catalog=catalog,
        llm_backend=llm_backend,
        max_history_turns=max_history_turns,
    )


__all__ = [
    "LLM_INTENT_PROMPT",
    "MAX_INPUT_LENGTH",
    "QueryParser",
    "create_parser",
]
