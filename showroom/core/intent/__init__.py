"""Natural-language understanding for showroom shopping queries.

Turns free text ("blue Camry vs silver Accord", "affordable hybrid SUVs
under $35k") into structured filters, comparison targets and colors.

The parsing pipeline:
1. Intent rules - ordered regex table (compare, finance, filter, search)
2. Entity extraction - filters, model, color, price range
3. Comparison parsing - compare intents only
4. LLM enrichment - optional, for queries nothing else recognized

Example usage:
    ```python
    from showroom.core.catalog import load_catalog
    from showroom.core.intent import IntentType, QueryParser

    parser = QueryParser(load_catalog())

    result = parser.parse_sync("blue Camry vs silver Accord")
    assert result.intent == IntentType.COMPARE
    assert result.comparison.first.color.canonical == "blue"

    # Async with LLM enrichment
    result = await parser.parse("something vague", history=recent_turns)
    ```
"""

from .comparison import (
    ComparisonParser,
    ComparisonSubject,
    ParsedComparison,
)
from .entities import (
    MAKE_ALIASES,
    MODEL_ALIASES,
    PRICE_RULES,
    ColorSelection,
    EntityExtractor,
    ExtractedEntities,
    ModelExtractor,
    ModelMatch,
    extract_color,
    extract_filters,
    extract_price_range,
)
from .parser import (
    QueryParser,
    create_parser,
)
from .patterns import (
    INTENT_RULES,
    IntentClassifier,
    IntentMatch,
    classify_intent,
)
from .taxonomy import (
    ChatMessage,
    ConfidenceWeights,
    IntentType,
    NLUResult,
)

__all__ = [
    # Main parser
    "QueryParser",
    "create_parser",
    # Intent rules
    "INTENT_RULES",
    "IntentClassifier",
    "IntentMatch",
    "classify_intent",
    # Taxonomy
    "IntentType",
    "ConfidenceWeights",
    "NLUResult",
    "ChatMessage",
    # Entity extraction
    "EntityExtractor",
    "ExtractedEntities",
    "ModelExtractor",
    "ModelMatch",
    "ColorSelection",
    "extract_color",
    "extract_filters",
    "extract_price_range",
    "MAKE_ALIASES",
    "MODEL_ALIASES",
    "PRICE_RULES",
    # Comparison
    "ComparisonParser",
    "ComparisonSubject",
    "ParsedComparison",
]
