"""Core components for showroom."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Mapping

from ..config import AppConfig
from .catalog import CatalogIndex, CatalogLoadError, load_catalog
from .compare import ComparisonFailure, VehicleComparison, compare_vehicles
from .filters import FilterSet, PriceRange
from .financing import (
    FinancingParams,
    FinancingValidationError,
    PaymentCalculation,
    ScenarioSet,
    calculate_all_scenarios,
    calculate_payment,
)
from .intent import IntentType, NLUResult, QueryParser
from .models import ColorVariant, Vehicle
from .search import SearchOutcome, search_vehicles

if TYPE_CHECKING:
    from .backends import CompletionBackend

logger = logging.getLogger(__name__)


@dataclass
class ShowroomState:
    """Process-wide, read-mostly state built once at start-up.

    Holds the catalog snapshot and the parser wired to it; request handlers
    receive this object instead of importing globals.

    Manages:
    - Catalog index (immutable after load)
    - Query parser over that catalog
    - Optional LLM backend for intent enrichment
    """

    config: AppConfig
    catalog: CatalogIndex = field(repr=False)
    parser: QueryParser = field(repr=False)
    backend: "CompletionBackend | None" = field(default=None, repr=False)

    async def load_llm(self) -> bool:
        """Connect the configured LLM backend, if any.

        Returns:
            True when a backend is loaded and attached to the parser
        """
        if not self.config.llm_model:
            return False

        from .backends import ModelLoadError, create_backend

        await self.unload_llm()
        backend = create_backend(self.config.llm_model, endpoint=self.config.llm_endpoint)
        try:
            await backend.load()
        except ModelLoadError as e:
            logger.warning(f"LLM enrichment disabled: {e}")
            return False

        self.backend = backend
        self.parser.llm_backend = backend
        logger.info(f"LLM enrichment enabled with {self.config.llm_model}")
        return True

    async def unload_llm(self) -> None:
        """Detach and close the LLM backend."""
        if self.backend is not None:
            await self.backend.unload()
            self.backend = None
            self.parser.llm_backend = None

    def search(self, text: str, page: int = 1, limit: int | None = None) -> SearchOutcome:
        return search_vehicles(self.catalog, self.parser, text, page=page, limit=limit)

    def compare(
        self,
        query: str | None = None,
        vehicle1_id: str | None = None,
        vehicle2_id: str | None = None,
        color1: str | None = None,
        color2: str | None = None,
    ) -> VehicleComparison | ComparisonFailure:
        return compare_vehicles(
            self.catalog,
            self.parser,
            query=query,
            vehicle1_id=vehicle1_id,
            vehicle2_id=vehicle2_id,
            color1=color1,
            color2=color2,
            terms=self.config.default_terms,
            assumptions=self.config.financing,
            suggestion_limit=self.config.suggestion_limit,
        )

    def payment(self, params: FinancingParams | Mapping[str, Any]) -> PaymentCalculation:
        return calculate_payment(params, self.config.financing)

    def all_scenarios(self, params: FinancingParams | Mapping[str, Any]) -> ScenarioSet:
        return calculate_all_scenarios(params, self.config.financing)


def create_state(config: AppConfig | None = None) -> ShowroomState:
    """Load the catalog and wire the parser.

    The LLM backend is not connected here; call ``await state.load_llm()``
    from async start-up code.

    Args:
        config: Application config (defaults from environment if None)

    Returns:
        ShowroomState ready for request handling

    Raises:
        CatalogLoadError: If the catalog cannot be loaded
    """
    config = config or AppConfig()
    catalog = load_catalog(config.catalog_path)
    parser = QueryParser(catalog, max_history_turns=config.max_history_turns)
    return ShowroomState(config=config, catalog=catalog, parser=parser)


__all__ = [
    # State
    "ShowroomState",
    "create_state",
    # Catalog
    "CatalogIndex",
    "CatalogLoadError",
    "ColorVariant",
    "Vehicle",
    "load_catalog",
    # NLU
    "FilterSet",
    "IntentType",
    "NLUResult",
    "PriceRange",
    "QueryParser",
    # Entry points
    "ComparisonFailure",
    "SearchOutcome",
    "VehicleComparison",
    "compare_vehicles",
    "search_vehicles",
    # Financing
    "FinancingParams",
    "FinancingValidationError",
    "PaymentCalculation",
    "ScenarioSet",
    "calculate_all_scenarios",
    "calculate_payment",
]
