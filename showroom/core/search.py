"""Search entry point: free text in, filters plus matching vehicles out."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any

from .catalog import DEFAULT_PAGE_LIMIT, CatalogIndex, CatalogPage
from .filters import FilterSet
from .intent import IntentType, NLUResult, QueryParser

logger = logging.getLogger(__name__)


@dataclass
class SearchOutcome:
    """Answer to one search request.

    Attributes:
        intent: Intent tag of the query
        filters: Constraints extracted from the query
        vehicle_ids: Ids of every matching vehicle, catalog order
        nlu: Full parse, for handlers that need more than filters
        page: Requested page of the matches
    """

    intent: IntentType
    filters: FilterSet
    vehicle_ids: list[str] = field(default_factory=list)
    nlu: NLUResult | None = None
    page: CatalogPage | None = None

    def to_dict(self) -> dict[str, Any]:
        out: dict[str, Any] = {
            "intent": self.intent.value,
            "filters": self.filters.to_dict(),
            "vehicleIds": list(self.vehicle_ids),
            "count": len(self.vehicle_ids),
        }
        if self.page is not None:
            out["pagination"] = self.page.to_dict()
        return out


def search_vehicles(
    catalog: CatalogIndex,
    parser: QueryParser,
    text: str,
    page: int = 1,
    limit: int | None = None,
) -> SearchOutcome:
    """Parse text and list the catalog vehicles it describes.

    Unrecognized or blank text yields empty filters, which match the whole
    catalog.

    Args:
        catalog: Catalog index
        parser: Query parser built over the same catalog
        text: Free-text query
        page: 1-based page of the matches to return
        limit: Page size (default 20)

    Returns:
        SearchOutcome
    """
    nlu = parser.parse_sync(text)
    matches = catalog.filter(nlu.filters)
    logger.info(
        f"Search {nlu.text[:60]!r}: intent={nlu.intent.value} "
        f"filters={nlu.filters.to_dict()} matches={len(matches)}"
    )
    return SearchOutcome(
        intent=nlu.intent,
        filters=nlu.filters,
        vehicle_ids=[v.id for v in matches],
        nlu=nlu,
        page=catalog.page(matches, page=page, limit=limit or DEFAULT_PAGE_LIMIT),
    )


__all__ = ["SearchOutcome", "search_vehicles"]
