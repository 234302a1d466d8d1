"""Catalog Index - in-memory, read-only view of the vehicle catalog.

The catalog is loaded once at process start and passed explicitly to the
extractors and entry points. Nothing here mutates after construction, so
concurrent callers can share one instance.

Provides:
- Lookup by id
- Weighted fuzzy search over model / make / trim / description
- Color resolution with first-variant and placeholder fallbacks
- Filtering and pagination for list endpoints
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass, field
from importlib import resources
from pathlib import Path
from typing import Any, Iterable, Sequence

from pydantic import ValidationError

from .colors import color_terms, match_variant
from .filters import FilterSet
from .matching import MIN_VEHICLE_SCORE, FieldScores, query_tokens, score_vehicle
from .models import ColorVariant, Vehicle

logger = logging.getLogger(__name__)

DEFAULT_SEARCH_LIMIT = 5
DEFAULT_PAGE_LIMIT = 20


class CatalogLoadError(Exception):
    """Catalog file missing, unreadable, or not a list of vehicles."""

    pass


@dataclass
class CatalogHit:
    """One fuzzy-search result.

    Attributes:
        vehicle: Matched catalog record
        score: Weighted score (see matching.FIELD_WEIGHTS)
        fields: Per-field similarity
        position: Catalog position, used as the tie-breaker
    """

    vehicle: Vehicle
    score: float
    fields: dict[str, float] = field(default_factory=dict)
    position: int = 0

    @property
    def model_score(self) -> float:
        return self.fields.get("model", 0.0)


@dataclass
class CatalogPage:
    """A page of vehicles plus pagination metadata."""

    vehicles: list[Vehicle]
    page: int
    limit: int
    total: int

    @property
    def pages(self) -> int:
        return math.ceil(self.total / self.limit) if self.limit else 0

    def to_dict(self) -> dict[str, int]:
        return {
            "page": self.page,
            "limit": self.limit,
            "total": self.total,
            "pages": self.pages,
        }


class CatalogIndex:
    """Read-only index over a fixed sequence of vehicles.

    Example:
        catalog = load_catalog(Path("vehicles.json"))
        camry = catalog.find_by_id("camry-le-hybrid-2024")
        hits = catalog.fuzzy_search("camery", limit=3)
        color = catalog.resolve_color(camry, "blue")
    """

    def __init__(self, vehicles: Iterable[Vehicle]) -> None:
        self._vehicles: tuple[Vehicle, ...] = tuple(vehicles)
        self._by_id: dict[str, Vehicle] = {}
        for vehicle in self._vehicles:
            if vehicle.id in self._by_id:
                # First entry wins; later duplicates stay reachable by search only
                logger.warning(f"Duplicate vehicle id in catalog: {vehicle.id}")
                continue
            self._by_id[vehicle.id] = vehicle

    def __len__(self) -> int:
        return len(self._vehicles)

    def __iter__(self):
        return iter(self._vehicles)

    @property
    def vehicles(self) -> tuple[Vehicle, ...]:
        return self._vehicles

    def find_by_id(self, vehicle_id: str) -> Vehicle | None:
        """Look up a vehicle by catalog id."""
        return self._by_id.get(vehicle_id)

    # ------------------------------------------------------------------
    # Fuzzy search
    # ------------------------------------------------------------------

    def score(self, text: str, limit: int | None = DEFAULT_SEARCH_LIMIT) -> list[CatalogHit]:
        """Score every vehicle against text and return hits best-first.

        Args:
            text: Free-text query fragment
            limit: Maximum hits to return (None for all)

        Returns:
            Hits at or above MIN_VEHICLE_SCORE, ties in catalog order
        """
        tokens = query_tokens(text)
        if not tokens:
            return []

        hits: list[CatalogHit] = []
        for position, vehicle in enumerate(self._vehicles):
            scores: FieldScores = score_vehicle(tokens, vehicle)
            if scores.total >= MIN_VEHICLE_SCORE:
                hits.append(
                    CatalogHit(
                        vehicle=vehicle,
                        score=scores.total,
                        fields=scores.fields,
                        position=position,
                    )
                )

        # sorted() is stable, so equal scores keep catalog order
        hits = sorted(hits, key=lambda h: -h.score)
        return hits if limit is None else hits[:limit]

    def fuzzy_search(self, text: str, limit: int = DEFAULT_SEARCH_LIMIT) -> list[Vehicle]:
        """Vehicles matching text, best match first."""
        return [hit.vehicle for hit in self.score(text, limit=limit)]

    # ------------------------------------------------------------------
    # Colors
    # ------------------------------------------------------------------

    def resolve_color(self, vehicle: Vehicle, name_or_code: str | None = None) -> ColorVariant:
        """Resolve a color request to one of the vehicle's variants.

        Matching is case-insensitive. An exact code wins, then a variant
        whose name contains the request, then one containing any synonym of
        the requested color in table order.

        Args:
            vehicle: Vehicle whose colors to search
            name_or_code: "blue", "Blueprint", "8X8", or None for the default

        Returns:
            Matching variant, else the vehicle's first variant, else a
            synthesized placeholder
        """
        if name_or_code and name_or_code.strip():
            wanted = name_or_code.strip().lower()
            for variant in vehicle.colors:
                if variant.code.lower() == wanted:
                    return variant
            variant = match_variant(vehicle.colors, (wanted, *color_terms(wanted)))
            if variant is not None:
                return variant
            logger.debug(f"No '{name_or_code}' variant for {vehicle.id}; using default color")

        return vehicle.color_options()[0]

    # ------------------------------------------------------------------
    # Listing
    # ------------------------------------------------------------------

    def filter(self, filters: FilterSet | None = None) -> list[Vehicle]:
        """Vehicles satisfying every set field of filters, in catalog order."""
        if filters is None or filters.is_empty():
            return list(self._vehicles)
        return [v for v in self._vehicles if filters.matches(v)]

    @staticmethod
    def page(
        vehicles: Sequence[Vehicle],
        page: int = 1,
        limit: int = DEFAULT_PAGE_LIMIT,
    ) -> CatalogPage:
        """Slice a result list into a 1-based page."""
        page = max(1, page)
        limit = max(1, limit)
        start = (page - 1) * limit
        return CatalogPage(
            vehicles=list(vehicles[start : start + limit]),
            page=page,
            limit=limit,
            total=len(vehicles),
        )

    def suggestions(
        self, text: str | None = None, limit: int = DEFAULT_SEARCH_LIMIT
    ) -> list[Vehicle]:
        """Vehicles to offer when a request could not be resolved.

        Fuzzy hits for text come first, then the catalog in order, without
        duplicates.
        """
        picked: list[Vehicle] = []
        seen: set[str] = set()
        candidates: list[Vehicle] = self.fuzzy_search(text, limit=limit) if text else []
        for vehicle in [*candidates, *self._vehicles]:
            if len(picked) >= limit:
                break
            if vehicle.id in seen:
                continue
            seen.add(vehicle.id)
            picked.append(vehicle)
        return picked


# ----------------------------------------------------------------------
# Loading
# ----------------------------------------------------------------------


def _read_records(path: Path) -> Any:
    if path.suffix.lower() in (".yaml", ".yml"):
        from ruamel.yaml import YAML

        yaml = YAML(typ="safe")
        with path.open(encoding="utf-8") as f:
            return yaml.load(f)
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def load_catalog(path: Path | None = None) -> CatalogIndex:
    """Load the static vehicle catalog into a CatalogIndex.

    Args:
        path: JSON or YAML file holding a list of vehicle records. None loads
            the sample catalog shipped with the package.

    Returns:
        CatalogIndex over the records, in file order

    Raises:
        CatalogLoadError: If the file is missing or malformed
    """
    if path is None:
        source = resources.files("showroom.data").joinpath("vehicles.json")
        path = Path(str(source))

    if not path.exists():
        raise CatalogLoadError(f"Catalog not found: {path}")

    try:
        records = _read_records(path)
    except (OSError, ValueError) as e:
        raise CatalogLoadError(f"Could not read catalog {path}: {e}") from e

    if not isinstance(records, list):
        raise CatalogLoadError(f"Catalog {path} must contain a list of vehicles")

    try:
        vehicles = [Vehicle.model_validate(dict(record)) for record in records]
    except (ValidationError, TypeError, ValueError) as e:
        raise CatalogLoadError(f"Invalid vehicle record in {path}: {e}") from e

    logger.info(f"Loaded {len(vehicles)} vehicles from {path}")
    return CatalogIndex(vehicles)


__all__ = [
    "CatalogHit",
    "CatalogIndex",
    "CatalogLoadError",
    "CatalogPage",
    "load_catalog",
]
