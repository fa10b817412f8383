import logging
import threading
from collections import OrderedDict
from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from stockledger.config import get_settings
from stockledger.core.constants import CACHE_STOCKS, DEFAULT_SORT_DIRECTION, DEFAULT_SORT_FIELD
from stockledger.core.dates import resolve_date_range
from stockledger.core.invalidation import InvalidationBus, get_invalidation_bus
from stockledger.core.reconciliation import StockSummary, compute_summary
from stockledger.core.stock_filters import (
    filter_entries,
    normalize_direction,
    normalize_id_filter,
    normalize_sort_field,
    paginate,
    sort_entries,
)
from stockledger.services import stock_repository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StockQuery:
    date_from: Optional[date] = None
    date_to: Optional[date] = None
    search_term: str = ""
    store_filter: Optional[str] = None
    product_filter: Optional[str] = None
    sort_field: str = DEFAULT_SORT_FIELD
    sort_direction: str = DEFAULT_SORT_DIRECTION
    page: int = 1
    page_size: int = 50

    def normalized(self, *, lookback_days=30, today=None):
        date_from, date_to = resolve_date_range(
            self.date_from,
            self.date_to,
            lookback_days=lookback_days,
            today=today,
        )
        return StockQuery(
            date_from=date_from,
            date_to=date_to,
            search_term=(self.search_term or "").strip(),
            store_filter=normalize_id_filter(self.store_filter),
            product_filter=normalize_id_filter(self.product_filter),
            sort_field=self.sort_field,
            sort_direction=normalize_direction(self.sort_direction),
            page=max(1, int(self.page or 1)),
            page_size=max(1, int(self.page_size or 1)),
        )


@dataclass(frozen=True)
class StockQueryResult:
    entries: tuple = ()
    filtered_count: int = 0
    total_count: int = 0
    summary: StockSummary = field(default_factory=StockSummary)
    error: Optional[str] = None
    date_from: Optional[date] = None
    date_to: Optional[date] = None


class StockQueryService:
    """Fetch, filter, sort, summarise and page stock rows for the report view.

    The summary is taken over every row that passes the filters, not just the
    rows on the requested page. Results are memoised per normalised query
    until the ``stocks`` cache key is invalidated.
    """

    def __init__(self, *, bus: Optional[InvalidationBus] = None, cache_size=None, fetch=None):
        settings = get_settings()
        self._lookback_days = settings.STOCK_LOOKBACK_DAYS
        self._cache_size = settings.STOCK_QUERY_CACHE_SIZE if cache_size is None else cache_size
        self._fetch = fetch or stock_repository.fetch_stock_rows
        self._cache: OrderedDict = OrderedDict()
        self._lock = threading.Lock()
        self._bus = bus or get_invalidation_bus()
        self._unsubscribe = self._bus.subscribe(CACHE_STOCKS, self._on_invalidate)

    def close(self) -> None:
        """Detach from the bus and drop memoised results."""
        self._unsubscribe()
        self.clear_cache()

    def _on_invalidate(self, _key):
        self.clear_cache()

    def clear_cache(self) -> None:
        with self._lock:
            self._cache.clear()

    def _remember(self, query, result, generation) -> None:
        if self._cache_size <= 0:
            return
        with self._lock:
            # a mutation committed while this result was being built
            if self._bus.generation(CACHE_STOCKS) != generation:
                return
            self._cache[query] = result
            self._cache.move_to_end(query)
            while len(self._cache) > self._cache_size:
                self._cache.popitem(last=False)

    def _cached(self, query):
        with self._lock:
            result = self._cache.get(query)
            if result is not None:
                self._cache.move_to_end(query)
            return result

    def run(self, db: Session, query: StockQuery, *, today=None) -> StockQueryResult:
        query = query.normalized(lookback_days=self._lookback_days, today=today)
        cached = self._cached(query)
        if cached is not None:
            return cached

        generation = self._bus.generation(CACHE_STOCKS)
        try:
            rows, total_count = self._fetch(db, query.date_from, query.date_to)
        except SQLAlchemyError:
            logger.exception(
                "Stock fetch failed for %s..%s", query.date_from, query.date_to
            )
            return StockQueryResult(
                error="Unable to load stock entries.",
                date_from=query.date_from,
                date_to=query.date_to,
            )

        filtered = filter_entries(
            rows,
            query.search_term,
            query.store_filter,
            query.product_filter,
        )
        ordered = sort_entries(filtered, query.sort_field, query.sort_direction)
        result = StockQueryResult(
            entries=tuple(paginate(ordered, query.page, query.page_size)),
            filtered_count=len(filtered),
            total_count=total_count,
            summary=compute_summary(filtered),
            date_from=query.date_from,
            date_to=query.date_to,
        )
        logger.debug(
            "Stock query %s..%s: %d of %d rows after filters",
            query.date_from,
            query.date_to,
            result.filtered_count,
            total_count,
        )
        self._remember(query, result, generation)
        return result


def handle_sort_change(current_field, current_direction, column):
    """Clicking the active column flips direction, a new column starts descending."""
    current = normalize_sort_field(current_field)
    requested = normalize_sort_field(column)
    if requested is None:
        return current, normalize_direction(current_direction)
    if requested == current:
        flipped = "asc" if normalize_direction(current_direction) == "desc" else "desc"
        return current, flipped
    return requested, "desc"


_service: Optional[StockQueryService] = None
_service_lock = threading.Lock()


def get_stock_query_service() -> StockQueryService:
    global _service
    with _service_lock:
        if _service is None:
            _service = StockQueryService()
        return _service


__all__ = [
    "StockQuery",
    "StockQueryResult",
    "StockQueryService",
    "get_stock_query_service",
    "handle_sort_change",
]
