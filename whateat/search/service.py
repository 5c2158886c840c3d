"""Nearby restaurant search: pagination, aggregation, dedup and normalization."""

import math
import time
from typing import List, Optional

from whateat.adapters.base import BaseAdapter
from whateat.adapters.exceptions import AdapterError
from whateat.config.models import SearchConfig
from whateat.domain.models import RawSearchItem
from whateat.logging import get_logger
from whateat.logging.context import log_context, new_correlation_id
from whateat.normalization.dedup import remove_duplicates
from whateat.normalization.service import normalize_items

from .exceptions import InvalidInputError
from .models import SearchResult, SearchRunStats

logger = get_logger(__name__, component="search")


def build_query(location: str, category: str = "", suffix: str = "맛집") -> str:
    """Build the provider query term.

    >>> build_query("강남역", "한식")
    '강남역 한식 맛집'
    >>> build_query("홍대")
    '홍대 맛집'
    """
    if category:
        return f"{location} {category} {suffix}"
    return f"{location} {suffix}"


def pages_needed(count: int, page_size: int) -> int:
    return math.ceil(count / page_size)


class NearbySearchService:
    """
    Finds restaurants near a place name through a local search adapter.

    The provider returns at most page_size items per call, so a request for
    N restaurants becomes ceil(N / page_size) sequential calls. Results are
    merged, deduplicated on name|address, cut to the requested count and
    normalized.
    """

    def __init__(self, adapter: BaseAdapter, search_config: Optional[SearchConfig] = None):
        """
        Initialize the search service.

        Args:
            adapter: Adapter used for single-page provider calls
            search_config: Paging and query settings (defaults when omitted)
        """
        self.adapter = adapter
        self.config = search_config or SearchConfig()

    def search(self, location: str, category: str = "", count: int = 10) -> SearchResult:
        """
        Search restaurants near a location.

        Args:
            location: Place name, e.g. "강남역"
            category: Optional food category, e.g. "한식"
            count: Number of restaurants wanted; capped at max_results

        Returns:
            SearchResult with at most min(count, max_results) restaurants

        Raises:
            InvalidInputError: If location is empty or count is below 1
            AdapterError: If the first page call fails
        """
        location = (location or "").strip()
        category = (category or "").strip()

        if not location:
            raise InvalidInputError("location is required", field="location")
        if count < 1:
            raise InvalidInputError(f"count must be at least 1, got: {count}", field="count")

        effective_count = min(count, self.config.max_results)
        query = build_query(location, category, self.config.query_suffix)
        stats = SearchRunStats(
            query=query,
            pages_requested=pages_needed(effective_count, self.config.page_size),
        )

        started = time.monotonic()
        with log_context(search_id=new_correlation_id()):
            logger.info(
                "Nearby search started",
                extra={
                    "event": "search.started",
                    "location": location,
                    "category": category or None,
                    "count": effective_count,
                    "pages_requested": stats.pages_requested,
                },
            )

            raw_items = self._fetch_pages(query, stats)

            unique_items = remove_duplicates(raw_items)
            stats.duplicates_dropped = len(raw_items) - len(unique_items)

            restaurants = normalize_items(unique_items[:effective_count])
            stats.returned_count = len(restaurants)
            stats.duration_seconds = time.monotonic() - started

            logger.info(
                "Nearby search completed",
                extra={
                    "event": "search.completed",
                    "pages_fetched": stats.pages_fetched,
                    "raw_count": stats.raw_count,
                    "duplicates_dropped": stats.duplicates_dropped,
                    "returned_count": stats.returned_count,
                    "partial": stats.partial,
                    "duration_ms": int(stats.duration_seconds * 1000),
                },
            )

        return SearchResult(
            location=location,
            category=category or self.config.all_categories_label,
            restaurants=restaurants,
            stats=stats,
        )

    def _fetch_pages(self, query: str, stats: SearchRunStats) -> List[RawSearchItem]:
        """
        Request pages sequentially and collect their raw items.

        The first page failing propagates. A later failure ends pagination
        and keeps what was already collected.
        """
        page_size = self.config.page_size
        collected: List[RawSearchItem] = []

        for page_index in range(stats.pages_requested):
            start = page_index * page_size + 1
            try:
                page = self.adapter.search_local(
                    query, display=page_size, start=start, sort=self.config.sort
                )
            except AdapterError as e:
                if page_index == 0:
                    logger.error(
                        f"First search page failed: {e}",
                        extra={
                            "event": "search.page.failed",
                            "start": start,
                            "error_type": type(e).__name__,
                        },
                    )
                    raise

                stats.partial = True
                stats.error_message = str(e)
                logger.warning(
                    f"Search page {page_index + 1} failed, returning partial results",
                    extra={
                        "event": "search.page.failed",
                        "start": start,
                        "error_type": type(e).__name__,
                        "error": str(e),
                        "collected": len(collected),
                    },
                )
                break

            stats.pages_fetched += 1
            items = [RawSearchItem.model_validate(item) for item in page.items]
            stats.raw_count += len(items)
            collected.extend(items)

            logger.debug(
                f"Fetched page {page_index + 1}/{stats.pages_requested}",
                extra={
                    "event": "search.page.fetched",
                    "start": start,
                    "item_count": len(items),
                    "provider_total": page.total,
                },
            )

            if not items:
                break

        return collected
