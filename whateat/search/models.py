"""Data models for search execution tracking and results."""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from whateat.domain.models import NormalizedRestaurant


@dataclass
class SearchRunStats:
    """
    Statistics for a single nearby search.

    Attributes:
        query: Query term sent to the provider
        pages_requested: Number of calls the request size called for
        pages_fetched: Number of calls that returned successfully
        raw_count: Items received across all fetched pages
        duplicates_dropped: Items removed by deduplication
        returned_count: Restaurants in the final result
        partial: Whether a later page failed and the result is incomplete
        duration_seconds: Wall time spent on the search
        error_message: Message of the page failure that made the result partial
    """

    query: str
    pages_requested: int = 0
    pages_fetched: int = 0
    raw_count: int = 0
    duplicates_dropped: int = 0
    returned_count: int = 0
    partial: bool = False
    duration_seconds: float = 0.0
    error_message: str = ""


@dataclass
class SearchResult:
    """Outcome of a nearby search, ready for the REST envelope."""

    location: str
    category: str
    restaurants: List[NormalizedRestaurant] = field(default_factory=list)
    stats: Optional[SearchRunStats] = None

    @property
    def total(self) -> int:
        return len(self.restaurants)

    def to_payload(self) -> Dict[str, Any]:
        """Envelope body: total, location, category and restaurants."""
        return {
            "total": self.total,
            "location": self.location,
            "category": self.category,
            "restaurants": [
                r.model_dump(mode="json", by_alias=True) for r in self.restaurants
            ],
        }
