"""Nearby restaurant search."""

from .exceptions import InvalidInputError, SearchError
from .models import SearchResult, SearchRunStats
from .service import NearbySearchService, build_query

__all__ = [
    "NearbySearchService",
    "SearchResult",
    "SearchRunStats",
    "SearchError",
    "InvalidInputError",
    "build_query",
]
