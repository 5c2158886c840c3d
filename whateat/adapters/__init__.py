"""Local search provider adapters.

Use the factory to build the configured adapter:
    from whateat.adapters import get_search_adapter
    adapter = get_search_adapter(app_config.http, env_config)
    page = adapter.search_local("강남역 한식 맛집", display=5, start=1, sort="comment")

Exception handling:
    from whateat.adapters import AdapterError, UpstreamAuthError, UpstreamCallError
"""

from .base import BaseAdapter, SearchPage
from .exceptions import (
    AdapterError,
    UpstreamAuthError,
    UpstreamCallError,
    UpstreamResponseError,
    UpstreamTimeoutError,
)
from .factory import get_search_adapter
from .naver import NaverLocalSearchAdapter

__all__ = [
    "BaseAdapter",
    "SearchPage",
    "get_search_adapter",
    "NaverLocalSearchAdapter",
    "AdapterError",
    "UpstreamAuthError",
    "UpstreamCallError",
    "UpstreamTimeoutError",
    "UpstreamResponseError",
]
