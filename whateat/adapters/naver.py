"""Naver Local Search adapter implementation."""

from __future__ import annotations

from typing import Optional

from whateat.logging import get_logger

from .base import BaseAdapter, SearchPage
from .exceptions import UpstreamAuthError, UpstreamResponseError

logger = get_logger(__name__, component="adapter")


class NaverLocalSearchAdapter(BaseAdapter):
    """Adapter for the Naver Local Search API.

    API Details:
        Endpoint: https://openapi.naver.com/v1/search/local.json
        Method: GET
        Authentication: X-Naver-Client-Id / X-Naver-Client-Secret headers
        Params: query, display (1-5), start (1-1000), sort (random | comment)
        Response: JSON object with 'items' array and a 'total' count
    """

    ADAPTER_NAME = "naver"
    API_BASE_URL = "https://openapi.naver.com/v1/search/local.json"
    MAX_DISPLAY = 5
    MAX_START = 1000

    def __init__(
        self,
        client_id: Optional[str],
        client_secret: Optional[str],
        base_url: Optional[str] = None,
        **kwargs,
    ) -> None:
        super().__init__(**kwargs)
        self.client_id = client_id
        self.client_secret = client_secret
        self.base_url = base_url or self.API_BASE_URL

    def search_local(self, query: str, display: int = 5, start: int = 1, sort: str = "random") -> SearchPage:
        """Fetch one page of local listings.

        Args:
            query: Search keyword (required)
            display: Items per page, clipped to 5
            start: 1-based offset, clipped to [1, 1000]
            sort: 'random' (provider relevance) or 'comment' (most reviewed first)

        Returns:
            SearchPage with raw item dicts

        Raises:
            ValueError: If query is empty
            UpstreamAuthError: If credentials are not configured or were rejected
            UpstreamCallError: On transport or HTTP failure
        """
        if not query or not query.strip():
            raise ValueError("query is required")

        if not self.client_id or not self.client_secret:
            raise UpstreamAuthError(
                "Search API credentials are not configured. "
                "Set NAVER_CLIENT_ID and NAVER_CLIENT_SECRET."
            )

        params = {
            "query": query,
            "display": max(1, min(display, self.MAX_DISPLAY)),
            "start": max(1, min(start, self.MAX_START)),
            "sort": sort,
        }
        headers = {
            "X-Naver-Client-Id": self.client_id,
            "X-Naver-Client-Secret": self.client_secret,
        }

        logger.info(
            "Fetching local search page",
            extra={
                "event": "adapter.page.requested",
                "adapter": self.ADAPTER_NAME,
                "query": query,
                "start": params["start"],
                "display": params["display"],
                "sort": sort,
            },
        )

        data = self._make_request(self.base_url, headers=headers, params=params)

        items = data.get("items") or []
        if not isinstance(items, list):
            raise UpstreamResponseError(
                f"Expected 'items' field to be array, got {type(items).__name__}",
                status_code=200,
                url=self.base_url,
            )

        page = SearchPage(
            items=[item for item in items if isinstance(item, dict)],
            total=_to_int(data.get("total")),
            start=params["start"],
        )

        logger.info(
            "Fetched local search page",
            extra={
                "event": "adapter.page.fetched",
                "adapter": self.ADAPTER_NAME,
                "start": page.start,
                "count": len(page),
                "total": page.total,
            },
        )
        return page


def _to_int(value) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0
