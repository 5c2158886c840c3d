"""Base adapter class with shared HTTP handling for local search providers."""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, Optional

import requests

from whateat.logging import get_logger

from .exceptions import (
    UpstreamAuthError,
    UpstreamCallError,
    UpstreamResponseError,
    UpstreamTimeoutError,
)

logger = get_logger(__name__, component="adapter")


class SearchPage:
    """One page of provider results.

    Attributes:
        items: Raw item dicts as returned by the provider
        total: Total hits the provider reports for the query
        start: 1-based offset this page was requested with
    """

    def __init__(self, items: list[dict], total: int = 0, start: int = 1) -> None:
        self.items = items
        self.total = total
        self.start = start

    def __len__(self) -> int:
        return len(self.items)

    def __repr__(self) -> str:
        return f"SearchPage(start={self.start}, items={len(self.items)}, total={self.total})"


class BaseAdapter(ABC):
    """Base class for local search adapters.

    Subclasses implement search_local() for a single page; the orchestrator
    decides how many pages to request.

    Attributes:
        timeout: HTTP request timeout in seconds
        user_agent: User-Agent header for HTTP requests
    """

    def __init__(self, timeout: int = 10, user_agent: str = "WhatEatToday/1.0") -> None:
        if not 1 <= timeout <= 120:
            raise ValueError(f"Timeout must be between 1 and 120 seconds, got: {timeout}")
        if not user_agent or not user_agent.strip():
            raise ValueError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers.update({"User-Agent": self.user_agent})

    @abstractmethod
    def search_local(self, query: str, display: int = 5, start: int = 1, sort: str = "random") -> SearchPage:
        """Fetch one page of listings for a text query.

        Raises:
            UpstreamAuthError: Credentials missing or rejected
            UpstreamCallError: Transport failure, non-2xx status or bad body
        """

    def close(self) -> None:
        """Release pooled connections."""
        self._session.close()

    def _make_request(
        self,
        url: str,
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, Any]] = None,
    ) -> Dict[str, Any]:
        """Issue a GET request and return the decoded JSON object.

        Raises:
            UpstreamAuthError: On 401/403
            UpstreamCallError: On any other status >= 300 or connection failure
            UpstreamTimeoutError: On request timeout
            UpstreamResponseError: On a body that is not a JSON object
        """
        request_headers = self._session.headers.copy()
        if headers:
            request_headers.update(headers)

        logger.debug(
            f"HTTP GET request to {url}",
            extra={
                "event": "adapter.fetch.request",
                "url": url,
                "params": params or {},
                "timeout": self.timeout,
            },
        )

        try:
            response = self._session.get(
                url,
                headers=request_headers,
                params=params,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"Request to {url} timed out after {self.timeout} seconds",
                extra={"event": "adapter.fetch.timeout", "url": url, "timeout": self.timeout},
            )
            raise UpstreamTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            logger.error(
                f"Request to {url} failed: {e}",
                extra={"event": "adapter.fetch.error", "error_type": type(e).__name__, "url": url},
            )
            raise UpstreamCallError(f"Request to {url} failed: {e}", status_code=0, url=url) from e

        if not 200 <= response.status_code < 300:
            body = (response.text or "")[:500]
            log_level = logging.WARNING if response.status_code >= 500 else logging.ERROR
            logger.log(
                log_level,
                f"HTTP {response.status_code} error from {url}",
                extra={
                    "event": "adapter.fetch.error",
                    "status_code": response.status_code,
                    "url": url,
                    "body": body,
                },
            )
            if response.status_code in (401, 403):
                raise UpstreamAuthError(
                    f"Search API rejected the credentials: {response.status_code} - {body}",
                    status_code=response.status_code,
                )
            raise UpstreamCallError(
                f"Search API call failed: {response.status_code} - {body}",
                status_code=response.status_code,
                url=url,
            )

        try:
            data = response.json()
        except ValueError as e:
            logger.error(
                f"Failed to parse JSON response from {url}",
                extra={"event": "adapter.fetch.error", "error_type": "JSONDecodeError", "url": url},
            )
            raise UpstreamResponseError(
                f"Failed to parse JSON response from {url}: {e}",
                status_code=response.status_code,
                url=url,
            ) from e

        if not isinstance(data, dict):
            raise UpstreamResponseError(
                f"Expected JSON object response, got {type(data).__name__}",
                status_code=response.status_code,
                url=url,
            )

        logger.debug(
            "HTTP request succeeded",
            extra={"event": "adapter.fetch.succeeded", "status_code": response.status_code, "url": url},
        )
        return data
