"""Exceptions raised by the local search adapters."""

from typing import Optional


class AdapterError(Exception):
    """Base exception for all adapter errors.

    The search orchestrator catches this to decide between propagating a
    first-page failure and keeping the partial results of later pages.
    """

    pass


class UpstreamAuthError(AdapterError):
    """Provider credentials are missing or were rejected.

    Surfaced to API clients as "service unavailable"; never retried.
    """

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class UpstreamCallError(AdapterError):
    """The provider call failed: transport error or non-2xx status.

    status_code is 0 when no HTTP response was received.
    """

    def __init__(self, message: str, status_code: int = 0, url: str = "") -> None:
        super().__init__(message)
        self.status_code = status_code
        self.url = url


class UpstreamTimeoutError(UpstreamCallError):
    """The provider did not answer within the configured timeout."""

    def __init__(self, message: str, url: str = "") -> None:
        super().__init__(message, status_code=0, url=url)


class UpstreamResponseError(UpstreamCallError):
    """The provider answered 2xx but the body could not be parsed."""

    pass
