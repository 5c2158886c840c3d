"""Context propagation for structured logging.

Fields pushed here (request_id, search_id, ...) are attached to every log
record emitted inside the scope. Context lives in a ContextVar, so each
request handled by the API sees only its own fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional
from uuid import uuid4

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Return a copy of the active logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge new fields into the logging context.

    Args:
        **kwargs: Fields to attach to subsequent log records

    Returns:
        Token for pop_log_context()

    Example:
        >>> token = push_log_context(request_id="3f2a", path="/api/reviews")
        >>> pop_log_context(token)
    """
    current = LogContextVar.get()
    return LogContextVar.set({**current, **kwargs})


def pop_log_context(token: Token) -> None:
    """Restore the context that was active before push_log_context()."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Drop every context field. Used by tests."""
    LogContextVar.set({})


def new_correlation_id() -> str:
    """Short random identifier for requests and searches."""
    return uuid4().hex[:12]


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(search_id="a1b2", location="강남역"):
        ...     logger.info("Fetching page")  # carries search_id and location
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
