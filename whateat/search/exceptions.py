"""Exceptions raised by the nearby search service."""

from typing import Optional


class SearchError(Exception):
    """Base exception for search service errors."""

    pass


class InvalidInputError(SearchError):
    """The caller supplied an unusable search request.

    Attributes:
        field: Name of the offending parameter, if known
        hint: Optional user-facing hint shown alongside the error
    """

    def __init__(self, message: str, field: Optional[str] = None, hint: Optional[str] = None):
        super().__init__(message)
        self.field = field
        self.hint = hint
