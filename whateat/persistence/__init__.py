"""Persistence layer: restaurants, visit history and reviews.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - check_connection() -> bool
    - close_database() -> None

    # Repositories
    - RestaurantRepository
    - VisitRepository
    - ReviewRepository

Example usage:
    >>> from whateat.persistence import init_database, get_session, RestaurantRepository
    >>> init_database("sqlite:///./data/whateat.db")
    >>> with get_session() as session:
    ...     restaurants = RestaurantRepository(session).list_active(category="한식")
"""

from .database import check_connection, close_database, get_engine, get_session, init_database
from .exceptions import (
    DatabaseConnectionError,
    DataIntegrityError,
    PersistenceError,
    RecordNotFoundError,
)
from .repositories import RestaurantRepository, ReviewRepository, VisitRepository

__all__ = [
    "init_database",
    "get_session",
    "check_connection",
    "close_database",
    "get_engine",
    "RestaurantRepository",
    "VisitRepository",
    "ReviewRepository",
    "PersistenceError",
    "DatabaseConnectionError",
    "RecordNotFoundError",
    "DataIntegrityError",
]
