"""Persistence layer exceptions.

Everything raised by the database module and the repositories derives from
PersistenceError, so the API can map storage failures in one place.
"""


class PersistenceError(Exception):
    """Base exception for persistence failures."""

    pass


class DatabaseConnectionError(PersistenceError):
    """The database could not be initialized or reached.

    Raised for an empty URL, an unreachable server, a missing driver, or
    get_session() being used before init_database().
    """

    pass


class RecordNotFoundError(PersistenceError):
    """A record an update targeted does not exist.

    Lookups return None instead of raising; this is for writes only.
    """

    pass


class DataIntegrityError(PersistenceError):
    """A constraint was violated, e.g. a visit for an unknown restaurant."""

    pass
