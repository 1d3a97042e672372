"""Persistence layer exceptions.

All persistence exceptions inherit from PersistenceError, so callers (the
delivery orchestrator in particular) can treat every storage fault as one
infrastructure error. "Not found" is never an error for lookups: they return
None or an empty list.
"""


class PersistenceError(Exception):
    """Base exception for all persistence layer errors."""

    pass


class DatabaseConnectionError(PersistenceError):
    """Raised when database connection or initialization fails.

    Examples:
    - Invalid database URL format
    - Database file not accessible
    - Database used before init_database() was called
    """

    pass


class DataIntegrityError(PersistenceError):
    """Raised when a database constraint violation occurs."""

    pass
