"""Persistence layer for notification records.

Public API:
    # Database initialization and session management
    - init_database(database_url: str) -> None
    - get_session() -> ContextManager[Session]
    - check_database() -> None
    - close_database() -> None
    - get_engine() -> Engine

    # Data access
    - NotificationRepository: session-scoped queries (caller commits)
    - NotificationStore: persistence contract used by the orchestrator
    - SqlNotificationStore: NotificationStore committing each operation

    # Exceptions
    - PersistenceError: Base exception for all persistence errors
    - DatabaseConnectionError: Database connection/initialization failures
    - DataIntegrityError: Constraint violations

Example usage:
    >>> from reservation_notifier.domain import NotificationStatus
    >>> from reservation_notifier.persistence import init_database, SqlNotificationStore
    >>> init_database("sqlite:///./data/notifications.db")
    >>> store = SqlNotificationStore()
    >>> failed = store.list_by_status(NotificationStatus.FAILED)
"""

from .database import check_database, close_database, get_engine, get_session, init_database
from .exceptions import DatabaseConnectionError, DataIntegrityError, PersistenceError
from .repositories import NotificationRepository
from .store import NotificationStore, SqlNotificationStore

__all__ = [
    # Database functions
    "init_database",
    "get_session",
    "check_database",
    "close_database",
    "get_engine",
    # Data access
    "NotificationRepository",
    "NotificationStore",
    "SqlNotificationStore",
    # Exceptions
    "PersistenceError",
    "DatabaseConnectionError",
    "DataIntegrityError",
]
