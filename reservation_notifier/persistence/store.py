"""Notification store used by the delivery orchestrator.

The orchestrator needs every save to be durable on its own: the Pending
record must be committed before the email goes out. SqlNotificationStore
therefore runs each operation in its own session and transaction, delegating
the queries to NotificationRepository.
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from reservation_notifier.domain.models import Notification, NotificationStatus
from reservation_notifier.logging import get_logger

from .database import get_session
from .exceptions import PersistenceError
from .repositories import NotificationRepository

logger = get_logger(__name__, component="store")

T = TypeVar("T")


class NotificationStore(ABC):
    """Persistence contract for notification records.

    Implementations persist and retrieve what they are given without changing
    notification semantics. Lookups return None or an empty list when nothing
    matches; technical failures raise PersistenceError.
    """

    @abstractmethod
    def save(self, notification: Notification) -> Notification:
        """Upsert by id and return the persisted form."""

    @abstractmethod
    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        """Return the notification with this id, or None."""

    @abstractmethod
    def list_by_user_id(self, user_id: str) -> List[Notification]:
        """Return a user's notifications, newest first."""

    @abstractmethod
    def list_by_status(self, status: NotificationStatus) -> List[Notification]:
        """Return notifications with the given status, newest first."""

    def list_pending(self) -> List[Notification]:
        """Return notifications still awaiting a delivery outcome."""
        return self.list_by_status(NotificationStatus.PENDING)

    @abstractmethod
    def delete(self, notification_id: str) -> None:
        """Delete by id; deleting a missing id is not an error."""


class SqlNotificationStore(NotificationStore):
    """NotificationStore backed by the SQLAlchemy database from init_database()."""

    def _run(self, operation: Callable[[NotificationRepository], T]) -> T:
        try:
            with get_session() as session:
                return operation(NotificationRepository(session))
        except PersistenceError:
            raise
        except SQLAlchemyError as e:
            # Commit-time failures surface outside the repository's own handlers
            raise PersistenceError(f"Notification store transaction failed: {e}") from e

    def save(self, notification: Notification) -> Notification:
        saved = self._run(lambda repo: repo.save(notification))
        logger.info(
            "Notification saved",
            extra={
                "event": "notification.saved",
                "notification_id": saved.id,
                "status": saved.status.value,
                "retry_count": saved.retry_count,
            },
        )
        return saved

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        return self._run(lambda repo: repo.get_by_id(notification_id))

    def list_by_user_id(self, user_id: str) -> List[Notification]:
        return self._run(lambda repo: repo.list_by_user_id(user_id))

    def list_by_status(self, status: NotificationStatus) -> List[Notification]:
        return self._run(lambda repo: repo.list_by_status(status))

    def delete(self, notification_id: str) -> None:
        deleted = self._run(lambda repo: repo.delete(notification_id))
        if deleted:
            logger.info(
                "Notification deleted",
                extra={"event": "notification.deleted", "notification_id": notification_id},
            )
        else:
            logger.debug(
                "Notification not found for deletion",
                extra={"event": "notification.delete.missing", "notification_id": notification_id},
            )
