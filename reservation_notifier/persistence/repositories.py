"""Data access layer (repositories) for persistence operations.

NotificationRepository works inside a caller-provided session and never
commits; it returns Notification domain models rather than ORM rows.
"""

import logging
from typing import List, Optional

from sqlalchemy import delete, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from reservation_notifier.domain.models import Notification, NotificationStatus

from .exceptions import DataIntegrityError, PersistenceError
from .schema import NotificationModel

logger = logging.getLogger(__name__)


class NotificationRepository:
    """Repository for notification record operations."""

    def __init__(self, session: Session):
        """Initialize repository with database session.

        Args:
            session: SQLAlchemy session for database operations
        """
        self.session = session

    def get_by_id(self, notification_id: str) -> Optional[Notification]:
        """Retrieve a notification by id.

        Returns:
            Notification if found, None otherwise

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            model = self.session.get(NotificationModel, notification_id)
            return model.to_domain() if model is not None else None

        except SQLAlchemyError as e:
            logger.error(f"Error retrieving notification {notification_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to get notification by id: {e}") from e

    def list_by_user_id(self, user_id: str) -> List[Notification]:
        """List a user's notifications, newest first.

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            stmt = (
                select(NotificationModel)
                .where(NotificationModel.user_id == user_id)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing notifications for user {user_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list notifications by user id: {e}") from e

    def list_by_status(self, status: NotificationStatus) -> List[Notification]:
        """List notifications with the given status, newest first.

        Raises:
            PersistenceError: If database error occurs
        """
        status_value = NotificationStatus(status).value
        try:
            stmt = (
                select(NotificationModel)
                .where(NotificationModel.status == status_value)
                .order_by(NotificationModel.created_at.desc(), NotificationModel.id)
            )
            return [model.to_domain() for model in self.session.execute(stmt).scalars()]

        except SQLAlchemyError as e:
            logger.error(f"Error listing notifications with status {status_value}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to list notifications by status: {e}") from e

    def save(self, notification: Notification) -> Notification:
        """Insert a new notification or overwrite the stored one with the same id.

        Returns:
            The persisted Notification as read back from the row

        Raises:
            DataIntegrityError: On constraint violation
            PersistenceError: If database error occurs
        """
        try:
            existing = self.session.get(NotificationModel, notification.id)

            if existing is not None:
                existing.apply(notification)
                model = existing
            else:
                model = NotificationModel.from_domain(notification)
                self.session.add(model)

            self.session.flush()
            return model.to_domain()

        except IntegrityError as e:
            logger.error(
                f"Integrity error saving notification {notification.id}: {e}", exc_info=True
            )
            raise DataIntegrityError(
                f"Failed to save notification due to constraint violation: {e}"
            ) from e
        except SQLAlchemyError as e:
            logger.error(f"Error saving notification {notification.id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to save notification: {e}") from e

    def delete(self, notification_id: str) -> bool:
        """Delete a notification by id. Deleting a missing id is not an error.

        Returns:
            True if a row was deleted, False if none existed

        Raises:
            PersistenceError: If database error occurs
        """
        try:
            result = self.session.execute(
                delete(NotificationModel).where(NotificationModel.id == notification_id)
            )
            self.session.flush()
            return result.rowcount > 0

        except SQLAlchemyError as e:
            logger.error(f"Error deleting notification {notification_id}: {e}", exc_info=True)
            raise PersistenceError(f"Failed to delete notification: {e}") from e
