"""Database schema definition and ORM models.

This module defines the SQLAlchemy ORM model for notification records and
the conversion methods between ORM rows and the Notification domain model.
"""

import logging
from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import Column, Index, Integer, String, Text, inspect
from sqlalchemy.engine import Engine
from sqlalchemy.orm import declarative_base

from reservation_notifier.domain.models import (
    Notification,
    NotificationStatus,
    NotificationType,
)

logger = logging.getLogger(__name__)

Base = declarative_base()

# Microsecond precision keeps stored timestamps equal to the in-memory values
TIMESTAMP_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


class NotificationModel(Base):
    """ORM model for the notifications table.

    One row per notification; rows are upserted by id as the notification
    moves from Pending to Sent or Failed.
    """

    __tablename__ = "notifications"

    id = Column(String(64), primary_key=True, nullable=False)

    # Recipient
    user_id = Column(String(255), nullable=False)
    user_email = Column(String(320), nullable=False)

    # Content
    type = Column(String(50), nullable=False)
    subject = Column(Text, nullable=False)
    html_body = Column(Text, nullable=False)
    text_body = Column(Text, nullable=True)

    # Delivery state
    status = Column(String(20), nullable=False)
    reservation_id = Column(String(255), nullable=False)
    failure_reason = Column(Text, nullable=True)
    retry_count = Column(Integer, nullable=False, default=0)

    # Timestamps (stored as ISO 8601 strings)
    created_at = Column(String(50), nullable=False)
    sent_at = Column(String(50), nullable=True)
    updated_at = Column(String(50), nullable=False)

    __table_args__ = (
        Index("idx_notifications_user_id", "user_id"),
        Index("idx_notifications_status", "status"),
        Index("idx_notifications_created_at", "created_at"),
    )

    def to_domain(self) -> Notification:
        """Convert ORM model to domain model."""
        return Notification(
            id=self.id,
            user_id=self.user_id,
            user_email=self.user_email,
            type=NotificationType(self.type),
            subject=self.subject,
            html_body=self.html_body,
            text_body=self.text_body,
            status=NotificationStatus(self.status),
            reservation_id=self.reservation_id,
            created_at=_parse_datetime(self.created_at),
            sent_at=_parse_datetime(self.sent_at),
            failure_reason=self.failure_reason,
            retry_count=self.retry_count,
            updated_at=_parse_datetime(self.updated_at),
        )

    @classmethod
    def from_domain(cls, notification: Notification) -> "NotificationModel":
        """Create ORM model from domain model."""
        model = cls(id=notification.id)
        model.apply(notification)
        return model

    def apply(self, notification: Notification) -> None:
        """Copy every mutable field from the domain model onto this row."""
        self.user_id = notification.user_id
        self.user_email = notification.user_email
        self.type = notification.type.value
        self.subject = notification.subject
        self.html_body = notification.html_body
        self.text_body = notification.text_body
        self.status = notification.status.value
        self.reservation_id = notification.reservation_id
        self.failure_reason = notification.failure_reason
        self.retry_count = notification.retry_count
        self.created_at = _format_datetime(notification.created_at)
        self.sent_at = _format_datetime(notification.sent_at)
        self.updated_at = _format_datetime(notification.updated_at)


def _format_datetime(dt: Optional[datetime]) -> Optional[str]:
    """Format datetime as ISO 8601 string for database storage."""
    if dt is None:
        return None

    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    else:
        dt = dt.astimezone(timezone.utc)

    return dt.strftime(TIMESTAMP_FORMAT)


def _parse_datetime(dt_str: Optional[str]) -> Optional[datetime]:
    """Parse a stored ISO 8601 string to a timezone-aware UTC datetime."""
    if not dt_str:
        return None

    dt_str = dt_str.rstrip("Z")

    try:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S.%f")
    except ValueError:
        dt = datetime.strptime(dt_str, "%Y-%m-%dT%H:%M:%S")

    return dt.replace(tzinfo=timezone.utc)


def create_schema(engine: Engine) -> None:
    """Create all tables and indexes if they don't exist (idempotent)."""
    logger.info("Creating database schema if not exists")

    try:
        Base.metadata.create_all(engine, checkfirst=True)
        tables = inspect(engine).get_table_names()
        logger.info(f"Database schema ready. Tables: {', '.join(tables)}")
    except Exception as e:
        logger.error(f"Failed to create database schema: {e}", exc_info=True)
        raise
