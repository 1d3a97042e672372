"""Domain models and lifecycle rules for reservation email notifications."""

from .exceptions import (
    InvalidStateTransition,
    NotificationDomainError,
    NotificationValidationError,
)
from .lifecycle import create_notification, mark_failed, mark_sent
from .models import Notification, NotificationStatus, NotificationType

__all__ = [
    "Notification",
    "NotificationStatus",
    "NotificationType",
    "create_notification",
    "mark_sent",
    "mark_failed",
    "NotificationDomainError",
    "NotificationValidationError",
    "InvalidStateTransition",
]
