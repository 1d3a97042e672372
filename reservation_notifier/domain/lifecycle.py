"""Notification lifecycle: construction and state transitions.

Business rules:
- Notifications are created Pending by the delivery orchestrator
- A delivery attempt moves a Pending notification to Sent or Failed
- Each transition to Failed increments retry_count by exactly one
- Sent is final; nothing moves a notification out of Sent

All functions are pure transforms and never mutate their input.
"""

import re
from typing import Optional, Union

from reservation_notifier.utils.timestamps import utc_now

from .exceptions import InvalidStateTransition, NotificationValidationError
from .models import Notification, NotificationStatus, NotificationType

EMAIL_PATTERN = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")


def _is_blank(value: object) -> bool:
    return not isinstance(value, str) or not value.strip()


def _validate_create_params(
    id: str,
    user_id: str,
    user_email: str,
    type: Union[NotificationType, str],
    subject: str,
    html_body: str,
    reservation_id: str,
) -> NotificationType:
    """Validate construction input in a fixed field order.

    Returns:
        The notification type coerced to NotificationType

    Raises:
        NotificationValidationError: For the first invalid field encountered
    """
    if _is_blank(id):
        raise NotificationValidationError("id", "Notification id must be a non-empty string.")

    if _is_blank(user_id):
        raise NotificationValidationError(
            "user_id", "Notification user_id must be a non-empty string."
        )

    if _is_blank(user_email):
        raise NotificationValidationError(
            "user_email", "Notification user_email must be a non-empty string."
        )

    if not EMAIL_PATTERN.match(user_email.strip()):
        raise NotificationValidationError(
            "user_email", "Notification user_email must be a valid email address."
        )

    if _is_blank(subject):
        raise NotificationValidationError(
            "subject", "Notification subject must be a non-empty string."
        )

    if _is_blank(html_body):
        raise NotificationValidationError(
            "html_body", "Notification html_body must be a non-empty string."
        )

    if _is_blank(reservation_id):
        raise NotificationValidationError(
            "reservation_id", "Notification reservation_id must be a non-empty string."
        )

    try:
        return NotificationType(type)
    except ValueError:
        valid = ", ".join(t.value for t in NotificationType)
        raise NotificationValidationError(
            "type", f"Notification type must be one of: {valid}"
        ) from None


def create_notification(
    id: str,
    user_id: str,
    user_email: str,
    type: Union[NotificationType, str],
    subject: str,
    html_body: str,
    reservation_id: str,
    text_body: Optional[str] = None,
) -> Notification:
    """Create a new notification with initial Pending status.

    Args:
        id: Caller-supplied unique identifier (e.g. a uuid4 hex string)
        user_id: Recipient user identifier
        user_email: Recipient email address (normalized to lowercase)
        type: Notification type (enum member or its string value)
        subject: Rendered subject line
        html_body: Rendered HTML body (stored verbatim)
        reservation_id: Originating reservation identifier
        text_body: Optional rendered plain text body

    Returns:
        Notification with status Pending, retry_count 0 and
        created_at == updated_at

    Raises:
        NotificationValidationError: If any field is invalid
    """
    notification_type = _validate_create_params(
        id, user_id, user_email, type, subject, html_body, reservation_id
    )

    now = utc_now()

    return Notification(
        id=id.strip(),
        user_id=user_id.strip(),
        user_email=user_email.strip().lower(),
        type=notification_type,
        subject=subject.strip(),
        html_body=html_body,
        text_body=text_body.strip() if text_body is not None else None,
        status=NotificationStatus.PENDING,
        reservation_id=reservation_id.strip(),
        created_at=now,
        retry_count=0,
        updated_at=now,
    )


def mark_sent(notification: Notification) -> Notification:
    """Mark a notification as successfully sent.

    Raises:
        InvalidStateTransition: If the notification was already sent
    """
    if notification.status == NotificationStatus.SENT:
        raise InvalidStateTransition(
            notification.id, notification.status.value, NotificationStatus.SENT.value
        )

    now = utc_now()
    return notification.model_copy(
        update={
            "status": NotificationStatus.SENT,
            "sent_at": now,
            "updated_at": now,
        }
    )


def mark_failed(notification: Notification, reason: str) -> Notification:
    """Mark a notification as failed with a reason.

    A Failed notification may fail again (an externally driven retry); the
    retry_count keeps counting failed attempts.

    Args:
        notification: The notification to mark as failed
        reason: Failure reason reported by the email transport

    Raises:
        InvalidStateTransition: If the notification was already sent
    """
    if notification.status == NotificationStatus.SENT:
        raise InvalidStateTransition(
            notification.id, notification.status.value, NotificationStatus.FAILED.value
        )

    return notification.model_copy(
        update={
            "status": NotificationStatus.FAILED,
            "failure_reason": reason,
            "retry_count": notification.retry_count + 1,
            "updated_at": utc_now(),
        }
    )
