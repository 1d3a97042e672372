"""Data models and exceptions for the notification service.

This module defines the transport contract types (EmailContent,
EmailSendResult), the orchestrator's result, and the custom exceptions used
throughout the notification pipeline.
"""

from dataclasses import dataclass
from typing import Optional

from reservation_notifier.domain.models import Notification


class NotificationError(Exception):
    """Base exception for notification-related errors."""

    pass


class NotificationTemplateError(NotificationError):
    """Raised when template rendering fails due to configuration or missing variables."""

    pass


class UnknownTemplateType(NotificationTemplateError):
    """Raised when no template exists for the requested notification type."""

    def __init__(self, notification_type: object):
        self.notification_type = notification_type
        super().__init__(f"Unknown notification type: {notification_type}")


class SMTPDeliveryError(NotificationError):
    """Raised when the SMTP server rejects a message."""

    pass


class EmailTransportError(NotificationError):
    """Raised when the email transport cannot be reached (network, TLS, DNS)."""

    pass


@dataclass(frozen=True)
class RenderedEmail:
    """Subject and bodies produced by the template selector."""

    subject: str
    html_body: str
    text_body: str


@dataclass(frozen=True)
class EmailContent:
    """A single email to deliver."""

    to: str
    subject: str
    html_body: str
    text_body: Optional[str] = None


@dataclass(frozen=True)
class EmailSendResult:
    """Outcome reported by an email transport.

    Ordinary delivery failures are reported here with success=False;
    transports only raise for connection-level faults.
    """

    success: bool
    message_id: Optional[str] = None
    error: Optional[str] = None


@dataclass
class SendNotificationResult:
    """Result of processing one reservation event into an email.

    Attributes:
        success: True only when the email was accepted by the transport
        notification: Latest persisted notification, when one was recorded
        error: Failure reason (transport error or unexpected exception message)
    """

    success: bool
    notification: Optional[Notification] = None
    error: Optional[str] = None
