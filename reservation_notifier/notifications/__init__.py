"""Email notifications for reservation lifecycle events.

This module provides the complete notification pipeline:
- NotificationService: Orchestrates rendering, persistence and delivery
- TemplateRenderer / select_template: Jinja2 templates per notification type
- EmailSender / SMTPEmailSender: Email transport contract and SMTP implementation
- SMTPClient: SMTP wrapper with TLS/SSL support
"""

from .models import (
    EmailContent,
    EmailSendResult,
    EmailTransportError,
    NotificationError,
    NotificationTemplateError,
    RenderedEmail,
    SendNotificationResult,
    SMTPDeliveryError,
    UnknownTemplateType,
)
from .service import NotificationService
from .smtp_client import EmailSender, SMTPClient, SMTPEmailSender, build_sender_address
from .templates import ReservationEmailData, TemplateRenderer, select_template

__all__ = [
    # Main service
    "NotificationService",
    # Models and results
    "SendNotificationResult",
    "RenderedEmail",
    "EmailContent",
    "EmailSendResult",
    "ReservationEmailData",
    # Exceptions
    "NotificationError",
    "NotificationTemplateError",
    "UnknownTemplateType",
    "SMTPDeliveryError",
    "EmailTransportError",
    # Components
    "TemplateRenderer",
    "EmailSender",
    "SMTPClient",
    "SMTPEmailSender",
    # Utilities
    "select_template",
    "build_sender_address",
]
