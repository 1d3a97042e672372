"""Notification service for reservation lifecycle emails.

This module provides the NotificationService class that orchestrates a single
delivery: template rendering, recording a Pending notification, one attempt
through the email transport and recording the terminal outcome.
"""

import logging
import uuid
from typing import Callable, Optional, Union

from reservation_notifier.domain import (
    NotificationType,
    create_notification,
    mark_failed,
    mark_sent,
)
from reservation_notifier.logging import get_logger
from reservation_notifier.logging.context import log_context, push_log_context
from reservation_notifier.persistence.store import NotificationStore

from .models import EmailContent, SendNotificationResult
from .smtp_client import EmailSender
from .templates import ReservationEmailData, TemplateRenderer

logger = get_logger(__name__, component="notification")


def _new_notification_id() -> str:
    return uuid.uuid4().hex


class NotificationService:
    """Service for sending reservation notification emails.

    Coordinates the delivery flow:
    1. Render the email for the notification type
    2. Create the notification and save it as Pending
    3. Deliver once via the email sender (no retry loop)
    4. Save the notification as Sent or Failed

    Every save is committed by the store on its own, so the Pending record
    exists before the email goes out.
    """

    def __init__(
        self,
        email_sender: EmailSender,
        notification_store: NotificationStore,
        template_renderer: Optional[TemplateRenderer] = None,
        id_factory: Optional[Callable[[], str]] = None,
        logger_instance: Optional[logging.Logger] = None,
    ):
        """Initialize notification service.

        Args:
            email_sender: Transport used for delivery
            notification_store: Store receiving the Pending and terminal records
            template_renderer: Template renderer instance (creates default if None)
            id_factory: Generator for notification ids (uuid4 hex if None)
            logger_instance: Logger instance (uses module logger if None)
        """
        self.email_sender = email_sender
        self.notification_store = notification_store
        self.template_renderer = template_renderer or TemplateRenderer()
        self.id_factory = id_factory or _new_notification_id
        self.logger = logger_instance or logger

    def send_notification(
        self,
        notification_type: Union[NotificationType, str],
        event_data: ReservationEmailData,
    ) -> SendNotificationResult:
        """Send one notification email for a reservation event.

        Never raises: rendering, validation, store and transport exceptions
        are logged and reported as success=False. In that case the
        notification may or may not have been persisted.

        Args:
            notification_type: Which reservation email to send
            event_data: Recipient and reservation details

        Returns:
            SendNotificationResult with the latest saved notification
        """
        type_value = getattr(notification_type, "value", notification_type)

        with log_context(notification_type=type_value):
            try:
                notification_id = self.id_factory()
                # Reset along with the enclosing log_context on exit
                push_log_context(
                    notification_id=notification_id,
                    reservation_id=event_data.reservation_id,
                )

                rendered = self.template_renderer.render(notification_type, event_data)

                notification = create_notification(
                    id=notification_id,
                    user_id=event_data.user_id or "",
                    user_email=event_data.user_email,
                    type=notification_type,
                    subject=rendered.subject,
                    html_body=rendered.html_body,
                    text_body=rendered.text_body,
                    reservation_id=event_data.reservation_id,
                )
                notification = self.notification_store.save(notification)

                result = self.email_sender.send(
                    EmailContent(
                        to=notification.user_email,
                        subject=notification.subject,
                        html_body=notification.html_body,
                        text_body=notification.text_body,
                    )
                )

                if result.success:
                    notification = self.notification_store.save(mark_sent(notification))
                    self.logger.info(
                        f"Notification sent to {notification.user_email}",
                        extra={
                            "event": "notification.send.success",
                            "message_id": result.message_id,
                        },
                    )
                    return SendNotificationResult(success=True, notification=notification)

                reason = result.error or "Unknown error"
                notification = self.notification_store.save(mark_failed(notification, reason))
                self.logger.error(
                    f"Notification delivery failed: {reason}",
                    extra={
                        "event": "notification.send.failure",
                        "retry_count": notification.retry_count,
                    },
                )
                return SendNotificationResult(
                    success=False, notification=notification, error=reason
                )

            except Exception as e:
                self.logger.error(
                    f"Unexpected error sending notification: {e}",
                    exc_info=True,
                    extra={"event": "notification.send.error", "error_type": type(e).__name__},
                )
                return SendNotificationResult(success=False, error=str(e))
