"""Reservation event handler.

Maps reservation events to notification types and hands usable events to the
NotificationService. The handler never raises: the event source redelivers
events whose handler fails, and a redelivery would send the email again.
Failed deliveries are recorded in the notification store instead.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, List, Optional

from pydantic import ValidationError

from reservation_notifier.domain.models import NotificationType
from reservation_notifier.logging import get_logger
from reservation_notifier.logging.context import log_context
from reservation_notifier.notifications.service import NotificationService

from .models import ReservationEvent, ReservationEventData

logger = get_logger(__name__, component="events")

RESERVATION_EVENT_TYPES: Dict[str, NotificationType] = {
    "reservation.created": NotificationType.RESERVATION_CREATED,
    "reservation.collected": NotificationType.RESERVATION_COLLECTED,
    "reservation.returned": NotificationType.RESERVATION_RETURNED,
    "reservation.cancelled": NotificationType.RESERVATION_CANCELLED,
    "reservation.expired": NotificationType.RESERVATION_EXPIRED,
    "reservation.overdue": NotificationType.RESERVATION_OVERDUE,
}


class EventOutcome(str, Enum):
    """What happened to a delivered event."""

    SENT = "sent"
    FAILED = "failed"
    IGNORED = "ignored"
    SKIPPED = "skipped"


@dataclass
class EventHandlingResult:
    """
    Outcome of handling a single event.

    Attributes:
        event_id: Envelope id, when one could be read
        outcome: sent, failed, ignored (unmapped type) or skipped (unusable event)
        notification_type: Notification type the event mapped to
        notification_id: Id of the recorded notification, if any
        error: Failure or skip reason
    """

    event_id: Optional[str]
    outcome: EventOutcome
    notification_type: Optional[NotificationType] = None
    notification_id: Optional[str] = None
    error: Optional[str] = None


class ReservationEventHandler:
    """Dispatches reservation events to the notification service."""

    def __init__(self, notification_service: NotificationService):
        self.notification_service = notification_service

    def handle(self, event: ReservationEvent) -> EventHandlingResult:
        """Handle one parsed event.

        Returns:
            EventHandlingResult; never raises
        """
        with log_context(event_id=event.id, event_type=event.event_type):
            logger.info(
                f"Received event: {event.event_type} - {event.id}",
                extra={"event": "event.received"},
            )

            try:
                notification_type = RESERVATION_EVENT_TYPES.get(event.event_type)
                if notification_type is None:
                    logger.info(
                        f"Ignoring unhandled event type: {event.event_type}",
                        extra={"event": "event.ignored"},
                    )
                    return EventHandlingResult(event_id=event.id, outcome=EventOutcome.IGNORED)

                try:
                    data = ReservationEventData.model_validate(event.data)
                except ValidationError as e:
                    return self._skip(event, notification_type, f"malformed event data: {e}")

                if not data.user_email:
                    return self._skip(event, notification_type, "missing userEmail")

                if not data.reservation_id:
                    return self._skip(event, notification_type, "missing reservationId")

                logger.info(
                    f"Processing {notification_type.value} for reservation {data.reservation_id}",
                    extra={"event": "event.processing", "reservation_id": data.reservation_id},
                )

                result = self.notification_service.send_notification(
                    notification_type, data.to_email_data()
                )
                notification_id = result.notification.id if result.notification else None

                if result.success:
                    logger.info(
                        f"Email sent successfully for event {event.id}",
                        extra={"event": "event.handled", "notification_id": notification_id},
                    )
                    return EventHandlingResult(
                        event_id=event.id,
                        outcome=EventOutcome.SENT,
                        notification_type=notification_type,
                        notification_id=notification_id,
                    )

                # Not re-raised: redelivery would resend; the store keeps the Failed record
                logger.error(
                    f"Failed to send email for event {event.id}: {result.error}",
                    extra={"event": "event.failed", "notification_id": notification_id},
                )
                return EventHandlingResult(
                    event_id=event.id,
                    outcome=EventOutcome.FAILED,
                    notification_type=notification_type,
                    notification_id=notification_id,
                    error=result.error,
                )

            except Exception as e:
                logger.error(
                    f"Error processing reservation event: {e}",
                    exc_info=True,
                    extra={"event": "event.error", "error_type": type(e).__name__},
                )
                return EventHandlingResult(
                    event_id=event.id, outcome=EventOutcome.FAILED, error=str(e)
                )

    def handle_raw(self, payload: Any) -> EventHandlingResult:
        """Validate a decoded JSON envelope, then handle it."""
        try:
            event = ReservationEvent.model_validate(payload)
        except ValidationError as e:
            event_id = payload.get("id") if isinstance(payload, dict) else None
            logger.warning(
                f"Skipping malformed event envelope: {e}",
                extra={"event": "event.skipped", "event_id": event_id, "reason": "malformed_envelope"},
            )
            return EventHandlingResult(
                event_id=event_id if isinstance(event_id, str) else None,
                outcome=EventOutcome.SKIPPED,
                error=f"malformed event envelope: {e}",
            )

        return self.handle(event)

    def handle_batch(self, payloads: Iterable[Any]) -> List[EventHandlingResult]:
        """Handle several decoded envelopes; one bad event does not stop the rest."""
        results = [self.handle_raw(payload) for payload in payloads]

        counts = {outcome: 0 for outcome in EventOutcome}
        for result in results:
            counts[result.outcome] += 1

        logger.info(
            f"Event batch complete: {counts[EventOutcome.SENT]} sent, "
            f"{counts[EventOutcome.FAILED]} failed, {counts[EventOutcome.IGNORED]} ignored, "
            f"{counts[EventOutcome.SKIPPED]} skipped (total: {len(results)})",
            extra={"event": "event.batch.completed"},
        )

        return results

    def _skip(
        self, event: ReservationEvent, notification_type: NotificationType, reason: str
    ) -> EventHandlingResult:
        logger.warning(
            f"Event {event.id} {reason}, skipping notification",
            extra={"event": "event.skipped", "reason": reason},
        )
        return EventHandlingResult(
            event_id=event.id,
            outcome=EventOutcome.SKIPPED,
            notification_type=notification_type,
            error=reason,
        )
