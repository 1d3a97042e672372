"""Reservation event intake: envelope parsing and dispatch to notifications."""

from .handler import (
    RESERVATION_EVENT_TYPES,
    EventHandlingResult,
    EventOutcome,
    ReservationEventHandler,
)
from .models import ReservationEvent, ReservationEventData

__all__ = [
    "RESERVATION_EVENT_TYPES",
    "ReservationEvent",
    "ReservationEventData",
    "ReservationEventHandler",
    "EventHandlingResult",
    "EventOutcome",
]
