"""Core domain models for email notifications.

This module defines the data structures used throughout the application:
- NotificationType: the reservation lifecycle transitions that trigger an email
- NotificationStatus: send status of a notification record
- Notification: persisted record of one email send intent and its outcome
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class NotificationType(str, Enum):
    """Types of notifications that can be sent."""

    RESERVATION_CREATED = "ReservationCreated"
    RESERVATION_COLLECTED = "ReservationCollected"
    RESERVATION_RETURNED = "ReservationReturned"
    RESERVATION_CANCELLED = "ReservationCancelled"
    RESERVATION_EXPIRED = "ReservationExpired"
    RESERVATION_OVERDUE = "ReservationOverdue"


class NotificationStatus(str, Enum):
    """Notification send status."""

    PENDING = "Pending"
    SENT = "Sent"
    FAILED = "Failed"


class Notification(BaseModel):
    """Email notification sent to a user for a reservation event.

    Instances are immutable. State transitions are performed by the functions
    in ``reservation_notifier.domain.lifecycle``, which return updated copies.
    Construction-time validation of business rules (non-empty fields, email
    shape, validation order) also lives there; this model only guarantees
    types and UTC timestamps so that records loaded from storage round-trip
    unchanged.
    """

    id: str = Field(..., description="Unique notification identifier")
    user_id: str = Field(..., description="Recipient user identifier")
    user_email: str = Field(..., description="Recipient email (trimmed, lowercase)")
    type: NotificationType = Field(..., description="Reservation event that triggered it")
    subject: str = Field(..., description="Email subject line")
    html_body: str = Field(..., description="Rendered HTML body")
    text_body: Optional[str] = Field(None, description="Rendered plain text body")
    status: NotificationStatus = Field(NotificationStatus.PENDING, description="Send status")
    reservation_id: str = Field(..., description="Originating reservation identifier")
    created_at: datetime = Field(..., description="When the record was created (UTC)")
    sent_at: Optional[datetime] = Field(None, description="When delivery succeeded (UTC)")
    failure_reason: Optional[str] = Field(None, description="Last delivery failure reason")
    retry_count: int = Field(0, ge=0, description="Number of failed delivery attempts")
    updated_at: datetime = Field(..., description="When the record last changed (UTC)")

    @field_validator("created_at", "sent_at", "updated_at")
    @classmethod
    def ensure_utc(cls, v: Optional[datetime]) -> Optional[datetime]:
        """Ensure datetime is timezone-aware and in UTC."""
        if v is None:
            return None
        if v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v.astimezone(timezone.utc)

    model_config = {"frozen": True, "json_schema_extra": {"example": {
        "id": "0f8b6a1c2d3e4f5a6b7c8d9e0f1a2b3c",
        "user_id": "auth0|user-123",
        "user_email": "student@example.edu",
        "type": "ReservationCreated",
        "subject": "Device Loan System - Your reservation is confirmed",
        "html_body": "<!DOCTYPE html><html>...</html>",
        "text_body": "Device Loan System - Reservation Confirmed!...",
        "status": "Sent",
        "reservation_id": "res-42",
        "created_at": "2026-10-19T09:00:00Z",
        "sent_at": "2026-10-19T09:00:01Z",
        "failure_reason": None,
        "retry_count": 0,
        "updated_at": "2026-10-19T09:00:01Z",
    }}}
