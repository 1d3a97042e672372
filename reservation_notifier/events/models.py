"""Event Grid envelope and reservation payload models.

Reservation events arrive in the Event Grid schema with camelCase keys:

    {
        "id": "c0a8...",
        "eventType": "reservation.created",
        "subject": "reservations/R1",
        "eventTime": "2026-10-19T12:00:00Z",
        "dataVersion": "1.0",
        "data": {"reservationId": "R1", "userId": "U1", "userEmail": "a@b.edu", ...}
    }

Unknown keys are ignored at both levels.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from reservation_notifier.notifications.templates import ReservationEmailData
from reservation_notifier.utils.timestamps import parse_iso_datetime


class ReservationEventData(BaseModel):
    """Payload published by the reservation service.

    Every field is optional here; the event handler decides what a usable
    event needs.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    reservation_id: Optional[str] = None
    user_id: Optional[str] = None
    user_email: Optional[str] = None
    device_id: Optional[str] = None
    device_model_id: Optional[str] = None
    device_name: Optional[str] = None
    reserved_at: Optional[str] = None
    expires_at: Optional[str] = None
    collected_at: Optional[str] = None
    return_due_at: Optional[str] = None
    returned_at: Optional[str] = None
    cancelled_at: Optional[str] = None

    def to_email_data(self) -> ReservationEmailData:
        """Select the fields the email templates use.

        Raises:
            pydantic.ValidationError: If user_email or reservation_id is missing
        """
        return ReservationEmailData(
            user_email=self.user_email,
            reservation_id=self.reservation_id,
            user_id=self.user_id,
            device_name=self.device_name,
            reserved_at=self.reserved_at,
            expires_at=self.expires_at,
            collected_at=self.collected_at,
            return_due_at=self.return_due_at,
            returned_at=self.returned_at,
        )


class ReservationEvent(BaseModel):
    """Event Grid envelope around a reservation payload."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")

    id: str = Field(..., min_length=1)
    event_type: str
    subject: Optional[str] = None
    event_time: Optional[datetime] = None
    data_version: Optional[str] = None
    data: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("event_time", mode="before")
    @classmethod
    def parse_event_time(cls, v):
        # Informational only; an unparseable time must not reject the event
        if isinstance(v, str):
            return parse_iso_datetime(v)
        return v
