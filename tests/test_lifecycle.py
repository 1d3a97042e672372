"""Unit tests for notification construction and state transitions."""

from datetime import datetime, timedelta, timezone

import pytest

from reservation_notifier.domain import (
    InvalidStateTransition,
    NotificationStatus,
    NotificationType,
    NotificationValidationError,
    create_notification,
    mark_failed,
    mark_sent,
)


def _params(**overrides):
    params = {
        "id": "n-1",
        "user_id": "U1",
        "user_email": "student@uni.edu",
        "type": NotificationType.RESERVATION_CREATED,
        "subject": "Subject",
        "html_body": "<p>Body</p>",
        "reservation_id": "R1",
    }
    params.update(overrides)
    return params


class TestCreateNotification:
    """Tests for create_notification."""

    def test_creates_pending_notification(self):
        notification = create_notification(**_params())

        assert notification.status == NotificationStatus.PENDING
        assert notification.retry_count == 0
        assert notification.sent_at is None
        assert notification.failure_reason is None
        assert notification.created_at == notification.updated_at
        assert notification.created_at.tzinfo == timezone.utc

    def test_normalizes_email_to_lowercase(self):
        notification = create_notification(**_params(user_email="  Student@UNI.edu "))
        assert notification.user_email == "student@uni.edu"

    def test_trims_text_fields(self):
        notification = create_notification(
            **_params(id=" n-1 ", user_id=" U1 ", subject=" Hi ", reservation_id=" R1 ")
        )

        assert notification.id == "n-1"
        assert notification.user_id == "U1"
        assert notification.subject == "Hi"
        assert notification.reservation_id == "R1"

    def test_html_body_kept_verbatim(self):
        body = "  <p>Body</p>\n"
        assert create_notification(**_params(html_body=body)).html_body == body

    def test_text_body_optional(self):
        assert create_notification(**_params()).text_body is None
        assert create_notification(**_params(text_body=" hi \n")).text_body == "hi"

    def test_accepts_type_by_value(self):
        notification = create_notification(**_params(type="ReservationOverdue"))
        assert notification.type == NotificationType.RESERVATION_OVERDUE

    @pytest.mark.parametrize(
        "field,value",
        [
            ("id", ""),
            ("user_id", "   "),
            ("user_email", ""),
            ("subject", " "),
            ("html_body", ""),
            ("reservation_id", "\t"),
        ],
    )
    def test_blank_required_field_rejected(self, field, value):
        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(**{field: value}))

        assert exc_info.value.field == field

    @pytest.mark.parametrize("email", ["no-at-sign", "a@b", "a b@c.com", "@uni.edu"])
    def test_malformed_email_rejected(self, email):
        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(user_email=email))

        assert exc_info.value.field == "user_email"
        assert "valid email" in exc_info.value.message

    def test_unknown_type_rejected(self):
        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(type="ReservationLost"))

        assert exc_info.value.field == "type"

    def test_first_invalid_field_is_reported(self):
        """Fields are checked in a fixed order; the first failure wins."""
        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(id="", user_email="bad", subject=""))
        assert exc_info.value.field == "id"

        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(user_email="bad", subject="", type="Nope"))
        assert exc_info.value.field == "user_email"

        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(html_body="", reservation_id="", type="Nope"))
        assert exc_info.value.field == "html_body"

    def test_validation_error_str_is_message(self):
        with pytest.raises(NotificationValidationError) as exc_info:
            create_notification(**_params(id=""))

        assert str(exc_info.value) == "Notification id must be a non-empty string."


class TestTransitions:
    """Tests for mark_sent and mark_failed."""

    def test_mark_sent(self, make_notification):
        pending = make_notification()
        sent = mark_sent(pending)

        assert sent.status == NotificationStatus.SENT
        assert sent.sent_at is not None
        assert sent.updated_at == sent.sent_at
        assert sent.updated_at >= pending.updated_at
        assert sent.retry_count == 0

    def test_mark_failed(self, make_notification):
        pending = make_notification()
        failed = mark_failed(pending, "Mailbox unavailable")

        assert failed.status == NotificationStatus.FAILED
        assert failed.failure_reason == "Mailbox unavailable"
        assert failed.retry_count == 1
        assert failed.sent_at is None

    def test_retry_count_accumulates(self, make_notification):
        notification = make_notification()
        for _ in range(3):
            notification = mark_failed(notification, "timeout")

        assert notification.retry_count == 3
        assert notification.status == NotificationStatus.FAILED

    def test_failed_can_be_marked_sent(self, make_notification):
        failed = mark_failed(make_notification(), "timeout")
        sent = mark_sent(failed)

        assert sent.status == NotificationStatus.SENT
        assert sent.retry_count == 1

    def test_sent_is_terminal(self, make_notification):
        sent = mark_sent(make_notification())

        with pytest.raises(InvalidStateTransition):
            mark_sent(sent)

        with pytest.raises(InvalidStateTransition) as exc_info:
            mark_failed(sent, "late bounce")

        assert exc_info.value.current_status == "Sent"
        assert exc_info.value.target_status == "Failed"

    def test_transitions_do_not_mutate_input(self, make_notification):
        pending = make_notification()
        snapshot = pending.model_dump()

        mark_sent(pending)
        mark_failed(pending, "boom")

        assert pending.model_dump() == snapshot

    def test_created_at_preserved(self, make_notification):
        pending = make_notification()
        failed = mark_failed(pending, "boom")
        sent = mark_sent(failed)

        assert failed.created_at == pending.created_at
        assert sent.created_at == pending.created_at


class TestNotificationModel:
    """Tests for the Notification model itself."""

    def test_naive_timestamps_are_treated_as_utc(self, make_notification):
        naive = datetime(2026, 10, 19, 12, 0, 0)
        notification = make_notification().model_copy(update={"created_at": naive})
        rebuilt = type(notification).model_validate(notification.model_dump())

        assert rebuilt.created_at == naive.replace(tzinfo=timezone.utc)

    def test_offset_timestamps_are_converted_to_utc(self, make_notification):
        data = make_notification().model_dump()
        data["updated_at"] = datetime(2026, 10, 19, 14, 0, tzinfo=timezone(timedelta(hours=2)))
        rebuilt = type(make_notification()).model_validate(data)

        assert rebuilt.updated_at == datetime(2026, 10, 19, 12, 0, tzinfo=timezone.utc)
        assert rebuilt.updated_at.tzinfo == timezone.utc

    def test_notification_is_frozen(self, make_notification):
        notification = make_notification()
        with pytest.raises(Exception):
            notification.status = "Sent"

    def test_enum_values(self):
        assert [t.value for t in NotificationType] == [
            "ReservationCreated",
            "ReservationCollected",
            "ReservationReturned",
            "ReservationCancelled",
            "ReservationExpired",
            "ReservationOverdue",
        ]
        assert [s.value for s in NotificationStatus] == ["Pending", "Sent", "Failed"]
