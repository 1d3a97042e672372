"""Shared fixtures for the reservation notifier test suite."""

from typing import Dict, List, Optional

import pytest

from reservation_notifier.domain import NotificationType, create_notification
from reservation_notifier.logging.context import clear_log_context
from reservation_notifier.notifications.models import EmailContent, EmailSendResult
from reservation_notifier.notifications.smtp_client import EmailSender
from reservation_notifier.notifications.templates import ReservationEmailData
from reservation_notifier.persistence import NotificationStore, SqlNotificationStore
from reservation_notifier.persistence.database import close_database, init_database

ENV_VARS = (
    "SMTP_HOST",
    "SMTP_PORT",
    "SMTP_USER",
    "SMTP_PASS",
    "SMTP_SENDER_ADDRESS",
    "SMTP_SENDER_NAME",
    "LOG_LEVEL",
    "DATABASE_URL",
    "ENVIRONMENT",
)


class FakeEmailSender(EmailSender):
    """EmailSender that records what it was asked to send."""

    def __init__(self, result: Optional[EmailSendResult] = None, error: Optional[Exception] = None):
        self.result = result or EmailSendResult(success=True, message_id="<msg-1@deviceloan.edu>")
        self.error = error
        self.sent: List[EmailContent] = []

    def send(self, content: EmailContent) -> EmailSendResult:
        self.sent.append(content)
        if self.error is not None:
            raise self.error
        return self.result


class RecordingStore(NotificationStore):
    """In-memory NotificationStore keeping every save in order."""

    def __init__(self):
        self.saves = []
        self.records: Dict[str, object] = {}

    def save(self, notification):
        self.saves.append(notification)
        self.records[notification.id] = notification
        return notification

    def get_by_id(self, notification_id):
        return self.records.get(notification_id)

    def list_by_user_id(self, user_id):
        return [n for n in self.records.values() if n.user_id == user_id]

    def list_by_status(self, status):
        return [n for n in self.records.values() if n.status == status]

    def delete(self, notification_id):
        self.records.pop(notification_id, None)


@pytest.fixture(autouse=True)
def clean_log_context():
    """Keep logging context from leaking between tests."""
    clear_log_context()
    yield
    clear_log_context()


@pytest.fixture
def clean_env(monkeypatch):
    """Remove every environment variable the service reads."""
    for name in ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


@pytest.fixture
def mock_env_vars(clean_env):
    """Minimal valid SMTP environment."""
    clean_env.setenv("SMTP_HOST", "smtp.example.com")
    clean_env.setenv("SMTP_PORT", "587")
    clean_env.setenv("SMTP_SENDER_ADDRESS", "noreply@deviceloan.edu")
    return clean_env


@pytest.fixture
def database():
    """In-memory SQLite database shared by every session."""
    init_database("sqlite:///:memory:")
    yield
    close_database()


@pytest.fixture
def sql_store(database):
    return SqlNotificationStore()


@pytest.fixture
def recording_store():
    return RecordingStore()


@pytest.fixture
def sender_factory():
    """The FakeEmailSender class, for tests that configure their own result."""
    return FakeEmailSender


@pytest.fixture
def fake_sender():
    return FakeEmailSender()


@pytest.fixture
def email_data():
    return ReservationEmailData(
        user_email="student@uni.edu",
        reservation_id="R1",
        user_id="U1",
        device_name="MacBook Pro 14",
        reserved_at="2026-10-19T09:00:00Z",
        expires_at="2026-10-20T09:00:00Z",
    )


@pytest.fixture
def make_notification():
    """Factory for valid Pending notifications."""

    def _make(**overrides):
        params = {
            "id": "n-1",
            "user_id": "U1",
            "user_email": "student@uni.edu",
            "type": NotificationType.RESERVATION_CREATED,
            "subject": "Device Loan System - Your reservation is confirmed",
            "html_body": "<p>Reservation R1</p>",
            "reservation_id": "R1",
            "text_body": "Reservation R1",
        }
        params.update(overrides)
        return create_notification(**params)

    return _make
