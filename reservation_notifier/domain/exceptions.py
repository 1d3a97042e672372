"""Domain exceptions for notification construction and state transitions."""


class NotificationDomainError(Exception):
    """Base exception for notification domain rule violations."""

    pass


class NotificationValidationError(NotificationDomainError):
    """Raised when notification construction input is malformed.

    Attributes:
        field: Name of the first invalid field encountered
        message: Human-readable description of the problem
    """

    def __init__(self, field: str, message: str):
        self.field = field
        self.message = message
        super().__init__(message)


class InvalidStateTransition(NotificationDomainError):
    """Raised when a notification is moved out of a terminal Sent state."""

    def __init__(self, notification_id: str, current_status: str, target_status: str):
        self.notification_id = notification_id
        self.current_status = current_status
        self.target_status = target_status
        super().__init__(
            f"Cannot transition notification {notification_id} "
            f"from {current_status} to {target_status}"
        )
