"""Context propagation for structured logging.

Fields pushed here (event_id, reservation_id, notification_id, ...) are
injected into every log record emitted within the scope. Context lives in a
ContextVar, so concurrent event invocations never see each other's fields.
"""

from contextvars import ContextVar, Token
from typing import Any, Dict, Optional

LogContextVar: ContextVar[Dict[str, Any]] = ContextVar("log_context", default={})


def get_log_context() -> Dict[str, Any]:
    """Get a copy of the current logging context."""
    return LogContextVar.get().copy()


def push_log_context(**kwargs) -> Token:
    """Merge fields into the logging context.

    Fields whose value is None are dropped so that optional identifiers
    (e.g. a missing reservation id on a malformed event) do not appear as
    null noise in every line.

    Returns:
        Token to pass to pop_log_context() to restore the previous state

    Example:
        >>> token = push_log_context(event_id="evt-1", reservation_id="res-42")
        >>> # ... all logs include event_id and reservation_id ...
        >>> pop_log_context(token)
    """
    fields = {key: value for key, value in kwargs.items() if value is not None}
    return LogContextVar.set({**LogContextVar.get(), **fields})


def pop_log_context(token: Token) -> None:
    """Restore the logging context to the state captured by *token*."""
    LogContextVar.reset(token)


def clear_log_context() -> None:
    """Clear all logging context fields (primarily for tests)."""
    LogContextVar.set({})


class log_context:
    """Context manager for scoped logging context.

    Example:
        >>> with log_context(event_id="evt-1", notification_type="ReservationCreated"):
        ...     logger.info("Processing event")
    """

    def __init__(self, **kwargs):
        self.kwargs = kwargs
        self.token: Optional[Token] = None

    def __enter__(self):
        self.token = push_log_context(**self.kwargs)
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self.token is not None:
            pop_log_context(self.token)
        return False
