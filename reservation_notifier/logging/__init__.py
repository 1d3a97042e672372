"""Structured logging for the reservation notifier.

Modules log through get_logger(__name__, component=...) so every record
names the layer it came from (events, notification, smtp, database, cli).
"""

import logging
from typing import Optional, Union

from .config import configure_logging
from .context import clear_log_context, get_log_context, log_context


class ComponentLoggerAdapter(logging.LoggerAdapter):
    """LoggerAdapter that merges the default component with per-call extra."""

    def process(self, msg, kwargs):
        # Call's extra takes precedence over the adapter's defaults
        kwargs["extra"] = {**self.extra, **kwargs.get("extra", {})}
        return msg, kwargs


def get_logger(
    name: str, component: Optional[str] = None
) -> Union[logging.Logger, ComponentLoggerAdapter]:
    """Get a logger with an optional default component field.

    Example:
        >>> logger = get_logger(__name__, component="notification")
        >>> logger.info("Notification sent", extra={"event": "notification.send.success"})
    """
    logger = logging.getLogger(name)

    if component:
        return ComponentLoggerAdapter(logger, {"component": component})

    return logger


__all__ = [
    "get_logger",
    "configure_logging",
    "log_context",
    "get_log_context",
    "clear_log_context",
    "ComponentLoggerAdapter",
]
