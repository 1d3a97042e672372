"""Email notifications for device reservation lifecycle events."""

__version__ = "0.1.0"
