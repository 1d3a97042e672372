"""Additional validation utilities for configuration."""

import warnings
from typing import Any, Dict, List

from .models import DEFAULT_APP_NAME, DEFAULT_SUPPORT_EMAIL


def check_for_warnings(config_dict: Dict[str, Any]) -> List[str]:
    """
    Check configuration for potential issues and return warnings.

    Args:
        config_dict: Raw configuration dictionary

    Returns:
        List of warning messages
    """
    warning_messages = []

    email = config_dict.get("email", {})
    if isinstance(email, dict) and email.get("use_tls") is False:
        warning_messages.append(
            "email.use_tls is disabled; notifications will be sent over an unencrypted "
            "connection unless SMTP_PORT is 465"
        )

    branding = config_dict.get("branding", {})
    if not isinstance(branding, dict):
        branding = {}
    if branding.get("app_name", DEFAULT_APP_NAME) == DEFAULT_APP_NAME:
        warning_messages.append(
            f"branding.app_name is not set; emails will use the default '{DEFAULT_APP_NAME}'"
        )
    if branding.get("support_email", DEFAULT_SUPPORT_EMAIL) == DEFAULT_SUPPORT_EMAIL:
        warning_messages.append(
            f"branding.support_email is not set; emails will show '{DEFAULT_SUPPORT_EMAIL}'"
        )

    return warning_messages


def emit_warnings(warning_messages: List[str]) -> None:
    """Emit warning messages using Python's warnings module."""
    for message in warning_messages:
        warnings.warn(message, UserWarning, stacklevel=2)
