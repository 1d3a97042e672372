"""Environment variable loading and validation."""

import os
from typing import Optional

from email_validator import EmailNotValidError, validate_email

from .exceptions import ConfigurationError

DEFAULT_DATABASE_URL = "sqlite:///./data/notifications.db"
VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


class EnvironmentConfig:
    """Environment variable configuration holder (SMTP credentials, storage)."""

    def __init__(
        self,
        smtp_host: str,
        smtp_port: int,
        smtp_user: Optional[str],
        smtp_pass: Optional[str],
        sender_address: str,
        smtp_sender_name: Optional[str] = None,
        log_level: Optional[str] = None,
        database_url: Optional[str] = None,
    ):
        self.smtp_host = smtp_host
        self.smtp_port = smtp_port
        self.smtp_user = smtp_user
        self.smtp_pass = smtp_pass
        self.sender_address = sender_address
        self.smtp_sender_name = smtp_sender_name or "Device Loan System"
        self.log_level = log_level
        self.database_url = database_url or DEFAULT_DATABASE_URL


def load_environment_config(require_smtp: bool = True) -> EnvironmentConfig:
    """
    Load and validate environment variables.

    Required environment variables:
    - SMTP_HOST: SMTP server hostname
    - SMTP_PORT: SMTP server port (1-65535)
    - SMTP_SENDER_ADDRESS: Address notifications are sent from

    Optional environment variables:
    - SMTP_USER / SMTP_PASS: SMTP authentication (both or neither)
    - SMTP_SENDER_NAME: Display name for the sender
    - LOG_LEVEL: Override log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    - DATABASE_URL: Notification store URL (default: sqlite:///./data/notifications.db)

    Args:
        require_smtp: When False (commands that never send email), the SMTP
            variables may be absent but are still validated if present

    Returns:
        EnvironmentConfig object with validated values

    Raises:
        ConfigurationError: If required variables are missing or invalid
    """
    errors = []

    smtp_host = os.getenv("SMTP_HOST")
    smtp_port_str = os.getenv("SMTP_PORT")
    sender_address = os.getenv("SMTP_SENDER_ADDRESS")

    smtp_user = os.getenv("SMTP_USER")
    smtp_pass = os.getenv("SMTP_PASS")
    smtp_sender_name = os.getenv("SMTP_SENDER_NAME")
    log_level = os.getenv("LOG_LEVEL")
    database_url = os.getenv("DATABASE_URL")

    if require_smtp and not smtp_host:
        errors.append("Missing required environment variable: SMTP_HOST")

    if require_smtp and not smtp_port_str:
        errors.append("Missing required environment variable: SMTP_PORT")

    if require_smtp and not sender_address:
        errors.append("Missing required environment variable: SMTP_SENDER_ADDRESS")

    smtp_port = None
    if smtp_port_str:
        try:
            smtp_port = int(smtp_port_str)
            if smtp_port < 1 or smtp_port > 65535:
                errors.append(f"Invalid SMTP_PORT: {smtp_port}. Must be between 1 and 65535.")
        except ValueError:
            errors.append(f"Invalid SMTP_PORT: '{smtp_port_str}'. Must be a valid integer.")

    if sender_address:
        try:
            sender_address = validate_email(
                sender_address.strip(), check_deliverability=False
            ).normalized
        except EmailNotValidError as e:
            errors.append(f"Invalid SMTP_SENDER_ADDRESS: '{sender_address}' - {e}")

    if log_level:
        if log_level.upper() not in VALID_LOG_LEVELS:
            errors.append(
                f"Invalid LOG_LEVEL: '{log_level}'. Must be one of: {', '.join(VALID_LOG_LEVELS)}"
            )
        else:
            log_level = log_level.upper()

    if smtp_user and not smtp_pass:
        errors.append("SMTP_USER is set but SMTP_PASS is not. Both must be set for authentication.")
    elif smtp_pass and not smtp_user:
        errors.append("SMTP_PASS is set but SMTP_USER is not. Both must be set for authentication.")

    if errors:
        raise ConfigurationError(
            "Environment variable validation failed",
            errors=errors,
            suggestions=[
                "Copy .env.example to .env and fill in your SMTP settings",
                "Ensure all required environment variables are set",
                "Verify SMTP_PORT is a number between 1 and 65535",
            ],
        )

    return EnvironmentConfig(
        smtp_host=smtp_host,
        smtp_port=smtp_port,
        smtp_user=smtp_user,
        smtp_pass=smtp_pass,
        sender_address=sender_address,
        smtp_sender_name=smtp_sender_name,
        log_level=log_level,
        database_url=database_url,
    )
