"""Configuration schema models using Pydantic."""

from enum import Enum

from email_validator import EmailNotValidError, validate_email
from pydantic import BaseModel, Field, field_validator

DEFAULT_APP_NAME = "Device Loan System"
DEFAULT_SUPPORT_EMAIL = "support@deviceloan.edu"


class LogLevel(str, Enum):
    """Logging levels."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class LogFormat(str, Enum):
    """Log output formats."""

    JSON = "json"
    KEY_VALUE = "key-value"


class BrandingConfig(BaseModel):
    """Product name and contact details rendered into every email."""

    app_name: str = Field(
        DEFAULT_APP_NAME, min_length=1, description="Product name used as subject prefix"
    )
    support_email: str = Field(
        DEFAULT_SUPPORT_EMAIL, description="Contact address shown in email footers"
    )

    @field_validator("app_name")
    @classmethod
    def strip_app_name(cls, v: str) -> str:
        """Strip whitespace from the product name."""
        stripped = v.strip()
        if not stripped:
            raise ValueError("app_name cannot be empty or whitespace-only")
        return stripped

    @field_validator("support_email")
    @classmethod
    def validate_support_email(cls, v: str) -> str:
        """Validate and normalize the support address."""
        try:
            return validate_email(v.strip(), check_deliverability=False).normalized
        except EmailNotValidError as e:
            raise ValueError(f"Invalid support_email '{v}': {e}") from e


class EmailConfig(BaseModel):
    """Email transport settings."""

    use_tls: bool = Field(True, description="Use STARTTLS (ignored on port 465, which is implicit TLS)")


class LoggingConfig(BaseModel):
    """Logging configuration."""

    level: LogLevel = Field(LogLevel.INFO, description="Log level")
    format: LogFormat = Field(
        LogFormat.KEY_VALUE, description="Log output format (json or key-value)"
    )

    model_config = {"use_enum_values": True}


class AppConfig(BaseModel):
    """Root configuration object for the reservation notifier.

    Every section has defaults, so an empty or missing config file yields a
    usable configuration; SMTP credentials come from the environment.
    """

    branding: BrandingConfig = Field(
        default_factory=BrandingConfig, description="Branding used in email templates"
    )
    email: EmailConfig = Field(default_factory=EmailConfig, description="Email settings")
    logging: LoggingConfig = Field(
        default_factory=LoggingConfig, description="Logging configuration"
    )
