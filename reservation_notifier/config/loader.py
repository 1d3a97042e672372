"""Configuration loader for the reservation notifier."""

from pathlib import Path
from typing import Any, Dict, Optional, Tuple

import yaml
from pydantic import ValidationError

from .environment import EnvironmentConfig, load_environment_config
from .exceptions import ConfigurationError
from .models import AppConfig
from .validators import check_for_warnings, emit_warnings

DEFAULT_CONFIG_LOCATIONS = (
    Path("config.yaml"),
    Path("config") / "config.yaml",
)


def load_config(
    config_path: Optional[Path] = None, require_smtp: bool = True
) -> Tuple[AppConfig, EnvironmentConfig]:
    """
    Load and validate configuration from YAML file and environment variables.

    Args:
        config_path: Optional path to configuration file
        require_smtp: Whether SMTP environment variables are mandatory

    Returns:
        Tuple of (AppConfig, EnvironmentConfig) with validated configuration

    Raises:
        ConfigurationError: If configuration is invalid or an explicit file is missing
    """
    app_config = load_app_config(config_path)

    try:
        env_config = load_environment_config(require_smtp=require_smtp)
    except ConfigurationError:
        raise
    except Exception as e:
        raise ConfigurationError(
            f"Failed to load environment configuration: {e}",
            suggestions=["Copy .env.example to .env and fill in your SMTP settings"],
        ) from e

    return app_config, env_config


def load_app_config(config_path: Optional[Path] = None) -> AppConfig:
    """
    Load the YAML configuration file into an AppConfig.

    Lookup order:
    1. The provided config_path (must exist)
    2. config.yaml in the current directory
    3. ./config/config.yaml
    4. Built-in defaults

    Raises:
        ConfigurationError: If the file cannot be read, parsed or validated
    """
    config_file = _find_config_file(config_path)
    if config_file is None:
        return AppConfig()

    config_dict = _read_yaml(config_file)

    warnings = check_for_warnings(config_dict)
    if warnings:
        emit_warnings(warnings)

    try:
        return AppConfig.model_validate(config_dict)
    except ValidationError as e:
        raise ConfigurationError(
            "Configuration validation failed",
            errors=[_format_validation_error(error) for error in e.errors()],
            suggestions=[
                "Review config.example.yaml for correct format",
                "Verify field types match the expected schema",
            ],
        ) from e


def _read_yaml(config_file: Path) -> Dict[str, Any]:
    try:
        with open(config_file, "r", encoding="utf-8") as f:
            config_dict = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigurationError(
            f"Failed to parse YAML configuration: {e}",
            suggestions=[
                "Check YAML syntax in your config file",
                "Ensure proper indentation (use spaces, not tabs)",
            ],
        ) from e
    except OSError as e:
        raise ConfigurationError(
            f"Failed to read configuration file: {e}",
            suggestions=[f"Ensure {config_file} is readable", "Check file permissions"],
        ) from e

    # An empty file means "all defaults"
    if config_dict is None:
        return {}

    if not isinstance(config_dict, dict):
        raise ConfigurationError(
            f"Configuration file {config_file} must contain a mapping at the top level",
            suggestions=["Review config.example.yaml for correct format"],
        )

    return config_dict


def _format_validation_error(error: Dict[str, Any]) -> str:
    field_path = " -> ".join(str(loc) for loc in error["loc"])
    error_type = error["type"]

    if error_type == "missing":
        return f"Missing required field: {field_path}"
    if error_type in ("string_type", "bool_type", "bool_parsing"):
        return f"Invalid type for '{field_path}': got {error.get('input')!r}"
    if error_type == "enum":
        return f"Invalid value for '{field_path}': {error['msg']}"
    return f"{field_path}: {error['msg']}"


def _find_config_file(config_path: Optional[Path] = None) -> Optional[Path]:
    """
    Find the configuration file.

    Returns:
        Path to the configuration file, or None when no default location exists

    Raises:
        ConfigurationError: If an explicitly provided path does not exist
    """
    if config_path:
        if not config_path.exists():
            raise ConfigurationError(
                f"Specified configuration file not found: {config_path}",
                suggestions=[f"Ensure {config_path} exists", "Check the path and try again"],
            )
        return config_path

    for candidate in DEFAULT_CONFIG_LOCATIONS:
        if candidate.exists():
            return candidate

    return None
