"""Tests for configuration loading (YAML file and environment variables)."""

import warnings

import pytest

from reservation_notifier.config import (
    AppConfig,
    BrandingConfig,
    ConfigurationError,
    LogFormat,
    load_app_config,
    load_config,
    load_environment_config,
)
from reservation_notifier.config.environment import DEFAULT_DATABASE_URL
from reservation_notifier.config.validators import check_for_warnings

VALID_CONFIG = """
branding:
  app_name: "Campus Device Loans"
  support_email: "Help@Campus.edu"
email:
  use_tls: true
logging:
  level: DEBUG
  format: json
"""


class TestAppConfigLoading:
    """Test configuration loading from YAML files."""

    def test_load_valid_config(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(VALID_CONFIG)

        app_config = load_app_config(config_file)

        assert app_config.branding.app_name == "Campus Device Loans"
        assert app_config.branding.support_email == "Help@campus.edu"
        assert app_config.email.use_tls is True
        assert app_config.logging.level == "DEBUG"
        assert app_config.logging.format == "json"

    def test_empty_file_uses_defaults(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("")

        with warnings.catch_warnings():
            warnings.simplefilter("ignore")
            app_config = load_app_config(config_file)

        assert app_config == AppConfig()
        assert app_config.branding.app_name == "Device Loan System"
        assert app_config.branding.support_email == "support@deviceloan.edu"
        assert app_config.logging.format == LogFormat.KEY_VALUE.value

    def test_no_file_uses_defaults(self, tmp_path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert load_app_config() == AppConfig()

    def test_default_location_is_found(self, tmp_path, monkeypatch):
        (tmp_path / "config").mkdir()
        (tmp_path / "config" / "config.yaml").write_text(VALID_CONFIG)
        monkeypatch.chdir(tmp_path)

        assert load_app_config().branding.app_name == "Campus Device Loans"

    def test_missing_explicit_file_raises(self, tmp_path):
        with pytest.raises(ConfigurationError, match="not found"):
            load_app_config(tmp_path / "missing.yaml")

    def test_invalid_yaml_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("branding: [unclosed")

        with pytest.raises(ConfigurationError, match="Failed to parse YAML"):
            load_app_config(config_file)

    def test_non_mapping_raises(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("- just\n- a list\n")

        with pytest.raises(ConfigurationError, match="mapping"):
            load_app_config(config_file)

    def test_invalid_values_collected(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text(
            """
branding:
  app_name: "Loans"
  support_email: "not-an-email"
logging:
  level: LOUD
"""
        )

        with pytest.raises(ConfigurationError) as exc_info:
            load_app_config(config_file)

        assert len(exc_info.value.errors) == 2
        message = str(exc_info.value)
        assert "branding -> support_email" in message
        assert "logging -> level" in message

    def test_blank_app_name_rejected(self):
        with pytest.raises(ValueError):
            BrandingConfig(app_name="   ")


class TestConfigWarnings:
    """Soft configuration issues are reported as warnings."""

    def test_default_branding_warns(self):
        warning_messages = check_for_warnings({})

        assert any("branding.app_name" in w for w in warning_messages)
        assert any("branding.support_email" in w for w in warning_messages)

    def test_tls_disabled_warns(self):
        warning_messages = check_for_warnings(
            {
                "branding": {"app_name": "Loans", "support_email": "help@campus.edu"},
                "email": {"use_tls": False},
            }
        )

        assert len(warning_messages) == 1
        assert "use_tls" in warning_messages[0]

    def test_warnings_emitted_on_load(self, tmp_path):
        config_file = tmp_path / "config.yaml"
        config_file.write_text("email:\n  use_tls: false\n")

        with pytest.warns(UserWarning, match="use_tls"):
            load_app_config(config_file)


class TestEnvironmentConfig:
    """Test environment variable loading."""

    def test_load_valid_environment(self, mock_env_vars):
        env_config = load_environment_config()

        assert env_config.smtp_host == "smtp.example.com"
        assert env_config.smtp_port == 587
        assert env_config.sender_address == "noreply@deviceloan.edu"
        assert env_config.smtp_user is None
        assert env_config.smtp_sender_name == "Device Loan System"
        assert env_config.database_url == DEFAULT_DATABASE_URL

    def test_optional_values(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_USER", "mailer")
        mock_env_vars.setenv("SMTP_PASS", "secret")
        mock_env_vars.setenv("SMTP_SENDER_NAME", "IT Desk")
        mock_env_vars.setenv("LOG_LEVEL", "debug")
        mock_env_vars.setenv("DATABASE_URL", "sqlite:///:memory:")

        env_config = load_environment_config()

        assert env_config.smtp_user == "mailer"
        assert env_config.smtp_pass == "secret"
        assert env_config.smtp_sender_name == "IT Desk"
        assert env_config.log_level == "DEBUG"
        assert env_config.database_url == "sqlite:///:memory:"

    def test_missing_required_variables_collected(self, clean_env):
        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        errors = exc_info.value.errors
        assert "Missing required environment variable: SMTP_HOST" in errors
        assert "Missing required environment variable: SMTP_PORT" in errors
        assert "Missing required environment variable: SMTP_SENDER_ADDRESS" in errors

    def test_smtp_not_required(self, clean_env):
        env_config = load_environment_config(require_smtp=False)

        assert env_config.smtp_host is None
        assert env_config.database_url == DEFAULT_DATABASE_URL

    @pytest.mark.parametrize("port", ["0", "70000", "smtp"])
    def test_invalid_port(self, mock_env_vars, port):
        mock_env_vars.setenv("SMTP_PORT", port)

        with pytest.raises(ConfigurationError, match="Invalid SMTP_PORT"):
            load_environment_config()

    def test_invalid_sender_address(self, mock_env_vars):
        mock_env_vars.setenv("SMTP_SENDER_ADDRESS", "noreply")

        with pytest.raises(ConfigurationError, match="Invalid SMTP_SENDER_ADDRESS"):
            load_environment_config()

    def test_invalid_log_level(self, mock_env_vars):
        mock_env_vars.setenv("LOG_LEVEL", "LOUD")

        with pytest.raises(ConfigurationError, match="Invalid LOG_LEVEL"):
            load_environment_config()

    @pytest.mark.parametrize("present,absent", [("SMTP_USER", "SMTP_PASS"), ("SMTP_PASS", "SMTP_USER")])
    def test_credentials_must_come_in_pairs(self, mock_env_vars, present, absent):
        mock_env_vars.setenv(present, "value")

        with pytest.raises(ConfigurationError) as exc_info:
            load_environment_config()

        assert any(absent in error for error in exc_info.value.errors)


def test_load_config_returns_both(tmp_path, mock_env_vars):
    config_file = tmp_path / "config.yaml"
    config_file.write_text(VALID_CONFIG)

    app_config, env_config = load_config(config_file)

    assert app_config.branding.app_name == "Campus Device Loans"
    assert env_config.smtp_host == "smtp.example.com"


def test_configuration_error_formatting():
    error = ConfigurationError(
        "Environment variable validation failed",
        errors=["Missing SMTP_HOST"],
        suggestions=["Copy .env.example to .env"],
    )

    text = str(error)
    assert text.startswith("Environment variable validation failed")
    assert "1. Missing SMTP_HOST" in text
    assert "- Copy .env.example to .env" in text
