"""
Tests for settings loading and logging setup.
"""
import logging
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from form_sanitizer.core.config import DEFAULT_URL_PROTOCOLS, Settings, get_settings
from form_sanitizer.core.logging import SafeLogger, get_safe_logger, setup_logging


@pytest.fixture
def clean_env(monkeypatch):
    for name in ("SERVICE_ENV", "ALLOWED_URL_PROTOCOLS", "STRICT_SANITIZE_TYPES"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def restore_root_logger():
    root = logging.getLogger()
    handlers = root.handlers[:]
    level = root.level
    yield root
    root.handlers[:] = handlers
    root.setLevel(level)


class TestSettings:
    """Tests for environment-driven settings."""

    def test_defaults(self, clean_env):
        settings = Settings()
        assert settings.service_env == "dev"
        assert settings.strict_sanitize_types is False
        assert settings.allowed_url_protocols == DEFAULT_URL_PROTOCOLS

    def test_protocols_comma_separated(self, clean_env, monkeypatch):
        monkeypatch.setenv("ALLOWED_URL_PROTOCOLS", "HTTPS, http ,https,mailto:")
        assert Settings().allowed_url_protocols == ["https", "http", "mailto"]

    def test_protocols_json(self, clean_env, monkeypatch):
        monkeypatch.setenv("ALLOWED_URL_PROTOCOLS", '["https", "ftp"]')
        assert Settings().allowed_url_protocols == ["https", "ftp"]

    def test_protocols_invalid_json(self, clean_env, monkeypatch):
        monkeypatch.setenv("ALLOWED_URL_PROTOCOLS", '["https",')
        with pytest.raises(ValidationError):
            Settings()

    def test_protocols_must_not_be_empty(self, clean_env):
        with pytest.raises(ValidationError):
            Settings(allowed_url_protocols=" , ")

    def test_strict_from_env(self, clean_env, monkeypatch):
        monkeypatch.setenv("STRICT_SANITIZE_TYPES", "true")
        assert Settings().strict_sanitize_types is True

    def test_invalid_env_rejected(self, clean_env, monkeypatch):
        monkeypatch.setenv("SERVICE_ENV", "qa")
        with pytest.raises(ValidationError):
            Settings()

    def test_get_settings_cached(self):
        assert get_settings() is get_settings()


class TestLogging:
    """Tests for logging setup and the value-safe logger."""

    def test_dev_logs_debug(self, restore_root_logger):
        with patch("form_sanitizer.core.logging.get_settings", return_value=Settings(service_env="dev")):
            setup_logging()
        assert restore_root_logger.level == logging.DEBUG

    def test_prod_logs_info(self, restore_root_logger):
        with patch("form_sanitizer.core.logging.get_settings", return_value=Settings(service_env="prod")):
            setup_logging()
        assert restore_root_logger.level == logging.INFO

    def test_get_safe_logger(self):
        assert isinstance(get_safe_logger("form_sanitizer.test"), SafeLogger)

    def test_unsafe_context_dropped(self, caplog):
        caplog.set_level(logging.INFO, logger="form_sanitizer.test")
        logger = get_safe_logger("form_sanitizer.test")

        logger.info("Checked", field_name="email", value="ann@example.com")

        assert "Checked | field_name=email" in caplog.text
        assert "ann@example.com" not in caplog.text

    def test_error_code_included(self, caplog):
        caplog.set_level(logging.INFO, logger="form_sanitizer.test")
        logger = get_safe_logger("form_sanitizer.test")

        logger.error("Failed", error_code="INVALID_FIELD_RULE")

        assert "Failed | error_code=INVALID_FIELD_RULE" in caplog.text
