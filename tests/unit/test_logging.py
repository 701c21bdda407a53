"""Tests for logging configuration."""

import logging

import pytest
import structlog

from aeorank.config import get_settings
from aeorank.logging import get_logger, setup_logging


@pytest.fixture(autouse=True)
def reset_structlog():
    yield
    structlog.reset_defaults()


class TestSetupLogging:
    """Tests for setup_logging."""

    def test_console_renderer_in_development(self) -> None:
        """Test the console renderer is used outside production."""
        setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)

    def test_json_renderer_when_requested(self, monkeypatch) -> None:
        """Test JSON logs switch the renderer."""
        monkeypatch.setenv("AEORANK_JSON_LOGS", "true")
        get_settings.cache_clear()

        setup_logging()

        processors = structlog.get_config()["processors"]
        assert isinstance(processors[-1], structlog.processors.JSONRenderer)

    def test_http_loggers_quietened(self) -> None:
        """Test httpx and httpcore only log warnings."""
        setup_logging()

        assert logging.getLogger("httpx").level == logging.WARNING
        assert logging.getLogger("httpcore").level == logging.WARNING

    def test_get_logger(self) -> None:
        """Test a logger can be bound with context."""
        setup_logging()

        log = get_logger("aeorank.test").bind(domain="example.com")
        log.info("audit_started")
