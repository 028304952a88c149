"""Unit tests for logging helpers."""

import logging

import pytest

from policy_gate.utils.logging import (
    LOG_FORMAT_ENVVAR,
    LOG_LEVEL_ENVVAR,
    ContextAdapter,
    LogFormat,
    StructuredFormatter,
    configure_from_env,
    configure_logging,
    get_logger,
    get_logger_with_context,
)


def make_record(msg, **attrs):
    record = logging.LogRecord("policy_gate.checks", logging.INFO, __file__, 1, msg, None, None)
    for key, value in attrs.items():
        setattr(record, key, value)
    return record


class TestStructuredFormatter:
    """Tests for StructuredFormatter."""

    def test_appends_context(self):
        """Test context fields are appended as key=value."""
        formatter = StructuredFormatter("%(message)s")
        record = make_record("scanned", context={"check": "secrets", "files": 3})
        assert formatter.format(record) == "scanned check=secrets files=3"

    def test_quotes_values_with_spaces(self):
        formatter = StructuredFormatter("%(message)s")
        record = make_record("scanned", context={"root": "/tmp/my repo", "env": ""})
        assert formatter.format(record) == 'scanned root="/tmp/my repo" env=""'

    def test_plain_record(self):
        """Test records without context are unchanged."""
        formatter = StructuredFormatter("%(message)s")
        assert formatter.format(make_record("done")) == "done"


class TestGetLogger:
    """Tests for logger lookup."""

    def test_prefix_added(self):
        assert get_logger("checks").name == "policy_gate.checks"

    def test_prefix_kept(self):
        assert get_logger("policy_gate.cli").name == "policy_gate.cli"

    def test_context_adapter(self):
        """Test the adapter carries its bound context into extra."""
        adapter = get_logger_with_context("checks", check="urls")
        assert isinstance(adapter, ContextAdapter)
        msg, kwargs = adapter.process("hello", {})
        assert msg == "hello"
        assert kwargs["extra"]["context"] == {"check": "urls"}

    def test_call_context_merged(self):
        """Test per-call context is merged over the bound context."""
        adapter = get_logger_with_context("checks", check="urls", tier="all")
        _, kwargs = adapter.process("hello", {"extra": {"context": {"tier": "prod"}}})
        assert kwargs["extra"]["context"] == {"check": "urls", "tier": "prod"}


class TestConfigureLogging:
    """Tests for logging configuration."""

    def test_structured(self):
        """Test the package logger gets one structured handler and the level."""
        configure_logging("DEBUG", log_format=LogFormat.STRUCTURED)
        logger = logging.getLogger("policy_gate")
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)
        assert logger.propagate is False

    def test_plain(self):
        configure_logging("WARNING", log_format="plain")
        logger = logging.getLogger("policy_gate")
        assert logger.level == logging.WARNING
        assert not isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_unknown_format(self):
        with pytest.raises(ValueError):
            configure_logging("INFO", log_format="json")

    def test_from_env(self, monkeypatch):
        """Test the console-script configuration reads the environment."""
        monkeypatch.setenv(LOG_LEVEL_ENVVAR, "debug")
        monkeypatch.setenv(LOG_FORMAT_ENVVAR, "Structured")
        configure_from_env()
        logger = logging.getLogger("policy_gate")
        assert logger.level == logging.DEBUG
        assert isinstance(logger.handlers[0].formatter, StructuredFormatter)

    def test_from_env_defaults(self, monkeypatch):
        monkeypatch.delenv(LOG_LEVEL_ENVVAR, raising=False)
        monkeypatch.delenv(LOG_FORMAT_ENVVAR, raising=False)
        configure_from_env()
        logger = logging.getLogger("policy_gate")
        assert logger.level == logging.INFO
        assert not isinstance(logger.handlers[0].formatter, StructuredFormatter)
