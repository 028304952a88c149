"""Logging setup for policy-gate.

Records go to stderr; stdout is reserved for PASS/WARN/FAIL lines. The
``structured`` format appends the context bound with
:func:`get_logger_with_context` as ``key=value`` pairs, e.g.::

    2026-01-05 10:12:01,220 DEBUG policy_gate.checks Running against /repo check=secrets
"""

import logging
import os
import sys
from enum import Enum
from typing import Any, Mapping

LOG_LEVEL_ENVVAR = "POLICY_GATE_LOG_LEVEL"
LOG_FORMAT_ENVVAR = "POLICY_GATE_LOG_FORMAT"

PLAIN_FORMAT = "%(levelname)s: %(message)s"
STRUCTURED_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


class LogFormat(str, Enum):
    """Output format of log records."""

    PLAIN = "plain"
    STRUCTURED = "structured"


def _render_value(value: Any) -> str:
    text = str(value)
    return f'"{text}"' if not text or " " in text else text


class StructuredFormatter(logging.Formatter):
    """Formatter that appends ``key=value`` context fields to messages."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        fields: Mapping[str, Any] = getattr(record, "context", None) or {}
        if not fields:
            return message
        pairs = " ".join(f"{key}={_render_value(value)}" for key, value in fields.items())
        return f"{message} {pairs}"


def configure_logging(level: str = "INFO", log_format: LogFormat | str = LogFormat.PLAIN) -> None:
    """Install a single stderr handler on the ``policy_gate`` logger.

    Args:
        level: Log level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: ``plain`` or ``structured``
    """
    log_format = LogFormat(log_format)
    handler = logging.StreamHandler(sys.stderr)
    if log_format == LogFormat.STRUCTURED:
        handler.setFormatter(StructuredFormatter(STRUCTURED_FORMAT))
    else:
        handler.setFormatter(logging.Formatter(PLAIN_FORMAT))

    logger = logging.getLogger("policy_gate")
    logger.setLevel(getattr(logging, level.upper()))
    logger.handlers = [handler]
    logger.propagate = False


def configure_from_env(default_level: str = "INFO") -> None:
    """Configure logging from ``POLICY_GATE_LOG_LEVEL`` and ``POLICY_GATE_LOG_FORMAT``.

    Used by the single-check console scripts, which have no global options.
    """
    level = os.environ.get(LOG_LEVEL_ENVVAR) or default_level
    log_format = (os.environ.get(LOG_FORMAT_ENVVAR) or LogFormat.PLAIN.value).lower()
    configure_logging(level=level, log_format=log_format)


def get_logger(name: str) -> logging.Logger:
    """Get a logger for a policy-gate module.

    Args:
        name: Module name (will be prefixed with policy_gate)

    Returns:
        Configured logger
    """
    if not name.startswith("policy_gate"):
        name = f"policy_gate.{name}"
    return logging.getLogger(name)


class ContextAdapter(logging.LoggerAdapter):
    """Adapter that attaches bound context to every record.

    Per-call ``extra={"context": {...}}`` values are merged over the bound
    context.
    """

    def process(self, msg: str, kwargs: dict[str, Any]) -> tuple[str, dict[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["context"] = {**self.extra, **(extra.get("context") or {})}
        kwargs["extra"] = extra
        return msg, kwargs


def get_logger_with_context(name: str, **context: Any) -> ContextAdapter:
    """Get a logger that tags every message with context fields.

    Args:
        name: Module name
        **context: Context fields, e.g. ``check="secrets"``
    """
    return ContextAdapter(get_logger(name), context)
