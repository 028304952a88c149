"""Utility functions for policy-gate."""

from policy_gate.utils.logging import LogFormat, configure_logging, get_logger, get_logger_with_context
from policy_gate.utils.errors import (
    PolicyGateError,
    ConfigurationError,
    InvalidValueError,
    MissingArtifactError,
    ToolError,
)
from policy_gate.utils.config import GateSettings, load_settings

__all__ = [
    # Logging
    "LogFormat",
    "configure_logging",
    "get_logger",
    "get_logger_with_context",
    # Errors
    "PolicyGateError",
    "ConfigurationError",
    "InvalidValueError",
    "MissingArtifactError",
    "ToolError",
    # Settings
    "GateSettings",
    "load_settings",
]
