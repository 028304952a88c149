"""Error handling utilities for policy-gate.

These exceptions mean a check could not run meaningfully. Policy violations
are never raised; they are reported as failing items of a check result.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from policy_gate.models.common import GateError


class PolicyGateError(Exception):
    """Base exception for policy-gate."""

    def __init__(self, message: str, code: str = "UNKNOWN_ERROR", details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}

    def to_gate_error(self) -> GateError:
        """Convert to GateError model."""
        return GateError(code=self.code, message=self.message, details=self.details)


class ConfigurationError(PolicyGateError):
    """A required configuration file is missing or malformed."""

    def __init__(self, message: str, path: Path | str | None = None):
        details = {"path": str(path)} if path else {}
        super().__init__(message, code="CONFIG_ERROR", details=details)


class InvalidValueError(PolicyGateError):
    """A configured threshold is absent or not a finite number."""

    def __init__(self, message: str, key: str, path: Path | str | None = None):
        details: dict[str, Any] = {"key": key}
        if path:
            details["path"] = str(path)
        super().__init__(message, code="INVALID_VALUE", details=details)


class MissingArtifactError(PolicyGateError):
    """A build artifact the check measures does not exist."""

    def __init__(self, message: str, path: Path | str | None = None):
        details = {"path": str(path)} if path else {}
        super().__init__(message, code="MISSING_ARTIFACT", details=details)


class ToolError(PolicyGateError):
    """An external tool could not be run or produced unusable output."""

    def __init__(self, message: str, command: list[str] | None = None):
        details = {"command": command} if command else {}
        super().__init__(message, code="TOOL_ERROR", details=details)
