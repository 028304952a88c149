"""Data models for policy-gate."""

from policy_gate.models.common import GateError, Status
from policy_gate.models.env import EnvironmentMatrix, EnvironmentProfile, Tier
from policy_gate.models.findings import AllowlistEntry, FindingRecord, Location, SecretAllowlist
from policy_gate.models.policy import AnyUsageBudgets, BundleBudgets, CoverageThresholds, PerformanceBudgets
from policy_gate.models.report import CheckItem, CheckReport, CheckResult

__all__ = [
    "GateError",
    "Status",
    "EnvironmentMatrix",
    "EnvironmentProfile",
    "Tier",
    "AllowlistEntry",
    "FindingRecord",
    "Location",
    "SecretAllowlist",
    "AnyUsageBudgets",
    "BundleBudgets",
    "CoverageThresholds",
    "PerformanceBudgets",
    "CheckItem",
    "CheckReport",
    "CheckResult",
]
