"""The fixed set of policy checks.

Each check is a standalone function over a :class:`FileSource` and its own
settings. :func:`run_check` dispatches by name and writes the check's JSON
report when it has one.
"""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from policy_gate.checks.any_usage import check_any_usage
from policy_gate.checks.audit import check_dependencies, run_audit_tool
from policy_gate.checks.bundle import check_bundle_budgets
from policy_gate.checks.component_size import check_component_size
from policy_gate.checks.coverage import check_coverage
from policy_gate.checks.deprecated_endpoints import check_deprecated_endpoints
from policy_gate.checks.env_config import check_env_config
from policy_gate.checks.feature_size import check_feature_size
from policy_gate.checks.performance import check_performance_budgets
from policy_gate.checks.secrets import check_secrets, git_tracked_files
from policy_gate.checks.spa_rewrite import check_spa_rewrite
from policy_gate.checks.style_tokens import check_style_tokens
from policy_gate.checks.suppressions import check_suppressions
from policy_gate.checks.urls import check_urls
from policy_gate.core.report import write_report
from policy_gate.core.scope import DiskFileSource, FileSource
from policy_gate.models.report import CheckResult
from policy_gate.utils.config import GateSettings
from policy_gate.utils.logging import get_logger_with_context


class CheckName(str, Enum):
    """Names of the available checks."""

    ANY_USAGE = "any-usage"
    FEATURE_SIZE = "feature-size"
    COMPONENT_SIZE = "component-size"
    BUNDLE_BUDGETS = "bundle-budgets"
    COVERAGE = "coverage"
    SECRETS = "secrets"
    URLS = "urls"
    ENV = "env"
    DEPS = "deps"
    SUPPRESSIONS = "suppressions"
    STYLE_TOKENS = "style-tokens"
    PERF_BUDGETS = "perf-budgets"
    DEPRECATED_ENDPOINTS = "deprecated-endpoints"
    SPA_REWRITE = "spa-rewrite"


CHECKS: tuple[CheckName, ...] = tuple(CheckName)


def default_report_path(name: CheckName, settings: GateSettings) -> str | None:
    """Repository-relative report path of checks that always write one."""
    if name == CheckName.BUNDLE_BUDGETS:
        return settings.bundle.report_path
    if name == CheckName.DEPS:
        return settings.audit.report_path
    if name == CheckName.PERF_BUDGETS:
        return settings.performance.report_path
    return None


def run_check(
    name: CheckName | str,
    root: Path | str,
    settings: GateSettings,
    source: FileSource | None = None,
    report_path: Path | str | None = None,
    report_only: bool = False,
    env: str | None = None,
    strict_placeholders: bool = False,
    tracked_files: list[str] | None = None,
    audit_output: str | None = None,
) -> CheckResult:
    """Run one check against a repository.

    Args:
        name: Check to run
        root: Repository root
        settings: Project settings
        source: File source (defaults to the root on disk)
        report_path: Report destination; relative paths resolve against root.
            Defaults to the check's fixed report path, if it has one.
        report_only: Bundle and performance budgets only; never fail the process
        env: URL policy only; single tier to validate
        strict_placeholders: URL policy only; reject placeholder values
        tracked_files: Secret scan only; tracked files instead of ``git ls-files``
        audit_output: Dependency audit only; scanner output instead of running it

    Returns:
        The check result, already written to its report when applicable

    Raises:
        PolicyGateError: If the check cannot run meaningfully
    """
    name = CheckName(name)
    root = Path(root)
    source = source or DiskFileSource(root)
    logger = get_logger_with_context("checks", check=name.value)
    logger.debug(f"Running against {root}")

    if name == CheckName.ANY_USAGE:
        result = check_any_usage(source, settings.any_usage)
    elif name == CheckName.FEATURE_SIZE:
        result = check_feature_size(source, settings.feature_size)
    elif name == CheckName.COMPONENT_SIZE:
        result = check_component_size(source, settings.component_size)
    elif name == CheckName.BUNDLE_BUDGETS:
        result = check_bundle_budgets(source, settings.bundle, report_only=report_only)
    elif name == CheckName.COVERAGE:
        result = check_coverage(source, settings.coverage)
    elif name == CheckName.SECRETS:
        files = tracked_files if tracked_files is not None else git_tracked_files(root)
        result = check_secrets(source, settings.secrets, files)
    elif name == CheckName.URLS:
        result = check_urls(source, settings.urls, env=env, strict_placeholders=strict_placeholders)
    elif name == CheckName.ENV:
        result = check_env_config(source, settings.env)
    elif name == CheckName.DEPS:
        output = audit_output if audit_output is not None else run_audit_tool(settings.audit.command, root)
        result = check_dependencies(output, settings.audit)
    elif name == CheckName.SUPPRESSIONS:
        result = check_suppressions(source, settings.suppressions)
    elif name == CheckName.STYLE_TOKENS:
        result = check_style_tokens(source, settings.style_tokens)
    elif name == CheckName.PERF_BUDGETS:
        result = check_performance_budgets(source, settings.performance, report_only=report_only)
    elif name == CheckName.DEPRECATED_ENDPOINTS:
        result = check_deprecated_endpoints(source, settings.deprecated_endpoints)
    else:
        result = check_spa_rewrite(source, settings.spa_rewrite)

    destination = report_path or default_report_path(name, settings)
    if destination is not None:
        destination = Path(destination)
        written = write_report(result, destination if destination.is_absolute() else root / destination)
        result = result.model_copy(update={"details": {**result.details, "reportPath": str(written)}})

    logger.debug(f"{len(result.failures)} failures, {len(result.warnings)} warnings")
    return result


__all__ = [
    "CHECKS",
    "CheckName",
    "run_check",
    "default_report_path",
    "check_any_usage",
    "check_bundle_budgets",
    "check_component_size",
    "check_coverage",
    "check_deprecated_endpoints",
    "check_dependencies",
    "check_env_config",
    "check_feature_size",
    "check_performance_budgets",
    "check_secrets",
    "check_spa_rewrite",
    "check_style_tokens",
    "check_suppressions",
    "check_urls",
]
