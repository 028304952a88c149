"""CLI commands for the individual policy checks.

Every command is registered on the umbrella ``policy-gate`` app and is also
exposed as its own console script through the ``*_main`` functions.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any, Callable, Optional

import typer

from policy_gate.checks import CheckName, run_check
from policy_gate.cli.utils import print_error, print_result
from policy_gate.utils.errors import PolicyGateError
from policy_gate.utils.logging import configure_from_env, get_logger

logger = get_logger("cli.checks")

RootOption = typer.Option(
    None,
    "--root",
    "-r",
    help="Repository root (defaults to the global --root or the working directory)",
)
SettingsOption = typer.Option(
    None,
    "--settings",
    help="Path to a settings YAML file",
)
ReportOption = typer.Option(
    None,
    "--report",
    help="Write the JSON report to this path",
)


def resolve_root(ctx: typer.Context | None, root: Optional[Path]) -> Path:
    """Pick the repository root: command option, then global option, then cwd."""
    if root is not None:
        return root
    if ctx is not None and isinstance(ctx.obj, dict) and ctx.obj.get("root") is not None:
        return ctx.obj["root"]
    return Path.cwd()


def execute(
    ctx: typer.Context | None,
    name: CheckName,
    root: Optional[Path],
    settings_path: Optional[Path],
    report: Optional[Path] = None,
    **options: Any,
) -> None:
    """Run one check, print its result and exit with its status."""
    from policy_gate.utils.config import load_settings

    repo_root = resolve_root(ctx, root)
    try:
        settings = load_settings(repo_root, settings_path)
        result = run_check(name, repo_root, settings, report_path=report, **options)
    except PolicyGateError as e:
        logger.debug(f"{name.value} aborted: {e.code}")
        print_error(e)
        raise typer.Exit(2)

    print_result(result)
    raise typer.Exit(result.exit_code)


def any_usage_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """
    Enforce the explicit `any` budgets.

    Counts whole-word occurrences across the scanned sources and compares
    them with the total and per-file budgets.
    """
    execute(ctx, CheckName.ANY_USAGE, root, settings, report)


def feature_size_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Enforce the per-file line limit of feature modules."""
    execute(ctx, CheckName.FEATURE_SIZE, root, settings, report)


def component_size_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Warn on large UI components and fail on oversized ones."""
    execute(ctx, CheckName.COMPONENT_SIZE, root, settings, report)


def bundle_budgets_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
    report_only: bool = typer.Option(
        False,
        "--report-only",
        help="Write the report but never fail",
    ),
) -> None:
    """
    Check gzip sizes of the built chunks against their budgets.

    The report is always written, to the configured path unless --report
    overrides it.

    Example:
        policy-gate bundle-budgets --report-only
    """
    execute(ctx, CheckName.BUNDLE_BUDGETS, root, settings, report, report_only=report_only)


def coverage_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Compare backend coverage totals with the active phase thresholds."""
    execute(ctx, CheckName.COVERAGE, root, settings, report)


def secrets_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Scan tracked files for committed secrets."""
    execute(ctx, CheckName.SECRETS, root, settings, report)


def urls_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
    env: Optional[str] = typer.Option(
        None,
        "--env",
        "-e",
        help="Validate a single tier (dev, staging, prod)",
    ),
    all_tiers: bool = typer.Option(
        False,
        "--all",
        help="Validate every tier (default)",
    ),
    strict_placeholders: bool = typer.Option(
        False,
        "--strict-placeholders",
        help="Reject placeholder values",
    ),
) -> None:
    """
    Validate URL consistency of the environment matrix.

    Example:
        policy-gate urls --env prod --strict-placeholders
    """
    if env and all_tiers:
        raise typer.BadParameter("--env and --all cannot be combined", param_hint="--env")
    execute(
        ctx,
        CheckName.URLS,
        root,
        settings,
        report,
        env=env,
        strict_placeholders=strict_placeholders,
    )


def env_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Check the environment matrix against the example env files."""
    execute(ctx, CheckName.ENV, root, settings, report)


def deps_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """
    Run the dependency audit and fail on high or critical findings.

    Moderate and low findings are recorded in the report with the
    configured compensating control.
    """
    execute(ctx, CheckName.DEPS, root, settings, report)


def suppressions_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Reject type-checker and linter suppression comments."""
    execute(ctx, CheckName.SUPPRESSIONS, root, settings, report)


def style_tokens_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Reject typography that bypasses the design tokens."""
    execute(ctx, CheckName.STYLE_TOKENS, root, settings, report)


def perf_budgets_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
    report_only: bool = typer.Option(
        False,
        "--report-only",
        help="Write the report but never fail",
    ),
) -> None:
    """
    Check entry assets, the dashboard chunk and the largest asset against the
    active performance phase.

    Entry assets are read from the built index.html. The report is always
    written.
    """
    execute(ctx, CheckName.PERF_BUDGETS, root, settings, report, report_only=report_only)


def deprecated_endpoints_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Reject references to deprecated backend endpoints."""
    execute(ctx, CheckName.DEPRECATED_ENDPOINTS, root, settings, report)


def spa_rewrite_cmd(
    ctx: typer.Context,
    root: Optional[Path] = RootOption,
    settings: Optional[Path] = SettingsOption,
    report: Optional[Path] = ReportOption,
) -> None:
    """Require a hosting rewrite that serves the app for extensionless routes."""
    execute(ctx, CheckName.SPA_REWRITE, root, settings, report)


COMMANDS: dict[CheckName, Callable[..., None]] = {
    CheckName.ANY_USAGE: any_usage_cmd,
    CheckName.FEATURE_SIZE: feature_size_cmd,
    CheckName.COMPONENT_SIZE: component_size_cmd,
    CheckName.BUNDLE_BUDGETS: bundle_budgets_cmd,
    CheckName.COVERAGE: coverage_cmd,
    CheckName.SECRETS: secrets_cmd,
    CheckName.URLS: urls_cmd,
    CheckName.ENV: env_cmd,
    CheckName.DEPS: deps_cmd,
    CheckName.SUPPRESSIONS: suppressions_cmd,
    CheckName.STYLE_TOKENS: style_tokens_cmd,
    CheckName.PERF_BUDGETS: perf_budgets_cmd,
    CheckName.DEPRECATED_ENDPOINTS: deprecated_endpoints_cmd,
    CheckName.SPA_REWRITE: spa_rewrite_cmd,
}


def _standalone(command: Callable[..., None]) -> None:
    configure_from_env()
    typer.run(command)


def any_usage_main() -> None:
    _standalone(any_usage_cmd)


def feature_size_main() -> None:
    _standalone(feature_size_cmd)


def component_size_main() -> None:
    _standalone(component_size_cmd)


def bundle_budgets_main() -> None:
    _standalone(bundle_budgets_cmd)


def coverage_main() -> None:
    _standalone(coverage_cmd)


def secrets_main() -> None:
    _standalone(secrets_cmd)


def urls_main() -> None:
    _standalone(urls_cmd)


def env_main() -> None:
    _standalone(env_cmd)


def deps_main() -> None:
    _standalone(deps_cmd)


def suppressions_main() -> None:
    _standalone(suppressions_cmd)


def style_tokens_main() -> None:
    _standalone(style_tokens_cmd)


def perf_budgets_main() -> None:
    _standalone(perf_budgets_cmd)


def deprecated_endpoints_main() -> None:
    _standalone(deprecated_endpoints_cmd)


def spa_rewrite_main() -> None:
    _standalone(spa_rewrite_cmd)
