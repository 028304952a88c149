"""Main CLI entry point for policy-gate."""

from pathlib import Path
from typing import List, Optional

import typer
from rich.table import Table

from policy_gate.checks import CheckName
from policy_gate.cli import checks
from policy_gate.cli.utils import console, print_error, print_result
from policy_gate.utils.logging import LOG_FORMAT_ENVVAR, LogFormat, configure_logging

app = typer.Typer(
    name="policy-gate",
    help="Repository policy checks for CI pipelines.",
    no_args_is_help=True,
    rich_markup_mode="rich",
)

# Register one subcommand per check
for _name, _command in checks.COMMANDS.items():
    app.command(name=_name.value)(_command)


@app.callback()
def main(
    ctx: typer.Context,
    root: Optional[Path] = typer.Option(
        None,
        "--root",
        "-r",
        help="Repository root (defaults to the working directory)",
    ),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Enable verbose output"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Suppress non-essential output"),
    log_format: LogFormat = typer.Option(
        LogFormat.PLAIN,
        "--log-format",
        envvar=LOG_FORMAT_ENVVAR,
        help="Log record format; structured appends key=value context",
    ),
) -> None:
    """
    policy-gate: fail CI when a repository drifts from its policies.

    Each check reads the repository, applies a fixed policy and prints
    PASS/WARN/FAIL lines:

    - [bold]any-usage[/bold], [bold]feature-size[/bold], [bold]component-size[/bold]: source budgets
    - [bold]bundle-budgets[/bold], [bold]perf-budgets[/bold], [bold]coverage[/bold]: build artifact budgets
    - [bold]secrets[/bold], [bold]deps[/bold]: security gates
    - [bold]urls[/bold], [bold]env[/bold], [bold]spa-rewrite[/bold]: environment and hosting configuration
    - [bold]suppressions[/bold], [bold]style-tokens[/bold], [bold]deprecated-endpoints[/bold]: code hygiene
    """
    if verbose:
        configure_logging(level="DEBUG", log_format=log_format)
    elif quiet:
        configure_logging(level="WARNING", log_format=log_format)
    else:
        configure_logging(level="INFO", log_format=log_format)

    ctx.obj = {"root": root}


@app.command(name="run")
def run_cmd(
    ctx: typer.Context,
    names: List[CheckName] = typer.Argument(..., help="Checks to run, in order"),
    settings: Optional[Path] = typer.Option(None, "--settings", help="Path to a settings YAML file"),
) -> None:
    """
    Run several checks in one process.

    Every check runs even when an earlier one fails. The exit status is 2
    if any check could not run, 1 if any check failed, 0 otherwise.

    Example:
        policy-gate run any-usage feature-size suppressions
    """
    from policy_gate.checks import run_check
    from policy_gate.core.verdict import Verdict, VerdictSummary
    from policy_gate.utils.config import load_settings
    from policy_gate.utils.errors import PolicyGateError

    root = checks.resolve_root(ctx, None)
    try:
        gate_settings = load_settings(root, settings)
    except PolicyGateError as e:
        print_error(e)
        raise typer.Exit(2)

    verdicts = []
    for name in names:
        console.print()
        try:
            result = run_check(name, root, gate_settings)
        except PolicyGateError as e:
            print_error(e)
            verdicts.append(Verdict(check=name.value, error=e.to_gate_error()))
            continue
        print_result(result)
        verdicts.append(Verdict(check=name.value, result=result))

    summary = VerdictSummary(verdicts=verdicts)
    _print_summary(summary)
    raise typer.Exit(summary.exit_code)


def _print_summary(summary) -> None:
    """Print the aggregated verdict table."""
    console.print()
    table = Table(title="Policy checks")
    table.add_column("Check", style="cyan")
    table.add_column("Status")
    table.add_column("Failures", justify="right")
    table.add_column("Warnings", justify="right")

    for verdict in summary.verdicts:
        if verdict.error is not None:
            table.add_row(verdict.check, "[red]ERROR[/red]", "-", "-")
            continue
        result = verdict.result
        status = "[green]PASS[/green]" if verdict.passed else "[red]FAIL[/red]"
        table.add_row(verdict.check, status, str(len(result.failures)), str(len(result.warnings)))

    console.print(table)
    if summary.passed:
        console.print("[bold green]All checks passed[/bold green]")
    else:
        console.print(f"[bold red]Failed checks:[/bold red] {', '.join(summary.failed_checks)}")


@app.command()
def version() -> None:
    """Show the policy-gate version."""
    from policy_gate import __version__

    console.print(f"policy-gate version {__version__}")


if __name__ == "__main__":
    app()
