"""Shared utilities for CLI commands."""

from __future__ import annotations

from rich.console import Console
from rich.markup import escape

from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.errors import PolicyGateError

# Shared console instance
console = Console()


def status_style(status: Status) -> str:
    """Get Rich style for an item status.

    Args:
        status: Item status

    Returns:
        Rich style string
    """
    styles = {
        Status.PASS: "green",
        Status.WARN: "yellow",
        Status.FAIL: "red",
    }
    return styles.get(status, "white")


def print_item(item: CheckItem) -> None:
    """Print one ``PASS``/``WARN``/``FAIL`` line."""
    style = status_style(item.status)
    console.print(f"[{style}]{item.status.value}[/{style}] {escape(item.message)}", soft_wrap=True)


def summary_line(result: CheckResult) -> str:
    """One-line outcome of a check."""
    failures = len(result.failures)
    warnings = len(result.warnings)
    if result.passed:
        text = f"{result.check} passed"
    else:
        text = f"{result.check} failed with {failures} violation{'s' if failures != 1 else ''}"
    if warnings:
        text += f" ({warnings} warning{'s' if warnings != 1 else ''})"
    if result.report_only and not result.passed:
        text += " [report-only]"
    return text


def print_result(result: CheckResult) -> None:
    """Print a check result: title, items, optional report path and summary."""
    if result.title:
        console.print(escape(result.title), soft_wrap=True)
    for item in result.items:
        print_item(item)

    remediation = result.details.get("remediation")
    if remediation and not result.passed:
        console.print(f"Remediation: {escape(str(remediation))}", soft_wrap=True)

    report_path = result.details.get("reportPath")
    if report_path:
        console.print(f"Report written to {escape(str(report_path))}", soft_wrap=True)

    style = "green" if result.passed else ("yellow" if result.report_only else "red")
    console.print(f"[{style}]{escape(summary_line(result))}[/{style}]", soft_wrap=True)


def print_error(error: PolicyGateError) -> None:
    """Print a configuration or environment error."""
    console.print(f"[red]Error:[/red] {escape(str(error.to_gate_error()))}", soft_wrap=True)
