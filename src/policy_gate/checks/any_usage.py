"""Budget for the disallowed ``any`` type marker.

The total budget caps the whole codebase; per-file budgets are an extra
tightening for files being paid down one at a time. Files without a per-file
budget are governed by the total alone.
"""

from __future__ import annotations

import re

from policy_gate.core.loader import load_any_usage_budgets
from policy_gate.core.report import format_number
from policy_gate.core.scanner import count_matches
from policy_gate.core.scope import FileSource, ScopeRule, resolve_scope
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import AnyUsageSettings
from policy_gate.utils.logging import get_logger

logger = get_logger("checks.any_usage")


def count_marker(text: str, marker: str) -> int:
    """Count word-boundary occurrences of a marker token."""
    return count_matches(text, re.compile(rf"\b{re.escape(marker)}\b"))


def check_any_usage(source: FileSource, settings: AnyUsageSettings) -> CheckResult:
    """Count marker usage and compare against the total and per-file budgets."""
    budgets = load_any_usage_budgets(source, settings.budgets_path)
    files = resolve_scope(source, settings.roots, ScopeRule.from_settings(settings))

    total = 0
    per_file: dict[str, int] = {}
    for path in files:
        count = count_marker(source.read_text(path), settings.marker)
        total += count
        if count > 0:
            per_file[path] = count
    logger.debug(f"Counted {total} '{settings.marker}' markers in {len(files)} files")

    items: list[CheckItem] = [
        CheckItem(
            status=Status.PASS if total <= budgets.max_total else Status.FAIL,
            message=f"{settings.marker} usage total: {total} (budget {format_number(budgets.max_total)})",
            rule_id="total-budget",
        )
    ]
    for path, budget in sorted(budgets.max_by_file.items()):
        actual = per_file.get(path, 0)
        items.append(
            CheckItem(
                status=Status.PASS if actual <= budget else Status.FAIL,
                message=f"{settings.marker} usage in {path}: {actual} (budget {format_number(budget)})",
                path=path,
                rule_id="file-budget",
            )
        )

    return CheckResult(
        check="any-usage",
        title=f"{settings.marker} usage budget",
        policy={"maxTotalAny": budgets.max_total, "maxAnyByFile": budgets.max_by_file},
        measured={"filesScanned": len(files), "totalAny": total, "byFile": per_file},
        items=items,
    )
