"""Backend coverage gate with phased thresholds.

The active phase is chosen in configuration, so requirements ratchet upward
by advancing the phase rather than by changing this check.
"""

from __future__ import annotations

from policy_gate.core.loader import load_coverage_thresholds, read_json, to_finite
from policy_gate.core.report import format_number
from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import CoverageSettings
from policy_gate.utils.errors import ConfigurationError, InvalidValueError


def read_coverage_totals(source: FileSource, path: str) -> tuple[float, float]:
    """Read ``total.lines.pct`` and ``total.functions.pct`` from a summary."""
    summary = read_json(
        source,
        path,
        f"Coverage summary not found: {path}. Run the backend coverage job first.",
    )
    total = summary.get("total") if isinstance(summary, dict) else None
    if not isinstance(total, dict) or not isinstance(total.get("lines"), dict) or not isinstance(
        total.get("functions"), dict
    ):
        raise ConfigurationError(
            f"Invalid coverage summary format: expected total.lines and total.functions in {path}",
            path=path,
        )

    lines_pct = to_finite(total["lines"].get("pct"))
    functions_pct = to_finite(total["functions"].get("pct"))
    if lines_pct is None or functions_pct is None:
        raise InvalidValueError(f"Coverage summary has non-finite totals in {path}", key="total", path=path)
    return lines_pct, functions_pct


def check_coverage(source: FileSource, settings: CoverageSettings) -> CheckResult:
    thresholds = load_coverage_thresholds(source, settings.thresholds_path)
    lines_pct, functions_pct = read_coverage_totals(source, settings.summary_path)

    items = []
    for label, actual, threshold in (
        ("Lines", lines_pct, thresholds.lines_pct),
        ("Functions", functions_pct, thresholds.functions_pct),
    ):
        items.append(
            CheckItem(
                status=Status.PASS if actual >= threshold else Status.FAIL,
                message=f"{label}: {format_number(actual)}% (threshold {format_number(threshold)}%)",
                rule_id=f"{label.lower()}Pct",
            )
        )

    return CheckResult(
        check="coverage",
        title=f"Backend coverage gate ({thresholds.active_phase})",
        policy={
            "activePhase": thresholds.active_phase,
            "linesPct": thresholds.lines_pct,
            "functionsPct": thresholds.functions_pct,
        },
        measured={"linesPct": lines_pct, "functionsPct": functions_pct},
        items=items,
    )
