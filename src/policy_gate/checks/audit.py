"""Dependency vulnerability gate.

Only high and critical findings block. Moderate and low findings are
recorded in the report with a compensating-control note.
"""

from __future__ import annotations

import json
import subprocess
from pathlib import Path
from typing import Any

from policy_gate.core.loader import to_finite
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import AuditSettings
from policy_gate.utils.errors import ToolError
from policy_gate.utils.logging import get_logger

logger = get_logger("checks.audit")

FAIL_ON = ("critical", "high")
REPORTED = ("moderate", "low")


def run_audit_tool(command: list[str], cwd: Path | str) -> str:
    """Run the scanner and return its stdout.

    The scanner exits non-zero when it finds vulnerabilities; that is data,
    not a tool failure, so the exit status is only logged.

    Raises:
        ToolError: If the scanner cannot be started or prints nothing
    """
    try:
        completed = subprocess.run(command, cwd=cwd, capture_output=True, text=True)
    except OSError as e:
        raise ToolError(f"Unable to run {' '.join(command)}: {e}", command=command) from e

    logger.debug(f"{' '.join(command)} exited with {completed.returncode}")
    if not completed.stdout.strip():
        raise ToolError(
            f"{' '.join(command)} produced no output (exit {completed.returncode}): {completed.stderr.strip()}",
            command=command,
        )
    return completed.stdout


def _count(totals: dict[str, Any], key: str) -> int:
    number = to_finite(totals.get(key, 0))
    return int(number) if number is not None else 0


def _via_names(via: Any) -> list[str]:
    if not isinstance(via, list):
        return []
    names = []
    for entry in via:
        if isinstance(entry, str):
            names.append(entry)
        elif isinstance(entry, dict):
            names.append(str(entry.get("title") or entry.get("name") or "unknown"))
    return names


def check_dependencies(output: str, settings: AuditSettings) -> CheckResult:
    """Classify scanner JSON output.

    Args:
        output: JSON printed by the audit tool
        settings: Audit settings (compensating control text)

    Raises:
        ToolError: If the output is not a JSON object
    """
    try:
        payload = json.loads(output)
    except json.JSONDecodeError as e:
        raise ToolError(f"Unable to parse audit JSON output: {e}") from e
    if not isinstance(payload, dict):
        raise ToolError("Unable to parse audit JSON output: expected an object")

    metadata = payload.get("metadata")
    totals_raw = metadata.get("vulnerabilities") if isinstance(metadata, dict) else None
    totals_raw = totals_raw if isinstance(totals_raw, dict) else {}
    vulnerabilities = payload.get("vulnerabilities")
    vulnerabilities = vulnerabilities if isinstance(vulnerabilities, dict) else {}

    totals = {key: _count(totals_raw, key) for key in (*FAIL_ON, *REPORTED)}
    totals["total"] = _count(totals_raw, "total") if "total" in totals_raw else sum(totals.values())

    items: list[CheckItem] = []
    for severity in FAIL_ON:
        count = totals[severity]
        items.append(
            CheckItem(
                status=Status.FAIL if count > 0 else Status.PASS,
                message=f"{severity.capitalize()}: {count}",
                rule_id=severity,
            )
        )
    for severity in REPORTED:
        count = totals[severity]
        items.append(
            CheckItem(
                status=Status.WARN if count > 0 else Status.PASS,
                message=f"{severity.capitalize()}: {count}",
                rule_id=severity,
            )
        )

    moderate_and_low = []
    for name, vuln in sorted(vulnerabilities.items()):
        if not isinstance(vuln, dict):
            continue
        severity = vuln.get("severity")
        if severity in FAIL_ON:
            # Totals decide the verdict; package rows only point at the culprits.
            items.append(
                CheckItem(
                    status=Status.WARN,
                    message=f"{name} ({severity}) range {vuln.get('range') or '*'}",
                    rule_id=str(severity),
                )
            )
        elif severity in REPORTED:
            via = _via_names(vuln.get("via"))
            moderate_and_low.append(
                {
                    "name": name,
                    "severity": severity,
                    "isDirect": bool(vuln.get("isDirect")),
                    "range": vuln.get("range"),
                    "fixAvailable": vuln.get("fixAvailable"),
                    "via": via,
                    "compensatingControl": settings.compensating_control,
                }
            )
            items.append(
                CheckItem(
                    status=Status.WARN,
                    message=f"{name} ({severity}) via {', '.join(via) or 'unknown'}",
                    rule_id=str(severity),
                )
            )

    return CheckResult(
        check="deps",
        title="Dependency security check",
        policy={
            "failOn": list(FAIL_ON),
            "note": "Moderate/low vulnerabilities are reported with compensating controls.",
        },
        measured=totals,
        details={"moderateAndLow": moderate_and_low},
        items=items,
    )
