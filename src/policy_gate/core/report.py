"""Deterministic JSON report emission."""

from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path

from policy_gate.models.report import CheckReport, CheckResult
from policy_gate.utils.logging import get_logger

logger = get_logger("report")


def render_report(report: CheckReport) -> str:
    """Serialize a report.

    Key order follows the model and the inputs, so unchanged inputs render
    byte-identical output apart from ``generatedAt``.
    """
    data = report.model_dump(mode="json", by_alias=True)
    return json.dumps(data, indent=2, ensure_ascii=False) + "\n"


def write_report(result: CheckResult, path: Path | str, generated_at: datetime | None = None) -> Path:
    """Write the report of a check result, replacing any previous one.

    Args:
        result: Check result to serialize
        path: Destination file; parent directories are created as needed
        generated_at: Timestamp to record (defaults to now, UTC)

    Returns:
        The written path
    """
    path = Path(path)
    generated_at = generated_at or datetime.now(timezone.utc)
    report = result.to_report(generated_at)

    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(render_report(report), encoding="utf-8")
    logger.debug(f"Report written to {path}")
    return path


def format_number(value: int | float) -> str:
    """Render whole numbers without a decimal part (``80.0`` -> ``80``)."""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)
