"""Strict JSON policy configuration loading.

No default filling: every required threshold must be explicit, so that policy
drift cannot hide behind a silent default.
"""

from __future__ import annotations

import json
import math
from typing import Any

from policy_gate.core.scope import FileSource
from policy_gate.models.policy import (
    AnyUsageBudgets,
    BundleBudgets,
    CoverageThresholds,
    PerformanceBudgets,
)
from policy_gate.utils.errors import ConfigurationError, InvalidValueError


def read_json(source: FileSource, path: str, missing_message: str | None = None) -> Any:
    """Read a JSON document.

    Args:
        source: Repository file source
        path: Repository-relative path
        missing_message: Message used when the file does not exist

    Raises:
        ConfigurationError: If the file is missing or not valid JSON
    """
    if not source.exists(path) or source.is_dir(path):
        raise ConfigurationError(missing_message or f"Configuration file not found: {path}", path=path)
    try:
        return json.loads(source.read_text(path))
    except json.JSONDecodeError as e:
        raise ConfigurationError(f"Malformed JSON in {path}: {e}", path=path) from e


def to_finite(value: Any) -> float | None:
    """Coerce a value to a finite float, or None when it cannot be."""
    if isinstance(value, bool) or value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        # digit separators such as 1_000 are not numbers
        if not value or "_" in value:
            return None
    try:
        number = float(value)
    except (TypeError, ValueError):
        return None
    return number if math.isfinite(number) else None


def require_finite(mapping: Any, key: str, path: str, label: str | None = None) -> float:
    """Read a required finite number from a mapping.

    Raises:
        InvalidValueError: If the key is absent or its value is not finite
    """
    raw = mapping.get(key) if isinstance(mapping, dict) else None
    number = to_finite(raw)
    if number is None:
        name = label or key
        raise InvalidValueError(f'Invalid value for "{name}" in {path}: {raw!r}', key=name, path=path)
    return number


def require_mapping(mapping: Any, key: str, path: str) -> dict[str, Any]:
    """Read a required nested object from a mapping."""
    value = mapping.get(key) if isinstance(mapping, dict) else None
    if not isinstance(value, dict):
        raise InvalidValueError(f'Expected an object at "{key}" in {path}', key=key, path=path)
    return value


def load_any_usage_budgets(source: FileSource, path: str) -> AnyUsageBudgets:
    """Load ``maxTotalAny`` and the optional ``maxAnyByFile`` table."""
    doc = read_json(source, path, f"Any usage budget config not found: {path}")
    max_total = require_finite(doc, "maxTotalAny", path)

    by_file_raw = doc.get("maxAnyByFile") if isinstance(doc, dict) else None
    if by_file_raw is None:
        by_file_raw = {}
    if not isinstance(by_file_raw, dict):
        raise InvalidValueError(f'Expected an object at "maxAnyByFile" in {path}', key="maxAnyByFile", path=path)

    by_file = {
        file_path: require_finite(by_file_raw, file_path, path, label=f"maxAnyByFile.{file_path}")
        for file_path in by_file_raw
    }
    return AnyUsageBudgets(max_total=max_total, max_by_file=by_file)


def load_bundle_budgets(source: FileSource, path: str, keys: list[str]) -> BundleBudgets:
    """Load the per-chunk budgets named by ``keys`` from the ``metrics`` table."""
    doc = read_json(source, path, f"Bundle budget config not found: {path}")
    metrics = require_mapping(doc, "metrics", path)
    return BundleBudgets(
        budgets_kb={key: require_finite(metrics, key, path, label=f"metrics.{key}") for key in keys}
    )


def load_coverage_thresholds(source: FileSource, path: str) -> CoverageThresholds:
    """Load the thresholds of the active coverage phase."""
    doc = read_json(source, path, f"Coverage threshold config not found: {path}")
    active = str(doc.get("activePhase") or "") if isinstance(doc, dict) else ""
    phases = doc.get("phases") if isinstance(doc, dict) else None
    phase = phases.get(active) if isinstance(phases, dict) and active else None
    thresholds = phase.get("thresholds") if isinstance(phase, dict) else None
    if not isinstance(thresholds, dict):
        raise InvalidValueError(f'Invalid activePhase "{active}" in {path}', key="activePhase", path=path)

    prefix = f"phases.{active}.thresholds"
    return CoverageThresholds(
        active_phase=active,
        lines_pct=require_finite(thresholds, "linesPct", path, label=f"{prefix}.linesPct"),
        functions_pct=require_finite(thresholds, "functionsPct", path, label=f"{prefix}.functionsPct"),
    )


def load_performance_budgets(source: FileSource, path: str, keys: list[str]) -> PerformanceBudgets:
    """Load the metric budgets of the active performance phase."""
    doc = read_json(source, path, f"Performance budget config not found: {path}")
    active = str(doc.get("activePhase") or "") if isinstance(doc, dict) else ""
    phases = doc.get("phases") if isinstance(doc, dict) else None
    phase = phases.get(active) if isinstance(phases, dict) and active else None
    metrics = phase.get("metrics") if isinstance(phase, dict) else None
    if not isinstance(metrics, dict):
        raise InvalidValueError(f"Invalid active phase in {path}: {active}", key="activePhase", path=path)

    return PerformanceBudgets(
        active_phase=active,
        budgets_kb={
            key: require_finite(metrics, key, path, label=f"phases.{active}.metrics.{key}")
            for key in keys
        },
    )
