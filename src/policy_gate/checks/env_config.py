"""Drift between declared required variables and the example env files."""

from __future__ import annotations

from policy_gate.core.loader import read_json
from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.env import URL_FIELDS, VAR_LIST_FIELDS, EnvironmentMatrix, Tier
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import EnvExampleSettings
from policy_gate.utils.errors import ConfigurationError


def parse_env_example_keys(text: str) -> set[str]:
    """Variable names of ``KEY=value`` lines; comments and blank lines are ignored."""
    keys: set[str] = set()
    for line in text.splitlines():
        line = line.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key = line.partition("=")[0].strip()
        if key:
            keys.add(key)
    return keys


def _read_example(source: FileSource, path: str) -> set[str]:
    if not source.exists(path):
        raise ConfigurationError(f"Example environment file not found: {path}", path=path)
    return parse_env_example_keys(source.read_text(path))


def _tier_failures(name: str, entry: dict, settings: EnvExampleSettings) -> list[str]:
    failures: list[str] = []
    for field in (*URL_FIELDS, *VAR_LIST_FIELDS):
        if field not in entry:
            failures.append(f'Missing "{field}" for environment "{name}"')
            continue
        value = entry[field]
        if field in VAR_LIST_FIELDS:
            if not isinstance(value, list) or not value:
                failures.append(f'"{field}" for "{name}" must be a non-empty array')
        elif not isinstance(value, str) or not value.strip():
            failures.append(f'"{field}" for "{name}" must be a non-empty string')

    for field, baseline in (
        ("frontendRequiredVars", settings.frontend_baseline_vars),
        ("convexRequiredVars", settings.backend_baseline_vars),
    ):
        declared = entry.get(field) if isinstance(entry.get(field), list) else []
        for var in baseline:
            if var not in declared:
                failures.append(f'"{name}" {field} must include {var}')
    return failures


def check_env_config(source: FileSource, settings: EnvExampleSettings) -> CheckResult:
    """Validate every tier's declaration and cross-check the example files."""
    doc = read_json(source, settings.matrix_path, f"Environment matrix not found: {settings.matrix_path}")
    environments = doc.get("environments") if isinstance(doc, dict) else None
    matrix = EnvironmentMatrix(environments=environments if isinstance(environments, dict) else {})
    tiers = Tier.names()

    failures: list[str] = []
    for name in tiers:
        entry = matrix.tier(name)
        if entry is None:
            failures.append(f'Missing environment config for "{name}" in {settings.matrix_path}')
            continue
        failures.extend(_tier_failures(name, entry, settings))

    frontend_vars = matrix.required_vars("frontendRequiredVars", tiers)
    backend_vars = matrix.required_vars("convexRequiredVars", tiers)
    for example_path, declared in (
        (settings.frontend_example_path, frontend_vars),
        (settings.backend_example_path, backend_vars),
    ):
        documented = _read_example(source, example_path)
        failures.extend(f"{example_path} is missing {var}" for var in declared if var not in documented)

    items = [CheckItem(status=Status.FAIL, message=f) for f in failures]
    return CheckResult(
        check="env",
        title="Environment configuration validation",
        policy={
            "tiers": tiers,
            "frontendBaselineVars": settings.frontend_baseline_vars,
            "backendBaselineVars": settings.backend_baseline_vars,
        },
        measured={"frontendVars": frontend_vars, "backendVars": backend_vars},
        items=items,
    )
