"""Hosting rewrite that serves the single-page app for deep links.

``vercel.json`` is the subject of this check, so a missing or malformed file
is a policy failure rather than a configuration error.
"""

from __future__ import annotations

import json
from typing import Any

from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import SpaRewriteSettings

REMEDIATION = "Add a Vercel SPA rewrite that maps extensionless app routes to '/' or '/index.html'."


def covers_extensionless_routes(rewrite_source: Any, settings: SpaRewriteSettings) -> bool:
    """Whether a rewrite source pattern matches routes without a file extension."""
    if not isinstance(rewrite_source, str):
        return False
    normalized = rewrite_source.strip()
    return settings.extensionless_marker in normalized or normalized in settings.catch_all_sources


def find_spa_rewrite(rewrites: list[Any], settings: SpaRewriteSettings) -> dict[str, Any] | None:
    """First rewrite sending extensionless routes to the app entry."""
    for rewrite in rewrites:
        if not isinstance(rewrite, dict):
            continue
        destination = rewrite.get("destination")
        destination = destination.strip() if isinstance(destination, str) else ""
        if destination in settings.destinations and covers_extensionless_routes(rewrite.get("source"), settings):
            return rewrite
    return None


def _result(settings: SpaRewriteSettings, item: CheckItem, details: dict[str, Any] | None = None) -> CheckResult:
    details = dict(details or {})
    if item.status == Status.FAIL:
        details["remediation"] = REMEDIATION
    return CheckResult(
        check="spa-rewrite",
        title="SPA rewrite",
        policy={
            "configPath": settings.config_path,
            "destinations": list(settings.destinations),
            "catchAllSources": list(settings.catch_all_sources),
        },
        details=details,
        items=[item],
    )


def check_spa_rewrite(source: FileSource, settings: SpaRewriteSettings) -> CheckResult:
    path = settings.config_path

    def fail(message: str) -> CheckResult:
        return _result(settings, CheckItem(status=Status.FAIL, message=message, path=path))

    if not source.exists(path) or source.is_dir(path):
        return fail(f"Missing {path}.")
    try:
        config = json.loads(source.read_text(path))
    except json.JSONDecodeError as e:
        return fail(f"Invalid JSON in {path}: {e}")

    rewrites = config.get("rewrites") if isinstance(config, dict) else None
    if not isinstance(rewrites, list) or not rewrites:
        return fail(f'"{path}" must define a non-empty "rewrites" array.')

    rewrite = find_spa_rewrite(rewrites, settings)
    if rewrite is None:
        return fail("No SPA rewrite found that covers extensionless routes with destination '/' or '/index.html'.")

    return _result(
        settings,
        CheckItem(
            status=Status.PASS,
            message=f"{rewrite['source'].strip()} -> {rewrite['destination'].strip()}",
            path=path,
        ),
        details={"rewrite": rewrite},
    )
