"""Phased performance budgets for the production build.

The entry assets are the ones ``index.html`` actually loads, so the HTML is
parsed rather than guessing from file names.
"""

from __future__ import annotations

import re

from policy_gate.checks.bundle import find_chunk, gzip_size, to_kb
from policy_gate.core.loader import load_performance_budgets
from policy_gate.core.report import format_number
from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import PerformanceSettings
from policy_gate.utils.errors import MissingArtifactError
from policy_gate.utils.logging import get_logger

logger = get_logger("checks.performance")

ENTRY_JS_PATTERN = re.compile(r'<script[^>]*src="([^"]+\.js)"[^>]*></script>', re.IGNORECASE)
ENTRY_CSS_PATTERN = re.compile(r'<link[^>]*href="([^"]+\.css)"[^>]*>', re.IGNORECASE)

# (budget key, console label), in report order
METRICS = [
    ("entryJsGzipKb", "Entry JS gzip"),
    ("entryCssGzipKb", "Entry CSS gzip"),
    ("dashboardJsGzipKb", "Dashboard chunk gzip"),
    ("largestAssetKb", "Largest emitted asset"),
]


def entry_asset(html: str, pattern: re.Pattern[str], label: str, index_path: str) -> str:
    """Asset path referenced by the HTML, relative to the dist directory.

    Raises:
        MissingArtifactError: If the HTML does not reference such an asset
    """
    match = pattern.search(html)
    if not match or not match.group(1):
        raise MissingArtifactError(f"Could not find {label} in {index_path}", path=index_path)
    return match.group(1).lstrip("/")


def largest_asset(source: FileSource, assets_dir: str) -> tuple[str, int]:
    """Name and raw byte size of the largest emitted file; ties keep the first name.

    Raises:
        MissingArtifactError: If the directory is missing or holds no files
    """
    if not source.is_dir(assets_dir):
        raise MissingArtifactError(f"Assets directory not found: {assets_dir}", path=assets_dir)
    sizes = [
        (name, len(source.read_bytes(f"{assets_dir}/{name}")))
        for name in sorted(source.list_dir(assets_dir))
        if not source.is_dir(f"{assets_dir}/{name}")
    ]
    if not sizes:
        raise MissingArtifactError(f"No emitted files found in {assets_dir}", path=assets_dir)
    return max(sizes, key=lambda entry: entry[1])


def _require_file(source: FileSource, path: str, label: str) -> None:
    if not source.exists(path) or source.is_dir(path):
        raise MissingArtifactError(f"{label} not found: {path}", path=path)


def check_performance_budgets(
    source: FileSource,
    settings: PerformanceSettings,
    report_only: bool = False,
) -> CheckResult:
    """Measure entry assets, the dashboard chunk and the largest asset against the active phase."""
    if not source.exists(settings.index_path) or source.is_dir(settings.index_path):
        raise MissingArtifactError(
            f"{settings.index_path} not found. Run the production build first.", path=settings.index_path
        )
    html = source.read_text(settings.index_path)
    budgets = load_performance_budgets(source, settings.budgets_path, [key for key, _ in METRICS])

    entry_js = entry_asset(html, ENTRY_JS_PATTERN, "entry JS asset", settings.index_path)
    entry_css = entry_asset(html, ENTRY_CSS_PATTERN, "entry CSS asset", settings.index_path)
    largest_name, largest_bytes = largest_asset(source, settings.assets_dir)
    dashboard = find_chunk(source, settings.assets_dir, settings.dashboard_pattern, "DashboardApp")

    entry_js_path = f"{settings.dist_dir}/{entry_js}"
    entry_css_path = f"{settings.dist_dir}/{entry_css}"
    _require_file(source, entry_js_path, "Entry JS asset")
    _require_file(source, entry_css_path, "Entry CSS asset")

    level = settings.compression_level
    measured = {
        "entryJsGzipKb": to_kb(gzip_size(source.read_bytes(entry_js_path), level)),
        "entryCssGzipKb": to_kb(gzip_size(source.read_bytes(entry_css_path), level)),
        "dashboardJsGzipKb": to_kb(gzip_size(source.read_bytes(f"{settings.assets_dir}/{dashboard}"), level)),
        "largestAssetKb": to_kb(largest_bytes),
    }
    logger.debug(f"Entry {entry_js} / {entry_css}, dashboard {dashboard}, largest {largest_name}")

    items = []
    for key, label in METRICS:
        actual = measured[key]
        budget = budgets.budgets_kb[key]
        items.append(
            CheckItem(
                status=Status.PASS if actual <= budget else Status.FAIL,
                message=f"{label}: {format_number(actual)}kB (budget {format_number(budget)}kB)",
                rule_id=key,
            )
        )

    return CheckResult(
        check="perf-budgets",
        title=f"Performance budgets ({budgets.active_phase})",
        policy=dict(budgets.budgets_kb),
        measured=measured,
        details={
            "activePhase": budgets.active_phase,
            "assets": {
                "entryJs": entry_js,
                "entryCss": entry_css,
                "dashboardJs": dashboard,
                "largest": {"name": largest_name, "sizeKb": measured["largestAssetKb"]},
            },
        },
        items=items,
        report_only=report_only,
    )
