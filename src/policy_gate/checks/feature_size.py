"""Line-count ceiling for feature and backend source files.

Oversized files on the legacy allowlist only warn, so the limit can hold for
new code while existing large files are split over time.
"""

from __future__ import annotations

from policy_gate.core.scope import FileSource, ScopeRule, count_lines, resolve_scope
from policy_gate.core.tiers import evaluate_size
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import FeatureSizeSettings
from policy_gate.utils.logging import get_logger

logger = get_logger("checks.feature_size")


def measure_lines(source: FileSource, files: list[str]) -> list[tuple[str, int]]:
    """Line counts, largest first."""
    sized = [(path, count_lines(source.read_text(path))) for path in files]
    return sorted(sized, key=lambda item: (-item[1], item[0]))


def check_feature_size(source: FileSource, settings: FeatureSizeSettings) -> CheckResult:
    files = resolve_scope(source, settings.roots, ScopeRule.from_settings(settings))
    legacy = set(settings.legacy_allowlist)

    items: list[CheckItem] = []
    oversized: dict[str, int] = {}
    for path, lines in measure_lines(source, files):
        status = evaluate_size(lines, settings.max_lines, legacy_exempt=path in legacy)
        if status == Status.PASS:
            continue
        oversized[path] = lines
        suffix = " (legacy allowlist)" if status == Status.WARN else ""
        items.append(
            CheckItem(
                status=status,
                message=f"{path}: {lines} lines (limit {settings.max_lines}){suffix}",
                path=path,
            )
        )
    logger.debug(f"Measured {len(files)} files, {len(oversized)} over {settings.max_lines} lines")

    return CheckResult(
        check="feature-size",
        title=f"Feature file size (max {settings.max_lines} lines)",
        policy={"maxLines": settings.max_lines, "legacyAllowlist": sorted(legacy)},
        measured={"filesChecked": len(files), "oversized": oversized},
        items=items,
    )
