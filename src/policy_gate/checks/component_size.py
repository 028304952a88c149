"""Two-level size policy for UI component files."""

from __future__ import annotations

from policy_gate.checks.feature_size import measure_lines
from policy_gate.core.scope import FileSource, ScopeRule, resolve_scope
from policy_gate.core.tiers import evaluate_size
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import ComponentSizeSettings


def check_component_size(source: FileSource, settings: ComponentSizeSettings) -> CheckResult:
    """Fail components above ``max_lines``; warn above ``warn_lines``."""
    files = resolve_scope(source, settings.roots, ScopeRule.from_settings(settings))

    items: list[CheckItem] = []
    for path, lines in measure_lines(source, files):
        status = evaluate_size(lines, settings.max_lines, warn_limit=settings.warn_lines)
        if status == Status.PASS:
            continue
        limit = settings.max_lines if status == Status.FAIL else settings.warn_lines
        items.append(CheckItem(status=status, message=f"{path}: {lines} lines (>{limit})", path=path))

    return CheckResult(
        check="component-size",
        title=f"Component size (warn >{settings.warn_lines}, fail >{settings.max_lines} lines)",
        policy={"warnLines": settings.warn_lines, "maxLines": settings.max_lines},
        measured={"filesChecked": len(files)},
        items=items,
    )
