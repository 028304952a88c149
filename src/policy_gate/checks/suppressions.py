"""Disallowed type-checker and linter suppression comments."""

from __future__ import annotations

from policy_gate.core.scanner import PatternRule, scan_lines
from policy_gate.core.scope import FileSource, ScopeRule, resolve_scope
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import SuppressionSettings

SUPPRESSION_PATTERNS = [
    PatternRule(id="ts-ignore", description="@ts-ignore comment", pattern=r"@ts-ignore"),
    PatternRule(id="ts-expect-error", description="@ts-expect-error comment", pattern=r"@ts-expect-error"),
    PatternRule(
        id="eslint-disable",
        description="eslint-disable comment",
        pattern=r"eslint-disable(?:-next-line|-line)?",
    ),
]


def check_suppressions(source: FileSource, settings: SuppressionSettings) -> CheckResult:
    files = resolve_scope(source, settings.targets, ScopeRule.from_settings(settings))

    items = []
    for path in files:
        for finding in scan_lines(path, source.read_text(path), SUPPRESSION_PATTERNS):
            items.append(
                CheckItem(
                    status=finding.severity,
                    message=f"{finding.location} -> {finding.matched_text}",
                    path=path,
                    line=finding.location.line,
                    rule_id=finding.rule_id,
                )
            )

    return CheckResult(
        check="suppressions",
        title="Suppression comments",
        policy={"patterns": [p.id for p in SUPPRESSION_PATTERNS]},
        measured={"filesScanned": len(files), "violations": len(items)},
        items=items,
    )
