"""Typography must go through design tokens, not ad-hoc utilities."""

from __future__ import annotations

import re

from policy_gate.core.scanner import PatternRule, line_of, scan_text
from policy_gate.core.scope import FileSource, ScopeRule, resolve_scope
from policy_gate.models.common import Status
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import StyleTokenSettings

_HEADING_ROLES = r"txt-role-(?:hero|screen-title|page-title|panel-title|section-title)"
_WEIGHTS = r"\bfont-(?:thin|extralight|light|normal|medium|semibold|extrabold|black)\b"

STYLE_PATTERNS = [
    PatternRule(id="arbitrary-font", description="arbitrary font utility", pattern=r"font-\[[^\]]+\]"),
    PatternRule(
        id="font-family",
        description="non-token font family utility",
        pattern=r"\bfont-(sans|serif|mono)\b",
    ),
    PatternRule(
        id="heading-weight",
        description="heading role font-weight override",
        pattern=rf"{_HEADING_ROLES}[^\"'`\n>]*{_WEIGHTS}|{_WEIGHTS}[^\"'`\n>]*{_HEADING_ROLES}",
    ),
    PatternRule(id="text-size", description="arbitrary text size", pattern=r"text-\[[0-9.]+px\]"),
    PatternRule(id="line-height", description="arbitrary line-height", pattern=r"leading-\[[^\]]+\]"),
    PatternRule(id="tracking", description="arbitrary tracking", pattern=r"tracking-\[[^\]]+\]"),
    PatternRule(
        id="text-color",
        description="hardcoded text color (hex/rgba)",
        pattern=r"text-\[#|text-\[rgba",
        ignore_case=True,
    ),
]

INLINE_TYPOGRAPHY = re.compile(
    r"(fontSize|fontWeight|fontFamily|fontStyle|lineHeight|letterSpacing)\s*:\s*([^,}\n]+)"
)


def is_token_value(value: str) -> bool:
    value = re.sub(r"['\"`]", "", value.strip())
    return value == "inherit" or value == "currentColor" or value.startswith("var(")


def check_style_tokens(source: FileSource, settings: StyleTokenSettings) -> CheckResult:
    """Report the first match of each rule per file, plus the first inline typography value."""
    files = resolve_scope(source, settings.roots, ScopeRule.from_settings(settings))

    items: list[CheckItem] = []
    for path in files:
        text = source.read_text(path)
        for finding in scan_text(path, text, STYLE_PATTERNS, first_only=True):
            items.append(
                CheckItem(
                    status=Status.FAIL,
                    message=f"{finding.location}: {finding.description} -> {finding.matched_text}",
                    path=path,
                    line=finding.location.line,
                    rule_id=finding.rule_id,
                )
            )
        for match in INLINE_TYPOGRAPHY.finditer(text):
            if not is_token_value(match.group(2)):
                line = line_of(text, match.start())
                items.append(
                    CheckItem(
                        status=Status.FAIL,
                        message=f"{path}:{line}: inline typography style value -> {match.group(0).strip()}",
                        path=path,
                        line=line,
                        rule_id="inline-typography",
                    )
                )
                break

    return CheckResult(
        check="style-tokens",
        title="Text style tokens",
        policy={"patterns": [p.id for p in STYLE_PATTERNS] + ["inline-typography"]},
        measured={"filesScanned": len(files)},
        items=items,
    )
