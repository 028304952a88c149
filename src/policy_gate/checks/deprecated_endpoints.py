"""References to retired backend endpoints in the frontend."""

from __future__ import annotations

import re

from policy_gate.core.scanner import PatternRule, scan_lines
from policy_gate.core.scope import FileSource, ScopeRule, resolve_scope
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import DeprecatedEndpointSettings


def endpoint_rules(endpoints: list[str]) -> list[PatternRule]:
    return [
        PatternRule(
            id=endpoint,
            description=f"Deprecated endpoint {endpoint}",
            pattern=rf"\b{re.escape(endpoint)}\b",
        )
        for endpoint in endpoints
    ]


def check_deprecated_endpoints(source: FileSource, settings: DeprecatedEndpointSettings) -> CheckResult:
    """Report every line that references a deprecated endpoint, once per endpoint."""
    rules = endpoint_rules(settings.endpoints)
    files = resolve_scope(source, settings.roots, ScopeRule.from_settings(settings))

    items = []
    for path in files:
        for finding in scan_lines(path, source.read_text(path), rules, first_rule_only=False):
            items.append(
                CheckItem(
                    status=finding.severity,
                    message=f"{finding.location} uses {finding.rule_id}",
                    path=path,
                    line=finding.location.line,
                    rule_id=finding.rule_id,
                )
            )

    return CheckResult(
        check="deprecated-endpoints",
        title=f"Deprecated endpoint references ({', '.join(settings.roots)})",
        policy={"endpoints": list(settings.endpoints)},
        measured={"filesScanned": len(files), "violations": len(items)},
        items=items,
    )
