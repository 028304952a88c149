"""Multi-pattern text scanning with line tracking."""

from __future__ import annotations

import re
from functools import cached_property

from pydantic import BaseModel, Field

from policy_gate.models.common import Status
from policy_gate.models.findings import FindingRecord, Location


class PatternRule(BaseModel):
    """A named regular expression."""

    model_config = {"frozen": True}

    id: str = Field(description="Stable rule identifier")
    description: str = Field(default="", description="Human-readable description")
    pattern: str = Field(description="Regular expression source")
    ignore_case: bool = Field(default=False)
    severity: Status = Field(default=Status.FAIL)

    @cached_property
    def regex(self) -> re.Pattern[str]:
        return re.compile(self.pattern, re.IGNORECASE if self.ignore_case else 0)


def line_of(text: str, offset: int) -> int:
    """1-based line number of a character offset."""
    return text.count("\n", 0, offset) + 1


def _finding(path: str, text: str, rule: PatternRule, match: re.Match[str]) -> FindingRecord:
    return FindingRecord(
        location=Location(path=path, line=line_of(text, match.start()), offset=match.start()),
        rule_id=rule.id,
        matched_text=match.group(0),
        severity=rule.severity,
        description=rule.description,
    )


def scan_text(
    path: str,
    text: str,
    rules: list[PatternRule],
    first_only: bool = False,
) -> list[FindingRecord]:
    """Apply every rule to the full text of a file.

    Args:
        path: Repository-relative path recorded on findings
        text: File contents
        rules: Rules to apply, in order
        first_only: Keep only the first match of each rule

    Returns:
        Findings ordered by rule, then by position
    """
    findings: list[FindingRecord] = []
    for rule in rules:
        for match in rule.regex.finditer(text):
            findings.append(_finding(path, text, rule, match))
            if first_only:
                break
    return findings


def scan_lines(
    path: str,
    text: str,
    rules: list[PatternRule],
    first_rule_only: bool = True,
) -> list[FindingRecord]:
    """Scan line by line.

    With ``first_rule_only`` a line yields at most one finding, for the first
    rule that matches it; otherwise every matching rule is reported.
    """
    findings: list[FindingRecord] = []
    offset = 0
    for number, line in enumerate(text.split("\n"), start=1):
        for rule in rules:
            match = rule.regex.search(line)
            if match:
                findings.append(
                    FindingRecord(
                        location=Location(path=path, line=number, offset=offset + match.start()),
                        rule_id=rule.id,
                        matched_text=line.strip(),
                        severity=rule.severity,
                        description=rule.description,
                    )
                )
                if first_rule_only:
                    break
        offset += len(line) + 1
    return findings


def count_matches(text: str, pattern: re.Pattern[str]) -> int:
    """Count non-overlapping matches of a compiled pattern."""
    return sum(1 for _ in pattern.finditer(text))
