"""Check result and report data models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import BaseModel, Field

from policy_gate.models.common import Status


class CheckItem(BaseModel):
    """A single evaluated item of a check (one budget, one file, one finding)."""

    model_config = {"frozen": True}

    status: Status = Field(description="Outcome of this item")
    message: str = Field(description="Console message, without the status prefix")
    path: str | None = Field(default=None, description="File the item refers to")
    line: int | None = Field(default=None, description="1-based line, when located")
    rule_id: str | None = Field(default=None, description="Rule identity, when applicable")

    def __str__(self) -> str:
        return f"{self.status.value} {self.message}"


class CheckResult(BaseModel):
    """Result of one check invocation.

    All items are collected before the verdict is derived, so a failing
    result always lists every violation found.
    """

    model_config = {"frozen": True}

    check: str = Field(description="Check name")
    title: str = Field(default="", description="Heading printed before the items")
    policy: dict[str, Any] = Field(default_factory=dict, description="Policy values used")
    measured: dict[str, Any] = Field(default_factory=dict, description="Measured values")
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Check-specific extra data for the report",
    )
    items: list[CheckItem] = Field(default_factory=list, description="Evaluated items")
    report_only: bool = Field(default=False, description="Never fail the process")

    @property
    def failures(self) -> list[CheckItem]:
        """Items that violate policy."""
        return [i for i in self.items if i.status == Status.FAIL]

    @property
    def warnings(self) -> list[CheckItem]:
        """Items reported but tolerated."""
        return [i for i in self.items if i.status == Status.WARN]

    @property
    def passed(self) -> bool:
        """Whether no item failed."""
        return not self.failures

    @property
    def exit_code(self) -> int:
        """Process exit status this result calls for."""
        if self.passed or self.report_only:
            return 0
        return 1

    def to_report(self, generated_at: datetime) -> "CheckReport":
        """Build the serializable report for this result."""
        return CheckReport(
            generated_at=generated_at,
            check=self.check,
            report_only=self.report_only,
            passed=self.passed,
            policy=self.policy,
            measured=self.measured,
            details=self.details,
            failures=self.failures,
        )


class CheckReport(BaseModel):
    """JSON artifact written once per check run."""

    model_config = {"frozen": True, "populate_by_name": True}

    generated_at: datetime = Field(alias="generatedAt", description="Generation timestamp")
    check: str = Field(description="Check name")
    report_only: bool = Field(alias="reportOnly", description="Report-only mode")
    passed: bool = Field(alias="pass", description="Overall outcome")
    policy: dict[str, Any] = Field(default_factory=dict, description="Policy values used")
    measured: dict[str, Any] = Field(default_factory=dict, description="Measured values")
    details: dict[str, Any] = Field(default_factory=dict, description="Check-specific data")
    failures: list[CheckItem] = Field(default_factory=list, description="Failing items")
