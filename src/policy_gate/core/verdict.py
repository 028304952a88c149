"""Verdict aggregation across checks."""

from __future__ import annotations

from pydantic import BaseModel, Field

from policy_gate.models.common import GateError
from policy_gate.models.report import CheckResult

EXIT_OK = 0
EXIT_POLICY_VIOLATION = 1
EXIT_CONFIG_ERROR = 2


class Verdict(BaseModel):
    """Outcome of one check within an aggregated run."""

    model_config = {"frozen": True}

    check: str
    result: CheckResult | None = None
    error: GateError | None = None

    @property
    def passed(self) -> bool:
        return self.error is None and self.result is not None and self.result.exit_code == EXIT_OK

    @property
    def exit_code(self) -> int:
        if self.error is not None or self.result is None:
            return EXIT_CONFIG_ERROR
        return self.result.exit_code


class VerdictSummary(BaseModel):
    """Aggregate of independent check verdicts.

    Checks never short-circuit one another; the process fails when any
    check failed.
    """

    model_config = {"frozen": True}

    verdicts: list[Verdict] = Field(default_factory=list)

    @property
    def passed(self) -> bool:
        return all(v.passed for v in self.verdicts)

    @property
    def failed_checks(self) -> list[str]:
        return [v.check for v in self.verdicts if not v.passed]

    @property
    def exit_code(self) -> int:
        """Configuration errors outrank policy violations."""
        codes = [v.exit_code for v in self.verdicts]
        if EXIT_CONFIG_ERROR in codes:
            return EXIT_CONFIG_ERROR
        if EXIT_POLICY_VIOLATION in codes:
            return EXIT_POLICY_VIOLATION
        return EXIT_OK
