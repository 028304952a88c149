"""Threshold configuration models.

These documents are strict: every numeric field must be present in the JSON
file and coerce to a finite number. They are built through
:mod:`policy_gate.core.loader`, which raises configuration errors instead of
filling defaults.
"""

from pydantic import BaseModel, Field


class AnyUsageBudgets(BaseModel):
    """Budgets for the disallowed-type marker."""

    model_config = {"frozen": True}

    max_total: float = Field(description="Maximum total count across all files")
    max_by_file: dict[str, float] = Field(
        default_factory=dict,
        description="Tighter per-file budgets keyed by repository-relative path",
    )


class BundleBudgets(BaseModel):
    """Per-chunk compressed size budgets in kilobytes."""

    model_config = {"frozen": True}

    budgets_kb: dict[str, float] = Field(description="Budget keyed by chunk budget key")


class CoverageThresholds(BaseModel):
    """Thresholds of the active coverage phase."""

    model_config = {"frozen": True}

    active_phase: str = Field(description="Name of the active phase")
    lines_pct: float = Field(description="Minimum line coverage percentage")
    functions_pct: float = Field(description="Minimum function coverage percentage")


class PerformanceBudgets(BaseModel):
    """Budgets of the active performance phase, in kilobytes."""

    model_config = {"frozen": True}

    active_phase: str = Field(description="Name of the active phase")
    budgets_kb: dict[str, float] = Field(description="Budget keyed by metric name")
