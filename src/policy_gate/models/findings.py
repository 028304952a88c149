"""Scan finding and allowlist data models."""

from __future__ import annotations

from pydantic import BaseModel, Field

from policy_gate.models.common import Status


class Location(BaseModel):
    """Where a finding was made."""

    model_config = {"frozen": True}

    path: str = Field(description="Repository-relative POSIX path")
    line: int = Field(description="1-based line number")
    offset: int = Field(default=0, description="Character offset into the file text")

    def __str__(self) -> str:
        return f"{self.path}:{self.line}"


class FindingRecord(BaseModel):
    """A single located pattern match, before allowlist filtering."""

    model_config = {"frozen": True}

    location: Location = Field(description="File and line of the match")
    rule_id: str = Field(description="Identifier of the rule that matched")
    matched_text: str = Field(description="Exact text matched by the rule")
    severity: Status = Field(default=Status.FAIL, description="Severity of the finding")
    description: str = Field(default="", description="Human-readable rule description")

    @property
    def preview(self) -> str:
        """Matched text truncated for console output."""
        return self.matched_text[:80]


class AllowlistEntry(BaseModel):
    """A (path, rule) pair accepted as known-safe.

    Without ``match_text`` every match of the rule at the path is suppressed.
    """

    model_config = {"frozen": True, "populate_by_name": True}

    path: str = Field(description="Exact repository-relative path")
    rule_id: str = Field(alias="patternId", description="Rule identifier to suppress")
    match_text: str | None = Field(
        default=None,
        alias="matchText",
        description="Optional substring the matched text must contain",
    )


class SecretAllowlist(BaseModel):
    """Contents of the version-controlled secret-scan allowlist."""

    model_config = {"frozen": True, "populate_by_name": True}

    ignored_path_prefixes: list[str] = Field(
        default_factory=list,
        alias="ignoredPathPrefixes",
        description="Extra path prefixes excluded from scanning",
    )
    ignored_matches: list[AllowlistEntry] = Field(
        default_factory=list,
        alias="ignoredMatches",
        description="Individual accepted findings",
    )
