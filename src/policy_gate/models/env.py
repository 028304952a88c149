"""Environment matrix data models."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, Field


class Tier(str, Enum):
    """Deployment tiers, lowest first."""

    DEV = "dev"
    STAGING = "staging"
    PROD = "prod"

    @classmethod
    def names(cls) -> list[str]:
        return [t.value for t in cls]


URL_FIELDS = (
    "appOrigin",
    "workosRedirectUri",
    "convexSiteUrl",
    "workosWebhookUrl",
    "workosActionUrl",
)
VAR_LIST_FIELDS = ("frontendRequiredVars", "convexRequiredVars")


class EnvironmentProfile(BaseModel):
    """One tier's URL bundle and required variable names."""

    model_config = {"frozen": True, "populate_by_name": True}

    app_origin: str = Field(alias="appOrigin")
    redirect_uri: str = Field(alias="workosRedirectUri")
    site_url: str = Field(alias="convexSiteUrl")
    webhook_url: str = Field(alias="workosWebhookUrl")
    action_url: str = Field(alias="workosActionUrl")
    frontend_required_vars: list[str] = Field(default_factory=list, alias="frontendRequiredVars")
    backend_required_vars: list[str] = Field(default_factory=list, alias="convexRequiredVars")


class EnvironmentMatrix(BaseModel):
    """The declarative multi-environment matrix.

    Tier entries are kept raw so that missing or malformed fields surface as
    enumerated policy failures rather than a single parse error.
    """

    model_config = {"frozen": True}

    environments: dict[str, Any] = Field(default_factory=dict)

    def tier(self, name: str) -> dict[str, Any] | None:
        entry = self.environments.get(name)
        return entry if isinstance(entry, dict) else None

    def required_vars(self, field: str, tiers: list[str]) -> list[str]:
        """Union of a variable-list field across tiers, in first-seen order."""
        seen: dict[str, None] = {}
        for name in tiers:
            entry = self.tier(name) or {}
            values = entry.get(field)
            if isinstance(values, list):
                for value in values:
                    seen.setdefault(str(value), None)
        return list(seen)
