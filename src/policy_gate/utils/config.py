"""Project settings for policy-gate.

Settings describe *where* each check looks and the structural constants it
applies (scopes, line thresholds, chunk patterns). They come from an optional
``.policy-gate.yaml`` at the repository root and default to the layout of the
repository the gates were written for. Numeric budgets that are meant to be
ratcheted live in strict JSON documents instead (see
:mod:`policy_gate.core.loader`).
"""

from __future__ import annotations

from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from policy_gate.utils.errors import ConfigurationError

TS_EXTENSIONS = [".ts", ".tsx"]
TEST_SUFFIXES = [".test.ts", ".test.tsx"]
PRUNED_DIRS = ["node_modules", "dist", "_generated", "imports"]


class AnyUsageSettings(BaseModel):
    """Any-usage budget settings."""

    budgets_path: str = Field(default="config/quality/any-usage-budgets.json")
    marker: str = Field(default="any", description="Token counted on word boundaries")
    roots: list[str] = Field(default_factory=lambda: ["src", "convex"])
    extensions: list[str] = Field(default_factory=lambda: list(TS_EXTENSIONS))
    skip_substrings: list[str] = Field(
        default_factory=lambda: ["/imports/", "/_generated/", "/__tests__/"]
    )
    skip_suffixes: list[str] = Field(default_factory=lambda: list(TEST_SUFFIXES))
    prune_dirs: list[str] = Field(default_factory=lambda: list(PRUNED_DIRS))


class FeatureSizeSettings(BaseModel):
    """Feature file size settings."""

    roots: list[str] = Field(default_factory=lambda: ["src/app", "convex"])
    extensions: list[str] = Field(default_factory=lambda: list(TS_EXTENSIONS))
    skip_prefixes: list[str] = Field(
        default_factory=lambda: [
            "src/imports/",
            "src/app/components/ui/",
            "convex/_generated/",
            "convex/__tests__/",
        ]
    )
    skip_substrings: list[str] = Field(default_factory=lambda: list(TEST_SUFFIXES))
    max_lines: int = Field(default=350, ge=1)
    prune_dirs: list[str] = Field(default_factory=lambda: list(PRUNED_DIRS))
    legacy_allowlist: list[str] = Field(
        default_factory=lambda: [
            "convex/settings.ts",
            "convex/workspaces.ts",
            "convex/files.ts",
            "convex/projects.ts",
            "convex/dateNormalization.ts",
            "convex/auth.ts",
            "convex/comments.ts",
            "convex/notificationsEmail.ts",
            "src/app/components/chat-sidebar/ChatSidebarPanel.tsx",
            "src/app/dashboard/useDashboardWorkspaceActions.ts",
            "src/app/components/project-tasks/ProjectTaskRows.tsx",
            "src/app/components/create-project-popup/steps/StepDetails.tsx",
            "src/app/components/MainContent.tsx",
            "src/app/dashboard/hooks/useDashboardProjectActions.ts",
        ]
    )


class ComponentSizeSettings(BaseModel):
    """Component size settings."""

    roots: list[str] = Field(default_factory=lambda: ["src/app"])
    extensions: list[str] = Field(default_factory=lambda: [".tsx"])
    skip_substrings: list[str] = Field(default_factory=lambda: ["/components/ui/"])
    skip_suffixes: list[str] = Field(default_factory=lambda: list(TEST_SUFFIXES))
    warn_lines: int = Field(default=900, ge=1)
    max_lines: int = Field(default=1200, ge=1)
    prune_dirs: list[str] = Field(default_factory=lambda: list(PRUNED_DIRS))

    @model_validator(mode="after")
    def _warn_below_max(self) -> "ComponentSizeSettings":
        if self.warn_lines >= self.max_lines:
            raise ValueError("warn_lines must be strictly below max_lines")
        return self


class ChunkSpec(BaseModel):
    """A named build-output chunk located by filename pattern."""

    model_config = {"frozen": True}

    label: str = Field(description="Name printed on console lines")
    pattern: str = Field(description="Regex matched against file names")
    budget_key: str = Field(description="Key of the budget in the metrics table")


class BundleSettings(BaseModel):
    """Bundle size budget settings."""

    assets_dir: str = Field(default="dist/assets")
    budgets_path: str = Field(default="config/performance/bundle-budgets.json")
    report_path: str = Field(default="performance-reports/bundle-budget-report.json")
    compression_level: int = Field(default=9, ge=0, le=9)
    chunks: list[ChunkSpec] = Field(
        default_factory=lambda: [
            ChunkSpec(
                label="DashboardApp",
                pattern=r"^DashboardApp-[A-Za-z0-9_-]+\.js$",
                budget_key="dashboardChunkGzipKb",
            ),
            ChunkSpec(
                label="vendor-misc",
                pattern=r"^vendor-misc-[A-Za-z0-9_-]+\.js$",
                budget_key="vendorMiscChunkGzipKb",
            ),
        ]
    )


class CoverageSettings(BaseModel):
    """Backend coverage gate settings."""

    summary_path: str = Field(default="security-reports/coverage-backend/coverage-summary.json")
    thresholds_path: str = Field(default="config/quality/backend-coverage-thresholds.json")


class SecretsSettings(BaseModel):
    """Secret scanner settings."""

    allowlist_path: str = Field(default="config/security/secret-scan-allowlist.json")
    ignored_path_prefixes: list[str] = Field(
        default_factory=lambda: [
            "node_modules/",
            "dist/",
            "convex/_generated/",
            "src/imports/",
            "security-reports/",
            "docs/private/",
        ]
    )


class UrlPolicySettings(BaseModel):
    """Environment URL policy settings."""

    matrix_path: str = Field(default="config/security/environment-matrix.json")
    callback_path: str = Field(default="/auth/callback")
    webhook_suffix: str = Field(default="/workos/webhook")
    action_suffix: str = Field(default="/workos/action")
    placeholder_markers: list[str] = Field(
        default_factory=lambda: ["__SET_", "<", ">", "example.com"]
    )


class EnvExampleSettings(BaseModel):
    """Environment matrix / example file drift settings."""

    matrix_path: str = Field(default="config/security/environment-matrix.json")
    frontend_example_path: str = Field(default=".env.example")
    backend_example_path: str = Field(default="convex/.env.example")
    frontend_baseline_vars: list[str] = Field(
        default_factory=lambda: [
            "VITE_CONVEX_URL",
            "VITE_WORKOS_CLIENT_ID",
            "VITE_WORKOS_REDIRECT_URI",
        ]
    )
    backend_baseline_vars: list[str] = Field(
        default_factory=lambda: [
            "WORKOS_CLIENT_ID",
            "WORKOS_API_KEY",
            "WORKOS_WEBHOOK_SECRET",
            "WORKOS_ACTION_SECRET",
            "SITE_URL",
        ]
    )


class AuditSettings(BaseModel):
    """Dependency audit gate settings."""

    command: list[str] = Field(default_factory=lambda: ["npm", "audit", "--json"])
    report_path: str = Field(default="security-reports/dependency-audit-report.json")
    compensating_control: str = Field(
        default=(
            "Current gate blocks high/critical only. Track package upgrades and keep "
            "production servers isolated from dev tooling attack surfaces."
        )
    )


class SuppressionSettings(BaseModel):
    """Suppression-comment check settings."""

    targets: list[str] = Field(default_factory=lambda: ["src", "convex", "vite.config.ts"])
    extensions: list[str] = Field(default_factory=lambda: [".ts", ".tsx", ".js", ".mjs", ".cjs"])
    prune_dirs: list[str] = Field(default_factory=lambda: list(PRUNED_DIRS))


class StyleTokenSettings(BaseModel):
    """Text style token check settings."""

    roots: list[str] = Field(default_factory=lambda: ["src/app"])
    extensions: list[str] = Field(default_factory=lambda: list(TS_EXTENSIONS))
    skip_prefixes: list[str] = Field(default_factory=lambda: ["src/imports/"])
    skip_substrings: list[str] = Field(default_factory=lambda: list(TEST_SUFFIXES))
    prune_dirs: list[str] = Field(default_factory=lambda: list(PRUNED_DIRS))


class PerformanceSettings(BaseModel):
    """Phased performance budget settings."""

    dist_dir: str = Field(default="dist")
    index_path: str = Field(default="dist/index.html")
    assets_dir: str = Field(default="dist/assets")
    budgets_path: str = Field(default="config/performance/budgets.json")
    report_path: str = Field(default="performance-reports/performance-budget-report.json")
    compression_level: int = Field(default=9, ge=0, le=9)
    dashboard_pattern: str = Field(default=r"^DashboardApp-[A-Za-z0-9_-]+\.js$")


class DeprecatedEndpointSettings(BaseModel):
    """Deprecated backend endpoint reference settings."""

    roots: list[str] = Field(default_factory=lambda: ["src/app"])
    extensions: list[str] = Field(default_factory=lambda: list(TS_EXTENSIONS))
    skip_suffixes: list[str] = Field(default_factory=lambda: list(TEST_SUFFIXES))
    endpoints: list[str] = Field(
        default_factory=lambda: [
            "api.dashboard.getSnapshot",
            "api.dashboard.getWorkspaceContext",
            "api.dashboard.getActiveWorkspaceSummary",
            "api.settings.getCompanySettings",
            "api.files.listForProject",
        ]
    )


class SpaRewriteSettings(BaseModel):
    """Hosting SPA rewrite settings."""

    config_path: str = Field(default="vercel.json")
    destinations: list[str] = Field(default_factory=lambda: ["/", "/index.html"])
    extensionless_marker: str = Field(
        default=r".*\..*",
        description="Sources containing this fragment exclude paths with a file extension",
    )
    catch_all_sources: list[str] = Field(
        default_factory=lambda: ["/(.*)", "/:path*", "/:path(.*)", "/:match*", "/:match(.*)"]
    )


class GateSettings(BaseModel):
    """Main settings for policy-gate."""

    any_usage: AnyUsageSettings = Field(default_factory=AnyUsageSettings)
    feature_size: FeatureSizeSettings = Field(default_factory=FeatureSizeSettings)
    component_size: ComponentSizeSettings = Field(default_factory=ComponentSizeSettings)
    bundle: BundleSettings = Field(default_factory=BundleSettings)
    coverage: CoverageSettings = Field(default_factory=CoverageSettings)
    secrets: SecretsSettings = Field(default_factory=SecretsSettings)
    urls: UrlPolicySettings = Field(default_factory=UrlPolicySettings)
    env: EnvExampleSettings = Field(default_factory=EnvExampleSettings)
    audit: AuditSettings = Field(default_factory=AuditSettings)
    suppressions: SuppressionSettings = Field(default_factory=SuppressionSettings)
    style_tokens: StyleTokenSettings = Field(default_factory=StyleTokenSettings)
    performance: PerformanceSettings = Field(default_factory=PerformanceSettings)
    deprecated_endpoints: DeprecatedEndpointSettings = Field(default_factory=DeprecatedEndpointSettings)
    spa_rewrite: SpaRewriteSettings = Field(default_factory=SpaRewriteSettings)


SETTINGS_FILENAMES = (".policy-gate.yaml", ".policy-gate.yml", "policy-gate.yaml")


def get_settings_paths(root: Path) -> list[Path]:
    """Get possible settings file paths for a repository root.

    Args:
        root: Repository root

    Returns:
        Candidate paths in lookup order
    """
    return [root / name for name in SETTINGS_FILENAMES]


def load_settings(root: Path | str, settings_path: Path | str | None = None) -> GateSettings:
    """Load settings for a repository.

    Args:
        root: Repository root
        settings_path: Explicit settings file. If None, searches the root.

    Returns:
        Loaded settings, or defaults when no settings file exists

    Raises:
        ConfigurationError: If an explicit file is missing or any file is invalid
    """
    if settings_path is not None:
        path = Path(settings_path)
        if not path.exists():
            raise ConfigurationError(f"Settings file not found: {path}", path=path)
        return _load_settings_file(path)

    for path in get_settings_paths(Path(root)):
        if path.exists():
            return _load_settings_file(path)

    return GateSettings()


def _load_settings_file(path: Path) -> GateSettings:
    """Load settings from a specific YAML file."""
    try:
        data = yaml.safe_load(path.read_text(encoding="utf-8"))
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in settings file {path}: {e}", path=path) from e

    if data is None:
        return GateSettings()
    if not isinstance(data, dict):
        raise ConfigurationError(f"Settings file {path} must contain a mapping", path=path)

    try:
        return GateSettings.model_validate(data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid settings in {path}: {e}", path=path) from e
