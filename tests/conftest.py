"""Shared test fixtures for policy-gate tests."""

import json
import logging
from pathlib import Path
from typing import Any, Callable

import pytest

from policy_gate.core.scope import MemoryFileSource
from policy_gate.utils.config import GateSettings


@pytest.fixture(autouse=True)
def reset_package_logger():
    """Drop handlers installed by CLI invocations so they do not outlive the test."""
    yield
    logger = logging.getLogger("policy_gate")
    logger.handlers = []
    logger.setLevel(logging.NOTSET)
    logger.propagate = True


def tier_entry(
    app: str = "https://app.example.io",
    site: str = "https://x.convex.site",
    **overrides: Any,
) -> dict[str, Any]:
    """Build a consistent environment matrix entry."""
    entry = {
        "appOrigin": app,
        "workosRedirectUri": f"{app}/auth/callback",
        "convexSiteUrl": site,
        "workosWebhookUrl": f"{site}/workos/webhook",
        "workosActionUrl": f"{site}/workos/action",
        "frontendRequiredVars": [
            "VITE_CONVEX_URL",
            "VITE_WORKOS_CLIENT_ID",
            "VITE_WORKOS_REDIRECT_URI",
        ],
        "convexRequiredVars": [
            "WORKOS_CLIENT_ID",
            "WORKOS_API_KEY",
            "WORKOS_WEBHOOK_SECRET",
            "WORKOS_ACTION_SECRET",
            "SITE_URL",
        ],
    }
    entry.update(overrides)
    return entry


@pytest.fixture
def make_tier() -> Callable[..., dict[str, Any]]:
    """Factory for consistent environment matrix entries."""
    return tier_entry


@pytest.fixture
def settings() -> GateSettings:
    """Default settings."""
    return GateSettings()


@pytest.fixture
def environment_matrix() -> dict[str, Any]:
    """A matrix that satisfies every URL and variable rule."""
    return {
        "environments": {
            "dev": tier_entry(app="http://localhost:5173", site="http://127.0.0.1:3211"),
            "staging": tier_entry(app="https://staging.app.io", site="https://staging-x.convex.site"),
            "prod": tier_entry(app="https://app.io", site="https://x.convex.site"),
        }
    }


@pytest.fixture
def env_examples() -> dict[str, str]:
    """Example env files documenting every baseline variable."""
    return {
        ".env.example": (
            "# Frontend\n"
            "VITE_CONVEX_URL=https://your-deployment.convex.cloud\n"
            "VITE_WORKOS_CLIENT_ID=client_123\n"
            "VITE_WORKOS_REDIRECT_URI=http://localhost:5173/auth/callback\n"
        ),
        "convex/.env.example": (
            "WORKOS_CLIENT_ID=\n"
            "WORKOS_API_KEY=\n"
            "\n"
            "WORKOS_WEBHOOK_SECRET=\n"
            "WORKOS_ACTION_SECRET=\n"
            "SITE_URL=http://localhost:5173\n"
        ),
    }


@pytest.fixture
def memory_repo() -> Callable[..., MemoryFileSource]:
    """Factory for in-memory repositories; dict values are dumped as JSON."""

    def _build(files: dict[str, Any]) -> MemoryFileSource:
        return MemoryFileSource(
            {
                path: json.dumps(content) if isinstance(content, (dict, list)) else content
                for path, content in files.items()
            }
        )

    return _build


@pytest.fixture
def disk_repo(tmp_path: Path) -> Callable[[dict[str, Any]], Path]:
    """Write files into a temporary repository root and return the root."""

    def _write(files: dict[str, Any]) -> Path:
        for relative, content in files.items():
            path = tmp_path / relative
            path.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, (dict, list)):
                path.write_text(json.dumps(content), encoding="utf-8")
            elif isinstance(content, bytes):
                path.write_bytes(content)
            else:
                path.write_text(content, encoding="utf-8")
        return tmp_path

    return _write
