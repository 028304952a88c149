"""Cross-field URL policy over the multi-environment matrix."""

from __future__ import annotations

from urllib.parse import SplitResult, urlsplit

from policy_gate.core.loader import read_json
from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.env import URL_FIELDS, VAR_LIST_FIELDS, EnvironmentMatrix, EnvironmentProfile, Tier
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import UrlPolicySettings

DEFAULT_PORTS = {"http": 80, "https": 443}


def parse_absolute_url(value: object) -> SplitResult | None:
    """Parse a value as an absolute URL, or None when it is not one."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parts = urlsplit(value.strip())
        parts.port  # raises ValueError for a malformed port
    except ValueError:
        return None
    if not parts.scheme or not parts.hostname:
        return None
    return parts


def url_origin(parts: SplitResult) -> str:
    """``scheme://host[:port]`` with case folded and default ports dropped."""
    scheme = parts.scheme.lower()
    host = parts.hostname or ""
    if ":" in host:
        host = f"[{host}]"
    port = parts.port
    if port is not None and port != DEFAULT_PORTS.get(scheme):
        return f"{scheme}://{host}:{port}"
    return f"{scheme}://{host}"


def normalize_url(parts: SplitResult) -> str:
    """Canonical string form used for exact comparisons.

    Scheme and host are lowercased, default ports removed, an empty path
    becomes ``/`` and a single trailing slash is stripped.
    """
    url = url_origin(parts) + (parts.path or "/")
    if parts.query:
        url += f"?{parts.query}"
    if parts.fragment:
        url += f"#{parts.fragment}"
    return url[:-1] if url.endswith("/") else url


def is_placeholder(value: object, markers: list[str]) -> bool:
    return isinstance(value, str) and any(marker in value for marker in markers)


def _tier_failures(name: str, entry: dict, settings: UrlPolicySettings, strict: bool) -> list[str]:
    failures: list[str] = []

    for field in URL_FIELDS:
        value = entry.get(field)
        if not isinstance(value, str) or not value.strip():
            failures.append(f'Missing or empty "{field}"')
        elif strict and is_placeholder(value, settings.placeholder_markers):
            failures.append(f'"{field}" still uses placeholder value: {value}')
    for field in VAR_LIST_FIELDS:
        value = entry.get(field)
        if not isinstance(value, list) or not value:
            failures.append(f'"{field}" must be a non-empty list')

    parsed = {field: parse_absolute_url(entry.get(field)) for field in URL_FIELDS}
    if any(parts is None for parts in parsed.values()):
        invalid = ", ".join(field for field, parts in parsed.items() if parts is None)
        failures.append(f"All URL fields must be valid absolute URLs (invalid: {invalid})")
        return failures

    profile = EnvironmentProfile.model_validate({field: entry[field] for field in URL_FIELDS})
    app_origin = parsed["appOrigin"]
    redirect = parsed["workosRedirectUri"]
    site = parsed["convexSiteUrl"]

    if redirect.path != settings.callback_path:
        failures.append(f"workosRedirectUri must use {settings.callback_path} path (got {redirect.path or '/'})")
    if url_origin(redirect) != url_origin(app_origin):
        failures.append(
            f"appOrigin must match the origin of workosRedirectUri "
            f"({url_origin(app_origin)} != {url_origin(redirect)})"
        )

    base = normalize_url(site)
    for field, actual, suffix in (
        ("workosWebhookUrl", profile.webhook_url, settings.webhook_suffix),
        ("workosActionUrl", profile.action_url, settings.action_suffix),
    ):
        expected = f"{base}{suffix}"
        expected_parts = parse_absolute_url(expected)
        if expected_parts is None or normalize_url(parsed[field]) != normalize_url(expected_parts):
            failures.append(f"{field} must equal {expected} (got {actual})")

    if name != Tier.DEV.value:
        for field, parts in parsed.items():
            if parts.scheme.lower() != "https":
                failures.append(f"{field} must use https (got {parts.scheme}:)")

    return failures


def check_urls(
    source: FileSource,
    settings: UrlPolicySettings,
    env: str | None = None,
    strict_placeholders: bool = False,
) -> CheckResult:
    """Validate URL consistency for one tier, or every tier when ``env`` is None."""
    doc = read_json(source, settings.matrix_path, f"Environment matrix not found: {settings.matrix_path}")
    environments = doc.get("environments") if isinstance(doc, dict) else None
    matrix = EnvironmentMatrix(environments=environments if isinstance(environments, dict) else {})

    tiers = [env] if env else Tier.names()
    items: list[CheckItem] = []
    for name in tiers:
        if name not in Tier.names():
            items.append(
                CheckItem(
                    status=Status.FAIL,
                    message=f'Unsupported environment "{name}". Expected one of: {", ".join(Tier.names())}.',
                )
            )
            continue
        entry = matrix.tier(name)
        if entry is None:
            items.append(
                CheckItem(status=Status.FAIL, message=f'Missing environment "{name}" in {settings.matrix_path}.')
            )
            continue

        failures = _tier_failures(name, entry, settings, strict_placeholders)
        if failures:
            items.extend(CheckItem(status=Status.FAIL, message=f"[{name}] {f}", rule_id=name) for f in failures)
        else:
            items.append(CheckItem(status=Status.PASS, message=f"[{name}] URL policy consistent", rule_id=name))

    return CheckResult(
        check="urls",
        title=f"URL policy validation for: {', '.join(tiers)}",
        policy={
            "tiers": tiers,
            "callbackPath": settings.callback_path,
            "webhookSuffix": settings.webhook_suffix,
            "actionSuffix": settings.action_suffix,
            "strictPlaceholders": strict_placeholders,
        },
        measured={"tiersChecked": len(tiers)},
        items=items,
    )
