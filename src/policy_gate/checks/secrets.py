"""Secret-shaped pattern scan over version-controlled files.

Every occurrence of every pattern is reported, not just the first per file,
so that a credential split across several places surfaces in full. There is
no warn tier: any finding left after allowlisting fails the check.
"""

from __future__ import annotations

import subprocess
from pathlib import Path

from policy_gate.core.allowlist import AllowlistMatcher, load_allowlist
from policy_gate.core.scanner import PatternRule, scan_text
from policy_gate.core.scope import FileSource
from policy_gate.models.common import Status
from policy_gate.models.findings import FindingRecord
from policy_gate.models.report import CheckItem, CheckResult
from policy_gate.utils.config import SecretsSettings
from policy_gate.utils.errors import ToolError
from policy_gate.utils.logging import get_logger

logger = get_logger("checks.secrets")

SECRET_PATTERNS = [
    PatternRule(
        id="private-key-block",
        description="Private key block",
        pattern=r"-----BEGIN [A-Z0-9 ]*PRIVATE KEY-----",
    ),
    PatternRule(
        id="github-token",
        description="GitHub token",
        pattern=r"\bghp_[A-Za-z0-9]{20,}\b",
    ),
    PatternRule(
        id="aws-access-key-id",
        description="AWS access key id",
        pattern=r"\bAKIA[0-9A-Z]{16}\b",
    ),
    PatternRule(
        id="slack-token",
        description="Slack token",
        pattern=r"\bxox[baprs]-[A-Za-z0-9-]{10,}\b",
    ),
    PatternRule(
        id="openai-style-key",
        description="OpenAI-style key",
        pattern=r"\bsk-(?:live|test|proj)-[A-Za-z0-9]{10,}\b",
    ),
    PatternRule(
        id="hardcoded-workos-secret",
        description="Hardcoded WorkOS secret value",
        pattern=(
            r"\b(?:WORKOS_API_KEY|WORKOS_WEBHOOK_SECRET|WORKOS_ACTION_SECRET)\b"
            r"\s*[:=]\s*[\"'][^\"'\n]{8,}[\"']"
        ),
    ),
]


def git_tracked_files(root: Path | str) -> list[str]:
    """List files tracked by git under ``root``.

    Raises:
        ToolError: If git is unavailable or the listing fails
    """
    command = ["git", "ls-files", "-z"]
    try:
        completed = subprocess.run(command, cwd=root, capture_output=True, text=True)
    except OSError as e:
        raise ToolError(f"Unable to run git: {e}", command=command) from e
    if completed.returncode != 0:
        raise ToolError(f"git ls-files failed: {completed.stderr.strip()}", command=command)
    return [p for p in completed.stdout.split("\0") if p]


def is_binary(data: bytes) -> bool:
    return b"\0" in data


def check_secrets(
    source: FileSource,
    settings: SecretsSettings,
    tracked_files: list[str],
    patterns: list[PatternRule] | None = None,
) -> CheckResult:
    """Scan tracked files for secret-shaped strings.

    Args:
        source: Repository file source
        settings: Secret scanner settings
        tracked_files: Repository-relative paths under version control
        patterns: Pattern catalog (defaults to SECRET_PATTERNS)
    """
    patterns = patterns if patterns is not None else SECRET_PATTERNS
    allowlist = load_allowlist(source, settings.allowlist_path)
    matcher = AllowlistMatcher(allowlist.ignored_matches)
    prefixes = tuple(dict.fromkeys([*settings.ignored_path_prefixes, *allowlist.ignored_path_prefixes]))

    candidates = [p for p in tracked_files if not p.startswith(prefixes)]
    findings: list[FindingRecord] = []
    suppressed = 0
    scanned = 0
    for path in candidates:
        if not source.exists(path):
            logger.debug(f"Tracked file missing from working tree, skipping: {path}")
            continue
        if source.is_dir(path):
            logger.debug(f"Tracked path is a directory (submodule), skipping: {path}")
            continue
        data = source.read_bytes(path)
        if is_binary(data):
            continue
        scanned += 1
        raw = scan_text(path, data.decode("utf-8", errors="replace"), patterns)
        kept = matcher.filter(raw)
        suppressed += len(raw) - len(kept)
        findings.extend(kept)
    logger.debug(f"Scanned {scanned} text files, suppressed {suppressed} allowlisted matches")

    items = [
        CheckItem(
            status=Status.FAIL,
            message=f"{f.location} [{f.rule_id}] {f.description} -> {f.preview}",
            path=f.location.path,
            line=f.location.line,
            rule_id=f.rule_id,
        )
        for f in findings
    ]

    return CheckResult(
        check="secrets",
        title=f"Secret scan ({len(candidates)} tracked files)",
        policy={
            "patterns": [p.id for p in patterns],
            "ignoredPathPrefixes": list(prefixes),
            "allowlistEntries": len(allowlist.ignored_matches),
        },
        measured={"filesScanned": scanned, "findings": len(findings), "suppressed": suppressed},
        items=items,
    )
