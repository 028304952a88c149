"""Suppression of findings previously accepted as known-safe."""

from __future__ import annotations

from policy_gate.core.loader import read_json
from policy_gate.core.scope import FileSource
from policy_gate.models.findings import AllowlistEntry, FindingRecord, SecretAllowlist
from policy_gate.utils.errors import ConfigurationError


class AllowlistMatcher:
    """Matches findings against allowlist entries.

    A finding is suppressed iff an entry has the same path and rule id and,
    when the entry carries a substring, the matched text contains it.

    Example:
        matcher = AllowlistMatcher(allowlist.ignored_matches)
        kept = matcher.filter(findings)
    """

    def __init__(self, entries: list[AllowlistEntry]):
        self._by_key: dict[tuple[str, str], list[AllowlistEntry]] = {}
        for entry in entries:
            self._by_key.setdefault((entry.path, entry.rule_id), []).append(entry)

    def is_suppressed(self, finding: FindingRecord) -> bool:
        for entry in self._by_key.get((finding.location.path, finding.rule_id), []):
            if not entry.match_text or entry.match_text in finding.matched_text:
                return True
        return False

    def filter(self, findings: list[FindingRecord]) -> list[FindingRecord]:
        """Drop suppressed findings, keeping order."""
        return [f for f in findings if not self.is_suppressed(f)]


def load_allowlist(source: FileSource, path: str) -> SecretAllowlist:
    """Load an allowlist file; a missing file is an empty allowlist.

    Raises:
        ConfigurationError: If the file exists but is malformed
    """
    if not source.exists(path):
        return SecretAllowlist()
    data = read_json(source, path)
    if not isinstance(data, dict):
        raise ConfigurationError(f"Allowlist {path} must contain a JSON object", path=path)

    matches = data.get("ignoredMatches")
    prefixes = data.get("ignoredPathPrefixes")
    try:
        return SecretAllowlist(
            ignored_path_prefixes=[str(p) for p in prefixes] if isinstance(prefixes, list) else [],
            ignored_matches=[
                AllowlistEntry.model_validate(m) for m in matches
            ] if isinstance(matches, list) else [],
        )
    except ValueError as e:
        raise ConfigurationError(f"Invalid allowlist entry in {path}: {e}", path=path) from e
