"""Unit tests for pattern scanning, allowlists and size tiers."""

import pytest

from policy_gate.core.allowlist import AllowlistMatcher, load_allowlist
from policy_gate.core.scanner import PatternRule, line_of, scan_lines, scan_text
from policy_gate.core.tiers import evaluate_size
from policy_gate.models.common import Status
from policy_gate.models.findings import AllowlistEntry, FindingRecord, Location
from policy_gate.utils.errors import ConfigurationError

RULES = [
    PatternRule(id="todo", description="todo marker", pattern=r"TODO"),
    PatternRule(id="fixme", description="fixme marker", pattern=r"fixme", ignore_case=True),
]


def _finding(path="a.ts", rule_id="todo", text="TODO"):
    return FindingRecord(location=Location(path=path, line=1), rule_id=rule_id, matched_text=text)


class TestScanText:
    """Tests for scan_text."""

    def test_every_occurrence(self):
        """Test all matches are reported with line numbers."""
        findings = scan_text("a.ts", "TODO one\nok\nTODO two\nFIXME", RULES)
        assert [(f.rule_id, f.location.line) for f in findings] == [("todo", 1), ("todo", 3), ("fixme", 4)]
        assert findings[2].matched_text == "FIXME"

    def test_first_only(self):
        """Test first_only keeps one match per rule."""
        findings = scan_text("a.ts", "TODO\nTODO\nfixme", RULES, first_only=True)
        assert [f.rule_id for f in findings] == ["todo", "fixme"]

    def test_no_matches(self):
        """Test clean text yields nothing."""
        assert scan_text("a.ts", "clean", RULES) == []

    def test_line_of(self):
        """Test offsets map to 1-based lines."""
        assert line_of("ab\ncd\nef", 0) == 1
        assert line_of("ab\ncd\nef", 3) == 2
        assert line_of("ab\ncd\nef", 7) == 3


class TestScanLines:
    """Tests for scan_lines."""

    def test_one_finding_per_line(self):
        """Test only the first matching rule of a line is reported."""
        findings = scan_lines("a.ts", "  // TODO fixme  \nok\nfixme", RULES)
        assert [(f.rule_id, f.location.line) for f in findings] == [("todo", 1), ("fixme", 3)]
        assert findings[0].matched_text == "// TODO fixme"

    def test_every_rule_per_line(self):
        """Test all matching rules of a line are reported when asked."""
        findings = scan_lines("a.ts", "  // TODO fixme  \nok\nfixme", RULES, first_rule_only=False)
        assert [(f.rule_id, f.location.line) for f in findings] == [("todo", 1), ("fixme", 1), ("fixme", 3)]


class TestAllowlistMatcher:
    """Tests for AllowlistMatcher."""

    def test_path_and_rule_match(self):
        """Test an entry without match text suppresses every match."""
        matcher = AllowlistMatcher([AllowlistEntry(path="a.ts", rule_id="todo")])
        assert matcher.is_suppressed(_finding())
        assert not matcher.is_suppressed(_finding(path="b.ts"))
        assert not matcher.is_suppressed(_finding(rule_id="fixme"))

    def test_match_text_substring(self):
        """Test match text must be a substring of the matched text."""
        matcher = AllowlistMatcher([AllowlistEntry(path="a.ts", rule_id="todo", match_text="safe")])
        assert matcher.is_suppressed(_finding(text="TODO safe value"))
        assert not matcher.is_suppressed(_finding(text="TODO other"))

    def test_filter_keeps_order(self):
        """Test filter drops suppressed findings only."""
        matcher = AllowlistMatcher([AllowlistEntry(path="b.ts", rule_id="todo")])
        kept = matcher.filter([_finding(path="a.ts"), _finding(path="b.ts"), _finding(path="c.ts")])
        assert [f.location.path for f in kept] == ["a.ts", "c.ts"]


class TestLoadAllowlist:
    """Tests for load_allowlist."""

    PATH = "config/security/secret-scan-allowlist.json"

    def test_missing_file_is_empty(self, memory_repo):
        """Test a missing allowlist is an empty one."""
        allowlist = load_allowlist(memory_repo({}), self.PATH)
        assert allowlist.ignored_matches == []
        assert allowlist.ignored_path_prefixes == []

    def test_aliases(self, memory_repo):
        """Test camelCase keys are read."""
        doc = {
            "ignoredPathPrefixes": ["fixtures/"],
            "ignoredMatches": [{"path": "a.ts", "patternId": "github-token", "matchText": "ghp_test"}],
        }
        allowlist = load_allowlist(memory_repo({self.PATH: doc}), self.PATH)
        assert allowlist.ignored_path_prefixes == ["fixtures/"]
        entry = allowlist.ignored_matches[0]
        assert entry.rule_id == "github-token"
        assert entry.match_text == "ghp_test"

    def test_malformed(self, memory_repo):
        """Test a malformed allowlist raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            load_allowlist(memory_repo({self.PATH: "[oops"}), self.PATH)

    def test_entry_without_rule(self, memory_repo):
        """Test an entry missing its rule id is rejected."""
        doc = {"ignoredMatches": [{"path": "a.ts"}]}
        with pytest.raises(ConfigurationError):
            load_allowlist(memory_repo({self.PATH: doc}), self.PATH)


class TestEvaluateSize:
    """Tests for the two-tier size policy."""

    @pytest.mark.parametrize(
        "measured,expected",
        [(899, Status.PASS), (900, Status.PASS), (901, Status.WARN), (1200, Status.WARN), (1201, Status.FAIL)],
    )
    def test_two_tiers(self, measured, expected):
        """Test the warn and hard limits are inclusive."""
        assert evaluate_size(measured, 1200, warn_limit=900) == expected

    def test_legacy_exempt_warns(self):
        """Test a legacy file above the hard limit warns instead of failing."""
        assert evaluate_size(400, 350, legacy_exempt=True) == Status.WARN
        assert evaluate_size(300, 350, legacy_exempt=True) == Status.PASS
