"""Unit tests for strict configuration loading."""

import math

import pytest

from policy_gate.core.loader import (
    load_any_usage_budgets,
    load_bundle_budgets,
    load_coverage_thresholds,
    load_performance_budgets,
    read_json,
    require_finite,
    to_finite,
)
from policy_gate.utils.errors import ConfigurationError, InvalidValueError


class TestToFinite:
    """Tests for to_finite coercion."""

    @pytest.mark.parametrize("value,expected", [(5, 5.0), (2.5, 2.5), ("80", 80.0), (" 7.5 ", 7.5)])
    def test_accepts_numbers(self, value, expected):
        """Test numbers and numeric strings coerce."""
        assert to_finite(value) == expected

    @pytest.mark.parametrize("value", [None, True, "", "abc", "1_000", math.nan, math.inf, "Infinity", [1], {}])
    def test_rejects_non_finite(self, value):
        """Test non-numeric and non-finite values are rejected."""
        assert to_finite(value) is None


class TestRequireFinite:
    """Tests for require_finite."""

    def test_digit_separator_rejected(self):
        """Test a threshold spelled with an underscore is invalid."""
        with pytest.raises(InvalidValueError):
            require_finite({"linesPct": "1_000"}, "linesPct", "thresholds.json")

    def test_missing_key(self):
        """Test a missing key raises InvalidValueError naming the key."""
        with pytest.raises(InvalidValueError) as exc_info:
            require_finite({}, "maxTotalAny", "budgets.json")
        assert exc_info.value.code == "INVALID_VALUE"
        assert exc_info.value.details["key"] == "maxTotalAny"

    def test_not_a_mapping(self):
        """Test a non-object document raises."""
        with pytest.raises(InvalidValueError):
            require_finite([1, 2], "maxTotalAny", "budgets.json")


class TestReadJson:
    """Tests for read_json."""

    def test_missing_file(self, memory_repo):
        """Test a missing file raises ConfigurationError with the custom message."""
        with pytest.raises(ConfigurationError) as exc_info:
            read_json(memory_repo({}), "config/x.json", "X config not found")
        assert "X config not found" in str(exc_info.value)

    def test_malformed(self, memory_repo):
        """Test malformed JSON raises ConfigurationError."""
        with pytest.raises(ConfigurationError, match="Malformed JSON"):
            read_json(memory_repo({"x.json": "{not json"}), "x.json")


class TestAnyUsageBudgets:
    """Tests for load_any_usage_budgets."""

    PATH = "config/quality/any-usage-budgets.json"

    def test_valid(self, memory_repo):
        """Test total and per-file budgets load."""
        source = memory_repo({self.PATH: {"maxTotalAny": 10, "maxAnyByFile": {"src/a.ts": "2"}}})
        budgets = load_any_usage_budgets(source, self.PATH)
        assert budgets.max_total == 10
        assert budgets.max_by_file == {"src/a.ts": 2.0}

    def test_per_file_optional(self, memory_repo):
        """Test maxAnyByFile may be absent."""
        budgets = load_any_usage_budgets(memory_repo({self.PATH: {"maxTotalAny": 0}}), self.PATH)
        assert budgets.max_by_file == {}

    def test_non_finite_total(self, memory_repo):
        """Test a non-numeric total is rejected."""
        with pytest.raises(InvalidValueError):
            load_any_usage_budgets(memory_repo({self.PATH: {"maxTotalAny": "lots"}}), self.PATH)

    def test_invalid_per_file_value(self, memory_repo):
        """Test an invalid per-file entry names the file."""
        source = memory_repo({self.PATH: {"maxTotalAny": 1, "maxAnyByFile": {"src/a.ts": None}}})
        with pytest.raises(InvalidValueError) as exc_info:
            load_any_usage_budgets(source, self.PATH)
        assert exc_info.value.details["key"] == "maxAnyByFile.src/a.ts"


class TestBundleBudgets:
    """Tests for load_bundle_budgets."""

    PATH = "config/performance/bundle-budgets.json"

    def test_valid(self, memory_repo):
        """Test named metrics load."""
        source = memory_repo({self.PATH: {"metrics": {"a": 10, "b": 20.5, "unused": "x"}}})
        budgets = load_bundle_budgets(source, self.PATH, ["a", "b"])
        assert budgets.budgets_kb == {"a": 10.0, "b": 20.5}

    def test_missing_metrics(self, memory_repo):
        """Test a document without a metrics table is rejected."""
        with pytest.raises(InvalidValueError):
            load_bundle_budgets(memory_repo({self.PATH: {}}), self.PATH, ["a"])

    def test_missing_key(self, memory_repo):
        """Test a missing budget key is rejected."""
        with pytest.raises(InvalidValueError):
            load_bundle_budgets(memory_repo({self.PATH: {"metrics": {"a": 1}}}), self.PATH, ["a", "b"])


class TestCoverageThresholds:
    """Tests for load_coverage_thresholds."""

    PATH = "config/quality/backend-coverage-thresholds.json"

    def test_active_phase(self, memory_repo):
        """Test the active phase's thresholds are selected."""
        doc = {
            "activePhase": "phase2",
            "phases": {
                "phase1": {"thresholds": {"linesPct": 50, "functionsPct": 50}},
                "phase2": {"thresholds": {"linesPct": 80, "functionsPct": 75}},
            },
        }
        thresholds = load_coverage_thresholds(memory_repo({self.PATH: doc}), self.PATH)
        assert thresholds.active_phase == "phase2"
        assert thresholds.lines_pct == 80
        assert thresholds.functions_pct == 75

    def test_unknown_active_phase(self, memory_repo):
        """Test an active phase without thresholds is rejected."""
        doc = {"activePhase": "phase9", "phases": {"phase1": {"thresholds": {}}}}
        with pytest.raises(InvalidValueError) as exc_info:
            load_coverage_thresholds(memory_repo({self.PATH: doc}), self.PATH)
        assert exc_info.value.details["key"] == "activePhase"

    def test_non_finite_threshold(self, memory_repo):
        """Test a non-finite threshold is rejected."""
        doc = {"activePhase": "p", "phases": {"p": {"thresholds": {"linesPct": 80, "functionsPct": "NaN"}}}}
        with pytest.raises(InvalidValueError):
            load_coverage_thresholds(memory_repo({self.PATH: doc}), self.PATH)


class TestPerformanceBudgets:
    """Tests for load_performance_budgets."""

    PATH = "config/performance/budgets.json"
    KEYS = ["entryJsGzipKb", "largestAssetKb"]

    def test_active_phase(self, memory_repo):
        """Test the active phase's metrics are selected."""
        doc = {
            "activePhase": "phase2",
            "phases": {
                "phase1": {"metrics": {"entryJsGzipKb": 300, "largestAssetKb": 900}},
                "phase2": {"metrics": {"entryJsGzipKb": "250", "largestAssetKb": 800.5}},
            },
        }
        budgets = load_performance_budgets(memory_repo({self.PATH: doc}), self.PATH, self.KEYS)
        assert budgets.active_phase == "phase2"
        assert budgets.budgets_kb == {"entryJsGzipKb": 250.0, "largestAssetKb": 800.5}

    def test_missing_file(self, memory_repo):
        with pytest.raises(ConfigurationError, match="Performance budget config not found"):
            load_performance_budgets(memory_repo({}), self.PATH, self.KEYS)

    def test_phase_without_metrics(self, memory_repo):
        """Test an active phase without a metrics table is rejected."""
        doc = {"activePhase": "p", "phases": {"p": {"thresholds": {}}}}
        with pytest.raises(InvalidValueError) as exc_info:
            load_performance_budgets(memory_repo({self.PATH: doc}), self.PATH, self.KEYS)
        assert exc_info.value.details["key"] == "activePhase"

    def test_missing_metric(self, memory_repo):
        doc = {"activePhase": "p", "phases": {"p": {"metrics": {"entryJsGzipKb": 1}}}}
        with pytest.raises(InvalidValueError) as exc_info:
            load_performance_budgets(memory_repo({self.PATH: doc}), self.PATH, self.KEYS)
        assert exc_info.value.details["key"] == "phases.p.metrics.largestAssetKb"
