"""Shared primitives of the policy checks.

Every check composes the same steps: resolve its scope, load its strict
configuration, scan or measure, compare against thresholds, write a report
and derive a verdict.
"""

from policy_gate.core.scope import (
    DiskFileSource,
    FileSource,
    MemoryFileSource,
    ScopeRule,
    count_lines,
    resolve_scope,
)
from policy_gate.core.loader import read_json, require_finite, to_finite
from policy_gate.core.scanner import PatternRule, count_matches, scan_lines, scan_text
from policy_gate.core.allowlist import AllowlistMatcher, load_allowlist
from policy_gate.core.tiers import evaluate_size
from policy_gate.core.report import render_report, write_report
from policy_gate.core.verdict import Verdict, VerdictSummary

__all__ = [
    # Scope
    "DiskFileSource",
    "FileSource",
    "MemoryFileSource",
    "ScopeRule",
    "count_lines",
    "resolve_scope",
    # Loader
    "read_json",
    "require_finite",
    "to_finite",
    # Scanner
    "PatternRule",
    "count_matches",
    "scan_lines",
    "scan_text",
    # Allowlist
    "AllowlistMatcher",
    "load_allowlist",
    # Policy evaluation
    "evaluate_size",
    # Output
    "render_report",
    "write_report",
    "Verdict",
    "VerdictSummary",
]
