"""policy-gate: repository policy checks for CI pipelines.

Each check reads repository files and build artifacts, compares measured
values against fixed policy and reports a verdict:

- **Source budgets**: explicit `any` usage, feature module and UI component size
- **Artifact budgets**: gzip chunk sizes, phased performance budgets and backend
  coverage thresholds
- **Security gates**: committed secrets and dependency vulnerabilities
- **Environment configuration**: URL consistency, example env drift and the
  SPA hosting rewrite
- **Code hygiene**: suppression comments, typography tokens and deprecated
  endpoint references

Usage:
    # Library API
    from policy_gate import load_settings, run_check

    settings = load_settings(".")
    result = run_check("coverage", ".", settings)
    print(result.passed, [str(item) for item in result.failures])

CLI:
    policy-gate coverage
    policy-gate bundle-budgets --report-only
    policy-gate urls --env prod --strict-placeholders
    policy-gate run any-usage feature-size suppressions
"""

__version__ = "0.1.0"

from policy_gate.checks import CHECKS, CheckName, run_check
from policy_gate.core.scope import DiskFileSource, FileSource, MemoryFileSource
from policy_gate.core.verdict import Verdict, VerdictSummary
from policy_gate.models.common import GateError, Status
from policy_gate.models.report import CheckItem, CheckReport, CheckResult
from policy_gate.utils.config import GateSettings, load_settings
from policy_gate.utils.errors import PolicyGateError

__all__ = [
    # Version
    "__version__",
    # Checks
    "CHECKS",
    "CheckName",
    "run_check",
    # File access
    "DiskFileSource",
    "FileSource",
    "MemoryFileSource",
    # Results
    "CheckItem",
    "CheckReport",
    "CheckResult",
    "GateError",
    "Status",
    "Verdict",
    "VerdictSummary",
    # Settings and errors
    "GateSettings",
    "load_settings",
    "PolicyGateError",
]
