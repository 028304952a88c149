"""Integration tests for end-to-end check runs over a repository on disk."""

import json

import pytest

from policy_gate import CHECKS, CheckName, Status, load_settings, run_check
from policy_gate.core.verdict import Verdict, VerdictSummary
from policy_gate.utils.errors import PolicyGateError


@pytest.fixture
def repo(disk_repo, environment_matrix, env_examples):
    """A small repository that satisfies every check but secrets and deps."""
    return disk_repo(
        {
            ".policy-gate.yaml": "feature_size:\n  max_lines: 20\n  legacy_allowlist: [convex/legacy.ts]\n",
            "config/quality/any-usage-budgets.json": {"maxTotalAny": 2, "maxAnyByFile": {"src/app/api.ts": 1}},
            "config/quality/backend-coverage-thresholds.json": {
                "activePhase": "phase2",
                "phases": {
                    "phase1": {"thresholds": {"linesPct": 60, "functionsPct": 60}},
                    "phase2": {"thresholds": {"linesPct": 80, "functionsPct": 80}},
                },
            },
            "security-reports/coverage-backend/coverage-summary.json": {
                "total": {"lines": {"pct": 88.4}, "functions": {"pct": 80}}
            },
            "config/performance/bundle-budgets.json": {
                "metrics": {"dashboardChunkGzipKb": 50, "vendorMiscChunkGzipKb": 50}
            },
            "config/security/environment-matrix.json": environment_matrix,
            "dist/assets/DashboardApp-Xy12.js": "export default function DashboardApp() {}\n",
            "dist/assets/vendor-misc-Ab34.js": "export const misc = [];\n",
            "config/performance/budgets.json": {
                "activePhase": "launch",
                "phases": {
                    "launch": {
                        "metrics": {
                            "entryJsGzipKb": 50,
                            "entryCssGzipKb": 10,
                            "dashboardJsGzipKb": 50,
                            "largestAssetKb": 200,
                        }
                    }
                },
            },
            "dist/index.html": (
                '<script type="module" src="/assets/index-Qw56.js"></script>\n'
                '<link rel="stylesheet" href="/assets/index-Er78.css">\n'
            ),
            "dist/assets/index-Qw56.js": 'import "./DashboardApp-Xy12.js";\n',
            "dist/assets/index-Er78.css": ":root { color-scheme: light; }\n",
            "vercel.json": {"rewrites": [{"source": "/(.*)", "destination": "/index.html"}]},
            "src/app/api.ts": "export function parse(input: any): unknown {\n  return input;\n}\n",
            "src/app/Card.tsx": 'export const Card = () => <div className="txt-role-body">card</div>;\n',
            "convex/legacy.ts": "\n".join(["// legacy"] * 40),
            "convex/users.ts": "export const list = (ctx: any) => ctx.db;\n",
            **env_examples,
        }
    )


class TestRepositoryWorkflow:
    """Run every check against one repository."""

    @pytest.mark.parametrize(
        "name",
        [
            CheckName.ANY_USAGE,
            CheckName.FEATURE_SIZE,
            CheckName.COMPONENT_SIZE,
            CheckName.BUNDLE_BUDGETS,
            CheckName.COVERAGE,
            CheckName.URLS,
            CheckName.ENV,
            CheckName.SUPPRESSIONS,
            CheckName.STYLE_TOKENS,
            CheckName.PERF_BUDGETS,
            CheckName.DEPRECATED_ENDPOINTS,
            CheckName.SPA_REWRITE,
        ],
    )
    def test_clean_repository_passes(self, repo, name):
        """Test each check passes on a compliant repository."""
        result = run_check(name, repo, load_settings(repo))
        assert result.passed, [str(i) for i in result.failures]

    def test_settings_file_applies(self, repo):
        """Test the settings file changes the feature size policy."""
        result = run_check(CheckName.FEATURE_SIZE, repo, load_settings(repo))
        assert [str(i) for i in result.items] == ["WARN convex/legacy.ts: 40 lines (limit 20) (legacy allowlist)"]

    def test_bundle_report_written(self, repo):
        """Test the bundle check always writes its report."""
        result = run_check(CheckName.BUNDLE_BUDGETS, repo, load_settings(repo))
        report = repo / "performance-reports" / "bundle-budget-report.json"
        assert result.details["reportPath"] == str(report)
        data = json.loads(report.read_text())
        assert data["pass"] is True
        assert data["details"]["chunks"]["dashboardChunkGzipKb"] == "DashboardApp-Xy12.js"

    def test_regression_detected(self, repo):
        """Test adding a suppression and an any usage fails both checks."""
        (repo / "src" / "app" / "api.ts").write_text("// @ts-ignore\nexport const a: any = 1 as any;\n")
        settings = load_settings(repo)

        any_usage = run_check(CheckName.ANY_USAGE, repo, settings)
        assert [str(i) for i in any_usage.failures] == [
            "FAIL any usage total: 3 (budget 2)",
            "FAIL any usage in src/app/api.ts: 2 (budget 1)",
        ]
        suppressions = run_check(CheckName.SUPPRESSIONS, repo, settings)
        assert [i.status for i in suppressions.items] == [Status.FAIL]

    def test_symlink_cycle_counted_once(self, repo):
        """Test a symlink back to the root does not inflate the any total."""
        (repo / "src" / "app" / "loop").symlink_to("../..", target_is_directory=True)
        result = run_check(CheckName.ANY_USAGE, repo, load_settings(repo))
        assert result.measured["totalAny"] == 2
        assert result.passed

    def test_secrets_with_explicit_tracked_files(self, repo):
        """Test the secret scan over an explicit tracked file list."""
        (repo / "src" / "app" / "config.ts").write_text('const WORKOS_API_KEY = "sk_live_0123456789";\n')
        result = run_check(
            CheckName.SECRETS,
            repo,
            load_settings(repo),
            tracked_files=["src/app/config.ts", "src/app/api.ts", "dist/assets/vendor-misc-Ab34.js"],
        )
        assert [i.rule_id for i in result.failures] == ["hardcoded-workos-secret"]
        assert result.measured["filesScanned"] == 2

    def test_deps_with_recorded_output(self, repo):
        """Test the dependency gate over recorded scanner output."""
        output = json.dumps({"metadata": {"vulnerabilities": {"critical": 1, "total": 1}}, "vulnerabilities": {}})
        result = run_check(CheckName.DEPS, repo, load_settings(repo), audit_output=output)
        assert not result.passed
        assert (repo / "security-reports" / "dependency-audit-report.json").exists()

    def test_aggregate_verdict(self, repo):
        """Test aggregating every check with errors captured per check."""
        settings = load_settings(repo)
        verdicts = []
        for name in CHECKS:
            try:
                result = run_check(
                    name,
                    repo,
                    settings,
                    tracked_files=[],
                    audit_output='{"metadata": {"vulnerabilities": {}}}',
                )
            except PolicyGateError as e:
                verdicts.append(Verdict(check=name.value, error=e.to_gate_error()))
                continue
            verdicts.append(Verdict(check=name.value, result=result))

        summary = VerdictSummary(verdicts=verdicts)
        assert summary.passed, summary.failed_checks
        assert summary.exit_code == 0
        assert len(summary.verdicts) == len(CHECKS)

    def test_missing_artifact(self, repo):
        """Test a removed build output raises instead of passing."""
        for path in (repo / "dist" / "assets").iterdir():
            path.unlink()
        with pytest.raises(PolicyGateError) as exc_info:
            run_check(CheckName.BUNDLE_BUDGETS, repo, load_settings(repo))
        assert exc_info.value.code == "MISSING_ARTIFACT"
