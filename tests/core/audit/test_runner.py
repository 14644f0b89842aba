"""
tests/core/audit/test_runner.py - 감사 실행기 테스트
"""

from unittest.mock import MagicMock

import pytest

from core.audit.runner import AuditOptions, AuditRunner
from core.audit.standards import ComplianceStandard
from core.audit.types import AuditType, RiskLevel
from core.directory.provider import InMemoryDirectory, SnapshotFileProvider
from core.exceptions import SnapshotFetchError


@pytest.fixture
def runner(snapshot_file, rules, now):
    return AuditRunner(SnapshotFileProvider(snapshot_file), rules, now=now)


# =============================================================================
# 단일 감사
# =============================================================================


class TestRun:
    """AuditRunner.run 테스트"""

    def test_users(self, runner):
        run = runner.run(AuditType.USERS)
        results = {r.identity: r for r in run.results}

        assert results["alice"].compliant is True
        assert results["bob"].violations == (
            "missing attribute: email",
            "password too old (517 days)",
            "inactive account (120 days)",
        )
        assert results["bob"].sensitive_groups == ("Domain Admins",)

    def test_groups(self, runner):
        results = {r.identity: r for r in runner.run(AuditType.GROUPS).results}
        assert results["Staff"].risk_level is RiskLevel.LOW
        assert results["Domain Admins"].risk_level is RiskLevel.HIGH

    def test_privileged(self, runner):
        (result,) = runner.run(AuditType.PRIVILEGED).results
        assert result.identity == "bob"
        assert result.violations == ("privileged account without manager", "stale logon (120 days)")

    def test_inactive(self, runner):
        (result,) = runner.run(AuditType.INACTIVE).results
        assert result.identity == "bob"
        assert result.risk_level is RiskLevel.CRITICAL

    def test_inactive_days_option(self, snapshot_file, rules, now):
        runner = AuditRunner(SnapshotFileProvider(snapshot_file), rules, AuditOptions(inactive_days=200), now=now)
        assert runner.run(AuditType.INACTIVE).results == ()

    def test_exclude_disabled(self, rules, now, make_user):
        directory = InMemoryDirectory([make_user("a"), make_user("b", enabled=False)], [])
        runner = AuditRunner(directory, rules, AuditOptions(include_disabled=False), now=now)
        assert [r.identity for r in runner.run(AuditType.USERS).results] == ["a"]

    def test_search_base(self, snapshot_file, rules, now):
        runner = AuditRunner(
            SnapshotFileProvider(snapshot_file), rules, AuditOptions(search_base="OU=Staff,DC=contoso,DC=com"), now=now
        )
        assert [r.identity for r in runner.run(AuditType.USERS).results] == ["alice"]

    def test_search_base_scopes_group_audit(self, snapshot_file, rules, now):
        runner = AuditRunner(
            SnapshotFileProvider(snapshot_file), rules, AuditOptions(search_base="OU=Groups,DC=contoso,DC=com"), now=now
        )
        assert [r.identity for r in runner.run(AuditType.GROUPS).results] == ["Staff"]

    def test_search_base_keeps_sensitive_groups_outside_scope(self, snapshot_file, rules, now):
        """범위 밖 컨테이너의 민감 그룹도 권한 해석에 사용"""
        runner = AuditRunner(
            SnapshotFileProvider(snapshot_file), rules, AuditOptions(search_base="OU=Admins,DC=contoso,DC=com"), now=now
        )

        assert [r.identity for r in runner.run(AuditType.PRIVILEGED).results] == ["bob"]
        (user,) = runner.run(AuditType.USERS).results
        assert user.sensitive_groups == ("Domain Admins",)

    def test_search_base_privileged_in_memory(self, rules, now, make_user, make_group):
        users = [make_user("bob", distinguished_name="CN=Bob,OU=Staff,DC=c,DC=com")]
        groups = [
            make_group("Domain Admins", members=["bob"], distinguished_name="CN=Domain Admins,CN=Users,DC=c,DC=com")
        ]
        directory = InMemoryDirectory(users, groups)

        unscoped = AuditRunner(directory, rules, now=now)
        scoped = AuditRunner(directory, rules, AuditOptions(search_base="OU=Staff,DC=c,DC=com"), now=now)

        assert [r.identity for r in unscoped.run(AuditType.PRIVILEGED).results] == ["bob"]
        assert [r.identity for r in scoped.run(AuditType.PRIVILEGED).results] == ["bob"]

    def test_full_rejected(self, runner):
        with pytest.raises(ValueError):
            runner.run(AuditType.FULL)


# =============================================================================
# 조회 실패
# =============================================================================


class TestFetchErrors:
    """스냅샷 조회 실패 테스트"""

    def test_user_fetch_failure(self, rules, now):
        provider = MagicMock()
        provider.get_users.side_effect = PermissionError("access denied")
        runner = AuditRunner(provider, rules, now=now)

        with pytest.raises(SnapshotFetchError) as exc_info:
            runner.run(AuditType.USERS)

        error = exc_info.value
        assert error.audit_type == "users"
        assert error.stage == "fetch_users"
        assert isinstance(error.cause, PermissionError)

    def test_group_fetch_failure(self, rules, now):
        provider = MagicMock()
        provider.get_users.return_value = []
        provider.get_groups.side_effect = OSError("connection reset")
        runner = AuditRunner(provider, rules, now=now)

        with pytest.raises(SnapshotFetchError) as exc_info:
            runner.run(AuditType.GROUPS)
        assert exc_info.value.stage == "fetch_groups"

    def test_full_aborts_on_first_failure(self, rules, now):
        """하위 감사 하나가 실패하면 종합 보고서 없음"""
        provider = MagicMock()
        provider.get_users.return_value = []
        provider.get_groups.side_effect = [[], OSError("timeout")]
        runner = AuditRunner(provider, rules, now=now)

        with pytest.raises(SnapshotFetchError) as exc_info:
            runner.run_full()
        assert exc_info.value.audit_type == "groups"
        assert provider.get_groups.call_count == 2

    def test_corrupt_snapshot(self, tmp_path, rules, now):
        path = tmp_path / "broken.json"
        path.write_text("{not json", encoding="utf-8")
        runner = AuditRunner(SnapshotFileProvider(path), rules, now=now)

        with pytest.raises(SnapshotFetchError) as exc_info:
            runner.run(AuditType.INACTIVE)
        assert exc_info.value.audit_type == "inactive"
        assert exc_info.value.stage == "fetch_users"

    def test_standard_label(self, rules, now):
        provider = MagicMock()
        provider.get_users.side_effect = RuntimeError("boom")
        runner = AuditRunner(provider, rules, now=now)

        with pytest.raises(SnapshotFetchError) as exc_info:
            runner.run_standard(ComplianceStandard.SOX)
        assert exc_info.value.audit_type == "compliance:SOX"


# =============================================================================
# 종합 / 규정별
# =============================================================================


class TestRunFull:
    """AuditRunner.run_full 테스트"""

    def test_report(self, runner, now):
        report = runner.run_full()

        assert report.summary.user_compliance_rate == 50.0
        assert report.summary.group_compliance_rate == 100.0
        assert report.summary.overall_compliance_score == 75.0
        assert report.summary.critical_risk_users == 1
        assert report.generated_at == now
        assert "urgent: review 1 critical-risk accounts" in report.recommendations


class TestRunStandard:
    """AuditRunner.run_standard 테스트"""

    def test_gdpr(self, runner):
        report = runner.run_standard(ComplianceStandard.GDPR)
        assert [r.identity for r in report.records] == ["bob"]
        assert report.records[0].violations == ("missing contact attribute: email",)

    def test_all(self, runner):
        report = runner.run_standard(ComplianceStandard.ALL)
        assert set(report.scores) == {"GDPR", "SOX", "ISO27001"}

    def test_sox_with_search_base(self, snapshot_file, rules, now):
        runner = AuditRunner(
            SnapshotFileProvider(snapshot_file), rules, AuditOptions(search_base="OU=Admins,DC=contoso,DC=com"), now=now
        )
        (record,) = runner.run_standard(ComplianceStandard.SOX).records
        assert record.identity == "bob"
        assert "privileged account without manager" in record.violations

    def test_iso_group_audit_scoped(self, snapshot_file, rules, now):
        """ISO27001 그룹 감사는 범위 안 그룹만 대상"""
        runner = AuditRunner(
            SnapshotFileProvider(snapshot_file), rules, AuditOptions(search_base="OU=Groups,DC=contoso,DC=com"), now=now
        )
        report = runner.run_standard(ComplianceStandard.ISO27001)
        assert "Domain Admins" not in {r.identity for r in report.records}
