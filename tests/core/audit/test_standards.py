"""
tests/core/audit/test_standards.py - 규정별 컴플라이언스 보고서 테스트
"""

import pytest

from core.audit.standards import (
    ComplianceStandard,
    build_standard_report,
    collect_violation_records,
    score_records,
    weighted_score,
)
from core.audit.types import RiskLevel, ViolationRecord


class TestWeightedScore:
    """weighted_score 테스트"""

    def test_penalties(self):
        """Critical 2, High 1, Medium 3 → 100 - 20 - 5 - 6"""
        assert weighted_score(2, 1, 3) == 69

    def test_clean(self):
        assert weighted_score(0, 0, 0) == 100

    def test_floor_at_zero(self):
        assert weighted_score(20, 0, 0) == 0
        assert weighted_score(9, 3, 10) == 0

    def test_low_records_not_penalized(self):
        records = [ViolationRecord("GDPR", "user", "a", ("x",), RiskLevel.LOW)] * 5
        assert score_records(records) == 100


class TestComplianceStandard:
    """ComplianceStandard 테스트"""

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("GDPR", ComplianceStandard.GDPR),
            ("sox", ComplianceStandard.SOX),
            (" iso27001 ", ComplianceStandard.ISO27001),
            ("ALL", ComplianceStandard.ALL),
        ],
    )
    def test_parse(self, value, expected):
        assert ComplianceStandard.parse(value) is expected

    def test_parse_unknown(self):
        with pytest.raises(ValueError):
            ComplianceStandard.parse("HIPAA")

    def test_expand(self):
        assert ComplianceStandard.ALL.expand() == (
            ComplianceStandard.GDPR,
            ComplianceStandard.SOX,
            ComplianceStandard.ISO27001,
        )
        assert ComplianceStandard.SOX.expand() == (ComplianceStandard.SOX,)


# =============================================================================
# 규정별 레코드
# =============================================================================


class TestGdprRecords:
    """GDPR 검사 테스트"""

    def test_retention_exceeded(self, rules, now, make_user):
        users = [make_user("old", last_logon_days=400)]
        (record,) = collect_violation_records(ComplianceStandard.GDPR, users, [], rules, now)
        assert record.standard == "GDPR"
        assert record.violations == ("data retention exceeded (400 days)",)
        assert record.risk_level is RiskLevel.HIGH

    def test_never_logged_on_uses_created(self, rules, now, make_user):
        """로그온 기록이 없으면 생성일 기준"""
        users = [make_user("new", last_logon_days=None, created_days=500)]
        (record,) = collect_violation_records(ComplianceStandard.GDPR, users, [], rules, now)
        assert record.violations == ("data retention exceeded (500 days)",)

    def test_disabled_account_retained(self, rules, now, make_user):
        users = [make_user("gone", enabled=False, last_logon_days=200)]
        (record,) = collect_violation_records(ComplianceStandard.GDPR, users, [], rules, now)
        assert record.violations == ("disabled account retained beyond 180 days",)
        assert record.risk_level is RiskLevel.MEDIUM

    def test_missing_email(self, rules, now, make_user):
        users = [make_user("a", email="")]
        (record,) = collect_violation_records(ComplianceStandard.GDPR, users, [], rules, now)
        assert record.violations == ("missing contact attribute: email",)
        assert record.risk_level is RiskLevel.MEDIUM

    def test_compliant_users_have_no_record(self, rules, now, make_user):
        assert collect_violation_records(ComplianceStandard.GDPR, [make_user("a")], [], rules, now) == ()

    def test_no_retention_rules(self, make_rules_document, now, make_user):
        """보존 기간이 없으면 보존 검사 생략"""
        from core.audit.rules import rule_set_from_dict

        document = make_rules_document()
        del document["dataRetentionDays"]
        rules = rule_set_from_dict(document)
        users = [make_user("old", last_logon_days=1000)]
        assert collect_violation_records(ComplianceStandard.GDPR, users, [], rules, now) == ()


class TestSoxRecords:
    """SOX 검사 테스트"""

    def test_merges_user_and_privileged_findings(self, rules, now, make_user, make_group):
        """같은 사용자의 위반은 레코드 1건으로 합침"""
        users = [make_user("bob", email="", manager=None, member_of=("Domain Admins",))]
        groups = [make_group("Domain Admins", members=["bob"])]
        (record,) = collect_violation_records(ComplianceStandard.SOX, users, groups, rules, now)

        assert record.identity == "bob"
        assert record.violations == ("missing attribute: email", "privileged account without manager")
        assert record.risk_level is RiskLevel.HIGH

    def test_compliant_privileged_user_has_no_record(self, rules, now, make_user, make_group):
        users = [make_user("alice", member_of=("Domain Admins",))]
        groups = [make_group("Domain Admins", members=["alice"])]
        assert collect_violation_records(ComplianceStandard.SOX, users, groups, rules, now) == ()


class TestIsoRecords:
    """ISO27001 검사 테스트"""

    def test_users_groups_and_inactive(self, rules, now, make_user, make_group):
        users = [make_user("stale", last_logon_days=120)]
        groups = [make_group("Empty")]
        records = collect_violation_records(ComplianceStandard.ISO27001, users, groups, rules, now)
        by_identity = {r.identity: r for r in records}

        assert by_identity["stale"].violations == ("inactive account (120 days)",)
        assert by_identity["stale"].risk_level is RiskLevel.HIGH
        assert by_identity["Empty"].entity_type == "group"
        assert by_identity["Empty"].violations == ("group has no members",)

    def test_repeated_violation_recorded_once(self, rules, now, make_user):
        """사용자/비활성 감사가 같은 위반을 내면 1번만 기록하고 다른 위반은 유지"""
        users = [make_user("stale", last_logon_days=120, email="")]
        (record,) = collect_violation_records(ComplianceStandard.ISO27001, users, [], rules, now)
        assert record.violations == ("missing attribute: email", "inactive account (120 days)")

    def test_audited_groups_subset(self, rules, now, make_user, make_group):
        """그룹 감사 대상만 제한하고 멤버십 해석은 전체 그룹 사용"""
        groups = [make_group("Empty"), make_group("Also Empty")]
        records = collect_violation_records(
            ComplianceStandard.ISO27001, [], groups, rules, now, audited_groups=groups[:1]
        )
        assert [r.identity for r in records] == ["Empty"]

    def test_inactive_threshold(self, rules, now, make_user):
        users = [make_user("a", last_logon_days=40)]
        records = collect_violation_records(ComplianceStandard.ISO27001, users, [], rules, now, inactive_days=30)
        assert records[0].violations == ("inactive account (40 days)",)
        assert records[0].risk_level is RiskLevel.MEDIUM


# =============================================================================
# 보고서
# =============================================================================


class TestBuildStandardReport:
    """build_standard_report 테스트"""

    def test_single_standard(self, rules, now, make_user):
        users = [make_user("a", email=""), make_user("b", last_logon_days=400)]
        report = build_standard_report(ComplianceStandard.GDPR, users, [], rules, now)

        assert report.standard == "GDPR"
        assert report.weighted_score == 100 - 5 - 2
        assert report.scores == {"GDPR": 93}
        assert report.generated_at == now
        assert report.counts[RiskLevel.HIGH] == 1

    def test_all_scores_per_standard(self, rules, now, make_user, make_group):
        users = [make_user("a", email="")]
        report = build_standard_report(ComplianceStandard.ALL, users, [], rules, now)

        assert report.standard == "All"
        assert [r.standard for r in report.records] == ["GDPR", "SOX", "ISO27001"]
        assert report.scores == {"GDPR": 98, "SOX": 100, "ISO27001": 100}
        assert report.weighted_score == 98

    def test_to_dict(self, rules, now, make_user):
        data = build_standard_report(ComplianceStandard.GDPR, [make_user("a", email="")], [], rules, now).to_dict()
        assert data["counts"] == {"Low": 0, "Medium": 1, "High": 0, "Critical": 0}
        assert data["records"][0]["violations"] == ["missing contact attribute: email"]
        assert data["weightedScore"] == 98
