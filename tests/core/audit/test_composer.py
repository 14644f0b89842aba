"""
tests/core/audit/test_composer.py - 컴플라이언스 점수 합성기 테스트
"""

import pytest

from core.audit.composer import (
    build_recommendations,
    compliance_rate,
    compose_compliance_report,
    overall_compliance_score,
)
from core.audit.types import AuditResult, AuditRun, AuditType, RiskLevel


def _result(identity, violations=(), risk=RiskLevel.LOW, entity_type="user"):
    return AuditResult(
        entity_type=entity_type,
        identity=identity,
        display_name=identity,
        violations=tuple(violations),
        risk_level=risk,
    )


def _run(audit_type, *results):
    return AuditRun(audit_type=audit_type, results=tuple(results))


class TestComplianceRate:
    """compliance_rate / overall_compliance_score 테스트"""

    def test_rate(self):
        assert compliance_rate(10, 3) == 70.0

    def test_rounding(self):
        assert compliance_rate(3, 1) == 66.67

    def test_empty_is_fully_compliant(self):
        """대상이 없으면 100"""
        assert compliance_rate(0, 0) == 100.0

    def test_overall_is_mean(self):
        assert overall_compliance_score(80.0, 100.0) == 90.0
        assert overall_compliance_score(70.0, 45.5) == 57.75


class TestComposeComplianceReport:
    """compose_compliance_report 테스트"""

    def test_scores_and_counts(self, now):
        report = compose_compliance_report(
            _run(AuditType.USERS, _result("a"), _result("b", ["missing attribute: email"], RiskLevel.LOW)),
            _run(AuditType.GROUPS, _result("Staff", entity_type="group")),
            _run(AuditType.PRIVILEGED, _result("p", ["stale logon (never)"], RiskLevel.HIGH)),
            _run(
                AuditType.INACTIVE,
                _result("x", ["inactive account (120 days)"], RiskLevel.CRITICAL),
                _result("y", ["inactive account (95 days)"], RiskLevel.MEDIUM),
            ),
            generated_at=now,
        )
        summary = report.summary

        assert summary.user_compliance_rate == 50.0
        assert summary.group_compliance_rate == 100.0
        assert summary.overall_compliance_score == 75.0
        assert summary.inactive_users == 2
        assert summary.critical_risk_users == 1
        assert summary.privileged_users_with_issues == 1
        assert report.generated_at == now

    def test_privileged_and_inactive_do_not_affect_score(self):
        """권한/비활성 감사는 평균 점수에 반영되지 않음"""
        report = compose_compliance_report(
            _run(AuditType.USERS),
            _run(AuditType.GROUPS),
            _run(AuditType.PRIVILEGED, _result("p", ["disabled account with privileges"], RiskLevel.HIGH)),
            _run(AuditType.INACTIVE, _result("x", ["inactive account (120 days)"], RiskLevel.CRITICAL)),
        )
        assert report.summary.overall_compliance_score == 100.0

    def test_recommendations(self):
        report = compose_compliance_report(
            _run(AuditType.USERS, _result("b", ["account expired"], RiskLevel.HIGH)),
            _run(AuditType.GROUPS),
            _run(AuditType.PRIVILEGED, _result("p", ["privileged account without manager"], RiskLevel.HIGH)),
            _run(AuditType.INACTIVE, _result("x", ["inactive account (120 days)"], RiskLevel.CRITICAL)),
        )
        assert report.recommendations == (
            "fix compliance violations for 1 users",
            "disable or clean up 1 inactive accounts",
            "urgent: review 1 critical-risk accounts",
            "review privileged access for 1 users",
        )

    def test_no_recommendations_when_clean(self):
        report = compose_compliance_report(
            _run(AuditType.USERS, _result("a")),
            _run(AuditType.GROUPS),
            _run(AuditType.PRIVILEGED, _result("p", risk=RiskLevel.HIGH)),
            _run(AuditType.INACTIVE),
        )
        assert report.recommendations == ()
        assert build_recommendations(report.summary) == ()

    def test_wrong_order(self):
        """감사 유형이 위치와 다르면 ValueError"""
        with pytest.raises(ValueError):
            compose_compliance_report(
                _run(AuditType.GROUPS),
                _run(AuditType.USERS),
                _run(AuditType.PRIVILEGED),
                _run(AuditType.INACTIVE),
            )

    def test_to_dict_keys(self, now):
        report = compose_compliance_report(
            _run(AuditType.USERS, _result("a")),
            _run(AuditType.GROUPS),
            _run(AuditType.PRIVILEGED),
            _run(AuditType.INACTIVE),
            generated_at=now,
        )
        data = report.to_dict()
        assert set(data) == {
            "generatedAt",
            "summary",
            "recommendations",
            "userAudit",
            "groupAudit",
            "permissionsAudit",
            "inactiveAudit",
        }
        assert data["summary"]["overallComplianceScore"] == 100.0
        assert data["userAudit"][0]["riskLevel"] == "Low"
