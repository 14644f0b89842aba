"""
core/audit/composer.py - 컴플라이언스 점수 합성기

독립적으로 실행된 사용자/그룹/권한/비활성 감사를 하나의 ComplianceReport로 합칩니다.

점수:
    user_compliance_rate   = 100 * (전체 - 비준수) / 전체 (전체 0이면 100)
    group_compliance_rate  = 동일
    overall_compliance_score = 두 준수율의 단순 평균

권한/비활성 감사는 평균에 들어가지 않고 권장 조치와 건수에만 반영됩니다.
규정별 보고서의 감점식 점수는 core.audit.standards.weighted_score 참고.
"""

from __future__ import annotations

from datetime import datetime

from .types import AuditRun, AuditType, ComplianceReport, ComplianceSummary, RiskLevel


def compliance_rate(total: int, non_compliant: int) -> float:
    """준수율 (%, 소수 둘째 자리 반올림, 전체 0이면 100.0)"""
    if total == 0:
        return 100.0
    return round(100 * (total - non_compliant) / total, 2)


def overall_compliance_score(user_rate: float, group_rate: float) -> float:
    """사용자/그룹 준수율의 단순 평균"""
    return round((user_rate + group_rate) / 2, 2)


def summarize(
    user_audit: AuditRun,
    group_audit: AuditRun,
    permissions_audit: AuditRun,
    inactive_audit: AuditRun,
) -> ComplianceSummary:
    """감사 결과들을 ComplianceSummary로 요약"""
    user_rate = compliance_rate(user_audit.total, user_audit.violation_count)
    group_rate = compliance_rate(group_audit.total, group_audit.violation_count)

    return ComplianceSummary(
        total_users=user_audit.total,
        non_compliant_users=user_audit.violation_count,
        user_compliance_rate=user_rate,
        total_groups=group_audit.total,
        non_compliant_groups=group_audit.violation_count,
        group_compliance_rate=group_rate,
        overall_compliance_score=overall_compliance_score(user_rate, group_rate),
        inactive_users=inactive_audit.total,
        critical_risk_users=sum(1 for r in inactive_audit.results if r.risk_level == RiskLevel.CRITICAL),
        privileged_users=permissions_audit.total,
        privileged_users_with_issues=permissions_audit.violation_count,
    )


def build_recommendations(summary: ComplianceSummary) -> tuple[str, ...]:
    """권장 조치 목록 (조건별 독립, 고정 순서)"""
    recommendations: list[str] = []
    if summary.non_compliant_users > 0:
        recommendations.append(f"fix compliance violations for {summary.non_compliant_users} users")
    if summary.inactive_users > 0:
        recommendations.append(f"disable or clean up {summary.inactive_users} inactive accounts")
    if summary.critical_risk_users > 0:
        recommendations.append(f"urgent: review {summary.critical_risk_users} critical-risk accounts")
    if summary.privileged_users_with_issues > 0:
        recommendations.append(f"review privileged access for {summary.privileged_users_with_issues} users")
    return tuple(recommendations)


def compose_compliance_report(
    user_audit: AuditRun,
    group_audit: AuditRun,
    permissions_audit: AuditRun,
    inactive_audit: AuditRun,
    generated_at: datetime | None = None,
) -> ComplianceReport:
    """4개 감사 결과를 종합 보고서로 합성

    Raises:
        ValueError: 감사 유형이 위치와 맞지 않는 경우
    """
    expected = (
        (user_audit, AuditType.USERS),
        (group_audit, AuditType.GROUPS),
        (permissions_audit, AuditType.PRIVILEGED),
        (inactive_audit, AuditType.INACTIVE),
    )
    for run, audit_type in expected:
        if run.audit_type is not audit_type:
            raise ValueError(f"{audit_type.value} 위치에 {run.audit_type.value} 감사 결과가 전달되었습니다")

    summary = summarize(user_audit, group_audit, permissions_audit, inactive_audit)
    return ComplianceReport(
        summary=summary,
        recommendations=build_recommendations(summary),
        user_audit=user_audit,
        group_audit=group_audit,
        permissions_audit=permissions_audit,
        inactive_audit=inactive_audit,
        generated_at=generated_at,
    )
