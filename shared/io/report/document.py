"""
shared/io/report/document.py - 보고서 문서 모델

감사 결과(AuditRun / ComplianceReport / StandardComplianceReport)를
형식에 독립적인 표 구조(ReportDocument)로 변환합니다.
모든 렌더러는 이 구조만 사용합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Union

from core.audit.types import (
    AuditResult,
    AuditRun,
    AuditType,
    ComplianceReport,
    StandardComplianceReport,
    ViolationRecord,
)

Report = Union[AuditRun, ComplianceReport, StandardComplianceReport]

AUDIT_COLUMNS = [
    "Identity",
    "Display Name",
    "Type",
    "Risk Level",
    "Compliant",
    "Violation Count",
    "Violations",
    "Sensitive Groups",
    "Recommended Action",
    "Days Inactive",
    "Member Count",
    "Active Members",
    "Inactive Members",
    "Disabled Members",
]

# 그룹 결과 details 키 (사용자 결과는 빈 칸)
GROUP_DETAIL_KEYS = ("memberCount", "activeMembers", "inactiveMembers", "disabledMembers")

RECORD_COLUMNS = ["Standard", "Type", "Identity", "Risk Level", "Violations"]

# 감사 유형 → (보고서 필드명, 표시 제목)
SECTION_TITLES = {
    AuditType.USERS: ("userAudit", "User Audit"),
    AuditType.GROUPS: ("groupAudit", "Group Audit"),
    AuditType.PRIVILEGED: ("permissionsAudit", "Privileged Accounts"),
    AuditType.INACTIVE: ("inactiveAudit", "Inactive Accounts"),
}


@dataclass
class ReportSection:
    """보고서 표 1개"""

    key: str
    title: str
    rows: list[list[Any]] = field(default_factory=list)


@dataclass
class ReportDocument:
    """형식 독립 보고서

    Attributes:
        title: 보고서 제목
        generated_at: 생성 시각
        columns: 모든 섹션 공통 열
        summary: (항목, 값) 목록
        recommendations: 권장 조치
        sections: 표 목록
        data: JSON 출력용 원본 딕셔너리
    """

    title: str
    generated_at: datetime | None
    columns: list[str]
    summary: list[tuple[str, Any]] = field(default_factory=list)
    recommendations: list[str] = field(default_factory=list)
    sections: list[ReportSection] = field(default_factory=list)
    data: dict[str, Any] = field(default_factory=dict)


def audit_result_row(result: AuditResult) -> list[Any]:
    return [
        result.identity,
        result.display_name,
        result.entity_type,
        result.risk_level.value,
        "Yes" if result.compliant else "No",
        result.violation_count,
        "; ".join(result.violations),
        ", ".join(result.sensitive_groups),
        result.recommended_action or "",
        "" if result.days_inactive is None else result.days_inactive,
        *(result.details.get(key, "") for key in GROUP_DETAIL_KEYS),
    ]


def violation_record_row(record: ViolationRecord) -> list[Any]:
    return [
        record.standard,
        record.entity_type,
        record.identity,
        record.risk_level.value,
        "; ".join(record.violations),
    ]


def _section(run: AuditRun) -> ReportSection:
    key, title = SECTION_TITLES[run.audit_type]
    return ReportSection(key=key, title=title, rows=[audit_result_row(r) for r in run.results])


def build_document(report: Report, title: str | None = None) -> ReportDocument:
    """감사 결과를 ReportDocument로 변환

    Raises:
        TypeError: 지원하지 않는 결과 타입
    """
    if isinstance(report, ComplianceReport):
        summary = report.summary
        return ReportDocument(
            title=title or "AD Compliance Report",
            generated_at=report.generated_at,
            columns=list(AUDIT_COLUMNS),
            summary=[
                ("Overall Compliance Score", summary.overall_compliance_score),
                ("User Compliance Rate", summary.user_compliance_rate),
                ("Group Compliance Rate", summary.group_compliance_rate),
                ("Total Users", summary.total_users),
                ("Non-compliant Users", summary.non_compliant_users),
                ("Total Groups", summary.total_groups),
                ("Non-compliant Groups", summary.non_compliant_groups),
                ("Inactive Users", summary.inactive_users),
                ("Critical-risk Users", summary.critical_risk_users),
                ("Privileged Users", summary.privileged_users),
                ("Privileged Users with Issues", summary.privileged_users_with_issues),
            ],
            recommendations=list(report.recommendations),
            sections=[
                _section(report.user_audit),
                _section(report.group_audit),
                _section(report.permissions_audit),
                _section(report.inactive_audit),
            ],
            data=report.to_dict(),
        )

    if isinstance(report, StandardComplianceReport):
        counts = report.counts
        summary_items: list[tuple[str, Any]] = [("Weighted Score", report.weighted_score)]
        if len(report.scores) > 1:
            summary_items.extend((f"{name} Score", score) for name, score in report.scores.items())
        summary_items.append(("Violation Records", len(report.records)))
        summary_items.extend((f"{level.value} Records", count) for level, count in counts.items())
        return ReportDocument(
            title=title or f"{report.standard} Compliance Report",
            generated_at=report.generated_at,
            columns=list(RECORD_COLUMNS),
            summary=summary_items,
            sections=[
                ReportSection(
                    key="records",
                    title="Violation Records",
                    rows=[violation_record_row(r) for r in report.records],
                )
            ],
            data=report.to_dict(),
        )

    if isinstance(report, AuditRun):
        _, section_title = SECTION_TITLES[report.audit_type]
        return ReportDocument(
            title=title or section_title,
            generated_at=None,
            columns=list(AUDIT_COLUMNS),
            summary=[
                ("Evaluated", report.total),
                ("With Violations", report.violation_count),
            ]
            + [(f"{level.value} Risk", count) for level, count in report.count_by_risk().items()],
            sections=[_section(report)],
            data=report.to_dict(),
        )

    raise TypeError(f"지원하지 않는 보고서 타입: {type(report).__name__}")
