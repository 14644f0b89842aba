"""
core/audit/types.py - 감사 결과 타입

위험도, 엔티티 평가 결과, 감사 실행 결과, 컴플라이언스 요약/보고서 구조.
to_dict()의 키 이름은 모든 보고서 형식(HTML/CSV/JSON/Excel)에서 동일합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Iterable, Mapping


class RiskLevel(Enum):
    """위험도 (Low < Medium < High < Critical 전순서)

    한 엔티티 평가 안에서는 max로만 누적되므로 낮아지지 않습니다.
    """

    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"
    CRITICAL = "Critical"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, RiskLevel):
            return NotImplemented
        return self.rank >= other.rank


_RISK_ORDER = (RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL)


class AuditType(Enum):
    """감사 유형"""

    USERS = "users"
    GROUPS = "groups"
    PRIVILEGED = "privileged"
    INACTIVE = "inactive"
    FULL = "full"


@dataclass(frozen=True)
class AuditResult:
    """엔티티 1건의 평가 결과

    Attributes:
        entity_type: "user" 또는 "group"
        identity: 계정 identity 또는 그룹 이름
        display_name: 표시 이름
        violations: 위반 설명 (검사 실행 순서, 중복 제거 없음)
        risk_level: 최종 위험도
        sensitive_groups: 소속된 민감 그룹 (위반으로 세지 않음)
        has_sensitive_access: 민감 그룹 소속 여부 (비활성 계정 감사)
        recommended_action: 권장 조치 (비활성 계정 감사)
        days_inactive: 마지막 로그온 후 경과일
        details: 감사 유형별 부가 표시 정보
    """

    entity_type: str
    identity: str
    display_name: str
    violations: tuple[str, ...]
    risk_level: RiskLevel
    sensitive_groups: tuple[str, ...] = ()
    has_sensitive_access: bool = False
    recommended_action: str | None = None
    days_inactive: int | None = None
    details: Mapping[str, Any] = field(default_factory=dict)

    @property
    def violation_count(self) -> int:
        return len(self.violations)

    @property
    def compliant(self) -> bool:
        return self.violation_count == 0

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "entityType": self.entity_type,
            "identity": self.identity,
            "displayName": self.display_name,
            "violations": list(self.violations),
            "violationCount": self.violation_count,
            "riskLevel": self.risk_level.value,
            "compliant": self.compliant,
            "sensitiveGroups": list(self.sensitive_groups),
            "hasSensitiveAccess": self.has_sensitive_access,
            "recommendedAction": self.recommended_action,
            "daysInactive": self.days_inactive,
        }
        data.update(self.details)
        return data


@dataclass(frozen=True)
class AuditRun:
    """동일 종류 엔티티 집합에 대한 감사 결과"""

    audit_type: AuditType
    results: tuple[AuditResult, ...] = ()

    @property
    def violation_count(self) -> int:
        """위반이 1건 이상인 엔티티 수"""
        return sum(1 for result in self.results if not result.compliant)

    @property
    def total(self) -> int:
        return len(self.results)

    def count_by_risk(self) -> dict[RiskLevel, int]:
        counts = {level: 0 for level in _RISK_ORDER}
        for result in self.results:
            counts[result.risk_level] += 1
        return counts

    def to_dict(self) -> dict[str, Any]:
        return {
            "auditType": self.audit_type.value,
            "results": [result.to_dict() for result in self.results],
            "violationCount": self.violation_count,
        }


@dataclass(frozen=True)
class ComplianceSummary:
    """컴플라이언스 요약

    overall_compliance_score는 사용자/그룹 준수율의 단순 평균입니다.
    권한/비활성 감사는 평균에 반영되지 않고 건수로만 집계됩니다.
    """

    total_users: int
    non_compliant_users: int
    user_compliance_rate: float
    total_groups: int
    non_compliant_groups: int
    group_compliance_rate: float
    overall_compliance_score: float
    inactive_users: int = 0
    critical_risk_users: int = 0
    privileged_users: int = 0
    privileged_users_with_issues: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            "totalUsers": self.total_users,
            "nonCompliantUsers": self.non_compliant_users,
            "userComplianceRate": self.user_compliance_rate,
            "totalGroups": self.total_groups,
            "nonCompliantGroups": self.non_compliant_groups,
            "groupComplianceRate": self.group_compliance_rate,
            "overallComplianceScore": self.overall_compliance_score,
            "inactiveUsers": self.inactive_users,
            "criticalRiskUsers": self.critical_risk_users,
            "privilegedUsers": self.privileged_users,
            "privilegedUsersWithIssues": self.privileged_users_with_issues,
        }


@dataclass(frozen=True)
class ComplianceReport:
    """종합(Full) 컴플라이언스 보고서"""

    summary: ComplianceSummary
    recommendations: tuple[str, ...]
    user_audit: AuditRun
    group_audit: AuditRun
    permissions_audit: AuditRun
    inactive_audit: AuditRun
    generated_at: datetime | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "generatedAt": self.generated_at.isoformat() if self.generated_at else None,
            "summary": self.summary.to_dict(),
            "recommendations": list(self.recommendations),
            "userAudit": [r.to_dict() for r in self.user_audit.results],
            "groupAudit": [r.to_dict() for r in self.group_audit.results],
            "permissionsAudit": [r.to_dict() for r in self.permissions_audit.results],
            "inactiveAudit": [r.to_dict() for r in self.inactive_audit.results],
        }


@dataclass(frozen=True)
class ViolationRecord:
    """규정별 보고서의 위반 레코드 (비준수 엔티티당 1건)"""

    standard: str
    entity_type: str
    identity: str
    violations: tuple[str, ...]
    risk_level: RiskLevel

    def to_dict(self) -> dict[str, Any]:
        return {
            "standard": self.standard,
            "entityType": self.entity_type,
            "identity": self.identity,
            "violations": list(self.violations),
            "riskLevel": self.risk_level.value,
        }


def count_risk_levels(records: Iterable[ViolationRecord]) -> dict[RiskLevel, int]:
    counts = {level: 0 for level in _RISK_ORDER}
    for record in records:
        counts[record.risk_level] += 1
    return counts


@dataclass(frozen=True)
class StandardComplianceReport:
    """단일 규정(GDPR/SOX/ISO27001) 컴플라이언스 보고서

    weighted_score는 감점 방식 점수이며 종합 보고서의 평균 점수와 별개입니다.
    """

    standard: str
    records: tuple[ViolationRecord, ...]
    weighted_score: int
    scores: Mapping[str, int] = field(default_factory=dict)
    generated_at: datetime | None = None

    @property
    def counts(self) -> dict[RiskLevel, int]:
        return count_risk_levels(self.records)

    def to_dict(self) -> dict[str, Any]:
        return {
            "standard": self.standard,
            "generatedAt": self.generated_at.isoformat() if self.generated_at else None,
            "records": [record.to_dict() for record in self.records],
            "counts": {level.value: count for level, count in self.counts.items()},
            "weightedScore": self.weighted_score,
            "scores": dict(self.scores),
        }
