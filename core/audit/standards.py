"""
core/audit/standards.py - 규정별(GDPR/SOX/ISO27001) 컴플라이언스 보고서

비준수 엔티티마다 위험도가 붙은 ViolationRecord를 1건씩 만들고,
감점식 점수를 계산합니다:

    weighted_score = max(0, 100 - 10*CRITICAL - 5*HIGH - 2*MEDIUM)

종합 보고서의 준수율 평균(core.audit.composer)과는 별개의 점수입니다.

규정별 검사:
    GDPR      데이터 보존 기간 초과, 비활성화 계정 장기 보존, 연락처(email) 누락
    SOX       사용자 평가 비준수 + 권한 계정 감사 비준수
    ISO27001  사용자/그룹 평가 비준수 + 비활성 계정 감사
"""

from __future__ import annotations

import logging
from datetime import datetime
from enum import Enum
from typing import Iterable, Sequence

from core.config import settings
from core.directory.models import DirectoryGroupRecord, DirectoryUserRecord

from .aggregator import audit_groups, audit_inactive_accounts, audit_privileged_accounts, audit_users
from .evaluator import days_since, escalate, is_empty
from .rules import RuleSet
from .types import AuditRun, RiskLevel, StandardComplianceReport, ViolationRecord, count_risk_levels

logger = logging.getLogger(__name__)

# 감점 가중치
PENALTY_CRITICAL = 10
PENALTY_HIGH = 5
PENALTY_MEDIUM = 2


class ComplianceStandard(Enum):
    """컴플라이언스 규정"""

    GDPR = "GDPR"
    SOX = "SOX"
    ISO27001 = "ISO27001"
    ALL = "All"

    @classmethod
    def parse(cls, value: str) -> ComplianceStandard:
        for standard in cls:
            if standard.value.lower() == value.strip().lower():
                return standard
        raise ValueError(f"지원하지 않는 규정: {value}")

    def expand(self) -> tuple[ComplianceStandard, ...]:
        if self is ComplianceStandard.ALL:
            return (ComplianceStandard.GDPR, ComplianceStandard.SOX, ComplianceStandard.ISO27001)
        return (self,)


def weighted_score(critical: int, high: int, medium: int) -> int:
    """감점식 점수 (0 미만은 0)"""
    return max(0, 100 - PENALTY_CRITICAL * critical - PENALTY_HIGH * high - PENALTY_MEDIUM * medium)


def score_records(records: Iterable[ViolationRecord]) -> int:
    """위반 레코드 목록의 감점식 점수"""
    counts = count_risk_levels(records)
    return weighted_score(
        counts[RiskLevel.CRITICAL],
        counts[RiskLevel.HIGH],
        counts[RiskLevel.MEDIUM],
    )


def _merge_records(standard: ComplianceStandard, runs: Iterable[AuditRun]) -> list[ViolationRecord]:
    """비준수 결과를 엔티티별로 합쳐 레코드 1건씩 생성 (위험도는 max)

    같은 엔티티의 다음 감사 결과는 앞서 기록되지 않은 위반만 이어붙입니다.
    """
    merged: dict[tuple[str, str], ViolationRecord] = {}
    for run in runs:
        for result in run.results:
            if result.compliant:
                continue
            key = (result.entity_type, result.identity)
            existing = merged.get(key)
            if existing is None:
                merged[key] = ViolationRecord(
                    standard=standard.value,
                    entity_type=result.entity_type,
                    identity=result.identity,
                    violations=result.violations,
                    risk_level=result.risk_level,
                )
            else:
                added = tuple(v for v in result.violations if v not in existing.violations)
                merged[key] = ViolationRecord(
                    standard=standard.value,
                    entity_type=existing.entity_type,
                    identity=existing.identity,
                    violations=existing.violations + added,
                    risk_level=escalate(existing.risk_level, result.risk_level),
                )
    return list(merged.values())


def _gdpr_records(
    users: Sequence[DirectoryUserRecord],
    rules: RuleSet,
    now: datetime,
) -> list[ViolationRecord]:
    inactive_retention = rules.data_retention_days.get("inactive_accounts")
    disabled_retention = rules.data_retention_days.get("disabled_accounts")

    records: list[ViolationRecord] = []
    for user in users:
        violations: list[str] = []
        level = RiskLevel.LOW

        last_activity = user.last_logon or user.created
        if last_activity is not None:
            age = days_since(last_activity, now)
            if user.enabled and inactive_retention is not None and age > inactive_retention:
                violations.append(f"data retention exceeded ({age} days)")
                level = escalate(level, RiskLevel.HIGH)
            if not user.enabled and disabled_retention is not None and age > disabled_retention:
                violations.append(f"disabled account retained beyond {disabled_retention} days")
                level = escalate(level, RiskLevel.MEDIUM)

        if is_empty(user.email):
            violations.append("missing contact attribute: email")
            level = escalate(level, RiskLevel.MEDIUM)

        if violations:
            records.append(
                ViolationRecord(
                    standard=ComplianceStandard.GDPR.value,
                    entity_type="user",
                    identity=user.identity,
                    violations=tuple(violations),
                    risk_level=level,
                )
            )
    return records


def collect_violation_records(
    standard: ComplianceStandard,
    users: Sequence[DirectoryUserRecord],
    groups: Sequence[DirectoryGroupRecord],
    rules: RuleSet,
    now: datetime,
    inactive_days: int = settings.DEFAULT_INACTIVE_DAYS,
    audited_groups: Sequence[DirectoryGroupRecord] | None = None,
) -> tuple[ViolationRecord, ...]:
    """규정 1개(또는 ALL)의 위반 레코드 수집

    Args:
        groups: 민감 그룹과 멤버십 해석에 쓰는 전체 그룹
        audited_groups: 그룹 감사 대상 (None이면 groups 전체)
    """
    if standard is ComplianceStandard.ALL:
        records: list[ViolationRecord] = []
        for single in standard.expand():
            records.extend(
                collect_violation_records(single, users, groups, rules, now, inactive_days, audited_groups)
            )
        return tuple(records)

    if standard is ComplianceStandard.GDPR:
        return tuple(_gdpr_records(users, rules, now))

    user_run = audit_users(users, rules, now, groups=groups)
    if standard is ComplianceStandard.SOX:
        runs = [user_run, audit_privileged_accounts(users, groups, rules, now)]
    else:
        runs = [
            user_run,
            audit_groups(groups if audited_groups is None else audited_groups, rules, now, users=users),
            audit_inactive_accounts(users, rules, now, inactive_days=inactive_days, groups=groups),
        ]
    return tuple(_merge_records(standard, runs))


def build_standard_report(
    standard: ComplianceStandard,
    users: Sequence[DirectoryUserRecord],
    groups: Sequence[DirectoryGroupRecord],
    rules: RuleSet,
    now: datetime,
    inactive_days: int = settings.DEFAULT_INACTIVE_DAYS,
    audited_groups: Sequence[DirectoryGroupRecord] | None = None,
) -> StandardComplianceReport:
    """규정별 컴플라이언스 보고서 생성

    ALL이면 규정마다 점수를 따로 계산하고, weighted_score는 전체 레코드 기준입니다.
    """
    records = collect_violation_records(standard, users, groups, rules, now, inactive_days, audited_groups)
    scores = {
        single.value: score_records(r for r in records if r.standard == single.value) for single in standard.expand()
    }
    report = StandardComplianceReport(
        standard=standard.value,
        records=records,
        weighted_score=score_records(records),
        scores=scores,
        generated_at=now,
    )
    logger.debug("%s 보고서: 레코드 %d건, 점수 %d", standard.value, len(records), report.weighted_score)
    return report
