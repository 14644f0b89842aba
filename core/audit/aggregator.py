"""
core/audit/aggregator.py - 감사 집계기

엔티티 평가기를 동일 종류 컬렉션 전체에 적용해 AuditRun을 만듭니다.
모든 함수는 (스냅샷, RuleSet, 임계값) → AuditRun 순수 함수이며 입력을 수정하지 않습니다.

감사 유형:
    - audit_users: 전체 사용자 (비활성화 계정 제외 옵션)
    - audit_groups: 전체 그룹
    - audit_privileged_accounts: 민감 그룹 (재귀) 멤버
    - audit_inactive_accounts: 임계값 이전에 마지막 로그온한 활성 계정
"""

from __future__ import annotations

import logging
from datetime import datetime, timedelta
from typing import Sequence

from core.config import settings
from core.directory.models import DirectoryGroupRecord, DirectoryUserRecord

from .evaluator import (
    GroupNameResolver,
    build_user_index,
    days_since,
    evaluate_group,
    evaluate_user,
    is_empty,
    lookup_user,
    resolve_sensitive_groups,
)
from .rules import RuleSet
from .types import AuditResult, AuditRun, AuditType, RiskLevel

logger = logging.getLogger(__name__)

ACTION_DISABLE_IMMEDIATELY = "disable immediately"
ACTION_DISABLE_AFTER_NOTIFICATION = "disable after notification"


def audit_users(
    users: Sequence[DirectoryUserRecord],
    rules: RuleSet,
    now: datetime,
    groups: Sequence[DirectoryGroupRecord] = (),
    include_disabled: bool = True,
) -> AuditRun:
    """사용자 감사

    Args:
        users: 사용자 스냅샷
        rules: 감사 규칙
        now: 평가 기준 시각
        groups: 그룹 DN → 이름 해석용 그룹 스냅샷
        include_disabled: False면 비활성화 계정 제외
    """
    resolver = GroupNameResolver(groups)
    results = tuple(
        evaluate_user(user, rules, now, resolve_group=resolver)
        for user in users
        if include_disabled or user.enabled
    )
    logger.debug("사용자 감사: %d건 평가", len(results))
    return AuditRun(audit_type=AuditType.USERS, results=results)


def audit_groups(
    groups: Sequence[DirectoryGroupRecord],
    rules: RuleSet,
    now: datetime,
    users: Sequence[DirectoryUserRecord] = (),
) -> AuditRun:
    """그룹 감사

    Args:
        groups: 그룹 스냅샷
        rules: 감사 규칙
        now: 평가 기준 시각
        users: 멤버 분류용 사용자 스냅샷
    """
    index = build_user_index(users)
    results = tuple(evaluate_group(group, rules, now, users_by_identity=index) for group in groups)
    logger.debug("그룹 감사: %d건 평가", len(results))
    return AuditRun(audit_type=AuditType.GROUPS, results=results)


# =============================================================================
# 권한 계정 감사
# =============================================================================


def resolve_privileged_members(
    users: Sequence[DirectoryUserRecord],
    groups: Sequence[DirectoryGroupRecord],
    rules: RuleSet,
) -> dict[str, tuple[str, ...]]:
    """민감 그룹의 사용자 멤버를 재귀적으로 해석

    중첩 그룹을 따라 내려가며 순환 참조는 한 번만 방문합니다.
    사용자도 그룹도 아닌 멤버는 로그만 남기고 건너뜁니다.

    Returns:
        사용자 identity → 해당 사용자를 포함하는 민감 그룹 이름 (발견 순서)
    """
    user_index = build_user_index(users)
    group_index: dict[str, DirectoryGroupRecord] = {}
    for group in groups:
        group_index[group.name] = group
        if group.distinguished_name:
            group_index[group.distinguished_name.lower()] = group

    privileged: dict[str, list[str]] = {}

    for root in groups:
        if not rules.is_sensitive(root.name):
            continue

        visited: set[str] = set()
        pending = [root]
        while pending:
            group = pending.pop(0)
            if group.name in visited:
                continue
            visited.add(group.name)

            for member in group.members:
                user = lookup_user(user_index, member)
                if user is not None:
                    names = privileged.setdefault(user.identity, [])
                    if root.name not in names:
                        names.append(root.name)
                    continue

                nested = group_index.get(member) or group_index.get(member.lower())
                if nested is not None:
                    pending.append(nested)
                else:
                    logger.debug("[%s] 해석할 수 없는 멤버 건너뜀: %s", group.name, member)

    return {identity: tuple(names) for identity, names in privileged.items()}


def _privileged_violations(user: DirectoryUserRecord, now: datetime) -> tuple[str, ...]:
    violations: list[str] = []
    if not user.enabled:
        violations.append("disabled account with privileges")
    if is_empty(user.manager):
        violations.append("privileged account without manager")
    if user.last_logon is None:
        violations.append("stale logon (never)")
    else:
        age = days_since(user.last_logon, now)
        if age > settings.PRIVILEGED_STALE_LOGON_DAYS:
            violations.append(f"stale logon ({age} days)")
    return tuple(violations)


def audit_privileged_accounts(
    users: Sequence[DirectoryUserRecord],
    groups: Sequence[DirectoryGroupRecord],
    rules: RuleSet,
    now: datetime,
) -> AuditRun:
    """권한 계정 감사

    민감 그룹 멤버(재귀 해석)만 대상으로 하며 모든 결과는 HIGH에서 시작합니다.
    추가 검사(비활성화 계정, 관리자 누락, 30일 초과 로그온)는 위반만 추가하고
    위험도는 더 올리지 않습니다.
    """
    privileged = resolve_privileged_members(users, groups, rules)
    users_by_identity = {user.identity: user for user in users}

    results: list[AuditResult] = []
    for identity, group_names in privileged.items():
        user = users_by_identity[identity]
        results.append(
            AuditResult(
                entity_type="user",
                identity=user.identity,
                display_name=user.display_name,
                violations=_privileged_violations(user, now),
                risk_level=RiskLevel.HIGH,
                sensitive_groups=group_names,
                has_sensitive_access=True,
                days_inactive=days_since(user.last_logon, now) if user.last_logon else None,
                details={
                    "enabled": user.enabled,
                    "manager": user.manager,
                    "lastLogon": user.last_logon.isoformat() if user.last_logon else None,
                },
            )
        )

    logger.debug("권한 계정 감사: %d건 평가", len(results))
    return AuditRun(audit_type=AuditType.PRIVILEGED, results=tuple(results))


# =============================================================================
# 비활성 계정 감사
# =============================================================================


def audit_inactive_accounts(
    users: Sequence[DirectoryUserRecord],
    rules: RuleSet,
    now: datetime,
    inactive_days: int = settings.DEFAULT_INACTIVE_DAYS,
    groups: Sequence[DirectoryGroupRecord] = (),
    include_never_logged_on: bool = False,
) -> AuditRun:
    """비활성 계정 감사

    inactive_days는 RuleSet.max_inactive_days와 별개로 전달되는 임계값입니다.
    민감 그룹 소속이면 CRITICAL + "disable immediately",
    아니면 MEDIUM + "disable after notification".

    Args:
        users: 사용자 스냅샷
        rules: 감사 규칙
        now: 평가 기준 시각
        inactive_days: 비활성 판정 일수
        groups: 그룹 DN → 이름 해석용 그룹 스냅샷
        include_never_logged_on: 로그온 기록이 없는 활성 계정도 포함
    """
    cutoff = now - timedelta(days=inactive_days)
    resolver = GroupNameResolver(groups)

    results: list[AuditResult] = []
    for user in users:
        if not user.enabled:
            continue

        if user.last_logon is None:
            if not include_never_logged_on:
                continue
            days_inactive = None
            violation = "no recorded logon"
        elif user.last_logon < cutoff:
            days_inactive = days_since(user.last_logon, now)
            violation = f"inactive account ({days_inactive} days)"
        else:
            continue

        sensitive_groups = resolve_sensitive_groups(user, rules, resolver)
        has_sensitive_access = bool(sensitive_groups)

        results.append(
            AuditResult(
                entity_type="user",
                identity=user.identity,
                display_name=user.display_name,
                violations=(violation,),
                risk_level=RiskLevel.CRITICAL if has_sensitive_access else RiskLevel.MEDIUM,
                sensitive_groups=sensitive_groups,
                has_sensitive_access=has_sensitive_access,
                recommended_action=(
                    ACTION_DISABLE_IMMEDIATELY if has_sensitive_access else ACTION_DISABLE_AFTER_NOTIFICATION
                ),
                days_inactive=days_inactive,
                details={
                    "department": user.department,
                    "lastLogon": user.last_logon.isoformat() if user.last_logon else None,
                },
            )
        )

    logger.debug("비활성 계정 감사: %d건 (기준 %d일)", len(results), inactive_days)
    return AuditRun(audit_type=AuditType.INACTIVE, results=tuple(results))
