"""
core/audit/evaluator.py - 엔티티 평가기

사용자/그룹 레코드 1건과 RuleSet으로 AuditResult를 만드는 순수 함수.

각 검사는 CheckOutcome(위반 문자열, 위험도)을 반환하고, 최종 위험도는
LOW에서 시작해 검사 순서대로 max로 누적합니다. 따라서 앞선 검사가 올린
위험도를 뒤 검사가 낮출 수 없습니다.

현재 시각(now)은 호출자가 전달합니다. 같은 입력이면 항상 같은 결과입니다.

Usage:
    resolver = GroupNameResolver(groups)
    result = evaluate_user(user, rules, now, resolve_group=resolver)
    result = evaluate_group(group, rules, now, users_by_identity=build_user_index(users))
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Iterable, Iterator, Mapping

from core.config import settings
from core.directory.models import DirectoryGroupRecord, DirectoryUserRecord

from .rules import RuleSet
from .types import AuditResult, RiskLevel

logger = logging.getLogger(__name__)

GroupResolver = Callable[[str], str]


@dataclass(frozen=True)
class CheckOutcome:
    """검사 1건의 결과 (위반 없음/위험도 변화 없음은 None)"""

    violation: str | None = None
    level: RiskLevel | None = None


def escalate(current: RiskLevel, *levels: RiskLevel | None) -> RiskLevel:
    """현재 위험도와 주어진 위험도 중 최댓값"""
    return max((current, *(level for level in levels if level is not None)))


def fold_outcomes(outcomes: Iterable[CheckOutcome]) -> tuple[tuple[str, ...], RiskLevel]:
    """검사 결과를 순서대로 누적 (위반 목록, 최종 위험도)"""
    violations: list[str] = []
    level = RiskLevel.LOW
    for outcome in outcomes:
        if outcome.violation is not None:
            violations.append(outcome.violation)
        level = escalate(level, outcome.level)
    return tuple(violations), level


def days_since(timestamp: datetime, now: datetime) -> int:
    """경과일 (정수 일 단위, 내림)"""
    return (now - timestamp).days


def is_empty(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return not value.strip()
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


# =============================================================================
# 참조 해석
# =============================================================================


class GroupNameResolver:
    """그룹 참조(이름 또는 DN)를 그룹 이름으로 해석

    - "=" 가 없는 참조는 이미 그룹 이름으로 간주
    - 스냅샷에 있는 DN은 해당 그룹 이름
    - 스냅샷에 없는 DN은 첫 번째 CN 값

    해석할 수 없으면 LookupError를 발생시킵니다.
    """

    def __init__(self, groups: Iterable[DirectoryGroupRecord] = ()):
        self._by_dn = {
            group.distinguished_name.lower(): group.name for group in groups if group.distinguished_name
        }

    def __call__(self, reference: str) -> str:
        if "=" not in reference:
            return reference

        name = self._by_dn.get(reference.lower())
        if name:
            return name

        first_rdn = reference.split(",", 1)[0]
        key, _, value = first_rdn.partition("=")
        if key.strip().upper() == "CN" and value.strip():
            return value.strip()
        raise LookupError(f"그룹 참조를 해석할 수 없습니다: {reference}")


def build_user_index(users: Iterable[DirectoryUserRecord]) -> dict[str, DirectoryUserRecord]:
    """identity와 DN(소문자) 모두로 사용자를 찾을 수 있는 색인"""
    index: dict[str, DirectoryUserRecord] = {}
    for user in users:
        index[user.identity] = user
        if user.distinguished_name:
            index[user.distinguished_name.lower()] = user
    return index


def lookup_user(index: Mapping[str, DirectoryUserRecord], member: str) -> DirectoryUserRecord | None:
    return index.get(member) or index.get(member.lower())


def resolve_sensitive_groups(
    user: DirectoryUserRecord,
    rules: RuleSet,
    resolve_group: GroupResolver | None = None,
) -> tuple[str, ...]:
    """사용자가 소속된 민감 그룹 이름 (소속 순서, 중복 제거)

    해석 실패한 그룹 참조는 로그만 남기고 건너뜁니다.
    """
    resolve = resolve_group or GroupNameResolver()
    found: list[str] = []
    for reference in user.member_of:
        try:
            name = resolve(reference)
        except LookupError as e:
            logger.warning("[%s] 그룹 참조 건너뜀: %s", user.identity, e)
            continue
        if rules.is_sensitive(name) and name not in found:
            found.append(name)
    return tuple(found)


# =============================================================================
# 사용자 평가
# =============================================================================


def _user_checks(user: DirectoryUserRecord, rules: RuleSet, now: datetime) -> Iterator[CheckOutcome]:
    # 1. 필수 속성
    for attribute in rules.required_user_attributes:
        if is_empty(user.get_attribute(attribute)):
            yield CheckOutcome(f"missing attribute: {attribute}")

    # 2. 비밀번호 사용 기간
    if user.password_last_set is not None:
        age = days_since(user.password_last_set, now)
        if age > rules.max_password_age_days:
            yield CheckOutcome(f"password too old ({age} days)", RiskLevel.MEDIUM)

    # 3. 비활성 기간 (로그온 기록 없음도 별도 상태로 검사)
    if user.last_logon is not None:
        inactivity = days_since(user.last_logon, now)
        if inactivity > rules.max_inactive_days:
            yield CheckOutcome(f"inactive account ({inactivity} days)", RiskLevel.HIGH)
    else:
        yield CheckOutcome("no recorded logon", RiskLevel.MEDIUM)

    # 4. 계정 만료
    if user.account_expires is not None and user.account_expires < now:
        yield CheckOutcome("account expired", RiskLevel.HIGH)


def evaluate_user(
    user: DirectoryUserRecord,
    rules: RuleSet,
    now: datetime,
    resolve_group: GroupResolver | None = None,
) -> AuditResult:
    """사용자 1건 평가

    민감 그룹 소속은 위반으로 세지 않고 위험도(HIGH 이상)와
    sensitive_groups 필드에만 반영합니다.

    Args:
        user: 사용자 레코드
        rules: 감사 규칙
        now: 평가 기준 시각
        resolve_group: 그룹 참조 → 이름 해석기

    Returns:
        AuditResult
    """
    violations, level = fold_outcomes(_user_checks(user, rules, now))

    # 5. 민감 그룹 소속
    sensitive_groups = resolve_sensitive_groups(user, rules, resolve_group)
    if sensitive_groups:
        level = escalate(level, RiskLevel.HIGH)

    return AuditResult(
        entity_type="user",
        identity=user.identity,
        display_name=user.display_name,
        violations=violations,
        risk_level=level,
        sensitive_groups=sensitive_groups,
        has_sensitive_access=bool(sensitive_groups),
        days_inactive=days_since(user.last_logon, now) if user.last_logon else None,
        details={
            "enabled": user.enabled,
            "department": user.department,
            "lastLogon": user.last_logon.isoformat() if user.last_logon else None,
            "passwordLastSet": user.password_last_set.isoformat() if user.password_last_set else None,
        },
    )


# =============================================================================
# 그룹 평가
# =============================================================================


@dataclass(frozen=True)
class MemberClassification:
    """그룹 멤버 분류 (사용자 멤버만 분류, 중첩 그룹 등은 제외)"""

    active: int = 0
    inactive: int = 0
    disabled: int = 0


def classify_members(
    group: DirectoryGroupRecord,
    users_by_identity: Mapping[str, DirectoryUserRecord],
    now: datetime,
) -> MemberClassification:
    """멤버를 활성/비활성(고정 90일)/비활성화 계정으로 분류"""
    active = inactive = disabled = 0
    for member in group.members:
        user = lookup_user(users_by_identity, member)
        if user is None:
            continue
        if not user.enabled:
            disabled += 1
        elif user.last_logon is None or days_since(user.last_logon, now) > settings.GROUP_INACTIVE_MEMBER_DAYS:
            inactive += 1
        else:
            active += 1
    return MemberClassification(active=active, inactive=inactive, disabled=disabled)


def evaluate_group(
    group: DirectoryGroupRecord,
    rules: RuleSet,
    now: datetime,
    users_by_identity: Mapping[str, DirectoryUserRecord] | None = None,
) -> AuditResult:
    """그룹 1건 평가

    민감 그룹이면 위반 여부와 관계없이 위험도 HIGH입니다.

    Args:
        group: 그룹 레코드
        rules: 감사 규칙
        now: 평가 기준 시각
        users_by_identity: 멤버 분류용 사용자 색인 (build_user_index)

    Returns:
        AuditResult
    """
    is_sensitive = rules.is_sensitive(group.name)
    member_count = group.member_count
    classification = classify_members(group, users_by_identity or {}, now)

    outcomes: list[CheckOutcome] = []
    if is_sensitive:
        outcomes.append(CheckOutcome(level=RiskLevel.HIGH))
        if member_count > rules.max_members_in_sensitive_group:
            outcomes.append(CheckOutcome(f"too many members in sensitive group ({member_count})"))
    if member_count == 0 and not is_sensitive:
        outcomes.append(CheckOutcome("group has no members", RiskLevel.MEDIUM))
    if is_empty(group.description):
        outcomes.append(CheckOutcome("missing description"))
    if classification.disabled > 0:
        outcomes.append(CheckOutcome(f"{classification.disabled} disabled members", RiskLevel.MEDIUM))

    violations, level = fold_outcomes(outcomes)

    return AuditResult(
        entity_type="group",
        identity=group.name,
        display_name=group.name,
        violations=violations,
        risk_level=level,
        sensitive_groups=(group.name,) if is_sensitive else (),
        has_sensitive_access=is_sensitive,
        details={
            "isSensitive": is_sensitive,
            "memberCount": member_count,
            "activeMembers": classification.active,
            "inactiveMembers": classification.inactive,
            "disabledMembers": classification.disabled,
            "scope": group.scope,
            "category": group.category,
        },
    )
