"""
core/audit/runner.py - 감사 실행 오케스트레이션

감사 유형 선택 → 스냅샷 조회 → 집계 → (종합/규정 보고서) 합성 흐름을 실행합니다.

스냅샷 조회 실패는 감사 유형과 단계를 담은 SnapshotFetchError로 감싸 전파합니다.
종합(Full) 실행에서 하위 감사 하나라도 실패하면 부분 결과 없이 전체가 중단됩니다.

Usage:
    runner = AuditRunner(SnapshotFileProvider("export.json"), load_rule_set())
    user_run = runner.run(AuditType.USERS)
    report = runner.run_full()
    gdpr = runner.run_standard(ComplianceStandard.GDPR)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone

from core.config import settings
from core.directory.models import DirectoryGroupRecord, DirectoryUserRecord
from core.directory.provider import DirectoryProvider, in_scope
from core.exceptions import SnapshotFetchError

from .aggregator import audit_groups, audit_inactive_accounts, audit_privileged_accounts, audit_users
from .composer import compose_compliance_report
from .rules import RuleSet
from .standards import ComplianceStandard, build_standard_report
from .types import AuditRun, AuditType, ComplianceReport, StandardComplianceReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AuditOptions:
    """감사 실행 옵션

    Attributes:
        search_base: 사용자/그룹 감사 범위 DN (None이면 전체).
            민감 그룹과 멤버십 해석은 범위와 무관하게 전체 그룹을 사용합니다.
        include_disabled: 사용자 감사에 비활성화 계정 포함
        inactive_days: 비활성 계정 감사 임계값 (RuleSet.max_inactive_days와 별개)
        include_never_logged_on: 비활성 계정 감사에 로그온 기록 없는 계정 포함
    """

    search_base: str | None = None
    include_disabled: bool = True
    inactive_days: int = settings.DEFAULT_INACTIVE_DAYS
    include_never_logged_on: bool = False


class AuditRunner:
    """감사 실행기

    RuleSet과 기준 시각(now)은 생성 시 고정되어 실행 동안 바뀌지 않습니다.
    """

    def __init__(
        self,
        provider: DirectoryProvider,
        rules: RuleSet,
        options: AuditOptions | None = None,
        now: datetime | None = None,
    ):
        self.provider = provider
        self.rules = rules
        self.options = options or AuditOptions()
        self.now = now or datetime.now(timezone.utc)

    # -------------------------------------------------------------------------
    # 스냅샷 조회
    # -------------------------------------------------------------------------

    def _fetch_users(self, audit_type: str) -> list[DirectoryUserRecord]:
        logger.info("[%s] 사용자 스냅샷 조회", audit_type)
        try:
            return self.provider.get_users(search_base=self.options.search_base, include_disabled=True)
        except SnapshotFetchError:
            raise
        except Exception as e:
            raise SnapshotFetchError(audit_type, "fetch_users", "사용자 조회 실패", cause=e) from e

    def _fetch_groups(self, audit_type: str) -> list[DirectoryGroupRecord]:
        logger.info("[%s] 그룹 스냅샷 조회", audit_type)
        try:
            return self.provider.get_groups()
        except SnapshotFetchError:
            raise
        except Exception as e:
            raise SnapshotFetchError(audit_type, "fetch_groups", "그룹 조회 실패", cause=e) from e

    def _scoped_groups(self, groups: list[DirectoryGroupRecord]) -> list[DirectoryGroupRecord]:
        return [g for g in groups if in_scope(g.distinguished_name, self.options.search_base)]

    # -------------------------------------------------------------------------
    # 실행
    # -------------------------------------------------------------------------

    def run(self, audit_type: AuditType) -> AuditRun:
        """단일 감사 유형 실행 (FULL은 run_full 사용)"""
        if audit_type is AuditType.FULL:
            raise ValueError("FULL 감사는 run_full()로 실행하세요")

        users = self._fetch_users(audit_type.value)
        groups = self._fetch_groups(audit_type.value)

        if audit_type is AuditType.USERS:
            return audit_users(
                users, self.rules, self.now, groups=groups, include_disabled=self.options.include_disabled
            )
        if audit_type is AuditType.GROUPS:
            return audit_groups(self._scoped_groups(groups), self.rules, self.now, users=users)
        if audit_type is AuditType.PRIVILEGED:
            return audit_privileged_accounts(users, groups, self.rules, self.now)
        return audit_inactive_accounts(
            users,
            self.rules,
            self.now,
            inactive_days=self.options.inactive_days,
            groups=groups,
            include_never_logged_on=self.options.include_never_logged_on,
        )

    def run_full(self) -> ComplianceReport:
        """사용자/그룹/권한/비활성 감사를 모두 실행해 종합 보고서 생성

        Raises:
            SnapshotFetchError: 하위 감사 조회 실패 (부분 결과 없음)
        """
        runs = [
            self.run(audit_type)
            for audit_type in (AuditType.USERS, AuditType.GROUPS, AuditType.PRIVILEGED, AuditType.INACTIVE)
        ]
        return compose_compliance_report(*runs, generated_at=self.now)

    def run_standard(self, standard: ComplianceStandard) -> StandardComplianceReport:
        """규정별 컴플라이언스 보고서 생성"""
        users = self._fetch_users(f"compliance:{standard.value}")
        groups = self._fetch_groups(f"compliance:{standard.value}")
        return build_standard_report(
            standard,
            users,
            groups,
            self.rules,
            self.now,
            inactive_days=self.options.inactive_days,
            audited_groups=self._scoped_groups(groups),
        )
