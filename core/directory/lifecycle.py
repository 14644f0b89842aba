"""
core/directory/lifecycle.py - 계정 수명주기 관리

템플릿 기반 계정 생성과 수정/활성화/비활성화/삭제를 수행하고,
변경이 실제로 일어난 작업마다 감사 기록(AuditEntry)을 한 건씩 남깁니다.
감사 기록은 메모리에 쌓였다가 디렉터리 저장이 끝난 뒤 flush()로 감사 로그에 기록됩니다.

디렉터리 변경 자체는 DirectoryWriter 구현(예: InMemoryDirectory)에 위임합니다.

Usage:
    directory = InMemoryDirectory.from_file("exports/contoso.json")
    manager = AccountManager(directory, AuditTrail("audit_trail.jsonl"), operator="admin")

    template = load_template("templates/staff.yaml")
    manager.create_account("jdoe", template, display_name="John Doe", email="jdoe@contoso.com")
    manager.disable_account("jdoe")

    directory.save("exports/contoso.json")
    manager.flush()
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Protocol

from core.exceptions import AccountError, ValidationError

from .audit_log import AuditAction, AuditEntry, AuditTrail
from .models import DirectoryGroupRecord, DirectoryUserRecord
from .provider import load_document

logger = logging.getLogger(__name__)

# update_account로 변경 가능한 필드
UPDATABLE_FIELDS = ("display_name", "email", "department", "title", "manager", "account_expires")


class DirectoryWriter(Protocol):
    """계정 변경 대상 디렉터리 인터페이스"""

    def get_user(self, identity: str) -> DirectoryUserRecord | None: ...

    def put_user(self, user: DirectoryUserRecord) -> None: ...

    def remove_user(self, identity: str) -> None: ...

    def get_groups(self, search_base: str | None = None) -> list[DirectoryGroupRecord]: ...

    def set_group_members(self, name: str, members: tuple[str, ...]) -> None: ...


@dataclass(frozen=True)
class AccountTemplate:
    """계정 생성 템플릿

    Attributes:
        name: 템플릿 이름
        department: 부서
        title: 직함
        groups: 가입시킬 그룹 이름 목록
        ou: 생성 위치 (DN 접미사)
        enabled: 생성 직후 활성화 여부
        attributes: 추가 속성
    """

    name: str
    department: str = ""
    title: str = ""
    groups: tuple[str, ...] = ()
    ou: str | None = None
    enabled: bool = True
    attributes: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AccountTemplate:
        name = data.get("name")
        if not name:
            raise ValidationError("template.name", name, "non-empty template name")
        groups = data.get("groups") or []
        if isinstance(groups, str):
            groups = [groups]
        return cls(
            name=str(name),
            department=data.get("department", "") or "",
            title=data.get("title", "") or "",
            groups=tuple(str(g) for g in groups),
            ou=data.get("ou"),
            enabled=bool(data.get("enabled", True)),
            attributes=dict(data.get("attributes") or {}),
        )


def load_template(path: str | Path) -> AccountTemplate:
    """YAML/JSON 템플릿 파일 로드"""
    return AccountTemplate.from_dict(load_document(path))


class AccountManager:
    """계정 수명주기 작업 수행자"""

    def __init__(
        self,
        directory: DirectoryWriter,
        trail: AuditTrail | None = None,
        operator: str = "system",
    ):
        self.directory = directory
        self.trail = trail
        self.operator = operator
        self.entries: list[AuditEntry] = []
        self._pending: list[AuditEntry] = []

    def _record(self, action: AuditAction, target: str, details: dict[str, Any], now: datetime) -> AuditEntry:
        entry = AuditEntry.create(action, target, self.operator, details, now=now)
        self.entries.append(entry)
        self._pending.append(entry)
        return entry

    def flush(self) -> list[AuditEntry]:
        """아직 기록하지 않은 감사 항목을 감사 로그에 추가

        디렉터리 변경을 저장한 뒤에 호출합니다.

        Returns:
            이번에 기록한 항목 목록
        """
        pending, self._pending = self._pending, []
        if self.trail is not None:
            for entry in pending:
                self.trail.record(entry)
        logger.debug("감사 기록 %d건 flush", len(pending))
        return pending

    def _require(self, identity: str) -> DirectoryUserRecord:
        user = self.directory.get_user(identity)
        if user is None:
            raise AccountError(identity, "존재하지 않는 계정입니다")
        return user

    def _set_membership(self, identity: str, group_names: tuple[str, ...], add: bool) -> None:
        groups = {group.name: group for group in self.directory.get_groups()}
        for name in group_names:
            group = groups.get(name)
            members = group.members if group else ()
            if add and identity not in members:
                self.directory.set_group_members(name, members + (identity,))
            elif not add and identity in members:
                self.directory.set_group_members(name, tuple(m for m in members if m != identity))

    def create_account(
        self,
        identity: str,
        template: AccountTemplate,
        display_name: str = "",
        email: str = "",
        manager: str | None = None,
        now: datetime | None = None,
    ) -> DirectoryUserRecord:
        """템플릿으로 계정 생성

        Raises:
            AccountError: 이미 존재하는 identity
        """
        now = now or datetime.now(timezone.utc)
        if not identity:
            raise ValidationError("identity", identity, "non-empty account name")
        if self.directory.get_user(identity) is not None:
            raise AccountError(identity, "이미 존재하는 계정입니다")

        user = DirectoryUserRecord(
            identity=identity,
            display_name=display_name or identity,
            email=email,
            department=template.department,
            title=template.title,
            manager=manager,
            created=now,
            enabled=template.enabled,
            member_of=template.groups,
            distinguished_name=f"CN={display_name or identity},{template.ou}" if template.ou else None,
            attributes=dict(template.attributes),
        )
        self.directory.put_user(user)
        self._set_membership(identity, template.groups, add=True)

        logger.info("계정 생성: %s (template=%s)", identity, template.name)
        self._record(
            AuditAction.ACCOUNT_CREATED,
            identity,
            {"template": template.name, "groups": list(template.groups), "enabled": template.enabled},
            now,
        )
        return user

    def update_account(self, identity: str, changes: dict[str, Any], now: datetime | None = None) -> DirectoryUserRecord:
        """계정 속성 변경

        값이 실제로 바뀐 필드만 기록하며, 변경이 없으면 감사 기록도 남기지 않습니다.

        Raises:
            ValidationError: 변경 불가 필드
        """
        now = now or datetime.now(timezone.utc)
        user = self._require(identity)

        unknown = [key for key in changes if key not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError("changes", ", ".join(unknown), " | ".join(UPDATABLE_FIELDS))

        diff = {
            key: {"old": getattr(user, key), "new": value}
            for key, value in changes.items()
            if getattr(user, key) != value
        }
        if not diff:
            return user

        updated = replace(user, **{key: changes[key] for key in diff})
        self.directory.put_user(updated)
        logger.info("계정 수정: %s (%s)", identity, ", ".join(diff))
        self._record(AuditAction.ACCOUNT_UPDATED, identity, {"changes": diff}, now)
        return updated

    def enable_account(self, identity: str, now: datetime | None = None) -> DirectoryUserRecord:
        return self._set_enabled(identity, True, now)

    def disable_account(self, identity: str, now: datetime | None = None) -> DirectoryUserRecord:
        return self._set_enabled(identity, False, now)

    def _set_enabled(self, identity: str, enabled: bool, now: datetime | None) -> DirectoryUserRecord:
        now = now or datetime.now(timezone.utc)
        user = self._require(identity)
        if user.enabled == enabled:
            return user

        updated = replace(user, enabled=enabled)
        self.directory.put_user(updated)
        action = AuditAction.ACCOUNT_ENABLED if enabled else AuditAction.ACCOUNT_DISABLED
        logger.info("계정 %s: %s", "활성화" if enabled else "비활성화", identity)
        self._record(action, identity, {}, now)
        return updated

    def delete_account(self, identity: str, now: datetime | None = None) -> None:
        """계정 삭제 (그룹 멤버십도 함께 제거)"""
        now = now or datetime.now(timezone.utc)
        user = self._require(identity)

        groups = tuple(group.name for group in self.directory.get_groups() if identity in group.members)
        self._set_membership(identity, groups, add=False)
        self.directory.remove_user(identity)

        logger.info("계정 삭제: %s", identity)
        self._record(
            AuditAction.ACCOUNT_DELETED,
            identity,
            {"display_name": user.display_name, "groups": list(groups)},
            now,
        )
