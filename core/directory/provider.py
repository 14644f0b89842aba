"""
core/directory/provider.py - 디렉터리 스냅샷 제공자

코어가 요구하는 스냅샷 조회 인터페이스와 두 가지 구현:
    - SnapshotFileProvider: 디렉터리 내보내기 파일(JSON/YAML) 기반
    - InMemoryDirectory: 메모리 내 디렉터리 (계정 수명주기 작업/테스트용)

조회 실패는 SnapshotFetchError로 감싸지 않고 OSError/ValueError 등 원인 예외를
그대로 전파합니다. 감사 유형/단계 문맥은 core.audit.runner가 붙입니다.

Usage:
    provider = SnapshotFileProvider("exports/contoso.json")
    users = provider.get_users(search_base="OU=Staff,DC=contoso,DC=com")
    groups = provider.get_groups()
"""

from __future__ import annotations

import json
import logging
from dataclasses import replace
from pathlib import Path
from typing import Any, Iterable, Protocol, runtime_checkable

import yaml  # type: ignore[import-untyped]

from .models import DirectoryGroupRecord, DirectoryUserRecord

logger = logging.getLogger(__name__)


@runtime_checkable
class DirectoryProvider(Protocol):
    """스냅샷 조회 인터페이스"""

    def get_users(
        self,
        search_base: str | None = None,
        include_disabled: bool = True,
    ) -> list[DirectoryUserRecord]: ...

    def get_groups(self, search_base: str | None = None) -> list[DirectoryGroupRecord]: ...


def in_scope(distinguished_name: str | None, search_base: str | None) -> bool:
    """DN이 search_base 하위인지 확인 (대소문자 무시)

    search_base가 없으면 항상 True, DN이 없는 엔티티는 범위 필터에서 제외됩니다.
    """
    if not search_base:
        return True
    if not distinguished_name:
        return False
    return distinguished_name.lower().endswith(search_base.lower())


def _filter_users(
    users: Iterable[DirectoryUserRecord],
    search_base: str | None,
    include_disabled: bool,
) -> list[DirectoryUserRecord]:
    return [
        user
        for user in users
        if in_scope(user.distinguished_name, search_base) and (include_disabled or user.enabled)
    ]


def _filter_groups(groups: Iterable[DirectoryGroupRecord], search_base: str | None) -> list[DirectoryGroupRecord]:
    return [group for group in groups if in_scope(group.distinguished_name, search_base)]


# =============================================================================
# 파일 기반 스냅샷
# =============================================================================


def load_document(path: str | Path) -> dict[str, Any]:
    """JSON 또는 YAML 문서 로드

    확장자가 .yaml/.yml이면 YAML, 그 외는 JSON으로 해석합니다.

    Raises:
        OSError: 파일 읽기 실패
        ValueError: 파싱 실패 또는 최상위가 매핑이 아닌 경우
    """
    path = Path(path)
    text = path.read_text(encoding="utf-8")

    if path.suffix.lower() in (".yaml", ".yml"):
        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise ValueError(f"YAML 파싱 실패: {path}") from e
    else:
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ValueError(f"JSON 파싱 실패: {path}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f"최상위 구조가 매핑이 아닙니다: {path}")
    return data


class SnapshotFileProvider:
    """디렉터리 내보내기 파일 기반 제공자

    파일 형식:
        {"users": [{...}, ...], "groups": [{...}, ...]}

    파일은 첫 조회 시 한 번만 읽습니다 (감사 유형당 단일 동기 조회).
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)
        self._users: list[DirectoryUserRecord] | None = None
        self._groups: list[DirectoryGroupRecord] | None = None

    def _load(self) -> None:
        document = load_document(self.path)
        users = [DirectoryUserRecord.from_dict(item) for item in document.get("users") or []]
        groups = [DirectoryGroupRecord.from_dict(item) for item in document.get("groups") or []]

        seen: set[str] = set()
        for user in users:
            if user.identity in seen:
                raise ValueError(f"중복된 계정 identity: {user.identity}")
            seen.add(user.identity)

        logger.debug("스냅샷 로드: %s (users=%d, groups=%d)", self.path, len(users), len(groups))
        self._users = users
        self._groups = groups

    def get_users(
        self,
        search_base: str | None = None,
        include_disabled: bool = True,
    ) -> list[DirectoryUserRecord]:
        if self._users is None:
            self._load()
        return _filter_users(self._users or [], search_base, include_disabled)

    def get_groups(self, search_base: str | None = None) -> list[DirectoryGroupRecord]:
        if self._groups is None:
            self._load()
        return _filter_groups(self._groups or [], search_base)


# =============================================================================
# 메모리 디렉터리
# =============================================================================


class InMemoryDirectory:
    """메모리 내 디렉터리

    스냅샷 제공자이면서 계정 수명주기 작업(DirectoryWriter)의 대상입니다.
    레코드는 불변이므로 변경 시 새 레코드로 교체합니다.
    """

    def __init__(
        self,
        users: Iterable[DirectoryUserRecord] = (),
        groups: Iterable[DirectoryGroupRecord] = (),
    ):
        self.users: dict[str, DirectoryUserRecord] = {}
        for user in users:
            self.users[user.identity] = user
        self.groups: dict[str, DirectoryGroupRecord] = {group.name: group for group in groups}

    @classmethod
    def from_file(cls, path: str | Path) -> InMemoryDirectory:
        provider = SnapshotFileProvider(path)
        return cls(provider.get_users(), provider.get_groups())

    def get_users(
        self,
        search_base: str | None = None,
        include_disabled: bool = True,
    ) -> list[DirectoryUserRecord]:
        return _filter_users(self.users.values(), search_base, include_disabled)

    def get_groups(self, search_base: str | None = None) -> list[DirectoryGroupRecord]:
        return _filter_groups(self.groups.values(), search_base)

    # DirectoryWriter

    def get_user(self, identity: str) -> DirectoryUserRecord | None:
        return self.users.get(identity)

    def put_user(self, user: DirectoryUserRecord) -> None:
        self.users[user.identity] = user

    def remove_user(self, identity: str) -> None:
        self.users.pop(identity, None)

    def set_group_members(self, name: str, members: tuple[str, ...]) -> None:
        group = self.groups.get(name)
        if group is None:
            self.groups[name] = DirectoryGroupRecord(name=name, members=members)
        else:
            self.groups[name] = replace(group, members=members)

    def to_dict(self) -> dict[str, Any]:
        return {
            "users": [user.to_dict() for user in self.users.values()],
            "groups": [group.to_dict() for group in self.groups.values()],
        }

    def save(self, path: str | Path) -> Path:
        """JSON 스냅샷으로 저장"""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(json.dumps(self.to_dict(), ensure_ascii=False, indent=2), encoding="utf-8")
        return path
