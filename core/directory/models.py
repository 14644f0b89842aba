"""
core/directory/models.py - 디렉터리 엔티티 스냅샷 모델

감사 시점의 사용자/그룹 레코드. 코어는 이 레코드를 읽기만 하며 수정하지 않습니다.
디렉터리 내보내기(JSON/YAML)의 snake_case 키와 AD 속성명(SamAccountName,
LastLogonDate 등)을 모두 인식합니다.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

from core.exceptions import ValidationError


# 사용자 레코드 필드 ← AD 속성명 별칭
USER_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "identity": ("SamAccountName", "sAMAccountName", "samaccountname"),
    "display_name": ("DisplayName", "displayName", "Name"),
    "email": ("EmailAddress", "mail", "Mail"),
    "department": ("Department",),
    "title": ("Title",),
    "manager": ("Manager",),
    "created": ("Created", "whenCreated"),
    "last_logon": ("LastLogonDate", "lastLogonTimestamp"),
    "password_last_set": ("PasswordLastSet", "pwdLastSet"),
    "enabled": ("Enabled",),
    "locked": ("LockedOut",),
    "account_expires": ("AccountExpirationDate",),
    "member_of": ("MemberOf", "memberOf"),
    "distinguished_name": ("DistinguishedName", "distinguishedName"),
}

GROUP_FIELD_ALIASES: dict[str, tuple[str, ...]] = {
    "name": ("Name", "SamAccountName"),
    "description": ("Description",),
    "scope": ("GroupScope",),
    "category": ("GroupCategory",),
    "created": ("Created", "whenCreated"),
    "modified": ("Modified", "whenChanged"),
    "members": ("Members", "member"),
    "distinguished_name": ("DistinguishedName", "distinguishedName"),
}


def parse_timestamp(value: Any, field_name: str = "timestamp") -> datetime | None:
    """ISO-8601 문자열/ datetime을 UTC aware datetime으로 변환

    None/빈 문자열은 None (부재는 유효한 상태)

    Raises:
        ValidationError: 해석할 수 없는 값
    """
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError as e:
            raise ValidationError(field_name, value, "ISO-8601 timestamp", cause=e) from e
    else:
        raise ValidationError(field_name, value, "ISO-8601 timestamp")

    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def _pick(data: Mapping[str, Any], key: str, aliases: Mapping[str, tuple[str, ...]], default: Any = None) -> Any:
    if key in data:
        return data[key]
    for alias in aliases.get(key, ()):
        if alias in data:
            return data[alias]
    return default


def _as_tuple(value: Any) -> tuple[str, ...]:
    if value is None or value == "":
        return ()
    if isinstance(value, str):
        return (value,)
    return tuple(str(v) for v in value)


def _as_bool(value: Any, default: bool) -> bool:
    if value is None:
        return default
    if isinstance(value, str):
        return value.strip().lower() in ("true", "1", "yes")
    return bool(value)


@dataclass(frozen=True)
class DirectoryUserRecord:
    """사용자 계정 스냅샷

    identity는 스냅샷 내에서 고유합니다.
    last_logon이 None이면 "로그온 기록 없음" 상태입니다.
    """

    identity: str
    display_name: str = ""
    email: str = ""
    department: str = ""
    title: str = ""
    manager: str | None = None
    created: datetime | None = None
    last_logon: datetime | None = None
    password_last_set: datetime | None = None
    enabled: bool = True
    locked: bool = False
    account_expires: datetime | None = None
    member_of: tuple[str, ...] = ()
    distinguished_name: str | None = None
    attributes: Mapping[str, Any] = field(default_factory=dict)

    def get_attribute(self, name: str) -> Any:
        """필드명, AD 속성명, 추가 속성 순으로 값 조회 (없으면 None)"""
        if name in USER_FIELD_ALIASES:
            return getattr(self, name)
        for field_name, aliases in USER_FIELD_ALIASES.items():
            if name in aliases:
                return getattr(self, field_name)
        return self.attributes.get(name)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DirectoryUserRecord:
        """내보내기 딕셔너리에서 생성"""
        identity = _pick(data, "identity", USER_FIELD_ALIASES)
        if not identity:
            raise ValidationError("identity", identity, "non-empty account name")

        known = {"attributes"} | set(USER_FIELD_ALIASES)
        for aliases in USER_FIELD_ALIASES.values():
            known.update(aliases)
        extras = dict(data.get("attributes") or {})
        extras.update({k: v for k, v in data.items() if k not in known})

        return cls(
            identity=str(identity),
            display_name=_pick(data, "display_name", USER_FIELD_ALIASES, "") or "",
            email=_pick(data, "email", USER_FIELD_ALIASES, "") or "",
            department=_pick(data, "department", USER_FIELD_ALIASES, "") or "",
            title=_pick(data, "title", USER_FIELD_ALIASES, "") or "",
            manager=_pick(data, "manager", USER_FIELD_ALIASES) or None,
            created=parse_timestamp(_pick(data, "created", USER_FIELD_ALIASES), "created"),
            last_logon=parse_timestamp(_pick(data, "last_logon", USER_FIELD_ALIASES), "last_logon"),
            password_last_set=parse_timestamp(
                _pick(data, "password_last_set", USER_FIELD_ALIASES), "password_last_set"
            ),
            enabled=_as_bool(_pick(data, "enabled", USER_FIELD_ALIASES), True),
            locked=_as_bool(_pick(data, "locked", USER_FIELD_ALIASES), False),
            account_expires=parse_timestamp(_pick(data, "account_expires", USER_FIELD_ALIASES), "account_expires"),
            member_of=_as_tuple(_pick(data, "member_of", USER_FIELD_ALIASES)),
            distinguished_name=_pick(data, "distinguished_name", USER_FIELD_ALIASES),
            attributes=extras,
        )

    def to_dict(self) -> dict[str, Any]:
        """내보내기 형식 딕셔너리로 변환 (from_dict의 역)"""

        def _ts(value: datetime | None) -> str | None:
            return value.isoformat() if value else None

        data: dict[str, Any] = {
            "identity": self.identity,
            "display_name": self.display_name,
            "email": self.email,
            "department": self.department,
            "title": self.title,
            "manager": self.manager,
            "created": _ts(self.created),
            "last_logon": _ts(self.last_logon),
            "password_last_set": _ts(self.password_last_set),
            "enabled": self.enabled,
            "locked": self.locked,
            "account_expires": _ts(self.account_expires),
            "member_of": list(self.member_of),
            "distinguished_name": self.distinguished_name,
        }
        if self.attributes:
            data["attributes"] = dict(self.attributes)
        return data


@dataclass(frozen=True)
class DirectoryGroupRecord:
    """그룹 스냅샷

    members는 사용자 identity 또는 중첩 그룹 이름을 포함할 수 있습니다.
    재귀 해석 여부는 호출 측에서 결정합니다.
    """

    name: str
    description: str | None = None
    scope: str = "Global"
    category: str = "Security"
    created: datetime | None = None
    modified: datetime | None = None
    members: tuple[str, ...] = ()
    distinguished_name: str | None = None

    @property
    def member_count(self) -> int:
        return len(self.members)

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> DirectoryGroupRecord:
        """내보내기 딕셔너리에서 생성"""
        name = _pick(data, "name", GROUP_FIELD_ALIASES)
        if not name:
            raise ValidationError("name", name, "non-empty group name")

        return cls(
            name=str(name),
            description=_pick(data, "description", GROUP_FIELD_ALIASES),
            scope=_pick(data, "scope", GROUP_FIELD_ALIASES, "Global") or "Global",
            category=_pick(data, "category", GROUP_FIELD_ALIASES, "Security") or "Security",
            created=parse_timestamp(_pick(data, "created", GROUP_FIELD_ALIASES), "created"),
            modified=parse_timestamp(_pick(data, "modified", GROUP_FIELD_ALIASES), "modified"),
            members=_as_tuple(_pick(data, "members", GROUP_FIELD_ALIASES)),
            distinguished_name=_pick(data, "distinguished_name", GROUP_FIELD_ALIASES),
        )

    def to_dict(self) -> dict[str, Any]:
        """내보내기 형식 딕셔너리로 변환"""
        return {
            "name": self.name,
            "description": self.description,
            "scope": self.scope,
            "category": self.category,
            "created": self.created.isoformat() if self.created else None,
            "modified": self.modified.isoformat() if self.modified else None,
            "members": list(self.members),
            "distinguished_name": self.distinguished_name,
        }
