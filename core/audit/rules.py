"""
core/audit/rules.py - 감사 규칙 (RuleSet)

임계값과 열거값으로 이루어진 불변 설정. 실행당 한 번 로드되어
모든 평가 호출에 값으로 전달됩니다 (전역 상태 없음).

설정 문서 키:
    requiredUserAttributes      비어 있으면 안 되는 사용자 속성 목록
    maxPasswordAgeDays          최대 비밀번호 사용 기간 (일)
    maxInactiveDays             최대 비활성 기간 (일)
    sensitiveGroupNames         민감 그룹 이름 (대소문자 구분, 정확히 일치)
    maxMembersInSensitiveGroup  민감 그룹 최대 멤버 수
    dataRetentionDays           범주별 보존 기간 (GDPR 검사 전용, 선택)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from types import MappingProxyType
from typing import Any, Mapping

from core.directory.provider import load_document
from core.exceptions import ConfigError

logger = logging.getLogger(__name__)

CONFIG_DIR = Path(__file__).parent / "config"
DEFAULT_RULES_FILE = CONFIG_DIR / "default.yaml"

REQUIRED_KEYS = (
    "requiredUserAttributes",
    "maxPasswordAgeDays",
    "maxInactiveDays",
    "sensitiveGroupNames",
    "maxMembersInSensitiveGroup",
)


@dataclass(frozen=True)
class RuleSet:
    """감사 규칙 (불변)"""

    required_user_attributes: tuple[str, ...]
    max_password_age_days: int
    max_inactive_days: int
    sensitive_group_names: frozenset[str]
    max_members_in_sensitive_group: int
    data_retention_days: Mapping[str, int] = field(default_factory=lambda: MappingProxyType({}))

    def is_sensitive(self, group_name: str) -> bool:
        return group_name in self.sensitive_group_names

    def to_dict(self) -> dict[str, Any]:
        return {
            "requiredUserAttributes": list(self.required_user_attributes),
            "maxPasswordAgeDays": self.max_password_age_days,
            "maxInactiveDays": self.max_inactive_days,
            "sensitiveGroupNames": sorted(self.sensitive_group_names),
            "maxMembersInSensitiveGroup": self.max_members_in_sensitive_group,
            "dataRetentionDays": dict(self.data_retention_days),
        }


def _threshold(key: str, value: Any) -> int:
    # bool은 int의 하위 타입이지만 임계값으로 허용하지 않음
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ConfigError(key, f"정수가 아닌 임계값: {value!r}")
    try:
        number = int(value)
    except ValueError as e:
        raise ConfigError(key, f"정수가 아닌 임계값: {value!r}", cause=e) from e
    if number < 0:
        raise ConfigError(key, f"음수 임계값: {number}")
    return number


def _string_list(key: str, value: Any) -> tuple[str, ...]:
    if value is None:
        return ()
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple, set, frozenset)):
        raise ConfigError(key, f"문자열 목록이 아닙니다: {value!r}")
    return tuple(str(item) for item in value)


def rule_set_from_dict(data: Mapping[str, Any]) -> RuleSet:
    """설정 딕셔너리에서 RuleSet 생성

    Raises:
        ConfigError: 필수 키 누락, 숫자가 아닌/음수 임계값
    """
    for key in REQUIRED_KEYS:
        if key not in data:
            raise ConfigError(key, "필수 설정 키가 없습니다")

    retention_raw = data.get("dataRetentionDays") or {}
    if not isinstance(retention_raw, Mapping):
        raise ConfigError("dataRetentionDays", f"범주별 매핑이 아닙니다: {retention_raw!r}")
    retention = {
        str(category): _threshold(f"dataRetentionDays.{category}", days) for category, days in retention_raw.items()
    }

    return RuleSet(
        required_user_attributes=_string_list("requiredUserAttributes", data["requiredUserAttributes"]),
        max_password_age_days=_threshold("maxPasswordAgeDays", data["maxPasswordAgeDays"]),
        max_inactive_days=_threshold("maxInactiveDays", data["maxInactiveDays"]),
        sensitive_group_names=frozenset(_string_list("sensitiveGroupNames", data["sensitiveGroupNames"])),
        max_members_in_sensitive_group=_threshold("maxMembersInSensitiveGroup", data["maxMembersInSensitiveGroup"]),
        data_retention_days=MappingProxyType(retention),
    )


def load_rule_set(path: str | Path | None = None) -> RuleSet:
    """RuleSet 문서(YAML/JSON) 로드

    path가 없으면 번들된 default.yaml을 사용합니다.
    문서에 "rules" 섹션이 있으면 해당 섹션을 사용합니다.

    Raises:
        ConfigError: 파일을 읽을 수 없거나 내용이 잘못된 경우
    """
    path = Path(path) if path else DEFAULT_RULES_FILE
    try:
        document = load_document(path)
    except (OSError, ValueError) as e:
        raise ConfigError(str(path), "규칙 문서를 읽을 수 없습니다", cause=e) from e

    rules = document.get("rules", document)
    if not isinstance(rules, Mapping):
        raise ConfigError("rules", "규칙 섹션이 매핑이 아닙니다")

    rule_set = rule_set_from_dict(rules)
    logger.debug("RuleSet 로드: %s", path)
    return rule_set
