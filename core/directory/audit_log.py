"""
core/directory/audit_log.py - 계정 변경 감사 기록

계정 수명주기 작업(생성/수정/삭제/활성화/비활성화)마다 한 건의 감사 기록을
append-only JSON Lines 파일에 남깁니다.

Usage:
    trail = AuditTrail("output/audit_trail.jsonl")
    trail.record(AuditEntry.create(AuditAction.ACCOUNT_CREATED, "jdoe", "admin"))
    entries = trail.read()
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from pathlib import Path
from typing import Any

logger = logging.getLogger(__name__)


class AuditAction(Enum):
    """감사 대상 작업 (고정 집합)"""

    ACCOUNT_CREATED = "account_created"
    ACCOUNT_UPDATED = "account_updated"
    ACCOUNT_DELETED = "account_deleted"
    ACCOUNT_ENABLED = "account_enabled"
    ACCOUNT_DISABLED = "account_disabled"


@dataclass(frozen=True)
class AuditEntry:
    """감사 기록 1건

    Attributes:
        timestamp: 작업 시각 (UTC)
        action: 작업 종류
        target: 대상 계정 identity
        operator: 작업 수행자 identity
        details: 작업별 부가 정보 (해석하지 않음)
    """

    timestamp: datetime
    action: AuditAction
    target: str
    operator: str
    details: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def create(
        cls,
        action: AuditAction,
        target: str,
        operator: str,
        details: dict[str, Any] | None = None,
        now: datetime | None = None,
    ) -> AuditEntry:
        return cls(
            timestamp=now or datetime.now(timezone.utc),
            action=action,
            target=target,
            operator=operator,
            details=details or {},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "timestamp": self.timestamp.isoformat(),
            "action": self.action.value,
            "target": self.target,
            "operator": self.operator,
            "details": self.details,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AuditEntry:
        return cls(
            timestamp=datetime.fromisoformat(data["timestamp"]),
            action=AuditAction(data["action"]),
            target=data["target"],
            operator=data["operator"],
            details=data.get("details") or {},
        )


class AuditTrail:
    """append-only JSON Lines 감사 로그

    기존 기록은 수정/삭제하지 않고 항상 파일 끝에 추가합니다.
    """

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def record(self, entry: AuditEntry) -> AuditEntry:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        with self.path.open("a", encoding="utf-8") as f:
            f.write(json.dumps(entry.to_dict(), ensure_ascii=False, default=str) + "\n")
        logger.info("감사 기록: %s %s (by %s)", entry.action.value, entry.target, entry.operator)
        return entry

    def read(self) -> list[AuditEntry]:
        """기록된 감사 항목 전체 (파일이 없으면 빈 목록)"""
        if not self.path.exists():
            return []
        entries = []
        with self.path.open(encoding="utf-8") as f:
            for line in f:
                line = line.strip()
                if line:
                    entries.append(AuditEntry.from_dict(json.loads(line)))
        return entries
