"""
tests/core/directory/test_audit_log.py - 계정 변경 감사 기록 테스트
"""

import json
from datetime import datetime, timezone

from core.directory.audit_log import AuditAction, AuditEntry, AuditTrail

NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)


class TestAuditEntry:
    """AuditEntry 테스트"""

    def test_create_defaults(self):
        entry = AuditEntry.create(AuditAction.ACCOUNT_CREATED, "jdoe", "admin", now=NOW)
        assert entry.timestamp == NOW
        assert entry.details == {}

    def test_to_dict(self):
        entry = AuditEntry.create(AuditAction.ACCOUNT_DISABLED, "jdoe", "admin", {"reason": "left"}, now=NOW)
        assert entry.to_dict() == {
            "timestamp": "2024-06-01T12:00:00+00:00",
            "action": "account_disabled",
            "target": "jdoe",
            "operator": "admin",
            "details": {"reason": "left"},
        }

    def test_from_dict(self):
        entry = AuditEntry.create(AuditAction.ACCOUNT_ENABLED, "jdoe", "admin", now=NOW)
        assert AuditEntry.from_dict(entry.to_dict()) == entry


class TestAuditTrail:
    """AuditTrail 테스트"""

    def test_read_missing_file(self, tmp_path):
        assert AuditTrail(tmp_path / "none.jsonl").read() == []

    def test_append_only(self, tmp_path):
        """기록은 파일 끝에 한 줄씩 추가"""
        path = tmp_path / "logs" / "trail.jsonl"
        trail = AuditTrail(path)
        trail.record(AuditEntry.create(AuditAction.ACCOUNT_CREATED, "a", "admin", now=NOW))
        trail.record(AuditEntry.create(AuditAction.ACCOUNT_DELETED, "a", "admin", now=NOW))

        lines = path.read_text(encoding="utf-8").splitlines()
        assert len(lines) == 2
        assert json.loads(lines[0])["action"] == "account_created"

        second = AuditTrail(path)
        second.record(AuditEntry.create(AuditAction.ACCOUNT_UPDATED, "b", "ops", now=NOW))
        actions = [e.action for e in AuditTrail(path).read()]
        assert actions == [AuditAction.ACCOUNT_CREATED, AuditAction.ACCOUNT_DELETED, AuditAction.ACCOUNT_UPDATED]
