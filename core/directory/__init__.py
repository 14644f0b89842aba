"""
core/directory - 디렉터리 스냅샷 및 계정 수명주기

스냅샷 모델, 조회 인터페이스, 감사 기록, 계정 관리 컴포넌트 제공
"""

from .audit_log import AuditAction, AuditEntry, AuditTrail
from .lifecycle import AccountManager, AccountTemplate, DirectoryWriter, load_template
from .models import DirectoryGroupRecord, DirectoryUserRecord, parse_timestamp
from .provider import DirectoryProvider, InMemoryDirectory, SnapshotFileProvider, load_document

__all__ = [
    # Models
    "DirectoryUserRecord",
    "DirectoryGroupRecord",
    "parse_timestamp",
    # Provider
    "DirectoryProvider",
    "SnapshotFileProvider",
    "InMemoryDirectory",
    "load_document",
    # Audit trail
    "AuditAction",
    "AuditEntry",
    "AuditTrail",
    # Lifecycle
    "AccountManager",
    "AccountTemplate",
    "DirectoryWriter",
    "load_template",
]
