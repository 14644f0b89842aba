"""
tests/conftest.py - pytest 공통 픽스처

감사 규칙, 고정 기준 시각, 사용자/그룹 레코드 팩토리와 스냅샷 파일을 제공합니다.

Usage:
    def test_something(rules, now, make_user):
        user = make_user("jdoe", last_logon_days=10)
        result = evaluate_user(user, rules, now)
"""

import json
import os
import sys
from datetime import datetime, timedelta, timezone
from pathlib import Path

import pytest

# 프로젝트 루트를 sys.path에 추가
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

from core.audit.rules import rule_set_from_dict  # noqa: E402
from core.directory.models import DirectoryGroupRecord, DirectoryUserRecord  # noqa: E402

# 모든 테스트의 기준 시각
NOW = datetime(2024, 6, 1, 12, 0, tzinfo=timezone.utc)

SENSITIVE_GROUPS = ["Domain Admins", "Enterprise Admins", "Schema Admins"]


# =============================================================================
# 환경 설정
# =============================================================================


@pytest.fixture(autouse=True)
def setup_test_environment(monkeypatch):
    """테스트 환경 설정"""
    monkeypatch.delenv("ADA_LOG_LEVEL", raising=False)
    yield


# =============================================================================
# 규칙 / 시각
# =============================================================================


def rules_document(**overrides):
    """테스트용 RuleSet 문서 (camelCase 키)"""
    document = {
        "requiredUserAttributes": ["email", "department"],
        "maxPasswordAgeDays": 90,
        "maxInactiveDays": 90,
        "sensitiveGroupNames": list(SENSITIVE_GROUPS),
        "maxMembersInSensitiveGroup": 10,
        "dataRetentionDays": {"inactive_accounts": 365, "disabled_accounts": 180},
    }
    document.update(overrides)
    return document


@pytest.fixture
def make_rules_document():
    """RuleSet 문서 팩토리 (키 덮어쓰기 가능)"""
    return rules_document


@pytest.fixture
def rules():
    """기본 테스트 RuleSet"""
    return rule_set_from_dict(rules_document())


@pytest.fixture
def now():
    """고정 기준 시각"""
    return NOW


# =============================================================================
# 레코드 팩토리
# =============================================================================


def days_ago(days):
    return NOW - timedelta(days=days)


def build_user(
    identity,
    last_logon_days=10,
    password_days=10,
    created_days=400,
    email=None,
    department="IT",
    manager="boss",
    enabled=True,
    member_of=(),
    account_expires=None,
    distinguished_name=None,
    display_name=None,
    title="Engineer",
    locked=False,
):
    """규칙을 모두 만족하는 사용자 레코드 생성 (인자로 일부만 바꿈)"""
    return DirectoryUserRecord(
        identity=identity,
        display_name=display_name or identity.title(),
        email=f"{identity}@contoso.com" if email is None else email,
        department=department,
        title=title,
        manager=manager,
        created=days_ago(created_days) if created_days is not None else None,
        last_logon=days_ago(last_logon_days) if last_logon_days is not None else None,
        password_last_set=days_ago(password_days) if password_days is not None else None,
        enabled=enabled,
        account_expires=account_expires,
        member_of=tuple(member_of),
        distinguished_name=distinguished_name,
        locked=locked,
    )


def build_group(name, members=(), description="테스트 그룹", distinguished_name=None):
    return DirectoryGroupRecord(
        name=name,
        description=description,
        members=tuple(members),
        distinguished_name=distinguished_name,
    )


@pytest.fixture
def make_user():
    """사용자 레코드 팩토리"""
    return build_user


@pytest.fixture
def make_group():
    """그룹 레코드 팩토리"""
    return build_group


# =============================================================================
# 스냅샷 파일
# =============================================================================


def snapshot_document():
    """CLI/러너 테스트용 소형 디렉터리 내보내기"""
    return {
        "users": [
            {
                "SamAccountName": "alice",
                "DisplayName": "Alice Kim",
                "EmailAddress": "alice@contoso.com",
                "Department": "IT",
                "Title": "Engineer",
                "Manager": "boss",
                "Created": "2022-01-01T00:00:00Z",
                "LastLogonDate": "2024-05-25T09:00:00Z",
                "PasswordLastSet": "2024-05-01T00:00:00Z",
                "Enabled": True,
                "MemberOf": ["Staff"],
                "DistinguishedName": "CN=Alice Kim,OU=Staff,DC=contoso,DC=com",
            },
            {
                "SamAccountName": "bob",
                "DisplayName": "Bob Lee",
                "EmailAddress": "",
                "Department": "Finance",
                "Title": "Analyst",
                "Manager": "",
                "Created": "2020-01-01T00:00:00Z",
                "LastLogonDate": "2024-02-02T09:00:00Z",
                "PasswordLastSet": "2023-01-01T00:00:00Z",
                "Enabled": True,
                "MemberOf": ["CN=Domain Admins,CN=Users,DC=contoso,DC=com"],
                "DistinguishedName": "CN=Bob Lee,OU=Admins,DC=contoso,DC=com",
            },
        ],
        "groups": [
            {
                "Name": "Staff",
                "Description": "All staff",
                "Members": ["alice"],
                "DistinguishedName": "CN=Staff,OU=Groups,DC=contoso,DC=com",
            },
            {
                "Name": "Domain Admins",
                "Description": "Domain administrators",
                "Members": ["bob"],
                "DistinguishedName": "CN=Domain Admins,CN=Users,DC=contoso,DC=com",
            },
        ],
    }


@pytest.fixture
def snapshot_file(tmp_path):
    """JSON 스냅샷 파일 경로"""
    path = tmp_path / "contoso.json"
    path.write_text(json.dumps(snapshot_document()), encoding="utf-8")
    return path


@pytest.fixture
def rules_file(tmp_path):
    """YAML RuleSet 파일 경로"""
    import yaml

    path = tmp_path / "rules.yaml"
    path.write_text(yaml.safe_dump({"rules": rules_document()}), encoding="utf-8")
    return path


@pytest.fixture
def chdir_tmp(tmp_path):
    """작업 디렉토리를 tmp_path로 변경"""
    previous = os.getcwd()
    os.chdir(tmp_path)
    yield tmp_path
    os.chdir(previous)
