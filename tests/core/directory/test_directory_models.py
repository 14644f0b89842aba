"""
tests/core/directory/test_directory_models.py - 디렉터리 스냅샷 모델 테스트
"""

from datetime import datetime, timedelta, timezone

import pytest

from core.directory.models import DirectoryGroupRecord, DirectoryUserRecord, parse_timestamp
from core.exceptions import ValidationError

# =============================================================================
# parse_timestamp
# =============================================================================


class TestParseTimestamp:
    """parse_timestamp 테스트"""

    def test_zulu_suffix(self):
        """Z 접미사는 UTC"""
        parsed = parse_timestamp("2024-05-01T10:00:00Z")
        assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_naive_is_utc(self):
        """오프셋 없는 값은 UTC로 간주"""
        parsed = parse_timestamp("2024-05-01T10:00:00")
        assert parsed.tzinfo == timezone.utc

    def test_offset_is_normalized(self):
        """다른 오프셋은 UTC로 변환"""
        parsed = parse_timestamp("2024-05-01T19:00:00+09:00")
        assert parsed == datetime(2024, 5, 1, 10, 0, tzinfo=timezone.utc)

    def test_datetime_passthrough(self):
        value = datetime(2024, 1, 1, tzinfo=timezone(timedelta(hours=9)))
        assert parse_timestamp(value) == value

    @pytest.mark.parametrize("value", [None, ""])
    def test_absent(self, value):
        """부재는 None"""
        assert parse_timestamp(value) is None

    @pytest.mark.parametrize("value", ["yesterday", 12345])
    def test_invalid(self, value):
        """해석 불가 값은 ValidationError"""
        with pytest.raises(ValidationError) as exc_info:
            parse_timestamp(value, "last_logon")
        assert exc_info.value.field == "last_logon"


# =============================================================================
# DirectoryUserRecord
# =============================================================================


class TestDirectoryUserRecord:
    """DirectoryUserRecord 테스트"""

    def test_from_ad_export(self):
        """AD 속성명 내보내기 해석"""
        user = DirectoryUserRecord.from_dict(
            {
                "SamAccountName": "jdoe",
                "DisplayName": "John Doe",
                "EmailAddress": "jdoe@contoso.com",
                "Department": "Sales",
                "LastLogonDate": "2024-05-01T00:00:00Z",
                "Enabled": "False",
                "MemberOf": "Staff",
                "DistinguishedName": "CN=John Doe,OU=Sales,DC=contoso,DC=com",
                "employeeID": "E-100",
            }
        )

        assert user.identity == "jdoe"
        assert user.display_name == "John Doe"
        assert user.email == "jdoe@contoso.com"
        assert user.enabled is False
        assert user.member_of == ("Staff",)
        assert user.last_logon == datetime(2024, 5, 1, tzinfo=timezone.utc)
        assert user.manager is None
        assert user.attributes == {"employeeID": "E-100"}

    def test_from_snake_case(self):
        """snake_case 키 해석"""
        user = DirectoryUserRecord.from_dict({"identity": "amy", "member_of": ["A", "B"], "locked": True})
        assert user.identity == "amy"
        assert user.member_of == ("A", "B")
        assert user.locked is True
        assert user.enabled is True

    def test_missing_identity(self):
        """identity 없으면 ValidationError"""
        with pytest.raises(ValidationError):
            DirectoryUserRecord.from_dict({"DisplayName": "No Name"})

    def test_get_attribute(self):
        """필드명, AD 속성명, 추가 속성 순으로 조회"""
        user = DirectoryUserRecord(identity="jdoe", email="j@c.com", attributes={"employeeID": "E-1"})
        assert user.get_attribute("email") == "j@c.com"
        assert user.get_attribute("EmailAddress") == "j@c.com"
        assert user.get_attribute("employeeID") == "E-1"
        assert user.get_attribute("unknownAttribute") is None

    def test_round_trip_dict(self):
        """to_dict 결과로 같은 레코드 복원"""
        user = DirectoryUserRecord(
            identity="jdoe",
            display_name="John",
            created=datetime(2023, 1, 1, tzinfo=timezone.utc),
            member_of=("Staff",),
            attributes={"employeeID": "E-1"},
        )
        assert DirectoryUserRecord.from_dict(user.to_dict()) == user

    def test_frozen(self):
        """레코드는 불변"""
        user = DirectoryUserRecord(identity="jdoe")
        with pytest.raises(Exception):
            user.enabled = False


# =============================================================================
# DirectoryGroupRecord
# =============================================================================


class TestDirectoryGroupRecord:
    """DirectoryGroupRecord 테스트"""

    def test_from_ad_export(self):
        group = DirectoryGroupRecord.from_dict(
            {
                "Name": "Domain Admins",
                "GroupScope": "Global",
                "GroupCategory": "Security",
                "Members": ["alice", "bob"],
            }
        )
        assert group.name == "Domain Admins"
        assert group.member_count == 2
        assert group.description is None

    def test_defaults(self):
        group = DirectoryGroupRecord.from_dict({"name": "Empty"})
        assert group.scope == "Global"
        assert group.category == "Security"
        assert group.member_count == 0

    def test_missing_name(self):
        with pytest.raises(ValidationError):
            DirectoryGroupRecord.from_dict({"Members": []})
