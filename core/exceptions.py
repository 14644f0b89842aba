"""
core/exceptions.py - 통합 예외 계층 구조

애플리케이션 전체에서 사용되는 예외 클래스들을 정의합니다.
일관된 예외 처리와 에러 메시지를 제공합니다.

예외 계층 구조:
    ADAError (베이스)
    ├── ConfigError (설정/RuleSet 관련)
    ├── AuditError (감사 실행)
    │   └── SnapshotFetchError (디렉터리 스냅샷 조회 실패)
    ├── AccountError (계정 수명주기 작업)
    └── ValidationError (입력 검증)

Usage:
    from core.exceptions import SnapshotFetchError

    try:
        users = provider.get_users()
    except OSError as e:
        raise SnapshotFetchError(
            audit_type="users",
            stage="fetch_users",
            message="스냅샷 파일을 읽을 수 없습니다",
            cause=e,
        )
"""

from typing import Any, Dict, Optional

# =============================================================================
# 베이스 예외
# =============================================================================


class ADAError(Exception):
    """AD Automation 기본 예외 클래스

    모든 커스텀 예외의 베이스 클래스입니다.

    Attributes:
        message: 에러 메시지
        cause: 원인 예외 (체이닝용)
        details: 추가 상세 정보
    """

    def __init__(
        self,
        message: str,
        cause: Optional[Exception] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.cause = cause
        self.details = details or {}

    def __str__(self) -> str:
        if self.cause:
            return f"{self.message}: {self.cause}"
        return self.message

    def to_dict(self) -> Dict[str, Any]:
        """예외 정보를 딕셔너리로 반환"""
        return {
            "error_type": self.__class__.__name__,
            "message": self.message,
            "cause": str(self.cause) if self.cause else None,
            "details": self.details,
        }


# =============================================================================
# 설정 관련 예외
# =============================================================================


class ConfigError(ADAError):
    """설정 관련 예외

    RuleSet 필수 키 누락, 숫자가 아닌 임계값 등.
    엔티티 평가 전에 발생하며 재시도하지 않습니다.
    """

    def __init__(
        self,
        key: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"설정 오류 [{key}]: {message}"
        super().__init__(full_message, cause)
        self.config_key = key
        self.details["config_key"] = key


# =============================================================================
# 감사 실행 관련 예외
# =============================================================================


class AuditError(ADAError):
    """감사 실행 관련 예외"""

    def __init__(
        self,
        audit_type: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"감사 오류 [{audit_type}]: {message}"
        super().__init__(full_message, cause)
        self.audit_type = audit_type
        self.details["audit_type"] = audit_type


class SnapshotFetchError(AuditError):
    """디렉터리 스냅샷 조회 실패 예외

    디렉터리 접근 불가, 권한 거부, 손상된 내보내기 파일 등.
    실행 중인 감사 유형 전체를 실패시킵니다.
    """

    def __init__(
        self,
        audit_type: str,
        stage: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        super().__init__(audit_type=audit_type, message=f"{stage} 단계 실패 - {message}", cause=cause)
        self.stage = stage
        self.details["stage"] = stage


# =============================================================================
# 계정 수명주기 관련 예외
# =============================================================================


class AccountError(ADAError):
    """계정 생성/수정/삭제 작업 예외"""

    def __init__(
        self,
        identity: str,
        message: str,
        cause: Optional[Exception] = None,
    ):
        full_message = f"계정 오류 [{identity}]: {message}"
        super().__init__(full_message, cause)
        self.identity = identity
        self.details["identity"] = identity


class ValidationError(ADAError):
    """입력 검증 오류"""

    def __init__(
        self,
        field: str,
        value: Any,
        expected: str,
        cause: Optional[Exception] = None,
    ):
        message = f"검증 오류 [{field}]: 예상값 '{expected}', 실제값 '{value}'"
        super().__init__(message, cause)
        self.field = field
        self.value = value
        self.expected = expected
        self.details.update(
            {
                "field": field,
                "value": str(value),
                "expected": expected,
            }
        )


# =============================================================================
# 예외 유틸리티 함수
# =============================================================================


def format_error_for_user(error: Exception) -> str:
    """사용자에게 표시할 에러 메시지 포맷팅

    Args:
        error: 예외

    Returns:
        사용자 친화적인 에러 메시지
    """
    if isinstance(error, ADAError):
        # 커스텀 예외는 이미 포맷팅됨
        return str(error)

    friendly_messages = {
        PermissionError: "권한이 없습니다. 디렉터리 접근 권한을 확인하세요.",
        FileNotFoundError: "파일을 찾을 수 없습니다.",
        TimeoutError: "디렉터리 응답 시간이 초과되었습니다. 잠시 후 다시 시도하세요.",
    }
    for error_type, friendly in friendly_messages.items():
        if isinstance(error, error_type):
            return f"{friendly} ({error})"

    return str(error)
