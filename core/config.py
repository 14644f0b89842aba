"""
core/config.py - 중앙 설정 관리

애플리케이션 전역 상수, 환경 변수 헬퍼, 로깅 설정을 제공합니다.
감사 규칙(RuleSet)은 core.audit.rules에서 별도로 로드합니다.

Usage:
    from core.config import settings, get_version

    settings.GROUP_INACTIVE_MEMBER_DAYS  # 90
    get_version()                        # "1.0.0"
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

# =============================================================================
# 전역 설정
# =============================================================================


@dataclass(frozen=True)
class Settings:
    """애플리케이션 전역 설정 (불변)"""

    # 그룹 멤버 분류 기준 (고정 90일)
    GROUP_INACTIVE_MEMBER_DAYS: int = 90

    # 권한 계정 로그온 기준 (일반 비활성 기준과 별개, 고정 30일)
    PRIVILEGED_STALE_LOGON_DAYS: int = 30

    # 비활성 계정 감사 기본 임계값
    DEFAULT_INACTIVE_DAYS: int = 90

    # 출력
    OUTPUT_ROOT: str = "output"
    AUDIT_TRAIL_FILE: str = "audit_trail.jsonl"


settings = Settings()


# =============================================================================
# 프로젝트 경로
# =============================================================================


def get_project_root() -> Path:
    """프로젝트 루트 경로 반환"""
    return Path(__file__).resolve().parent.parent


def get_version() -> str:
    """버전 문자열 반환

    프로젝트 루트의 version.txt에서 읽어오며, 없으면 "0.0.0"
    """
    version_file = get_project_root() / "version.txt"
    try:
        return version_file.read_text(encoding="utf-8").strip() or "0.0.0"
    except OSError:
        return "0.0.0"


# =============================================================================
# 로깅 설정
# =============================================================================


@dataclass(frozen=True)
class LogConfig:
    """로깅 설정

    Attributes:
        level: 로그 레벨 이름 (WARNING 기본: INFO 로그가 도구 출력에 섞이지 않도록)
        format: 로그 포맷
        datefmt: 시간 포맷
    """

    level: str = "WARNING"
    format: str = "%(asctime)s - %(levelname)s - %(message)s"
    datefmt: str = "%Y-%m-%d %H:%M:%S"

    @classmethod
    def from_env(cls) -> LogConfig:
        """ADA_LOG_LEVEL 환경 변수에서 생성"""
        return cls(level=os.environ.get("ADA_LOG_LEVEL", "WARNING").upper())

    @property
    def numeric_level(self) -> int:
        return getattr(logging, self.level, logging.WARNING)


def setup_logging(config: LogConfig | None = None) -> None:
    """루트 로거 설정"""
    config = config or LogConfig.from_env()
    logging.basicConfig(
        level=config.numeric_level,
        format=config.format,
        datefmt=config.datefmt,
    )
