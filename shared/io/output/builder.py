"""출력 경로 빌더

identifier/서비스/도구/날짜 패턴의 출력 디렉토리 경로를 만듭니다.

Usage:
    from shared.io.output import OutputPath

    path = OutputPath("contoso").sub("audit", "full").with_date().build()
    # output/contoso/audit/full/2024-06-01
"""

from __future__ import annotations

import re
from datetime import datetime
from pathlib import Path

from core.config import settings

_UNSAFE_CHARS = re.compile(r"[^\w.\-]+")


def safe_name(value: str) -> str:
    """경로 구성 요소로 쓸 수 있도록 정리"""
    cleaned = _UNSAFE_CHARS.sub("_", value.strip())
    return cleaned.strip("_") or "default"


class OutputPath:
    """출력 경로 빌더 (메서드 체이닝)"""

    def __init__(self, identifier: str, root: str | Path | None = None):
        self._root = Path(root) if root else Path(settings.OUTPUT_ROOT)
        self._parts: list[str] = [safe_name(identifier)]

    def sub(self, *parts: str) -> OutputPath:
        """하위 경로 추가"""
        self._parts.extend(safe_name(part) for part in parts if part)
        return self

    def with_date(self, when: datetime | None = None, pattern: str = "%Y-%m-%d") -> OutputPath:
        """날짜 디렉토리 추가"""
        self._parts.append((when or datetime.now()).strftime(pattern))
        return self

    def build(self) -> str:
        """디렉토리 생성 후 경로 문자열 반환"""
        path = self._root.joinpath(*self._parts)
        path.mkdir(parents=True, exist_ok=True)
        return str(path)
