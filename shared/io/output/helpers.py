"""출력 경로 헬퍼 함수

스냅샷 파일에서 식별자를 추출하고 출력 경로를 생성하는 공통 헬퍼.

Usage:
    from shared.io.output import snapshot_identifier, create_output_path

    identifier = snapshot_identifier("exports/contoso.json")  # "contoso"
    output_path = create_output_path("exports/contoso.json", "audit", "users")
"""

from __future__ import annotations

from pathlib import Path

from .builder import OutputPath


def snapshot_identifier(snapshot: str | Path | None) -> str:
    """스냅샷 경로에서 식별자(파일명) 추출

    Args:
        snapshot: 스냅샷 파일 경로

    Returns:
        확장자를 뺀 파일명, 없으면 "default"
    """
    if not snapshot:
        return "default"
    return Path(snapshot).stem or "default"


def create_output_path(snapshot: str | Path | None, category: str, tool: str, root: str | Path | None = None) -> str:
    """스냅샷 기반 출력 경로 자동 생성

    identifier + category + tool + date 패턴의 출력 경로를 생성합니다.

    Args:
        snapshot: 스냅샷 파일 경로
        category: 분류 (예: "audit", "compliance")
        tool: 도구명 (예: "users", "gdpr")
        root: 출력 루트 (None이면 settings.OUTPUT_ROOT)

    Returns:
        출력 디렉토리 경로 문자열
    """
    identifier = snapshot_identifier(snapshot)
    return OutputPath(identifier, root=root).sub(category, tool).with_date().build()
