"""공유 유틸리티 - 감사 보고서 출력에서 공통 사용.

- io: 입출력 유틸리티 (Excel, HTML, CSV, JSON, 출력 경로)

의존성 구조:
    core (감사 엔진)
       ↑
    shared (공유 유틸리티)
       ↑
    cli
"""

from . import io

__all__ = ["io"]
