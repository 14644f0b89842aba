"""입출력 유틸리티.

하위 모듈:
- excel: Excel 스타일 (openpyxl 기반)
- report: 감사 보고서 렌더러 (HTML/CSV/JSON/Excel)
- output: 출력 경로 관리 및 빌더
- config: 출력 설정 (OutputConfig, OutputFormat)
"""

from . import excel, output, report
from .config import OutputConfig, OutputFormat

__all__: list[str] = [
    # 하위 모듈
    "excel",
    "output",
    "report",
    # 설정
    "OutputConfig",
    "OutputFormat",
]
