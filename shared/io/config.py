"""출력 설정 모듈

보고서 출력 형식 및 옵션 설정

Usage:
    from shared.io.config import OutputConfig, OutputFormat

    config = OutputConfig.from_string("html")

    if OutputFormat.EXCEL in config.formats:
        # Excel 출력
        pass
"""

from dataclasses import dataclass, field
from enum import Flag, auto


class OutputFormat(Flag):
    """출력 형식 플래그

    Flag 타입으로 여러 형식을 조합하여 사용 가능

    Usage:
        # 단일 형식
        fmt = OutputFormat.EXCEL

        # 복수 형식
        fmt = OutputFormat.EXCEL | OutputFormat.HTML

        # 형식 포함 여부 확인
        if OutputFormat.EXCEL in fmt:
            ...
    """

    NONE = 0
    EXCEL = auto()
    HTML = auto()
    JSON = auto()
    CSV = auto()
    ALL = EXCEL | HTML | JSON | CSV


# 형식별 파일 확장자
FORMAT_EXTENSIONS = {
    OutputFormat.EXCEL: ".xlsx",
    OutputFormat.HTML: ".html",
    OutputFormat.JSON: ".json",
    OutputFormat.CSV: ".csv",
}

# CLI 선택지 → 형식
FORMAT_NAMES = {
    "excel": OutputFormat.EXCEL,
    "html": OutputFormat.HTML,
    "json": OutputFormat.JSON,
    "csv": OutputFormat.CSV,
    "all": OutputFormat.ALL,
}


@dataclass
class OutputConfig:
    """출력 설정

    Attributes:
        formats: 출력 형식 플래그 (기본 HTML)
        auto_open: 저장 후 HTML 보고서를 브라우저로 열기
    """

    formats: OutputFormat = field(default=OutputFormat.HTML)
    auto_open: bool = False

    def selected(self) -> list[OutputFormat]:
        """선택된 단일 형식 목록 (고정 순서)"""
        return [fmt for fmt in FORMAT_EXTENSIONS if fmt in self.formats]

    @classmethod
    def from_string(cls, format_str: str, auto_open: bool = False) -> "OutputConfig":
        """문자열에서 OutputConfig 생성

        Args:
            format_str: 형식 문자열 ("html", "csv", "json", "excel", "all")
            auto_open: 저장 후 HTML 보고서 열기

        Returns:
            OutputConfig 인스턴스
        """
        formats = FORMAT_NAMES.get(format_str.lower(), OutputFormat.HTML)
        return cls(formats=formats, auto_open=auto_open)
