# shared/io/excel - Excel 출력 양식 (공통 스타일)
"""
Excel 스타일 유틸리티.

Note:
    이 모듈은 Lazy Import 패턴을 사용합니다.
    openpyxl 등 무거운 의존성을 실제 사용 시점에만 로드합니다.
"""

__all__ = [
    "COLOR_HEADER_BG",
    "COLOR_HEADER_FG",
    "COLOR_SUMMARY_BG",
    "COLOR_SUCCESS",
    "COLOR_WARNING",
    "COLOR_DANGER",
    "COLOR_CRITICAL",
    "RISK_COLORS",
    "NUMBER_FORMAT_INTEGER",
    "NUMBER_FORMAT_DECIMAL",
    "ALIGN_LEFT",
    "ALIGN_CENTER",
    "ALIGN_WRAP",
    "ALIGN_CENTER_WRAP",
    "get_thin_border",
    "get_header_font",
    "get_data_font",
    "get_summary_font",
    "get_header_fill",
    "get_summary_fill",
    "get_risk_fill",
    "get_score_fill",
    "get_header_style",
    "apply_style",
]


def __getattr__(name: str):
    """Lazy import - 실제 사용 시점에만 모듈 로드"""
    if name in __all__:
        from . import styles

        return getattr(styles, name)

    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")
