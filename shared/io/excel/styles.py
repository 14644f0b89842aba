"""
shared/io/excel/styles.py - Excel 스타일 상수 및 유틸리티

감사 보고서 Excel 출력을 위한 색상, 정렬, 위험도별 채우기
"""

from __future__ import annotations

from typing import Any, Dict

from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

# =============================================================================
# 색상 상수 (RGB Hex)
# =============================================================================

# 헤더/구조 색상
COLOR_HEADER_BG = "4472C4"  # 헤더 배경 (파란색)
COLOR_HEADER_FG = "FFFFFF"  # 헤더 글자 (흰색)
COLOR_SUMMARY_BG = "FFF2CC"  # 요약 배경 (연한 노랑)

# 상태 색상
COLOR_SUCCESS = "C6EFCE"  # 준수 (연한 초록)
COLOR_WARNING = "FFEB9C"  # Medium (연한 노랑)
COLOR_DANGER = "FFC7CE"  # High (연한 빨강)
COLOR_CRITICAL = "FF8080"  # Critical (진한 빨강)

# 위험도 → 행 배경색 (Low는 채우지 않음)
RISK_COLORS = {
    "Medium": COLOR_WARNING,
    "High": COLOR_DANGER,
    "Critical": COLOR_CRITICAL,
}

# 숫자 포맷
NUMBER_FORMAT_INTEGER = "#,##0"
NUMBER_FORMAT_DECIMAL = "#,##0.00"

# 정렬
ALIGN_LEFT = Alignment(horizontal="left", vertical="center", wrap_text=False)
ALIGN_CENTER = Alignment(horizontal="center", vertical="center", wrap_text=False)
ALIGN_WRAP = Alignment(horizontal="left", vertical="center", wrap_text=True)
ALIGN_CENTER_WRAP = Alignment(horizontal="center", vertical="center", wrap_text=True)


def get_thin_border() -> Border:
    """얇은 테두리 스타일 반환"""
    thin_side = Side(style="thin", color="808080")
    return Border(
        left=thin_side,
        right=thin_side,
        top=thin_side,
        bottom=thin_side,
    )


def get_header_font() -> Font:
    """헤더 폰트 스타일 반환"""
    return Font(
        name="맑은 고딕",
        size=10,
        bold=True,
        color=COLOR_HEADER_FG,
    )


def get_data_font() -> Font:
    """데이터 폰트 스타일 반환"""
    return Font(name="맑은 고딕", size=10, bold=False)


def get_summary_font() -> Font:
    """요약 행 폰트 스타일 반환"""
    return Font(name="맑은 고딕", size=10, bold=True)


def _solid_fill(color: str) -> PatternFill:
    return PatternFill(start_color=color, end_color=color, fill_type="solid")


def get_header_fill() -> PatternFill:
    """헤더 채우기 스타일"""
    return _solid_fill(COLOR_HEADER_BG)


def get_summary_fill() -> PatternFill:
    """요약 행 채우기 스타일"""
    return _solid_fill(COLOR_SUMMARY_BG)


def get_risk_fill(risk_level: str) -> PatternFill | None:
    """위험도 문자열에 해당하는 행 채우기 (Low/알 수 없음은 None)"""
    color = RISK_COLORS.get(risk_level)
    return _solid_fill(color) if color else None


def get_score_fill(score: float) -> PatternFill:
    """점수 구간별 채우기 (90 이상 초록, 70 이상 노랑, 그 외 빨강)"""
    if score >= 90:
        return _solid_fill(COLOR_SUCCESS)
    if score >= 70:
        return _solid_fill(COLOR_WARNING)
    return _solid_fill(COLOR_DANGER)


def get_header_style() -> Dict[str, Any]:
    """헤더 스타일 dict 반환 (셀 적용용)"""
    return {
        "font": get_header_font(),
        "fill": get_header_fill(),
        "alignment": ALIGN_CENTER_WRAP,
        "border": get_thin_border(),
    }


def apply_style(cell: Any, style: Dict[str, Any]) -> None:
    """스타일 dict를 셀에 적용 (None 값은 건너뜀)"""
    for attr, value in style.items():
        if value is not None:
            setattr(cell, attr, value)
