"""Excel 보고서 저장

Summary 시트 + 섹션별 시트로 구성된 워크북을 생성합니다.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from openpyxl import Workbook
from openpyxl.utils import get_column_letter

from shared.io.excel.styles import (
    ALIGN_LEFT,
    ALIGN_WRAP,
    NUMBER_FORMAT_DECIMAL,
    apply_style,
    get_data_font,
    get_header_style,
    get_risk_fill,
    get_score_fill,
    get_summary_fill,
    get_summary_font,
    get_thin_border,
)

from .document import ReportDocument

logger = logging.getLogger(__name__)

MAX_COLUMN_WIDTH = 60
MIN_COLUMN_WIDTH = 10
# Excel 시트명 최대 길이
MAX_SHEET_TITLE = 31


def _fit_columns(ws: Any) -> None:
    """열 너비를 내용 길이에 맞춤"""
    for idx, column in enumerate(ws.iter_cols(values_only=True), start=1):
        longest = max((len(str(v)) for v in column if v is not None), default=0)
        width = min(max(longest + 2, MIN_COLUMN_WIDTH), MAX_COLUMN_WIDTH)
        ws.column_dimensions[get_column_letter(idx)].width = width


def _write_summary(wb: Workbook, document: ReportDocument) -> None:
    ws = wb.active
    ws.title = "Summary"

    ws.cell(row=1, column=1, value=document.title).font = get_summary_font()
    if document.generated_at:
        ws.cell(row=2, column=1, value=document.generated_at.strftime("%Y-%m-%d %H:%M:%S"))

    row = 4
    for label, value in document.summary:
        label_cell = ws.cell(row=row, column=1, value=label)
        label_cell.font = get_summary_font()
        label_cell.fill = get_summary_fill()
        label_cell.border = get_thin_border()

        value_cell = ws.cell(row=row, column=2, value=value)
        value_cell.border = get_thin_border()
        if isinstance(value, float):
            value_cell.number_format = NUMBER_FORMAT_DECIMAL
            if "Score" in label or "Rate" in label:
                value_cell.fill = get_score_fill(value)
        row += 1

    if document.recommendations:
        row += 1
        ws.cell(row=row, column=1, value="Recommendations").font = get_summary_font()
        for text in document.recommendations:
            row += 1
            ws.cell(row=row, column=1, value=text).alignment = ALIGN_WRAP

    _fit_columns(ws)


def _write_section(wb: Workbook, document: ReportDocument, title: str, rows: list[list[Any]]) -> None:
    ws = wb.create_sheet(title=title[:MAX_SHEET_TITLE])
    columns = document.columns
    risk_index = columns.index("Risk Level") if "Risk Level" in columns else None

    header_style = get_header_style()
    for col, name in enumerate(columns, start=1):
        apply_style(ws.cell(row=1, column=col, value=name), header_style)

    for r, values in enumerate(rows, start=2):
        fill = get_risk_fill(str(values[risk_index])) if risk_index is not None else None
        for c, value in enumerate(values, start=1):
            cell = ws.cell(row=r, column=c, value=value)
            apply_style(
                cell,
                {"font": get_data_font(), "border": get_thin_border(), "alignment": ALIGN_LEFT, "fill": fill},
            )

    ws.freeze_panes = "A2"
    if rows:
        ws.auto_filter.ref = ws.dimensions
    _fit_columns(ws)


def save_excel(document: ReportDocument, filepath: str | Path) -> Path:
    """보고서를 xlsx로 저장

    Args:
        document: 보고서 문서
        filepath: 저장 경로

    Returns:
        저장된 파일 경로
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)

    wb = Workbook()
    _write_summary(wb, document)
    for section in document.sections:
        _write_section(wb, document, section.title, section.rows)

    wb.save(path)
    logger.info(f"Excel 리포트 저장: {path}")
    return path
