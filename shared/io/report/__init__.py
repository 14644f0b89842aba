"""감사 보고서 렌더러

Usage:
    from shared.io.config import OutputConfig
    from shared.io.report import render_report

    paths = render_report(report, OutputConfig.from_string("html"), "output/contoso", "full_audit")
"""

from __future__ import annotations

import logging
from pathlib import Path

from shared.io.config import FORMAT_EXTENSIONS, OutputConfig, OutputFormat

from .csv_report import save_csv
from .document import (
    AUDIT_COLUMNS,
    RECORD_COLUMNS,
    Report,
    ReportDocument,
    ReportSection,
    build_document,
)
from .excel_report import save_excel
from .html_report import HTMLReport, open_in_browser
from .json_report import save_json

logger = logging.getLogger(__name__)

__all__: list[str] = [
    "AUDIT_COLUMNS",
    "RECORD_COLUMNS",
    "Report",
    "ReportDocument",
    "ReportSection",
    "build_document",
    "HTMLReport",
    "open_in_browser",
    "save_csv",
    "save_excel",
    "save_json",
    "render_report",
]


def render_report(
    report: Report,
    config: OutputConfig,
    output_dir: str | Path,
    basename: str,
    title: str | None = None,
) -> list[Path]:
    """선택된 형식으로 보고서 저장

    Args:
        report: AuditRun / ComplianceReport / StandardComplianceReport
        config: 출력 설정
        output_dir: 출력 디렉토리
        basename: 확장자를 제외한 파일명
        title: 보고서 제목 (None이면 결과 타입별 기본값)

    Returns:
        저장된 파일 경로 목록 (Excel, HTML, JSON, CSV 순)
    """
    document = build_document(report, title=title)
    base = Path(output_dir) / basename
    saved: list[Path] = []

    for fmt in config.selected():
        target = base.with_suffix(FORMAT_EXTENSIONS[fmt])
        if fmt == OutputFormat.EXCEL:
            saved.append(save_excel(document, target))
        elif fmt == OutputFormat.HTML:
            saved.append(HTMLReport(document).save(target, auto_open=config.auto_open))
        elif fmt == OutputFormat.JSON:
            saved.append(save_json(document, target))
        elif fmt == OutputFormat.CSV:
            saved.append(save_csv(document, target))

    logger.debug(f"보고서 {len(saved)}개 저장: {base}")
    return saved
