"""CSV 보고서 저장

모든 섹션을 단일 파일에 기록하며 첫 열(Section)로 구분합니다.
Excel에서 한글이 깨지지 않도록 utf-8-sig로 저장합니다.
"""

from __future__ import annotations

import csv
import logging
from pathlib import Path

from .document import ReportDocument

logger = logging.getLogger(__name__)


def save_csv(document: ReportDocument, filepath: str | Path) -> Path:
    """섹션별 표를 단일 CSV로 저장

    Args:
        document: 보고서 문서
        filepath: 저장 경로

    Returns:
        저장된 파일 경로
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8-sig", newline="") as f:
        writer = csv.writer(f)
        writer.writerow(["Section", *document.columns])
        for section in document.sections:
            for row in section.rows:
                writer.writerow([section.title, *row])

    logger.info(f"CSV 리포트 저장: {path}")
    return path
