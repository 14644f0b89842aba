"""JSON 보고서 저장"""

from __future__ import annotations

import json
import logging
from pathlib import Path

from .document import ReportDocument

logger = logging.getLogger(__name__)


def save_json(document: ReportDocument, filepath: str | Path) -> Path:
    """보고서 원본 딕셔너리를 JSON으로 저장

    Args:
        document: 보고서 문서
        filepath: 저장 경로

    Returns:
        저장된 파일 경로
    """
    path = Path(filepath)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(document.data, f, ensure_ascii=False, indent=2, default=str)

    logger.info(f"JSON 리포트 저장: {path}")
    return path
