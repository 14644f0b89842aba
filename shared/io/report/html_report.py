"""HTML 보고서 생성기

감사 결과를 외부 리소스 없는 단일 HTML 파일로 생성
요약 카드 → 권장 조치 → 섹션별 표
"""

from __future__ import annotations

import html
import logging
import os
import subprocess
import sys
import webbrowser
from pathlib import Path
from typing import Any

from .document import ReportDocument

logger = logging.getLogger(__name__)

# 위험도 → 행 CSS 클래스
RISK_CLASSES = {
    "Low": "risk-low",
    "Medium": "risk-medium",
    "High": "risk-high",
    "Critical": "risk-critical",
}


def open_in_browser(filepath: str) -> bool:
    """브라우저에서 HTML 파일 열기"""
    try:
        if sys.platform == "win32":
            os.startfile(filepath)  # noqa: S606
        elif sys.platform == "darwin":
            subprocess.run(["open", filepath], check=True)  # noqa: S603, S607
        else:
            subprocess.run(["xdg-open", filepath], check=True)  # noqa: S603, S607
        return True
    except (OSError, subprocess.CalledProcessError) as e:
        logger.warning(f"브라우저 열기 실패: {e}")
        return webbrowser.open(f"file://{Path(filepath).resolve()}")


def _cell(value: Any) -> str:
    if isinstance(value, float):
        return f"{value:.2f}"
    return html.escape(str(value))


class HTMLReport:
    """ReportDocument → HTML"""

    def __init__(self, document: ReportDocument):
        self.document = document

    def save(self, filepath: str | Path, auto_open: bool = False) -> Path:
        """HTML 파일 저장 (선택적으로 브라우저 열기)"""
        path = Path(filepath)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding="utf-8")

        logger.info(f"HTML 리포트 저장: {path}")

        if auto_open:
            open_in_browser(str(path))

        return path

    def render(self) -> str:
        doc = self.document
        title = html.escape(doc.title)
        generated = (
            f"<p>생성 시각: {doc.generated_at.strftime('%Y-%m-%d %H:%M:%S')}</p>" if doc.generated_at else ""
        )

        return f"""<!DOCTYPE html>
<html lang="ko">
<head>
    <meta charset="UTF-8">
    <meta name="viewport" content="width=device-width, initial-scale=1.0">
    <title>{title}</title>
    <style>
        * {{ margin: 0; padding: 0; box-sizing: border-box; }}
        body {{
            font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', 'Malgun Gothic', sans-serif;
            background: #f0f2f5;
            color: #333;
            line-height: 1.6;
        }}
        .container {{ max-width: 1600px; margin: 0 auto; padding: 24px; }}
        header {{
            background: linear-gradient(135deg, #5470c6 0%, #91cc75 100%);
            color: white;
            padding: 32px 40px;
            margin-bottom: 24px;
            border-radius: 16px;
        }}
        header h1 {{ font-size: 28px; font-weight: 600; margin-bottom: 8px; }}
        header p {{ opacity: 0.9; font-size: 14px; }}
        .summary-cards {{ display: flex; flex-wrap: wrap; gap: 16px; margin-bottom: 24px; }}
        .summary-card {{
            background: white;
            border-radius: 12px;
            padding: 16px 20px;
            min-width: 180px;
            box-shadow: 0 2px 8px rgba(0, 0, 0, 0.06);
        }}
        .summary-card .label {{ font-size: 13px; color: #666; }}
        .summary-card .value {{ font-size: 24px; font-weight: 600; }}
        .recommendations {{ background: white; border-radius: 12px; padding: 16px 24px; margin-bottom: 24px; }}
        .recommendations li {{ margin-left: 20px; }}
        .table-section {{ background: white; border-radius: 12px; padding: 20px; margin-bottom: 24px; }}
        .table-section h3 {{ margin-bottom: 12px; }}
        table {{ width: 100%; border-collapse: collapse; font-size: 13px; }}
        th {{ background: #4472c4; color: white; padding: 8px; text-align: left; }}
        td {{ padding: 6px 8px; border-bottom: 1px solid #eee; vertical-align: top; }}
        tr.risk-medium td {{ background: #fffae6; }}
        tr.risk-high td {{ background: #fff1f0; }}
        tr.risk-critical td {{ background: #ffccc7; }}
        .empty {{ color: #888; font-style: italic; }}
    </style>
</head>
<body>
<div class="container">
    <header>
        <h1>{title}</h1>
        {generated}
    </header>
    {self._summary_html()}
    {self._recommendations_html()}
    {self._tables_html()}
</div>
</body>
</html>"""

    def _summary_html(self) -> str:
        if not self.document.summary:
            return ""

        cards = [
            f'<div class="summary-card"><div class="label">{html.escape(label)}</div>'
            f'<div class="value">{_cell(value)}</div></div>'
            for label, value in self.document.summary
        ]
        return f'<div class="summary-cards">{"".join(cards)}</div>'

    def _recommendations_html(self) -> str:
        if not self.document.recommendations:
            return ""

        items = "".join(f"<li>{html.escape(r)}</li>" for r in self.document.recommendations)
        return f'<div class="recommendations"><h3>권장 조치</h3><ul>{items}</ul></div>'

    def _tables_html(self) -> str:
        columns = self.document.columns
        risk_index = columns.index("Risk Level") if "Risk Level" in columns else None
        headers = "".join(f"<th>{html.escape(c)}</th>" for c in columns)

        tables = []
        for section in self.document.sections:
            rows = []
            for row in section.rows:
                css = RISK_CLASSES.get(str(row[risk_index]), "") if risk_index is not None else ""
                cells = "".join(f"<td>{_cell(c)}</td>" for c in row)
                rows.append(f'<tr class="{css}">{cells}</tr>')

            body = "".join(rows) or f'<tr><td class="empty" colspan="{len(columns)}">위반 항목 없음</td></tr>'
            tables.append(
                f'<div class="table-section">'
                f"<h3>{html.escape(section.title)} ({len(section.rows)})</h3>"
                f"<table><thead><tr>{headers}</tr></thead><tbody>{body}</tbody></table>"
                f"</div>"
            )

        return "".join(tables)
