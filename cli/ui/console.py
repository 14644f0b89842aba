"""
cli/ui/console.py - Rich 콘솔 유틸리티

일관된 콘솔 출력과 감사 결과 요약 표를 위한 함수들
"""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape
from rich.table import Table

from core.audit.types import AuditRun, ComplianceReport, RiskLevel, StandardComplianceReport


def get_console() -> Console:
    """Rich Console 인스턴스를 생성하고 반환합니다."""
    return Console(
        color_system="auto",
        highlight=False,
        soft_wrap=True,
        markup=True,
    )


# 전역 콘솔 인스턴스
console = get_console()


def get_logger(name: str = "rich", level: int = logging.INFO) -> logging.Logger:
    """Rich 핸들러가 설정된 logger를 반환합니다.

    Args:
        name: logger 이름 (기본값: "rich")
        level: 로그 레벨

    Returns:
        logging.Logger: 설정된 logger 인스턴스
    """
    logger = logging.getLogger(name)
    logger.setLevel(level)

    # 이미 핸들러가 설정되어 있으면 반환
    if any(isinstance(h, RichHandler) for h in logger.handlers):
        return logger

    handler = RichHandler(console=console, rich_tracebacks=True, show_path=False)
    handler.setFormatter(logging.Formatter("%(message)s", datefmt="[%X]"))
    logger.addHandler(handler)
    # basicConfig 루트 핸들러와 중복 출력 방지
    logger.propagate = False

    return logger


def enable_verbose_logging(packages: Iterable[str] = ("core", "shared", "cli")) -> None:
    """패키지 로거를 DEBUG + RichHandler로 전환"""
    for name in packages:
        get_logger(name, logging.DEBUG)


# =============================================================================
# 표준 출력 스타일
# =============================================================================

# 상태 심볼
SYMBOL_SUCCESS = "✓"  # 완료
SYMBOL_ERROR = "✗"  # 에러
SYMBOL_WARNING = "!"  # 경고
SYMBOL_INFO = "•"  # 정보

# 위험도 → Rich 스타일
RISK_STYLES = {
    RiskLevel.LOW: "green",
    RiskLevel.MEDIUM: "yellow",
    RiskLevel.HIGH: "red",
    RiskLevel.CRITICAL: "bold red",
}


def print_success(message: str) -> None:
    """성공 메시지 출력 (초록색 체크마크)"""
    console.print(f"[green]{SYMBOL_SUCCESS} {escape(message)}[/green]")


def print_error(message: str) -> None:
    """에러 메시지 출력 (빨간색 X)"""
    console.print(f"[red]{SYMBOL_ERROR} {escape(message)}[/red]")


def print_warning(message: str) -> None:
    """경고 메시지 출력 (노란색 경고)"""
    console.print(f"[yellow]{SYMBOL_WARNING} {escape(message)}[/yellow]")


def print_info(message: str) -> None:
    """정보 메시지 출력 (파란색 정보)"""
    console.print(f"[blue]{SYMBOL_INFO} {escape(message)}[/blue]")


def print_header(title: str) -> None:
    """섹션 헤더 출력"""
    console.print()
    console.print(f"[bold underline cyan]{title}[/bold underline cyan]")
    console.print()


def print_table(title: str, columns: list[str], rows: list[list]) -> None:
    """테이블 형식으로 데이터를 출력합니다.

    Args:
        title: 테이블 제목
        columns: 컬럼 헤더 리스트
        rows: 행 데이터 리스트
    """
    table = Table(title=title, show_header=True, header_style="bold magenta")

    for column in columns:
        table.add_column(column)

    for row in rows:
        table.add_row(*[str(cell) for cell in row])

    console.print(table)


# =============================================================================
# 감사 결과 요약
# =============================================================================


def _risk_text(level: RiskLevel) -> str:
    style = RISK_STYLES[level]
    return f"[{style}]{level.value}[/{style}]"


def print_risk_counts(title: str, counts: dict[RiskLevel, int]) -> None:
    """위험도별 건수 표"""
    table = Table(title=title, show_header=True, header_style="bold magenta")
    table.add_column("Risk Level")
    table.add_column("Count", justify="right")
    for level, count in counts.items():
        table.add_row(_risk_text(level), str(count))
    console.print(table)


def print_audit_run_summary(run: AuditRun) -> None:
    """단일 감사 결과 요약"""
    print_header(f"{run.audit_type.value} audit")
    console.print(f"Evaluated: {run.total}  With violations: {run.violation_count}")
    print_risk_counts("Risk distribution", run.count_by_risk())


def print_compliance_summary(report: ComplianceReport) -> None:
    """종합 컴플라이언스 보고서 요약"""
    summary = report.summary
    print_header("Compliance summary")
    print_table(
        "Scores",
        ["Metric", "Value"],
        [
            ["Overall Compliance Score", f"{summary.overall_compliance_score:.2f}"],
            ["User Compliance Rate", f"{summary.user_compliance_rate:.2f}"],
            ["Group Compliance Rate", f"{summary.group_compliance_rate:.2f}"],
            ["Inactive Users", summary.inactive_users],
            ["Critical-risk Users", summary.critical_risk_users],
            ["Privileged Users with Issues", summary.privileged_users_with_issues],
        ],
    )
    for text in report.recommendations:
        print_warning(text)


def print_standard_summary(report: StandardComplianceReport) -> None:
    """규정별 보고서 요약"""
    print_header(f"{report.standard} compliance")
    rows = [[name, score] for name, score in report.scores.items()]
    rows.append(["Weighted Score", report.weighted_score])
    print_table("Scores", ["Standard", "Score"], rows)
    print_risk_counts("Violation records", report.counts)


def print_saved_paths(paths: Iterable[Path]) -> None:
    """저장된 보고서 경로 출력"""
    for path in paths:
        print_success(f"저장됨: {path}")
