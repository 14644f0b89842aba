# cli/ui - 콘솔 출력 컴포넌트 (rich)
"""
콘솔 출력 모듈

CLI 전용 출력 헬퍼와 감사 결과 요약 표
"""

from .console import (
    RISK_STYLES,
    SYMBOL_ERROR,
    SYMBOL_INFO,
    SYMBOL_SUCCESS,
    SYMBOL_WARNING,
    console,
    enable_verbose_logging,
    get_console,
    get_logger,
    print_audit_run_summary,
    print_compliance_summary,
    print_error,
    print_header,
    print_info,
    print_risk_counts,
    print_saved_paths,
    print_standard_summary,
    print_success,
    print_table,
    print_warning,
)

__all__ = [
    "RISK_STYLES",
    "SYMBOL_ERROR",
    "SYMBOL_INFO",
    "SYMBOL_SUCCESS",
    "SYMBOL_WARNING",
    "console",
    "enable_verbose_logging",
    "get_console",
    "get_logger",
    "print_audit_run_summary",
    "print_compliance_summary",
    "print_error",
    "print_header",
    "print_info",
    "print_risk_counts",
    "print_saved_paths",
    "print_standard_summary",
    "print_success",
    "print_table",
    "print_warning",
]
