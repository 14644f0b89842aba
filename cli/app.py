"""
cli/app.py - 메인 CLI 엔트리포인트

Click 기반의 CLI 애플리케이션 진입점입니다.

명령어 구조:
    ada --version                       # 버전 표시
    ada audit --snapshot <파일> ...      # 감사 실행 (users/groups/privileged/inactive/full)
    ada compliance --snapshot <파일> ... # 규정별 컴플라이언스 보고서 (GDPR/SOX/ISO27001/All)
    ada account <작업> ...               # 계정 수명주기 (create/update/enable/disable/delete)

오류 처리:
    설정(RuleSet) 오류, 스냅샷 조회 실패, 계정 작업 오류는
    사용자용 메시지를 출력하고 종료 코드 1로 끝냅니다.

Usage:
    $ ada audit --snapshot exports/contoso.json --type full --format html
    $ ada compliance --snapshot exports/contoso.json --standard GDPR --format excel
    $ ada account disable jdoe --snapshot exports/contoso.json --operator admin

    # 모듈로 실행
    $ python -m cli.app
"""

from __future__ import annotations

import logging
from pathlib import Path

import click
from click import Context

from core.audit import (
    AuditOptions,
    AuditRunner,
    AuditType,
    ComplianceStandard,
    load_rule_set,
)
from core.config import get_version, settings, setup_logging
from core.directory import (
    AccountManager,
    AuditTrail,
    InMemoryDirectory,
    SnapshotFileProvider,
    load_template,
    parse_timestamp,
)
from core.exceptions import ADAError, SnapshotFetchError, ValidationError, format_error_for_user
from shared.io.config import FORMAT_NAMES, OutputConfig
from shared.io.output import create_output_path
from shared.io.report import render_report

from .ui import (
    enable_verbose_logging,
    print_audit_run_summary,
    print_compliance_summary,
    print_error,
    print_info,
    print_saved_paths,
    print_standard_summary,
    print_success,
)

# WARNING 레벨로 설정하여 INFO 로그가 도구 출력에 섞이지 않도록 함
setup_logging()

logger = logging.getLogger(__name__)

VERSION = get_version()

AUDIT_TYPE_CHOICES = [audit_type.value for audit_type in AuditType]
STANDARD_CHOICES = [standard.value for standard in ComplianceStandard]
FORMAT_CHOICES = list(FORMAT_NAMES)


def _fail(error: Exception) -> None:
    """사용자용 에러 출력 후 종료 코드 1"""
    logger.debug("명령 실패", exc_info=error)
    print_error(format_error_for_user(error))
    raise SystemExit(1)


def _output_dir(output: str | None, snapshot: str, category: str, tool: str) -> str:
    if output:
        Path(output).mkdir(parents=True, exist_ok=True)
        return output
    return create_output_path(snapshot, category, tool)


@click.group()
@click.version_option(VERSION, prog_name="ada")
@click.option("-v", "--verbose", is_flag=True, help="상세 로그 출력 (DEBUG)")
@click.pass_context
def cli(ctx: Context, verbose: bool) -> None:
    """ADA - AD 계정 수명주기 및 컴플라이언스 감사 CLI"""
    ctx.ensure_object(dict)
    ctx.obj["verbose"] = verbose
    if verbose:
        enable_verbose_logging()


# =============================================================================
# 감사
# =============================================================================


@cli.command("audit")
@click.option("-s", "--snapshot", required=True, help="디렉터리 스냅샷 파일 (JSON/YAML)")
@click.option("--rules", "rules_path", default=None, help="RuleSet 파일 (기본: 내장 default.yaml)")
@click.option(
    "-t",
    "--type",
    "audit_type",
    type=click.Choice(AUDIT_TYPE_CHOICES, case_sensitive=False),
    default=AuditType.FULL.value,
    show_default=True,
    help="감사 유형",
)
@click.option(
    "--inactive-days",
    type=click.IntRange(min=0),
    default=settings.DEFAULT_INACTIVE_DAYS,
    show_default=True,
    help="비활성 계정 감사 임계값 (일)",
)
@click.option(
    "--include-disabled/--exclude-disabled",
    default=True,
    show_default=True,
    help="사용자 감사에 비활성화 계정 포함 여부",
)
@click.option("--include-never-logged-on", is_flag=True, help="로그온 기록 없는 계정도 비활성 감사에 포함")
@click.option("--search-base", default=None, help="조회 범위 DN (예: OU=Sales,DC=contoso,DC=com)")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="html",
    show_default=True,
)
@click.option("-o", "--output", default=None, help="출력 디렉토리")
@click.option("--open", "open_report", is_flag=True, help="저장 후 HTML 보고서를 브라우저로 열기")
def audit_command(
    snapshot: str,
    rules_path: str | None,
    audit_type: str,
    inactive_days: int,
    include_disabled: bool,
    include_never_logged_on: bool,
    search_base: str | None,
    output_format: str,
    output: str | None,
    open_report: bool,
) -> None:
    """디렉터리 스냅샷 감사

    \b
    Examples:
        ada audit -s contoso.json                     # 종합 감사 (HTML)
        ada audit -s contoso.json -t inactive --inactive-days 60
        ada audit -s contoso.json -t users --exclude-disabled -f csv
        ada audit -s contoso.json --open              # 저장 후 브라우저로 열기
    """
    selected = AuditType(audit_type.lower())
    options = AuditOptions(
        search_base=search_base,
        include_disabled=include_disabled,
        inactive_days=inactive_days,
        include_never_logged_on=include_never_logged_on,
    )

    try:
        rules = load_rule_set(rules_path)
        runner = AuditRunner(SnapshotFileProvider(snapshot), rules, options)
        if selected is AuditType.FULL:
            report = runner.run_full()
            print_compliance_summary(report)
        else:
            report = runner.run(selected)
            print_audit_run_summary(report)

        output_dir = _output_dir(output, snapshot, "audit", selected.value)
        paths = render_report(
            report,
            OutputConfig.from_string(output_format, auto_open=open_report),
            output_dir,
            f"{selected.value}_audit",
        )
    except (ADAError, OSError) as e:
        _fail(e)

    print_saved_paths(paths)


# =============================================================================
# 규정별 컴플라이언스
# =============================================================================


@cli.command("compliance")
@click.option("-s", "--snapshot", required=True, help="디렉터리 스냅샷 파일 (JSON/YAML)")
@click.option("--rules", "rules_path", default=None, help="RuleSet 파일 (기본: 내장 default.yaml)")
@click.option(
    "--standard",
    type=click.Choice(STANDARD_CHOICES, case_sensitive=False),
    default=ComplianceStandard.ALL.value,
    show_default=True,
    help="컴플라이언스 규정",
)
@click.option(
    "--inactive-days",
    type=click.IntRange(min=0),
    default=settings.DEFAULT_INACTIVE_DAYS,
    show_default=True,
    help="ISO27001 비활성 계정 임계값 (일)",
)
@click.option("--search-base", default=None, help="조회 범위 DN")
@click.option(
    "-f",
    "--format",
    "output_format",
    type=click.Choice(FORMAT_CHOICES, case_sensitive=False),
    default="html",
    show_default=True,
)
@click.option("-o", "--output", default=None, help="출력 디렉토리")
@click.option("--open", "open_report", is_flag=True, help="저장 후 HTML 보고서를 브라우저로 열기")
def compliance_command(
    snapshot: str,
    rules_path: str | None,
    standard: str,
    inactive_days: int,
    search_base: str | None,
    output_format: str,
    output: str | None,
    open_report: bool,
) -> None:
    """규정별 컴플라이언스 보고서

    \b
    Examples:
        ada compliance -s contoso.json --standard GDPR
        ada compliance -s contoso.json --standard All -f excel
    """
    selected = ComplianceStandard.parse(standard)
    options = AuditOptions(search_base=search_base, inactive_days=inactive_days)

    try:
        rules = load_rule_set(rules_path)
        report = AuditRunner(SnapshotFileProvider(snapshot), rules, options).run_standard(selected)
        print_standard_summary(report)

        tool = selected.value.lower()
        output_dir = _output_dir(output, snapshot, "compliance", tool)
        paths = render_report(
            report,
            OutputConfig.from_string(output_format, auto_open=open_report),
            output_dir,
            f"{tool}_compliance",
        )
    except (ADAError, OSError) as e:
        _fail(e)

    print_saved_paths(paths)


# =============================================================================
# 계정 수명주기
# =============================================================================


def _snapshot_option(func):
    return click.option("-s", "--snapshot", required=True, help="변경할 디렉터리 스냅샷 파일")(func)


def _trail_option(func):
    return click.option(
        "--trail",
        default=None,
        help=f"감사 기록 파일 (기본: 스냅샷 옆 {settings.AUDIT_TRAIL_FILE})",
    )(func)


def _operator_option(func):
    return click.option("--operator", default="system", show_default=True, help="작업자 이름")(func)


def _open_manager(snapshot: str, trail: str | None, operator: str) -> tuple[InMemoryDirectory, AccountManager]:
    """스냅샷을 불러와 AccountManager 생성"""
    try:
        directory = InMemoryDirectory.from_file(snapshot)
    except (OSError, ValueError) as e:
        raise SnapshotFetchError("account", "load_snapshot", f"스냅샷을 불러올 수 없습니다 ({snapshot})", cause=e) from e

    trail_path = Path(trail) if trail else Path(snapshot).parent / settings.AUDIT_TRAIL_FILE
    return directory, AccountManager(directory, AuditTrail(trail_path), operator=operator)


def _commit(directory: InMemoryDirectory, manager: AccountManager, snapshot: str) -> None:
    """변경 사항이 있으면 스냅샷 저장 후 감사 기록 flush"""
    if not manager.entries:
        print_info("변경 사항 없음")
        return
    directory.save(snapshot)
    for entry in manager.flush():
        print_success(f"{entry.action.value}: {entry.target}")


def _parse_changes(assignments: tuple[str, ...]) -> dict[str, object]:
    """key=value 목록을 update_account 변경 딕셔너리로 변환"""
    changes: dict[str, object] = {}
    for item in assignments:
        key, sep, value = item.partition("=")
        if not sep or not key.strip():
            raise ValidationError("--set", item, "field=value")
        key = key.strip()
        if key in ("manager", "account_expires") and not value:
            changes[key] = None
        elif key == "account_expires":
            changes[key] = parse_timestamp(value, key)
        else:
            changes[key] = value
    return changes


@cli.group("account")
def account_cmd():
    """계정 수명주기 관리

    \b
    스냅샷 파일을 오프라인 디렉터리로 사용해 계정을 변경하고,
    변경마다 감사 기록(JSON Lines)을 남깁니다.

    \b
    Examples:
        ada account create jdoe -s contoso.json --template staff.yaml
        ada account update jdoe -s contoso.json --set title=Manager
        ada account disable jdoe -s contoso.json --operator admin
    """
    pass


@account_cmd.command("create")
@click.argument("identity")
@_snapshot_option
@click.option("--template", "template_path", required=True, help="계정 템플릿 파일 (YAML/JSON)")
@click.option("--display-name", default="", help="표시 이름")
@click.option("--email", default="", help="이메일")
@click.option("--manager", default=None, help="관리자 identity")
@_trail_option
@_operator_option
def account_create(
    identity: str,
    snapshot: str,
    template_path: str,
    display_name: str,
    email: str,
    manager: str | None,
    trail: str | None,
    operator: str,
) -> None:
    """템플릿으로 계정 생성"""
    try:
        template = load_template(template_path)
        directory, account_manager = _open_manager(snapshot, trail, operator)
        account_manager.create_account(identity, template, display_name=display_name, email=email, manager=manager)
        _commit(directory, account_manager, snapshot)
    except (ADAError, OSError, ValueError) as e:
        _fail(e)


@account_cmd.command("update")
@click.argument("identity")
@_snapshot_option
@click.option("--set", "assignments", multiple=True, required=True, help="변경할 속성 (field=value, 다중 가능)")
@_trail_option
@_operator_option
def account_update(
    identity: str,
    snapshot: str,
    assignments: tuple[str, ...],
    trail: str | None,
    operator: str,
) -> None:
    """계정 속성 변경"""
    try:
        changes = _parse_changes(assignments)
        directory, account_manager = _open_manager(snapshot, trail, operator)
        account_manager.update_account(identity, changes)
        _commit(directory, account_manager, snapshot)
    except (ADAError, OSError) as e:
        _fail(e)


def _simple_account_command(name: str, help_text: str, method: str):
    @account_cmd.command(name, help=help_text)
    @click.argument("identity")
    @_snapshot_option
    @_trail_option
    @_operator_option
    def command(identity: str, snapshot: str, trail: str | None, operator: str) -> None:
        try:
            directory, account_manager = _open_manager(snapshot, trail, operator)
            getattr(account_manager, method)(identity)
            _commit(directory, account_manager, snapshot)
        except (ADAError, OSError) as e:
            _fail(e)

    return command


account_enable = _simple_account_command("enable", "계정 활성화", "enable_account")
account_disable = _simple_account_command("disable", "계정 비활성화", "disable_account")
account_delete = _simple_account_command("delete", "계정 삭제 (그룹 멤버십 포함)", "delete_account")


if __name__ == "__main__":
    cli()
