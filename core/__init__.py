# core/__init__.py
"""
core - AD 계정 감사 엔진

CLI와 보고서 출력에서 공통으로 사용하는 최상위 패키지입니다.
디렉터리 스냅샷, 계정 수명주기, 정책 평가를 통합합니다.

아키텍처:
    core/
    ├── directory/      # 스냅샷 모델, 조회 인터페이스, 계정 수명주기, 감사 기록
    ├── audit/          # 평가기, 집계기, 점수 합성기, 규정별 보고서, 실행기
    ├── config.py       # 중앙 설정 관리
    └── exceptions.py   # 통합 예외 계층

Usage:
    # 설정 사용
    from core.config import settings
    days = settings.DEFAULT_INACTIVE_DAYS  # 90

    # 감사 실행
    from core.audit import AuditRunner, load_rule_set
    from core.directory import SnapshotFileProvider

    runner = AuditRunner(SnapshotFileProvider("exports/contoso.json"), load_rule_set())
    report = runner.run_full()

    # 예외 처리
    from core.exceptions import SnapshotFetchError, format_error_for_user
    try:
        report = runner.run_full()
    except SnapshotFetchError as e:
        print(format_error_for_user(e))
"""
