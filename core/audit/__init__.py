"""
core/audit - 정책 평가 엔진

엔티티 평가기 → 감사 집계기 → 컴플라이언스 점수 합성기,
그리고 규정별(GDPR/SOX/ISO27001) 감점식 점수 흐름 제공
"""

from .aggregator import (
    ACTION_DISABLE_AFTER_NOTIFICATION,
    ACTION_DISABLE_IMMEDIATELY,
    audit_groups,
    audit_inactive_accounts,
    audit_privileged_accounts,
    audit_users,
    resolve_privileged_members,
)
from .composer import (
    build_recommendations,
    compliance_rate,
    compose_compliance_report,
    overall_compliance_score,
    summarize,
)
from .evaluator import (
    CheckOutcome,
    GroupNameResolver,
    build_user_index,
    classify_members,
    escalate,
    evaluate_group,
    evaluate_user,
    fold_outcomes,
)
from .rules import RuleSet, load_rule_set, rule_set_from_dict
from .runner import AuditOptions, AuditRunner
from .standards import (
    ComplianceStandard,
    build_standard_report,
    collect_violation_records,
    score_records,
    weighted_score,
)
from .types import (
    AuditResult,
    AuditRun,
    AuditType,
    ComplianceReport,
    ComplianceSummary,
    RiskLevel,
    StandardComplianceReport,
    ViolationRecord,
)

__all__ = [
    # Types
    "RiskLevel",
    "AuditType",
    "AuditResult",
    "AuditRun",
    "ComplianceSummary",
    "ComplianceReport",
    "ViolationRecord",
    "StandardComplianceReport",
    # Rules
    "RuleSet",
    "load_rule_set",
    "rule_set_from_dict",
    # Evaluator
    "CheckOutcome",
    "GroupNameResolver",
    "build_user_index",
    "classify_members",
    "escalate",
    "evaluate_group",
    "evaluate_user",
    "fold_outcomes",
    # Aggregator
    "ACTION_DISABLE_IMMEDIATELY",
    "ACTION_DISABLE_AFTER_NOTIFICATION",
    "audit_users",
    "audit_groups",
    "audit_privileged_accounts",
    "audit_inactive_accounts",
    "resolve_privileged_members",
    # Composer
    "compliance_rate",
    "overall_compliance_score",
    "summarize",
    "build_recommendations",
    "compose_compliance_report",
    # Standards
    "ComplianceStandard",
    "weighted_score",
    "score_records",
    "collect_violation_records",
    "build_standard_report",
    # Runner
    "AuditOptions",
    "AuditRunner",
]
