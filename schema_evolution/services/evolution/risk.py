"""
Risk Assessor - 변경 목록의 위험도 평가

B = breaking 변경 수, H = HIGH 영향도 변경 수
- B == 0            -> LOW
- B <= 2 and H <= 1 -> MEDIUM
- B <= 5            -> HIGH
- 그 외             -> CRITICAL
"""

from typing import List, Optional, Sequence

from .models import Change, ChangeImpact, ChangeKind, RiskAssessment, RiskLevel


def compute_risk_level(breaking_count: int, high_impact_count: int) -> RiskLevel:
    """breaking/HIGH 개수로 위험 등급 계산"""
    if breaking_count == 0:
        return RiskLevel.LOW
    if breaking_count <= 2 and high_impact_count <= 1:
        return RiskLevel.MEDIUM
    if breaking_count <= 5:
        return RiskLevel.HIGH
    return RiskLevel.CRITICAL


def _has_kind(changes: Sequence[Change], kind: ChangeKind) -> bool:
    return any(c.kind == kind for c in changes)


def generate_recommended_actions(changes: Sequence[Change], risk: RiskLevel) -> List[str]:
    """위험도와 변경 종류에 따른 권장 조치"""
    actions: List[str] = []

    if risk == RiskLevel.CRITICAL:
        actions.append("Consider breaking this change into multiple smaller changes")
        actions.append("Implement feature flags for gradual rollout")
        actions.append("Plan comprehensive rollback strategy")

    if _has_kind(changes, ChangeKind.REQUIRED_FIELD_ADDED):
        actions.append("Provide default values for new required fields")
        actions.append("Update all existing consumers before deploying")

    if _has_kind(changes, ChangeKind.FIELD_TYPE_CHANGED):
        actions.append("Implement data migration scripts")
        actions.append("Test type conversions thoroughly")

    if any(c.breaking for c in changes):
        actions.append("Coordinate with all schema consumers")
        actions.append("Plan deployment sequence carefully")
        actions.append("Monitor error rates after deployment")

    return actions


def generate_rollback_plan(changes: Sequence[Change]) -> List[str]:
    """롤백 계획"""
    plan = [
        "Keep previous schema version available in registry",
        "Implement schema version fallback in consumers",
    ]

    if _has_kind(changes, ChangeKind.FIELD_TYPE_CHANGED):
        plan.append("Maintain data migration reversal scripts")

    if any(c.breaking for c in changes):
        plan.append("Test rollback procedure in staging environment")
        plan.append("Prepare communication plan for rollback")

    return plan


def assess_risk(
    changes: Sequence[Change],
    affected_consumers: Optional[Sequence[str]] = None
) -> RiskAssessment:
    """
    변경 목록 위험도 평가

    Args:
        changes: 분류된 변경 목록
        affected_consumers: 호출자가 알고 있는 영향 받는 소비자 (그대로 전달)

    Returns:
        RiskAssessment
    """
    breaking_count = sum(1 for c in changes if c.breaking)
    high_impact_count = sum(1 for c in changes if c.impact == ChangeImpact.HIGH)

    risk = compute_risk_level(breaking_count, high_impact_count)

    return RiskAssessment(
        overall_risk=risk,
        breaking_changes=breaking_count,
        recommended_actions=tuple(generate_recommended_actions(changes, risk)),
        rollback_plan=tuple(generate_rollback_plan(changes)),
        affected_consumers=tuple(affected_consumers) if affected_consumers is not None else None,
    )
