"""
Tests for risk assessment.

Covers:
- Risk level table
- Monotonic risk as breaking changes accumulate
- Recommended actions and rollback plan
"""

import pytest


def _change(kind, breaking=True, impact="HIGH", field="f"):
    from schema_evolution.services.evolution import Change, ChangeDirection, ChangeImpact

    return Change(
        kind=kind,
        field=field,
        path=f"$.properties.{field}",
        breaking=breaking,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact(impact),
        description=f"{kind.value} on {field}",
    )


class TestRiskLevel:
    """Tests for compute_risk_level()."""

    @pytest.mark.parametrize("breaking, high, expected", [
        (0, 0, "LOW"),
        (0, 4, "LOW"),
        (1, 1, "MEDIUM"),
        (2, 1, "MEDIUM"),
        (2, 2, "HIGH"),
        (3, 0, "HIGH"),
        (5, 5, "HIGH"),
        (6, 0, "CRITICAL"),
    ])
    def test_risk_table(self, breaking, high, expected):
        """Test each branch of the risk table."""
        from schema_evolution.services.evolution import compute_risk_level

        assert compute_risk_level(breaking, high).value == expected

    def test_risk_is_monotonic(self):
        """Test that adding breaking HIGH changes never lowers risk."""
        from schema_evolution.services.evolution import ChangeKind, assess_risk

        changes = [_change(ChangeKind.FIELD_ADDED, breaking=False, impact="LOW")]
        previous_rank = assess_risk(changes).overall_risk.rank

        for index in range(10):
            changes.append(_change(ChangeKind.FIELD_REMOVED, field=f"f{index}"))
            rank = assess_risk(changes).overall_risk.rank
            assert rank >= previous_rank
            previous_rank = rank

        assert previous_rank == 3


class TestAssessRisk:
    """Tests for assess_risk()."""

    def test_no_changes(self):
        """Test the empty assessment."""
        from schema_evolution.services.evolution import RiskLevel, assess_risk

        risk = assess_risk([])

        assert risk.overall_risk == RiskLevel.LOW
        assert risk.breaking_changes == 0
        assert risk.recommended_actions == ()
        assert risk.rollback_plan == (
            "Keep previous schema version available in registry",
            "Implement schema version fallback in consumers",
        )

    def test_required_field_actions(self):
        """Test actions for a new required field."""
        from schema_evolution.services.evolution import ChangeKind, assess_risk

        risk = assess_risk([_change(ChangeKind.REQUIRED_FIELD_ADDED)])

        assert risk.recommended_actions[:2] == (
            "Provide default values for new required fields",
            "Update all existing consumers before deploying",
        )
        assert "Coordinate with all schema consumers" in risk.recommended_actions

    def test_type_change_actions_and_rollback(self):
        """Test actions and rollback for a type change."""
        from schema_evolution.services.evolution import ChangeKind, assess_risk

        risk = assess_risk([_change(ChangeKind.FIELD_TYPE_CHANGED)])

        assert "Implement data migration scripts" in risk.recommended_actions
        assert "Maintain data migration reversal scripts" in risk.rollback_plan
        assert "Test rollback procedure in staging environment" in risk.rollback_plan

    def test_critical_actions_come_first(self):
        """Test the CRITICAL action ordering."""
        from schema_evolution.services.evolution import ChangeKind, RiskLevel, assess_risk

        changes = [_change(ChangeKind.FIELD_REMOVED, field=f"f{i}") for i in range(6)]

        risk = assess_risk(changes)

        assert risk.overall_risk == RiskLevel.CRITICAL
        assert risk.recommended_actions[0] == "Consider breaking this change into multiple smaller changes"
        assert "Plan comprehensive rollback strategy" in risk.recommended_actions

    def test_non_breaking_only_has_no_actions(self):
        """Test safe changes."""
        from schema_evolution.services.evolution import ChangeKind, assess_risk

        risk = assess_risk([_change(ChangeKind.FIELD_ADDED, breaking=False, impact="LOW")])

        assert risk.recommended_actions == ()
        assert len(risk.rollback_plan) == 2

    def test_affected_consumers_pass_through(self):
        """Test that consumers are carried unchanged."""
        from schema_evolution.services.evolution import assess_risk

        risk = assess_risk([], affected_consumers=["billing", "search"])

        assert risk.affected_consumers == ("billing", "search")
        assert risk.to_dict()["affected_consumers"] == ["billing", "search"]

    def test_no_consumers_omitted_from_dict(self):
        """Test that unknown consumers are not rendered."""
        from schema_evolution.services.evolution import assess_risk

        assert "affected_consumers" not in assess_risk([]).to_dict()
