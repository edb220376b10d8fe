"""
Tests for migration path generation.
"""


def _change(kind, field="f", breaking=True, old_value=None, new_value=None, description="desc"):
    from schema_evolution.services.evolution import Change, ChangeDirection, ChangeImpact, MISSING

    return Change(
        kind=kind,
        field=field,
        path=f"$.properties.{field}",
        breaking=breaking,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact.HIGH,
        description=description,
        old_value=MISSING if old_value is None else old_value,
        new_value=MISSING if new_value is None else new_value,
    )


class TestMigrationPath:
    """Tests for generate_migration_path()."""

    def test_required_field_added(self):
        """Test the default-value step."""
        from schema_evolution.services.evolution import (
            ChangeKind, MigrationAction, StepComplexity, generate_migration_path,
        )

        steps = generate_migration_path([_change(ChangeKind.REQUIRED_FIELD_ADDED, "phone")])

        assert len(steps) == 1
        assert steps[0].action == MigrationAction.ADD_DEFAULT_VALUE
        assert steps[0].field == "phone"
        assert steps[0].automated is False
        assert steps[0].complexity == StepComplexity.MEDIUM

    def test_type_changed(self):
        """Test the type migration step."""
        from schema_evolution.services.evolution import (
            ChangeKind, MigrationAction, StepComplexity, generate_migration_path,
        )

        steps = generate_migration_path([
            _change(ChangeKind.FIELD_TYPE_CHANGED, "age", old_value="string", new_value="integer")
        ])

        assert steps[0].action == MigrationAction.TYPE_MIGRATION
        assert steps[0].complexity == StepComplexity.HIGH
        assert "from string to integer" in steps[0].description

    def test_constraint_tightened(self):
        """Test the automated validation step."""
        from schema_evolution.services.evolution import ChangeKind, MigrationAction, generate_migration_path

        steps = generate_migration_path([
            _change(ChangeKind.CONSTRAINT_TIGHTENED, "name", description="maxLength constraint added")
        ])

        assert steps[0].action == MigrationAction.VALIDATE_DATA
        assert steps[0].automated is True
        assert steps[0].code == "# Validate: maxLength constraint added"

    def test_enum_value_removed(self):
        """Test the enum update step."""
        from schema_evolution.services.evolution import (
            ChangeKind, MigrationAction, StepComplexity, generate_migration_path,
        )

        steps = generate_migration_path([
            _change(ChangeKind.ENUM_VALUE_REMOVED, "status", old_value="banned")
        ])

        assert steps[0].action == MigrationAction.UPDATE_ENUM_VALUES
        assert steps[0].complexity == StepComplexity.HIGH
        assert "'banned'" in steps[0].description

    def test_kinds_without_rule_produce_no_step(self):
        """Test that removals and additions need no step."""
        from schema_evolution.services.evolution import ChangeKind, generate_migration_path

        changes = [
            _change(ChangeKind.FIELD_REMOVED),
            _change(ChangeKind.FIELD_ADDED, breaking=False),
            _change(ChangeKind.REQUIRED_FIELD_REMOVED),
            _change(ChangeKind.SCHEMA_METADATA_CHANGED, breaking=False),
        ]

        assert generate_migration_path(changes) == []

    def test_steps_follow_change_order(self):
        """Test one step per matching change, in order."""
        from schema_evolution.services.evolution import ChangeKind, generate_migration_path

        changes = [
            _change(ChangeKind.ENUM_VALUE_REMOVED, "status", old_value="x"),
            _change(ChangeKind.FIELD_REMOVED, "legacy"),
            _change(ChangeKind.REQUIRED_FIELD_ADDED, "phone"),
        ]

        assert [s.field for s in generate_migration_path(changes)] == ["status", "phone"]

    def test_pre_migration_validation_step(self):
        """Test the step prepended for breaking evolutions."""
        from schema_evolution.services.evolution import MigrationAction
        from schema_evolution.services.evolution.migration import pre_migration_validation_step

        step = pre_migration_validation_step()

        assert step.action == MigrationAction.PRE_MIGRATION_VALIDATION
        assert step.field == "root"
        assert step.automated is True
        assert step.to_dict()["complexity"] == "MEDIUM"

    def test_actions_are_enum_members(self):
        """Test that every step action is a MigrationAction rendered by value."""
        from schema_evolution.services.evolution import ChangeKind, MigrationAction, generate_migration_path
        from schema_evolution.services.evolution.migration import pre_migration_validation_step

        changes = [
            _change(ChangeKind.REQUIRED_FIELD_ADDED, "phone"),
            _change(ChangeKind.FIELD_TYPE_CHANGED, "id", old_value="integer", new_value="string"),
            _change(ChangeKind.CONSTRAINT_TIGHTENED, "name"),
            _change(ChangeKind.ENUM_VALUE_REMOVED, "status", old_value="banned"),
        ]
        steps = [pre_migration_validation_step()] + generate_migration_path(changes)

        assert all(isinstance(s.action, MigrationAction) for s in steps)
        assert [s.to_dict()["action"] for s in steps] == [
            "PRE_MIGRATION_VALIDATION",
            "ADD_DEFAULT_VALUE",
            "TYPE_MIGRATION",
            "VALIDATE_DATA",
            "UPDATE_ENUM_VALUES",
        ]
