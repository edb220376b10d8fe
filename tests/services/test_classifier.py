"""
Tests for change classification rules.

Covers:
- Type widening rule
- Enum constraint and value rules
- Floor/ceiling bound rules
- pattern / multipleOf / uniqueItems rules
"""

import pytest


class TestTypeRule:
    """Tests for type compatibility."""

    @pytest.mark.parametrize("old_type, new_type, expected", [
        ("string", "string", True),
        ("integer", "number", True),
        ("number", "integer", False),
        ("string", "integer", False),
        (None, "object", False),
        ("object", None, False),
        ("null|string", "null|string", True),
        ("string", "null|string", True),
        ("integer|null", "null|number", True),
        ("null|string", "string", False),
        ("number|string", "integer|string", False),
    ])
    def test_is_type_compatible(self, old_type, new_type, expected):
        """Test the widening table."""
        from schema_evolution.services.evolution import is_type_compatible

        assert is_type_compatible(old_type, new_type) is expected

    def test_narrowing_is_breaking(self):
        """Test number -> integer."""
        from schema_evolution.services.evolution import ChangeImpact, ChangeDirection
        from schema_evolution.services.evolution.classifier import classify_type_change

        changes = classify_type_change("price", "number", "integer", "$.properties.price.type", "narrowed")

        assert changes[0].breaking is True
        assert changes[0].impact == ChangeImpact.HIGH
        assert changes[0].direction == ChangeDirection.BOTH


class TestEnumRule:
    """Tests for enum classification."""

    def test_enum_added(self):
        """Test none -> enum."""
        from schema_evolution.services.evolution import ChangeKind, ChangeImpact
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change("status", None, ("a", "b"), "$.properties.status")

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.CONSTRAINT_ADDED
        assert changes[0].breaking is True
        assert changes[0].impact == ChangeImpact.HIGH
        assert changes[0].path == "$.properties.status.enum"

    def test_enum_removed(self):
        """Test enum -> none."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change("status", ("a",), None, "$.properties.status")

        assert changes[0].kind == ChangeKind.CONSTRAINT_REMOVED
        assert changes[0].breaking is False

    def test_value_removed_and_added(self):
        """Test removals listed before additions."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change("status", ("a", "b"), ("b", "c"), "$.properties.status")

        assert [(c.kind, c.old_value if c.kind == ChangeKind.ENUM_VALUE_REMOVED else c.new_value)
                for c in changes] == [
            (ChangeKind.ENUM_VALUE_REMOVED, "a"),
            (ChangeKind.ENUM_VALUE_ADDED, "c"),
        ]
        assert changes[0].breaking is True
        assert changes[1].breaking is False

    def test_duplicate_values_collapse(self):
        """Test that duplicates yield one change."""
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change("status", ("a", "a", "b"), ("b",), "$.properties.status")

        assert len(changes) == 1
        assert changes[0].old_value == "a"

    def test_unhashable_values(self):
        """Test object-valued enum literals."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change(
            "point", ({"x": 1}, {"x": 2}), ({"x": 2},), "$.properties.point"
        )

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.ENUM_VALUE_REMOVED
        assert changes[0].old_value == {"x": 1}

    def test_reordered_enum_is_no_change(self):
        """Test that order alone is not a change."""
        from schema_evolution.services.evolution.classifier import classify_enum_change

        assert classify_enum_change("s", ("a", "b"), ("b", "a"), "$.properties.s") == []

    def test_booleans_are_not_numbers(self):
        """Test that true/false and 1/0 are different enum values."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change("flag", (1, 0), (True, False), "$.properties.flag")

        assert [c.kind for c in changes] == [
            ChangeKind.ENUM_VALUE_REMOVED,
            ChangeKind.ENUM_VALUE_REMOVED,
            ChangeKind.ENUM_VALUE_ADDED,
            ChangeKind.ENUM_VALUE_ADDED,
        ]
        assert [type(c.old_value) for c in changes[:2]] == [int, int]
        assert changes[2].new_value is True
        assert changes[3].new_value is False
        assert changes[0].breaking is True

    def test_nested_booleans_are_not_numbers(self):
        """Test that object literals compare booleans by JSON type."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_enum_change

        changes = classify_enum_change(
            "point", ({"on": 1},), ({"on": True},), "$.properties.point"
        )

        assert [c.kind for c in changes] == [ChangeKind.ENUM_VALUE_REMOVED, ChangeKind.ENUM_VALUE_ADDED]

    def test_integral_float_equals_integer(self):
        """Test that 1 and 1.0 are the same JSON number."""
        from schema_evolution.services.evolution.classifier import classify_enum_change

        assert classify_enum_change("n", (1, 2), (1.0, 2), "$.properties.n") == []


class TestBoundRule:
    """Tests for floor/ceiling constraints."""

    @pytest.mark.parametrize("keyword, bound_name, old, new, breaking", [
        ("minLength", "FLOOR", 1, 2, True),
        ("minLength", "FLOOR", 2, 1, False),
        ("maxLength", "CEILING", 10, 5, True),
        ("maxLength", "CEILING", 5, 10, False),
        ("minimum", "FLOOR", 0, 1, True),
        ("maximum", "CEILING", 100, 1000, False),
        ("minItems", "FLOOR", 0, 1, True),
        ("maxItems", "CEILING", 5, 3, True),
    ])
    def test_value_to_value(self, keyword, bound_name, old, new, breaking):
        """Test direction of tightening for floors and ceilings."""
        from schema_evolution.services.evolution import ChangeKind, ChangeImpact
        from schema_evolution.services.evolution.classifier import BoundKind, classify_bound_change

        changes = classify_bound_change("f", keyword, old, new, "$.properties.f", BoundKind[bound_name])

        assert len(changes) == 1
        assert changes[0].breaking is breaking
        if breaking:
            assert changes[0].kind == ChangeKind.CONSTRAINT_TIGHTENED
            assert changes[0].impact == ChangeImpact.HIGH
        else:
            assert changes[0].kind == ChangeKind.CONSTRAINT_RELAXED
            assert changes[0].impact == ChangeImpact.MEDIUM

    def test_bound_added(self):
        """Test none -> value."""
        from schema_evolution.services.evolution import ChangeKind, ChangeImpact
        from schema_evolution.services.evolution.classifier import BoundKind, classify_bound_change

        changes = classify_bound_change("f", "maxLength", None, 50, "$.properties.f", BoundKind.CEILING)

        assert changes[0].kind == ChangeKind.CONSTRAINT_TIGHTENED
        assert changes[0].impact == ChangeImpact.HIGH
        assert changes[0].path == "$.properties.f.maxLength"
        assert changes[0].new_value == 50

    def test_bound_removed(self):
        """Test value -> none."""
        from schema_evolution.services.evolution import ChangeKind, ChangeImpact, MISSING
        from schema_evolution.services.evolution.classifier import BoundKind, classify_bound_change

        changes = classify_bound_change("f", "minimum", 0, None, "$.properties.f", BoundKind.FLOOR)

        assert changes[0].kind == ChangeKind.CONSTRAINT_RELAXED
        assert changes[0].impact == ChangeImpact.LOW
        assert changes[0].new_value is MISSING

    def test_unchanged_bound(self):
        """Test that an equal bound yields nothing."""
        from schema_evolution.services.evolution.classifier import BoundKind, classify_bound_change

        assert classify_bound_change("f", "minimum", 3, 3, "$.properties.f", BoundKind.FLOOR) == []


class TestSupplementalRules:
    """Tests for pattern, multipleOf and uniqueItems."""

    def test_pattern_changed_is_breaking(self):
        """Test that any pattern change is treated as tightening."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_pattern_change

        changes = classify_pattern_change("code", "^[a-z]+$", "^[a-z0-9]+$", "$.properties.code")

        assert changes[0].kind == ChangeKind.CONSTRAINT_TIGHTENED
        assert changes[0].breaking is True

    def test_pattern_removed_is_safe(self):
        """Test pattern removal."""
        from schema_evolution.services.evolution import ChangeKind, ChangeImpact
        from schema_evolution.services.evolution.classifier import classify_pattern_change

        changes = classify_pattern_change("code", "^[a-z]+$", None, "$.properties.code")

        assert changes[0].kind == ChangeKind.CONSTRAINT_RELAXED
        assert changes[0].impact == ChangeImpact.LOW

    @pytest.mark.parametrize("old, new, breaking", [
        (4, 2, False),
        (2, 4, True),
        (0.5, 0.25, False),
        (3, 2, True),
    ])
    def test_multiple_of_changed(self, old, new, breaking):
        """Test divisor containment."""
        from schema_evolution.services.evolution.classifier import classify_multiple_of_change

        changes = classify_multiple_of_change("qty", old, new, "$.properties.qty")

        assert changes[0].breaking is breaking
        assert changes[0].path == "$.properties.qty.multipleOf"

    def test_multiple_of_added(self):
        """Test none -> value."""
        from schema_evolution.services.evolution.classifier import classify_multiple_of_change

        changes = classify_multiple_of_change("qty", None, 5, "$.properties.qty")

        assert changes[0].breaking is True

    def test_unique_items_added(self):
        """Test absent -> true."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_unique_items_change

        changes = classify_unique_items_change("tags", None, True, "$.properties.tags")

        assert changes[0].kind == ChangeKind.CONSTRAINT_TIGHTENED
        assert changes[0].breaking is True

    def test_unique_items_false_equals_absent(self):
        """Test that false and absent are the same constraint."""
        from schema_evolution.services.evolution.classifier import classify_unique_items_change

        assert classify_unique_items_change("tags", None, False, "$.properties.tags") == []

    def test_unique_items_removed(self):
        """Test true -> false."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_unique_items_change

        changes = classify_unique_items_change("tags", True, False, "$.properties.tags")

        assert changes[0].kind == ChangeKind.CONSTRAINT_RELAXED
        assert changes[0].breaking is False


class TestBooleanSchemaRule:
    """Tests for true/false property schemas."""

    def test_true_to_false_is_breaking(self):
        """Test that a property that stops accepting values breaks."""
        from schema_evolution.services.evolution import BooleanSchemaNode, ChangeKind, ChangeImpact
        from schema_evolution.services.evolution.classifier import classify_boolean_schema_change

        changes = classify_boolean_schema_change(
            "x", BooleanSchemaNode(value=True), BooleanSchemaNode(value=False), "$.properties.x"
        )

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.CONSTRAINT_ADDED
        assert changes[0].breaking is True
        assert changes[0].impact == ChangeImpact.HIGH
        assert changes[0].to_dict()["new_value"] is False

    def test_false_to_schema_is_safe(self):
        """Test that opening a false property is a relaxation."""
        from schema_evolution.services.evolution import BooleanSchemaNode, ChangeKind, parse_schema
        from schema_evolution.services.evolution.classifier import classify_boolean_schema_change

        changes = classify_boolean_schema_change(
            "x",
            BooleanSchemaNode(value=False),
            parse_schema({"type": "string"}).unwrap(),
            "$.properties.x",
        )

        assert [(c.kind, c.breaking) for c in changes] == [(ChangeKind.CONSTRAINT_REMOVED, False)]

    def test_true_and_empty_schema_are_not_distinguished(self):
        """Test that only a false schema triggers the rule."""
        from schema_evolution.services.evolution import BooleanSchemaNode, UnknownNode
        from schema_evolution.services.evolution.classifier import classify_boolean_schema_change

        assert classify_boolean_schema_change(
            "x", BooleanSchemaNode(value=True), UnknownNode(), "$.properties.x"
        ) == []


class TestReferenceRule:
    """Tests for $ref target changes."""

    @pytest.mark.parametrize("old_ref, new_ref", [
        ("#/definitions/a", "#/definitions/b"),
        (None, "#/definitions/a"),
        ("#/definitions/a", None),
    ])
    def test_reference_change_is_breaking(self, old_ref, new_ref):
        """Test that any retargeted reference is breaking."""
        from schema_evolution.services.evolution import ChangeKind
        from schema_evolution.services.evolution.classifier import classify_reference_change

        changes = classify_reference_change("address", old_ref, new_ref, "$.properties.address")

        assert len(changes) == 1
        assert changes[0].kind == ChangeKind.SCHEMA_METADATA_CHANGED
        assert changes[0].path == "$.properties.address.$ref"
        assert changes[0].breaking is True

    def test_same_reference_is_no_change(self):
        """Test an unchanged reference."""
        from schema_evolution.services.evolution.classifier import classify_reference_change

        assert classify_reference_change("a", "#/x", "#/x", "$.properties.a") == []
