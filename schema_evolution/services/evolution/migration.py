"""
Migration Planner - 변경 목록에서 마이그레이션 단계 생성

변경 순서대로 규칙이 있는 변경마다 단계 하나를 만든다.
규칙이 없는 변경 종류는 단계를 만들지 않는다.
"""

from enum import Enum
from typing import Callable, Dict, List, Sequence

from .models import Change, ChangeKind, MigrationStep, StepComplexity


class MigrationAction(str, Enum):
    """마이그레이션 액션"""
    ADD_DEFAULT_VALUE = "ADD_DEFAULT_VALUE"
    TYPE_MIGRATION = "TYPE_MIGRATION"
    VALIDATE_DATA = "VALIDATE_DATA"
    UPDATE_ENUM_VALUES = "UPDATE_ENUM_VALUES"
    PRE_MIGRATION_VALIDATION = "PRE_MIGRATION_VALIDATION"


def _add_default_value(change: Change) -> MigrationStep:
    return MigrationStep(
        action=MigrationAction.ADD_DEFAULT_VALUE,
        field=change.field,
        description=f"Add default value for new required field '{change.field}'",
        code=f'"{change.field}": {{ "default": null }}',
        automated=False,
        complexity=StepComplexity.MEDIUM,
    )


def _type_migration(change: Change) -> MigrationStep:
    return MigrationStep(
        action=MigrationAction.TYPE_MIGRATION,
        field=change.field,
        description=f"Migrate field '{change.field}' from {change.old_value} to {change.new_value}",
        code=f"# Data migration required for {change.field}",
        automated=False,
        complexity=StepComplexity.HIGH,
    )


def _validate_data(change: Change) -> MigrationStep:
    return MigrationStep(
        action=MigrationAction.VALIDATE_DATA,
        field=change.field,
        description=f"Validate existing data meets new constraint for '{change.field}'",
        code=f"# Validate: {change.description}",
        automated=True,
        complexity=StepComplexity.MEDIUM,
    )


def _update_enum_values(change: Change) -> MigrationStep:
    return MigrationStep(
        action=MigrationAction.UPDATE_ENUM_VALUES,
        field=change.field,
        description=f"Update existing data using removed enum value '{change.old_value}'",
        code=f"# Update all instances of '{change.old_value}' in field '{change.field}'",
        automated=False,
        complexity=StepComplexity.HIGH,
    )


STEP_RULES: Dict[ChangeKind, Callable[[Change], MigrationStep]] = {
    ChangeKind.REQUIRED_FIELD_ADDED: _add_default_value,
    ChangeKind.FIELD_TYPE_CHANGED: _type_migration,
    ChangeKind.CONSTRAINT_TIGHTENED: _validate_data,
    ChangeKind.ENUM_VALUE_REMOVED: _update_enum_values,
}


def generate_migration_path(changes: Sequence[Change]) -> List[MigrationStep]:
    """
    변경 목록에 대한 마이그레이션 단계 생성

    Args:
        changes: 분류된 변경 목록

    Returns:
        변경 순서를 따르는 MigrationStep 목록
    """
    steps = []
    for change in changes:
        rule = STEP_RULES.get(change.kind)
        if rule is not None:
            steps.append(rule(change))
    return steps


def pre_migration_validation_step() -> MigrationStep:
    """breaking 변경이 있을 때 맨 앞에 추가하는 사전 검증 단계"""
    return MigrationStep(
        action=MigrationAction.PRE_MIGRATION_VALIDATION,
        field="root",
        description="Validate all existing data against the new schema constraints",
        code="schema.validate(existing_data)",
        automated=True,
        complexity=StepComplexity.MEDIUM,
    )
