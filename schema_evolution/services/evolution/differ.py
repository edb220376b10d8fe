"""
Schema Differ - 두 스키마 트리의 구조적 차이 감지

감지 패스 (각 패스는 독립적으로 자체 목록을 반환하고 결과는 이어 붙인다):
1. 메타데이터 (title/description)
2. 루트 타입
3. required 집합 (최상위)
4. property 집합 (최상위)
5. 공통 property 비교 (타입/$ref/enum/제약) - 한 단계만, 중첩 객체/배열 내부는 비교하지 않음
6. 조합 키워드 (allOf/oneOf/anyOf)
7. additionalProperties
8. 루트 $ref
"""

from typing import Callable, List, Optional, Sequence

from ...core import get_logger
from .classifier import (
    BOUND_CONSTRAINTS,
    classify_additional_properties_change,
    classify_boolean_schema_change,
    classify_bound_change,
    classify_composition_change,
    classify_enum_change,
    classify_multiple_of_change,
    classify_pattern_change,
    classify_reference_change,
    classify_type_change,
    classify_unique_items_change,
)
from .models import (
    Change,
    ChangeDirection,
    ChangeImpact,
    ChangeKind,
    SchemaNode,
    constraint_of,
    properties_of,
    rejects_everything,
    required_of,
)

logger = get_logger(__name__)


DetectionPass = Callable[[SchemaNode, SchemaNode], List[Change]]


def _label(type_label: Optional[str]) -> str:
    return type_label if type_label is not None else "unspecified"


def detect_metadata_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """title/description 변경 - 항상 안전"""
    changes: List[Change] = []

    if old.title != new.title:
        changes.append(Change(
            kind=ChangeKind.SCHEMA_METADATA_CHANGED,
            field="title",
            path="$.title",
            breaking=False,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.LOW,
            description=f'Schema title changed from "{old.title}" to "{new.title}"',
            old_value=old.title,
            new_value=new.title,
        ))

    if old.description != new.description:
        changes.append(Change(
            kind=ChangeKind.SCHEMA_METADATA_CHANGED,
            field="description",
            path="$.description",
            breaking=False,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.LOW,
            description="Schema description changed",
            old_value=old.description,
            new_value=new.description,
        ))

    return changes


def detect_root_type_change(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """루트 스키마 타입 변경"""
    return classify_type_change(
        "root",
        old.type_label,
        new.type_label,
        "$.type",
        f"Root schema type changed from {_label(old.type_label)} to {_label(new.type_label)}",
    )


def detect_required_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """
    required 집합 변경 (최상위만)

    - 제거: BACKWARD 방향 breaking
    - 추가: FORWARD 방향 breaking
    """
    old_required = required_of(old)
    new_required = required_of(new)

    removed = [
        Change(
            kind=ChangeKind.REQUIRED_FIELD_REMOVED,
            field=name,
            path=f"$.properties.{name}",
            breaking=True,
            direction=ChangeDirection.BACKWARD,
            impact=ChangeImpact.HIGH,
            description=f"Required field '{name}' was removed",
        )
        for name in old_required if name not in new_required
    ]
    added = [
        Change(
            kind=ChangeKind.REQUIRED_FIELD_ADDED,
            field=name,
            path=f"$.properties.{name}",
            breaking=True,
            direction=ChangeDirection.FORWARD,
            impact=ChangeImpact.HIGH,
            description=f"Required field '{name}' was added",
        )
        for name in new_required if name not in old_required
    ]
    return removed + added


def detect_property_set_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """property 추가/제거 (최상위만)"""
    old_properties = properties_of(old)
    new_properties = properties_of(new)
    new_required = required_of(new)

    changes: List[Change] = []

    for name in old_properties:
        if name not in new_properties:
            changes.append(Change(
                kind=ChangeKind.FIELD_REMOVED,
                field=name,
                path=f"$.properties.{name}",
                breaking=True,
                direction=ChangeDirection.BACKWARD,
                impact=ChangeImpact.HIGH,
                description=f"Property '{name}' was removed",
                old_value=old_properties[name],
            ))

    for name in new_properties:
        if name in old_properties:
            continue
        is_required = name in new_required
        changes.append(Change(
            kind=ChangeKind.FIELD_ADDED,
            field=name,
            path=f"$.properties.{name}",
            breaking=is_required,
            direction=ChangeDirection.FORWARD if is_required else ChangeDirection.BOTH,
            impact=ChangeImpact.MEDIUM if is_required else ChangeImpact.LOW,
            description=f"Property '{name}' was added{' as required' if is_required else ''}",
            new_value=new_properties[name],
        ))

    return changes


def compare_properties(name: str, old_prop: SchemaNode, new_prop: SchemaNode) -> List[Change]:
    """
    공통 property 한 쌍 비교

    얕은 비교: property 자체의 중첩 properties/items 내부 변경은 감지하지 않는다.
    """
    path = f"$.properties.{name}"
    if rejects_everything(old_prop) or rejects_everything(new_prop):
        # false 스키마에는 비교할 타입/제약이 없음
        return classify_boolean_schema_change(name, old_prop, new_prop, path)

    changes: List[Change] = []

    changes.extend(classify_type_change(
        name,
        old_prop.type_label,
        new_prop.type_label,
        f"{path}.type",
        f"Property '{name}' type changed from {_label(old_prop.type_label)} "
        f"to {_label(new_prop.type_label)}",
    ))
    changes.extend(classify_reference_change(name, old_prop.ref, new_prop.ref, path))

    changes.extend(classify_enum_change(name, old_prop.enum, new_prop.enum, path))

    for field_name, keyword, bound in BOUND_CONSTRAINTS:
        changes.extend(classify_bound_change(
            name,
            keyword,
            constraint_of(old_prop, field_name),
            constraint_of(new_prop, field_name),
            path,
            bound,
        ))

    changes.extend(classify_pattern_change(
        name, constraint_of(old_prop, "pattern"), constraint_of(new_prop, "pattern"), path
    ))
    changes.extend(classify_multiple_of_change(
        name, constraint_of(old_prop, "multiple_of"), constraint_of(new_prop, "multiple_of"), path
    ))
    changes.extend(classify_unique_items_change(
        name, constraint_of(old_prop, "unique_items"), constraint_of(new_prop, "unique_items"), path
    ))

    return changes


def detect_property_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """양쪽에 모두 있는 property 비교"""
    old_properties = properties_of(old)
    new_properties = properties_of(new)

    changes: List[Change] = []
    for name, old_prop in old_properties.items():
        if name in new_properties:
            changes.extend(compare_properties(name, old_prop, new_properties[name]))
    return changes


def detect_composition_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """allOf / oneOf / anyOf 변경"""
    return (
        classify_composition_change("allOf", old.all_of, new.all_of)
        + classify_composition_change("oneOf", old.one_of, new.one_of)
        + classify_composition_change("anyOf", old.any_of, new.any_of)
    )


def detect_root_reference_change(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """루트 $ref 대상 변경"""
    return classify_reference_change("root", old.ref, new.ref, "$")


def detect_additional_properties_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """additionalProperties 허용/금지 전환"""
    return classify_additional_properties_change(
        constraint_of(old, "additional_properties"),
        constraint_of(new, "additional_properties"),
    )


DEFAULT_PASSES: Sequence[DetectionPass] = (
    detect_metadata_changes,
    detect_root_type_change,
    detect_required_changes,
    detect_property_set_changes,
    detect_property_changes,
    detect_composition_changes,
    detect_additional_properties_changes,
    detect_root_reference_change,
)


class Differ:
    """
    스키마 변경 감지기

    등록된 감지 패스를 순서대로 실행하고 결과를 이어 붙인다.
    같은 입력에 대해 항상 같은 순서의 결과를 반환한다.
    """

    def __init__(self, passes: Optional[Sequence[DetectionPass]] = None):
        self.passes = tuple(passes) if passes is not None else tuple(DEFAULT_PASSES)

    def detect_changes(self, old: SchemaNode, new: SchemaNode) -> List[Change]:
        """
        두 스키마 간의 변경 목록

        Args:
            old: 이전(기존) 스키마
            new: 새로운 스키마

        Returns:
            감지 순서대로 정렬된 Change 목록
        """
        changes: List[Change] = []
        for detection_pass in self.passes:
            changes = changes + detection_pass(old, new)

        logger.debug(
            "changes_detected",
            total=len(changes),
            breaking=sum(1 for c in changes if c.breaking),
        )
        return changes


def detect_changes(old: SchemaNode, new: SchemaNode) -> List[Change]:
    """기본 패스로 변경 감지 (편의 함수)"""
    return Differ().detect_changes(old, new)
