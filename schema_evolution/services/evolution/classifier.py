"""
Change Classifier - 변경 분류 규칙

각 구조적 차이에 대해 breaking 여부, 깨지는 호환성 방향, 영향도를 결정한다.
모든 함수는 순수 함수이며 새 Change 목록을 반환한다.

규칙 요약:
- 타입: 동일하거나 integer -> number 확장만 안전
- enum: 제약 추가는 breaking, 제거는 안전, 값 제거는 breaking, 값 추가는 안전
- 하한(floor) 제약: 값 상승은 breaking
- 상한(ceiling) 제약: 값 하락은 breaking
"""

from enum import Enum
from typing import Any, List, Optional, Sequence, Tuple

from .models import (
    MISSING,
    Change,
    ChangeDirection,
    ChangeImpact,
    ChangeKind,
    SchemaNode,
    SchemaType,
    json_key,
    rejects_everything,
)


class BoundKind(str, Enum):
    """범위 제약 종류"""
    FLOOR = "floor"
    CEILING = "ceiling"


# (필드명, JSON 키워드, 범위 종류) - 비교 순서 = 출력 순서
BOUND_CONSTRAINTS: Tuple[Tuple[str, str, BoundKind], ...] = (
    ("min_length", "minLength", BoundKind.FLOOR),
    ("max_length", "maxLength", BoundKind.CEILING),
    ("minimum", "minimum", BoundKind.FLOOR),
    ("maximum", "maximum", BoundKind.CEILING),
    ("exclusive_minimum", "exclusiveMinimum", BoundKind.FLOOR),
    ("exclusive_maximum", "exclusiveMaximum", BoundKind.CEILING),
    ("min_items", "minItems", BoundKind.FLOOR),
    ("max_items", "maxItems", BoundKind.CEILING),
)

# 타입 확장(Widening) 규칙: 데이터 손실 없이 읽을 수 있는 타입 전환
TYPE_WIDENING_RULES = {
    SchemaType.INTEGER.value: {SchemaType.NUMBER.value},
}


# ============================================
# Type rule
# ============================================

def is_type_compatible(old_type: Optional[str], new_type: Optional[str]) -> bool:
    """
    두 타입의 호환 여부

    동일 타입이거나 integer -> number (integer는 number의 부분집합)일 때만 True.
    타입 목록("null|string")은 이전 목록의 모든 타입이 새 목록에 그대로
    있거나 확장 규칙으로 포함될 때 호환으로 본다.
    """
    if old_type == new_type:
        return True
    if old_type is None or new_type is None:
        return False
    new_types = set(new_type.split("|"))
    return all(
        member in new_types or new_types & TYPE_WIDENING_RULES.get(member, set())
        for member in old_type.split("|")
    )


def classify_type_change(
    field_name: str,
    old_type: Optional[str],
    new_type: Optional[str],
    path: str,
    description: str
) -> List[Change]:
    """타입 변경 분류 (동일하면 빈 목록)"""
    if old_type == new_type:
        return []

    breaking = not is_type_compatible(old_type, new_type)
    return [Change(
        kind=ChangeKind.FIELD_TYPE_CHANGED,
        field=field_name,
        path=path,
        breaking=breaking,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact.HIGH if breaking else ChangeImpact.MEDIUM,
        description=description,
        old_value=old_type,
        new_value=new_type,
    )]


# ============================================
# Enum rule
# ============================================

def _unique(values: Sequence[Any]) -> List[Any]:
    """순서를 유지한 중복 제거 (JSON 값 기준, true와 1은 다른 값)"""
    seen = set()
    result: List[Any] = []
    for value in values:
        key = json_key(value)
        if key not in seen:
            seen.add(key)
            result.append(value)
    return result


def classify_enum_change(
    property_name: str,
    old_enum: Optional[Sequence[Any]],
    new_enum: Optional[Sequence[Any]],
    path: str
) -> List[Change]:
    """enum 제약/값 변경 분류"""
    enum_path = f"{path}.enum"

    if old_enum is None and new_enum is None:
        return []

    if old_enum is None:
        return [Change(
            kind=ChangeKind.CONSTRAINT_ADDED,
            field=property_name,
            path=enum_path,
            breaking=True,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.HIGH,
            description=f"Enum constraint added to property '{property_name}'",
            new_value=list(new_enum),
        )]

    if new_enum is None:
        return [Change(
            kind=ChangeKind.CONSTRAINT_REMOVED,
            field=property_name,
            path=enum_path,
            breaking=False,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.LOW,
            description=f"Enum constraint removed from property '{property_name}'",
            old_value=list(old_enum),
        )]

    old_values = _unique(old_enum)
    new_values = _unique(new_enum)
    old_keys = {json_key(v) for v in old_values}
    new_keys = {json_key(v) for v in new_values}

    removed = [
        Change(
            kind=ChangeKind.ENUM_VALUE_REMOVED,
            field=property_name,
            path=enum_path,
            breaking=True,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.HIGH,
            description=f"Enum value '{value}' removed from property '{property_name}'",
            old_value=value,
        )
        for value in old_values if json_key(value) not in new_keys
    ]
    added = [
        Change(
            kind=ChangeKind.ENUM_VALUE_ADDED,
            field=property_name,
            path=enum_path,
            breaking=False,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.LOW,
            description=f"Enum value '{value}' added to property '{property_name}'",
            new_value=value,
        )
        for value in new_values if json_key(value) not in old_keys
    ]
    return removed + added


# ============================================
# Constraint rules
# ============================================

def _constraint_change(
    property_name: str,
    keyword: str,
    path: str,
    breaking: bool,
    impact: ChangeImpact,
    description: str,
    old_value: Any,
    new_value: Any
) -> Change:
    return Change(
        kind=ChangeKind.CONSTRAINT_TIGHTENED if breaking else ChangeKind.CONSTRAINT_RELAXED,
        field=property_name,
        path=f"{path}.{keyword}",
        breaking=breaking,
        direction=ChangeDirection.BOTH,
        impact=impact,
        description=description,
        old_value=MISSING if old_value is None else old_value,
        new_value=MISSING if new_value is None else new_value,
    )


def classify_bound_change(
    property_name: str,
    keyword: str,
    old_value: Any,
    new_value: Any,
    path: str,
    bound: BoundKind
) -> List[Change]:
    """
    하한/상한 제약 변경 분류

    - 없음 -> 값: 새 제약 (breaking, HIGH)
    - 값 -> 없음: 제약 해제 (안전, LOW)
    - 값 -> 값: 하한 상승 / 상한 하락이면 breaking(HIGH), 아니면 MEDIUM
    """
    if old_value == new_value:
        return []

    if old_value is None:
        return [_constraint_change(
            property_name, keyword, path, True, ChangeImpact.HIGH,
            f"{keyword} constraint added to property '{property_name}': {new_value}",
            old_value, new_value,
        )]

    if new_value is None:
        return [_constraint_change(
            property_name, keyword, path, False, ChangeImpact.LOW,
            f"{keyword} constraint removed from property '{property_name}'",
            old_value, new_value,
        )]

    if bound == BoundKind.FLOOR:
        breaking = new_value > old_value
    else:
        breaking = new_value < old_value

    return [_constraint_change(
        property_name, keyword, path, breaking,
        ChangeImpact.HIGH if breaking else ChangeImpact.MEDIUM,
        f"{keyword} constraint changed for property '{property_name}': {old_value} -> {new_value}",
        old_value, new_value,
    )]


def classify_pattern_change(
    property_name: str,
    old_pattern: Optional[str],
    new_pattern: Optional[str],
    path: str
) -> List[Change]:
    """pattern 변경 분류 - 정규식 포함 관계는 검증하지 않으므로 변경은 breaking"""
    if old_pattern == new_pattern:
        return []

    if new_pattern is None:
        return [_constraint_change(
            property_name, "pattern", path, False, ChangeImpact.LOW,
            f"pattern constraint removed from property '{property_name}'",
            old_pattern, new_pattern,
        )]

    if old_pattern is None:
        description = f"pattern constraint added to property '{property_name}': {new_pattern}"
    else:
        description = (
            f"pattern constraint changed for property '{property_name}': "
            f"'{old_pattern}' -> '{new_pattern}'"
        )
    return [_constraint_change(
        property_name, "pattern", path, True, ChangeImpact.HIGH,
        description, old_pattern, new_pattern,
    )]


def _is_multiple(value: float, divisor: float) -> bool:
    if divisor == 0:
        return False
    ratio = value / divisor
    return abs(ratio - round(ratio)) < 1e-9


def classify_multiple_of_change(
    property_name: str,
    old_value: Optional[float],
    new_value: Optional[float],
    path: str
) -> List[Change]:
    """multipleOf 변경 분류 - 이전 제수가 새 제수의 배수면 완화"""
    if old_value == new_value:
        return []

    if old_value is None:
        return [_constraint_change(
            property_name, "multipleOf", path, True, ChangeImpact.HIGH,
            f"multipleOf constraint added to property '{property_name}': {new_value}",
            old_value, new_value,
        )]

    if new_value is None:
        return [_constraint_change(
            property_name, "multipleOf", path, False, ChangeImpact.LOW,
            f"multipleOf constraint removed from property '{property_name}'",
            old_value, new_value,
        )]

    breaking = not _is_multiple(old_value, new_value)
    return [_constraint_change(
        property_name, "multipleOf", path, breaking,
        ChangeImpact.HIGH if breaking else ChangeImpact.MEDIUM,
        f"multipleOf constraint changed for property '{property_name}': {old_value} -> {new_value}",
        old_value, new_value,
    )]


def classify_unique_items_change(
    property_name: str,
    old_value: Optional[bool],
    new_value: Optional[bool],
    path: str
) -> List[Change]:
    """uniqueItems 변경 분류"""
    old_unique = bool(old_value)
    new_unique = bool(new_value)
    if old_unique == new_unique:
        return []

    if new_unique:
        return [_constraint_change(
            property_name, "uniqueItems", path, True, ChangeImpact.HIGH,
            f"uniqueItems constraint added to property '{property_name}'",
            old_value, new_value,
        )]
    return [_constraint_change(
        property_name, "uniqueItems", path, False, ChangeImpact.LOW,
        f"uniqueItems constraint removed from property '{property_name}'",
        old_value, new_value,
    )]


def classify_boolean_schema_change(
    property_name: str,
    old_node: SchemaNode,
    new_node: SchemaNode,
    path: str
) -> List[Change]:
    """
    false 스키마(어떤 값도 허용하지 않음) 전환

    - 허용 -> false: 모든 기존 값 거부 (breaking, HIGH)
    - false -> 허용: 제약 해제 (안전, LOW)
    """
    old_rejects = rejects_everything(old_node)
    new_rejects = rejects_everything(new_node)
    if old_rejects == new_rejects:
        return []

    if new_rejects:
        return [Change(
            kind=ChangeKind.CONSTRAINT_ADDED,
            field=property_name,
            path=path,
            breaking=True,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.HIGH,
            description=f"Property '{property_name}' no longer accepts any value",
            old_value=old_node,
            new_value=new_node,
        )]
    return [Change(
        kind=ChangeKind.CONSTRAINT_REMOVED,
        field=property_name,
        path=path,
        breaking=False,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact.LOW,
        description=f"Property '{property_name}' now accepts values",
        old_value=old_node,
        new_value=new_node,
    )]


def classify_reference_change(
    field_name: str,
    old_ref: Optional[str],
    new_ref: Optional[str],
    path: str
) -> List[Change]:
    """
    $ref 대상 변경

    참조 대상 스키마는 해석하지 않으므로 추가/변경/제거 모두 breaking
    """
    if old_ref == new_ref:
        return []

    if old_ref is None:
        description = f"Reference to '{new_ref}' added to '{field_name}'"
    elif new_ref is None:
        description = f"Reference to '{old_ref}' removed from '{field_name}'"
    else:
        description = f"Reference of '{field_name}' changed from '{old_ref}' to '{new_ref}'"

    return [Change(
        kind=ChangeKind.SCHEMA_METADATA_CHANGED,
        field=field_name,
        path=f"{path}.$ref",
        breaking=True,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact.HIGH,
        description=description,
        old_value=MISSING if old_ref is None else old_ref,
        new_value=MISSING if new_ref is None else new_ref,
    )]


# ============================================
# Schema-level rules
# ============================================

def classify_composition_change(
    keyword: str,
    old_value: Optional[Tuple[SchemaNode, ...]],
    new_value: Optional[Tuple[SchemaNode, ...]]
) -> List[Change]:
    """
    조합 키워드(allOf/oneOf/anyOf) 변경

    하위 스키마 호환성은 검증하지 않으므로 구조가 다르면 항상 breaking
    """
    if json_key(old_value) == json_key(new_value):
        return []

    return [Change(
        kind=ChangeKind.SCHEMA_METADATA_CHANGED,
        field=keyword,
        path=f"$.{keyword}",
        breaking=True,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact.HIGH,
        description=f"Schema composition ({keyword}) changed",
        old_value=MISSING if old_value is None else old_value,
        new_value=MISSING if new_value is None else new_value,
    )]


def allows_additional_properties(value: Any) -> bool:
    """additionalProperties가 리터럴 false가 아니면 허용"""
    return value is not False


def classify_additional_properties_change(old_value: Any, new_value: Any) -> List[Change]:
    """additionalProperties 허용 -> 금지 전환은 breaking, 반대는 안전"""
    old_allows = allows_additional_properties(old_value)
    new_allows = allows_additional_properties(new_value)

    if old_allows == new_allows:
        return []

    if old_allows:
        return [Change(
            kind=ChangeKind.CONSTRAINT_ADDED,
            field="additionalProperties",
            path="$.additionalProperties",
            breaking=True,
            direction=ChangeDirection.BOTH,
            impact=ChangeImpact.HIGH,
            description="Additional properties are now forbidden",
            old_value=MISSING if old_value is None else old_value,
            new_value=new_value,
        )]

    return [Change(
        kind=ChangeKind.CONSTRAINT_REMOVED,
        field="additionalProperties",
        path="$.additionalProperties",
        breaking=False,
        direction=ChangeDirection.BOTH,
        impact=ChangeImpact.LOW,
        description="Additional properties are now allowed",
        old_value=old_value,
        new_value=MISSING if new_value is None else new_value,
    )]
