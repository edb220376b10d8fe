"""
Schema Evolution Models - 스키마 진화 분석 데이터 모델

스키마 트리(타입별 노드), 변경(Change), 마이그레이션 단계, 위험도 평가 등
분석 한 번에 생성되고 소비되는 불변 모델들
"""

from dataclasses import dataclass, field, fields
from enum import Enum
from types import MappingProxyType
from typing import Any, ClassVar, Dict, List, Mapping, Optional, Tuple, Union

from ...exceptions import UnknownCompatibilityLevelError


class _Missing:
    """const 키워드 부재 표시 (None 자체가 유효한 const 값이므로)"""

    _instance = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "MISSING"


MISSING: Any = _Missing()


# ============================================
# Enums
# ============================================

class SchemaType(str, Enum):
    """JSON Schema 기본 타입"""
    STRING = "string"
    NUMBER = "number"
    INTEGER = "integer"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"
    NULL = "null"

    @classmethod
    def from_value(cls, value: Any) -> Optional["SchemaType"]:
        """문자열에서 SchemaType 조회 (인식할 수 없으면 None)"""
        if isinstance(value, str):
            for member in cls:
                if member.value == value:
                    return member
        return None


class ChangeKind(str, Enum):
    """감지되는 구조적 변경 종류"""
    FIELD_ADDED = "FIELD_ADDED"
    FIELD_REMOVED = "FIELD_REMOVED"
    FIELD_TYPE_CHANGED = "FIELD_TYPE_CHANGED"
    REQUIRED_FIELD_ADDED = "REQUIRED_FIELD_ADDED"
    REQUIRED_FIELD_REMOVED = "REQUIRED_FIELD_REMOVED"
    CONSTRAINT_ADDED = "CONSTRAINT_ADDED"
    CONSTRAINT_REMOVED = "CONSTRAINT_REMOVED"
    CONSTRAINT_RELAXED = "CONSTRAINT_RELAXED"
    CONSTRAINT_TIGHTENED = "CONSTRAINT_TIGHTENED"
    ENUM_VALUE_ADDED = "ENUM_VALUE_ADDED"
    ENUM_VALUE_REMOVED = "ENUM_VALUE_REMOVED"
    DEFAULT_VALUE_CHANGED = "DEFAULT_VALUE_CHANGED"
    PROPERTY_ORDER_CHANGED = "PROPERTY_ORDER_CHANGED"
    SCHEMA_METADATA_CHANGED = "SCHEMA_METADATA_CHANGED"


class ChangeDirection(str, Enum):
    """
    변경이 깨뜨리는 호환성 방향

    - BACKWARD: 새 스키마가 이전 데이터를 읽지 못할 수 있음
    - FORWARD: 이전 스키마가 새 데이터를 읽지 못할 수 있음
    - BOTH: 양방향 모두
    """
    FORWARD = "forward"
    BACKWARD = "backward"
    BOTH = "both"


class ChangeImpact(str, Enum):
    """변경 영향도 (breaking 여부와 독립적인 가중치)"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class StepComplexity(str, Enum):
    """마이그레이션 단계 복잡도"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"


class RiskLevel(str, Enum):
    """전체 위험도"""
    LOW = "LOW"
    MEDIUM = "MEDIUM"
    HIGH = "HIGH"
    CRITICAL = "CRITICAL"

    @property
    def rank(self) -> int:
        return _RISK_ORDER.index(self)


_RISK_ORDER = [RiskLevel.LOW, RiskLevel.MEDIUM, RiskLevel.HIGH, RiskLevel.CRITICAL]


class MigrationComplexity(str, Enum):
    """마이그레이션 전체 복잡도 등급"""
    SIMPLE = "SIMPLE"
    MODERATE = "MODERATE"
    COMPLEX = "COMPLEX"
    CRITICAL = "CRITICAL"


class CompatibilityLevel(str, Enum):
    """
    스키마 호환성 레벨

    - NONE: 호환성 검사 없음
    - BACKWARD: 새 스키마가 이전 데이터를 읽을 수 있음
    - FORWARD: 이전 스키마가 새 데이터를 읽을 수 있음
    - FULL: 양방향 호환
    - *_TRANSITIVE: 모든 이전 버전에 대해 호환성 보장
      (두 버전 비교에서는 기본 레벨과 동일하게 취급)
    """
    BACKWARD = "BACKWARD"
    BACKWARD_TRANSITIVE = "BACKWARD_TRANSITIVE"
    FORWARD = "FORWARD"
    FORWARD_TRANSITIVE = "FORWARD_TRANSITIVE"
    FULL = "FULL"
    FULL_TRANSITIVE = "FULL_TRANSITIVE"
    NONE = "NONE"

    @classmethod
    def _missing_(cls, value: Any):
        if isinstance(value, str):
            normalized = value.strip().upper().replace("-", "_")
            for member in cls:
                if member.value == normalized:
                    return member
        return None

    @classmethod
    def parse(cls, value: Union[str, "CompatibilityLevel"]) -> "CompatibilityLevel":
        """문자열/enum에서 레벨 조회, 실패 시 UnknownCompatibilityLevelError"""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            raise UnknownCompatibilityLevelError(value)

    @property
    def is_transitive(self) -> bool:
        return self.value.endswith("_TRANSITIVE")

    @property
    def base_level(self) -> "CompatibilityLevel":
        """_TRANSITIVE 레벨을 대응하는 비전이 레벨로 변환"""
        if self.is_transitive:
            return CompatibilityLevel(self.value[: -len("_TRANSITIVE")])
        return self


# ============================================
# Schema tree (tagged variant)
# ============================================

# dataclass 필드명 -> JSON Schema 키워드
FIELD_KEYWORDS: Dict[str, str] = {
    "title": "title",
    "description": "description",
    "enum": "enum",
    "const": "const",
    "all_of": "allOf",
    "one_of": "oneOf",
    "any_of": "anyOf",
    "ref": "$ref",
    "min_length": "minLength",
    "max_length": "maxLength",
    "pattern": "pattern",
    "format": "format",
    "minimum": "minimum",
    "maximum": "maximum",
    "exclusive_minimum": "exclusiveMinimum",
    "exclusive_maximum": "exclusiveMaximum",
    "multiple_of": "multipleOf",
    "properties": "properties",
    "required": "required",
    "additional_properties": "additionalProperties",
    "min_properties": "minProperties",
    "max_properties": "maxProperties",
    "items": "items",
    "min_items": "minItems",
    "max_items": "maxItems",
    "unique_items": "uniqueItems",
}

_EMPTY_PROPERTIES: Mapping[str, "SchemaNode"] = MappingProxyType({})


def _empty_properties() -> Mapping[str, "SchemaNode"]:
    return _EMPTY_PROPERTIES


@dataclass(frozen=True)
class SchemaNode:
    """
    스키마 노드 공통 필드

    실제 노드는 선언된 type에 따라 아래 변형 중 하나로 생성되며,
    각 변형은 해당 타입에서 의미 있는 제약 필드만 가진다.
    """
    title: Optional[str] = None
    description: Optional[str] = None
    enum: Optional[Tuple[Any, ...]] = None
    const: Any = MISSING
    all_of: Optional[Tuple["SchemaNode", ...]] = None
    one_of: Optional[Tuple["SchemaNode", ...]] = None
    any_of: Optional[Tuple["SchemaNode", ...]] = None
    ref: Optional[str] = None

    node_type: ClassVar[Optional[SchemaType]] = None

    @property
    def type_label(self) -> Optional[str]:
        """타입 비교용 라벨"""
        return self.node_type.value if self.node_type else None

    def to_dict(self) -> Dict[str, Any]:
        """JSON Schema 형태의 딕셔너리로 변환"""
        result: Dict[str, Any] = {}
        if self.type_label is not None:
            result["type"] = self.type_label
        for f in fields(self):
            value = getattr(self, f.name)
            if value is None or value is MISSING:
                continue
            keyword = FIELD_KEYWORDS.get(f.name)
            if keyword is None:
                continue
            if f.name == "properties":
                if not value:
                    continue
                result[keyword] = {name: node.to_dict() for name, node in value.items()}
            elif f.name == "required":
                if value:
                    result[keyword] = list(value)
            else:
                result[keyword] = to_plain(value)
        return result


@dataclass(frozen=True)
class _StringConstraints:
    min_length: Optional[int] = None
    max_length: Optional[int] = None
    pattern: Optional[str] = None
    format: Optional[str] = None


@dataclass(frozen=True)
class _NumericConstraints:
    minimum: Optional[float] = None
    maximum: Optional[float] = None
    exclusive_minimum: Optional[Union[float, bool]] = None
    exclusive_maximum: Optional[Union[float, bool]] = None
    multiple_of: Optional[float] = None


@dataclass(frozen=True)
class _ObjectShape:
    properties: Mapping[str, "SchemaNode"] = field(default_factory=_empty_properties)
    required: Tuple[str, ...] = ()
    additional_properties: Union[bool, "SchemaNode", None] = None
    min_properties: Optional[int] = None
    max_properties: Optional[int] = None


@dataclass(frozen=True)
class _ArrayShape:
    items: Optional["SchemaNode"] = None
    min_items: Optional[int] = None
    max_items: Optional[int] = None
    unique_items: Optional[bool] = None


@dataclass(frozen=True)
class StringNode(SchemaNode, _StringConstraints):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.STRING


@dataclass(frozen=True)
class NumberNode(SchemaNode, _NumericConstraints):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.NUMBER


@dataclass(frozen=True)
class IntegerNode(SchemaNode, _NumericConstraints):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.INTEGER


@dataclass(frozen=True)
class BooleanNode(SchemaNode):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.BOOLEAN


@dataclass(frozen=True)
class NullNode(SchemaNode):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.NULL


@dataclass(frozen=True)
class ObjectNode(SchemaNode, _ObjectShape):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.OBJECT


@dataclass(frozen=True)
class ArrayNode(SchemaNode, _ArrayShape):
    node_type: ClassVar[Optional[SchemaType]] = SchemaType.ARRAY


@dataclass(frozen=True)
class UnknownNode(SchemaNode, _ObjectShape, _ArrayShape, _StringConstraints, _NumericConstraints):
    """
    타입 미선언 / 인식 불가 / 타입 목록 노드

    타입이 정해지지 않았으므로 모든 키워드가 의미를 가질 수 있다.
    """
    type_names: Tuple[str, ...] = ()

    @property
    def type_label(self) -> Optional[str]:
        """타입 목록은 순서와 무관하게 비교되도록 정렬된 라벨 사용"""
        if not self.type_names:
            return None
        return "|".join(sorted(set(self.type_names)))

    def to_dict(self) -> Dict[str, Any]:
        result = super().to_dict()
        names = sorted(set(self.type_names))
        if len(names) == 1:
            result["type"] = names[0]
        elif names:
            result["type"] = names
        return result


@dataclass(frozen=True)
class BooleanSchemaNode(SchemaNode):
    """
    boolean 스키마 (true: 모든 값 허용, false: 어떤 값도 허용하지 않음)
    """
    value: bool = True

    def to_dict(self) -> Any:
        """boolean 스키마는 JSON에서도 boolean 그대로 표현"""
        return self.value


def rejects_everything(node: Optional[SchemaNode]) -> bool:
    """리터럴 false 스키마 여부"""
    return isinstance(node, BooleanSchemaNode) and not node.value


NODE_CLASSES: Dict[SchemaType, type] = {
    SchemaType.STRING: StringNode,
    SchemaType.NUMBER: NumberNode,
    SchemaType.INTEGER: IntegerNode,
    SchemaType.BOOLEAN: BooleanNode,
    SchemaType.NULL: NullNode,
    SchemaType.OBJECT: ObjectNode,
    SchemaType.ARRAY: ArrayNode,
}


def properties_of(node: SchemaNode) -> Mapping[str, SchemaNode]:
    """노드의 properties (없으면 빈 매핑)"""
    return getattr(node, "properties", None) or _EMPTY_PROPERTIES


def required_of(node: SchemaNode) -> Tuple[str, ...]:
    """노드의 required 목록 (없으면 빈 튜플)"""
    return getattr(node, "required", None) or ()


def constraint_of(node: SchemaNode, name: str) -> Any:
    """제약 필드 조회 - 해당 변형에 없는 필드는 부재(None)로 취급"""
    return getattr(node, name, None)


def to_plain(value: Any) -> Any:
    """모델 값을 JSON 호환 값으로 변환"""
    if isinstance(value, SchemaNode):
        return value.to_dict()
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, (tuple, list)):
        return [to_plain(v) for v in value]
    if isinstance(value, Mapping):
        return {k: to_plain(v) for k, v in value.items()}
    return value


def json_key(value: Any) -> Any:
    """
    JSON 의미 기준 비교 키

    Python에서는 True == 1, False == 0 이지만 JSON에서는 서로 다른 값이므로
    boolean과 숫자를 구분한다. 스키마 노드는 JSON 형태로 변환 후 비교한다.
    """
    value = to_plain(value)
    if isinstance(value, bool):
        return ("boolean", value)
    if isinstance(value, (int, float)):
        return ("number", value)
    if isinstance(value, str):
        return ("string", value)
    if value is None:
        return ("null",)
    if isinstance(value, list):
        return ("array", tuple(json_key(v) for v in value))
    if isinstance(value, Mapping):
        return ("object", tuple(sorted((str(k), json_key(v)) for k, v in value.items())))
    return ("other", repr(value))


# ============================================
# Analysis results
# ============================================

@dataclass(frozen=True)
class Change:
    """감지된 구조적 변경 하나"""
    kind: ChangeKind
    field: str
    path: str
    breaking: bool
    direction: ChangeDirection
    impact: ChangeImpact
    description: str
    old_value: Any = MISSING
    new_value: Any = MISSING

    @property
    def breaks_backward(self) -> bool:
        return self.breaking and self.direction in (ChangeDirection.BACKWARD, ChangeDirection.BOTH)

    @property
    def breaks_forward(self) -> bool:
        return self.breaking and self.direction in (ChangeDirection.FORWARD, ChangeDirection.BOTH)

    def to_dict(self) -> Dict[str, Any]:
        """딕셔너리로 변환"""
        result = {
            "kind": self.kind.value,
            "field": self.field,
            "path": self.path,
            "breaking": self.breaking,
            "direction": self.direction.value,
            "impact": self.impact.value,
            "description": self.description,
        }
        if self.old_value is not MISSING:
            result["old_value"] = to_plain(self.old_value)
        if self.new_value is not MISSING:
            result["new_value"] = to_plain(self.new_value)
        return result


@dataclass(frozen=True)
class MigrationStep:
    """마이그레이션 단계"""
    action: str
    field: str
    description: str
    code: Optional[str] = None
    automated: bool = False
    complexity: StepComplexity = StepComplexity.MEDIUM

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "action": to_plain(self.action),
            "field": self.field,
            "description": self.description,
            "automated": self.automated,
            "complexity": self.complexity.value,
        }
        if self.code is not None:
            result["code"] = self.code
        return result


@dataclass(frozen=True)
class RiskAssessment:
    """위험도 평가"""
    overall_risk: RiskLevel
    breaking_changes: int
    recommended_actions: Tuple[str, ...] = ()
    rollback_plan: Tuple[str, ...] = ()
    affected_consumers: Optional[Tuple[str, ...]] = None

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "overall_risk": self.overall_risk.value,
            "breaking_changes": self.breaking_changes,
            "recommended_actions": list(self.recommended_actions),
            "rollback_plan": list(self.rollback_plan),
        }
        if self.affected_consumers is not None:
            result["affected_consumers"] = list(self.affected_consumers)
        return result


@dataclass(frozen=True)
class EvolutionAnalysis:
    """
    스키마 진화 분석 결과

    분석 호출마다 새로 생성되며 이후 변경되지 않는다.
    """
    is_backward_compatible: bool
    is_forward_compatible: bool
    changes: Tuple[Change, ...]
    migration_path: Tuple[MigrationStep, ...]
    risk_assessment: RiskAssessment

    @property
    def breaking_changes(self) -> List[Change]:
        return [c for c in self.changes if c.breaking]

    @property
    def has_changes(self) -> bool:
        return len(self.changes) > 0

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_backward_compatible": self.is_backward_compatible,
            "is_forward_compatible": self.is_forward_compatible,
            "changes": [c.to_dict() for c in self.changes],
            "migration_path": [s.to_dict() for s in self.migration_path],
            "risk_assessment": self.risk_assessment.to_dict(),
            "change_count": len(self.changes),
            "breaking_count": len(self.breaking_changes),
        }
