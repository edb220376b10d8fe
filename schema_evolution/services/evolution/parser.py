"""
Schema Parser - JSON 문서를 스키마 트리로 변환

파싱 실패는 예외가 아니라 ParseResult로 반환된다.
문서 내부의 잘못된 키워드 값은 오류가 아니라 부재로 취급한다.
"""

import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Any, Dict, List, Mapping, Optional, Tuple, Union

from ...core import get_logger
from ...exceptions import SchemaParseError
from .models import (
    MISSING,
    NODE_CLASSES,
    BooleanSchemaNode,
    SchemaNode,
    SchemaType,
    UnknownNode,
)

logger = get_logger(__name__)


SchemaSource = Union[str, bytes, Mapping[str, Any]]

_NUMBER_KEYWORDS = {
    "minimum": "minimum",
    "maximum": "maximum",
    "multiple_of": "multipleOf",
}

_STRING_KEYWORDS = {
    "pattern": "pattern",
    "format": "format",
}


@dataclass(frozen=True)
class ParseResult:
    """파싱 결과 (성공 시 node, 실패 시 error)"""
    ok: bool
    node: Optional[SchemaNode] = None
    error: Optional[str] = None

    @classmethod
    def success(cls, node: SchemaNode) -> "ParseResult":
        return cls(ok=True, node=node)

    @classmethod
    def failure(cls, error: str) -> "ParseResult":
        return cls(ok=False, error=error)

    def unwrap(self) -> SchemaNode:
        """성공 시 노드 반환, 실패 시 SchemaParseError"""
        if not self.ok or self.node is None:
            raise SchemaParseError(self.error or "unknown error")
        return self.node


def parse_schema(source: SchemaSource) -> ParseResult:
    """
    JSON 텍스트 또는 디코딩된 매핑을 스키마 트리로 변환

    Args:
        source: JSON 문자열/바이트 또는 dict

    Returns:
        ParseResult
    """
    document: Any = source
    if isinstance(source, (str, bytes, bytearray)):
        try:
            document = json.loads(source)
        except (ValueError, TypeError) as e:
            logger.debug("schema_parse_failed", reason=str(e))
            return ParseResult.failure(f"Invalid JSON: {e}")

    if not isinstance(document, Mapping):
        return ParseResult.failure(
            f"Schema must be a JSON object, got {type(document).__name__}"
        )

    return ParseResult.success(build_node(document))


def to_schema_node(value: Union[SchemaNode, SchemaSource]) -> SchemaNode:
    """SchemaNode는 그대로, 그 외에는 파싱 후 반환 (실패 시 SchemaParseError)"""
    if isinstance(value, SchemaNode):
        return value
    return parse_schema(value).unwrap()


def build_node(document: Mapping[str, Any]) -> SchemaNode:
    """디코딩된 스키마 객체에서 타입별 노드 생성"""
    raw_type = document.get("type")
    schema_type = SchemaType.from_value(raw_type)

    kwargs: Dict[str, Any] = _common_kwargs(document)

    if schema_type is None:
        kwargs.update(_string_kwargs(document))
        kwargs.update(_numeric_kwargs(document))
        kwargs.update(_object_kwargs(document))
        kwargs.update(_array_kwargs(document))
        kwargs["type_names"] = _type_names(raw_type)
        return UnknownNode(**kwargs)

    if schema_type == SchemaType.STRING:
        kwargs.update(_string_kwargs(document))
    elif schema_type in (SchemaType.NUMBER, SchemaType.INTEGER):
        kwargs.update(_numeric_kwargs(document))
    elif schema_type == SchemaType.OBJECT:
        kwargs.update(_object_kwargs(document))
    elif schema_type == SchemaType.ARRAY:
        kwargs.update(_array_kwargs(document))

    return NODE_CLASSES[schema_type](**kwargs)


def _type_names(raw_type: Any) -> Tuple[str, ...]:
    if isinstance(raw_type, str):
        return (raw_type,)
    if isinstance(raw_type, (list, tuple)):
        return tuple(t for t in raw_type if isinstance(t, str))
    return ()


def _common_kwargs(document: Mapping[str, Any]) -> Dict[str, Any]:
    enum_values = document.get("enum")
    ref = document.get("$ref")
    return {
        "title": _as_str(document.get("title")),
        "description": _as_str(document.get("description")),
        "enum": tuple(enum_values) if isinstance(enum_values, list) else None,
        "const": document["const"] if "const" in document else MISSING,
        "all_of": _subschemas(document.get("allOf")),
        "one_of": _subschemas(document.get("oneOf")),
        "any_of": _subschemas(document.get("anyOf")),
        "ref": ref if isinstance(ref, str) else None,
    }


def _string_kwargs(document: Mapping[str, Any]) -> Dict[str, Any]:
    kwargs: Dict[str, Any] = {
        "min_length": _as_int(document.get("minLength")),
        "max_length": _as_int(document.get("maxLength")),
    }
    kwargs.update({name: _as_str(document.get(key)) for name, key in _STRING_KEYWORDS.items()})
    return kwargs


def _numeric_kwargs(document: Mapping[str, Any]) -> Dict[str, Any]:
    kwargs = {name: _as_number(document.get(key)) for name, key in _NUMBER_KEYWORDS.items()}
    # draft-04는 boolean, draft-06+는 숫자
    kwargs["exclusive_minimum"] = _as_number_or_bool(document.get("exclusiveMinimum"))
    kwargs["exclusive_maximum"] = _as_number_or_bool(document.get("exclusiveMaximum"))
    return kwargs


def _object_kwargs(document: Mapping[str, Any]) -> Dict[str, Any]:
    raw_properties = document.get("properties")
    properties: Dict[str, SchemaNode] = {}
    if isinstance(raw_properties, Mapping):
        for name, sub in raw_properties.items():
            if isinstance(sub, Mapping):
                properties[str(name)] = build_node(sub)
            elif isinstance(sub, bool):
                properties[str(name)] = BooleanSchemaNode(value=sub)

    raw_required = document.get("required")
    required: List[str] = []
    if isinstance(raw_required, list):
        for name in raw_required:
            if isinstance(name, str) and name not in required:
                required.append(name)

    additional = document.get("additionalProperties")
    if isinstance(additional, bool):
        additional_properties: Any = additional
    elif isinstance(additional, Mapping):
        additional_properties = build_node(additional)
    else:
        additional_properties = None

    return {
        "properties": MappingProxyType(properties),
        "required": tuple(required),
        "additional_properties": additional_properties,
        "min_properties": _as_int(document.get("minProperties")),
        "max_properties": _as_int(document.get("maxProperties")),
    }


def _array_kwargs(document: Mapping[str, Any]) -> Dict[str, Any]:
    items = document.get("items")
    unique = document.get("uniqueItems")
    return {
        "items": build_node(items) if isinstance(items, Mapping) else None,
        "min_items": _as_int(document.get("minItems")),
        "max_items": _as_int(document.get("maxItems")),
        "unique_items": unique if isinstance(unique, bool) else None,
    }


def _subschemas(value: Any) -> Optional[Tuple[SchemaNode, ...]]:
    if not isinstance(value, list):
        return None
    return tuple(_subschema(v) for v in value)


def _subschema(value: Any) -> SchemaNode:
    if isinstance(value, Mapping):
        return build_node(value)
    if isinstance(value, bool):
        return BooleanSchemaNode(value=value)
    return UnknownNode()


def _as_str(value: Any) -> Optional[str]:
    return value if isinstance(value, str) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float) and value.is_integer():
        return int(value)
    return None


def _as_number(value: Any) -> Optional[float]:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return None
    return value


def _as_number_or_bool(value: Any) -> Optional[Union[float, bool]]:
    if isinstance(value, bool):
        return value
    return _as_number(value)
