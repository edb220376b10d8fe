"""
Schema Structure Validator - 단일 스키마 문서의 구조적 유효성 검증

진화 분석 전에 base/candidate 스키마 각각이 올바른 JSON Schema인지 확인한다.
문서(데이터)를 스키마에 대해 검증하는 기능이 아니다.
"""

import re
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Mapping, Optional, Union

from ...core import get_logger

logger = get_logger(__name__)


class JsonSchemaDraft(str, Enum):
    """지원 JSON Schema draft"""
    DRAFT_04 = "draft-04"
    DRAFT_07 = "draft-07"
    DRAFT_2019_09 = "draft-2019-09"
    DRAFT_2020_12 = "draft-2020-12"


DRAFT_SCHEMA_URIS: Dict[JsonSchemaDraft, str] = {
    JsonSchemaDraft.DRAFT_04: "http://json-schema.org/draft-04/schema#",
    JsonSchemaDraft.DRAFT_07: "http://json-schema.org/draft-07/schema#",
    JsonSchemaDraft.DRAFT_2019_09: "https://json-schema.org/draft/2019-09/schema",
    JsonSchemaDraft.DRAFT_2020_12: "https://json-schema.org/draft/2020-12/schema",
}

VALID_TYPES = {"string", "number", "integer", "boolean", "object", "array", "null"}

COMMON_FORMATS = {
    "date", "time", "date-time", "email", "hostname", "ipv4", "ipv6", "uri", "uuid",
}


@dataclass
class ValidationError:
    """검증 오류/경고/정보 항목"""
    path: str
    message: str
    severity: str  # "error", "warning", "info"
    suggestion: Optional[str] = None
    property: Optional[str] = None

    def is_error(self) -> bool:
        return self.severity == "error"

    def to_dict(self) -> Dict[str, Any]:
        result = {
            "path": self.path,
            "message": self.message,
            "severity": self.severity,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.property:
            result["property"] = self.property
        return result


@dataclass
class ValidationResult:
    """스키마 구조 검증 결과"""
    is_valid: bool
    draft: JsonSchemaDraft
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)
    properties_validated: int = 0
    validated_at: datetime = field(default_factory=datetime.utcnow)

    @property
    def summary(self) -> Dict[str, int]:
        return {
            "total_errors": len(self.errors),
            "total_warnings": len(self.warnings),
            "properties_validated": self.properties_validated,
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "is_valid": self.is_valid,
            "draft": self.draft.value,
            "errors": [e.to_dict() for e in self.errors],
            "warnings": [w.to_dict() for w in self.warnings],
            "summary": self.summary,
            "validated_at": self.validated_at.isoformat(),
        }


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _both_numbers(a: Any, b: Any) -> bool:
    return _is_number(a) and _is_number(b)


class SchemaStructureValidator:
    """
    JSON Schema 구조 검증기

    검사 항목:
    - 기본 구조 (type/properties/$ref 중 하나 필수, $schema URI, 빈 title)
    - draft별 키워드 호환성
    - $ref 대상 존재 여부
    - property별 제약 일관성 (재귀)
    - definitions
    - required 목록과 properties 일치
    """

    def validate_schema(
        self,
        schema: Mapping[str, Any],
        draft: Union[JsonSchemaDraft, str] = JsonSchemaDraft.DRAFT_07
    ) -> ValidationResult:
        """
        스키마 문서 하나를 검증

        Args:
            schema: 디코딩된 JSON Schema 문서
            draft: 대상 draft

        Returns:
            ValidationResult
        """
        draft = JsonSchemaDraft(draft)
        errors: List[ValidationError] = []
        warnings: List[ValidationError] = []
        properties_validated = 0

        if not isinstance(schema, Mapping):
            errors.append(ValidationError(
                path="$",
                message="Schema must be a JSON object",
                severity="error",
            ))
            return ValidationResult(is_valid=False, draft=draft, errors=errors)

        self._validate_basic_structure(schema, errors, warnings)
        self._validate_draft_compliance(schema, draft, warnings)
        self._validate_references(schema, errors)

        properties = schema.get("properties")
        if isinstance(properties, Mapping):
            properties_validated = self._validate_properties(properties, errors, warnings)

        definitions = schema.get("definitions")
        if isinstance(definitions, Mapping):
            self._validate_definitions(definitions, errors, warnings)

        self._validate_constraints(schema, errors)

        result = ValidationResult(
            is_valid=len(errors) == 0,
            draft=draft,
            errors=errors,
            warnings=warnings,
            properties_validated=properties_validated,
        )
        logger.debug(
            "schema_structure_validated",
            draft=draft.value,
            is_valid=result.is_valid,
            errors=len(errors),
            warnings=len(warnings),
        )
        return result

    def get_supported_drafts(self) -> List[JsonSchemaDraft]:
        return list(JsonSchemaDraft)

    def get_draft_schema_uri(self, draft: Union[JsonSchemaDraft, str]) -> str:
        return DRAFT_SCHEMA_URIS[JsonSchemaDraft(draft)]

    # ------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------

    def _validate_basic_structure(
        self,
        schema: Mapping[str, Any],
        errors: List[ValidationError],
        warnings: List[ValidationError]
    ) -> None:
        if not schema.get("type") and not schema.get("properties") and not schema.get("$ref"):
            errors.append(ValidationError(
                path="$",
                message="Schema must have at least one of: type, properties, or $ref",
                severity="error",
                suggestion='Add a "type" property or define "properties"',
            ))

        schema_uri = schema.get("$schema")
        if schema_uri and schema_uri not in DRAFT_SCHEMA_URIS.values():
            errors.append(ValidationError(
                path="$schema",
                message="Invalid or unsupported $schema URI",
                severity="error",
                suggestion="Use a supported JSON Schema draft URI",
            ))

        title = schema.get("title")
        if isinstance(title, str) and title and not title.strip():
            warnings.append(ValidationError(
                path="$.title",
                message="Schema title should not be empty",
                severity="warning",
                suggestion="Provide a meaningful title or remove the title property",
            ))

    def _validate_draft_compliance(
        self,
        schema: Mapping[str, Any],
        draft: JsonSchemaDraft,
        warnings: List[ValidationError]
    ) -> None:
        if draft == JsonSchemaDraft.DRAFT_04:
            if "const" in schema:
                warnings.append(ValidationError(
                    path="$.const",
                    message='"const" keyword is not supported in JSON Schema Draft 4',
                    severity="warning",
                    suggestion='Use "enum" with a single value instead, or upgrade to Draft 7+',
                ))
            if schema.get("if") or schema.get("then") or schema.get("else"):
                warnings.append(ValidationError(
                    path="$",
                    message="Conditional keywords (if/then/else) are not supported in Draft 4",
                    severity="warning",
                    suggestion="Upgrade to Draft 7+ or use alternative validation approaches",
                ))

        elif draft == JsonSchemaDraft.DRAFT_07:
            if "unevaluatedProperties" in schema:
                warnings.append(ValidationError(
                    path="$.unevaluatedProperties",
                    message='"unevaluatedProperties" is not available in Draft 7',
                    severity="warning",
                    suggestion="This keyword was introduced in Draft 2019-09",
                ))

        elif draft == JsonSchemaDraft.DRAFT_2019_09:
            if isinstance(schema.get("dependencies"), Mapping):
                warnings.append(ValidationError(
                    path="$.dependencies",
                    message='"dependencies" keyword structure changed in Draft 2019-09',
                    severity="warning",
                    suggestion='Consider using "dependentRequired" and "dependentSchemas"',
                ))

        elif draft == JsonSchemaDraft.DRAFT_2020_12:
            if "$recursiveRef" in schema:
                warnings.append(ValidationError(
                    path="$.$recursiveRef",
                    message='"$recursiveRef" was replaced with "$dynamicRef" in Draft 2020-12',
                    severity="warning",
                    suggestion='Use "$dynamicRef" instead',
                ))

    # ------------------------------------------------------------
    # References
    # ------------------------------------------------------------

    def _validate_references(self, schema: Mapping[str, Any], errors: List[ValidationError]) -> None:
        definitions = schema.get("definitions")
        if not isinstance(definitions, Mapping):
            definitions = {}

        for ref in self._extract_references(schema):
            if ref.startswith("#/definitions/"):
                name = ref[len("#/definitions/"):]
                if name not in definitions:
                    errors.append(ValidationError(
                        path=ref,
                        message=f'Reference "{ref}" points to undefined definition',
                        severity="error",
                        suggestion=f'Add definition "{name}" or fix the reference',
                    ))
            elif ref.startswith("#/") and not self._is_valid_json_pointer(ref):
                errors.append(ValidationError(
                    path=ref,
                    message=f"Invalid JSON Pointer reference: {ref}",
                    severity="error",
                    suggestion="Use valid JSON Pointer syntax (e.g., #/properties/fieldName)",
                ))

    def _extract_references(self, obj: Any, refs: Optional[List[str]] = None) -> List[str]:
        if refs is None:
            refs = []
        if isinstance(obj, Mapping):
            ref = obj.get("$ref")
            if isinstance(ref, str):
                refs.append(ref)
            for value in obj.values():
                self._extract_references(value, refs)
        elif isinstance(obj, list):
            for value in obj:
                self._extract_references(value, refs)
        return refs

    @staticmethod
    def _is_valid_json_pointer(pointer: str) -> bool:
        return pointer.startswith("#/") and "//" not in pointer

    # ------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------

    def _validate_properties(
        self,
        properties: Mapping[str, Any],
        errors: List[ValidationError],
        warnings: List[ValidationError],
        base_path: str = "$.properties"
    ) -> int:
        """property 구조를 재귀적으로 검증하고 검증한 property 수를 반환"""
        count = 0

        for name, prop in properties.items():
            path = f"{base_path}.{name}"
            count += 1

            if not isinstance(prop, Mapping):
                continue

            self._validate_property_structure(prop, path, errors, warnings)

            nested = prop.get("properties")
            if isinstance(nested, Mapping):
                count += self._validate_properties(nested, errors, warnings, f"{path}.properties")

            items = prop.get("items")
            if prop.get("type") == "array" and isinstance(items, Mapping):
                item_properties = items.get("properties")
                if isinstance(item_properties, Mapping):
                    count += self._validate_properties(
                        item_properties, errors, warnings, f"{path}.items.properties"
                    )

        return count

    def _validate_property_structure(
        self,
        prop: Mapping[str, Any],
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationError]
    ) -> None:
        prop_type = prop.get("type")

        if prop_type and not (isinstance(prop_type, str) and prop_type in VALID_TYPES):
            errors.append(ValidationError(
                path=path,
                message=f"Invalid type: {prop_type}",
                severity="error",
                suggestion="Use valid JSON Schema types: string, number, integer, boolean, object, array, null",
            ))

        if prop_type == "string":
            self._validate_string_constraints(prop, path, errors)
        elif prop_type in ("number", "integer"):
            self._validate_numeric_constraints(prop, path, errors)
        elif prop_type == "array":
            self._validate_array_constraints(prop, path, errors, warnings)
        elif prop_type == "object":
            self._validate_object_constraints(prop, path, errors)

        fmt = prop.get("format")
        if fmt:
            self._validate_format(fmt, prop_type, path, warnings)

    def _validate_string_constraints(
        self,
        prop: Mapping[str, Any],
        path: str,
        errors: List[ValidationError]
    ) -> None:
        min_length, max_length = prop.get("minLength"), prop.get("maxLength")
        if _both_numbers(min_length, max_length) and min_length > max_length:
            errors.append(ValidationError(
                path=path,
                message="minLength cannot be greater than maxLength",
                severity="error",
                suggestion="Ensure minLength <= maxLength",
            ))

        pattern = prop.get("pattern")
        if pattern:
            try:
                re.compile(pattern)
            except (re.error, TypeError):
                errors.append(ValidationError(
                    path=f"{path}.pattern",
                    message="Invalid regular expression pattern",
                    severity="error",
                    suggestion="Use valid regular expression syntax",
                ))

    def _validate_numeric_constraints(
        self,
        prop: Mapping[str, Any],
        path: str,
        errors: List[ValidationError]
    ) -> None:
        minimum, maximum = prop.get("minimum"), prop.get("maximum")
        if _both_numbers(minimum, maximum) and minimum > maximum:
            errors.append(ValidationError(
                path=path,
                message="minimum cannot be greater than maximum",
                severity="error",
                suggestion="Ensure minimum <= maximum",
            ))

        multiple_of = prop.get("multipleOf")
        if _is_number(multiple_of) and multiple_of <= 0:
            errors.append(ValidationError(
                path=f"{path}.multipleOf",
                message="multipleOf must be greater than 0",
                severity="error",
                suggestion="Use a positive number for multipleOf",
            ))

    def _validate_array_constraints(
        self,
        prop: Mapping[str, Any],
        path: str,
        errors: List[ValidationError],
        warnings: List[ValidationError]
    ) -> None:
        min_items, max_items = prop.get("minItems"), prop.get("maxItems")
        if _both_numbers(min_items, max_items) and min_items > max_items:
            errors.append(ValidationError(
                path=path,
                message="minItems cannot be greater than maxItems",
                severity="error",
                suggestion="Ensure minItems <= maxItems",
            ))

        if not prop.get("items"):
            warnings.append(ValidationError(
                path=path,
                message="Array type should define items schema",
                severity="warning",
                suggestion='Add "items" property to specify array element schema',
            ))

    def _validate_object_constraints(
        self,
        prop: Mapping[str, Any],
        path: str,
        errors: List[ValidationError]
    ) -> None:
        min_props, max_props = prop.get("minProperties"), prop.get("maxProperties")
        if _both_numbers(min_props, max_props) and min_props > max_props:
            errors.append(ValidationError(
                path=path,
                message="minProperties cannot be greater than maxProperties",
                severity="error",
                suggestion="Ensure minProperties <= maxProperties",
            ))

    def _validate_format(
        self,
        fmt: Any,
        prop_type: Any,
        path: str,
        warnings: List[ValidationError]
    ) -> None:
        if fmt not in COMMON_FORMATS:
            warnings.append(ValidationError(
                path=f"{path}.format",
                message=f'Format "{fmt}" may not be widely supported',
                severity="warning",
                suggestion="Use standard formats when possible",
            ))

        if prop_type != "string":
            warnings.append(ValidationError(
                path=f"{path}.format",
                message="Format is typically used with string type",
                severity="warning",
                suggestion="Consider if format is appropriate for this type",
            ))

    # ------------------------------------------------------------
    # Definitions / constraints
    # ------------------------------------------------------------

    def _validate_definitions(
        self,
        definitions: Mapping[str, Any],
        errors: List[ValidationError],
        warnings: List[ValidationError]
    ) -> None:
        for name, definition in definitions.items():
            if not isinstance(definition, Mapping):
                continue
            path = f"$.definitions.{name}"
            self._validate_property_structure(definition, path, errors, warnings)

            properties = definition.get("properties")
            if isinstance(properties, Mapping):
                self._validate_properties(properties, errors, warnings, f"{path}.properties")

    def _validate_constraints(self, schema: Mapping[str, Any], errors: List[ValidationError]) -> None:
        required = schema.get("required")
        if not isinstance(required, list):
            return

        properties = schema.get("properties")
        if not isinstance(properties, Mapping):
            properties = {}

        for name in required:
            if name not in properties:
                errors.append(ValidationError(
                    path="$.required",
                    message=f'Required property "{name}" is not defined in properties',
                    severity="error",
                    property=str(name),
                    suggestion=f'Add "{name}" to properties or remove from required array',
                ))


def validate_schema(
    schema: Mapping[str, Any],
    draft: Union[JsonSchemaDraft, str] = JsonSchemaDraft.DRAFT_07
) -> ValidationResult:
    """스키마 구조 검증 편의 함수"""
    return SchemaStructureValidator().validate_schema(schema, draft)
