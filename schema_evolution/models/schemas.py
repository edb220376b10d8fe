"""
Pydantic models for evolution validation requests.

Both models accept either snake_case field names or the camelCase aliases
used by schema registry payloads (``baseSchema``, ``strictMode``, ...).
Unset policy fields fall back to the environment-driven EvolutionSettings.
"""

from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from ..core import get_settings
from ..services.evolution.models import CompatibilityLevel
from ..services.evolution.validator import JsonSchemaDraft


def _default_draft() -> JsonSchemaDraft:
    return JsonSchemaDraft(get_settings().default_draft)


def _default_compatibility() -> CompatibilityLevel:
    return CompatibilityLevel.parse(get_settings().default_compatibility)


def _default_allow_breaking() -> bool:
    return get_settings().allow_breaking_changes


def _default_strict_mode() -> bool:
    return get_settings().strict_mode


class SchemaEvolutionContext(BaseModel):
    """
    Base/candidate pair plus the policy the evolution is judged against.

    Schemas are kept as decoded JSON documents; parsing into the typed
    schema tree happens inside the validator.
    """
    base_schema: Dict[str, Any] = Field(
        ...,
        alias="baseSchema",
        description="Currently registered (old) schema document"
    )
    candidate_schema: Dict[str, Any] = Field(
        ...,
        alias="candidateSchema",
        description="Proposed (new) schema document"
    )
    target_draft: JsonSchemaDraft = Field(
        default_factory=_default_draft,
        alias="targetDraft",
        description="JSON Schema draft both documents are validated against"
    )
    compatibility_mode: CompatibilityLevel = Field(
        default_factory=_default_compatibility,
        alias="compatibilityMode",
        description="Compatibility level the evolution must satisfy"
    )
    allow_breaking_changes: bool = Field(
        default_factory=_default_allow_breaking,
        alias="allowBreakingChanges",
        description="Suppress compatibility errors for breaking changes"
    )
    validate_migration_path: bool = Field(
        True,
        alias="validateMigrationPath",
        description="Carried for registry payload parity"
    )

    model_config = {
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "baseSchema": {
                        "type": "object",
                        "properties": {"name": {"type": "string"}},
                    },
                    "candidateSchema": {
                        "type": "object",
                        "properties": {
                            "name": {"type": "string"},
                            "email": {"type": "string"},
                        },
                    },
                    "compatibilityMode": "BACKWARD",
                }
            ]
        }
    }

    @field_validator("compatibility_mode", mode="before")
    @classmethod
    def parse_compatibility_mode(cls, value: Any) -> CompatibilityLevel:
        return CompatibilityLevel.parse(value)


class EvolutionValidationOptions(BaseModel):
    """Switches for the optional checks of validate_evolution()."""
    strict_mode: bool = Field(
        default_factory=_default_strict_mode,
        alias="strictMode",
        description="Raise InvalidSchemaError when either schema is structurally invalid"
    )
    check_backward_compatibility: bool = Field(True, alias="checkBackwardCompatibility")
    check_forward_compatibility: bool = Field(False, alias="checkForwardCompatibility")
    validate_migration_steps: bool = Field(True, alias="validateMigrationSteps")
    generate_migration_code: bool = Field(
        False,
        alias="generateMigrationCode",
        description="Keep code snippets on the recommended migration steps"
    )
    check_semantic_versioning: bool = Field(True, alias="checkSemanticVersioning")

    model_config = {"populate_by_name": True}
