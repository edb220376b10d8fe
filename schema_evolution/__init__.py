"""
Schema evolution analysis engine.

Compares two versions of a JSON Schema, classifies every structural
difference, decides registry compatibility levels and produces migration
guidance with a risk assessment.
"""

from .services.evolution import (
    # Operations
    analyze_evolution,
    check_compatibility_level,
    check_against_history,
    validate_evolution,
    parse_schema,
    validate_schema,
    # Schema tree
    SchemaNode,
    StringNode,
    NumberNode,
    IntegerNode,
    BooleanNode,
    NullNode,
    ObjectNode,
    ArrayNode,
    UnknownNode,
    BooleanSchemaNode,
    ParseResult,
    # Enums
    ChangeKind,
    ChangeDirection,
    ChangeImpact,
    CompatibilityLevel,
    JsonSchemaDraft,
    MigrationComplexity,
    RiskLevel,
    SchemaType,
    StepComplexity,
    # Results
    Change,
    EvolutionAnalysis,
    MigrationStep,
    RiskAssessment,
    EvolutionValidationResult,
    EvolutionValidator,
    ValidationError,
    ValidationResult,
)
from .models import EvolutionValidationOptions, SchemaEvolutionContext
from .exceptions import (
    SchemaEvolutionException,
    SchemaParseError,
    InvalidSchemaError,
    UnknownCompatibilityLevelError,
)

__all__ = [
    "analyze_evolution",
    "check_compatibility_level",
    "check_against_history",
    "validate_evolution",
    "parse_schema",
    "validate_schema",
    "SchemaNode",
    "StringNode",
    "NumberNode",
    "IntegerNode",
    "BooleanNode",
    "NullNode",
    "ObjectNode",
    "ArrayNode",
    "UnknownNode",
    "BooleanSchemaNode",
    "ParseResult",
    "ChangeKind",
    "ChangeDirection",
    "ChangeImpact",
    "CompatibilityLevel",
    "JsonSchemaDraft",
    "MigrationComplexity",
    "RiskLevel",
    "SchemaType",
    "StepComplexity",
    "Change",
    "EvolutionAnalysis",
    "MigrationStep",
    "RiskAssessment",
    "EvolutionValidationResult",
    "EvolutionValidator",
    "ValidationError",
    "ValidationResult",
    "EvolutionValidationOptions",
    "SchemaEvolutionContext",
    "SchemaEvolutionException",
    "SchemaParseError",
    "InvalidSchemaError",
    "UnknownCompatibilityLevelError",
]

__version__ = "1.0.0"
