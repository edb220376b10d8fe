"""
Schema Evolution - 스키마 버전 간 진화 분석 엔진

두 JSON Schema 버전을 비교하여 구조적 변경을 분류하고,
레지스트리 호환성 레벨(BACKWARD / FORWARD / FULL / NONE, *_TRANSITIVE) 판정,
마이그레이션 경로와 위험도 평가를 생성합니다.

주요 기능:
- 스키마 파싱 (타입별 불변 노드 트리)
- 변경 감지 및 분류 (breaking 여부, 방향, 영향도)
- 호환성 레벨 판정 및 버전 이력 대비 검사
- 마이그레이션 경로 / 위험도 평가
- 단일 스키마 구조 검증 및 진화 정책 검증

사용 예시:
    from schema_evolution.services.evolution import analyze_evolution, check_compatibility_level

    analysis = analyze_evolution(old_schema, new_schema)
    if not check_compatibility_level(analysis.changes, "BACKWARD"):
        for change in analysis.breaking_changes:
            print(change.description)
"""

# Models
from .models import (
    MISSING,
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
    # Enums
    SchemaType,
    ChangeKind,
    ChangeDirection,
    ChangeImpact,
    StepComplexity,
    RiskLevel,
    MigrationComplexity,
    CompatibilityLevel,
    # Results
    Change,
    MigrationStep,
    RiskAssessment,
    EvolutionAnalysis,
)

# Parser
from .parser import ParseResult, parse_schema, to_schema_node

# Differ / classifier
from .differ import Differ, DEFAULT_PASSES, detect_changes
from .classifier import TYPE_WIDENING_RULES, is_type_compatible

# Compatibility gate
from .compatibility import (
    check_compatibility_level,
    check_against_history,
    is_backward_compatible,
    is_forward_compatible,
    HistoryCompatibilityResult,
    VersionVerdict,
)

# Migration / risk
from .migration import MigrationAction, generate_migration_path
from .risk import assess_risk, compute_risk_level

# Structural validator
from .validator import (
    JsonSchemaDraft,
    SchemaStructureValidator,
    ValidationError,
    ValidationResult,
    validate_schema,
)

# Evolution
from .evolution import (
    analyze_evolution,
    validate_evolution,
    EvolutionValidator,
    EvolutionValidationResult,
    MigrationEstimate,
    CompatibilityCheck,
    MigrationRecommendations,
    BreakingChangeImpact,
)

__all__ = [
    "MISSING",
    # Schema tree
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
    # Enums
    "SchemaType",
    "ChangeKind",
    "ChangeDirection",
    "ChangeImpact",
    "StepComplexity",
    "RiskLevel",
    "MigrationComplexity",
    "CompatibilityLevel",
    # Results
    "Change",
    "MigrationStep",
    "RiskAssessment",
    "EvolutionAnalysis",
    # Parser
    "ParseResult",
    "parse_schema",
    "to_schema_node",
    # Differ
    "Differ",
    "DEFAULT_PASSES",
    "detect_changes",
    "TYPE_WIDENING_RULES",
    "is_type_compatible",
    # Compatibility
    "check_compatibility_level",
    "check_against_history",
    "is_backward_compatible",
    "is_forward_compatible",
    "HistoryCompatibilityResult",
    "VersionVerdict",
    # Migration / risk
    "MigrationAction",
    "generate_migration_path",
    "assess_risk",
    "compute_risk_level",
    # Validator
    "JsonSchemaDraft",
    "SchemaStructureValidator",
    "ValidationError",
    "ValidationResult",
    "validate_schema",
    # Evolution
    "analyze_evolution",
    "validate_evolution",
    "EvolutionValidator",
    "EvolutionValidationResult",
    "MigrationEstimate",
    "CompatibilityCheck",
    "MigrationRecommendations",
    "BreakingChangeImpact",
]
