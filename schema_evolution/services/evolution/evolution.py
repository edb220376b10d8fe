"""
Schema Evolution - 진화 분석 및 정책 검증

기능:
- 두 스키마 버전 간 진화 분석 (변경 감지, 호환성, 마이그레이션 경로, 위험도)
- 호환성 모드/옵션에 따른 진화 검증
- 마이그레이션 복잡도 및 작업량 추정
- 마이그레이션 권장 사항, breaking 변경 영향 분석, 진화 모범 사례 점검
"""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union

from ...core import get_logger
from ...exceptions import InvalidSchemaError
from ...models.schemas import EvolutionValidationOptions, SchemaEvolutionContext
from .compatibility import check_compatibility_level, is_backward_compatible, is_forward_compatible
from .differ import Differ
from .migration import generate_migration_path, pre_migration_validation_step
from .models import (
    Change,
    ChangeImpact,
    ChangeKind,
    CompatibilityLevel,
    EvolutionAnalysis,
    MigrationComplexity,
    MigrationStep,
    RiskAssessment,
    SchemaNode,
    to_plain,
)
from .parser import SchemaSource, to_schema_node
from .risk import assess_risk
from .validator import JsonSchemaDraft, SchemaStructureValidator, ValidationError

logger = get_logger(__name__)


SchemaInput = Union[SchemaNode, SchemaSource]


def analyze_evolution(
    old: SchemaInput,
    new: SchemaInput,
    differ: Optional[Differ] = None,
    affected_consumers: Optional[Sequence[str]] = None
) -> EvolutionAnalysis:
    """
    두 스키마 버전 간 진화 분석

    Args:
        old: 이전 스키마 (SchemaNode, dict 또는 JSON 텍스트)
        new: 새로운 스키마
        differ: 사용할 변경 감지기 (기본: 전체 패스)
        affected_consumers: 위험도 평가에 그대로 전달할 소비자 목록

    Returns:
        EvolutionAnalysis

    Raises:
        SchemaParseError: 입력이 스키마 객체로 파싱되지 않는 경우
    """
    old_node = to_schema_node(old)
    new_node = to_schema_node(new)
    differ = differ or Differ()

    changes = differ.detect_changes(old_node, new_node)

    analysis = EvolutionAnalysis(
        is_backward_compatible=is_backward_compatible(changes),
        is_forward_compatible=is_forward_compatible(changes),
        changes=tuple(changes),
        migration_path=tuple(generate_migration_path(changes)),
        risk_assessment=assess_risk(changes, affected_consumers),
    )

    logger.info(
        "evolution_analyzed",
        changes=len(analysis.changes),
        breaking=len(analysis.breaking_changes),
        backward_compatible=analysis.is_backward_compatible,
        forward_compatible=analysis.is_forward_compatible,
        risk=analysis.risk_assessment.overall_risk.value,
    )
    return analysis


# ============================================
# Result models
# ============================================

@dataclass
class MigrationEstimate:
    """마이그레이션 작업량 추정"""
    estimated_time_hours: float
    confidence: float
    dependencies: List[str] = field(default_factory=list)
    blockers: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "estimated_time_hours": self.estimated_time_hours,
            "confidence": self.confidence,
            "dependencies": self.dependencies,
            "blockers": self.blockers,
        }


@dataclass
class EvolutionValidationResult:
    """진화 검증 결과"""
    is_valid: bool
    draft: JsonSchemaDraft
    evolution_analysis: EvolutionAnalysis
    migration_complexity: MigrationComplexity
    risk_assessment: RiskAssessment
    migration_estimate: MigrationEstimate
    errors: List[ValidationError] = field(default_factory=list)
    warnings: List[ValidationError] = field(default_factory=list)
    recommended_steps: List[MigrationStep] = field(default_factory=list)
    properties_validated: int = 0

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
            "evolution_analysis": self.evolution_analysis.to_dict(),
            "migration_complexity": self.migration_complexity.value,
            "risk_assessment": self.risk_assessment.to_dict(),
            "migration_estimate": self.migration_estimate.to_dict(),
            "recommended_steps": [s.to_dict() for s in self.recommended_steps],
        }


@dataclass
class CompatibilityCheck:
    """빠른 호환성 확인 결과"""
    mode: CompatibilityLevel
    is_compatible: bool
    issues: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "mode": self.mode.value,
            "is_compatible": self.is_compatible,
            "issues": self.issues,
        }


@dataclass
class MigrationRecommendations:
    """마이그레이션 권장 사항"""
    recommended_steps: List[MigrationStep] = field(default_factory=list)
    alternative_approaches: List[str] = field(default_factory=list)
    risk_mitigation: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "recommended_steps": [s.to_dict() for s in self.recommended_steps],
            "alternative_approaches": self.alternative_approaches,
            "risk_mitigation": self.risk_mitigation,
        }


@dataclass
class BreakingChangeImpact:
    """breaking 변경 영향도별 분류와 완화 전략"""
    high_impact: List[Change] = field(default_factory=list)
    medium_impact: List[Change] = field(default_factory=list)
    low_impact: List[Change] = field(default_factory=list)
    mitigation_strategies: Dict[str, List[str]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "high_impact": [c.to_dict() for c in self.high_impact],
            "medium_impact": [c.to_dict() for c in self.medium_impact],
            "low_impact": [c.to_dict() for c in self.low_impact],
            "mitigation_strategies": self.mitigation_strategies,
        }


MITIGATION_STRATEGIES: Dict[ChangeKind, List[str]] = {
    ChangeKind.FIELD_REMOVED: [
        "Implement gradual deprecation",
        "Provide migration utilities",
        "Use API versioning",
    ],
    ChangeKind.FIELD_TYPE_CHANGED: [
        "Use union types during transition",
        "Implement data transformation layers",
        "Provide backward-compatible parsers",
    ],
    ChangeKind.CONSTRAINT_ADDED: [
        "Validate existing data first",
        "Implement data cleanup procedures",
        "Use constraint relaxation periods",
    ],
}
MITIGATION_STRATEGIES[ChangeKind.CONSTRAINT_TIGHTENED] = MITIGATION_STRATEGIES[ChangeKind.CONSTRAINT_ADDED]


_MODE_VIOLATIONS = {
    CompatibilityLevel.BACKWARD: (
        "Backward compatibility mode violated",
        "Remove or relax changes that prevent reading data written with the old schema",
    ),
    CompatibilityLevel.FORWARD: (
        "Forward compatibility mode violated",
        "Remove or relax changes that prevent the old schema from reading new data",
    ),
    CompatibilityLevel.FULL: (
        "Full compatibility mode requires both backward and forward compatibility",
        "Restrict the evolution to changes that are safe in both directions",
    ),
}


# ============================================
# Validator
# ============================================

class EvolutionValidator:
    """
    스키마 진화 정책 검증기

    구조 검증(SchemaStructureValidator)과 진화 분석(analyze_evolution) 결과를
    호환성 모드, 옵션과 조합하여 하나의 검증 결과로 만든다.
    정책 위반은 예외가 아니라 ValidationError 항목으로 보고된다.
    """

    def __init__(
        self,
        structure_validator: Optional[SchemaStructureValidator] = None,
        differ: Optional[Differ] = None
    ):
        self.structure_validator = structure_validator or SchemaStructureValidator()
        self.differ = differ or Differ()

    def validate_evolution(
        self,
        context: Union[SchemaEvolutionContext, Mapping[str, Any]],
        options: Union[EvolutionValidationOptions, Mapping[str, Any], None] = None
    ) -> EvolutionValidationResult:
        """
        진화 검증

        Args:
            context: base/candidate 스키마와 호환성 정책
            options: 선택 검사 스위치 (None이면 기본값)

        Returns:
            EvolutionValidationResult

        Raises:
            InvalidSchemaError: strict_mode에서 스키마 구조가 유효하지 않은 경우
        """
        if not isinstance(context, SchemaEvolutionContext):
            context = SchemaEvolutionContext.model_validate(context)
        if options is None:
            options = EvolutionValidationOptions()
        elif not isinstance(options, EvolutionValidationOptions):
            options = EvolutionValidationOptions.model_validate(options)

        # 1. 개별 스키마 구조 검증
        base_result = self.structure_validator.validate_schema(context.base_schema, context.target_draft)
        candidate_result = self.structure_validator.validate_schema(
            context.candidate_schema, context.target_draft
        )

        if options.strict_mode and not (base_result.is_valid and candidate_result.is_valid):
            logger.warning(
                "evolution_validation_rejected",
                base_errors=len(base_result.errors),
                candidate_errors=len(candidate_result.errors),
            )
            raise InvalidSchemaError(len(base_result.errors), len(candidate_result.errors))

        # 2. 진화 분석
        analysis = analyze_evolution(context.base_schema, context.candidate_schema, differ=self.differ)

        # 3-7. 정책 검사
        issues: List[ValidationError] = []
        issues.extend(self._validate_compatibility_requirements(analysis, context, options))
        if options.validate_migration_steps:
            issues.extend(self._validate_migration_path(list(analysis.migration_path)))
        if options.check_semantic_versioning:
            issues.extend(self._validate_semantic_versioning(analysis))

        errors = base_result.errors + candidate_result.errors
        warnings = base_result.warnings + candidate_result.warnings
        for issue in issues:
            if issue.is_error():
                errors.append(issue)
            else:
                warnings.append(issue)

        result = EvolutionValidationResult(
            is_valid=len(errors) == 0,
            draft=context.target_draft,
            evolution_analysis=analysis,
            migration_complexity=self._assess_migration_complexity(analysis),
            risk_assessment=analysis.risk_assessment,
            migration_estimate=self._estimate_migration_effort(analysis),
            errors=errors,
            warnings=warnings,
            recommended_steps=self._recommended_steps(analysis, options.generate_migration_code),
            properties_validated=(
                base_result.properties_validated + candidate_result.properties_validated
            ),
        )

        logger.info(
            "evolution_validated",
            compatibility_mode=context.compatibility_mode.value,
            is_valid=result.is_valid,
            errors=len(result.errors),
            warnings=len(result.warnings),
            complexity=result.migration_complexity.value,
        )
        return result

    def check_compatibility(
        self,
        base_schema: SchemaInput,
        candidate_schema: SchemaInput,
        mode: Union[CompatibilityLevel, str] = CompatibilityLevel.BACKWARD
    ) -> CompatibilityCheck:
        """
        전체 검증 없이 호환성만 빠르게 확인

        Args:
            base_schema: 이전 스키마
            candidate_schema: 새로운 스키마
            mode: 호환성 모드 (_TRANSITIVE는 기본 레벨로 취급)

        Returns:
            CompatibilityCheck
        """
        level = CompatibilityLevel.parse(mode)
        analysis = analyze_evolution(base_schema, candidate_schema, differ=self.differ)
        base_level = level.base_level

        issues: List[str] = []
        if base_level in (CompatibilityLevel.BACKWARD, CompatibilityLevel.FULL):
            issues.extend(
                f"Backward compatibility issue: {c.description}"
                for c in analysis.changes if c.breaks_backward
            )
        if base_level in (CompatibilityLevel.FORWARD, CompatibilityLevel.FULL):
            issues.extend(
                f"Forward compatibility issue: {c.description}"
                for c in analysis.changes if c.breaks_forward
            )

        return CompatibilityCheck(
            mode=level,
            is_compatible=check_compatibility_level(analysis.changes, level),
            issues=issues,
        )

    def generate_migration_recommendations(
        self,
        base_schema: SchemaInput,
        candidate_schema: SchemaInput
    ) -> MigrationRecommendations:
        """마이그레이션 단계, 대안 접근법, 위험 완화 조치"""
        analysis = analyze_evolution(base_schema, candidate_schema, differ=self.differ)
        return MigrationRecommendations(
            recommended_steps=self._recommended_steps(analysis, include_code=True),
            alternative_approaches=self._generate_alternative_approaches(analysis),
            risk_mitigation=self._generate_risk_mitigation_steps(analysis),
        )

    def analyze_breaking_change_impact(self, changes: Sequence[Change]) -> BreakingChangeImpact:
        """
        breaking 변경을 영향도별로 분류하고 필드별 완화 전략 생성

        같은 필드에 여러 변경이 있으면 전략을 합친다 (중복 제외).
        """
        breaking = [c for c in changes if c.breaking]
        impact = BreakingChangeImpact(
            high_impact=[c for c in breaking if c.impact == ChangeImpact.HIGH],
            medium_impact=[c for c in breaking if c.impact == ChangeImpact.MEDIUM],
            low_impact=[c for c in breaking if c.impact == ChangeImpact.LOW],
        )

        for change in breaking:
            strategies = MITIGATION_STRATEGIES.get(change.kind)
            if not strategies:
                continue
            key = change.field or change.kind.value
            existing = impact.mitigation_strategies.setdefault(key, [])
            existing.extend(s for s in strategies if s not in existing)

        return impact

    def validate_evolution_best_practices(
        self,
        base_schema: SchemaInput,
        candidate_schema: SchemaInput
    ) -> List[ValidationError]:
        """진화 모범 사례 점검 (warning/info 항목만 생성)"""
        analysis = analyze_evolution(base_schema, candidate_schema, differ=self.differ)
        issues: List[ValidationError] = []

        if len(analysis.breaking_changes) > 3:
            issues.append(ValidationError(
                path="$",
                message="Too many breaking changes in a single evolution",
                severity="warning",
                suggestion="Consider splitting changes across multiple releases",
            ))

        if any(c.kind == ChangeKind.FIELD_REMOVED for c in analysis.changes):
            issues.append(ValidationError(
                path="$",
                message="Field removals detected without deprecation information",
                severity="warning",
                suggestion="Add deprecation notices before removing fields",
            ))

        if not analysis.has_changes:
            issues.append(ValidationError(
                path="$",
                message="No changes detected between schema versions",
                severity="info",
                suggestion="Consider if a version bump is necessary",
            ))
        elif not analysis.breaking_changes:
            issues.append(ValidationError(
                path="$",
                message="All changes are additive - consider minor version bump",
                severity="info",
                suggestion="Use semantic versioning for additive changes",
            ))

        return issues

    # ------------------------------------------------------------
    # Internal checks
    # ------------------------------------------------------------

    def _validate_compatibility_requirements(
        self,
        analysis: EvolutionAnalysis,
        context: SchemaEvolutionContext,
        options: EvolutionValidationOptions
    ) -> List[ValidationError]:
        if context.allow_breaking_changes:
            return []

        errors: List[ValidationError] = []

        if options.check_backward_compatibility and not analysis.is_backward_compatible:
            errors.append(ValidationError(
                path="$",
                message="Schema evolution breaks backward compatibility",
                severity="error",
                suggestion="Remove breaking changes or allow breaking changes in configuration",
            ))

        if options.check_forward_compatibility and not analysis.is_forward_compatible:
            errors.append(ValidationError(
                path="$",
                message="Schema evolution breaks forward compatibility",
                severity="error",
                suggestion="Ensure the old schema can read data written with the new schema",
            ))

        mode = context.compatibility_mode
        if not check_compatibility_level(analysis.changes, mode):
            message, suggestion = _MODE_VIOLATIONS[mode.base_level]
            errors.append(ValidationError(
                path="$",
                message=message,
                severity="error",
                suggestion=suggestion,
            ))

        return errors

    def _assess_migration_complexity(self, analysis: EvolutionAnalysis) -> MigrationComplexity:
        breaking = len(analysis.breaking_changes)
        total = len(analysis.changes)
        steps = len(analysis.migration_path)

        if breaking == 0 and total <= 3:
            return MigrationComplexity.SIMPLE
        if breaking <= 2 and steps <= 5:
            return MigrationComplexity.MODERATE
        if breaking <= 5 and steps <= 10:
            return MigrationComplexity.COMPLEX
        return MigrationComplexity.CRITICAL

    def _estimate_migration_effort(self, analysis: EvolutionAnalysis) -> MigrationEstimate:
        breaking = len(analysis.breaking_changes)
        total = len(analysis.changes)
        steps = len(analysis.migration_path)

        # 기본 2시간 + 변경당 30분 + breaking 변경당 2시간 + 단계당 1시간
        hours = 2 + total * 0.5 + breaking * 2 + steps * 1

        confidence = 0.9
        if breaking > 3:
            confidence -= 0.3
        if total > 10:
            confidence -= 0.2
        if steps > 5:
            confidence -= 0.1

        return MigrationEstimate(
            estimated_time_hours=round(hours, 1),
            confidence=max(0.1, round(confidence, 2)),
            dependencies=self._extract_dependencies(analysis),
            blockers=[
                c.description for c in analysis.changes
                if c.breaking and c.impact == ChangeImpact.HIGH
            ],
        )

    def _extract_dependencies(self, analysis: EvolutionAnalysis) -> List[str]:
        dependencies = []
        for change in analysis.changes:
            if change.path.endswith(".$ref"):
                dependencies.append(f"Schema reference: {change.field}")
            if change.kind == ChangeKind.FIELD_TYPE_CHANGED:
                dependencies.append(f"Type system changes for: {change.field}")
        return dependencies

    def _validate_migration_path(self, migration_path: List[MigrationStep]) -> List[ValidationError]:
        issues: List[ValidationError] = []

        if not migration_path:
            issues.append(ValidationError(
                path="$.migrationPath",
                message="No migration path provided for schema evolution",
                severity="warning",
                suggestion="Provide migration steps for better guidance",
            ))

        has_validation = any(
            "validat" in to_plain(step.action).lower() or "validat" in step.description.lower()
            for step in migration_path
        )
        if not has_validation:
            issues.append(ValidationError(
                path="$.migrationPath",
                message="Migration path missing data validation step",
                severity="warning",
                suggestion="Add data validation to migration steps",
            ))

        return issues

    def _validate_semantic_versioning(self, analysis: EvolutionAnalysis) -> List[ValidationError]:
        if analysis.breaking_changes:
            return [ValidationError(
                path="$",
                message="Breaking changes require major version bump",
                severity="info",
                suggestion="Use semantic versioning: increment major version for breaking changes",
            )]
        if analysis.has_changes:
            return [ValidationError(
                path="$",
                message="Non-breaking changes suggest minor version bump",
                severity="info",
                suggestion="Use semantic versioning: increment minor version for new features",
            )]
        return []

    def _recommended_steps(self, analysis: EvolutionAnalysis, include_code: bool) -> List[MigrationStep]:
        steps = list(analysis.migration_path)
        if analysis.breaking_changes:
            steps.insert(0, pre_migration_validation_step())
        if not include_code:
            steps = [replace(step, code=None) for step in steps]
        return steps

    def _generate_alternative_approaches(self, analysis: EvolutionAnalysis) -> List[str]:
        alternatives = []

        if analysis.breaking_changes:
            alternatives.extend([
                "Gradual Migration: Implement changes across multiple releases",
                "Dual Schema Support: Maintain both old and new schemas temporarily",
                "API Versioning: Create new version while maintaining old version",
                "Feature Flags: Use feature toggles to control schema usage",
            ])

        if any(c.kind == ChangeKind.FIELD_REMOVED for c in analysis.changes):
            alternatives.extend([
                "Deprecation Period: Mark fields as deprecated before removal",
                "Optional Migration: Make removed fields optional first",
            ])

        return alternatives

    def _generate_risk_mitigation_steps(self, analysis: EvolutionAnalysis) -> List[str]:
        steps = []

        if analysis.breaking_changes:
            steps.extend([
                "Implement comprehensive testing strategy",
                "Create rollback procedures",
                "Set up monitoring and alerting",
                "Prepare migration documentation",
                "Conduct stakeholder review",
            ])

        if any(c.impact == ChangeImpact.HIGH for c in analysis.changes):
            steps.extend([
                "Perform canary deployment",
                "Implement circuit breakers",
                "Prepare emergency response plan",
            ])

        return steps


def validate_evolution(
    context: Union[SchemaEvolutionContext, Mapping[str, Any]],
    options: Union[EvolutionValidationOptions, Mapping[str, Any], None] = None
) -> EvolutionValidationResult:
    """기본 검증기로 진화 검증 (편의 함수)"""
    return EvolutionValidator().validate_evolution(context, options)
