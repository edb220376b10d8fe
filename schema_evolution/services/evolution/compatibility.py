"""
Compatibility Gate - 호환성 레벨 판정

BACKWARD: 새 스키마가 이전 데이터를 처리할 수 있는지
          - backward/both 방향 breaking 변경이 없어야 함
FORWARD: 이전 스키마가 새 데이터를 처리할 수 있는지
         - forward/both 방향 breaking 변경이 없어야 함
FULL: breaking 변경이 전혀 없어야 함
NONE: 항상 통과

*_TRANSITIVE 레벨은 두 버전 비교에서 기본 레벨과 동일하다.
여러 이전 버전에 대한 검사는 check_against_history()가 담당한다.
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence, Union

from ...core import get_logger
from .differ import Differ
from .models import Change, CompatibilityLevel, SchemaNode

logger = get_logger(__name__)


def is_backward_compatible(changes: Sequence[Change]) -> bool:
    """backward 또는 both 방향의 breaking 변경이 없으면 True"""
    return not any(change.breaks_backward for change in changes)


def is_forward_compatible(changes: Sequence[Change]) -> bool:
    """forward 또는 both 방향의 breaking 변경이 없으면 True"""
    return not any(change.breaks_forward for change in changes)


def check_compatibility_level(
    changes: Sequence[Change],
    level: Union[CompatibilityLevel, str]
) -> bool:
    """
    변경 목록이 주어진 호환성 레벨을 만족하는지 확인

    Args:
        changes: 분류된 변경 목록
        level: 호환성 레벨 (enum 또는 대소문자 무관 문자열)

    Returns:
        bool: 통과 여부
    """
    base = CompatibilityLevel.parse(level).base_level

    if base == CompatibilityLevel.NONE:
        return True
    if base == CompatibilityLevel.BACKWARD:
        return is_backward_compatible(changes)
    if base == CompatibilityLevel.FORWARD:
        return is_forward_compatible(changes)
    # FULL
    return not any(change.breaking for change in changes)


@dataclass
class VersionVerdict:
    """이력 버전 하나에 대한 판정"""
    version_index: int
    is_compatible: bool
    breaking_changes: List[Change] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version_index": self.version_index,
            "is_compatible": self.is_compatible,
            "breaking_changes": [c.to_dict() for c in self.breaking_changes],
        }


@dataclass
class HistoryCompatibilityResult:
    """이력 전체에 대한 호환성 판정 결과"""
    level: CompatibilityLevel
    is_compatible: bool
    verdicts: List[VersionVerdict] = field(default_factory=list)

    @property
    def first_incompatible_index(self) -> Optional[int]:
        for verdict in self.verdicts:
            if not verdict.is_compatible:
                return verdict.version_index
        return None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "level": self.level.value,
            "is_compatible": self.is_compatible,
            "checked_versions": len(self.verdicts),
            "first_incompatible_index": self.first_incompatible_index,
            "verdicts": [v.to_dict() for v in self.verdicts],
        }


def check_against_history(
    history: Sequence[SchemaNode],
    candidate: SchemaNode,
    level: Union[CompatibilityLevel, str],
    differ: Optional[Differ] = None
) -> HistoryCompatibilityResult:
    """
    등록된 버전 이력 대비 후보 스키마 호환성 확인

    비전이 레벨은 최신 버전만, *_TRANSITIVE 레벨은 모든 이력 버전과 비교한다.
    history는 오래된 버전부터 최신 버전 순서.
    """
    level = CompatibilityLevel.parse(level)
    differ = differ or Differ()

    if not history or level == CompatibilityLevel.NONE:
        return HistoryCompatibilityResult(level=level, is_compatible=True)

    if level.is_transitive:
        indexes = list(range(len(history)))
    else:
        indexes = [len(history) - 1]

    verdicts = []
    for index in indexes:
        changes = differ.detect_changes(history[index], candidate)
        compatible = check_compatibility_level(changes, level)
        verdicts.append(VersionVerdict(
            version_index=index,
            is_compatible=compatible,
            breaking_changes=[c for c in changes if c.breaking],
        ))

    result = HistoryCompatibilityResult(
        level=level,
        is_compatible=all(v.is_compatible for v in verdicts),
        verdicts=verdicts,
    )
    logger.info(
        "history_compatibility_checked",
        level=level.value,
        checked_versions=len(verdicts),
        is_compatible=result.is_compatible,
    )
    return result
