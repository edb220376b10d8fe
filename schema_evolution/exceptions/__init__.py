"""
커스텀 예외 클래스 체계
스키마 진화 엔진의 모든 예외는 이 계층을 따름

변경 감지 자체는 예외를 던지지 않는다. 예외는 호출자가 명시적으로
선택한 경로(unwrap, strict mode, 레벨 문자열 파싱)에서만 발생한다.
"""
from typing import Optional, Dict, Any
from datetime import datetime
from enum import Enum


class ErrorSeverity(str, Enum):
    """에러 심각도"""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    CRITICAL = "critical"


class SchemaEvolutionException(Exception):
    """최상위 예외 클래스"""

    def __init__(
        self,
        message: str,
        error_code: str = "E000",
        details: Optional[Dict[str, Any]] = None,
        severity: ErrorSeverity = ErrorSeverity.MEDIUM,
        cause: Optional[Exception] = None
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        self.severity = severity
        self.cause = cause
        self.timestamp = datetime.utcnow()
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """예외를 딕셔너리로 변환"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "timestamp": self.timestamp.isoformat(),
            "cause": str(self.cause) if self.cause else None
        }

    def __str__(self):
        return f"[{self.error_code}] {self.message}"

    def __repr__(self):
        return f"{self.__class__.__name__}(code={self.error_code}, message={self.message})"


# ============================================
# Schema 예외 (E100-E199)
# ============================================

class SchemaParseError(SchemaEvolutionException):
    """스키마 문서 파싱 실패"""
    def __init__(self, reason: str, cause: Optional[Exception] = None):
        super().__init__(
            message=f"스키마 파싱 실패: {reason}",
            error_code="E100",
            details={"reason": reason},
            severity=ErrorSeverity.MEDIUM,
            cause=cause
        )


class InvalidSchemaError(SchemaEvolutionException):
    """구조적으로 유효하지 않은 스키마 (strict mode)"""
    def __init__(self, base_errors: int, candidate_errors: int):
        super().__init__(
            message="One or both schemas are invalid. Fix schema errors before analyzing evolution.",
            error_code="E101",
            details={"base_errors": base_errors, "candidate_errors": candidate_errors},
            severity=ErrorSeverity.HIGH
        )


class UnknownCompatibilityLevelError(SchemaEvolutionException):
    """알 수 없는 호환성 레벨"""
    def __init__(self, value: Any):
        super().__init__(
            message=f"알 수 없는 호환성 레벨: {value!r}",
            error_code="E102",
            details={"value": str(value)[:100]},
            severity=ErrorSeverity.LOW
        )


__all__ = [
    "ErrorSeverity",
    "SchemaEvolutionException",
    "SchemaParseError",
    "InvalidSchemaError",
    "UnknownCompatibilityLevelError",
]
