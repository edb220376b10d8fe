"""Pydantic models for evolution validation requests."""

from .schemas import (
    SchemaEvolutionContext,
    EvolutionValidationOptions,
)

__all__ = [
    "SchemaEvolutionContext",
    "EvolutionValidationOptions",
]
