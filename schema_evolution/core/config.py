"""
Runtime settings for the evolution engine.

Values are read from environment variables once per get_settings() call;
callers that need different values build EvolutionSettings directly.
"""

import os
from dataclasses import dataclass
from typing import Dict, Any


_TRUE_VALUES = ("1", "true", "yes", "on")


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in _TRUE_VALUES


@dataclass(frozen=True)
class EvolutionSettings:
    """Defaults applied when a caller leaves a policy option unset."""

    default_compatibility: str = "BACKWARD"
    default_draft: str = "draft-07"
    allow_breaking_changes: bool = False
    strict_mode: bool = False
    log_level: str = "INFO"
    log_format: str = "json"

    @classmethod
    def from_env(cls) -> "EvolutionSettings":
        """Build settings from SCHEMA_EVOLUTION_* / LOG_* environment variables."""
        return cls(
            default_compatibility=os.getenv("SCHEMA_EVOLUTION_COMPATIBILITY", "BACKWARD").upper(),
            default_draft=os.getenv("SCHEMA_EVOLUTION_DRAFT", "draft-07"),
            allow_breaking_changes=_env_flag("SCHEMA_EVOLUTION_ALLOW_BREAKING", False),
            strict_mode=_env_flag("SCHEMA_EVOLUTION_STRICT", False),
            log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
            log_format=os.getenv("LOG_FORMAT", "json").lower(),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "default_compatibility": self.default_compatibility,
            "default_draft": self.default_draft,
            "allow_breaking_changes": self.allow_breaking_changes,
            "strict_mode": self.strict_mode,
            "log_level": self.log_level,
            "log_format": self.log_format,
        }


def get_settings() -> EvolutionSettings:
    """Current settings from the environment."""
    return EvolutionSettings.from_env()
