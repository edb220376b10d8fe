"""Core module for logging, configuration, and shared utilities."""

from .logging_config import configure_logging, get_logger, bind_context, clear_context
from .config import EvolutionSettings, get_settings

__all__ = [
    "configure_logging",
    "get_logger",
    "bind_context",
    "clear_context",
    "EvolutionSettings",
    "get_settings",
]
