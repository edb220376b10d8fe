"""
structlog setup for the evolution engine.

The library never configures logging on import. Applications call
configure_logging() once; until then structlog's defaults apply.
Every module obtains its logger through get_logger(__name__).
"""

import logging
import sys
from typing import Any, Dict, Optional

import structlog

from .config import get_settings


def _add_component(logger: Any, method_name: str, event_dict: Dict[str, Any]) -> Dict[str, Any]:
    """Tag events with the emitting module (logger name minus the package prefix)."""
    name = event_dict.pop("logger_name", None)
    if name and name.startswith("schema_evolution."):
        event_dict.setdefault("component", name.rsplit(".", 1)[-1])
    return event_dict


def configure_logging(
    json_output: Optional[bool] = None,
    log_level: Optional[str] = None
) -> None:
    """
    Configure structured logging for the evolution engine.

    Args:
        json_output: JSON lines when True, colored console output when False.
            None reads LOG_FORMAT through EvolutionSettings.
        log_level: Minimum level name. None reads LOG_LEVEL.
    """
    settings = get_settings()
    if json_output is None:
        json_output = settings.log_format == "json"
    level_name = (log_level or settings.log_level).upper()

    processors = [
        structlog.contextvars.merge_contextvars,
        _add_component,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty()))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(
            getattr(logging, level_name, logging.INFO)
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: Optional[str] = None) -> structlog.BoundLogger:
    """Logger for a module; pass __name__."""
    if name:
        return structlog.get_logger(logger_name=name)
    return structlog.get_logger()


def bind_context(**kwargs) -> None:
    """
    Bind context variables onto every following event.

    Used to tag all events of one analysis, e.g. with a subject and version.
    """
    structlog.contextvars.bind_contextvars(**kwargs)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()


Logger = structlog.BoundLogger
