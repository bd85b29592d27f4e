"""
structlog setup for Credit Passport.

Every record is one JSON object (LOG_FORMAT=json, the default) or a console
line (LOG_FORMAT=console) with level, ISO-8601 UTC timestamp, logger name and
event_type. Modules log a snake_case event name plus keyword context:

    logger = get_logger(__name__)
    logger.info("extraction_completed", country="USA", defaulted_fields=2)

    {"country": "USA", "defaulted_fields": 2, "level": "info",
     "timestamp": "...", "logger": "credit_passport.extraction.adapter",
     "event_type": "extraction_completed", "message": "extraction_completed"}

Credit reports are personal data. Keys that could carry report content
(REDACTED_KEYS) are masked by a processor before rendering, whichever module
passed them.

No credit_passport imports here; every other module imports this one.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any

import structlog

REDACTED = "[redacted]"

# Context keys that may hold report text or profile contents.
REDACTED_KEYS = frozenset(
    {
        "report_text",
        "text",
        "prompt",
        "response_text",
        "name",
        "analysis",
        "markdown_summary",
        "markdownSummary",
        "content",
    }
)


def _level_from_env() -> int:
    return getattr(logging, os.getenv("LOG_LEVEL", "INFO").strip().upper(), logging.INFO)


def _format_from_env() -> str:
    return os.getenv("LOG_FORMAT", "json").strip().lower()


def _redact_personal_fields(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Mask REDACTED_KEYS values; the key stays so the record shape is stable."""
    for key in REDACTED_KEYS.intersection(event_dict):
        if event_dict[key] is not None:
            event_dict[key] = REDACTED
    return event_dict


def _event_to_event_type(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """structlog's positional 'event' becomes event_type; message mirrors it unless given."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "event_type" in event_dict:
        event_dict.setdefault("message", str(event_dict["event_type"]))
    return event_dict


def build_processors(log_format: str) -> list[Any]:
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True, key="timestamp"),
        structlog.processors.format_exc_info,
        _redact_personal_fields,
        _event_to_event_type,
    ]
    if log_format == "console":
        processors.append(structlog.dev.ConsoleRenderer(colors=sys.stderr.isatty()))
    else:
        processors.append(structlog.processors.JSONRenderer(ensure_ascii=False))
    return processors


def configure_structlog() -> None:
    """Configure structlog from LOG_LEVEL and LOG_FORMAT. Called once on import."""
    structlog.configure(
        processors=build_processors(_format_from_env()),
        wrapper_class=structlog.make_filtering_bound_logger(_level_from_env()),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stdout),
        cache_logger_on_first_use=True,
    )


if not structlog.is_configured():
    configure_structlog()


def get_logger(name: str) -> structlog.BoundLogger:
    """Logger bound to the module name (logger=<name> on every record)."""
    return structlog.get_logger(name).bind(logger=name)


def bind_address(address: str) -> structlog.BoundLogger:
    """Logger carrying the user's wallet address on every record."""
    return get_logger("credit_passport").bind(address=address)
