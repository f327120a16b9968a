"""
Structured logging: one line per event with timestamp, level, event_type.

structlog renders JSON for production and a console layout for local runs.
Level and format come from Settings (LOG_LEVEL / LOG_FORMAT, .env included);
create_app() and main() call configure_logging() once settings are loaded.
Until then a JSON/INFO default is in place so import-time logging works.

Loggers returned by get_logger() resolve the current configuration on every
call, so a later configure_logging() also reaches module-level loggers.

Uses only stdlib logging and structlog; no user_registry imports to avoid circular imports.
"""

from __future__ import annotations

import logging
import sys
from datetime import datetime, timezone
from typing import Any, TextIO

import structlog
from structlog._config import BoundLoggerLazyProxy

DEFAULT_LEVEL = "INFO"
DEFAULT_FORMAT = "json"


def _add_timestamp(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Ensure timestamp is always present (ISO 8601, UTC)."""
    if "timestamp" not in event_dict:
        event_dict["timestamp"] = datetime.now(timezone.utc).isoformat()
    return event_dict


def _normalize_event(
    logger: Any,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """Rename structlog 'event' to event_type; keep message if present."""
    if "event" in event_dict and "event_type" not in event_dict:
        event_dict["event_type"] = event_dict.pop("event")
    if "message" not in event_dict and "event_type" in event_dict:
        event_dict["message"] = str(event_dict["event_type"])
    return event_dict


def _level_value(level: str) -> int:
    value = logging.getLevelName((level or DEFAULT_LEVEL).strip().upper())
    return value if isinstance(value, int) else logging.INFO


def configure_logging(
    level: str = DEFAULT_LEVEL,
    fmt: str = DEFAULT_FORMAT,
    file: TextIO | None = None,
) -> None:
    """
    (Re)configure structlog.

    level: stdlib level name; unknown names fall back to INFO.
    fmt: "json" for JSONRenderer, anything else for the console renderer.
    file: output stream, stdout by default.
    """
    out = file if file is not None else sys.stdout
    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _add_timestamp,
    ]
    if (fmt or DEFAULT_FORMAT).strip().lower() == "json":
        processors += [_normalize_event, structlog.processors.JSONRenderer()]
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=out.isatty()))
    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(_level_value(level)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=out),
        cache_logger_on_first_use=False,
    )


if not structlog.is_configured():
    configure_logging()


def get_logger(name: str) -> Any:
    """
    Return a structured logger for the given module name.

        logger = get_logger(__name__)
        logger.info("request_completed", method="GET", path="/users", status=200)

    JSON output: {"method": "GET", "path": "/users", "status": 200,
    "logger": "module.name", "level": "info", "timestamp": "...",
    "event_type": "request_completed", "message": "request_completed"}
    """
    # structlog.get_logger(name, logger=name) collides with wrap_logger's own
    # ``logger`` parameter; build the same lazy proxy with the initial value.
    return BoundLoggerLazyProxy(
        None, logger_factory_args=(name,), initial_values={"logger": name}
    )
