"""Structured logging configuration using structlog."""

import logging
import sys
from contextvars import ContextVar
from typing import Any

import orjson
import structlog
from structlog.types import Processor

from src.core.config import settings

# Set per request by RequestContextMiddleware
request_id_ctx: ContextVar[str | None] = ContextVar("request_id", default=None)
route_ctx: ContextVar[str | None] = ContextVar("route", default=None)

_NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio")


def _add_context_vars(
    logger: logging.Logger, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Attach the current request id and route to every event."""
    if request_id := request_id_ctx.get():
        event_dict["request_id"] = request_id
    if route := route_ctx.get():
        event_dict.setdefault("route", route)
    return event_dict


def _orjson_serializer(obj: Any, **kwargs: Any) -> str:
    """Serialize log event to JSON using orjson.

    Decimal amounts and other non-native values fall back to ``str``.
    """
    return orjson.dumps(obj, default=str).decode("utf-8")


def use_json_logs() -> bool:
    """JSON when LOG_FORMAT=json, or when unset outside development."""
    log_format = settings.log_format.lower() if settings.log_format else None
    if log_format is not None:
        return log_format == "json"
    return settings.environment != "development"


def _renderer(use_json: bool) -> list[Processor]:
    if use_json:
        return [
            structlog.processors.EventRenamer("message"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(serializer=_orjson_serializer),
        ]
    return [structlog.dev.ConsoleRenderer(colors=True)]


def configure_logging() -> None:
    """Configure structlog for the application.

    Development: colored console output. Elsewhere: one JSON object per
    line with the event under ``message``.
    """
    shared_processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        _add_context_vars,
    ]

    structlog.configure(
        processors=[*shared_processors, *_renderer(use_json_logs())],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    level = logging.DEBUG if settings.debug else logging.INFO
    logging.basicConfig(format="%(message)s", stream=sys.stdout, level=level)
    # SQL echo is controlled by DEBUG through the engine, not the root level
    for name in _NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a configured structlog logger.

    Args:
        name: Optional logger name. Defaults to __name__ of caller.

    Returns:
        Configured structlog bound logger.
    """
    return structlog.get_logger(name)
