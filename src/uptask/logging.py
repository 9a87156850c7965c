"""
Logging setup for the API.

All modules log through structlog. Each HTTP request gets a context (request id,
caller id, GraphQL operation) that is merged into every event emitted while the
request is being handled.
"""

import logging
import sys
import uuid
from contextvars import ContextVar
from typing import Any

import structlog

_request_context: ContextVar[dict[str, str] | None] = ContextVar(
    "uptask_request_context", default=None
)

# Third-party loggers that are too chatty at INFO
NOISY_LOGGERS = ("sqlalchemy.engine", "aiosqlite", "asyncio", "uvicorn.access")


def add_request_context(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """structlog processor: copy the current request context into the event."""
    context = _request_context.get()
    if context:
        for key, value in context.items():
            event_dict.setdefault(key, value)
    return event_dict


def _resolve_level(debug: bool, log_level: str | None) -> int:
    if log_level:
        level = logging.getLevelName(log_level.upper())
        if isinstance(level, int):
            return level
    return logging.DEBUG if debug else logging.INFO


def configure_logging(debug: bool = False, log_level: str | None = None) -> None:
    """Configure stdlib logging and structlog.

    Debug mode renders colored console lines; otherwise one JSON object per line.
    """
    level = _resolve_level(debug, log_level)

    logging.basicConfig(level=level, stream=sys.stdout, format="%(message)s", force=True)
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))

    renderer: Any = (
        structlog.dev.ConsoleRenderer(colors=True)
        if debug
        else structlog.processors.JSONRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            add_request_context,
            structlog.processors.TimeStamper(fmt="ISO", utc=True),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=structlog.stdlib.LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def generate_request_id() -> str:
    """Return a new opaque request id (32 hex chars)."""
    return uuid.uuid4().hex


def set_request_context(
    request_id: str | None = None,
    user_id: str | None = None,
    operation: str | None = None,
) -> None:
    """Start or extend the context for the current request.

    A request id is generated when none is set yet. Values that are None leave
    the existing entry untouched.
    """
    context = dict(_request_context.get() or {})
    if request_id is not None:
        context["request_id"] = request_id
    context.setdefault("request_id", generate_request_id())
    if user_id is not None:
        context["user_id"] = user_id
    if operation is not None:
        context["operation"] = operation
    _request_context.set(context)


def clear_request_context() -> None:
    _request_context.set(None)


def get_request_id() -> str | None:
    return (_request_context.get() or {}).get("request_id")


def get_user_id() -> str | None:
    return (_request_context.get() or {}).get("user_id")
