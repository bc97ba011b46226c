"""
EDU360 Logging Configuration

structlog on top of the stdlib root logger. Development gets the colored
console renderer, every other environment one JSON object per line.

Journal entries, report descriptions and chat messages are student data:
log record ids, never record content. The redaction processor is the
backstop for call sites that forget.
"""

import logging
import sys
from typing import Any

import structlog

from edu360 import __version__
from edu360.config.settings import Settings

# Substrings of event keys whose values never reach the log output
REDACTED_KEYS: tuple[str, ...] = (
    "password",
    "access_token",
    "auth_token",
    "secret",
    "api_key",
    "authorization",
    "dsn",
    "journal",
    "description",
    "message_text",
    "note",
)

QUIET_LOGGERS: tuple[str, ...] = (
    "uvicorn.access",
    "httpx",
    "httpcore",
    "openai",
    "sqlalchemy.engine",
)

REDACTED = "[REDACTED]"


def _is_redacted(key: str) -> bool:
    key = key.lower()
    return any(fragment in key for fragment in REDACTED_KEYS)


def _scrub(key: str, value: Any) -> Any:
    if _is_redacted(key):
        return REDACTED
    if isinstance(value, dict):
        return {k: _scrub(k, v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [_scrub(key, item) for item in value]
    return value


def redact_student_data(
    logger: logging.Logger,
    method_name: str,
    event_dict: dict[str, Any],
) -> dict[str, Any]:
    """structlog processor that blanks values of sensitive keys, nested included."""
    # "event" is the log message itself
    return {
        key: value if key == "event" else _scrub(key, value)
        for key, value in event_dict.items()
    }


def _service_context(environment: str):
    def add_context(
        logger: logging.Logger,
        method_name: str,
        event_dict: dict[str, Any],
    ) -> dict[str, Any]:
        event_dict.setdefault("service", "edu360-backend")
        event_dict.setdefault("version", __version__)
        event_dict.setdefault("env", environment)
        return event_dict

    return add_context


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the root logger. Call once at startup."""
    development = settings.env == "development"

    processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        redact_student_data,
        _service_context(settings.env),
    ]
    if development:
        processors.append(structlog.dev.ConsoleRenderer(colors=True))
    else:
        processors += [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )
    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.log_level.upper()),
    )
    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_correlation_id(correlation_id: str) -> None:
    """Attach the request's correlation id to every log line in this context."""
    structlog.contextvars.bind_contextvars(correlation_id=correlation_id)


def clear_context() -> None:
    structlog.contextvars.clear_contextvars()
