"""structlog setup bridged onto stdlib logging.

JSON lines in production, colored console output when ``debug`` is on.
uvicorn, httpx, anthropic and SQLAlchemy records go through the same
formatter. Every event carries the request's correlation id, and
document payloads or credentials never reach the output.
"""

import logging
import logging.config

import structlog
from asgi_correlation_id.context import correlation_id

REDACTED = "[redacted]"
SENSITIVE_KEYS = frozenset({"base64_data", "base64Data", "api_key", "anthropic_api_key", "x-api-key"})

# Third-party loggers that are chatty at INFO.
QUIET_LOGGERS = ("uvicorn.access", "httpx", "httpcore", "anthropic", "sqlalchemy.engine")


def add_correlation_id(logger, method, event_dict):
    cid = correlation_id.get(None)
    if cid:
        event_dict["correlation_id"] = cid
    return event_dict


def redact_sensitive(logger, method, event_dict):
    """Replace uploaded document bodies and credentials wherever they appear at top level."""
    for key in SENSITIVE_KEYS.intersection(event_dict):
        event_dict[key] = REDACTED
    return event_dict


def configure_structlog(log_level: str = "INFO", json_logs: bool = True) -> None:
    """Configure structlog and the stdlib root logger.

    Must run before the rest of the application is imported, because
    structlog caches each logger's processor chain on first use.

    Args:
        log_level: Root level name ("DEBUG", "INFO", ...)
        json_logs: JSON renderer when True, ConsoleRenderer otherwise
    """
    shared_processors = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        add_correlation_id,
        redact_sensitive,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.processors.StackInfoRenderer(),
    ]

    if json_logs:
        final_processors = [structlog.processors.format_exc_info, structlog.processors.JSONRenderer()]
    else:
        final_processors = [structlog.dev.ConsoleRenderer()]

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "structured": {
                "()": structlog.stdlib.ProcessorFormatter,
                "processors": [structlog.stdlib.ProcessorFormatter.remove_processors_meta, *final_processors],
                "foreign_pre_chain": shared_processors,
            },
        },
        "handlers": {
            "stdout": {
                "class": "logging.StreamHandler",
                "formatter": "structured",
                "stream": "ext://sys.stdout",
            },
        },
        "root": {"handlers": ["stdout"], "level": log_level},
        "loggers": {name: {"level": "WARNING"} for name in QUIET_LOGGERS},
    })

    structlog.configure(
        processors=[*shared_processors, structlog.stdlib.ProcessorFormatter.wrap_for_formatter],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )
