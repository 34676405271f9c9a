"""
Structured logging configuration using structlog.

Provides consistent, structured logging across all modules, with secret
values masked before any renderer sees them.
"""

import logging
import sys
from typing import Any

import structlog

from kubeweave.shared.infrastructure.config import settings
from kubeweave.shared.utils.masking import SECRET_MASK, SECRET_PAYLOAD_FIELDS

# Event keys whose values are never rendered
SENSITIVE_EVENT_KEYS = frozenset({"value", "payload", "token", "password", *SECRET_PAYLOAD_FIELDS})


def secret_redactor(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """
    Mask secret-bearing fields in an event.

    Top-level keys listed in SENSITIVE_EVENT_KEYS are replaced outright.
    Nested manifests keep their shape but lose their data values.

    Args:
        logger: Logger instance
        method_name: Logging method name
        event_dict: Event dictionary to process

    Returns:
        Redacted event dictionary
    """
    if not getattr(settings, "log_redaction_enabled", True):
        return event_dict

    def redact(value: Any) -> Any:
        if isinstance(value, dict):
            return {
                k: ({inner: SECRET_MASK for inner in v} if k in SECRET_PAYLOAD_FIELDS and isinstance(v, dict) else redact(v))
                for k, v in value.items()
            }
        if isinstance(value, list):
            return [redact(item) for item in value]
        return value

    redacted = {}
    for key, value in event_dict.items():
        if key in SENSITIVE_EVENT_KEYS and not isinstance(value, dict):
            redacted[key] = SECRET_MASK
        else:
            redacted[key] = redact(value)
    return redacted


def configure_logging(stream: Any = sys.stderr) -> None:
    """
    Configure structlog for the application.

    Sets up:
    - JSON output for production
    - Pretty console output for development
    - Log level from settings
    """
    shared_processors: list[Any] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        secret_redactor,
    ]

    if settings.is_development:
        processors = shared_processors + [
            structlog.dev.ConsoleRenderer(colors=stream.isatty() if hasattr(stream, "isatty") else False),
        ]
    else:
        processors = shared_processors + [
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=stream,
        level=getattr(logging, settings.log_level.upper()),
        force=True,
    )


def get_logger(name: str) -> Any:
    """
    Get a structured logger instance.

    Example:
        >>> logger = get_logger(__name__)
        >>> logger.info("secret_loaded", name="API_KEY")
    """
    return structlog.get_logger(name)
