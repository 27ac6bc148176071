"""structlog setup for BugRelay.

The only secret this service holds is the GitHub token. It can reach a
log line as a ``github_token``/``token`` field, inside an outbound
``headers`` mapping, or echoed in an exception message, so the redaction
processor covers those three shapes.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.types import EventDict, Processor

from .config import Settings, get_settings

REDACTED = "[redacted]"

# Compared case-insensitively against event keys and header names
SECRET_FIELDS = frozenset({"github_token", "token", "authorization"})


def service_context(settings: Settings) -> Processor:
    """Processor stamping every entry with service name and environment."""
    service = settings.APP_NAME
    environment = settings.ENVIRONMENT.value

    def _add(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        event_dict.setdefault("service", service)
        event_dict.setdefault("environment", environment)
        return event_dict

    return _add


def redact_secrets(token: str | None) -> Processor:
    """Processor removing the GitHub token from log entries.

    Args:
        token: Configured token; any occurrence inside string values is
            replaced as well

    Returns:
        structlog processor
    """

    def _scrub(value: Any) -> Any:
        if token and isinstance(value, str) and token in value:
            return value.replace(token, REDACTED)
        return value

    def _redact(logger: Any, method_name: str, event_dict: EventDict) -> EventDict:
        for key, value in list(event_dict.items()):
            if key.lower() in SECRET_FIELDS:
                event_dict[key] = REDACTED
            elif key == "headers" and isinstance(value, dict):
                event_dict[key] = {
                    name: REDACTED if name.lower() in SECRET_FIELDS else _scrub(v)
                    for name, v in value.items()
                }
            else:
                event_dict[key] = _scrub(value)
        return event_dict

    return _redact


def get_log_processors(settings: Settings) -> list[Processor]:
    """Processor chain: JSON lines in production, console output otherwise."""
    renderer: Processor
    if settings.is_production:
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=sys.stdout.isatty())

    return [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        service_context(settings),
        structlog.processors.format_exc_info,
        redact_secrets(settings.GITHUB_TOKEN),
        renderer,
    ]


def setup_logging(settings: Settings | None = None) -> None:
    """Configure structlog over stdlib logging.

    Called once per process by the ASGI app, the serverless module and
    the CLI ``submit`` command.
    """
    settings = settings or get_settings()

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
    )

    structlog.configure(
        processors=get_log_processors(settings),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )

    # httpx logs every request line, URL included, at INFO
    for name in ("httpx", "httpcore"):
        logging.getLogger(name).setLevel(logging.WARNING)


def get_logger(name: str | None = None) -> Any:
    return structlog.get_logger(name)


class LogContext:
    """Bind context variables for the duration of a block.

    Example:
        with LogContext(request_id="abc-123"):
            logger.info("bug_report_received")
    """

    def __init__(self, **kwargs: Any) -> None:
        self.context = kwargs

    def __enter__(self) -> None:
        structlog.contextvars.bind_contextvars(**self.context)

    def __exit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        structlog.contextvars.unbind_contextvars(*self.context)
