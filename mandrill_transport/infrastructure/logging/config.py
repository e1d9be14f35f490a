"""structlog setup for the transport.

The transport is a library, so only the ``mandrill_transport`` stdlib logger
gets a handler; the root logger is left to the host application.
"""

import logging
import sys
from typing import Any, cast

import structlog
from opentelemetry import trace
from structlog.typing import Processor

from mandrill_transport.infrastructure.config import Settings
from mandrill_transport.utils.sanitizer import sanitize_dict


PACKAGE_LOGGER = "mandrill_transport"


def sanitize_sensitive_data(
    logger: Any, method_name: str, event_dict: dict[str, Any]
) -> dict[str, Any]:
    """Redact API keys and request bodies from a log event.

    Args:
        logger: Logger instance (unused)
        method_name: Method name (unused)
        event_dict: Event dictionary to sanitize

    Returns:
        Sanitized event dictionary
    """
    return sanitize_dict(event_dict, recursive=True)


def add_trace_context(logger: Any, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    """Attach the active OpenTelemetry span ids, if any.

    Lets a send be correlated with whatever request or job triggered it.
    """
    span_context = trace.get_current_span().get_span_context()
    if not span_context.is_valid:
        return event_dict

    event_dict["trace_id"] = format(span_context.trace_id, "032x")
    event_dict["span_id"] = format(span_context.span_id, "016x")
    event_dict["trace_flags"] = format(span_context.trace_flags, "02x")
    return event_dict


def _service_context(settings: Settings) -> Processor:
    def add_service_context(
        logger: Any, method_name: str, event_dict: dict[str, Any]
    ) -> dict[str, Any]:
        event_dict.setdefault("service", settings.app_name)
        event_dict.setdefault("environment", settings.app_env)
        return event_dict

    return add_service_context


def _renderer(settings: Settings) -> list[Processor]:
    if settings.is_development:
        return [structlog.dev.ConsoleRenderer(colors=True)]
    return [structlog.processors.dict_tracebacks, structlog.processors.JSONRenderer()]


def configure_logging(settings: Settings) -> None:
    """Configure structlog and the package's stdlib logger.

    Development gets colored console output, every other environment one
    JSON object per line.

    Args:
        settings: Provides log level, environment and service name
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, settings.log_level, logging.INFO))
    if not package_logger.handlers:
        handler = logging.StreamHandler(sys.stdout)
        handler.setFormatter(logging.Formatter("%(message)s"))
        package_logger.addHandler(handler)
    package_logger.propagate = False

    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        _service_context(settings),
        add_trace_context,
        sanitize_sensitive_data,
        structlog.processors.StackInfoRenderer(),
        *_renderer(settings),
    ]

    structlog.configure(
        processors=cast("Any", processors),
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str | None = None) -> Any:
    """Return a structlog logger, named after the calling module by convention."""
    return structlog.get_logger(name)
