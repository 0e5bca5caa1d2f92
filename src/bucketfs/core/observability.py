"""Observability setup for bucketfs.

Logs are written to stderr so that command output (``bucketfs cat``) stays
clean on stdout. Set ``BUCKETFS_LOG_FORMAT=keyvalue`` for a terminal-friendly
rendering instead of JSON.
"""

import logging
import sys
from typing import Any, Optional

import structlog
from opentelemetry import trace
from opentelemetry.sdk.resources import Resource
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import BatchSpanProcessor, ConsoleSpanExporter

from .config import settings
from .exceptions import ValidationError

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


def setup_tracing() -> None:
    """Set up OpenTelemetry tracing for listing walks."""
    if not settings.otel_enabled:
        return

    resource = Resource.create({"service.name": settings.otel_service_name})
    provider = TracerProvider(resource=resource)

    # Console only; an OTLP exporter can be wired to otel_exporter_endpoint
    processor = BatchSpanProcessor(ConsoleSpanExporter())
    provider.add_span_processor(processor)

    trace.set_tracer_provider(provider)


def _renderer() -> Any:
    if settings.log_format == "keyvalue":
        return structlog.processors.KeyValueRenderer(
            key_order=["timestamp", "level", "logger", "event"]
        )
    return structlog.processors.JSONRenderer()


def setup_logging(level: Optional[str] = None) -> None:
    """Set up structured logging with structlog.

    Args:
        level: Log level name overriding ``settings.log_level``

    Raises:
        ValidationError: If the level name is unknown
    """
    level_name = (level or settings.log_level).upper()
    if level_name not in LOG_LEVELS:
        raise ValidationError(
            f"Unknown log level {level_name!r}, expected one of {', '.join(LOG_LEVELS)}"
        )

    logging.basicConfig(format="%(message)s", stream=sys.stderr)
    logging.getLogger().setLevel(getattr(logging, level_name))

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            _renderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


def get_logger(name: str) -> Any:
    """Get a logger instance."""
    return structlog.get_logger(name)


def get_tracer(name: str) -> trace.Tracer:
    """Get a tracer from the globally configured provider."""
    return trace.get_tracer(name)


# Initialize on import
setup_logging()
setup_tracing()
