"""Logging and tracing for modcc builds.

Logs are structlog events rendered through stdlib logging on stderr, so
command output on stdout stays machine-readable. Spans use the
OpenTelemetry API only; they are recorded when the host process installs
an SDK tracer provider and are no-ops otherwise.
"""

from __future__ import annotations

import logging
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

import structlog
from opentelemetry import trace
from opentelemetry.trace import SpanKind, Status, StatusCode

if TYPE_CHECKING:
    from opentelemetry.trace import Span, Tracer
    from structlog.stdlib import BoundLogger

TRACER_NAME = "modcc.build"

_logger: BoundLogger | None = None
_tracer: Tracer | None = None


def get_logger() -> BoundLogger:
    """Return the shared build logger (created on first use)."""
    global _logger
    if _logger is None:
        _logger = structlog.get_logger(TRACER_NAME)
    return _logger


def get_tracer() -> Tracer:
    """Return the shared build tracer (created on first use)."""
    global _tracer
    if _tracer is None:
        _tracer = trace.get_tracer(TRACER_NAME)
    return _tracer


def _renderer(json_format: bool) -> Any:
    if json_format:
        return structlog.processors.JSONRenderer()
    return structlog.dev.ConsoleRenderer()


def configure_logging(
    *,
    log_level: str = "INFO",
    json_format: bool = False,
    add_timestamp: bool = True,
) -> None:
    """Route structlog events to stderr at ``log_level``.

    Safe to call more than once; each call rebinds the handler to the
    current ``sys.stderr``.

    Args:
        log_level: DEBUG, INFO, WARNING or ERROR.
        json_format: Render one JSON object per line instead of console text.
        add_timestamp: Add an ISO ``timestamp`` key.

    Example:
        >>> configure_logging(log_level=settings.log_level, json_format=True)
    """
    processors: list[Any] = [structlog.stdlib.filter_by_level]
    if add_timestamp:
        processors.append(structlog.processors.TimeStamper(fmt="iso"))
    processors += [
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        _renderer(json_format),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )
    logging.basicConfig(
        stream=sys.stderr,
        format="%(message)s",
        level=logging.getLevelName(log_level.upper()),
        force=True,
    )


@contextmanager
def span(
    name: str,
    *,
    attributes: dict[str, Any] | None = None,
    kind: SpanKind = SpanKind.INTERNAL,
    log_start: bool = True,
    log_end: bool = True,
) -> Iterator[Span]:
    """Run a block inside a span, with ``<name>_started/_completed/_failed`` debug events.

    Exceptions are recorded on the span and re-raised.

    Example:
        >>> with span("modcc.find_entry_points", attributes={"source_root": "node_modules"}):
        ...     info = finder.find_entry_points(root)
    """
    attrs = dict(attributes or {})
    log = get_logger()

    with get_tracer().start_as_current_span(name, kind=kind, attributes=attrs) as current:
        if log_start:
            log.debug(f"{name}_started", **attrs)
        try:
            yield current
        except Exception as exc:
            current.record_exception(exc)
            current.set_status(Status(StatusCode.ERROR, str(exc)))
            log.debug(f"{name}_failed", error=str(exc), **attrs)
            raise
        current.set_status(Status(StatusCode.OK))
        if log_end:
            log.debug(f"{name}_completed", **attrs)


@contextmanager
def entry_point_operation(
    operation: str,
    *,
    entry_point: str,
    format: str | None = None,
    is_core: bool | None = None,
) -> Iterator[Span]:
    """Span named ``modcc.<operation>`` tagged with the entry point being built."""
    attrs: dict[str, Any] = {"modcc.entry_point": entry_point}
    if format is not None:
        attrs["modcc.format"] = format
    if is_core is not None:
        attrs["modcc.is_core"] = is_core

    with span(f"modcc.{operation}", attributes=attrs) as current:
        yield current
