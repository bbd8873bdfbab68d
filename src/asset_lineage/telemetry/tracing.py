"""OpenTelemetry tracing for dispatch cycles.

Provides a thread-safe tracer cache with a NoOpTracer fallback, and
create_span(), a context manager that records exceptions on the span
before re-raising them.
"""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import TYPE_CHECKING, Any

from opentelemetry import trace
from opentelemetry.trace import Status, StatusCode

if TYPE_CHECKING:
    from collections.abc import Generator

    from opentelemetry.trace import Span, Tracer

_TRACER_NAME = "asset_lineage"

# Module-level state for thread-safe tracer management
_tracers: dict[str, Tracer] = {}
_tracer_init_failed: bool = False
_lock = threading.Lock()


def get_tracer(name: str = _TRACER_NAME) -> Tracer:
    """Get or create a cached tracer instance.

    Uses double-checked locking for thread-safe lazy initialization and
    returns a NoOpTracer if OpenTelemetry initialization fails.

    Args:
        name: The tracer name. Each unique name gets its own tracer.

    Returns:
        OpenTelemetry Tracer instance for the given name.
    """
    global _tracer_init_failed

    if name in _tracers:
        return _tracers[name]

    if _tracer_init_failed:
        return trace.NoOpTracer()

    with _lock:
        if name in _tracers:
            return _tracers[name]

        if _tracer_init_failed:
            return trace.NoOpTracer()

        try:
            tracer = trace.get_tracer(name)
        except Exception:
            # OTel global state corrupted (common in test environments)
            _tracer_init_failed = True
            return trace.NoOpTracer()
        _tracers[name] = tracer
        return tracer


def set_tracer(tracer: Tracer | None, name: str = _TRACER_NAME) -> None:
    """Set or clear the tracer for a name (for testing).

    Args:
        tracer: The tracer instance to use, or None to clear.
        name: The tracer name to set.
    """
    with _lock:
        if tracer is None:
            _tracers.pop(name, None)
        else:
            _tracers[name] = tracer


def reset_tracer() -> None:
    """Clear cached tracers and the initialization failure flag."""
    global _tracer_init_failed
    with _lock:
        _tracers.clear()
        _tracer_init_failed = False


@contextmanager
def create_span(
    name: str,
    attributes: dict[str, Any] | None = None,
) -> Generator[Span, None, None]:
    """Run a block inside a span, recording any exception on it.

    None-valued attributes are skipped.

    Args:
        name: Span name.
        attributes: Initial span attributes.

    Yields:
        The active span.

    Example:
        >>> with create_span("asset_lineage.dispatch", {"entity.guid": "g1"}) as span:
        ...     span.set_attribute("asset_lineage.route", "PLAIN_DELETE")
    """
    tracer = get_tracer()
    with tracer.start_as_current_span(name, record_exception=False) as span:
        for key, value in (attributes or {}).items():
            if value is not None:
                span.set_attribute(key, value)
        try:
            yield span
        except Exception as e:
            span.record_exception(e)
            span.set_status(Status(StatusCode.ERROR, type(e).__name__))
            raise


__all__ = ["create_span", "get_tracer", "reset_tracer", "set_tracer"]
