"""Logging and tracing for asset-lineage."""

from asset_lineage.telemetry.logging import add_trace_context, configure_logging
from asset_lineage.telemetry.tracing import create_span, get_tracer, reset_tracer, set_tracer

__all__ = [
    "add_trace_context",
    "configure_logging",
    "create_span",
    "get_tracer",
    "reset_tracer",
    "set_tracer",
]
