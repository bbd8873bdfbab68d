"""Tests for the tracer cache and create_span."""

from __future__ import annotations

from collections.abc import Generator

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter
from opentelemetry.trace import StatusCode

from asset_lineage.telemetry.tracing import create_span, get_tracer, reset_tracer, set_tracer


@pytest.fixture
def exporter() -> Generator[InMemorySpanExporter, None, None]:
    """Install an SDK tracer that records finished spans in memory."""
    exporter = InMemorySpanExporter()
    provider = TracerProvider()
    provider.add_span_processor(SimpleSpanProcessor(exporter))
    set_tracer(provider.get_tracer("test"))
    yield exporter
    provider.shutdown()


class TestGetTracer:
    """Tracer cache behavior."""

    def test_tracer_is_cached(self) -> None:
        assert get_tracer() is get_tracer()

    def test_set_and_clear_tracer(self) -> None:
        tracer = trace.NoOpTracer()

        set_tracer(tracer)
        assert get_tracer() is tracer

        set_tracer(None)
        assert get_tracer() is not tracer

    def test_reset_clears_cache(self) -> None:
        tracer = trace.NoOpTracer()
        set_tracer(tracer, name="other")

        reset_tracer()

        assert get_tracer("other") is not tracer


class TestCreateSpan:
    """Span creation and error recording."""

    def test_span_attributes_skip_none(self, exporter: InMemorySpanExporter) -> None:
        with create_span("asset_lineage.dispatch", {"entity.guid": "g1", "missing": None}):
            pass

        (span,) = exporter.get_finished_spans()
        assert span.name == "asset_lineage.dispatch"
        assert dict(span.attributes) == {"entity.guid": "g1"}

    def test_exception_recorded_and_reraised(self, exporter: InMemorySpanExporter) -> None:
        with pytest.raises(KeyError), create_span("asset_lineage.dispatch"):
            raise KeyError("boom")

        (span,) = exporter.get_finished_spans()
        assert span.status.status_code == StatusCode.ERROR
        assert [event.name for event in span.events] == ["exception"]

    def test_noop_tracer_by_default(self) -> None:
        with create_span("asset_lineage.dispatch") as span:
            assert not span.get_span_context().is_valid
