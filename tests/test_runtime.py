"""Tests for the tracing runtime used by generated wrappers."""

from __future__ import annotations

import pytest
from opentelemetry import trace
from opentelemetry.sdk.trace import TracerProvider
from opentelemetry.sdk.trace.export import SimpleSpanProcessor
from opentelemetry.sdk.trace.export.in_memory_span_exporter import InMemorySpanExporter

from instrumentgen import runtime
from instrumentgen.runtime import TypeSpanSource, set_tag, span_source_for


class Owner:
    pass


@pytest.fixture
def exporter() -> InMemorySpanExporter:
    return InMemorySpanExporter()


@pytest.fixture
def provider(exporter: InMemorySpanExporter) -> TracerProvider:
    tracer_provider = TracerProvider()
    tracer_provider.add_span_processor(SimpleSpanProcessor(exporter))
    return tracer_provider


def test_start_span_records_tags(provider: TracerProvider, exporter: InMemorySpanExporter) -> None:
    source = TypeSpanSource(Owner, tracer_provider=provider)

    with source.start_span("work") as span:
        set_tag(span, "count", 3)
        set_tag(span, "name", "job")

    (finished,) = exporter.get_finished_spans()
    assert finished.name == "work"
    assert dict(finished.attributes) == {"count": 3, "name": "job"}
    assert finished.instrumentation_scope.name == f"{__name__}.Owner"


def test_start_span_yields_none_when_not_recording() -> None:
    source = TypeSpanSource(Owner, tracer_provider=trace.NoOpTracerProvider())

    with source.start_span("work") as span:
        assert span is None
        set_tag(span, "ignored", 1)


def test_failing_body_still_ends_span(provider: TracerProvider, exporter: InMemorySpanExporter) -> None:
    source = TypeSpanSource(Owner, tracer_provider=provider)

    with pytest.raises(ValueError):
        with source.start_span("work") as span:
            set_tag(span, "value", 1)
            raise ValueError("boom")

    (finished,) = exporter.get_finished_spans()
    assert finished.attributes["value"] == 1
    assert finished.status.status_code is trace.StatusCode.ERROR


def test_set_tag_coerces_values(provider: TracerProvider, exporter: InMemorySpanExporter) -> None:
    source = TypeSpanSource(Owner, tracer_provider=provider)

    with source.start_span("work") as span:
        set_tag(span, "none", None)
        set_tag(span, "mapping", {"a": 1})
        set_tag(span, "numbers", (1, 2, 3))
        set_tag(span, "mixed", [1, "a"])
        set_tag(span, "ratio", 0.5)

    (finished,) = exporter.get_finished_spans()
    assert finished.attributes["none"] == "None"
    assert finished.attributes["mapping"] == "{'a': 1}"
    assert tuple(finished.attributes["numbers"]) == (1, 2, 3)
    assert finished.attributes["mixed"] == "[1, 'a']"
    assert finished.attributes["ratio"] == 0.5


def test_span_source_for_is_shared_per_type(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(runtime, "_SOURCES", {})

    class Other:
        pass

    assert span_source_for(Owner) is span_source_for(Owner)
    assert span_source_for(Owner) is not span_source_for(Other)
    assert span_source_for(Owner).name == f"{__name__}.Owner"
