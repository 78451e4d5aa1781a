"""Tracing runtime imported by generated wrapper modules."""

from __future__ import annotations

import threading
from contextlib import contextmanager
from typing import Any, Dict, Iterator, Optional

from opentelemetry import trace
from opentelemetry.trace import Span, Tracer, TracerProvider

_PRIMITIVES = (str, bool, int, float)


class TypeSpanSource:
    """Span source scoped to one declaring type.

    The tracer is named after the type's module and qualified name, so every
    wrapper of the same type reports under the same instrumentation scope.
    """

    def __init__(self, owner: type, tracer_provider: TracerProvider | None = None) -> None:
        self.owner = owner
        self.name = f"{owner.__module__}.{owner.__qualname__}"
        self._tracer: Tracer = trace.get_tracer(self.name, tracer_provider=tracer_provider)

    @contextmanager
    def start_span(self, name: str) -> Iterator[Optional[Span]]:
        """Open a span named ``name``; yields ``None`` when tracing is disabled."""
        with self._tracer.start_as_current_span(name) as span:
            yield span if span.is_recording() else None


_SOURCES: Dict[type, TypeSpanSource] = {}
_SOURCES_LOCK = threading.Lock()


def span_source_for(owner: type) -> TypeSpanSource:
    """Return the shared span source for ``owner``."""
    with _SOURCES_LOCK:
        source = _SOURCES.get(owner)
        if source is None:
            source = TypeSpanSource(owner)
            _SOURCES[owner] = source
        return source


def set_tag(span: Optional[Span], key: str, value: Any) -> None:
    """Attach ``key=value`` to ``span``; a missing span makes this a no-op.

    Values OpenTelemetry cannot store as attributes are recorded as their
    ``str()``; ``None`` is recorded as the string ``"None"``.
    """
    if span is None:
        return
    span.set_attribute(key, _coerce(value))


def _coerce(value: Any) -> Any:
    if isinstance(value, _PRIMITIVES):
        return value
    if isinstance(value, (list, tuple)) and value and all(
        isinstance(item, type(value[0])) and isinstance(item, _PRIMITIVES) for item in value
    ):
        return list(value)
    return str(value)


__all__ = ["TypeSpanSource", "set_tag", "span_source_for"]
