"""Runtime marker recognised by the wrapper generator."""

from __future__ import annotations

from typing import TypeVar

_T = TypeVar("_T", bound=type)

MARKER_ATTRIBUTE = "__instrumentation__"


def Instrumentation(cls: _T | None = None):  # noqa: N802 - marker keeps its declared name
    """Mark an abstract class for instrumented wrapper generation.

    Usable bare (``@Instrumentation``) or called (``@Instrumentation()``). The
    decorator only tags the class; generation happens at build time by
    scanning source text for the marker.
    """

    def _mark(target: _T) -> _T:
        setattr(target, MARKER_ATTRIBUTE, True)
        return target

    if cls is None:
        return _mark
    return _mark(cls)


def is_instrumented(cls: type) -> bool:
    """Return True when ``cls`` itself was decorated with the marker."""
    return bool(cls.__dict__.get(MARKER_ATTRIBUTE, False))


__all__ = ["Instrumentation", "MARKER_ATTRIBUTE", "is_instrumented"]
