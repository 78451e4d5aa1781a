"""Build the traced forwarding body of one overriding method."""

from __future__ import annotations

from typing import Collection, Optional

from ..errors import MalformedSignatureError
from .nodes import MethodBodyNode, MethodNode, TagNode
from .signature import split_forwarding

VOID_RETURN = "None"
SPAN_VARIABLE = "span"


def unique_name(base: str, taken: Collection[str]) -> str:
    """Return ``base`` with trailing underscores added until it is not in ``taken``."""
    name = base
    while name in taken:
        name += "_"
    return name


class TracingEmitter:
    """Produces span-scoped forwarding bodies.

    Every body opens a span named after the method on the per-type span
    source, tags each forwarded argument under its own name, then calls the
    held implementation. Nothing is caught: a failing call propagates after
    the tags already attached, and the ``with`` block closes the span.

    Generated identifiers never shadow a forwarded parameter: the span
    variable is chosen per method, and the module-level aliases are chosen
    per artifact through :meth:`avoiding`.
    """

    def __init__(
        self,
        *,
        span_source: str = "_span_source",
        set_tag: str = "_set_tag",
        field: str = "_impl",
    ) -> None:
        self.span_source = span_source
        self.set_tag = set_tag
        self.field = field

    def avoiding(self, taken: Collection[str]) -> "TracingEmitter":
        """Return an emitter whose module-level aliases are not in ``taken``."""
        return TracingEmitter(
            span_source=unique_name(self.span_source, taken),
            set_tag=unique_name(self.set_tag, taken),
            field=self.field,
        )

    def emit(
        self,
        name: str,
        return_type: Optional[str],
        signature: str,
        forwarding: str,
        *,
        receiver: str = "self",
    ) -> MethodNode:
        arguments = split_forwarding(forwarding)
        duplicates = sorted({arg for arg in arguments if arguments.count(arg) > 1})
        if duplicates:
            raise MalformedSignatureError(
                f"Method '{name}' repeats parameter names: {', '.join(duplicates)}"
            )
        shadowed = sorted({self.span_source, self.set_tag} & set(arguments))
        if shadowed:
            raise MalformedSignatureError(
                f"Method '{name}' parameters shadow generated names: {', '.join(shadowed)}"
            )

        tags = tuple(TagNode(key=argument, value=argument) for argument in arguments)
        call = f"{receiver}.{self.field}.{name}({forwarding})"
        return MethodNode(
            name=name,
            signature=signature,
            return_type=return_type,
            body=MethodBodyNode(
                span_name=name,
                span_variable=unique_name(SPAN_VARIABLE, [*arguments, receiver]),
                tags=tags,
                call=call,
                returns=not is_void(return_type),
            ),
        )


def is_void(return_type: Optional[str]) -> bool:
    """Only an explicit ``-> None`` annotation marks a method as returning nothing."""
    return return_type is not None and return_type.strip() == VOID_RETURN


__all__ = ["SPAN_VARIABLE", "TracingEmitter", "VOID_RETURN", "is_void", "unique_name"]
