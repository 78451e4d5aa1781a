"""Assemble one wrapper module per eligible candidate type."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from pathlib import Path
from typing import List, Optional

from ..config import HeaderConfig
from ..logging import get_logger
from ..models import CollectedMembers, GeneratedArtifact, ImportDirective, TypeDescriptor
from .eligibility import Eligibility, evaluate_eligibility
from .header import build_header
from .imports import hoist_future_imports
from .members import MemberCollector
from .nodes import (
    ArtifactNode,
    ConstructorNode,
    FieldNode,
    ImportBlockNode,
    NamespaceNode,
    PropertyNode,
    TypeNode,
)
from .renderer import ArtifactRenderer
from .signature import split_forwarding
from .tracing import TracingEmitter

_FUTURE_ANNOTATIONS = ImportDirective("from __future__ import annotations")
_IMPL_FIELD = "_impl"
_SPAN_SOURCE = "_span_source"


def companion_name(type_name: str) -> str:
    """Name of the wrapper generated for ``type_name``."""
    return f"Instrumented{type_name}Impl"


@dataclass(frozen=True)
class AssemblyResult:
    """Outcome of assembling one candidate."""

    eligibility: Eligibility
    artifact: Optional[GeneratedArtifact] = None


class ClassAssembler:
    """Turns a resolved candidate into a rendered wrapper module."""

    def __init__(
        self,
        *,
        header: HeaderConfig | None = None,
        runtime_module: str = "instrumentgen.runtime",
        suffix: str = "_g.py",
        collector: MemberCollector | None = None,
        emitter: TracingEmitter | None = None,
        renderer: ArtifactRenderer | None = None,
        year: int | None = None,
    ) -> None:
        self.header = header or HeaderConfig()
        self.runtime_module = runtime_module
        self.suffix = suffix
        self.collector = collector or MemberCollector()
        self.emitter = emitter or TracingEmitter(span_source=_SPAN_SOURCE, field=_IMPL_FIELD)
        self.renderer = renderer or ArtifactRenderer()
        # Resolved once so every artifact of a pass shares the same header.
        self.year = year or self.header.year or datetime.now(UTC).year
        self.logger = get_logger("synthesis.assembler")

    def assemble(self, descriptor: Optional[TypeDescriptor]) -> AssemblyResult:
        """Filter, collect and render ``descriptor``.

        Ineligible candidates return a result without an artifact. Generation
        errors propagate; nothing partial is ever returned.
        """
        eligibility = evaluate_eligibility(descriptor)
        if not eligibility.eligible or descriptor is None:
            return AssemblyResult(eligibility=eligibility)

        members = self.collector.collect(descriptor)
        node = self.build_tree(descriptor, members)
        text = self.renderer.render(node)
        artifact = GeneratedArtifact(
            type_name=node.type.name,
            name=f"{node.type.name}{self.suffix}",
            text=text,
            source=descriptor.identity,
            directory=str(Path(descriptor.origin.path).parent),
            origin=descriptor.origin,
            relative_imports=any(directive.is_relative for directive in members.imports),
        )
        self.logger.debug(
            "Assembled %s (%d methods, %d properties)",
            artifact.name,
            len(members.methods),
            len(members.properties),
        )
        return AssemblyResult(eligibility=eligibility, artifact=artifact)

    def build_tree(self, descriptor: TypeDescriptor, members: CollectedMembers) -> ArtifactNode:
        """Build the emission tree for one type without rendering it."""
        wrapper = companion_name(descriptor.name)
        taken = {
            argument for method in members.methods for argument in split_forwarding(method.forwarding)
        }
        emitter = self.emitter.avoiding(taken)

        methods = []
        for method in members.methods:
            parameters = method.descriptor.parameters
            receiver = parameters.receiver if parameters and parameters.receiver else "self"
            methods.append(
                emitter.emit(
                    method.descriptor.name,
                    method.descriptor.type,
                    method.signature,
                    method.forwarding,
                    receiver=receiver,
                )
            )

        properties = tuple(
            PropertyNode(name=prop.name, type=prop.type) for prop in members.properties
        )

        constructor = ConstructorNode(
            parameter="impl",
            annotation=descriptor.name,
            docstring=(
                f"Initialize a new instance of {wrapper}.",
                "",
                f":param impl: The {descriptor.name} implementation calls are forwarded to.",
            ),
        )

        return ArtifactNode(
            header=build_header(self.header, descriptor.identity, year=self.year),
            imports=ImportBlockNode(directives=tuple(d.text for d in self._import_block(members))),
            namespace=NamespaceNode(
                base_module=descriptor.module,
                base_name=descriptor.name,
                runtime_module=self.runtime_module,
                span_source=emitter.span_source,
                set_tag=emitter.set_tag,
            ),
            type=TypeNode(
                name=wrapper,
                base=descriptor.name,
                docstring=f"The instrumented decorated class for {descriptor.name}.",
                field=FieldNode(name=emitter.field, annotation=descriptor.name),
                properties=properties,
                constructor=constructor,
                methods=tuple(methods),
            ),
        )

    @staticmethod
    def _import_block(members: CollectedMembers) -> List[ImportDirective]:
        directives = hoist_future_imports(members.imports)
        if _FUTURE_ANNOTATIONS not in directives:
            directives.insert(0, _FUTURE_ANNOTATIONS)
        return directives


__all__ = ["AssemblyResult", "ClassAssembler", "companion_name"]
