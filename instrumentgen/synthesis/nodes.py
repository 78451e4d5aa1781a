"""Typed emission nodes for one generated wrapper module."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Tuple


@dataclass(frozen=True)
class HeaderNode:
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class ImportBlockNode:
    directives: Tuple[str, ...]


@dataclass(frozen=True)
class NamespaceNode:
    """Binds the wrapper to the base type and the tracing runtime."""

    base_module: str
    base_name: str
    runtime_module: str
    span_source: str
    set_tag: str


@dataclass(frozen=True)
class FieldNode:
    name: str
    annotation: str


@dataclass(frozen=True)
class PropertyNode:
    name: str
    type: Optional[str]


@dataclass(frozen=True)
class ConstructorNode:
    parameter: str
    annotation: str
    docstring: Tuple[str, ...]


@dataclass(frozen=True)
class TagNode:
    key: str
    value: str


@dataclass(frozen=True)
class MethodBodyNode:
    span_name: str
    span_variable: str
    tags: Tuple[TagNode, ...]
    call: str
    returns: bool


@dataclass(frozen=True)
class MethodNode:
    name: str
    signature: str
    return_type: Optional[str]
    body: MethodBodyNode


@dataclass(frozen=True)
class TypeNode:
    name: str
    base: str
    docstring: str
    field: FieldNode
    properties: Tuple[PropertyNode, ...]
    constructor: ConstructorNode
    methods: Tuple[MethodNode, ...]


@dataclass(frozen=True)
class ArtifactNode:
    """Root of the emission tree; rendered by :class:`ArtifactRenderer`."""

    header: HeaderNode
    imports: ImportBlockNode
    namespace: NamespaceNode
    type: TypeNode


__all__ = [
    "ArtifactNode",
    "ConstructorNode",
    "FieldNode",
    "HeaderNode",
    "ImportBlockNode",
    "MethodBodyNode",
    "MethodNode",
    "NamespaceNode",
    "PropertyNode",
    "TagNode",
    "TypeNode",
]
