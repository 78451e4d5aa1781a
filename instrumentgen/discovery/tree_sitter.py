"""Tree-sitter parsing helpers for Python source."""

from __future__ import annotations

from typing import Iterator, Optional

import tree_sitter_python
from tree_sitter import Language, Node, Parser, Tree

PYTHON_LANGUAGE = Language(tree_sitter_python.language())


class PythonParser:
    """Thin wrapper around a tree-sitter parser bound to the Python grammar."""

    def __init__(self) -> None:
        self._parser = Parser(PYTHON_LANGUAGE)

    def parse(self, source: bytes) -> Tree:
        return self._parser.parse(source)


def node_text(node: Optional[Node], source_bytes: bytes) -> str:
    if node is None:
        return ""
    return source_bytes[node.start_byte : node.end_byte].decode("utf-8", errors="ignore")


def iter_named_children(node: Node) -> Iterator[Node]:
    """Yield named children, skipping comments."""
    for child in node.named_children:
        if child.type == "comment":
            continue
        yield child


def unwrap_definition(node: Node) -> tuple[list[Node], Optional[Node]]:
    """Split a possibly decorated statement into its decorators and definition."""
    if node.type == "decorated_definition":
        decorators = [child for child in node.named_children if child.type == "decorator"]
        return decorators, node.child_by_field_name("definition")
    if node.type in {"class_definition", "function_definition"}:
        return [], node
    return [], None


def decorator_name(decorator: Node, source_bytes: bytes) -> str:
    """Return the callee text of a decorator (``@a.b(...)`` gives ``a.b``)."""
    expression = next(iter_named_children(decorator), None)
    if expression is None:
        return ""
    if expression.type == "call":
        expression = expression.child_by_field_name("function")
    return node_text(expression, source_bytes).strip()


def is_async(function: Node) -> bool:
    return any(child.type == "async" for child in function.children)


__all__ = [
    "PYTHON_LANGUAGE",
    "PythonParser",
    "decorator_name",
    "is_async",
    "iter_named_children",
    "node_text",
    "unwrap_definition",
]
