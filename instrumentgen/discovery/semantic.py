"""Read class declarations of one module into immutable descriptors."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Set, Tuple

from tree_sitter import Node

from ..models import (
    DeclarationRef,
    ImportDirective,
    MemberDescriptor,
    MemberKind,
    Modifiers,
    ParameterDescriptor,
    ParameterList,
)
from .tree_sitter import (
    PythonParser,
    decorator_name,
    is_async,
    iter_named_children,
    node_text,
    unwrap_definition,
)

_IMPORT_NODES = {"import_statement", "import_from_statement", "future_import_statement"}
_ABSTRACT_BASES = {"ABC", "abc.ABC"}
_ABSTRACT_METACLASSES = {"ABCMeta", "abc.ABCMeta"}
_STATIC_DECORATORS = {"staticmethod", "classmethod", "builtins.staticmethod", "builtins.classmethod"}
_FINAL_DECORATORS = {"final", "typing.final", "typing_extensions.final"}
_PROPERTY_DECORATORS = {
    "property",
    "builtins.property",
    "abstractproperty",
    "abc.abstractproperty",
    "cached_property",
    "functools.cached_property",
}
_ACCESSOR_SUFFIXES = (".setter", ".deleter", ".getter")


@dataclass(frozen=True)
class ClassDeclaration:
    """One module-level class statement."""

    name: str
    decorators: Tuple[str, ...]
    is_abstract: bool
    origin: DeclarationRef
    members: Tuple[MemberDescriptor, ...]

    def has_marker(self, marker: str) -> bool:
        return marker in self.decorators


@dataclass(frozen=True)
class ModuleModel:
    """Everything the generator needs from one parsed module."""

    path: str
    imports: Tuple[ImportDirective, ...]
    classes: Tuple[ClassDeclaration, ...]
    has_errors: bool = False


class SemanticModel:
    """Extracts declarations from a tree-sitter parse of one module."""

    def __init__(self, path: str, source: bytes, parser: PythonParser | None = None) -> None:
        self.path = path
        self.source = source
        self._tree = (parser or PythonParser()).parse(source)

    def build(self) -> ModuleModel:
        root = self._tree.root_node
        return ModuleModel(
            path=self.path,
            imports=tuple(self._imports(root)),
            classes=tuple(self._classes(root)),
            has_errors=root.has_error,
        )

    def _imports(self, root: Node) -> List[ImportDirective]:
        return [
            ImportDirective.parse(self._text(child))
            for child in root.named_children
            if child.type in _IMPORT_NODES
        ]

    def _classes(self, root: Node) -> List[ClassDeclaration]:
        declarations: List[ClassDeclaration] = []
        for child in root.named_children:
            decorators, definition = unwrap_definition(child)
            if definition is None or definition.type != "class_definition":
                continue
            name = self._text(definition.child_by_field_name("name"))
            if not name:
                continue
            declarations.append(
                ClassDeclaration(
                    name=name,
                    decorators=tuple(decorator_name(d, self.source) for d in decorators),
                    is_abstract=self._is_abstract(definition),
                    origin=self._origin(definition),
                    members=tuple(self._members(definition)),
                )
            )
        return declarations

    def _is_abstract(self, definition: Node) -> bool:
        superclasses = definition.child_by_field_name("superclasses")
        if superclasses is None:
            return False
        for argument in iter_named_children(superclasses):
            if argument.type == "keyword_argument":
                keyword = self._text(argument.child_by_field_name("name"))
                value = self._text(argument.child_by_field_name("value")).strip()
                if keyword == "metaclass" and value in _ABSTRACT_METACLASSES:
                    return True
            elif self._text(argument).strip() in _ABSTRACT_BASES:
                return True
        return False

    def _members(self, definition: Node) -> List[MemberDescriptor]:
        body = definition.child_by_field_name("body")
        if body is None:
            return []

        functions: List[Tuple[List[str], Node]] = []
        setters: Set[str] = set()
        for statement in iter_named_children(body):
            decorators, function = unwrap_definition(statement)
            if function is None or function.type != "function_definition":
                continue
            names = [decorator_name(d, self.source) for d in decorators]
            accessor = next((n for n in names if n.endswith(_ACCESSOR_SUFFIXES)), None)
            if accessor is not None:
                # Setters and deleters belong to their property, never to the method list.
                if accessor.endswith(".setter"):
                    setters.add(accessor.rsplit(".", 1)[0])
                continue
            functions.append((names, function))

        members: List[MemberDescriptor] = []
        for names, function in functions:
            name = self._text(function.child_by_field_name("name"))
            if not name:
                continue
            decorator_set = set(names)
            modifiers = Modifiers(
                public=not name.startswith("_"),
                overridable=not (decorator_set & _FINAL_DECORATORS),
                static=bool(decorator_set & _STATIC_DECORATORS),
            )
            return_type = self._text(function.child_by_field_name("return_type")).strip() or None
            if decorator_set & _PROPERTY_DECORATORS:
                members.append(
                    MemberDescriptor(
                        kind=MemberKind.PROPERTY,
                        name=name,
                        type=return_type,
                        modifiers=modifiers,
                        origin=self._origin(function),
                        is_async=is_async(function),
                        has_setter=name in setters,
                    )
                )
                continue
            members.append(
                MemberDescriptor(
                    kind=MemberKind.METHOD,
                    name=name,
                    type=return_type,
                    modifiers=modifiers,
                    origin=self._origin(function),
                    parameters=self._parameter_list(function.child_by_field_name("parameters")),
                    is_async=is_async(function),
                )
            )
        return members

    def _parameter_list(self, parameters: Optional[Node]) -> Optional[ParameterList]:
        if parameters is None:
            return None
        text = self._text(parameters)
        if parameters.has_error:
            return ParameterList(text=text, receiver=None, defect="unparseable parameter list")

        receiver: Optional[str] = None
        descriptors: List[ParameterDescriptor] = []
        defect: Optional[str] = None
        seen_first = False
        for node in iter_named_children(parameters):
            if node.type == "positional_separator":
                continue
            name, annotation, problem = self._parameter(node)
            if problem is not None:
                defect = defect or problem
                continue
            if not seen_first:
                seen_first = True
                receiver = name
                continue
            descriptors.append(
                ParameterDescriptor(name=name, type=annotation, position=len(descriptors))
            )

        if receiver is None and defect is None:
            defect = "method declares no receiver parameter"
        return ParameterList(
            text=text,
            receiver=receiver,
            parameters=tuple(descriptors),
            defect=defect,
        )

    def _parameter(self, node: Node) -> Tuple[str, Optional[str], Optional[str]]:
        """Return ``(name, annotation, defect)`` for one parameter node."""
        kind = node.type
        if kind == "identifier":
            return self._text(node), None, None
        if kind == "typed_parameter":
            target = next(iter_named_children(node), None)
            if target is None or target.type != "identifier":
                return "", None, "variadic parameters cannot be forwarded positionally"
            annotation = self._text(node.child_by_field_name("type")).strip() or None
            return self._text(target), annotation, None
        if kind in {"default_parameter", "typed_default_parameter"}:
            name_node = node.child_by_field_name("name")
            if name_node is None or name_node.type != "identifier":
                return "", None, f"unsupported parameter form '{self._text(node)}'"
            annotation = self._text(node.child_by_field_name("type")).strip() or None
            return self._text(name_node), annotation, None
        if kind in {"list_splat_pattern", "dictionary_splat_pattern"}:
            return "", None, "variadic parameters cannot be forwarded positionally"
        if kind == "keyword_separator":
            return "", None, "keyword-only parameters cannot be forwarded positionally"
        return "", None, f"unsupported parameter form '{self._text(node)}'"

    def _origin(self, node: Node) -> DeclarationRef:
        row, column = node.start_point
        return DeclarationRef(path=self.path, line=row + 1, column=column + 1)

    def _text(self, node: Optional[Node]) -> str:
        return node_text(node, self.source)


__all__ = ["ClassDeclaration", "ModuleModel", "SemanticModel"]
