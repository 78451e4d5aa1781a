"""Tests for the tree-sitter backed semantic model."""

from __future__ import annotations

import textwrap

from instrumentgen.discovery import ModuleModel, SemanticModel
from instrumentgen.models import DeclarationRef, MemberKind


def _build(source: str, path: str = "pkg/module.py") -> ModuleModel:
    text = textwrap.dedent(source).lstrip("\n")
    return SemanticModel(path, text.encode("utf-8")).build()


def test_module_level_imports_are_collected_verbatim() -> None:
    module = _build(
        """
        from __future__ import annotations

        import os, sys
        from typing import (
            Optional,
        )


        def helper():
            import json
        """
    )

    assert [directive.text for directive in module.imports] == [
        "from __future__ import annotations",
        "import os, sys",
        "from typing import (\n    Optional,\n)",
    ]


def test_class_decorators_and_origin() -> None:
    module = _build(
        """
        import abc


        @Instrumentation
        class Bare(abc.ABC):
            pass


        @Instrumentation()
        class Called(metaclass=abc.ABCMeta):
            pass


        @other.Instrumentation
        class Elsewhere:
            pass
        """
    )

    bare, called, elsewhere = module.classes
    assert bare.has_marker("Instrumentation")
    assert bare.is_abstract
    assert bare.origin == DeclarationRef(path="pkg/module.py", line=5, column=1)
    assert called.has_marker("Instrumentation")
    assert called.is_abstract
    assert not elsewhere.has_marker("Instrumentation")
    assert not elsewhere.is_abstract


def test_nested_classes_are_not_collected() -> None:
    module = _build(
        """
        class Outer:
            @Instrumentation
            class Inner:
                pass
        """
    )

    assert [declaration.name for declaration in module.classes] == ["Outer"]


def test_member_modifiers() -> None:
    module = _build(
        """
        from typing import final


        class Service(ABC):
            def run(self, job: str) -> bool:
                return True

            def _helper(self):
                pass

            @final
            def locked(self):
                pass

            @staticmethod
            def build():
                pass

            @classmethod
            def create(cls):
                pass

            async def fetch(self):
                pass
        """
    )

    members = {member.name: member for member in module.classes[0].members}
    assert members["run"].kind is MemberKind.METHOD
    assert members["run"].type == "bool"
    assert members["run"].modifiers.public
    assert not members["_helper"].modifiers.public
    assert not members["locked"].modifiers.overridable
    assert members["build"].modifiers.static
    assert members["create"].modifiers.static
    assert members["fetch"].is_async
    assert not members["run"].is_async


def test_properties_absorb_their_accessors() -> None:
    module = _build(
        """
        class Settings(ABC):
            @property
            def label(self) -> str:
                return ""

            @label.setter
            def label(self, value: str) -> None:
                pass

            @label.deleter
            def label(self) -> None:
                pass

            @property
            def size(self) -> int:
                return 0
        """
    )

    members = module.classes[0].members
    assert [(member.name, member.kind) for member in members] == [
        ("label", MemberKind.PROPERTY),
        ("size", MemberKind.PROPERTY),
    ]
    assert members[0].has_setter
    assert not members[1].has_setter
    assert members[1].type == "int"


def test_parameter_lists_keep_text_and_names() -> None:
    module = _build(
        """
        class Service(ABC):
            def run(self, a: int, b="x", /, c: list[int] = [], d=None) -> None:
                pass
        """
    )

    parameters = module.classes[0].members[0].parameters
    assert parameters is not None
    assert parameters.text == '(self, a: int, b="x", /, c: list[int] = [], d=None)'
    assert parameters.receiver == "self"
    assert [(p.name, p.type, p.position) for p in parameters.parameters] == [
        ("a", "int", 0),
        ("b", None, 1),
        ("c", "list[int]", 2),
        ("d", None, 3),
    ]
    assert parameters.defect is None


def test_parameter_defects() -> None:
    module = _build(
        """
        class Service(ABC):
            def splat(self, *args):
                pass

            def kwargs(self, **options):
                pass

            def keyword_only(self, *, flag):
                pass

            def typed_splat(self, *values: int):
                pass

            def no_receiver():
                pass
        """
    )

    defects = {
        member.name: member.parameters.defect
        for member in module.classes[0].members
        if member.parameters is not None
    }
    assert defects["splat"] == "variadic parameters cannot be forwarded positionally"
    assert defects["kwargs"] == "variadic parameters cannot be forwarded positionally"
    assert defects["keyword_only"] == "keyword-only parameters cannot be forwarded positionally"
    assert defects["typed_splat"] == "variadic parameters cannot be forwarded positionally"
    assert defects["no_receiver"] == "method declares no receiver parameter"


def test_syntax_errors_are_recovered() -> None:
    module = _build(
        """
        @Instrumentation
        class Service(ABC):
            def run(self) -> None:
                pass

        def broken(:
        """
    )

    assert module.has_errors
    assert [declaration.name for declaration in module.classes] == ["Service"]
