"""Tests for candidate discovery and type resolution."""

from __future__ import annotations

from pathlib import Path

from instrumentgen.discovery import SourceIndex
from instrumentgen.models import SourceFile, SourceManifest, TypeIdentity
from tests._fixtures.source_builder import SourceTreeBuilder

MARKED = """
from abc import ABC

from instrumentgen import Instrumentation


@Instrumentation
class {name}(ABC):
    def run(self) -> None:
        pass
"""


def test_candidates_are_sorted_by_location(source_builder: SourceTreeBuilder) -> None:
    source_builder.write(
        {
            "pkg/__init__.py": "",
            "pkg/b.py": MARKED.format(name="Beta"),
            "pkg/a.py": MARKED.format(name="Alpha") + MARKED.format(name="Gamma"),
        }
    )

    candidates = source_builder.index().candidates()

    assert [c.name for c in candidates] == ["Alpha", "Gamma", "Beta"]
    assert candidates[0].identity == TypeIdentity(namespace="pkg", name="Alpha")
    assert candidates[0].file.module == "pkg.a"


def test_custom_marker(source_builder: SourceTreeBuilder) -> None:
    source_builder.write(
        {
            "pkg/__init__.py": "",
            "pkg/a.py": MARKED.format(name="Alpha").replace("Instrumentation", "Traced"),
        }
    )

    assert source_builder.index().candidates() == []
    assert [c.name for c in source_builder.index(marker="Traced").candidates()] == ["Alpha"]


def test_resolve_collects_fragments_of_the_same_package(source_builder: SourceTreeBuilder) -> None:
    source_builder.write(
        {
            "pkg/__init__.py": "",
            "pkg/a.py": MARKED.format(name="Alpha"),
            "pkg/extra.py": """
            class Alpha:
                def more(self) -> None:
                    pass
            """,
            "other/__init__.py": "",
            "other/alpha.py": """
            class Alpha:
                def unrelated(self) -> None:
                    pass
            """,
        }
    )
    index = source_builder.index()

    descriptor = index.resolve(index.candidates()[0])

    assert descriptor is not None
    assert descriptor.module == "pkg.a"
    assert descriptor.is_abstract and descriptor.has_marker
    assert [f.path for f in descriptor.fragments] == ["pkg/a.py", "pkg/extra.py"]
    names = [m.name for f in descriptor.fragments for m in f.members]
    assert names == ["run", "more"]


def test_top_level_modules_in_different_roots_do_not_merge(
    source_builder: SourceTreeBuilder,
) -> None:
    source_builder.write(
        {
            "service_a/alpha.py": MARKED.format(name="Alpha"),
            "service_b/alpha.py": """
            class Alpha:
                def unrelated(self) -> None:
                    pass
            """,
        }
    )
    index = source_builder.index()

    descriptor = index.resolve(index.candidates()[0])

    assert descriptor is not None
    assert descriptor.module == "alpha"
    assert descriptor.namespace == ""
    assert [f.path for f in descriptor.fragments] == ["service_a/alpha.py"]


def test_resolve_returns_none_for_unimportable_module(source_builder: SourceTreeBuilder) -> None:
    source_builder.write(
        {
            "pkg/__init__.py": "",
            "pkg/not-a-module.py": MARKED.format(name="Alpha"),
        }
    )
    index = source_builder.index()

    candidates = index.candidates()

    assert [c.name for c in candidates] == ["Alpha"]
    assert index.resolve(candidates[0]) is None


def test_from_manifest_skips_missing_files(tmp_path: Path) -> None:
    manifest = SourceManifest(
        root=str(tmp_path),
        files=(SourceFile(path="gone.py", module="gone", namespace=""),),
    )

    index = SourceIndex.from_manifest(manifest)

    assert index.candidates() == []


def test_add_module_registers_in_memory_source() -> None:
    index = SourceIndex()
    file = SourceFile(path="pkg/a.py", module="pkg.a", namespace="pkg")

    index.add_module(file, MARKED.format(name="Alpha").encode("utf-8"))

    descriptor = index.resolve(index.candidates()[0])
    assert descriptor is not None
    assert descriptor.identity.qualified_name == "pkg.Alpha"
