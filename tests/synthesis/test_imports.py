"""Tests for import deduplication."""

from __future__ import annotations

from instrumentgen.models import DeclarationRef, Fragment, ImportDirective
from instrumentgen.synthesis.imports import (
    deduplicate_imports,
    hoist_future_imports,
    merge_fragment_imports,
)


def _fragment(path: str, *imports: str) -> Fragment:
    return Fragment(
        module=path.removesuffix(".py").replace("/", "."),
        path=path,
        origin=DeclarationRef(path=path, line=1, column=1),
        imports=tuple(ImportDirective.parse(text) for text in imports),
    )


def test_deduplicate_imports_keeps_first_occurrence() -> None:
    directives = [ImportDirective.parse(text) for text in ("import a", "import b", "import a")]

    assert [d.text for d in deduplicate_imports(directives)] == ["import a", "import b"]


def test_deduplicate_imports_compares_exact_text() -> None:
    directives = [
        ImportDirective.parse("import os, sys"),
        ImportDirective.parse("import sys, os"),
        ImportDirective.parse("  import os, sys  "),
    ]

    assert [d.text for d in deduplicate_imports(directives)] == [
        "import os, sys",
        "import sys, os",
    ]


def test_merge_fragment_imports_unions_in_fragment_order() -> None:
    fragments = [
        _fragment("pkg/a.py", "import A", "import B"),
        _fragment("pkg/b.py", "import B", "import C"),
    ]

    merged = merge_fragment_imports(fragments)

    assert [d.text for d in merged] == ["import A", "import B", "import C"]


def test_hoist_future_imports_moves_future_first() -> None:
    directives = [
        ImportDirective.parse("import os"),
        ImportDirective.parse("from __future__ import annotations"),
        ImportDirective.parse("import sys"),
    ]

    assert [d.text for d in hoist_future_imports(directives)] == [
        "from __future__ import annotations",
        "import os",
        "import sys",
    ]
