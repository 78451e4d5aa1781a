"""Order-preserving deduplication of import directives."""

from __future__ import annotations

from typing import Iterable, List, Sequence, Set

from ..models import Fragment, ImportDirective


def deduplicate_imports(directives: Iterable[ImportDirective]) -> List[ImportDirective]:
    """Drop repeated directives, keeping the first occurrence of each.

    Directives compare by exact trimmed text, so ``import os, sys`` and
    ``import sys, os`` stay distinct.
    """
    seen: Set[str] = set()
    ordered: List[ImportDirective] = []
    for directive in directives:
        key = directive.text.strip()
        if not key or key in seen:
            continue
        seen.add(key)
        ordered.append(directive)
    return ordered


def merge_fragment_imports(fragments: Sequence[Fragment]) -> List[ImportDirective]:
    """Merge the imports of every fragment, fragment by fragment."""
    return deduplicate_imports(
        directive for fragment in fragments for directive in fragment.imports
    )


def hoist_future_imports(directives: Sequence[ImportDirective]) -> List[ImportDirective]:
    """Move ``from __future__`` directives first, keeping relative order otherwise."""
    future = [directive for directive in directives if directive.is_future]
    rest = [directive for directive in directives if not directive.is_future]
    return future + rest


__all__ = ["deduplicate_imports", "hoist_future_imports", "merge_fragment_imports"]
