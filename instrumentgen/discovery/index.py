"""Candidate discovery and type resolution over a scanned source tree."""

from __future__ import annotations

from collections import defaultdict
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, List, Optional, Tuple

from ..logging import get_logger
from ..models import (
    DeclarationRef,
    Fragment,
    SourceFile,
    SourceManifest,
    TypeDescriptor,
    TypeIdentity,
)
from .semantic import ClassDeclaration, ModuleModel, SemanticModel
from .tree_sitter import PythonParser


@dataclass(frozen=True)
class Candidate:
    """A class declaration carrying the instrumentation marker."""

    name: str
    file: SourceFile
    origin: DeclarationRef

    @property
    def identity(self) -> TypeIdentity:
        return TypeIdentity(namespace=self.file.namespace, name=self.name)


@dataclass(frozen=True)
class _IndexedClass:
    file: SourceFile
    module: ModuleModel
    declaration: ClassDeclaration


class SourceIndex:
    """Parses every module once and answers candidate and fragment queries.

    Lookups only read immutable descriptors, so one index can serve
    concurrent resolution of independent candidates.
    """

    def __init__(self, marker: str = "Instrumentation", parser: PythonParser | None = None) -> None:
        self.marker = marker
        self._parser = parser or PythonParser()
        self._classes: Dict[Tuple[str, TypeIdentity], List[_IndexedClass]] = defaultdict(list)
        self._by_origin: Dict[DeclarationRef, _IndexedClass] = {}
        self._candidates: List[Candidate] = []
        self.logger = get_logger("discovery.index")

    @classmethod
    def from_manifest(
        cls,
        manifest: SourceManifest,
        *,
        marker: str = "Instrumentation",
        parser: PythonParser | None = None,
    ) -> "SourceIndex":
        index = cls(marker=marker, parser=parser)
        root = Path(manifest.root)
        for file in manifest.files:
            try:
                source = (root / file.path).read_bytes()
            except OSError as exc:
                index.logger.warning("Skipping unreadable module %s: %s", file.path, exc)
                continue
            index.add_module(file, source)
        return index

    def add_module(self, file: SourceFile, source: bytes) -> ModuleModel:
        """Parse ``source`` and register its module-level classes."""
        module = SemanticModel(file.path, source, parser=self._parser).build()
        if module.has_errors:
            self.logger.debug("%s contains syntax errors; parsing recovered", file.path)
        for declaration in module.classes:
            entry = _IndexedClass(file=file, module=module, declaration=declaration)
            identity = TypeIdentity(namespace=file.namespace, name=declaration.name)
            self._classes[(file.import_root, identity)].append(entry)
            self._by_origin[declaration.origin] = entry
            if declaration.has_marker(self.marker):
                self._candidates.append(
                    Candidate(name=declaration.name, file=file, origin=declaration.origin)
                )
        return module

    def candidates(self) -> List[Candidate]:
        """Marked declarations in module order, then source order."""
        return sorted(self._candidates, key=lambda candidate: candidate.origin)

    def fragments(self, identity: TypeIdentity, import_root: str = "") -> Tuple[Fragment, ...]:
        """Every declaration contributing to ``identity``, ordered by location.

        Modules under different import roots never share a type, even when
        their dotted names coincide.
        """
        entries = sorted(
            self._classes.get((import_root, identity), ()),
            key=lambda e: e.declaration.origin,
        )
        return tuple(
            Fragment(
                module=entry.file.module or "",
                path=entry.file.path,
                origin=entry.declaration.origin,
                members=entry.declaration.members,
                imports=entry.module.imports,
            )
            for entry in entries
        )

    def resolve(self, candidate: Candidate) -> Optional[TypeDescriptor]:
        """Return the descriptor for ``candidate`` or ``None`` when it cannot be resolved.

        A candidate is unresolvable when its module has no importable dotted
        name or when the declaration is no longer indexed.
        """
        entry = self._by_origin.get(candidate.origin)
        if entry is None or not candidate.file.module:
            return None
        fragments = self.fragments(candidate.identity, candidate.file.import_root)
        if not fragments:
            return None
        return TypeDescriptor(
            name=candidate.name,
            namespace=candidate.file.namespace,
            module=candidate.file.module,
            origin=candidate.origin,
            fragments=fragments,
            is_abstract=entry.declaration.is_abstract,
            has_marker=entry.declaration.has_marker(self.marker),
        )


__all__ = ["Candidate", "SourceIndex"]
