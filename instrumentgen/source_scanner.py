"""Source tree scanning and module naming utilities."""

from __future__ import annotations

import os
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterator, List, Optional, Sequence, Tuple

from .config import InstrumentGenConfig, OutputConfig
from .models import SourceFile, SourceManifest

_EXCLUDED_DIRS = {
    ".git",
    ".hg",
    ".svn",
    ".venv",
    "venv",
    "node_modules",
    "__pycache__",
    ".pytest_cache",
    ".mypy_cache",
    ".tox",
    ".nox",
    ".idea",
    "build",
    "dist",
}

_SOURCE_SUFFIX = ".py"


@dataclass
class IgnoreRule:
    """Represents an ignore rule parsed from .gitignore or .instrumentgen.yml."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        target = rel_path
        if self.anchored or self.has_slash:
            if fnmatchcase(target, self.pattern):
                return True
            if self.directory_only and target.startswith(f"{self.pattern}/"):
                return True
            return False

        for part in target.split("/"):
            if fnmatchcase(part, self.pattern):
                return True
        return False


def _build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    has_slash = "/" in pattern
    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash=has_slash,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.exists():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = _build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _load_ignore_rules(root: Path, exclude_paths: Sequence[str]) -> List[IgnoreRule]:
    rules = _parse_gitignore(root / ".gitignore")
    for pattern in exclude_paths:
        rule = _build_ignore_rule(pattern)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


def _iter_files(root: Path, rules: Sequence[IgnoreRule]) -> Iterator[Path]:
    for dirpath, dirnames, filenames in os.walk(root):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        filtered_dirs = []
        for name in sorted(dirnames):
            if name in _EXCLUDED_DIRS:
                continue
            rel_path = f"{rel_dir}/{name}" if rel_dir else name
            if _should_ignore(rel_path, True, rules):
                continue
            filtered_dirs.append(name)
        dirnames[:] = filtered_dirs

        for filename in sorted(filenames):
            rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
            if _should_ignore(rel_path, False, rules):
                continue
            yield current_dir / filename


def module_name(path: Path) -> Tuple[Optional[str], str, Path]:
    """Return ``(module, namespace, import_root)`` for a Python file.

    The namespace is the dotted package formed by the enclosing directories
    that contain ``__init__.py``; the import root is the directory above the
    outermost package. ``module`` is ``None`` when any part is not a valid
    identifier.
    """
    packages: List[str] = []
    directory = path.parent
    while (directory / "__init__.py").exists() and directory.parent != directory:
        packages.insert(0, directory.name)
        directory = directory.parent

    namespace = ".".join(packages)
    parts = list(packages)
    if path.stem != "__init__":
        parts.append(path.stem)
    if not parts or not all(part.isidentifier() for part in parts):
        return None, namespace, directory
    return ".".join(parts), namespace, directory


class SourceScanner:
    """Walks a source tree to list the Python modules worth indexing."""

    def __init__(self, *, generated_suffix: str | None = None) -> None:
        self.generated_suffix = generated_suffix

    def scan(self, root: str, config: InstrumentGenConfig | None = None) -> SourceManifest:
        """Return a manifest of importable Python modules under ``root``."""
        root_path = Path(root).expanduser().resolve()
        if not root_path.exists():
            raise FileNotFoundError(f"Source path not found: {root}")
        if not root_path.is_dir():
            raise NotADirectoryError(f"Source path is not a directory: {root}")

        exclude_paths = list(config.exclude_paths) if config is not None else []
        suffix = self.generated_suffix
        if suffix is None:
            suffix = (config.output if config is not None else OutputConfig()).suffix
        rules = _load_ignore_rules(root_path, exclude_paths)
        output_rule = _output_rule(root_path, config)
        if output_rule is not None:
            rules.append(output_rule)

        files: List[SourceFile] = []
        for path in _iter_files(root_path, rules):
            if path.suffix != _SOURCE_SUFFIX:
                continue
            if suffix and path.name.endswith(suffix):
                # Previously generated wrappers are outputs, never inputs.
                continue
            module, namespace, import_root = module_name(path)
            files.append(
                SourceFile(
                    path=path.relative_to(root_path).as_posix(),
                    module=module,
                    namespace=namespace,
                    import_root=_relative(import_root, root_path),
                )
            )

        return SourceManifest(root=str(root_path), files=tuple(files))


def _output_rule(root: Path, config: InstrumentGenConfig | None) -> IgnoreRule | None:
    """Wrappers written to a configured output directory are never rescanned."""
    if config is None or config.output.directory is None:
        return None
    try:
        relative = config.output.directory.resolve().relative_to(root).as_posix()
    except ValueError:
        return None
    if relative == ".":
        return None
    return _build_ignore_rule(f"/{relative}/")


def _relative(path: Path, root: Path) -> str:
    try:
        relative = path.relative_to(root).as_posix()
    except ValueError:
        return path.as_posix()
    return "" if relative == "." else relative


__all__ = ["IgnoreRule", "SourceScanner", "module_name"]
