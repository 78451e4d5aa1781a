"""Deterministic serializer for emission trees."""

from __future__ import annotations

import json
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .nodes import ArtifactNode

_TEMPLATE_NAME = "wrapper.py.j2"


def _quote(value: str) -> str:
    return json.dumps(value)


class ArtifactRenderer:
    """Renders an :class:`ArtifactNode` through the wrapper template."""

    def __init__(self, templates_dir: Path | None = None) -> None:
        self.templates_dir = templates_dir
        self._env = self._create_env(templates_dir)

    def render(self, artifact: ArtifactNode) -> str:
        template = self._env.get_template(_TEMPLATE_NAME)
        text = template.render(
            header=artifact.header,
            imports=artifact.imports,
            namespace=artifact.namespace,
            type=artifact.type,
        )
        return text.rstrip("\n") + "\n"

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        default_dir = str(Path(__file__).with_name("templates"))
        if default_dir not in directories:
            directories.append(default_dir)
        env = Environment(
            loader=FileSystemLoader(directories),
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            keep_trailing_newline=True,
            undefined=StrictUndefined,
        )
        env.filters["quote"] = _quote
        return env


__all__ = ["ArtifactRenderer"]
