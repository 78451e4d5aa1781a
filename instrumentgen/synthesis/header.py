"""License block placed at the top of generated modules."""

from __future__ import annotations

from datetime import UTC, datetime
from typing import List

from ..config import HeaderConfig
from ..models import TypeIdentity
from .nodes import HeaderNode

APACHE_2_0_LINES: tuple[str, ...] = (
    'Licensed under the Apache License, Version 2.0 (the "License");',
    "you may not use this file except in compliance with the License.",
    "You may obtain a copy of the License at",
    "",
    "https://www.apache.org/licenses/LICENSE-2.0",
    "",
    "Unless required by applicable law or agreed to in writing, software",
    'distributed under the License is distributed on an "AS IS" BASIS,',
    "WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.",
    "See the License for the specific language governing permissions and",
    "limitations under the License.",
)


def build_header(config: HeaderConfig, source: TypeIdentity, *, year: int | None = None) -> HeaderNode:
    """Return the header lines for a wrapper generated from ``source``."""
    lines: List[str] = []
    if config.copyright_holder:
        effective_year = config.year or year or datetime.now(UTC).year
        lines.append(f"Copyright {effective_year} {config.copyright_holder}")
        lines.append("")
    if config.license == "apache-2.0":
        lines.extend(APACHE_2_0_LINES)
        lines.append("")
    lines.append(f"Generated by instrumentgen from {source.qualified_name}. Do not edit.")
    return HeaderNode(lines=tuple(lines))


__all__ = ["APACHE_2_0_LINES", "build_header"]
