"""Tests for instrumentgen.config."""

from __future__ import annotations

from pathlib import Path

import pytest

from instrumentgen.config import ConfigError, InstrumentGenConfig, load_config


def _write(tmp_path: Path, text: str) -> None:
    (tmp_path / ".instrumentgen.yml").write_text(text, encoding="utf-8")


def test_load_config_returns_defaults_when_missing(tmp_path: Path) -> None:
    config = load_config(tmp_path)

    assert isinstance(config, InstrumentGenConfig)
    assert config.root == tmp_path.resolve()
    assert config.marker == "Instrumentation"
    assert config.workers == 1
    assert config.exclude_paths == []
    assert config.output.directory is None
    assert config.output.suffix == "_g.py"
    assert config.header.copyright_holder is None
    assert config.header.license == "apache-2.0"
    assert config.tracing.runtime_module == "instrumentgen.runtime"


def test_load_config_parses_expected_fields(tmp_path: Path) -> None:
    _write(
        tmp_path,
        """
marker: Traced
workers: 4
exclude_paths:
  - legacy/
  - "*_pb2.py"
output:
  directory: generated
  suffix: _traced.py
header:
  copyright_holder: Acme Corp
  year: 2023
  license: None
tracing:
  runtime_module: acme.tracing
""",
    )

    config = load_config(tmp_path)

    assert config.marker == "Traced"
    assert config.workers == 4
    assert config.exclude_paths == ["legacy/", "*_pb2.py"]
    assert config.output.directory == tmp_path.resolve() / "generated"
    assert config.output.suffix == "_traced.py"
    assert config.header.copyright_holder == "Acme Corp"
    assert config.header.year == 2023
    assert config.header.license == "none"
    assert config.tracing.runtime_module == "acme.tracing"


def test_load_config_accepts_file_path(tmp_path: Path) -> None:
    _write(tmp_path, "workers: 2\n")

    config = load_config(tmp_path / ".instrumentgen.yml")

    assert config.workers == 2


def test_load_config_handles_empty_file(tmp_path: Path) -> None:
    _write(tmp_path, "\n")

    assert load_config(tmp_path).workers == 1


def test_load_config_ignores_boolean_scalars(tmp_path: Path) -> None:
    _write(tmp_path, "workers: true\nheader:\n  year: false\n")

    config = load_config(tmp_path)

    assert config.workers == 1
    assert config.header.year is None


@pytest.mark.parametrize(
    "text",
    [
        "- just\n- a list\n",
        "marker: not-an-identifier\n",
        "workers: 0\n",
        "output:\n  suffix: _g.txt\n",
        "header:\n  license: gpl-3.0\n",
        "marker: [unterminated\n",
    ],
)
def test_load_config_rejects_invalid_values(tmp_path: Path, text: str) -> None:
    _write(tmp_path, text)

    with pytest.raises(ConfigError):
        load_config(tmp_path)
