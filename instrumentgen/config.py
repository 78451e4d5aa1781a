"""Configuration loading for instrumentgen (.instrumentgen.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

CONFIG_FILENAME = ".instrumentgen.yml"

_LICENSES = {"apache-2.0", "none"}


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class OutputConfig:
    """Where generated wrapper modules are written."""

    directory: Optional[Path] = None
    suffix: str = "_g.py"


@dataclass
class HeaderConfig:
    """License block written at the top of every generated module."""

    copyright_holder: Optional[str] = None
    year: Optional[int] = None
    license: str = "apache-2.0"


@dataclass
class TracingConfig:
    """Runtime module the generated code imports its span source from."""

    runtime_module: str = "instrumentgen.runtime"


@dataclass
class InstrumentGenConfig:
    """Represents the settings defined in .instrumentgen.yml."""

    root: Path
    marker: str = "Instrumentation"
    workers: int = 1
    exclude_paths: List[str] = field(default_factory=list)
    output: OutputConfig = field(default_factory=OutputConfig)
    header: HeaderConfig = field(default_factory=HeaderConfig)
    tracing: TracingConfig = field(default_factory=TracingConfig)


def load_config(config_path: Path) -> InstrumentGenConfig:
    """Load configuration from disk, falling back to defaults when absent."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return InstrumentGenConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = InstrumentGenConfig(root=root)

    marker = _as_str(data.get("marker"))
    if marker is not None:
        if not marker.isidentifier():
            raise ConfigError(f"marker must be a plain identifier, got {marker!r}")
        config.marker = marker

    workers = _as_int(data.get("workers"))
    if workers is not None:
        if workers < 1:
            raise ConfigError("workers must be at least 1")
        config.workers = workers

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))

    output_data = _as_dict(data.get("output"))
    if output_data:
        directory = _as_str(output_data.get("directory"))
        suffix = _as_str(output_data.get("suffix"))
        if directory:
            config.output.directory = root / directory
        if suffix is not None:
            if not suffix.endswith(".py"):
                raise ConfigError("output.suffix must end with '.py'")
            config.output.suffix = suffix

    header_data = _as_dict(data.get("header"))
    if header_data:
        config.header.copyright_holder = _as_str(header_data.get("copyright_holder"))
        config.header.year = _as_int(header_data.get("year"))
        license_name = _as_str(header_data.get("license"))
        if license_name is not None:
            license_name = license_name.lower()
            if license_name not in _LICENSES:
                allowed = ", ".join(sorted(_LICENSES))
                raise ConfigError(f"header.license must be one of: {allowed}")
            config.header.license = license_name

    tracing_data = _as_dict(data.get("tracing"))
    if tracing_data:
        runtime_module = _as_str(tracing_data.get("runtime_module"))
        if runtime_module:
            config.tracing.runtime_module = runtime_module

    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    text = path.read_text(encoding="utf-8")
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded or {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_int(value: Any) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, str):
        try:
            return int(value)
        except ValueError:
            return None
    return None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []
