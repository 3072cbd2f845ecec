"""Configuration loading for slnsync (.slnsync.yml)."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .utils import as_bool

CONFIG_FILENAME = ".slnsync.yml"


class ConfigError(RuntimeError):
    """Raised when the configuration file cannot be parsed."""


@dataclass
class ProjectConfig:
    """Values written into every generated project header."""

    root_namespace: str = ""
    lang_version: str = "latest"
    target_framework_version: str = "v4.7.1"


@dataclass
class SlnSyncConfig:
    """Represents the settings defined in .slnsync.yml."""

    root: Path
    user_extensions: List[str] = field(default_factory=list)
    generate_all: bool = False
    project: ProjectConfig = field(default_factory=ProjectConfig)


def load_config(config_path: Path) -> SlnSyncConfig:
    """Load configuration from a project directory or an explicit file."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return SlnSyncConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise ConfigError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    project = ProjectConfig()
    project_data = _as_dict(data.get("project"))
    if project_data:
        project = ProjectConfig(
            root_namespace=_as_str(project_data.get("root_namespace")) or "",
            lang_version=_as_str(project_data.get("lang_version")) or project.lang_version,
            target_framework_version=(
                _as_str(project_data.get("target_framework_version"))
                or project.target_framework_version
            ),
        )

    extensions = [item.lstrip(".") for item in _as_str_list(data.get("user_extensions"))]

    return SlnSyncConfig(
        root=root,
        user_extensions=[item for item in extensions if item],
        generate_all=as_bool(data.get("generate_all")) or False,
        project=project,
    )


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.suffix not in {".yml", ".yaml"}:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise ConfigError(f"{path.name} is not valid UTF-8: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [item.strip() for item in value.split(",") if item.strip()]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "ConfigError",
    "ProjectConfig",
    "SlnSyncConfig",
    "load_config",
]
