"""Workspace configuration support for the dbmlkeep CLI."""

from __future__ import annotations

import json
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

from .errors import ConfigError

CONFIG_FILENAMES = ("dbmlkeep.toml", ".dbmlkeeprc")
LOG_LEVELS = ("debug", "info", "warn", "warning", "error")


@dataclass
class KeepDefaults:
    """Defaults applied when a workspace does not configure a value."""

    encoding: str = "utf-8"
    suffixes: List[str] = field(default_factory=lambda: [".dbml"])
    snapshot_suffix: str = ".keep.json"
    log_level: str = "info"


@dataclass
class KeepConfig:
    """Resolved workspace configuration."""

    root: Path
    defaults: KeepDefaults = field(default_factory=KeepDefaults)
    source: Optional[Path] = None
    raw: Dict[str, Any] = field(default_factory=dict)

    def snapshot_path_for(self, schema_file: Path) -> Path:
        return schema_file.with_name(schema_file.name + self.defaults.snapshot_suffix)

    def accepts(self, path: Path) -> bool:
        return path.suffix in self.defaults.suffixes


def _read_json_config(path: Path) -> Dict[str, Any]:
    content = path.read_text(encoding="utf-8")
    try:
        data = json.loads(content)
    except json.JSONDecodeError as exc:
        raise ConfigError(
            f"Invalid JSON configuration: {exc.msg}",
            path=str(path),
            line=exc.lineno,
            column=exc.colno,
        ) from exc
    if not isinstance(data, dict):
        raise ConfigError("Configuration root must be an object", path=str(path))
    return data


def _read_toml_config(path: Path) -> Dict[str, Any]:
    with path.open("rb") as handle:
        try:
            return tomllib.load(handle)
        except tomllib.TOMLDecodeError as exc:
            raise ConfigError(f"Invalid TOML configuration: {exc}", path=str(path)) from exc


def _parse_defaults(data: Dict[str, Any], path: Path) -> KeepDefaults:
    section = data.get("defaults") or {}
    if not isinstance(section, dict):
        raise ConfigError("[defaults] must be a table", path=str(path))

    encoding = str(section.get("encoding") or KeepDefaults.encoding)
    suffix_values = section.get("suffixes")
    suffixes: List[str]
    if suffix_values is None:
        suffixes = [".dbml"]
    elif isinstance(suffix_values, (list, tuple)):
        suffixes = [str(item) for item in suffix_values]
    elif isinstance(suffix_values, str):
        suffixes = [suffix_values]
    else:
        raise ConfigError("'suffixes' must be a string or a list of strings", path=str(path))

    snapshot_suffix = str(section.get("snapshot_suffix") or KeepDefaults.snapshot_suffix)
    log_level = str(section.get("log_level") or KeepDefaults.log_level).lower()
    if log_level not in LOG_LEVELS:
        raise ConfigError(
            f"Unknown log level '{log_level}'",
            path=str(path),
            hint=f"Use one of: {', '.join(LOG_LEVELS)}",
        )
    return KeepDefaults(
        encoding=encoding,
        suffixes=suffixes,
        snapshot_suffix=snapshot_suffix,
        log_level=log_level,
    )


def locate_config_file(root: Path, explicit: Optional[Path] = None) -> Optional[Path]:
    if explicit is not None:
        return explicit if explicit.exists() else None
    for candidate in CONFIG_FILENAMES:
        path = root / candidate
        if path.exists():
            return path
    return None


def load_config(root: Path, explicit: Optional[Path] = None) -> KeepConfig:
    root = root.resolve()
    if explicit is not None and not explicit.exists():
        raise ConfigError("Configuration file not found", path=str(explicit))
    config_path = locate_config_file(root, explicit)
    if config_path is None:
        return KeepConfig(root=root)

    try:
        if config_path.suffix == ".toml":
            data = _read_toml_config(config_path)
        else:
            data = _read_json_config(config_path)
    except (OSError, UnicodeDecodeError) as exc:
        raise ConfigError(f"Cannot read configuration: {exc}", path=str(config_path)) from exc

    return KeepConfig(
        root=root,
        defaults=_parse_defaults(data, config_path),
        source=config_path,
        raw=data,
    )


__all__ = [
    "CONFIG_FILENAMES",
    "KeepDefaults",
    "KeepConfig",
    "locate_config_file",
    "load_config",
]
