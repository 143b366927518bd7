"""Load and merge configuration from .changefeed.toml and env vars."""

from __future__ import annotations

import dataclasses
import os
import sys
from pathlib import Path
from typing import Any, Dict, Optional

if sys.version_info >= (3, 11):
    import tomllib
else:
    import tomli as tomllib

from changefeed.config.schema import (
    ChangefeedConfig,
    FeedConfig,
    OutputConfig,
    SourceConfig,
    valid_formats,
)

CONFIG_FILENAME = ".changefeed.toml"


class ConfigError(Exception):
    """Raised when config is malformed or unreadable."""


def find_config_file(repo_root: Path, override: Optional[str] = None) -> Optional[Path]:
    """Locate the config file. *override* takes precedence."""
    if override:
        p = Path(override)
        if not p.is_file():
            raise ConfigError(f"Config file not found: {override}")
        return p
    candidate = repo_root / CONFIG_FILENAME
    return candidate if candidate.is_file() else None


def _parse_toml(path: Path) -> Dict[str, Any]:
    try:
        with open(path, "rb") as f:
            return tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as exc:
        raise ConfigError(f"Failed to parse {path}: {exc}") from exc


def _default_of(f: dataclasses.Field) -> Any:
    if f.default is not dataclasses.MISSING:
        return f.default
    return f.default_factory()  # type: ignore[misc]


def _check_type(section: str, key: str, value: Any, default: Any) -> None:
    """Raise ConfigError unless *value* has the type of the field's default."""
    if isinstance(default, bool):
        ok = isinstance(value, bool)
        expected = "a boolean"
    elif isinstance(default, str):
        ok = isinstance(value, str)
        expected = "a string"
    elif isinstance(default, list):
        ok = isinstance(value, list) and all(isinstance(v, str) for v in value)
        expected = "a list of strings"
    else:
        return
    if not ok:
        raise ConfigError(f"{section}.{key} must be {expected}, got {value!r}")


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    table = data.get(section, {})
    if not isinstance(table, dict):
        raise ConfigError(f"[{section}] must be a table")
    fields = {f.name: f for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in table.items() if k in fields}
    for key, value in filtered.items():
        _check_type(section, key, value, _default_of(fields[key]))
    return cls(**filtered)


def _merge_env_overrides(cfg: ChangefeedConfig) -> None:
    """Apply CHANGEFEED_* environment variable overrides."""
    if val := os.environ.get("CHANGEFEED_FILE"):
        cfg.source.file = val
    if val := os.environ.get("CHANGEFEED_DESTDIR"):
        cfg.output.destdir = val
    if val := os.environ.get("CHANGEFEED_FORMATS"):
        formats = valid_formats(val.split(","))
        if formats:
            cfg.output.formats = formats
    if val := os.environ.get("CHANGEFEED_STYLESHEET"):
        cfg.output.stylesheet = val


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> ChangefeedConfig:
    """Load, validate, and return a ChangefeedConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = ChangefeedConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = ChangefeedConfig(
            version=raw.get("version", "1.0"),
            source=_build_section(raw, SourceConfig, "source"),
            feed=_build_section(raw, FeedConfig, "feed"),
            output=_build_section(raw, OutputConfig, "output"),
        )
        formats = cfg.output.formats
        if not valid_formats(formats):
            raise ConfigError(f"{config_path}: output.formats must list atom, json or rss")
        cfg.output.formats = valid_formats(formats)

    _merge_env_overrides(cfg)
    return cfg
