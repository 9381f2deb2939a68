"""Load and merge configuration from .histdiff.toml and env vars."""

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

from histdiff.config.schema import (
    MAX_SHORT_LENGTH,
    MIN_SHORT_LENGTH,
    VIEWER_MODES,
    DiffConfig,
    DisplayConfig,
    GitConfig,
    HistdiffConfig,
    HistoryConfig,
    ViewerConfig,
)

CONFIG_FILENAME = ".histdiff.toml"


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


def _env_int(name: str) -> Optional[int]:
    val = os.environ.get(name)
    if not val:
        return None
    try:
        return int(val)
    except ValueError:
        return None


def _merge_env_overrides(cfg: HistdiffConfig) -> None:
    """Apply HISTDIFF_* environment variable overrides."""
    if val := os.environ.get("HISTDIFF_VIEWER"):
        if val in VIEWER_MODES:
            cfg.viewer.mode = val  # type: ignore[assignment]
    if val := os.environ.get("HISTDIFF_DIFF_COMMAND"):
        cfg.viewer.diff_command = val
    length = _env_int("HISTDIFF_SHORT_HASH_LENGTH")
    if length is not None and MIN_SHORT_LENGTH <= length <= MAX_SHORT_LENGTH:
        cfg.display.short_hash_length = length
    timeout = _env_int("HISTDIFF_GIT_TIMEOUT")
    if timeout is not None and timeout > 0:
        cfg.git.timeout = timeout


def _build_section(data: Dict[str, Any], cls: type, section: str):
    """Build a dataclass from a TOML section dict, ignoring unknown keys."""
    raw = data.get(section, {})
    if not isinstance(raw, dict):
        raise ConfigError(f"[{section}] must be a table")
    valid_fields = {f.name for f in dataclasses.fields(cls)}
    filtered = {k: v for k, v in raw.items() if k in valid_fields}
    return cls(**filtered)


def _validate(cfg: HistdiffConfig) -> None:
    if cfg.viewer.mode not in VIEWER_MODES:
        raise ConfigError(f"viewer.mode must be one of {', '.join(VIEWER_MODES)}")
    length = cfg.display.short_hash_length
    if not isinstance(length, int) or not MIN_SHORT_LENGTH <= length <= MAX_SHORT_LENGTH:
        raise ConfigError(
            f"display.short_hash_length must be between {MIN_SHORT_LENGTH} and {MAX_SHORT_LENGTH}"
        )
    if not isinstance(cfg.diff.context_lines, int) or cfg.diff.context_lines < 0:
        raise ConfigError("diff.context_lines must be a non-negative integer")


def load_config(
    repo_root: Path,
    config_override: Optional[str] = None,
) -> HistdiffConfig:
    """Load, validate, and return a HistdiffConfig."""
    config_path = find_config_file(repo_root, config_override)

    if config_path is None:
        cfg = HistdiffConfig()
    else:
        raw = _parse_toml(config_path)
        cfg = HistdiffConfig(
            version=raw.get("version", "1.0"),
            display=_build_section(raw, DisplayConfig, "display"),
            diff=_build_section(raw, DiffConfig, "diff"),
            viewer=_build_section(raw, ViewerConfig, "viewer"),
            git=_build_section(raw, GitConfig, "git"),
            history=_build_section(raw, HistoryConfig, "history"),
        )
        _validate(cfg)

    _merge_env_overrides(cfg)
    return cfg
