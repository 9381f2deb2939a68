"""Configuration loading, schema, and defaults."""

from histdiff.config.loader import ConfigError, load_config
from histdiff.config.schema import HistdiffConfig

__all__ = [
    "ConfigError",
    "HistdiffConfig",
    "load_config",
]
