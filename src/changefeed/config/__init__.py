"""Configuration loading, schema, and defaults."""

from changefeed.config.loader import ConfigError, load_config
from changefeed.config.schema import FEED_FILES, ChangefeedConfig, valid_formats

__all__ = [
    "FEED_FILES",
    "ChangefeedConfig",
    "ConfigError",
    "load_config",
    "valid_formats",
]
