"""Configuration management for fantasywire."""

from .loader import Config, load_config, load_rules, save_config
from .models import ConfigModel, FetchConfig, IngestDefaults, PostgresConfig

__all__ = [
    "Config",
    "ConfigModel",
    "FetchConfig",
    "IngestDefaults",
    "PostgresConfig",
    "load_config",
    "load_rules",
    "save_config",
]
