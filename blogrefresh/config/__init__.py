"""Configuration management for blogrefresh."""

from .loader import DEFAULT_CONFIG_PATH, Config, load_config, save_config
from .models import (
    ConfigModel,
    LLMConfig,
    PostgresConfig,
    RefreshConfig,
    SearchConfig,
    SiteConfig,
)

__all__ = [
    "Config",
    "ConfigModel",
    "DEFAULT_CONFIG_PATH",
    "LLMConfig",
    "PostgresConfig",
    "RefreshConfig",
    "SearchConfig",
    "SiteConfig",
    "load_config",
    "save_config",
]
