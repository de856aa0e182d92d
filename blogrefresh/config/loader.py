"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import ValidationError

from .models import ConfigModel


DEFAULT_CONFIG_PATH = Path.home() / ".config" / "blogrefresh" / "config.yaml"


class Config:
    """Configuration manager."""

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """Initialize config manager."""
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        self.config_path = config_path
        self._config: Optional[ConfigModel] = None

    @property
    def config(self) -> ConfigModel:
        """Get loaded config, falling back to defaults when no file exists."""
        if self._config is None:
            if self.config_path.exists():
                self._config = load_config(self.config_path)
            else:
                self._config = ConfigModel()
        return self._config

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        if db_config.get("dsn_env"):
            dsn = os.environ.get(db_config["dsn_env"])
            if dsn:
                db_config["dsn"] = dsn

        return db_config

    def get_llm_config(self) -> Dict[str, Any]:
        """Get LLM configuration dict."""
        llm_config = self.config.llm.model_dump()

        if llm_config.get("api_key_env"):
            api_key = os.environ.get(llm_config["api_key_env"])
            if api_key:
                llm_config["api_key"] = api_key

        return llm_config

    def get_search_config(self) -> Dict[str, Any]:
        """Get search provider configuration dict."""
        search_config = self.config.search.model_dump()

        if search_config.get("api_key_env"):
            api_key = os.environ.get(search_config["api_key_env"])
            if api_key:
                search_config["api_key"] = api_key

        return search_config


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    if not config_path.exists():
        raise FileNotFoundError(f"Config file not found: {config_path}")

    try:
        with open(config_path) as f:
            config_data = yaml.safe_load(f)

        if config_data is None:
            config_data = {}

        return ConfigModel(**config_data)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in config file: {e}")
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
