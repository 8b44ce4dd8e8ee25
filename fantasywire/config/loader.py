"""Configuration loader."""

import os
from pathlib import Path
from typing import Any, Dict, Optional, Type, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from .models import ConfigModel

DATA_DIR = Path(__file__).resolve().parent.parent / "data"
DEFAULT_CONFIG_PATH = Path.home() / ".config" / "fantasywire" / "config.yaml"
DEFAULT_CLASSIFIER_RULES = DATA_DIR / "classifier.yaml"
DEFAULT_FILTER_RULES = DATA_DIR / "filters.yaml"

ModelT = TypeVar("ModelT", bound=BaseModel)


class Config:
    """Configuration manager."""

    def __init__(
        self,
        config_path: Optional[Path] = None,
        config: Optional[ConfigModel] = None,
    ) -> None:
        """Initialize config manager.

        An already-built ``ConfigModel`` may be passed in directly, in which case
        no file is read.
        """
        if config_path is None:
            config_path = DEFAULT_CONFIG_PATH
        self.config_path = config_path
        self._config: Optional[ConfigModel] = config

    @property
    def config(self) -> ConfigModel:
        """Get loaded config."""
        if self._config is None:
            self._config = load_config(self.config_path)
        return self._config

    def get_db_config(self) -> Dict[str, Any]:
        """Get database configuration dict."""
        db_config = self.config.postgres.model_dump()

        if db_config.get("password_env"):
            password = os.environ.get(db_config["password_env"])
            if password:
                db_config["password"] = password

        return db_config

    @property
    def classifier_rules_path(self) -> Path:
        """Classifier table in use (override or packaged default)."""
        if self.config.classifier_rules_path:
            return Path(self.config.classifier_rules_path).expanduser()
        return DEFAULT_CLASSIFIER_RULES

    @property
    def filter_rules_path(self) -> Path:
        """Admission rule table in use (override or packaged default)."""
        if self.config.filter_rules_path:
            return Path(self.config.filter_rules_path).expanduser()
        return DEFAULT_FILTER_RULES


def _read_yaml(path: Path, what: str) -> Dict[str, Any]:
    if not path.exists():
        raise FileNotFoundError(f"{what} file not found: {path}")

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid YAML in {what} file: {e}")

    return data or {}


def load_config(config_path: Path) -> ConfigModel:
    """Load configuration from YAML file."""
    config_data = _read_yaml(config_path, "Config")
    try:
        return ConfigModel(**config_data)
    except ValidationError as e:
        raise ValueError(f"Invalid configuration: {e}")


def load_rules(path: Path, model: Type[ModelT]) -> ModelT:
    """Load a rule table (classifier or admission filter) into its model."""
    data = _read_yaml(path, "Rules")
    try:
        return model(**data)
    except ValidationError as e:
        raise ValueError(f"Invalid rule table {path.name}: {e}")


def save_config(config: ConfigModel, config_path: Path) -> None:
    """Save configuration to YAML file."""
    config_path.parent.mkdir(parents=True, exist_ok=True)

    with open(config_path, "w", encoding="utf-8") as f:
        yaml.dump(config.model_dump(), f, default_flow_style=False, sort_keys=False)
