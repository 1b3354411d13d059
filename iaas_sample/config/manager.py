"""Configuration loading from defaults, files and the environment."""
import json
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Tuple

import yaml
from pydantic import ValidationError as PydanticValidationError

from iaas_sample.config.env_expansion import expand_env_vars
from iaas_sample.config.schemas import AppConfig
from iaas_sample.domain.core.exceptions import ConfigurationError

# Environment variables and the configuration path each one overrides.
ENV_OVERRIDES: Dict[str, Tuple[str, ...]] = {
    "PROVIDER_NAME": ("provider", "name"),
    "PROVIDER_IDENTITY": ("provider", "identity"),
    "PROVIDER_SECRET": ("provider", "secret"),
    "PROVIDER_TIMEOUT": ("provider", "timeout"),
    "PROVIDER_GROUP": ("provider", "group"),
    "LOG_LEVEL": ("logging", "level"),
    "LOG_DESTINATION": ("logging", "destination"),
    "LOG_FILE": ("logging", "file", "path"),
}


class ConfigurationManager:
    """
    Builds the typed application configuration.

    Sources are applied in order, later ones winning: schema defaults, the
    optional configuration file (JSON or YAML), then environment variables.
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        environ: Optional[Mapping[str, str]] = None,
    ):
        self.config_file = config_file
        self._environ = os.environ if environ is None else environ
        self._config: Optional[AppConfig] = None

    def get_config(self) -> AppConfig:
        """Return the configuration, loading it on first use."""
        if self._config is None:
            self._config = self.load()
        return self._config

    def load(self) -> AppConfig:
        """Load and validate configuration from all sources."""
        data: Dict[str, Any] = {}
        if self.config_file:
            data = expand_env_vars(self._read_file(Path(self.config_file)), self._environ)

        for env_name, path in ENV_OVERRIDES.items():
            value = self._environ.get(env_name)
            if value:
                _set_nested(data, path, value)

        try:
            return AppConfig.model_validate(data)
        except PydanticValidationError as e:
            missing = [
                ".".join(str(p) for p in err["loc"])
                for err in e.errors()
                if err["type"] == "missing"
            ]
            raise ConfigurationError(f"Invalid configuration: {e}", missing_fields=missing)

    @staticmethod
    def _read_file(path: Path) -> Dict[str, Any]:
        if not path.is_file():
            raise ConfigurationError(f"Configuration file not found: {path}")

        try:
            with path.open("r", encoding="utf-8") as f:
                if path.suffix.lower() in (".yaml", ".yml"):
                    content = yaml.safe_load(f)
                else:
                    content = json.load(f)
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Failed to parse configuration file {path}: {e}")

        if content is None:
            return {}
        if not isinstance(content, dict):
            raise ConfigurationError(f"Configuration file {path} must contain a mapping")
        return content


def _set_nested(data: Dict[str, Any], path: Tuple[str, ...], value: Any) -> None:
    node = data
    for key in path[:-1]:
        child = node.get(key)
        if not isinstance(child, dict):
            child = {}
            node[key] = child
        node = child
    node[path[-1]] = value
