"""Configuration loading from files and environment variables."""
import json
import logging
import os
import re
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional

import yaml

from integration_service.domain.base.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

ENV_PREFIX = "INTEGRATION_SERVICE__"
CONFIG_PATH_ENV = "INTEGRATION_SERVICE_CONFIG"
DEFAULT_CONFIG_LOCATIONS = ["config/config.yml", "config/config.yaml", "config/config.json"]

_ENV_VAR_PATTERN = re.compile(r"\$\{([A-Za-z_][A-Za-z0-9_]*)\}|\$([A-Za-z_][A-Za-z0-9_]*)")


def expand_env_vars(value: Any) -> Any:
    """Expand ``$VAR`` and ``${VAR}`` references in strings, recursively.

    Unknown variables are left untouched.
    """
    if isinstance(value, str):
        def _replace(match: "re.Match[str]") -> str:
            name = match.group(1) or match.group(2)
            return os.environ.get(name, match.group(0))

        return _ENV_VAR_PATTERN.sub(_replace, value)
    if isinstance(value, dict):
        return {key: expand_env_vars(item) for key, item in value.items()}
    if isinstance(value, list):
        return [expand_env_vars(item) for item in value]
    return value


class ConfigurationLoader:
    """Loads raw configuration data before schema validation."""

    def __init__(self, search_paths: Optional[List[str]] = None):
        self._search_paths = search_paths or DEFAULT_CONFIG_LOCATIONS

    def load_from_file(self, file_path: str) -> Dict[str, Any]:
        """
        Load configuration from a JSON or YAML file.

        Raises:
            ConfigurationError: If the file cannot be read or parsed
        """
        path = Path(file_path)
        try:
            with path.open("r", encoding="utf-8") as f:
                if path.suffix.lower() == ".json":
                    data = json.load(f)
                else:
                    data = yaml.safe_load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(f"Configuration file not found: {file_path}") from e
        except (json.JSONDecodeError, yaml.YAMLError) as e:
            raise ConfigurationError(f"Invalid configuration file {file_path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration file {file_path} must contain a mapping")

        logger.debug("Loaded configuration from %s", file_path)
        return expand_env_vars(data)

    def find_config_file(self) -> Optional[str]:
        """Locate a configuration file from the environment or default locations."""
        explicit = os.environ.get(CONFIG_PATH_ENV)
        if explicit:
            return explicit
        for candidate in self._search_paths:
            if os.path.exists(candidate):
                return candidate
        return None

    def load_configuration(self) -> Dict[str, Any]:
        """Load configuration from the first available default location."""
        config_file = self.find_config_file()
        if config_file:
            return self.load_from_file(config_file)
        logger.debug("No configuration file found, using defaults and environment")
        return {}

    def apply_environment_overrides(self, config: Dict[str, Any],
                                    environ: Optional[Mapping[str, str]] = None) -> Dict[str, Any]:
        """
        Apply ``INTEGRATION_SERVICE__SECTION__KEY`` overrides.

        Values are parsed as YAML scalars so that ``true`` or ``30`` keep
        their types.
        """
        environ = os.environ if environ is None else environ
        result = json.loads(json.dumps(config, default=str))

        for name, raw_value in environ.items():
            if not name.startswith(ENV_PREFIX):
                continue
            keys = [part.lower() for part in name[len(ENV_PREFIX):].split("__") if part]
            if not keys:
                continue

            target = result
            for key in keys[:-1]:
                existing = target.get(key)
                if not isinstance(existing, dict):
                    existing = {}
                    target[key] = existing
                target = existing

            try:
                value = yaml.safe_load(raw_value)
            except yaml.YAMLError:
                value = raw_value
            target[keys[-1]] = value
            logger.debug("Applied environment override for %s", ".".join(keys))

        return result
