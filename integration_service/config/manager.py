"""Unified configuration management for the application."""
from __future__ import annotations

import logging
import os
import threading
from typing import Any, Dict, Optional

from pydantic import ValidationError as PydanticValidationError

from integration_service.config.loader import ConfigurationLoader
from integration_service.config.schemas import (
    AppConfig,
    DatabaseConfig,
    IntegrationConfig,
    LoggingConfig,
    ReconciliationConfig,
    ServerConfig,
)
from integration_service.domain.base.exceptions import ConfigurationError

logger = logging.getLogger(__name__)


class ConfigurationManager:
    """
    Single source of truth for application configuration.

    Configuration is loaded lazily from a file (explicit or default
    location), environment overrides are applied, and the result is
    validated against ``AppConfig``.
    """

    def __init__(self, config_file: Optional[str] = None,
                 overrides: Optional[Dict[str, Any]] = None,
                 loader: Optional[ConfigurationLoader] = None):
        """Initialize configuration manager with lazy loading."""
        self._config_file = config_file
        self._overrides = overrides or {}
        self._loader = loader or ConfigurationLoader()
        self._lock = threading.RLock()
        self._app_config: Optional[AppConfig] = None

    @property
    def app_config(self) -> AppConfig:
        """Lazy load application configuration."""
        if self._app_config is None:
            with self._lock:
                if self._app_config is None:
                    self._app_config = self._load_app_config()
        return self._app_config

    def _load_app_config(self) -> AppConfig:
        if self._config_file:
            if not os.path.exists(self._config_file):
                raise ConfigurationError(f"Configuration file not found: {self._config_file}")
            config_data = self._loader.load_from_file(self._config_file)
        else:
            config_data = self._loader.load_configuration()

        config_data = _deep_merge(config_data, self._overrides)
        config_data = self._loader.apply_environment_overrides(config_data)

        try:
            return AppConfig.from_dict(config_data)
        except PydanticValidationError as e:
            missing = [".".join(str(p) for p in err["loc"]) for err in e.errors() if err["type"] == "missing"]
            raise ConfigurationError(f"Invalid configuration: {e}", missing_fields=missing) from e

    def reload(self) -> AppConfig:
        """Discard the cached configuration and load it again."""
        with self._lock:
            self._app_config = None
        return self.app_config

    def get_integration_config(self) -> IntegrationConfig:
        return self.app_config.integration

    def get_database_config(self) -> DatabaseConfig:
        return self.app_config.database

    def get_logging_config(self) -> LoggingConfig:
        return self.app_config.logging

    def get_server_config(self) -> ServerConfig:
        return self.app_config.server

    def get_reconciliation_config(self) -> ReconciliationConfig:
        return self.app_config.reconciliation


def _deep_merge(base: Dict[str, Any], overrides: Dict[str, Any]) -> Dict[str, Any]:
    merged = dict(base)
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(merged.get(key), dict):
            merged[key] = _deep_merge(merged[key], value)
        else:
            merged[key] = value
    return merged


_config_manager: Optional[ConfigurationManager] = None


def get_config_manager(config_file: Optional[str] = None) -> ConfigurationManager:
    """Get the process-wide configuration manager."""
    global _config_manager
    if _config_manager is None or config_file is not None:
        _config_manager = ConfigurationManager(config_file)
    return _config_manager
