"""Configuration package."""

from .manager import ConfigurationManager, get_config_manager
from .schemas import (
    AppConfig,
    CORSConfig,
    DatabaseConfig,
    IntegrationConfig,
    LoggingConfig,
    ReconciliationConfig,
    ServerConfig,
)

__all__ = [
    "AppConfig",
    "ConfigurationManager",
    "get_config_manager",
    "IntegrationConfig",
    "ReconciliationConfig",
    "DatabaseConfig",
    "LoggingConfig",
    "ServerConfig",
    "CORSConfig",
]
