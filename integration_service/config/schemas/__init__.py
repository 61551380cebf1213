"""Configuration schemas package."""

from .app_schema import AppConfig, validate_config
from .database_schema import DatabaseConfig
from .integration_schema import IntegrationConfig, ReconciliationConfig
from .logging_schema import LoggingConfig
from .server_schema import CORSConfig, ServerConfig

__all__ = [
    # Main configuration
    "AppConfig",
    "validate_config",
    # External integration
    "IntegrationConfig",
    "ReconciliationConfig",
    # Local store
    "DatabaseConfig",
    # Logging configuration
    "LoggingConfig",
    # Server configurations
    "ServerConfig",
    "CORSConfig",
]
