"""Main application configuration schema."""
from typing import Any, Dict

from pydantic import BaseModel, Field, field_validator

from .database_schema import DatabaseConfig
from .integration_schema import IntegrationConfig, ReconciliationConfig
from .logging_schema import LoggingConfig
from .server_schema import ServerConfig


class AppConfig(BaseModel):
    """Application configuration."""

    version: str = Field("1.0.0", description="Configuration version")
    environment: str = Field("development", description="Environment")
    debug: bool = Field(False, description="Debug mode")
    integration: IntegrationConfig
    database: DatabaseConfig = Field(default_factory=DatabaseConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    server: ServerConfig = Field(default_factory=ServerConfig)
    reconciliation: ReconciliationConfig = Field(default_factory=ReconciliationConfig)

    @field_validator("environment")
    @classmethod
    def validate_environment(cls, v: str) -> str:
        """
        Validate environment.

        Raises:
            ValueError: If environment is invalid
        """
        valid_environments = ["development", "testing", "staging", "production"]
        if v not in valid_environments:
            raise ValueError(f"Environment must be one of {valid_environments}")
        return v

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "AppConfig":
        return cls.model_validate(data)


def validate_config(config: Dict[str, Any]) -> AppConfig:
    """
    Validate configuration.

    Args:
        config: Configuration to validate

    Returns:
        Validated configuration

    Raises:
        pydantic.ValidationError: If configuration is invalid
    """
    return AppConfig.model_validate(config)
