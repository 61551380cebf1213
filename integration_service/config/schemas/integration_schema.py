"""External integration configuration schema."""
from typing import Optional

from pydantic import BaseModel, Field, field_validator


class IntegrationConfig(BaseModel):
    """Connection settings for the external integration endpoint."""

    base_url: str = Field(..., description="Base URL of the external integration API")
    add_request_endpoint: str = Field("/api/requests", description="Path of the submission endpoint")
    inquiry_endpoint: str = Field("/api/requests/inquiry", description="Path of the status inquiry endpoint")
    api_key: Optional[str] = Field(None, description="API key sent in the X-API-Key header")
    timeout_seconds: float = Field(30, description="Per-call timeout in seconds")
    max_retries: int = Field(3, description="Maximum retry attempts for a failed request")

    @field_validator("base_url")
    @classmethod
    def validate_base_url(cls, v: str) -> str:
        """Validate base URL scheme."""
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v.rstrip("/")

    @field_validator("add_request_endpoint", "inquiry_endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Endpoints are paths relative to base_url."""
        if not v:
            raise ValueError("Endpoint path cannot be empty")
        return v if v.startswith("/") else f"/{v}"

    @field_validator("timeout_seconds")
    @classmethod
    def validate_timeout(cls, v: float) -> float:
        """Validate timeout."""
        if v <= 0:
            raise ValueError("Timeout must be positive")
        return v

    @field_validator("max_retries")
    @classmethod
    def validate_max_retries(cls, v: int) -> int:
        """Validate max retries."""
        if v < 0:
            raise ValueError("max_retries cannot be negative")
        return v


class ReconciliationConfig(BaseModel):
    """Settings for the stale request reconciliation sweep."""

    stale_after_seconds: int = Field(300, description="Age after which an unfinished request is re-checked")
    batch_size: int = Field(100, description="Maximum number of requests checked per sweep")

    @field_validator("stale_after_seconds", "batch_size")
    @classmethod
    def validate_positive(cls, v: int) -> int:
        if v < 1:
            raise ValueError("Value must be at least 1")
        return v
