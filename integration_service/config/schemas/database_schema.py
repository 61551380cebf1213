"""Local store configuration schema."""
from pydantic import BaseModel, Field, field_validator


class DatabaseConfig(BaseModel):
    """SQLAlchemy database configuration."""

    url: str = Field("sqlite+aiosqlite:///integration.db", description="Async SQLAlchemy database URL")
    echo: bool = Field(False, description="Log emitted SQL statements")
    create_schema: bool = Field(True, description="Create missing tables on startup")
    pool_pre_ping: bool = Field(True, description="Verify pooled connections before use")

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        """Validate URL."""
        if "://" not in v:
            raise ValueError("Database url must be a SQLAlchemy URL such as sqlite+aiosqlite:///integration.db")
        return v
