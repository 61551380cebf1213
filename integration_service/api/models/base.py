"""Base models for API requests and responses."""
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class APIBaseModel(BaseModel):
    """Base model for all API models; camelCase on the wire."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,  # Allow populating by field name (snake_case)
        extra="forbid",
    )
