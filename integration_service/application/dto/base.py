"""Base DTO classes with a stable snake_case API."""
from enum import Enum
from typing import Any, Dict, Optional, Union

from pydantic import BaseModel, ConfigDict


class BaseDTO(BaseModel):
    """
    Base class for all DTOs.

    DTOs are immutable and snake_case internally; camelCase conversion for
    the wire happens at the API boundary, not here.
    """
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible snake_case dictionary."""
        return self.model_dump(mode="json")

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "BaseDTO":
        return cls.model_validate(data)

    @staticmethod
    def serialize_enum(value: Union[Enum, str, None]) -> Optional[str]:
        """Serialize enum to string value."""
        if value is None:
            return None
        if isinstance(value, Enum):
            return value.value
        return str(value)


# CQRS Base Classes

class BaseCommand(BaseDTO):
    """Base class for command DTOs."""
    command_id: Optional[str] = None
    correlation_id: Optional[str] = None


class BaseQuery(BaseDTO):
    """Base class for query DTOs."""
    query_id: Optional[str] = None
    correlation_id: Optional[str] = None
