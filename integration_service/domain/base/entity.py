"""Base domain entities - foundation for all domain objects."""
import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


def utcnow() -> datetime:
    """Timezone-aware current UTC time used for all domain timestamps."""
    return datetime.now(timezone.utc)


class Entity(BaseModel):
    """Base class for all domain entities."""
    model_config = ConfigDict(
        frozen=False,  # Entities are mutable
        validate_assignment=True,
        arbitrary_types_allowed=True
    )

    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

    def __eq__(self, other: object) -> bool:
        """Entities are equal if they have the same ID and type."""
        if not isinstance(other, self.__class__):
            return False
        return self.id == other.id

    def __hash__(self) -> int:
        """Hash based on entity ID."""
        return hash((self.__class__, self.id))

    def touch(self) -> None:
        """Record a modification time."""
        self.updated_at = utcnow()

    def get_id(self) -> Any:
        return self.id
