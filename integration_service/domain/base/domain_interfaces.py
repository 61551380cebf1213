"""Unit of work contracts shared by the domain and application layers."""
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from integration_service.domain.request.repository import RequestRepository


class UnitOfWork(ABC):
    """Groups repository mutations and persists them on ``save_changes``.

    Used as an async context manager; leaving the block with an exception
    discards anything not yet saved.
    """

    requests: "RequestRepository"

    async def __aenter__(self) -> "UnitOfWork":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        if exc_type is not None:
            await self.rollback_transaction()
        await self.close()

    @abstractmethod
    async def save_changes(self) -> int:
        """Persist staged changes. Returns the number of affected entities."""

    @abstractmethod
    async def begin_transaction(self) -> None:
        """Begin an explicit transaction."""

    @abstractmethod
    async def commit_transaction(self) -> None:
        """Commit the explicit transaction."""

    @abstractmethod
    async def rollback_transaction(self) -> None:
        """Discard staged changes."""

    async def close(self) -> None:
        """Release underlying resources."""


class UnitOfWorkFactory(ABC):
    """Creates a fresh unit of work per operation."""

    @abstractmethod
    def create_unit_of_work(self) -> UnitOfWork:
        """Create a new unit of work."""
