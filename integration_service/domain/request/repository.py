"""Request repository interface - contract for request data access."""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import List, Optional, Sequence

from .aggregate import Request
from .value_objects import RequestStatus


class RequestRepository(ABC):
    """Repository interface for request aggregates.

    Mutations are staged; they only persist once the owning unit of work
    saves its changes.
    """

    @abstractmethod
    async def get_by_id(self, entity_id: str) -> Optional[Request]:
        """Find request by internal row identifier."""

    @abstractmethod
    async def get_by_request_id(self, request_id: str) -> Optional[Request]:
        """Find request by request ID."""

    @abstractmethod
    async def get_by_external_request_id(self, external_request_id: str) -> Optional[Request]:
        """Find request by the identifier assigned by the external system."""

    @abstractmethod
    async def list_all(self, limit: Optional[int] = None) -> List[Request]:
        """List requests, newest first."""

    @abstractmethod
    async def list_by_status(self, status: RequestStatus,
                             limit: Optional[int] = None) -> List[Request]:
        """List requests with a specific status, newest first."""

    @abstractmethod
    async def list_stale(self, statuses: Sequence[RequestStatus], submitted_before: datetime,
                         limit: Optional[int] = None) -> List[Request]:
        """List requests in one of ``statuses`` submitted before a cutoff, oldest first."""

    @abstractmethod
    async def add(self, request: Request) -> None:
        """Stage a new request."""

    @abstractmethod
    async def update(self, request: Request) -> None:
        """Stage changes to an existing request."""

    @abstractmethod
    async def delete(self, request: Request) -> None:
        """Stage removal of a request."""
