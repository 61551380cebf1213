"""Query DTOs for request operations."""
from typing import Optional

from integration_service.application.dto.base import BaseQuery


class InquireRequestQuery(BaseQuery):
    """Ask the external system for the current state of a request."""
    request_id: Optional[str] = None
    external_request_id: Optional[str] = None


class GetRequestQuery(BaseQuery):
    """Load a single locally tracked request."""
    request_id: str


class ListRequestsQuery(BaseQuery):
    """List locally tracked requests, optionally filtered by status."""
    status: Optional[str] = None
    limit: Optional[int] = None
