"""Command DTOs for request operations."""
from typing import Dict

from pydantic import Field

from integration_service.application.dto.base import BaseCommand


class AddRequestCommand(BaseCommand):
    """Submit a new request to the external system.

    Field limits are enforced by the handler so that violations come back
    as validation failures rather than raised exceptions.
    """
    request_type: str
    request_data: str
    metadata: Dict[str, str] = Field(default_factory=dict)


class ReconcileStaleRequestsCommand(BaseCommand):
    """Refresh Pending and Submitted records that have not moved for a while."""
    older_than_seconds: int = 300
    limit: int = 100
