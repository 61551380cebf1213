"""Response DTOs returned by the request handlers."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from integration_service.application.dto.base import BaseDTO
from integration_service.domain.request.aggregate import Request


class AddRequestResponse(BaseDTO):
    """Outcome of a successful submission."""
    request_id: str
    external_request_id: str
    status: str
    submitted_at: datetime


class InquireRequestResponse(BaseDTO):
    """Request state as reported by the external system."""
    request_id: str
    external_request_id: str
    status: str
    submitted_at: datetime
    completed_at: Optional[datetime] = None
    response_data: Optional[str] = None
    error_message: Optional[str] = None
    additional_info: Dict[str, Any] = Field(default_factory=dict)


class RequestDTO(BaseDTO):
    """Locally tracked request."""
    request_id: str
    external_request_id: Optional[str] = None
    request_type: str
    request_data: str
    status: str
    submitted_at: datetime
    completed_at: Optional[datetime] = None
    response_data: Optional[str] = None
    error_message: Optional[str] = None
    retry_count: int = 0
    last_retry_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_domain(cls, request: Request) -> "RequestDTO":
        return cls(
            request_id=request.request_id,
            external_request_id=request.external_request_id,
            request_type=request.request_type,
            request_data=request.request_data,
            status=cls.serialize_enum(request.status),
            submitted_at=request.submitted_at,
            completed_at=request.completed_at,
            response_data=request.response_data,
            error_message=request.error_message,
            retry_count=request.retry_count,
            last_retry_at=request.last_retry_at,
            created_at=request.created_at,
            updated_at=request.updated_at,
        )


class ReconciliationSummary(BaseDTO):
    """Counts produced by one reconciliation sweep."""
    checked: int = 0
    completed: int = 0
    failed: int = 0
    submitted: int = 0
    unchanged: int = 0
    errors: int = 0
