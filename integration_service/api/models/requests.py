"""API models for request submission and tracking."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import ConfigDict, Field

from integration_service.api.models.base import APIBaseModel


class SubmitRequestBody(APIBaseModel):
    """Body of ``POST /requests``."""

    request_type: str = Field(description="Request type, at most 50 characters")
    request_data: str = Field(description="Opaque request payload, at most 10000 characters")
    metadata: Dict[str, str] = Field(default_factory=dict)


class SubmitRequestResponse(APIBaseModel):
    request_id: str
    external_request_id: str
    status: str
    submitted_at: datetime


class InquiryResponse(APIBaseModel):
    # Extra fields are tolerated so that external additions pass through
    model_config = ConfigDict(extra="ignore")

    request_id: str
    external_request_id: str
    status: str
    submitted_at: datetime
    completed_at: Optional[datetime] = None
    response_data: Optional[str] = None
    error_message: Optional[str] = None
    additional_info: Dict[str, Any] = Field(default_factory=dict)


class TrackedRequestResponse(APIBaseModel):
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


class ProblemResponse(APIBaseModel):
    """Problem body returned for failures."""

    title: str
    detail: str
    status: int
    error_kind: str
