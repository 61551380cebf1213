"""
Integration Client Port

This module defines the interface for talking to the external system.
"""
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from integration_service.domain.base.result import Result


class AddRequestResult(BaseModel):
    """External system's acknowledgement of a submission."""
    model_config = ConfigDict(frozen=True)

    external_request_id: str
    status: str
    submitted_at: datetime


class InquiryResult(BaseModel):
    """External system's view of a request."""
    model_config = ConfigDict(frozen=True)

    request_id: str
    external_request_id: str
    status: str
    submitted_at: datetime
    completed_at: Optional[datetime] = None
    response_data: Optional[str] = None
    error_message: Optional[str] = None
    additional_info: Dict[str, Any] = Field(default_factory=dict)


class IntegrationClientPort(ABC):
    """Interface for the external integration client.

    Implementations never raise for remote or transport problems; they
    return a failed Result carrying an error kind. Task cancellation is
    the exception and always propagates.
    """

    @abstractmethod
    async def add_request(self, request_id: str, request_type: str, request_data: str,
                          metadata: Dict[str, str]) -> Result[AddRequestResult]:
        """
        Submit a request to the external system.

        Args:
            request_id: Locally generated request identifier
            request_type: Request type
            request_data: Opaque request payload
            metadata: Caller supplied string metadata

        Returns:
            Result carrying the external acknowledgement
        """

    @abstractmethod
    async def inquire_request(self, lookup_id: str) -> Result[InquiryResult]:
        """
        Ask the external system for the state of a request.

        Args:
            lookup_id: Internal or external request identifier

        Returns:
            Result carrying the external view of the request
        """
