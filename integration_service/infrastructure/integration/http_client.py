"""httpx implementation of the external integration client."""
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

from integration_service.application.interfaces.integration_client import (
    AddRequestResult,
    InquiryResult,
    IntegrationClientPort,
)
from integration_service.config.schemas import IntegrationConfig
from integration_service.domain.base.result import ErrorKind, Result
from integration_service.infrastructure.logging.logger import get_logger

T = TypeVar("T")
M = TypeVar("M", bound=BaseModel)

PARSE_ERROR_MESSAGE = "Failed to parse response from external API"


def build_async_client(config: IntegrationConfig,
                       transport: Optional[httpx.AsyncBaseTransport] = None) -> httpx.AsyncClient:
    """Create the shared ``httpx.AsyncClient`` for the external system."""
    headers = {"Accept": "application/json"}
    if config.api_key:
        headers["X-API-Key"] = config.api_key
    return httpx.AsyncClient(
        base_url=config.base_url,
        timeout=httpx.Timeout(config.timeout_seconds),
        headers=headers,
        transport=transport,
    )


class _ExternalModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class ExternalAddResponse(_ExternalModel):
    external_request_id: str = Field(min_length=1)
    status: str
    submitted_at: datetime


class ExternalInquiryResponse(_ExternalModel):
    request_id: str
    external_request_id: str = Field(min_length=1)
    status: str
    submitted_at: datetime
    completed_at: Optional[datetime] = None
    response_data: Optional[str] = None
    error_message: Optional[str] = None
    additional_info: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("additional_info", mode="before")
    @classmethod
    def default_additional_info(cls, v: Any) -> Any:
        return {} if v is None else v


class IntegrationClient(IntegrationClientPort):
    """Talks to the external system over HTTP.

    Every failure is returned as a Result. ``asyncio.CancelledError`` is
    not an ``Exception`` subclass and passes through untouched.
    """

    def __init__(self, http_client: httpx.AsyncClient, config: IntegrationConfig):
        self._http = http_client
        self._config = config
        self.logger = get_logger(__name__)

    async def add_request(self, request_id: str, request_type: str, request_data: str,
                          metadata: Dict[str, str]) -> Result[AddRequestResult]:
        self.logger.info("Submitting request to external integration", request_id=request_id)
        payload = {
            "requestId": request_id,
            "requestType": request_type,
            "data": request_data,
            "metadata": metadata or {},
            "timestamp": datetime.now(timezone.utc).isoformat(),
        }
        try:
            response = await self._http.post(self._config.add_request_endpoint, json=payload)
            parsed = self._parse(response, ExternalAddResponse)
            if parsed.is_failure:
                return parsed.propagate()
            body = parsed.value
            self.logger.info(
                "Submitted request",
                request_id=request_id,
                external_request_id=body.external_request_id,
            )
            return Result.success(
                AddRequestResult(
                    external_request_id=body.external_request_id,
                    status=body.status,
                    submitted_at=body.submitted_at,
                )
            )
        except httpx.TransportError as e:
            self.logger.error("HTTP error while submitting request", request_id=request_id, error=str(e))
            return Result.failure(f"Network error: {e}", ErrorKind.NETWORK)
        except Exception as e:
            self.logger.exception("Unexpected error while submitting request", request_id=request_id)
            return Result.failure(f"Unexpected error: {e}", ErrorKind.INTERNAL)

    async def inquire_request(self, lookup_id: str) -> Result[InquiryResult]:
        self.logger.info("Inquiring request status", lookup_id=lookup_id)
        try:
            response = await self._http.get(
                self._config.inquiry_endpoint, params={"requestId": lookup_id}
            )
            parsed = self._parse(response, ExternalInquiryResponse)
            if parsed.is_failure:
                return parsed.propagate()
            body = parsed.value
            self.logger.info("Retrieved inquiry data", lookup_id=lookup_id, status=body.status)
            return Result.success(InquiryResult(**body.model_dump()))
        except httpx.TransportError as e:
            self.logger.error("HTTP error while inquiring request", lookup_id=lookup_id, error=str(e))
            return Result.failure(f"Network error: {e}", ErrorKind.NETWORK)
        except Exception as e:
            self.logger.exception("Unexpected error while inquiring request", lookup_id=lookup_id)
            return Result.failure(f"Unexpected error: {e}", ErrorKind.INTERNAL)

    def _parse(self, response: httpx.Response, model: Type[M]) -> Result[M]:
        if not response.is_success:
            self.logger.error(
                "External API call failed",
                status_code=response.status_code,
                error=response.text,
            )
            kind = ErrorKind.NOT_FOUND if response.status_code == 404 else ErrorKind.EXTERNAL_SERVICE
            return Result.failure(
                f"External API returned {response.status_code}: {response.text}", kind
            )
        try:
            return Result.success(model.model_validate_json(response.content))
        except ValidationError as e:
            self.logger.error("Unparseable response from external API", error=str(e))
            return Result.failure(PARSE_ERROR_MESSAGE, ErrorKind.EXTERNAL_SERVICE)
