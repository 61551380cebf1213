"""Mapping of failures to HTTP problem responses."""
from http import HTTPStatus
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field

from integration_service.domain.base.exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
)
from integration_service.domain.base.result import ErrorKind, Result
from integration_service.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)


class ErrorResponse(BaseModel):
    """Problem body returned by the API."""
    model_config = ConfigDict(populate_by_name=True)

    title: str
    detail: str
    status: int
    error_kind: str = Field(alias="errorKind")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True)


class ExceptionHandler:
    """Builds problem responses from failed Results and uncaught exceptions."""

    _STATUS_BY_KIND = {
        ErrorKind.VALIDATION: HTTPStatus.BAD_REQUEST,
        ErrorKind.EXTERNAL_SERVICE: HTTPStatus.BAD_REQUEST,
        ErrorKind.NETWORK: HTTPStatus.BAD_REQUEST,
        ErrorKind.NOT_FOUND: HTTPStatus.NOT_FOUND,
        ErrorKind.INTERNAL: HTTPStatus.INTERNAL_SERVER_ERROR,
    }

    def status_for_kind(self, kind: Optional[ErrorKind]) -> int:
        return int(self._STATUS_BY_KIND.get(kind, HTTPStatus.INTERNAL_SERVER_ERROR))

    def from_result(self, result: Result) -> ErrorResponse:
        """Problem body for a failed Result."""
        status = self.status_for_kind(result.error_kind)
        return ErrorResponse(
            title=HTTPStatus(status).phrase,
            detail=result.error,
            status=status,
            error_kind=result.error_kind.value,
        )

    def handle_error_for_http(self, exception: Exception) -> ErrorResponse:
        """Problem body for an exception that escaped the handlers."""
        if isinstance(exception, ValidationError):
            kind = ErrorKind.VALIDATION
        elif isinstance(exception, EntityNotFoundError):
            kind = ErrorKind.NOT_FOUND
        else:
            kind = ErrorKind.INTERNAL

        status = self.status_for_kind(kind)
        if kind == ErrorKind.INTERNAL:
            logger.error("Unhandled exception", error=str(exception), exc_info=exception)
            detail = "An unexpected error occurred"
        else:
            detail = exception.message if isinstance(exception, DomainException) else str(exception)

        return ErrorResponse(
            title=HTTPStatus(status).phrase,
            detail=detail,
            status=status,
            error_kind=kind.value,
        )


_exception_handler: Optional[ExceptionHandler] = None


def get_exception_handler() -> ExceptionHandler:
    """Get the process-wide exception handler."""
    global _exception_handler
    if _exception_handler is None:
        _exception_handler = ExceptionHandler()
    return _exception_handler
