"""Request aggregate - the tracked record of a submission to the external system."""
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import Field

from integration_service.domain.base.entity import Entity, utcnow
from integration_service.domain.request.exceptions import (
    InvalidRequestStateError,
    RequestValidationError,
)
from integration_service.domain.request.value_objects import (
    EXTERNALLY_ACCEPTED_STATUSES,
    RequestStatus,
    can_transition,
    generate_request_id,
)


class Request(Entity):
    """Request aggregate root.

    New requests are built with ``create``; rows loaded from storage are
    rebuilt with ``reconstruct``. Status only changes through the ``mark_*``
    methods, which validate the move against the transition table.
    """

    request_id: str = Field(frozen=True, min_length=1)
    request_type: str = Field(frozen=True, min_length=1)
    request_data: str = Field(frozen=True)
    external_request_id: Optional[str] = None
    status: RequestStatus = RequestStatus.PENDING
    submitted_at: datetime = Field(default_factory=utcnow)
    completed_at: Optional[datetime] = None
    response_data: Optional[str] = None
    error_message: Optional[str] = None
    retry_count: int = Field(default=0, ge=0)
    last_retry_at: Optional[datetime] = None

    @classmethod
    def create(cls, request_type: str, request_data: str,
               request_id: Optional[str] = None) -> "Request":
        """Create a new request in Pending status."""
        return cls(
            request_id=request_id or generate_request_id(),
            request_type=request_type,
            request_data=request_data,
        )

    @classmethod
    def reconstruct(cls, data: Dict[str, Any]) -> "Request":
        """Rebuild a request from persisted state.

        Raises:
            RequestValidationError: if the stored state breaks an invariant
        """
        request = cls.model_validate(data)
        request.check_invariants()
        return request

    def check_invariants(self) -> None:
        """Verify the status-dependent field invariants."""
        if self.status in EXTERNALLY_ACCEPTED_STATUSES and not self.external_request_id:
            raise RequestValidationError(
                f"Request {self.request_id} is {self.status.value} but has no external request id"
            )
        if self.status.is_finished != (self.completed_at is not None):
            raise RequestValidationError(
                f"Request {self.request_id} is {self.status.value} "
                f"but completed_at is {'set' if self.completed_at else 'missing'}"
            )

    def _transition_to(self, target: RequestStatus) -> None:
        if not can_transition(self.status, target):
            raise InvalidRequestStateError(self.request_id, self.status.value, target.value)
        self.status = target
        self.touch()

    def mark_submitted(self, external_request_id: str) -> None:
        """Record acceptance by the external system."""
        if not external_request_id:
            raise RequestValidationError("External request id is required to mark a request submitted")
        self._transition_to(RequestStatus.SUBMITTED)
        self.external_request_id = external_request_id

    def mark_completed(self, response_data: Optional[str],
                       external_request_id: Optional[str] = None) -> None:
        """Record externally reported completion."""
        if not self.external_request_id and not external_request_id:
            raise RequestValidationError(
                f"Request {self.request_id} cannot complete without an external request id"
            )
        self._transition_to(RequestStatus.COMPLETED)
        if not self.external_request_id:
            self.external_request_id = external_request_id
        self.response_data = response_data
        self.completed_at = utcnow()

    def mark_failed(self, error_message: Optional[str]) -> None:
        """Record a submission error or an externally reported failure."""
        self._transition_to(RequestStatus.FAILED)
        self.error_message = error_message
        self.completed_at = utcnow()

    def mark_retrying(self) -> None:
        """Move a failed request back into flight and count the attempt."""
        self._transition_to(RequestStatus.RETRYING)
        self.retry_count += 1
        self.last_retry_at = utcnow()
        self.completed_at = None

    def can_retry(self, max_retries: int) -> bool:
        return self.status == RequestStatus.FAILED and self.retry_count < max_retries

    @property
    def is_active(self) -> bool:
        """Check if request is still awaiting a terminal outcome."""
        return not self.status.is_terminal
