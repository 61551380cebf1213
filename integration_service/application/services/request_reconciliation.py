"""Applying externally reported status to a locally tracked request."""
from enum import Enum

from integration_service.application.interfaces.integration_client import InquiryResult
from integration_service.domain.request.aggregate import Request
from integration_service.domain.request.value_objects import RequestStatus


class ReconcileOutcome(str, Enum):
    """What an inquiry did to the local record."""

    COMPLETED = "completed"
    FAILED = "failed"
    SUBMITTED = "submitted"
    UNCHANGED = "unchanged"


_IN_FLIGHT_STATUSES = (RequestStatus.SUBMITTED, RequestStatus.PROCESSING)


def apply_inquiry(request: Request, inquiry: InquiryResult,
                  promote_accepted: bool = False) -> ReconcileOutcome:
    """
    Move ``request`` toward the status reported by the external system.

    Only terminal reports (Completed, Failed) are applied, and only when the
    local record is not already in that status. With ``promote_accepted``, a
    local Pending record the external system reports as in flight is marked
    Submitted.

    Raises:
        InvalidRequestStateError: if the entity refuses the transition
        RequestValidationError: if the report lacks a required identifier
    """
    reported = RequestStatus.from_external(inquiry.status)

    if reported == RequestStatus.COMPLETED and request.status != RequestStatus.COMPLETED:
        request.mark_completed(inquiry.response_data, inquiry.external_request_id)
        return ReconcileOutcome.COMPLETED

    if reported == RequestStatus.FAILED and request.status != RequestStatus.FAILED:
        request.mark_failed(inquiry.error_message)
        return ReconcileOutcome.FAILED

    if (
        promote_accepted
        and request.status == RequestStatus.PENDING
        and reported in _IN_FLIGHT_STATUSES
    ):
        request.mark_submitted(inquiry.external_request_id)
        return ReconcileOutcome.SUBMITTED

    return ReconcileOutcome.UNCHANGED
