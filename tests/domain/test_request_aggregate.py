import re

import pytest

from integration_service.domain.request.aggregate import Request
from integration_service.domain.request.exceptions import (
    InvalidRequestStateError,
    RequestValidationError,
)
from integration_service.domain.request.value_objects import (
    RequestStatus,
    can_transition,
    generate_request_id,
)


@pytest.fixture
def pending_request():
    return Request.create("Payment", "amount=50")


@pytest.fixture
def submitted_request(pending_request):
    pending_request.mark_submitted("EXT-1")
    return pending_request


def test_create_request(pending_request):
    # Assert
    assert pending_request.status == RequestStatus.PENDING
    assert pending_request.request_type == "Payment"
    assert pending_request.request_data == "amount=50"
    assert pending_request.external_request_id is None
    assert pending_request.completed_at is None
    assert pending_request.retry_count == 0
    assert pending_request.id
    assert pending_request.request_id.startswith("REQ-")


def test_created_requests_get_distinct_ids():
    # Act
    ids = {Request.create("Payment", "x").request_id for _ in range(50)}

    # Assert
    assert len(ids) == 50


def test_generated_request_id_format():
    # Act
    request_id = generate_request_id()

    # Assert
    assert re.fullmatch(r"REQ-\d{8}-[0-9a-f]{32}", request_id)
    assert len(request_id) == 45


def test_request_inputs_are_immutable(pending_request):
    # Act & Assert
    with pytest.raises(ValueError):
        pending_request.request_data = "changed"


def test_construction_without_required_fields_fails():
    # Act & Assert
    with pytest.raises(ValueError):
        Request(request_type="Payment", request_data="x")


def test_mark_submitted(pending_request):
    # Act
    pending_request.mark_submitted("EXT-1")

    # Assert
    assert pending_request.status == RequestStatus.SUBMITTED
    assert pending_request.external_request_id == "EXT-1"
    assert pending_request.completed_at is None


def test_mark_submitted_requires_external_id(pending_request):
    # Act & Assert
    with pytest.raises(RequestValidationError):
        pending_request.mark_submitted("")
    assert pending_request.status == RequestStatus.PENDING


def test_mark_completed(submitted_request):
    # Act
    submitted_request.mark_completed("ok")

    # Assert
    assert submitted_request.status == RequestStatus.COMPLETED
    assert submitted_request.response_data == "ok"
    assert submitted_request.completed_at is not None


def test_mark_completed_from_pending_takes_reported_external_id(pending_request):
    # Act
    pending_request.mark_completed("ok", external_request_id="EXT-9")

    # Assert
    assert pending_request.status == RequestStatus.COMPLETED
    assert pending_request.external_request_id == "EXT-9"


def test_mark_completed_without_any_external_id_fails(pending_request):
    # Act & Assert
    with pytest.raises(RequestValidationError):
        pending_request.mark_completed("ok")


def test_mark_failed_before_acceptance(pending_request):
    # Act
    pending_request.mark_failed("External API returned 503: busy")

    # Assert
    assert pending_request.status == RequestStatus.FAILED
    assert pending_request.error_message == "External API returned 503: busy"
    assert pending_request.external_request_id is None
    assert pending_request.completed_at is not None


def test_completed_request_cannot_fail(submitted_request):
    # Arrange
    submitted_request.mark_completed("ok")

    # Act & Assert
    with pytest.raises(InvalidRequestStateError) as exc_info:
        submitted_request.mark_failed("late failure")
    assert exc_info.value.current_state == "Completed"
    assert exc_info.value.attempted_state == "Failed"
    assert submitted_request.status == RequestStatus.COMPLETED


def test_failed_request_completes_with_reported_external_id(pending_request):
    # Arrange
    pending_request.mark_failed("Network error: timed out")

    # Act
    pending_request.mark_completed("ok", external_request_id="EXT-1")

    # Assert
    assert pending_request.status == RequestStatus.COMPLETED
    assert pending_request.external_request_id == "EXT-1"
    assert pending_request.response_data == "ok"
    assert pending_request.completed_at is not None


def test_transitions_update_timestamp(pending_request):
    # Arrange
    before = pending_request.updated_at

    # Act
    pending_request.mark_submitted("EXT-1")

    # Assert
    assert pending_request.updated_at >= before


def test_retry_cycle(pending_request):
    # Arrange
    pending_request.mark_failed("boom")

    # Act
    assert pending_request.can_retry(max_retries=3)
    pending_request.mark_retrying()

    # Assert
    assert pending_request.status == RequestStatus.RETRYING
    assert pending_request.retry_count == 1
    assert pending_request.last_retry_at is not None
    assert pending_request.completed_at is None
    assert pending_request.is_active


def test_can_retry_respects_limit(pending_request):
    # Arrange
    pending_request.mark_failed("boom")
    pending_request.mark_retrying()
    pending_request.mark_failed("boom again")

    # Assert
    assert pending_request.can_retry(max_retries=2)
    assert not pending_request.can_retry(max_retries=1)


def test_only_failed_requests_can_retry(submitted_request):
    # Assert
    assert not submitted_request.can_retry(max_retries=3)
    with pytest.raises(InvalidRequestStateError):
        submitted_request.mark_retrying()


@pytest.mark.parametrize(
    "current,target,allowed",
    [
        (RequestStatus.PENDING, RequestStatus.SUBMITTED, True),
        (RequestStatus.SUBMITTED, RequestStatus.PROCESSING, True),
        (RequestStatus.PROCESSING, RequestStatus.SUBMITTED, False),
        (RequestStatus.RETRYING, RequestStatus.SUBMITTED, True),
        (RequestStatus.FAILED, RequestStatus.COMPLETED, True),
        (RequestStatus.FAILED, RequestStatus.SUBMITTED, False),
        (RequestStatus.COMPLETED, RequestStatus.FAILED, False),
        (RequestStatus.CANCELLED, RequestStatus.PENDING, False),
    ],
)
def test_transition_table(current, target, allowed):
    assert can_transition(current, target) is allowed


def test_status_from_external_is_case_insensitive():
    assert RequestStatus.from_external("completed") == RequestStatus.COMPLETED
    assert RequestStatus.from_external(" FAILED ") == RequestStatus.FAILED
    assert RequestStatus.from_external("Unknown") is None
    assert RequestStatus.from_external(None) is None


def test_reconstruct_round_trips_persisted_state(submitted_request):
    # Act
    rebuilt = Request.reconstruct(submitted_request.model_dump())

    # Assert
    assert rebuilt == submitted_request
    assert rebuilt.status == RequestStatus.SUBMITTED
    assert rebuilt.external_request_id == "EXT-1"


def test_reconstruct_rejects_submitted_without_external_id(pending_request):
    # Arrange
    data = pending_request.model_dump()
    data["status"] = RequestStatus.SUBMITTED

    # Act & Assert
    with pytest.raises(RequestValidationError):
        Request.reconstruct(data)


def test_reconstruct_rejects_completed_without_timestamp(submitted_request):
    # Arrange
    data = submitted_request.model_dump()
    data["status"] = RequestStatus.COMPLETED

    # Act & Assert
    with pytest.raises(RequestValidationError):
        Request.reconstruct(data)
