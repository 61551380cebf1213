import pytest

from integration_service.application.dto.queries import InquireRequestQuery
from integration_service.application.queries.request_handlers import InquireRequestHandler
from integration_service.domain.base.result import ErrorKind, Result
from integration_service.domain.request.aggregate import Request
from integration_service.domain.request.value_objects import RequestStatus


@pytest.fixture
def handler(uow_factory, mock_client):
    return InquireRequestHandler(uow_factory, mock_client)


@pytest.fixture
async def submitted(seed_request):
    request = Request.create("Payment", "amount=50")
    request.mark_submitted("EXT-1")
    return await seed_request(request)


async def test_inquiry_requires_an_identifier(handler, mock_client):
    # Act
    result = await handler.handle(InquireRequestQuery())

    # Assert
    assert result.is_failure
    assert result.error_kind == ErrorKind.VALIDATION
    assert result.error == "Either request_id or external_request_id must be provided"
    mock_client.inquire_request.assert_not_called()


async def test_inquiry_rejects_overlong_identifier(handler, mock_client):
    # Act
    result = await handler.handle(InquireRequestQuery(request_id="R" * 101))

    # Assert
    assert result.error_kind == ErrorKind.VALIDATION
    mock_client.inquire_request.assert_not_called()


async def test_inquiry_by_external_id_completes_local_record(
    handler, mock_client, make_inquiry, submitted, load_request
):
    # Arrange
    mock_client.inquire_request.return_value = make_inquiry(
        "Completed", request_id=submitted.request_id, response_data="ok"
    )

    # Act
    result = await handler.handle(InquireRequestQuery(external_request_id="EXT-1"))

    # Assert
    assert result.is_success
    assert result.value.status == "Completed"
    assert result.value.response_data == "ok"
    mock_client.inquire_request.assert_awaited_once_with("EXT-1")

    stored = await load_request(submitted.request_id)
    assert stored.status == RequestStatus.COMPLETED
    assert stored.response_data == "ok"
    assert stored.completed_at is not None


async def test_external_id_takes_precedence_for_lookup(handler, mock_client, make_inquiry, submitted):
    # Arrange
    mock_client.inquire_request.return_value = make_inquiry("Processing")

    # Act
    await handler.handle(
        InquireRequestQuery(request_id=submitted.request_id, external_request_id="EXT-1")
    )

    # Assert
    mock_client.inquire_request.assert_awaited_once_with("EXT-1")


async def test_repeated_completion_is_idempotent(
    handler, mock_client, make_inquiry, submitted, load_request
):
    # Arrange
    mock_client.inquire_request.return_value = make_inquiry("Completed", response_data="ok")
    await handler.handle(InquireRequestQuery(request_id=submitted.request_id))
    first = await load_request(submitted.request_id)

    # Act
    result = await handler.handle(InquireRequestQuery(request_id=submitted.request_id))

    # Assert
    assert result.is_success
    second = await load_request(submitted.request_id)
    assert second.status == RequestStatus.COMPLETED
    assert second.completed_at == first.completed_at
    assert second.updated_at == first.updated_at


async def test_non_terminal_report_does_not_write(
    handler, mock_client, make_inquiry, submitted, load_request
):
    # Arrange
    mock_client.inquire_request.return_value = make_inquiry("Processing")

    # Act
    result = await handler.handle(InquireRequestQuery(request_id=submitted.request_id))

    # Assert
    assert result.is_success
    assert result.value.status == "Processing"
    stored = await load_request(submitted.request_id)
    assert stored.status == RequestStatus.SUBMITTED
    assert stored.updated_at == submitted.updated_at


async def test_reported_failure_marks_local_failed(
    handler, mock_client, make_inquiry, submitted, load_request
):
    # Arrange
    mock_client.inquire_request.return_value = make_inquiry("failed", error_message="declined")

    # Act
    await handler.handle(InquireRequestQuery(request_id=submitted.request_id))

    # Assert
    stored = await load_request(submitted.request_id)
    assert stored.status == RequestStatus.FAILED
    assert stored.error_message == "declined"


async def test_completed_record_is_not_moved_to_failed(
    handler, mock_client, make_inquiry, submitted, load_request, uow_factory
):
    # Arrange
    async with uow_factory.create_unit_of_work() as uow:
        request = await uow.requests.get_by_request_id(submitted.request_id)
        request.mark_completed("ok")
        await uow.requests.update(request)
        await uow.save_changes()
    mock_client.inquire_request.return_value = make_inquiry("Failed", error_message="late")

    # Act
    result = await handler.handle(InquireRequestQuery(request_id=submitted.request_id))

    # Assert
    assert result.is_success
    assert result.value.status == "Failed"
    stored = await load_request(submitted.request_id)
    assert stored.status == RequestStatus.COMPLETED
    assert stored.error_message is None


async def test_inquiry_without_local_record_returns_external_view(handler, mock_client, make_inquiry):
    # Arrange
    mock_client.inquire_request.return_value = make_inquiry(
        "Completed", request_id="REQ-ELSEWHERE", additional_info={"region": "eu"}
    )

    # Act
    result = await handler.handle(InquireRequestQuery(request_id="REQ-ELSEWHERE"))

    # Assert
    assert result.is_success
    assert result.value.additional_info == {"region": "eu"}


@pytest.mark.parametrize(
    "error,kind",
    [
        ("External API returned 404: missing", ErrorKind.NOT_FOUND),
        ("Network error: timed out", ErrorKind.NETWORK),
        ("Failed to parse response from external API", ErrorKind.EXTERNAL_SERVICE),
    ],
)
async def test_inquiry_failure_is_propagated(handler, mock_client, submitted, load_request, error, kind):
    # Arrange
    mock_client.inquire_request.return_value = Result.failure(error, kind)

    # Act
    result = await handler.handle(InquireRequestQuery(request_id=submitted.request_id))

    # Assert
    assert result.is_failure
    assert result.error == error
    assert result.error_kind == kind
    stored = await load_request(submitted.request_id)
    assert stored.status == RequestStatus.SUBMITTED


async def test_locally_failed_record_completes_when_partner_reports_completion(
    handler, mock_client, make_inquiry, seed_request, load_request
):
    # Arrange
    request = Request.create("Payment", "amount=50")
    request.mark_failed("Network error: timed out")
    await seed_request(request)
    mock_client.inquire_request.return_value = make_inquiry(
        "Completed", request_id=request.request_id, external_request_id="EXT-7", response_data="ok"
    )

    # Act
    result = await handler.handle(InquireRequestQuery(request_id=request.request_id))

    # Assert
    assert result.is_success
    stored = await load_request(request.request_id)
    assert stored.status == RequestStatus.COMPLETED
    assert stored.external_request_id == "EXT-7"
    assert stored.response_data == "ok"
    assert stored.completed_at is not None
