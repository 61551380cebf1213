import json

import httpx
import pytest

from integration_service.domain.base.result import ErrorKind
from integration_service.infrastructure.integration.http_client import (
    PARSE_ERROR_MESSAGE,
    IntegrationClient,
    build_async_client,
)

ADD_BODY = {
    "externalRequestId": "EXT-1",
    "status": "Submitted",
    "submittedAt": "2024-05-01T12:00:00Z",
}

INQUIRY_BODY = {
    "requestId": "REQ-1",
    "externalRequestId": "EXT-1",
    "status": "Completed",
    "submittedAt": "2024-05-01T12:00:00Z",
    "completedAt": "2024-05-01T12:05:00Z",
    "responseData": "ok",
    "errorMessage": None,
    "additionalInfo": None,
}


@pytest.fixture
def captured():
    return []


def _client(integration_config, handler):
    http = build_async_client(integration_config, transport=httpx.MockTransport(handler))
    return IntegrationClient(http, integration_config)


def _responder(captured, status_code=200, body=None, text=None):
    def handler(request: httpx.Request) -> httpx.Response:
        captured.append(request)
        if text is not None:
            return httpx.Response(status_code, text=text)
        return httpx.Response(status_code, json=body)

    return handler


class TestAddRequest:
    async def test_success_parses_acknowledgement(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 201, ADD_BODY))

        # Act
        result = await client.add_request("REQ-1", "Payment", "amount=50", {"source": "web"})

        # Assert
        assert result.is_success
        assert result.value.external_request_id == "EXT-1"
        assert result.value.status == "Submitted"

    async def test_sends_payload_and_headers(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 200, ADD_BODY))

        # Act
        await client.add_request("REQ-1", "Payment", "amount=50", {"source": "web"})

        # Assert
        sent = captured[0]
        assert sent.method == "POST"
        assert str(sent.url) == "https://partner.test/api/requests"
        assert sent.headers["X-API-Key"] == "secret-key"
        payload = json.loads(sent.content)
        assert payload["requestId"] == "REQ-1"
        assert payload["requestType"] == "Payment"
        assert payload["data"] == "amount=50"
        assert payload["metadata"] == {"source": "web"}
        assert "timestamp" in payload

    async def test_non_success_status(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 503, text="busy"))

        # Act
        result = await client.add_request("REQ-1", "Payment", "x", {})

        # Assert
        assert result.is_failure
        assert result.error == "External API returned 503: busy"
        assert result.error_kind == ErrorKind.EXTERNAL_SERVICE

    async def test_unparseable_body(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 200, {"unexpected": True}))

        # Act
        result = await client.add_request("REQ-1", "Payment", "x", {})

        # Assert
        assert result.error == PARSE_ERROR_MESSAGE
        assert result.error_kind == ErrorKind.EXTERNAL_SERVICE

    async def test_empty_external_id_is_a_parse_failure(self, integration_config, captured):
        # Arrange
        client = _client(integration_config,
                         _responder(captured, 200, {**ADD_BODY, "externalRequestId": ""}))

        # Act
        result = await client.add_request("REQ-1", "Payment", "x", {})

        # Assert
        assert result.is_failure
        assert result.error == PARSE_ERROR_MESSAGE
        assert result.error_kind == ErrorKind.EXTERNAL_SERVICE

    async def test_transport_error(self, integration_config):
        # Arrange
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        client = _client(integration_config, handler)

        # Act
        result = await client.add_request("REQ-1", "Payment", "x", {})

        # Assert
        assert result.error_kind == ErrorKind.NETWORK
        assert result.error == "Network error: connection refused"

    async def test_no_api_key_header_when_unset(self, integration_config, captured):
        # Arrange
        config = integration_config.model_copy(update={"api_key": None})
        client = _client(config, _responder(captured, 200, ADD_BODY))

        # Act
        await client.add_request("REQ-1", "Payment", "x", {})

        # Assert
        assert "X-API-Key" not in captured[0].headers


class TestInquireRequest:
    async def test_success_parses_inquiry(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 200, INQUIRY_BODY))

        # Act
        result = await client.inquire_request("EXT-1")

        # Assert
        assert result.is_success
        inquiry = result.value
        assert inquiry.status == "Completed"
        assert inquiry.response_data == "ok"
        assert inquiry.completed_at is not None
        assert inquiry.additional_info == {}

    async def test_sends_lookup_id_as_query_parameter(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 200, INQUIRY_BODY))

        # Act
        await client.inquire_request("EXT-1")

        # Assert
        sent = captured[0]
        assert sent.method == "GET"
        assert sent.url.path == "/api/requests/inquiry"
        assert sent.url.params["requestId"] == "EXT-1"

    async def test_not_found(self, integration_config, captured):
        # Arrange
        client = _client(integration_config, _responder(captured, 404, text="unknown request"))

        # Act
        result = await client.inquire_request("EXT-404")

        # Assert
        assert result.error_kind == ErrorKind.NOT_FOUND
        assert result.error == "External API returned 404: unknown request"

    async def test_timeout(self, integration_config):
        # Arrange
        def handler(request):
            raise httpx.ReadTimeout("timed out", request=request)

        client = _client(integration_config, handler)

        # Act
        result = await client.inquire_request("EXT-1")

        # Assert
        assert result.error_kind == ErrorKind.NETWORK
        assert result.error.startswith("Network error:")

    async def test_empty_external_id_is_a_parse_failure(self, integration_config, captured):
        # Arrange
        client = _client(integration_config,
                         _responder(captured, 200, {**INQUIRY_BODY, "externalRequestId": ""}))

        # Act
        result = await client.inquire_request("REQ-1")

        # Assert
        assert result.error == PARSE_ERROR_MESSAGE
        assert result.error_kind == ErrorKind.EXTERNAL_SERVICE
