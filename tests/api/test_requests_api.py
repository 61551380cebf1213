import httpx
import pytest
from fastapi.testclient import TestClient

from integration_service.api.server import create_fastapi_app
from integration_service.infrastructure.di.container import ServiceContainer


class FakePartner:
    """Stand-in for the external system behind an httpx.MockTransport."""

    def __init__(self):
        self.add_status = 200
        self.inquiry_status = "Processing"
        self.inquiries = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        if request.method == "POST":
            if self.add_status != 200:
                return httpx.Response(self.add_status, text="busy")
            return httpx.Response(
                200,
                json={"externalRequestId": "EXT-1", "status": "Submitted",
                      "submittedAt": "2024-05-01T12:00:00Z"},
            )
        lookup_id = request.url.params["requestId"]
        self.inquiries.append(lookup_id)
        if lookup_id not in ("EXT-1",):
            return httpx.Response(404, text="unknown request")
        return httpx.Response(
            200,
            json={
                "requestId": "REQ-X",
                "externalRequestId": "EXT-1",
                "status": self.inquiry_status,
                "submittedAt": "2024-05-01T12:00:00Z",
                "responseData": "ok" if self.inquiry_status == "Completed" else None,
                "additionalInfo": {"region": "eu"},
            },
        )


@pytest.fixture
def partner():
    return FakePartner()


@pytest.fixture
def client(app_config, partner):
    container = ServiceContainer(app_config, http_transport=httpx.MockTransport(partner))
    app = create_fastapi_app(app_config, container)
    with TestClient(app) as test_client:
        yield test_client


def _submit(client, **overrides):
    body = {"requestType": "Payment", "requestData": "amount=50", "metadata": {"source": "web"}}
    body.update(overrides)
    return client.post("/api/v1/requests", json=body)


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "healthy"


def test_submit_request(client):
    # Act
    response = _submit(client)

    # Assert
    assert response.status_code == 200
    body = response.json()
    assert body["externalRequestId"] == "EXT-1"
    assert body["status"] == "Submitted"
    assert body["requestId"].startswith("REQ-")
    assert "submittedAt" in body


def test_submit_remote_failure_returns_problem(client, partner):
    # Arrange
    partner.add_status = 503

    # Act
    response = _submit(client)

    # Assert
    assert response.status_code == 400
    problem = response.json()
    assert problem["detail"] == "External API returned 503: busy"
    assert problem["errorKind"] == "external_service"
    assert problem["status"] == 400

    tracked = client.get("/api/v1/requests").json()
    assert [item["status"] for item in tracked] == ["Failed"]


def test_submit_validation_failure(client):
    # Act
    response = _submit(client, requestType="T" * 51)

    # Assert
    assert response.status_code == 400
    assert response.json()["errorKind"] == "validation"


def test_malformed_body_is_validation_problem(client):
    # Act
    response = client.post("/api/v1/requests", json={"requestType": "Payment"})

    # Assert
    assert response.status_code == 400
    problem = response.json()
    assert problem["errorKind"] == "validation"
    assert "requestData" in problem["detail"]


def test_inquiry_reconciles_and_mirrors_external_view(client, partner):
    # Arrange
    request_id = _submit(client).json()["requestId"]
    partner.inquiry_status = "Completed"

    # Act
    response = client.get("/api/v1/requests/inquiry", params={"externalRequestId": "EXT-1"})

    # Assert
    assert response.status_code == 200
    body = response.json()
    assert body["status"] == "Completed"
    assert body["additionalInfo"] == {"region": "eu"}

    tracked = client.get(f"/api/v1/requests/{request_id}").json()
    assert tracked["status"] == "Completed"
    assert tracked["responseData"] == "ok"
    assert tracked["completedAt"] is not None


def test_inquiry_without_identifier(client, partner):
    # Act
    response = client.get("/api/v1/requests/inquiry")

    # Assert
    assert response.status_code == 400
    assert response.json()["errorKind"] == "validation"
    assert partner.inquiries == []


def test_inquiry_unknown_request(client):
    # Act
    response = client.get("/api/v1/requests/inquiry", params={"requestId": "REQ-UNKNOWN"})

    # Assert
    assert response.status_code == 404
    assert response.json()["errorKind"] == "not_found"


def test_get_unknown_tracked_request(client):
    response = client.get("/api/v1/requests/REQ-404")
    assert response.status_code == 404
    assert response.json()["title"] == "Not Found"


def test_list_with_unknown_status(client):
    response = client.get("/api/v1/requests", params={"status": "Lost"})
    assert response.status_code == 400


def test_request_id_header_is_echoed(client):
    response = client.get("/health", headers={"X-Request-ID": "call-123"})
    assert response.headers["X-Request-ID"] == "call-123"


def test_request_id_header_is_generated(client):
    response = client.get("/health")
    assert response.headers["X-Request-ID"]
