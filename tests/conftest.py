"""Shared fixtures: in-memory local store, mocked integration client, configuration."""
from datetime import datetime, timezone
from unittest.mock import AsyncMock

import pytest

from integration_service.application.interfaces.integration_client import (
    AddRequestResult,
    InquiryResult,
    IntegrationClientPort,
)
from integration_service.config.schemas import AppConfig, DatabaseConfig, IntegrationConfig
from integration_service.domain.base.result import Result
from integration_service.infrastructure.persistence.sql.engine import (
    create_engine,
    create_schema,
    create_session_factory,
)
from integration_service.infrastructure.persistence.sql.unit_of_work import SQLUnitOfWorkFactory

SUBMITTED_AT = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
IN_MEMORY_DB = "sqlite+aiosqlite:///:memory:"


@pytest.fixture
def integration_config():
    return IntegrationConfig(base_url="https://partner.test", api_key="secret-key")


@pytest.fixture
def app_config(integration_config):
    return AppConfig(
        environment="testing",
        integration=integration_config,
        database=DatabaseConfig(url=IN_MEMORY_DB),
    )


@pytest.fixture
async def engine():
    """In-memory SQLite engine with the schema created."""
    engine = create_engine(DatabaseConfig(url=IN_MEMORY_DB))
    await create_schema(engine)
    yield engine
    await engine.dispose()


@pytest.fixture
def uow_factory(engine):
    return SQLUnitOfWorkFactory(create_session_factory(engine))


@pytest.fixture
def mock_client():
    return AsyncMock(spec=IntegrationClientPort)


@pytest.fixture
def make_ack():
    """Factory for successful add-request acknowledgements."""
    return _ack


@pytest.fixture
def make_inquiry():
    """Factory for successful inquiry results."""
    return _inquiry


def _ack(external_request_id="EXT-1", status="Submitted"):
    return Result.success(
        AddRequestResult(
            external_request_id=external_request_id,
            status=status,
            submitted_at=SUBMITTED_AT,
        )
    )


def _inquiry(status, request_id="REQ-1", external_request_id="EXT-1", **fields):
    return Result.success(
        InquiryResult(
            request_id=request_id,
            external_request_id=external_request_id,
            status=status,
            submitted_at=SUBMITTED_AT,
            **fields,
        )
    )


@pytest.fixture
def seed_request(uow_factory):
    """Persist a request directly, bypassing the handlers."""

    async def _seed(request):
        async with uow_factory.create_unit_of_work() as uow:
            await uow.requests.add(request)
            await uow.save_changes()
        return request

    return _seed


@pytest.fixture
def load_request(uow_factory):
    """Read a request back by its internal request id."""

    async def _load(request_id):
        async with uow_factory.create_unit_of_work() as uow:
            return await uow.requests.get_by_request_id(request_id)

    return _load
