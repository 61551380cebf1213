from unittest.mock import AsyncMock

import httpx
import pytest

from integration_service.application.commands.request_handlers import AddRequestHandler
from integration_service.application.dto.base import BaseQuery
from integration_service.application.dto.commands import AddRequestCommand
from integration_service.application.dto.queries import GetRequestQuery, ListRequestsQuery
from integration_service.application.interfaces.integration_client import IntegrationClientPort
from integration_service.domain.base.domain_interfaces import UnitOfWorkFactory
from integration_service.domain.base.result import Result
from integration_service.infrastructure.di.buses import BusMiddleware, QueryBus
from integration_service.infrastructure.di.container import (
    DependencyResolutionError,
    DIContainer,
    ServiceContainer,
)


class UnhandledQuery(BaseQuery):
    pass


class RecordingMiddleware(BusMiddleware):
    def __init__(self, name, calls):
        self.name = name
        self.calls = calls

    async def execute(self, message, next_handler):
        self.calls.append(f"{self.name}:before")
        result = await next_handler()
        self.calls.append(f"{self.name}:after")
        return result


def _partner(request: httpx.Request) -> httpx.Response:
    if request.method == "POST":
        return httpx.Response(
            200,
            json={"externalRequestId": "EXT-1", "status": "Submitted",
                  "submittedAt": "2024-05-01T12:00:00Z"},
        )
    return httpx.Response(404, text="unknown")


class TestDIContainer:
    def test_registered_instance_is_returned(self):
        # Arrange
        container = DIContainer()
        client = AsyncMock(spec=IntegrationClientPort)
        container.register_instance(IntegrationClientPort, client)

        # Act & Assert
        assert container.get(IntegrationClientPort) is client
        assert container.is_registered(IntegrationClientPort)

    def test_factory_is_called_per_resolution(self):
        # Arrange
        container = DIContainer()
        container.register_factory(list, lambda c: [])

        # Act & Assert
        assert container.get(list) is not container.get(list)

    def test_constructor_injection(self, uow_factory):
        # Arrange
        container = DIContainer()
        client = AsyncMock(spec=IntegrationClientPort)
        container.register_instance(UnitOfWorkFactory, uow_factory)
        container.register_instance(IntegrationClientPort, client)

        # Act
        handler = container.get(AddRequestHandler)

        # Assert
        assert isinstance(handler, AddRequestHandler)
        assert handler.uow_factory is uow_factory

    def test_unregistered_abstract_dependency(self):
        # Act & Assert
        with pytest.raises(DependencyResolutionError):
            DIContainer().get(AddRequestHandler)


class TestBuses:
    async def test_unregistered_query_type_raises(self):
        # Arrange
        bus = QueryBus(DIContainer())

        # Act & Assert
        with pytest.raises(KeyError):
            await bus.execute(UnhandledQuery())

    async def test_middleware_wraps_handler_in_order(self, app_config):
        # Arrange
        calls = []
        async with ServiceContainer(app_config) as container:
            container.query_bus.add_middleware(RecordingMiddleware("outer", calls))
            container.query_bus.add_middleware(RecordingMiddleware("inner", calls))

            # Act
            result = await container.query_bus.execute(ListRequestsQuery())

        # Assert
        assert isinstance(result, Result)
        assert result.is_success
        assert calls == ["outer:before", "inner:before", "inner:after", "outer:after"]


class TestServiceContainer:
    async def test_submit_then_read_back_through_buses(self, app_config):
        # Arrange
        async with ServiceContainer(app_config, http_transport=httpx.MockTransport(_partner)) as container:
            # Act
            submitted = await container.command_bus.execute(
                AddRequestCommand(request_type="Payment", request_data="amount=50")
            )
            loaded = await container.query_bus.execute(
                GetRequestQuery(request_id=submitted.value.request_id)
            )

        # Assert
        assert submitted.is_success
        assert submitted.value.external_request_id == "EXT-1"
        assert loaded.value.status == "Submitted"

    async def test_shutdown_closes_http_client(self, app_config):
        # Arrange
        container = ServiceContainer(app_config)
        await container.startup()

        # Act
        await container.shutdown()

        # Assert
        assert container.http_client.is_closed
