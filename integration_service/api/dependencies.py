"""FastAPI dependency injection integration."""
from fastapi import Depends, Request

from integration_service.infrastructure.di.buses import CommandBus, QueryBus
from integration_service.infrastructure.di.container import ServiceContainer
from integration_service.infrastructure.error.exception_handler import (
    ExceptionHandler,
    get_exception_handler,
)


def get_di_container(request: Request) -> ServiceContainer:
    """Get the container attached to the running application."""
    return request.app.state.container


def get_query_bus(container: ServiceContainer = Depends(get_di_container)) -> QueryBus:
    """Get QueryBus from DI container."""
    return container.get(QueryBus)


def get_command_bus(container: ServiceContainer = Depends(get_di_container)) -> CommandBus:
    """Get CommandBus from DI container."""
    return container.get(CommandBus)


def get_error_handler() -> ExceptionHandler:
    return get_exception_handler()
