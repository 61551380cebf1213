"""Dependency injection container and composition root."""
import inspect
from typing import Any, Callable, Dict, Optional, Type, TypeVar, cast, get_type_hints

import httpx

# Imported for their handler registrations
import integration_service.application.commands.request_handlers  # noqa: F401
import integration_service.application.queries.request_handlers  # noqa: F401
from integration_service.application.interfaces.integration_client import IntegrationClientPort
from integration_service.config.schemas import AppConfig
from integration_service.domain.base.domain_interfaces import UnitOfWorkFactory
from integration_service.infrastructure.di.buses import CommandBus, QueryBus
from integration_service.infrastructure.integration.http_client import (
    IntegrationClient,
    build_async_client,
)
from integration_service.infrastructure.logging.logger import get_logger
from integration_service.infrastructure.persistence.sql.engine import (
    create_engine,
    create_schema,
    create_session_factory,
)
from integration_service.infrastructure.persistence.sql.unit_of_work import SQLUnitOfWorkFactory

logger = get_logger(__name__)

T = TypeVar("T")


class DependencyResolutionError(Exception):
    """Raised when a dependency cannot be resolved."""

    def __init__(self, dependency_type: Type, message: str):
        super().__init__(f"Cannot resolve {getattr(dependency_type, '__name__', dependency_type)}: {message}")
        self.dependency_type = dependency_type


class DIContainer:
    """
    Minimal dependency injection container.

    Resolution order: registered instance, registered factory, then
    constructor injection driven by the ``__init__`` type hints.
    """

    def __init__(self):
        self._instances: Dict[Type, Any] = {}
        self._factories: Dict[Type, Callable[["DIContainer"], Any]] = {}

    def is_registered(self, cls: Type) -> bool:
        return cls in self._instances or cls in self._factories

    def register_instance(self, cls: Type[T], instance: T) -> None:
        """Register a specific instance for a type."""
        self._instances[cls] = instance
        logger.debug(f"Registered instance for {cls.__name__}")

    def register_factory(self, cls: Type[T], factory: Callable[["DIContainer"], T]) -> None:
        """Register a factory function for a type."""
        self._factories[cls] = factory
        logger.debug(f"Registered factory for {cls.__name__}")

    def get(self, cls: Type[T]) -> T:
        """
        Get an instance of the specified type.

        Raises:
            DependencyResolutionError: If the dependency cannot be resolved
        """
        if cls in self._instances:
            return cast(T, self._instances[cls])
        if cls in self._factories:
            return cast(T, self._factories[cls](self))
        return self._create_instance(cls)

    def _create_instance(self, cls: Type[T]) -> T:
        if inspect.isabstract(cls):
            raise DependencyResolutionError(cls, "abstract type with no registration")

        try:
            hints = get_type_hints(cls.__init__)
        except (NameError, TypeError) as e:
            raise DependencyResolutionError(cls, f"unreadable constructor annotations: {e}") from e

        kwargs = {}
        for name, param in inspect.signature(cls.__init__).parameters.items():
            if name == "self" or param.kind in (param.VAR_POSITIONAL, param.VAR_KEYWORD):
                continue
            if name not in hints:
                if param.default is param.empty:
                    raise DependencyResolutionError(cls, f"untyped parameter '{name}'")
                continue
            kwargs[name] = self.get(hints[name])

        logger.debug(f"Creating instance of {cls.__name__}")
        return cls(**kwargs)


class ServiceContainer(DIContainer):
    """
    Composition root for the service.

    Owns the database engine and the shared HTTP client; both are released
    by ``shutdown``.
    """

    def __init__(self, config: AppConfig,
                 http_transport: Optional[httpx.AsyncBaseTransport] = None):
        super().__init__()
        self.config = config
        self.engine = create_engine(config.database)
        self.http_client = build_async_client(config.integration, transport=http_transport)

        self.register_instance(AppConfig, config)
        self.register_instance(
            UnitOfWorkFactory, SQLUnitOfWorkFactory(create_session_factory(self.engine))
        )
        self.register_instance(
            IntegrationClientPort, IntegrationClient(self.http_client, config.integration)
        )

        self.command_bus = CommandBus(self)
        self.query_bus = QueryBus(self)
        self.register_instance(CommandBus, self.command_bus)
        self.register_instance(QueryBus, self.query_bus)

    async def startup(self) -> None:
        if self.config.database.create_schema:
            await create_schema(self.engine)
        logger.info("Service container started", environment=self.config.environment)

    async def shutdown(self) -> None:
        await self.http_client.aclose()
        await self.engine.dispose()
        logger.info("Service container stopped")

    async def __aenter__(self) -> "ServiceContainer":
        await self.startup()
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.shutdown()
