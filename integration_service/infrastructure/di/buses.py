"""
CQRS bus implementation.

The buses look up the handler registered for a message type, build it
through the container and run it behind a middleware chain.
"""
import functools
import time
from abc import ABC, abstractmethod
from typing import Any, Awaitable, Callable, List

from integration_service.application.decorators import (
    get_command_handler_for_type,
    get_query_handler_for_type,
)
from integration_service.application.dto.base import BaseCommand, BaseQuery
from integration_service.domain.base.result import Result
from integration_service.infrastructure.logging.logger import get_logger

logger = get_logger(__name__)

NextHandler = Callable[[], Awaitable[Any]]


class BusMiddleware(ABC):
    """Base class for bus middleware."""

    @abstractmethod
    async def execute(self, message: Any, next_handler: NextHandler) -> Any:
        """Execute middleware logic."""


class LoggingMiddleware(BusMiddleware):
    """Middleware for logging bus operations."""

    async def execute(self, message: Any, next_handler: NextHandler) -> Any:
        message_type = type(message).__name__
        start_time = time.perf_counter()
        logger.debug(f"Executing {message_type}")

        result = await next_handler()
        execution_time = time.perf_counter() - start_time
        if isinstance(result, Result) and result.is_failure:
            logger.info(
                f"{message_type} failed in {execution_time:.3f}s",
                error=result.error,
                error_kind=result.error_kind.value,
            )
        else:
            logger.debug(f"Completed {message_type} in {execution_time:.3f}s")
        return result


class _Bus:
    def __init__(self, container, resolve_handler_type: Callable[[type], type]):
        self.container = container
        self._resolve_handler_type = resolve_handler_type
        self.middleware: List[BusMiddleware] = [LoggingMiddleware()]

    def add_middleware(self, middleware: BusMiddleware) -> None:
        """Add middleware to the bus."""
        self.middleware.append(middleware)
        logger.debug(f"Added middleware: {type(middleware).__name__}")

    async def _dispatch(self, message: Any) -> Result:
        handler_class = self._resolve_handler_type(type(message))
        handler = self.container.get(handler_class)

        async def final_handler():
            return await handler.handle(message)

        chain: NextHandler = final_handler
        for middleware in reversed(self.middleware):
            chain = functools.partial(middleware.execute, message, chain)
        return await chain()


class QueryBus(_Bus):
    """Bus for queries."""

    def __init__(self, container):
        super().__init__(container, get_query_handler_for_type)

    async def execute(self, query: BaseQuery) -> Result:
        """
        Execute a query through the bus.

        Raises:
            KeyError: If no handler is registered for the query type
        """
        return await self._dispatch(query)


class CommandBus(_Bus):
    """Bus for commands."""

    def __init__(self, container):
        super().__init__(container, get_command_handler_for_type)

    async def execute(self, command: BaseCommand) -> Result:
        """
        Execute a command through the bus.

        Raises:
            KeyError: If no handler is registered for the command type
        """
        return await self._dispatch(command)
