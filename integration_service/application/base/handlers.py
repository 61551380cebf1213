"""
CQRS-aligned base handler hierarchy.

Handlers return a ``Result``. Anticipated failures are built by the
concrete handler; anything unexpected is logged here and turned into an
``INTERNAL`` failure so that it never escapes to the caller.
"""
import time
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from integration_service.application.dto.base import BaseCommand, BaseQuery
from integration_service.domain.base.domain_interfaces import UnitOfWorkFactory
from integration_service.domain.base.result import ErrorKind, Result
from integration_service.infrastructure.logging.logger import get_logger

TCommand = TypeVar("TCommand", bound=BaseCommand)
TQuery = TypeVar("TQuery", bound=BaseQuery)
TResult = TypeVar("TResult")


class BaseHandler(ABC):
    """Root base handler with shared logging and timing."""

    #: Message returned when an unexpected exception escapes the handler.
    internal_error_message = "Internal error"

    def __init__(self, uow_factory: UnitOfWorkFactory):
        self.uow_factory = uow_factory
        self.logger = get_logger(self.__class__.__module__)

    async def _run(self, message, operation) -> Result:
        operation_id = f"{self.__class__.__name__}.handle"
        start_time = time.perf_counter()
        self.logger.debug(f"Starting operation: {operation_id}")

        try:
            validation_error = self.validate(message)
            if validation_error:
                self.logger.info("Validation failed", operation=operation_id, error=validation_error)
                return Result.failure(validation_error, ErrorKind.VALIDATION)
            result = await operation(message)
        except Exception as e:
            duration = time.perf_counter() - start_time
            self.logger.exception(
                f"Failed operation: {operation_id} in {duration:.3f}s", error=str(e)
            )
            return Result.failure(self.internal_error_message, ErrorKind.INTERNAL)

        duration = time.perf_counter() - start_time
        self.logger.debug(
            f"Completed operation: {operation_id} in {duration:.3f}s",
            success=result.is_success,
        )
        return result

    def validate(self, message) -> Optional[str]:
        """
        Validate the message before any I/O.

        Override in specific handlers. Returns an error message, or None
        when the message is valid.
        """
        return None


class BaseCommandHandler(BaseHandler, Generic[TCommand, TResult]):
    """Base for all command handlers."""

    async def handle(self, command: TCommand) -> Result[TResult]:
        """Validate then execute the command."""
        return await self._run(command, self.execute_command)

    @abstractmethod
    async def execute_command(self, command: TCommand) -> Result[TResult]:
        """Execute the specific command logic."""


class BaseQueryHandler(BaseHandler, Generic[TQuery, TResult]):
    """Base for all query handlers."""

    async def handle(self, query: TQuery) -> Result[TResult]:
        """Validate then execute the query."""
        return await self._run(query, self.execute_query)

    @abstractmethod
    async def execute_query(self, query: TQuery) -> Result[TResult]:
        """Execute the specific query logic."""
