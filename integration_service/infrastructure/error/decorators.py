"""Decorators that translate infrastructure failures into persistence exceptions."""
import functools
from typing import Any, Awaitable, Callable, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from integration_service.infrastructure.logging.logger import get_logger
from integration_service.infrastructure.persistence.exceptions import StorageError

logger = get_logger(__name__)

F = TypeVar("F", bound=Callable[..., Awaitable[Any]])


def handle_infrastructure_exceptions(context: str) -> Callable[[F], F]:
    """
    Wrap an async storage operation so driver errors surface as ``StorageError``.

    Args:
        context: Operation name included in the log event and error message
    """

    def decorator(func: F) -> F:
        @functools.wraps(func)
        async def wrapper(*args, **kwargs):
            try:
                return await func(*args, **kwargs)
            except SQLAlchemyError as e:
                logger.error("Storage operation failed", operation=context, error=str(e))
                raise StorageError(f"{context} failed: {e}") from e

        return wrapper  # type: ignore[return-value]

    return decorator
