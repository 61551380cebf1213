"""Error handling infrastructure package."""

from .decorators import handle_infrastructure_exceptions
from .exception_handler import ErrorResponse, ExceptionHandler, get_exception_handler

__all__ = [
    "ErrorResponse",
    "ExceptionHandler",
    "get_exception_handler",
    "handle_infrastructure_exceptions",
]
