"""Request bounded context - request domain logic."""

from .aggregate import Request
from .exceptions import (
    InvalidRequestStateError,
    RequestNotFoundError,
    RequestValidationError,
)
from .repository import RequestRepository
from .value_objects import RequestStatus, generate_request_id

__all__ = [
    "Request",
    "RequestStatus",
    "RequestRepository",
    "RequestNotFoundError",
    "RequestValidationError",
    "InvalidRequestStateError",
    "generate_request_id",
]
