"""
Domain Layer

- base/: Shared kernel with the entity base, result type and exceptions
- request/: Request bounded context (aggregate, status model, repository contract)
"""

from .base import DomainException, Entity, ErrorKind, Result
from .request import Request, RequestRepository, RequestStatus

__all__ = [
    "DomainException",
    "Entity",
    "ErrorKind",
    "Result",
    "Request",
    "RequestRepository",
    "RequestStatus",
]
