"""Base domain layer - shared kernel for the request bounded context."""

from .domain_interfaces import UnitOfWork, UnitOfWorkFactory
from .entity import Entity
from .exceptions import (
    ConfigurationError,
    DomainException,
    EntityNotFoundError,
    InvalidResultStateError,
    InvalidStateTransitionError,
    ValidationError,
)
from .result import ErrorKind, Result

__all__ = [
    "Entity",
    "UnitOfWork",
    "UnitOfWorkFactory",
    "DomainException",
    "ValidationError",
    "EntityNotFoundError",
    "InvalidStateTransitionError",
    "InvalidResultStateError",
    "ConfigurationError",
    "ErrorKind",
    "Result",
]
