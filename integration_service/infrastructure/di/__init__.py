"""Dependency injection and CQRS buses."""

from .buses import CommandBus, QueryBus
from .container import DIContainer, DependencyResolutionError, ServiceContainer

__all__ = ["CommandBus", "QueryBus", "DIContainer", "DependencyResolutionError", "ServiceContainer"]
