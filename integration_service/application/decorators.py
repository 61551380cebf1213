"""
Application layer decorators for CQRS handler registration.

Handlers mark themselves with the message type they process; the
infrastructure buses look them up here.
"""
from typing import Dict, Type, TypeVar

from integration_service.application.dto.base import BaseCommand, BaseQuery

TQuery = TypeVar("TQuery", bound=BaseQuery)
TCommand = TypeVar("TCommand", bound=BaseCommand)
THandler = TypeVar("THandler", bound=type)

_query_handler_registry: Dict[Type[BaseQuery], type] = {}
_command_handler_registry: Dict[Type[BaseCommand], type] = {}


def query_handler(query_type: Type[TQuery]):
    """
    Mark a class as the handler for ``query_type``.

    Usage:
        @query_handler(GetRequestQuery)
        class GetRequestHandler(BaseQueryHandler[GetRequestQuery, RequestDTO]):
            ...
    """
    def decorator(handler_class: THandler) -> THandler:
        _query_handler_registry[query_type] = handler_class
        handler_class._query_type = query_type
        return handler_class

    return decorator


def command_handler(command_type: Type[TCommand]):
    """Mark a class as the handler for ``command_type``."""
    def decorator(handler_class: THandler) -> THandler:
        _command_handler_registry[command_type] = handler_class
        handler_class._command_type = command_type
        return handler_class

    return decorator


def get_registered_query_handlers() -> Dict[Type[BaseQuery], type]:
    """Get all registered query handlers."""
    return _query_handler_registry.copy()


def get_registered_command_handlers() -> Dict[Type[BaseCommand], type]:
    """Get all registered command handlers."""
    return _command_handler_registry.copy()


def get_query_handler_for_type(query_type: Type[BaseQuery]) -> type:
    """Get handler for specific query type."""
    if query_type not in _query_handler_registry:
        raise KeyError(f"No handler registered for query type: {query_type.__name__}")
    return _query_handler_registry[query_type]


def get_command_handler_for_type(command_type: Type[BaseCommand]) -> type:
    """Get handler for specific command type."""
    if command_type not in _command_handler_registry:
        raise KeyError(f"No handler registered for command type: {command_type.__name__}")
    return _command_handler_registry[command_type]
