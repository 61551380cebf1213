"""Base application layer - shared application concepts."""

from .handlers import BaseCommandHandler, BaseHandler, BaseQueryHandler

__all__ = ["BaseHandler", "BaseCommandHandler", "BaseQueryHandler"]
