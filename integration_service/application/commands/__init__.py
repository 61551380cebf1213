"""Command handlers."""

from .request_handlers import AddRequestHandler, ReconcileStaleRequestsHandler

__all__ = ["AddRequestHandler", "ReconcileStaleRequestsHandler"]
