"""Query handlers."""

from .request_handlers import GetRequestHandler, InquireRequestHandler, ListRequestsHandler

__all__ = ["InquireRequestHandler", "GetRequestHandler", "ListRequestsHandler"]
