"""Data transfer objects."""

from .base import BaseCommand, BaseDTO, BaseQuery
from .commands import AddRequestCommand, ReconcileStaleRequestsCommand
from .queries import GetRequestQuery, InquireRequestQuery, ListRequestsQuery
from .responses import (
    AddRequestResponse,
    InquireRequestResponse,
    ReconciliationSummary,
    RequestDTO,
)

__all__ = [
    "BaseDTO",
    "BaseCommand",
    "BaseQuery",
    "AddRequestCommand",
    "ReconcileStaleRequestsCommand",
    "InquireRequestQuery",
    "GetRequestQuery",
    "ListRequestsQuery",
    "AddRequestResponse",
    "InquireRequestResponse",
    "RequestDTO",
    "ReconciliationSummary",
]
