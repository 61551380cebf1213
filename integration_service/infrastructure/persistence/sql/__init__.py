"""SQLAlchemy-backed local store."""

from .engine import create_engine, create_schema, create_session_factory
from .models import Base, RequestModel
from .request_repository import RequestSerializer, SQLRequestRepository
from .unit_of_work import SQLUnitOfWork, SQLUnitOfWorkFactory

__all__ = [
    "Base",
    "RequestModel",
    "RequestSerializer",
    "SQLRequestRepository",
    "SQLUnitOfWork",
    "SQLUnitOfWorkFactory",
    "create_engine",
    "create_schema",
    "create_session_factory",
]
