"""SQLAlchemy unit of work."""
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from integration_service.domain.base.domain_interfaces import UnitOfWork, UnitOfWorkFactory
from integration_service.infrastructure.error.decorators import handle_infrastructure_exceptions
from integration_service.infrastructure.logging.logger import get_logger
from integration_service.infrastructure.persistence.sql.request_repository import SQLRequestRepository

logger = get_logger(__name__)


class SQLUnitOfWork(UnitOfWork):
    """Unit of work owning one async session for its lifetime."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory
        self._session: Optional[AsyncSession] = None

    async def __aenter__(self) -> "SQLUnitOfWork":
        self._session = self._session_factory()
        self.requests = SQLRequestRepository(self._session)
        return self

    @property
    def session(self) -> AsyncSession:
        if self._session is None:
            raise RuntimeError("Unit of work used outside of its context")
        return self._session

    @handle_infrastructure_exceptions(context="unit_of_work_save_changes")
    async def save_changes(self) -> int:
        session = self.session
        affected = len(session.new) + len(session.dirty) + len(session.deleted)
        await session.commit()
        logger.debug("Saved changes", affected=affected)
        return affected

    async def begin_transaction(self) -> None:
        session = self.session
        if not session.in_transaction():
            await session.begin()

    @handle_infrastructure_exceptions(context="unit_of_work_commit")
    async def commit_transaction(self) -> None:
        await self.session.commit()

    async def rollback_transaction(self) -> None:
        if self._session is not None:
            await self._session.rollback()

    async def close(self) -> None:
        if self._session is not None:
            await self._session.close()
            self._session = None


class SQLUnitOfWorkFactory(UnitOfWorkFactory):
    """Creates a unit of work, and therefore a session, per operation."""

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    def create_unit_of_work(self) -> SQLUnitOfWork:
        return SQLUnitOfWork(self._session_factory)
