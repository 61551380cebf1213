"""SQLAlchemy implementation of the request repository."""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Sequence

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from integration_service.domain.request.aggregate import Request
from integration_service.domain.request.repository import RequestRepository
from integration_service.domain.request.value_objects import RequestStatus
from integration_service.infrastructure.error.decorators import handle_infrastructure_exceptions
from integration_service.infrastructure.logging.logger import get_logger
from integration_service.infrastructure.persistence.sql.models import RequestModel

_MAPPED_FIELDS = (
    "id",
    "request_id",
    "external_request_id",
    "request_type",
    "request_data",
    "status",
    "submitted_at",
    "completed_at",
    "response_data",
    "error_message",
    "retry_count",
    "last_retry_at",
    "created_at",
    "updated_at",
)


def _as_utc(value: Optional[datetime]) -> Optional[datetime]:
    # SQLite hands back naive datetimes
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


class RequestSerializer:
    """Maps Request aggregates to and from ORM rows."""

    def to_model(self, request: Request, model: Optional[RequestModel] = None) -> RequestModel:
        model = model or RequestModel()
        for field in _MAPPED_FIELDS:
            setattr(model, field, getattr(request, field))
        return model

    def to_dict(self, model: RequestModel) -> Dict[str, Any]:
        data = {field: getattr(model, field) for field in _MAPPED_FIELDS}
        for field in ("submitted_at", "completed_at", "last_retry_at", "created_at", "updated_at"):
            data[field] = _as_utc(data[field])
        return data

    def from_model(self, model: RequestModel) -> Request:
        return Request.reconstruct(self.to_dict(model))


class SQLRequestRepository(RequestRepository):
    """Request repository backed by an async SQLAlchemy session.

    Mutations are staged on the session; the owning unit of work commits.
    """

    def __init__(self, session: AsyncSession):
        self._session = session
        self._serializer = RequestSerializer()
        self.logger = get_logger(__name__)

    async def _get_model(self, request: Request) -> Optional[RequestModel]:
        return await self._session.get(RequestModel, request.id)

    async def _first(self, statement) -> Optional[Request]:
        model = (await self._session.execute(statement)).scalars().first()
        return self._serializer.from_model(model) if model else None

    async def _all(self, statement) -> List[Request]:
        models = (await self._session.execute(statement)).scalars().all()
        return [self._serializer.from_model(model) for model in models]

    @handle_infrastructure_exceptions(context="request_repository_get_by_id")
    async def get_by_id(self, entity_id: str) -> Optional[Request]:
        model = await self._session.get(RequestModel, entity_id)
        return self._serializer.from_model(model) if model else None

    @handle_infrastructure_exceptions(context="request_repository_get_by_request_id")
    async def get_by_request_id(self, request_id: str) -> Optional[Request]:
        return await self._first(select(RequestModel).where(RequestModel.request_id == request_id))

    @handle_infrastructure_exceptions(context="request_repository_get_by_external_request_id")
    async def get_by_external_request_id(self, external_request_id: str) -> Optional[Request]:
        return await self._first(
            select(RequestModel).where(RequestModel.external_request_id == external_request_id)
        )

    @handle_infrastructure_exceptions(context="request_repository_list_all")
    async def list_all(self, limit: Optional[int] = None) -> List[Request]:
        statement = select(RequestModel).order_by(RequestModel.submitted_at.desc()).limit(limit)
        return await self._all(statement)

    @handle_infrastructure_exceptions(context="request_repository_list_by_status")
    async def list_by_status(self, status: RequestStatus,
                             limit: Optional[int] = None) -> List[Request]:
        statement = (
            select(RequestModel)
            .where(RequestModel.status == status)
            .order_by(RequestModel.submitted_at.desc())
            .limit(limit)
        )
        return await self._all(statement)

    @handle_infrastructure_exceptions(context="request_repository_list_stale")
    async def list_stale(self, statuses: Sequence[RequestStatus], submitted_before: datetime,
                         limit: Optional[int] = None) -> List[Request]:
        statement = (
            select(RequestModel)
            .where(RequestModel.status.in_(list(statuses)))
            .where(RequestModel.submitted_at < submitted_before)
            .order_by(RequestModel.submitted_at.asc())
            .limit(limit)
        )
        return await self._all(statement)

    @handle_infrastructure_exceptions(context="request_repository_add")
    async def add(self, request: Request) -> None:
        self._session.add(self._serializer.to_model(request))
        self.logger.debug("Staged new request", request_id=request.request_id)

    @handle_infrastructure_exceptions(context="request_repository_update")
    async def update(self, request: Request) -> None:
        model = await self._get_model(request)
        if model is None:
            self._session.add(self._serializer.to_model(request))
        else:
            self._serializer.to_model(request, model)
        self.logger.debug("Staged request update", request_id=request.request_id,
                          status=request.status.value)

    @handle_infrastructure_exceptions(context="request_repository_delete")
    async def delete(self, request: Request) -> None:
        model = await self._get_model(request)
        if model is not None:
            await self._session.delete(model)
