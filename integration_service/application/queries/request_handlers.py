"""Query handlers for request inquiry and local lookups."""
from typing import List, Optional

from integration_service.application.base.handlers import BaseQueryHandler
from integration_service.application.decorators import query_handler
from integration_service.application.dto.queries import (
    GetRequestQuery,
    InquireRequestQuery,
    ListRequestsQuery,
)
from integration_service.application.dto.responses import InquireRequestResponse, RequestDTO
from integration_service.application.interfaces.integration_client import IntegrationClientPort
from integration_service.application.services.request_reconciliation import (
    ReconcileOutcome,
    apply_inquiry,
)
from integration_service.domain.base.domain_interfaces import UnitOfWorkFactory
from integration_service.domain.base.result import ErrorKind, Result
from integration_service.domain.request.exceptions import (
    InvalidRequestStateError,
    RequestNotFoundError,
    RequestValidationError,
)
from integration_service.domain.request.value_objects import RequestStatus

MAX_ID_LENGTH = 100


@query_handler(InquireRequestQuery)
class InquireRequestHandler(BaseQueryHandler[InquireRequestQuery, InquireRequestResponse]):
    """
    Ask the external system for a request's state.

    The local record, when one exists, is brought up to date with terminal
    statuses as a side effect. The response always mirrors what the
    external system reported.
    """

    internal_error_message = "Internal error while inquiring request"

    def __init__(self, uow_factory: UnitOfWorkFactory, integration_client: IntegrationClientPort):
        super().__init__(uow_factory)
        self._client = integration_client

    def validate(self, query: InquireRequestQuery) -> Optional[str]:
        if query.request_id and len(query.request_id) > MAX_ID_LENGTH:
            return f"request_id must not exceed {MAX_ID_LENGTH} characters"
        if query.external_request_id and len(query.external_request_id) > MAX_ID_LENGTH:
            return f"external_request_id must not exceed {MAX_ID_LENGTH} characters"
        if not query.request_id and not query.external_request_id:
            return "Either request_id or external_request_id must be provided"
        return None

    async def execute_query(self, query: InquireRequestQuery) -> Result[InquireRequestResponse]:
        lookup_id = query.external_request_id or query.request_id
        self.logger.info(
            "Processing inquiry",
            request_id=query.request_id,
            external_request_id=query.external_request_id,
        )

        inquiry = await self._client.inquire_request(lookup_id)
        if inquiry.is_failure:
            self.logger.error(
                "Failed to inquire request from external system",
                lookup_id=lookup_id,
                error=inquiry.error,
            )
            return inquiry.propagate()

        external = inquiry.value
        async with self.uow_factory.create_unit_of_work() as uow:
            if query.request_id:
                local = await uow.requests.get_by_request_id(query.request_id)
            else:
                local = await uow.requests.get_by_external_request_id(query.external_request_id)

            if local is not None:
                try:
                    outcome = apply_inquiry(local, external)
                except (InvalidRequestStateError, RequestValidationError) as e:
                    self.logger.warning(
                        "Ignoring reported status",
                        request_id=local.request_id,
                        local_status=local.status.value,
                        reported_status=external.status,
                        error=str(e),
                    )
                    outcome = ReconcileOutcome.UNCHANGED

                if outcome != ReconcileOutcome.UNCHANGED:
                    await uow.requests.update(local)
                    await uow.save_changes()
                    self.logger.info(
                        "Reconciled local request",
                        request_id=local.request_id,
                        status=local.status.value,
                    )

        self.logger.info("Retrieved inquiry data", lookup_id=lookup_id, status=external.status)
        return Result.success(InquireRequestResponse(**external.model_dump()))


@query_handler(GetRequestQuery)
class GetRequestHandler(BaseQueryHandler[GetRequestQuery, RequestDTO]):
    """Load one locally tracked request."""

    internal_error_message = "Internal error while loading request"

    def validate(self, query: GetRequestQuery) -> Optional[str]:
        if not query.request_id:
            return "request_id is required"
        return None

    async def execute_query(self, query: GetRequestQuery) -> Result[RequestDTO]:
        async with self.uow_factory.create_unit_of_work() as uow:
            request = await uow.requests.get_by_request_id(query.request_id)
        if request is None:
            return Result.failure(str(RequestNotFoundError(query.request_id)), ErrorKind.NOT_FOUND)
        return Result.success(RequestDTO.from_domain(request))


@query_handler(ListRequestsQuery)
class ListRequestsHandler(BaseQueryHandler[ListRequestsQuery, List[RequestDTO]]):
    """List locally tracked requests, newest first."""

    internal_error_message = "Internal error while listing requests"

    def validate(self, query: ListRequestsQuery) -> Optional[str]:
        if query.status and RequestStatus.from_external(query.status) is None:
            valid = ", ".join(status.value for status in RequestStatus)
            return f"Unknown status '{query.status}'. Valid statuses: {valid}"
        if query.limit is not None and query.limit < 1:
            return "limit must be at least 1"
        return None

    async def execute_query(self, query: ListRequestsQuery) -> Result[List[RequestDTO]]:
        async with self.uow_factory.create_unit_of_work() as uow:
            if query.status:
                status = RequestStatus.from_external(query.status)
                requests = await uow.requests.list_by_status(status, query.limit)
            else:
                requests = await uow.requests.list_all(query.limit)
        return Result.success([RequestDTO.from_domain(request) for request in requests])
