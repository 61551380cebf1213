"""Command handlers for request submission and reconciliation."""
from datetime import timedelta
from typing import Optional

from integration_service.application.base.handlers import BaseCommandHandler
from integration_service.application.decorators import command_handler
from integration_service.application.dto.commands import (
    AddRequestCommand,
    ReconcileStaleRequestsCommand,
)
from integration_service.application.dto.responses import (
    AddRequestResponse,
    ReconciliationSummary,
)
from integration_service.application.interfaces.integration_client import IntegrationClientPort
from integration_service.application.services.request_reconciliation import (
    ReconcileOutcome,
    apply_inquiry,
)
from integration_service.domain.base.domain_interfaces import UnitOfWorkFactory
from integration_service.domain.base.entity import utcnow
from integration_service.domain.base.result import ErrorKind, Result
from integration_service.domain.request.aggregate import Request
from integration_service.domain.request.exceptions import (
    InvalidRequestStateError,
    RequestValidationError,
)
from integration_service.domain.request.value_objects import RequestStatus

MAX_REQUEST_TYPE_LENGTH = 50
MAX_REQUEST_DATA_LENGTH = 10000

NEVER_ACCEPTED_MESSAGE = "Request was never accepted by the external system"


@command_handler(AddRequestCommand)
class AddRequestHandler(BaseCommandHandler[AddRequestCommand, AddRequestResponse]):
    """
    Submit a request to the external system and track it locally.

    The Pending record is committed before the outbound call so that a
    crash mid-call still leaves a trace; the outcome of the call is then
    committed as Submitted or Failed.
    """

    internal_error_message = "Internal error while submitting request"

    def __init__(self, uow_factory: UnitOfWorkFactory, integration_client: IntegrationClientPort):
        super().__init__(uow_factory)
        self._client = integration_client

    def validate(self, command: AddRequestCommand) -> Optional[str]:
        if not command.request_type or not command.request_type.strip():
            return "Request type is required"
        if len(command.request_type) > MAX_REQUEST_TYPE_LENGTH:
            return f"Request type must not exceed {MAX_REQUEST_TYPE_LENGTH} characters"
        if not command.request_data or not command.request_data.strip():
            return "Request data is required"
        if len(command.request_data) > MAX_REQUEST_DATA_LENGTH:
            return f"Request data must not exceed {MAX_REQUEST_DATA_LENGTH} characters"
        return None

    async def execute_command(self, command: AddRequestCommand) -> Result[AddRequestResponse]:
        self.logger.info("Processing add request", request_type=command.request_type)

        async with self.uow_factory.create_unit_of_work() as uow:
            request = Request.create(command.request_type, command.request_data)
            await uow.requests.add(request)
            await uow.save_changes()

            submission = await self._client.add_request(
                request.request_id,
                request.request_type,
                request.request_data,
                dict(command.metadata),
            )

            if submission.is_failure:
                self.logger.error(
                    "Failed to submit request to external system",
                    request_id=request.request_id,
                    error=submission.error,
                    error_kind=submission.error_kind.value,
                )
                request.mark_failed(submission.error)
                await uow.requests.update(request)
                await uow.save_changes()
                return Result.failure(submission.error, submission.error_kind)

            ack = submission.value
            request.mark_submitted(ack.external_request_id)
            await uow.requests.update(request)
            await uow.save_changes()

        self.logger.info(
            "Submitted request",
            request_id=request.request_id,
            external_request_id=request.external_request_id,
        )
        return Result.success(
            AddRequestResponse(
                request_id=request.request_id,
                external_request_id=request.external_request_id,
                status=request.status.value,
                submitted_at=request.submitted_at,
            )
        )


@command_handler(ReconcileStaleRequestsCommand)
class ReconcileStaleRequestsHandler(
    BaseCommandHandler[ReconcileStaleRequestsCommand, ReconciliationSummary]
):
    """
    Refresh Pending and Submitted records that have sat unchanged too long.

    Each record is inquired individually and committed on its own, so one
    bad record never blocks the rest of the batch.
    """

    internal_error_message = "Internal error while reconciling requests"

    _SWEPT_STATUSES = (RequestStatus.PENDING, RequestStatus.SUBMITTED)

    def __init__(self, uow_factory: UnitOfWorkFactory, integration_client: IntegrationClientPort):
        super().__init__(uow_factory)
        self._client = integration_client

    def validate(self, command: ReconcileStaleRequestsCommand) -> Optional[str]:
        if command.older_than_seconds < 0:
            return "older_than_seconds must not be negative"
        if command.limit < 1:
            return "limit must be at least 1"
        return None

    async def execute_command(
        self, command: ReconcileStaleRequestsCommand
    ) -> Result[ReconciliationSummary]:
        cutoff = utcnow() - timedelta(seconds=command.older_than_seconds)
        counts = {outcome: 0 for outcome in ReconcileOutcome}
        errors = 0

        async with self.uow_factory.create_unit_of_work() as uow:
            stale = await uow.requests.list_stale(self._SWEPT_STATUSES, cutoff, command.limit)
            self.logger.info("Reconciling stale requests", count=len(stale), cutoff=cutoff.isoformat())

            for request in stale:
                outcome = await self._reconcile_one(request)
                if outcome is None:
                    errors += 1
                    continue
                if outcome != ReconcileOutcome.UNCHANGED:
                    await uow.requests.update(request)
                    await uow.save_changes()
                counts[outcome] += 1

        summary = ReconciliationSummary(
            checked=len(stale),
            completed=counts[ReconcileOutcome.COMPLETED],
            failed=counts[ReconcileOutcome.FAILED],
            submitted=counts[ReconcileOutcome.SUBMITTED],
            unchanged=counts[ReconcileOutcome.UNCHANGED],
            errors=errors,
        )
        self.logger.info("Reconciliation finished", **summary.to_dict())
        return Result.success(summary)

    async def _reconcile_one(self, request: Request) -> Optional[ReconcileOutcome]:
        lookup_id = request.external_request_id or request.request_id
        inquiry = await self._client.inquire_request(lookup_id)

        if inquiry.is_failure:
            if inquiry.error_kind == ErrorKind.NOT_FOUND and request.status == RequestStatus.PENDING:
                request.mark_failed(NEVER_ACCEPTED_MESSAGE)
                return ReconcileOutcome.FAILED
            self.logger.warning(
                "Inquiry failed during reconciliation",
                request_id=request.request_id,
                lookup_id=lookup_id,
                error=inquiry.error,
            )
            return None

        try:
            return apply_inquiry(request, inquiry.value, promote_accepted=True)
        except (InvalidRequestStateError, RequestValidationError) as e:
            self.logger.warning(
                "Ignoring reported status",
                request_id=request.request_id,
                reported_status=inquiry.value.status,
                error=str(e),
            )
            return ReconcileOutcome.UNCHANGED
