"""Request submission and tracking API routes."""
from typing import List, Optional, Type

from fastapi import APIRouter, Depends, Query
from fastapi.responses import JSONResponse

from integration_service.api.dependencies import get_command_bus, get_error_handler, get_query_bus
from integration_service.api.models.base import APIBaseModel
from integration_service.api.models.requests import (
    InquiryResponse,
    ProblemResponse,
    SubmitRequestBody,
    SubmitRequestResponse,
    TrackedRequestResponse,
)
from integration_service.application.dto.commands import AddRequestCommand
from integration_service.application.dto.queries import (
    GetRequestQuery,
    InquireRequestQuery,
    ListRequestsQuery,
)
from integration_service.domain.base.result import Result
from integration_service.infrastructure.di.buses import CommandBus, QueryBus
from integration_service.infrastructure.error.exception_handler import ExceptionHandler

router = APIRouter(prefix="/requests", tags=["Requests"])

_PROBLEM_RESPONSES = {
    400: {"model": ProblemResponse},
    404: {"model": ProblemResponse},
    500: {"model": ProblemResponse},
}


def _problem(result: Result, error_handler: ExceptionHandler) -> JSONResponse:
    problem = error_handler.from_result(result)
    return JSONResponse(status_code=problem.status, content=problem.to_dict())


def _render(model: Type[APIBaseModel], payload) -> dict:
    return model.model_validate(payload.to_dict()).model_dump(mode="json", by_alias=True)


@router.post(
    "",
    summary="Submit Request",
    description="Submit a request to the external system and track it locally",
    response_model=SubmitRequestResponse,
    responses=_PROBLEM_RESPONSES,
)
async def submit_request(
    body: SubmitRequestBody,
    command_bus: CommandBus = Depends(get_command_bus),
    error_handler: ExceptionHandler = Depends(get_error_handler),
):
    """
    Submit a new request.

    - **requestType**: Request type
    - **requestData**: Opaque request payload
    - **metadata**: Optional string key/value pairs forwarded as-is
    """
    result = await command_bus.execute(
        AddRequestCommand(
            request_type=body.request_type,
            request_data=body.request_data,
            metadata=body.metadata,
        )
    )
    if result.is_failure:
        return _problem(result, error_handler)
    return JSONResponse(content=_render(SubmitRequestResponse, result.value))


@router.get(
    "/inquiry",
    summary="Inquire Request",
    description="Get the current state of a request from the external system",
    response_model=InquiryResponse,
    responses=_PROBLEM_RESPONSES,
)
async def inquire_request(
    request_id: Optional[str] = Query(None, alias="requestId", description="Internal request ID"),
    external_request_id: Optional[str] = Query(
        None, alias="externalRequestId", description="External request ID"
    ),
    query_bus: QueryBus = Depends(get_query_bus),
    error_handler: ExceptionHandler = Depends(get_error_handler),
):
    """
    Inquire a request by internal or external id.

    When both are given, the external id is used for the remote lookup.
    """
    result = await query_bus.execute(
        InquireRequestQuery(request_id=request_id, external_request_id=external_request_id)
    )
    if result.is_failure:
        return _problem(result, error_handler)
    return JSONResponse(content=_render(InquiryResponse, result.value))


@router.get(
    "",
    summary="List Requests",
    description="List locally tracked requests, newest first",
    response_model=List[TrackedRequestResponse],
    responses=_PROBLEM_RESPONSES,
)
async def list_requests(
    status: Optional[str] = Query(None, description="Filter by request status"),
    limit: Optional[int] = Query(None, description="Limit number of results"),
    query_bus: QueryBus = Depends(get_query_bus),
    error_handler: ExceptionHandler = Depends(get_error_handler),
):
    result = await query_bus.execute(ListRequestsQuery(status=status, limit=limit))
    if result.is_failure:
        return _problem(result, error_handler)
    return JSONResponse(content=[_render(TrackedRequestResponse, item) for item in result.value])


@router.get(
    "/{request_id}",
    summary="Get Request",
    description="Get a locally tracked request",
    response_model=TrackedRequestResponse,
    responses=_PROBLEM_RESPONSES,
)
async def get_request(
    request_id: str,
    query_bus: QueryBus = Depends(get_query_bus),
    error_handler: ExceptionHandler = Depends(get_error_handler),
):
    result = await query_bus.execute(GetRequestQuery(request_id=request_id))
    if result.is_failure:
        return _problem(result, error_handler)
    return JSONResponse(content=_render(TrackedRequestResponse, result.value))
