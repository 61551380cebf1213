"""Logging middleware for FastAPI."""
import time
import uuid

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from integration_service.infrastructure.logging.logger import get_logger

REQUEST_ID_HEADER = "X-Request-ID"


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each API call and tags the response with a correlation id."""

    def __init__(self, app, log_requests: bool = True, log_responses: bool = True):
        super().__init__(app)
        self.log_requests = log_requests
        self.log_responses = log_responses
        self.logger = get_logger(__name__)

    async def dispatch(self, request: Request, call_next):
        call_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.call_id = call_id

        start_time = time.perf_counter()
        if self.log_requests:
            self._log_request(request, call_id)

        try:
            response = await call_next(request)
        except Exception as e:
            duration = time.perf_counter() - start_time
            self.logger.error(
                f"Error {call_id}: {type(e).__name__}: {e} "
                f"for {request.method} {request.url.path} (duration: {duration:.3f}s)"
            )
            raise

        duration = time.perf_counter() - start_time
        if self.log_responses:
            self._log_response(request, response, call_id, duration)
        response.headers[REQUEST_ID_HEADER] = call_id
        return response

    def _log_request(self, request: Request, call_id: str):
        client_ip = request.client.host if request.client else "unknown"
        self.logger.info(f"Request {call_id}: {request.method} {request.url.path} from {client_ip}")
        if request.query_params:
            self.logger.debug(f"Request {call_id} query params: {dict(request.query_params)}")

    def _log_response(self, request: Request, response: Response, call_id: str, duration: float):
        self.logger.info(
            f"Response {call_id}: {response.status_code} "
            f"for {request.method} {request.url.path} (duration: {duration:.3f}s)"
        )
