"""FastAPI server factory and application setup."""
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from integration_service import __version__
from integration_service.api.middleware import LoggingMiddleware
from integration_service.api.routers import requests
from integration_service.config.schemas import AppConfig
from integration_service.domain.base.result import ErrorKind
from integration_service.infrastructure.di.container import ServiceContainer
from integration_service.infrastructure.error.exception_handler import (
    ErrorResponse,
    get_exception_handler,
)
from integration_service.infrastructure.logging.logger import get_logger


def create_fastapi_app(config: AppConfig, container: Optional[ServiceContainer] = None) -> FastAPI:
    """
    Create and configure FastAPI application.

    Args:
        config: Application configuration
        container: Pre-built container; one is built from ``config`` when omitted

    Returns:
        Configured FastAPI application
    """
    logger = get_logger(__name__)
    server_config = config.server
    container = container or ServiceContainer(config)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        await container.startup()
        try:
            yield
        finally:
            await container.shutdown()

    app = FastAPI(
        title="Integration Service API",
        description="Submit requests to an external system and track their status",
        version=__version__,
        docs_url=server_config.docs_url if server_config.docs_enabled else None,
        redoc_url=server_config.redoc_url if server_config.docs_enabled else None,
        openapi_url=server_config.openapi_url if server_config.docs_enabled else None,
        lifespan=lifespan,
    )
    app.state.container = container

    if server_config.cors.enabled:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=server_config.cors.origins,
            allow_credentials=server_config.cors.credentials,
            allow_methods=server_config.cors.methods,
            allow_headers=server_config.cors.headers,
        )
        logger.info("CORS middleware enabled")

    app.add_middleware(LoggingMiddleware)

    exception_handler = get_exception_handler()

    @app.exception_handler(RequestValidationError)
    async def validation_exception_handler(request: Request, exc: RequestValidationError):
        """Malformed bodies and parameters are validation failures."""
        errors = "; ".join(
            f"{'.'.join(str(p) for p in err['loc'])}: {err['msg']}" for err in exc.errors()
        )
        problem = ErrorResponse(
            title="Bad Request",
            detail=errors,
            status=400,
            error_kind=ErrorKind.VALIDATION.value,
        )
        return JSONResponse(status_code=400, content=problem.to_dict())

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler for all unhandled exceptions."""
        problem = exception_handler.handle_error_for_http(exc)
        return JSONResponse(status_code=problem.status, content=problem.to_dict())

    @app.get("/health", tags=["System"])
    async def health_check():
        """Health check endpoint."""
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    app.include_router(requests.router, prefix="/api/v1")

    logger.info(f"FastAPI application created with {len(app.routes)} routes")
    return app
