"""External integration adapters."""

from .http_client import IntegrationClient, build_async_client

__all__ = ["IntegrationClient", "build_async_client"]
