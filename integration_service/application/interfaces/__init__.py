"""Application ports."""

from .integration_client import AddRequestResult, InquiryResult, IntegrationClientPort

__all__ = ["AddRequestResult", "InquiryResult", "IntegrationClientPort"]
