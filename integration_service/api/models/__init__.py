"""API models."""

from .requests import (
    InquiryResponse,
    ProblemResponse,
    SubmitRequestBody,
    SubmitRequestResponse,
    TrackedRequestResponse,
)

__all__ = [
    "SubmitRequestBody",
    "SubmitRequestResponse",
    "InquiryResponse",
    "TrackedRequestResponse",
    "ProblemResponse",
]
