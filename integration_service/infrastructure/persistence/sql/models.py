"""SQLAlchemy ORM models for the local request store."""
from datetime import datetime
from typing import Optional

from sqlalchemy import DateTime, Enum, Integer, String, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column

from integration_service.domain.request.value_objects import RequestStatus


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""


class RequestModel(Base):
    """Row in the ``requests`` table.

    ``request_id`` is uniquely indexed; ``external_request_id``, ``status``
    and ``submitted_at`` are indexed for inquiry and sweep lookups.
    """

    __tablename__ = "requests"

    id: Mapped[str] = mapped_column(String(36), primary_key=True)
    request_id: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)
    external_request_id: Mapped[Optional[str]] = mapped_column(String(100), index=True)
    request_type: Mapped[str] = mapped_column(String(50), nullable=False)
    request_data: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[RequestStatus] = mapped_column(
        Enum(
            RequestStatus,
            native_enum=False,
            length=20,
            values_callable=lambda statuses: [s.value for s in statuses],
        ),
        nullable=False,
        index=True,
    )
    submitted_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, index=True)
    completed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    response_data: Mapped[Optional[str]] = mapped_column(Text)
    error_message: Mapped[Optional[str]] = mapped_column(Text)
    retry_count: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    last_retry_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True))
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    def __repr__(self) -> str:
        return f"<RequestModel(request_id={self.request_id}, status={self.status})>"
