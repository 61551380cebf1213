"""Request value objects: status set, transition table and identifiers."""
import uuid
from datetime import datetime
from enum import Enum
from typing import Dict, FrozenSet, Optional

from integration_service.domain.base.entity import utcnow


class RequestStatus(str, Enum):
    """Lifecycle status of a tracked request.

    Values use the same vocabulary as the external system so that reported
    statuses can be compared directly.
    """

    PENDING = "Pending"
    SUBMITTED = "Submitted"
    PROCESSING = "Processing"
    COMPLETED = "Completed"
    FAILED = "Failed"
    RETRYING = "Retrying"
    CANCELLED = "Cancelled"

    @classmethod
    def from_external(cls, value: Optional[str]) -> Optional["RequestStatus"]:
        """Map a status string reported by the external system, case-insensitively.

        Returns None for values outside the known set.
        """
        if not value:
            return None
        normalized = value.strip().lower()
        for status in cls:
            if status.value.lower() == normalized:
                return status
        return None

    @property
    def is_terminal(self) -> bool:
        return self in (RequestStatus.COMPLETED, RequestStatus.FAILED, RequestStatus.CANCELLED)

    @property
    def is_finished(self) -> bool:
        """Statuses that carry a completion timestamp."""
        return self in (RequestStatus.COMPLETED, RequestStatus.FAILED)


VALID_TRANSITIONS: Dict[RequestStatus, FrozenSet[RequestStatus]] = {
    RequestStatus.PENDING: frozenset({
        RequestStatus.SUBMITTED,
        RequestStatus.COMPLETED,
        RequestStatus.FAILED,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.SUBMITTED: frozenset({
        RequestStatus.PROCESSING,
        RequestStatus.COMPLETED,
        RequestStatus.FAILED,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.PROCESSING: frozenset({
        RequestStatus.COMPLETED,
        RequestStatus.FAILED,
        RequestStatus.CANCELLED,
    }),
    RequestStatus.RETRYING: frozenset({
        RequestStatus.SUBMITTED,
        RequestStatus.COMPLETED,
        RequestStatus.FAILED,
    }),
    # A submission that failed locally may still have been accepted and completed remotely
    RequestStatus.FAILED: frozenset({RequestStatus.RETRYING, RequestStatus.COMPLETED}),
    RequestStatus.COMPLETED: frozenset(),  # Terminal state
    RequestStatus.CANCELLED: frozenset(),  # Terminal state
}

# Statuses that imply the external system accepted the request
EXTERNALLY_ACCEPTED_STATUSES = frozenset({
    RequestStatus.SUBMITTED,
    RequestStatus.PROCESSING,
    RequestStatus.COMPLETED,
})

REQUEST_ID_PREFIX = "REQ"


def can_transition(current: RequestStatus, target: RequestStatus) -> bool:
    """Check whether ``current`` may move to ``target``."""
    return target in VALID_TRANSITIONS.get(current, frozenset())


def generate_request_id(now: Optional[datetime] = None) -> str:
    """Generate a collision-resistant internal request id.

    Format: ``REQ-<yyyymmdd>-<uuid4 hex>``.
    """
    now = now or utcnow()
    return f"{REQUEST_ID_PREFIX}-{now:%Y%m%d}-{uuid.uuid4().hex}"
