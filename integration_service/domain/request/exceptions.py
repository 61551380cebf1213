"""Request domain exceptions."""

from integration_service.domain.base.exceptions import (
    EntityNotFoundError,
    InvalidStateTransitionError,
    ValidationError,
)


class RequestNotFoundError(EntityNotFoundError):
    """Raised when a request is not found."""

    def __init__(self, request_id: str):
        """Initialize the instance."""
        super().__init__("Request", request_id)


class RequestValidationError(ValidationError):
    """Raised when request validation fails."""


class InvalidRequestStateError(InvalidStateTransitionError):
    """Raised when attempting an invalid request state transition."""

    def __init__(self, request_id: str, current_state: str, attempted_state: str):
        super().__init__(current_state, attempted_state)
        self.request_id = request_id
        self.message = f"Cannot transition request {request_id} from {current_state} to {attempted_state}"
        self.error_code = "INVALID_REQUEST_STATE_TRANSITION"
        self.details["request_id"] = request_id
        self.args = (self.message,)
