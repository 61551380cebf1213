"""Base domain exceptions shared by all bounded contexts."""
from typing import Any, Dict, List, Optional


class DomainException(Exception):
    """Base exception for all domain-specific errors."""

    def __init__(self, message: str, error_code: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self.__class__.__name__
        self.details = details or {}


class ValidationError(DomainException):
    """Raised when domain validation fails."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, "VALIDATION_ERROR", {"details": details} if details else None)


class EntityNotFoundError(DomainException):
    """Raised when a requested entity cannot be found."""

    def __init__(self, entity_type: str, entity_id: str):
        super().__init__(
            f"{entity_type} {entity_id} not found",
            "ENTITY_NOT_FOUND",
            {"entity_type": entity_type, "entity_id": entity_id},
        )
        self.entity_type = entity_type
        self.entity_id = entity_id


class InvalidStateTransitionError(DomainException):
    """Raised when attempting an invalid state transition."""

    def __init__(self, current_state: str, attempted_state: str):
        super().__init__(
            f"Cannot transition from {current_state} to {attempted_state}",
            "INVALID_STATE_TRANSITION",
            {"current_state": current_state, "attempted_state": attempted_state},
        )
        self.current_state = current_state
        self.attempted_state = attempted_state


class InvalidResultStateError(DomainException):
    """Raised when a Result is built or read in a contradictory state."""

    def __init__(self, message: str):
        super().__init__(message, "INVALID_RESULT_STATE")


class ConfigurationError(DomainException):
    """Raised when there's an issue with configuration."""

    def __init__(self, message: str, missing_fields: Optional[List[str]] = None):
        super().__init__(message, "CONFIGURATION_ERROR", {"missing_fields": missing_fields or []})
        self.missing_fields = missing_fields or []
