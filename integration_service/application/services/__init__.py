"""Application services shared by several handlers."""

from .request_reconciliation import ReconcileOutcome, apply_inquiry

__all__ = ["ReconcileOutcome", "apply_inquiry"]
