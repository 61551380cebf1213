"""Integration Service - Root Package.

This package provides a request-submission and status-tracking proxy in front
of an external integration partner. Requests are tracked locally, submitted to
the external system, and reconciled on inquiry.

Key Components:
    - api: REST boundary for external callers
    - application: Command and query handlers (use cases)
    - domain: Request entity, status model and result type
    - infrastructure: Persistence, HTTP integration client, logging
    - config: Configuration schemas and loading
    - cli: Command-line interface

Architecture:
    The system follows Clean Architecture principles with clear separation
    between domain logic, application services, and infrastructure concerns.
"""

from ._version import __version__

__all__ = ["__version__"]
