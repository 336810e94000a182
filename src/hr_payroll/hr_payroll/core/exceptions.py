from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base exception for business rule violations.

    Every subclass carries a machine-readable ``kind`` and the HTTP status the
    JSON layer should answer with.
    """

    kind = "domain_error"
    status_code = 400

    def __init__(self, message: str = "", *, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = dict(details or {})


class ValidationError(DomainError):
    """Raised when input data is invalid or violates domain rules."""

    kind = "validation_error"
    status_code = 400


class InvalidAmountError(ValidationError):
    """Raised when a monetary value cannot be parsed into a finite decimal."""

    kind = "invalid_amount"


class AuthenticationError(DomainError):
    """Raised when login credentials are invalid."""

    kind = "authentication_error"
    status_code = 401


class AuthorizationError(DomainError):
    """Raised when a user lacks permission for an action."""

    kind = "authorization_error"
    status_code = 403


class NotFoundError(DomainError):
    """Raised when a referenced employee/department/config/salary is missing."""

    kind = "not_found"
    status_code = 404


class NotConfiguredError(DomainError):
    """Raised when no active NIK configuration resolves, default included."""

    kind = "not_configured"
    status_code = 404


class ConflictError(DomainError):
    """Raised on uniqueness violations (NIK, monthly payroll, salary, ...)."""

    kind = "conflict"
    status_code = 409


class InternalError(DomainError):
    """Storage/transport failure."""

    kind = "internal"
    status_code = 500
