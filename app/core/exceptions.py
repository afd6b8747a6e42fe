"""
Application exception hierarchy.

Every domain error raised by a service derives from BaseApplicationError so the
HTTP layer can render it uniformly (see core.viewset_mixins.ApplicationErrorMixin).

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Malformed input caught before any write (400)
    ├── NotFoundError - Missing record, or one outside the caller's scope (404)
    └── ConflictError - Operation conflicts with current state (409)

Usage:
    from core.exceptions import NotFoundError, ValidationError

    raise ValidationError("Amount must be positive", details={"amount": "-5"})

    try:
        fund = FundService.get_fund(fund_id, owner=user)
    except NotFoundError as e:
        return Response(e.to_dict(), status=404)
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Root of all application errors.

    Attributes:
        message: Human-readable description
        error_code: Stable machine-readable code for clients
        details: Extra context (amounts, ids, states)
        http_status: Status code used when rendered by the API layer
    """

    default_error_code: str = "APPLICATION_ERROR"
    http_status: int = 400

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Render as an API error body.

        Returns:
            {"error": ..., "error_code": ..., "details": {...}}
            with "details" omitted when empty.
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when service-level input is malformed.

    Use for non-positive amounts, unknown enum values and missing fields that
    slipped past serializer validation (or calls that bypass the API).
    """

    default_error_code: str = "VALIDATION_ERROR"
    http_status: int = 400


class NotFoundError(BaseApplicationError):
    """
    Raised when a record does not exist for the caller.

    Records owned by another user raise this too, with the same message, so
    the response never reveals that the id exists.
    """

    default_error_code: str = "NOT_FOUND"
    http_status: int = 404


class ConflictError(BaseApplicationError):
    """
    Raised when an operation conflicts with the current state of a record.

    Use for:
    - Invalid state transitions
    - Operations on closed or in-use records
    - Balance checks that fail against the current state

    Note:
        Rendered as HTTP 409 Conflict.
    """

    default_error_code: str = "CONFLICT"
    http_status: int = 409
