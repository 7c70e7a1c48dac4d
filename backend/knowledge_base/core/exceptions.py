"""Application exception hierarchy following RFC 7807 Problem Details."""

from typing import Any
from uuid import UUID

from fastapi import HTTPException, status


class AppException(HTTPException):
    """Base application exception following RFC 7807.

    All custom exceptions should inherit from this class.
    Provides consistent error response format.
    """

    def __init__(
        self,
        status_code: int,
        error_code: str,
        message: str,
        detail: dict[str, Any] | None = None,
    ) -> None:
        self.error_code = error_code
        self.message = message
        self.error_detail = detail or {}

        super().__init__(
            status_code=status_code,
            detail={
                "type": f"https://api.faq.local/errors/{error_code}",
                "title": error_code.replace("_", " ").title(),
                "status": status_code,
                "detail": message,
                "instance": None,  # Will be set by exception handler
                **self.error_detail,
            },
        )


# ============================================================================
# Resource Exceptions (404, 409)
# ============================================================================


class NotFoundError(AppException):
    """Resource not found."""

    def __init__(
        self,
        resource: str,
        identifier: str | UUID | None = None,
    ) -> None:
        message = f"{resource} not found"
        if identifier:
            message = f"{resource} with id '{identifier}' not found"

        super().__init__(
            status_code=status.HTTP_404_NOT_FOUND,
            error_code="not_found",
            message=message,
            detail={"resource": resource},
        )


class ConflictError(AppException):
    """Concurrent write hit a unique constraint; safe to retry."""

    def __init__(self, reason: str = "Conflicting concurrent update") -> None:
        super().__init__(
            status_code=status.HTTP_409_CONFLICT,
            error_code="conflict",
            message=reason,
        )


# ============================================================================
# Validation Exceptions (400)
# ============================================================================


class ValidationError(AppException):
    """Request validation error."""

    def __init__(
        self,
        message: str,
        errors: list[dict[str, Any]] | None = None,
    ) -> None:
        super().__init__(
            status_code=status.HTTP_400_BAD_REQUEST,
            error_code="validation_error",
            message=message,
            detail={"errors": errors or []},
        )


class MissingFieldsError(ValidationError):
    """Required FAQ fields were not supplied."""

    def __init__(self, fields: list[str]) -> None:
        super().__init__(
            message="title and content are required",
            errors=[{"field": field, "reason": "required"} for field in fields],
        )


class InvalidParentError(ValidationError):
    """Parent FAQ is missing or points back at the FAQ itself."""

    def __init__(self, parent_id: UUID, reason: str) -> None:
        super().__init__(
            message=reason,
            errors=[{"field": "parentId", "value": str(parent_id)}],
        )
