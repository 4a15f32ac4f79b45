# =============================================================================
# app/exceptions.py - Custom Exception Handlers
# =============================================================================
# Centralized exception handling for the API.
# Every error carries a machine-readable code and, where possible, a hint
# telling the caller how to fix the request.
# =============================================================================

from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse


class RangeOpsException(Exception):
    """
    Base exception for the RangeOps API.

    All custom exceptions inherit from this class.
    Provides structured error responses with actionable suggestions.
    """

    def __init__(
        self,
        message: str,
        code: str = "RANGEOPS_ERROR",
        status_code: int = 500,
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.status_code = status_code
        self.suggestion = suggestion
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to API response dict."""
        result = {
            "detail": self.message,
            "code": self.code,
        }
        if self.suggestion:
            result["suggestion"] = self.suggestion
        if self.details:
            result["details"] = self.details
        return result


class ValidationFailedError(RangeOpsException):
    """Raised when a request is well-formed JSON but semantically invalid."""

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(
            message=message,
            code="VALIDATION_FAILED",
            status_code=400,
            details=details,
        )


class ForbiddenRoleError(RangeOpsException):
    """Raised when the caller's role is not allowed to use an endpoint."""

    def __init__(self, role: str | None, allowed: list[str]):
        super().__init__(
            message=f"Role '{role}' is not permitted to perform this action",
            code="FORBIDDEN_ROLE",
            status_code=403,
            suggestion=f"Ask someone with one of these roles: {', '.join(allowed)}",
            details={"role": role, "allowed_roles": allowed},
        )


# =============================================================================
# Employee / Schedule Exceptions
# =============================================================================

class EmployeeNotFoundError(RangeOpsException):
    """Raised when an employee lookup (by id, name or user) finds nothing."""

    def __init__(self, identifier: str | int):
        super().__init__(
            message=f"Employee not found: {identifier}",
            code="EMPLOYEE_NOT_FOUND",
            status_code=404,
            suggestion="Check the employee name or id; names must match exactly",
            details={"employee": identifier},
        )


class ScheduleConflictError(RangeOpsException):
    """Raised when a schedule already exists for an employee on a day."""

    def __init__(self, employee_id: int, schedule_date: str):
        super().__init__(
            message="Schedule already exists for this employee on this day",
            code="SCHEDULE_CONFLICT",
            status_code=400,
            suggestion="Use PUT /schedules or POST /schedules/add to change an existing shift",
            details={"employee_id": employee_id, "schedule_date": schedule_date},
        )


# =============================================================================
# Time Off Exceptions
# =============================================================================

class TimeOffRequestNotFoundError(RangeOpsException):
    """Raised when a time off request id doesn't exist."""

    def __init__(self, request_id: int):
        super().__init__(
            message=f"Time off request not found: {request_id}",
            code="TIME_OFF_REQUEST_NOT_FOUND",
            status_code=404,
            details={"request_id": request_id},
        )


class InvalidTimeOffActionError(RangeOpsException):
    """Raised when a review action is not one of the known statuses."""

    def __init__(self, action: str):
        super().__init__(
            message=f"Unknown time off action: {action}",
            code="INVALID_TIME_OFF_ACTION",
            status_code=400,
            suggestion="Use pending, time_off, deny, called_out, left_early or 'Custom:<label>'",
            details={"action": action},
        )


# =============================================================================
# Certification Exceptions
# =============================================================================

class CertificationNotFoundError(RangeOpsException):
    """Raised when a certification id doesn't exist."""

    def __init__(self, certification_id: str | int):
        super().__init__(
            message=f"Certification not found: {certification_id}",
            code="CERTIFICATION_NOT_FOUND",
            status_code=404,
            details={"certification_id": certification_id},
        )


# =============================================================================
# Firearm Exceptions
# =============================================================================

class FirearmNotFoundError(RangeOpsException):
    """Raised when a rental firearm id doesn't exist."""

    def __init__(self, firearm_id: int):
        super().__init__(
            message=f"Firearm not found: {firearm_id}",
            code="FIREARM_NOT_FOUND",
            status_code=404,
            details={"firearm_id": firearm_id},
        )


# =============================================================================
# Checkout Exceptions
# =============================================================================

class ClassNotFoundError(RangeOpsException):
    """Raised when a class schedule id doesn't exist."""

    def __init__(self, class_id: str | int):
        super().__init__(
            message="Class not found",
            code="CLASS_NOT_FOUND",
            status_code=404,
            details={"class_id": class_id},
        )


class InvalidClassError(RangeOpsException):
    """Raised when a class exists but cannot be sold (no Stripe price)."""

    def __init__(self, class_id: str | int):
        super().__init__(
            message="Invalid class data",
            code="INVALID_CLASS",
            status_code=400,
            suggestion="Attach a stripe_price_id to the class before selling it",
            details={"class_id": class_id},
        )


class PaymentVerificationError(RangeOpsException):
    """Raised when a checkout session cannot be confirmed as paid."""

    def __init__(self, message: str):
        super().__init__(
            message=message,
            code="PAYMENT_VERIFICATION_FAILED",
            status_code=400,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"success": False, "error": self.message, "code": self.code}


class PaymentsNotConfiguredError(RangeOpsException):
    """Raised when Stripe keys are missing."""

    def __init__(self):
        super().__init__(
            message="Payments are not configured",
            code="PAYMENTS_NOT_CONFIGURED",
            status_code=503,
            suggestion="Set STRIPE_SECRET_KEY (and STRIPE_WEBHOOK_SECRET for webhooks)",
        )


# =============================================================================
# Exception Handlers
# =============================================================================

async def rangeops_exception_handler(
    request: Request,
    exc: RangeOpsException
) -> JSONResponse:
    """
    Convert RangeOpsException to JSON response.

    Returns structured error with:
    - detail: Human-readable message
    - code: Machine-readable error code
    - suggestion: How to fix (if available)
    - details: Additional context
    """
    return JSONResponse(
        status_code=exc.status_code,
        content=exc.to_dict()
    )


async def database_exception_handler(
    request: Request,
    exc: Exception
) -> JSONResponse:
    """Map a SupabaseClientError to a 500 without leaking query details."""
    return JSONResponse(
        status_code=500,
        content={
            "detail": "Database operation failed",
            "code": getattr(exc, "code", "SUPABASE_ERROR"),
        }
    )


async def validation_exception_handler(
    request: Request,
    exc: RequestValidationError
) -> JSONResponse:
    """
    Handle request validation errors.

    Malformed bodies and query parameters are client errors (400), the same
    status the services use for semantic validation failures.
    """
    return JSONResponse(
        status_code=400,
        content={
            "detail": "Validation error",
            "code": "VALIDATION_ERROR",
            "errors": jsonable_encoder(exc.errors()),
        }
    )
