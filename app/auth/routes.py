# =============================================================================
# app/auth/routes.py - Authentication Routes
# =============================================================================
# API endpoints for authentication-related operations.
#
# Note: Actual signup/login is handled by Supabase Auth client-side.
# These routes are for getting user info after authentication.
# =============================================================================

import logging
from fastapi import APIRouter, Depends

from app.auth.dependencies import get_current_user
from app.auth.models import AuthUser, EmployeeProfileResponse
from lib.supabase_client import SupabaseClient, SupabaseClientError

logger = logging.getLogger(__name__)

router = APIRouter()


@router.get("/me", response_model=EmployeeProfileResponse)
async def get_current_user_info(
    user: AuthUser = Depends(get_current_user)
) -> EmployeeProfileResponse:
    """
    Get the current authenticated user's employee profile.

    Customers (accounts with no employee row) get just their id and email.
    """
    try:
        employee = SupabaseClient.fetch_employee_by_user(user.id)
    except SupabaseClientError as e:
        logger.warning(f"Could not fetch employee profile: {e}")
        employee = None

    if not employee:
        return EmployeeProfileResponse(user_id=user.id, email=user.email)

    return EmployeeProfileResponse(
        user_id=user.id,
        email=employee.get("contact_info") or user.email,
        employee_id=employee.get("employee_id"),
        name=employee.get("name"),
        role=employee.get("role"),
        department=employee.get("department"),
        hire_date=employee.get("hire_date"),
    )


@router.get("/verify")
async def verify_token(
    user: AuthUser = Depends(get_current_user)
) -> dict:
    """
    Verify that the current token is valid.

    Raises:
        401: If token is invalid or expired
    """
    return {
        "valid": True,
        "user_id": str(user.id),
        "email": user.email,
        "role": user.role,
    }
