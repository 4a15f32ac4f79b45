# =============================================================================
# app/auth/models.py - Authentication Models
# =============================================================================
# Pydantic models for authentication data.
# =============================================================================

from pydantic import BaseModel, ConfigDict
from uuid import UUID
from datetime import date
from typing import Optional


# Roles that may use the admin endpoints (schedule generation, reviews, ...)
ADMIN_ROLES = ("admin", "super admin", "dev")


class AuthUser(BaseModel):
    """
    Authenticated user extracted from a Supabase JWT.

    This is the user info available from the token itself,
    without querying the database.
    """
    id: UUID
    email: Optional[str] = None
    role: Optional[str] = None  # app_metadata.role
    full_name: Optional[str] = None  # user_metadata.full_name

    model_config = ConfigDict(frozen=True)

    @property
    def display_name(self) -> str:
        return self.full_name or self.email or str(self.id)


class CurrentEmployee(BaseModel):
    """
    The employee row linked to the authenticated user.

    The role stored here is authoritative; the token role must agree with it.
    """
    employee_id: int
    user_uuid: UUID
    name: str
    role: str
    email: Optional[str] = None
    department: Optional[str] = None
    lanid: Optional[str] = None
    status: Optional[str] = None

    model_config = ConfigDict(frozen=True)

    @property
    def is_admin(self) -> bool:
        return self.role in ADMIN_ROLES


class EmployeeProfileResponse(BaseModel):
    """Response for GET /auth/me."""
    user_id: UUID
    email: Optional[str] = None
    employee_id: Optional[int] = None
    name: Optional[str] = None
    role: Optional[str] = None
    department: Optional[str] = None
    hire_date: Optional[date] = None
