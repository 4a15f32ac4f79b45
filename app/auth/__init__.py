# =============================================================================
# app/auth/__init__.py - Authentication Module
# =============================================================================
# Provides JWT-based authentication using Supabase Auth, plus role checks
# against the employees table.
#
# Usage:
#   from app.auth import get_current_employee, CurrentEmployee
#
#   @router.get("/protected")
#   async def protected(employee: CurrentEmployee = Depends(get_current_employee)):
#       return {"employee_id": employee.employee_id}
# =============================================================================

from app.auth.dependencies import (
    get_current_employee,
    get_current_user,
    require_roles,
)
from app.auth.models import ADMIN_ROLES, AuthUser, CurrentEmployee, EmployeeProfileResponse

__all__ = [
    "ADMIN_ROLES",
    "get_current_employee",
    "get_current_user",
    "require_roles",
    "AuthUser",
    "CurrentEmployee",
    "EmployeeProfileResponse",
]
