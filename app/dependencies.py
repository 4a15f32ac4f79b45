# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# These are injected into route handlers using Depends() or the Annotated
# aliases below.
# =============================================================================

from typing import Annotated

from fastapi import Depends

from app.auth.dependencies import get_current_employee, get_current_user, require_roles
from app.auth.models import ADMIN_ROLES, AuthUser, CurrentEmployee
from lib.supabase_client import SupabaseClient


def get_supabase_client() -> type[SupabaseClient]:
    """
    Get Supabase client instance.

    Returns the singleton client wrapper.
    """
    return SupabaseClient


require_admin = require_roles(*ADMIN_ROLES)

# Type aliases for dependency injection
SupabaseDep = Annotated[type[SupabaseClient], Depends(get_supabase_client)]
UserDep = Annotated[AuthUser, Depends(get_current_user)]
EmployeeDep = Annotated[CurrentEmployee, Depends(get_current_employee)]
AdminDep = Annotated[CurrentEmployee, Depends(require_admin)]
