# =============================================================================
# app/auth/dependencies.py - FastAPI Auth Dependencies
# =============================================================================
# Provides dependency injection for authentication and role checks.
#
# Supports both:
# - ES256 (new Supabase JWT signing keys) via JWKS
# - HS256 (legacy Supabase JWT secret) as fallback
#
# Roles come from the `employees` table. A token whose app_metadata.role
# disagrees with the database role is rejected.
#
# Usage:
#   from app.auth import get_current_employee, require_roles
#
#   @router.post("/generate", dependencies=[Depends(require_roles(*ADMIN_ROLES))])
#   async def generate(...): ...
# =============================================================================

import logging
import time
from typing import Callable
from uuid import UUID

import httpx
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from jose import jwt, JWTError, ExpiredSignatureError

from app.config import settings
from app.auth.models import AuthUser, CurrentEmployee
from app.exceptions import ForbiddenRoleError
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

# HTTP Bearer token extractor
security = HTTPBearer()

# Cache for JWKS keys
_jwks_cache: dict = {}
_jwks_cache_time: float = 0
JWKS_CACHE_TTL = 3600  # 1 hour


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _get_jwks_url() -> str:
    """Get the JWKS URL from Supabase URL."""
    supabase_url = settings.SUPABASE_URL.rstrip('/')
    return f"{supabase_url}/auth/v1/.well-known/jwks.json"


def _fetch_jwks() -> dict:
    """Fetch JWKS from Supabase with caching."""
    global _jwks_cache, _jwks_cache_time

    current_time = time.time()

    if _jwks_cache and (current_time - _jwks_cache_time) < JWKS_CACHE_TTL:
        return _jwks_cache

    try:
        jwks_url = _get_jwks_url()
        response = httpx.get(jwks_url, timeout=10)
        response.raise_for_status()
        _jwks_cache = response.json()
        _jwks_cache_time = current_time
        logger.debug(f"Fetched JWKS from {jwks_url}")
        return _jwks_cache
    except httpx.HTTPError as e:
        logger.warning(f"Failed to fetch JWKS: {e}")
        # Stale keys beat no keys
        if _jwks_cache:
            return _jwks_cache
        return {"keys": []}


def _get_signing_key(token: str) -> tuple[str | dict, str]:
    """
    Get the appropriate signing key for a token.

    Returns:
        Tuple of (key, algorithm) to use for verification
    """
    try:
        unverified_header = jwt.get_unverified_header(token)
    except JWTError:
        return settings.SUPABASE_JWT_SECRET, "HS256"

    alg = unverified_header.get("alg", "HS256")
    kid = unverified_header.get("kid")

    if alg == "HS256":
        return settings.SUPABASE_JWT_SECRET, "HS256"

    if kid:
        for key in _fetch_jwks().get("keys", []):
            if key.get("kid") == kid:
                return key, alg

    logger.warning(f"Could not find key for alg={alg}, kid={kid}, falling back to HS256")
    return settings.SUPABASE_JWT_SECRET, "HS256"


def decode_token(token: str) -> AuthUser:
    """
    Verify a Supabase access token and build an AuthUser from its claims.

    Raises:
        HTTPException: 401 if the token is invalid, expired or lacks a user id
    """
    try:
        signing_key, algorithm = _get_signing_key(token)
        payload = jwt.decode(
            token,
            signing_key,
            algorithms=[algorithm],
            audience="authenticated"
        )
    except ExpiredSignatureError:
        logger.warning("JWT token has expired")
        raise _unauthorized("Token has expired")
    except JWTError as e:
        logger.warning(f"JWT validation failed: {e}")
        raise _unauthorized(f"Invalid token: {str(e)}")

    user_id = payload.get("sub")
    if not user_id:
        logger.warning("JWT token missing 'sub' claim")
        raise _unauthorized("Invalid token: missing user ID")

    try:
        user_uuid = UUID(user_id)
    except ValueError:
        logger.warning(f"Invalid UUID in token: {user_id}")
        raise _unauthorized("Invalid token: malformed user ID")

    app_metadata = payload.get("app_metadata") or {}
    user_metadata = payload.get("user_metadata") or {}

    return AuthUser(
        id=user_uuid,
        email=payload.get("email"),
        role=app_metadata.get("role"),
        full_name=user_metadata.get("full_name"),
    )


async def get_current_user(
    credentials: HTTPAuthorizationCredentials = Depends(security)
) -> AuthUser:
    """
    Extract and validate user from the Supabase JWT in the Authorization header.

    Raises:
        HTTPException: 401 if token is invalid or expired
    """
    user = decode_token(credentials.credentials)
    logger.debug(f"Authenticated user: {user.id}")
    return user


async def get_current_employee(
    user: AuthUser = Depends(get_current_user),
) -> CurrentEmployee:
    """
    Resolve the authenticated user to their employee record.

    Raises:
        HTTPException: 401 if the user is not an employee, or if the token's
            role claim does not match the role stored in the database
    """
    row = SupabaseClient.fetch_employee_by_user(user.id)
    if not row:
        logger.warning(f"No employee record for user {user.id}")
        raise _unauthorized("No employee record for this account")

    db_role = row.get("role")
    if not db_role:
        logger.warning(f"Employee record for user {user.id} has no role")
        raise _unauthorized("No role assigned to this account")

    if user.role != db_role:
        # Role changed since the token was issued; force a fresh sign-in
        logger.warning(
            f"Role mismatch for user {user.id}: token={user.role} db={db_role}"
        )
        raise _unauthorized("Role has changed; please sign in again")

    return CurrentEmployee(
        employee_id=row["employee_id"],
        user_uuid=user.id,
        name=row.get("name") or user.display_name,
        role=db_role,
        email=row.get("contact_info") or user.email,
        department=row.get("department"),
        lanid=row.get("lanid"),
        status=row.get("status"),
    )


def require_roles(*roles: str) -> Callable:
    """
    Dependency factory that only lets employees with one of `roles` through.

    Usage:
        @router.post("/x")
        async def x(employee: CurrentEmployee = Depends(require_roles("admin"))):
            ...
    """
    allowed = list(roles)

    async def checker(
        employee: CurrentEmployee = Depends(get_current_employee),
    ) -> CurrentEmployee:
        if employee.role not in allowed:
            raise ForbiddenRoleError(employee.role, allowed)
        return employee

    return checker
