# =============================================================================
# lib/supabase_client.py - Supabase Client Wrapper
# =============================================================================
# This module provides a typed wrapper for Supabase database operations.
# It implements the singleton pattern to reuse a single client connection
# and provides the handful of lookups that nearly every feature needs:
# - Employees by auth user, name or id
# - Single-row fetches that treat "no rows" as None
# - Paged reads for reports that exceed PostgREST's row cap
# - Stored procedure (RPC) calls
#
# Usage:
#   from lib.supabase_client import SupabaseClient
#   employee = SupabaseClient.fetch_employee_by_user(user_id)
# =============================================================================

from __future__ import annotations

import logging
from typing import Any, Callable
from uuid import UUID

from supabase import create_client, Client

from app.config import settings

logger = logging.getLogger(__name__)

# PostgREST error code for ".single()" matching zero rows
NO_ROWS_CODE = "PGRST116"

# PostgREST returns at most this many rows per request by default
DEFAULT_PAGE_SIZE = 1000


class SupabaseClientError(Exception):
    """
    Error during Supabase operations.

    Carries a machine-readable code plus a suggestion for how to fix it.
    """

    def __init__(
        self,
        message: str,
        code: str = "SUPABASE_ERROR",
        suggestion: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.details = details or {}

    def __str__(self) -> str:
        result = f"[{self.code}] {self.message}"
        if self.suggestion:
            result += f" Suggestion: {self.suggestion}"
        return result


def is_not_found(error: Exception) -> bool:
    """True when a PostgREST error means 'zero rows matched'."""
    return NO_ROWS_CODE in str(error)


class SupabaseClient:
    """
    Typed wrapper for Supabase database operations.

    Implements singleton pattern - one client instance is shared across
    the application. All methods are class methods for easy access without
    instantiation.

    Example:
        employee = SupabaseClient.fetch_employee_by_name("Jane Doe")
        rows = SupabaseClient.fetch_all_pages(
            lambda: client.table("sales_data").select("*").gte("Date", start)
        )
    """

    _instance: Client | None = None

    @classmethod
    def get_client(cls) -> Client:
        """
        Get or create the singleton Supabase client.

        Uses service_role key which bypasses Row Level Security (RLS).
        Authorization is enforced by the API's own role dependencies.

        Raises:
            SupabaseClientError: If client creation fails
        """
        if cls._instance is None:
            try:
                cls._instance = create_client(
                    settings.SUPABASE_URL,
                    settings.SUPABASE_SERVICE_KEY
                )
                logger.info("Supabase client initialized successfully")
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to create Supabase client: {e}",
                    code="CLIENT_INIT_FAILED",
                    suggestion="Check SUPABASE_URL and SUPABASE_SERVICE_KEY in your .env file"
                )
        return cls._instance

    @classmethod
    def _normalize_uuid(cls, uuid_value: str | UUID) -> str:
        """Convert UUID to string for queries."""
        return str(uuid_value) if isinstance(uuid_value, UUID) else uuid_value

    # -------------------------------------------------------------------------
    # Generic Reads
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_one(
        cls,
        table: str,
        column: str,
        value: Any,
        select: str = "*",
    ) -> dict[str, Any] | None:
        """
        Fetch exactly one row where `column == value`.

        Returns:
            The row dict, or None when no row matches

        Raises:
            SupabaseClientError: If the query fails for any other reason
        """
        client = cls.get_client()

        try:
            response = (
                client.table(table)
                .select(select)
                .eq(column, value)
                .single()
                .execute()
            )
            return response.data

        except Exception as e:
            if is_not_found(e):
                return None
            raise SupabaseClientError(
                message=f"Failed to fetch from {table}: {e}",
                code="FETCH_ONE_FAILED",
                details={"table": table, "column": column, "value": str(value)}
            )

    @classmethod
    def fetch_all_pages(
        cls,
        build_query: Callable[[], Any],
        page_size: int = DEFAULT_PAGE_SIZE,
    ) -> list[dict[str, Any]]:
        """
        Read every row of a query, `page_size` rows at a time.

        `build_query` must return a fresh filter builder on each call; the
        builder accumulates range parameters so it cannot be reused.

        Stops at the first short or empty page.
        """
        rows: list[dict[str, Any]] = []
        page = 0

        while True:
            start = page * page_size
            try:
                response = build_query().range(start, start + page_size - 1).execute()
            except Exception as e:
                raise SupabaseClientError(
                    message=f"Failed to read page {page}: {e}",
                    code="FETCH_PAGE_FAILED",
                    details={"page": page, "page_size": page_size}
                )

            batch = response.data or []
            rows.extend(batch)

            if len(batch) < page_size:
                break
            page += 1

        logger.debug(f"Fetched {len(rows)} rows over {page + 1} page(s)")
        return rows

    # -------------------------------------------------------------------------
    # Employees
    # -------------------------------------------------------------------------

    @classmethod
    def fetch_employee_by_user(cls, user_id: str | UUID) -> dict[str, Any] | None:
        """Fetch the employee row linked to a Supabase auth user."""
        return cls.fetch_one("employees", "user_uuid", cls._normalize_uuid(user_id))

    @classmethod
    def fetch_employee_by_name(
        cls,
        name: str,
        select: str = "*",
    ) -> dict[str, Any] | None:
        """Fetch an employee by exact display name."""
        return cls.fetch_one("employees", "name", name, select=select)

    @classmethod
    def fetch_employee(cls, employee_id: int) -> dict[str, Any] | None:
        """Fetch an employee by numeric id."""
        return cls.fetch_one("employees", "employee_id", employee_id)

    # -------------------------------------------------------------------------
    # Stored Procedures
    # -------------------------------------------------------------------------

    @classmethod
    def rpc(cls, function: str, params: dict[str, Any] | None = None) -> Any:
        """
        Call a Postgres function exposed through PostgREST.

        Returns:
            Whatever the function returns (scalar, dict or list)

        Raises:
            SupabaseClientError: If the call fails
        """
        client = cls.get_client()

        try:
            response = client.rpc(function, params or {}).execute()
            logger.debug(f"RPC {function} completed")
            return response.data

        except Exception as e:
            raise SupabaseClientError(
                message=f"RPC {function} failed: {e}",
                code="RPC_FAILED",
                suggestion=f"Check that the database function '{function}' exists and its arguments match",
                details={"function": function, "params": params or {}}
            )
