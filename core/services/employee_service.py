# =============================================================================
# core/services/employee_service.py - Employee Business Logic
# =============================================================================
# Listing and updating employees. The list endpoint exposes a small
# PostgREST-like query language (select / order / equals / arbitrary eq
# filters) because the dashboard builds its lookups from query strings.
# =============================================================================

import logging
from typing import Any, Mapping

from lib.supabase_client import SupabaseClient
from app.exceptions import EmployeeNotFoundError, ValidationFailedError

logger = logging.getLogger(__name__)

DEFAULT_PAY_TYPES = ["hourly", "salary"]
RESERVED_PARAMS = {"select", "order", "single"}


class EmployeeService:
    """
    Service for employee lookups and profile updates.
    """

    @staticmethod
    def list_employees(params: Mapping[str, str]) -> list[dict[str, Any]] | dict[str, Any] | None:
        """
        List employees using query-string style parameters.

        Args:
            params: Query parameters. Recognised keys:
                - select: column list (default "*")
                - order: "column.asc" or "column.desc" (default lanid ascending)
                - equals: "field:value" equality filter
                - pay_type: comma-separated list (default hourly,salary)
                - single: "true" to return one object instead of a list
                Any other key becomes an equality filter.

        Returns:
            A list of employee rows, or one row when single=true
        """
        client = SupabaseClient.get_client()

        query = client.table("employees").select(params.get("select") or "*")

        order = params.get("order")
        if order:
            column, _, direction = order.partition(".")
            query = query.order(column, desc=direction != "asc")
        else:
            query = query.order("lanid", desc=False)

        for key, value in params.items():
            if key in RESERVED_PARAMS:
                continue
            if key == "equals":
                field, sep, field_value = value.partition(":")
                if not sep or not field:
                    raise ValidationFailedError(
                        "equals must be in the form field:value",
                        details={"equals": value},
                    )
                query = query.eq(field, field_value)
            elif key == "pay_type":
                query = query.in_("pay_type", value.split(","))
            else:
                query = query.eq(key, value)

        if "pay_type" not in params:
            query = query.in_("pay_type", DEFAULT_PAY_TYPES)

        if params.get("single") == "true":
            query = query.single()

        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Failed to list employees: {e}")
            raise

        if params.get("single") == "true":
            return response.data
        return response.data or []

    @staticmethod
    def get_employee(employee_id: int) -> dict[str, Any]:
        """
        Raises:
            EmployeeNotFoundError: If no employee has this id
        """
        employee = SupabaseClient.fetch_employee(employee_id)
        if not employee:
            raise EmployeeNotFoundError(employee_id)
        return employee

    @staticmethod
    def get_employee_by_name(name: str, select: str = "*") -> dict[str, Any]:
        """
        Raises:
            EmployeeNotFoundError: If no employee has this exact name
        """
        employee = SupabaseClient.fetch_employee_by_name(name, select=select)
        if not employee:
            raise EmployeeNotFoundError(name)
        return employee

    @staticmethod
    def update_employee(employee_id: int, changes: dict[str, Any]) -> dict[str, Any]:
        """
        Apply a partial update to an employee.

        Returns:
            The updated row (or the current row when there is nothing to change)

        Raises:
            EmployeeNotFoundError: If no employee has this id
        """
        current = EmployeeService.get_employee(employee_id)
        if not changes:
            return current

        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("employees")
                .update(changes)
                .eq("employee_id", employee_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update employee {employee_id}: {e}")
            raise

        logger.info(f"Updated employee {employee_id}: {sorted(changes)}")
        return response.data[0] if response.data else current
