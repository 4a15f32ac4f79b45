# =============================================================================
# app/routers/employees.py - Employee Endpoints
# =============================================================================
# Listing employees with query-string filters, the caller's own record and
# admin profile updates.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Request

from app.dependencies import AdminDep, EmployeeDep
from core.models.employee import EmployeeUpdate
from core.services.employee_service import EmployeeService

router = APIRouter()


@router.get("")
async def list_employees(request: Request, employee: EmployeeDep):
    """
    List employees.

    Query parameters: select, order (column.asc|desc), equals (field:value),
    pay_type (comma list, default hourly,salary), single=true. Any other
    parameter is an equality filter.
    """
    return EmployeeService.list_employees(dict(request.query_params))


@router.get("/me")
async def get_my_employee(employee: EmployeeDep):
    """The caller's full employee row."""
    return EmployeeService.get_employee(employee.employee_id)


@router.patch("/{employee_id}")
async def update_employee(
    admin: AdminDep,
    update: EmployeeUpdate,
    employee_id: Annotated[int, Path(description="Employee ID")],
):
    """Update profile fields. Unknown fields are rejected with 400."""
    return EmployeeService.update_employee(employee_id, update.changes())
