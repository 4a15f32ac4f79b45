# =============================================================================
# app/routers/operations.py - Daily Operations Endpoints
# =============================================================================
# Deposits, range walks and holidays are mounted at the API root because
# they are independent resources:
#   /deposits, /range-walks, /range-repairs, /holidays
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, HTTPException, Path, Query, Response, status

from app.dependencies import AdminDep, EmployeeDep, UserDep
from core.models.operations import DailyDeposit, HolidayCreate, RangeRepairReport, RangeWalkReport
from core.services.operations_service import OperationsService

router = APIRouter()


# =============================================================================
# Deposits
# =============================================================================

@router.post("/deposits", status_code=status.HTTP_201_CREATED)
async def submit_deposits(employee: EmployeeDep, user: UserDep, deposits: list[DailyDeposit]):
    """Submit the end-of-day count for one or more registers."""
    return OperationsService.submit_deposits(deposits, user)


@router.get("/deposits/latest")
async def latest_deposit(employee: EmployeeDep):
    return OperationsService.latest_deposit()


# =============================================================================
# Range walks
# =============================================================================

@router.post("/range-walks", status_code=status.HTTP_201_CREATED)
async def submit_range_walk(employee: EmployeeDep, user: UserDep, report: RangeWalkReport):
    return OperationsService.submit_range_walk(report, user)


@router.get("/range-walks/latest")
async def latest_range_walk(employee: EmployeeDep):
    return OperationsService.latest_range_walk()


# =============================================================================
# Range repairs
# =============================================================================

@router.post("/range-repairs", status_code=status.HTTP_201_CREATED)
async def submit_range_repair(employee: EmployeeDep, user: UserDep, report: RangeRepairReport):
    return OperationsService.submit_range_repair(report, user)


@router.get("/range-repairs")
async def list_range_repairs(employee: EmployeeDep, limit: Annotated[int, Query(ge=1, le=500)] = 50):
    """Most recent repair reports first."""
    return OperationsService.list_range_repairs(limit)


# =============================================================================
# Holidays
# =============================================================================

@router.get("/holidays")
async def list_holidays(employee: EmployeeDep):
    return OperationsService.list_holidays()


@router.post("/holidays")
async def upsert_holiday(admin: AdminDep, holiday: HolidayCreate):
    """Create or replace the holiday on a date (dates are unique)."""
    return OperationsService.upsert_holiday(holiday, created_by=admin.name)


@router.delete("/holidays/{holiday_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_holiday(admin: AdminDep, holiday_id: Annotated[int, Path()]):
    if not OperationsService.delete_holiday(holiday_id):
        raise HTTPException(status_code=404, detail=f"Holiday {holiday_id} not found")
    return Response(status_code=status.HTTP_204_NO_CONTENT)
