# =============================================================================
# app/routers/timesheets.py - Timesheet Endpoints
# =============================================================================
# Admin-only: clock events, VTO entries, hour reconciliation and the
# pay-period summary.
# =============================================================================

from datetime import date

from fastapi import APIRouter, status

from app.dependencies import AdminDep
from app.exceptions import ValidationFailedError
from core.models.timesheet import ReconcileHoursRequest, TimesheetEntry, VtoRequest
from core.services.timesheet_service import TimesheetService

router = APIRouter()


@router.get("")
async def list_timesheets(admin: AdminDep, start: date | None = None, end: date | None = None):
    """Clock events newest first, optionally limited to [start, end]."""
    return TimesheetService.list_timesheets(start, end)


@router.post("", status_code=status.HTTP_201_CREATED)
async def save_timesheet(admin: AdminDep, entry: TimesheetEntry):
    """Add the clock event for an employee's day, replacing any existing one."""
    return TimesheetService.save_entry(entry)


@router.get("/summary")
async def pay_period_summary(admin: AdminDep, start: date, end: date):
    """Regular and overtime hours per employee between start and end."""
    if end < start:
        raise ValidationFailedError(
            "end must not be before start",
            details={"start": start.isoformat(), "end": end.isoformat()},
        )
    return TimesheetService.pay_period_summary(start, end)


@router.post("/vto")
async def record_vto(admin: AdminDep, request: VtoRequest):
    return TimesheetService.record_vto(request)


@router.post("/reconcile")
async def reconcile_hours(admin: AdminDep, request: ReconcileHoursRequest):
    """Charge missing hours on a short day to sick time."""
    return TimesheetService.reconcile_hours(request)
