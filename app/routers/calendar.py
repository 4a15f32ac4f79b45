# =============================================================================
# app/routers/calendar.py - Staff Calendar Endpoint
# =============================================================================

from datetime import date

from fastapi import APIRouter

from app.dependencies import EmployeeDep
from app.exceptions import ValidationFailedError
from core.services.calendar_service import CalendarService

router = APIRouter()


@router.get("")
async def get_calendar(employee: EmployeeDep, start_date: date, end_date: date):
    """Every employee's shifts between start_date and end_date, holidays marked."""
    if end_date < start_date:
        raise ValidationFailedError(
            "end_date must not be before start_date",
            details={"start_date": start_date.isoformat(), "end_date": end_date.isoformat()},
        )
    return CalendarService.get_calendar(start_date, end_date)
