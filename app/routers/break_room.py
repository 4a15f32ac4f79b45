# =============================================================================
# app/routers/break_room.py - Break Room Duty Endpoints
# =============================================================================

from datetime import date

from fastapi import APIRouter, status

from app.dependencies import AdminDep, EmployeeDep, UserDep
from app.exceptions import ValidationFailedError
from core.models.break_room import BreakRoomAssignment, BreakRoomInitialize
from core.services.break_room_service import BreakRoomService

router = APIRouter()


@router.get("")
async def get_break_room_duty(employee: EmployeeDep, week_start: date | None = None, last: bool = False):
    """
    The assignments for a week, or with `last=true` the most recent one.
    """
    if last:
        return BreakRoomService.last_assignment()
    if week_start is None:
        raise ValidationFailedError("week_start is required unless last=true")
    return BreakRoomService.list_for_week(week_start)


@router.post("", status_code=status.HTTP_201_CREATED)
async def assign_break_room_duty(admin: AdminDep, user: UserDep, request: BreakRoomAssignment):
    return BreakRoomService.assign(request, created_by=str(user.id))


@router.post("/initialize", status_code=status.HTTP_201_CREATED)
async def initialize_break_room_duties(admin: AdminDep, user: UserDep, request: BreakRoomInitialize):
    """Fill a whole year with Friday duties for Sales staff."""
    return BreakRoomService.initialize_year(request.year, created_by=str(user.id))
