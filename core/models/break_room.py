# =============================================================================
# core/models/break_room.py - Break Room Duty Schemas
# =============================================================================
# One employee per week cleans the break room. Weeks are keyed by their
# start date and the duty falls on the Friday, or the scheduled day closest
# to it.
# =============================================================================

from datetime import date

from pydantic import BaseModel, Field


class BreakRoomAssignment(BaseModel):
    """
    Assign the duty for a week.

    With `check_schedule` the duty moves to the employee's scheduled day
    closest to `duty_date`, and to the next employee in the rotation when
    they are not working that week.
    """
    week_start: date
    employee_id: int
    duty_date: date
    check_schedule: bool = True


class BreakRoomInitialize(BaseModel):
    year: int = Field(..., ge=2000, le=2100)
