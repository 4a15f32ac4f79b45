# =============================================================================
# core/models/schedule.py - Schedule Schemas
# =============================================================================
# A schedule row is one employee's shift on one date. The status column
# doubles as an attendance record:
#   scheduled / added_day    - a real shift
#   reference                - template row used to generate real shifts
#   time_off / called_out / left_early / no_call_no_show / deny / "Custom:<label>"
# =============================================================================

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator


class ScheduleStatus(str, Enum):
    SCHEDULED = "scheduled"
    ADDED_DAY = "added_day"
    REFERENCE = "reference"
    TIME_OFF = "time_off"
    CALLED_OUT = "called_out"
    LEFT_EARLY = "left_early"
    NO_CALL_NO_SHOW = "no_call_no_show"


class ScheduleType(str, Enum):
    """Which rows GET /schedules returns."""
    ACTUAL = "actual"
    REFERENCE = "reference"


TIME_PATTERN = r"^\d{2}:\d{2}(:\d{2})?$"


class ScheduleTimesUpdate(BaseModel):
    """Change the hours of an existing shift."""
    employee_id: int
    schedule_date: date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)


class AddShiftRequest(BaseModel):
    """
    Add (or overwrite) a one-off shift for an employee, looked up by name.

    Example:
        {"employee_name": "Jane Doe", "date": "2025-01-06",
         "start_time": "09:00", "end_time": "17:30"}
    """
    employee_name: str = Field(..., min_length=1)
    date: date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)


class SubmitShiftRequest(BaseModel):
    """Create a regular shift; fails if one already exists for the day."""
    employee_id: int
    day: date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    end_time: str = Field(..., pattern=TIME_PATTERN)


class ScheduleStatusUpdate(BaseModel):
    """
    Mark an employee's day with an attendance status.

    `schedule_date` may be a plain date or a full timestamp; timestamps are
    resolved to the business-timezone calendar date.
    """
    employee_id: int
    schedule_date: str = Field(..., min_length=10)
    status: str = Field(..., min_length=1)


class GenerateSchedulesRequest(BaseModel):
    """
    Weeks of shifts to generate from reference schedules.

    Accepts a number or a numeric string (form inputs send strings); the
    range check happens in the service against SCHEDULE_MAX_WEEKS.
    """
    weeks: int
    background: bool = False

    @field_validator("weeks", mode="before")
    @classmethod
    def parse_weeks(cls, value):
        if isinstance(value, str):
            value = value.strip()
            if not value.lstrip("-").isdigit():
                raise ValueError("weeks must be an integer")
            return int(value)
        return value
