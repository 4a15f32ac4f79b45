# =============================================================================
# core/models/timesheet.py - Timesheet Schemas
# =============================================================================
# Clock events (employee_clock_events) are one row per employee per day with
# clock-in, optional lunch and clock-out times. VTO events record unpaid
# days off (called out, no call no show) against the scheduled hours.
# =============================================================================

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, field_validator, model_validator

from core.models.schedule import TIME_PATTERN


class VtoType(str, Enum):
    CALLED_OUT = "called_out"
    NO_CALL_NO_SHOW = "no_call_no_show"


VTO_TYPES = {vto.value for vto in VtoType}


class TimesheetEntry(BaseModel):
    """
    Add or overwrite the clock event for an employee's day.

    Example:
        {"employee_id": 4, "event_date": "2025-01-06", "start_time": "09:00",
         "lunch_start": "13:30", "lunch_end": "14:00", "end_time": "17:30"}
    """
    employee_id: int
    event_date: date
    start_time: str = Field(..., pattern=TIME_PATTERN)
    lunch_start: str | None = Field(default=None, pattern=TIME_PATTERN)
    lunch_end: str | None = Field(default=None, pattern=TIME_PATTERN)
    end_time: str | None = Field(default=None, pattern=TIME_PATTERN)

    @model_validator(mode="after")
    def check_lunch_pair(self):
        if (self.lunch_start is None) != (self.lunch_end is None):
            raise ValueError("lunch_start and lunch_end must be given together")
        return self


class VtoRequest(BaseModel):
    """
    Record VTO for one or more days. Days without a shift are skipped.

    `status` other than a known VTO type falls back to called_out.
    """
    employee_id: int
    employee_name: str = Field(..., min_length=1)
    event_date: list[date] = Field(..., min_length=1)
    status: str | None = None

    @field_validator("event_date", mode="before")
    @classmethod
    def single_date_to_list(cls, value):
        if isinstance(value, (str, date)):
            return [value]
        return value

    @property
    def vto_type(self) -> str:
        return self.status if self.status in VTO_TYPES else VtoType.CALLED_OUT.value


class ReconcileHoursRequest(BaseModel):
    """
    Cover a short day with sick time.

    `calculated_total_hours` is the worked time as 'H:MM'.
    """
    employee_id: int = Field(..., alias="employeeId")
    event_date: date = Field(..., alias="eventDate")
    hours_to_reconcile: float = Field(..., gt=0, alias="hoursToReconcile")
    calculated_total_hours: str = Field(..., pattern=r"^\d{1,2}:\d{2}$", alias="calculatedTotalHours")

    model_config = {"populate_by_name": True}

    @property
    def worked_hours(self) -> float:
        hours, minutes = self.calculated_total_hours.split(":")
        return int(hours) + int(minutes) / 60
