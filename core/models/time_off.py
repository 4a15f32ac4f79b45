# =============================================================================
# core/models/time_off.py - Time Off Schemas
# =============================================================================
# Employees file requests; admins review them. Reviewing an action also
# rewrites the status of every schedule row in the requested date range.
# =============================================================================

from datetime import date
from enum import Enum

from pydantic import BaseModel, Field, model_validator

CUSTOM_ACTION_PREFIX = "Custom:"


class TimeOffAction(str, Enum):
    PENDING = "pending"
    TIME_OFF = "time_off"
    DENY = "deny"
    CALLED_OUT = "called_out"
    LEFT_EARLY = "left_early"


# Actions that close a request and rewrite schedule statuses
STATUS_ACTIONS = {
    TimeOffAction.TIME_OFF.value,
    TimeOffAction.DENY.value,
    TimeOffAction.CALLED_OUT.value,
    TimeOffAction.LEFT_EARLY.value,
}


def is_status_action(action: str) -> bool:
    return action in STATUS_ACTIONS or action.startswith(CUSTOM_ACTION_PREFIX)


class TimeOffCreate(BaseModel):
    """
    A new time off request.

    Example:
        {"employee_name": "Jane Doe", "start_date": "2025-02-03",
         "end_date": "2025-02-05", "reason": "Vacation"}
    """
    employee_name: str = Field(..., min_length=1)
    start_date: date
    end_date: date
    reason: str = Field(..., min_length=1)
    other_reason: str | None = None

    @model_validator(mode="after")
    def check_range(self):
        if self.end_date < self.start_date:
            raise ValueError("end_date must not be before start_date")
        return self


class TimeOffReview(BaseModel):
    """
    An admin decision on a request.

    `action` is one of the TimeOffAction values or "Custom:<label>".
    The two toggles are only applied when present.
    """
    action: str = Field(..., min_length=1)
    use_sick_time: bool | None = None
    use_vacation_time: bool | None = None


class HoursBreakdown(BaseModel):
    """Result of the calculate_scheduled_hours RPC, coerced to numbers."""
    total_scheduled_hours: float = 0
    sick_time_hours: float = 0
    unpaid_hours: float = 0

    @classmethod
    def from_rpc(cls, data: dict | None) -> "HoursBreakdown":
        data = data or {}
        return cls(
            total_scheduled_hours=float(data.get("total_scheduled_hours") or 0),
            sick_time_hours=float(data.get("sick_time_hours") or 0),
            unpaid_hours=float(data.get("unpaid_hours") or 0),
        )
