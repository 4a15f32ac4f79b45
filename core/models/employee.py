# =============================================================================
# core/models/employee.py - Employee Schemas
# =============================================================================
# Employees are the staff of the range. Each row links a Supabase auth user
# (user_uuid) to a display name, a role string and a point-of-sale login
# (lanid) used to attribute sales.
# =============================================================================

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class PayType(str, Enum):
    HOURLY = "hourly"
    SALARY = "salary"


class EmployeeUpdate(BaseModel):
    """
    Fields an admin may change on an employee.

    Unknown fields are rejected so a typo cannot silently no-op.
    """

    name: str | None = Field(default=None, min_length=1, max_length=255)
    last_name: str | None = None
    department: str | None = None
    role: str | None = None
    contact_info: str | None = Field(default=None, description="Email address")
    phone_number: str | None = None
    lanid: str | None = None
    pay_type: PayType | None = None
    pay_rate: float | None = Field(default=None, ge=0)
    hire_date: date | None = None
    birthday: date | None = None
    status: str | None = None
    vacation_time: float | None = Field(default=None, ge=0)

    model_config = ConfigDict(extra="forbid")

    def changes(self) -> dict:
        """Only the fields the caller actually sent, JSON-ready."""
        return self.model_dump(mode="json", exclude_unset=True)
