# =============================================================================
# core/models/operations.py - Daily Operations Schemas
# =============================================================================
# End-of-day register deposits, range walk (lane inspection) reports, range
# repair reports and the holiday calendar.
# =============================================================================

from datetime import date

from pydantic import BaseModel, ConfigDict, Field


class DailyDeposit(BaseModel):
    """
    Cash count for one register.

    Denomination fields are counts, not dollar amounts. The register name
    is read from and stored under the "register" key.
    """
    register_name: str = Field(..., min_length=1, alias="register")
    employee_name: str = Field(..., min_length=1)
    pennies: int = Field(default=0, ge=0)
    nickels: int = Field(default=0, ge=0)
    dimes: int = Field(default=0, ge=0)
    quarters: int = Field(default=0, ge=0)
    ones: int = Field(default=0, ge=0)
    fives: int = Field(default=0, ge=0)
    tens: int = Field(default=0, ge=0)
    twenties: int = Field(default=0, ge=0)
    fifties: int = Field(default=0, ge=0)
    hundreds: int = Field(default=0, ge=0)
    roll_of_pennies: int = Field(default=0, ge=0)
    roll_of_nickels: int = Field(default=0, ge=0)
    roll_of_dimes: int = Field(default=0, ge=0)
    roll_of_quarters: int = Field(default=0, ge=0)
    total_in_drawer: float = 0
    total_to_deposit: float = 0
    aim_generated_total: float = 0
    discrepancy_message: str | None = None
    explain_discrepancies: str | None = None

    model_config = ConfigDict(populate_by_name=True)


class RangeWalkReport(BaseModel):
    date_of_walk: date
    lanes: str = Field(..., description="Lanes inspected, e.g. '1-15'")
    lanes_with_problems: str | None = None
    description: str | None = None
    role: str | None = None


class HolidayCreate(BaseModel):
    """`date` may be a date or a timestamp; it is stored as a business-timezone date."""
    name: str = Field(..., min_length=1)
    date: str = Field(..., min_length=10)
    is_full_day: bool = True
    repeat_yearly: bool = False


class RangeRepairReport(BaseModel):
    """Lanes fixed on a given day and what was done."""
    date_of_repair: date
    lanes_repaired: str = Field(..., min_length=1, description="Lanes repaired, e.g. '3, 7'")
    description: str = Field(..., min_length=1)
    role: str | None = None
