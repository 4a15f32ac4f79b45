# =============================================================================
# core/models/sales.py - Sales Reporting Schemas
# =============================================================================
# Sales rows are imported nightly from the point-of-sale system. Each row is
# attributed to the clerk's lanid (POS login) and carries gross and net
# (margin) amounts.
# =============================================================================

from datetime import date

from pydantic import BaseModel, ConfigDict, Field, model_validator


class DateRange(BaseModel):
    """Inclusive date range; `from` is a keyword so it is aliased."""
    start: date = Field(..., alias="from")
    end: date = Field(..., alias="to")

    model_config = ConfigDict(populate_by_name=True)

    @model_validator(mode="after")
    def check_order(self):
        if self.end < self.start:
            raise ValueError("'to' must not be before 'from'")
        return self


class EmployeeSummaryRequest(BaseModel):
    date_range: DateRange = Field(..., alias="dateRange")
    employee_lanids: list[str] | None = Field(default=None, alias="employeeLanids")

    model_config = ConfigDict(populate_by_name=True)


class PeriodTotalsRequest(BaseModel):
    """Both bounds are optional; the lanid 'all' disables the employee filter."""
    date_range: dict | None = Field(default=None, alias="dateRange")
    employee_lanids: list[str] | None = Field(default=None, alias="employeeLanids")

    model_config = ConfigDict(populate_by_name=True)


class DashboardTotalsRequest(BaseModel):
    start_date: date = Field(..., alias="startDate")
    end_date: date = Field(..., alias="endDate")

    model_config = ConfigDict(populate_by_name=True)


class AggregatedSalesRequest(BaseModel):
    """Arguments forwarded to the fetch_aggregated_sales_data RPC."""
    start_date: date
    end_date: date


class CategorySalesRow(BaseModel):
    """One (clerk, category, subcategory) bucket of the by-range report."""
    Lanid: str | None
    LastName: str | None
    category_label: str | None
    subcategory_label: str | None
    total_gross: float
    total_net: float


class EmployeeSalesSummary(BaseModel):
    employee_name: str
    total_gross: float
    total_net: float
