# =============================================================================
# app/routers/sales.py - Sales Report Endpoints
# =============================================================================

from datetime import date

from fastapi import APIRouter

from app.dependencies import AdminDep
from app.exceptions import ValidationFailedError
from core.models.sales import (
    AggregatedSalesRequest,
    CategorySalesRow,
    DashboardTotalsRequest,
    EmployeeSalesSummary,
    EmployeeSummaryRequest,
    PeriodTotalsRequest,
)
from core.services.sales_service import SalesService
from lib.utils import parse_date

router = APIRouter()


def _required_date(name: str, value: str | None) -> date:
    if not value:
        raise ValidationFailedError(f"{name} is required", details={name: value})
    try:
        return parse_date(value)
    except ValueError:
        raise ValidationFailedError(f"{name} must be an ISO date", details={name: value})


@router.get("/by-range", response_model=list[CategorySalesRow])
async def sales_by_range(admin: AdminDep, start: str | None = None, end: str | None = None):
    """Category totals per clerk. Both start and end are required (YYYY-MM-DD)."""
    start_date = _required_date("start", start)
    end_date = _required_date("end", end)
    if end_date < start_date:
        raise ValidationFailedError(
            "end must not be before start",
            details={"start": start, "end": end},
        )
    return SalesService.sales_by_range(start_date, end_date)


@router.post("/employee-summary", response_model=list[EmployeeSalesSummary])
async def employee_summary(admin: AdminDep, request: EmployeeSummaryRequest):
    return SalesService.employee_summary(request)


@router.post("/period-totals")
async def period_totals(admin: AdminDep, request: PeriodTotalsRequest):
    return SalesService.period_totals(request)


@router.post("/dashboard-totals")
async def dashboard_totals(admin: AdminDep, request: DashboardTotalsRequest):
    return SalesService.dashboard(request.start_date, request.end_date)


@router.post("/aggregated")
async def aggregated_sales(admin: AdminDep, request: AggregatedSalesRequest):
    return SalesService.aggregated(request.start_date, request.end_date)
