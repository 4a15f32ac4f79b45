# =============================================================================
# core/services/sales_service.py - Sales Reporting
# =============================================================================
# Reports over the point-of-sale import tables:
#   detailed_sales_data - one row per line item (SoldDate, CatDesc, SubDesc,
#                         total_gross, Margin)
#   sales_data          - one row per clerk per day (Date, total_gross, total_net)
#
# Line-item reports can exceed PostgREST's row cap, so they are read with
# SupabaseClient.fetch_all_pages() and aggregated here.
# =============================================================================

import logging
from datetime import date
from typing import Any, Iterable

from core.models.sales import EmployeeSummaryRequest, PeriodTotalsRequest
from lib.supabase_client import SupabaseClient
from lib.utils import day_bounds_utc, round_cents, to_number

logger = logging.getLogger(__name__)

# Pass-through tax lines; never real revenue
EXCLUDED_FROM_CHART = [
    "CA Tax Gun Transfer",
    "CA Tax Adjust",
    "CA Excise Tax",
    "CA Excise Tax Adjustment",
]

# Firearm sales carry almost no margin and swamp the net figure
EXCLUDED_FROM_NET = [
    "Pistol",
    "Rifle",
    "Revolver",
    "Shotgun",
    "Receiver",
    *EXCLUDED_FROM_CHART,
]

ALL_EMPLOYEES = "all"


def aggregate_by_category(
    rows: Iterable[dict[str, Any]],
    last_names: dict[str, str],
) -> list[dict[str, Any]]:
    """
    Group line items by (Lanid, CatDesc, SubDesc).

    Args:
        rows: detailed_sales_data rows
        last_names: lower-cased lanid -> employee last name

    Returns:
        One dict per bucket with totals rounded to cents, in first-seen order
    """
    buckets: dict[tuple, dict[str, Any]] = {}

    for row in rows:
        key = (row.get("Lanid"), row.get("CatDesc"), row.get("SubDesc"))
        bucket = buckets.get(key)
        if bucket is None:
            lanid = row.get("Lanid")
            bucket = {
                "Lanid": lanid,
                "LastName": last_names.get(lanid.lower()) if lanid else None,
                "category_label": row.get("CatDesc"),
                "subcategory_label": row.get("SubDesc"),
                "total_gross": 0.0,
                "total_net": 0.0,
            }
            buckets[key] = bucket
        bucket["total_gross"] += to_number(row.get("total_gross"))
        bucket["total_net"] += to_number(row.get("Margin"))

    for bucket in buckets.values():
        bucket["total_gross"] = round_cents(bucket["total_gross"])
        bucket["total_net"] = round_cents(bucket["total_net"])
    return list(buckets.values())


def dashboard_totals(rows: Iterable[dict[str, Any]]) -> dict[str, Any]:
    """
    Gross and net totals for the admin dashboard.

    `salesData` omits the tax pass-through categories; the totals still
    include them except for totalNetMinusExclusions.
    """
    total_gross = total_net = total_net_minus_exclusions = 0.0
    chart_rows = []

    for row in rows:
        category = row.get("category_label")
        gross = to_number(row.get("total_gross"))
        net = to_number(row.get("total_net"))
        total_gross += gross
        total_net += net
        if category not in EXCLUDED_FROM_NET:
            total_net_minus_exclusions += net
        if category not in EXCLUDED_FROM_CHART:
            chart_rows.append(row)

    return {
        "totalGross": round_cents(total_gross),
        "totalNet": round_cents(total_net),
        "totalNetMinusExclusions": round_cents(total_net_minus_exclusions),
        "salesData": chart_rows,
    }


class SalesService:
    """
    Service for sales reports.
    """

    @staticmethod
    def _last_names_by_lanid() -> dict[str, str]:
        client = SupabaseClient.get_client()
        response = client.table("employees").select("lanid, last_name").execute()
        return {
            row["lanid"].lower(): row.get("last_name")
            for row in response.data or []
            if row.get("lanid")
        }

    @staticmethod
    def sales_by_range(start: date, end: date) -> list[dict[str, Any]]:
        """
        Category totals per clerk for every sale between start and end (inclusive).
        """
        client = SupabaseClient.get_client()
        lower, upper = day_bounds_utc(start, end)

        def build_query():
            return (
                client.table("detailed_sales_data")
                .select('"Lanid","CatDesc","SubDesc","Margin",total_gross')
                .not_.is_("SoldDate", "null")
                .gte("SoldDate", lower)
                .lte("SoldDate", upper)
                .not_.is_("CatDesc", "null")
            )

        rows = SupabaseClient.fetch_all_pages(build_query)
        logger.info(f"Read {len(rows)} sales line(s) for {start} to {end}")

        return aggregate_by_category(rows, SalesService._last_names_by_lanid())

    @staticmethod
    def employee_summary(request: EmployeeSummaryRequest) -> list[dict[str, Any]]:
        """
        Gross and net per Sales employee, highest gross first.
        """
        client = SupabaseClient.get_client()

        employees = (
            client.table("employees")
            .select("lanid, name")
            .eq("status", "active")
            .eq("department", "Sales")
            .execute()
            .data
            or []
        )
        names = {row["lanid"]: row.get("name") for row in employees if row.get("lanid")}
        if not names:
            return []

        start = request.date_range.start.isoformat()
        end = request.date_range.end.isoformat()

        def build_query():
            query = (
                client.table("sales_data")
                .select("Lanid, total_gross, total_net")
                .gte("Date", start)
                .lte("Date", end)
                .in_("Lanid", list(names))
            )
            if request.employee_lanids:
                query = query.in_("Lanid", request.employee_lanids)
            return query

        rows = SupabaseClient.fetch_all_pages(build_query)

        totals: dict[str, dict[str, float]] = {}
        for row in rows:
            lanid = row.get("Lanid")
            entry = totals.setdefault(lanid, {"total_gross": 0.0, "total_net": 0.0})
            entry["total_gross"] += to_number(row.get("total_gross"))
            entry["total_net"] += to_number(row.get("total_net"))

        summary = [
            {
                "employee_name": names.get(lanid) or lanid,
                "total_gross": round_cents(entry["total_gross"]),
                "total_net": round_cents(entry["total_net"]),
            }
            for lanid, entry in totals.items()
        ]
        summary.sort(key=lambda item: item["total_gross"], reverse=True)
        return summary

    @staticmethod
    def period_totals(request: PeriodTotalsRequest) -> dict[str, float]:
        client = SupabaseClient.get_client()
        date_range = request.date_range or {}
        lanids = request.employee_lanids or []

        def build_query():
            query = (
                client.table("sales_data")
                .select("total_net, total_gross")
                .not_.is_("Date", "null")
            )
            if date_range.get("from"):
                query = query.gte("Date", date_range["from"])
            if date_range.get("to"):
                query = query.lte("Date", date_range["to"])
            if lanids and ALL_EMPLOYEES not in lanids:
                query = query.in_("Lanid", lanids)
            return query

        rows = SupabaseClient.fetch_all_pages(build_query)

        total_net = sum(to_number(row.get("total_net")) for row in rows)
        total_gross = sum(to_number(row.get("total_gross")) for row in rows)
        return {"totalNet": round_cents(total_net), "totalGross": round_cents(total_gross)}

    @staticmethod
    def dashboard(start: date, end: date) -> dict[str, Any]:
        return dashboard_totals(SalesService.sales_by_range(start, end))

    @staticmethod
    def aggregated(start: date, end: date) -> Any:
        """Server-side aggregation through the fetch_aggregated_sales_data function."""
        return SupabaseClient.rpc(
            "fetch_aggregated_sales_data",
            {"start_date": start.isoformat(), "end_date": end.isoformat()},
        )
