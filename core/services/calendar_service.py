# =============================================================================
# core/services/calendar_service.py - Staff Calendar
# =============================================================================
# Shifts grouped per employee for a date range, with holidays overlaid: a
# shift on a holiday is shown with status "holiday" and a "Closed for ..."
# note.
# =============================================================================

import logging
from datetime import date
from typing import Any, Iterable

from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

HOLIDAY_STATUS = "holiday"


def build_calendar(
    schedules: Iterable[dict[str, Any]],
    holidays: Iterable[dict[str, Any]],
) -> list[dict[str, Any]]:
    """
    Group schedule rows (with their embedded `employees` record) by employee.

    Rows without an employee record are skipped. Employees keep the order
    in which they first appear.
    """
    holiday_names = {holiday["date"]: holiday.get("name") for holiday in holidays}
    calendar: dict[Any, dict[str, Any]] = {}

    for row in schedules:
        employee = row.get("employees")
        if not employee:
            continue

        employee_id = row["employee_id"]
        entry = calendar.get(employee_id)
        if entry is None:
            entry = {
                "employee_id": employee_id,
                "name": employee.get("name"),
                "department": employee.get("department"),
                "rank": employee.get("rank"),
                "hire_date": employee.get("hire_date"),
                "events": [],
            }
            calendar[employee_id] = entry

        event = {
            "day_of_week": row.get("day_of_week"),
            "start_time": row.get("start_time"),
            "end_time": row.get("end_time"),
            "schedule_date": row.get("schedule_date"),
            "status": row.get("status"),
            "employee_id": employee_id,
            "birthday": employee.get("birthday"),
            "notes": row.get("notes"),
        }
        if row.get("schedule_date") in holiday_names:
            event["status"] = HOLIDAY_STATUS
            event["notes"] = f"Closed for {holiday_names[row['schedule_date']]}"
        entry["events"].append(event)

    return list(calendar.values())


class CalendarService:

    @staticmethod
    def get_calendar(start: date, end: date) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        lower, upper = start.isoformat(), end.isoformat()

        def build_query():
            return (
                client.table("schedules")
                .select("*, employees(name, department, rank, hire_date, birthday)")
                .gte("schedule_date", lower)
                .lte("schedule_date", upper)
                .order("employee_id")
                .order("schedule_date")
            )

        schedules = SupabaseClient.fetch_all_pages(build_query)
        holidays = (
            client.table("holidays")
            .select("*")
            .gte("date", lower)
            .lte("date", upper)
            .execute()
            .data
            or []
        )

        logger.debug(f"Calendar {lower} to {upper}: {len(schedules)} shift(s), {len(holidays)} holiday(s)")
        return build_calendar(schedules, holidays)
