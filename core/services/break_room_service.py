# =============================================================================
# core/services/break_room_service.py - Break Room Duty Rotation
# =============================================================================
# Sales and Range staff take the break room in turn. Everyone gets one week
# per calendar year before anyone repeats, and nobody gets two weeks in a
# row. Only employees with a shift that week are eligible.
# =============================================================================

import logging
from datetime import date, timedelta
from typing import Any, Callable, Iterable

from app.exceptions import ValidationFailedError
from core.models.break_room import BreakRoomAssignment
from core.models.schedule import ScheduleStatus
from lib.supabase_client import SupabaseClient
from lib.utils import last_sunday, parse_date

logger = logging.getLogger(__name__)

ELIGIBLE_DEPARTMENTS = ["Sales", "Range"]
INITIALIZE_DEPARTMENT = "Sales"
WORKING_STATUSES = [ScheduleStatus.SCHEDULED.value, ScheduleStatus.ADDED_DAY.value]


def week_dates(friday: date) -> list[date]:
    """Monday through Friday of the week ending on `friday`."""
    monday = friday - timedelta(days=4)
    return [monday + timedelta(days=offset) for offset in range(5)]


def closest_to_friday(days: Iterable[date], friday: date) -> date | None:
    """The day nearest `friday`; the earlier day wins a tie."""
    closest = None
    for day in sorted(days):
        if closest is None or abs(day - friday) < abs(closest - friday):
            closest = day
    return closest


def choose_assignee(
    employee_ids: list[int],
    assigned_this_year: list[int],
    is_available: Callable[[int], bool],
) -> int | None:
    """
    Next employee in the rotation.

    `assigned_this_year` is in assignment order. Employees not yet assigned
    this year come first; once everyone has had a turn a new rotation starts,
    skipping whoever was assigned last.
    """
    assigned = set(assigned_this_year)
    for employee_id in employee_ids:
        if employee_id not in assigned and is_available(employee_id):
            return employee_id

    if len(assigned) < len(employee_ids):
        return None

    last_assigned = assigned_this_year[-1] if assigned_this_year else None
    for employee_id in employee_ids:
        if employee_id != last_assigned and is_available(employee_id):
            return employee_id
    return None


def first_friday(year: int) -> date:
    """Friday of the week (Sunday start) containing January 1st."""
    return last_sunday(date(year, 1, 1)) + timedelta(days=5)


class BreakRoomService:

    @staticmethod
    def list_for_week(week_start: date) -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table("break_room_duty")
            .select("*")
            .eq("week_start", week_start.isoformat())
            .execute()
        )
        return response.data or []

    @staticmethod
    def last_assignment() -> dict[str, Any] | None:
        client = SupabaseClient.get_client()
        response = (
            client.table("break_room_duty")
            .select("employee_id, week_start, duty_date")
            .order("week_start", desc=True)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    @staticmethod
    def _scheduled_days(days: list[date]) -> dict[int, list[date]]:
        """Working days per employee among `days`."""
        client = SupabaseClient.get_client()
        response = (
            client.table("schedules")
            .select("employee_id, schedule_date")
            .in_("schedule_date", [day.isoformat() for day in days])
            .in_("status", WORKING_STATUSES)
            .execute()
        )
        scheduled: dict[int, list[date]] = {}
        for row in response.data or []:
            scheduled.setdefault(row["employee_id"], []).append(parse_date(row["schedule_date"]))
        return scheduled

    @staticmethod
    def assign(request: BreakRoomAssignment, created_by: str) -> dict[str, Any]:
        """
        Record the duty for a week.

        Raises:
            ValidationFailedError: If schedules are checked and nobody eligible
                works that week
        """
        employee_id = request.employee_id
        duty_date = request.duty_date

        if request.check_schedule:
            scheduled = BreakRoomService._scheduled_days(week_dates(request.duty_date))
            closest = closest_to_friday(scheduled.get(employee_id, []), request.duty_date)

            if closest is None:
                employee_id = BreakRoomService._next_in_rotation(request.duty_date.year, scheduled)
                if employee_id is None:
                    raise ValidationFailedError(
                        "No eligible employees found for break room duty this week",
                        details={"week_start": request.week_start.isoformat()},
                    )
                logger.info(f"Employee {request.employee_id} is off that week; rotating to {employee_id}")
                closest = closest_to_friday(scheduled[employee_id], request.duty_date)
            duty_date = closest

        row = {
            "week_start": request.week_start.isoformat(),
            "employee_id": employee_id,
            "duty_date": duty_date.isoformat(),
            "year": duty_date.year,
            "created_by": created_by,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("break_room_duty").insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to assign break room duty for {row['week_start']}: {e}")
            raise

        logger.info(f"Break room duty for week of {row['week_start']}: employee {employee_id} on {row['duty_date']}")
        return response.data[0] if response.data else row

    @staticmethod
    def _next_in_rotation(year: int, scheduled: dict[int, list[date]]) -> int | None:
        client = SupabaseClient.get_client()
        employees = (
            client.table("employees")
            .select("employee_id")
            .in_("department", ELIGIBLE_DEPARTMENTS)
            .eq("status", "active")
            .order("employee_id")
            .execute()
            .data
            or []
        )
        assignments = (
            client.table("break_room_duty")
            .select("employee_id")
            .eq("year", year)
            .order("created_at")
            .execute()
            .data
            or []
        )
        return choose_assignee(
            [employee["employee_id"] for employee in employees],
            [assignment["employee_id"] for assignment in assignments],
            lambda employee_id: bool(scheduled.get(employee_id)),
        )

    @staticmethod
    def initialize_year(year: int, created_by: str) -> dict[str, Any]:
        """
        Assign every Friday of `year` to Sales staff by rank.

        Each week goes to the next employee in rank order who works that
        Friday; weeks where none of them work are skipped.

        Raises:
            ValidationFailedError: If there are no Sales employees
        """
        client = SupabaseClient.get_client()
        employees = (
            client.table("employees")
            .select("employee_id, rank")
            .eq("department", INITIALIZE_DEPARTMENT)
            .order("rank")
            .execute()
            .data
            or []
        )
        if not employees:
            raise ValidationFailedError("No sales employees found", details={"year": year})

        friday = first_friday(year)
        last_day = date(year, 12, 31)
        employee_ids = [employee["employee_id"] for employee in employees]

        def build_query():
            return (
                client.table("schedules")
                .select("employee_id, schedule_date")
                .in_("employee_id", employee_ids)
                .in_("status", WORKING_STATUSES)
                .gte("schedule_date", friday.isoformat())
                .lte("schedule_date", (last_day + timedelta(days=6)).isoformat())
            )

        working = {
            (row["employee_id"], parse_date(row["schedule_date"]))
            for row in SupabaseClient.fetch_all_pages(build_query)
        }

        duties = []
        skipped_weeks = 0
        index = 0
        while friday - timedelta(days=5) <= last_day:
            assigned = False
            for _ in range(len(employee_ids)):
                employee_id = employee_ids[index]
                index = (index + 1) % len(employee_ids)
                if (employee_id, friday) in working:
                    duties.append({
                        "week_start": (friday - timedelta(days=5)).isoformat(),
                        "employee_id": employee_id,
                        "duty_date": friday.isoformat(),
                        "year": year,
                        "created_by": created_by,
                    })
                    assigned = True
                    break
            if not assigned:
                skipped_weeks += 1
            friday += timedelta(weeks=1)

        data: list[dict[str, Any]] = []
        if duties:
            try:
                data = client.table("break_room_duty").insert(duties).execute().data or duties
            except Exception as e:
                logger.error(f"Failed to initialize break room duties for {year}: {e}")
                raise

        logger.info(f"Initialized {len(duties)} break room duties for {year}, skipped {skipped_weeks} week(s)")
        return {"created": len(duties), "skipped_weeks": skipped_weeks, "data": data}
