# =============================================================================
# core/services/schedule_service.py - Schedule Business Logic
# =============================================================================
# Shift CRUD plus schedule generation. Generation itself lives in the
# database (generate_schedules_for_all_employees); this layer validates
# parameters and, when the function cannot be called, expands reference
# schedules in Python with expand_reference_schedules().
# =============================================================================

import logging
from datetime import date, timedelta
from typing import Any, Iterable

from app.config import settings
from app.exceptions import ScheduleConflictError, ValidationFailedError
from core.models.schedule import ScheduleStatus, ScheduleType
from core.services.employee_service import EmployeeService
from core.services.notification_service import NotificationService
from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found
from lib.utils import day_of_week, last_sunday, normalize_time, to_business_date

logger = logging.getLogger(__name__)


def validate_weeks(weeks: int) -> int:
    """
    Raises:
        ValidationFailedError: If weeks is outside 1..SCHEDULE_MAX_WEEKS
    """
    if weeks < 1 or weeks > settings.SCHEDULE_MAX_WEEKS:
        raise ValidationFailedError(
            f"weeks must be between 1 and {settings.SCHEDULE_MAX_WEEKS}",
            details={"weeks": weeks},
        )
    return weeks


def expand_reference_schedules(
    employees: Iterable[dict[str, Any]],
    reference_schedules: Iterable[dict[str, Any]],
    weeks: int,
    today: date,
) -> list[dict[str, Any]]:
    """
    Turn weekly reference schedules into dated shift rows.

    Covers `weeks * 7` days starting from the Sunday on or before `today`.
    Reference days missing a start or end time produce no shift.

    Returns:
        Rows ready to insert into the schedules table
    """
    by_employee: dict[Any, dict[str, dict[str, Any]]] = {}
    for ref in reference_schedules:
        by_employee.setdefault(ref["employee_id"], {})[ref["day_of_week"]] = ref

    start = last_sunday(today)
    dates = [start + timedelta(days=i) for i in range(weeks * 7)]

    rows: list[dict[str, Any]] = []
    for employee in employees:
        templates = by_employee.get(employee["employee_id"], {})
        for day in dates:
            weekday = day_of_week(day)
            template = templates.get(weekday)
            if not template or not template.get("start_time") or not template.get("end_time"):
                continue
            rows.append({
                "employee_id": employee["employee_id"],
                "name": employee.get("name"),
                "day_of_week": weekday,
                "start_time": template["start_time"],
                "end_time": template["end_time"],
                "schedule_date": day.isoformat(),
                "status": ScheduleStatus.SCHEDULED.value,
            })
    return rows


class ScheduleService:
    """
    Service for shifts and schedule generation.
    """

    @staticmethod
    def list_schedules(schedule_type: ScheduleType | None = None) -> list[dict[str, Any]]:
        """
        Args:
            schedule_type: ACTUAL for real shifts (scheduled / added_day),
                REFERENCE for template rows, None for everything
        """
        client = SupabaseClient.get_client()
        query = client.table("schedules").select("*")

        if schedule_type == ScheduleType.ACTUAL:
            query = query.or_(
                f"status.eq.{ScheduleStatus.SCHEDULED.value},status.eq.{ScheduleStatus.ADDED_DAY.value}"
            )
        elif schedule_type == ScheduleType.REFERENCE:
            query = query.eq("status", ScheduleStatus.REFERENCE.value)

        try:
            return query.execute().data or []
        except Exception as e:
            logger.error(f"Failed to list schedules: {e}")
            raise

    @staticmethod
    def update_times(
        employee_id: int,
        schedule_date: date,
        start_time: str,
        end_time: str,
    ) -> list[dict[str, Any]]:
        """Change the hours of an existing shift. Returns the updated rows."""
        client = SupabaseClient.get_client()
        day = schedule_date.isoformat()

        try:
            response = (
                client.table("schedules")
                .update({
                    "start_time": normalize_time(start_time),
                    "end_time": normalize_time(end_time),
                    "schedule_date": day,
                })
                .eq("employee_id", employee_id)
                .eq("schedule_date", day)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update schedule for {employee_id} on {day}: {e}")
            raise

        return response.data or []

    @staticmethod
    def _find_shift(employee_id: int, day: str, select: str = "*") -> dict[str, Any] | None:
        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("schedules")
                .select(select)
                .eq("employee_id", employee_id)
                .eq("schedule_date", day)
                .single()
                .execute()
            )
            return response.data
        except Exception as e:
            if is_not_found(e):
                return None
            raise

    @staticmethod
    def add_shift(
        employee_name: str,
        shift_date: date,
        start_time: str,
        end_time: str,
    ) -> dict[str, Any]:
        """
        Add a one-off shift, overwriting any existing shift that day.

        Raises:
            EmployeeNotFoundError: If no employee has this name
        """
        employee = EmployeeService.get_employee_by_name(employee_name, select="employee_id")
        employee_id = employee["employee_id"]
        day = shift_date.isoformat()

        data = {
            "employee_id": employee_id,
            "schedule_date": day,
            "start_time": normalize_time(start_time),
            "end_time": normalize_time(end_time),
            "day_of_week": day_of_week(shift_date),
            "status": ScheduleStatus.ADDED_DAY.value,
            "name": employee_name,
        }

        existing = ScheduleService._find_shift(employee_id, day)
        client = SupabaseClient.get_client()

        try:
            if existing:
                response = (
                    client.table("schedules")
                    .update(data)
                    .eq("schedule_id", existing["schedule_id"])
                    .execute()
                )
            else:
                response = client.table("schedules").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to add shift for {employee_name} on {day}: {e}")
            raise

        logger.info(f"{'Updated' if existing else 'Added'} shift for {employee_name} on {day}")
        return response.data[0] if response.data else data

    @staticmethod
    def submit_shift(
        employee_id: int,
        day: date,
        start_time: str,
        end_time: str,
    ) -> None:
        """
        Create a regular shift.

        Raises:
            ScheduleConflictError: If the employee already has a shift that day
        """
        day_str = day.isoformat()

        if ScheduleService._find_shift(employee_id, day_str, select="schedule_id"):
            logger.warning(f"Schedule already exists for {employee_id} on {day_str}")
            raise ScheduleConflictError(employee_id, day_str)

        client = SupabaseClient.get_client()
        try:
            client.table("schedules").insert({
                "employee_id": employee_id,
                "schedule_date": day_str,
                "day_of_week": day_of_week(day),
                "start_time": normalize_time(start_time),
                "end_time": normalize_time(end_time),
                "status": ScheduleStatus.SCHEDULED.value,
            }).execute()
        except Exception as e:
            logger.error(f"Failed to insert schedule: {e}")
            raise

        logger.info(f"Submitted shift for employee {employee_id} on {day_str}")

    @staticmethod
    def set_status(employee_id: int, schedule_date: str, status: str) -> dict[str, Any]:
        """
        Set the attendance status for an employee's day.

        The incoming date is resolved to the business-timezone calendar date.
        A row is created if the employee had no shift that day.

        Returns:
            Dict with the received and stored dates
        """
        try:
            business_date = to_business_date(schedule_date, settings.BUSINESS_TIMEZONE)
        except ValueError:
            raise ValidationFailedError(
                "schedule_date must be an ISO date or timestamp",
                details={"schedule_date": schedule_date},
            )
        day = business_date.isoformat()

        existing = ScheduleService._find_shift(employee_id, day)
        client = SupabaseClient.get_client()

        try:
            if existing:
                (
                    client.table("schedules")
                    .update({"status": status})
                    .eq("employee_id", employee_id)
                    .eq("schedule_date", day)
                    .execute()
                )
            else:
                client.table("schedules").insert({
                    "employee_id": employee_id,
                    "schedule_date": day,
                    "status": status,
                    "day_of_week": day_of_week(business_date),
                }).execute()
        except Exception as e:
            logger.error(f"Failed to set status {status} for {employee_id} on {day}: {e}")
            raise

        logger.info(f"Set schedule status {status} for employee {employee_id} on {day}")

        if status == ScheduleStatus.NO_CALL_NO_SHOW.value:
            employee = SupabaseClient.fetch_employee(employee_id) or {}
            NotificationService.queue_email(
                employee.get("contact_info"),
                "No Call No Show Notification",
                "NoCallNoShow",
                {"name": employee.get("name"), "date": day},
            )

        return {
            "received_date": schedule_date,
            "stored_date": day,
            "timezone": settings.BUSINESS_TIMEZONE,
        }

    @staticmethod
    def set_status_for_range(
        employee_id: int,
        start_date: str,
        end_date: str,
        status: str,
    ) -> None:
        """Set the status of every existing shift in [start_date, end_date]."""
        client = SupabaseClient.get_client()
        (
            client.table("schedules")
            .update({"status": status})
            .eq("employee_id", employee_id)
            .gte("schedule_date", start_date)
            .lte("schedule_date", end_date)
            .execute()
        )

    # -------------------------------------------------------------------------
    # Generation
    # -------------------------------------------------------------------------

    @staticmethod
    def generate_all(weeks: int) -> Any:
        """
        Generate shifts for every employee from their reference schedules.

        When the database function cannot be called, the reference schedules
        are expanded here instead (see generate_from_reference).

        Raises:
            ValidationFailedError: If weeks is out of range
            SupabaseClientError: If both the RPC and the fallback insert fail
        """
        validate_weeks(weeks)
        logger.info(f"Generating schedules for all employees, {weeks} week(s)")
        try:
            return SupabaseClient.rpc(
                "generate_schedules_for_all_employees",
                {"weeks": weeks},
            )
        except SupabaseClientError as e:
            if e.code != "RPC_FAILED":
                raise
            logger.warning(f"Schedule RPC unavailable, expanding reference schedules: {e}")
            return {"inserted": ScheduleService.generate_from_reference(weeks)}

    @staticmethod
    def generate_for_employee(employee_name: str, weeks: int) -> dict[str, Any]:
        """
        Generate shifts for one employee, then stamp their name on the rows.

        Raises:
            EmployeeNotFoundError: If no employee has this name
            ValidationFailedError: If weeks is out of range
        """
        validate_weeks(weeks)
        employee = EmployeeService.get_employee_by_name(employee_name, select="employee_id, name")

        SupabaseClient.rpc(
            "generate_schedules_for_employees_by_name",
            {"employee_name": employee_name, "weeks": weeks},
        )

        client = SupabaseClient.get_client()
        try:
            (
                client.table("schedules")
                .update({"name": employee["name"]})
                .eq("employee_id", employee["employee_id"])
                .execute()
            )
        except Exception as e:
            # Shifts exist; only the denormalised name is missing
            logger.warning(f"Generated shifts but could not stamp name for {employee_name}: {e}")

        logger.info(f"Generated {weeks} week(s) of shifts for {employee_name}")
        return {"employee_id": employee["employee_id"], "name": employee["name"], "weeks": weeks}

    @staticmethod
    def generate_from_reference(weeks: int, today: date | None = None) -> int:
        """
        Expand reference schedules in Python and insert the resulting shifts.

        Used when the database function is unavailable (e.g. a fresh local
        database). Returns the number of inserted rows.

        Raises:
            ValidationFailedError: If weeks is out of range or nothing would be generated
        """
        validate_weeks(weeks)
        client = SupabaseClient.get_client()

        employees = client.table("employees").select("employee_id, name").execute().data or []
        references = (
            client.table("reference_schedules")
            .select("employee_id, day_of_week, start_time, end_time")
            .execute()
            .data
            or []
        )

        rows = expand_reference_schedules(employees, references, weeks, today or date.today())
        if not rows:
            raise ValidationFailedError("No schedules generated to insert")

        client.table("schedules").insert(rows).execute()
        logger.info(f"Inserted {len(rows)} generated shifts")
        return len(rows)
