# =============================================================================
# core/services/timesheet_service.py - Timesheets and Hours
# =============================================================================
# Clock events, VTO entries, sick-time reconciliation of short days, the
# pay-period regular/overtime summary and the "still clocked in" alerts.
#
# Overtime rules for the summary:
#   - over 8 regular hours in a day is overtime
#   - over 40 regular hours in a week (Sunday start) is overtime
#   - over 80 regular hours in the period is overtime
# =============================================================================

import logging
from datetime import date, datetime, time, timedelta
from typing import Any, Iterable
from zoneinfo import ZoneInfo

from app.config import settings
from app.exceptions import EmployeeNotFoundError
from core.models.timesheet import ReconcileHoursRequest, TimesheetEntry, VtoRequest
from core.services.notification_service import NotificationService
from core.services.time_off_service import TimeOffService
from lib.supabase_client import SupabaseClient, is_not_found
from lib.utils import (
    last_sunday,
    minutes_to_time,
    normalize_time,
    parse_date,
    round_cents,
    time_to_minutes,
    to_number,
)

logger = logging.getLogger(__name__)

# Lunch is only planned for shifts of at least this many whole hours
LUNCH_MIN_SHIFT_HOURS = 6
LUNCH_OFFSET_MINUTES = 270
LUNCH_MINUTES = 30

REGULAR_DAY_HOURS = 8
REGULAR_WEEK_HOURS = 40
REGULAR_PERIOD_HOURS = 80


# =============================================================================
# Pure helpers
# =============================================================================

def lunch_window(start_time: str, end_time: str) -> tuple[str | None, str | None]:
    """
    Planned lunch for a shift: 4.5 hours in, 30 minutes long.

    A lunch that would start after the shift ends is pulled back to one hour
    before the end. Shifts shorter than six whole hours get no lunch.
    """
    start = time_to_minutes(start_time)
    end = time_to_minutes(end_time)
    if int((end - start) / 60) < LUNCH_MIN_SHIFT_HOURS:
        return None, None

    lunch_start = start + LUNCH_OFFSET_MINUTES
    if lunch_start > end:
        lunch_start = end - 60
    return minutes_to_time(lunch_start), minutes_to_time(lunch_start + LUNCH_MINUTES)


def worked_hours(event: dict[str, Any]) -> float | None:
    """Clock-in to clock-out minus lunch, in hours; None while still clocked in."""
    if not event.get("start_time") or not event.get("end_time"):
        return None

    minutes = time_to_minutes(event["end_time"]) - time_to_minutes(event["start_time"])
    if event.get("lunch_start") and event.get("lunch_end"):
        minutes -= time_to_minutes(event["lunch_end"]) - time_to_minutes(event["lunch_start"])
    return round_cents(minutes / 60)


def summarize_hours(events: Iterable[dict[str, Any]]) -> dict[str, dict[str, float]]:
    """
    Regular and overtime hours per employee name.

    Events are applied in date order so the weekly and period caps see the
    earlier days first. Events without a name, date or clock-out are ignored.
    """
    usable = []
    for event in events:
        hours = worked_hours(event)
        if not event.get("employee_name") or not event.get("event_date") or hours is None:
            continue
        usable.append((parse_date(event["event_date"]), event["employee_name"], hours))
    usable.sort(key=lambda item: item[0])

    daily: dict[tuple[str, date], float] = {}
    weekly: dict[tuple[str, date], float] = {}
    summaries: dict[str, dict[str, float]] = {}

    for day, name, hours in usable:
        summary = summaries.setdefault(name, {"regular_hours": 0.0, "overtime_hours": 0.0})
        day_key = (name, day)
        week_key = (name, last_sunday(day))

        regular = max(0.0, min(hours, REGULAR_DAY_HOURS - daily.get(day_key, 0.0)))
        overtime = hours - regular
        daily[day_key] = daily.get(day_key, 0.0) + regular

        week_excess = weekly.get(week_key, 0.0) + regular - REGULAR_WEEK_HOURS
        if week_excess > 0:
            shifted = min(regular, week_excess)
            regular -= shifted
            overtime += shifted
        weekly[week_key] = weekly.get(week_key, 0.0) + regular

        period_excess = summary["regular_hours"] + regular - REGULAR_PERIOD_HOURS
        if period_excess > 0:
            shifted = min(regular, period_excess)
            regular -= shifted
            overtime += shifted

        summary["regular_hours"] += regular
        summary["overtime_hours"] += overtime

    return {
        name: {key: round_cents(value) for key, value in summary.items()}
        for name, summary in summaries.items()
    }


def overdue_clock_ins(
    events: Iterable[dict[str, Any]],
    now: datetime,
    threshold_hours: float,
    window_hours: float,
) -> list[dict[str, Any]]:
    """
    Open clock events whose elapsed time falls in [threshold, threshold + window).

    The window matches how often the check runs, so each open clock-in is
    reported once.
    """
    lower = timedelta(hours=threshold_hours)
    upper = lower + timedelta(hours=window_hours)
    overdue = []
    for event in events:
        if event.get("end_time") or not event.get("start_time") or not event.get("event_date"):
            continue
        clock_in = datetime.combine(
            parse_date(event["event_date"]), time.min, tzinfo=now.tzinfo
        ) + timedelta(minutes=time_to_minutes(event["start_time"]))
        if lower <= now - clock_in < upper:
            overdue.append({**event, "clock_in": clock_in})
    return overdue


# =============================================================================
# Service
# =============================================================================

class TimesheetService:
    """
    Service for clock events, VTO and hour reconciliation.
    """

    @staticmethod
    def list_timesheets(start: date | None = None, end: date | None = None) -> list[dict[str, Any]]:
        """
        Clock events, newest first, with the employee's name and pay type.

        Each row gains worked_hours (None while the employee is clocked in).
        """
        client = SupabaseClient.get_client()

        def build_query():
            query = client.table("employee_clock_events").select(
                "*, employees!inner(employee_id, name, pay_type)"
            )
            if start:
                query = query.gte("event_date", start.isoformat())
            if end:
                query = query.lte("event_date", end.isoformat())
            return query.order("event_date", desc=True)

        rows = SupabaseClient.fetch_all_pages(build_query)

        timesheets = []
        for row in rows:
            employee = row.pop("employees", None) or {}
            timesheets.append({
                **row,
                "employee_name": employee.get("name") or row.get("employee_name"),
                "pay_type": employee.get("pay_type"),
                "worked_hours": worked_hours(row),
            })
        return timesheets

    @staticmethod
    def save_entry(entry: TimesheetEntry) -> dict[str, Any]:
        """
        Create or overwrite the clock event for an employee's day.

        Raises:
            EmployeeNotFoundError: If the employee id is unknown
        """
        employee = SupabaseClient.fetch_employee(entry.employee_id)
        if not employee:
            raise EmployeeNotFoundError(entry.employee_id)

        day = entry.event_date.isoformat()
        data = {
            "employee_id": entry.employee_id,
            "employee_name": employee.get("name"),
            "event_date": day,
            "start_time": normalize_time(entry.start_time),
            "lunch_start": normalize_time(entry.lunch_start) if entry.lunch_start else None,
            "lunch_end": normalize_time(entry.lunch_end) if entry.lunch_end else None,
            "end_time": normalize_time(entry.end_time) if entry.end_time else None,
        }

        client = SupabaseClient.get_client()
        existing = None
        try:
            existing = (
                client.table("employee_clock_events")
                .select("id")
                .match({"employee_id": entry.employee_id, "event_date": day})
                .single()
                .execute()
                .data
            )
        except Exception as e:
            if not is_not_found(e):
                raise

        if existing:
            response = (
                client.table("employee_clock_events")
                .update(data)
                .eq("id", existing["id"])
                .execute()
            )
        else:
            response = client.table("employee_clock_events").insert(data).execute()

        logger.info(
            f"{'Updated' if existing else 'Added'} timesheet for employee {entry.employee_id} on {day}"
        )
        return response.data[0] if response.data else data

    @staticmethod
    def record_vto(request: VtoRequest) -> dict[str, Any]:
        """
        Insert one VTO event per requested day, using that day's shift times.

        Days are processed independently: a failure on one day is reported
        in `errors` and the rest still go through.
        """
        client = SupabaseClient.get_client()
        results: list[dict[str, Any]] = []
        errors: list[dict[str, Any]] = []

        for day in request.event_date:
            day_str = day.isoformat()
            try:
                shifts = (
                    client.table("schedules")
                    .select("start_time, end_time, status")
                    .eq("employee_id", request.employee_id)
                    .eq("schedule_date", day_str)
                    .limit(1)
                    .execute()
                    .data
                )
                shift = shifts[0] if shifts else None
                if not shift or not shift.get("start_time") or not shift.get("end_time"):
                    results.append({
                        "date": day_str,
                        "status": "skipped",
                        "message": "No schedule found for this date",
                    })
                    continue

                lunch_start, lunch_end = lunch_window(shift["start_time"], shift["end_time"])
                row = {
                    "employee_id": request.employee_id,
                    "employee_name": request.employee_name,
                    "event_date": day_str,
                    "start_time": shift["start_time"],
                    "end_time": shift["end_time"],
                    "lunch_start": lunch_start,
                    "lunch_end": lunch_end,
                    "total_hours": "0",
                    "vto_type": request.vto_type,
                }
                response = client.table("employee_vto_events").insert(row).execute()
                results.append({
                    "date": day_str,
                    "status": "success",
                    "data": response.data[0] if response.data else row,
                })
            except Exception as e:
                logger.error(f"VTO entry for employee {request.employee_id} on {day_str} failed: {e}")
                errors.append({"date": day_str, "error": str(e)})

        logger.info(
            f"VTO for {request.employee_name}: {len(results)} processed, {len(errors)} failed"
        )
        return {"results": results, "errors": errors, "success": not errors}

    @staticmethod
    def reconcile_hours(request: ReconcileHoursRequest) -> dict[str, float]:
        """
        Charge a short day to sick time and record the reconciliation.

        Returns:
            sick_time_usage, regular_time, overtime and the remaining
            available_sick_time

        Raises:
            EmployeeNotFoundError: If the employee id is unknown
        """
        employee = SupabaseClient.fetch_one(
            "employees", "employee_id", request.employee_id, select="sick_time_used"
        )
        if not employee:
            raise EmployeeNotFoundError(request.employee_id)

        client = SupabaseClient.get_client()
        sick_time_used = to_number(employee.get("sick_time_used")) + request.hours_to_reconcile

        try:
            (
                client.table("employees")
                .update({"sick_time_used": sick_time_used})
                .eq("employee_id", request.employee_id)
                .execute()
            )
            client.table("reconciled_hours").insert({
                "employee_id": request.employee_id,
                "event_date": request.event_date.isoformat(),
                "hours_to_reconcile": request.hours_to_reconcile,
            }).execute()
        except Exception as e:
            logger.error(f"Failed to reconcile hours for employee {request.employee_id}: {e}")
            raise

        total = request.worked_hours
        logger.info(
            f"Reconciled {request.hours_to_reconcile}h of sick time for employee "
            f"{request.employee_id} on {request.event_date}"
        )
        return {
            "sick_time_usage": request.hours_to_reconcile,
            "regular_time": round_cents(min(total, REGULAR_DAY_HOURS)),
            "overtime": round_cents(max(total - REGULAR_DAY_HOURS, 0)),
            "available_sick_time": TimeOffService.available_sick_time(request.employee_id),
        }

    @staticmethod
    def pay_period_summary(start: date, end: date) -> list[dict[str, Any]]:
        """Regular and overtime hours per employee for clock events in [start, end]."""
        events = TimesheetService.list_timesheets(start, end)
        summaries = summarize_hours(events)
        return [
            {"employee_name": name, **summary, "start_date": start, "end_date": end}
            for name, summary in sorted(summaries.items())
        ]

    # -------------------------------------------------------------------------
    # Overtime alerts
    # -------------------------------------------------------------------------

    @staticmethod
    def send_overtime_alerts(window_hours: float = 1, now: datetime | None = None) -> int:
        """
        Email employees (and the admin inbox) about clock-ins left open too long.

        Returns:
            Number of employees alerted
        """
        now = now or datetime.now(ZoneInfo(settings.BUSINESS_TIMEZONE))
        threshold = settings.OVERTIME_ALERT_HOURS
        client = SupabaseClient.get_client()

        # Yesterday's rows cover shifts that crossed midnight
        events = (
            client.table("employee_clock_events")
            .select("*, employees(name, contact_info)")
            .gte("event_date", (now.date() - timedelta(days=1)).isoformat())
            .is_("end_time", "null")
            .execute()
            .data
            or []
        )

        overdue = overdue_clock_ins(events, now, threshold, window_hours)
        for event in overdue:
            employee = event.get("employees") or {}
            name = employee.get("name") or event.get("employee_name")
            data = {
                "employeeName": name,
                "clockInTime": event["clock_in"].strftime("%I:%M %p"),
                "currentTime": now.strftime("%I:%M %p"),
                "hours": f"{threshold:g}",
            }
            NotificationService.queue_email(
                employee.get("contact_info"),
                "You are still clocked in",
                "EmployeeOvertimeAlert",
                data,
            )
            NotificationService.queue_email(
                settings.ADMIN_NOTIFICATION_EMAIL,
                f"Overtime alert: {name}",
                "AdminOvertimeAlert",
                data,
            )

        if overdue:
            logger.info(f"Sent overtime alerts for {len(overdue)} open clock-in(s)")
        return len(overdue)
