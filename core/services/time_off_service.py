# =============================================================================
# core/services/time_off_service.py - Time Off Business Logic
# =============================================================================
# Requests are filed by employees and reviewed by admins. Reviewing is the
# only place leave balances change: sick and vacation hours are deducted by
# database functions (deduct_sick_time / deduct_vacation_time) so the
# balance arithmetic stays next to the data.
# =============================================================================

import logging
from datetime import date
from typing import Any

from app.config import settings
from app.exceptions import (
    EmployeeNotFoundError,
    InvalidTimeOffActionError,
    TimeOffRequestNotFoundError,
)
from core.models.time_off import (
    CUSTOM_ACTION_PREFIX,
    HoursBreakdown,
    TimeOffAction,
    TimeOffCreate,
    TimeOffReview,
    is_status_action,
)
from core.services.notification_service import NotificationService
from core.services.schedule_service import ScheduleService
from lib.supabase_client import SupabaseClient, SupabaseClientError, is_not_found
from lib.utils import round_cents, to_number

logger = logging.getLogger(__name__)

# Email sent to the employee for each closing action
ACTION_EMAILS = {
    TimeOffAction.TIME_OFF.value: ("TimeOffApproved", "Time Off Request Approved"),
    TimeOffAction.DENY.value: ("TimeOffDenied", "Time Off Request Denied"),
    TimeOffAction.CALLED_OUT.value: ("CalledOut", "Called Out"),
    TimeOffAction.LEFT_EARLY.value: ("LeftEarly", "Left Early"),
}


class TimeOffService:
    """
    Service for time off requests and leave balances.
    """

    # -------------------------------------------------------------------------
    # Requests
    # -------------------------------------------------------------------------

    @staticmethod
    def create_request(request: TimeOffCreate, user_uuid: str | None = None) -> dict[str, Any]:
        """
        File a time off request for an employee looked up by name.

        The admin notification email is queued after the row is saved.

        Raises:
            EmployeeNotFoundError: If no employee has this name
        """
        employee = SupabaseClient.fetch_employee_by_name(
            request.employee_name,
            select="employee_id, name, contact_info, user_uuid",
        )
        if not employee:
            raise EmployeeNotFoundError(request.employee_name)

        client = SupabaseClient.get_client()
        row = {
            "employee_id": employee["employee_id"],
            "name": request.employee_name,
            "start_date": request.start_date.isoformat(),
            "end_date": request.end_date.isoformat(),
            "reason": request.reason,
            "other_reason": request.other_reason or None,
            "status": "pending",
            "email": employee.get("contact_info"),
            "sick_time_year": date.today().year,
            "user_uuid": user_uuid or employee.get("user_uuid"),
        }

        try:
            response = client.table("time_off_requests").insert(row).execute()
        except Exception as e:
            logger.error(f"Failed to create time off request for {request.employee_name}: {e}")
            raise

        created = response.data[0] if response.data else row
        logger.info(
            f"Time off requested by {request.employee_name}: "
            f"{row['start_date']} to {row['end_date']}"
        )

        NotificationService.queue_email(
            settings.ADMIN_NOTIFICATION_EMAIL,
            f"New Time Off Request from {request.employee_name}",
            "TimeOffRequest",
            {
                "employeeName": request.employee_name,
                "startDate": row["start_date"],
                "endDate": row["end_date"],
                "reason": request.reason,
                "other_reason": request.other_reason,
            },
        )
        return created

    @staticmethod
    def get_request(request_id: int) -> dict[str, Any]:
        """
        Raises:
            TimeOffRequestNotFoundError: If the request does not exist
        """
        row = SupabaseClient.fetch_one("time_off_requests", "request_id", request_id)
        if not row:
            raise TimeOffRequestNotFoundError(request_id)
        return row

    @staticmethod
    def list_pending() -> list[dict[str, Any]]:
        """
        Pending requests, oldest first, enriched for the review screen.

        Each row gains available_sick_time, pay_type, hire_date,
        vacation_time and (when sick time is requested) hours_breakdown.
        """
        client = SupabaseClient.get_client()

        try:
            response = (
                client.table("time_off_requests")
                .select("*")
                .eq("status", "pending")
                .order("created_at", desc=False)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to list pending time off requests: {e}")
            raise

        return [TimeOffService._enrich(row) for row in response.data or []]

    @staticmethod
    def _enrich(row: dict[str, Any]) -> dict[str, Any]:
        employee_id = row.get("employee_id")
        enriched = dict(row)

        enriched["available_sick_time"] = TimeOffService.available_sick_time(employee_id)

        employee = None
        try:
            employee = (
                SupabaseClient.get_client()
                .table("employees")
                .select("pay_type, hire_date, vacation_time")
                .eq("employee_id", employee_id)
                .single()
                .execute()
                .data
            )
        except Exception as e:
            if not is_not_found(e):
                raise
        employee = employee or {}

        enriched["pay_type"] = employee.get("pay_type") or "unknown"
        enriched["hire_date"] = employee.get("hire_date")
        enriched["vacation_time"] = employee.get("vacation_time") or 0

        enriched["hours_breakdown"] = None
        if row.get("use_sick_time"):
            try:
                enriched["hours_breakdown"] = TimeOffService.scheduled_hours(
                    employee_id, row["start_date"], row["end_date"]
                ).model_dump()
            except SupabaseClientError as e:
                logger.warning(
                    f"Could not calculate scheduled hours for request {row.get('request_id')}: {e}"
                )
        return enriched

    # -------------------------------------------------------------------------
    # Balances
    # -------------------------------------------------------------------------

    @staticmethod
    def available_sick_time(employee_id: int) -> float:
        """Sick hours available to an employee; 0 when the balance can't be read."""
        try:
            hours = SupabaseClient.rpc("calculate_available_sick_time", {"p_emp_id": employee_id})
        except Exception as e:
            logger.warning(f"Could not read sick time for employee {employee_id}: {e}")
            return 0
        return round_cents(to_number(hours))

    @staticmethod
    def scheduled_hours(employee_id: int, start_date: str, end_date: str) -> HoursBreakdown:
        data = SupabaseClient.rpc(
            "calculate_scheduled_hours",
            {"p_employee_id": employee_id, "p_start_date": start_date, "p_end_date": end_date},
        )
        if isinstance(data, list):
            data = data[0] if data else None
        return HoursBreakdown.from_rpc(data)

    # -------------------------------------------------------------------------
    # Review
    # -------------------------------------------------------------------------

    @staticmethod
    def review(request_id: int, review: TimeOffReview) -> dict[str, Any]:
        """
        Apply an admin decision to a request.

        - action "pending": only the leave toggles change; the request stays
          open and the hours breakdown is stored when sick time is used.
        - any closing action: schedules in the range take the action as their
          status and the request is closed. Toggle changes then deduct leave
          through the database; a failed deduction reverts the toggle.

        Raises:
            TimeOffRequestNotFoundError: If the request does not exist
            InvalidTimeOffActionError: If the action is not recognised
        """
        action = review.action
        if action != TimeOffAction.PENDING.value and not is_status_action(action):
            raise InvalidTimeOffActionError(action)

        current = TimeOffService.get_request(request_id)

        if action == TimeOffAction.PENDING.value:
            return TimeOffService._update_pending(current, review)

        client = SupabaseClient.get_client()

        ScheduleService.set_status_for_range(
            current["employee_id"], current["start_date"], current["end_date"], action
        )

        try:
            response = (
                client.table("time_off_requests")
                .update({"status": action, "is_read": True})
                .eq("request_id", request_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to close time off request {request_id}: {e}")
            raise
        updated = response.data[0] if response.data else {**current, "status": action}

        if review.use_sick_time is not None and review.use_sick_time != current.get("use_sick_time"):
            updated = TimeOffService._apply_sick_time(current, review.use_sick_time)

        if (
            review.use_vacation_time is not None
            and review.use_vacation_time != current.get("use_vacation_time")
        ):
            updated = TimeOffService._apply_vacation_time(current, review.use_vacation_time)

        logger.info(f"Time off request {request_id} reviewed: {action}")
        TimeOffService._notify_employee(current, action)
        return updated

    @staticmethod
    def _update_pending(current: dict[str, Any], review: TimeOffReview) -> dict[str, Any]:
        request_id = current["request_id"]
        changes: dict[str, Any] = {}
        if review.use_sick_time is not None:
            changes["use_sick_time"] = review.use_sick_time
        if review.use_vacation_time is not None:
            changes["use_vacation_time"] = review.use_vacation_time

        use_sick_time = changes.get("use_sick_time", current.get("use_sick_time"))
        if use_sick_time:
            breakdown = TimeOffService.scheduled_hours(
                current["employee_id"], current["start_date"], current["end_date"]
            )
            changes["hours_breakdown"] = breakdown.model_dump()

        if not changes:
            return current

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table("time_off_requests")
                .update(changes)
                .eq("request_id", request_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update time off request {request_id}: {e}")
            raise

        return response.data[0] if response.data else {**current, **changes}

    @staticmethod
    def _apply_sick_time(current: dict[str, Any], enabled: bool) -> dict[str, Any]:
        request_id = current["request_id"]
        client = SupabaseClient.get_client()

        response = (
            client.table("time_off_requests")
            .update({
                "use_sick_time": enabled,
                "sick_time_year": date.today().year if enabled else None,
            })
            .eq("request_id", request_id)
            .execute()
        )
        updated = response.data[0] if response.data else current

        if not enabled:
            return updated

        try:
            SupabaseClient.rpc(
                "deduct_sick_time",
                {
                    "p_emp_id": current["employee_id"],
                    "p_start_date": current["start_date"],
                    "p_end_date": current["end_date"],
                    "p_request_id": request_id,
                },
            )
        except Exception as e:
            logger.error(f"Sick time deduction failed for request {request_id}: {e}")
            (
                client.table("time_off_requests")
                .update({"use_sick_time": False, "sick_time_year": None})
                .eq("request_id", request_id)
                .execute()
            )
            raise

        logger.info(f"Deducted sick time for request {request_id}")
        return updated

    @staticmethod
    def _apply_vacation_time(current: dict[str, Any], enabled: bool) -> dict[str, Any]:
        request_id = current["request_id"]
        client = SupabaseClient.get_client()

        response = (
            client.table("time_off_requests")
            .update({"use_vacation_time": enabled})
            .eq("request_id", request_id)
            .execute()
        )
        updated = response.data[0] if response.data else current

        if not enabled:
            return updated

        try:
            SupabaseClient.rpc(
                "deduct_vacation_time",
                {
                    "p_emp_id": current["employee_id"],
                    "p_start_date": current["start_date"],
                    "p_end_date": current["end_date"],
                    "p_use_vacation_time": True,
                },
            )
        except Exception as e:
            logger.error(f"Vacation time deduction failed for request {request_id}: {e}")
            (
                client.table("time_off_requests")
                .update({"use_vacation_time": False})
                .eq("request_id", request_id)
                .execute()
            )
            raise

        logger.info(f"Deducted vacation time for request {request_id}")
        return updated

    @staticmethod
    def _notify_employee(request: dict[str, Any], action: str) -> None:
        if action.startswith(CUSTOM_ACTION_PREFIX):
            label = action[len(CUSTOM_ACTION_PREFIX):].strip()
            template, subject = "CustomStatus", f"Schedule Update: {label}"
            data = {"name": request.get("name"), "date": request.get("start_date"), "status": label}
        else:
            template, subject = ACTION_EMAILS[action]
            data = {
                "name": request.get("name"),
                "startDate": request.get("start_date"),
                "endDate": request.get("end_date"),
                "date": request.get("start_date"),
            }
        NotificationService.queue_email(request.get("email"), subject, template, data)
