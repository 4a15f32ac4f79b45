# =============================================================================
# tests/test_time_off_service.py - Time Off Service Tests
# =============================================================================
# This module contains tests for:
# - Filing requests (employee lookup, copied fields, admin email)
# - The enriched pending list
# - Reviews: toggles, closing actions, leave deductions and rollback
#
# Emails are patched out; nothing here touches Celery.
# =============================================================================

from datetime import date
from unittest.mock import patch

import pytest

from app.exceptions import (
    EmployeeNotFoundError,
    InvalidTimeOffActionError,
    TimeOffRequestNotFoundError,
)
from core.models.time_off import TimeOffCreate, TimeOffReview
from core.services.time_off_service import TimeOffService
from lib.supabase_client import SupabaseClientError
from tests.conftest import NoRowsError


@pytest.fixture
def queue_email():
    with patch("core.services.time_off_service.NotificationService.queue_email") as mock:
        yield mock


@pytest.fixture
def pending_request():
    return {
        "request_id": 10,
        "employee_id": 4,
        "name": "Jane Doe",
        "start_date": "2025-02-03",
        "end_date": "2025-02-05",
        "reason": "Sick",
        "status": "pending",
        "email": "jane@example.com",
        "use_sick_time": False,
        "use_vacation_time": False,
    }


# =============================================================================
# Create
# =============================================================================

class TestCreateRequest:

    def test_copies_employee_fields(self, fake_supabase, queue_email):
        fake_supabase.on("employees", data={
            "employee_id": 4,
            "name": "Jane Doe",
            "contact_info": "jane@example.com",
            "user_uuid": "abc",
        })
        fake_supabase.on("time_off_requests", "insert", data=[{"request_id": 10}])

        request = TimeOffCreate(
            employee_name="Jane Doe",
            start_date="2025-02-03",
            end_date="2025-02-05",
            reason="Other",
            other_reason="",
        )
        result = TimeOffService.create_request(request, user_uuid="user-1")

        assert result == {"request_id": 10}
        row = fake_supabase.queries_for("time_off_requests", "insert")[0].args_of("insert")[0][0]
        assert row["employee_id"] == 4
        assert row["status"] == "pending"
        assert row["email"] == "jane@example.com"
        assert row["other_reason"] is None
        assert row["sick_time_year"] == date.today().year
        assert row["user_uuid"] == "user-1"

    def test_queues_admin_email(self, fake_supabase, queue_email):
        fake_supabase.on("employees", data={"employee_id": 4, "contact_info": None})

        TimeOffService.create_request(TimeOffCreate(
            employee_name="Jane Doe", start_date="2025-02-03", end_date="2025-02-03", reason="Doctor"
        ))

        to, subject, template, data = queue_email.call_args.args
        assert to == "admin@example.com"
        assert template == "TimeOffRequest"
        assert data["employeeName"] == "Jane Doe"
        assert "Jane Doe" in subject

    def test_unknown_employee(self, fake_supabase, queue_email):
        fake_supabase.on("employees", error=NoRowsError())

        with pytest.raises(EmployeeNotFoundError):
            TimeOffService.create_request(TimeOffCreate(
                employee_name="Ghost", start_date="2025-02-03", end_date="2025-02-03", reason="x"
            ))

        assert fake_supabase.queries_for("time_off_requests") == []
        queue_email.assert_not_called()


# =============================================================================
# Pending list
# =============================================================================

class TestListPending:

    def test_enriches_rows(self, fake_supabase, pending_request):
        fake_supabase.on("time_off_requests", data=[{**pending_request, "use_sick_time": True}])
        fake_supabase.on("employees", data={"pay_type": "hourly", "hire_date": "2020-05-01", "vacation_time": 12})
        fake_supabase.rpc_results["calculate_available_sick_time"] = 23.456
        fake_supabase.rpc_results["calculate_scheduled_hours"] = [
            {"total_scheduled_hours": "24", "sick_time_hours": "23.45", "unpaid_hours": "0.55"}
        ]

        [row] = TimeOffService.list_pending()

        assert row["available_sick_time"] == 23.46
        assert row["pay_type"] == "hourly"
        assert row["vacation_time"] == 12
        assert row["hours_breakdown"] == {
            "total_scheduled_hours": 24.0,
            "sick_time_hours": 23.45,
            "unpaid_hours": 0.55,
        }
        query = fake_supabase.queries_for("time_off_requests")[0]
        assert query.args_of("eq") == [("status", "pending")]
        assert query.kwargs_of("order") == [{"desc": False}]

    def test_defaults_when_lookups_fail(self, fake_supabase, pending_request):
        fake_supabase.on("time_off_requests", data=[pending_request])
        fake_supabase.on("employees", error=NoRowsError())
        fake_supabase.rpc_results["calculate_available_sick_time"] = RuntimeError("boom")

        [row] = TimeOffService.list_pending()

        assert row["available_sick_time"] == 0
        assert row["pay_type"] == "unknown"
        assert row["vacation_time"] == 0
        assert row["hours_breakdown"] is None

    def test_null_sick_balance_is_zero(self, fake_supabase, pending_request):
        fake_supabase.on("time_off_requests", data=[pending_request])
        fake_supabase.on("employees", data={"pay_type": "salary"})
        fake_supabase.rpc_results["calculate_available_sick_time"] = None

        [row] = TimeOffService.list_pending()

        assert row["available_sick_time"] == 0
        assert row["pay_type"] == "salary"

    def test_failed_hours_breakdown_keeps_row(self, fake_supabase, pending_request):
        second = {**pending_request, "request_id": 11}
        fake_supabase.on("time_off_requests", data=[{**pending_request, "use_sick_time": True}, second])
        fake_supabase.rpc_results["calculate_available_sick_time"] = 8
        fake_supabase.rpc_results["calculate_scheduled_hours"] = RuntimeError("rpc down")

        rows = TimeOffService.list_pending()

        assert [row["request_id"] for row in rows] == [10, 11]
        assert rows[0]["hours_breakdown"] is None
        assert rows[0]["available_sick_time"] == 8


# =============================================================================
# Review
# =============================================================================

class TestReview:

    def test_unknown_action(self, fake_supabase):
        with pytest.raises(InvalidTimeOffActionError):
            TimeOffService.review(10, TimeOffReview(action="approve"))

    def test_missing_request(self, fake_supabase):
        fake_supabase.on("time_off_requests", error=NoRowsError())

        with pytest.raises(TimeOffRequestNotFoundError):
            TimeOffService.review(10, TimeOffReview(action="deny"))

    def test_pending_updates_toggles_and_breakdown(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)
        fake_supabase.rpc_results["calculate_scheduled_hours"] = {"total_scheduled_hours": 16}
        fake_supabase.on("time_off_requests", "update", data=[{"request_id": 10, "use_sick_time": True}])

        result = TimeOffService.review(10, TimeOffReview(action="pending", use_sick_time=True))

        assert result == {"request_id": 10, "use_sick_time": True}
        changes = fake_supabase.queries_for("time_off_requests", "update")[0].args_of("update")[0][0]
        assert changes["use_sick_time"] is True
        assert changes["hours_breakdown"]["total_scheduled_hours"] == 16.0
        # Pending leaves schedules alone and sends nothing
        assert fake_supabase.queries_for("schedules") == []
        queue_email.assert_not_called()

    def test_closing_action_updates_schedules_and_request(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)
        fake_supabase.on("time_off_requests", "update", data=[{**pending_request, "status": "time_off"}])

        result = TimeOffService.review(10, TimeOffReview(action="time_off"))

        assert result["status"] == "time_off"

        schedules = fake_supabase.queries_for("schedules", "update")[0]
        assert schedules.args_of("update") == [({"status": "time_off"},)]
        assert schedules.args_of("gte") == [("schedule_date", "2025-02-03")]
        assert schedules.args_of("lte") == [("schedule_date", "2025-02-05")]

        request_update = fake_supabase.queries_for("time_off_requests", "update")[0]
        assert request_update.args_of("update") == [({"status": "time_off", "is_read": True},)]

        to, _, template, _ = queue_email.call_args.args
        assert (to, template) == ("jane@example.com", "TimeOffApproved")

    def test_custom_status_email(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)

        TimeOffService.review(10, TimeOffReview(action="Custom:Jury Duty"))

        _, subject, template, data = queue_email.call_args.args
        assert template == "CustomStatus"
        assert data["status"] == "Jury Duty"
        assert "Jury Duty" in subject

    def test_enabling_sick_time_deducts(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)

        TimeOffService.review(10, TimeOffReview(action="time_off", use_sick_time=True))

        assert ("deduct_sick_time", {
            "p_emp_id": 4,
            "p_start_date": "2025-02-03",
            "p_end_date": "2025-02-05",
            "p_request_id": 10,
        }) in fake_supabase.rpc_calls
        toggles = [
            q.args_of("update")[0][0]
            for q in fake_supabase.queries_for("time_off_requests", "update")
        ]
        assert {"use_sick_time": True, "sick_time_year": date.today().year} in toggles

    def test_failed_sick_deduction_rolls_back(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)
        fake_supabase.rpc_results["deduct_sick_time"] = RuntimeError("insufficient balance")

        with pytest.raises(SupabaseClientError):
            TimeOffService.review(10, TimeOffReview(action="time_off", use_sick_time=True))

        last_update = fake_supabase.queries_for("time_off_requests", "update")[-1]
        assert last_update.args_of("update") == [({"use_sick_time": False, "sick_time_year": None},)]
        queue_email.assert_not_called()

    def test_unchanged_toggle_does_not_deduct(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data={**pending_request, "use_vacation_time": True})

        TimeOffService.review(10, TimeOffReview(action="deny", use_vacation_time=True))

        assert all(name != "deduct_vacation_time" for name, _ in fake_supabase.rpc_calls)

    def test_enabling_vacation_time_deducts(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)
        fake_supabase.on("time_off_requests", "update", data=[{**pending_request, "status": "time_off"}])
        fake_supabase.on("time_off_requests", "update", data=[{**pending_request, "use_vacation_time": True}])
        fake_supabase.rpc_results["deduct_vacation_time"] = True

        result = TimeOffService.review(10, TimeOffReview(action="time_off", use_vacation_time=True))

        assert result["use_vacation_time"] is True
        assert ("deduct_vacation_time", {
            "p_emp_id": 4,
            "p_start_date": "2025-02-03",
            "p_end_date": "2025-02-05",
            "p_use_vacation_time": True,
        }) in fake_supabase.rpc_calls
        toggles = [
            q.args_of("update")[0][0]
            for q in fake_supabase.queries_for("time_off_requests", "update")
        ]
        assert toggles[-1] == {"use_vacation_time": True}
        to, _, template, _ = queue_email.call_args.args
        assert (to, template) == ("jane@example.com", "TimeOffApproved")

    def test_failed_vacation_deduction_rolls_back(self, fake_supabase, pending_request, queue_email):
        fake_supabase.on("time_off_requests", data=pending_request)
        fake_supabase.rpc_results["deduct_vacation_time"] = RuntimeError("no balance")

        with pytest.raises(SupabaseClientError):
            TimeOffService.review(10, TimeOffReview(action="time_off", use_vacation_time=True))

        last_update = fake_supabase.queries_for("time_off_requests", "update")[-1]
        assert last_update.args_of("update") == [({"use_vacation_time": False},)]
