# =============================================================================
# tests/test_timesheet_service.py - Timesheet Service Tests
# =============================================================================
# This module contains tests for:
# - Lunch planning and worked hours
# - The daily / weekly / period overtime split
# - Clock event upserts, VTO entries and sick-time reconciliation
# - The "still clocked in" alert window
# =============================================================================

from datetime import date, datetime
from unittest.mock import patch
from zoneinfo import ZoneInfo

import pytest

from app.config import settings
from app.exceptions import EmployeeNotFoundError
from core.models.timesheet import ReconcileHoursRequest, TimesheetEntry, VtoRequest
from core.services.timesheet_service import (
    TimesheetService,
    lunch_window,
    overdue_clock_ins,
    summarize_hours,
    worked_hours,
)
from tests.conftest import NoRowsError

LA = ZoneInfo("America/Los_Angeles")


def shift(day: str, start: str = "09:00:00", end: str | None = "17:00:00", name: str = "Jane Doe"):
    return {"employee_name": name, "event_date": day, "start_time": start, "end_time": end}


@pytest.fixture
def queue_email():
    with patch("core.services.timesheet_service.NotificationService.queue_email") as mock:
        yield mock


# =============================================================================
# Pure helpers
# =============================================================================

class TestLunchWindow:

    def test_four_and_a_half_hours_in(self):
        assert lunch_window("09:00:00", "17:30:00") == ("13:30:00", "14:00:00")

    def test_short_shift_has_no_lunch(self):
        assert lunch_window("09:00", "14:59") == (None, None)


class TestWorkedHours:

    def test_lunch_is_subtracted(self):
        event = {
            "start_time": "09:00:00",
            "lunch_start": "13:30:00",
            "lunch_end": "14:00:00",
            "end_time": "17:30:00",
        }
        assert worked_hours(event) == 8.0

    def test_still_clocked_in(self):
        assert worked_hours({"start_time": "09:00:00", "end_time": None}) is None


class TestSummarizeHours:

    def test_daily_overtime(self):
        summary = summarize_hours([shift("2025-01-06", end="19:00:00")])
        assert summary == {"Jane Doe": {"regular_hours": 8.0, "overtime_hours": 2.0}}

    def test_sixth_day_in_a_week_is_overtime(self):
        days = [f"2025-01-{day:02d}" for day in range(5, 11)]  # Sunday to Friday
        summary = summarize_hours([shift(day) for day in days])
        assert summary["Jane Doe"] == {"regular_hours": 40.0, "overtime_hours": 8.0}

    def test_period_cap(self):
        days = [
            f"2025-01-{day:02d}"
            for week_start in (6, 13, 20)
            for day in range(week_start, week_start + 5)
        ]
        summary = summarize_hours([shift(day) for day in days])
        assert summary["Jane Doe"] == {"regular_hours": 80.0, "overtime_hours": 40.0}

    def test_open_and_nameless_events_ignored(self):
        summary = summarize_hours([
            shift("2025-01-06", end=None),
            {**shift("2025-01-07"), "employee_name": None},
            shift("2025-01-08", name="Sam Roe"),
        ])
        assert list(summary) == ["Sam Roe"]

    def test_employees_kept_apart(self):
        summary = summarize_hours([
            shift("2025-01-06", end="18:00:00"),
            shift("2025-01-06", name="Sam Roe"),
        ])
        assert summary["Jane Doe"]["overtime_hours"] == 1.0
        assert summary["Sam Roe"]["overtime_hours"] == 0.0


class TestOverdueClockIns:

    def test_only_the_current_window_is_reported(self):
        now = datetime(2025, 1, 6, 18, 30, tzinfo=LA)
        events = [
            shift("2025-01-06", start="09:00:00", end=None),          # 9.5h
            shift("2025-01-06", start="08:00:00", end=None),          # 10.5h, already alerted
            shift("2025-01-06", start="10:00:00", end=None),          # 8.5h, not yet
            shift("2025-01-06", start="09:00:00", end="17:00:00"),    # clocked out
        ]

        overdue = overdue_clock_ins(events, now, threshold_hours=9, window_hours=1)

        assert [event["start_time"] for event in overdue] == ["09:00:00"]
        assert overdue[0]["clock_in"] == datetime(2025, 1, 6, 9, 0, tzinfo=LA)

    def test_shift_from_yesterday(self):
        now = datetime(2025, 1, 6, 8, 30, tzinfo=LA)
        events = [shift("2025-01-05", start="23:00:00", end=None)]

        assert len(overdue_clock_ins(events, now, threshold_hours=9, window_hours=1)) == 1


# =============================================================================
# Service
# =============================================================================

class TestListTimesheets:

    def test_flattens_employee_and_adds_hours(self, fake_supabase):
        fake_supabase.on("employee_clock_events", data=[{
            "id": 1,
            "employee_id": 4,
            "event_date": "2025-01-06",
            "start_time": "09:00:00",
            "end_time": "17:00:00",
            "employees": {"employee_id": 4, "name": "Jane Doe", "pay_type": "hourly"},
        }])

        rows = TimesheetService.list_timesheets(date(2025, 1, 1), date(2025, 1, 15))

        assert rows[0]["employee_name"] == "Jane Doe"
        assert rows[0]["pay_type"] == "hourly"
        assert rows[0]["worked_hours"] == 8.0
        assert "employees" not in rows[0]
        query = fake_supabase.queries_for("employee_clock_events")[0]
        assert query.args_of("gte") == [("event_date", "2025-01-01")]
        assert query.args_of("lte") == [("event_date", "2025-01-15")]

    def test_pay_period_summary(self, fake_supabase):
        fake_supabase.on("employee_clock_events", data=[
            {**shift("2025-01-06", end="18:00:00"), "employees": {"name": "Jane Doe"}},
        ])

        summary = TimesheetService.pay_period_summary(date(2025, 1, 1), date(2025, 1, 15))

        assert summary == [{
            "employee_name": "Jane Doe",
            "regular_hours": 8.0,
            "overtime_hours": 1.0,
            "start_date": date(2025, 1, 1),
            "end_date": date(2025, 1, 15),
        }]


class TestSaveEntry:

    def entry(self, **overrides):
        return TimesheetEntry(**{
            "employee_id": 4,
            "event_date": "2025-01-06",
            "start_time": "09:00",
            "end_time": "17:00",
            **overrides,
        })

    def test_overwrites_existing_day(self, fake_supabase):
        fake_supabase.on("employees", data={"employee_id": 4, "name": "Jane Doe"})
        fake_supabase.on("employee_clock_events", data={"id": 99})
        fake_supabase.on("employee_clock_events", "update", data=[{"id": 99}])

        assert TimesheetService.save_entry(self.entry()) == {"id": 99}

        update = fake_supabase.queries_for("employee_clock_events", "update")[0]
        assert update.args_of("eq") == [("id", 99)]
        data = update.args_of("update")[0][0]
        assert data["start_time"] == "09:00:00"
        assert data["employee_name"] == "Jane Doe"
        assert data["lunch_start"] is None

    def test_inserts_new_day(self, fake_supabase):
        fake_supabase.on("employees", data={"employee_id": 4, "name": "Jane Doe"})
        fake_supabase.on("employee_clock_events", error=NoRowsError())

        row = TimesheetService.save_entry(self.entry(lunch_start="13:00", lunch_end="13:30"))

        assert row["lunch_end"] == "13:30:00"
        assert len(fake_supabase.queries_for("employee_clock_events", "insert")) == 1
        assert fake_supabase.queries_for("employee_clock_events", "update") == []

    def test_unknown_employee(self, fake_supabase):
        fake_supabase.on("employees", error=NoRowsError())

        with pytest.raises(EmployeeNotFoundError):
            TimesheetService.save_entry(self.entry())


class TestRecordVto:

    def test_scheduled_days_inserted_and_others_skipped(self, fake_supabase):
        fake_supabase.on("schedules", data=[{"start_time": "09:00:00", "end_time": "17:30:00"}])
        fake_supabase.on("schedules", data=[])

        result = TimesheetService.record_vto(VtoRequest(
            employee_id=4,
            employee_name="Jane Doe",
            event_date=["2025-01-06", "2025-01-07"],
        ))

        assert result["success"] is True
        assert [r["status"] for r in result["results"]] == ["success", "skipped"]
        row = fake_supabase.queries_for("employee_vto_events", "insert")[0].args_of("insert")[0][0]
        assert row["vto_type"] == "called_out"
        assert row["lunch_start"] == "13:30:00"
        assert row["total_hours"] == "0"

    def test_one_failed_day_does_not_stop_the_rest(self, fake_supabase):
        fake_supabase.on("schedules", error=RuntimeError("timeout"))
        fake_supabase.on("schedules", data=[{"start_time": "09:00:00", "end_time": "13:00:00"}])

        result = TimesheetService.record_vto(VtoRequest(
            employee_id=4,
            employee_name="Jane Doe",
            event_date=["2025-01-06", "2025-01-07"],
            status="no_call_no_show",
        ))

        assert result["success"] is False
        assert result["errors"] == [{"date": "2025-01-06", "error": "timeout"}]
        assert result["results"][0]["status"] == "success"
        row = fake_supabase.queries_for("employee_vto_events", "insert")[0].args_of("insert")[0][0]
        assert row["vto_type"] == "no_call_no_show"
        assert row["lunch_start"] is None

    def test_single_date_accepted(self):
        request = VtoRequest(employee_id=4, employee_name="Jane Doe", event_date="2025-01-06", status="odd")
        assert request.event_date == [date(2025, 1, 6)]
        assert request.vto_type == "called_out"


class TestReconcileHours:

    def test_charges_sick_time(self, fake_supabase):
        fake_supabase.on("employees", data={"sick_time_used": "4"})
        fake_supabase.rpc_results["calculate_available_sick_time"] = 18

        result = TimesheetService.reconcile_hours(ReconcileHoursRequest(
            employeeId=4,
            eventDate="2025-01-06",
            hoursToReconcile=2,
            calculatedTotalHours="6:00",
        ))

        assert result == {
            "sick_time_usage": 2,
            "regular_time": 6.0,
            "overtime": 0.0,
            "available_sick_time": 18.0,
        }
        update = fake_supabase.queries_for("employees", "update")[0]
        assert update.args_of("update")[0][0] == {"sick_time_used": 6.0}
        insert = fake_supabase.queries_for("reconciled_hours", "insert")[0]
        assert insert.args_of("insert")[0][0]["event_date"] == "2025-01-06"

    def test_long_day_splits_overtime(self, fake_supabase):
        fake_supabase.on("employees", data={"sick_time_used": None})

        result = TimesheetService.reconcile_hours(ReconcileHoursRequest(
            employee_id=4,
            event_date=date(2025, 1, 6),
            hours_to_reconcile=0.5,
            calculated_total_hours="9:30",
        ))

        assert result["regular_time"] == 8.0
        assert result["overtime"] == 1.5
        assert result["available_sick_time"] == 0

    def test_unknown_employee(self, fake_supabase):
        fake_supabase.on("employees", error=NoRowsError())

        with pytest.raises(EmployeeNotFoundError):
            TimesheetService.reconcile_hours(ReconcileHoursRequest(
                employee_id=99,
                event_date=date(2025, 1, 6),
                hours_to_reconcile=1,
                calculated_total_hours="7:00",
            ))


class TestOvertimeAlerts:

    def test_alerts_employee_and_admin(self, fake_supabase, queue_email):
        fake_supabase.on("employee_clock_events", data=[
            {
                **shift("2025-01-06", start="09:00:00", end=None),
                "employees": {"name": "Jane Doe", "contact_info": "jane@example.com"},
            },
            {
                **shift("2025-01-06", start="12:00:00", end=None, name="Sam Roe"),
                "employees": {"name": "Sam Roe", "contact_info": "sam@example.com"},
            },
        ])
        now = datetime(2025, 1, 6, 18, 30, tzinfo=LA)

        assert TimesheetService.send_overtime_alerts(now=now) == 1

        to_employee, to_admin = queue_email.call_args_list
        assert to_employee.args[0] == "jane@example.com"
        assert to_employee.args[2] == "EmployeeOvertimeAlert"
        assert to_employee.args[3]["clockInTime"] == "09:00 AM"
        assert to_admin.args[0] == settings.ADMIN_NOTIFICATION_EMAIL
        assert to_admin.args[2] == "AdminOvertimeAlert"

        query = fake_supabase.queries_for("employee_clock_events")[0]
        assert query.args_of("is_") == [("end_time", "null")]
        assert query.args_of("gte") == [("event_date", "2025-01-05")]

    def test_nothing_open(self, fake_supabase, queue_email):
        assert TimesheetService.send_overtime_alerts(now=datetime(2025, 1, 6, 18, 30, tzinfo=LA)) == 0
        queue_email.assert_not_called()
