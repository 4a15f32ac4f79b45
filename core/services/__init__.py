# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .employee_service import EmployeeService
from .schedule_service import ScheduleService, expand_reference_schedules, validate_weeks
from .notification_service import NotificationService
from .time_off_service import TimeOffService
from .certification_service import CertificationService, classify_expiration
from .sales_service import SalesService, aggregate_by_category, dashboard_totals
from .bulletin_service import BulletinService
from .device_service import DeviceService
from .checkout_service import CheckoutService
from .operations_service import OperationsService
from .timesheet_service import TimesheetService, summarize_hours, worked_hours
from .calendar_service import CalendarService, build_calendar
from .break_room_service import BreakRoomService, choose_assignee
from .firearms_service import FirearmsService, maintenance_batch

__all__ = [
    "EmployeeService",
    "ScheduleService",
    "expand_reference_schedules",
    "validate_weeks",
    "NotificationService",
    "TimeOffService",
    "CertificationService",
    "classify_expiration",
    "SalesService",
    "aggregate_by_category",
    "dashboard_totals",
    "BulletinService",
    "DeviceService",
    "CheckoutService",
    "OperationsService",
    "TimesheetService",
    "summarize_hours",
    "worked_hours",
    "CalendarService",
    "build_calendar",
    "BreakRoomService",
    "choose_assignee",
    "FirearmsService",
    "maintenance_batch",
]
