# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for request validation:
# - employee.py: Employee profile updates
# - schedule.py: Shifts, attendance statuses and schedule generation
# - time_off.py: Time off requests and reviews
# - certification.py: Certification CRUD and table queries
# - sales.py: Sales report requests and rows
# - bulletin.py: Bulletin posts and acknowledgments
# - checkout.py: Stripe class checkout
# - timesheet.py: Clock events, VTO and hour reconciliation
# - operations.py: Daily deposits, range walks, range repairs, holidays
# - break_room.py: Break room duty assignments
# - firearms.py: Rental firearm maintenance
# - notification.py: Templated email requests
#
# These models define the "contract" between API and clients.
# =============================================================================

from .employee import EmployeeUpdate, PayType

from .schedule import (
    AddShiftRequest,
    GenerateSchedulesRequest,
    ScheduleStatus,
    ScheduleStatusUpdate,
    ScheduleTimesUpdate,
    ScheduleType,
    SubmitShiftRequest,
)

from .time_off import (
    CUSTOM_ACTION_PREFIX,
    HoursBreakdown,
    TimeOffAction,
    TimeOffCreate,
    TimeOffReview,
    is_status_action,
)

from .certification import (
    CertificationCreate,
    CertificationQuery,
    CertificationStatus,
    CertificationUpdate,
    TableFilter,
    TableSort,
)

from .sales import (
    AggregatedSalesRequest,
    CategorySalesRow,
    DashboardTotalsRequest,
    DateRange,
    EmployeeSalesSummary,
    EmployeeSummaryRequest,
    PeriodTotalsRequest,
)

from .bulletin import AcknowledgmentCreate, BulletinPostCreate

from .checkout import CheckoutSessionRequest, CheckoutSessionResponse, VerifyPaymentRequest

from .timesheet import ReconcileHoursRequest, TimesheetEntry, VtoRequest, VtoType

from .operations import DailyDeposit, HolidayCreate, RangeRepairReport, RangeWalkReport

from .break_room import BreakRoomAssignment, BreakRoomInitialize

from .firearms import FirearmMaintenanceUpdate

from .notification import EmailTemplate, SendEmailRequest

__all__ = [
    # Employee
    "EmployeeUpdate",
    "PayType",
    # Schedule
    "AddShiftRequest",
    "GenerateSchedulesRequest",
    "ScheduleStatus",
    "ScheduleStatusUpdate",
    "ScheduleTimesUpdate",
    "ScheduleType",
    "SubmitShiftRequest",
    # Time off
    "CUSTOM_ACTION_PREFIX",
    "HoursBreakdown",
    "TimeOffAction",
    "TimeOffCreate",
    "TimeOffReview",
    "is_status_action",
    # Certification
    "CertificationCreate",
    "CertificationQuery",
    "CertificationStatus",
    "CertificationUpdate",
    "TableFilter",
    "TableSort",
    # Sales
    "AggregatedSalesRequest",
    "CategorySalesRow",
    "DashboardTotalsRequest",
    "DateRange",
    "EmployeeSalesSummary",
    "EmployeeSummaryRequest",
    "PeriodTotalsRequest",
    # Bulletin
    "AcknowledgmentCreate",
    "BulletinPostCreate",
    # Checkout
    "CheckoutSessionRequest",
    "CheckoutSessionResponse",
    "VerifyPaymentRequest",
    # Timesheets
    "ReconcileHoursRequest",
    "TimesheetEntry",
    "VtoRequest",
    "VtoType",
    # Operations
    "DailyDeposit",
    "HolidayCreate",
    "RangeRepairReport",
    "RangeWalkReport",
    # Break room
    "BreakRoomAssignment",
    "BreakRoomInitialize",
    # Firearms
    "FirearmMaintenanceUpdate",
    # Notifications
    "EmailTemplate",
    "SendEmailRequest",
]
