# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - employees.py: Employee listing and profile updates
# - schedules.py: Shifts, attendance statuses and schedule generation
# - time_off.py: Time off requests and admin review
# - timesheets.py: Clock events, VTO, hour reconciliation, pay-period summary
# - calendar.py: Staff calendar with holidays
# - certifications.py: Certification table, CRUD and expirations
# - sales.py: Sales reports
# - bulletin.py: Bulletin posts and acknowledgments
# - devices.py: Approved devices roster
# - checkout.py: Stripe class checkout and webhooks
# - operations.py: Deposits, range walks, range repairs and holidays
# - break_room.py: Weekly break room duty rotation
# - firearms.py: Rental firearm maintenance
# - notifications.py: Templated staff emails
# - tasks.py: Background task status endpoints
#
# Each router is mounted in main.py with a URL prefix.
# =============================================================================

from . import health
from . import employees
from . import schedules
from . import time_off
from . import timesheets
from . import calendar
from . import certifications
from . import sales
from . import bulletin
from . import devices
from . import checkout
from . import operations
from . import break_room
from . import firearms
from . import notifications
from . import tasks

__all__ = [
    "health",
    "employees",
    "schedules",
    "time_off",
    "timesheets",
    "calendar",
    "certifications",
    "sales",
    "bulletin",
    "devices",
    "checkout",
    "operations",
    "break_room",
    "firearms",
    "notifications",
    "tasks",
]
