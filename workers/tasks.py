# =============================================================================
# workers/tasks.py - Celery Task Definitions
# =============================================================================
# Defines background tasks that should not hold up an API request.
#
# Tasks:
# - send_notification_email: Render and send one templated email
# - generate_schedules: Generate shifts for every employee
# - generate_schedules_for_employee: Generate shifts for one employee
# - sweep_certification_statuses: Daily recompute of certification status
# - send_overtime_alerts: Hourly check for long-open clock-ins
# =============================================================================

import logging
from typing import Any

from celery import current_task, shared_task

logger = logging.getLogger(__name__)


# =============================================================================
# Task State Updates
# =============================================================================

def update_progress(message: str) -> None:
    """Publish a progress message for GET /api/v1/tasks/{task_id}."""
    if current_task and current_task.request.id:
        current_task.update_state(state="STARTED", meta={"message": message})


# =============================================================================
# Email
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_notification_email")
def send_notification_email(
    self,
    to: str | list[str],
    subject: str,
    template_name: str,
    template_data: dict[str, Any],
) -> dict[str, Any]:
    """
    Send one templated email through Resend.

    Provider errors are retried (see task_annotations); an unknown template
    fails immediately since retrying cannot fix it.
    """
    from app.exceptions import ValidationFailedError
    from core.services.notification_service import NotificationService

    try:
        response = NotificationService.send_email(to, subject, template_name, template_data)
    except ValidationFailedError as e:
        logger.error(f"Not sending {template_name} to {to}: {e.message}")
        return {"success": False, "error": e.message}
    except Exception as e:
        logger.warning(f"Email send failed ({template_name} to {to}), retrying: {e}")
        raise self.retry(exc=e)

    return {"success": True, "response": response}


# =============================================================================
# Schedule Generation
# =============================================================================

@shared_task(bind=True, name="workers.tasks.generate_schedules")
def generate_schedules(self, weeks: int) -> dict[str, Any]:
    """
    Generate `weeks` weeks of shifts for every employee.

    Returns:
        Dict with success flag and the weeks generated, or the error
    """
    logger.info(f"Generating {weeks} week(s) of schedules")

    try:
        from core.services.schedule_service import ScheduleService

        update_progress(f"Generating {weeks} week(s) of shifts...")
        ScheduleService.generate_all(weeks)
        return {"success": True, "weeks": weeks}

    except Exception as e:
        logger.exception(f"Schedule generation failed: {e}")
        return {"success": False, "error": str(e)}


@shared_task(bind=True, name="workers.tasks.generate_schedules_for_employee")
def generate_schedules_for_employee(self, employee_name: str, weeks: int) -> dict[str, Any]:
    logger.info(f"Generating {weeks} week(s) of schedules for {employee_name}")

    try:
        from core.services.schedule_service import ScheduleService

        result = ScheduleService.generate_for_employee(employee_name, weeks)
        return {"success": True, **result}

    except Exception as e:
        logger.exception(f"Schedule generation for {employee_name} failed: {e}")
        return {"success": False, "error": str(e)}


# =============================================================================
# Certifications
# =============================================================================

@shared_task(bind=True, name="workers.tasks.sweep_certification_statuses")
def sweep_certification_statuses(self) -> dict[str, Any]:
    """Recompute Active / Expiring Soon / Expired for every certification."""
    from core.services.certification_service import CertificationService

    try:
        counts = CertificationService.sweep_statuses()
    except Exception as e:
        logger.exception(f"Certification sweep failed: {e}")
        return {"success": False, "error": str(e)}

    return {"success": True, **counts}


# =============================================================================
# Timesheets
# =============================================================================

@shared_task(bind=True, name="workers.tasks.send_overtime_alerts")
def send_overtime_alerts(self) -> dict[str, Any]:
    """Hourly check for employees still clocked in past the alert threshold."""
    from core.services.timesheet_service import TimesheetService

    try:
        alerted = TimesheetService.send_overtime_alerts(window_hours=1)
    except Exception as e:
        logger.exception(f"Overtime alert check failed: {e}")
        return {"success": False, "error": str(e)}

    return {"success": True, "alerted": alerted}
