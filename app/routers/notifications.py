# =============================================================================
# app/routers/notifications.py - Email Notification Endpoints
# =============================================================================

import logging

from fastapi import APIRouter, HTTPException, status

from app.dependencies import AdminDep
from core.models.notification import SendEmailRequest
from core.services.notification_service import NotificationService

logger = logging.getLogger(__name__)

router = APIRouter()


@router.post("/email", status_code=status.HTTP_202_ACCEPTED)
async def send_email(admin: AdminDep, request: SendEmailRequest):
    """
    Queue a templated email.

    Returns the task id; poll GET /api/v1/tasks/{task_id} for delivery.
    """
    task_id = NotificationService.queue_email(
        request.email,
        request.subject,
        request.template_name.value,
        request.template_data,
    )
    if task_id is None:
        raise HTTPException(
            status_code=503,
            detail="Failed to queue email. Is Redis running?",
        )
    return {"message": "Email queued", "task_id": task_id}
