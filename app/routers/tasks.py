# =============================================================================
# app/routers/tasks.py - Background Task Status Endpoints
# =============================================================================
# Schedule generation and email sends can run on the Celery worker; the
# endpoints that queue them return a task id that is polled here.
# =============================================================================

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Path
from pydantic import BaseModel

from app.dependencies import AdminDep, EmployeeDep

logger = logging.getLogger(__name__)

router = APIRouter()

STATE_MESSAGES = {
    "PENDING": "Waiting in queue...",
    "STARTED": "Running...",
    "RETRY": "Retrying...",
    "SUCCESS": "Complete",
    "FAILURE": "Failed",
    "REVOKED": "Cancelled",
}


# =============================================================================
# Response Models
# =============================================================================

class TaskStatusResponse(BaseModel):
    """Response model for task status."""
    task_id: str
    status: str
    message: str | None = None
    result: Any = None
    error: str | None = None


# =============================================================================
# Endpoints
# =============================================================================

@router.get("/{task_id}", response_model=TaskStatusResponse)
async def get_task_status(
    employee: EmployeeDep,
    task_id: Annotated[str, Path(description="Celery task ID")],
):
    """
    Get the status of a background task.

    SUCCESS includes the task's return value; FAILURE includes the error.
    Unknown ids report PENDING (Celery cannot tell them apart).
    """
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)
        status = result.status
    except Exception as e:
        logger.error(f"Error getting task status: {e}")
        raise HTTPException(status_code=503, detail=f"Task backend unavailable: {e}")

    response = TaskStatusResponse(
        task_id=task_id,
        status=status,
        message=STATE_MESSAGES.get(status),
    )
    if status == "SUCCESS":
        response.result = result.result
    elif status == "FAILURE":
        response.error = str(result.result) if result.result else "Unknown error"
    return response


@router.delete("/{task_id}")
async def cancel_task(
    admin: AdminDep,
    task_id: Annotated[str, Path(description="Celery task ID")],
):
    """Revoke a task that has not finished yet."""
    try:
        from workers.celery_app import celery_app

        result = celery_app.AsyncResult(task_id)

        if result.status in ("SUCCESS", "FAILURE"):
            return {
                "task_id": task_id,
                "message": f"Task already {result.status.lower()}, cannot cancel",
                "cancelled": False,
            }

        result.revoke(terminate=True)
    except Exception as e:
        logger.error(f"Error cancelling task: {e}")
        raise HTTPException(status_code=503, detail=f"Failed to cancel task: {e}")

    logger.info(f"Task {task_id} cancelled by {admin.name}")
    return {"task_id": task_id, "message": "Task cancelled", "cancelled": True}
