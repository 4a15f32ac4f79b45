# =============================================================================
# app/routers/time_off.py - Time Off Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import AdminDep, UserDep
from core.models.time_off import TimeOffCreate, TimeOffReview
from core.services.time_off_service import TimeOffService

router = APIRouter()


@router.post("")
async def create_time_off_request(user: UserDep, request: TimeOffCreate):
    """File a request. 404 when employee_name does not match an employee."""
    row = TimeOffService.create_request(request, user_uuid=str(user.id))
    return {"success": True, "data": row}


@router.get("/pending")
async def list_pending_requests(admin: AdminDep):
    return TimeOffService.list_pending()


@router.post("/{request_id}/review")
async def review_request(
    admin: AdminDep,
    review: TimeOffReview,
    request_id: Annotated[int, Path(description="Time off request ID")],
):
    """
    Approve, deny or annotate a request.

    Actions: pending, time_off, deny, called_out, left_early or
    "Custom:<label>". Returns the updated request row.
    """
    return TimeOffService.review(request_id, review)
