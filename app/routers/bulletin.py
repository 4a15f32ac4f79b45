# =============================================================================
# app/routers/bulletin.py - Bulletin Board Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, status

from app.dependencies import AdminDep, EmployeeDep
from core.models.bulletin import AcknowledgmentCreate, BulletinPostCreate
from core.services.bulletin_service import BulletinService

router = APIRouter()


@router.get("/posts")
async def list_posts(employee: EmployeeDep):
    return BulletinService.list_posts()


@router.post("/posts", status_code=status.HTTP_201_CREATED)
async def create_post(admin: AdminDep, post: BulletinPostCreate):
    return BulletinService.create_post(post, created_by=admin.name)


@router.get("/acknowledgments")
async def list_acknowledgments(employee: EmployeeDep):
    return BulletinService.list_acknowledgments()


@router.post("/posts/{post_id}/acknowledge", status_code=status.HTTP_201_CREATED)
async def acknowledge_post(
    employee: EmployeeDep,
    acknowledgment: AcknowledgmentCreate,
    post_id: Annotated[int, Path()],
):
    """Acknowledge a post once; a repeat acknowledgment returns 400."""
    return BulletinService.acknowledge(post_id, employee, acknowledgment)


@router.get("/pending")
async def pending_posts(employee: EmployeeDep):
    """Posts the caller still has to acknowledge."""
    return BulletinService.pending_for(employee)
