# =============================================================================
# app/routers/firearms.py - Firearm Maintenance Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path

from app.dependencies import EmployeeDep, UserDep
from core.models.firearms import FirearmMaintenanceUpdate
from core.services.firearms_service import FirearmsService

router = APIRouter()


@router.get("")
async def list_firearms(employee: EmployeeDep):
    return FirearmsService.list_firearms()


@router.patch("/{firearm_id}")
async def update_maintenance(
    employee: EmployeeDep,
    firearm_id: Annotated[int, Path()],
    update: FirearmMaintenanceUpdate,
):
    """Record notes and status after cleaning; stamps the maintenance date."""
    return FirearmsService.update_maintenance(firearm_id, update)


@router.post("/list")
async def maintenance_list(employee: EmployeeDep, user: UserDep):
    """The caller's saved cleaning list, or a new one of the most overdue guns."""
    return FirearmsService.maintenance_list(str(user.id))
