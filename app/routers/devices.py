# =============================================================================
# app/routers/devices.py - Approved Devices Endpoint
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Query

from app.dependencies import EmployeeDep
from core.services.device_service import DeviceService

router = APIRouter()


@router.get("")
async def list_approved_devices(
    employee: EmployeeDep,
    limit: Annotated[int, Query(ge=1, le=1000)] = 50,
    offset: Annotated[int, Query(ge=0)] = 0,
    manufacturer: str | None = None,
    model: str | None = None,
):
    """
    Page through the approved handgun roster.

    manufacturer=all-manufacturers is the same as no manufacturer filter;
    model matches case-insensitively on a substring.
    """
    return DeviceService.list_devices(
        limit=limit, offset=offset, manufacturer=manufacturer, model=model
    )
