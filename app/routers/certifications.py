# =============================================================================
# app/routers/certifications.py - Certification Endpoints
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Query, Response, status

from app.dependencies import AdminDep, EmployeeDep
from core.models.certification import (
    CertificationCreate,
    CertificationQuery,
    CertificationUpdate,
)
from core.services.certification_service import CertificationService

router = APIRouter()


@router.post("/query")
async def query_certifications(employee: EmployeeDep, params: CertificationQuery):
    """Server-side paging for the certifications table. Returns {data, count}."""
    return CertificationService.query(params)


@router.get("/expiring")
async def list_expiring(
    employee: EmployeeDep,
    days: Annotated[int | None, Query(ge=0, le=3650)] = None,
):
    return CertificationService.expiring(days)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_certification(admin: AdminDep, certification: CertificationCreate):
    return CertificationService.create(certification)


@router.patch("/{certification_id}")
async def update_certification(
    admin: AdminDep,
    update: CertificationUpdate,
    certification_id: Annotated[int, Path()],
):
    """Partial update. A body with no fields deletes the certification (204)."""
    row = CertificationService.update(
        certification_id, update.model_dump(mode="json", exclude_unset=True)
    )
    if row is None:
        return Response(status_code=status.HTTP_204_NO_CONTENT)
    return row


@router.delete("/{certification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_certification(admin: AdminDep, certification_id: Annotated[int, Path()]):
    CertificationService.delete(certification_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
