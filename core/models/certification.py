# =============================================================================
# core/models/certification.py - Certification Schemas
# =============================================================================
# Employee certifications (range safety officer, instructor, COE, ...) with
# an expiration date. `status` is derived from the expiration by the daily
# sweep; `action_status` is free-form follow-up state set by admins.
# =============================================================================

from datetime import date
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class CertificationStatus(str, Enum):
    ACTIVE = "Active"
    EXPIRING_SOON = "Expiring Soon"
    EXPIRED = "Expired"


class TableFilter(BaseModel):
    """One column filter coming from the data table UI."""
    id: str = Field(..., min_length=1)
    value: Any


class TableSort(BaseModel):
    id: str = Field(..., min_length=1)
    desc: bool = False


class CertificationQuery(BaseModel):
    """
    Server-side paging, filtering and sorting for the certifications table.

    Example:
        {"page_index": 0, "page_size": 10,
         "filters": [{"id": "name", "value": "jan"}],
         "sorting": [{"id": "expiration", "desc": false}]}
    """
    page_index: int = Field(default=0, ge=0, alias="pageIndex")
    page_size: int = Field(default=10, ge=1, le=500, alias="pageSize")
    filters: list[TableFilter] = Field(default_factory=list)
    sorting: list[TableSort] = Field(default_factory=list)

    model_config = ConfigDict(populate_by_name=True)


class CertificationCreate(BaseModel):
    name: str = Field(..., min_length=1, description="Employee name")
    certificate: str = Field(..., min_length=1)
    number: int | None = None
    expiration: date | None = None
    status: str | None = None
    action_status: str | None = None


class CertificationUpdate(BaseModel):
    """Partial update; an update with no fields deletes the certification."""
    name: str | None = None
    certificate: str | None = None
    number: int | None = None
    expiration: date | None = None
    status: str | None = None
    action_status: str | None = None

    model_config = ConfigDict(extra="forbid")
