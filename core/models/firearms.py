# =============================================================================
# core/models/firearms.py - Rental Firearm Maintenance Schemas
# =============================================================================

from pydantic import BaseModel


class FirearmMaintenanceUpdate(BaseModel):
    """Notes and status after cleaning a firearm. A null status is stored as ''."""
    maintenance_notes: str | None = None
    status: str | None = None
