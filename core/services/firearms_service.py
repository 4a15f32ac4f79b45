# =============================================================================
# core/services/firearms_service.py - Rental Firearm Maintenance
# =============================================================================
# Rental guns are cleaned in batches: each staff member gets a list of the
# handguns and long guns that have gone longest without maintenance. The
# list is kept per user so it survives a reload.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from app.exceptions import FirearmNotFoundError
from core.models.firearms import FirearmMaintenanceUpdate
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

HANDGUN = "handgun"
LONG_GUN = "long gun"
PER_TYPE = 13


def oldest_first(firearms: list[dict[str, Any]], firearm_type: str, limit: int = PER_TYPE) -> list[dict[str, Any]]:
    """Firearms of one type, never-maintained first, then by last maintenance."""
    matching = [f for f in firearms if f.get("firearm_type") == firearm_type]
    matching.sort(key=lambda f: (f.get("last_maintenance_date") is not None, str(f.get("last_maintenance_date") or "")))
    return matching[:limit]


def maintenance_batch(firearms: list[dict[str, Any]]) -> list[dict[str, Any]]:
    return oldest_first(firearms, HANDGUN) + oldest_first(firearms, LONG_GUN)


class FirearmsService:

    @staticmethod
    def list_firearms() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table("firearms_maintenance")
            .select("*")
            .order("firearm_type")
            .order("firearm_name")
            .execute()
        )
        return response.data or []

    @staticmethod
    def update_maintenance(firearm_id: int, update: FirearmMaintenanceUpdate) -> dict[str, Any]:
        """
        Record a cleaning.

        Raises:
            FirearmNotFoundError: If no firearm has this id
        """
        data = {
            "maintenance_notes": update.maintenance_notes,
            "status": update.status if update.status is not None else "",
            "last_maintenance_date": datetime.now(timezone.utc).isoformat(),
        }

        client = SupabaseClient.get_client()
        response = client.table("firearms_maintenance").update(data).eq("id", firearm_id).execute()
        if not response.data:
            raise FirearmNotFoundError(firearm_id)

        logger.info(f"Maintenance recorded for firearm {firearm_id}")
        return response.data[0]

    @staticmethod
    def maintenance_list(user_id: str) -> dict[str, Any]:
        """
        The caller's cleaning list, generating and saving one if they have none.

        Returns:
            {"generated": bool, "firearms": [...]}
        """
        existing = SupabaseClient.fetch_one("persisted_firearms_list", "user_uuid", user_id)
        if existing:
            return {"generated": False, "firearms": existing.get("firearms_list") or []}

        client = SupabaseClient.get_client()
        firearms = client.table("firearms_maintenance").select("*").execute().data or []
        batch = maintenance_batch(firearms)

        try:
            client.table("persisted_firearms_list").insert(
                {"user_uuid": user_id, "firearms_list": batch}
            ).execute()
        except Exception as e:
            logger.error(f"Failed to save firearms list for {user_id}: {e}")
            raise

        logger.info(f"Generated firearms maintenance list of {len(batch)} for {user_id}")
        return {"generated": True, "firearms": batch}
