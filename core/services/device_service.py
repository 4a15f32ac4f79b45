# =============================================================================
# core/services/device_service.py - Approved Devices Roster
# =============================================================================
# The roster of handguns approved for sale changes a few times a year, so
# the unfiltered first page is kept in a process-wide cache for a day.
# Filtered queries always go to the database.
# =============================================================================

import logging
from typing import Any

from app.config import settings
from lib.cache import TTLValue
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

ALL_MANUFACTURERS = "all-manufacturers"
DEFAULT_LIMIT = 50

devices_cache = TTLValue(ttl_seconds=settings.APPROVED_DEVICES_CACHE_TTL)


class DeviceService:
    """
    Service for the approved devices roster.
    """

    @staticmethod
    def list_devices(
        limit: int = DEFAULT_LIMIT,
        offset: int = 0,
        manufacturer: str | None = None,
        model: str | None = None,
    ) -> dict[str, Any]:
        """
        Returns:
            {"rows": [...], "total": matching row count}
        """
        filter_manufacturer = bool(manufacturer) and manufacturer != ALL_MANUFACTURERS
        cacheable = not filter_manufacturer and not model and offset == 0 and limit == DEFAULT_LIMIT

        if cacheable:
            cached = devices_cache.get()
            if cached is not None:
                logger.debug("Serving approved devices from cache")
                return cached

        client = SupabaseClient.get_client()
        query = (
            client.table("approved_devices")
            .select("manufacturer, model, type, description", count="exact")
            .order("manufacturer")
        )
        if filter_manufacturer:
            query = query.eq("manufacturer", manufacturer)
        if model:
            query = query.ilike("model", f"%{model}%")

        try:
            response = query.range(offset, offset + limit - 1).execute()
        except Exception as e:
            logger.error(f"Failed to list approved devices: {e}")
            raise

        result = {"rows": response.data or [], "total": response.count or 0}

        if cacheable:
            devices_cache.set(result)
        return result
