# =============================================================================
# core/services/certification_service.py - Certification Business Logic
# =============================================================================
# CRUD and table queries for employee certifications, plus the daily sweep
# that recomputes each row's status from its expiration date.
# =============================================================================

import logging
from datetime import date, datetime, timedelta, timezone
from typing import Any

from app.config import settings
from app.exceptions import CertificationNotFoundError
from core.models.certification import (
    CertificationCreate,
    CertificationQuery,
    CertificationStatus,
)
from lib.supabase_client import SupabaseClient
from lib.utils import parse_date

logger = logging.getLogger(__name__)

TABLE = "certifications"


def classify_expiration(
    expiration: str | date | None,
    today: date,
    warning_days: int,
) -> CertificationStatus | None:
    """
    Status implied by an expiration date, or None when there is no date.

    A certificate expiring today is still Expiring Soon; it is Expired the
    day after.
    """
    if not expiration:
        return None
    expires = parse_date(expiration)
    if expires < today:
        return CertificationStatus.EXPIRED
    if expires <= today + timedelta(days=warning_days):
        return CertificationStatus.EXPIRING_SOON
    return CertificationStatus.ACTIVE


class CertificationService:
    """
    Service for certifications.
    """

    @staticmethod
    def active_employee_names() -> list[str]:
        client = SupabaseClient.get_client()
        response = (
            client.table("employees")
            .select("name")
            .eq("status", "active")
            .execute()
        )
        return [row["name"] for row in response.data or [] if row.get("name")]

    @staticmethod
    def query(params: CertificationQuery) -> dict[str, Any]:
        """
        One page of certifications for active employees.

        Returns:
            {"data": rows, "count": total matching rows}
        """
        client = SupabaseClient.get_client()
        names = CertificationService.active_employee_names()

        query = client.table(TABLE).select("*", count="exact")

        if names:
            query = query.in_("name", names)

        for table_filter in params.filters:
            column, value = table_filter.id, table_filter.value
            if column == "action_status" and isinstance(value, list):
                query = query.in_(column, value)
            elif column == "number":
                query = query.eq(column, value)
            else:
                query = query.ilike(column, f"%{value}%")

        if params.sorting:
            for sort in params.sorting:
                query = query.order(sort.id, desc=sort.desc)
        else:
            query = query.order("expiration", desc=True)

        start = params.page_index * params.page_size
        query = query.range(start, start + params.page_size - 1)

        try:
            response = query.execute()
        except Exception as e:
            logger.error(f"Failed to query certifications: {e}")
            raise

        return {"data": response.data or [], "count": response.count or 0}

    @staticmethod
    def get(certification_id: int) -> dict[str, Any]:
        """
        Raises:
            CertificationNotFoundError: If the certification does not exist
        """
        row = SupabaseClient.fetch_one(TABLE, "id", certification_id)
        if not row:
            raise CertificationNotFoundError(certification_id)
        return row

    @staticmethod
    def create(certification: CertificationCreate) -> dict[str, Any]:
        data = certification.model_dump(mode="json")
        if not data.get("status"):
            status = classify_expiration(
                data.get("expiration"), date.today(), settings.CERTIFICATION_WARNING_DAYS
            )
            data["status"] = status.value if status else None

        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create certification for {certification.name}: {e}")
            raise

        logger.info(f"Created {certification.certificate} certification for {certification.name}")
        return response.data[0] if response.data else data

    @staticmethod
    def update(certification_id: int, changes: dict[str, Any]) -> dict[str, Any] | None:
        """
        Apply a partial update.

        An empty change set deletes the certification and returns None.

        Raises:
            CertificationNotFoundError: If the certification does not exist
        """
        current = CertificationService.get(certification_id)

        if not changes:
            CertificationService.delete(certification_id)
            return None

        client = SupabaseClient.get_client()
        try:
            response = (
                client.table(TABLE)
                .update(changes)
                .eq("id", certification_id)
                .execute()
            )
        except Exception as e:
            logger.error(f"Failed to update certification {certification_id}: {e}")
            raise

        logger.info(f"Updated certification {certification_id}: {sorted(changes)}")
        return response.data[0] if response.data else {**current, **changes}

    @staticmethod
    def delete(certification_id: int) -> None:
        """
        Raises:
            CertificationNotFoundError: If the certification does not exist
        """
        client = SupabaseClient.get_client()
        try:
            response = client.table(TABLE).delete().eq("id", certification_id).execute()
        except Exception as e:
            logger.error(f"Failed to delete certification {certification_id}: {e}")
            raise

        if not response.data:
            raise CertificationNotFoundError(certification_id)
        logger.info(f"Deleted certification {certification_id}")

    @staticmethod
    def expiring(days: int | None = None, now: datetime | None = None) -> list[dict[str, Any]]:
        """Certifications expiring within `days` (including already expired), soonest first."""
        days = settings.CERTIFICATION_WARNING_DAYS if days is None else days
        cutoff = (now or datetime.now(timezone.utc)) + timedelta(days=days)

        client = SupabaseClient.get_client()
        response = (
            client.table(TABLE)
            .select("*")
            .lt("expiration", cutoff.isoformat())
            .order("expiration", desc=False)
            .execute()
        )
        return response.data or []

    # -------------------------------------------------------------------------
    # Sweep
    # -------------------------------------------------------------------------

    @staticmethod
    def sweep_statuses(today: date | None = None) -> dict[str, int]:
        """
        Recompute every certification's status from its expiration date.

        Only rows whose status changed are written.

        Returns:
            Counts of checked and updated rows
        """
        today = today or date.today()
        warning_days = settings.CERTIFICATION_WARNING_DAYS
        client = SupabaseClient.get_client()

        rows = SupabaseClient.fetch_all_pages(
            lambda: client.table(TABLE).select("id, expiration, status").order("id")
        )

        updated = 0
        for row in rows:
            status = classify_expiration(row.get("expiration"), today, warning_days)
            if status is None or row.get("status") == status.value:
                continue
            client.table(TABLE).update({"status": status.value}).eq("id", row["id"]).execute()
            updated += 1

        logger.info(f"Certification sweep: {updated} of {len(rows)} status(es) changed")
        return {"checked": len(rows), "updated": updated}
