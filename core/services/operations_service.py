# =============================================================================
# core/services/operations_service.py - Daily Operations
# =============================================================================
# End-of-day register deposits, range walk and repair reports and the
# holiday calendar. Thin wrappers over single tables.
# =============================================================================

import logging
from datetime import datetime, timezone
from typing import Any

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import ValidationFailedError
from core.models.operations import DailyDeposit, HolidayCreate, RangeRepairReport, RangeWalkReport
from lib.supabase_client import SupabaseClient
from lib.utils import to_business_date

logger = logging.getLogger(__name__)


class OperationsService:
    """
    Service for deposits, range walks and holidays.
    """

    # -------------------------------------------------------------------------
    # Deposits
    # -------------------------------------------------------------------------

    @staticmethod
    def submit_deposits(deposits: list[DailyDeposit], user: AuthUser) -> list[dict[str, Any]]:
        """Save one row per register, each stamped with the submitting user."""
        if not deposits:
            raise ValidationFailedError("At least one deposit is required")

        rows = [
            {**deposit.model_dump(by_alias=True), "user_uuid": str(user.id)}
            for deposit in deposits
        ]

        client = SupabaseClient.get_client()
        try:
            response = client.table("daily_deposits").insert(rows).execute()
        except Exception as e:
            logger.error(f"Failed to save {len(rows)} deposit(s): {e}")
            raise

        logger.info(f"Saved {len(rows)} deposit(s) from {user.display_name}")
        return response.data or rows

    @staticmethod
    def latest_deposit() -> dict[str, Any] | None:
        client = SupabaseClient.get_client()
        response = (
            client.table("daily_deposits")
            .select("*")
            .order("created_at", desc=True)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    # -------------------------------------------------------------------------
    # Range walks
    # -------------------------------------------------------------------------

    @staticmethod
    def submit_range_walk(report: RangeWalkReport, user: AuthUser) -> dict[str, Any]:
        data = {
            **report.model_dump(mode="json"),
            "user_uuid": str(user.id),
            "user_name": user.display_name,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("range_walk_reports").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to save range walk for {data['date_of_walk']}: {e}")
            raise

        logger.info(f"Range walk for {data['date_of_walk']} submitted by {data['user_name']}")
        return response.data[0] if response.data else data

    @staticmethod
    def latest_range_walk() -> dict[str, Any] | None:
        client = SupabaseClient.get_client()
        response = (
            client.table("range_walk_reports")
            .select("*")
            .order("date_of_walk", desc=True)
            .limit(1)
            .execute()
        )
        return response.data[0] if response.data else None

    # -------------------------------------------------------------------------
    # Range repairs
    # -------------------------------------------------------------------------

    @staticmethod
    def submit_range_repair(report: RangeRepairReport, user: AuthUser) -> dict[str, Any]:
        data = {
            **report.model_dump(mode="json"),
            "user_uuid": str(user.id),
            "user_name": user.display_name,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("range_repair_reports").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to save range repair for {data['date_of_repair']}: {e}")
            raise

        logger.info(f"Range repair on lanes {data['lanes_repaired']} submitted by {data['user_name']}")
        return response.data[0] if response.data else data

    @staticmethod
    def list_range_repairs(limit: int = 50) -> list[dict[str, Any]]:
        """Most recent repairs first."""
        client = SupabaseClient.get_client()
        response = (
            client.table("range_repair_reports")
            .select("*")
            .order("date_of_repair", desc=True)
            .limit(limit)
            .execute()
        )
        return response.data or []

    # -------------------------------------------------------------------------
    # Holidays)
    # -------------------------------------------------------------------------

    @staticmethod
    def list_holidays() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = client.table("holidays").select("*").order("date").execute()
        return response.data or []

    @staticmethod
    def upsert_holiday(holiday: HolidayCreate, created_by: str) -> dict[str, Any]:
        """
        Create or replace the holiday on a date.

        Raises:
            ValidationFailedError: If the date cannot be parsed
        """
        try:
            day = to_business_date(holiday.date, settings.BUSINESS_TIMEZONE)
        except ValueError:
            raise ValidationFailedError(
                "date must be an ISO date or timestamp",
                details={"date": holiday.date},
            )

        data = {
            "name": holiday.name,
            "date": day.isoformat(),
            "is_full_day": holiday.is_full_day,
            "repeat_yearly": holiday.repeat_yearly,
            "created_by": created_by,
            "updated_at": datetime.now(timezone.utc).isoformat(),
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("holidays").upsert(data, on_conflict="date").execute()
        except Exception as e:
            logger.error(f"Failed to save holiday {holiday.name} on {data['date']}: {e}")
            raise

        logger.info(f"Holiday {holiday.name} saved for {data['date']}")
        return response.data[0] if response.data else data

    @staticmethod
    def delete_holiday(holiday_id: int) -> bool:
        """Returns False when no holiday had this id."""
        client = SupabaseClient.get_client()
        response = client.table("holidays").delete().eq("id", holiday_id).execute()
        deleted = bool(response.data)
        if deleted:
            logger.info(f"Deleted holiday {holiday_id}")
        return deleted
