# =============================================================================
# core/services/bulletin_service.py - Bulletin Board
# =============================================================================
# Announcements and their read receipts. A post that requires
# acknowledgment stays in an employee's pending list until they submit a
# short summary of it.
# =============================================================================

import logging
from typing import Any

from app.auth.models import CurrentEmployee
from app.exceptions import ValidationFailedError
from core.models.bulletin import AcknowledgmentCreate, BulletinPostCreate
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)


class BulletinService:
    """
    Service for bulletin posts and acknowledgments.
    """

    @staticmethod
    def list_posts() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table("bulletin_posts")
            .select("*")
            .order("created_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def create_post(post: BulletinPostCreate, created_by: str) -> dict[str, Any]:
        client = SupabaseClient.get_client()
        data = {**post.model_dump(), "created_by": created_by}

        try:
            response = client.table("bulletin_posts").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to create bulletin post '{post.title}': {e}")
            raise

        logger.info(f"Bulletin post '{post.title}' created by {created_by}")
        return response.data[0] if response.data else data

    @staticmethod
    def list_acknowledgments() -> list[dict[str, Any]]:
        client = SupabaseClient.get_client()
        response = (
            client.table("bulletin_acknowledgments")
            .select("*")
            .order("acknowledged_at", desc=True)
            .execute()
        )
        return response.data or []

    @staticmethod
    def acknowledge(
        post_id: int,
        employee: CurrentEmployee,
        acknowledgment: AcknowledgmentCreate,
    ) -> dict[str, Any]:
        """
        Record that an employee read a post.

        Raises:
            ValidationFailedError: If the employee already acknowledged it
        """
        client = SupabaseClient.get_client()

        existing = (
            client.table("bulletin_acknowledgments")
            .select("id")
            .eq("post_id", post_id)
            .eq("employee_id", employee.employee_id)
            .execute()
            .data
        )
        if existing:
            raise ValidationFailedError(
                "Post already acknowledged",
                details={"post_id": post_id, "employee_id": employee.employee_id},
            )

        data = {
            "post_id": post_id,
            "employee_id": employee.employee_id,
            "employee_name": employee.name,
            "summary": acknowledgment.summary,
        }
        try:
            response = client.table("bulletin_acknowledgments").insert(data).execute()
        except Exception as e:
            logger.error(f"Failed to acknowledge post {post_id} for {employee.name}: {e}")
            raise

        logger.info(f"{employee.name} acknowledged bulletin post {post_id}")
        return response.data[0] if response.data else data

    @staticmethod
    def pending_for(employee: CurrentEmployee) -> list[dict[str, Any]]:
        """Posts the employee must still acknowledge, newest first."""
        client = SupabaseClient.get_client()

        posts = (
            client.table("bulletin_posts")
            .select("*")
            .eq("requires_acknowledgment", True)
            .order("created_at", desc=True)
            .execute()
            .data
            or []
        )
        acknowledged = {
            row["post_id"]
            for row in (
                client.table("bulletin_acknowledgments")
                .select("post_id")
                .eq("employee_id", employee.employee_id)
                .execute()
                .data
                or []
            )
        }

        return [
            post for post in posts
            if post["id"] not in acknowledged
            and (
                not post.get("required_departments")
                or employee.department in post["required_departments"]
            )
        ]
