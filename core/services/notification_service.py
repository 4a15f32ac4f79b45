# =============================================================================
# core/services/notification_service.py - Email Notifications
# =============================================================================
# Renders templated emails and sends them through Resend. Request handlers
# never send directly; they call queue_email(), which hands the work to the
# Celery worker so a slow mail provider cannot stall an API response.
# =============================================================================

import logging
from typing import Any

import resend

from app.config import settings
from app.exceptions import ValidationFailedError
from core.services.email_templates import DEFAULT_SENDER, SENDERS, TEMPLATES

logger = logging.getLogger(__name__)


class NotificationService:
    """
    Service for rendering and sending staff emails.
    """

    @staticmethod
    def render(template_name: str, template_data: dict[str, Any]) -> str:
        """
        Raises:
            ValidationFailedError: If the template name is unknown
        """
        template = TEMPLATES.get(template_name)
        if template is None:
            raise ValidationFailedError(
                f"Unknown email template: {template_name}",
                details={"template_name": template_name, "available": sorted(TEMPLATES)},
            )
        return template(template_data)

    @staticmethod
    def sender_for(template_name: str) -> str:
        mailbox = SENDERS.get(template_name, DEFAULT_SENDER)
        return f"TGR <{mailbox}@{settings.RESEND_DOMAIN}>"

    @staticmethod
    def send_email(
        to: str | list[str],
        subject: str,
        template_name: str,
        template_data: dict[str, Any],
    ) -> dict[str, Any]:
        """
        Render a template and send it immediately.

        Returns:
            The Resend API response (contains the message id), or a
            {"skipped": True} marker when email is not configured

        Raises:
            ValidationFailedError: If the template name is unknown
        """
        html = NotificationService.render(template_name, template_data)
        recipients = [to] if isinstance(to, str) else to

        if not settings.email_configured:
            logger.warning(f"RESEND_API_KEY not set; skipping '{subject}' to {recipients}")
            return {"skipped": True}

        resend.api_key = settings.RESEND_API_KEY
        response = resend.Emails.send({
            "from": NotificationService.sender_for(template_name),
            "to": recipients,
            "subject": subject,
            "html": html,
        })
        logger.info(f"Sent {template_name} email to {recipients}")
        return response

    @staticmethod
    def queue_email(
        to: str | None,
        subject: str,
        template_name: str,
        template_data: dict[str, Any],
    ) -> str | None:
        """
        Queue an email on the worker.

        Missing recipients and broker outages are logged, not raised: the
        business action that triggered the email has already been saved.

        Returns:
            The Celery task id, or None if nothing was queued
        """
        if not to:
            logger.info(f"No recipient for {template_name} email; not queued")
            return None

        # Render now so template errors surface in the request, not the worker
        NotificationService.render(template_name, template_data)

        from workers.tasks import send_notification_email

        try:
            result = send_notification_email.delay(to, subject, template_name, template_data)
        except Exception as e:
            logger.error(f"Failed to queue {template_name} email to {to}: {e}")
            return None

        logger.debug(f"Queued {template_name} email to {to} as task {result.id}")
        return result.id
