# =============================================================================
# tests/test_notifications.py - Email Template and Delivery Tests
# =============================================================================
# Resend and the Celery task are patched; these tests check what would be
# sent, not that it arrives.
# =============================================================================

from unittest.mock import MagicMock, patch

import pytest

from app.config import settings
from app.exceptions import ValidationFailedError
from core.services.email_templates import TEMPLATES
from core.services.notification_service import NotificationService


class TestTemplates:

    @pytest.mark.parametrize("name", sorted(TEMPLATES))
    def test_every_template_renders_empty_data(self, name):
        html = NotificationService.render(name, {})
        assert html.startswith("<!DOCTYPE html>")

    def test_time_off_request_content(self):
        html = NotificationService.render("TimeOffRequest", {
            "employeeName": "Jane Doe",
            "startDate": "2025-02-03",
            "endDate": "2025-02-05",
            "reason": "Other",
            "other_reason": "Moving day",
        })
        assert "Jane Doe" in html
        assert "Monday, February 3, 2025" in html
        assert "Moving day" in html

    def test_values_are_escaped(self):
        html = NotificationService.render("SuggestionReply", {"replyText": "<script>x</script>"})
        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_unparseable_date_shown_as_is(self):
        html = NotificationService.render("CalledOut", {"name": "Jane", "date": "next Tuesday"})
        assert "next Tuesday" in html

    def test_no_call_no_show_content(self):
        html = NotificationService.render("NoCallNoShow", {"name": "Jane Doe", "date": "2025-02-03"})
        assert "Jane Doe" in html
        assert "No Call No Show" in html
        assert "Monday, February 3, 2025" in html

    @pytest.mark.parametrize("name", ["AdminOvertimeAlert", "EmployeeOvertimeAlert"])
    def test_overtime_alert_content(self, name):
        html = NotificationService.render(name, {
            "employeeName": "Jane Doe",
            "clockInTime": "08:00 AM",
            "currentTime": "05:15 PM",
            "hours": "9",
        })
        assert "Jane Doe" in html
        assert "08:00 AM" in html
        assert "over 9 hours" in " ".join(html.split())

    def test_unknown_template(self):
        with pytest.raises(ValidationFailedError):
            NotificationService.render("Birthday", {})


class TestSender:

    def test_suggestion_replies_use_their_own_mailbox(self, monkeypatch):
        monkeypatch.setattr(settings, "RESEND_DOMAIN", "mail.range.test")
        assert NotificationService.sender_for("SuggestionReply") == "TGR <suggestions@mail.range.test>"
        assert NotificationService.sender_for("CalledOut") == "TGR <scheduling@mail.range.test>"


class TestSendEmail:

    def test_skipped_without_api_key(self, monkeypatch):
        monkeypatch.setattr(settings, "RESEND_API_KEY", "")
        with patch("resend.Emails.send") as send:
            assert NotificationService.send_email("a@example.com", "Hi", "CalledOut", {}) == {"skipped": True}
        send.assert_not_called()

    def test_sends_through_resend(self, monkeypatch):
        monkeypatch.setattr(settings, "RESEND_API_KEY", "re_test")
        with patch("resend.Emails.send", return_value={"id": "msg_1"}) as send:
            result = NotificationService.send_email("a@example.com", "Hi", "ShiftAdded", {"name": "Jane"})

        assert result == {"id": "msg_1"}
        params = send.call_args.args[0]
        assert params["to"] == ["a@example.com"]
        assert params["subject"] == "Hi"
        assert "Shift Added" in params["html"]


class TestQueueEmail:

    def test_no_recipient(self):
        with patch("workers.tasks.send_notification_email.delay") as delay:
            assert NotificationService.queue_email(None, "Hi", "CalledOut", {}) is None
        delay.assert_not_called()

    def test_queues_task(self):
        with patch("workers.tasks.send_notification_email.delay", return_value=MagicMock(id="task-1")) as delay:
            task_id = NotificationService.queue_email("a@example.com", "Hi", "CalledOut", {"name": "Jane"})

        assert task_id == "task-1"
        delay.assert_called_once_with("a@example.com", "Hi", "CalledOut", {"name": "Jane"})

    def test_broker_down(self):
        with patch("workers.tasks.send_notification_email.delay", side_effect=ConnectionError("redis")):
            assert NotificationService.queue_email("a@example.com", "Hi", "CalledOut", {}) is None

    def test_bad_template_raises_before_queueing(self):
        with patch("workers.tasks.send_notification_email.delay") as delay:
            with pytest.raises(ValidationFailedError):
                NotificationService.queue_email("a@example.com", "Hi", "Nope", {})
        delay.assert_not_called()
