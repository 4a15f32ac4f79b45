"""
Email templates for staff notifications.
Each template takes the template_data dict sent by the caller and returns HTML.
"""

from html import escape
from typing import Any, Callable

from lib.utils import format_long_date

THEME = {
    "primary": "#1f2937",
    "accent": "#b91c1c",
    "background": "#f3f4f6",
    "text": "#111827",
    "muted": "#6b7280",
}


def _text(data: dict[str, Any], key: str, default: str = "") -> str:
    value = data.get(key)
    return escape(str(value)) if value not in (None, "") else default


def _date(data: dict[str, Any], key: str) -> str:
    value = data.get(key)
    if isinstance(value, str):
        try:
            return escape(format_long_date(value))
        except ValueError:
            return escape(value)
    return escape(str(value or ""))


def base_template(title: str, body: str) -> str:
    """Wrap template content in the shared layout."""
    return f"""<!DOCTYPE html>
<html>
  <body style="margin:0;padding:24px;background:{THEME['background']};font-family:Helvetica,Arial,sans-serif;color:{THEME['text']};">
    <table role="presentation" width="100%" style="max-width:600px;margin:0 auto;background:#ffffff;border-radius:8px;">
      <tr>
        <td style="padding:20px 24px;background:{THEME['primary']};color:#ffffff;border-radius:8px 8px 0 0;">
          <h1 style="margin:0;font-size:20px;">{title}</h1>
        </td>
      </tr>
      <tr>
        <td style="padding:24px;font-size:15px;line-height:1.5;">
          {body}
        </td>
      </tr>
      <tr>
        <td style="padding:12px 24px;font-size:12px;color:{THEME['muted']};">
          This is an automated message from the range scheduling system.
        </td>
      </tr>
    </table>
  </body>
</html>"""


def time_off_request_template(data: dict[str, Any]) -> str:
    other = _text(data, "other_reason")
    other_line = f"<p><strong>Details:</strong> {other}</p>" if other else ""
    body = f"""
      <p><strong>{_text(data, 'employeeName')}</strong> has requested time off.</p>
      <p><strong>From:</strong> {_date(data, 'startDate')}<br>
         <strong>To:</strong> {_date(data, 'endDate')}</p>
      <p><strong>Reason:</strong> {_text(data, 'reason')}</p>
      {other_line}
      <p>Review pending requests in the time off review page.</p>"""
    return base_template("New Time Off Request", body)


def time_off_approved_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>Your time off request from <strong>{_date(data, 'startDate')}</strong>
         to <strong>{_date(data, 'endDate')}</strong> has been approved.</p>"""
    return base_template("Time Off Approved", body)


def time_off_denied_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>Your time off request from <strong>{_date(data, 'startDate')}</strong>
         to <strong>{_date(data, 'endDate')}</strong> has been denied.</p>
      <p>Please speak with a manager if you have questions.</p>"""
    return base_template("Time Off Denied", body)


def called_out_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>This confirms you called out on <strong>{_date(data, 'date')}</strong>.</p>"""
    return base_template("Called Out", body)


def left_early_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>This confirms you left early on <strong>{_date(data, 'date')}</strong>.</p>"""
    return base_template("Left Early", body)


def custom_status_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>Your schedule for <strong>{_date(data, 'date')}</strong> has been marked as
         <strong>{_text(data, 'status')}</strong>.</p>"""
    return base_template("Schedule Update", body)


def shift_added_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>A shift has been added for you on <strong>{_date(data, 'date')}</strong>
         from {_text(data, 'startTime')} to {_text(data, 'endTime')}.</p>"""
    return base_template("Shift Added", body)


def shift_updated_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'name', 'there')},</p>
      <p>Your shift on <strong>{_date(data, 'date')}</strong> has changed.</p>
      <p><strong>Was:</strong> {_text(data, 'oldStartTime')} - {_text(data, 'oldEndTime')}<br>
         <strong>Now:</strong> {_text(data, 'newStartTime')} - {_text(data, 'newEndTime')}</p>"""
    return base_template("Shift Updated", body)


def suggestion_reply_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'employeeName', 'there')},</p>
      <p>Thanks for your suggestion:</p>
      <blockquote style="border-left:3px solid {THEME['accent']};margin:0;padding-left:12px;">
        {_text(data, 'originalSuggestion')}
      </blockquote>
      <p><strong>{_text(data, 'repliedBy', 'Management')}</strong> replied:</p>
      <p>{_text(data, 'replyText')}</p>"""
    return base_template("Reply to Your Suggestion", body)


def no_call_no_show_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>This email confirms that <strong>{_text(data, 'name', 'you')}</strong> has been marked as
         No Call No Show for the shift on <strong>{_date(data, 'date')}</strong>.</p>
      <p>If this is an error or you need to discuss it, contact your manager immediately.</p>"""
    return base_template("No Call No Show", body)


def admin_overtime_alert_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>An employee has been clocked in for over {_text(data, 'hours', '9')} hours.</p>
      <p><strong>Employee:</strong> {_text(data, 'employeeName')}<br>
         <strong>Clock-in time:</strong> {_text(data, 'clockInTime')}<br>
         <strong>Current time:</strong> {_text(data, 'currentTime')}</p>
      <p>Please check on this employee and make sure they clock out at the end of each shift.</p>"""
    return base_template("Overtime Alert", body)


def employee_overtime_alert_template(data: dict[str, Any]) -> str:
    body = f"""
      <p>Hi {_text(data, 'employeeName', 'there')},</p>
      <p>This is an automated reminder that you have been clocked in for over
         {_text(data, 'hours', '9')} hours.</p>
      <p><strong>Clock-in time:</strong> {_text(data, 'clockInTime')}<br>
         <strong>Current time:</strong> {_text(data, 'currentTime')}</p>
      <p>Please clock out as soon as possible and contact your supervisor to correct your timesheet.</p>"""
    return base_template("You Are Still Clocked In", body)


TEMPLATES: dict[str, Callable[[dict[str, Any]], str]] = {
    "TimeOffRequest": time_off_request_template,
    "TimeOffApproved": time_off_approved_template,
    "TimeOffDenied": time_off_denied_template,
    "CalledOut": called_out_template,
    "LeftEarly": left_early_template,
    "CustomStatus": custom_status_template,
    "ShiftAdded": shift_added_template,
    "ShiftUpdated": shift_updated_template,
    "SuggestionReply": suggestion_reply_template,
    "NoCallNoShow": no_call_no_show_template,
    "AdminOvertimeAlert": admin_overtime_alert_template,
    "EmployeeOvertimeAlert": employee_overtime_alert_template,
}

# Mailbox (local part) each template is sent from
SENDERS: dict[str, str] = {
    "SuggestionReply": "suggestions",
}
DEFAULT_SENDER = "scheduling"
