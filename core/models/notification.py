# =============================================================================
# core/models/notification.py - Email Notification Schemas
# =============================================================================

from enum import Enum
from typing import Any

from pydantic import BaseModel, EmailStr, Field


class EmailTemplate(str, Enum):
    TIME_OFF_REQUEST = "TimeOffRequest"
    TIME_OFF_APPROVED = "TimeOffApproved"
    TIME_OFF_DENIED = "TimeOffDenied"
    CALLED_OUT = "CalledOut"
    LEFT_EARLY = "LeftEarly"
    CUSTOM_STATUS = "CustomStatus"
    SHIFT_ADDED = "ShiftAdded"
    SHIFT_UPDATED = "ShiftUpdated"
    SUGGESTION_REPLY = "SuggestionReply"
    NO_CALL_NO_SHOW = "NoCallNoShow"
    ADMIN_OVERTIME_ALERT = "AdminOvertimeAlert"
    EMPLOYEE_OVERTIME_ALERT = "EmployeeOvertimeAlert"


class SendEmailRequest(BaseModel):
    """
    Queue a templated email.

    Example:
        {"email": "jane@example.com", "subject": "Time Off Approved",
         "template_name": "TimeOffApproved",
         "template_data": {"name": "Jane", "startDate": "2025-02-03", "endDate": "2025-02-05"}}
    """
    email: EmailStr
    subject: str = Field(..., min_length=1)
    template_name: EmailTemplate = Field(..., alias="templateName")
    template_data: dict[str, Any] = Field(default_factory=dict, alias="templateData")

    model_config = {"populate_by_name": True}
