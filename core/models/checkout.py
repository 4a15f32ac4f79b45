# =============================================================================
# core/models/checkout.py - Class Checkout Schemas
# =============================================================================

from pydantic import BaseModel, ConfigDict, Field


class CheckoutSessionRequest(BaseModel):
    class_id: int = Field(..., alias="classId")

    model_config = ConfigDict(populate_by_name=True)


class CheckoutSessionResponse(BaseModel):
    session_id: str
    url: str | None = None


class VerifyPaymentRequest(BaseModel):
    session_id: str = Field(..., min_length=1, alias="sessionId")

    model_config = ConfigDict(populate_by_name=True)
