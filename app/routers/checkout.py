# =============================================================================
# app/routers/checkout.py - Stripe Checkout Endpoints
# =============================================================================
# The webhook is unauthenticated: Stripe proves itself with the
# Stripe-Signature header instead of a bearer token.
# =============================================================================

from fastapi import APIRouter, Request

from app.dependencies import UserDep
from core.models.checkout import (
    CheckoutSessionRequest,
    CheckoutSessionResponse,
    VerifyPaymentRequest,
)
from core.services.checkout_service import CheckoutService

router = APIRouter()


@router.post("/session", response_model=CheckoutSessionResponse)
async def create_checkout_session(
    user: UserDep,
    body: CheckoutSessionRequest,
    request: Request,
):
    """Start a Stripe Checkout Session for one seat in a class."""
    result = CheckoutService.create_session(
        body.class_id, user, origin=request.headers.get("origin")
    )
    return CheckoutSessionResponse(**result)


@router.post("/verify")
async def verify_payment(user: UserDep, body: VerifyPaymentRequest):
    """Confirm the session was paid and record the purchase."""
    return CheckoutService.verify_payment(body.session_id, user)


@router.post("/webhook")
async def stripe_webhook(request: Request):
    payload = await request.body()
    return CheckoutService.handle_webhook(payload, request.headers.get("stripe-signature"))
