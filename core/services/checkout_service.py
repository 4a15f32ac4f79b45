# =============================================================================
# core/services/checkout_service.py - Stripe Class Checkout
# =============================================================================
# Customers buy seats in classes through Stripe Checkout:
#   1. create_session() - Checkout Session for the class's Stripe price
#   2. verify_payment() - after redirect, confirm the session is paid and
#                         record the purchase
#   3. handle_webhook() - mirror Stripe subscriptions, invoices, prices and
#                         products into local tables
# =============================================================================

import json
import logging
from datetime import datetime, timezone
from typing import Any

import stripe

from app.auth.models import AuthUser
from app.config import settings
from app.exceptions import (
    ClassNotFoundError,
    InvalidClassError,
    PaymentsNotConfiguredError,
    PaymentVerificationError,
)
from lib.supabase_client import SupabaseClient

logger = logging.getLogger(__name__)

SUBSCRIPTION_PREFIX = "customer.subscription."
INVOICE_PREFIX = "invoice."
INVOICE_ITEM_PREFIX = "invoiceitem."
PRICE_PREFIX = "price."
PRODUCT_PREFIX = "product."


def _configure_stripe() -> None:
    if not settings.stripe_configured:
        raise PaymentsNotConfiguredError()
    stripe.api_key = settings.STRIPE_SECRET_KEY


def _timestamp(value: int | None) -> str | None:
    """Stripe epoch seconds to ISO-8601, passing None through."""
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc).isoformat()


class CheckoutService:
    """
    Service for Stripe checkout and webhooks.
    """

    @staticmethod
    def create_session(class_id: int, user: AuthUser, origin: str | None) -> dict[str, Any]:
        """
        Start a Checkout Session for one seat in a class.

        Args:
            class_id: class_schedules.id
            user: The purchasing user (stored as client_reference_id)
            origin: Base URL for the success and cancel redirects;
                falls back to APP_BASE_URL

        Raises:
            ClassNotFoundError: If the class does not exist
            InvalidClassError: If the class has no Stripe price
            PaymentsNotConfiguredError: If Stripe keys are missing
        """
        _configure_stripe()

        class_data = SupabaseClient.fetch_one("class_schedules", "id", class_id)
        if not class_data:
            raise ClassNotFoundError(class_id)
        if not class_data.get("stripe_price_id"):
            logger.error(f"Stripe price ID is missing for class {class_id}")
            raise InvalidClassError(class_id)

        base_url = (origin or settings.APP_BASE_URL).rstrip("/")

        session = stripe.checkout.Session.create(
            payment_method_types=["card"],
            line_items=[{"price": class_data["stripe_price_id"], "quantity": 1}],
            mode="payment",
            success_url=f"{base_url}/success?session_id={{CHECKOUT_SESSION_ID}}&class_id={class_id}",
            cancel_url=f"{base_url}/public/classes",
            metadata={"class_id": str(class_id)},
            client_reference_id=str(user.id),
        )

        logger.info(f"Created checkout session {session.id} for class {class_id}")
        return {"session_id": session.id, "url": session.url}

    @staticmethod
    def verify_payment(session_id: str, user: AuthUser) -> dict[str, Any]:
        """
        Confirm a Checkout Session was paid and record the purchase.

        Returns:
            {"success": True, "purchase": row}

        Raises:
            PaymentVerificationError: If the session is unpaid or cannot be recorded
            PaymentsNotConfiguredError: If Stripe keys are missing
        """
        _configure_stripe()

        try:
            session = stripe.checkout.Session.retrieve(
                session_id,
                expand=["line_items", "line_items.data.price.product"],
            )
        except stripe.StripeError as e:
            logger.error(f"Could not retrieve checkout session {session_id}: {e}")
            raise PaymentVerificationError(f"Could not retrieve session: {e}")

        if session.payment_status != "paid":
            raise PaymentVerificationError("Payment not successful")

        user_id = str(user.id)
        customer = SupabaseClient.fetch_one("customers", "user_uuid", user_id)
        if not customer:
            raise PaymentVerificationError("Customer data not found")

        product_id, product_name = CheckoutService._product_of(session)
        metadata = session.metadata or {}

        purchase = {
            "user_id": user_id,
            "first_name": customer.get("first_name"),
            "last_name": customer.get("last_name"),
            "email": customer.get("email"),
            "product_id": metadata.get("productId") or product_id,
            "product_name": metadata.get("productName") or product_name,
            "amount": session.amount_total / 100 if session.amount_total else None,
            "currency": session.currency,
            "status": session.payment_status,
            "payment_intent_id": session.payment_intent,
            "stripe_session_id": session.id,
        }

        client = SupabaseClient.get_client()
        try:
            response = client.table("purchases").insert(purchase).execute()
        except Exception as e:
            logger.error(f"Error inserting purchase for session {session_id}: {e}")
            raise PaymentVerificationError(f"Failed to record purchase: {e}")

        try:
            (
                client.table("customers")
                .update({
                    "payment_status": "active",
                    "last_payment_date": datetime.now(timezone.utc).isoformat(),
                })
                .eq("user_uuid", user_id)
                .execute()
            )
        except Exception as e:
            # The purchase is recorded; a stale customer status is recoverable
            logger.error(f"Error updating customer payment status for {user_id}: {e}")

        logger.info(f"Recorded purchase for session {session_id}")
        return {"success": True, "purchase": response.data[0] if response.data else purchase}

    @staticmethod
    def _product_of(session: Any) -> tuple[str | None, str | None]:
        line_items = getattr(session, "line_items", None)
        items = getattr(line_items, "data", None) or []
        if not items:
            return None, None
        price = getattr(items[0], "price", None)
        product = getattr(price, "product", None)
        if product is None:
            return None, None
        if isinstance(product, str):
            return product, None
        return getattr(product, "id", None), getattr(product, "name", None)

    # -------------------------------------------------------------------------
    # Webhooks
    # -------------------------------------------------------------------------

    @staticmethod
    def handle_webhook(payload: bytes, signature: str | None) -> dict[str, Any]:
        """
        Verify and apply a Stripe webhook.

        Raises:
            PaymentVerificationError: If the signature is invalid
            PaymentsNotConfiguredError: If the webhook secret is missing
        """
        if not settings.STRIPE_WEBHOOK_SECRET:
            raise PaymentsNotConfiguredError()

        try:
            stripe.Webhook.construct_event(payload, signature or "", settings.STRIPE_WEBHOOK_SECRET)
        except (ValueError, stripe.SignatureVerificationError) as e:
            logger.warning(f"Rejected Stripe webhook: {e}")
            raise PaymentVerificationError(f"Webhook signature verification failed: {e}")

        # Signature checked; work with the plain JSON from here on
        event = json.loads(payload)
        event_type = event.get("type", "")
        obj = event.get("data", {}).get("object", {})

        if event_type.startswith(SUBSCRIPTION_PREFIX):
            CheckoutService._upsert_subscription(obj)
        elif event_type.startswith(INVOICE_ITEM_PREFIX):
            CheckoutService._upsert_invoice_item(obj)
        elif event_type.startswith(INVOICE_PREFIX):
            CheckoutService._upsert_invoice(obj)
        elif event_type.startswith(PRICE_PREFIX):
            CheckoutService._sync_price(obj, deleted=event_type == "price.deleted")
        elif event_type.startswith(PRODUCT_PREFIX):
            CheckoutService._sync_product(obj, deleted=event_type == "product.deleted")
        else:
            logger.info(f"Unhandled Stripe event type {event_type}")

        return {"received": True}

    @staticmethod
    def _upsert_subscription(subscription: dict[str, Any]) -> None:
        items = subscription.get("items", {}).get("data") or [{}]
        first_item = items[0]
        SupabaseClient.get_client().table("subscriptions").upsert({
            "id": subscription["id"],
            "user_id": subscription.get("customer"),
            "status": subscription.get("status"),
            "price_id": (first_item.get("price") or {}).get("id"),
            "quantity": first_item.get("quantity"),
            "cancel_at_period_end": subscription.get("cancel_at_period_end"),
            "created": _timestamp(subscription.get("created")),
            "current_period_start": _timestamp(subscription.get("current_period_start")),
            "current_period_end": _timestamp(subscription.get("current_period_end")),
            "ended_at": _timestamp(subscription.get("ended_at")),
            "cancel_at": _timestamp(subscription.get("cancel_at")),
            "canceled_at": _timestamp(subscription.get("canceled_at")),
            "trial_start": _timestamp(subscription.get("trial_start")),
            "trial_end": _timestamp(subscription.get("trial_end")),
            "metadata": subscription.get("metadata"),
        }).execute()
        logger.info(f"Synced subscription {subscription['id']}")

    @staticmethod
    def _upsert_invoice(invoice: dict[str, Any]) -> None:
        SupabaseClient.get_client().table("invoices").upsert({
            "id": invoice["id"],
            "customer_id": invoice.get("customer"),
            "subscription_id": invoice.get("subscription"),
            "status": invoice.get("status"),
            "total": invoice.get("total"),
            "currency": invoice.get("currency"),
            "created": _timestamp(invoice.get("created")),
            "period_start": _timestamp(invoice.get("period_start")),
            "period_end": _timestamp(invoice.get("period_end")),
            "paid": invoice.get("paid"),
            "payment_intent_id": invoice.get("payment_intent"),
        }).execute()
        logger.info(f"Synced invoice {invoice['id']}")

    @staticmethod
    def _upsert_invoice_item(item: dict[str, Any]) -> None:
        SupabaseClient.get_client().table("invoice_items").upsert({
            "id": item["id"],
            "invoice_id": item.get("invoice"),
            "price_id": (item.get("price") or {}).get("id"),
            "quantity": item.get("quantity"),
            "amount": item.get("amount"),
            "currency": item.get("currency"),
            "description": item.get("description"),
        }).execute()

    @staticmethod
    def _sync_price(price: dict[str, Any], deleted: bool) -> None:
        table = SupabaseClient.get_client().table("prices")
        if deleted:
            table.delete().eq("id", price["id"]).execute()
            logger.info(f"Deleted price {price['id']}")
            return

        recurring = price.get("recurring") or {}
        table.upsert({
            "id": price["id"],
            "product_id": price.get("product"),
            "active": price.get("active"),
            "description": price.get("nickname"),
            "unit_amount": price.get("unit_amount"),
            "currency": price.get("currency"),
            "type": price.get("type"),
            "interval": recurring.get("interval"),
            "interval_count": recurring.get("interval_count"),
            "trial_period_days": recurring.get("trial_period_days"),
            "metadata": price.get("metadata"),
        }).execute()
        logger.info(f"Synced price {price['id']}")

    @staticmethod
    def _sync_product(product: dict[str, Any], deleted: bool) -> None:
        table = SupabaseClient.get_client().table("products")
        if deleted:
            table.delete().eq("id", product["id"]).execute()
            logger.info(f"Deleted product {product['id']}")
            return

        images = product.get("images") or []
        table.upsert({
            "id": product["id"],
            "active": product.get("active"),
            "name": product.get("name"),
            "description": product.get("description"),
            "image": images[0] if images else None,
            "metadata": product.get("metadata"),
        }).execute()
        logger.info(f"Synced product {product['id']}")
