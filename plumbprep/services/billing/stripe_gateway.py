"""Thin wrapper around the Stripe SDK.

Services talk to :class:`StripeBillingGateway` only through plain dataclasses
so that tests can swap in a fake gateway via ``get_billing_gateway``.
"""

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

import stripe

from plumbprep.config import get_settings
from plumbprep.exceptions import BillingError, PlumbPrepError, ValidationError
from plumbprep.feature_flags import is_billing_enabled

logger = logging.getLogger(__name__)

FIRST_MONTH_COUPON_ID = "FIRST_MONTH_50"


@dataclass
class SubscriptionInfo:
    id: str
    status: str
    customer_id: str | None = None
    price_id: str | None = None
    item_id: str | None = None
    current_period_end: datetime | None = None
    cancel_at_period_end: bool = False
    client_secret: str | None = None


@dataclass
class PaymentIntentInfo:
    id: str
    client_secret: str | None
    amount: int


@dataclass
class WebhookEvent:
    type: str
    data: dict[str, Any] = field(default_factory=dict)


def _timestamp(value: Any) -> datetime | None:  # noqa: ANN401
    if value is None:
        return None
    return datetime.fromtimestamp(int(value), tz=UTC)


def subscription_info_from_payload(subscription: Mapping[str, Any]) -> SubscriptionInfo:
    """Read the fields we need from a Stripe subscription object or webhook payload."""
    items = (subscription.get("items") or {}).get("data") or []
    first_item = items[0] if items else {}
    price = first_item.get("price") or {}
    # Newer API versions keep the billing period on the item
    period_end = first_item.get("current_period_end") or subscription.get("current_period_end")

    client_secret = None
    latest_invoice = subscription.get("latest_invoice")
    if isinstance(latest_invoice, Mapping):
        confirmation = latest_invoice.get("confirmation_secret") or {}
        client_secret = confirmation.get("client_secret")

    customer = subscription.get("customer")
    if isinstance(customer, Mapping):
        customer = customer.get("id")

    return SubscriptionInfo(
        id=subscription["id"],
        status=subscription.get("status") or "incomplete",
        customer_id=customer,
        price_id=price.get("id") if isinstance(price, Mapping) else price,
        item_id=first_item.get("id"),
        current_period_end=_timestamp(period_end),
        cancel_at_period_end=bool(subscription.get("cancel_at_period_end")),
        client_secret=client_secret,
    )


class StripeBillingGateway:
    """Stripe calls used by subscriptions, job posting payments and webhooks."""

    def __init__(self, api_key: str, webhook_secret: str | None = None) -> None:
        self.api_key = api_key
        self.webhook_secret = webhook_secret

    def create_customer(self, email: str, name: str | None = None) -> str:
        try:
            customer = stripe.Customer.create(api_key=self.api_key, email=email, name=name)
        except stripe.StripeError as e:
            raise BillingError(f"Failed to create Stripe customer: {e.user_message or e}") from e
        logger.info(f"Created Stripe customer {customer.id}")
        return customer.id

    def _first_month_coupon(self) -> str:
        try:
            stripe.Coupon.retrieve(FIRST_MONTH_COUPON_ID, api_key=self.api_key)
        except stripe.InvalidRequestError:
            stripe.Coupon.create(
                api_key=self.api_key,
                id=FIRST_MONTH_COUPON_ID,
                percent_off=50,
                duration="once",
                name="50% off first month",
            )
        return FIRST_MONTH_COUPON_ID

    def create_subscription(
        self, customer_id: str, price_id: str, first_month_discount: bool = True
    ) -> SubscriptionInfo:
        params: dict[str, Any] = {
            "customer": customer_id,
            "items": [{"price": price_id}],
            "payment_behavior": "default_incomplete",
            "payment_settings": {"save_default_payment_method": "on_subscription"},
            "expand": ["latest_invoice.confirmation_secret"],
        }
        try:
            if first_month_discount:
                params["discounts"] = [{"coupon": self._first_month_coupon()}]
            subscription = stripe.Subscription.create(api_key=self.api_key, **params)
        except stripe.StripeError as e:
            raise BillingError(f"Failed to create subscription: {e.user_message or e}") from e
        return subscription_info_from_payload(subscription)

    def retrieve_subscription(self, subscription_id: str) -> SubscriptionInfo:
        try:
            subscription = stripe.Subscription.retrieve(subscription_id, api_key=self.api_key)
        except stripe.StripeError as e:
            raise BillingError(f"Failed to load subscription: {e.user_message or e}") from e
        return subscription_info_from_payload(subscription)

    def cancel_at_period_end(self, subscription_id: str) -> SubscriptionInfo:
        try:
            subscription = stripe.Subscription.modify(
                subscription_id, api_key=self.api_key, cancel_at_period_end=True
            )
        except stripe.StripeError as e:
            raise BillingError(f"Failed to cancel subscription: {e.user_message or e}") from e
        return subscription_info_from_payload(subscription)

    def change_price(
        self, subscription_id: str, item_id: str | None, new_price_id: str
    ) -> SubscriptionInfo:
        """Swap the subscription's price, prorating the difference."""
        if item_id is None:
            item_id = self.retrieve_subscription(subscription_id).item_id
        try:
            subscription = stripe.Subscription.modify(
                subscription_id,
                api_key=self.api_key,
                items=[{"id": item_id, "price": new_price_id}],
                proration_behavior="create_prorations",
            )
        except stripe.StripeError as e:
            raise BillingError(f"Failed to change subscription: {e.user_message or e}") from e
        return subscription_info_from_payload(subscription)

    def create_payment_intent(
        self, amount_cents: int, metadata: dict[str, str] | None = None
    ) -> PaymentIntentInfo:
        try:
            intent = stripe.PaymentIntent.create(
                api_key=self.api_key,
                amount=amount_cents,
                currency="usd",
                metadata=metadata or {},
                automatic_payment_methods={"enabled": True},
            )
        except stripe.StripeError as e:
            raise BillingError(f"Failed to create payment intent: {e.user_message or e}") from e
        return PaymentIntentInfo(id=intent.id, client_secret=intent.client_secret, amount=amount_cents)

    def parse_webhook(self, payload: bytes, signature: str | None) -> WebhookEvent:
        """
        Verify the Stripe signature and decode the event.

        Raises:
            ValidationError: If the signature is missing or invalid
        """
        if not self.webhook_secret:
            raise PlumbPrepError("Stripe webhook secret is not configured", status_code=503)
        if not signature:
            raise ValidationError("Missing Stripe-Signature header")
        try:
            stripe.Webhook.construct_event(payload, signature, self.webhook_secret)
        except (ValueError, stripe.SignatureVerificationError) as e:
            raise ValidationError(f"Webhook signature verification failed: {e}") from e

        event = json.loads(payload)
        return WebhookEvent(type=event["type"], data=event.get("data", {}).get("object", {}))


def get_billing_gateway() -> StripeBillingGateway:
    """FastAPI dependency returning the configured Stripe gateway."""
    if not is_billing_enabled():
        raise PlumbPrepError("Billing is not configured on this server", status_code=503)
    settings = get_settings()
    assert settings.STRIPE_SECRET_KEY is not None
    return StripeBillingGateway(settings.STRIPE_SECRET_KEY, settings.STRIPE_WEBHOOK_SECRET)
