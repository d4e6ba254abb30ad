"""Payment provider integration."""

from plumbprep.services.billing.stripe_gateway import (
    PaymentIntentInfo,
    StripeBillingGateway,
    SubscriptionInfo,
    WebhookEvent,
    get_billing_gateway,
)

__all__ = [
    "PaymentIntentInfo",
    "StripeBillingGateway",
    "SubscriptionInfo",
    "WebhookEvent",
    "get_billing_gateway",
]
