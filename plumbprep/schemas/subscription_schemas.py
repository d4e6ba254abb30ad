"""Pydantic schemas for subscriptions and Stripe billing."""

from datetime import datetime as dt

from pydantic import BaseModel, Field

from plumbprep.subscription_tiers import SubscriptionTier


class SubscriptionStatusResponse(BaseModel):
    has_active_subscription: bool
    tier: str
    status: str | None = Field(None, description="Stripe subscription status")
    current_period_end: dt | None = None
    cancel_at_period_end: bool = False
    features: list[str] = Field(..., description="Feature keys the tier unlocks")


class SubscriptionCreateRequest(BaseModel):
    tier: SubscriptionTier = Field(..., description="Plan to subscribe to")
    price_id: str | None = Field(None, description="Overrides the configured Stripe price")


class SubscriptionCreateResponse(BaseModel):
    subscription_id: str
    client_secret: str | None = Field(None, description="Secret to confirm the first payment")
    status: str
    tier: str


class SubscriptionUpgradeRequest(BaseModel):
    new_tier: str = Field(..., description="Target tier")


class SubscriptionUpgradeResponse(BaseModel):
    success: bool
    message: str
    tier: str
    status: str | None


class SubscriptionCancelResponse(BaseModel):
    success: bool
    message: str
    current_period_end: dt | None


class WebhookResponse(BaseModel):
    received: bool = True
