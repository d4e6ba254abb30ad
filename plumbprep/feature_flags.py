"""Feature flags module for centralized feature toggle management."""

from typing import Literal

from pydantic import BaseModel, Field

from plumbprep.config import get_settings


class FeatureFlags(BaseModel):
    """Pydantic model defining all feature flags in the application."""

    ai: bool = Field(..., description="Whether AI features are enabled")
    user_registrations: bool = Field(..., description="Whether user registration is enabled")
    billing: bool = Field(..., description="Whether Stripe billing is configured")


FeatureFlagKey = Literal["ai", "user_registrations", "billing"]


def get_feature_flags() -> FeatureFlags:
    """
    Get current feature flags based on application configuration.

    Returns:
        FeatureFlags instance with current flag values
    """
    settings = get_settings()

    return FeatureFlags(
        ai=settings.ai_enabled,
        user_registrations=settings.ALLOW_USER_REGISTRATIONS,
        billing=settings.billing_enabled,
    )


def get_feature_flag(key: FeatureFlagKey) -> bool:
    """Get the value of a specific feature flag."""
    flags = get_feature_flags()
    return getattr(flags, key)


def is_ai_enabled() -> bool:
    """Check if AI features are enabled."""
    return get_feature_flag("ai")


def is_user_registrations_enabled() -> bool:
    """Check if user registrations are enabled."""
    return get_feature_flag("user_registrations")


def is_billing_enabled() -> bool:
    """Check if Stripe billing is configured."""
    return get_feature_flag("billing")
