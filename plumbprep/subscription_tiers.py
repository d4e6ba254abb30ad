"""Subscription tiers and the static tier → feature lookup table.

Every account starts on ``basic``. Higher tiers include everything the lower
tiers offer; features outside the ``basic`` set also require the subscription
to be active in Stripe.
"""

from typing import Literal, get_args

from pydantic import BaseModel, Field

SubscriptionTier = Literal["basic", "professional", "master"]
TierFeature = Literal[
    "practice_tests",
    "basic_calculators",
    "job_board",
    "email_support",
    "complete_calculators",
    "photo_code_checker",
    "ai_mentor",
    "resume_builder",
    "priority_support",
    "plan_analysis",
    "material_list",
    "referral_commissions",
    "book_store",
    "white_glove_support",
]

SUBSCRIPTION_TIERS: tuple[SubscriptionTier, ...] = get_args(SubscriptionTier)
DEFAULT_TIER: SubscriptionTier = "basic"
ACTIVE_SUBSCRIPTION_STATUSES = frozenset({"active", "trialing"})

TIER_LEVELS: dict[str, int] = {"basic": 1, "professional": 2, "master": 3}
PLAN_PRICING: dict[str, int] = {"basic": 49, "professional": 79, "master": 99}
CERTIFICATION_TRACKS: dict[str, int] = {"basic": 1, "professional": 3, "master": 5}

# Features introduced by each tier; a tier also has every lower tier's features
_TIER_FEATURE_ADDITIONS: dict[str, tuple[TierFeature, ...]] = {
    "basic": ("practice_tests", "basic_calculators", "job_board", "email_support"),
    "professional": (
        "complete_calculators",
        "photo_code_checker",
        "ai_mentor",
        "resume_builder",
        "priority_support",
    ),
    "master": (
        "plan_analysis",
        "material_list",
        "referral_commissions",
        "book_store",
        "white_glove_support",
    ),
}

_PLAN_DETAILS: dict[str, tuple[str, str, list[str]]] = {
    "basic": (
        "Basic",
        "Perfect for getting started",
        [
            "1 Certification Track",
            "Basic Calculator Tools",
            "Practice Tests",
            "Job Board Access",
            "Email Support",
        ],
    ),
    "professional": (
        "Professional",
        "For serious professionals",
        [
            "3 Certification Tracks",
            "Complete Calculator Suite",
            "Photo Code Checker",
            "AI Mentor Support",
            "Resume Builder",
            "Priority Support",
        ],
    ),
    "master": (
        "Master",
        "Complete mastery package",
        [
            "All 5 Certification Tracks",
            "Plan Analysis Tools",
            "Material List Generator",
            "Referral Commissions",
            "Book Store Access",
            "White-Glove Support",
        ],
    ),
}


def _build_feature_table() -> dict[str, frozenset[str]]:
    table: dict[str, frozenset[str]] = {}
    accumulated: set[str] = set()
    for tier in SUBSCRIPTION_TIERS:
        accumulated.update(_TIER_FEATURE_ADDITIONS[tier])
        table[tier] = frozenset(accumulated)
    return table


TIER_FEATURES: dict[str, frozenset[str]] = _build_feature_table()


class PricingPlan(BaseModel):
    """Public description of a subscription plan."""

    id: SubscriptionTier
    name: str
    price: int = Field(..., description="Monthly price in USD")
    description: str
    features: list[str] = Field(..., description="Marketing feature list")
    feature_keys: list[str] = Field(..., description="Feature keys unlocked by the plan")
    certification_tracks: int
    popular: bool = False


def is_valid_tier(tier: str | None) -> bool:
    """Check whether a string names a known subscription tier."""
    return tier in TIER_LEVELS


def get_tier_level(tier: str) -> int:
    """Numeric level of a tier; unknown tiers rank below basic."""
    return TIER_LEVELS.get(tier, 0)


def tier_at_least(tier: str, minimum: str) -> bool:
    """Whether ``tier`` ranks at or above ``minimum``."""
    return get_tier_level(tier) >= get_tier_level(minimum)


def get_tier_features(tier: str) -> frozenset[str]:
    """All feature keys available to a tier."""
    return TIER_FEATURES.get(tier, frozenset())


def has_feature(tier: str, feature: str) -> bool:
    """Whether a tier includes a feature."""
    return feature in get_tier_features(tier)


def next_tier(tier: str) -> str | None:
    """Tier directly above ``tier``, or None at the top."""
    level = get_tier_level(tier)
    for candidate in SUBSCRIPTION_TIERS:
        if get_tier_level(candidate) == level + 1:
            return candidate
    return None


def minimum_tier_for(feature: str) -> str | None:
    """Lowest tier that includes a feature, or None for unknown features."""
    for tier in SUBSCRIPTION_TIERS:
        if has_feature(tier, feature):
            return tier
    return None


def requires_paid_subscription(feature: str) -> bool:
    """Features above the basic set need an active Stripe subscription."""
    return not has_feature(DEFAULT_TIER, feature)


def is_subscription_active(status: str | None) -> bool:
    return status in ACTIVE_SUBSCRIPTION_STATUSES


def effective_tier(tier: str, status: str | None) -> str:
    """Tier whose paid allowances apply; an unpaid subscription falls back to basic."""
    if tier == DEFAULT_TIER or is_subscription_active(status):
        return tier
    return DEFAULT_TIER


def get_certification_track_limit(tier: str) -> int:
    return CERTIFICATION_TRACKS.get(tier, CERTIFICATION_TRACKS[DEFAULT_TIER])


def get_tier_display_name(tier: str) -> str:
    details = _PLAN_DETAILS.get(tier)
    return details[0] if details else tier


def get_pricing_plans() -> list[PricingPlan]:
    """Build the public plan list from the lookup tables."""
    return [
        PricingPlan(
            id=tier,
            name=_PLAN_DETAILS[tier][0],
            price=PLAN_PRICING[tier],
            description=_PLAN_DETAILS[tier][1],
            features=_PLAN_DETAILS[tier][2],
            feature_keys=sorted(TIER_FEATURES[tier]),
            certification_tracks=CERTIFICATION_TRACKS[tier],
            popular=tier == "professional",
        )
        for tier in SUBSCRIPTION_TIERS
    ]
