"""Unit tests for the subscription tier lookup table."""

import pytest

from plumbprep import subscription_tiers


class TestTierFeatures:
    def test_higher_tiers_include_lower_tier_features(self) -> None:
        basic = subscription_tiers.get_tier_features("basic")
        professional = subscription_tiers.get_tier_features("professional")
        master = subscription_tiers.get_tier_features("master")

        assert basic < professional < master

    @pytest.mark.parametrize(
        ("tier", "feature", "expected"),
        [
            ("basic", "practice_tests", True),
            ("basic", "ai_mentor", False),
            ("professional", "ai_mentor", True),
            ("professional", "plan_analysis", False),
            ("master", "referral_commissions", True),
            ("unknown", "practice_tests", False),
        ],
    )
    def test_has_feature(self, tier: str, feature: str, expected: bool) -> None:
        assert subscription_tiers.has_feature(tier, feature) is expected

    def test_minimum_tier_for(self) -> None:
        assert subscription_tiers.minimum_tier_for("job_board") == "basic"
        assert subscription_tiers.minimum_tier_for("photo_code_checker") == "professional"
        assert subscription_tiers.minimum_tier_for("material_list") == "master"
        assert subscription_tiers.minimum_tier_for("time_travel") is None

    def test_requires_paid_subscription(self) -> None:
        assert subscription_tiers.requires_paid_subscription("practice_tests") is False
        assert subscription_tiers.requires_paid_subscription("ai_mentor") is True


class TestTierLevels:
    def test_tier_at_least(self) -> None:
        assert subscription_tiers.tier_at_least("master", "professional")
        assert subscription_tiers.tier_at_least("basic", "basic")
        assert not subscription_tiers.tier_at_least("basic", "professional")

    def test_unknown_tier_ranks_below_basic(self) -> None:
        assert subscription_tiers.get_tier_level("platinum") == 0
        assert not subscription_tiers.is_valid_tier("platinum")
        assert not subscription_tiers.is_valid_tier(None)

    def test_next_tier(self) -> None:
        assert subscription_tiers.next_tier("basic") == "professional"
        assert subscription_tiers.next_tier("professional") == "master"
        assert subscription_tiers.next_tier("master") is None

    def test_certification_track_limits(self) -> None:
        assert subscription_tiers.get_certification_track_limit("basic") == 1
        assert subscription_tiers.get_certification_track_limit("professional") == 3
        assert subscription_tiers.get_certification_track_limit("master") == 5

    @pytest.mark.parametrize(
        ("tier", "status", "expected"),
        [
            ("master", "active", "master"),
            ("professional", "trialing", "professional"),
            ("master", "incomplete", "basic"),
            ("professional", None, "basic"),
            ("basic", None, "basic"),
        ],
    )
    def test_effective_tier(self, tier: str, status: str | None, expected: str) -> None:
        assert subscription_tiers.effective_tier(tier, status) == expected
        assert subscription_tiers.get_certification_track_limit("unknown") == 1

    @pytest.mark.parametrize("status", ["active", "trialing"])
    def test_active_statuses(self, status: str) -> None:
        assert subscription_tiers.is_subscription_active(status)

    @pytest.mark.parametrize("status", ["incomplete", "past_due", "canceled", None])
    def test_inactive_statuses(self, status: str | None) -> None:
        assert not subscription_tiers.is_subscription_active(status)


class TestPricingPlans:
    def test_plans(self) -> None:
        plans = subscription_tiers.get_pricing_plans()

        assert [plan.id for plan in plans] == ["basic", "professional", "master"]
        assert [plan.price for plan in plans] == [49, 79, 99]
        assert [plan.popular for plan in plans] == [False, True, False]
        assert plans[2].certification_tracks == 5
        assert "ai_mentor" in plans[1].feature_keys
