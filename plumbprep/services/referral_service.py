"""Referral commissions.

A referrer earns a percentage of the referred user's plan price, capped at the
referrer's own plan: the commission is computed on the lower of the two tiers.
"""

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas, subscription_tiers
from plumbprep.exceptions import ValidationError
from plumbprep.utils import month_key, utc_now

logger = structlog.get_logger(__name__)

DEFAULT_COMMISSION_RATE = 0.10


def format_commission(amount: float) -> str:
    return f"${amount:.2f}"


def calculate_referral_commission(
    referrer_tier: str, referred_tier: str, rate: float = DEFAULT_COMMISSION_RATE
) -> schemas.ReferralCommission:
    """
    Commission for a referral.

    Args:
        referrer_tier: Plan of the user who made the referral
        referred_tier: Plan the referred user subscribed to
        rate: Commission rate, 10% by default

    Returns:
        The eligible tier, its monthly price and the commission rounded to cents

    Raises:
        ValidationError: If either tier is unknown
    """
    if not subscription_tiers.is_valid_tier(referrer_tier):
        raise ValidationError(f"Invalid referrer tier '{referrer_tier}'")
    if not subscription_tiers.is_valid_tier(referred_tier):
        raise ValidationError(f"Invalid referred tier '{referred_tier}'")

    eligible_level = min(
        subscription_tiers.get_tier_level(referrer_tier),
        subscription_tiers.get_tier_level(referred_tier),
    )
    eligible_tier = next(
        tier
        for tier, level in subscription_tiers.TIER_LEVELS.items()
        if level == eligible_level
    )
    eligible_price = float(subscription_tiers.PLAN_PRICING[eligible_tier])
    amount = round(eligible_price * rate, 2)
    return schemas.ReferralCommission(
        referrer_tier=referrer_tier,
        referred_tier=referred_tier,
        eligible_tier=eligible_tier,
        eligible_price=eligible_price,
        commission_rate=rate,
        commission_amount=amount,
        formatted_commission=format_commission(amount),
    )


def get_referral_earnings_potential(
    tier: str, rate: float = DEFAULT_COMMISSION_RATE
) -> schemas.EarningsPotential:
    """Best commission a referrer on ``tier`` can earn per referral."""
    if not subscription_tiers.is_valid_tier(tier):
        raise ValidationError(f"Invalid tier '{tier}'")
    return schemas.EarningsPotential(
        tier=tier,
        max_commission_per_referral=round(subscription_tiers.PLAN_PRICING[tier] * rate, 2),
        eligible_tiers=[
            t for t in subscription_tiers.SUBSCRIPTION_TIERS
            if subscription_tiers.tier_at_least(tier, t)
        ],
    )


class ReferralService:
    """Records referral commissions. Callers own the transaction."""

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.user_repo = repositories.UserRepository(db)
        self.referral_repo = repositories.ReferralRepository(db)
        self.commission_repo = repositories.MonthlyCommissionRepository(db)

    def record_subscription_referral(
        self, user: models.User, tier: str
    ) -> models.Referral | None:
        """Credit the referrer when a referred user subscribes for the first time."""
        if user.referred_by_id is None:
            return None
        if self.referral_repo.get_by_referred(user.id) is not None:
            return None
        referrer = self.user_repo.get_by_id(user.referred_by_id)
        if referrer is None:
            return None

        commission = calculate_referral_commission(referrer.subscription_tier, tier)
        referral = self.referral_repo.create(
            referrer_id=referrer.id,
            referred_id=user.id,
            referrer_tier=referrer.subscription_tier,
            referred_tier=tier,
            commission_amount=commission.commission_amount,
            is_paid=False,
        )
        self.commission_repo.upsert(
            referral,
            month_key(utc_now()),
            referrer_tier=referrer.subscription_tier,
            referred_tier=tier,
            amount=commission.commission_amount,
        )
        logger.info(
            "referral_recorded",
            referrer_id=referrer.id,
            referred_id=user.id,
            amount=commission.commission_amount,
        )
        return referral

    def process_subscription_upgrade(
        self, user: models.User, new_tier: str
    ) -> list[models.MonthlyCommission]:
        """Recompute this month's commission for the user's referrer after a tier change."""
        referral = self.referral_repo.get_by_referred(user.id)
        if referral is None:
            # Users who were referred but had no paid plan yet start their referral here
            referral = self.record_subscription_referral(user, new_tier)
            if referral is None:
                return []
            return self.commission_repo.get_by_referrer(
                referral.referrer_id, month_key(utc_now())
            )

        referrer = self.user_repo.get_by_id(referral.referrer_id)
        if referrer is None:
            return []

        commission = calculate_referral_commission(referrer.subscription_tier, new_tier)
        self.referral_repo.update(referral, referred_tier=new_tier)
        monthly = self.commission_repo.upsert(
            referral,
            month_key(utc_now()),
            referrer_tier=referrer.subscription_tier,
            referred_tier=new_tier,
            amount=commission.commission_amount,
        )
        logger.info(
            "referral_commission_updated",
            referrer_id=referrer.id,
            referred_id=user.id,
            month=monthly.month,
            amount=monthly.amount,
        )
        return [monthly]

    def get_stats(self, user: models.User) -> schemas.ReferralStats:
        referrals = self.referral_repo.get_by_referrer(user.id)
        total = self.commission_repo.sum_for_referrer(user.id)
        paid = self.commission_repo.sum_for_referrer(user.id, is_paid=True)
        return schemas.ReferralStats(
            referral_code=user.referral_code,
            referral_count=len(referrals),
            total_earnings=round(total, 2),
            paid_earnings=round(paid, 2),
            unpaid_earnings=round(total - paid, 2),
            earnings_potential=get_referral_earnings_potential(user.subscription_tier),
            referrals=[schemas.Referral.model_validate(r) for r in referrals],
        )

    def get_monthly_commissions(
        self, user_id: int, month: str | None = None
    ) -> list[schemas.MonthlyCommission]:
        return [
            schemas.MonthlyCommission.model_validate(c)
            for c in self.commission_repo.get_by_referrer(user_id, month)
        ]

    def get_monthly_earnings_summary(self, user_id: int) -> schemas.MonthlyEarningsSummary:
        """Monthly commissions grouped per month, newest month first."""
        months: dict[str, schemas.MonthlyEarnings] = {}
        for commission in self.commission_repo.get_by_referrer(user_id):
            entry = months.setdefault(
                commission.month,
                schemas.MonthlyEarnings(month=commission.month, total=0, paid=0, unpaid=0, count=0),
            )
            entry.total += commission.amount
            entry.count += 1
            if commission.is_paid:
                entry.paid += commission.amount
            else:
                entry.unpaid += commission.amount

        breakdown = sorted(months.values(), key=lambda m: m.month, reverse=True)
        for entry in breakdown:
            entry.total = round(entry.total, 2)
            entry.paid = round(entry.paid, 2)
            entry.unpaid = round(entry.unpaid, 2)
        return schemas.MonthlyEarningsSummary(
            total_monthly_earnings=round(sum(m.total for m in breakdown), 2),
            unpaid_monthly_earnings=round(sum(m.unpaid for m in breakdown), 2),
            monthly_breakdown=breakdown,
        )
