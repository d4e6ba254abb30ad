from fastapi import APIRouter, Query

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser
from plumbprep.services import ReferralService
from plumbprep.services.referral_service import calculate_referral_commission

router = APIRouter(prefix="/referrals", tags=["referrals"])


@router.get("/stats", response_model=schemas.ReferralStats)
def get_referral_stats(db: DatabaseSession, current_user: CurrentUser) -> schemas.ReferralStats:
    """Referral count, earnings and what the current plan can earn per referral."""
    return ReferralService(db).get_stats(current_user)


@router.get("/commission-preview", response_model=schemas.ReferralCommission)
def preview_commission(
    current_user: CurrentUser,
    referred_tier: str = Query(..., description="Plan the referred user would subscribe to"),
) -> schemas.ReferralCommission:
    return calculate_referral_commission(current_user.subscription_tier, referred_tier)


@router.get("/monthly-commissions", response_model=list[schemas.MonthlyCommission])
def get_monthly_commissions(
    db: DatabaseSession,
    current_user: CurrentUser,
    month: str | None = Query(None, pattern=r"^\d{4}-\d{2}$", description="YYYY-MM"),
) -> list[schemas.MonthlyCommission]:
    return ReferralService(db).get_monthly_commissions(current_user.id, month)


@router.get("/monthly-earnings-summary", response_model=schemas.MonthlyEarningsSummary)
def get_monthly_earnings_summary(
    db: DatabaseSession, current_user: CurrentUser
) -> schemas.MonthlyEarningsSummary:
    """Commission totals per month with paid and unpaid amounts."""
    return ReferralService(db).get_monthly_earnings_summary(current_user.id)
