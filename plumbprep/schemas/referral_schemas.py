from datetime import datetime as dt

from pydantic import BaseModel, Field


class ReferralCommission(BaseModel):
    """Result of a commission calculation."""

    referrer_tier: str
    referred_tier: str
    eligible_tier: str = Field(..., description="Lower of the two tiers")
    eligible_price: float
    commission_rate: float
    commission_amount: float
    formatted_commission: str = Field(..., description="e.g. '$4.90'")


class EarningsPotential(BaseModel):
    tier: str
    max_commission_per_referral: float
    eligible_tiers: list[str]


class Referral(BaseModel):
    id: int
    referred_id: int
    referrer_tier: str
    referred_tier: str
    commission_amount: float
    is_paid: bool
    created_at: dt

    model_config = {"from_attributes": True}


class ReferralStats(BaseModel):
    referral_code: str | None
    referral_count: int
    total_earnings: float
    paid_earnings: float
    unpaid_earnings: float
    earnings_potential: EarningsPotential
    referrals: list[Referral]


class MonthlyCommission(BaseModel):
    id: int
    referral_id: int
    referred_id: int
    month: str = Field(..., description="YYYY-MM")
    referrer_tier: str
    referred_tier: str
    amount: float
    is_paid: bool

    model_config = {"from_attributes": True}


class MonthlyEarnings(BaseModel):
    month: str = Field(..., description="YYYY-MM")
    total: float
    paid: float
    unpaid: float
    count: int = Field(..., description="Commissions recorded for the month")


class MonthlyEarningsSummary(BaseModel):
    total_monthly_earnings: float
    unpaid_monthly_earnings: float
    monthly_breakdown: list[MonthlyEarnings] = Field(..., description="Newest month first")
