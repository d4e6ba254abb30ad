"""Referral and monthly commission repositories."""

import logging
from typing import Any

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class ReferralRepository:
    """Repository for Referral database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_by_referred(self, referred_id: int) -> models.Referral | None:
        stmt = select(models.Referral).where(models.Referral.referred_id == referred_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_referrer(self, referrer_id: int) -> list[models.Referral]:
        stmt = (
            select(models.Referral)
            .where(models.Referral.referrer_id == referrer_id)
            .order_by(models.Referral.created_at.desc(), models.Referral.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(self, **fields: Any) -> models.Referral:  # noqa: ANN401
        referral = models.Referral(**fields)
        self.db.add(referral)
        self.db.flush()
        self.db.refresh(referral)
        logger.info(
            f"Created referral: referrer_id={referral.referrer_id}, "
            f"referred_id={referral.referred_id}, amount={referral.commission_amount}"
        )
        return referral

    def update(self, referral: models.Referral, **fields: Any) -> models.Referral:  # noqa: ANN401
        for key, value in fields.items():
            setattr(referral, key, value)
        self.db.flush()
        self.db.refresh(referral)
        return referral


class MonthlyCommissionRepository:
    """Repository for MonthlyCommission database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get(self, referral_id: int, month: str) -> models.MonthlyCommission | None:
        stmt = select(models.MonthlyCommission).where(
            models.MonthlyCommission.referral_id == referral_id,
            models.MonthlyCommission.month == month,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_referrer(
        self, referrer_id: int, month: str | None = None
    ) -> list[models.MonthlyCommission]:
        stmt = select(models.MonthlyCommission).where(
            models.MonthlyCommission.referrer_id == referrer_id
        )
        if month:
            stmt = stmt.where(models.MonthlyCommission.month == month)
        stmt = stmt.order_by(models.MonthlyCommission.month.desc(), models.MonthlyCommission.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def upsert(
        self,
        referral: models.Referral,
        month: str,
        referrer_tier: str,
        referred_tier: str,
        amount: float,
    ) -> models.MonthlyCommission:
        """One commission row per referral and month; later changes overwrite it."""
        commission = self.get(referral.id, month)
        if commission is None:
            commission = models.MonthlyCommission(
                referral_id=referral.id,
                referrer_id=referral.referrer_id,
                referred_id=referral.referred_id,
                month=month,
                is_paid=False,
            )
            self.db.add(commission)
        commission.referrer_tier = referrer_tier
        commission.referred_tier = referred_tier
        commission.amount = amount
        self.db.flush()
        self.db.refresh(commission)
        return commission

    def sum_for_referrer(self, referrer_id: int, is_paid: bool | None = None) -> float:
        stmt = select(func.coalesce(func.sum(models.MonthlyCommission.amount), 0.0)).where(
            models.MonthlyCommission.referrer_id == referrer_id
        )
        if is_paid is not None:
            stmt = stmt.where(models.MonthlyCommission.is_paid.is_(is_paid))
        return float(self.db.execute(stmt).scalar() or 0.0)
