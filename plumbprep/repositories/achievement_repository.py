"""Achievement and points repository for database operations."""

import logging
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from sqlalchemy import Subquery, func, select
from sqlalchemy.orm import Session, joinedload

from plumbprep import models

logger = logging.getLogger(__name__)


@dataclass
class LeaderboardRow:
    user: models.User
    points: int
    achievement_count: int


class AchievementRepository:
    """Repository for Achievement database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def count(self) -> int:
        return self.db.execute(select(func.count(models.Achievement.id))).scalar() or 0

    def get_all(self) -> list[models.Achievement]:
        stmt = select(models.Achievement).order_by(
            models.Achievement.point_value.desc(), models.Achievement.id
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_by_key(self, key: str) -> models.Achievement | None:
        stmt = select(models.Achievement).where(models.Achievement.key == key)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, **fields: Any) -> models.Achievement:  # noqa: ANN401
        achievement = models.Achievement(**fields)
        self.db.add(achievement)
        self.db.flush()
        self.db.refresh(achievement)
        return achievement


class UserAchievementRepository:
    """Repository for UserAchievement database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_by_user(self, user_id: int) -> list[models.UserAchievement]:
        """Earned achievements with their badge, most recent first."""
        stmt = (
            select(models.UserAchievement)
            .options(joinedload(models.UserAchievement.achievement))
            .where(models.UserAchievement.user_id == user_id)
            .order_by(models.UserAchievement.earned_at.desc(), models.UserAchievement.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def exists(self, user_id: int, achievement_id: int) -> bool:
        stmt = select(models.UserAchievement.id).where(
            models.UserAchievement.user_id == user_id,
            models.UserAchievement.achievement_id == achievement_id,
        )
        return self.db.execute(stmt).first() is not None

    def create(
        self, user_id: int, achievement: models.Achievement, earned_at: datetime
    ) -> models.UserAchievement:
        user_achievement = models.UserAchievement(
            user_id=user_id,
            achievement_id=achievement.id,
            points_earned=achievement.point_value,
            earned_at=earned_at,
        )
        self.db.add(user_achievement)
        self.db.flush()
        self.db.refresh(user_achievement)
        logger.info(f"Awarded achievement {achievement.key} to user {user_id}")
        return user_achievement


class PointsRepository:
    """Repository for PointsTransaction database operations and leaderboards."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def add_points(
        self,
        user: models.User,
        points: int,
        action: str,
        description: str,
        created_at: datetime,
        reference_id: str | None = None,
    ) -> models.PointsTransaction:
        """Change the user's balance and record the change in the ledger."""
        balance_before = user.total_points or 0
        user.total_points = balance_before + points
        transaction = models.PointsTransaction(
            user_id=user.id,
            points=points,
            action=action,
            description=description,
            reference_id=reference_id,
            balance_before=balance_before,
            balance_after=user.total_points,
            created_at=created_at,
        )
        self.db.add(transaction)
        self.db.flush()
        logger.info(
            f"Points {points:+d} for user {user.id} ({action}): "
            f"{balance_before} -> {user.total_points}"
        )
        return transaction

    def _achievement_counts(self) -> Subquery:
        return (
            select(
                models.UserAchievement.user_id,
                func.count(models.UserAchievement.id).label("achievement_count"),
            )
            .group_by(models.UserAchievement.user_id)
            .subquery()
        )

    def get_all_time_leaders(self, limit: int) -> list[LeaderboardRow]:
        counts = self._achievement_counts()
        stmt = (
            select(models.User, func.coalesce(counts.c.achievement_count, 0))
            .outerjoin(counts, counts.c.user_id == models.User.id)
            .where(models.User.is_active.is_(True), models.User.total_points > 0)
            .order_by(models.User.total_points.desc(), models.User.id)
            .limit(limit)
        )
        return [
            LeaderboardRow(user=user, points=user.total_points, achievement_count=int(count))
            for user, count in self.db.execute(stmt).all()
        ]

    def get_leaders_since(self, since: datetime, limit: int) -> list[LeaderboardRow]:
        """Leaders by points earned at or after ``since``."""
        earned = (
            select(
                models.PointsTransaction.user_id,
                func.sum(models.PointsTransaction.points).label("points"),
            )
            .where(models.PointsTransaction.created_at >= since)
            .group_by(models.PointsTransaction.user_id)
            .subquery()
        )
        counts = self._achievement_counts()
        stmt = (
            select(models.User, earned.c.points, func.coalesce(counts.c.achievement_count, 0))
            .join(earned, earned.c.user_id == models.User.id)
            .outerjoin(counts, counts.c.user_id == models.User.id)
            .where(models.User.is_active.is_(True), earned.c.points > 0)
            .order_by(earned.c.points.desc(), models.User.id)
            .limit(limit)
        )
        return [
            LeaderboardRow(user=user, points=int(points), achievement_count=int(count))
            for user, points, count in self.db.execute(stmt).all()
        ]
