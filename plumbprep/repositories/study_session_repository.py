"""Study session repository for database operations."""

import logging
from dataclasses import dataclass
from datetime import date, datetime

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from plumbprep import models
from plumbprep.utils import ensure_utc

logger = logging.getLogger(__name__)


@dataclass
class StudyTotals:
    """Aggregate over a user's completed study sessions."""

    total_seconds: int
    sessions_count: int


class StudySessionRepository:
    """Repository for StudySession database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def create(
        self,
        user_id: int,
        content_id: str,
        content_type: str,
        started_at: datetime,
        study_plan_id: int | None = None,
        estimated_duration: int | None = None,
    ) -> models.StudySession:
        session = models.StudySession(
            user_id=user_id,
            content_id=content_id,
            content_type=content_type,
            started_at=started_at,
            study_plan_id=study_plan_id,
            estimated_duration=estimated_duration,
            sections_completed=0,
            segment_started_at=started_at,
            active_seconds=0,
            is_paused=False,
            completed=False,
        )
        self.db.add(session)
        self.db.flush()
        self.db.refresh(session)
        logger.info(
            f"Started study session: content={content_type}:{content_id} "
            f"(id={session.id}, user_id={user_id})"
        )
        return session

    def get_by_id(self, session_id: int, user_id: int) -> models.StudySession | None:
        """Get a study session by its ID, verifying user ownership."""
        stmt = select(models.StudySession).where(
            models.StudySession.id == session_id,
            models.StudySession.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user(
        self, user_id: int, content_id: str | None = None, limit: int = 50, offset: int = 0
    ) -> list[models.StudySession]:
        stmt = select(models.StudySession).where(models.StudySession.user_id == user_id)
        if content_id is not None:
            stmt = stmt.where(models.StudySession.content_id == content_id)
        stmt = (
            stmt.order_by(models.StudySession.started_at.desc(), models.StudySession.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_by_user(self, user_id: int, content_id: str | None = None) -> int:
        stmt = select(func.count(models.StudySession.id)).where(
            models.StudySession.user_id == user_id
        )
        if content_id is not None:
            stmt = stmt.where(models.StudySession.content_id == content_id)
        return self.db.execute(stmt).scalar() or 0

    def get_completed_totals(self, user_id: int) -> StudyTotals:
        stmt = select(
            func.coalesce(func.sum(models.StudySession.duration_seconds), 0),
            func.count(models.StudySession.id),
        ).where(
            models.StudySession.user_id == user_id,
            models.StudySession.completed.is_(True),
        )
        total, count = self.db.execute(stmt).one()
        return StudyTotals(total_seconds=int(total or 0), sessions_count=int(count or 0))

    def save(self, session: models.StudySession) -> models.StudySession:
        self.db.flush()
        self.db.refresh(session)
        return session

    def get_study_days(self, user_id: int) -> list[date]:
        """Distinct UTC calendar days with a started study session, newest first."""
        stmt = select(models.StudySession.started_at).where(
            models.StudySession.user_id == user_id
        )
        days = {ensure_utc(started_at).date() for started_at in self.db.execute(stmt).scalars()}
        return sorted(days, reverse=True)
