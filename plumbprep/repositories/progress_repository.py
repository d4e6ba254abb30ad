"""Quiz attempt and section progress repositories."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class QuizAttemptRepository:
    """Repository for QuizAttempt database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def create(self, **fields: Any) -> models.QuizAttempt:  # noqa: ANN401
        attempt = models.QuizAttempt(**fields)
        self.db.add(attempt)
        self.db.flush()
        self.db.refresh(attempt)
        logger.info(
            f"Recorded quiz attempt: content_id={attempt.content_id}, score={attempt.score}, "
            f"passed={attempt.passed} (id={attempt.id}, user_id={attempt.user_id})"
        )
        return attempt

    def get_by_user(self, user_id: int, content_id: int | None = None) -> list[models.QuizAttempt]:
        stmt = select(models.QuizAttempt).where(models.QuizAttempt.user_id == user_id)
        if content_id is not None:
            stmt = stmt.where(models.QuizAttempt.content_id == content_id)
        stmt = stmt.order_by(models.QuizAttempt.created_at.desc(), models.QuizAttempt.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def get_latest(self, user_id: int, content_id: int) -> models.QuizAttempt | None:
        stmt = (
            select(models.QuizAttempt)
            .where(
                models.QuizAttempt.user_id == user_id,
                models.QuizAttempt.content_id == content_id,
            )
            .order_by(models.QuizAttempt.created_at.desc(), models.QuizAttempt.id.desc())
            .limit(1)
        )
        return self.db.execute(stmt).scalar_one_or_none()


class SectionProgressRepository:
    """Repository for SectionProgress database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get(
        self, user_id: int, course_id: int, chapter: int | None, section: int
    ) -> models.SectionProgress | None:
        chapter_filter = (
            models.SectionProgress.chapter.is_(None)
            if chapter is None
            else models.SectionProgress.chapter == chapter
        )
        stmt = select(models.SectionProgress).where(
            models.SectionProgress.user_id == user_id,
            models.SectionProgress.course_id == course_id,
            chapter_filter,
            models.SectionProgress.section == section,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_course(self, user_id: int, course_id: int) -> list[models.SectionProgress]:
        stmt = (
            select(models.SectionProgress)
            .where(
                models.SectionProgress.user_id == user_id,
                models.SectionProgress.course_id == course_id,
            )
            .order_by(models.SectionProgress.chapter, models.SectionProgress.section)
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_or_create(
        self, user_id: int, course_id: int, chapter: int | None, section: int
    ) -> models.SectionProgress:
        progress = self.get(user_id, course_id, chapter, section)
        if progress is not None:
            return progress
        progress = models.SectionProgress(
            user_id=user_id,
            course_id=course_id,
            chapter=chapter,
            section=section,
            is_unlocked=False,
            quiz_passed=False,
            highest_score=0,
            attempt_count=0,
        )
        self.db.add(progress)
        self.db.flush()
        self.db.refresh(progress)
        return progress
