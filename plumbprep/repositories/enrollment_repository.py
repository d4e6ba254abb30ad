"""Course enrollment repository."""

import logging

from sqlalchemy import func, select
from sqlalchemy.orm import Session, joinedload

from plumbprep import models

logger = logging.getLogger(__name__)


class EnrollmentRepository:
    """Repository for CourseEnrollment database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get(self, user_id: int, course_id: int) -> models.CourseEnrollment | None:
        stmt = select(models.CourseEnrollment).where(
            models.CourseEnrollment.user_id == user_id,
            models.CourseEnrollment.course_id == course_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_id(self, enrollment_id: int, user_id: int) -> models.CourseEnrollment | None:
        """Get an enrollment by its ID, verifying user ownership."""
        stmt = select(models.CourseEnrollment).where(
            models.CourseEnrollment.id == enrollment_id,
            models.CourseEnrollment.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user(self, user_id: int) -> list[models.CourseEnrollment]:
        stmt = (
            select(models.CourseEnrollment)
            .options(joinedload(models.CourseEnrollment.course))
            .where(models.CourseEnrollment.user_id == user_id)
            .order_by(models.CourseEnrollment.enrolled_at.desc(), models.CourseEnrollment.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def count_by_user(self, user_id: int) -> int:
        stmt = select(func.count(models.CourseEnrollment.id)).where(
            models.CourseEnrollment.user_id == user_id
        )
        return self.db.execute(stmt).scalar() or 0

    def create(self, user_id: int, course_id: int) -> models.CourseEnrollment:
        enrollment = models.CourseEnrollment(
            user_id=user_id,
            course_id=course_id,
            progress=0,
            completed_lessons=[],
            test_scores={},
        )
        self.db.add(enrollment)
        self.db.flush()
        self.db.refresh(enrollment)
        logger.info(f"Enrolled user {user_id} in course {course_id} (id={enrollment.id})")
        return enrollment
