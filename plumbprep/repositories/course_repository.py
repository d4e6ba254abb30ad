"""Course and course content repositories."""

import logging
from typing import Any

from sqlalchemy import Select, func, select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class CourseRepository:
    """Repository for Course database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_all_active(self) -> list[models.Course]:
        stmt = (
            select(models.Course)
            .where(models.Course.is_active.is_(True))
            .order_by(models.Course.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def count(self) -> int:
        stmt = select(func.count(models.Course.id))
        return self.db.execute(stmt).scalar() or 0

    def get_by_id(self, course_id: int) -> models.Course | None:
        stmt = select(models.Course).where(models.Course.id == course_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_slug(self, slug: str) -> models.Course | None:
        stmt = select(models.Course).where(models.Course.slug == slug)
        return self.db.execute(stmt).scalar_one_or_none()

    def create(self, **fields: Any) -> models.Course:  # noqa: ANN401
        course = models.Course(**fields)
        self.db.add(course)
        self.db.flush()
        self.db.refresh(course)
        logger.info(f"Created course: {course.slug} (id={course.id})")
        return course


class CourseContentRepository:
    """Repository for CourseContent database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def _ordered(self, course_id: int) -> Select[tuple[models.CourseContent]]:
        return (
            select(models.CourseContent)
            .where(
                models.CourseContent.course_id == course_id,
                models.CourseContent.is_active.is_(True),
            )
            .order_by(
                models.CourseContent.chapter,
                models.CourseContent.section,
                models.CourseContent.sort_order,
                models.CourseContent.id,
            )
        )

    def get_by_id(self, content_id: int) -> models.CourseContent | None:
        stmt = select(models.CourseContent).where(models.CourseContent.id == content_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_course(
        self, course_id: int, content_type: str | None = None
    ) -> list[models.CourseContent]:
        """Active content of a course in chapter, section, sort order."""
        stmt = self._ordered(course_id)
        if content_type:
            stmt = stmt.where(models.CourseContent.content_type == content_type)
        return list(self.db.execute(stmt).scalars().all())

    def get_sections(self, course_id: int) -> list[tuple[int | None, int]]:
        """Distinct (chapter, section) pairs of a course in content order."""
        stmt = (
            select(models.CourseContent.chapter, models.CourseContent.section)
            .where(
                models.CourseContent.course_id == course_id,
                models.CourseContent.is_active.is_(True),
                models.CourseContent.section.is_not(None),
            )
            .distinct()
            .order_by(models.CourseContent.chapter, models.CourseContent.section)
        )
        return [(row.chapter, row.section) for row in self.db.execute(stmt).all()]

    def create(self, course_id: int, **fields: Any) -> models.CourseContent:  # noqa: ANN401
        content = models.CourseContent(course_id=course_id, **fields)
        self.db.add(content)
        self.db.flush()
        self.db.refresh(content)
        logger.info(
            f"Created course content: course_id={course_id}, type={content.content_type} "
            f"(id={content.id})"
        )
        return content

    def update(self, content: models.CourseContent, **fields: Any) -> models.CourseContent:  # noqa: ANN401
        for key, value in fields.items():
            setattr(content, key, value)
        self.db.flush()
        self.db.refresh(content)
        return content

    def delete(self, content: models.CourseContent) -> None:
        self.db.delete(content)
        self.db.flush()
        logger.info(f"Deleted course content {content.id}")

    def get_type_counts(self, course_id: int) -> dict[str, int]:
        """Number of active content items per content type."""
        stmt = (
            select(models.CourseContent.content_type, func.count(models.CourseContent.id))
            .where(
                models.CourseContent.course_id == course_id,
                models.CourseContent.is_active.is_(True),
            )
            .group_by(models.CourseContent.content_type)
        )
        return {content_type: count for content_type, count in self.db.execute(stmt).all()}

    def get_total_duration(self, course_id: int) -> int:
        stmt = select(func.coalesce(func.sum(models.CourseContent.duration), 0)).where(
            models.CourseContent.course_id == course_id,
            models.CourseContent.is_active.is_(True),
        )
        return int(self.db.execute(stmt).scalar() or 0)
