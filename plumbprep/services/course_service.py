"""Service layer for courses, course content and enrollments."""

import logging

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas, subscription_tiers
from plumbprep.exceptions import (
    ContentNotFoundError,
    CourseNotFoundError,
    NotFoundError,
    SubscriptionRequiredError,
)
from plumbprep.seed import seed_courses
from plumbprep.utils import utc_now

logger = logging.getLogger(__name__)
structlog_logger = structlog.get_logger(__name__)

DEFAULT_STUDY_PLAN_MINUTES = 30


class EnrollmentNotFoundError(NotFoundError):
    """Enrollment not found error."""

    def __init__(self, enrollment_id: int) -> None:
        """Initialize with enrollment ID."""
        self.enrollment_id = enrollment_id
        super().__init__(f"Enrollment with id {enrollment_id} not found")


def resolve_course(db: Session, course_ref: str) -> models.Course:
    """
    Find a course by numeric id or friendly slug such as ``journeyman-prep``.

    Raises:
        CourseNotFoundError: If neither matches
    """
    repo = repositories.CourseRepository(db)
    course = repo.get_by_id(int(course_ref)) if course_ref.isdigit() else None
    if course is None:
        course = repo.get_by_slug(course_ref.lower())
    if course is None:
        raise CourseNotFoundError(course_ref)
    return course


class CourseService:
    """Service for handling course-related operations."""

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.course_repo = repositories.CourseRepository(db)
        self.content_repo = repositories.CourseContentRepository(db)
        self.enrollment_repo = repositories.EnrollmentRepository(db)

    def list_courses(self) -> list[schemas.Course]:
        """Active courses; the catalogue is seeded on first access."""
        if seed_courses(self.db):
            structlog_logger.info("course_catalog_seeded")
        return [schemas.Course.model_validate(c) for c in self.course_repo.get_all_active()]

    def get_course(self, course_ref: str) -> schemas.Course:
        return schemas.Course.model_validate(resolve_course(self.db, course_ref))

    def get_course_content(
        self, course_ref: str, content_type: str | None = None
    ) -> list[schemas.CourseContent]:
        course = resolve_course(self.db, course_ref)
        contents = self.content_repo.get_by_course(course.id, content_type)
        return [schemas.CourseContent.model_validate(c) for c in contents]

    def get_content(self, content_id: int) -> schemas.CourseContent:
        content = self.content_repo.get_by_id(content_id)
        if content is None or not content.is_active:
            raise ContentNotFoundError(content_id)
        return schemas.CourseContent.model_validate(content)

    def get_study_plans(self, course_ref: str) -> list[schemas.StudyPlan]:
        course = resolve_course(self.db, course_ref)
        plans = self.content_repo.get_by_course(course.id, "study_plans")
        return [
            schemas.StudyPlan(
                id=plan.id,
                title=plan.title,
                description=plan.description,
                duration=plan.duration or DEFAULT_STUDY_PLAN_MINUTES,
                content=plan.content,
            )
            for plan in plans
        ]

    def enroll(self, user: models.User, course_ref: str, is_admin: bool = False) -> schemas.Enrollment:
        """
        Enroll a user in a course. Enrolling twice returns the existing enrollment.

        Raises:
            CourseNotFoundError: If the course does not exist or is inactive
            SubscriptionRequiredError: If the tier's certification track allowance is used up
        """
        course = resolve_course(self.db, course_ref)
        if not course.is_active:
            raise CourseNotFoundError(course_ref)

        existing = self.enrollment_repo.get(user.id, course.id)
        if existing is not None:
            return schemas.Enrollment.model_validate(existing)

        tier = subscription_tiers.effective_tier(user.subscription_tier, user.subscription_status)
        limit = subscription_tiers.get_certification_track_limit(tier)
        if not is_admin and self.enrollment_repo.count_by_user(user.id) >= limit:
            if tier != user.subscription_tier:
                raise SubscriptionRequiredError(
                    "Additional certification tracks require an active subscription",
                    required_tier=user.subscription_tier,
                )
            raise SubscriptionRequiredError(
                f"Your {subscription_tiers.get_tier_display_name(tier)} plan "
                f"includes {limit} certification track(s). Upgrade to enroll in more courses.",
                required_tier=subscription_tiers.next_tier(tier),
            )

        enrollment = self.enrollment_repo.create(user.id, course.id)
        self.db.commit()
        self.db.refresh(enrollment)
        structlog_logger.info("course_enrolled", user_id=user.id, course_id=course.id)
        return schemas.Enrollment.model_validate(enrollment)

    def get_enrollments(self, user_id: int) -> list[schemas.Enrollment]:
        return [
            schemas.Enrollment.model_validate(e) for e in self.enrollment_repo.get_by_user(user_id)
        ]

    def update_progress(
        self, enrollment_id: int, user_id: int, update: schemas.EnrollmentProgressUpdate
    ) -> schemas.Enrollment:
        """Record progress; reaching 100% marks the enrollment completed."""
        enrollment = self.enrollment_repo.get_by_id(enrollment_id, user_id)
        if enrollment is None:
            raise EnrollmentNotFoundError(enrollment_id)

        enrollment.progress = update.progress
        if update.completed_lessons is not None:
            enrollment.completed_lessons = sorted(set(update.completed_lessons))
        if update.test_scores is not None:
            enrollment.test_scores = {**enrollment.test_scores, **update.test_scores}
        if update.progress >= 100 and not enrollment.is_completed:
            enrollment.is_completed = True
            enrollment.completed_at = utc_now()

        self.db.commit()
        self.db.refresh(enrollment)
        logger.info(f"Updated progress for enrollment {enrollment_id}: {update.progress}%")
        return schemas.Enrollment.model_validate(enrollment)

    # --- Admin content management ---

    def create_content(
        self, course_ref: str, data: schemas.CourseContentCreate
    ) -> schemas.CourseContent:
        course = resolve_course(self.db, course_ref)
        content = self.content_repo.create(course.id, **data.model_dump())
        self.db.commit()
        return schemas.CourseContent.model_validate(content)

    def update_content(
        self, content_id: int, data: schemas.CourseContentUpdate
    ) -> schemas.CourseContent:
        content = self.content_repo.get_by_id(content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        content = self.content_repo.update(content, **data.model_dump(exclude_unset=True))
        self.db.commit()
        return schemas.CourseContent.model_validate(content)

    def delete_content(self, content_id: int) -> None:
        content = self.content_repo.get_by_id(content_id)
        if content is None:
            raise ContentNotFoundError(content_id)
        self.content_repo.delete(content)
        self.db.commit()

    def get_course_stats(self, course_ref: str) -> schemas.CourseStats:
        course = resolve_course(self.db, course_ref)
        counts = self.content_repo.get_type_counts(course.id)
        return schemas.CourseStats(
            course_id=course.id,
            lesson_count=counts.get("lesson", 0),
            quiz_count=counts.get("quiz", 0),
            content_count=sum(counts.values()),
            total_minutes=self.content_repo.get_total_duration(course.id),
        )
