"""Service layer for quiz attempts and section unlocking."""

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.config import get_settings
from plumbprep.exceptions import ContentNotFoundError, NotFoundError, ValidationError
from plumbprep.services.course_service import resolve_course
from plumbprep.services.notification_service import NotificationService
from plumbprep.utils import utc_now

logger = structlog.get_logger(__name__)


class QuizAttemptNotFoundError(NotFoundError):
    """No quiz attempt recorded for the content."""

    def __init__(self, content_id: int) -> None:
        """Initialize with the quiz content ID."""
        self.content_id = content_id
        super().__init__(f"No quiz attempts found for content {content_id}")


class ProgressService:
    """
    Tracks quiz attempts and which course sections a learner has unlocked.

    Sections are the distinct (chapter, section) pairs of a course's content in
    chapter/section order. The first section is always open; passing a section's
    quiz opens the next one.
    """

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.settings = get_settings()
        self.content_repo = repositories.CourseContentRepository(db)
        self.attempt_repo = repositories.QuizAttemptRepository(db)
        self.section_repo = repositories.SectionProgressRepository(db)
        self.notification_service = NotificationService(db)

    def _always_unlocked(
        self, chapter: int | None, section: int, sections: list[tuple[int | None, int]]
    ) -> bool:
        if section == self.settings.FIRST_SECTION:
            return True
        return bool(sections) and sections[0] == (chapter, section)

    def submit_attempt(
        self, user_id: int, data: schemas.QuizAttemptCreate
    ) -> schemas.QuizAttemptResult:
        """
        Record a quiz attempt and update section progress.

        Raises:
            ContentNotFoundError: If the quiz content does not exist
            ValidationError: If the content is not a quiz
        """
        content = self.content_repo.get_by_id(data.content_id)
        if content is None or not content.is_active:
            raise ContentNotFoundError(data.content_id)
        if content.content_type != "quiz":
            raise ValidationError(f"Content {content.id} is not a quiz")

        passing_score = self.settings.QUIZ_PASSING_SCORE
        passed = data.score >= passing_score
        now = utc_now()

        attempt = self.attempt_repo.create(
            user_id=user_id,
            content_id=content.id,
            course_id=content.course_id,
            chapter=content.chapter,
            section=content.section,
            score=data.score,
            passed=passed,
            answers=data.answers,
        )

        unlocked_section: int | None = None
        if content.section is not None:
            progress = self.section_repo.get_or_create(
                user_id, content.course_id, content.chapter, content.section
            )
            progress.attempt_count += 1
            progress.last_attempt_at = now
            progress.highest_score = max(progress.highest_score, data.score)
            if passed:
                progress.quiz_passed = True
                if not progress.is_unlocked:
                    progress.is_unlocked = True
                    progress.unlocked_at = now
                unlocked_section = self._unlock_next_section(user_id, content)

        self.db.commit()
        self.db.refresh(attempt)

        logger.info(
            "quiz_attempt_recorded",
            user_id=user_id,
            content_id=content.id,
            score=data.score,
            passed=passed,
            unlocked_section=unlocked_section,
        )
        return schemas.QuizAttemptResult(
            attempt=schemas.QuizAttempt.model_validate(attempt),
            passing_score=passing_score,
            next_section_unlocked=unlocked_section,
        )

    def _unlock_next_section(self, user_id: int, content: models.CourseContent) -> int | None:
        """Unlock the section after ``content``'s section. Returns it when newly unlocked."""
        sections = self.content_repo.get_sections(content.course_id)
        current = (content.chapter, content.section)
        if current not in sections:
            return None
        index = sections.index(current)
        if index + 1 >= len(sections):
            return None

        next_chapter, next_section = sections[index + 1]
        progress = self.section_repo.get_or_create(
            user_id, content.course_id, next_chapter, next_section
        )
        if progress.is_unlocked:
            return None
        progress.is_unlocked = True
        progress.unlocked_at = utc_now()
        self.notification_service.notify(
            user_id=user_id,
            notification_type="section_unlocked",
            title=f"Section {next_section} unlocked",
            message=f"You passed section {content.section}. Section {next_section} is now open.",
            link=f"/courses/{content.course_id}/sections/{next_section}",
        )
        return next_section

    def list_attempts(
        self, user_id: int, content_id: int | None = None
    ) -> list[schemas.QuizAttempt]:
        return [
            schemas.QuizAttempt.model_validate(a)
            for a in self.attempt_repo.get_by_user(user_id, content_id)
        ]

    def get_latest_attempt(self, user_id: int, content_id: int) -> schemas.QuizAttempt:
        attempt = self.attempt_repo.get_latest(user_id, content_id)
        if attempt is None:
            raise QuizAttemptNotFoundError(content_id)
        return schemas.QuizAttempt.model_validate(attempt)

    def get_section_status(
        self, user_id: int, course_ref: str, is_admin: bool = False
    ) -> schemas.SectionStatusResponse:
        course = resolve_course(self.db, course_ref)
        sections = self.content_repo.get_sections(course.id)
        progress_by_section = {
            (p.chapter, p.section): p
            for p in self.section_repo.get_by_course(user_id, course.id)
        }

        statuses = []
        for chapter, section in sections:
            progress = progress_by_section.get((chapter, section))
            statuses.append(
                schemas.SectionStatus(
                    chapter=chapter,
                    section=section,
                    is_unlocked=(
                        is_admin
                        or self._always_unlocked(chapter, section, sections)
                        or (progress is not None and progress.is_unlocked)
                    ),
                    quiz_passed=progress.quiz_passed if progress else False,
                    highest_score=progress.highest_score if progress else 0,
                    attempt_count=progress.attempt_count if progress else 0,
                )
            )
        return schemas.SectionStatusResponse(
            course_id=course.id, is_admin=is_admin, sections=statuses
        )

    def is_section_unlocked(
        self, user_id: int, course_ref: str, chapter: int, section: int, is_admin: bool = False
    ) -> schemas.SectionUnlockedResponse:
        course = resolve_course(self.db, course_ref)
        if is_admin:
            unlocked = True
        else:
            sections = self.content_repo.get_sections(course.id)
            progress = self.section_repo.get(user_id, course.id, chapter, section)
            unlocked = self._always_unlocked(chapter, section, sections) or (
                progress is not None and progress.is_unlocked
            )
        return schemas.SectionUnlockedResponse(
            chapter=chapter, section=section, is_unlocked=unlocked
        )
