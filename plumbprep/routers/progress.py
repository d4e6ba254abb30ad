"""API routes for quiz attempts and section progress."""

import logging

from fastapi import APIRouter, HTTPException, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser, is_admin_user
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import ProgressService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["progress"])


@router.post(
    "/quiz-attempts",
    response_model=schemas.QuizAttemptResult,
    status_code=status.HTTP_201_CREATED,
)
def submit_quiz_attempt(
    attempt: schemas.QuizAttemptCreate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.QuizAttemptResult:
    """
    Record a quiz attempt.

    Passing the quiz of a section unlocks the next section of the course.

    Raises:
        HTTPException: 404 if the quiz does not exist, 400 if the content is not a quiz
    """
    try:
        return ProgressService(db).submit_attempt(current_user.id, attempt)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to record quiz attempt for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/quiz-attempts", response_model=list[schemas.QuizAttempt])
def list_quiz_attempts(
    db: DatabaseSession, current_user: CurrentUser, content_id: int | None = None
) -> list[schemas.QuizAttempt]:
    """The current user's attempts, newest first."""
    return ProgressService(db).list_attempts(current_user.id, content_id)


@router.get("/quiz-attempts/latest/{content_id}", response_model=schemas.QuizAttempt)
def get_latest_quiz_attempt(
    content_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.QuizAttempt:
    return ProgressService(db).get_latest_attempt(current_user.id, content_id)


@router.get("/section-progress/{course_ref}", response_model=schemas.SectionStatusResponse)
def get_section_progress(
    course_ref: str, db: DatabaseSession, current_user: CurrentUser
) -> schemas.SectionStatusResponse:
    """Unlock state of every section of a course. Admins see everything unlocked."""
    return ProgressService(db).get_section_status(
        current_user.id, course_ref, is_admin_user(current_user)
    )


@router.get(
    "/section-progress/{course_ref}/{chapter}/{section}/unlocked",
    response_model=schemas.SectionUnlockedResponse,
)
def is_section_unlocked(
    course_ref: str, chapter: int, section: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.SectionUnlockedResponse:
    return ProgressService(db).is_section_unlocked(
        current_user.id, course_ref, chapter, section, is_admin_user(current_user)
    )
