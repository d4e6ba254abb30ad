"""API routes for courses, course content and enrollments."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser, is_admin_user
from plumbprep.exceptions import PlumbPrepError
from plumbprep.schemas.course_schemas import CourseContentType
from plumbprep.services import CourseService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["courses"])


@router.get("/courses", response_model=list[schemas.Course], status_code=status.HTTP_200_OK)
def list_courses(db: DatabaseSession) -> list[schemas.Course]:
    """List active courses. Public."""
    return CourseService(db).list_courses()


@router.get("/courses/{course_ref}", response_model=schemas.Course)
def get_course(course_ref: str, db: DatabaseSession) -> schemas.Course:
    """Get a course by numeric id or slug such as `journeyman-prep`."""
    return CourseService(db).get_course(course_ref)


@router.get("/courses/{course_ref}/content", response_model=list[schemas.CourseContent])
def get_course_content(
    course_ref: str,
    db: DatabaseSession,
    current_user: CurrentUser,
    content_type: CourseContentType | None = Query(None, alias="type"),
) -> list[schemas.CourseContent]:
    """Active content of a course in chapter, section and sort order."""
    return CourseService(db).get_course_content(course_ref, content_type)


@router.get("/courses/{course_ref}/study-plans", response_model=list[schemas.StudyPlan])
def get_study_plans(
    course_ref: str, db: DatabaseSession, current_user: CurrentUser
) -> list[schemas.StudyPlan]:
    return CourseService(db).get_study_plans(course_ref)


@router.get("/content/{content_id}", response_model=schemas.CourseContent)
def get_content(
    content_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.CourseContent:
    return CourseService(db).get_content(content_id)


@router.post(
    "/courses/{course_ref}/enroll",
    response_model=schemas.Enrollment,
    status_code=status.HTTP_200_OK,
)
def enroll(course_ref: str, db: DatabaseSession, current_user: CurrentUser) -> schemas.Enrollment:
    """
    Enroll the current user in a course.

    Enrolling twice returns the existing enrollment. Each plan allows a fixed
    number of certification tracks; going beyond it requires an upgrade.

    Raises:
        HTTPException: 404 for unknown or inactive courses, 403 when the plan's
            track allowance is used up
    """
    try:
        return CourseService(db).enroll(current_user, course_ref, is_admin_user(current_user))
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to enroll user {current_user.id} in {course_ref}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/enrollments", response_model=list[schemas.Enrollment])
def get_enrollments(db: DatabaseSession, current_user: CurrentUser) -> list[schemas.Enrollment]:
    return CourseService(db).get_enrollments(current_user.id)


@router.put("/enrollments/{enrollment_id}/progress", response_model=schemas.Enrollment)
def update_enrollment_progress(
    enrollment_id: int,
    update: schemas.EnrollmentProgressUpdate,
    db: DatabaseSession,
    current_user: CurrentUser,
) -> schemas.Enrollment:
    """Update progress of one of the current user's enrollments."""
    try:
        return CourseService(db).update_progress(enrollment_id, current_user.id, update)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to update enrollment {enrollment_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
