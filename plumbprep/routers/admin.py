"""Admin API routes: job moderation, course content, store and mentor answers."""

import logging

from fastapi import APIRouter, HTTPException, Response, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import AdminUser
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import CourseService, JobService, MentorService, StoreService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/admin", tags=["admin"])


# --- Job moderation ---


@router.get("/jobs/pending", response_model=list[schemas.Job])
def get_pending_jobs(db: DatabaseSession, admin: AdminUser) -> list[schemas.Job]:
    """Jobs waiting for approval, oldest first."""
    return JobService(db).get_pending_jobs()


@router.put("/jobs/{job_id}/approve", response_model=schemas.Job)
def approve_job(job_id: int, db: DatabaseSession, admin: AdminUser) -> schemas.Job:
    try:
        return JobService(db).approve_job(job_id, admin.id)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to approve job {job_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.put("/jobs/{job_id}/reject", response_model=schemas.Job)
def reject_job(
    job_id: int, request: schemas.JobRejectRequest, db: DatabaseSession, admin: AdminUser
) -> schemas.Job:
    try:
        return JobService(db).reject_job(job_id, admin.id, request.reason)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to reject job {job_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


# --- Course content ---


@router.post(
    "/courses/{course_ref}/content",
    response_model=schemas.CourseContent,
    status_code=status.HTTP_201_CREATED,
)
def create_content(
    course_ref: str, content: schemas.CourseContentCreate, db: DatabaseSession, admin: AdminUser
) -> schemas.CourseContent:
    return CourseService(db).create_content(course_ref, content)


@router.put("/content/{content_id}", response_model=schemas.CourseContent)
def update_content(
    content_id: int, update: schemas.CourseContentUpdate, db: DatabaseSession, admin: AdminUser
) -> schemas.CourseContent:
    return CourseService(db).update_content(content_id, update)


@router.delete("/content/{content_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_content(content_id: int, db: DatabaseSession, admin: AdminUser) -> Response:
    CourseService(db).delete_content(content_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/courses/{course_ref}/stats", response_model=schemas.CourseStats)
def get_course_stats(course_ref: str, db: DatabaseSession, admin: AdminUser) -> schemas.CourseStats:
    """Lesson and quiz counts and total minutes of a course."""
    return CourseService(db).get_course_stats(course_ref)


# --- Store ---


@router.post("/products", response_model=schemas.Product, status_code=status.HTTP_201_CREATED)
def create_product(
    product: schemas.ProductCreate, db: DatabaseSession, admin: AdminUser
) -> schemas.Product:
    return StoreService(db).create_product(product)


@router.put("/products/{product_id}", response_model=schemas.Product)
def update_product(
    product_id: int, update: schemas.ProductUpdate, db: DatabaseSession, admin: AdminUser
) -> schemas.Product:
    return StoreService(db).update_product(product_id, update)


@router.delete("/products/{product_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_product(product_id: int, db: DatabaseSession, admin: AdminUser) -> Response:
    """Soft delete: the product is hidden from the store."""
    StoreService(db).deactivate_product(product_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.put("/reviews/{review_id}/approve", response_model=schemas.Review)
def approve_review(review_id: int, db: DatabaseSession, admin: AdminUser) -> schemas.Review:
    return StoreService(db).approve_review(review_id)


# --- Mentor ---


@router.post("/chat-answers", response_model=schemas.ChatAnswerImportResponse)
def import_chat_answers(
    request: schemas.ChatAnswerImportRequest, db: DatabaseSession, admin: AdminUser
) -> schemas.ChatAnswerImportResponse:
    """Import canned mentor answers matched by keyword."""
    try:
        return MentorService(db).import_answers(request)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to import chat answers: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
