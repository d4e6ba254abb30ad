"""API routes for the job board."""

import logging

from fastapi import APIRouter, HTTPException, Query, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import EnrolledUser
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import JobService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/jobs", tags=["jobs"])


@router.get("", response_model=schemas.JobListResponse)
def list_jobs(
    db: DatabaseSession,
    current_user: EnrolledUser,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    search: str | None = Query(None, max_length=255),
) -> schemas.JobListResponse:
    """
    Approved and active jobs, featured first then newest.

    The job board is open to learners enrolled in at least one course.
    """
    return JobService(db).list_jobs(page, limit, search)


@router.get("/applications/me", response_model=list[schemas.JobApplication])
def get_my_applications(
    db: DatabaseSession, current_user: EnrolledUser
) -> list[schemas.JobApplication]:
    return JobService(db).get_my_applications(current_user.id)


@router.get("/{job_id}", response_model=schemas.Job)
def get_job(job_id: int, db: DatabaseSession, current_user: EnrolledUser) -> schemas.Job:
    return JobService(db).get_job(job_id)


@router.post(
    "/{job_id}/apply",
    response_model=schemas.JobApplication,
    status_code=status.HTTP_201_CREATED,
)
def apply_to_job(
    job_id: int,
    application: schemas.JobApplicationCreate,
    db: DatabaseSession,
    current_user: EnrolledUser,
) -> schemas.JobApplication:
    """
    Apply to a job.

    Raises:
        HTTPException: 404 if the job is not open, 409 if already applied
    """
    try:
        return JobService(db).apply(job_id, current_user.id, application)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to apply to job {job_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
