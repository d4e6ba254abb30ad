"""API routes for the employer portal."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser, is_admin_user
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import EmployerService
from plumbprep.services.billing import StripeBillingGateway, get_billing_gateway
from plumbprep.services.employer_service import calculate_job_posting_quote

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/employers", tags=["employers"])


@router.post("", response_model=schemas.Employer, status_code=status.HTTP_201_CREATED)
def register_employer(
    employer: schemas.EmployerCreate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.Employer:
    """
    Register an employer profile owned by the current user.

    Raises:
        HTTPException: 400 if the contact email is already registered
    """
    try:
        return EmployerService(db).register_employer(current_user, employer)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to register employer: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/me", response_model=list[schemas.Employer])
def get_my_employers(db: DatabaseSession, current_user: CurrentUser) -> list[schemas.Employer]:
    return EmployerService(db).get_my_employers(current_user)


@router.post("/job-postings/quote", response_model=schemas.JobPostingQuote)
def quote_job_postings(
    request: schemas.JobPostingQuoteRequest, current_user: CurrentUser
) -> schemas.JobPostingQuote:
    """Price a bundle of job postings. 10% off 3+, 15% off 5+, 25% off 10+."""
    return calculate_job_posting_quote(request.quantity, request.plan)


@router.post("/job-postings/payment-intent", response_model=schemas.PaymentIntentResponse)
def create_job_posting_payment_intent(
    request: schemas.JobPostingQuoteRequest,
    db: DatabaseSession,
    current_user: CurrentUser,
    gateway: Annotated[StripeBillingGateway, Depends(get_billing_gateway)],
) -> schemas.PaymentIntentResponse:
    try:
        return EmployerService(db).create_payment_intent(current_user, request, gateway)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to create job posting payment intent: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post(
    "/{employer_id}/jobs",
    response_model=schemas.EmployerJob,
    status_code=status.HTTP_201_CREATED,
)
async def post_job(
    employer_id: int, job: schemas.JobCreate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.EmployerJob:
    """
    Post a job.

    With AI enabled the posting is reviewed automatically and legitimate
    plumbing jobs go live at once. Everything else waits for an admin.
    """
    try:
        return await EmployerService(db).post_job(
            employer_id, current_user, job, is_admin_user(current_user)
        )
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to post job for employer {employer_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/{employer_id}/jobs", response_model=list[schemas.EmployerJob])
def list_employer_jobs(
    employer_id: int, db: DatabaseSession, current_user: CurrentUser
) -> list[schemas.EmployerJob]:
    """The employer's jobs with application counts and days until expiry."""
    return EmployerService(db).list_employer_jobs(
        employer_id, current_user, is_admin_user(current_user)
    )


@router.get(
    "/{employer_id}/jobs/{job_id}/applications", response_model=list[schemas.JobApplicant]
)
def get_job_applications(
    employer_id: int, job_id: int, db: DatabaseSession, current_user: CurrentUser
) -> list[schemas.JobApplicant]:
    return EmployerService(db).get_job_applications(
        employer_id, job_id, current_user, is_admin_user(current_user)
    )


@router.put("/{employer_id}/jobs/{job_id}", response_model=schemas.EmployerJob)
def update_job(
    employer_id: int,
    job_id: int,
    update: schemas.JobUpdate,
    db: DatabaseSession,
    current_user: CurrentUser,
) -> schemas.EmployerJob:
    try:
        return EmployerService(db).update_job(
            employer_id, job_id, current_user, update, is_admin_user(current_user)
        )
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to update job {job_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.patch("/{employer_id}/jobs/{job_id}/status", response_model=schemas.EmployerJob)
def set_job_status(
    employer_id: int,
    job_id: int,
    update: schemas.JobStatusUpdate,
    db: DatabaseSession,
    current_user: CurrentUser,
) -> schemas.EmployerJob:
    """Activate or deactivate a posting."""
    return EmployerService(db).set_job_status(
        employer_id, job_id, current_user, update.is_active, is_admin_user(current_user)
    )
