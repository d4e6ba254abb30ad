"""API routes for employer bulk enrollment requests."""

import logging

from fastapi import APIRouter, HTTPException, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import AdminUser, CurrentUser, is_admin_user
from plumbprep.exceptions import PlumbPrepError
from plumbprep.services import BulkEnrollmentService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/bulk-enrollment", tags=["bulk-enrollment"])


@router.post(
    "/request",
    response_model=schemas.BulkEnrollmentCreateResponse,
    status_code=status.HTTP_201_CREATED,
)
def create_bulk_enrollment_request(
    request: schemas.BulkEnrollmentCreate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.BulkEnrollmentCreateResponse:
    """
    Ask to enroll a group of students at the bulk discount.

    The quote is calculated now and stored with the request.
    """
    try:
        return BulkEnrollmentService(db).create_request(
            request, current_user, is_admin_user(current_user)
        )
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(
            f"Failed to create bulk enrollment request for employer {request.employer_id}: {e!s}",
            exc_info=True,
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/requests/{employer_id}", response_model=schemas.BulkEnrollmentListResponse)
def list_bulk_enrollment_requests(
    employer_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.BulkEnrollmentListResponse:
    return BulkEnrollmentService(db).list_requests(
        employer_id, current_user, is_admin_user(current_user)
    )


@router.get("/{request_id}/students", response_model=schemas.BulkStudentListResponse)
def list_bulk_enrollment_students(
    request_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.BulkStudentListResponse:
    return BulkEnrollmentService(db).list_students(
        request_id, current_user, is_admin_user(current_user)
    )


@router.post("/{request_id}/approve", response_model=schemas.BulkEnrollmentApproveResponse)
def approve_bulk_enrollment_request(
    request_id: int, db: DatabaseSession, admin: AdminUser
) -> schemas.BulkEnrollmentApproveResponse:
    """Approve a pending request (admin only). The approving admin is recorded."""
    try:
        return BulkEnrollmentService(db).approve_request(request_id, admin.id)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to approve bulk enrollment request {request_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e
