"""Service layer for employer bulk enrollment requests."""

from collections.abc import Callable
from datetime import datetime

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.exceptions import NotFoundError, PermissionDeniedError, ValidationError
from plumbprep.services.bulk_pricing_service import calculate_bulk_price
from plumbprep.services.employer_service import EmployerNotFoundError
from plumbprep.services.notification_service import NotificationService
from plumbprep.utils import utc_now

logger = structlog.get_logger(__name__)


class BulkEnrollmentService:
    """
    Employers ask to enroll a group of students at the bulk discount; an
    admin approves the request. Pricing is fixed when the request is made.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now) -> None:
        """Initialize service with database session and an injectable clock."""
        self.db = db
        self.clock = clock
        self.bulk_repo = repositories.BulkEnrollmentRepository(db)
        self.employer_repo = repositories.EmployerRepository(db)
        self.notification_service = NotificationService(db)

    def _get_employer(self, employer_id: int, user: models.User, is_admin: bool) -> models.Employer:
        employer = self.employer_repo.get_by_id(employer_id)
        if employer is None:
            raise EmployerNotFoundError(employer_id)
        if employer.owner_id != user.id and not is_admin:
            raise PermissionDeniedError("You do not manage this employer")
        return employer

    def _get_request(self, request_id: int) -> models.BulkEnrollmentRequest:
        bulk_request = self.bulk_repo.get_by_id(request_id)
        if bulk_request is None:
            raise NotFoundError(f"Bulk enrollment request {request_id} not found")
        return bulk_request

    def create_request(
        self, data: schemas.BulkEnrollmentCreate, user: models.User, is_admin: bool = False
    ) -> schemas.BulkEnrollmentCreateResponse:
        employer = self._get_employer(data.employer_id, user, is_admin)
        pricing = calculate_bulk_price(
            schemas.BulkPricingRequest(student_count=len(data.students), courses=data.courses)
        )
        bulk_request = self.bulk_repo.create(
            students=[
                {
                    "student_email": student.email.lower(),
                    "student_first_name": student.first_name,
                    "student_last_name": student.last_name,
                }
                for student in data.students
            ],
            employer_id=employer.id,
            student_count=pricing.student_count,
            courses=pricing.courses,
            total_price=pricing.total_price,
            discount_rate=pricing.discount_rate,
            final_price=pricing.final_price,
            contact_email=data.contact_email,
            contact_phone=data.contact_phone,
            notes=data.notes,
            requested_start_date=data.requested_start_date,
            status="pending",
        )
        self.db.commit()

        logger.info(
            "bulk_enrollment_requested",
            employer_id=employer.id,
            request_id=bulk_request.id,
            student_count=pricing.student_count,
            final_price=pricing.final_price,
        )
        return schemas.BulkEnrollmentCreateResponse(
            message="Bulk enrollment request created successfully",
            request=schemas.BulkEnrollmentRequest.model_validate(bulk_request),
            pricing=pricing,
        )

    def list_requests(
        self, employer_id: int, user: models.User, is_admin: bool = False
    ) -> schemas.BulkEnrollmentListResponse:
        employer = self._get_employer(employer_id, user, is_admin)
        return schemas.BulkEnrollmentListResponse(
            requests=[
                schemas.BulkEnrollmentRequest.model_validate(r)
                for r in self.bulk_repo.get_by_employer(employer.id)
            ]
        )

    def list_students(
        self, request_id: int, user: models.User, is_admin: bool = False
    ) -> schemas.BulkStudentListResponse:
        bulk_request = self._get_request(request_id)
        self._get_employer(bulk_request.employer_id, user, is_admin)
        return schemas.BulkStudentListResponse(
            students=[
                schemas.BulkStudentEnrollment.model_validate(s)
                for s in self.bulk_repo.get_students(bulk_request.id)
            ]
        )

    def approve_request(
        self, request_id: int, admin_id: int
    ) -> schemas.BulkEnrollmentApproveResponse:
        """
        Approve a pending request and tell the employer.

        Raises:
            NotFoundError: If the request does not exist
            ValidationError: If it is not pending
        """
        bulk_request = self._get_request(request_id)
        if bulk_request.status != "pending":
            raise ValidationError(f"Bulk enrollment request is already {bulk_request.status}")

        bulk_request = self.bulk_repo.update(
            bulk_request, status="approved", approved_by_id=admin_id, approved_at=self.clock()
        )
        employer = self.employer_repo.get_by_id(bulk_request.employer_id)
        if employer is not None:
            self.notification_service.notify(
                user_id=employer.owner_id,
                notification_type="bulk_enrollment_approved",
                title="Bulk enrollment approved",
                message=(
                    f"Your request to enroll {bulk_request.student_count} students "
                    "has been approved."
                ),
                link=f"/employers/{employer.id}/bulk-enrollment",
            )
        self.db.commit()

        logger.info("bulk_enrollment_approved", request_id=request_id, approved_by=admin_id)
        return schemas.BulkEnrollmentApproveResponse(
            message="Bulk enrollment request approved successfully",
            request=schemas.BulkEnrollmentRequest.model_validate(bulk_request),
        )
