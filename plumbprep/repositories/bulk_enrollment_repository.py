"""Bulk enrollment repository for database operations."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class BulkEnrollmentRepository:
    """Repository for BulkEnrollmentRequest and BulkStudentEnrollment operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_by_id(self, request_id: int) -> models.BulkEnrollmentRequest | None:
        return self.db.get(models.BulkEnrollmentRequest, request_id)

    def get_by_employer(self, employer_id: int) -> list[models.BulkEnrollmentRequest]:
        stmt = (
            select(models.BulkEnrollmentRequest)
            .where(models.BulkEnrollmentRequest.employer_id == employer_id)
            .order_by(
                models.BulkEnrollmentRequest.created_at.desc(),
                models.BulkEnrollmentRequest.id.desc(),
            )
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_students(self, request_id: int) -> list[models.BulkStudentEnrollment]:
        stmt = (
            select(models.BulkStudentEnrollment)
            .where(models.BulkStudentEnrollment.request_id == request_id)
            .order_by(models.BulkStudentEnrollment.id)
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(
        self, students: list[dict[str, Any]], **fields: Any  # noqa: ANN401
    ) -> models.BulkEnrollmentRequest:
        request = models.BulkEnrollmentRequest(**fields)
        request.students = [models.BulkStudentEnrollment(**student) for student in students]
        self.db.add(request)
        self.db.flush()
        self.db.refresh(request)
        logger.info(
            f"Created bulk enrollment request {request.id} for employer {request.employer_id} "
            f"({request.student_count} students)"
        )
        return request

    def update(
        self, request: models.BulkEnrollmentRequest, **fields: Any  # noqa: ANN401
    ) -> models.BulkEnrollmentRequest:
        for key, value in fields.items():
            setattr(request, key, value)
        self.db.flush()
        self.db.refresh(request)
        return request
