"""Service layer for the job board and job moderation."""

import math

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.exceptions import ConflictError, JobNotFoundError, ValidationError
from plumbprep.services.notification_service import NotificationService
from plumbprep.utils import ensure_utc, utc_now

logger = structlog.get_logger(__name__)


class JobService:
    """Public job board, learner applications and admin approval."""

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.job_repo = repositories.JobRepository(db)
        self.application_repo = repositories.JobApplicationRepository(db)
        self.employer_repo = repositories.EmployerRepository(db)
        self.notification_service = NotificationService(db)

    def _get_public_job(self, job_id: int) -> models.Job:
        job = self.job_repo.get_by_id(job_id)
        if job is None or not job.is_active or job.status != "approved":
            raise JobNotFoundError(job_id)
        if job.expires_at is not None and ensure_utc(job.expires_at) <= utc_now():
            raise JobNotFoundError(job_id)
        return job

    def list_jobs(
        self, page: int = 1, limit: int = 10, search: str | None = None
    ) -> schemas.JobListResponse:
        jobs, total = self.job_repo.get_public(search, (page - 1) * limit, limit)
        return schemas.JobListResponse(
            jobs=[schemas.Job.model_validate(job) for job in jobs],
            total=total,
            page=page,
            limit=limit,
            total_pages=math.ceil(total / limit) if total else 0,
        )

    def get_job(self, job_id: int) -> schemas.Job:
        return schemas.Job.model_validate(self._get_public_job(job_id))

    def apply(
        self, job_id: int, user_id: int, data: schemas.JobApplicationCreate
    ) -> schemas.JobApplication:
        """
        Apply to an approved and active job.

        Raises:
            JobNotFoundError: If the job is missing or not open
            ConflictError: If the user already applied
        """
        job = self._get_public_job(job_id)
        if self.application_repo.get(job.id, user_id) is not None:
            raise ConflictError("You have already applied to this job")

        application = self.application_repo.create(
            job_id=job.id,
            user_id=user_id,
            cover_letter=data.cover_letter,
            resume_url=data.resume_url,
        )
        employer = self.employer_repo.get_by_id(job.employer_id) if job.employer_id else None
        if employer is not None:
            self.notification_service.notify(
                user_id=employer.owner_id,
                notification_type="job_application",
                title=f"New application for {job.title}",
                message=f"A candidate applied to your {job.title} posting.",
                link=f"/employers/{employer.id}/jobs/{job.id}/applications",
            )
        self.db.commit()
        self.db.refresh(application)

        logger.info("job_application_created", job_id=job.id, user_id=user_id)
        return schemas.JobApplication.model_validate(application)

    def get_my_applications(self, user_id: int) -> list[schemas.JobApplication]:
        return [
            schemas.JobApplication.model_validate(a)
            for a in self.application_repo.get_by_user(user_id)
        ]

    def get_pending_jobs(self) -> list[schemas.Job]:
        return [schemas.Job.model_validate(job) for job in self.job_repo.get_pending()]

    def _notify_owner(self, job: models.Job, notification_type: str, title: str, message: str) -> None:
        employer = self.employer_repo.get_by_id(job.employer_id) if job.employer_id else None
        if employer is None:
            return
        self.notification_service.notify(
            user_id=employer.owner_id,
            notification_type=notification_type,
            title=title,
            message=message,
            link=f"/employers/{employer.id}/jobs",
        )

    def approve_job(self, job_id: int, admin_id: int) -> schemas.Job:
        job = self.job_repo.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError(job_id)

        job = self.job_repo.update(
            job,
            status="approved",
            approved_by_id=admin_id,
            approved_at=utc_now(),
            rejection_reason=None,
        )
        self._notify_owner(
            job,
            "job_approved",
            f"Job approved: {job.title}",
            f"Your posting '{job.title}' is now live on the job board.",
        )
        self.db.commit()

        logger.info("job_approved", job_id=job_id, admin_id=admin_id)
        return schemas.Job.model_validate(job)

    def reject_job(self, job_id: int, admin_id: int, reason: str) -> schemas.Job:
        job = self.job_repo.get_by_id(job_id)
        if job is None:
            raise JobNotFoundError(job_id)
        if not reason.strip():
            raise ValidationError("A rejection reason is required")

        job = self.job_repo.update(job, status="rejected", rejection_reason=reason.strip())
        self._notify_owner(
            job,
            "job_rejected",
            f"Job not approved: {job.title}",
            f"Your posting '{job.title}' was not approved. Reason: {job.rejection_reason}",
        )
        self.db.commit()

        logger.info("job_rejected", job_id=job_id, admin_id=admin_id)
        return schemas.Job.model_validate(job)
