"""Job posting and job application repositories."""

import logging
from typing import Any

from sqlalchemy import func, or_, select
from sqlalchemy.orm import Session, joinedload

from plumbprep import models
from plumbprep.utils import LIKE_ESCAPE, contains_pattern, utc_now

logger = logging.getLogger(__name__)


class JobRepository:
    """Repository for Job database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def _public_filter(self, search: str | None) -> list[Any]:
        conditions: list[Any] = [
            models.Job.is_active.is_(True),
            models.Job.status == "approved",
            or_(models.Job.expires_at.is_(None), models.Job.expires_at > utc_now()),
        ]
        if search:
            pattern = contains_pattern(search)
            conditions.append(
                or_(
                    func.lower(models.Job.title).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(models.Job.company).like(pattern, escape=LIKE_ESCAPE),
                    func.lower(models.Job.location).like(pattern, escape=LIKE_ESCAPE),
                )
            )
        return conditions

    def get_public(
        self, search: str | None = None, offset: int = 0, limit: int = 10
    ) -> tuple[list[models.Job], int]:
        """Approved and active jobs, featured first then newest, with the total count."""
        conditions = self._public_filter(search)
        total = self.db.execute(select(func.count(models.Job.id)).where(*conditions)).scalar() or 0
        stmt = (
            select(models.Job)
            .where(*conditions)
            .order_by(models.Job.is_featured.desc(), models.Job.created_at.desc(), models.Job.id.desc())
            .offset(offset)
            .limit(limit)
        )
        return list(self.db.execute(stmt).scalars().all()), total

    def get_by_id(self, job_id: int) -> models.Job | None:
        stmt = select(models.Job).where(models.Job.id == job_id)
        return self.db.execute(stmt).scalar_one_or_none()

    def get_pending(self) -> list[models.Job]:
        stmt = (
            select(models.Job)
            .options(joinedload(models.Job.employer))
            .where(models.Job.status == "pending")
            .order_by(models.Job.created_at.asc(), models.Job.id.asc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_by_employer_with_counts(self, employer_id: int) -> list[tuple[models.Job, int]]:
        """Jobs of an employer with the number of applications each received."""
        application_count = (
            select(func.count(models.JobApplication.id))
            .where(models.JobApplication.job_id == models.Job.id)
            .correlate(models.Job)
            .scalar_subquery()
        )
        stmt = (
            select(models.Job, application_count)
            .where(models.Job.employer_id == employer_id)
            .order_by(models.Job.created_at.desc(), models.Job.id.desc())
        )
        return [(job, int(count or 0)) for job, count in self.db.execute(stmt).all()]

    def create(self, **fields: Any) -> models.Job:  # noqa: ANN401
        job = models.Job(**fields)
        self.db.add(job)
        self.db.flush()
        self.db.refresh(job)
        logger.info(f"Created job: '{job.title}' status={job.status} (id={job.id})")
        return job

    def update(self, job: models.Job, **fields: Any) -> models.Job:  # noqa: ANN401
        for key, value in fields.items():
            setattr(job, key, value)
        self.db.flush()
        self.db.refresh(job)
        return job


class JobApplicationRepository:
    """Repository for JobApplication database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get(self, job_id: int, user_id: int) -> models.JobApplication | None:
        stmt = select(models.JobApplication).where(
            models.JobApplication.job_id == job_id,
            models.JobApplication.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user(self, user_id: int) -> list[models.JobApplication]:
        stmt = (
            select(models.JobApplication)
            .options(joinedload(models.JobApplication.job))
            .where(models.JobApplication.user_id == user_id)
            .order_by(models.JobApplication.applied_at.desc(), models.JobApplication.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def get_by_job(self, job_id: int) -> list[models.JobApplication]:
        stmt = (
            select(models.JobApplication)
            .options(joinedload(models.JobApplication.user))
            .where(models.JobApplication.job_id == job_id)
            .order_by(models.JobApplication.applied_at.desc(), models.JobApplication.id.desc())
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(
        self,
        job_id: int,
        user_id: int,
        cover_letter: str | None = None,
        resume_url: str | None = None,
    ) -> models.JobApplication:
        application = models.JobApplication(
            job_id=job_id,
            user_id=user_id,
            cover_letter=cover_letter,
            resume_url=resume_url,
            status="pending",
        )
        self.db.add(application)
        self.db.flush()
        self.db.refresh(application)
        logger.info(f"Created job application: job_id={job_id} (id={application.id}, user_id={user_id})")
        return application
