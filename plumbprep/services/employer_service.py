"""Service layer for the employer portal."""

from datetime import timedelta

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.config import get_settings
from plumbprep.exceptions import (
    JobNotFoundError,
    NotFoundError,
    PermissionDeniedError,
    ValidationError,
)
from plumbprep.services.ai.ai_service import review_job_posting
from plumbprep.services.billing import StripeBillingGateway
from plumbprep.utils import ensure_utc, utc_now

logger = structlog.get_logger(__name__)

JOB_POSTING_PRICES = {"standard": 49.0, "premium": 89.0}

# (minimum quantity, discount rate), largest first
JOB_POSTING_VOLUME_DISCOUNTS = ((10, 0.25), (5, 0.15), (3, 0.10))


def calculate_job_posting_quote(quantity: int, plan: str = "standard") -> schemas.JobPostingQuote:
    """Price a bundle of job postings with volume discounts."""
    if quantity < 1:
        raise ValidationError("Quantity must be at least 1")
    if plan not in JOB_POSTING_PRICES:
        raise ValidationError(f"Unknown job posting plan '{plan}'")

    base_price = JOB_POSTING_PRICES[plan]
    subtotal = round(base_price * quantity, 2)
    discount_rate = next(
        (rate for minimum, rate in JOB_POSTING_VOLUME_DISCOUNTS if quantity >= minimum), 0.0
    )
    discount_amount = round(subtotal * discount_rate, 2)
    return schemas.JobPostingQuote(
        quantity=quantity,
        plan=plan,
        base_price=base_price,
        subtotal=subtotal,
        discount_rate=discount_rate,
        discount_amount=discount_amount,
        total=round(subtotal - discount_amount, 2),
    )


def days_remaining(job: models.Job) -> int | None:
    if job.expires_at is None:
        return None
    remaining = ensure_utc(job.expires_at) - utc_now()
    return max(0, remaining.days)


class EmployerNotFoundError(NotFoundError):
    """Employer not found error."""

    def __init__(self, employer_id: int | None = None) -> None:
        """Initialize with employer ID."""
        self.employer_id = employer_id
        if employer_id is None:
            super().__init__("No employer profile found for this account")
        else:
            super().__init__(f"Employer with id {employer_id} not found")


class EmployerService:
    """
    Employer registration, job posting and applicant review.

    Every operation on an employer checks that the caller owns it; admins may
    act on any employer.
    """

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.settings = get_settings()
        self.employer_repo = repositories.EmployerRepository(db)
        self.job_repo = repositories.JobRepository(db)
        self.application_repo = repositories.JobApplicationRepository(db)

    def _get_owned_employer(
        self, employer_id: int, user: models.User, is_admin: bool = False
    ) -> models.Employer:
        employer = self.employer_repo.get_by_id(employer_id)
        if employer is None:
            raise EmployerNotFoundError(employer_id)
        if employer.owner_id != user.id and not is_admin:
            raise PermissionDeniedError("You do not manage this employer")
        return employer

    def _get_employer_job(self, employer: models.Employer, job_id: int) -> models.Job:
        job = self.job_repo.get_by_id(job_id)
        if job is None or job.employer_id != employer.id:
            raise JobNotFoundError(message="Job not found or unauthorized")
        return job

    def _employer_job(self, job: models.Job, application_count: int = 0) -> schemas.EmployerJob:
        data = schemas.Job.model_validate(job).model_dump()
        return schemas.EmployerJob(
            **data, application_count=application_count, days_remaining=days_remaining(job)
        )

    def register_employer(
        self, user: models.User, data: schemas.EmployerCreate
    ) -> schemas.Employer:
        """
        Register an employer owned by the current user.

        Raises:
            ValidationError: If the contact email is already registered
        """
        if self.employer_repo.get_by_contact_email(data.contact_email) is not None:
            raise ValidationError("An employer with this contact email is already registered")

        employer = self.employer_repo.create(owner_id=user.id, **data.model_dump())
        self.db.commit()
        logger.info("employer_registered", employer_id=employer.id, owner_id=user.id)
        return schemas.Employer.model_validate(employer)

    def get_my_employers(self, user: models.User) -> list[schemas.Employer]:
        employers = self.employer_repo.get_by_owner(user.id)
        if not employers:
            raise EmployerNotFoundError()
        return [schemas.Employer.model_validate(e) for e in employers]

    def create_payment_intent(
        self, user: models.User, request: schemas.JobPostingQuoteRequest, gateway: StripeBillingGateway
    ) -> schemas.PaymentIntentResponse:
        quote = calculate_job_posting_quote(request.quantity, request.plan)
        intent = gateway.create_payment_intent(
            int(round(quote.total * 100)),
            metadata={
                "user_id": str(user.id),
                "purpose": "job_postings",
                "plan": quote.plan,
                "quantity": str(quote.quantity),
            },
        )
        logger.info(
            "job_posting_payment_intent_created",
            user_id=user.id,
            payment_intent_id=intent.id,
            amount_cents=intent.amount,
        )
        return schemas.PaymentIntentResponse(
            client_secret=intent.client_secret, payment_intent_id=intent.id, quote=quote
        )

    async def _ai_review(self, job_data: schemas.JobCreate, company: str) -> tuple[str, str | None]:
        """Status and rejection reason for a new posting."""
        if not self.settings.ai_enabled:
            return "pending", None
        try:
            review = await review_job_posting(
                title=job_data.title,
                company=company,
                location=job_data.location,
                description=job_data.description,
                requirements=job_data.requirements,
            )
        except Exception as e:  # noqa: BLE001
            logger.warning("job_ai_review_failed", error=str(e))
            return "pending", None
        if review.approved:
            return "approved", None
        return "pending", f"AI Review: {review.reasoning}"

    async def post_job(
        self, employer_id: int, user: models.User, job_data: schemas.JobCreate, is_admin: bool = False
    ) -> schemas.EmployerJob:
        """
        Create a job posting for an employer.

        Postings the AI reviewer accepts go live immediately; everything else
        waits in the admin queue.
        """
        employer = self._get_owned_employer(employer_id, user, is_admin)
        company = job_data.company or employer.company_name
        status, reason = await self._ai_review(job_data, company)
        now = utc_now()

        fields = job_data.model_dump(exclude={"company", "expires_in_days"})
        fields["contact_email"] = job_data.contact_email or employer.contact_email
        job = self.job_repo.create(
            employer_id=employer.id,
            company=company,
            status=status,
            rejection_reason=reason,
            approved_at=now if status == "approved" else None,
            expires_at=now + timedelta(days=job_data.expires_in_days),
            **fields,
        )
        self.db.commit()

        logger.info("job_posted", job_id=job.id, employer_id=employer.id, status=status)
        return self._employer_job(job)

    def list_employer_jobs(
        self, employer_id: int, user: models.User, is_admin: bool = False
    ) -> list[schemas.EmployerJob]:
        employer = self._get_owned_employer(employer_id, user, is_admin)
        return [
            self._employer_job(job, count)
            for job, count in self.job_repo.get_by_employer_with_counts(employer.id)
        ]

    def get_job_applications(
        self, employer_id: int, job_id: int, user: models.User, is_admin: bool = False
    ) -> list[schemas.JobApplicant]:
        employer = self._get_owned_employer(employer_id, user, is_admin)
        job = self._get_employer_job(employer, job_id)
        applicants = []
        for application in self.application_repo.get_by_job(job.id):
            applicant = application.user
            name = " ".join(p for p in (applicant.first_name, applicant.last_name) if p)
            applicants.append(
                schemas.JobApplicant(
                    id=application.id,
                    user_id=applicant.id,
                    applicant_name=name or applicant.username or applicant.email,
                    applicant_email=applicant.email,
                    applicant_phone=applicant.phone,
                    resume_url=application.resume_url,
                    cover_letter=application.cover_letter,
                    status=application.status,
                    applied_at=application.applied_at,
                )
            )
        return applicants

    def update_job(
        self,
        employer_id: int,
        job_id: int,
        user: models.User,
        update_data: schemas.JobUpdate,
        is_admin: bool = False,
    ) -> schemas.EmployerJob:
        employer = self._get_owned_employer(employer_id, user, is_admin)
        job = self._get_employer_job(employer, job_id)

        fields = update_data.model_dump(exclude_unset=True)
        salary_min = fields.get("salary_min", job.salary_min)
        salary_max = fields.get("salary_max", job.salary_max)
        if salary_min is not None and salary_max is not None and salary_min > salary_max:
            raise ValidationError("salary_min cannot be greater than salary_max")

        job = self.job_repo.update(job, **fields)
        self.db.commit()
        logger.info("job_updated", job_id=job.id, fields=sorted(fields))
        return self._employer_job(job)

    def set_job_status(
        self,
        employer_id: int,
        job_id: int,
        user: models.User,
        is_active: bool,
        is_admin: bool = False,
    ) -> schemas.EmployerJob:
        employer = self._get_owned_employer(employer_id, user, is_admin)
        job = self._get_employer_job(employer, job_id)
        job = self.job_repo.update(job, is_active=is_active)
        self.db.commit()
        logger.info("job_status_changed", job_id=job.id, is_active=is_active)
        return self._employer_job(job)
