"""Pydantic schemas for the job board and employer portal."""

from datetime import datetime as dt
from typing import Literal, Self

from pydantic import BaseModel, Field, field_validator, model_validator

from plumbprep.schemas.user_schemas import EMAIL_PATTERN

JobType = Literal["full_time", "part_time", "contract", "temporary"]
JobStatus = Literal["pending", "approved", "rejected"]
JobPostingPlan = Literal["standard", "premium"]


def _split_lines(value: object) -> object:
    """Accept newline separated text as well as lists for requirements and benefits."""
    if value is None:
        return []
    if isinstance(value, str):
        return [line.strip() for line in value.splitlines() if line.strip()]
    return value


class Job(BaseModel):
    """Schema for Job response."""

    id: int
    employer_id: int | None
    title: str
    company: str
    location: str
    description: str
    requirements: list[str]
    benefits: list[str]
    job_type: str
    salary_min: int | None
    salary_max: int | None
    contact_email: str | None
    is_featured: bool
    is_active: bool
    status: str
    rejection_reason: str | None
    expires_at: dt | None
    created_at: dt

    model_config = {"from_attributes": True}


class JobListResponse(BaseModel):
    jobs: list[Job]
    total: int
    page: int
    limit: int
    total_pages: int


class JobCreate(BaseModel):
    """Schema for posting a job."""

    title: str = Field(..., min_length=1, max_length=255)
    company: str | None = Field(None, max_length=255, description="Defaults to the employer name")
    location: str = Field(..., min_length=1, max_length=255)
    description: str = Field(..., min_length=1)
    requirements: list[str] = Field(default_factory=list)
    benefits: list[str] = Field(default_factory=list)
    job_type: JobType = "full_time"
    salary_min: int | None = Field(None, ge=0)
    salary_max: int | None = Field(None, ge=0)
    contact_email: str | None = Field(None, pattern=EMAIL_PATTERN)
    is_featured: bool = False
    expires_in_days: int = Field(30, ge=1, le=365, description="Days until the posting expires")

    @field_validator("requirements", "benefits", mode="before")
    @classmethod
    def normalize_lists(cls, value: object) -> object:
        return _split_lines(value)

    @model_validator(mode="after")
    def check_salary_range(self) -> Self:
        if (
            self.salary_min is not None
            and self.salary_max is not None
            and self.salary_min > self.salary_max
        ):
            raise ValueError("salary_min cannot be greater than salary_max")
        return self


class JobUpdate(BaseModel):
    """Schema for updating a job. Only provided fields change."""

    title: str | None = Field(None, min_length=1, max_length=255)
    location: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = Field(None, min_length=1)
    requirements: list[str] | None = None
    benefits: list[str] | None = None
    job_type: JobType | None = None
    salary_min: int | None = Field(None, ge=0)
    salary_max: int | None = Field(None, ge=0)
    contact_email: str | None = Field(None, pattern=EMAIL_PATTERN)
    is_featured: bool | None = None

    @field_validator("requirements", "benefits", mode="before")
    @classmethod
    def normalize_lists(cls, value: object) -> object:
        return None if value is None else _split_lines(value)


class JobStatusUpdate(BaseModel):
    is_active: bool = Field(..., description="Whether the posting is visible")


class JobRejectRequest(BaseModel):
    reason: str = Field(..., min_length=1, max_length=2000)


class JobApplicationCreate(BaseModel):
    cover_letter: str | None = Field(None, max_length=10000)
    resume_url: str | None = Field(None, max_length=500)


class JobApplication(BaseModel):
    """Schema for a learner's own application."""

    id: int
    job_id: int
    status: str
    cover_letter: str | None
    resume_url: str | None
    applied_at: dt
    job: Job

    model_config = {"from_attributes": True}


class JobApplicant(BaseModel):
    """Application as seen by the employer."""

    id: int
    user_id: int
    applicant_name: str
    applicant_email: str
    applicant_phone: str | None
    resume_url: str | None
    cover_letter: str | None
    status: str
    applied_at: dt


class EmployerJob(Job):
    application_count: int = 0
    days_remaining: int | None = Field(None, description="Days until expiry, never negative")


class EmployerCreate(BaseModel):
    company_name: str = Field(..., min_length=1, max_length=255)
    contact_name: str = Field(..., min_length=1, max_length=255)
    contact_email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    phone: str | None = Field(None, max_length=30)
    website: str | None = Field(None, max_length=500)
    description: str | None = None


class Employer(BaseModel):
    id: int
    owner_id: int
    company_name: str
    contact_name: str
    contact_email: str
    phone: str | None
    website: str | None
    description: str | None
    created_at: dt

    model_config = {"from_attributes": True}


class JobPostingQuoteRequest(BaseModel):
    quantity: int = Field(1, ge=1, le=100, description="Number of job postings")
    plan: JobPostingPlan = "standard"


class JobPostingQuote(BaseModel):
    quantity: int
    plan: JobPostingPlan
    base_price: float = Field(..., description="Price of one posting")
    subtotal: float
    discount_rate: float
    discount_amount: float
    total: float


class PaymentIntentResponse(BaseModel):
    client_secret: str | None
    payment_intent_id: str
    quote: JobPostingQuote
