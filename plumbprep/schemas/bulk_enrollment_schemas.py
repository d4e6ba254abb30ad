"""Pydantic schemas for employer bulk enrollment requests."""

from datetime import datetime as dt

from pydantic import BaseModel, Field

from plumbprep.schemas.pricing_schemas import BulkPricingQuote
from plumbprep.schemas.user_schemas import EMAIL_PATTERN


class BulkStudent(BaseModel):
    email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str | None = Field(None, max_length=100)


class BulkEnrollmentCreate(BaseModel):
    employer_id: int
    students: list[BulkStudent] = Field(..., min_length=1, max_length=10000)
    courses: list[str] = Field(default_factory=lambda: ["journeyman"], min_length=1)
    contact_email: str = Field(..., pattern=EMAIL_PATTERN, max_length=255)
    contact_phone: str | None = Field(None, max_length=30)
    notes: str | None = None
    requested_start_date: dt | None = None


class BulkEnrollmentRequest(BaseModel):
    id: int
    employer_id: int
    student_count: int
    courses: list[str]
    total_price: float
    discount_rate: float
    final_price: float
    contact_email: str
    contact_phone: str | None
    notes: str | None
    requested_start_date: dt | None
    status: str
    approved_by_id: int | None
    approved_at: dt | None
    created_at: dt

    model_config = {"from_attributes": True}


class BulkEnrollmentCreateResponse(BaseModel):
    message: str
    request: BulkEnrollmentRequest
    pricing: BulkPricingQuote


class BulkEnrollmentListResponse(BaseModel):
    requests: list[BulkEnrollmentRequest]


class BulkStudentEnrollment(BaseModel):
    id: int
    request_id: int
    student_email: str
    student_first_name: str
    student_last_name: str | None
    status: str

    model_config = {"from_attributes": True}


class BulkStudentListResponse(BaseModel):
    students: list[BulkStudentEnrollment]


class BulkEnrollmentApproveResponse(BaseModel):
    message: str
    request: BulkEnrollmentRequest
