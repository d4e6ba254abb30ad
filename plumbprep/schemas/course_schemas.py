"""Pydantic schemas for courses, course content and enrollments."""

from datetime import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, Field

CourseContentType = Literal[
    "lesson", "quiz", "study-notes", "study_plans", "chat", "podcast", "flashcards"
]


class Course(BaseModel):
    """Schema for Course response."""

    id: int
    slug: str = Field(..., description="Friendly identifier, e.g. 'journeyman-prep'")
    title: str
    description: str | None
    course_type: str
    price: float
    duration_hours: int | None
    lesson_count: int
    practice_test_count: int
    is_active: bool

    model_config = {"from_attributes": True}


class CourseContentBase(BaseModel):
    title: str = Field(..., min_length=1, max_length=255)
    description: str | None = None
    content_type: CourseContentType
    chapter: int | None = Field(None, ge=0)
    section: int | None = Field(None, ge=0)
    content: dict[str, Any] | None = Field(None, description="Type specific payload")
    duration: int | None = Field(None, ge=0, description="Duration in minutes")
    sort_order: int = 0


class CourseContentCreate(CourseContentBase):
    """Schema for creating course content."""


class CourseContentUpdate(BaseModel):
    """Schema for updating course content. Only provided fields change."""

    title: str | None = Field(None, min_length=1, max_length=255)
    description: str | None = None
    content_type: CourseContentType | None = None
    chapter: int | None = Field(None, ge=0)
    section: int | None = Field(None, ge=0)
    content: dict[str, Any] | None = None
    duration: int | None = Field(None, ge=0)
    sort_order: int | None = None
    is_active: bool | None = None


class CourseContent(CourseContentBase):
    """Schema for CourseContent response."""

    id: int
    course_id: int
    is_active: bool
    created_at: dt

    model_config = {"from_attributes": True}


class StudyPlan(BaseModel):
    id: int
    title: str
    description: str | None
    duration: int = Field(..., description="Duration in minutes")
    content: dict[str, Any] | None


class CourseStats(BaseModel):
    course_id: int
    lesson_count: int
    quiz_count: int
    content_count: int
    total_minutes: int


class Enrollment(BaseModel):
    """Schema for CourseEnrollment response."""

    id: int
    course_id: int
    course: Course
    progress: int = Field(..., ge=0, le=100)
    completed_lessons: list[int]
    test_scores: dict[str, int]
    is_completed: bool
    enrolled_at: dt
    completed_at: dt | None

    model_config = {"from_attributes": True}


class EnrollmentProgressUpdate(BaseModel):
    """Schema for updating enrollment progress."""

    progress: int = Field(..., ge=0, le=100, description="Progress percentage")
    completed_lessons: list[int] | None = Field(None, description="IDs of completed lessons")
    test_scores: dict[str, int] | None = None
