"""Pydantic schemas for quiz attempts and section progress."""

from datetime import datetime as dt
from typing import Any

from pydantic import BaseModel, Field


class QuizAttemptCreate(BaseModel):
    """Schema for submitting a quiz attempt."""

    content_id: int = Field(..., description="ID of the quiz content")
    score: int = Field(..., ge=0, le=100, description="Score as a percentage")
    answers: dict[str, Any] | None = Field(None, description="Submitted answers keyed by question")


class QuizAttempt(BaseModel):
    """Schema for QuizAttempt response."""

    id: int
    content_id: int
    course_id: int
    chapter: int | None
    section: int | None
    score: int
    passed: bool
    answers: dict[str, Any] | None
    created_at: dt

    model_config = {"from_attributes": True}


class QuizAttemptResult(BaseModel):
    """Schema for quiz submission response."""

    attempt: QuizAttempt
    passing_score: int
    next_section_unlocked: int | None = Field(
        None, description="Section that this attempt unlocked, if any"
    )


class SectionStatus(BaseModel):
    chapter: int | None
    section: int
    is_unlocked: bool
    quiz_passed: bool = False
    highest_score: int = 0
    attempt_count: int = 0


class SectionStatusResponse(BaseModel):
    course_id: int
    is_admin: bool = Field(..., description="Admins see every section unlocked")
    sections: list[SectionStatus]


class SectionUnlockedResponse(BaseModel):
    chapter: int
    section: int
    is_unlocked: bool
