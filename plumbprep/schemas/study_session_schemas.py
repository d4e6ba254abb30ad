"""Pydantic schemas for Study Session API request/response validation."""

from datetime import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, Field, model_validator

from plumbprep.utils import format_duration

StudyContentType = Literal[
    "lesson", "quiz", "flashcards", "chat", "podcast", "notes", "tools", "study_plan"
]


class StudySessionStartRequest(BaseModel):
    """Schema for starting a study session."""

    content_id: str = Field(..., min_length=1, max_length=100, description="Studied content")
    content_type: StudyContentType = Field(..., description="Kind of study activity")


class StudyPlanSessionCreate(BaseModel):
    """Schema for starting a session on a study plan."""

    study_plan_id: int
    estimated_duration: int | None = Field(None, ge=1, description="Planned length in minutes")


class StudyPlanSessionUpdate(BaseModel):
    """Progress reported while working through a study plan.

    Duration always comes from the server timer, so none is accepted here.
    """

    sections_completed: int | None = Field(None, ge=0)
    completed: bool | None = Field(None, description="End the session when true")


class StudySession(BaseModel):
    """Schema for StudySession response."""

    id: int
    content_id: str
    content_type: str
    started_at: dt
    ended_at: dt | None
    is_paused: bool
    completed: bool
    active_seconds: int = Field(..., description="Active time of closed segments")
    duration_seconds: int | None = Field(None, description="Final duration once ended")
    formatted_duration: str | None = Field(None, description="H:MM:SS or M:SS")
    study_plan_id: int | None = None
    estimated_duration: int | None = Field(None, description="Planned length in minutes")
    sections_completed: int = 0

    model_config = {"from_attributes": True}

    @model_validator(mode="before")
    @classmethod
    def add_formatted_duration(cls, data: Any) -> Any:  # noqa: ANN401
        if isinstance(data, dict):
            return data
        duration = getattr(data, "duration_seconds", None)
        return {
            **{field: getattr(data, field, None) for field in cls.model_fields},
            "formatted_duration": format_duration(duration) if duration is not None else None,
        }


class StudySessionListResponse(BaseModel):
    sessions: list[StudySession]
    total: int
    offset: int
    limit: int


class StudyStats(BaseModel):
    total_time: int = Field(..., description="Total seconds over completed sessions")
    sessions_count: int
    avg_session_time: int = Field(..., description="Rounded average seconds per session")
    formatted_total_time: str
