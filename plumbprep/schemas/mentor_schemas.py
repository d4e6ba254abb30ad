from datetime import datetime as dt
from typing import Any, Literal

from pydantic import BaseModel, Field


class MentorChatRequest(BaseModel):
    message: str = Field(..., min_length=1, max_length=4000, description="Learner question")
    content_id: int | None = Field(None, description="Lesson the question is about")
    conversation_id: int | None = Field(None, description="Continue an existing conversation")


class MentorChatResponse(BaseModel):
    conversation_id: int
    response: str
    source: Literal["canned", "ai", "fallback"] = Field(
        ..., description="Where the answer came from"
    )


class MentorConversation(BaseModel):
    id: int
    content_id: int | None
    messages: list[dict[str, Any]]
    created_at: dt
    updated_at: dt

    model_config = {"from_attributes": True}


class ChatAnswerCreate(BaseModel):
    keyword: str = Field(..., min_length=1, max_length=255)
    answer: str = Field(..., min_length=1)
    content_id: int | None = None
    sort_order: int = 0


class ChatAnswerImportRequest(BaseModel):
    answers: list[ChatAnswerCreate] = Field(..., min_length=1, max_length=1000)


class ChatAnswerImportResponse(BaseModel):
    success: bool
    imported: int
