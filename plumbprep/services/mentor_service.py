"""Service layer for the AI plumbing mentor."""

from typing import Any, Literal

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.exceptions import NotFoundError
from plumbprep.feature_flags import is_ai_enabled
from plumbprep.services.ai.ai_service import get_mentor_response
from plumbprep.utils import utc_now

logger = structlog.get_logger(__name__)

FALLBACK_RESPONSE = (
    "I don't have an answer for that yet. Try rephrasing your question with a specific "
    "code topic such as venting, trap sizing or backflow prevention, or review the "
    "lesson materials for this section."
)


class ConversationNotFoundError(NotFoundError):
    def __init__(self, conversation_id: int) -> None:
        self.conversation_id = conversation_id
        super().__init__(f"Conversation with id {conversation_id} not found")


def find_canned_answer(question: str, candidates: list[models.ChatAnswer]) -> str | None:
    """First answer whose keyword appears in the question. Candidates arrive in priority order."""
    lowered = question.lower()
    for candidate in candidates:
        if candidate.keyword.lower() in lowered:
            return candidate.answer
    return None


class MentorService:
    """
    Answers learner questions.

    Canned answers curated by admins take priority, then the AI mentor when AI
    is enabled, then a fixed fallback. Every exchange is stored on the user's
    conversation.
    """

    def __init__(self, db: Session) -> None:
        """Initialize service with database session."""
        self.db = db
        self.conversation_repo = repositories.MentorConversationRepository(db)
        self.answer_repo = repositories.ChatAnswerRepository(db)
        self.content_repo = repositories.CourseContentRepository(db)

    def _content_context(self, content_id: int | None) -> str | None:
        if content_id is None:
            return None
        content = self.content_repo.get_by_id(content_id)
        if content is None:
            return None
        return f"{content.title} (section {content.section})" if content.section else content.title

    async def _answer(
        self, request: schemas.MentorChatRequest, history: list[dict[str, Any]]
    ) -> tuple[str, Literal["canned", "ai", "fallback"]]:
        canned = find_canned_answer(request.message, self.answer_repo.get_candidates(request.content_id))
        if canned is not None:
            return canned, "canned"

        if not is_ai_enabled():
            return FALLBACK_RESPONSE, "fallback"
        try:
            response = await get_mentor_response(
                request.message,
                history=[{"role": m["role"], "content": m["content"]} for m in history],
                context=self._content_context(request.content_id),
            )
        except Exception as e:  # noqa: BLE001
            logger.warning("mentor_ai_failed", error=str(e))
            return FALLBACK_RESPONSE, "fallback"
        return response, "ai"

    async def chat(self, user_id: int, request: schemas.MentorChatRequest) -> schemas.MentorChatResponse:
        if request.conversation_id is not None:
            conversation = self.conversation_repo.get_by_id(request.conversation_id, user_id)
            if conversation is None:
                raise ConversationNotFoundError(request.conversation_id)
        else:
            conversation = self.conversation_repo.create(user_id, request.content_id)

        response, source = await self._answer(request, conversation.messages)
        timestamp = utc_now().isoformat()
        self.conversation_repo.append_messages(
            conversation,
            [
                {"role": "user", "content": request.message, "timestamp": timestamp},
                {"role": "assistant", "content": response, "timestamp": timestamp, "source": source},
            ],
        )
        self.db.commit()

        logger.info("mentor_chat", user_id=user_id, conversation_id=conversation.id, source=source)
        return schemas.MentorChatResponse(
            conversation_id=conversation.id, response=response, source=source
        )

    def list_conversations(self, user_id: int) -> list[schemas.MentorConversation]:
        return [
            schemas.MentorConversation.model_validate(c)
            for c in self.conversation_repo.get_by_user(user_id)
        ]

    def import_answers(self, request: schemas.ChatAnswerImportRequest) -> schemas.ChatAnswerImportResponse:
        imported = self.answer_repo.bulk_create([a.model_dump() for a in request.answers])
        self.db.commit()
        logger.info("chat_answers_imported", count=imported)
        return schemas.ChatAnswerImportResponse(success=True, imported=imported)
