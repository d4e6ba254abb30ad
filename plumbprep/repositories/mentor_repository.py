"""Mentor conversation and canned chat answer repositories."""

import logging
from typing import Any

from sqlalchemy import select
from sqlalchemy.orm import Session

from plumbprep import models

logger = logging.getLogger(__name__)


class MentorConversationRepository:
    """Repository for MentorConversation database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_by_id(self, conversation_id: int, user_id: int) -> models.MentorConversation | None:
        """Get a conversation by its ID, verifying user ownership."""
        stmt = select(models.MentorConversation).where(
            models.MentorConversation.id == conversation_id,
            models.MentorConversation.user_id == user_id,
        )
        return self.db.execute(stmt).scalar_one_or_none()

    def get_by_user(self, user_id: int) -> list[models.MentorConversation]:
        stmt = (
            select(models.MentorConversation)
            .where(models.MentorConversation.user_id == user_id)
            .order_by(
                models.MentorConversation.updated_at.desc(), models.MentorConversation.id.desc()
            )
        )
        return list(self.db.execute(stmt).scalars().all())

    def create(self, user_id: int, content_id: int | None = None) -> models.MentorConversation:
        conversation = models.MentorConversation(
            user_id=user_id, content_id=content_id, messages=[]
        )
        self.db.add(conversation)
        self.db.flush()
        self.db.refresh(conversation)
        logger.info(f"Created mentor conversation (id={conversation.id}, user_id={user_id})")
        return conversation

    def append_messages(
        self, conversation: models.MentorConversation, messages: list[dict[str, Any]]
    ) -> models.MentorConversation:
        # Reassign so the JSON column change is detected
        conversation.messages = [*conversation.messages, *messages]
        self.db.flush()
        self.db.refresh(conversation)
        return conversation


class ChatAnswerRepository:
    """Repository for ChatAnswer database operations."""

    def __init__(self, db: Session) -> None:
        """Initialize repository with database session."""
        self.db = db

    def get_candidates(self, content_id: int | None = None) -> list[models.ChatAnswer]:
        """Answers scoped to the content first, then the general ones."""
        stmt = select(models.ChatAnswer)
        if content_id is None:
            stmt = stmt.where(models.ChatAnswer.content_id.is_(None))
        else:
            stmt = stmt.where(
                (models.ChatAnswer.content_id == content_id)
                | (models.ChatAnswer.content_id.is_(None))
            )
        stmt = stmt.order_by(
            models.ChatAnswer.content_id.is_(None),
            models.ChatAnswer.sort_order,
            models.ChatAnswer.id,
        )
        return list(self.db.execute(stmt).scalars().all())

    def bulk_create(self, answers: list[dict[str, Any]]) -> int:
        rows = [models.ChatAnswer(**answer) for answer in answers]
        self.db.add_all(rows)
        self.db.flush()
        logger.info(f"Imported {len(rows)} chat answers")
        return len(rows)
