"""API routes for the AI plumbing mentor."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser, require_feature
from plumbprep.exceptions import PlumbPrepError
from plumbprep.models import User
from plumbprep.services import MentorService

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/mentor", tags=["mentor"])


@router.post("/chat", response_model=schemas.MentorChatResponse)
async def chat(
    request: schemas.MentorChatRequest,
    db: DatabaseSession,
    current_user: Annotated[User, Depends(require_feature("ai_mentor"))],
) -> schemas.MentorChatResponse:
    """
    Ask the mentor a question.

    Requires the Professional plan or higher with an active subscription.
    """
    try:
        return await MentorService(db).chat(current_user.id, request)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Mentor chat failed for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/conversations", response_model=list[schemas.MentorConversation])
def list_conversations(
    db: DatabaseSession, current_user: CurrentUser
) -> list[schemas.MentorConversation]:
    return MentorService(db).list_conversations(current_user.id)
