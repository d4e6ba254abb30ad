"""API routes for timed study sessions."""

import logging
from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Query, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import CurrentUser
from plumbprep.exceptions import PlumbPrepError
from plumbprep.models import User
from plumbprep.services import StudySessionService
from plumbprep.services.auth_service import get_current_user_for_beacon

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/study-sessions", tags=["study-sessions"])


@router.post(
    "/start", response_model=schemas.StudySession, status_code=status.HTTP_201_CREATED
)
def start_study_session(
    request: schemas.StudySessionStartRequest, db: DatabaseSession, current_user: CurrentUser
) -> schemas.StudySession:
    """Start a running study session for a lesson, quiz, practice test or study plan."""
    try:
        return StudySessionService(db).start_session(current_user.id, request)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to start study session for user {current_user.id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.post("", response_model=schemas.StudySession, status_code=status.HTTP_201_CREATED)
def start_study_plan_session(
    request: schemas.StudyPlanSessionCreate, db: DatabaseSession, current_user: CurrentUser
) -> schemas.StudySession:
    """Start a running session on a study plan."""
    try:
        return StudySessionService(db).start_plan_session(current_user.id, request)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(
            f"Failed to start study plan session for user {current_user.id}: {e!s}", exc_info=True
        )
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.put("/{session_id}", response_model=schemas.StudySession)
def update_study_plan_session(
    session_id: int,
    request: schemas.StudyPlanSessionUpdate,
    db: DatabaseSession,
    current_user: CurrentUser,
) -> schemas.StudySession:
    """Report sections completed on a study plan session, ending it when `completed` is true."""
    return StudySessionService(db).update_plan_session(session_id, current_user.id, request)


@router.post("/{session_id}/pause", response_model=schemas.StudySession)
def pause_study_session(
    session_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.StudySession:
    return StudySessionService(db).pause_session(session_id, current_user.id)


@router.post("/{session_id}/resume", response_model=schemas.StudySession)
def resume_study_session(
    session_id: int, db: DatabaseSession, current_user: CurrentUser
) -> schemas.StudySession:
    return StudySessionService(db).resume_session(session_id, current_user.id)


@router.post("/{session_id}/end", response_model=schemas.StudySession)
def end_study_session(
    session_id: int,
    db: DatabaseSession,
    current_user: Annotated[User, Depends(get_current_user_for_beacon)],
) -> schemas.StudySession:
    """
    End a study session.

    Browsers send this with `navigator.sendBeacon` when the page unloads, which
    cannot set headers, so the access token may also come as `?token=`.
    Ending a session twice returns it unchanged.
    """
    try:
        return StudySessionService(db).end_session(session_id, current_user.id)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to end study session {session_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("", response_model=schemas.StudySessionListResponse)
def list_study_sessions(
    db: DatabaseSession,
    current_user: CurrentUser,
    content_id: str | None = None,
    limit: int = Query(50, ge=1, le=200),
    offset: int = Query(0, ge=0),
) -> schemas.StudySessionListResponse:
    return StudySessionService(db).list_sessions(current_user.id, content_id, limit, offset)


@router.get("/stats", response_model=schemas.StudyStats)
def get_study_stats(db: DatabaseSession, current_user: CurrentUser) -> schemas.StudyStats:
    """Total, count and average study time over completed sessions."""
    return StudySessionService(db).get_stats(current_user.id)
