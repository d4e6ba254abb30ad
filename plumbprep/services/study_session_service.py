"""Service layer for timed study sessions."""

from collections.abc import Callable
from datetime import datetime

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.exceptions import ContentNotFoundError, StudySessionNotFoundError
from plumbprep.utils import ensure_utc, format_duration, utc_now

logger = structlog.get_logger(__name__)


class StudySessionService:
    """
    Server-side study timer.

    A session accumulates active time segment by segment: pausing closes the
    open segment, resuming opens a new one, ending closes whatever is open and
    freezes the duration. Ending an already ended session is a no-op, so a
    page-unload beacon racing an explicit end never counts time twice.
    """

    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now) -> None:
        """Initialize service with database session and an injectable clock."""
        self.db = db
        self.clock = clock
        self.session_repo = repositories.StudySessionRepository(db)
        self.content_repo = repositories.CourseContentRepository(db)

    def _get_owned(self, session_id: int, user_id: int) -> models.StudySession:
        session = self.session_repo.get_by_id(session_id, user_id)
        if session is None:
            raise StudySessionNotFoundError(session_id)
        return session

    def _close_segment(self, session: models.StudySession, now: datetime) -> None:
        if session.segment_started_at is None:
            return
        elapsed = (now - ensure_utc(session.segment_started_at)).total_seconds()
        session.active_seconds += max(0, int(elapsed))
        session.segment_started_at = None

    def start_session(
        self, user_id: int, request: schemas.StudySessionStartRequest
    ) -> schemas.StudySession:
        session = self.session_repo.create(
            user_id=user_id,
            content_id=request.content_id,
            content_type=request.content_type,
            started_at=self.clock(),
        )
        self.db.commit()
        logger.info(
            "study_session_started",
            user_id=user_id,
            session_id=session.id,
            content_type=request.content_type,
        )
        return schemas.StudySession.model_validate(session)

    def pause_session(self, session_id: int, user_id: int) -> schemas.StudySession:
        session = self._get_owned(session_id, user_id)
        if session.ended_at is None and not session.is_paused:
            self._close_segment(session, self.clock())
            session.is_paused = True
            session = self.session_repo.save(session)
            self.db.commit()
            logger.info(
                "study_session_paused",
                session_id=session_id,
                active_seconds=session.active_seconds,
            )
        return schemas.StudySession.model_validate(session)

    def resume_session(self, session_id: int, user_id: int) -> schemas.StudySession:
        session = self._get_owned(session_id, user_id)
        if session.ended_at is None and session.is_paused:
            session.is_paused = False
            session.segment_started_at = self.clock()
            session = self.session_repo.save(session)
            self.db.commit()
            logger.info("study_session_resumed", session_id=session_id)
        return schemas.StudySession.model_validate(session)

    def end_session(self, session_id: int, user_id: int) -> schemas.StudySession:
        """Close the session and freeze its duration. Idempotent."""
        session = self._get_owned(session_id, user_id)
        if session.ended_at is not None:
            logger.debug("study_session_already_ended", session_id=session_id)
            return schemas.StudySession.model_validate(session)
        return self._finish(session, user_id)

    def _finish(self, session: models.StudySession, user_id: int) -> schemas.StudySession:
        session_id = session.id
        now = self.clock()
        if not session.is_paused:
            self._close_segment(session, now)
        session.is_paused = False
        session.segment_started_at = None
        session.ended_at = now
        session.duration_seconds = session.active_seconds
        session.completed = True
        session = self.session_repo.save(session)
        self.db.commit()

        logger.info(
            "study_session_ended",
            user_id=user_id,
            session_id=session_id,
            duration_seconds=session.duration_seconds,
        )
        return schemas.StudySession.model_validate(session)

    def start_plan_session(
        self, user_id: int, request: schemas.StudyPlanSessionCreate
    ) -> schemas.StudySession:
        """Start a running session on a study plan."""
        plan = self.content_repo.get_by_id(request.study_plan_id)
        if plan is None or plan.content_type != "study_plans":
            raise ContentNotFoundError(message=f"Study plan {request.study_plan_id} not found")

        session = self.session_repo.create(
            user_id=user_id,
            content_id=str(plan.id),
            content_type="study_plan",
            started_at=self.clock(),
            study_plan_id=plan.id,
            estimated_duration=request.estimated_duration or plan.duration,
        )
        self.db.commit()
        logger.info(
            "study_plan_session_started",
            user_id=user_id,
            session_id=session.id,
            study_plan_id=plan.id,
        )
        return schemas.StudySession.model_validate(session)

    def update_plan_session(
        self, session_id: int, user_id: int, request: schemas.StudyPlanSessionUpdate
    ) -> schemas.StudySession:
        """Record sections worked through; ``completed`` ends the session.

        An ended session is returned unchanged.
        """
        session = self._get_owned(session_id, user_id)
        if session.ended_at is not None:
            return schemas.StudySession.model_validate(session)

        if request.sections_completed is not None:
            session.sections_completed = request.sections_completed
        if request.completed:
            return self._finish(session, user_id)

        session = self.session_repo.save(session)
        self.db.commit()
        logger.info(
            "study_plan_session_updated",
            session_id=session_id,
            sections_completed=session.sections_completed,
        )
        return schemas.StudySession.model_validate(session)

    def list_sessions(
        self, user_id: int, content_id: str | None = None, limit: int = 50, offset: int = 0
    ) -> schemas.StudySessionListResponse:
        sessions = self.session_repo.get_by_user(user_id, content_id, limit, offset)
        return schemas.StudySessionListResponse(
            sessions=[schemas.StudySession.model_validate(s) for s in sessions],
            total=self.session_repo.count_by_user(user_id, content_id),
            offset=offset,
            limit=limit,
        )

    def get_stats(self, user_id: int) -> schemas.StudyStats:
        """Totals over completed sessions only."""
        totals = self.session_repo.get_completed_totals(user_id)
        average = round(totals.total_seconds / totals.sessions_count) if totals.sessions_count else 0
        return schemas.StudyStats(
            total_time=totals.total_seconds,
            sessions_count=totals.sessions_count,
            avg_session_time=average,
            formatted_total_time=format_duration(totals.total_seconds),
        )
