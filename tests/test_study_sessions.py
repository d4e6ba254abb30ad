"""Tests for the server-side study session timer."""

from datetime import UTC, datetime, timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models, schemas
from plumbprep.exceptions import StudySessionNotFoundError
from plumbprep.services import StudySessionService
from tests.conftest import create_test_content, create_test_course, create_test_user


class FakeClock:
    """Clock advanced manually by the tests."""

    def __init__(self) -> None:
        self.now = datetime(2024, 3, 1, 9, 0, 0, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: int) -> None:
        self.now += timedelta(seconds=seconds)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def service(db_session: Session, clock: FakeClock) -> StudySessionService:
    return StudySessionService(db_session, clock=clock)


def start(service: StudySessionService, user: models.User, content_id: str = "lesson-101") -> int:
    request = schemas.StudySessionStartRequest(content_id=content_id, content_type="lesson")
    return service.start_session(user.id, request).id


class TestStudySessionTimer:
    def test_end_counts_active_time(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(125)

        ended = service.end_session(session_id, test_user.id)

        assert ended.duration_seconds == 125
        assert ended.formatted_duration == "2:05"
        assert ended.completed is True
        assert ended.ended_at is not None

    def test_paused_time_is_not_counted(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(60)
        paused = service.pause_session(session_id, test_user.id)
        assert paused.is_paused is True
        assert paused.active_seconds == 60

        clock.advance(600)
        service.resume_session(session_id, test_user.id)
        clock.advance(30)

        ended = service.end_session(session_id, test_user.id)
        assert ended.duration_seconds == 90

    def test_end_while_paused(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(45)
        service.pause_session(session_id, test_user.id)
        clock.advance(1000)

        ended = service.end_session(session_id, test_user.id)

        assert ended.duration_seconds == 45
        assert ended.is_paused is False

    def test_pause_twice_is_noop(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(10)
        service.pause_session(session_id, test_user.id)
        clock.advance(10)

        again = service.pause_session(session_id, test_user.id)
        assert again.active_seconds == 10

    def test_resume_running_session_is_noop(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(20)
        service.resume_session(session_id, test_user.id)
        clock.advance(20)

        ended = service.end_session(session_id, test_user.id)
        assert ended.duration_seconds == 40

    def test_end_is_idempotent(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(300)
        first = service.end_session(session_id, test_user.id)
        clock.advance(300)

        second = service.end_session(session_id, test_user.id)

        assert second.duration_seconds == first.duration_seconds == 300
        assert second.ended_at == first.ended_at

    def test_long_session_formatting(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        clock.advance(3725)

        ended = service.end_session(session_id, test_user.id)
        assert ended.formatted_duration == "1:02:05"

    def test_other_users_session_not_found(
        self, service: StudySessionService, db_session: Session, test_user: models.User
    ) -> None:
        session_id = start(service, test_user)
        other = create_test_user(db_session, email="other@example.com", username="other")

        with pytest.raises(StudySessionNotFoundError):
            service.end_session(session_id, other.id)

    def test_stats_only_count_completed_sessions(
        self, service: StudySessionService, clock: FakeClock, test_user: models.User
    ) -> None:
        first = start(service, test_user)
        clock.advance(100)
        service.end_session(first, test_user.id)

        second = start(service, test_user)
        clock.advance(201)
        service.end_session(second, test_user.id)

        start(service, test_user)
        clock.advance(5000)

        stats = service.get_stats(test_user.id)
        assert stats.sessions_count == 2
        assert stats.total_time == 301
        assert stats.avg_session_time == 150
        assert stats.formatted_total_time == "5:01"

    def test_stats_without_sessions(
        self, service: StudySessionService, test_user: models.User
    ) -> None:
        stats = service.get_stats(test_user.id)
        assert stats.sessions_count == 0
        assert stats.avg_session_time == 0
        assert stats.formatted_total_time == "0:00"


class TestStudySessionEndpoints:
    def test_start_pause_resume_end(self, client: TestClient) -> None:
        started = client.post(
            "/api/v1/study-sessions/start",
            json={"content_id": "quiz-101", "content_type": "quiz"},
        )
        assert started.status_code == status.HTTP_201_CREATED
        session_id = started.json()["id"]
        assert started.json()["ended_at"] is None

        paused = client.post(f"/api/v1/study-sessions/{session_id}/pause")
        assert paused.status_code == status.HTTP_200_OK
        assert paused.json()["is_paused"] is True

        resumed = client.post(f"/api/v1/study-sessions/{session_id}/resume")
        assert resumed.json()["is_paused"] is False

        ended = client.post(f"/api/v1/study-sessions/{session_id}/end")
        assert ended.status_code == status.HTTP_200_OK
        assert ended.json()["completed"] is True
        assert ended.json()["duration_seconds"] is not None

    def test_invalid_content_type(self, client: TestClient) -> None:
        response = client.post(
            "/api/v1/study-sessions/start",
            json={"content_id": "x", "content_type": "videogame"},
        )
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    def test_unknown_session(self, client: TestClient) -> None:
        response = client.post("/api/v1/study-sessions/999/end")
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_list_sessions_filtered_by_content(self, client: TestClient) -> None:
        for content_id in ("lesson-1", "lesson-1", "lesson-2"):
            client.post(
                "/api/v1/study-sessions/start",
                json={"content_id": content_id, "content_type": "lesson"},
            )

        data = client.get("/api/v1/study-sessions", params={"content_id": "lesson-1"}).json()

        assert data["total"] == 2
        assert len(data["sessions"]) == 2
        assert all(s["content_id"] == "lesson-1" for s in data["sessions"])

    def test_stats_endpoint(self, client: TestClient) -> None:
        response = client.get("/api/v1/study-sessions/stats")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["sessions_count"] == 0


@pytest.fixture
def study_plan(db_session: Session) -> models.CourseContent:
    course = create_test_course(db_session)
    return create_test_content(
        db_session, course, title="Two Week Plan", content_type="study_plans", duration=45
    )


class TestStudyPlanSessions:
    def test_plan_session_tracks_sections(
        self,
        service: StudySessionService,
        clock: FakeClock,
        test_user: models.User,
        study_plan: models.CourseContent,
    ) -> None:
        started = service.start_plan_session(
            test_user.id, schemas.StudyPlanSessionCreate(study_plan_id=study_plan.id)
        )
        assert started.content_type == "study_plan"
        assert started.content_id == str(study_plan.id)
        assert started.study_plan_id == study_plan.id
        assert started.estimated_duration == 45
        assert started.sections_completed == 0

        clock.advance(300)
        updated = service.update_plan_session(
            started.id, test_user.id, schemas.StudyPlanSessionUpdate(sections_completed=2)
        )
        assert updated.sections_completed == 2
        assert updated.ended_at is None

        clock.advance(120)
        ended = service.update_plan_session(
            started.id,
            test_user.id,
            schemas.StudyPlanSessionUpdate(sections_completed=3, completed=True),
        )
        assert ended.sections_completed == 3
        assert ended.completed is True
        assert ended.duration_seconds == 420

    def test_updates_after_end_are_ignored(
        self,
        service: StudySessionService,
        clock: FakeClock,
        test_user: models.User,
        study_plan: models.CourseContent,
    ) -> None:
        started = service.start_plan_session(
            test_user.id,
            schemas.StudyPlanSessionCreate(study_plan_id=study_plan.id, estimated_duration=30),
        )
        assert started.estimated_duration == 30
        clock.advance(60)
        service.update_plan_session(
            started.id, test_user.id, schemas.StudyPlanSessionUpdate(completed=True)
        )
        clock.advance(60)

        again = service.update_plan_session(
            started.id,
            test_user.id,
            schemas.StudyPlanSessionUpdate(sections_completed=5, completed=True),
        )
        assert again.duration_seconds == 60
        assert again.sections_completed == 0

    def test_start_on_lesson_is_not_found(
        self, client: TestClient, db_session: Session
    ) -> None:
        course = create_test_course(db_session)
        lesson = create_test_content(db_session, course)

        response = client.post("/api/v1/study-sessions", json={"study_plan_id": lesson.id})

        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == f"Study plan {lesson.id} not found"

    def test_plan_session_endpoints(
        self, client: TestClient, study_plan: models.CourseContent
    ) -> None:
        response = client.post(
            "/api/v1/study-sessions",
            json={"study_plan_id": study_plan.id, "estimated_duration": 60},
        )
        assert response.status_code == status.HTTP_201_CREATED
        session_id = response.json()["id"]

        response = client.put(
            f"/api/v1/study-sessions/{session_id}",
            json={"sections_completed": 4, "completed": True},
        )
        assert response.status_code == status.HTTP_200_OK
        data = response.json()
        assert data["sections_completed"] == 4
        assert data["completed"] is True
        assert data["estimated_duration"] == 60

    def test_update_unknown_session(self, client: TestClient) -> None:
        response = client.put("/api/v1/study-sessions/9999", json={"sections_completed": 1})
        assert response.status_code == status.HTTP_404_NOT_FOUND
