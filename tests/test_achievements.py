"""Tests for achievements, points and the leaderboard."""

from datetime import UTC, date, datetime, timedelta

import pytest
from fastapi import status
from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.services import AchievementService
from plumbprep.services.achievement_service import calculate_streaks, period_start
from tests.conftest import create_test_user

NOW = datetime(2024, 5, 15, 14, 30, tzinfo=UTC)


@pytest.fixture
def service(db_session: Session) -> AchievementService:
    return AchievementService(db_session, clock=lambda: NOW)


def add_study_day(db_session: Session, user: models.User, day: date) -> None:
    started = datetime(day.year, day.month, day.day, 18, 0, tzinfo=UTC)
    db_session.add(
        models.StudySession(
            user_id=user.id, content_id="lesson-101", content_type="lesson", started_at=started
        )
    )
    db_session.commit()


def award(
    service: AchievementService, user: models.User, key: str = "knowledge_seeker"
) -> schemas.UserAchievement:
    return service.award_achievement(
        schemas.AchievementAwardRequest(user_id=user.id, achievement_key=key), awarded_by=0
    )


class TestStreaks:
    def test_no_study_days(self) -> None:
        assert calculate_streaks([], date(2024, 5, 15)) == (0, 0)

    def test_current_streak_counts_back_from_today(self) -> None:
        days = [date(2024, 5, 15), date(2024, 5, 14), date(2024, 5, 13), date(2024, 5, 10)]
        assert calculate_streaks(days, date(2024, 5, 15)) == (3, 3)

    def test_streak_broken_when_today_missed(self) -> None:
        days = [date(2024, 5, 14), date(2024, 5, 13)]
        assert calculate_streaks(days, date(2024, 5, 15)) == (0, 2)

    def test_longest_streak_in_the_past(self) -> None:
        days = [date(2024, 5, 1) + timedelta(days=i) for i in range(5)] + [date(2024, 5, 15)]
        assert calculate_streaks(days, date(2024, 5, 15)) == (1, 5)


class TestPeriodStart:
    @pytest.mark.parametrize(
        ("period", "expected"),
        [
            ("monthly", datetime(2024, 5, 1, tzinfo=UTC)),
            ("weekly", datetime(2024, 5, 13, tzinfo=UTC)),
            ("all_time", None),
        ],
    )
    def test_period_start(self, period: str, expected: datetime | None) -> None:
        assert period_start(period, NOW) == expected


class TestAwardAchievement:
    def test_award_credits_points(
        self, service: AchievementService, db_session: Session, test_user: models.User
    ) -> None:
        earned = award(service, test_user)

        assert earned.points_earned == 300
        assert earned.achievement.key == "knowledge_seeker"
        db_session.refresh(test_user)
        assert test_user.total_points == 300

        ledger = db_session.query(models.PointsTransaction).filter_by(user_id=test_user.id).one()
        assert ledger.action == "achievement_earned"
        assert ledger.balance_before == 0
        assert ledger.balance_after == 300
        assert ledger.reference_id == "knowledge_seeker"

    def test_points_accumulate(
        self, service: AchievementService, db_session: Session, test_user: models.User
    ) -> None:
        award(service, test_user, "knowledge_seeker")
        award(service, test_user, "community_member")

        db_session.refresh(test_user)
        assert test_user.total_points == 350

    def test_award_endpoint_requires_admin(
        self, client: TestClient, test_user: models.User
    ) -> None:
        response = client.post(
            "/api/v1/achievements/award",
            json={"user_id": test_user.id, "achievement_key": "knowledge_seeker"},
        )
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_award_endpoint(
        self, client: TestClient, db_session: Session, admin_user: models.User
    ) -> None:
        learner = create_test_user(db_session, email="apprentice@example.com", username="app")

        response = client.post(
            "/api/v1/achievements/award",
            json={"user_id": learner.id, "achievement_key": "community_member"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        assert response.json()["points_earned"] == 50

    def test_already_earned_conflicts(
        self, client: TestClient, admin_user: models.User
    ) -> None:
        payload = {"user_id": admin_user.id, "achievement_key": "community_member"}
        client.post("/api/v1/achievements/award", json=payload)

        response = client.post("/api/v1/achievements/award", json=payload)

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "Achievement already earned"

    def test_unknown_achievement(self, client: TestClient, admin_user: models.User) -> None:
        response = client.post(
            "/api/v1/achievements/award",
            json={"user_id": admin_user.id, "achievement_key": "speed_demon"},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND
        assert response.json()["detail"] == "Achievement 'speed_demon' not found"

    def test_unknown_user(self, client: TestClient, admin_user: models.User) -> None:
        response = client.post(
            "/api/v1/achievements/award",
            json={"user_id": 9999, "achievement_key": "community_member"},
        )
        assert response.status_code == status.HTTP_404_NOT_FOUND


class TestAchievementEndpoints:
    def test_catalog_is_seeded(self, client: TestClient) -> None:
        response = client.get("/api/v1/achievements")

        assert response.status_code == status.HTTP_200_OK
        keys = [a["key"] for a in response.json()]
        assert keys == ["knowledge_seeker", "community_member"]

    def test_user_achievements_newest_first(
        self, client: TestClient, db_session: Session, test_user: models.User
    ) -> None:
        earlier = AchievementService(db_session, clock=lambda: NOW - timedelta(days=2))
        award(earlier, test_user, "community_member")
        award(AchievementService(db_session, clock=lambda: NOW), test_user, "knowledge_seeker")

        response = client.get("/api/v1/achievements/user")

        assert response.status_code == status.HTTP_200_OK
        assert [a["achievement"]["key"] for a in response.json()] == [
            "knowledge_seeker",
            "community_member",
        ]


class TestPointsSummary:
    def test_summary(
        self, service: AchievementService, db_session: Session, test_user: models.User
    ) -> None:
        award(service, test_user)
        for offset in (0, 1, 3, 4, 5):
            add_study_day(db_session, test_user, NOW.date() - timedelta(days=offset))

        db_session.refresh(test_user)
        summary = service.get_points_summary(test_user)

        assert summary.total_points == 300
        assert summary.current_streak == 2
        assert summary.longest_streak == 3
        assert summary.achievement_count == 1
        assert [a.achievement.key for a in summary.recent_achievements] == ["knowledge_seeker"]

    def test_summary_endpoint_for_new_user(self, client: TestClient) -> None:
        response = client.get("/api/v1/points/summary")

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {
            "total_points": 0,
            "current_streak": 0,
            "longest_streak": 0,
            "achievement_count": 0,
            "recent_achievements": [],
        }


class TestLeaderboard:
    def test_all_time_ranks_by_total_points(
        self, service: AchievementService, db_session: Session, test_user: models.User
    ) -> None:
        rival = create_test_user(db_session, email="rival@example.com", username="rival")
        create_test_user(db_session, email="idle@example.com", username="idle")
        award(service, test_user, "community_member")
        award(service, rival, "knowledge_seeker")

        board = service.get_leaderboard("all_time")

        assert [(e.rank, e.username, e.points) for e in board.entries] == [
            (1, "rival", 300),
            (2, "learner", 50),
        ]
        assert board.entries[0].achievement_count == 1

    def test_weekly_counts_only_points_this_week(
        self, db_session: Session, test_user: models.User
    ) -> None:
        rival = create_test_user(db_session, email="rival@example.com", username="rival")
        last_month = AchievementService(db_session, clock=lambda: NOW - timedelta(days=30))
        award(last_month, rival, "knowledge_seeker")
        this_week = AchievementService(db_session, clock=lambda: NOW)
        award(this_week, test_user, "community_member")

        weekly = this_week.get_leaderboard("weekly")
        all_time = this_week.get_leaderboard("all_time")

        assert [(e.username, e.points) for e in weekly.entries] == [("learner", 50)]
        assert [e.username for e in all_time.entries] == ["rival", "learner"]

    def test_leaderboard_endpoint(self, client: TestClient) -> None:
        response = client.get("/api/v1/leaderboard", params={"period": "monthly"})

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"period": "monthly", "entries": []}

    def test_unknown_period_rejected(self, client: TestClient) -> None:
        response = client.get("/api/v1/leaderboard", params={"period": "yearly"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY


class TestStudyDays:
    def test_distinct_days_newest_first(
        self, db_session: Session, test_user: models.User
    ) -> None:
        add_study_day(db_session, test_user, date(2024, 5, 1))
        add_study_day(db_session, test_user, date(2024, 5, 3))
        add_study_day(db_session, test_user, date(2024, 5, 3))

        days = repositories.StudySessionRepository(db_session).get_study_days(test_user.id)

        assert days == [date(2024, 5, 3), date(2024, 5, 1)]
