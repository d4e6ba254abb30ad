"""Service layer for achievements, points and the leaderboard."""

from collections.abc import Callable
from datetime import date, datetime, timedelta

import structlog
from sqlalchemy.orm import Session

from plumbprep import models, repositories, schemas
from plumbprep.exceptions import ConflictError, NotFoundError
from plumbprep.schemas.achievement_schemas import LeaderboardPeriod
from plumbprep.seed import seed_achievements
from plumbprep.utils import utc_now

logger = structlog.get_logger(__name__)

LEADERBOARD_SIZE = 20
RECENT_ACHIEVEMENTS = 3


def calculate_streaks(study_days: list[date], today: date) -> tuple[int, int]:
    """
    Current and longest runs of consecutive study days.

    The current streak counts back from ``today``; a day without study ends it.
    """
    days = sorted(set(study_days))
    longest = run = 0
    previous: date | None = None
    for day in days:
        run = run + 1 if previous is not None and day - previous == timedelta(days=1) else 1
        longest = max(longest, run)
        previous = day

    current = 0
    studied = set(days)
    while today - timedelta(days=current) in studied:
        current += 1
    return current, longest


def period_start(period: str, now: datetime) -> datetime | None:
    """Start of the leaderboard window: the current UTC month or ISO week."""
    midnight = now.replace(hour=0, minute=0, second=0, microsecond=0)
    if period == "monthly":
        return midnight.replace(day=1)
    if period == "weekly":
        return midnight - timedelta(days=midnight.weekday())
    return None


class AchievementService:
    def __init__(self, db: Session, clock: Callable[[], datetime] = utc_now) -> None:
        """Initialize service with database session and an injectable clock."""
        self.db = db
        self.clock = clock
        self.achievement_repo = repositories.AchievementRepository(db)
        self.user_achievement_repo = repositories.UserAchievementRepository(db)
        self.points_repo = repositories.PointsRepository(db)
        self.session_repo = repositories.StudySessionRepository(db)
        self.user_repo = repositories.UserRepository(db)

    def get_catalog(self) -> list[schemas.Achievement]:
        if seed_achievements(self.db):
            logger.info("achievement_catalog_seeded")
        return [schemas.Achievement.model_validate(a) for a in self.achievement_repo.get_all()]

    def get_user_achievements(self, user_id: int) -> list[schemas.UserAchievement]:
        return [
            schemas.UserAchievement.model_validate(ua)
            for ua in self.user_achievement_repo.get_by_user(user_id)
        ]

    def award_achievement(
        self, request: schemas.AchievementAwardRequest, awarded_by: int
    ) -> schemas.UserAchievement:
        """
        Award an achievement and credit its points.

        Raises:
            NotFoundError: If the user or achievement does not exist
            ConflictError: If the user already earned it
        """
        seed_achievements(self.db)
        user = self.user_repo.get_by_id(request.user_id)
        if user is None:
            raise NotFoundError(f"User {request.user_id} not found")
        achievement = self.achievement_repo.get_by_key(request.achievement_key)
        if achievement is None:
            raise NotFoundError(f"Achievement '{request.achievement_key}' not found")
        if self.user_achievement_repo.exists(user.id, achievement.id):
            raise ConflictError("Achievement already earned")

        now = self.clock()
        user_achievement = self.user_achievement_repo.create(user.id, achievement, now)
        if achievement.point_value > 0:
            self.points_repo.add_points(
                user,
                achievement.point_value,
                action="achievement_earned",
                description=f"Earned achievement: {achievement.name}",
                created_at=now,
                reference_id=achievement.key,
            )
        self.db.commit()

        logger.info(
            "achievement_awarded",
            user_id=user.id,
            achievement=achievement.key,
            points=achievement.point_value,
            awarded_by=awarded_by,
        )
        return schemas.UserAchievement.model_validate(user_achievement)

    def _streaks(self, user_id: int) -> tuple[int, int]:
        return calculate_streaks(self.session_repo.get_study_days(user_id), self.clock().date())

    def get_points_summary(self, user: models.User) -> schemas.PointsSummary:
        earned = self.get_user_achievements(user.id)
        current, longest = self._streaks(user.id)
        return schemas.PointsSummary(
            total_points=user.total_points or 0,
            current_streak=current,
            longest_streak=longest,
            achievement_count=len(earned),
            recent_achievements=earned[:RECENT_ACHIEVEMENTS],
        )

    def get_leaderboard(
        self, period: LeaderboardPeriod = "all_time"
    ) -> schemas.LeaderboardResponse:
        since = period_start(period, self.clock())
        if since is None:
            rows = self.points_repo.get_all_time_leaders(LEADERBOARD_SIZE)
        else:
            rows = self.points_repo.get_leaders_since(since, LEADERBOARD_SIZE)

        entries = [
            schemas.LeaderboardEntry(
                rank=rank,
                user_id=row.user.id,
                username=row.user.username,
                first_name=row.user.first_name,
                last_name=row.user.last_name,
                points=row.points,
                current_streak=self._streaks(row.user.id)[0],
                achievement_count=row.achievement_count,
            )
            for rank, row in enumerate(rows, start=1)
        ]
        return schemas.LeaderboardResponse(period=period, entries=entries)
