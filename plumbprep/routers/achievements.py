"""API routes for achievements, points and the leaderboard."""

import logging

from fastapi import APIRouter, HTTPException, status

from plumbprep import schemas
from plumbprep.database import DatabaseSession
from plumbprep.dependencies import AdminUser, CurrentUser
from plumbprep.exceptions import PlumbPrepError
from plumbprep.schemas.achievement_schemas import LeaderboardPeriod
from plumbprep.services import AchievementService

logger = logging.getLogger(__name__)

router = APIRouter(tags=["achievements"])


@router.get("/achievements", response_model=list[schemas.Achievement])
def list_achievements(db: DatabaseSession) -> list[schemas.Achievement]:
    """Every achievement that can be earned."""
    return AchievementService(db).get_catalog()


@router.get("/achievements/user", response_model=list[schemas.UserAchievement])
def get_user_achievements(
    db: DatabaseSession, current_user: CurrentUser
) -> list[schemas.UserAchievement]:
    return AchievementService(db).get_user_achievements(current_user.id)


@router.post(
    "/achievements/award",
    response_model=schemas.UserAchievement,
    status_code=status.HTTP_201_CREATED,
)
def award_achievement(
    request: schemas.AchievementAwardRequest, db: DatabaseSession, admin: AdminUser
) -> schemas.UserAchievement:
    """Award an achievement to a user (admin only)."""
    try:
        return AchievementService(db).award_achievement(request, admin.id)
    except PlumbPrepError:
        raise
    except Exception as e:
        logger.error(f"Failed to award achievement to user {request.user_id}: {e!s}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="An unexpected error occurred. Please try again later.",
        ) from e


@router.get("/points/summary", response_model=schemas.PointsSummary)
def get_points_summary(db: DatabaseSession, current_user: CurrentUser) -> schemas.PointsSummary:
    """Point balance, study streaks and the three latest achievements."""
    return AchievementService(db).get_points_summary(current_user)


@router.get("/leaderboard", response_model=schemas.LeaderboardResponse)
def get_leaderboard(
    db: DatabaseSession, period: LeaderboardPeriod = "all_time"
) -> schemas.LeaderboardResponse:
    """Top learners by points, all time or for the current month or week."""
    return AchievementService(db).get_leaderboard(period)
