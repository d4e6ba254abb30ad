"""Pydantic schemas for achievements, points and the leaderboard."""

from datetime import datetime as dt
from typing import Literal

from pydantic import BaseModel, Field

LeaderboardPeriod = Literal["all_time", "monthly", "weekly"]


class Achievement(BaseModel):
    id: int
    key: str
    name: str
    description: str
    category: str
    icon: str | None
    point_value: int

    model_config = {"from_attributes": True}


class UserAchievement(BaseModel):
    id: int
    earned_at: dt
    points_earned: int
    achievement: Achievement

    model_config = {"from_attributes": True}


class AchievementAwardRequest(BaseModel):
    user_id: int
    achievement_key: str = Field(..., min_length=1, max_length=50)


class PointsSummary(BaseModel):
    total_points: int
    current_streak: int = Field(..., description="Consecutive study days ending today")
    longest_streak: int
    achievement_count: int
    recent_achievements: list[UserAchievement] = Field(..., description="Latest three earned")


class LeaderboardEntry(BaseModel):
    rank: int
    user_id: int
    username: str | None
    first_name: str | None
    last_name: str | None
    points: int = Field(..., description="Points earned in the period")
    current_streak: int
    achievement_count: int


class LeaderboardResponse(BaseModel):
    period: LeaderboardPeriod
    entries: list[LeaderboardEntry]
