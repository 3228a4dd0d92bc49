from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel
from pydantic.config import ConfigDict


class GamificationProfilePublic(BaseModel):
    level: int
    xp: int
    xp_for_next_level: int
    progress_percent: int


class AchievementPublic(BaseModel):
    id: str
    title: str
    description: str
    icon: str

    model_config = ConfigDict(from_attributes=True)


class AchievementStatusPublic(AchievementPublic):
    unlocked: bool
    unlocked_at: datetime | None = None


class UnlockedAchievementPublic(AchievementPublic):
    unlocked_at: datetime


class LeaderboardEntry(BaseModel):
    user_id: UUID
    username: str
    avatar: str
    experience_points: int
    level: int


__all__ = [
    "GamificationProfilePublic",
    "AchievementPublic",
    "AchievementStatusPublic",
    "UnlockedAchievementPublic",
    "LeaderboardEntry",
]
