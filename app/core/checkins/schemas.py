from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from app.core.gamification.schemas import AchievementPublic
from app.core.habits.schemas import HabitPublic


class CheckInCreate(BaseModel):
    habit_id: UUID
    content: str = Field(..., min_length=1, max_length=5000)


class CheckInPublic(BaseModel):
    id: UUID
    user_id: UUID
    habit_id: UUID
    content: str
    checkin_date: date
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class CheckInSubmitted(BaseModel):
    checkin: CheckInPublic
    habit: HabitPublic
    xp_gained: int
    total_xp: int
    level: int
    level_up: bool
    awarded_achievements: list[AchievementPublic]


class FeedAuthor(BaseModel):
    id: UUID
    username: str
    avatar: str


class FeedHabit(BaseModel):
    id: UUID
    title: str


class FeedItem(BaseModel):
    id: UUID
    content: str
    checkin_date: date
    created_at: datetime
    user: FeedAuthor
    habit: FeedHabit
    like_count: int
    is_liked_by_current_user: bool = False


class CommunityStats(BaseModel):
    active_members: int
    posts_today: int
    completion_rate: int


__all__ = [
    "CheckInCreate",
    "CheckInPublic",
    "CheckInSubmitted",
    "FeedAuthor",
    "FeedHabit",
    "FeedItem",
    "CommunityStats",
]
