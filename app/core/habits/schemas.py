from __future__ import annotations

from datetime import date, datetime
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict

from app.core.gamification.schemas import AchievementPublic


class HabitCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    category: str | None = Field(default=None, max_length=100)


class HabitUpdate(BaseModel):
    title: str | None = Field(default=None, min_length=1, max_length=200)
    category: str | None = Field(default=None, max_length=100)


class HabitPublic(BaseModel):
    id: UUID
    user_id: UUID
    title: str
    category: str | None
    start_date: date
    current_streak: int
    longest_streak: int
    last_checkin_date: date | None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class HabitCreated(BaseModel):
    habit: HabitPublic
    awarded_achievements: list[AchievementPublic] = []


__all__ = [
    "HabitCreate",
    "HabitUpdate",
    "HabitPublic",
    "HabitCreated",
]
