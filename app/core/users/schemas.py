from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, Field
from pydantic.config import ConfigDict


class UserPublic(BaseModel):
    id: UUID
    username: str
    avatar: str
    bio: str
    communities: list[str]
    experience_points: int
    level: int

    model_config = ConfigDict(from_attributes=True)


class UserPrivate(UserPublic):
    email: str
    created_at: datetime


class UserUpdate(BaseModel):
    avatar: str | None = Field(default=None, min_length=1, max_length=16)
    bio: str | None = Field(default=None, max_length=150)
    communities: list[str] | None = None


class UserStats(BaseModel):
    current_streak: int
    longest_streak: int
    completion_rate: int
    total_habits: int
    total_checkins: int
    level: int
    experience_points: int
    xp_for_next_level: int


class RandomUser(BaseModel):
    username: str


__all__ = [
    "UserPublic",
    "UserPrivate",
    "UserUpdate",
    "UserStats",
    "RandomUser",
]
