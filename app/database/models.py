from __future__ import annotations

from app.core.checkins.models import CheckIn, Like
from app.core.gamification.models import Achievement, UserAchievement
from app.core.habits.models import Habit
from app.core.notifications.models import Notification
from app.core.users.models import User


__all__ = [
    "User",
    "Habit",
    "CheckIn",
    "Like",
    "Notification",
    "Achievement",
    "UserAchievement",
]
