from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Dict, Optional, Tuple


# Bump when an entry is added or its condition changes.
CATALOG_VERSION = 1


@dataclass(frozen=True)
class ProgressSnapshot:
    """User state the unlock conditions are evaluated against."""

    checkin_count: int = 0
    current_streak: int = 0
    level: int = 1
    habit_count: int = 0
    likes_given: int = 0
    community_count: int = 0
    checked_at: Optional[datetime] = None
    early_bird_hour: int = 8


@dataclass(frozen=True)
class AchievementDefinition:
    id: str
    title: str
    description: str
    icon: str
    condition: Callable[[ProgressSnapshot], bool]


def _streak_at_least(days: int) -> Callable[[ProgressSnapshot], bool]:
    return lambda snap: snap.current_streak >= days


def _level_at_least(level: int) -> Callable[[ProgressSnapshot], bool]:
    return lambda snap: snap.level >= level


def _is_early_check_in(snap: ProgressSnapshot) -> bool:
    return snap.checked_at is not None and snap.checked_at.hour < snap.early_bird_hour


ACHIEVEMENTS: Tuple[AchievementDefinition, ...] = (
    AchievementDefinition(
        id="first_post",
        title="First Steps",
        description="Share your first check-in with the community",
        icon="🎉",
        condition=lambda snap: snap.checkin_count >= 1,
    ),
    AchievementDefinition(
        id="streak_3_day",
        title="3-Day Streak",
        description="Maintain a habit for 3 consecutive days",
        icon="🔥",
        condition=_streak_at_least(3),
    ),
    AchievementDefinition(
        id="streak_7_day",
        title="Week Warrior",
        description="Complete a full week of consistency",
        icon="🗓️",
        condition=_streak_at_least(7),
    ),
    AchievementDefinition(
        id="streak_30_day",
        title="Month Master",
        description="Build a habit for 30 days straight",
        icon="🏆",
        condition=_streak_at_least(30),
    ),
    AchievementDefinition(
        id="streak_100_day",
        title="Century Club",
        description="Achieve a 100-day streak",
        icon="💯",
        condition=_streak_at_least(100),
    ),
    AchievementDefinition(
        id="level_5",
        title="Rising Star",
        description="Reach level 5 in your journey",
        icon="⭐",
        condition=_level_at_least(5),
    ),
    AchievementDefinition(
        id="level_10",
        title="Habit Champion",
        description="Reach level 10 - you're unstoppable",
        icon="🚀",
        condition=_level_at_least(10),
    ),
    AchievementDefinition(
        id="community_joiner",
        title="Social Butterfly",
        description="Join your first community",
        icon="🦋",
        condition=lambda snap: snap.community_count >= 1,
    ),
    AchievementDefinition(
        id="first_like",
        title="Supportive Friend",
        description="Give your first like to support others",
        icon="❤️",
        condition=lambda snap: snap.likes_given >= 1,
    ),
    AchievementDefinition(
        id="habit_creator",
        title="Habit Architect",
        description="Create your first habit",
        icon="🎯",
        condition=lambda snap: snap.habit_count >= 1,
    ),
    AchievementDefinition(
        id="five_habits",
        title="Multi-Tasker",
        description="Track 5 different habits",
        icon="📋",
        condition=lambda snap: snap.habit_count >= 5,
    ),
    AchievementDefinition(
        id="early_bird",
        title="Early Bird",
        description="Check in before 8 AM",
        icon="🌅",
        condition=_is_early_check_in,
    ),
)

ACHIEVEMENTS_BY_ID: Dict[str, AchievementDefinition] = {
    item.id: item for item in ACHIEVEMENTS
}


def satisfied_achievements(
    snapshot: ProgressSnapshot,
) -> Tuple[AchievementDefinition, ...]:
    return tuple(item for item in ACHIEVEMENTS if item.condition(snapshot))


__all__ = [
    "CATALOG_VERSION",
    "ProgressSnapshot",
    "AchievementDefinition",
    "ACHIEVEMENTS",
    "ACHIEVEMENTS_BY_ID",
    "satisfied_achievements",
]
