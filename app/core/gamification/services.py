from __future__ import annotations

from datetime import datetime
from typing import Dict, List, Optional
from uuid import UUID

from loguru import logger
from sqlalchemy import desc, func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.core.checkins.models import CheckIn, Like
from app.core.config import settings
from app.core.gamification.catalog import (
    ACHIEVEMENTS,
    AchievementDefinition,
    ProgressSnapshot,
    satisfied_achievements,
)
from app.core.gamification.levels import (
    level_for_xp,
    progress_percent,
    xp_for_next_level,
)
from app.core.gamification.models import Achievement, UserAchievement
from app.core.habits.models import Habit
from app.core.users.models import User


class AchievementAwardError(Exception):
    def __init__(self, achievement_id: str, user_id: UUID, reason: str) -> None:
        super().__init__(
            f"could not award {achievement_id} to {user_id}: {reason}"
        )
        self.achievement_id = achievement_id
        self.user_id = user_id
        self.reason = reason


def sync_achievement_catalog(db: Session) -> int:
    """
    Upserts every catalog entry into `achievements`.

    Returns the number of rows inserted. Existing rows get their title,
    description and icon refreshed from the catalog.
    """
    existing = {row.id: row for row in db.query(Achievement).all()}
    created = 0
    for position, definition in enumerate(ACHIEVEMENTS):
        row = existing.get(definition.id)
        if row is None:
            row = Achievement(id=definition.id)
            created += 1
        row.title = definition.title
        row.description = definition.description
        row.icon = definition.icon
        row.sort_order = position
        db.add(row)
    db.commit()
    return created


def grant_xp(user: User, amount: int) -> bool:
    """Adds XP to `user` and recomputes the level. Returns True on level-up."""
    if amount < 0:
        raise ValueError(f"XP awards must be non-negative, got {amount}")

    user.experience_points = (user.experience_points or 0) + amount
    new_level = level_for_xp(user.experience_points)
    level_up = new_level > (user.level or 1)
    user.level = new_level
    return level_up


def build_snapshot(
    db: Session,
    user: User,
    *,
    current_streak: int = 0,
    checked_at: Optional[datetime] = None,
) -> ProgressSnapshot:
    checkin_count = (
        db.query(func.count(CheckIn.id))
        .filter(CheckIn.user_id == user.id)
        .scalar()
    )
    habit_count = (
        db.query(func.count(Habit.id))
        .filter(Habit.user_id == user.id)
        .scalar()
    )
    likes_given = (
        db.query(func.count(Like.id))
        .filter(Like.user_id == user.id)
        .scalar()
    )
    return ProgressSnapshot(
        checkin_count=checkin_count or 0,
        current_streak=current_streak,
        level=user.level or 1,
        habit_count=habit_count or 0,
        likes_given=likes_given or 0,
        community_count=len(user.communities or []),
        checked_at=checked_at,
        early_bird_hour=settings.early_bird_hour,
    )


def _unlocked_ids(db: Session, user_id: UUID) -> set[str]:
    rows = (
        db.query(UserAchievement.achievement_id)
        .filter(UserAchievement.user_id == user_id)
        .all()
    )
    return {row.achievement_id for row in rows}


def _award(
    db: Session,
    user_id: UUID,
    definition: AchievementDefinition,
) -> Achievement:
    try:
        with db.begin_nested():
            achievement = db.get(Achievement, definition.id)
            if achievement is None:
                raise AchievementAwardError(
                    definition.id,
                    user_id,
                    "achievement is missing from the catalog table",
                )
            db.add(
                UserAchievement(
                    user_id=user_id,
                    achievement_id=definition.id,
                )
            )
    except SQLAlchemyError as exc:
        raise AchievementAwardError(definition.id, user_id, repr(exc)) from exc
    return achievement


def evaluate_achievements(
    db: Session,
    user_id: UUID,
    snapshot: ProgressSnapshot,
) -> List[Achievement]:
    """
    Unlocks every catalog achievement satisfied by `snapshot` that the user
    does not hold yet and returns the newly unlocked ones.

    The lookup and each insert run in their own savepoints. A failed award
    (for example a concurrent request that unlocked the same achievement
    first) only drops that one row, and a failed lookup skips evaluation
    without touching the caller's transaction. The unique constraint on
    (user, achievement) is what prevents double awards; the pre-check just
    skips known rows.
    """
    candidates = satisfied_achievements(snapshot)
    if not candidates:
        return []

    try:
        with db.begin_nested():
            already_unlocked = _unlocked_ids(db, user_id)
    except SQLAlchemyError as exc:
        logger.warning(
            "Achievement evaluation skipped",
            user_id=str(user_id),
            reason=repr(exc),
        )
        return []

    awarded: List[Achievement] = []
    for definition in candidates:
        if definition.id in already_unlocked:
            continue
        try:
            awarded.append(_award(db, user_id, definition))
        except AchievementAwardError as exc:
            logger.warning(
                "Achievement award skipped",
                achievement_id=exc.achievement_id,
                user_id=str(exc.user_id),
                reason=exc.reason,
            )
            continue
        logger.info(
            "Achievement unlocked",
            achievement_id=definition.id,
            user_id=str(user_id),
        )
    return awarded


def get_profile_payload(user: User) -> Dict[str, object]:
    xp = user.experience_points or 0
    level = level_for_xp(xp)
    return {
        "level": level,
        "xp": xp,
        "xp_for_next_level": xp_for_next_level(level),
        "progress_percent": progress_percent(xp),
    }


def list_achievements_with_status(
    db: Session,
    user_id: UUID,
) -> List[Dict[str, object]]:
    achievements = (
        db.query(Achievement)
        .order_by(Achievement.sort_order.asc(), Achievement.id.asc())
        .all()
    )
    unlocked = {
        row.achievement_id: row.unlocked_at
        for row in db.query(UserAchievement)
        .filter(UserAchievement.user_id == user_id)
        .all()
    }

    result = []
    for item in achievements:
        result.append(
            {
                "id": item.id,
                "title": item.title,
                "description": item.description,
                "icon": item.icon,
                "unlocked": item.id in unlocked,
                "unlocked_at": unlocked.get(item.id),
            }
        )
    return result


def list_unlocked_achievements(
    db: Session,
    user_id: UUID,
) -> List[Dict[str, object]]:
    rows = (
        db.query(UserAchievement, Achievement)
        .join(Achievement, Achievement.id == UserAchievement.achievement_id)
        .filter(UserAchievement.user_id == user_id)
        .order_by(UserAchievement.unlocked_at.asc())
        .all()
    )
    return [
        {
            "id": achievement.id,
            "title": achievement.title,
            "description": achievement.description,
            "icon": achievement.icon,
            "unlocked_at": unlocked.unlocked_at,
        }
        for unlocked, achievement in rows
    ]


def get_leaderboard(
    db: Session,
    limit: int = 10,
) -> List[Dict[str, object]]:
    rows = (
        db.query(User)
        .order_by(desc(User.experience_points), User.username.asc())
        .limit(limit)
        .all()
    )
    return [
        {
            "user_id": row.id,
            "username": row.username,
            "avatar": row.avatar,
            "experience_points": row.experience_points,
            "level": row.level,
        }
        for row in rows
    ]


__all__ = [
    "AchievementAwardError",
    "sync_achievement_catalog",
    "grant_xp",
    "build_snapshot",
    "evaluate_achievements",
    "get_profile_payload",
    "list_achievements_with_status",
    "list_unlocked_achievements",
    "get_leaderboard",
]
