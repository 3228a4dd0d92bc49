from __future__ import annotations

from datetime import date, timedelta
from typing import Dict, List, Tuple
from uuid import UUID

from sqlalchemy import func
from sqlalchemy.orm import Session

from app.core.checkins.models import CheckIn
from app.core.gamification.levels import xp_for_next_level
from app.core.gamification.models import Achievement
from app.core.gamification.services import build_snapshot, evaluate_achievements
from app.core.gamification.streaks import effective_streak
from app.core.habits.models import Habit
from app.core.users.models import User
from app.core.users.schemas import UserUpdate
from app.response.response import APIError, not_found


STATS_WINDOW_DAYS = 7


def create_user(db: Session, *, username: str, email: str) -> User:
    if db.query(User.id).filter(User.username == username).first():
        raise APIError(
            code="USERS_USERNAME_TAKEN",
            http_code=409,
            message="This username is already taken.",
        )
    if db.query(User.id).filter(User.email == email).first():
        raise APIError(
            code="USERS_EMAIL_TAKEN",
            http_code=409,
            message="A user with this email already exists.",
        )

    user = User(
        username=username,
        email=email,
        experience_points=0,
        level=1,
        communities=[],
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def get_user(db: Session, user_id: UUID) -> User:
    user = db.get(User, user_id)
    if user is None:
        raise not_found("USERS_NOT_FOUND", "User not found.")
    return user


def update_profile(
    db: Session,
    user: User,
    data: UserUpdate,
) -> Tuple[User, List[Achievement]]:
    changes = data.model_dump(exclude_unset=True, exclude_none=True)
    if "communities" in changes:
        # Keep first occurrence order, drop blanks and repeats.
        seen: Dict[str, None] = {}
        for name in changes["communities"]:
            name = name.strip()
            if name:
                seen.setdefault(name, None)
        changes["communities"] = list(seen)

    for field, value in changes.items():
        setattr(user, field, value)
    db.add(user)
    db.flush()

    awarded: List[Achievement] = []
    if "communities" in changes:
        awarded = evaluate_achievements(db, user.id, build_snapshot(db, user))

    db.commit()
    db.refresh(user)
    return user, awarded


def get_random_users(db: Session, limit: int = 5) -> List[Dict[str, str]]:
    rows = db.query(User.username).order_by(func.random()).limit(limit).all()
    return [{"username": row.username} for row in rows]


def get_user_stats(db: Session, user: User, today: date) -> Dict[str, int]:
    habits = db.query(Habit).filter(Habit.user_id == user.id).all()

    current_streak = max(
        (
            effective_streak(h.last_checkin_date, h.current_streak, today)
            for h in habits
        ),
        default=0,
    )
    longest_streak = max((h.longest_streak for h in habits), default=0)

    window_start = today - timedelta(days=STATS_WINDOW_DAYS - 1)
    recent_checkins = (
        db.query(func.count(CheckIn.id))
        .filter(
            CheckIn.user_id == user.id,
            CheckIn.checkin_date >= window_start,
            CheckIn.checkin_date <= today,
        )
        .scalar()
        or 0
    )
    possible = len(habits) * STATS_WINDOW_DAYS
    completion_rate = round(recent_checkins / possible * 100) if possible else 0

    return {
        "current_streak": current_streak,
        "longest_streak": longest_streak,
        "completion_rate": min(completion_rate, 100),
        "total_habits": len(habits),
        "total_checkins": recent_checkins,
        "level": user.level,
        "experience_points": user.experience_points,
        "xp_for_next_level": xp_for_next_level(user.level),
    }


__all__ = [
    "create_user",
    "get_user",
    "update_profile",
    "get_random_users",
    "get_user_stats",
]
