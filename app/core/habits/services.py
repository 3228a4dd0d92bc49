from __future__ import annotations

from datetime import date, timedelta
from typing import List, Tuple
from uuid import UUID

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.gamification.models import Achievement
from app.core.gamification.services import build_snapshot, evaluate_achievements
from app.core.habits.models import Habit
from app.core.habits.schemas import HabitCreate, HabitUpdate
from app.core.users.models import User
from app.response.response import APIError, not_found


def list_habits(db: Session, user_id: UUID) -> List[Habit]:
    return (
        db.query(Habit)
        .filter(Habit.user_id == user_id)
        .order_by(Habit.created_at.asc())
        .all()
    )


def get_owned_habit(db: Session, user_id: UUID, habit_id: UUID) -> Habit:
    habit = (
        db.query(Habit)
        .filter(Habit.id == habit_id, Habit.user_id == user_id)
        .first()
    )
    if habit is None:
        raise not_found("HABITS_NOT_FOUND", "Habit not found or not owned by user.")
    return habit


def create_habit(
    db: Session,
    user: User,
    data: HabitCreate,
    today: date | None = None,
) -> Tuple[Habit, List[Achievement]]:
    habit_count = (
        db.query(func.count(Habit.id))
        .filter(Habit.user_id == user.id)
        .scalar()
    )
    if habit_count >= settings.max_habits_per_user:
        raise APIError(
            code="HABITS_LIMIT_REACHED",
            http_code=400,
            message=(
                f"Maximum {settings.max_habits_per_user} habits allowed. "
                "Delete a habit to add a new one."
            ),
        )

    habit = Habit(
        user_id=user.id,
        title=data.title,
        category=data.category,
        start_date=today or date.today(),
        current_streak=0,
        longest_streak=0,
        last_checkin_date=None,
    )
    db.add(habit)
    db.flush()

    awarded = evaluate_achievements(db, user.id, build_snapshot(db, user))
    db.commit()
    db.refresh(habit)
    return habit, awarded


def update_habit(
    db: Session,
    user_id: UUID,
    habit_id: UUID,
    data: HabitUpdate,
) -> Habit:
    habit = get_owned_habit(db, user_id, habit_id)
    for field, value in data.model_dump(exclude_unset=True).items():
        if field == "title" and value is None:
            continue
        setattr(habit, field, value)

    db.add(habit)
    db.commit()
    db.refresh(habit)
    return habit


def delete_habit(db: Session, user_id: UUID, habit_id: UUID) -> None:
    habit = get_owned_habit(db, user_id, habit_id)
    db.delete(habit)
    db.commit()


def expire_broken_streaks(db: Session, today: date) -> int:
    """
    Zeroes `current_streak` on habits whose last check-in is older than
    yesterday. Longest streaks are left untouched.
    """
    yesterday = today - timedelta(days=1)
    updated = (
        db.query(Habit)
        .filter(
            Habit.current_streak > 0,
            or_(
                Habit.last_checkin_date.is_(None),
                Habit.last_checkin_date < yesterday,
            ),
        )
        .update({Habit.current_streak: 0}, synchronize_session=False)
    )
    db.commit()
    return updated


__all__ = [
    "list_habits",
    "get_owned_habit",
    "create_habit",
    "update_habit",
    "delete_habit",
    "expire_broken_streaks",
]
