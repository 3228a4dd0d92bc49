from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy import desc, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.core.checkins.models import CheckIn, Like
from app.core.config import settings
from app.core.gamification.models import Achievement
from app.core.gamification.services import (
    build_snapshot,
    evaluate_achievements,
    grant_xp,
)
from app.core.gamification.streaks import advance_streak
from app.core.habits.models import Habit
from app.core.habits.services import get_owned_habit
from app.core.notifications.services import create_notification
from app.core.users.models import User
from app.response.response import APIError, not_found


class DuplicateCheckInError(APIError):
    def __init__(self, habit_id: UUID, today: date) -> None:
        super().__init__(
            code="CHECKIN_DUPLICATE",
            http_code=409,
            message=(
                "You can only check in once per day for each habit. "
                "Come back tomorrow!"
            ),
            details={"habit_id": str(habit_id), "date": today.isoformat()},
        )
        self.habit_id = habit_id
        self.today = today


@dataclass
class CheckInResult:
    checkin: CheckIn
    habit: Habit
    user: User
    xp_gained: int
    level_up: bool
    awarded_achievements: List[Achievement] = field(default_factory=list)


def _has_checked_in(
    db: Session,
    user_id: UUID,
    habit_id: UUID,
    today: date,
) -> bool:
    existing = (
        db.query(CheckIn.id)
        .filter(
            CheckIn.user_id == user_id,
            CheckIn.habit_id == habit_id,
            CheckIn.checkin_date == today,
        )
        .first()
    )
    return existing is not None


def submit_check_in(
    db: Session,
    *,
    user_id: UUID,
    habit_id: UUID,
    content: str,
    today: date,
    checked_at: Optional[datetime] = None,
) -> CheckInResult:
    """
    Records one check-in for `habit_id` on `today` and applies progression:
    the habit's streak, the check-in XP award, the level, and achievements.

    Raises DuplicateCheckInError when the user already checked into this
    habit today. Achievement award failures are logged by the evaluator and
    never abort the check-in.
    """
    user = db.get(User, user_id)
    if user is None:
        raise not_found("USERS_NOT_FOUND", "User not found.")
    habit = get_owned_habit(db, user_id, habit_id)

    if _has_checked_in(db, user_id, habit_id, today):
        raise DuplicateCheckInError(habit_id, today)

    checkin = CheckIn(
        user_id=user_id,
        habit_id=habit_id,
        content=content,
        checkin_date=today,
    )
    try:
        with db.begin_nested():
            db.add(checkin)
    except IntegrityError as exc:
        # Lost the race against a concurrent request for the same day.
        raise DuplicateCheckInError(habit_id, today) from exc

    state = advance_streak(
        habit.last_checkin_date,
        habit.current_streak,
        habit.longest_streak,
        today,
    )
    habit.current_streak = state.current_streak
    habit.longest_streak = state.longest_streak
    habit.last_checkin_date = state.last_checkin_date

    xp_gained = settings.checkin_xp
    level_up = grant_xp(user, xp_gained)
    db.flush()

    snapshot = build_snapshot(
        db,
        user,
        current_streak=state.current_streak,
        checked_at=checked_at,
    )
    awarded = evaluate_achievements(db, user_id, snapshot)

    db.commit()
    logger.info(
        "Check-in recorded",
        user_id=str(user_id),
        habit_id=str(habit_id),
        streak=habit.current_streak,
        awarded=[item.id for item in awarded],
    )
    return CheckInResult(
        checkin=checkin,
        habit=habit,
        user=user,
        xp_gained=xp_gained,
        level_up=level_up,
        awarded_achievements=awarded,
    )


def _like_counts(db: Session, checkin_ids: List[UUID]) -> Dict[UUID, int]:
    if not checkin_ids:
        return {}
    rows = (
        db.query(Like.checkin_id, func.count(Like.id))
        .filter(Like.checkin_id.in_(checkin_ids))
        .group_by(Like.checkin_id)
        .all()
    )
    return {checkin_id: count for checkin_id, count in rows}


def _liked_ids(
    db: Session,
    user_id: UUID,
    checkin_ids: List[UUID],
) -> set[UUID]:
    if not checkin_ids:
        return set()
    rows = (
        db.query(Like.checkin_id)
        .filter(Like.user_id == user_id, Like.checkin_id.in_(checkin_ids))
        .all()
    )
    return {row.checkin_id for row in rows}


def _feed_query(db: Session):
    return (
        db.query(CheckIn, User, Habit)
        .join(User, User.id == CheckIn.user_id)
        .join(Habit, Habit.id == CheckIn.habit_id)
        .order_by(desc(CheckIn.created_at), desc(CheckIn.id))
    )


def _build_feed(
    db: Session,
    rows: List[Tuple[CheckIn, User, Habit]],
    viewer_id: Optional[UUID],
) -> List[Dict[str, object]]:
    ids = [checkin.id for checkin, _user, _habit in rows]
    counts = _like_counts(db, ids)
    liked = _liked_ids(db, viewer_id, ids) if viewer_id is not None else set()

    return [
        {
            "id": checkin.id,
            "content": checkin.content,
            "checkin_date": checkin.checkin_date,
            "created_at": checkin.created_at,
            "user": {
                "id": author.id,
                "username": author.username,
                "avatar": author.avatar,
            },
            "habit": {"id": habit.id, "title": habit.title},
            "like_count": counts.get(checkin.id, 0),
            "is_liked_by_current_user": checkin.id in liked,
        }
        for checkin, author, habit in rows
    ]


def list_feed(
    db: Session,
    viewer_id: UUID,
    *,
    page: int = 1,
    page_size: int = 20,
) -> Tuple[List[Dict[str, object]], int]:
    total = db.query(func.count(CheckIn.id)).scalar() or 0
    rows = (
        _feed_query(db)
        .offset((page - 1) * page_size)
        .limit(page_size)
        .all()
    )
    return _build_feed(db, rows, viewer_id), total


def list_user_checkins(
    db: Session,
    viewer_id: UUID,
    author_id: UUID,
) -> List[Dict[str, object]]:
    rows = _feed_query(db).filter(CheckIn.user_id == author_id).all()
    return _build_feed(db, rows, viewer_id)


def list_recent_checkins(db: Session, limit: int = 5) -> List[Dict[str, object]]:
    rows = _feed_query(db).limit(limit).all()
    return _build_feed(db, rows, None)


def like_check_in(
    db: Session,
    liker: User,
    checkin_id: UUID,
) -> Dict[str, object]:
    checkin = db.get(CheckIn, checkin_id)
    if checkin is None:
        raise not_found("CHECKINS_NOT_FOUND", "Check-in not found.")

    already_liked = APIError(
        code="CHECKINS_ALREADY_LIKED",
        http_code=409,
        message="You have already liked this check-in.",
    )
    existing = (
        db.query(Like.id)
        .filter(Like.user_id == liker.id, Like.checkin_id == checkin_id)
        .first()
    )
    if existing is not None:
        raise already_liked

    try:
        with db.begin_nested():
            db.add(Like(user_id=liker.id, checkin_id=checkin_id))
    except IntegrityError as exc:
        raise already_liked from exc

    author_rewarded = False
    if checkin.user_id != liker.id:
        author = db.get(User, checkin.user_id)
        grant_xp(author, settings.like_received_xp)
        author_rewarded = True
        create_notification(
            db,
            user_id=author.id,
            sender_id=liker.id,
            notification_type="like",
            message="liked your check-in",
            checkin_id=checkin.id,
        )
        db.flush()
        evaluate_achievements(db, author.id, build_snapshot(db, author))

    db.flush()
    awarded = evaluate_achievements(db, liker.id, build_snapshot(db, liker))
    db.commit()

    logger.info(
        "Check-in liked",
        checkin_id=str(checkin_id),
        liker_id=str(liker.id),
        author_rewarded=author_rewarded,
    )
    return {
        "checkin_id": checkin_id,
        "author_rewarded": author_rewarded,
        "awarded_achievements": awarded,
    }


def get_community_stats(db: Session, today: date) -> Dict[str, int]:
    active_members = (
        db.query(func.count(func.distinct(Habit.user_id))).scalar() or 0
    )
    posts_today = (
        db.query(func.count(CheckIn.id))
        .filter(CheckIn.checkin_date == today)
        .scalar()
        or 0
    )
    users_checked_in_today = (
        db.query(func.count(func.distinct(CheckIn.user_id)))
        .filter(CheckIn.checkin_date == today)
        .scalar()
        or 0
    )
    completion_rate = (
        round(users_checked_in_today / active_members * 100)
        if active_members > 0
        else 0
    )
    return {
        "active_members": active_members,
        "posts_today": posts_today,
        "completion_rate": completion_rate,
    }


__all__ = [
    "DuplicateCheckInError",
    "CheckInResult",
    "submit_check_in",
    "list_feed",
    "list_user_checkins",
    "list_recent_checkins",
    "like_check_in",
    "get_community_stats",
]
