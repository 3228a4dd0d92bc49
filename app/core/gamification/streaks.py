from __future__ import annotations

from dataclasses import dataclass
from datetime import date, timedelta
from typing import Optional


class StreakInvariantError(ValueError):
    """Streak inputs that can only come from a bug or corrupted row."""


@dataclass(frozen=True)
class StreakState:
    current_streak: int
    longest_streak: int
    last_checkin_date: Optional[date]


def _check_counters(current_streak: int, longest_streak: int) -> None:
    if current_streak < 0 or longest_streak < 0:
        raise StreakInvariantError(
            f"negative streak counters: current={current_streak}, "
            f"longest={longest_streak}"
        )
    if longest_streak < current_streak:
        raise StreakInvariantError(
            f"longest streak {longest_streak} is below "
            f"current streak {current_streak}"
        )


def advance_streak(
    last_checkin_date: Optional[date],
    current_streak: int,
    longest_streak: int,
    today: date,
) -> StreakState:
    """
    Returns the streak state after an accepted check-in on `today`.

    A check-in the day after the previous one extends the streak; any gap
    of two or more days starts a new streak of 1. Same-day check-ins are
    rejected by the caller before this runs.
    """
    _check_counters(current_streak, longest_streak)

    if last_checkin_date is None:
        new_current = 1
    else:
        days_since_last = (today - last_checkin_date).days
        if days_since_last < 1:
            raise StreakInvariantError(
                f"check-in on {today} is not after last check-in "
                f"on {last_checkin_date}"
            )
        if days_since_last == 1:
            new_current = current_streak + 1
        else:
            new_current = 1

    return StreakState(
        current_streak=new_current,
        longest_streak=max(longest_streak, new_current),
        last_checkin_date=today,
    )


def is_streak_broken(last_checkin_date: Optional[date], today: date) -> bool:
    if last_checkin_date is None:
        return True
    return last_checkin_date < today - timedelta(days=1)


def effective_streak(
    last_checkin_date: Optional[date],
    current_streak: int,
    today: date,
) -> int:
    # A stored streak stays valid through the day after its last check-in.
    if is_streak_broken(last_checkin_date, today):
        return 0
    return current_streak


__all__ = [
    "StreakInvariantError",
    "StreakState",
    "advance_streak",
    "effective_streak",
    "is_streak_broken",
]
