"""Tests for the streak calculator"""
import random
from datetime import date, timedelta

import pytest

from app.core.gamification.streaks import (
    StreakInvariantError,
    StreakState,
    advance_streak,
    effective_streak,
    is_streak_broken,
)


DAY_ONE = date(2026, 1, 1)


def _check_in_on(days):
    """Replays check-ins on the given day offsets and returns every state"""
    state = StreakState(current_streak=0, longest_streak=0, last_checkin_date=None)
    history = []
    for offset in days:
        state = advance_streak(
            state.last_checkin_date,
            state.current_streak,
            state.longest_streak,
            DAY_ONE + timedelta(days=offset),
        )
        history.append(state)
    return history


def test_first_check_in_starts_streak():
    state = advance_streak(None, 0, 0, DAY_ONE)
    assert state == StreakState(1, 1, DAY_ONE)


@pytest.mark.parametrize("n", [1, 2, 3, 7, 30, 100])
def test_consecutive_days_extend_streak(n):
    final = _check_in_on(range(n))[-1]
    assert final.current_streak == n
    assert final.longest_streak >= n
    assert final.last_checkin_date == DAY_ONE + timedelta(days=n - 1)


def test_gap_resets_streak_and_keeps_longest():
    history = _check_in_on([0, 5])
    assert history[-1].current_streak == 1
    assert history[-1].longest_streak == 1

    history = _check_in_on([0, 1, 2, 3, 9])
    assert history[-2].current_streak == 4
    assert history[-1].current_streak == 1
    assert history[-1].longest_streak == 4


@pytest.mark.parametrize("gap_days", [2, 3, 10, 365])
def test_one_missed_day_and_many_missed_days_behave_the_same(gap_days):
    state = advance_streak(DAY_ONE, 6, 6, DAY_ONE + timedelta(days=gap_days))
    assert state.current_streak == 1
    assert state.longest_streak == 6


def test_new_streak_can_overtake_longest():
    history = _check_in_on([0, 1, 5, 6, 7])
    assert [s.current_streak for s in history] == [1, 2, 1, 2, 3]
    assert [s.longest_streak for s in history] == [1, 2, 2, 2, 3]


def test_longest_streak_never_decreases():
    rng = random.Random(1234)
    offsets = []
    day = 0
    for _ in range(300):
        day += rng.choice([1, 1, 1, 2, 4])
        offsets.append(day)

    history = _check_in_on(offsets)
    longest = [s.longest_streak for s in history]
    assert longest == sorted(longest)
    assert all(s.longest_streak >= s.current_streak for s in history)


def test_same_day_check_in_is_rejected():
    with pytest.raises(StreakInvariantError):
        advance_streak(DAY_ONE, 1, 1, DAY_ONE)


def test_check_in_before_last_check_in_is_rejected():
    with pytest.raises(StreakInvariantError):
        advance_streak(DAY_ONE, 1, 1, DAY_ONE - timedelta(days=1))


@pytest.mark.parametrize(
    "current,longest",
    [(-1, 0), (0, -1), (5, 3)],
)
def test_corrupt_counters_fail_loudly(current, longest):
    with pytest.raises(StreakInvariantError):
        advance_streak(DAY_ONE, current, longest, DAY_ONE + timedelta(days=1))


def test_effective_streak_survives_until_end_of_next_day():
    assert effective_streak(DAY_ONE, 4, DAY_ONE) == 4
    assert effective_streak(DAY_ONE, 4, DAY_ONE + timedelta(days=1)) == 4
    assert effective_streak(DAY_ONE, 4, DAY_ONE + timedelta(days=2)) == 0
    assert effective_streak(None, 0, DAY_ONE) == 0


def test_is_streak_broken():
    assert is_streak_broken(None, DAY_ONE)
    assert not is_streak_broken(DAY_ONE, DAY_ONE + timedelta(days=1))
    assert is_streak_broken(DAY_ONE, DAY_ONE + timedelta(days=2))
