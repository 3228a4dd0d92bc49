"""Tests for the achievement catalog and its unlock conditions"""
from datetime import datetime

from app.core.gamification.catalog import (
    ACHIEVEMENTS,
    ACHIEVEMENTS_BY_ID,
    ProgressSnapshot,
    satisfied_achievements,
)
from app.core.gamification.models import Achievement
from app.core.gamification.services import sync_achievement_catalog


def _ids(snapshot):
    return {item.id for item in satisfied_achievements(snapshot)}


def test_catalog_ids_are_unique():
    assert len(ACHIEVEMENTS_BY_ID) == len(ACHIEVEMENTS)


def test_empty_snapshot_unlocks_nothing():
    assert _ids(ProgressSnapshot()) == set()


def test_first_check_in():
    assert _ids(ProgressSnapshot(checkin_count=1, current_streak=1)) == {"first_post"}


def test_streak_milestones():
    assert "streak_3_day" not in _ids(ProgressSnapshot(current_streak=2))
    assert {"streak_3_day", "streak_7_day"} <= _ids(ProgressSnapshot(current_streak=7))
    unlocked = _ids(ProgressSnapshot(current_streak=100))
    assert {"streak_3_day", "streak_7_day", "streak_30_day", "streak_100_day"} <= unlocked


def test_level_milestones():
    assert _ids(ProgressSnapshot(level=4)) == set()
    assert _ids(ProgressSnapshot(level=5)) == {"level_5"}
    assert _ids(ProgressSnapshot(level=12)) == {"level_5", "level_10"}


def test_social_and_habit_conditions():
    assert _ids(ProgressSnapshot(likes_given=1)) == {"first_like"}
    assert _ids(ProgressSnapshot(community_count=2)) == {"community_joiner"}
    assert _ids(ProgressSnapshot(habit_count=1)) == {"habit_creator"}
    assert _ids(ProgressSnapshot(habit_count=5)) == {"habit_creator", "five_habits"}


def test_early_bird_depends_on_check_in_time():
    early = ProgressSnapshot(checked_at=datetime(2026, 3, 10, 7, 59))
    on_the_hour = ProgressSnapshot(checked_at=datetime(2026, 3, 10, 8, 0))
    assert _ids(early) == {"early_bird"}
    assert _ids(on_the_hour) == set()
    assert _ids(ProgressSnapshot(checked_at=None)) == set()


def test_early_bird_hour_is_configurable():
    snapshot = ProgressSnapshot(
        checked_at=datetime(2026, 3, 10, 8, 30),
        early_bird_hour=9,
    )
    assert _ids(snapshot) == {"early_bird"}


def test_sync_writes_catalog_once(db):
    rows = db.query(Achievement).order_by(Achievement.sort_order).all()
    assert [row.id for row in rows] == [item.id for item in ACHIEVEMENTS]

    assert sync_achievement_catalog(db) == 0
    assert db.query(Achievement).count() == len(ACHIEVEMENTS)


def test_sync_refreshes_changed_rows(db):
    row = db.get(Achievement, "first_post")
    row.title = "Outdated"
    db.commit()

    sync_achievement_catalog(db)
    assert db.get(Achievement, "first_post").title == ACHIEVEMENTS_BY_ID["first_post"].title
