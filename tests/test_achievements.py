"""Tests for the achievement unlock evaluator"""
import pytest
from sqlalchemy.exc import OperationalError

from app.core.gamification import services as gamification_services
from app.core.gamification.catalog import ProgressSnapshot
from app.core.gamification.models import Achievement, UserAchievement
from app.core.gamification.services import (
    evaluate_achievements,
    grant_xp,
    list_achievements_with_status,
    list_unlocked_achievements,
)


def _unlocked_rows(db, user):
    return (
        db.query(UserAchievement)
        .filter(UserAchievement.user_id == user.id)
        .all()
    )


def test_unlocks_satisfied_achievements(db, user):
    snapshot = ProgressSnapshot(checkin_count=1, current_streak=3, habit_count=1)

    awarded = evaluate_achievements(db, user.id, snapshot)
    db.commit()

    assert {item.id for item in awarded} == {
        "first_post",
        "streak_3_day",
        "habit_creator",
    }
    assert len(_unlocked_rows(db, user)) == 3


def test_second_evaluation_is_a_no_op(db, user):
    snapshot = ProgressSnapshot(checkin_count=1)

    first = evaluate_achievements(db, user.id, snapshot)
    second = evaluate_achievements(db, user.id, snapshot)
    db.commit()

    assert [item.id for item in first] == ["first_post"]
    assert second == []
    assert len(_unlocked_rows(db, user)) == 1


def test_duplicate_insert_from_racing_writer_is_swallowed(db, user, monkeypatch):
    snapshot = ProgressSnapshot(checkin_count=1, likes_given=1)
    evaluate_achievements(db, user.id, snapshot)
    db.commit()

    # Pretend the fast-path lookup missed the rows another writer just added.
    monkeypatch.setattr(gamification_services, "_unlocked_ids", lambda *args: set())

    awarded = evaluate_achievements(db, user.id, snapshot)
    db.commit()

    assert awarded == []
    assert len(_unlocked_rows(db, user)) == 2


def test_one_failed_award_does_not_stop_the_others(db, user):
    db.query(Achievement).filter(Achievement.id == "first_post").delete()
    db.commit()

    awarded = evaluate_achievements(
        db,
        user.id,
        ProgressSnapshot(checkin_count=1, habit_count=1),
    )
    db.commit()

    assert [item.id for item in awarded] == ["habit_creator"]


def test_catalog_read_failure_is_skipped(db, user, monkeypatch):
    def _failing_get(*args, **kwargs):
        raise OperationalError(
            "SELECT achievements", {}, Exception("connection reset")
        )

    monkeypatch.setattr(db, "get", _failing_get)

    awarded = evaluate_achievements(
        db,
        user.id,
        ProgressSnapshot(checkin_count=1, habit_count=1),
    )
    monkeypatch.undo()
    db.commit()

    assert awarded == []
    assert _unlocked_rows(db, user) == []


def test_unlocks_are_per_user(db, user, other_user):
    snapshot = ProgressSnapshot(checkin_count=1)

    evaluate_achievements(db, user.id, snapshot)
    awarded = evaluate_achievements(db, other_user.id, snapshot)
    db.commit()

    assert [item.id for item in awarded] == ["first_post"]


def test_grant_xp_recomputes_level(user):
    assert grant_xp(user, 79) is False
    assert user.level == 1
    assert grant_xp(user, 1) is True
    assert user.level == 2
    assert user.experience_points == 80


def test_grant_xp_rejects_negative_awards(user):
    with pytest.raises(ValueError):
        grant_xp(user, -5)


def test_status_listing_covers_whole_catalog(db, user):
    evaluate_achievements(db, user.id, ProgressSnapshot(level=5))
    db.commit()

    listing = list_achievements_with_status(db, user.id)

    assert len(listing) == db.query(Achievement).count()
    by_id = {item["id"]: item for item in listing}
    assert by_id["level_5"]["unlocked"] is True
    assert by_id["level_5"]["unlocked_at"] is not None
    assert by_id["level_10"]["unlocked"] is False
    assert by_id["level_10"]["unlocked_at"] is None


def test_unlocked_listing(db, user):
    evaluate_achievements(db, user.id, ProgressSnapshot(habit_count=5))
    db.commit()

    unlocked = list_unlocked_achievements(db, user.id)

    assert {item["id"] for item in unlocked} == {"habit_creator", "five_habits"}
