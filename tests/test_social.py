"""Tests for likes, notifications, user stats and community stats"""
from datetime import datetime, timedelta

import pytest

from app.core.checkins.services import (
    get_community_stats,
    like_check_in,
    list_feed,
    list_user_checkins,
    submit_check_in,
)
from app.core.gamification.models import UserAchievement
from app.core.notifications.models import Notification
from app.core.notifications.services import (
    list_notifications,
    mark_all_read,
    mark_read,
)
from app.core.users.schemas import UserUpdate
from app.core.users.services import create_user, get_user_stats, update_profile
from app.response.response import APIError
from tests.conftest import NOON, TODAY, create_test_habit


def _post(db, user, habit, today=TODAY):
    return submit_check_in(
        db,
        user_id=user.id,
        habit_id=habit.id,
        content="Progress",
        today=today,
        checked_at=datetime(today.year, today.month, today.day, 12, 0),
    )


def _holds(db, user, achievement_id):
    return (
        db.query(UserAchievement)
        .filter(
            UserAchievement.user_id == user.id,
            UserAchievement.achievement_id == achievement_id,
        )
        .count()
        == 1
    )


def test_like_rewards_author_and_notifies(db, user, other_user):
    habit = create_test_habit(db, user)
    checkin = _post(db, user, habit).checkin

    result = like_check_in(db, other_user, checkin.id)

    assert result["author_rewarded"] is True
    assert [item.id for item in result["awarded_achievements"]] == ["first_like"]
    db.refresh(user)
    assert user.experience_points == 15
    notifications = list_notifications(db, user.id)
    assert len(notifications) == 1
    assert notifications[0]["type"] == "like"
    assert notifications[0]["sender_username"] == "bob"
    assert notifications[0]["checkin_id"] == checkin.id
    assert notifications[0]["read"] is False


def test_like_received_xp_can_level_up_author(db, user, other_user):
    user.experience_points = 70
    db.commit()
    habit = create_test_habit(db, user)
    checkin = _post(db, user, habit).checkin

    like_check_in(db, other_user, checkin.id)

    db.refresh(user)
    assert user.experience_points == 85
    assert user.level == 2


def test_self_like_gives_no_xp(db, user):
    habit = create_test_habit(db, user)
    checkin = _post(db, user, habit).checkin

    result = like_check_in(db, user, checkin.id)

    assert result["author_rewarded"] is False
    db.refresh(user)
    assert user.experience_points == 10
    assert db.query(Notification).count() == 0
    assert _holds(db, user, "first_like")


def test_double_like_is_rejected(db, user, other_user):
    habit = create_test_habit(db, user)
    checkin = _post(db, user, habit).checkin
    like_check_in(db, other_user, checkin.id)

    with pytest.raises(APIError) as excinfo:
        like_check_in(db, other_user, checkin.id)

    assert excinfo.value.code == "CHECKINS_ALREADY_LIKED"
    assert excinfo.value.http_code == 409
    db.rollback()
    db.refresh(user)
    assert user.experience_points == 15


def test_feed_reports_like_state_for_viewer(db, user, other_user):
    habit = create_test_habit(db, user)
    checkin = _post(db, user, habit).checkin
    like_check_in(db, other_user, checkin.id)

    items, total = list_feed(db, other_user.id)

    assert total == 1
    assert items[0]["like_count"] == 1
    assert items[0]["is_liked_by_current_user"] is True
    assert items[0]["user"]["username"] == "alice"

    own_items = list_user_checkins(db, user.id, user.id)
    assert own_items[0]["is_liked_by_current_user"] is False


def test_mark_notifications_read(db, user, other_user):
    habit = create_test_habit(db, user)
    first = _post(db, user, habit).checkin
    second = _post(db, user, habit, today=TODAY + timedelta(days=1)).checkin
    like_check_in(db, other_user, first.id)
    like_check_in(db, other_user, second.id)

    single = db.query(Notification).filter(Notification.checkin_id == first.id).one()
    assert mark_read(db, user.id, single.id).read is True
    assert mark_all_read(db, user.id) == 1
    assert all(item["read"] for item in list_notifications(db, user.id))

    with pytest.raises(APIError) as excinfo:
        mark_read(db, other_user.id, single.id)
    assert excinfo.value.code == "NOTIFICATIONS_NOT_FOUND"


def test_joining_a_community_unlocks_achievement(db, user):
    updated, awarded = update_profile(
        db,
        user,
        UserUpdate(communities=[" Runners ", "Runners", "", "Readers"]),
    )

    assert updated.communities == ["Runners", "Readers"]
    assert [item.id for item in awarded] == ["community_joiner"]

    _, again = update_profile(db, user, UserUpdate(communities=["Runners"]))
    assert again == []


def test_profile_update_without_communities_skips_evaluation(db, user):
    updated, awarded = update_profile(db, user, UserUpdate(bio="Morning person"))

    assert updated.bio == "Morning person"
    assert awarded == []


def test_create_user_rejects_duplicates(db, user):
    with pytest.raises(APIError) as excinfo:
        create_user(db, username="alice", email="new@example.com")
    assert excinfo.value.code == "USERS_USERNAME_TAKEN"

    with pytest.raises(APIError) as excinfo:
        create_user(db, username="carol", email="alice@example.com")
    assert excinfo.value.code == "USERS_EMAIL_TAKEN"


def test_user_stats(db, user):
    running = create_test_habit(db, user, title="Run")
    reading = create_test_habit(db, user, title="Read")
    for offset in range(3):
        _post(db, user, running, today=TODAY - timedelta(days=2 - offset))
    _post(db, user, reading, today=TODAY - timedelta(days=10))

    stats = get_user_stats(db, user, TODAY)

    assert stats["current_streak"] == 3
    assert stats["longest_streak"] == 3
    assert stats["total_habits"] == 2
    assert stats["total_checkins"] == 3
    assert stats["completion_rate"] == round(3 / 14 * 100)
    assert stats["experience_points"] == 40
    assert stats["level"] == 1
    assert stats["xp_for_next_level"] == 80


def test_user_stats_ignore_stale_streaks(db, user):
    create_test_habit(
        db, user, current_streak=5, longest_streak=5,
        last_checkin_date=TODAY - timedelta(days=3),
    )

    stats = get_user_stats(db, user, TODAY)

    assert stats["current_streak"] == 0
    assert stats["longest_streak"] == 5


def test_community_stats(db, user, other_user):
    alice_habit = create_test_habit(db, user)
    create_test_habit(db, other_user)
    _post(db, user, alice_habit, today=NOON.date())

    stats = get_community_stats(db, TODAY)

    assert stats == {
        "active_members": 2,
        "posts_today": 1,
        "completion_rate": 50,
    }


def test_community_stats_on_empty_database(db):
    assert get_community_stats(db, TODAY) == {
        "active_members": 0,
        "posts_today": 0,
        "completion_rate": 0,
    }


def test_feed_lists_same_day_posts_newest_first(db, user, other_user):
    habits = [
        create_test_habit(db, user, title=f"Habit {index}") for index in range(3)
    ]
    for index, habit in enumerate(habits):
        submit_check_in(
            db,
            user_id=user.id,
            habit_id=habit.id,
            content=f"Post {index}",
            today=TODAY,
            checked_at=NOON,
        )

    items, total = list_feed(db, other_user.id)

    assert total == 3
    assert [item["content"] for item in items] == ["Post 2", "Post 1", "Post 0"]
