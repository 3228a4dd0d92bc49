from __future__ import annotations

from datetime import date
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.core.gamification.schemas import (
    AchievementPublic,
    UnlockedAchievementPublic,
)
from app.core.gamification.services import list_unlocked_achievements
from app.core.users.models import User
from app.core.users.schemas import (
    RandomUser,
    UserPrivate,
    UserPublic,
    UserStats,
    UserUpdate,
)
from app.core.users.services import (
    get_random_users,
    get_user,
    get_user_stats,
    update_profile,
)
from app.response import StandardResponse, make_success_response


router = APIRouter(prefix="/users", tags=["users"])


@router.get(
    "/me",
    response_model=StandardResponse,
    summary="Current user profile",
)
def users_me_view(
    user: User = Depends(get_current_user),
) -> StandardResponse:
    result = UserPrivate.model_validate(user).model_dump(mode="json")
    return make_success_response(result=result)


@router.put(
    "/me",
    response_model=StandardResponse,
    summary="Update avatar, bio or communities",
)
def users_me_update_view(
    payload: UserUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    user, awarded = update_profile(db, user, payload)
    result: Dict[str, Any] = {
        "user": UserPrivate.model_validate(user).model_dump(mode="json"),
        "awarded_achievements": [
            AchievementPublic.model_validate(item).model_dump(mode="json")
            for item in awarded
        ],
    }
    return make_success_response(result=result)


@router.get(
    "/me/stats",
    response_model=StandardResponse,
    summary="Habit statistics of the current user",
)
def users_me_stats_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    stats = get_user_stats(db, user, date.today())
    result = UserStats.model_validate(stats).model_dump(mode="json")
    return make_success_response(result=result)


@router.get(
    "/me/achievements",
    response_model=StandardResponse,
    summary="Achievements unlocked by the current user",
)
def users_me_achievements_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows = list_unlocked_achievements(db, user.id)
    result: List[dict] = [
        UnlockedAchievementPublic.model_validate(item).model_dump(mode="json")
        for item in rows
    ]
    return make_success_response(result=result)


@router.get(
    "/random",
    response_model=StandardResponse,
    summary="Random usernames for the landing page",
)
def users_random_view(
    limit: int = Query(5, ge=1, le=20),
    db: Session = Depends(get_db),
) -> StandardResponse:
    result: List[dict] = [
        RandomUser.model_validate(item).model_dump(mode="json")
        for item in get_random_users(db, limit=limit)
    ]
    return make_success_response(result=result)


@router.get(
    "/{user_id}",
    response_model=StandardResponse,
    summary="Public profile",
)
def users_public_view(
    user_id: UUID,
    db: Session = Depends(get_db),
) -> StandardResponse:
    user = get_user(db, user_id)
    result = UserPublic.model_validate(user).model_dump(mode="json")
    return make_success_response(result=result)


@router.get(
    "/{user_id}/stats",
    response_model=StandardResponse,
    summary="Public habit statistics",
)
def users_public_stats_view(
    user_id: UUID,
    db: Session = Depends(get_db),
) -> StandardResponse:
    user = get_user(db, user_id)
    stats = get_user_stats(db, user, date.today())
    result = UserStats.model_validate(stats).model_dump(mode="json")
    return make_success_response(result=result)


@router.get(
    "/{user_id}/achievements",
    response_model=StandardResponse,
    summary="Public list of unlocked achievements",
)
def users_public_achievements_view(
    user_id: UUID,
    db: Session = Depends(get_db),
) -> StandardResponse:
    user = get_user(db, user_id)
    rows = list_unlocked_achievements(db, user.id)
    result: List[dict] = [
        UnlockedAchievementPublic.model_validate(item).model_dump(mode="json")
        for item in rows
    ]
    return make_success_response(result=result)


__all__ = ["router"]
