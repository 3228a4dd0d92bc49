from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.dependencies import get_current_user, get_db
from app.core.gamification.schemas import AchievementPublic
from app.core.habits.schemas import (
    HabitCreate,
    HabitCreated,
    HabitPublic,
    HabitUpdate,
)
from app.core.habits.services import (
    create_habit,
    delete_habit,
    list_habits,
    update_habit,
)
from app.core.users.models import User
from app.response import StandardResponse, make_success_response


router = APIRouter(prefix="/habits", tags=["habits"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="List the current user's habits",
)
def habits_list_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    habits = list_habits(db, user.id)
    result: List[dict] = [
        HabitPublic.model_validate(item).model_dump(mode="json")
        for item in habits
    ]
    return make_success_response(result=result)


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Create a habit",
)
def habits_create_view(
    payload: HabitCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    habit, awarded = create_habit(db, user, payload)
    result = HabitCreated(
        habit=HabitPublic.model_validate(habit),
        awarded_achievements=[
            AchievementPublic.model_validate(item) for item in awarded
        ],
    ).model_dump(mode="json")
    return make_success_response(result=result)


@router.put(
    "/{habit_id}",
    response_model=StandardResponse,
    summary="Rename or recategorize a habit",
)
def habits_update_view(
    habit_id: UUID,
    payload: HabitUpdate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    habit = update_habit(db, user.id, habit_id, payload)
    result = HabitPublic.model_validate(habit).model_dump(mode="json")
    return make_success_response(result=result)


@router.delete(
    "/{habit_id}",
    response_model=StandardResponse,
    summary="Delete a habit",
)
def habits_delete_view(
    habit_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    delete_habit(db, user.id, habit_id)
    return make_success_response(result={"success": True})


__all__ = ["router"]
