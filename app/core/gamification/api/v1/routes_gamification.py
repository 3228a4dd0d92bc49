from __future__ import annotations

import json
import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from fastapi.encoders import jsonable_encoder
from redis import Redis
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db
from app.core.gamification.schemas import (
    AchievementStatusPublic,
    GamificationProfilePublic,
    LeaderboardEntry,
)
from app.core.gamification.services import (
    get_leaderboard,
    get_profile_payload,
    list_achievements_with_status,
)
from app.core.users.models import User
from app.response import StandardResponse, make_success_response
from app.utils.redis_client import get_redis


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
router = APIRouter(prefix="/gamification", tags=["gamification"])


@router.get(
    "/profile",
    response_model=StandardResponse,
    summary="Level, XP and progress to the next level",
)
def gamification_profile_view(
    user: User = Depends(get_current_user),
) -> StandardResponse:
    payload = get_profile_payload(user)
    result = GamificationProfilePublic.model_validate(payload).model_dump(mode="json")
    return make_success_response(result=result)


@router.get(
    "/achievements",
    response_model=StandardResponse,
    summary="Achievement catalog with locked/unlocked status",
)
def gamification_achievements_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    achievements = list_achievements_with_status(db, user.id)
    result: List[dict] = [
        AchievementStatusPublic.model_validate(item).model_dump(mode="json")
        for item in achievements
    ]
    return make_success_response(result=result)


@router.get(
    "/leaderboard",
    response_model=StandardResponse,
    summary="Leaderboard by XP",
    dependencies=[Depends(get_current_user)],
)
def gamification_leaderboard_view(
    limit: int = Query(settings.leaderboard_size, ge=1, le=100),
    db: Session = Depends(get_db),
) -> StandardResponse:
    cache_key = f"leaderboard:top:{limit}"

    redis: Redis | None = None
    try:
        redis = get_redis()
        cached = redis.get(cache_key)
        if cached is not None:
            logger.info("leaderboard cache hit (key=%s)", cache_key)
            return make_success_response(result=json.loads(cached))
        logger.info("leaderboard cache miss (key=%s)", cache_key)
    except Exception as exc:
        logger.warning("leaderboard cache error: %r", exc)
        redis = None

    rows = get_leaderboard(db, limit=limit)
    result: List[dict] = [
        LeaderboardEntry.model_validate(item).model_dump(mode="json")
        for item in rows
    ]

    if redis is not None:
        try:
            ttl = settings.leaderboard_cache_ttl
            redis.setex(cache_key, ttl, json.dumps(jsonable_encoder(result)))
            logger.info("leaderboard cache set (key=%s, ttl=%s)", cache_key, ttl)
        except Exception as exc:
            logger.warning("leaderboard cache set error: %r", exc)

    return make_success_response(result=result)


__all__ = ["router"]
