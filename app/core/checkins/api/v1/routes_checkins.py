from __future__ import annotations

import json
import logging
import math
from datetime import date, datetime
from typing import Any, Dict, List
from uuid import UUID

from fastapi import APIRouter, Depends, Query
from redis import Redis
from sqlalchemy.orm import Session

from app.core.checkins.schemas import (
    CheckInCreate,
    CheckInPublic,
    CheckInSubmitted,
    CommunityStats,
    FeedItem,
)
from app.core.checkins.services import (
    get_community_stats,
    like_check_in,
    list_feed,
    list_recent_checkins,
    list_user_checkins,
    submit_check_in,
)
from app.core.config import settings
from app.core.dependencies import get_current_user, get_db
from app.core.gamification.schemas import AchievementPublic
from app.core.habits.schemas import HabitPublic
from app.core.users.models import User
from app.response import Pagination, StandardResponse, make_success_response
from app.utils.redis_client import get_redis


logger = logging.getLogger(__name__)
logger.setLevel(logging.INFO)
router = APIRouter(prefix="/checkins", tags=["checkins"])


def _feed_payload(rows: List[Dict[str, Any]]) -> List[dict]:
    return [FeedItem.model_validate(item).model_dump(mode="json") for item in rows]


@router.post(
    "",
    response_model=StandardResponse,
    status_code=201,
    summary="Check in to a habit for today",
)
def checkins_create_view(
    payload: CheckInCreate,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    now = datetime.now()
    outcome = submit_check_in(
        db,
        user_id=user.id,
        habit_id=payload.habit_id,
        content=payload.content,
        today=now.date(),
        checked_at=now,
    )
    result = CheckInSubmitted(
        checkin=CheckInPublic.model_validate(outcome.checkin),
        habit=HabitPublic.model_validate(outcome.habit),
        xp_gained=outcome.xp_gained,
        total_xp=outcome.user.experience_points,
        level=outcome.user.level,
        level_up=outcome.level_up,
        awarded_achievements=[
            AchievementPublic.model_validate(item)
            for item in outcome.awarded_achievements
        ],
    ).model_dump(mode="json")
    return make_success_response(result=result)


@router.get(
    "",
    response_model=StandardResponse,
    summary="Community feed, newest first",
)
def checkins_feed_view(
    page: int = Query(1, ge=1),
    page_size: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows, total = list_feed(db, user.id, page=page, page_size=page_size)
    total_pages = math.ceil(total / page_size) if total else 0
    pagination = Pagination(
        page=page,
        page_size=page_size,
        total=total,
        total_pages=total_pages,
        has_next=page < total_pages,
        has_prev=page > 1,
    )
    return make_success_response(result=_feed_payload(rows), pagination=pagination)


@router.get(
    "/recent",
    response_model=StandardResponse,
    summary="Latest check-ins for the landing page",
)
def checkins_recent_view(
    limit: int = Query(5, ge=1, le=50),
    db: Session = Depends(get_db),
) -> StandardResponse:
    rows = list_recent_checkins(db, limit=limit)
    return make_success_response(result=_feed_payload(rows))


@router.get(
    "/stats/community",
    response_model=StandardResponse,
    summary="Community activity for today",
    dependencies=[Depends(get_current_user)],
)
def checkins_community_stats_view(
    db: Session = Depends(get_db),
) -> StandardResponse:
    today = date.today()
    cache_key = f"community:stats:{today.isoformat()}"

    redis: Redis | None = None
    try:
        redis = get_redis()
        cached = redis.get(cache_key)
        if cached is not None:
            logger.info("community stats cache hit (key=%s)", cache_key)
            return make_success_response(result=json.loads(cached))
        logger.info("community stats cache miss (key=%s)", cache_key)
    except Exception as exc:
        logger.warning("community stats cache error: %r", exc)
        redis = None

    stats = get_community_stats(db, today)
    result = CommunityStats.model_validate(stats).model_dump(mode="json")

    if redis is not None:
        try:
            ttl = settings.community_stats_cache_ttl
            redis.setex(cache_key, ttl, json.dumps(result))
            logger.info(
                "community stats cache set (key=%s, ttl=%s)", cache_key, ttl
            )
        except Exception as exc:
            logger.warning("community stats cache set error: %r", exc)

    return make_success_response(result=result)


@router.get(
    "/user/{user_id}",
    response_model=StandardResponse,
    summary="Check-ins of one user",
)
def checkins_by_user_view(
    user_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows = list_user_checkins(db, user.id, user_id)
    return make_success_response(result=_feed_payload(rows))


@router.post(
    "/{checkin_id}/like",
    response_model=StandardResponse,
    summary="Like a check-in",
)
def checkins_like_view(
    checkin_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    outcome = like_check_in(db, user, checkin_id)
    result: Dict[str, Any] = {
        "checkin_id": str(outcome["checkin_id"]),
        "author_rewarded": outcome["author_rewarded"],
        "awarded_achievements": [
            AchievementPublic.model_validate(item).model_dump(mode="json")
            for item in outcome["awarded_achievements"]
        ],
    }
    return make_success_response(result=result)


__all__ = ["router"]
