from __future__ import annotations

from typing import List
from uuid import UUID

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.config import settings
from app.core.dependencies import get_current_user, get_db
from app.core.notifications.schemas import NotificationPublic
from app.core.notifications.services import (
    list_notifications,
    mark_all_read,
    mark_read,
)
from app.core.users.models import User
from app.response import StandardResponse, make_success_response


router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get(
    "",
    response_model=StandardResponse,
    summary="Latest notifications of the current user",
)
def notifications_list_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    rows = list_notifications(db, user.id, limit=settings.notifications_limit)
    result: List[dict] = [
        NotificationPublic.model_validate(item).model_dump(mode="json")
        for item in rows
    ]
    return make_success_response(result=result)


@router.put(
    "/mark-read",
    response_model=StandardResponse,
    summary="Mark all notifications as read",
)
def notifications_mark_all_view(
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    updated = mark_all_read(db, user.id)
    return make_success_response(result={"updated": updated})


@router.put(
    "/{notification_id}/read",
    response_model=StandardResponse,
    summary="Mark one notification as read",
)
def notifications_mark_one_view(
    notification_id: UUID,
    db: Session = Depends(get_db),
    user: User = Depends(get_current_user),
) -> StandardResponse:
    notification = mark_read(db, user.id, notification_id)
    return make_success_response(
        result={"id": str(notification.id), "read": notification.read}
    )


__all__ = ["router"]
