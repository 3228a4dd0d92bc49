from __future__ import annotations

from typing import Dict, List, Optional
from uuid import UUID

from sqlalchemy.orm import Session, joinedload

from app.core.notifications.models import Notification
from app.response.response import not_found


def create_notification(
    db: Session,
    *,
    user_id: UUID,
    sender_id: Optional[UUID],
    notification_type: str,
    message: str,
    checkin_id: Optional[UUID] = None,
) -> Notification:
    notification = Notification(
        user_id=user_id,
        sender_id=sender_id,
        type=notification_type,
        message=message,
        checkin_id=checkin_id,
        read=False,
    )
    db.add(notification)
    return notification


def list_notifications(
    db: Session,
    user_id: UUID,
    limit: int = 50,
) -> List[Dict[str, object]]:
    rows = (
        db.query(Notification)
        .options(joinedload(Notification.sender))
        .filter(Notification.user_id == user_id)
        .order_by(Notification.created_at.desc())
        .limit(limit)
        .all()
    )
    return [
        {
            "id": row.id,
            "type": row.type,
            "message": row.message,
            "checkin_id": row.checkin_id,
            "read": row.read,
            "created_at": row.created_at,
            "sender_username": row.sender.username if row.sender else None,
        }
        for row in rows
    ]


def mark_all_read(db: Session, user_id: UUID) -> int:
    updated = (
        db.query(Notification)
        .filter(Notification.user_id == user_id, Notification.read.is_(False))
        .update({Notification.read: True}, synchronize_session=False)
    )
    db.commit()
    return updated


def mark_read(db: Session, user_id: UUID, notification_id: UUID) -> Notification:
    notification = (
        db.query(Notification)
        .filter(
            Notification.id == notification_id,
            Notification.user_id == user_id,
        )
        .first()
    )
    if notification is None:
        raise not_found("NOTIFICATIONS_NOT_FOUND", "Notification not found.")

    notification.read = True
    db.add(notification)
    db.commit()
    db.refresh(notification)
    return notification


__all__ = [
    "create_notification",
    "list_notifications",
    "mark_all_read",
    "mark_read",
]
