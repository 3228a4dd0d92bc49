from __future__ import annotations

import uuid

from sqlalchemy import (
    Boolean,
    Column,
    DateTime,
    ForeignKey,
    Index,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from app.database.base import Base


NotificationType = ("like",)


class Notification(Base):
    __tablename__ = "notifications"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
    )
    sender_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="SET NULL"),
        nullable=True,
    )
    type = Column(String, nullable=False)
    message = Column(String, nullable=False)
    checkin_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("checkins.id", ondelete="CASCADE"),
        nullable=True,
    )
    read = Column(Boolean, nullable=False, default=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    sender = relationship("User", foreign_keys=[sender_id])


Index(
    "ix_notifications_user_created",
    Notification.user_id,
    Notification.created_at.desc(),
)


__all__ = ["Notification", "NotificationType"]
