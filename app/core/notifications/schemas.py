from __future__ import annotations

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel


class NotificationPublic(BaseModel):
    id: UUID
    type: str
    message: str
    checkin_id: UUID | None
    read: bool
    created_at: datetime
    sender_username: str | None = None


__all__ = ["NotificationPublic"]
