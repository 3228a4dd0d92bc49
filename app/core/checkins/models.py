from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import (
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Text,
    UniqueConstraint,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from app.database.base import Base


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CheckIn(Base):
    __tablename__ = "checkins"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    habit_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("habits.id", ondelete="CASCADE"),
        nullable=False,
    )
    content = Column(Text, nullable=False)
    checkin_date = Column(Date, nullable=False)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        default=_utc_now,
        server_default=func.now(),
    )

    user = relationship("User")
    habit = relationship("Habit")
    likes = relationship(
        "Like",
        back_populates="checkin",
        cascade="all, delete-orphan",
    )

    __table_args__ = (
        UniqueConstraint(
            "user_id",
            "habit_id",
            "checkin_date",
            name="uq_checkin_user_habit_day",
        ),
    )


Index(
    "ix_checkins_created_at",
    CheckIn.created_at.desc(),
)


class Like(Base):
    __tablename__ = "likes"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    user_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    checkin_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("checkins.id", ondelete="CASCADE"),
        nullable=False,
    )
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )

    checkin = relationship("CheckIn", back_populates="likes")

    __table_args__ = (
        UniqueConstraint("user_id", "checkin_id", name="uq_like_user_checkin"),
    )


__all__ = ["CheckIn", "Like"]
