from __future__ import annotations

import uuid

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Column,
    DateTime,
    Integer,
    String,
    Uuid,
    func,
)
from sqlalchemy.orm import relationship

from app.database.base import Base


DEFAULT_AVATAR = "👤"
DEFAULT_BIO = "Building habits in public."


class User(Base):
    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    username = Column(String, unique=True, nullable=False, index=True)
    email = Column(String, unique=True, nullable=False, index=True)

    experience_points = Column(Integer, nullable=False, default=0)
    level = Column(Integer, nullable=False, default=1)

    avatar = Column(String, nullable=False, default=DEFAULT_AVATAR)
    bio = Column(String(150), nullable=False, default=DEFAULT_BIO)
    communities = Column(JSON, nullable=False, default=list)

    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )

    habits = relationship(
        "Habit",
        back_populates="user",
        cascade="all, delete-orphan",
        order_by="Habit.created_at",
    )

    __table_args__ = (
        CheckConstraint("experience_points >= 0", name="ck_users_xp_non_negative"),
        CheckConstraint("level >= 1", name="ck_users_level_positive"),
    )


__all__ = ["User", "DEFAULT_AVATAR", "DEFAULT_BIO"]
