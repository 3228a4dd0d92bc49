from __future__ import annotations

import uuid
from typing import Generator

from fastapi import Depends, Header
from jwt import PyJWTError
from sqlalchemy.orm import Session

from app.core.security import decode_token
from app.core.users.models import User
from app.database.session import SessionLocal
from app.response.response import APIError


def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def get_current_user(
    authorization: str | None = Header(default=None, alias="Authorization"),
    db: Session = Depends(get_db),
) -> User:
    if not authorization:
        raise APIError(
            code="AUTH_NOT_AUTHENTICATED",
            http_code=401,
            message="Authorization header is required",
        )

    try:
        scheme, token = authorization.split(" ", 1)
    except ValueError:
        raise APIError(
            code="AUTH_INVALID_AUTH_HEADER",
            http_code=401,
            message="Malformed Authorization header",
        )

    if scheme.lower() != "bearer":
        raise APIError(
            code="AUTH_INVALID_AUTH_SCHEME",
            http_code=401,
            message="Bearer authorization scheme expected",
        )

    try:
        payload = decode_token(token)
    except PyJWTError:
        raise APIError(
            code="AUTH_INVALID_TOKEN",
            http_code=401,
            message="Invalid or expired access token",
        )

    if payload.get("type") != "access":
        raise APIError(
            code="AUTH_INVALID_TOKEN_TYPE",
            http_code=401,
            message="Wrong token type",
        )

    try:
        user_id = uuid.UUID(payload.get("sub"))
    except (TypeError, ValueError):
        raise APIError(
            code="AUTH_INVALID_TOKEN_PAYLOAD",
            http_code=401,
            message="Malformed token payload",
        )

    user = db.get(User, user_id)
    if user is None:
        raise APIError(
            code="AUTH_USER_NOT_FOUND",
            http_code=401,
            message="User not found",
        )

    return user


__all__ = ["get_db", "get_current_user"]
