"""Shared fixtures: in-memory SQLite database, sessions, users and an API client"""
import os

os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")
os.environ.setdefault("JWT_SECRET_KEY", "test-secret")

from datetime import date, datetime

import pytest
from sqlalchemy import create_engine, event
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.core.gamification.services import sync_achievement_catalog
from app.core.habits.models import Habit
from app.core.users.models import User
from app.database import models  # noqa: F401
from app.database.base import Base


TODAY = date(2026, 3, 10)
NOON = datetime(2026, 3, 10, 12, 0, 0)


# ============================================================================
# Database Fixtures
# ============================================================================

@pytest.fixture
def engine():
    """In-memory SQLite engine with working SAVEPOINTs and foreign keys"""
    engine = create_engine(
        "sqlite+pysqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )

    @event.listens_for(engine, "connect")
    def _on_connect(dbapi_connection, connection_record):
        # pysqlite's own transaction handling breaks SAVEPOINT; emit BEGIN ourselves.
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def _on_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    factory = sessionmaker(bind=engine, autocommit=False, autoflush=False)
    session = factory()
    sync_achievement_catalog(session)
    session.close()
    return factory


@pytest.fixture
def db(session_factory):
    """One session per test for service-level tests"""
    session = session_factory()
    yield session
    session.close()


# ============================================================================
# Domain Fixtures
# ============================================================================

def create_test_user(session, username="alice", **fields):
    user = User(
        username=username,
        email=f"{username}@example.com",
        experience_points=fields.pop("experience_points", 0),
        level=fields.pop("level", 1),
        communities=fields.pop("communities", []),
        **fields,
    )
    session.add(user)
    session.commit()
    session.refresh(user)
    return user


def create_test_habit(session, user, title="Read 10 pages", **fields):
    habit = Habit(
        user_id=user.id,
        title=title,
        category=fields.pop("category", "learning"),
        start_date=fields.pop("start_date", TODAY),
        **fields,
    )
    session.add(habit)
    session.commit()
    session.refresh(habit)
    return habit


@pytest.fixture
def user(db):
    return create_test_user(db, "alice")


@pytest.fixture
def other_user(db):
    return create_test_user(db, "bob")


# ============================================================================
# API Fixtures
# ============================================================================

def _redis_unavailable():
    raise ConnectionError("redis is not available in tests")


@pytest.fixture
def client(session_factory, monkeypatch):
    from fastapi.testclient import TestClient

    from app.core.dependencies import get_db
    from app.main import app

    def _get_test_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    monkeypatch.setattr(
        "app.core.gamification.api.v1.routes_gamification.get_redis",
        _redis_unavailable,
    )
    monkeypatch.setattr(
        "app.core.checkins.api.v1.routes_checkins.get_redis",
        _redis_unavailable,
    )
    app.dependency_overrides[get_db] = _get_test_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def make_account(session_factory):
    """Creates a user in its own session and returns (user_id, auth headers)"""
    from app.core.security import create_access_token

    def _make(username):
        session = session_factory()
        try:
            created = create_test_user(session, username)
            user_id = created.id
        finally:
            session.close()
        token = create_access_token(user_id=user_id)
        return user_id, {"Authorization": f"Bearer {token}"}

    return _make
