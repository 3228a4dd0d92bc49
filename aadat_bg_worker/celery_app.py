from __future__ import annotations

import socket

from celery import Celery
from celery.schedules import crontab
from redis import Redis
from redis.exceptions import ConnectionError as RedisConnectionError

from app.core.config import settings


def choose_broker_url() -> str:
    """
    Tries the broker from settings first (usually redis://redis:6379/0) and
    falls back to a local Redis when that host is unreachable.
    """
    primary = settings.celery_broker_url

    try:
        client = Redis.from_url(primary, socket_connect_timeout=1)
        client.ping()
        return primary
    except (RedisConnectionError, socket.gaierror):
        pass

    fallback = "redis://localhost:6379/0"
    client = Redis.from_url(fallback, socket_connect_timeout=1)
    client.ping()
    return fallback


celery_app = Celery(
    "aadat_bg_worker",
    broker=settings.celery_broker_url,
)

celery_app.conf.beat_schedule = {
    "expire-broken-streaks-nightly": {
        "task": "streaks.expire_broken_streaks",
        "schedule": crontab(hour=0, minute=5),
    },
}

celery_app.autodiscover_tasks(
    packages=["aadat_bg_worker"],
)


__all__ = ["celery_app", "choose_broker_url"]
