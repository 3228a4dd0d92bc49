from __future__ import annotations

from datetime import date

from loguru import logger

from aadat_bg_worker.celery_app import celery_app
from app.core.habits.services import expire_broken_streaks
from app.database.session import SessionLocal


@celery_app.task(name="streaks.expire_broken_streaks")
def expire_broken_streaks_task(today_iso: str | None = None) -> int:
    today = date.fromisoformat(today_iso) if today_iso else date.today()

    logger.info("Running expire_broken_streaks task", today=today.isoformat())
    db = SessionLocal()
    try:
        updated = expire_broken_streaks(db, today)
    except Exception as exc:
        logger.error("Failed to expire broken streaks", exc_info=exc)
        db.rollback()
        raise
    finally:
        db.close()

    logger.info("Broken streaks expired", habits=updated)
    return updated


__all__ = ["expire_broken_streaks_task"]
