from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    database_url: str = Field(..., env="DATABASE_URL")
    jwt_secret_key: str = Field("CHANGE_ME_SECRET", env="JWT_SECRET_KEY")
    jwt_algorithm: str = Field("HS256", env="JWT_ALGORITHM")
    access_token_expire_minutes: int = Field(
        60 * 24 * 7, env="ACCESS_TOKEN_EXPIRE_MINUTES"
    )

    redis_url: str = Field("redis://localhost:6379/0", env="REDIS_URL")
    celery_broker_url: str = Field(
        "redis://localhost:6379/0",
        env="CELERY_BROKER_URL",
    )

    checkin_xp: int = Field(10, env="CHECKIN_XP")
    like_received_xp: int = Field(5, env="LIKE_RECEIVED_XP")
    max_habits_per_user: int = Field(5, env="MAX_HABITS_PER_USER")
    early_bird_hour: int = Field(8, env="EARLY_BIRD_HOUR")

    leaderboard_size: int = Field(10, env="LEADERBOARD_SIZE")
    leaderboard_cache_ttl: int = Field(60, env="LEADERBOARD_CACHE_TTL")
    community_stats_cache_ttl: int = Field(
        60,
        env="COMMUNITY_STATS_CACHE_TTL",
    )
    notifications_limit: int = Field(50, env="NOTIFICATIONS_LIMIT")

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )


settings = Settings()


__all__ = ["settings", "Settings"]
