from __future__ import annotations

from typing import Literal

from pydantic import ConfigDict
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    POSTGRES_USER: str
    POSTGRES_PASSWORD: str
    POSTGRES_DB: str
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20
    DB_POOL_RECYCLE: int = 300

    REDIS_URL: str = "redis://localhost:6379/0"

    # Relay new_message pushes between worker processes over Redis Pub/Sub.
    CHAT_FANOUT_ENABLED: bool = False
    CHAT_FANOUT_CHANNEL: str = "rental.chat.fanout"

    JWT_SECRET: str = ""
    JWT_ALGORITHM: str = "HS256"
    JWT_EXPIRES_DAYS: int = 7

    BCRYPT_ROUNDS: int = 12

    CORS_ORIGINS: list[str] = ["*"]

    WS_HEARTBEAT_SECONDS: int = 30

    UPLOAD_DIR: str = "uploads"
    UPLOAD_MAX_BYTES: int = 10 * 1024 * 1024
    UPLOAD_MAX_FILES: int = 10
    PUBLIC_DIR: str = "public"

    FEATURED_LIMIT: int = 6

    STRIPE_SECRET_KEY: str = ""
    STRIPE_API_BASE: str = "https://api.stripe.com"
    PAYMENT_CURRENCY: str = "bdt"

    LOG_LEVEL: Literal["debug", "info", "warning", "error"] = "info"

    @property
    def database_url(self) -> str:
        return (
            f"postgresql+asyncpg://{self.POSTGRES_USER}:{self.POSTGRES_PASSWORD}"
            f"@{self.DB_HOST}:{self.DB_PORT}/{self.POSTGRES_DB}"
        )

    model_config = ConfigDict(
        env_file=".env",
        extra="ignore",
    )


settings = Settings()  # type: ignore[call-arg]
