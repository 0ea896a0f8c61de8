# badge_api/config.py
"""
Application configuration using Pydantic-Settings.
All settings can be overridden via environment variables or .env file.
"""

from pydantic_settings import BaseSettings
from sqlalchemy.engine import URL, make_url
from typing import Optional


class Settings(BaseSettings):
    # ── Database ──────────────────────────────────────────────────────────
    DB_DRIVER: str = "postgresql+psycopg2"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_USER: str = "badge"
    DB_PASS: str = "badge"
    DB_NAME: str = "badge_db"
    DATABASE_URL: Optional[str] = None   # Full URL, wins over the DB_* parts

    DB_POOL_SIZE: int = 10
    DB_MAX_OVERFLOW: int = 20

    # Upper bound on a single store round-trip before the request fails
    STORE_TIMEOUT_SECONDS: float = 10.0

    # ── Network ───────────────────────────────────────────────────────────
    BACKEND_HOST: str = "0.0.0.0"
    BACKEND_PORT: int = 3000

    # ── Logging ───────────────────────────────────────────────────────────
    LOG_LEVEL: str = "INFO"
    LOG_DIR: Optional[str] = None   # Defaults to <project>/logs

    @property
    def database_url(self) -> URL:
        if self.DATABASE_URL:
            return make_url(self.DATABASE_URL)
        return URL.create(
            self.DB_DRIVER,
            username=self.DB_USER,
            password=self.DB_PASS,
            host=self.DB_HOST,
            port=self.DB_PORT,
            database=self.DB_NAME,
        )

    class Config:
        env_file = ".env"
        extra = "ignore"
        frozen = True


settings = Settings()
