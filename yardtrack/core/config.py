"""
Configuration for the yardtrack backend.

This module defines settings for the yard occupancy service, including
the database connection and seeding behaviour. Settings are loaded from
environment variables or default values suitable for development. Use
environment variables or a `.env` file to override as needed.
"""

from __future__ import annotations

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from pathlib import Path
from dotenv import load_dotenv
import logging
import os

ENV_PATH = Path(__file__).resolve().parents[2] / ".env"
load_dotenv(ENV_PATH, override=False)


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    # Database connection string. Default uses a local SQLite file.
    database_url: str = Field(default="sqlite+pysqlite:///./yardtrack.db")
    auto_create_db: bool = Field(default=True)
    auto_seed_yard: bool = Field(default=True)
    seed_yard_path: str | None = Field(default=None)
    seed_door_count: int = Field(default=10, ge=0)
    seed_lane_count: int = Field(default=20, ge=0)
    # Recorded on events created without an explicit clerk
    default_clerk_name: str = Field(default="System")

    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")


settings = Settings()


def get_app_env() -> str:
    raw = os.getenv("YARD_ENV") or os.getenv("APP_ENV") or "dev"
    env = raw.strip().lower()
    if env not in {"dev", "prod"}:
        logging.getLogger("config").warning("Unknown YARD_ENV=%s; defaulting to dev", raw)
        env = "dev"
    return env


def validate_runtime_settings() -> None:
    env = get_app_env()
    logger = logging.getLogger("config")

    if env != "prod":
        return

    if settings.database_url.startswith("sqlite"):
        logger.warning("DATABASE_URL points at SQLite in prod. Consider a server database.")

    def _env_true(name: str, default: str = "false") -> bool:
        return os.getenv(name, default).lower() in {"1", "true", "yes"}

    if _env_true("AUTO_CREATE_DB", "true"):
        logger.warning("AUTO_CREATE_DB is enabled in prod. Consider setting it to false.")
    if _env_true("AUTO_SEED_YARD", "true"):
        logger.warning("AUTO_SEED_YARD is enabled in prod. Demo events will be loaded into an empty yard.")


validate_runtime_settings()
