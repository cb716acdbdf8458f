"""
Entry point for the yardtrack backend.

This script creates the FastAPI application, includes all API routers,
and prepares the database on startup. Run with:

    uvicorn yardtrack.main:app --reload

"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI

from .core.db import engine, SessionLocal
from .models import Base
from .services.seed import seed_yard

from .api import api_router
from .core.config import settings, get_app_env
from .core.errors import log_exception


def _seed_path() -> Path:
    if settings.seed_yard_path:
        return Path(settings.seed_yard_path)
    return Path(__file__).resolve().parents[1] / "data" / "seed_yard.json"


def _init_db() -> None:
    logger = logging.getLogger("startup")
    env = get_app_env()
    if settings.auto_create_db:
        try:
            Base.metadata.create_all(bind=engine)
        except Exception as exc:
            log_exception(logger, "DB create_all failed", exc=exc)
            if env == "prod":
                raise
    if settings.auto_seed_yard:
        path = _seed_path()
        try:
            with SessionLocal() as db:
                created = seed_yard(
                    db,
                    path,
                    door_count=settings.seed_door_count,
                    lane_count=settings.seed_lane_count,
                )
            if created:
                logger.info("Yard seeded slots=%s", created)
        except Exception as exc:
            log_exception(logger, "Seed yard failed", extra={"path": str(path)}, exc=exc)
            if env == "prod":
                raise


@asynccontextmanager
async def _lifespan(app: FastAPI):
    _init_db()
    yield


def create_app() -> FastAPI:
    app = FastAPI(title="Yardtrack Backend", version="0.1.0", lifespan=_lifespan)
    # Include API routers
    app.include_router(api_router)
    return app


app = create_app()
