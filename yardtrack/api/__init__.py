"""
API package for the yardtrack backend.

This package aggregates all API routers to be included in the FastAPI
application. The API is versioned under ``/api/v1``.
"""

from fastapi import APIRouter
from .v1.health import router as health_router
from .v1.yard_events import router as yard_events_router
from .v1.yard_slots import router as yard_slots_router
from .v1.yard_moves import router as yard_moves_router

api_router = APIRouter()
api_router.include_router(health_router)
api_router.include_router(yard_events_router)
api_router.include_router(yard_slots_router)
api_router.include_router(yard_moves_router)
