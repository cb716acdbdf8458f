"""
Health endpoint for the yardtrack backend.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from sqlalchemy import func
from sqlalchemy.orm import Session

from ...core.config import get_app_env
from ...core.db import get_db
from ...models.yard_event import YardEvent
from ...models.yard_slot import YardSlot


router = APIRouter(prefix="/api/v1/health", tags=["health"])


@router.get("")
def health(db: Session = Depends(get_db)) -> dict:
    events = db.query(func.count(YardEvent.id)).scalar() or 0
    slots = db.query(func.count(YardSlot.slot_id)).scalar() or 0
    return {"status": "ok", "env": get_app_env(), "events": events, "slots": slots}
