"""
Shared FastAPI dependencies for the yard routers.
"""

from __future__ import annotations

from fastapi import Depends, HTTPException
from sqlalchemy.orm import Session

from ..core.config import settings
from ..core.db import get_db
from ..core.errors import (
    DuplicateSlotError,
    EventNotFoundError,
    FutureTimestampError,
    InvalidSlotIdError,
    SlotOccupiedError,
    TrailerNotInYardError,
    UnknownSlotError,
    YardError,
)
from ..services.yard_store import YardStore


_STATUS_FOR_ERROR = (
    (EventNotFoundError, 404),
    (UnknownSlotError, 404),
    (DuplicateSlotError, 409),
    (SlotOccupiedError, 409),
    (TrailerNotInYardError, 409),
    (InvalidSlotIdError, 422),
    (FutureTimestampError, 422),
)


def get_yard_store(db: Session = Depends(get_db)) -> YardStore:
    return YardStore(db, clerk_name=settings.default_clerk_name)


def http_error(exc: YardError) -> HTTPException:
    for error_type, status_code in _STATUS_FOR_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=400, detail=str(exc))
