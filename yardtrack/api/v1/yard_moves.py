"""
Trailer move endpoints and the Lost & Found list.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...core.errors import YardError
from ...schemas.yard import MoveRequest, MoveResult, YardEventOut
from ...services.yard_store import YardStore
from ..deps import get_yard_store, http_error


router = APIRouter(prefix="/api/v1/yard", tags=["yard-moves"])


@router.post("/moves", response_model=MoveResult, status_code=201)
def move_trailer(payload: MoveRequest, store: YardStore = Depends(get_yard_store)) -> dict:
    try:
        event, parked = store.move_trailer(
            payload.event_id,
            payload.destination_slot_id,
            allow_lost_and_found=payload.allow_lost_and_found,
        )
    except YardError as exc:
        raise http_error(exc)
    return {"event": event, "lost_and_found": parked}


@router.get("/lost-and-found", response_model=list[YardEventOut])
def list_lost_and_found(store: YardStore = Depends(get_yard_store)):
    return store.lost_and_found()
