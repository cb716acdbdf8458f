"""
Yard event endpoints: gate check-in/check-out history and trailer status.
"""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query, Response

from ...core.errors import YardError
from ...core.pagination import page_of
from ...schemas.yard import TrailerStatusOut, YardEventCreate, YardEventOut
from ...services.yard_store import YardStore
from ..deps import get_yard_store, http_error


router = APIRouter(prefix="/api/v1/yard", tags=["yard-events"])


@router.get("/events", response_model=list[YardEventOut])
def list_yard_events(
    response: Response,
    trailer_id: Optional[str] = Query(default=None),
    transaction_type: Optional[Literal["inbound", "outbound", "move"]] = Query(default=None),
    q: Optional[str] = Query(default=None),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=50, ge=1),
    store: YardStore = Depends(get_yard_store),
) -> list:
    events = store.list_events(trailer_id=trailer_id, transaction_type=transaction_type, q=q)
    return page_of(events, page=page, page_size=page_size, response=response)


@router.post("/events", response_model=YardEventOut, status_code=201)
def create_yard_event(
    payload: YardEventCreate,
    clerk_name: Optional[str] = Query(default=None),
    store: YardStore = Depends(get_yard_store),
):
    try:
        return store.record_event(payload, clerk_name=clerk_name)
    except YardError as exc:
        raise http_error(exc)


@router.get("/events/{event_id}", response_model=YardEventOut)
def get_yard_event(event_id: int, store: YardStore = Depends(get_yard_store)):
    try:
        return store.get_event(event_id)
    except YardError as exc:
        raise http_error(exc)


@router.get("/trailers/{trailer_id}", response_model=TrailerStatusOut)
def get_trailer_status(trailer_id: str, store: YardStore = Depends(get_yard_store)) -> dict:
    state, slot_id = store.trailer_status(trailer_id)
    return {
        "trailer_id": trailer_id,
        "state": state.value,
        "slot_id": slot_id,
        "history": store.trailer_history(trailer_id),
    }
