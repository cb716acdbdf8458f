"""
Dock door and parking lane endpoints, including the live occupancy grid.
"""

from __future__ import annotations

from typing import Literal, Optional

from fastapi import APIRouter, Depends, Query

from ...core.errors import YardError
from ...schemas.yard import OccupancyRow, SlotCreate, SlotOut
from ...services.yard_store import YardStore
from ..deps import get_yard_store, http_error


router = APIRouter(prefix="/api/v1/yard", tags=["yard-slots"])

SlotKindParam = Literal["door", "lane"]


@router.get("/slots", response_model=list[SlotOut])
def list_slots(kind: SlotKindParam = Query(...), store: YardStore = Depends(get_yard_store)):
    return store.list_slots(kind)


@router.post("/slots", response_model=SlotOut, status_code=201)
def add_slot(payload: SlotCreate, store: YardStore = Depends(get_yard_store)):
    try:
        return store.add_slot(payload.kind, payload.slot_id)
    except YardError as exc:
        raise http_error(exc)


@router.get("/slots/available", response_model=list[str])
def list_available_slots(kind: SlotKindParam = Query(...), store: YardStore = Depends(get_yard_store)):
    return store.available_slots(kind)


@router.get("/occupancy", response_model=list[OccupancyRow])
def get_occupancy(
    kind: SlotKindParam = Query(...),
    q: Optional[str] = Query(default=None),
    store: YardStore = Depends(get_yard_store),
) -> list:
    # Searching only returns occupied slots, matching the dashboard filter.
    if q and q.strip():
        rows = store.search_slots(kind, q)
    else:
        rows = store.occupancy_rows(kind)
    return [{"kind": slot.kind, "slot_id": slot.slot_id, "event": event} for slot, event in rows]
