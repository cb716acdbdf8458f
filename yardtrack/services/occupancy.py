"""
Occupancy projections over the yard event log.

Every function here is pure: it takes a sequence of event-like objects
(anything with ``trailer_id``, ``transaction_type``, ``assignment_type``,
``assignment_value`` and ``timestamp``) and derives the current yard state
without touching storage. Input order matters only for events sharing a
timestamp, where the later one in the sequence is treated as more recent.
"""

from __future__ import annotations

import datetime
from enum import Enum
from typing import Dict, Iterable, List, Optional, Tuple, TypeVar

from ..models.yard_event import AssignmentType, SLOT_ASSIGNMENTS, TransactionType

E = TypeVar("E")


class TrailerState(str, Enum):
    UNKNOWN = "UNKNOWN"
    IN_YARD = "IN_YARD"
    OUT_OF_YARD = "OUT_OF_YARD"
    LOST_AND_FOUND = "LOST_AND_FOUND"


def ensure_utc(dt: datetime.datetime) -> datetime.datetime:
    if dt.tzinfo is None:
        return dt.replace(tzinfo=datetime.timezone.utc)
    return dt.astimezone(datetime.timezone.utc)


def _value(field) -> str:
    return field.value if isinstance(field, Enum) else str(field)


def newest_first(events: Iterable[E]) -> List[E]:
    ordered = sorted(events, key=lambda e: ensure_utc(e.timestamp))
    ordered.reverse()
    return ordered


def claims_slot(event) -> bool:
    return (
        _value(event.transaction_type) == TransactionType.INBOUND.value
        and _value(event.assignment_type) in SLOT_ASSIGNMENTS
        and bool(event.assignment_value)
    )


def latest_by_trailer(events: Iterable[E]) -> Dict[str, E]:
    latest: Dict[str, E] = {}
    for event in newest_first(events):
        latest.setdefault(event.trailer_id, event)
    return latest


def get_occupancy(events: Iterable[E]) -> Dict[str, E]:
    """
    Map each occupied slot id to the event that holds it.

    Only the most recent event of each trailer is consulted. It claims its
    slot when it is an inbound door/lane assignment and no more recent
    trailer already holds that slot. Slots absent from the result are empty.
    """
    occupancy: Dict[str, E] = {}
    seen_trailers: set[str] = set()
    for event in newest_first(events):
        if event.trailer_id in seen_trailers:
            continue
        seen_trailers.add(event.trailer_id)
        if claims_slot(event) and event.assignment_value not in occupancy:
            occupancy[event.assignment_value] = event
    return occupancy


def lost_and_found(events: Iterable[E]) -> List[E]:
    """Latest events of trailers currently parked in Lost & Found, newest first."""
    return [
        event
        for event in latest_by_trailer(events).values()
        if _value(event.assignment_type) == AssignmentType.LOST_AND_FOUND.value
    ]


def trailer_status(events: Iterable[E], trailer_id: str) -> Tuple[TrailerState, Optional[str]]:
    events = list(events)
    latest = latest_by_trailer(events).get(trailer_id)
    if latest is None:
        return TrailerState.UNKNOWN, None
    if _value(latest.assignment_type) == AssignmentType.LOST_AND_FOUND.value:
        return TrailerState.LOST_AND_FOUND, None
    if _value(latest.transaction_type) == TransactionType.OUTBOUND.value:
        return TrailerState.OUT_OF_YARD, None
    occupancy = get_occupancy(events)
    slot = latest.assignment_value if claims_slot(latest) else None
    if slot is not None and occupancy.get(slot) is not latest:
        slot = None
    return TrailerState.IN_YARD, slot
