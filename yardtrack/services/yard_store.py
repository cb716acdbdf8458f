"""
Yard store: the single owner of the yard event log and slot lists.

Callers (API routers, seeding, tests) go through ``YardStore`` for every
read and write. Writes only ever append events; occupancy, Lost & Found and
per-trailer state are recomputed from the log on each read using the pure
projections in ``occupancy``.
"""

from __future__ import annotations

import datetime
import logging
from typing import Dict, List, Optional, Tuple

from sqlalchemy import func, or_
from sqlalchemy.orm import Session

from ..core.errors import (
    DuplicateSlotError,
    EventNotFoundError,
    FutureTimestampError,
    InvalidSlotIdError,
    SlotOccupiedError,
    TrailerNotInYardError,
    UnknownSlotError,
)
from ..models.yard_event import AssignmentType, TransactionType, YardEvent
from ..models.yard_slot import SlotKind, YardSlot
from ..schemas.yard import YardEventCreate
from . import occupancy as projection
from .occupancy import TrailerState


_ASSIGNMENT_FOR_KIND = {
    SlotKind.DOOR: AssignmentType.DOOR_ASSIGNMENT,
    SlotKind.LANE: AssignmentType.LANE_ASSIGNMENT,
}
_KIND_FOR_ASSIGNMENT = {v.value: k for k, v in _ASSIGNMENT_FOR_KIND.items()}


def normalize_slot_id(slot_id: Optional[str]) -> str:
    value = (slot_id or "").strip().upper()
    if not value:
        raise InvalidSlotIdError("Slot ID cannot be empty.")
    return value


def _utcnow() -> datetime.datetime:
    return datetime.datetime.now(datetime.timezone.utc)


class YardStore:
    def __init__(self, db: Session, clerk_name: str = "System", logger: Optional[logging.Logger] = None) -> None:
        self.db = db
        self.clerk_name = clerk_name
        self.logger = logger or logging.getLogger("YardStore")

    # Event log

    def _events(self) -> List[YardEvent]:
        # Insertion order breaks timestamp ties in the projections.
        return self.db.query(YardEvent).order_by(YardEvent.id.asc()).all()

    def _append(self, *events: YardEvent) -> None:
        for event in events:
            self.db.add(event)
        self.db.commit()
        for event in events:
            self.db.refresh(event)

    def list_events(
        self,
        trailer_id: Optional[str] = None,
        transaction_type: Optional[str] = None,
        q: Optional[str] = None,
    ) -> List[YardEvent]:
        query = self.db.query(YardEvent)
        if trailer_id:
            query = query.filter(YardEvent.trailer_id == trailer_id)
        if transaction_type:
            query = query.filter(YardEvent.transaction_type == transaction_type)
        if q:
            term = f"%{q.strip().upper()}%"
            query = query.filter(
                or_(
                    func.upper(YardEvent.trailer_id).like(term),
                    func.upper(YardEvent.carrier).like(term),
                    func.upper(YardEvent.load_number).like(term),
                    func.upper(YardEvent.scac).like(term),
                    func.upper(YardEvent.driver_name).like(term),
                )
            )
        return projection.newest_first(query.order_by(YardEvent.id.asc()).all())

    def get_event(self, event_id: int) -> YardEvent:
        event = self.db.get(YardEvent, event_id)
        if event is None:
            raise EventNotFoundError(event_id)
        return event

    def trailer_history(self, trailer_id: str) -> List[YardEvent]:
        return self.list_events(trailer_id=trailer_id)

    def record_event(
        self,
        data: YardEventCreate,
        clerk_name: Optional[str] = None,
        timestamp: Optional[datetime.datetime] = None,
    ) -> YardEvent:
        """
        Record a gate transaction from the check-in form.

        An inbound door/lane assignment into a slot held by another trailer
        displaces that trailer to Lost & Found before the new event is added.
        """
        now = _utcnow()
        occurred_at = projection.ensure_utc(timestamp) if timestamp else now
        # Moves are stamped with the current time and must sort after every stored event.
        if occurred_at > now:
            self.logger.warning("Rejected future event trailer=%s timestamp=%s", data.trailer_id, occurred_at)
            raise FutureTimestampError(occurred_at.isoformat())
        kind = _KIND_FOR_ASSIGNMENT.get(data.assignment_type)
        if kind is not None and data.assignment_value not in self.slot_ids(kind):
            raise UnknownSlotError(data.assignment_value, kind.value)

        event = YardEvent(
            trailer_id=data.trailer_id,
            transaction_type=data.transaction_type,
            assignment_type=data.assignment_type,
            assignment_value=data.assignment_value,
            carrier=data.carrier,
            scac=data.scac,
            driver_name=data.driver_name,
            clerk_name=clerk_name or self.clerk_name,
            load_number=data.load_number,
            seal_number=data.seal_number,
            document_data_uri=data.document_data_uri,
            timestamp=occurred_at,
        )

        pending: List[YardEvent] = []
        if projection.claims_slot(event):
            occupant = projection.get_occupancy(self._events()).get(event.assignment_value)
            if (
                occupant is not None
                and occupant.trailer_id != event.trailer_id
                and projection.ensure_utc(occupant.timestamp) <= occurred_at
            ):
                pending.append(
                    self._derive(
                        occupant,
                        transaction_type=TransactionType.MOVE,
                        assignment_type=AssignmentType.LOST_AND_FOUND,
                        assignment_value=None,
                        requested_slot=event.assignment_value,
                        clerk_name=clerk_name or self.clerk_name,
                        timestamp=occurred_at,
                    )
                )
                self.logger.info(
                    "Trailer displaced to lost and found trailer=%s slot=%s by=%s",
                    occupant.trailer_id,
                    event.assignment_value,
                    event.trailer_id,
                )
        pending.append(event)
        self._append(*pending)
        self.logger.info(
            "Yard event recorded id=%s trailer=%s type=%s assignment=%s value=%s",
            event.id,
            event.trailer_id,
            event.transaction_type,
            event.assignment_type,
            event.assignment_value,
        )
        return event

    def _derive(
        self,
        source: YardEvent,
        *,
        transaction_type: TransactionType,
        assignment_type: AssignmentType,
        assignment_value: Optional[str],
        requested_slot: Optional[str] = None,
        clerk_name: Optional[str] = None,
        timestamp: Optional[datetime.datetime] = None,
    ) -> YardEvent:
        return YardEvent(
            trailer_id=source.trailer_id,
            transaction_type=transaction_type.value,
            assignment_type=assignment_type.value,
            assignment_value=assignment_value,
            requested_slot=requested_slot,
            carrier=source.carrier,
            scac=source.scac,
            driver_name=source.driver_name,
            clerk_name=clerk_name or self.clerk_name,
            load_number=source.load_number,
            seal_number=source.seal_number,
            document_data_uri=source.document_data_uri,
            timestamp=timestamp or _utcnow(),
        )

    # Slots

    def list_slots(self, kind: SlotKind | str) -> List[YardSlot]:
        kind = SlotKind(kind)
        return (
            self.db.query(YardSlot)
            .filter(YardSlot.kind == kind.value)
            .order_by(YardSlot.position.asc(), YardSlot.slot_id.asc())
            .all()
        )

    def slot_ids(self, kind: SlotKind | str) -> List[str]:
        return [slot.slot_id for slot in self.list_slots(kind)]

    def add_slot(self, kind: SlotKind | str, slot_id: str) -> YardSlot:
        kind = SlotKind(kind)
        slot_id = normalize_slot_id(slot_id)
        # Occupancy is keyed by bare slot id, so a door and a lane may not share one.
        existing = self.db.query(YardSlot).filter(YardSlot.slot_id == slot_id).first()
        if existing is not None:
            self.logger.warning(
                "Rejected duplicate slot kind=%s slot=%s existing_kind=%s", kind.value, slot_id, existing.kind
            )
            raise DuplicateSlotError(existing.kind, slot_id)
        position = (
            self.db.query(func.max(YardSlot.position)).filter(YardSlot.kind == kind.value).scalar()
        )
        slot = YardSlot(kind=kind.value, slot_id=slot_id, position=(position or 0) + 1)
        self.db.add(slot)
        self.db.commit()
        self.db.refresh(slot)
        self.logger.info("Slot added kind=%s slot=%s", kind.value, slot_id)
        return slot

    def resolve_slot_kind(self, slot_id: str) -> SlotKind:
        slot = self.db.query(YardSlot).filter(YardSlot.slot_id == slot_id).first()
        if slot is None:
            raise UnknownSlotError(slot_id)
        return SlotKind(slot.kind)

    # Projections

    def get_occupancy(self, kind: SlotKind | str | None = None) -> Dict[str, YardEvent]:
        occupancy = projection.get_occupancy(self._events())
        if kind is None:
            return occupancy
        assignment = _ASSIGNMENT_FOR_KIND[SlotKind(kind)].value
        return {slot: event for slot, event in occupancy.items() if event.assignment_type == assignment}

    def occupancy_rows(self, kind: SlotKind | str) -> List[Tuple[YardSlot, Optional[YardEvent]]]:
        occupancy = self.get_occupancy(kind)
        return [(slot, occupancy.get(slot.slot_id)) for slot in self.list_slots(kind)]

    def available_slots(self, kind: SlotKind | str) -> List[str]:
        return [slot.slot_id for slot, event in self.occupancy_rows(kind) if event is None]

    def search_slots(self, kind: SlotKind | str, term: str) -> List[Tuple[YardSlot, YardEvent]]:
        """Occupied slots whose trailer, carrier or load number contains ``term``."""
        needle = (term or "").strip().lower()
        rows = [(slot, event) for slot, event in self.occupancy_rows(kind) if event is not None]
        if not needle:
            return rows
        return [
            (slot, event)
            for slot, event in rows
            if needle in event.trailer_id.lower()
            or needle in event.carrier.lower()
            or needle in event.load_number.lower()
        ]

    def lost_and_found(self) -> List[YardEvent]:
        return projection.lost_and_found(self._events())

    def trailer_status(self, trailer_id: str) -> Tuple[TrailerState, Optional[str]]:
        return projection.trailer_status(self._events(), trailer_id)

    # Moves

    def move_trailer(
        self,
        event_id: int,
        destination_slot_id: str,
        allow_lost_and_found: bool = False,
    ) -> Tuple[YardEvent, bool]:
        """
        Move the trailer of ``event_id`` to ``destination_slot_id``.

        Returns the appended event and whether the trailer ended up in Lost &
        Found. An occupied destination raises ``SlotOccupiedError`` unless
        ``allow_lost_and_found`` is set. Nothing is written on failure.
        """
        source = self.get_event(event_id)
        destination = normalize_slot_id(destination_slot_id)
        kind = self.resolve_slot_kind(destination)

        events = self._events()
        state, _ = projection.trailer_status(events, source.trailer_id)
        if state == TrailerState.OUT_OF_YARD:
            self.logger.warning("Rejected move of checked-out trailer=%s", source.trailer_id)
            raise TrailerNotInYardError(source.trailer_id)

        occupant = projection.get_occupancy(events).get(destination)
        if occupant is not None and occupant.trailer_id == source.trailer_id:
            self.logger.info("Trailer already in slot trailer=%s slot=%s", source.trailer_id, destination)
            return occupant, False

        if occupant is not None:
            if not allow_lost_and_found:
                self.logger.warning(
                    "Rejected move into occupied slot trailer=%s slot=%s occupant=%s",
                    source.trailer_id,
                    destination,
                    occupant.trailer_id,
                )
                raise SlotOccupiedError(destination, occupant.trailer_id)
            event = self._derive(
                source,
                transaction_type=TransactionType.MOVE,
                assignment_type=AssignmentType.LOST_AND_FOUND,
                assignment_value=None,
                requested_slot=destination,
            )
            self._append(event)
            self.logger.info(
                "Trailer parked in lost and found trailer=%s requested=%s occupant=%s",
                source.trailer_id,
                destination,
                occupant.trailer_id,
            )
            return event, True

        event = self._derive(
            source,
            transaction_type=TransactionType.INBOUND,
            assignment_type=_ASSIGNMENT_FOR_KIND[kind],
            assignment_value=destination,
        )
        self._append(event)
        self.logger.info("Trailer moved trailer=%s slot=%s kind=%s", source.trailer_id, destination, kind.value)
        return event, False
