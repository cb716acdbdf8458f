"""
ORM model for yard events.

A yard event is an immutable record of a gate transaction (check-in or
check-out) or a trailer move. Rows are only ever inserted; current slot
occupancy is derived from them on read.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from . import Base


class TransactionType(str, Enum):
    """Direction of a gate transaction."""
    INBOUND = "inbound"
    OUTBOUND = "outbound"
    MOVE = "move"               # Lost & Found records only


class AssignmentType(str, Enum):
    """What the trailer was assigned to when the event was recorded."""
    BOBTAIL = "bobtail"
    EMPTY = "empty"
    MATERIAL = "material"
    DOOR_ASSIGNMENT = "door_assignment"
    LANE_ASSIGNMENT = "lane_assignment"
    LOST_AND_FOUND = "lost_and_found"


SLOT_ASSIGNMENTS = {AssignmentType.DOOR_ASSIGNMENT.value, AssignmentType.LANE_ASSIGNMENT.value}


class YardEvent(Base):
    __tablename__ = "yard_events"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    trailer_id: Mapped[str] = mapped_column(String(64), index=True, nullable=False)
    transaction_type: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    assignment_type: Mapped[str] = mapped_column(String(32), nullable=False)
    assignment_value: Mapped[str | None] = mapped_column(String(64), index=True, nullable=True)
    requested_slot: Mapped[str | None] = mapped_column(String(64), nullable=True)
    carrier: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    scac: Mapped[str] = mapped_column(String(8), nullable=False, default="")
    driver_name: Mapped[str] = mapped_column(String(128), nullable=False, default="")
    clerk_name: Mapped[str] = mapped_column(String(128), nullable=False, default="System")
    load_number: Mapped[str] = mapped_column(String(64), nullable=False, default="")
    seal_number: Mapped[str | None] = mapped_column(String(64), nullable=True)
    document_data_uri: Mapped[str | None] = mapped_column(String, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(DateTime(timezone=True), index=True, nullable=False)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
