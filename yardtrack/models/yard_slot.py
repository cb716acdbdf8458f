"""
ORM model for yard slots (warehouse dock doors and parking lanes).

Door and lane ids are unique within their own kind; the composite key keeps
the two lists independent.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from . import Base


class SlotKind(str, Enum):
    DOOR = "door"
    LANE = "lane"


class YardSlot(Base):
    __tablename__ = "yard_slots"

    kind: Mapped[str] = mapped_column(String(8), primary_key=True)
    slot_id: Mapped[str] = mapped_column(String(64), primary_key=True, index=True)
    position: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=datetime.utcnow)
