"""
SQLAlchemy model base class for the yardtrack backend.

This package defines ORM models for yard events (the append-only gate and
move log) and yard slots (dock doors and parking lanes). All models should
inherit from the declarative `Base` defined here.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy ORM models."""

    pass


from .yard_event import YardEvent, TransactionType, AssignmentType  # noqa: E402,F401
from .yard_slot import YardSlot, SlotKind  # noqa: E402,F401

__all__ = [
    "Base",

    # Event log
    "YardEvent",
    "TransactionType",
    "AssignmentType",

    # Doors / lanes
    "YardSlot",
    "SlotKind",
]
