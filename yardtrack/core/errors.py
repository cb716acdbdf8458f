"""
Error types for yard operations and a shared exception logging helper.

All yard errors are raised synchronously before anything is written, so a
failed operation never leaves a partial event in the log.
"""

from __future__ import annotations

import logging
from typing import Any, Optional


class YardError(Exception):
    """Base class for validation errors raised by the yard store."""


class InvalidSlotIdError(YardError):
    pass


class DuplicateSlotError(YardError):
    def __init__(self, kind: str, slot_id: str) -> None:
        super().__init__(f"{kind.capitalize()} ID {slot_id} already exists.")
        self.kind = kind
        self.slot_id = slot_id


class UnknownSlotError(YardError):
    def __init__(self, slot_id: str, kind: Optional[str] = None) -> None:
        label = kind or "slot"
        super().__init__(f"Unknown {label} {slot_id}.")
        self.kind = kind
        self.slot_id = slot_id


class SlotOccupiedError(YardError):
    def __init__(self, slot_id: str, trailer_id: str) -> None:
        super().__init__(f"Slot {slot_id} is occupied by trailer {trailer_id}.")
        self.slot_id = slot_id
        self.trailer_id = trailer_id


class FutureTimestampError(YardError):
    def __init__(self, timestamp: Any) -> None:
        super().__init__(f"Event timestamp {timestamp} is in the future.")
        self.timestamp = timestamp


class EventNotFoundError(YardError):
    def __init__(self, event_id: Any) -> None:
        super().__init__(f"Yard event {event_id} not found.")
        self.event_id = event_id


class TrailerNotInYardError(YardError):
    def __init__(self, trailer_id: str) -> None:
        super().__init__(f"Trailer {trailer_id} has checked out and cannot be moved.")
        self.trailer_id = trailer_id


def log_exception(
    logger: logging.Logger,
    message: str,
    *,
    extra: Optional[dict] = None,
    exc: Optional[BaseException] = None,
) -> None:
    """Log an exception with traceback and optional structured context."""
    detail = f"{message}: {exc}" if exc is not None else message
    if extra:
        detail = f"{detail} " + " ".join(f"{k}={v}" for k, v in sorted(extra.items()))
    exc_info = (type(exc), exc, exc.__traceback__) if exc is not None else True
    logger.error(detail, exc_info=exc_info)
