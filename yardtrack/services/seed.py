"""
Seed yard slots and demo gate events for local usage.
"""

from __future__ import annotations

import datetime
import logging
from pathlib import Path
from typing import Any, Dict, List

from pydantic import ValidationError
from sqlalchemy import func
from sqlalchemy.orm import Session

from ..core.errors import YardError
from ..core.fileio import read_json_file
from ..models.yard_slot import SlotKind, YardSlot
from ..schemas.yard import YardEventCreate
from .yard_store import YardStore

logger = logging.getLogger("seed")


def _parse_ts(value: Any) -> datetime.datetime | None:
    if not value:
        return None
    try:
        return datetime.datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except Exception:
        return None


def seed_yard(
    db: Session,
    seed_path: Path | None = None,
    *,
    door_count: int = 10,
    lane_count: int = 20,
) -> int:
    """
    Seed doors ``D1..Dn``, lanes ``L1..Ln`` and demo events if no slots exist.

    Returns number of slots inserted.
    """
    existing = db.query(func.count(YardSlot.slot_id)).scalar() or 0
    if existing > 0:
        return 0
    store = YardStore(db)
    count = 0
    for kind, prefix, total in ((SlotKind.DOOR, "D", door_count), (SlotKind.LANE, "L", lane_count)):
        for i in range(1, total + 1):
            store.add_slot(kind, f"{prefix}{i}")
            count += 1

    if seed_path is None or not seed_path.exists():
        return count
    items: List[Dict[str, Any]] = read_json_file(seed_path, [])
    # Replay oldest first so check-in displacement behaves as it did live.
    items = sorted(
        (item for item in items if isinstance(item, dict)),
        key=lambda item: _parse_ts(item.get("timestamp")) or datetime.datetime.min.replace(tzinfo=datetime.timezone.utc),
    )
    loaded = 0
    for item in items:
        try:
            data = YardEventCreate.model_validate(item)
        except ValidationError as exc:
            logger.warning("Skipping invalid seed event trailer=%s err=%s", item.get("trailer_id"), exc)
            continue
        try:
            store.record_event(data, clerk_name=item.get("clerk_name"), timestamp=_parse_ts(item.get("timestamp")))
        except YardError as exc:
            logger.warning("Skipping seed event trailer=%s err=%s", data.trailer_id, exc)
            continue
        loaded += 1
    logger.info("Seeded yard slots=%s events=%s path=%s", count, loaded, seed_path)
    return count
