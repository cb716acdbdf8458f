"""
Shared file I/O helpers.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import TypeVar

T = TypeVar("T")

logger = logging.getLogger("fileio")


def read_json_file(path: Path, default: T) -> T:
    """
    Read JSON from path. Returns default on missing/invalid data or when the
    decoded document is not the same container type as ``default``.
    """
    try:
        if not path.exists():
            return default
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except Exception as exc:
        logger.warning("Failed to read JSON path=%s err=%s", path, exc)
        return default
    if default is not None and not isinstance(data, type(default)):
        logger.warning("Unexpected JSON document type path=%s type=%s", path, type(data).__name__)
        return default
    return data
