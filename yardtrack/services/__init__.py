"""
Service layer for the yardtrack backend.

This package contains the yard store, which owns the event log and slot
lists, and the pure occupancy projections derived from that log.
"""

from .occupancy import TrailerState, get_occupancy
from .yard_store import YardStore

__all__ = ["TrailerState", "get_occupancy", "YardStore"]
