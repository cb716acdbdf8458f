"""
Pydantic schemas for yard events, slots and moves.

``YardEventCreate`` carries the check-in form fields; ``YardEventOut`` is
used when returning events via the REST API.
"""

from __future__ import annotations

from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


CheckInAssignment = Literal["bobtail", "empty", "material", "door_assignment", "lane_assignment"]


class YardEventCreate(BaseModel):
    transaction_type: Literal["inbound", "outbound"]
    trailer_id: str = Field(min_length=3, max_length=64)
    seal_number: Optional[str] = None
    carrier: str = Field(min_length=2, max_length=128)
    scac: str = ""
    driver_name: str = Field(min_length=2, max_length=128)
    load_number: str = Field(min_length=1, max_length=64)
    assignment_type: CheckInAssignment
    assignment_value: Optional[str] = None
    document_data_uri: Optional[str] = None

    @field_validator("trailer_id", "carrier", "driver_name", "load_number", mode="before")
    @classmethod
    def _strip(cls, value):
        return value.strip() if isinstance(value, str) else value

    @field_validator("scac")
    @classmethod
    def _check_scac(cls, value: str) -> str:
        value = (value or "").strip().upper()
        if value and (not 2 <= len(value) <= 4 or not value.isalpha()):
            raise ValueError("SCAC must be 2 to 4 letters.")
        return value

    @model_validator(mode="after")
    def _check_assignment(self) -> "YardEventCreate":
        if self.assignment_type in ("door_assignment", "lane_assignment"):
            value = (self.assignment_value or "").strip().upper()
            if not value:
                raise ValueError("A door or lane must be selected for this assignment.")
            self.assignment_value = value
        else:
            self.assignment_value = None
        return self


class YardEventOut(BaseModel):
    id: int
    trailer_id: str
    transaction_type: str
    assignment_type: str
    assignment_value: Optional[str]
    requested_slot: Optional[str]
    carrier: str
    scac: str
    driver_name: str
    clerk_name: str
    load_number: str
    seal_number: Optional[str]
    document_data_uri: Optional[str]
    timestamp: datetime

    model_config = ConfigDict(from_attributes=True)


class SlotCreate(BaseModel):
    kind: Literal["door", "lane"]
    slot_id: str


class SlotOut(BaseModel):
    kind: str
    slot_id: str
    position: int

    model_config = ConfigDict(from_attributes=True)


class OccupancyRow(BaseModel):
    kind: str
    slot_id: str
    event: Optional[YardEventOut] = None


class MoveRequest(BaseModel):
    event_id: int
    destination_slot_id: str = Field(min_length=1)
    allow_lost_and_found: bool = False


class MoveResult(BaseModel):
    event: YardEventOut
    lost_and_found: bool


class TrailerStatusOut(BaseModel):
    trailer_id: str
    state: str
    slot_id: Optional[str]
    history: List[YardEventOut]
