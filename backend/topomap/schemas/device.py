from __future__ import annotations
from typing import Optional
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Coordinate, DeviceType, Status, reject_null


# ----------------------------
# Requests
# ----------------------------

class DeviceCreate(BaseModel):
    name: str = Field(..., min_length=2)
    type: DeviceType
    ip: Optional[str] = None
    # omitted -> store defaults (status "up", x/y 0)
    status: Optional[Status] = None
    x: Optional[Coordinate] = None
    y: Optional[Coordinate] = None


class DeviceUpdate(BaseModel):
    """Partial update. Only the fields present in the body are written."""

    name: Optional[str] = Field(default=None, min_length=2)
    type: Optional[DeviceType] = None
    ip: Optional[str] = None  # null clears it
    status: Optional[Status] = None
    x: Optional[Coordinate] = None
    y: Optional[Coordinate] = None

    not_null = field_validator("name", "type", "status", "x", "y")(reject_null)

    @model_validator(mode="after")
    def _require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("No fields to update")
        return self


class DevicePosition(BaseModel):
    model_config = ConfigDict(extra="forbid")

    x: Coordinate
    y: Coordinate


# ----------------------------
# Responses
# ----------------------------

class DeviceOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    name: str
    type: DeviceType
    ip: Optional[str] = None
    status: Status
    x: float
    y: float
    created_at: datetime
