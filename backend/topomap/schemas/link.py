from __future__ import annotations
from typing import Optional
from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .common import Status, reject_null


class LinkCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    from_id: UUID = Field(..., alias="fromId")
    to_id: UUID = Field(..., alias="toId")
    status: Optional[Status] = None
    label: Optional[str] = None
    from_handle: Optional[str] = Field(default=None, alias="fromHandle")
    to_handle: Optional[str] = Field(default=None, alias="toHandle")


class LinkUpdate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    status: Optional[Status] = None
    # null clears label / handles
    label: Optional[str] = None
    from_handle: Optional[str] = Field(default=None, alias="fromHandle")
    to_handle: Optional[str] = Field(default=None, alias="toHandle")

    not_null = field_validator("status")(reject_null)

    @model_validator(mode="after")
    def _require_one_field(self):
        if not self.model_fields_set:
            raise ValueError("No fields to update")
        return self


class LinkOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    from_id: UUID
    to_id: UUID
    status: Status
    label: Optional[str] = None
    from_handle: Optional[str] = None
    to_handle: Optional[str] = None
    created_at: datetime
