"""All reads and writes against the devices/links tables.

Store constraint violations are turned into the outcomes in ``errors`` here;
nothing above this module sees a driver error code.
"""
from __future__ import annotations

import logging
from typing import Any, Mapping, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from ..errors import Conflict, InvalidReference, NotFound, TopologyError
from ..models import Device, Link
from ..schemas.device import DeviceCreate
from ..schemas.link import LinkCreate

logger = logging.getLogger(__name__)

# columns a partial update may touch; id/created_at are never writable
DEVICE_UPDATE_COLUMNS = ("name", "type", "ip", "status", "x", "y")
LINK_UPDATE_COLUMNS = ("status", "label", "from_handle", "to_handle")

UNIQUE_VIOLATION = "23505"
FOREIGN_KEY_VIOLATION = "23503"


def pick_columns(fields: Mapping[str, Any], allowed) -> dict[str, Any]:
    """Explicit column -> value pairs for the supplied, allowed fields only."""
    return {col: fields[col] for col in allowed if col in fields}


def translate_integrity_error(exc: IntegrityError) -> Optional[TopologyError]:
    orig = exc.orig
    code = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    msg = str(orig).upper()
    if code == UNIQUE_VIOLATION or "UNIQUE CONSTRAINT" in msg:
        return Conflict()
    if code == FOREIGN_KEY_VIOLATION or "FOREIGN KEY CONSTRAINT" in msg:
        return InvalidReference()
    return None


class TopologyRepository:
    def __init__(self, db: Session):
        self.db = db

    # --- Devices ---

    def list_devices(self) -> list[Device]:
        return self.db.query(Device).order_by(Device.created_at.asc()).all()

    def get_device(self, device_id: UUID) -> Device:
        device = (
            self.db.query(Device)
            .populate_existing()
            .filter(Device.id == device_id)
            .first()
        )
        if not device:
            raise NotFound("Device not found")
        return device

    def create_device(self, payload: DeviceCreate) -> Device:
        device = Device(
            name=payload.name,
            type=payload.type,
            ip=payload.ip,
            status=payload.status or "up",
            x=0.0 if payload.x is None else payload.x,
            y=0.0 if payload.y is None else payload.y,
        )
        self.db.add(device)
        self.db.commit()
        self.db.refresh(device)
        logger.info("Created device %s (%s, %s)", device.id, device.name, device.type)
        return device

    def update_device(self, device_id: UUID, fields: Mapping[str, Any]) -> Device:
        values = pick_columns(fields, DEVICE_UPDATE_COLUMNS)
        if not values:
            return self.get_device(device_id)

        count = (
            self.db.query(Device)
            .filter(Device.id == device_id)
            .update(values, synchronize_session=False)
        )
        if not count:
            self.db.rollback()
            raise NotFound("Device not found")
        self.db.commit()
        logger.debug("Updated device %s: %s", device_id, sorted(values))
        return self.get_device(device_id)

    def update_device_position(self, device_id: UUID, x: float, y: float) -> Device:
        return self.update_device(device_id, {"x": x, "y": y})

    def delete_device(self, device_id: UUID) -> None:
        # links referencing the device go with it (ON DELETE CASCADE)
        count = (
            self.db.query(Device)
            .filter(Device.id == device_id)
            .delete(synchronize_session=False)
        )
        if not count:
            self.db.rollback()
            raise NotFound("Device not found")
        self.db.commit()
        logger.info("Deleted device %s", device_id)

    # --- Links ---

    def list_links(self) -> list[Link]:
        return self.db.query(Link).order_by(Link.created_at.asc()).all()

    def get_link(self, link_id: UUID) -> Link:
        link = (
            self.db.query(Link)
            .populate_existing()
            .filter(Link.id == link_id)
            .first()
        )
        if not link:
            raise NotFound("Link not found")
        return link

    def create_link(self, payload: LinkCreate) -> Link:
        # self-links are accepted here; the canvas refuses them before calling us
        endpoints = {payload.from_id, payload.to_id}
        found = {row.id for row in self.db.query(Device.id).filter(Device.id.in_(endpoints))}
        if endpoints - found:
            logger.info("Rejected link %s -> %s: unknown device", payload.from_id, payload.to_id)
            raise InvalidReference()

        if self._find_duplicate(payload.from_id, payload.to_id, payload.from_handle, payload.to_handle) is not None:
            logger.info("Rejected link %s -> %s: duplicate", payload.from_id, payload.to_id)
            raise Conflict()

        link = Link(
            from_id=payload.from_id,
            to_id=payload.to_id,
            status=payload.status or "up",
            label=payload.label,
            from_handle=payload.from_handle,
            to_handle=payload.to_handle,
        )
        self.db.add(link)
        try:
            self.db.commit()
        except IntegrityError as exc:
            # lost a race with a concurrent insert/delete
            self.db.rollback()
            translated = translate_integrity_error(exc)
            if translated is None:
                raise
            raise translated from exc
        self.db.refresh(link)
        logger.info("Created link %s (%s -> %s)", link.id, link.from_id, link.to_id)
        return link

    def update_link(self, link_id: UUID, fields: Mapping[str, Any]) -> Link:
        values = pick_columns(fields, LINK_UPDATE_COLUMNS)
        if not values:
            return self.get_link(link_id)

        if "from_handle" in values or "to_handle" in values:
            current = self.get_link(link_id)
            handles = (values.get("from_handle", current.from_handle), values.get("to_handle", current.to_handle))
            if self._find_duplicate(current.from_id, current.to_id, *handles, exclude_id=link_id) is not None:
                raise Conflict()

        try:
            count = (
                self.db.query(Link)
                .filter(Link.id == link_id)
                .update(values, synchronize_session=False)
            )
        except IntegrityError as exc:
            # new handle pair collides with another link
            self.db.rollback()
            translated = translate_integrity_error(exc)
            if translated is None:
                raise
            raise translated from exc
        if not count:
            self.db.rollback()
            raise NotFound("Link not found")
        self.db.commit()
        logger.debug("Updated link %s: %s", link_id, sorted(values))
        return self.get_link(link_id)

    def delete_link(self, link_id: UUID) -> None:
        count = (
            self.db.query(Link)
            .filter(Link.id == link_id)
            .delete(synchronize_session=False)
        )
        if not count:
            self.db.rollback()
            raise NotFound("Link not found")
        self.db.commit()
        logger.info("Deleted link %s", link_id)

    def _find_duplicate(self, from_id: UUID, to_id: UUID, from_handle: Optional[str], to_handle: Optional[str],
                        exclude_id: Optional[UUID] = None) -> Optional[Link]:
        # NULL handles compare equal here, unlike in the unique index
        q = self.db.query(Link).filter(Link.from_id == from_id, Link.to_id == to_id)
        for column, value in ((Link.from_handle, from_handle), (Link.to_handle, to_handle)):
            q = q.filter(column.is_(None) if value is None else column == value)
        if exclude_id is not None:
            q = q.filter(Link.id != exclude_id)
        return q.first()
