import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Float, DateTime, CheckConstraint, Uuid
from .base import Base


DEVICE_TYPES = ("hub", "switch", "router", "ap", "server")
STATUSES = ("up", "warn", "down")


def utcnow():
    return datetime.now(timezone.utc)


def in_clause(column: str, values) -> str:
    return f"{column} IN ({', '.join(repr(v) for v in values)})"


class Device(Base):
    __tablename__ = "devices"


    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    name = Column(String, nullable=False)
    type = Column(String, nullable=False)
    ip = Column(String)
    status = Column(String, nullable=False, default="up", server_default="up")
    x = Column(Float, nullable=False, default=0.0, server_default="0")
    y = Column(Float, nullable=False, default=0.0, server_default="0")
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    __table_args__ = (
        CheckConstraint(in_clause("type", DEVICE_TYPES), name="ck_devices_type"),
        CheckConstraint(in_clause("status", STATUSES), name="ck_devices_status"),
    )
