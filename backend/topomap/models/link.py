import uuid

from sqlalchemy import Column, String, DateTime, ForeignKey, CheckConstraint, Index, Uuid
from .base import Base
from .device import STATUSES, in_clause, utcnow


class Link(Base):
    __tablename__ = "links"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    from_id = Column(Uuid, ForeignKey("devices.id", ondelete="CASCADE"), nullable=False)
    to_id = Column(Uuid, ForeignKey("devices.id", ondelete="CASCADE"), nullable=False)
    status = Column(String, nullable=False, default="up", server_default="up")
    label = Column(String)
    from_handle = Column(String)   # docking point on the source device
    to_handle = Column(String)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow, index=True)

    __table_args__ = (
        CheckConstraint(in_clause("status", STATUSES), name="ck_links_status"),
        Index("links_unique", "from_id", "to_id", "from_handle", "to_handle", unique=True),
    )
