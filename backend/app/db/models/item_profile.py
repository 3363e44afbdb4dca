"""Item timing profile ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import CheckConstraint, Column, DateTime, Text, func
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base
from app.db.types import JSONBCompat, TextArrayCompat


class ItemProfileRecord(Base):
    __tablename__ = "item_profiles"
    __table_args__ = (CheckConstraint("kind in ('med', 'supplement', 'food')", name="ck_item_profiles_kind"),)

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    canonical_name = Column(Text, nullable=False, unique=True)
    display_name = Column(Text, nullable=False)
    kind = Column(Text, nullable=False)
    tags = Column(TextArrayCompat, nullable=False, default=list)
    timing = Column(JSONBCompat, nullable=False, default=dict)
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
