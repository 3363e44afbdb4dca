"""Interaction rule ORM model."""
from __future__ import annotations

from uuid import uuid4

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Index, Integer, Text, UniqueConstraint, func, text as sa_text
from sqlalchemy.dialects.postgresql import UUID

from app.db.base import Base
from app.db.types import JSONBCompat, TextArrayCompat


class InteractionRuleRecord(Base):
    __tablename__ = "interaction_rules"
    __table_args__ = (
        UniqueConstraint("rule_key", "version", name="uq_interaction_rules_key_version"),
        CheckConstraint("severity in ('hard', 'soft')", name="ck_interaction_rules_severity"),
        CheckConstraint("confidence >= 0 and confidence <= 100", name="ck_interaction_rules_confidence"),
        Index("ix_interaction_rules_is_active", "is_active"),
    )

    id = Column(UUID(as_uuid=True), primary_key=True, default=uuid4)
    rule_key = Column(Text, nullable=False)
    applies_to = Column(TextArrayCompat, nullable=False, default=list)
    applies_if_tags = Column(TextArrayCompat, nullable=False, default=list)
    conflicts_with_names = Column(TextArrayCompat, nullable=False, default=list)
    conflicts_with_tags = Column(TextArrayCompat, nullable=False, default=list)
    # "constraint" is a reserved word in SQL.
    constraint_data = Column(JSONBCompat, nullable=False)
    severity = Column(Text, nullable=False, server_default=sa_text("'soft'"))
    confidence = Column(Integer, nullable=False, server_default=sa_text("80"))
    rationale = Column(Text, nullable=False, server_default=sa_text("''"))
    refs = Column(TextArrayCompat, nullable=False, default=list)
    is_active = Column(Boolean, nullable=False, server_default=sa_text("true"))
    version = Column(Integer, nullable=False, server_default=sa_text("1"))
    created_at = Column(DateTime(timezone=True), nullable=False, server_default=func.now())
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
