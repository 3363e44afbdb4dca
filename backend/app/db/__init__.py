"""Database base, session wiring and the timing catalog models."""

from app.db.base import Base
from app.db import models  # noqa: F401  (imported for side effects)
from app.db.models import InteractionRuleRecord, ItemProfileRecord

__all__ = ["Base", "InteractionRuleRecord", "ItemProfileRecord"]
