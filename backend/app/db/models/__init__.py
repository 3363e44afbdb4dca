"""ORM models exposed for metadata discovery."""
from app.db.models.interaction_rule import InteractionRuleRecord
from app.db.models.item_profile import ItemProfileRecord

__all__ = [
    "InteractionRuleRecord",
    "ItemProfileRecord",
]
