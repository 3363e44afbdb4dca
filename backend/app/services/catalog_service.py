"""Read-only access to the published timing catalog, plus seeding of built-in data."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Sequence, Set

from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.api.schemas.timing import InteractionRule, ItemProfile
from app.db.models.interaction_rule import InteractionRuleRecord
from app.db.models.item_profile import ItemProfileRecord
from app.services.timing.seed_profiles import builtin_profiles
from app.services.timing.seed_rules import builtin_rules
from app.services.timing.tags import ALL_TAGS

logger = logging.getLogger(__name__)


@dataclass
class Catalog:
    profiles: List[ItemProfile] = field(default_factory=list)
    rules: List[InteractionRule] = field(default_factory=list)
    # Rule keys whose latest stored version is inactive.
    retired_keys: Set[str] = field(default_factory=set)

    def extend(self, profiles: Iterable[ItemProfile] = (), rules: Iterable[InteractionRule] = ()) -> "Catalog":
        """
        Return a new catalog with extra entries appended.

        Profiles already present keep precedence. A rule replaces an existing one with
        the same key only when its version is higher; retired keys are never added back.
        """
        merged_profiles = list(self.profiles)
        known = {profile.canonical_name for profile in merged_profiles}
        for profile in profiles:
            if profile.canonical_name not in known:
                merged_profiles.append(profile)
                known.add(profile.canonical_name)

        by_key: Dict[str, InteractionRule] = {rule.rule_key: rule for rule in self.rules}
        for rule in rules:
            if rule.rule_key in self.retired_keys:
                continue
            current = by_key.get(rule.rule_key)
            if current is None or rule.version > current.version:
                by_key[rule.rule_key] = rule
        return Catalog(profiles=merged_profiles, rules=list(by_key.values()), retired_keys=set(self.retired_keys))


def load_catalog(db: Session, canonical_names: Sequence[str] | None = None) -> Catalog:
    """
    Load profiles (optionally only the requested names) and active rules at their latest version.

    Rows that no longer validate are skipped with a warning.
    """
    profile_rows: List[ItemProfileRecord] = []
    if canonical_names is None:
        profile_rows = db.query(ItemProfileRecord).order_by(ItemProfileRecord.canonical_name).all()
    elif canonical_names:
        profile_rows = (
            db.query(ItemProfileRecord)
            .filter(ItemProfileRecord.canonical_name.in_(sorted(set(canonical_names))))
            .order_by(ItemProfileRecord.canonical_name)
            .all()
        )

    profiles: List[ItemProfile] = []
    for row in profile_rows:
        try:
            profile = profile_from_record(row)
        except ValidationError as exc:
            logger.warning("Skipping item profile %s: %s", row.canonical_name, exc.errors()[:1])
            continue
        unknown = set(profile.tags) - ALL_TAGS
        if unknown:
            logger.warning("Item profile %s uses unknown tags %s", profile.canonical_name, sorted(unknown))
        profiles.append(profile)

    # Latest version per key decides; a retired latest version hides older active ones.
    rule_rows = (
        db.query(InteractionRuleRecord)
        .order_by(InteractionRuleRecord.rule_key, InteractionRuleRecord.version.desc())
        .all()
    )
    rules: List[InteractionRule] = []
    seen_keys = set()
    retired_keys: Set[str] = set()
    for row in rule_rows:
        if row.rule_key in seen_keys:
            continue
        seen_keys.add(row.rule_key)
        if not row.is_active:
            retired_keys.add(row.rule_key)
            continue
        try:
            rules.append(rule_from_record(row))
        except ValidationError as exc:
            logger.warning("Skipping interaction rule %s: %s", row.rule_key, exc.errors()[:1])

    logger.debug("Loaded catalog: %d profiles, %d active rules", len(profiles), len(rules))
    return Catalog(profiles=profiles, rules=rules, retired_keys=retired_keys)


def builtin_catalog() -> Catalog:
    return Catalog(profiles=builtin_profiles(), rules=builtin_rules())


def profile_from_record(row: ItemProfileRecord) -> ItemProfile:
    return ItemProfile.model_validate(
        {
            "canonical_name": row.canonical_name,
            "display_name": row.display_name,
            "kind": row.kind,
            "tags": list(row.tags or []),
            "timing": row.timing or {},
        }
    )


def rule_from_record(row: InteractionRuleRecord) -> InteractionRule:
    return InteractionRule.model_validate(
        {
            "rule_key": row.rule_key,
            "applies_to": list(row.applies_to or []),
            "applies_if_tags": list(row.applies_if_tags or []),
            "conflicts_with_names": list(row.conflicts_with_names or []),
            "conflicts_with_tags": list(row.conflicts_with_tags or []),
            "constraint": row.constraint_data if isinstance(row.constraint_data, dict) else {},
            "severity": row.severity,
            "confidence": row.confidence,
            "rationale": row.rationale or "",
            "references": list(row.refs or []),
            "is_active": row.is_active,
            "version": row.version,
        }
    )


def seed_builtin_catalog(db: Session) -> Dict[str, int]:
    """Upsert the built-in profiles and rules. Returns counts of rows written."""
    profiles_written = 0
    for profile in builtin_profiles():
        row = db.query(ItemProfileRecord).filter(ItemProfileRecord.canonical_name == profile.canonical_name).first()
        if row is None:
            row = ItemProfileRecord(canonical_name=profile.canonical_name)
            db.add(row)
        row.display_name = profile.display_name
        row.kind = profile.kind
        row.tags = list(profile.tags)
        row.timing = profile.timing.model_dump(exclude_defaults=True)
        profiles_written += 1

    rules_written = 0
    for rule in builtin_rules():
        row = (
            db.query(InteractionRuleRecord)
            .filter(InteractionRuleRecord.rule_key == rule.rule_key, InteractionRuleRecord.version == rule.version)
            .first()
        )
        if row is None:
            row = InteractionRuleRecord(rule_key=rule.rule_key, version=rule.version)
            db.add(row)
        row.applies_to = list(rule.applies_to)
        row.applies_if_tags = list(rule.applies_if_tags)
        row.conflicts_with_names = list(rule.conflicts_with_names)
        row.conflicts_with_tags = list(rule.conflicts_with_tags)
        row.constraint_data = dict(rule.constraint)
        row.severity = rule.severity
        row.confidence = rule.confidence
        row.rationale = rule.rationale
        row.refs = list(rule.references)
        row.is_active = rule.is_active
        rules_written += 1

    db.commit()
    logger.info("Seeded %d item profiles and %d interaction rules", profiles_written, rules_written)
    return {"profiles": profiles_written, "rules": rules_written}
