"""Bind active interaction rules to the concrete items of a schedule request."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import FrozenSet, Iterable, List, Optional, Set, Tuple, assert_never

from pydantic import TypeAdapter, ValidationError

from app.api.schemas.timing import (
    AvoidAfterTimeConstraint,
    EmptyStomachPreferredConstraint,
    InteractionRule,
    MinSeparationConstraint,
    RuleConstraint,
    WarnConstraint,
    WithFoodRequiredConstraint,
)
from app.services.timing.profile_matcher import MatchedItem
from app.services.timing.tags import ANY_MED

logger = logging.getLogger(__name__)

_constraint_adapter: TypeAdapter[RuleConstraint] = TypeAdapter(RuleConstraint)


@dataclass
class BoundConstraint:
    rule: InteractionRule
    constraint: RuleConstraint
    owner: MatchedItem
    target: Optional[MatchedItem] = None

    @property
    def rule_key(self) -> str:
        return self.rule.rule_key

    @property
    def is_binary(self) -> bool:
        return isinstance(self.constraint, MinSeparationConstraint)


@dataclass
class BuildResult:
    constraints: List[BoundConstraint] = field(default_factory=list)
    skipped_rules: List[str] = field(default_factory=list)

    @property
    def skipped_count(self) -> int:
        return len(self.skipped_rules)

    @property
    def binary(self) -> List[BoundConstraint]:
        return [bound for bound in self.constraints if bound.is_binary]

    @property
    def unary(self) -> List[BoundConstraint]:
        return [bound for bound in self.constraints if not bound.is_binary]


def parse_constraint(payload: object) -> RuleConstraint | None:
    """Parse a raw constraint payload, returning None when the shape is not recognized."""
    try:
        return _constraint_adapter.validate_python(payload)
    except ValidationError:
        return None


def build_constraints(matched: List[MatchedItem], rules: Iterable[InteractionRule]) -> BuildResult:
    result = BuildResult()
    for rule in rules:
        if not rule.is_active:
            continue
        constraint = parse_constraint(rule.constraint)
        if constraint is None:
            logger.warning("Skipping rule %s: unrecognized constraint %r", rule.rule_key, rule.constraint)
            result.skipped_rules.append(rule.rule_key)
            continue
        result.constraints.extend(_bind_rule(rule, constraint, matched))

    logger.debug(
        "Bound %d constraints (%d binary), skipped %d rules",
        len(result.constraints),
        len(result.binary),
        result.skipped_count,
    )
    return result


def _bind_rule(rule: InteractionRule, constraint: RuleConstraint, matched: List[MatchedItem]) -> List[BoundConstraint]:
    bound: List[BoundConstraint] = []
    seen_pairs: Set[FrozenSet[int]] = set()
    for owner in matched:
        if not _applies(rule, owner):
            continue

        # Pairwise rules bind once per unordered pair; a WARN with right-hand matchers is pairwise too.
        if isinstance(constraint, MinSeparationConstraint) or (
            isinstance(constraint, WarnConstraint) and _has_right_hand(rule)
        ):
            for target in _conflict_targets(rule, constraint, owner, matched):
                pair = frozenset((owner.index, target.index))
                if pair in seen_pairs:
                    continue
                seen_pairs.add(pair)
                bound.append(BoundConstraint(rule=rule, constraint=constraint, owner=owner, target=target))
        elif isinstance(
            constraint,
            (WithFoodRequiredConstraint, EmptyStomachPreferredConstraint, AvoidAfterTimeConstraint, WarnConstraint),
        ):
            bound.append(BoundConstraint(rule=rule, constraint=constraint, owner=owner))
        else:
            assert_never(constraint)
    return bound


def _applies(rule: InteractionRule, item: MatchedItem) -> bool:
    if item.item.canonical_name in rule.applies_to:
        return True
    return bool(item.tags & set(rule.applies_if_tags))


def _right_hand(rule: InteractionRule, constraint: RuleConstraint) -> Tuple[Set[str], Set[str]]:
    names = set(rule.conflicts_with_names)
    tags = set(rule.conflicts_with_tags)
    if isinstance(constraint, MinSeparationConstraint):
        if constraint.other.type == "name":
            names.add(constraint.other.value)
        else:
            tags.add(constraint.other.value)
    return names, tags


def _has_right_hand(rule: InteractionRule) -> bool:
    return bool(rule.conflicts_with_names or rule.conflicts_with_tags)


def _conflict_targets(
    rule: InteractionRule,
    constraint: RuleConstraint,
    owner: MatchedItem,
    matched: List[MatchedItem],
) -> List[MatchedItem]:
    names, tags = _right_hand(rule, constraint)
    any_med = ANY_MED in tags
    targets: List[MatchedItem] = []
    for other in matched:
        if other.index == owner.index:
            continue
        if (
            other.item.canonical_name in names
            or other.tags & tags
            or (any_med and other.profile.kind == "med")
        ):
            targets.append(other)
    return targets
