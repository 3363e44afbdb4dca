"""Constraint resolution: unary snaps and clamps, then bounded separation relaxation."""
from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, assert_never

from app.api.schemas.timing import (
    AvoidAfterTimeConstraint,
    EmptyStomachPreferredConstraint,
    MinSeparationConstraint,
    ScheduleWarning,
    WarnConstraint,
    WithFoodRequiredConstraint,
)
from app.services.timing.clock import format_time, parse_time
from app.services.timing.constraint_builder import BoundConstraint, BuildResult
from app.services.timing.day_slots import DaySlots
from app.services.timing.placer import PlacedItem, avoid_after_limit, empty_stomach_note

logger = logging.getLogger(__name__)

DEFAULT_MAX_PASSES = 5
MATERIAL_SHIFT_MIN = 15
WITH_FOOD_NOTE = "Take with food"


@dataclass
class ResolveResult:
    placed: List[PlacedItem]
    warnings: List[ScheduleWarning] = field(default_factory=list)
    binary_total: int = 0
    binary_satisfied: int = 0
    passes_run: int = 0


def resolve_schedule(
    placed: List[PlacedItem],
    build: BuildResult,
    slots: DaySlots,
    *,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> ResolveResult:
    by_index: Dict[int, PlacedItem] = {item.matched.index: item for item in placed}
    result = ResolveResult(placed=placed)

    for bound in build.unary:
        _apply_unary(bound, by_index, slots, result.warnings)
    _apply_avoid_after(placed, build.unary)

    # Stable sort keeps binding order among rules of equal confidence.
    binary = sorted(build.binary, key=lambda bound: -bound.rule.confidence)
    result.passes_run = _relax(binary, by_index, slots, max(1, max_passes))
    _recheck_meal_rules(build.unary, by_index, slots)

    result.binary_total = len(binary)
    for bound in binary:
        constraint = bound.constraint
        if not isinstance(constraint, MinSeparationConstraint):
            continue
        owner = by_index[bound.owner.index]
        target = by_index[bound.target.index]
        if abs(owner.time_min - target.time_min) >= constraint.minutes:
            owner.mark_satisfied(bound.rule_key)
            target.mark_satisfied(bound.rule_key)
            result.binary_satisfied += 1
            continue
        logger.debug(
            "Unresolved separation %s between %s and %s",
            bound.rule_key,
            owner.display_name,
            target.display_name,
        )
        owner.mark_violated(bound.rule_key)
        target.mark_violated(bound.rule_key)
        result.warnings.append(
            ScheduleWarning(
                rule_key=bound.rule_key,
                severity=bound.rule.severity,
                confidence=bound.rule.confidence,
                message=(
                    f"Could not keep {owner.display_name} and {target.display_name} at least "
                    f"{constraint.minutes} minutes apart. Consider discussing timing with a pharmacist."
                ),
                affected_items=[owner.display_name, target.display_name],
            )
        )

    logger.debug(
        "Resolved %d/%d separation constraints in %d passes",
        result.binary_satisfied,
        result.binary_total,
        result.passes_run,
    )
    return result


def _apply_unary(
    bound: BoundConstraint,
    by_index: Dict[int, PlacedItem],
    slots: DaySlots,
    warnings: List[ScheduleWarning],
) -> None:
    item = by_index[bound.owner.index]
    constraint = bound.constraint

    if isinstance(constraint, EmptyStomachPreferredConstraint):
        meal = slots.nearest_meal(item.time_min)
        item.time_min = max(slots.wake, meal - constraint.buffer_before_food_min)
        item.with_food = False
        item.meal_lead_min = constraint.buffer_before_food_min
        item.clear_empty_stomach_notes()
        item.add_note(empty_stomach_note(constraint.buffer_before_food_min))
        item.mark_satisfied(bound.rule_key)
    elif isinstance(constraint, WithFoodRequiredConstraint):
        item.time_min = slots.nearest_meal(item.time_min)
        item.with_food = True
        item.meal_lead_min = 0
        item.add_note(WITH_FOOD_NOTE)
        item.mark_satisfied(bound.rule_key)
    elif isinstance(constraint, AvoidAfterTimeConstraint):
        # Clamped once all snaps have run; see _apply_avoid_after.
        limit = parse_time(constraint.time, field="avoid-after time")
        if item.rule_avoid_after is None or limit < item.rule_avoid_after:
            item.rule_avoid_after = limit
    elif isinstance(constraint, WarnConstraint):
        affected = [item.display_name]
        if bound.target is not None:
            affected.append(by_index[bound.target.index].display_name)
        item.add_note(constraint.message)
        item.mark_satisfied(bound.rule_key)
        warnings.append(
            ScheduleWarning(
                rule_key=bound.rule_key,
                severity=bound.rule.severity,
                confidence=bound.rule.confidence,
                message=constraint.message,
                affected_items=affected,
            )
        )
    elif isinstance(constraint, MinSeparationConstraint):
        return
    else:
        assert_never(constraint)


def _apply_avoid_after(placed: List[PlacedItem], unary: List[BoundConstraint]) -> None:
    rule_keys: Dict[int, List[str]] = {}
    for bound in unary:
        if isinstance(bound.constraint, AvoidAfterTimeConstraint):
            rule_keys.setdefault(bound.owner.index, []).append(bound.rule_key)

    for item in placed:
        limits = [limit for limit in (avoid_after_limit(item.matched), item.rule_avoid_after) if limit is not None]
        if not limits:
            continue
        limit = min(limits)
        if item.time_min > limit:
            item.time_min = limit
            if abs(item.initial_time_min - limit) >= MATERIAL_SHIFT_MIN:
                item.add_note(f"Moved to {format_time(limit)} to avoid taking it late in the day")
        for rule_key in rule_keys.get(item.matched.index, []):
            item.mark_satisfied(rule_key)


def _recheck_meal_rules(unary: List[BoundConstraint], by_index: Dict[int, PlacedItem], slots: DaySlots) -> None:
    """Meal snaps only count as satisfied if the final time still sits on a meal anchor."""
    for bound in unary:
        constraint = bound.constraint
        item = by_index[bound.owner.index]
        if isinstance(constraint, WithFoodRequiredConstraint):
            anchors = set(slots.meals)
        elif isinstance(constraint, EmptyStomachPreferredConstraint):
            anchors = {max(slots.wake, meal - constraint.buffer_before_food_min) for meal in slots.meals}
        else:
            continue
        if item.time_min not in anchors:
            logger.debug("%s left its meal anchor; %s not met", item.display_name, bound.rule_key)
            item.mark_violated(bound.rule_key)


def _relax(
    binary: List[BoundConstraint],
    by_index: Dict[int, PlacedItem],
    slots: DaySlots,
    max_passes: int,
) -> int:
    for pass_number in range(1, max_passes + 1):
        changed = False
        for position, bound in enumerate(binary):
            constraint = bound.constraint
            if not isinstance(constraint, MinSeparationConstraint):
                continue
            owner = by_index[bound.owner.index]
            target = by_index[bound.target.index]
            if _gap_met(bound, by_index):
                continue

            # A move may not break a separation already met for a rule of higher confidence.
            moved = {owner.matched.index, target.matched.index}
            protected = [
                stronger
                for stronger in binary[:position]
                if stronger.rule.confidence > bound.rule.confidence
                and {stronger.owner.index, stronger.target.index} & moved
                and _gap_met(stronger, by_index)
            ]
            before = (owner.time_min, target.time_min)
            if not _separate(owner, target, constraint.minutes, slots):
                continue
            if any(not _gap_met(stronger, by_index) for stronger in protected):
                owner.time_min, target.time_min = before
                continue
            changed = True
        if not changed:
            return pass_number
    return max_passes


def _gap_met(bound: BoundConstraint, by_index: Dict[int, PlacedItem]) -> bool:
    constraint = bound.constraint
    if not isinstance(constraint, MinSeparationConstraint):
        return True
    owner = by_index[bound.owner.index]
    target = by_index[bound.target.index]
    return abs(owner.time_min - target.time_min) >= constraint.minutes


def _separate(first: PlacedItem, second: PlacedItem, minutes: int, slots: DaySlots) -> bool:
    """Try to pull two items apart; return True if any time changed."""
    if first.is_fixed and second.is_fixed:
        return False
    if first.is_fixed or second.is_fixed:
        fixed, mover = (first, second) if first.is_fixed else (second, first)
        return _move_away(mover, fixed.time_min, minutes, slots)

    if (first.time_min, first.matched.index) > (second.time_min, second.matched.index):
        later, earlier = first, second
    else:
        later, earlier = second, first
    deficit = minutes - (later.time_min - earlier.time_min)
    later_low, later_high = later.bounds(slots)
    earlier_low, earlier_high = earlier.bounds(slots)
    later_meals = later.meal_anchors(slots)
    earlier_meals = earlier.meal_anchors(slots)

    if later_meals is None:
        if later.time_min + deficit <= later_high:
            later.time_min += deficit
            return True
    else:
        options = [anchor for anchor in later_meals if anchor >= earlier.time_min + minutes]
        if options:
            later.time_min = options[0]
            return True

    if earlier_meals is None:
        if earlier.time_min - deficit >= earlier_low:
            earlier.time_min -= deficit
            return True
    else:
        options = [anchor for anchor in earlier_meals if anchor <= later.time_min - minutes]
        if options:
            earlier.time_min = options[-1]
            return True

    # Neither side fits alone: push each free item as far as its bounds allow.
    before = (later.time_min, earlier.time_min)
    if later_meals is None:
        later.time_min = max(later.time_min, min(later.time_min + deficit, later_high))
    if earlier_meals is None:
        earlier.time_min = min(earlier.time_min, max(later.time_min - minutes, earlier_low))
    return (later.time_min, earlier.time_min) != before


def _move_away(mover: PlacedItem, anchor: int, minutes: int, slots: DaySlots) -> bool:
    low, high = mover.bounds(slots)
    if mover.time_min >= anchor:
        preferred, alternate = anchor + minutes, anchor - minutes
    else:
        preferred, alternate = anchor - minutes, anchor + minutes

    meal_anchors = mover.meal_anchors(slots)
    if meal_anchors is not None:
        # Pinned items hop between meal anchors, away side first.
        away = 1 if preferred > anchor else -1
        fits = [time for time in meal_anchors if abs(time - anchor) >= minutes]
        if not fits:
            return False
        best = min(fits, key=lambda time: ((time - anchor) * away < 0, abs(time - preferred)))
        if best == mover.time_min:
            return False
        mover.time_min = best
        return True

    for candidate in (preferred, alternate):
        if low <= candidate <= high:
            mover.time_min = candidate
            return True

    truncated = max(low, min(preferred, high))
    if abs(truncated - anchor) > abs(mover.time_min - anchor):
        mover.time_min = truncated
        return True
    return False
