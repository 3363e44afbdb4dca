"""Deterministic single-day dosing schedule generation."""
from __future__ import annotations

import logging
from typing import Iterable, List, Sequence

from app.api.schemas.timing import (
    InteractionRule,
    ItemProfile,
    MealTimes,
    ScheduledItem,
    ScheduleInputItem,
    ScheduleOutput,
)
from app.services.timing.clock import format_time, slot_label, validate_calendar_date
from app.services.timing.confidence import compute_confidence
from app.services.timing.constraint_builder import build_constraints
from app.services.timing.day_slots import get_default_day_slots
from app.services.timing.placer import PlacedItem, place_items
from app.services.timing.profile_matcher import attach_profiles
from app.services.timing.resolver import DEFAULT_MAX_PASSES, resolve_schedule

logger = logging.getLogger(__name__)

DISCLAIMER = (
    "This schedule is for informational purposes only and does not constitute medical advice. "
    "Always confirm medication timing with your doctor or pharmacist."
)


def generate_schedule(
    date: str,
    items: Sequence[ScheduleInputItem],
    profiles: Iterable[ItemProfile],
    rules: Iterable[InteractionRule] | None = None,
    wake_time: str | None = None,
    meals: MealTimes | None = None,
    *,
    max_passes: int = DEFAULT_MAX_PASSES,
) -> ScheduleOutput:
    """
    Compute one day's timetable for the given items.

    Pure and deterministic: the catalog (profiles and rules) is supplied by the caller
    on every call and is never modified. Raises ScheduleInputError for a malformed
    date, wake time or meal time; unknown items and malformed rules only lower
    confidence or get skipped.
    """
    validate_calendar_date(date)
    slots = get_default_day_slots(wake_time, meals)

    matched = attach_profiles(items, profiles)
    build = build_constraints(matched, rules or [])
    placed = place_items(matched, slots)
    resolved = resolve_schedule(placed, build, slots, max_passes=max_passes)
    overall_confidence = compute_confidence(matched, resolved)

    if build.skipped_count:
        logger.info("Schedule for %s skipped %d malformed rules", date, build.skipped_count)

    return ScheduleOutput(
        date=date,
        items=_assemble_items(resolved.placed),
        warnings=resolved.warnings,
        overall_confidence=overall_confidence,
        disclaimer=DISCLAIMER,
    )


def _assemble_items(placed: List[PlacedItem]) -> List[ScheduledItem]:
    ordered = sorted(placed, key=lambda item: (item.time_min, item.matched.index))
    return [
        ScheduledItem(
            canonical_name=item.matched.item.canonical_name,
            display_name=item.matched.item.display_name,
            dose=item.matched.item.dose,
            scheduled_time=format_time(item.time_min),
            slot_label=slot_label(item.time_min),
            with_food=item.with_food,
            notes=list(item.notes),
            constraints_satisfied=list(item.constraints_satisfied),
            constraints_violated=list(item.constraints_violated),
        )
        for item in ordered
    ]
