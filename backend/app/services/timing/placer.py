"""Initial time-of-day placement from each item's own timing profile."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import List, Tuple

from app.services.timing.clock import DAY_END, parse_time
from app.services.timing.day_slots import DaySlots
from app.services.timing.profile_matcher import MatchedItem

FLEXIBLE_OFFSET_MIN = 2 * 60
EMPTY_STOMACH_NOTE = "Take on an empty stomach"


@dataclass
class PlacedItem:
    matched: MatchedItem
    time_min: int
    initial_time_min: int
    with_food: bool
    notes: List[str] = field(default_factory=list)
    constraints_satisfied: List[str] = field(default_factory=list)
    constraints_violated: List[str] = field(default_factory=list)
    # Latest allowed time contributed by AVOID_AFTER_TIME rules bound to this item.
    rule_avoid_after: int | None = None
    # Minutes before a meal this item is pinned to (0: with the meal). None leaves it free.
    meal_lead_min: int | None = None

    @property
    def display_name(self) -> str:
        return self.matched.item.display_name

    @property
    def is_fixed(self) -> bool:
        timing = self.matched.timing
        if timing.flexible:
            return False
        return timing.empty_stomach_preferred or len(timing.preferred_windows) == 1

    def add_note(self, note: str) -> None:
        if note not in self.notes:
            self.notes.append(note)

    def mark_satisfied(self, rule_key: str) -> None:
        if rule_key not in self.constraints_violated and rule_key not in self.constraints_satisfied:
            self.constraints_satisfied.append(rule_key)

    def mark_violated(self, rule_key: str) -> None:
        if rule_key in self.constraints_satisfied:
            self.constraints_satisfied.remove(rule_key)
        if rule_key not in self.constraints_violated:
            self.constraints_violated.append(rule_key)

    def bounds(self, slots: DaySlots) -> Tuple[int, int]:
        """Earliest and latest times this item may be moved to."""
        timing = self.matched.timing
        low, high = slots.wake, DAY_END
        if timing.preferred_windows:
            low = max(low, min(parse_time(window.start, field="window start") for window in timing.preferred_windows))
            high = min(high, max(parse_time(window.end, field="window end") for window in timing.preferred_windows))
        for limit in (avoid_after_limit(self.matched), self.rule_avoid_after):
            if limit is not None:
                high = min(high, limit)
        if low > high:
            low = high
        return low, high

    def meal_anchors(self, slots: DaySlots) -> List[int] | None:
        """Times this item may occupy when pinned to meals, within its bounds."""
        if self.meal_lead_min is None:
            return None
        low, high = self.bounds(slots)
        anchors = {max(slots.wake, meal - self.meal_lead_min) for meal in slots.meals}
        return sorted(anchor for anchor in anchors if low <= anchor <= high)

    def clear_empty_stomach_notes(self) -> None:
        self.notes = [note for note in self.notes if not note.startswith(EMPTY_STOMACH_NOTE)]


def empty_stomach_note(buffer_min: int | None) -> str:
    if buffer_min:
        return f"{EMPTY_STOMACH_NOTE}, {buffer_min} min before food"
    return EMPTY_STOMACH_NOTE


def avoid_after_limit(matched: MatchedItem) -> int | None:
    avoid_after = matched.timing.avoid_after_time
    if not avoid_after:
        return None
    return parse_time(avoid_after, field="avoid-after time")


def window_midpoint(matched: MatchedItem) -> int:
    window = matched.timing.preferred_windows[0]
    start = parse_time(window.start, field="window start")
    end = parse_time(window.end, field="window end")
    return (start + end) // 2


def initial_time(matched: MatchedItem, slots: DaySlots) -> Tuple[int, List[str]]:
    """Return the seed time for an item plus any notes the placement implies."""
    timing = matched.timing
    if timing.preferred_windows:
        return window_midpoint(matched), []
    if timing.empty_stomach_preferred:
        return slots.wake, [empty_stomach_note(timing.buffer_before_food_min)]
    if timing.with_food:
        return slots.breakfast, []
    if timing.stimulant:
        limit = avoid_after_limit(matched)
        if limit is not None:
            return min(slots.wake, limit), []
        return slots.wake, []
    return min(slots.wake + FLEXIBLE_OFFSET_MIN, DAY_END), []


def place_items(matched_items: List[MatchedItem], slots: DaySlots) -> List[PlacedItem]:
    placed: List[PlacedItem] = []
    for matched in matched_items:
        start, notes = initial_time(matched, slots)
        placed.append(
            PlacedItem(
                matched=matched,
                time_min=start,
                initial_time_min=start,
                with_food=matched.timing.with_food,
                notes=list(notes),
                meal_lead_min=0 if matched.timing.with_food else None,
            )
        )
    return placed
