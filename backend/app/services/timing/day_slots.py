"""Day anchor computation (wake and meal times)."""
from __future__ import annotations

from dataclasses import dataclass
from typing import List

from app.api.schemas.timing import MealTimes
from app.services.timing.clock import DAY_END, clamp, parse_time

DEFAULT_WAKE_TIME = "07:00"
BREAKFAST_OFFSET_MIN = 30
LUNCH_OFFSET_MIN = 5 * 60
DINNER_OFFSET_MIN = 11 * 60
MIN_MEAL_GAP_MIN = 60


@dataclass(frozen=True)
class DaySlots:
    wake: int
    breakfast: int
    lunch: int
    dinner: int

    @property
    def meals(self) -> List[int]:
        return [self.breakfast, self.lunch, self.dinner]

    def nearest_meal(self, minutes: int) -> int:
        """Closest meal anchor; ties resolve to the earlier meal."""
        return min(self.meals, key=lambda meal: (abs(meal - minutes), meal))


def get_default_day_slots(wake_time: str | None = None, meals: MealTimes | None = None) -> DaySlots:
    """
    Build the day's anchors from the wake time and optional meal overrides.

    Overrides are taken verbatim. Missing meals default to fixed offsets from wake,
    pushed later when needed so defaults always follow the previous meal, and
    clamped below midnight.
    """
    wake = parse_time(wake_time or DEFAULT_WAKE_TIME, field="wake time")
    meals = meals or MealTimes()

    if meals.breakfast:
        breakfast = parse_time(meals.breakfast, field="breakfast time")
    else:
        breakfast = clamp(wake + BREAKFAST_OFFSET_MIN, wake, DAY_END)

    if meals.lunch:
        lunch = parse_time(meals.lunch, field="lunch time")
    else:
        lunch = clamp(max(wake + LUNCH_OFFSET_MIN, breakfast + MIN_MEAL_GAP_MIN), wake, DAY_END)

    if meals.dinner:
        dinner = parse_time(meals.dinner, field="dinner time")
    else:
        dinner = clamp(max(wake + DINNER_OFFSET_MIN, lunch + MIN_MEAL_GAP_MIN), wake, DAY_END)

    return DaySlots(wake=wake, breakfast=breakfast, lunch=lunch, dinner=dinner)
