"""Rule-based dosing timetable engine."""
from app.services.timing.clock import ScheduleInputError
from app.services.timing.confidence import get_confidence_band
from app.services.timing.day_slots import DaySlots, get_default_day_slots
from app.services.timing.scheduler import DISCLAIMER, generate_schedule

__all__ = [
    "DISCLAIMER",
    "DaySlots",
    "ScheduleInputError",
    "generate_schedule",
    "get_confidence_band",
    "get_default_day_slots",
]
