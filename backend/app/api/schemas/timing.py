"""Schemas for the timing engine: catalog entities, schedule inputs and outputs."""
from __future__ import annotations

import re
from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import AfterValidator, BaseModel, Field, field_validator

ItemKind = Literal["med", "supplement", "food"]
Severity = Literal["hard", "soft"]
SlotLabel = Literal["morning", "afternoon", "evening", "night"]

_HHMM = re.compile(r"^([01]?\d|2[0-3]):([0-5]\d)$")


def _check_hhmm(value: str) -> str:
    if not _HHMM.match(value):
        raise ValueError(f"expected HH:MM (24-hour), got {value!r}")
    return value


ClockTime = Annotated[str, AfterValidator(_check_hhmm)]


class TimeWindow(BaseModel):
    start: ClockTime
    end: ClockTime


class TimingProfile(BaseModel):
    preferred_windows: List[TimeWindow] = Field(default_factory=list)
    with_food: bool = False
    empty_stomach_preferred: bool = False
    buffer_before_food_min: Optional[int] = None
    avoid_after_time: Optional[ClockTime] = None
    stimulant: bool = False
    flexible: bool = False


class ItemProfile(BaseModel):
    canonical_name: str
    display_name: str
    kind: ItemKind = "supplement"
    tags: List[str] = Field(default_factory=list)
    timing: TimingProfile = Field(default_factory=TimingProfile)


class ConstraintTarget(BaseModel):
    type: Literal["tag", "name"]
    value: str


class MinSeparationConstraint(BaseModel):
    type: Literal["MIN_SEPARATION_MINUTES"] = "MIN_SEPARATION_MINUTES"
    minutes: int = Field(gt=0)
    other: ConstraintTarget


class WithFoodRequiredConstraint(BaseModel):
    type: Literal["WITH_FOOD_REQUIRED"] = "WITH_FOOD_REQUIRED"


class EmptyStomachPreferredConstraint(BaseModel):
    type: Literal["EMPTY_STOMACH_PREFERRED"] = "EMPTY_STOMACH_PREFERRED"
    buffer_before_food_min: int = Field(ge=0)


class AvoidAfterTimeConstraint(BaseModel):
    type: Literal["AVOID_AFTER_TIME"] = "AVOID_AFTER_TIME"
    time: ClockTime


class WarnConstraint(BaseModel):
    type: Literal["WARN"] = "WARN"
    message: str


RuleConstraint = Annotated[
    Union[
        MinSeparationConstraint,
        WithFoodRequiredConstraint,
        EmptyStomachPreferredConstraint,
        AvoidAfterTimeConstraint,
        WarnConstraint,
    ],
    Field(discriminator="type"),
]


class InteractionRule(BaseModel):
    rule_key: str
    applies_to: List[str] = Field(default_factory=list)
    applies_if_tags: List[str] = Field(default_factory=list)
    conflicts_with_names: List[str] = Field(default_factory=list)
    conflicts_with_tags: List[str] = Field(default_factory=list)
    # Raw payload as stored by the catalog; parsed when rules are bound.
    constraint: Dict[str, Any]
    severity: Severity = "soft"
    confidence: int = Field(default=80, ge=0, le=100)
    rationale: str = ""
    references: List[str] = Field(default_factory=list)
    is_active: bool = True
    version: int = 1

    @field_validator("constraint", mode="before")
    @classmethod
    def _dump_constraint_models(cls, value: Any) -> Any:
        if isinstance(value, BaseModel):
            return value.model_dump()
        return value


class ScheduleInputItem(BaseModel):
    canonical_name: str
    display_name: str
    dose: Optional[str] = None
    frequency: Optional[str] = None


class MealTimes(BaseModel):
    breakfast: Optional[str] = None
    lunch: Optional[str] = None
    dinner: Optional[str] = None


class ScheduledItem(BaseModel):
    canonical_name: str
    display_name: str
    dose: Optional[str] = None
    scheduled_time: str
    slot_label: SlotLabel
    with_food: bool
    notes: List[str] = Field(default_factory=list)
    constraints_satisfied: List[str] = Field(default_factory=list)
    constraints_violated: List[str] = Field(default_factory=list)


class ScheduleWarning(BaseModel):
    rule_key: str
    severity: Severity
    confidence: int
    message: str
    affected_items: List[str]


class ScheduleOutput(BaseModel):
    date: str
    items: List[ScheduledItem]
    warnings: List[ScheduleWarning]
    overall_confidence: int
    disclaimer: str
