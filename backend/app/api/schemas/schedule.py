"""Request and response payloads for the schedule endpoints."""
from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from app.api.schemas.timing import InteractionRule, ItemProfile, MealTimes, ScheduleInputItem, ScheduleOutput


class ScheduleGenerateRequest(BaseModel):
    date: Optional[str] = Field(default=None, description="Calendar date (YYYY-MM-DD); defaults to today")
    items: List[ScheduleInputItem] = Field(default_factory=list)
    wake_time: Optional[str] = None
    meals: Optional[MealTimes] = None
    profiles: List[ItemProfile] = Field(default_factory=list)
    rules: List[InteractionRule] = Field(default_factory=list)


class ScheduleGenerateResponse(BaseModel):
    schedule: ScheduleOutput
    confidence_label: str
    summary: str
    explanations: List[str]
    request_id: str


class CatalogResponse(BaseModel):
    profiles: List[ItemProfile]
    rules: List[InteractionRule]
    request_id: str
