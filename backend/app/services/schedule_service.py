"""Schedule generation for API callers: catalog assembly around the pure engine."""
from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import List

from sqlalchemy.orm import Session

from app.api.schemas.schedule import ScheduleGenerateRequest
from app.api.schemas.timing import ScheduleOutput
from app.core.config import Settings, get_settings
from app.observability.tracing import trace
from app.services.catalog_service import Catalog, builtin_catalog, load_catalog
from app.services.timing import generate_schedule
from app.services.timing.phrasing import confidence_phrasing, item_explanation

logger = logging.getLogger(__name__)


@dataclass
class SchedulePresentation:
    confidence_label: str
    summary: str
    explanations: List[str]


def assemble_catalog(db: Session, payload: ScheduleGenerateRequest, settings: Settings | None = None) -> Catalog:
    """
    Database catalog first, then built-in data (if enabled), then inline additions.

    The database wins over built-ins for profiles; for rules the highest version of a key wins
    and a key retired in the database stays retired.
    """
    settings = settings or get_settings()
    canonical_names = [item.canonical_name for item in payload.items]
    catalog = load_catalog(db, canonical_names)
    if settings.timing_include_builtin_catalog:
        builtin = builtin_catalog()
        catalog = catalog.extend(builtin.profiles, builtin.rules)
    return catalog.extend(payload.profiles, payload.rules)


def build_schedule(db: Session, payload: ScheduleGenerateRequest, settings: Settings | None = None) -> ScheduleOutput:
    settings = settings or get_settings()
    schedule_date = payload.date or date.today().isoformat()
    metadata = {
        "date": schedule_date,
        "items": len(payload.items),
        "wake_time": payload.wake_time,
    }
    with trace("schedule.generate", metadata=metadata) as schedule_trace:
        catalog = assemble_catalog(db, payload, settings)
        schedule = generate_schedule(
            schedule_date,
            payload.items,
            catalog.profiles,
            catalog.rules,
            wake_time=payload.wake_time or settings.timing_default_wake_time,
            meals=payload.meals,
            max_passes=settings.timing_max_passes,
        )
        if schedule_trace:
            schedule_trace.update(
                metadata={
                    "overall_confidence": schedule.overall_confidence,
                    "warning_rule_keys": [warning.rule_key for warning in schedule.warnings][:10],
                }
            )

    logger.info(
        "Generated schedule for %s: %d items, %d warnings, confidence %d",
        schedule.date,
        len(schedule.items),
        len(schedule.warnings),
        schedule.overall_confidence,
    )
    return schedule


def present_schedule(schedule: ScheduleOutput) -> SchedulePresentation:
    phrasing = confidence_phrasing(schedule.overall_confidence)
    return SchedulePresentation(
        confidence_label=phrasing.label,
        summary=phrasing.sentence_starter,
        explanations=[item_explanation(item, item.notes) for item in schedule.items],
    )
