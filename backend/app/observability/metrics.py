"""Metric helpers recorded as Opik traces."""
from __future__ import annotations

import logging
from typing import Any, Dict, Optional

from app.api.schemas.timing import ScheduleOutput
from app.observability.tracing import trace

logger = logging.getLogger(__name__)


def log_metric(name: str, value: float | int, metadata: Optional[Dict[str, Any]] = None) -> None:
    """Record a single metric value; a no-op when Opik is disabled."""
    payload: Dict[str, Any] = {"value": value}
    if metadata:
        payload.update(metadata)
    with trace(f"metric:{name}", metadata=payload):
        pass


def record_schedule_metrics(schedule: ScheduleOutput, latency_ms: float) -> None:
    metadata = {"date": schedule.date, "items": len(schedule.items)}
    log_metric("schedule.generate.latency_ms", round(latency_ms, 2), metadata=metadata)
    log_metric("schedule.generate.confidence", schedule.overall_confidence, metadata=metadata)
    log_metric("schedule.generate.warnings", len(schedule.warnings), metadata=metadata)
    logger.debug(
        "Schedule for %s: %d items, %d warnings, confidence %d",
        schedule.date,
        len(schedule.items),
        len(schedule.warnings),
        schedule.overall_confidence,
    )
