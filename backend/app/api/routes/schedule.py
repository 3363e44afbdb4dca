"""Schedule generation endpoints."""
from __future__ import annotations

from time import perf_counter

from fastapi import APIRouter, Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.api.schemas.schedule import CatalogResponse, ScheduleGenerateRequest, ScheduleGenerateResponse
from app.core.config import get_settings
from app.db.deps import get_db
from app.observability.metrics import record_schedule_metrics
from app.services.catalog_service import builtin_catalog, load_catalog
from app.services.schedule_service import build_schedule, present_schedule
from app.services.timing import ScheduleInputError

router = APIRouter()


@router.post("/schedule/generate", response_model=ScheduleGenerateResponse, tags=["schedule"])
def schedule_generate(
    request: Request,
    payload: ScheduleGenerateRequest,
    db: Session = Depends(get_db),
) -> ScheduleGenerateResponse:
    """Compute a single day's dosing timetable for the submitted items."""
    request_id = getattr(request.state, "request_id", None)
    start = perf_counter()
    try:
        schedule = build_schedule(db, payload)
    except ScheduleInputError as exc:
        raise HTTPException(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=str(exc)) from exc

    record_schedule_metrics(schedule, (perf_counter() - start) * 1000)
    presentation = present_schedule(schedule)
    return ScheduleGenerateResponse(
        schedule=schedule,
        confidence_label=presentation.confidence_label,
        summary=presentation.summary,
        explanations=presentation.explanations,
        request_id=request_id or "",
    )


@router.get("/schedule/catalog", response_model=CatalogResponse, tags=["schedule"])
def schedule_catalog(request: Request, db: Session = Depends(get_db)) -> CatalogResponse:
    """Show the profiles and active rules the scheduler would use."""
    request_id = getattr(request.state, "request_id", None)
    catalog = load_catalog(db)
    if get_settings().timing_include_builtin_catalog:
        builtin = builtin_catalog()
        catalog = catalog.extend(builtin.profiles, builtin.rules)
    return CatalogResponse(profiles=catalog.profiles, rules=catalog.rules, request_id=request_id or "")
