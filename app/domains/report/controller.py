"""Report API controller serving chart-ready series and the presentation deck."""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from app.core.config import settings
from app.core.dependencies import get_project_store, get_ui_store
from app.domains.project.service import ProjectStore
from app.domains.report import service as reports
from app.domains.ui.service import UIStore
from app.schemas.base import ResponseSchema
from app.shared.dates import DateLike, Granularity, TrendRange

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/reports",
    tags=["reports"],
)


def _as_of(value: Optional[date], store: ProjectStore) -> DateLike:
    return value if value is not None else store.selected_date


@router.get("/summary", response_model=ResponseSchema)
async def get_summary(store: ProjectStore = Depends(get_project_store)):
    """Totals per status and average current progress."""

    stats = reports.summary_stats(store.list_projects())

    return ResponseSchema(
        status="success",
        message="Summary statistics retrieved successfully",
        data=stats.model_dump(by_alias=True),
    )


@router.get("/status", response_model=ResponseSchema)
async def get_status_distribution(store: ProjectStore = Depends(get_project_store)):
    """Non-empty status buckets."""

    slices = reports.status_distribution(store.list_projects())

    return ResponseSchema(
        status="success",
        message="Status distribution retrieved successfully",
        data=[s.model_dump(mode="json", by_alias=True) for s in slices],
    )


@router.get("/progress", response_model=ResponseSchema)
async def get_progress_by_project(
    as_of: Optional[date] = Query(None, alias="date"),
    granularity: Granularity = Query(Granularity.day),
    store: ProjectStore = Depends(get_project_store),
):
    """Progress per project at a date (the selected date by default)."""

    items = reports.progress_by_project(
        store.list_projects(),
        _as_of(as_of, store),
        granularity=granularity,
        limit=settings.chart_project_limit,
    )

    return ResponseSchema(
        status="success",
        message="Project progress retrieved successfully",
        data=[i.model_dump(mode="json", by_alias=True) for i in items],
    )


@router.get("/owners", response_model=ResponseSchema)
async def get_owner_distribution(store: ProjectStore = Depends(get_project_store)):
    """Project counts per owner."""

    slices = reports.owner_distribution(store.list_projects(), limit=settings.owner_chart_limit)

    return ResponseSchema(
        status="success",
        message="Owner distribution retrieved successfully",
        data=[s.model_dump(by_alias=True) for s in slices],
    )


@router.get("/trend", response_model=ResponseSchema)
async def get_progress_trend(
    range_: TrendRange = Query(TrendRange.month, alias="range"),
    end_date: Optional[date] = Query(None, alias="date"),
    granularity: Granularity = Query(Granularity.week),
    store: ProjectStore = Depends(get_project_store),
):
    """Progress series over the chosen window, with nulls for missing periods."""

    trend = reports.progress_trend(
        store.list_projects(),
        _as_of(end_date, store),
        range_.periods,
        granularity=granularity,
        limit=settings.chart_project_limit,
    )

    return ResponseSchema(
        status="success",
        message="Progress trend retrieved successfully",
        data=trend.model_dump(by_alias=True),
    )


@router.get("/coverage", response_model=ResponseSchema)
async def get_update_coverage(
    as_of: Optional[date] = Query(None, alias="date"),
    store: ProjectStore = Depends(get_project_store),
):
    """Which projects have, and have not, reported on a date."""

    coverage = reports.update_coverage(store.list_projects(), _as_of(as_of, store))

    return ResponseSchema(
        status="success",
        message="Update coverage retrieved successfully",
        data=coverage.model_dump(by_alias=True),
    )


@router.get("/presentation", response_model=ResponseSchema)
async def get_presentation(
    store: ProjectStore = Depends(get_project_store),
    ui_store: UIStore = Depends(get_ui_store),
):
    """The presentation slide deck."""

    deck = reports.build_presentation(
        store.list_projects(),
        ui_store.preferences,
        store.selected_date,
        chart_limit=settings.chart_project_limit,
        item_limit=settings.presentation_item_limit,
    )

    return ResponseSchema(
        status="success",
        message="Presentation built successfully",
        data={
            "slides": [s.model_dump(mode="json", by_alias=True) for s in deck.slides],
            "totalSlides": deck.total_slides,
        },
    )
