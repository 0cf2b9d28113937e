"""
Project API controller with FastAPI endpoints.

Handlers that write to storage are plain functions, so FastAPI runs them in its
threadpool and blocking commits stay off the event loop.
"""

import logging
from datetime import date
from typing import Optional

from fastapi import APIRouter, Body, Depends, Path, Query

from app.core.config import settings
from app.core.dependencies import get_project_store
from app.domains.project.service import ProjectStore, filter_projects
from app.exceptions.project import DuplicateWeeklyUpdateError, WeeklyUpdateNotFoundError
from app.schemas.base import ResponseSchema
from app.schemas.project import (
    ProjectCreate,
    ProjectFilter,
    ProjectUpdate,
    ReorderRequest,
    SelectedDateUpdate,
    SortField,
    SortOrder,
    WeeklyUpdateCreate,
    WeeklyUpdateUpdate,
)
from app.shared.dates import Granularity, recent_options
from models.project import ProjectStatus

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/projects",
    tags=["projects"],
)


@router.get("/", response_model=ResponseSchema)
async def get_projects(
    search: Optional[str] = Query(None),
    status: Optional[ProjectStatus] = Query(None),
    include_completed: bool = Query(True),
    sort_by: Optional[SortField] = Query(None),
    sort_order: SortOrder = Query(SortOrder.asc),
    store: ProjectStore = Depends(get_project_store),
):
    """List projects in display order, optionally filtered and sorted."""

    filters = ProjectFilter(
        search=search,
        status=status,
        include_completed=include_completed,
        sort_by=sort_by,
        sort_order=sort_order,
    )
    projects = filter_projects(store.list_projects(), filters)

    return ResponseSchema(
        status="success",
        message="Projects retrieved successfully",
        data=[p.to_storage() for p in projects],
    )


@router.post("/", response_model=ResponseSchema, status_code=201)
def create_project(
    project_data: ProjectCreate,
    store: ProjectStore = Depends(get_project_store),
):
    """Create a new project."""

    project = store.add_project(project_data)

    return ResponseSchema(
        status="success",
        message="Project created successfully",
        data=project.to_storage(),
    )


@router.get("/selected-date", response_model=ResponseSchema)
async def get_selected_date(store: ProjectStore = Depends(get_project_store)):
    """Get the reporting date cursor."""

    return ResponseSchema(
        status="success",
        message="Selected date retrieved successfully",
        data={"selectedDate": store.selected_date},
    )


@router.put("/selected-date", response_model=ResponseSchema)
def set_selected_date(
    payload: SelectedDateUpdate,
    store: ProjectStore = Depends(get_project_store),
):
    """Move the reporting date cursor."""

    selected = store.set_selected_date(payload.selected_date)

    return ResponseSchema(
        status="success",
        message="Selected date updated successfully",
        data={"selectedDate": selected},
    )


@router.get("/date-options", response_model=ResponseSchema)
async def get_date_options(
    unit: Granularity = Query(Granularity.week),
    count: int = Query(settings.recent_options_count, ge=1, le=104),
):
    """Recent dates or weeks for date pickers, most recent first."""

    options = recent_options(count, unit)

    return ResponseSchema(
        status="success",
        message="Date options retrieved successfully",
        data=[option._asdict() for option in options],
    )


@router.get("/by-date/{value}", response_model=ResponseSchema)
async def get_projects_for_date(
    value: date = Path(..., description="Update date (YYYY-MM-DD)"),
    store: ProjectStore = Depends(get_project_store),
):
    """Projects with an update dated exactly ``value``."""

    projects = store.projects_for_date(value)

    return ResponseSchema(
        status="success",
        message="Projects retrieved successfully",
        data=[p.to_storage() for p in projects],
    )


@router.put("/reorder", response_model=ResponseSchema)
def reorder_projects(
    payload: ReorderRequest,
    store: ProjectStore = Depends(get_project_store),
):
    """Set the manual display order."""

    projects = store.reorder_by_ids(payload.project_ids)

    return ResponseSchema(
        status="success",
        message="Projects reordered successfully",
        data=[p.to_storage() for p in projects],
    )


@router.get("/{project_id}", response_model=ResponseSchema)
async def get_project(
    project_id: str = Path(..., description="Project ID"),
    store: ProjectStore = Depends(get_project_store),
):
    """Get a specific project by ID."""

    project = store.require_project(project_id)

    return ResponseSchema(
        status="success",
        message="Project retrieved successfully",
        data=project.to_storage(),
    )


@router.put("/{project_id}", response_model=ResponseSchema)
def update_project(
    project_id: str = Path(..., description="Project ID"),
    project_data: ProjectUpdate = Body(...),
    store: ProjectStore = Depends(get_project_store),
):
    """Update a specific project."""

    project = store.update_project(project_id, project_data)

    return ResponseSchema(
        status="success",
        message="Project updated successfully",
        data=project.to_storage(),
    )


@router.delete("/{project_id}", response_model=ResponseSchema)
def delete_project(
    project_id: str = Path(..., description="Project ID"),
    store: ProjectStore = Depends(get_project_store),
):
    """Delete a project and its updates. Deleting twice is not an error."""

    deleted = store.delete_project(project_id)

    return ResponseSchema(
        status="success",
        message="Project deleted successfully" if deleted else "Project already absent",
        data={"deleted": deleted},
    )


@router.post("/{project_id}/presentation", response_model=ResponseSchema)
def toggle_presentation(
    project_id: str = Path(..., description="Project ID"),
    store: ProjectStore = Depends(get_project_store),
):
    """Include or exclude a project from presentation mode."""

    included = store.toggle_presentation(project_id)

    return ResponseSchema(
        status="success",
        message="Presentation membership updated",
        data={"isActiveInPresentation": included},
    )


@router.get("/{project_id}/updates", response_model=ResponseSchema)
async def get_weekly_updates(
    project_id: str = Path(..., description="Project ID"),
    store: ProjectStore = Depends(get_project_store),
):
    """All updates of a project, newest date first."""

    project = store.require_project(project_id)
    updates = sorted(project.weekly_updates, key=lambda u: u.week_date, reverse=True)

    return ResponseSchema(
        status="success",
        message="Weekly updates retrieved successfully",
        data=[u.to_storage() for u in updates],
    )


@router.post("/{project_id}/updates", response_model=ResponseSchema, status_code=201)
def add_weekly_update(
    project_id: str = Path(..., description="Project ID"),
    update_data: WeeklyUpdateCreate = Body(...),
    store: ProjectStore = Depends(get_project_store),
):
    """Add an update; one update per project and date is allowed."""

    if store.find_update_for_date(project_id, update_data.week_date):
        raise DuplicateWeeklyUpdateError(project_id, update_data.week_date.isoformat())

    update = store.add_weekly_update(project_id, update_data)

    return ResponseSchema(
        status="success",
        message="Weekly update added successfully",
        data=update.to_storage(),
    )


@router.put("/{project_id}/updates/{update_id}", response_model=ResponseSchema)
def update_weekly_update(
    project_id: str = Path(..., description="Project ID"),
    update_id: str = Path(..., description="Weekly update ID"),
    changes: WeeklyUpdateUpdate = Body(...),
    store: ProjectStore = Depends(get_project_store),
):
    """Edit an update."""

    if changes.week_date is not None:
        existing = store.find_update_for_date(project_id, changes.week_date)
        if existing and existing.id != update_id:
            raise DuplicateWeeklyUpdateError(project_id, changes.week_date.isoformat())

    update = store.update_weekly_update(project_id, update_id, changes)

    return ResponseSchema(
        status="success",
        message="Weekly update updated successfully",
        data=update.to_storage(),
    )


@router.delete("/{project_id}/updates/{update_id}", response_model=ResponseSchema)
def delete_weekly_update(
    project_id: str = Path(..., description="Project ID"),
    update_id: str = Path(..., description="Weekly update ID"),
    store: ProjectStore = Depends(get_project_store),
):
    """Delete an update. The project's current progress is left unchanged."""

    if not store.delete_weekly_update(project_id, update_id):
        raise WeeklyUpdateNotFoundError(project_id, update_id)

    return ResponseSchema(
        status="success",
        message="Weekly update deleted successfully",
        data=None,
    )
