"""Project and weekly update schemas for request/response serialization."""

from __future__ import annotations

from datetime import date
from enum import Enum
from typing import Any, Optional

from pydantic import Field, field_validator

from models.project import ProjectCategory, ProjectStatus, TextOrItems

from .base import BaseSchema


def _blank_to_none(v: Any) -> Any:
    if isinstance(v, str) and not v.strip():
        return None
    return v


class ProjectBase(BaseSchema):
    """
    Project fields as the store accepts them.

    The name is not checked here; request schemas reject blank names.
    """

    name: str = Field(default="", max_length=255)
    description: str = ""
    owner: str = ""
    status: ProjectStatus = ProjectStatus.on_track
    category: ProjectCategory = ProjectCategory.project
    start_date: Optional[date] = None
    target_end_date: Optional[date] = None
    current_progress: int = Field(default=0, ge=0, le=100)
    is_active_in_presentation: Optional[bool] = None
    display_order: Optional[int] = None

    @field_validator("start_date", "target_end_date", mode="before")
    @classmethod
    def blank_dates(cls, v: Any) -> Any:
        return _blank_to_none(v)


class ProjectCreate(ProjectBase):
    """Schema for creating a new project."""

    name: str = Field(..., min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: str) -> str:
        """Validate and clean the project name."""
        if isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or only whitespace")
        return v


class ProjectChanges(BaseSchema):
    """Partial project fields as the store accepts them. Only set fields are merged."""

    name: Optional[str] = Field(None, max_length=255)
    description: Optional[str] = None
    owner: Optional[str] = None
    status: Optional[ProjectStatus] = None
    category: Optional[ProjectCategory] = None
    start_date: Optional[date] = None
    target_end_date: Optional[date] = None
    current_progress: Optional[int] = Field(None, ge=0, le=100)
    is_active_in_presentation: Optional[bool] = None
    display_order: Optional[int] = None

    @field_validator("start_date", "target_end_date", mode="before")
    @classmethod
    def blank_dates(cls, v: Any) -> Any:
        return _blank_to_none(v)


class ProjectUpdate(ProjectChanges):
    """Schema for updating a project."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)

    @field_validator("name")
    @classmethod
    def validate_name(cls, v: Optional[str]) -> Optional[str]:
        """Validate and clean the project name."""
        if v is not None and isinstance(v, str):
            v = v.strip()
            if not v:
                raise ValueError("Project name cannot be empty or only whitespace")
        return v


class WeeklyUpdateCreate(BaseSchema):
    """Schema for adding a weekly update to a project."""

    week_date: date
    accomplishments: TextOrItems = Field(default_factory=list)
    challenges: TextOrItems = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    progress: int = Field(..., ge=0, le=100)
    estimated_completion: Optional[date] = None
    support_needed: str = ""
    notes: str = ""

    @field_validator("estimated_completion", mode="before")
    @classmethod
    def blank_estimated_completion(cls, v: Any) -> Any:
        return _blank_to_none(v)


class WeeklyUpdateUpdate(BaseSchema):
    """Schema for editing a weekly update."""

    week_date: Optional[date] = None
    accomplishments: Optional[TextOrItems] = None
    challenges: Optional[TextOrItems] = None
    next_steps: Optional[list[str]] = None
    progress: Optional[int] = Field(None, ge=0, le=100)
    estimated_completion: Optional[date] = None
    support_needed: Optional[str] = None
    notes: Optional[str] = None

    @field_validator("estimated_completion", mode="before")
    @classmethod
    def blank_estimated_completion(cls, v: Any) -> Any:
        return _blank_to_none(v)


class SortField(str, Enum):
    name = "name"
    progress = "progress"
    date = "date"
    status = "status"


class SortOrder(str, Enum):
    asc = "asc"
    desc = "desc"


class ProjectFilter(BaseSchema):
    """Schema for filtering and sorting the project list."""

    search: Optional[str] = None
    status: Optional[ProjectStatus] = None
    include_completed: bool = True
    sort_by: Optional[SortField] = None
    sort_order: SortOrder = SortOrder.asc


class ReorderRequest(BaseSchema):
    """New display order as a list of project ids."""

    project_ids: list[str]


class SelectedDateUpdate(BaseSchema):
    """Schema for moving the reporting date cursor."""

    selected_date: date
