"""
Project and weekly update entities.
"""

import enum
from datetime import datetime
from typing import Any, Optional, Union

from pydantic import Field, field_validator

from app.shared.dates import to_iso

from .base import EntityModel, utcnow

# Legacy blobs store a newline separated text block, current ones a list
TextOrItems = Union[list[str], str]


class ProjectStatus(str, enum.Enum):
    on_track = "on_track"
    at_risk = "at_risk"
    delayed = "delayed"
    completed = "completed"
    on_hold = "on_hold"


class ProjectCategory(str, enum.Enum):
    project = "project"
    index = "index"
    idea = "idea"


STATUS_LABELS: dict[ProjectStatus, str] = {
    ProjectStatus.on_track: "On Track",
    ProjectStatus.at_risk: "At Risk",
    ProjectStatus.delayed: "Delayed",
    ProjectStatus.completed: "Completed",
    ProjectStatus.on_hold: "On Hold",
}

STATUS_SORT_ORDER: dict[ProjectStatus, int] = {
    ProjectStatus.on_track: 1,
    ProjectStatus.at_risk: 2,
    ProjectStatus.delayed: 3,
    ProjectStatus.on_hold: 4,
    ProjectStatus.completed: 5,
}

CATEGORY_LABELS: dict[ProjectCategory, str] = {
    ProjectCategory.project: "Project",
    ProjectCategory.index: "Index",
    ProjectCategory.idea: "Idea",
}

UNASSIGNED_OWNER = "Unassigned"


def to_list(value: Optional[TextOrItems]) -> list[str]:
    """Normalize a text block or item list to a list of non-blank items."""
    if value is None:
        return []
    if isinstance(value, str):
        return [line for line in value.split("\n") if line.strip()]
    return [item for item in value if item and item.strip()]


def to_text(value: Optional[TextOrItems]) -> str:
    """Inverse of :func:`to_list`. Text blocks pass through untouched."""
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    return "\n".join(item for item in value if item and item.strip())


def _iso_or_none(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    return to_iso(value)


class WeeklyUpdate(EntityModel):
    """A dated status snapshot owned by one project."""

    week_date: str
    accomplishments: TextOrItems = Field(default_factory=list)
    challenges: TextOrItems = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    progress: int = 0
    estimated_completion: Optional[str] = None
    support_needed: str = ""
    notes: str = ""

    @field_validator("week_date", mode="before")
    @classmethod
    def normalize_week_date(cls, v: Any) -> str:
        return to_iso(v)

    @field_validator("estimated_completion", mode="before")
    @classmethod
    def normalize_estimated_completion(cls, v: Any) -> Optional[str]:
        return _iso_or_none(v)

    @property
    def accomplishment_items(self) -> list[str]:
        return to_list(self.accomplishments)

    @property
    def challenge_items(self) -> list[str]:
        return to_list(self.challenges)


class Project(EntityModel):
    """
    A tracked unit of work with its update history.

    ``current_progress`` caches the progress of the last added or edited update.
    It is not recomputed when an update is deleted.
    """

    name: str = ""
    description: str = ""
    owner: str = ""
    status: ProjectStatus = ProjectStatus.on_track
    category: ProjectCategory = ProjectCategory.project
    start_date: Optional[str] = None
    target_end_date: Optional[str] = None
    current_progress: int = 0
    weekly_updates: list[WeeklyUpdate] = Field(default_factory=list)
    is_active_in_presentation: Optional[bool] = None
    display_order: Optional[int] = None
    updated_at: datetime = Field(default_factory=utcnow)

    @field_validator("start_date", "target_end_date", mode="before")
    @classmethod
    def normalize_dates(cls, v: Any) -> Optional[str]:
        return _iso_or_none(v)

    @field_validator("owner", "description", mode="before")
    @classmethod
    def none_to_empty(cls, v: Any) -> str:
        return "" if v is None else v

    @property
    def included_in_presentation(self) -> bool:
        return True if self.is_active_in_presentation is None else self.is_active_in_presentation

    @property
    def status_label(self) -> str:
        return STATUS_LABELS[self.status]

    @property
    def category_label(self) -> str:
        return CATEGORY_LABELS[self.category]
