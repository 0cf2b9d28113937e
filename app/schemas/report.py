"""Chart and presentation schemas produced by the report views."""

from enum import Enum
from typing import Optional

from pydantic import Field

from models.project import ProjectStatus

from .base import BaseSchema


class SummaryStats(BaseSchema):
    """Portfolio totals."""

    total: int
    on_track: int
    at_risk: int
    delayed: int
    completed: int
    on_hold: int
    avg_progress: int


class StatusSlice(BaseSchema):
    status: ProjectStatus
    label: str
    count: int


class ProjectProgress(BaseSchema):
    """Progress of one project at a point in time."""

    project_id: str
    name: str
    full_name: str
    progress: int
    update_date: Optional[str] = None
    status: Optional[ProjectStatus] = None


class OwnerSlice(BaseSchema):
    name: str
    full_name: str
    count: int


class TrendProject(BaseSchema):
    key: str
    project_id: str
    name: str


class TrendPoint(BaseSchema):
    """One period bucket; ``values`` maps series key to progress or None."""

    period_start: str
    label: str
    values: dict[str, Optional[int]] = Field(default_factory=dict)


class ProgressTrend(BaseSchema):
    projects: list[TrendProject]
    points: list[TrendPoint]

    def series(self, project_id: str) -> list[Optional[int]]:
        """Chronological values for one project. Raises ``KeyError`` for an unknown id."""
        key = next((p.key for p in self.projects if p.project_id == project_id), None)
        if key is None:
            raise KeyError(project_id)
        return [point.values.get(key) for point in self.points]


class UpdateCoverage(BaseSchema):
    date: str
    with_updates: list[str]
    without_updates: list[str]


class SlideType(str, Enum):
    title = "title"
    summary = "summary"
    progress_chart = "progress-chart"
    project = "project"
    thankyou = "thankyou"


class ProjectSlide(BaseSchema):
    project_id: str
    name: str
    description: str
    owner: str
    status: ProjectStatus
    status_label: str
    progress: int
    latest_update_date: Optional[str] = None
    accomplishments: list[str] = Field(default_factory=list)
    next_steps: list[str] = Field(default_factory=list)
    challenges: list[str] = Field(default_factory=list)
    # Item counts before the per-slide cut, for "+N more" hints
    accomplishments_total: int = 0
    next_steps_total: int = 0
    challenges_total: int = 0
    support_needed: str = ""


class Slide(BaseSchema):
    type: SlideType
    title: Optional[str] = None
    subtitle: Optional[str] = None
    organization_name: Optional[str] = None
    date_label: Optional[str] = None
    summary: Optional[SummaryStats] = None
    progress: Optional[list[ProjectProgress]] = None
    project: Optional[ProjectSlide] = None


class Presentation(BaseSchema):
    slides: list[Slide]

    @property
    def total_slides(self) -> int:
        return len(self.slides)
