"""Derived chart and presentation views over the project collection.

Everything here is a pure function of its arguments. Point-in-time views read
progress from the update history, never from the live ``current_progress``
cache; only the summary figures and the presentation's progress slide use the
cache, since they describe the current state.
"""

from collections.abc import Iterable, Sequence
from decimal import Decimal
from typing import Optional

from app.schemas.report import (
    OwnerSlice,
    Presentation,
    ProgressTrend,
    ProjectProgress,
    ProjectSlide,
    Slide,
    SlideType,
    StatusSlice,
    SummaryStats,
    TrendPoint,
    TrendProject,
    UpdateCoverage,
)
from app.schemas.ui import UIPreferences
from app.shared.dates import (
    DateLike,
    Granularity,
    format_date,
    format_short_date,
    is_date_in_span,
    period_length,
    period_start,
    shift_days,
    to_iso,
)
from app.shared.numbers import round_half_up
from models.project import (
    STATUS_LABELS,
    UNASSIGNED_OWNER,
    Project,
    ProjectStatus,
    WeeklyUpdate,
    to_list,
)

DEFAULT_CHART_LIMIT = 8


def _truncate(text: str, width: int) -> str:
    return text[:width] + "..." if len(text) > width else text


# Update lookups
def update_for_date(updates: Iterable[WeeklyUpdate], value: DateLike) -> Optional[WeeklyUpdate]:
    """First update dated exactly ``value``."""
    target = to_iso(value)
    return next((u for u in updates if u.week_date == target), None)


def most_recent_on_or_before(
    updates: Iterable[WeeklyUpdate], cutoff: DateLike
) -> Optional[WeeklyUpdate]:
    """The latest update dated on or before ``cutoff``."""
    limit = to_iso(cutoff)
    best: Optional[WeeklyUpdate] = None
    for update in updates:
        if update.week_date <= limit and (best is None or update.week_date > best.week_date):
            best = update
    return best


def latest_update(updates: Iterable[WeeklyUpdate]) -> Optional[WeeklyUpdate]:
    """The update with the greatest date; the earliest inserted wins ties."""
    best: Optional[WeeklyUpdate] = None
    for update in updates:
        if best is None or update.week_date > best.week_date:
            best = update
    return best


def update_in_span(
    updates: Iterable[WeeklyUpdate], start: DateLike, days: int
) -> Optional[WeeklyUpdate]:
    return next((u for u in updates if is_date_in_span(u.week_date, start, days)), None)


def progress_as_of(project: Project, as_of: DateLike) -> tuple[int, Optional[str]]:
    """Progress and source date for a project at ``as_of`` (0 without history)."""
    update = update_for_date(project.weekly_updates, as_of) or most_recent_on_or_before(
        project.weekly_updates, as_of
    )
    if update is None:
        return 0, None
    return update.progress, update.week_date


# Chart views
def summary_stats(projects: Sequence[Project]) -> SummaryStats:
    counts = {status: 0 for status in ProjectStatus}
    for project in projects:
        counts[project.status] += 1

    total = len(projects)
    avg = 0
    if total:
        avg = round_half_up(Decimal(sum(p.current_progress for p in projects)) / Decimal(total))

    return SummaryStats(
        total=total,
        on_track=counts[ProjectStatus.on_track],
        at_risk=counts[ProjectStatus.at_risk],
        delayed=counts[ProjectStatus.delayed],
        completed=counts[ProjectStatus.completed],
        on_hold=counts[ProjectStatus.on_hold],
        avg_progress=avg,
    )


def status_distribution(projects: Iterable[Project]) -> list[StatusSlice]:
    """Status buckets with at least one project, in status order."""
    counts = {status: 0 for status in ProjectStatus}
    for project in projects:
        counts[project.status] += 1

    return [
        StatusSlice(status=status, label=STATUS_LABELS[status], count=count)
        for status, count in counts.items()
        if count > 0
    ]


def progress_by_project(
    projects: Sequence[Project],
    as_of: DateLike,
    granularity: Granularity = Granularity.day,
    limit: Optional[int] = DEFAULT_CHART_LIMIT,
) -> list[ProjectProgress]:
    """
    Progress of each project at ``as_of``.

    The update dated exactly ``as_of`` wins; otherwise the closest earlier one
    is used; projects with no update by then report 0. With week granularity
    ``as_of`` is first moved to its Monday.
    """
    cutoff = period_start(as_of, granularity)
    selected = projects[:limit] if limit is not None else projects

    result = []
    for project in selected:
        progress, source = progress_as_of(project, cutoff)
        result.append(
            ProjectProgress(
                project_id=project.id,
                name=_truncate(project.name, 15),
                full_name=project.name,
                progress=progress,
                update_date=source,
                status=project.status,
            )
        )
    return result


def owner_distribution(
    projects: Iterable[Project], limit: Optional[int] = DEFAULT_CHART_LIMIT
) -> list[OwnerSlice]:
    """
    Project counts per owner.

    Groups keep the order in which owners first appear and the list is cut
    after ``limit`` groups. It is not ranked by count.
    """
    counts: dict[str, int] = {}
    for project in projects:
        owner = project.owner or UNASSIGNED_OWNER
        counts[owner] = counts.get(owner, 0) + 1

    slices = [
        OwnerSlice(name=_truncate(owner, 12), full_name=owner, count=count)
        for owner, count in counts.items()
    ]
    return slices[:limit] if limit is not None else slices


def progress_trend(
    projects: Sequence[Project],
    end_date: DateLike,
    periods: int,
    granularity: Granularity = Granularity.week,
    limit: Optional[int] = DEFAULT_CHART_LIMIT,
) -> ProgressTrend:
    """
    Per-period progress series for the first ``limit`` projects.

    Buckets run oldest first and end with the period containing ``end_date``.
    A project without an update inside a bucket gets ``None`` there, so chart
    lines show gaps instead of drops to zero.
    """
    if periods < 1:
        raise ValueError("periods must be at least 1")

    span = period_length(granularity)
    last_start = period_start(end_date, granularity)
    selected = projects[:limit] if limit is not None else projects
    series = [
        TrendProject(key=f"project_{i}", project_id=p.id, name=p.name)
        for i, p in enumerate(selected)
    ]

    points = []
    for offset in range(periods - 1, -1, -1):
        start = shift_days(last_start, -offset * span)
        values = {}
        for entry, project in zip(series, selected):
            update = update_in_span(project.weekly_updates, start, span)
            values[entry.key] = update.progress if update else None
        points.append(TrendPoint(period_start=start, label=format_short_date(start), values=values))

    return ProgressTrend(projects=series, points=points)


def update_coverage(projects: Iterable[Project], value: DateLike) -> UpdateCoverage:
    """Split project ids by whether they have an update dated exactly ``value``."""
    target = to_iso(value)
    with_updates, without_updates = [], []
    for project in projects:
        if update_for_date(project.weekly_updates, target):
            with_updates.append(project.id)
        else:
            without_updates.append(project.id)
    return UpdateCoverage(date=target, with_updates=with_updates, without_updates=without_updates)


# Presentation
def presentation_projects(projects: Iterable[Project]) -> list[Project]:
    """Projects that get their own slide: included and not completed."""
    return [
        p for p in projects
        if p.included_in_presentation and p.status != ProjectStatus.completed
    ]


def project_slide(project: Project, item_limit: int = 4) -> ProjectSlide:
    update = latest_update(project.weekly_updates)
    if update is None:
        return ProjectSlide(
            project_id=project.id,
            name=project.name,
            description=project.description,
            owner=project.owner or UNASSIGNED_OWNER,
            status=project.status,
            status_label=project.status_label,
            progress=project.current_progress,
        )

    accomplishments = to_list(update.accomplishments)
    next_steps = to_list(update.next_steps)
    challenges = to_list(update.challenges)
    return ProjectSlide(
        project_id=project.id,
        name=project.name,
        description=project.description,
        owner=project.owner or UNASSIGNED_OWNER,
        status=project.status,
        status_label=project.status_label,
        progress=project.current_progress,
        latest_update_date=update.week_date,
        accomplishments=accomplishments[:item_limit],
        next_steps=next_steps[:item_limit],
        challenges=challenges[:item_limit],
        accomplishments_total=len(accomplishments),
        next_steps_total=len(next_steps),
        challenges_total=len(challenges),
        support_needed=update.support_needed,
    )


def build_presentation(
    projects: Sequence[Project],
    preferences: UIPreferences,
    as_of: DateLike,
    chart_limit: int = DEFAULT_CHART_LIMIT,
    item_limit: int = 4,
) -> Presentation:
    """Slide deck: title, summary, progress chart, one per project, closing."""
    chart = [
        ProjectProgress(
            project_id=p.id,
            name=p.name,
            full_name=p.name,
            progress=p.current_progress,
            status=p.status,
        )
        for p in projects[:chart_limit]
    ]

    slides = [
        Slide(
            type=SlideType.title,
            title=preferences.dashboard_title,
            subtitle=preferences.dashboard_subtitle,
            organization_name=preferences.organization_name,
            date_label=format_date(as_of),
        ),
        Slide(type=SlideType.summary, summary=summary_stats(projects)),
        Slide(type=SlideType.progress_chart, progress=chart),
    ]
    slides.extend(
        Slide(type=SlideType.project, project=project_slide(p, item_limit))
        for p in presentation_projects(projects)
    )
    slides.append(Slide(type=SlideType.thankyou, organization_name=preferences.organization_name))
    return Presentation(slides=slides)
