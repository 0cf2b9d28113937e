"""Project store with CRUD, reordering and per-date queries."""

import logging
import threading
from collections.abc import Callable, Iterable, Mapping, Sequence
from typing import Any, Optional, Union

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from app.database import StateStorage, as_persistence_error
from app.exceptions.project import (
    PersistenceError,
    ProjectNotFoundError,
    WeeklyUpdateNotFoundError,
)
from app.schemas.project import (
    ProjectBase,
    ProjectChanges,
    ProjectFilter,
    SortField,
    SortOrder,
    WeeklyUpdateCreate,
    WeeklyUpdateUpdate,
)
from app.shared.dates import DateLike, current_day, to_iso
from models.base import generate_id, utcnow
from models.project import STATUS_SORT_ORDER, Project, ProjectStatus, WeeklyUpdate

logger = logging.getLogger(__name__)

# Fields a partial update may explicitly clear by sending null
NULLABLE_PROJECT_FIELDS = {"target_end_date", "start_date", "is_active_in_presentation", "display_order"}
NULLABLE_UPDATE_FIELDS = {"estimated_completion"}


def _changed_fields(changes: BaseModel, nullable: set[str]) -> dict[str, Any]:
    data = changes.model_dump(exclude_unset=True)
    return {k: v for k, v in data.items() if v is not None or k in nullable}


def _rebuild(entity: Project, **changes: Any) -> Project:
    """Return a validated copy of a project with ``changes`` applied."""
    data = entity.model_dump(exclude={"weekly_updates"})
    data["weekly_updates"] = entity.weekly_updates
    data.update(changes)
    return Project.model_validate(data)


def _rebuild_update(update: WeeklyUpdate, **changes: Any) -> WeeklyUpdate:
    data = update.model_dump()
    data.update(changes)
    return WeeklyUpdate.model_validate(data)


class ProjectStore:
    """
    The persisted project collection and the selected reporting date.

    Every mutation runs under one lock, swaps in a new list (readers keep
    consistent snapshots) and then rewrites the whole state blob. A failed write
    is logged and recorded in ``last_persist_error``; the in-memory state stays.
    """

    def __init__(
        self,
        storage: StateStorage,
        storage_key: str = "ppp-projects-storage",
        seed: Optional[Callable[[], list[Project]]] = None,
    ):
        self.storage = storage
        self.storage_key = storage_key
        self.last_persist_error: Optional[PersistenceError] = None
        self._lock = threading.RLock()
        self._projects: list[Project] = []
        self._selected_date: str = current_day()
        self._load(seed)

    # Loading and persistence
    def _load(self, seed: Optional[Callable[[], list[Project]]]) -> None:
        try:
            blob = self.storage.load(self.storage_key)
        except Exception as e:
            error = as_persistence_error(e, self.storage_key, "load")
            logger.error("Failed to load project state, starting empty: %s", error.message)
            blob = None

        if blob is None:
            if seed is not None:
                self._projects = list(seed())
                logger.info(f"Seeded {len(self._projects)} demo projects")
            return

        if not isinstance(blob, Mapping):
            logger.error("Ignoring malformed project state under %s", self.storage_key)
            return

        # Blobs written by the browser client nest the state one level down
        state = blob.get("state") if isinstance(blob.get("state"), Mapping) else blob

        projects = []
        for raw in state.get("projects") or []:
            try:
                projects.append(Project.model_validate(raw))
            except PydanticValidationError as e:
                logger.warning("Skipping unreadable project entry: %s", e)
        self._projects = projects

        selected = state.get("selectedDate") or state.get("currentWeek")
        if selected:
            try:
                self._selected_date = to_iso(selected)
            except (TypeError, ValueError):
                logger.warning("Ignoring invalid selected date %r", selected)

        logger.debug(f"Loaded {len(projects)} projects from {self.storage_key}")

    def snapshot(self) -> dict[str, Any]:
        """The full state blob as written to storage."""
        with self._lock:
            return {
                "projects": [p.to_storage() for p in self._projects],
                "selectedDate": self._selected_date,
            }

    def _persist(self) -> None:
        try:
            self.storage.save(self.storage_key, self.snapshot())
            self.last_persist_error = None
        except Exception as e:
            self.last_persist_error = as_persistence_error(e, self.storage_key)
            logger.error("Failed to persist project state: %s", self.last_persist_error.message)

    # Readers
    @property
    def selected_date(self) -> str:
        return self._selected_date

    def list_projects(self) -> list[Project]:
        return list(self._projects)

    def get_project(self, project_id: str) -> Optional[Project]:
        return next((p for p in self._projects if p.id == project_id), None)

    def require_project(self, project_id: str) -> Project:
        project = self.get_project(project_id)
        if project is None:
            raise ProjectNotFoundError(project_id)
        return project

    def get_weekly_update(self, project_id: str, update_id: str) -> WeeklyUpdate:
        project = self.require_project(project_id)
        for update in project.weekly_updates:
            if update.id == update_id:
                return update
        raise WeeklyUpdateNotFoundError(project_id, update_id)

    def find_update_for_date(self, project_id: str, value: DateLike) -> Optional[WeeklyUpdate]:
        """First update of the project dated exactly ``value``, if any."""
        target = to_iso(value)
        project = self.require_project(project_id)
        return next((u for u in project.weekly_updates if u.week_date == target), None)

    def projects_for_date(self, value: DateLike) -> list[Project]:
        """Projects having at least one update dated exactly ``value``."""
        target = to_iso(value)
        return [
            p for p in self._projects if any(u.week_date == target for u in p.weekly_updates)
        ]

    def projects_for_selected_date(self) -> list[Project]:
        return self.projects_for_date(self._selected_date)

    # Project CRUD
    def add_project(self, data: Union[ProjectBase, Mapping[str, Any]]) -> Project:
        """Create a project with a fresh id and no updates. Names are not checked."""
        if not isinstance(data, ProjectBase):
            data = ProjectBase.model_validate(data)

        now = utcnow()
        project = Project(
            id=generate_id(),
            created_at=now,
            updated_at=now,
            weekly_updates=[],
            **data.model_dump(),
        )
        with self._lock:
            self._projects = [*self._projects, project]
            self._persist()

        logger.debug(f"Added project {project.id} ({project.name})")
        return project

    def update_project(
        self, project_id: str, changes: Union[ProjectChanges, Mapping[str, Any]]
    ) -> Project:
        """Merge the set fields of ``changes`` into a project."""
        if not isinstance(changes, ProjectChanges):
            changes = ProjectChanges.model_validate(changes)
        fields = _changed_fields(changes, NULLABLE_PROJECT_FIELDS)

        with self._lock:
            index = self._index_of(project_id)
            updated = _rebuild(self._projects[index], **fields, updated_at=utcnow())
            self._replace(index, updated)
            self._persist()

        logger.debug(f"Updated project {project_id}: {sorted(fields)}")
        return updated

    def delete_project(self, project_id: str) -> bool:
        """Remove a project with all its updates. Unknown ids are a no-op."""
        with self._lock:
            remaining = [p for p in self._projects if p.id != project_id]
            if len(remaining) == len(self._projects):
                return False
            self._projects = remaining
            self._persist()

        logger.debug(f"Deleted project {project_id}")
        return True

    # Weekly updates
    def add_weekly_update(
        self, project_id: str, data: Union[WeeklyUpdateCreate, Mapping[str, Any]]
    ) -> WeeklyUpdate:
        """
        Append an update and make its progress the project's current progress.

        Several updates for the same date are accepted; callers that need one
        update per date check :meth:`find_update_for_date` first.
        """
        if not isinstance(data, WeeklyUpdateCreate):
            data = WeeklyUpdateCreate.model_validate(data)

        update = WeeklyUpdate(id=generate_id(), created_at=utcnow(), **data.model_dump())
        with self._lock:
            index = self._index_of(project_id)
            project = self._projects[index]
            self._replace(
                index,
                _rebuild(
                    project,
                    weekly_updates=[*project.weekly_updates, update],
                    current_progress=update.progress,
                    updated_at=utcnow(),
                ),
            )
            self._persist()

        logger.debug(f"Added update {update.id} for {update.week_date} to project {project_id}")
        return update

    def update_weekly_update(
        self,
        project_id: str,
        update_id: str,
        changes: Union[WeeklyUpdateUpdate, Mapping[str, Any]],
    ) -> WeeklyUpdate:
        """Edit an update; a new progress value also refreshes current progress."""
        if not isinstance(changes, WeeklyUpdateUpdate):
            changes = WeeklyUpdateUpdate.model_validate(changes)
        fields = _changed_fields(changes, NULLABLE_UPDATE_FIELDS)

        with self._lock:
            index = self._index_of(project_id)
            project = self._projects[index]

            position = next(
                (i for i, u in enumerate(project.weekly_updates) if u.id == update_id), None
            )
            if position is None:
                raise WeeklyUpdateNotFoundError(project_id, update_id)

            edited = _rebuild_update(project.weekly_updates[position], **fields)
            updates = list(project.weekly_updates)
            updates[position] = edited

            project_changes: dict[str, Any] = {"weekly_updates": updates, "updated_at": utcnow()}
            if "progress" in fields:
                project_changes["current_progress"] = edited.progress

            self._replace(index, _rebuild(project, **project_changes))
            self._persist()

        logger.debug(f"Edited update {update_id} of project {project_id}")
        return edited

    def delete_weekly_update(self, project_id: str, update_id: str) -> bool:
        """
        Remove an update.

        ``current_progress`` keeps the last written value; it is a cache of the
        latest write, not a live aggregate over the remaining updates.
        """
        with self._lock:
            index = self._index_of(project_id)
            project = self._projects[index]
            remaining = [u for u in project.weekly_updates if u.id != update_id]
            if len(remaining) == len(project.weekly_updates):
                return False

            self._replace(index, _rebuild(project, weekly_updates=remaining, updated_at=utcnow()))
            self._persist()

        logger.debug(f"Deleted update {update_id} of project {project_id}")
        return True

    # Cursor and presentation
    def set_selected_date(self, value: DateLike) -> str:
        with self._lock:
            self._selected_date = to_iso(value)
            self._persist()
        return self._selected_date

    def toggle_presentation(self, project_id: str) -> bool:
        """Flip presentation membership (an unset flag counts as included)."""
        with self._lock:
            index = self._index_of(project_id)
            project = self._projects[index]
            included = not project.included_in_presentation
            self._replace(index, project.model_copy(update={"is_active_in_presentation": included}))
            self._persist()
        return included

    def reorder_projects(self, projects: Sequence[Project]) -> list[Project]:
        """
        Replace the collection with ``projects`` in the given order.

        ``display_order`` is stamped with each position. The list is taken as
        given: projects left out of it are dropped from the store.
        """
        with self._lock:
            self._projects = [
                p.model_copy(update={"display_order": i}) for i, p in enumerate(projects)
            ]
            self._persist()
            return list(self._projects)

    def reorder_by_ids(self, project_ids: Iterable[str]) -> list[Project]:
        with self._lock:
            ordered = [self.require_project(pid) for pid in project_ids]
            return self.reorder_projects(ordered)

    # Internal helpers
    def _index_of(self, project_id: str) -> int:
        for i, project in enumerate(self._projects):
            if project.id == project_id:
                return i
        raise ProjectNotFoundError(project_id)

    def _replace(self, index: int, project: Project) -> None:
        projects = list(self._projects)
        projects[index] = project
        self._projects = projects


def filter_projects(projects: Iterable[Project], filters: Optional[ProjectFilter] = None) -> list[Project]:
    """Search, filter and sort projects for list views."""
    result = list(projects)
    if filters is None:
        return result

    if not filters.include_completed:
        result = [p for p in result if p.status != ProjectStatus.completed]

    if filters.search:
        query = filters.search.lower()
        result = [
            p
            for p in result
            if query in p.name.lower()
            or query in p.description.lower()
            or query in p.owner.lower()
        ]

    if filters.status:
        result = [p for p in result if p.status == filters.status]

    if filters.sort_by:
        reverse = filters.sort_order == SortOrder.desc
        result.sort(key=_sort_key(filters.sort_by), reverse=reverse)

    return result


def _sort_key(field: SortField) -> Callable[[Project], Any]:
    if field == SortField.name:
        return lambda p: p.name.casefold()
    if field == SortField.progress:
        return lambda p: p.current_progress
    if field == SortField.date:
        # Projects without a target date sort after every dated one
        return lambda p: (p.target_end_date is None, p.target_end_date or "")
    return lambda p: STATUS_SORT_ORDER[p.status]
