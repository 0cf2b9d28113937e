"""Project store exceptions."""

from typing import Any

from .base import BaseAppException, NotFoundError


class ProjectNotFoundError(NotFoundError):
    """Raised when a project id does not exist in the store."""

    def __init__(self, project_id: str | None = None, message: str = "Project not found"):
        super().__init__(
            message=message,
            details={"project_id": project_id},
            error_code="PROJECT_NOT_FOUND",
        )


class WeeklyUpdateNotFoundError(NotFoundError):
    """Raised when a weekly update id does not exist on the project."""

    def __init__(
        self,
        project_id: str | None = None,
        update_id: str | None = None,
        message: str = "Weekly update not found",
    ):
        super().__init__(
            message=message,
            details={"project_id": project_id, "update_id": update_id},
            error_code="WEEKLY_UPDATE_NOT_FOUND",
        )


class DuplicateWeeklyUpdateError(BaseAppException):
    """Raised when a project already has an update for the requested date."""

    def __init__(self, project_id: str, week_date: str):
        super().__init__(
            message=f"Project already has an update for {week_date}",
            status_code=409,
            error_code="DUPLICATE_WEEKLY_UPDATE",
            details={"project_id": project_id, "week_date": week_date},
        )


class PersistenceError(BaseAppException):
    """Raised by a storage backend when a state blob cannot be read or written."""

    def __init__(
        self,
        message: str = "Failed to persist state",
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message=message,
            status_code=500,
            error_code="PERSISTENCE_ERROR",
            details=details,
        )
