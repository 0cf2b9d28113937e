"""
Models package initialization.
"""

from .base import Base, EntityModel, generate_id, utcnow
from .project import (
    CATEGORY_LABELS,
    STATUS_LABELS,
    STATUS_SORT_ORDER,
    UNASSIGNED_OWNER,
    Project,
    ProjectCategory,
    ProjectStatus,
    WeeklyUpdate,
    to_list,
    to_text,
)
from .state_blob import StateBlob

__all__ = [
    "Base",
    "EntityModel",
    "generate_id",
    "utcnow",
    "Project",
    "WeeklyUpdate",
    "ProjectStatus",
    "ProjectCategory",
    "STATUS_LABELS",
    "STATUS_SORT_ORDER",
    "CATEGORY_LABELS",
    "UNASSIGNED_OWNER",
    "to_list",
    "to_text",
    "StateBlob",
]
