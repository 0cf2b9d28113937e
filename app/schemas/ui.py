"""UI preference schemas."""

from typing import Optional

from pydantic import Field

from .base import BaseSchema


class UIPreferences(BaseSchema):
    """Dashboard labels and display toggles."""

    dark_mode: bool = Field(default=False, description="Dark theme enabled")
    dashboard_title: str = Field(default="Project Progress Presentation")
    dashboard_subtitle: str = Field(default="Weekly Report")
    organization_name: str = Field(default="")
    show_completed_projects: bool = Field(default=True)


class UIPreferencesUpdate(BaseSchema):
    """Schema for updating preferences (all fields optional)."""

    dark_mode: Optional[bool] = None
    dashboard_title: Optional[str] = Field(None, max_length=255)
    dashboard_subtitle: Optional[str] = Field(None, max_length=255)
    organization_name: Optional[str] = Field(None, max_length=255)
    show_completed_projects: Optional[bool] = None
