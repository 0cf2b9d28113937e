# app/domains/ui/service.py
"""UI preference store persisted under its own storage key."""

import logging
import threading
from collections.abc import Mapping
from typing import Any, Optional, Union

from pydantic import ValidationError as PydanticValidationError

from app.database import StateStorage, as_persistence_error
from app.exceptions.project import PersistenceError
from app.schemas.ui import UIPreferences, UIPreferencesUpdate

logger = logging.getLogger(__name__)


class UIStore:
    """Dashboard labels and display toggles."""

    def __init__(self, storage: StateStorage, storage_key: str = "ppp-ui-storage"):
        """Initialize the store and load saved preferences, if any."""
        self.storage = storage
        self.storage_key = storage_key
        self.last_persist_error: Optional[PersistenceError] = None
        self._lock = threading.RLock()
        self._preferences = self._load()

    def _load(self) -> UIPreferences:
        try:
            blob = self.storage.load(self.storage_key)
        except Exception as e:
            error = as_persistence_error(e, self.storage_key, "load")
            logger.error("Failed to load UI preferences, using defaults: %s", error.message)
            return UIPreferences()

        if not blob:
            return UIPreferences()

        if not isinstance(blob, Mapping):
            logger.error("Ignoring malformed UI preferences under %s", self.storage_key)
            return UIPreferences()

        state = blob.get("state") if isinstance(blob.get("state"), Mapping) else blob
        try:
            return UIPreferences.model_validate(state)
        except PydanticValidationError as e:
            logger.warning("Ignoring unreadable UI preferences: %s", e)
            return UIPreferences()

    def _persist(self) -> None:
        try:
            self.storage.save(self.storage_key, self._preferences.model_dump(by_alias=True))
            self.last_persist_error = None
        except Exception as e:
            self.last_persist_error = as_persistence_error(e, self.storage_key)
            logger.error("Failed to persist UI preferences: %s", self.last_persist_error.message)

    @property
    def preferences(self) -> UIPreferences:
        return self._preferences

    def update(self, changes: Union[UIPreferencesUpdate, Mapping[str, Any]]) -> UIPreferences:
        """
        Apply the set fields of ``changes``.

        Args:
            changes: Partial preferences; unset and null fields are ignored.

        Returns:
            UIPreferences: The preferences after the change.
        """
        if not isinstance(changes, UIPreferencesUpdate):
            changes = UIPreferencesUpdate.model_validate(changes)
        fields = changes.model_dump(exclude_unset=True, exclude_none=True)

        with self._lock:
            self._preferences = self._preferences.model_copy(update=fields)
            self._persist()
        return self._preferences

    def toggle_dark_mode(self) -> bool:
        with self._lock:
            value = not self._preferences.dark_mode
            self.update({"dark_mode": value})
        return value

    def set_dark_mode(self, value: bool) -> UIPreferences:
        return self.update({"dark_mode": value})

    def set_dashboard_title(self, title: str) -> UIPreferences:
        return self.update({"dashboard_title": title})

    def set_dashboard_subtitle(self, subtitle: str) -> UIPreferences:
        return self.update({"dashboard_subtitle": subtitle})

    def set_organization_name(self, name: str) -> UIPreferences:
        return self.update({"organization_name": name})

    def set_show_completed_projects(self, show: bool) -> UIPreferences:
        return self.update({"show_completed_projects": show})
