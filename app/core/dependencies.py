# app/core/dependencies.py
import logging
from functools import lru_cache

from app.core.config import settings
from app.database import StateStorage, create_storage
from app.domains.project.demo import generate_demo_projects
from app.domains.project.service import ProjectStore
from app.domains.ui.service import UIStore

logger = logging.getLogger(__name__)


@lru_cache
def get_storage() -> StateStorage:
    """Application-wide storage backend."""
    return create_storage(settings)


@lru_cache
def get_project_store() -> ProjectStore:
    """Application-wide project store, loaded on first use."""
    seed = generate_demo_projects if settings.seed_demo_projects else None
    store = ProjectStore(get_storage(), settings.projects_storage_key, seed=seed)
    logger.info(f"Project store ready with {len(store.list_projects())} projects")
    return store


@lru_cache
def get_ui_store() -> UIStore:
    """Application-wide UI preference store."""
    return UIStore(get_storage(), settings.ui_storage_key)


def reset_stores() -> None:
    """Drop cached stores so the next request reloads them from storage."""
    get_project_store.cache_clear()
    get_ui_store.cache_clear()
    get_storage.cache_clear()
