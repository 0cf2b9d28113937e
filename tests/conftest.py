# tests/conftest.py
import os

# Set up test environment variables BEFORE any other imports
os.environ.setdefault("ENVIRONMENT", "testing")
os.environ["STORAGE_BACKEND"] = "memory"
os.environ.setdefault("SEED_DEMO_PROJECTS", "false")

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from app.core.dependencies import get_project_store, get_ui_store
from app.database import InMemoryStorage
from app.domains.project.service import ProjectStore
from app.domains.ui.service import UIStore
from app.main import app
from tests.doubles import FailingStorage
from tests.factories import ProjectCreateFactory, WeeklyUpdateCreateFactory


@pytest.fixture
def storage():
    """Create an empty in-memory storage backend."""
    return InMemoryStorage()


@pytest.fixture
def failing_storage():
    """Create a storage backend that rejects every write."""
    return FailingStorage()


@pytest.fixture
def project_store(storage):
    """Create a project store over empty storage."""
    return ProjectStore(storage)


@pytest.fixture
def ui_store(storage):
    """Create a UI preference store sharing the project store's storage."""
    return UIStore(storage)


@pytest_asyncio.fixture
async def client(project_store, ui_store):
    """Create a test client bound to fresh stores."""
    app.dependency_overrides[get_project_store] = lambda: project_store
    app.dependency_overrides[get_ui_store] = lambda: ui_store
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


# Project fixtures
@pytest.fixture
def test_project(project_store):
    """Create a project without updates."""
    return project_store.add_project(
        ProjectCreateFactory(
            name="Website Redesign",
            description="Refresh the public website",
            owner="Alice",
            start_date="2024-01-01",
            target_end_date="2024-06-30",
        )
    )


@pytest.fixture
def project_with_updates(project_store, test_project):
    """Create a project with updates on three consecutive Mondays."""
    for week_date, progress in [("2024-01-01", 10), ("2024-01-08", 25), ("2024-01-15", 40)]:
        project_store.add_weekly_update(
            test_project.id, WeeklyUpdateCreateFactory(week_date=week_date, progress=progress)
        )
    return project_store.require_project(test_project.id)


@pytest.fixture
def mixed_status_projects(project_store):
    """Create one project per status with distinct owners and progress."""
    rows = [
        ("Billing Revamp", "Alice", "on_track", 10, "2024-05-01"),
        ("Data Warehouse", "Bob", "at_risk", 55, None),
        ("Mobile App", "", "delayed", 30, "2024-03-01"),
        ("Intranet", "Alice", "completed", 100, "2024-02-01"),
        ("Vendor Audit", "Carol", "on_hold", 5, "2024-04-01"),
    ]
    return [
        project_store.add_project(
            ProjectCreateFactory(
                name=name,
                description="",
                owner=owner,
                status=status,
                current_progress=progress,
                target_end_date=target,
            )
        )
        for name, owner, status, progress, target in rows
    ]
