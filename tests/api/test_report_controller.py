"""
API tests for the report endpoints.
"""

import pytest
from fastapi import status
from httpx import AsyncClient

from tests.factories import WeeklyUpdateCreateFactory


class TestReportEndpoints:
    """Test cases for chart and presentation endpoints."""

    @pytest.mark.asyncio
    async def test_summary(self, client: AsyncClient, mixed_status_projects):
        response = await client.get("/api/reports/summary")

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        assert data["total"] == 5
        assert data["onTrack"] == 1
        assert data["onHold"] == 1
        assert data["avgProgress"] == 40

    @pytest.mark.asyncio
    async def test_status_distribution(self, client: AsyncClient, mixed_status_projects):
        response = await client.get("/api/reports/status")

        data = response.json()["data"]
        assert [s["status"] for s in data] == [
            "on_track",
            "at_risk",
            "delayed",
            "completed",
            "on_hold",
        ]
        assert all(s["count"] == 1 for s in data)

    @pytest.mark.asyncio
    async def test_progress_defaults_to_selected_date(
        self, client: AsyncClient, project_with_updates, project_store
    ):
        project_store.set_selected_date("2024-01-10")

        response = await client.get("/api/reports/progress")

        [item] = response.json()["data"]
        assert item["progress"] == 25
        assert item["updateDate"] == "2024-01-08"
        assert item["fullName"] == "Website Redesign"

    @pytest.mark.asyncio
    async def test_progress_for_explicit_week(self, client: AsyncClient, project_with_updates):
        response = await client.get(
            "/api/reports/progress", params={"date": "2024-01-17", "granularity": "week"}
        )

        assert response.json()["data"][0]["progress"] == 40

    @pytest.mark.asyncio
    async def test_owner_distribution(self, client: AsyncClient, mixed_status_projects):
        response = await client.get("/api/reports/owners")

        data = response.json()["data"]
        assert [(o["fullName"], o["count"]) for o in data] == [
            ("Alice", 2),
            ("Bob", 1),
            ("Unassigned", 1),
            ("Carol", 1),
        ]

    @pytest.mark.asyncio
    async def test_trend_has_gaps_for_missing_weeks(
        self, client: AsyncClient, test_project, project_store
    ):
        project_store.add_weekly_update(
            test_project.id, WeeklyUpdateCreateFactory(week_date="2024-01-24", progress=55)
        )

        response = await client.get(
            "/api/reports/trend", params={"range": "month", "date": "2024-01-29"}
        )

        assert response.status_code == status.HTTP_200_OK
        data = response.json()["data"]
        key = data["projects"][0]["key"]
        assert [p["periodStart"] for p in data["points"]] == [
            "2024-01-08",
            "2024-01-15",
            "2024-01-22",
            "2024-01-29",
        ]
        assert [p["values"][key] for p in data["points"]] == [None, None, 55, None]

    @pytest.mark.asyncio
    async def test_trend_rejects_unknown_range(self, client: AsyncClient):
        response = await client.get("/api/reports/trend", params={"range": "decade"})
        assert response.status_code == status.HTTP_422_UNPROCESSABLE_ENTITY

    @pytest.mark.asyncio
    async def test_coverage(self, client: AsyncClient, project_with_updates, project_store):
        other = project_store.add_project({"name": "Quiet Project"})

        response = await client.get("/api/reports/coverage", params={"date": "2024-01-15"})

        data = response.json()["data"]
        assert data["withUpdates"] == [project_with_updates.id]
        assert data["withoutUpdates"] == [other.id]

    @pytest.mark.asyncio
    async def test_presentation(self, client: AsyncClient, mixed_status_projects, ui_store):
        ui_store.set_organization_name("Acme")

        response = await client.get("/api/reports/presentation")

        data = response.json()["data"]
        types = [s["type"] for s in data["slides"]]
        assert types[:3] == ["title", "summary", "progress-chart"]
        assert types[-1] == "thankyou"
        # Every project except the completed one gets a slide
        assert types.count("project") == 4
        assert data["totalSlides"] == 8
        assert data["slides"][0]["organizationName"] == "Acme"
