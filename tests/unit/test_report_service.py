"""
Unit tests for the report views.

These views are pure functions over project lists, so the tests build
projects directly instead of going through a store.
"""

import pytest

from app.domains.report import service as reports
from app.schemas.report import SlideType
from app.schemas.ui import UIPreferences
from app.shared.dates import Granularity
from models import Project, ProjectStatus, WeeklyUpdate


def make_project(
    project_id, name="Project", status="on_track", owner="", progress=0, updates=(), **kwargs
):
    """Build a project with ``(date, progress)`` update tuples."""
    return Project(
        id=project_id,
        name=name,
        status=status,
        owner=owner,
        current_progress=progress,
        weekly_updates=[
            WeeklyUpdate(id=f"{project_id}-u{i}", week_date=day, progress=value)
            for i, (day, value) in enumerate(updates)
        ],
        **kwargs,
    )


@pytest.fixture
def history_project():
    return make_project(
        "p1",
        name="Data Platform",
        progress=99,
        updates=[("2024-01-01", 10), ("2024-01-08", 25), ("2024-01-15", 40)],
    )


class TestSummaryStats:
    """Test cases for portfolio totals."""

    def test_counts_and_average(self):
        projects = [
            make_project("a", status="on_track", progress=10),
            make_project("b", status="on_track", progress=20),
            make_project("c", status="at_risk", progress=30),
            make_project("d", status="completed", progress=41),
        ]

        stats = reports.summary_stats(projects)

        assert stats.total == 4
        assert stats.on_track == 2
        assert stats.at_risk == 1
        assert stats.completed == 1
        assert stats.delayed == 0
        assert stats.on_hold == 0
        assert stats.avg_progress == 25

    def test_average_rounds_half_up(self):
        projects = [make_project("a", progress=2), make_project("b", progress=3)]
        assert reports.summary_stats(projects).avg_progress == 3

    def test_empty_portfolio(self):
        stats = reports.summary_stats([])
        assert stats.total == 0
        assert stats.avg_progress == 0


class TestStatusDistribution:
    def test_omits_empty_buckets_in_status_order(self):
        projects = [
            make_project("a", status="on_hold"),
            make_project("b", status="on_track"),
            make_project("c", status="on_hold"),
        ]

        slices = reports.status_distribution(projects)

        assert [(s.status, s.label, s.count) for s in slices] == [
            (ProjectStatus.on_track, "On Track", 1),
            (ProjectStatus.on_hold, "On Hold", 2),
        ]


class TestProgressByProject:
    """Test cases for the point-in-time progress chart."""

    def test_exact_date_wins(self, history_project):
        [item] = reports.progress_by_project([history_project], "2024-01-08")
        assert item.progress == 25
        assert item.update_date == "2024-01-08"

    def test_falls_back_to_most_recent_earlier_update(self, history_project):
        [item] = reports.progress_by_project([history_project], "2024-01-12")
        assert item.progress == 25
        assert item.update_date == "2024-01-08"

    def test_no_update_yet_reports_zero(self, history_project):
        [item] = reports.progress_by_project([history_project], "2023-12-31")
        assert item.progress == 0
        assert item.update_date is None

    def test_uses_history_not_current_progress(self, history_project):
        [item] = reports.progress_by_project([history_project], "2024-02-01")
        assert item.progress == 40

    def test_week_granularity_moves_to_monday(self, history_project):
        [sunday] = reports.progress_by_project([history_project], "2024-01-14", Granularity.week)
        [wednesday] = reports.progress_by_project([history_project], "2024-01-17", Granularity.week)

        assert sunday.progress == 25
        assert wednesday.progress == 40

    def test_truncates_long_names(self):
        [item] = reports.progress_by_project(
            [make_project("a", name="Content Management System")], "2024-01-01"
        )
        assert item.name == "Content Managem..."
        assert item.full_name == "Content Management System"

    def test_limits_project_count(self):
        projects = [make_project(f"p{i}") for i in range(10)]
        assert len(reports.progress_by_project(projects, "2024-01-01")) == 8
        assert len(reports.progress_by_project(projects, "2024-01-01", limit=None)) == 10


class TestOwnerDistribution:
    """Test cases for the owner chart."""

    def test_groups_in_first_appearance_order(self):
        projects = [
            make_project("a", owner="Bob"),
            make_project("b", owner=""),
            make_project("c", owner="Alice"),
            make_project("d", owner="Bob"),
        ]

        slices = reports.owner_distribution(projects)

        assert [(s.full_name, s.count) for s in slices] == [
            ("Bob", 2),
            ("Unassigned", 1),
            ("Alice", 1),
        ]

    def test_limit_cuts_by_appearance_not_count(self):
        projects = [
            make_project("a", owner="Bob"),
            make_project("b", owner="Carol"),
            make_project("c", owner="Alice"),
            make_project("d", owner="Alice"),
            make_project("e", owner="Alice"),
        ]

        slices = reports.owner_distribution(projects, limit=2)

        assert [s.full_name for s in slices] == ["Bob", "Carol"]

    def test_truncates_long_owner_names(self):
        [entry] = reports.owner_distribution([make_project("a", owner="Alexandra Konstantinou")])
        assert entry.name == "Alexandra Ko..."
        assert entry.full_name == "Alexandra Konstantinou"


class TestProgressTrend:
    """Test cases for the trend series."""

    def test_buckets_run_oldest_first(self):
        trend = reports.progress_trend([make_project("a")], "2024-01-29", 4)

        assert [p.period_start for p in trend.points] == [
            "2024-01-08",
            "2024-01-15",
            "2024-01-22",
            "2024-01-29",
        ]
        assert [p.label for p in trend.points] == ["Jan 8", "Jan 15", "Jan 22", "Jan 29"]

    def test_update_in_previous_week_fills_second_to_last_bucket(self):
        project = make_project("a", updates=[("2024-01-24", 55)])

        trend = reports.progress_trend([project], "2024-01-29", 4)

        assert trend.series("a") == [None, None, 55, None]

    def test_update_two_weeks_back(self):
        project = make_project("a", updates=[("2024-01-15", 55)])

        trend = reports.progress_trend([project], "2024-01-29", 4)

        assert trend.series("a") == [None, 55, None, None]

    def test_end_date_mid_week_ends_with_its_week(self, history_project):
        trend = reports.progress_trend([history_project], "2024-01-17", 3)

        assert trend.points[-1].period_start == "2024-01-15"
        assert trend.series("p1") == [10, 25, 40]

    def test_first_update_in_bucket_is_used(self):
        project = make_project("a", updates=[("2024-01-08", 20), ("2024-01-10", 30)])

        trend = reports.progress_trend([project], "2024-01-08", 1)

        assert trend.series("a") == [20]

    def test_day_granularity(self, history_project):
        trend = reports.progress_trend(
            [history_project], "2024-01-09", 3, granularity=Granularity.day
        )

        assert [p.period_start for p in trend.points] == ["2024-01-07", "2024-01-08", "2024-01-09"]
        assert trend.series("p1") == [None, 25, None]

    def test_series_keys_and_limit(self):
        projects = [make_project(f"p{i}", name=f"P{i}") for i in range(10)]

        trend = reports.progress_trend(projects, "2024-01-08", 1)

        assert [s.key for s in trend.projects] == [f"project_{i}" for i in range(8)]
        assert set(trend.points[0].values) == {f"project_{i}" for i in range(8)}

    def test_series_for_unknown_project_raises_key_error(self):
        trend = reports.progress_trend([make_project("a")], "2024-01-08", 1)

        with pytest.raises(KeyError):
            trend.series("missing")

    def test_rejects_non_positive_periods(self):
        with pytest.raises(ValueError):
            reports.progress_trend([], "2024-01-08", 0)


class TestUpdateCoverage:
    def test_splits_by_exact_date(self, history_project):
        other = make_project("p2", updates=[("2024-01-09", 5)])

        coverage = reports.update_coverage([history_project, other], "2024-01-08")

        assert coverage.date == "2024-01-08"
        assert coverage.with_updates == ["p1"]
        assert coverage.without_updates == ["p2"]


class TestPresentation:
    """Test cases for the slide deck."""

    @pytest.fixture
    def portfolio(self):
        return [
            make_project(
                "a",
                name="Search Revamp",
                owner="Alice",
                progress=60,
                updates=[
                    ("2024-01-08", 50),
                    ("2024-01-15", 60),
                ],
            ),
            make_project("b", name="Legacy Cleanup", status="completed", progress=100),
            make_project("c", name="Hidden", progress=10, is_active_in_presentation=False),
            make_project("d", name="Fresh Start"),
        ]

    def test_slide_order_and_count(self, portfolio):
        deck = reports.build_presentation(portfolio, UIPreferences(), "2024-01-15")

        assert [s.type for s in deck.slides] == [
            SlideType.title,
            SlideType.summary,
            SlideType.progress_chart,
            SlideType.project,
            SlideType.project,
            SlideType.thankyou,
        ]
        assert deck.total_slides == 4 + 2
        assert [s.project.project_id for s in deck.slides if s.project] == ["a", "d"]

    def test_title_slide_uses_preferences(self, portfolio):
        preferences = UIPreferences(dashboard_title="Q1 Review", organization_name="Acme")

        deck = reports.build_presentation(portfolio, preferences, "2024-01-15")

        title = deck.slides[0]
        assert title.title == "Q1 Review"
        assert title.subtitle == "Weekly Report"
        assert title.organization_name == "Acme"
        assert title.date_label == "Jan 15, 2024"
        assert deck.slides[-1].organization_name == "Acme"

    def test_progress_chart_uses_current_progress(self, portfolio):
        deck = reports.build_presentation(portfolio, UIPreferences(), "2024-01-15")

        chart = deck.slides[2].progress
        assert [(c.name, c.progress) for c in chart] == [
            ("Search Revamp", 60),
            ("Legacy Cleanup", 100),
            ("Hidden", 10),
            ("Fresh Start", 0),
        ]

    def test_project_slide_uses_latest_update(self):
        project = Project(
            id="a",
            name="Search",
            current_progress=60,
            weekly_updates=[
                WeeklyUpdate(
                    id="u2",
                    week_date="2024-01-15",
                    progress=60,
                    accomplishments="One\nTwo\n\nThree\nFour\nFive",
                    next_steps=["Ship"],
                    support_needed="Budget",
                ),
                WeeklyUpdate(
                    id="u1", week_date="2024-01-08", progress=50, accomplishments=["Old"]
                ),
            ],
        )

        slide = reports.project_slide(project)

        assert slide.latest_update_date == "2024-01-15"
        assert slide.accomplishments == ["One", "Two", "Three", "Four"]
        assert slide.accomplishments_total == 5
        assert slide.next_steps_total == 1
        assert slide.challenges_total == 0
        assert slide.next_steps == ["Ship"]
        assert slide.support_needed == "Budget"
        assert slide.owner == "Unassigned"

    def test_project_slide_without_updates(self):
        slide = reports.project_slide(make_project("d", name="Fresh Start", status="at_risk"))

        assert slide.latest_update_date is None
        assert slide.accomplishments == []
        assert slide.status_label == "At Risk"
