"""Sample portfolio used to seed an empty store."""

from datetime import date
from typing import Optional

from app.shared.dates import DateLike, parse_date, shift_weeks, today, week_monday
from app.shared.numbers import round_half_up
from models.base import utcnow
from models.project import Project, ProjectCategory, ProjectStatus, WeeklyUpdate

NEXT_STEPS = ["Continue work on the remaining tasks", "Review progress with the team"]


def generate_updates(
    prefix: str,
    reference: date,
    start_weeks_ago: int,
    start_progress: int,
    end_progress: int,
    accomplishments: list[list[str]],
    challenges: list[list[str]],
) -> list[WeeklyUpdate]:
    """One Monday-dated update per week with progress ramping linearly."""
    now = utcnow()
    per_week = (end_progress - start_progress) / (start_weeks_ago + 1)
    updates = []

    for weeks_ago in range(start_weeks_ago, -1, -1):
        week_index = start_weeks_ago - weeks_ago
        progress = min(100, max(0, round_half_up(start_progress + per_week * week_index)))
        updates.append(
            WeeklyUpdate(
                id=f"{prefix}-update-{week_index}",
                week_date=week_monday(shift_weeks(reference, -weeks_ago)),
                accomplishments=accomplishments[week_index % len(accomplishments)],
                challenges=challenges[week_index % len(challenges)],
                next_steps=list(NEXT_STEPS),
                progress=progress,
                estimated_completion=shift_weeks(reference, 12),
                support_needed="Management support" if week_index % 3 == 0 else "",
                notes=f"Week {week_index + 1} update",
                created_at=now,
            )
        )
    return updates


# (id, name, description, status, category, started weeks ago, target in weeks,
#  owner, update prefix, first progress, last progress, accomplishments, challenges)
_DEMO_PROJECTS = [
    (
        "demo-project-1",
        "Content Management System",
        "Build an integrated content management system with React and Node.js",
        ProjectStatus.on_track,
        ProjectCategory.project,
        26, 12, "Ahmed Mohamed", "p1", 5, 85,
        [
            ["Set up project infrastructure", "Design the database"],
            ["Build data models", "Prepare the development environment"],
            ["Design the first UI draft", "Build the core API"],
            ["Build authentication", "Add user permissions"],
            ["Build the admin dashboard", "Add content management"],
            ["Improve performance", "Add caching"],
            ["Unit tests", "Bug fixes"],
            ["Build search", "Add filters"],
        ],
        [
            ["Integration issues with legacy systems"], [], ["Designs delivered late"], [],
            ["Performance problems resolved"], [], [], ["Security review needed"],
        ],
    ),
    (
        "demo-project-2",
        "Cloud Infrastructure Upgrade",
        "Migrate servers between cloud providers and tune performance",
        ProjectStatus.at_risk,
        ProjectCategory.project,
        17, 4, "Sara Ahmed", "p2", 0, 45,
        [
            ["Assess current architecture", "Define migration requirements"],
            ["Open the new cloud account", "Configure virtual networks"],
            ["Migrate the staging database"],
            ["Initial performance tests"],
            ["Migrate microservices"],
            ["Set up monitoring"],
            ["Security testing"],
            ["Tune network settings"],
        ],
        [
            ["Security approvals delayed"], ["Compatibility issues"], [],
            ["Costs higher than expected"], ["Schedule slipping"], [],
            ["Team needs training"], [],
        ],
    ),
    (
        "demo-project-3",
        "Mobile Application",
        "Cross-platform mobile app built with React Native",
        ProjectStatus.on_track,
        ProjectCategory.project,
        22, 2, "Mohamed Ali", "p3", 0, 92,
        [
            ["Set up the React Native project", "Design app structure"],
            ["Build the login screen", "Add authentication"],
            ["Build the home screen"],
            ["Add navigation"],
            ["Build the profile screen"],
            ["Add notifications"],
            ["Polish the UI"],
            ["Test on iOS and Android"],
        ],
        [
            [], ["iOS compatibility issues"], [], [], ["Minor design delay"], [], [],
            ["Notification bugs resolved"],
        ],
    ),
    (
        "demo-index-1",
        "Customer Satisfaction Index",
        "Measure and track customer satisfaction with our services",
        ProjectStatus.on_track,
        ProjectCategory.index,
        26, 52, "Fatima Hassan", "idx1", 45, 78,
        [
            ["Run the satisfaction survey", "Analyze results"],
            ["Prepare the monthly report", "Share results with management"],
            ["Follow up on complaints"],
            ["Improve the survey process"],
            ["Add new survey questions"],
            ["Analyze satisfaction trends"],
            ["Propose service improvements"],
            ["Review feedback"],
        ],
        [[], ["Low response rate"], [], [], [], ["Slight dip in satisfaction addressed"], [], []],
    ),
    (
        "demo-project-4",
        "E-Learning Platform",
        "Learning platform with video lessons and quizzes",
        ProjectStatus.on_track,
        ProjectCategory.project,
        9, 16, "Noura Alsaeed", "p4", 0, 28,
        [
            ["Define project requirements", "Study competitors"],
            ["Design the database", "Set up infrastructure"],
            ["Build user management"],
            ["Add courses"],
            ["Build the video player"],
            ["Add quizzes"],
        ],
        [[], [], ["Video storage challenges"], [], [], []],
    ),
    (
        "demo-idea-1",
        "AI Support Assistant",
        "Proposal for a chatbot answering customer support questions",
        ProjectStatus.on_hold,
        ProjectCategory.idea,
        12, 26, "Khaled Abdullah", "idea1", 5, 15,
        [
            ["Initial feasibility study"],
            ["Compare market solutions"],
            ["Estimate cost and return"],
            ["Present the idea to management"],
            ["Awaiting approval"],
            ["Review technical requirements"],
        ],
        [
            ["Waiting for budget approval"], [], ["Management response delayed"], [],
            ["Project paused"], [],
        ],
    ),
    (
        "demo-project-5",
        "HR System Modernization",
        "Upgrade the internal human resources management system",
        ProjectStatus.delayed,
        ProjectCategory.project,
        13, 2, "Omar Hussein", "p5", 0, 35,
        [
            ["Analyze the current system", "Gather requirements"],
            ["Design the new system"],
            ["Build the employee module"],
            ["Add leave management"],
            ["Build attendance tracking"],
            ["Initial testing"],
        ],
        [
            ["Short on staff"], ["Requirements changed"], ["Approvals delayed"],
            ["Technical problems"], ["Rework on some parts"], ["Major schedule delay"],
        ],
    ),
]


def generate_demo_projects(reference: Optional[DateLike] = None) -> list[Project]:
    """Build the sample portfolio with weekly history ending this week."""
    ref = parse_date(reference) if reference is not None else today()
    now = utcnow()
    projects = []

    for (
        project_id, name, description, status, category, started, target, owner,
        prefix, first, last, accomplishments, challenges,
    ) in _DEMO_PROJECTS:
        updates = generate_updates(
            prefix, ref, started - 1, first, last, accomplishments, challenges
        )
        projects.append(
            Project(
                id=project_id,
                name=name,
                description=description,
                status=status,
                category=category,
                start_date=shift_weeks(ref, -started),
                target_end_date=shift_weeks(ref, target),
                current_progress=updates[-1].progress,
                owner=owner,
                weekly_updates=updates,
                created_at=now,
                updated_at=now,
            )
        )
    return projects
