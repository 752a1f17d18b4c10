import logging
from typing import Any

import flet as ft

from src.components.analytics import summarize_dashboard
from src.ui.components.stat_card import StatCard
from src.ui.context import ServiceContext
from src.ui.state import AppState

logger = logging.getLogger(__name__)

ENROLLMENT_COUNTERS = (
    ("totalStudents", "Students", ft.Icons.PEOPLE, "indigo"),
    ("totalCourses", "Courses", ft.Icons.MENU_BOOK, "green"),
    ("totalMessages", "Messages", ft.Icons.MAIL, "orange"),
    ("averageGrade", "Average Grade", ft.Icons.GRADE, "amber"),
)


def enrollment_counters(stats: Any) -> list[tuple[str, Any, str, str]]:
    """Pick the counter tiles out of the enrollment-stats payload."""
    if not isinstance(stats, dict):
        return []
    stats = stats.get("overview", stats)
    counters = []
    for key, label, icon, color in ENROLLMENT_COUNTERS:
        if key in stats:
            value = stats[key]
            if isinstance(value, float):
                value = round(value, 1)
            counters.append((label, value, icon, color))
    return counters


def grouped_counts(rows: Any) -> list[tuple[str, int]]:
    """Aggregation rows shaped ``[{_id, count}]`` as (label, count) pairs."""
    if not isinstance(rows, list):
        return []
    pairs = []
    for row in rows:
        if not isinstance(row, dict):
            continue
        key = row.get("_id")
        if isinstance(key, dict):
            key = next(iter(key.values()), None)
        pairs.append((str(key) if key not in (None, "") else "Unknown", int(row.get("count", 0))))
    return pairs


def _bar_list(title: str, pairs: list[tuple[str, int]]) -> ft.Control:
    top = max((c for _, c in pairs), default=0) or 1
    rows: list[ft.Control] = [ft.Text(title, size=18, weight=ft.FontWeight.BOLD)]
    for label, count in pairs:
        rows.append(
            ft.Row(
                [
                    ft.Text(label, width=160),
                    ft.ProgressBar(value=count / top, width=220),
                    ft.Text(str(count)),
                ]
            )
        )
    if not pairs:
        rows.append(ft.Text("No data", italic=True))
    return ft.Container(content=ft.Column(rows), padding=10)


def AdminDashboardContent(page: ft.Page, ctx: ServiceContext, state: AppState) -> ft.Control:
    summary = summarize_dashboard(ctx.analytics)

    failed = [k for k, v in summary.items() if v is None]
    status = ft.Text(
        "Some dashboard sections could not be loaded." if failed else "",
        color="error",
        visible=bool(failed),
    )

    counters = [
        StatCard(label, value, icon=icon, color=color)
        for label, value, icon, color in enrollment_counters(summary["enrollment_stats"])
    ]

    health = summary["health_status"]
    if not isinstance(health, dict):
        health = {}
    health_pairs = grouped_counts(health.get("disabilities")) + grouped_counts(health.get("diseases"))

    activity = summary["recent_activity"] or {}
    recent = activity.get("recentStudents", []) if isinstance(activity, dict) else []

    return ft.Container(
        content=ft.Column(
            [
                ft.Text("Dashboard", size=28, weight=ft.FontWeight.BOLD, color="primary"),
                ft.Divider(),
                status,
                ft.Text("Overview", size=20, weight=ft.FontWeight.BOLD),
                ft.Row(counters, wrap=True),
                ft.Divider(),
                ft.Row(
                    [
                        _bar_list("Students by City", grouped_counts(summary["students_by_city"])),
                        _bar_list("Health Status", health_pairs),
                    ],
                    wrap=True,
                    vertical_alignment=ft.CrossAxisAlignment.START,
                ),
                ft.Divider(),
                ft.Text("Recent Students", size=20, weight=ft.FontWeight.BOLD),
                ft.Column(
                    [
                        ft.ListTile(
                            leading=ft.Icon(ft.Icons.PERSON_ADD),
                            title=ft.Text(s.get("fullName") or s.get("name") or "Student"),
                            subtitle=ft.Text(s.get("studentId", "")),
                        )
                        for s in recent
                        if isinstance(s, dict)
                    ]
                    or [ft.Text("No recent activity", italic=True)]
                ),
            ],
            scroll=ft.ScrollMode.AUTO,
        ),
        padding=20,
        expand=True,
    )
