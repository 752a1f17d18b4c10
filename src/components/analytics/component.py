"""
Analytics component - read-only aggregates for the admin dashboard.
"""

from __future__ import annotations

import logging
from typing import Any

from src.adapters.http.errors import ApiError

from .ports import AnalyticsClientPort

logger = logging.getLogger(__name__)

DASHBOARD_SECTIONS = (
    "students_by_city",
    "health_status",
    "enrollment_stats",
    "recent_activity",
)


class AnalyticsService:
    def __init__(self, client: AnalyticsClientPort) -> None:
        self.client = client

    def students_by_city(self) -> Any:
        return self.client.get("/analytics/students-by-city")

    def health_status(self) -> Any:
        return self.client.get("/analytics/health-status")

    def enrollment_stats(self) -> Any:
        return self.client.get("/analytics/enrollment-stats")

    def recent_activity(self) -> Any:
        return self.client.get("/analytics/recent-activity")


def summarize_dashboard(service: AnalyticsService) -> dict[str, Any]:
    """Collect every dashboard section; a failing section is None."""
    summary: dict[str, Any] = {}
    for section in DASHBOARD_SECTIONS:
        try:
            summary[section] = getattr(service, section)()
        except ApiError as e:
            logger.error(f"Error loading dashboard section {section}: {e}")
            summary[section] = None
    return summary
