from typing import Any

from src.adapters.http.errors import ApiError
from src.components.analytics import AnalyticsService, summarize_dashboard


class MockClient:
    def __init__(self, routes: dict[str, Any]) -> None:
        self.routes = routes
        self.paths: list[str] = []

    def get(self, path: str, params: dict[str, Any] | None = None) -> Any:
        self.paths.append(path)
        result = self.routes[path]
        if isinstance(result, Exception):
            raise result
        return result


ROUTES = {
    "/analytics/students-by-city": [{"_id": "Adama", "count": 4}],
    "/analytics/health-status": {"disabilities": [], "diseases": []},
    "/analytics/enrollment-stats": {"totalStudents": 12, "totalCourses": 5},
    "/analytics/recent-activity": {"recentStudents": []},
}


def test_sections_are_returned_as_is():
    service = AnalyticsService(MockClient(dict(ROUTES)))
    assert service.students_by_city() == [{"_id": "Adama", "count": 4}]
    assert service.enrollment_stats()["totalStudents"] == 12


def test_summary_collects_every_section():
    client = MockClient(dict(ROUTES))
    summary = summarize_dashboard(AnalyticsService(client))

    assert set(summary) == {"students_by_city", "health_status", "enrollment_stats", "recent_activity"}
    assert len(client.paths) == 4


def test_failing_section_is_none():
    routes = dict(ROUTES)
    routes["/analytics/health-status"] = ApiError(500, "Server error")

    summary = summarize_dashboard(AnalyticsService(MockClient(routes)))

    assert summary["health_status"] is None
    assert summary["enrollment_stats"] == {"totalStudents": 12, "totalCourses": 5}
