from .component import DASHBOARD_SECTIONS, AnalyticsService, summarize_dashboard
from .ports import AnalyticsClientPort

__all__ = [
    "DASHBOARD_SECTIONS",
    "AnalyticsClientPort",
    "AnalyticsService",
    "summarize_dashboard",
]
