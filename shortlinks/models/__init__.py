from shortlinks.models.link_model import LinkModel, LinkState
from shortlinks.models.click_event_model import ClickEventModel
from shortlinks.models.results import (
    ValidationResult,
    LinkSummary,
    LinkResult,
    LinkListResult,
    DeleteResult,
    RedirectResult,
    SweepResult,
    AnalyticsStats,
    TimelineEntry,
    RecentClick,
    AnalyticsReport,
    LinkAnalyticsReport,
    AnalyticsResult,
)


__all__ = [
    'LinkModel',
    'LinkState',
    'ClickEventModel',
    'ValidationResult',
    'LinkSummary',
    'LinkResult',
    'LinkListResult',
    'DeleteResult',
    'RedirectResult',
    'SweepResult',
    'AnalyticsStats',
    'TimelineEntry',
    'RecentClick',
    'AnalyticsReport',
    'LinkAnalyticsReport',
    'AnalyticsResult',
]
