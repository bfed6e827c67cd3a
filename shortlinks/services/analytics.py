"""Read-only analytics over links and click events

Day boundaries (today, timeline buckets) are computed in a configurable
reference timezone, UTC by default. Counters come from the link store and are
authoritative; day-level figures come from the click event log, which may lag
behind the counters when event writes fail.

Classes:
    LinkAnalytics:
        overview(now=None) -> AnalyticsResult
            Totals, click counts for today/week/month, popular links, recent
            clicks and a daily click timeline across all links.
        link_overview(shortcode, now=None) -> AnalyticsResult
            A single link with its recent click events and daily timeline.
"""

import logging
from datetime import date, datetime, time, timedelta, tzinfo, UTC

from shortlinks.constants import Analytics, ErrorCode
from shortlinks.models import (
    LinkModel,
    LinkSummary,
    AnalyticsStats,
    TimelineEntry,
    RecentClick,
    AnalyticsReport,
    LinkAnalyticsReport,
    AnalyticsResult,
)
from shortlinks.dao.base import LinkBaseDAO, ClickEventBaseDAO
from shortlinks.dao.exceptions import LinkNotFoundError, DataStoreError
from shortlinks.utils.helpers import get_short_url
from shortlinks.utils.validators import validate_shortcode


logger = logging.getLogger(__name__)

URL_NOT_FOUND = 'URL not found'
ANALYTICS_FAILED = 'Failed to fetch analytics'
LINK_ANALYTICS_FAILED = 'Failed to fetch URL analytics'


def average_clicks(total_clicks: int, total_links: int) -> int:
    """Average clicks per link rounded half up (0 when there are no links)

    Example:
        >>> average_clicks(5, 2)
        3
    """
    if total_links == 0:
        return 0
    return int(total_clicks / total_links + 0.5)


class LinkAnalytics:
    """Analytics aggregator

    Attributes:
        link_dao (LinkBaseDAO):
            Link store (totals, popular links, joins).
        click_dao (ClickEventBaseDAO):
            Click event log (day counts, recent clicks).
        base_url (str):
            Public base URL used to render short URLs.
        timezone (tzinfo):
            Reference timezone for calendar days.
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        click_dao: ClickEventBaseDAO,
        base_url: str,
        timezone: tzinfo = UTC,
        timeline_days: int = Analytics.TIMELINE_DAYS,
        popular_links: int = Analytics.POPULAR_LINKS,
        recent_clicks: int = Analytics.RECENT_CLICKS,
        link_recent_clicks: int = Analytics.LINK_RECENT_CLICKS,
    ):
        self.link_dao = link_dao
        self.click_dao = click_dao
        self.base_url = base_url
        self.timezone = timezone
        self.timeline_days = timeline_days
        self.popular_links = popular_links
        self.recent_clicks = recent_clicks
        self.link_recent_clicks = link_recent_clicks

    def overview(self, now: datetime | None = None) -> AnalyticsResult:
        now = now or datetime.now(UTC)

        try:
            links = self.link_dao.list_all()
        except DataStoreError:
            logger.exception('Failed to load links for analytics.')
            return AnalyticsResult(success=False, error=ANALYTICS_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)

        total_clicks = sum(link.clicks for link in links)
        # Ties ordered by creation time
        popular = sorted(links, key=lambda link: (-link.clicks, link.created_at))[: self.popular_links]

        today = now.astimezone(self.timezone).date()
        tomorrow_start = self._day_start(today + timedelta(days=1))
        try:
            clicks_today = self.click_dao.count_in_range(self._day_start(today), tomorrow_start)
            clicks_this_week = self.click_dao.count_in_range(self._day_start(today - timedelta(days=Analytics.WEEK_DAYS)), tomorrow_start)
            clicks_this_month = self.click_dao.count_in_range(self._day_start(today - timedelta(days=Analytics.MONTH_DAYS)), tomorrow_start)
            timeline = self._timeline(today)
            recent = self._recent_clicks({link.id: link for link in links})
        except DataStoreError:
            logger.warning('Click events unavailable. Reporting zero click activity.', exc_info=True)
            clicks_today = clicks_this_week = clicks_this_month = 0
            timeline = [TimelineEntry(day=day, clicks=0) for day in self._days(today)]
            recent = []

        stats = AnalyticsStats(
            total_urls=len(links),
            total_clicks=total_clicks,
            avg_clicks=average_clicks(total_clicks, len(links)),
            clicks_today=clicks_today,
            clicks_this_week=clicks_this_week,
            clicks_this_month=clicks_this_month,
        )
        report = AnalyticsReport(
            stats=stats,
            popular_links=[self._summary(link) for link in popular],
            recent_clicks=recent,
            timeline=timeline,
        )
        return AnalyticsResult(success=True, data=report)

    def link_overview(self, shortcode: str, now: datetime | None = None) -> AnalyticsResult:
        validation = validate_shortcode(shortcode)
        if not validation.valid:
            return AnalyticsResult(success=False, error=validation.error, error_code=ErrorCode.INVALID_SHORTCODE)

        now = now or datetime.now(UTC)
        today = now.astimezone(self.timezone).date()
        try:
            link = self.link_dao.get(shortcode)
            recent = self.click_dao.recent(self.link_recent_clicks, link_id=link.id)
            timeline = self._timeline(today, link_id=link.id)
        except LinkNotFoundError:
            return AnalyticsResult(success=False, error=URL_NOT_FOUND, error_code=ErrorCode.LINK_NOT_FOUND)
        except DataStoreError:
            logger.exception('Failed to build link analytics.', extra={'shortcode': shortcode})
            return AnalyticsResult(success=False, error=LINK_ANALYTICS_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)

        report = LinkAnalyticsReport(link=self._summary(link), recent_clicks=recent, timeline=timeline)
        return AnalyticsResult(success=True, data=report)

    def _day_start(self, day: date) -> datetime:
        return datetime.combine(day, time.min, tzinfo=self.timezone)

    def _days(self, today: date) -> list[date]:
        return [today - timedelta(days=offset) for offset in range(self.timeline_days - 1, -1, -1)]

    def _timeline(self, today: date, link_id: str | None = None) -> list[TimelineEntry]:
        return [
            TimelineEntry(
                day=day,
                clicks=self.click_dao.count_in_range(self._day_start(day), self._day_start(day + timedelta(days=1)), link_id=link_id),
            )
            for day in self._days(today)
        ]

    def _recent_clicks(self, links_by_id: dict[str, LinkModel]) -> list[RecentClick]:
        """Newest click events joined with their link, skipping events of deleted links"""
        recent: list[RecentClick] = []
        offset = 0
        while len(recent) < self.recent_clicks:
            events = self.click_dao.recent(self.recent_clicks, offset=offset)
            for event in events:
                link = links_by_id.get(event.link_id)
                if link is None:
                    continue
                recent.append(RecentClick(event=event, shortcode=link.shortcode, original_url=link.target))
                if len(recent) == self.recent_clicks:
                    break
            if len(events) < self.recent_clicks:
                break
            offset += len(events)
        return recent

    def _summary(self, link: LinkModel) -> LinkSummary:
        return LinkSummary(link=link, short_url=get_short_url(link.shortcode, self.base_url))
