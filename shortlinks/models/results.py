"""Result types returned by the service layer.

Expected outcomes (validation failures, missing or expired links) are returned
as failed results carrying a human-readable `error` and a machine-readable
`error_code`. They are never raised out of the services.

Each result exposes `to_dict()` producing the JSON shape served by the Lambda
handlers, e.g. for a redirect:

    {"success": false, "notFound": true, "error": "URL not found", "errorCode": "LINK_NOT_FOUND"}
"""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Any

from shortlinks.models.link_model import LinkModel
from shortlinks.models.click_event_model import ClickEventModel


def _iso(value: datetime | None) -> str | None:
    return None if value is None else value.isoformat()


def _failure(payload: dict[str, Any], error: str | None, error_code: str | None) -> dict[str, Any]:
    if error is not None:
        payload['error'] = error
    if error_code is not None:
        payload['errorCode'] = str(error_code)
    return payload


@dataclass(frozen=True)
class ValidationResult:
    valid: bool
    error: str | None = None


@dataclass(frozen=True)
class LinkSummary:
    """A link together with its rendered short URL."""

    link: LinkModel
    short_url: str

    def to_dict(self, include_owner: bool = False) -> dict[str, Any]:
        data = {
            'id': self.link.id,
            'originalUrl': self.link.target,
            'shortCode': self.link.shortcode,
            'shortUrl': self.short_url,
            'clicks': self.link.clicks,
            'createdAt': _iso(self.link.created_at),
            'expiresAt': _iso(self.link.expires_at),
        }
        if include_owner:
            data['userId'] = self.link.owner_id
        return data


@dataclass(frozen=True)
class LinkResult:
    success: bool
    data: LinkSummary | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {'success': self.success, 'data': None if self.data is None else self.data.to_dict()}
        return _failure(payload, self.error, self.error_code)


@dataclass(frozen=True)
class LinkListResult:
    success: bool
    data: list[LinkSummary] = field(default_factory=list)
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {'success': self.success, 'data': [item.to_dict(include_owner=True) for item in self.data]}
        return _failure(payload, self.error, self.error_code)


@dataclass(frozen=True)
class DeleteResult:
    success: bool
    not_found: bool = False
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {'success': self.success}
        if self.not_found:
            payload['notFound'] = True
        return _failure(payload, self.error, self.error_code)


@dataclass(frozen=True)
class RedirectResult:
    success: bool
    original_url: str | None = None
    expired: bool = False
    not_found: bool = False
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {'success': self.success}
        if self.original_url is not None:
            payload['originalUrl'] = self.original_url
        if self.expired:
            payload['expired'] = True
        if self.not_found:
            payload['notFound'] = True
        return _failure(payload, self.error, self.error_code)


@dataclass(frozen=True)
class SweepResult:
    success: bool
    deleted_count: int = 0
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {'success': self.success}
        if self.success:
            payload['deletedCount'] = self.deleted_count
        return _failure(payload, self.error, self.error_code)


@dataclass(frozen=True)
class AnalyticsStats:
    total_urls: int
    total_clicks: int
    avg_clicks: int
    clicks_today: int = 0
    clicks_this_week: int = 0
    clicks_this_month: int = 0

    def to_dict(self) -> dict[str, Any]:
        return {
            'totalUrls': self.total_urls,
            'totalClicks': self.total_clicks,
            'avgClicks': self.avg_clicks,
            'clicksToday': self.clicks_today,
            'clicksThisWeek': self.clicks_this_week,
            'clicksThisMonth': self.clicks_this_month,
        }


@dataclass(frozen=True)
class TimelineEntry:
    day: date
    clicks: int

    def to_dict(self) -> dict[str, Any]:
        return {
            'date': self.day.isoformat(),
            'label': f'{self.day:%a, %b} {self.day.day}',
            'clicks': self.clicks,
        }


@dataclass(frozen=True)
class RecentClick:
    """A click event joined with its parent link."""

    event: ClickEventModel
    shortcode: str
    original_url: str

    def to_dict(self) -> dict[str, Any]:
        return {
            'id': self.event.id,
            'timestamp': _iso(self.event.timestamp),
            'referrer': self.event.referrer,
            'shortCode': self.shortcode,
            'originalUrl': self.original_url,
        }


@dataclass(frozen=True)
class AnalyticsReport:
    stats: AnalyticsStats
    popular_links: list[LinkSummary]
    recent_clicks: list[RecentClick]
    timeline: list[TimelineEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            'stats': self.stats.to_dict(),
            'popularUrls': [item.to_dict() for item in self.popular_links],
            'recentClicks': [click.to_dict() for click in self.recent_clicks],
            'clickTimeline': [entry.to_dict() for entry in self.timeline],
        }


@dataclass(frozen=True)
class LinkAnalyticsReport:
    link: LinkSummary
    recent_clicks: list[ClickEventModel]
    timeline: list[TimelineEntry]

    def to_dict(self) -> dict[str, Any]:
        return {
            'url': self.link.to_dict(),
            'recentClicks': [
                {
                    'id': event.id,
                    'timestamp': _iso(event.timestamp),
                    'referrer': event.referrer,
                    'userAgent': event.user_agent,
                }
                for event in self.recent_clicks
            ],
            'timeline': [entry.to_dict() for entry in self.timeline],
        }


@dataclass(frozen=True)
class AnalyticsResult:
    success: bool
    data: AnalyticsReport | LinkAnalyticsReport | None = None
    error: str | None = None
    error_code: str | None = None

    def to_dict(self) -> dict[str, Any]:
        payload = {'success': self.success}
        if self.data is not None:
            payload['data'] = self.data.to_dict()
        return _failure(payload, self.error, self.error_code)
