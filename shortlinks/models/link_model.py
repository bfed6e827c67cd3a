from dataclasses import dataclass
from datetime import datetime, UTC
from enum import StrEnum


class LinkState(StrEnum):
    """Usable life of a link. DELETED is terminal and only observable as absence from the store."""

    ACTIVE = 'active'
    EXPIRED = 'expired'
    DELETED = 'deleted'


@dataclass(frozen=True)
class LinkModel:
    """Represent a shortened URL mapping.

    Attributes:
        id (str):
            Globally unique identifier (UUID4 string).
        shortcode (str):
            The unique short identifier representing the shortened URL.
        target (str):
            The original long URL that the short code redirects to.
        clicks (int):
            Number of successful redirects through this link.
        created_at (datetime):
            Creation time (timezone-aware, UTC).
        expires_at (Optional[datetime]):
            Time after which the link is stored but inert. None if the link
            never expires.
        owner_id (Optional[str]):
            Free-text owner identifier. Not verified.

    Example:
        >>> from datetime import datetime, timedelta, UTC
        >>> link = LinkModel(
        ...     id='2f1c4a0e-6c1f-4f7a-9a55-1b0b8f9f2d11',
        ...     shortcode='abc123',
        ...     target='https://example.com/article/123',
        ...     created_at=datetime.now(UTC),
        ...     expires_at=datetime.now(UTC) + timedelta(days=30),
        ... )
        >>> link.clicks
        0
        >>> link.is_expired()
        False
    """

    id: str
    shortcode: str
    target: str
    created_at: datetime
    clicks: int = 0
    expires_at: datetime | None = None
    owner_id: str | None = None

    def is_expired(self, now: datetime | None = None) -> bool:
        """True when the link has an expiry and `now` is past it."""
        if self.expires_at is None:
            return False
        return (now or datetime.now(UTC)) > self.expires_at

    def state(self, now: datetime | None = None) -> LinkState:
        return LinkState.EXPIRED if self.is_expired(now) else LinkState.ACTIVE
