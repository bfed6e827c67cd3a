"""Abstract base class for click event data access objects (DAOs).

Click events form an append-only log. Events are never updated, and they hold
a back-reference to their link which may be deleted independently.

Example:
    >>> from shortlinks.dao import ClickEventRedisDAO
    >>> dao = ClickEventRedisDAO(...)

    >>> event = dao.append(link.id, referrer='https://news.ycombinator.com/')
    >>> dao.count_in_range(start, end, link_id=link.id)
    1
    >>> dao.recent(10)[0] == event
    True
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import ClickEventModel


class ClickEventBaseDAO(ABC):
    """Interface for click event data access objects (DAOs).

    Methods:
        append(link_id: str, referrer: str | None, user_agent: str | None) -> ClickEventModel:
            Record a new click event for a link.

        count_in_range(start: datetime, end: datetime, link_id: str | None) -> int:
            Count events with start <= timestamp < end, optionally for a single link.

        recent(limit: int, link_id: str | None, offset: int) -> list[ClickEventModel]:
            Most recent events, newest first, optionally for a single link.

    All methods raise DataStoreError on connection, read or write failures.
    """

    @abstractmethod
    def append(self, link_id: str, referrer: str | None = None, user_agent: str | None = None, **kwargs) -> ClickEventModel:
        """Append a click event.

        Args:
            link_id (str):
                Id of the clicked link.

            referrer (str | None):
                Referer header of the request, if any.

            user_agent (str | None):
                User-Agent header of the request, if any.

        Returns:
            ClickEventModel: the recorded event.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def count_in_range(self, start: datetime, end: datetime, link_id: str | None = None, **kwargs) -> int:
        """Count events with `start <= timestamp < end`."""
        pass

    @abstractmethod
    def recent(self, limit: int, link_id: str | None = None, offset: int = 0, **kwargs) -> list[ClickEventModel]:
        """Retrieve up to `limit` events newest first, skipping the first `offset`."""
        pass
