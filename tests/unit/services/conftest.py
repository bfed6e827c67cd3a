"""In-memory DAO doubles honouring the LinkBaseDAO / ClickEventBaseDAO contracts.

Both doubles guard their state with a lock so the services can be exercised
from a thread pool. `fail` toggles make every call raise DataStoreError.
"""

import threading
from datetime import datetime, UTC
from uuid import uuid4

import pytest

from shortlinks.models import LinkModel, ClickEventModel
from shortlinks.dao.base import LinkBaseDAO, ClickEventBaseDAO
from shortlinks.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError, DataStoreError


class InMemoryLinkDAO(LinkBaseDAO):
    def __init__(self):
        self._lock = threading.Lock()
        self._links: dict[str, LinkModel] = {}
        self.fail = False
        self.insert_attempts = 0

    def _check(self) -> None:
        if self.fail:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    def find_by_target(self, target, **kwargs):
        self._check()
        with self._lock:
            matches = [link for link in self._links.values() if link.target == target]
        return min(matches, key=lambda link: link.created_at) if matches else None

    def get(self, shortcode, **kwargs):
        self._check()
        with self._lock:
            if shortcode not in self._links:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            return self._links[shortcode]

    def insert(self, link, **kwargs):
        self._check()
        with self._lock:
            self.insert_attempts += 1
            if link.shortcode in self._links:
                raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")
            self._links[link.shortcode] = link
        return link

    def increment_clicks(self, shortcode, **kwargs):
        self._check()
        with self._lock:
            if shortcode not in self._links:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
            link = self._links[shortcode]
            updated = LinkModel(
                id=link.id,
                shortcode=link.shortcode,
                target=link.target,
                created_at=link.created_at,
                clicks=link.clicks + 1,
                expires_at=link.expires_at,
                owner_id=link.owner_id,
            )
            self._links[shortcode] = updated
            return updated

    def list_all(self, **kwargs):
        self._check()
        with self._lock:
            return sorted(self._links.values(), key=lambda link: link.created_at, reverse=True)

    def list_by_owner(self, owner_id, **kwargs):
        return [link for link in self.list_all() if link.owner_id == owner_id]

    def delete(self, shortcode, **kwargs):
        self._check()
        with self._lock:
            if self._links.pop(shortcode, None) is None:
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

    def delete_by_id(self, link_id, **kwargs):
        self._check()
        with self._lock:
            shortcode = next((code for code, link in self._links.items() if link.id == link_id), None)
            if shortcode is None:
                raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
            del self._links[shortcode]

    def delete_expired(self, now, **kwargs):
        self._check()
        with self._lock:
            expired = [code for code, link in self._links.items() if link.expires_at is not None and link.expires_at < now]
            for code in expired:
                del self._links[code]
        return len(expired)

    def put(self, link: LinkModel) -> LinkModel:
        """Seed a link directly, bypassing the service layer."""
        with self._lock:
            self._links[link.shortcode] = link
        return link


class InMemoryClickEventDAO(ClickEventBaseDAO):
    def __init__(self):
        self._lock = threading.Lock()
        self.events: list[ClickEventModel] = []
        self.fail = False
        self.fail_append = False

    def _check(self) -> None:
        if self.fail:
            raise DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    def append(self, link_id, referrer=None, user_agent=None, **kwargs):
        self._check()
        if self.fail_append:
            raise DataStoreError('Redis error: OOM command not allowed')
        return self.put(link_id, datetime.now(UTC), referrer=referrer, user_agent=user_agent)

    def count_in_range(self, start, end, link_id=None, **kwargs):
        self._check()
        with self._lock:
            return sum(1 for event in self.events if start <= event.timestamp < end and (link_id is None or event.link_id == link_id))

    def recent(self, limit, link_id=None, offset=0, **kwargs):
        self._check()
        if limit <= 0:
            return []
        with self._lock:
            events = [event for event in self.events if link_id is None or event.link_id == link_id]
        events.sort(key=lambda event: event.timestamp, reverse=True)
        return events[offset : offset + limit]

    def put(self, link_id: str, timestamp: datetime, referrer: str | None = None, user_agent: str | None = None) -> ClickEventModel:
        """Seed an event with an explicit timestamp."""
        event = ClickEventModel(id=str(uuid4()), link_id=link_id, timestamp=timestamp, referrer=referrer, user_agent=user_agent)
        with self._lock:
            self.events.append(event)
        return event


def make_link(shortcode: str, created_at: datetime, clicks: int = 0, target: str | None = None, **kwargs) -> LinkModel:
    return LinkModel(
        id=str(uuid4()),
        shortcode=shortcode,
        target=target or f'https://example.com/{shortcode}',
        created_at=created_at,
        clicks=clicks,
        **kwargs,
    )


@pytest.fixture
def link_dao() -> InMemoryLinkDAO:
    return InMemoryLinkDAO()


@pytest.fixture
def click_dao() -> InMemoryClickEventDAO:
    return InMemoryClickEventDAO()


@pytest.fixture
def base() -> str:
    return 'https://sho.rt'


@pytest.fixture
def new_link():
    """Factory fixture building LinkModel records for seeding."""
    return make_link
