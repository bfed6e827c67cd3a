"""Data Access Object (DAO) implementation for the click event log in Redis

Storage layout (all keys namespaced by the DAO prefix):
    clicks:{event_id}          hash   id, link_id, timestamp, referrer, user_agent
    clicks:timeline            zset   event id scored by click epoch (all links)
    clicks:links:{link_id}     zset   event id scored by click epoch (one link)

Events are append-only. They are not removed when their link is deleted;
readers joining events with links must skip orphans.

Example:
    >>> dao = ClickEventRedisDAO(redis_client=link_dao.redis, prefix="app:dev")
    >>> event = dao.append(link.id, user_agent='curl/8.5.0')
    >>> dao.recent(1) == [event]
    True
"""

from datetime import datetime, UTC
from uuid import uuid4

from beartype import beartype

from shortlinks.types import RedisHash
from shortlinks.models import ClickEventModel
from shortlinks.dao.base import ClickEventBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error, to_redis_datetime, from_redis_datetime


class ClickEventRedisDAO(RedisClientMixin, ClickEventBaseDAO):
    """Redis-based Data Access Object (DAO) for the click event log

    Methods:
        append(link_id: str, referrer: str | None, user_agent: str | None) -> ClickEventModel:
            Store the event and index it in the global and per-link timelines
            within one MULTI/EXEC transaction.

        count_in_range(start: datetime, end: datetime, link_id: str | None) -> int:
            ZCOUNT over the relevant timeline, start inclusive and end exclusive.

        recent(limit: int, link_id: str | None, offset: int) -> list[ClickEventModel]:
            Newest events first.
    """

    @handle_redis_connection_error
    @beartype
    def append(self, link_id: str, referrer: str | None = None, user_agent: str | None = None, **kwargs) -> ClickEventModel:
        event = ClickEventModel(
            id=str(uuid4()),
            link_id=link_id,
            timestamp=datetime.now(UTC),
            referrer=referrer,
            user_agent=user_agent,
        )
        score = event.timestamp.timestamp()

        with self.redis.pipeline(transaction=True) as pipe:
            pipe.hset(self.keys.click_key(event.id), mapping=self._to_hash(event))
            pipe.zadd(self.keys.clicks_timeline_key(), {event.id: score})
            pipe.zadd(self.keys.link_clicks_key(link_id), {event.id: score})
            pipe.execute()
        return event

    @handle_redis_connection_error
    @beartype
    def count_in_range(self, start: datetime, end: datetime, link_id: str | None = None, **kwargs) -> int:
        """Count click events with start <= timestamp < end

        Example:
            >>> dao.count_in_range(today_start, tomorrow_start)
            17
        """
        return self.redis.zcount(self._timeline_key(link_id), start.timestamp(), f'({end.timestamp()}')

    @handle_redis_connection_error
    @beartype
    def recent(self, limit: int, link_id: str | None = None, offset: int = 0, **kwargs) -> list[ClickEventModel]:
        if limit <= 0:
            return []

        event_ids = self.redis.zrevrange(self._timeline_key(link_id), offset, offset + limit - 1)
        if not event_ids:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for event_id in event_ids:
                pipe.hgetall(self.keys.click_key(event_id))
            rows = pipe.execute()

        return [self._from_hash(fields) for fields in rows if fields]

    def _timeline_key(self, link_id: str | None) -> str:
        return self.keys.clicks_timeline_key() if link_id is None else self.keys.link_clicks_key(link_id)

    @staticmethod
    def _to_hash(event: ClickEventModel) -> RedisHash:
        return {
            'id': event.id,
            'link_id': event.link_id,
            'timestamp': to_redis_datetime(event.timestamp),
            'referrer': event.referrer or '',
            'user_agent': event.user_agent or '',
        }

    @staticmethod
    def _from_hash(fields: RedisHash) -> ClickEventModel:
        return ClickEventModel(
            id=fields['id'],
            link_id=fields['link_id'],
            timestamp=from_redis_datetime(fields['timestamp']),
            referrer=fields.get('referrer') or None,
            user_agent=fields.get('user_agent') or None,
        )
