"""Data Access Object (DAO) implementation for managing links in Redis

This module provides a Redis-based implementation of LinkBaseDAO.

Responsibilities:
    - Insert, retrieve and delete links;
    - Maintain secondary indexes (id, target URL, creation order, expiry, owner);
    - Count clicks atomically;
    - Bulk-delete expired links;
    - Provide defensive error handling and raise appropriate DAO exceptions.

Storage layout (all keys namespaced by the DAO prefix):
    link:{shortcode}                 hash   id, shortcode, target, clicks, created_at, expires_at, owner_id
    links:ids:{id}                   string shortcode
    links:targets:{xxh64(target)}    hash   target -> shortcode
    links:created                    zset   shortcode scored by creation epoch
    links:expiry                     zset   shortcode scored by expiry epoch (expiring links only)
    users:{owner_id}:links           zset   shortcode scored by creation epoch

Concurrency:
    Every write which depends on the current state of a link runs through
    `redis.Redis.transaction()`: the link hash is WATCHed, the state is read,
    and the writes are queued in MULTI/EXEC. If another client touches the
    link in between, EXEC aborts with WatchError and redis-py re-runs the
    whole read-check-write cycle. This gives:
        - insert: exactly one winner per shortcode; the loser re-checks and
          raises LinkAlreadyExistsError instead of overwriting.
        - delete / delete_expired: each link is removed (and counted) by
          exactly one caller.

    increment_clicks is the exception: it runs as a single Lua script
    (EXISTS, HINCRBY, HGETALL), which Redis executes atomically. Hot links never
    loop on WatchError, and a deleted link is never recreated as a bare
    counter.

Classes:
    LinkRedisDAO:
        DAO for storing and retrieving LinkModel in a Redis datastore.

Example:
    >>> from shortlinks.dao.redis import LinkRedisDAO

    >>> with LinkRedisDAO(prefix="app:dev") as dao:
    ...     dao.insert(link)
    ...     dao.increment_clicks(link.shortcode).clicks
    1
"""

import logging
from datetime import datetime

from beartype import beartype

from shortlinks.types import RedisHash
from shortlinks.models import LinkModel
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.helpers import handle_redis_connection_error, to_redis_datetime, from_redis_datetime
from shortlinks.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError


logger = logging.getLogger(__name__)

# KEYS[1]: link hash. Returns the updated hash as a flat field/value list, or nil for a missing link
_INCREMENT_CLICKS = """
if redis.call('EXISTS', KEYS[1]) == 0 then
    return nil
end
redis.call('HINCRBY', KEYS[1], 'clicks', 1)
return redis.call('HGETALL', KEYS[1])
"""


class LinkRedisDAO(RedisClientMixin, LinkBaseDAO):
    """Redis-based Data Access Object (DAO) for managing links

    This class implements the LinkBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (RedisKeySchema):
            Key schema helper for generating namespaced Redis keys.

    Example:
        >>> dao = LinkRedisDAO(redis_host="localhost", prefix="shortlinks:test")
        >>> dao.insert(link)
        LinkModel(...)
        >>> dao.get(link.shortcode).target
        'https://example.com'
    """

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self._increment_clicks = self.redis.register_script(_INCREMENT_CLICKS)

    @handle_redis_connection_error
    @beartype
    def find_by_target(self, target: str, **kwargs) -> LinkModel | None:
        """Retrieve the link pointing at an exact target URL

        Example:
            >>> dao.find_by_target('https://example.com')
            LinkModel(target='https://example.com', shortcode='abc123', ...)
        """
        shortcode = self.redis.hget(self.keys.link_target_key(target), target)
        if shortcode is None:
            return None

        fields = self.redis.hgetall(self.keys.link_key(shortcode))
        if not fields or fields.get('target') != target:
            return None
        return self._from_hash(fields)

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> LinkModel:
        """Retrieve a stored link by shortcode

        Raises:
            LinkNotFoundError:
                If the link does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('abc123')
            LinkModel(target='https://example.com', shortcode='abc123', ...)
        """
        fields = self.redis.hgetall(self.keys.link_key(shortcode))
        if not fields:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return self._from_hash(fields)

    @handle_redis_connection_error
    @beartype
    def insert(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert a link and its index entries into Redis

        The shortcode is claimed inside a WATCH/MULTI transaction, so two
        concurrent inserts of the same shortcode can never both succeed.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same shortcode already exists.
            DataStoreError:
                If a Redis connection issue occurs during the transaction.
        """
        link_key = self.keys.link_key(link.shortcode)
        created_score = link.created_at.timestamp()

        def _insert(pipe) -> None:
            if pipe.exists(link_key):
                raise LinkAlreadyExistsError(f"Link with code '{link.shortcode}' already exists.")

            pipe.multi()
            pipe.hset(link_key, mapping=self._to_hash(link))
            pipe.set(self.keys.link_id_key(link.id), link.shortcode)
            # NOTE: NX keeps the oldest link as the canonical one for its target
            pipe.hsetnx(self.keys.link_target_key(link.target), link.target, link.shortcode)
            pipe.zadd(self.keys.links_created_key(), {link.shortcode: created_score})
            if link.expires_at is not None:
                pipe.zadd(self.keys.links_expiry_key(), {link.shortcode: link.expires_at.timestamp()})
            if link.owner_id is not None:
                pipe.zadd(self.keys.owner_links_key(link.owner_id), {link.shortcode: created_score})

        self.redis.transaction(_insert, link_key)
        return link

    @handle_redis_connection_error
    @beartype
    def increment_clicks(self, shortcode: str, **kwargs) -> LinkModel:
        """Atomically add one click to a link

        Raises:
            LinkNotFoundError:
                If the link does not exist (or was deleted concurrently).
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.increment_clicks('abc123').clicks
            43
        """
        flat = self._increment_clicks(keys=[self.keys.link_key(shortcode)])
        if not flat:
            raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")
        return self._from_hash(dict(zip(flat[::2], flat[1::2])))

    @handle_redis_connection_error
    def list_all(self, **kwargs) -> list[LinkModel]:
        shortcodes = self.redis.zrevrange(self.keys.links_created_key(), 0, -1)
        return self._load_many(shortcodes)

    @handle_redis_connection_error
    @beartype
    def list_by_owner(self, owner_id: str, **kwargs) -> list[LinkModel]:
        shortcodes = self.redis.zrevrange(self.keys.owner_links_key(owner_id), 0, -1)
        return self._load_many(shortcodes)

    @handle_redis_connection_error
    @beartype
    def delete(self, shortcode: str, **kwargs) -> None:
        """Permanently delete a link and its index entries

        Raises:
            LinkNotFoundError:
                If the link does not exist.
            DataStoreError:
                If Redis connectivity issues occur.
        """
        self._delete(shortcode)

    @handle_redis_connection_error
    @beartype
    def delete_by_id(self, link_id: str, **kwargs) -> None:
        shortcode = self.redis.get(self.keys.link_id_key(link_id))
        if shortcode is None:
            raise LinkNotFoundError(f"Link with id '{link_id}' not found.")
        self._delete(shortcode, link_id=link_id)

    @handle_redis_connection_error
    @beartype
    def delete_expired(self, now: datetime, **kwargs) -> int:
        """Delete every link which expired strictly before `now`

        Candidates come from the expiry index. Each candidate is re-checked and
        removed in its own transaction, so links created, extended or deleted
        concurrently are never double-counted or removed by mistake.

        Returns:
            int:
                Number of links deleted by this call.

        Example:
            >>> dao.delete_expired(datetime.now(UTC))
            3
        """
        shortcodes = self.redis.zrangebyscore(self.keys.links_expiry_key(), '-inf', f'({now.timestamp()}')

        deleted = 0
        for shortcode in shortcodes:
            try:
                if self._delete(shortcode, expired_before=now):
                    deleted += 1
            except LinkNotFoundError:
                logger.debug('Expired link already deleted concurrently.', extra={'shortcode': shortcode})
        return deleted

    def _delete(self, shortcode: str, link_id: str | None = None, expired_before: datetime | None = None) -> bool:
        link_key = self.keys.link_key(shortcode)

        def _remove(pipe) -> bool:
            fields = pipe.hgetall(link_key)
            if not fields or (link_id is not None and fields.get('id') != link_id):
                raise LinkNotFoundError(f"Link with code '{shortcode}' not found.")

            link = self._from_hash(fields)
            if expired_before is not None and not (link.expires_at is not None and link.expires_at < expired_before):
                return False

            target_key = self.keys.link_target_key(link.target)
            indexed = pipe.hget(target_key, link.target) == link.shortcode

            pipe.multi()
            pipe.delete(link_key, self.keys.link_id_key(link.id))
            if indexed:
                pipe.hdel(target_key, link.target)
            pipe.zrem(self.keys.links_created_key(), link.shortcode)
            pipe.zrem(self.keys.links_expiry_key(), link.shortcode)
            if link.owner_id is not None:
                pipe.zrem(self.keys.owner_links_key(link.owner_id), link.shortcode)
            return True

        return self.redis.transaction(_remove, link_key, value_from_callable=True)

    def _load_many(self, shortcodes: list[str]) -> list[LinkModel]:
        if not shortcodes:
            return []

        with self.redis.pipeline(transaction=False) as pipe:
            for shortcode in shortcodes:
                pipe.hgetall(self.keys.link_key(shortcode))
            rows = pipe.execute()

        # Index entries may briefly outlive a link deleted between the two reads
        return [self._from_hash(fields) for fields in rows if fields]

    @staticmethod
    def _to_hash(link: LinkModel) -> RedisHash:
        return {
            'id': link.id,
            'shortcode': link.shortcode,
            'target': link.target,
            'clicks': str(link.clicks),
            'created_at': to_redis_datetime(link.created_at),
            'expires_at': to_redis_datetime(link.expires_at),
            'owner_id': link.owner_id or '',
        }

    @staticmethod
    def _from_hash(fields: RedisHash) -> LinkModel:
        return LinkModel(
            id=fields['id'],
            shortcode=fields['shortcode'],
            target=fields['target'],
            clicks=int(fields.get('clicks') or 0),
            created_at=from_redis_datetime(fields['created_at']),
            expires_at=from_redis_datetime(fields.get('expires_at')),
            owner_id=fields.get('owner_id') or None,
        )
