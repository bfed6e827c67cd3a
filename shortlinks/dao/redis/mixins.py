"""Shared Redis client lifecycle for the Redis-backed DAOs

A Lambda invocation builds its DAOs from the function's AppConfig section,
which maps 1:1 onto the `redis_*` keyword arguments below:

    {"redis": {"host": "...", "port": 6379, "db": 0, "ssl": true}}
        -> LinkRedisDAO(redis_host=..., redis_port=6379, redis_db=0, redis_ssl=True, prefix=...)

DAOs that work on the same request share one connection by passing the first
DAO's client as `redis_client`. Only the DAO which created a client closes it.

Example:
    >>> with LinkRedisDAO(redis_host='localhost', prefix='shortlinks:dev') as links:
    ...     clicks = ClickEventRedisDAO(redis_client=links.redis, prefix='shortlinks:dev')
    ...     links.address
    'localhost:6379/0'
"""

from typing import Optional

import redis

from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.exceptions import DataStoreError


class RedisClientMixin:
    """Create (or adopt) a Redis client and verify it can reach the server

    Attributes:
        redis (redis.Redis):
            Client used by the DAO.
        keys (RedisKeySchema):
            Namespaced key builder.

    Raises:
        DataStoreError:
            On construction, when the server does not answer PING.
    """

    def __init__(
        self,
        redis_host: Optional[str] = 'localhost',
        redis_port: Optional[int] = 6379,
        redis_db: Optional[int] = 0,
        redis_decode_responses: Optional[bool] = True,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_ssl: Optional[bool] = False,
        redis_socket_timeout: Optional[float] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        self._owns_client = redis_client is None
        if redis_client is None:
            # NOTE: ElastiCache with in-transit encryption needs ssl=True
            redis_client = redis.Redis(
                host=redis_host,
                port=int(redis_port),
                db=int(redis_db),
                decode_responses=redis_decode_responses,
                username=redis_username,
                password=redis_password,
                ssl=bool(redis_ssl),
                socket_timeout=redis_socket_timeout,
            )

        self.redis = redis_client
        self.keys = RedisKeySchema(prefix=prefix)

        self._healthcheck()

    @property
    def address(self) -> str:
        """`host:port/db` of the server behind the client, for error messages"""
        info = self.redis.connection_pool.connection_kwargs
        return f"{info.get('host')}:{info.get('port')}/{info.get('db')}"

    def _healthcheck(self, raise_error: bool = True) -> bool:
        """PING the server; return False (or raise DataStoreError) if it is unreachable"""
        try:
            self.redis.ping()
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            if not raise_error:
                return False
            raise DataStoreError(f"Can't connect to Redis at {self.address}. Check the provided configuration parameters.") from e
        return True

    def close(self) -> None:
        if self._owns_client:
            self.redis.close()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()
