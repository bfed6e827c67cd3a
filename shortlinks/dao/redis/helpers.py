import functools
from datetime import datetime, UTC
from typing import TypeVar, Any
from collections.abc import Callable

import redis

from shortlinks.dao.exceptions import DataStoreError


__all__ = ['handle_redis_connection_error', 'to_redis_datetime', 'from_redis_datetime']

F = TypeVar('F', bound=Callable[..., Any])


def handle_redis_connection_error[F](method: F) -> F:
    """Wrap Redis-interacting DAO methods to handle connection errors

    Args:
        method (Callable[..., Any]):
            DAO method performing Redis operations which may raise redis.exceptions.RedisError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on connectivity issues or
            server-side errors reported by Redis. The owner must expose
            `redis` and `address` (see RedisClientMixin).

    Example:
        >>> @handle_redis_connection_error
        ... def get_link(self, shortcode):
        ...     return self.redis.hgetall(shortcode)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except (redis.exceptions.ConnectionError, redis.exceptions.TimeoutError) as e:
            raise DataStoreError(f"Can't connect to Redis at {self.address}.") from e
        except redis.exceptions.RedisError as e:
            raise DataStoreError(f'Redis error: {e}') from e

    return wrapper


def to_redis_datetime(value: datetime | None) -> str:
    """Serialize an optional datetime into a Redis hash field ('' for None)"""
    return '' if value is None else value.astimezone(UTC).isoformat()


def from_redis_datetime(value: str | None) -> datetime | None:
    """Parse a Redis hash field written by to_redis_datetime()"""
    if not value:
        return None
    parsed = datetime.fromisoformat(value)
    return parsed if parsed.tzinfo is not None else parsed.replace(tzinfo=UTC)
