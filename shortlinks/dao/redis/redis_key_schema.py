import functools
from collections.abc import Callable

import xxhash


__all__ = ['RedisKeySchema']  # hide internal decorator prefix_key from imports


def prefix_key(func: Callable) -> Callable:
    @functools.wraps(func)
    def wrapper(self, *args, **kwargs) -> str:
        key = func(self, *args, **kwargs)
        return f'{self.prefix}:{key}' if self.prefix is not None else key

    return wrapper


class RedisKeySchema:
    """Provide standardized Redis keys for storing links and click events.

    An optional prefix can be provided to namespace all generated keys.
    It is highly encouraged to set a custom prefix for each app and environment,
    e.g. "shortlinks:prod" or "shortlinks:dev".
    """

    def __init__(self, prefix: str | None = None):
        if prefix is not None and not isinstance(prefix, str):
            raise TypeError(f'Prefix must be of type string (given type: {type(prefix)}).')

        self.prefix = prefix

    # Only link hashes live under 'link:'; every index lives under 'links:'
    @prefix_key
    def link_key(self, shortcode: str) -> str:
        return f'link:{shortcode}'

    @prefix_key
    def link_id_key(self, link_id: str) -> str:
        return f'links:ids:{link_id}'

    @prefix_key
    def link_target_key(self, target: str) -> str:
        # Target URLs are bucketed by hash; the bucket maps full URL -> shortcode
        digest = xxhash.xxh64_hexdigest(target.encode('utf-8'))
        return f'links:targets:{digest}'

    @prefix_key
    def links_created_key(self) -> str:
        return 'links:created'

    @prefix_key
    def links_expiry_key(self) -> str:
        return 'links:expiry'

    @prefix_key
    def owner_links_key(self, owner_id: str) -> str:
        return f'users:{owner_id}:links'

    @prefix_key
    def click_key(self, event_id: str) -> str:
        return f'clicks:{event_id}'

    @prefix_key
    def clicks_timeline_key(self) -> str:
        return 'clicks:timeline'

    @prefix_key
    def link_clicks_key(self, link_id: str) -> str:
        return f'clicks:links:{link_id}'
