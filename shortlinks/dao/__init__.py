from shortlinks.dao.base import LinkBaseDAO, ClickEventBaseDAO
from shortlinks.dao.redis import LinkRedisDAO, ClickEventRedisDAO


__all__ = [
    'LinkBaseDAO',
    'ClickEventBaseDAO',
    'LinkRedisDAO',
    'ClickEventRedisDAO',
]
