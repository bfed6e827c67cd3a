from shortlinks.dao.redis.redis_key_schema import RedisKeySchema
from shortlinks.dao.redis.mixins import RedisClientMixin
from shortlinks.dao.redis.link_redis_dao import LinkRedisDAO
from shortlinks.dao.redis.click_event_redis_dao import ClickEventRedisDAO


__all__ = [
    'RedisKeySchema',
    'RedisClientMixin',
    'LinkRedisDAO',
    'ClickEventRedisDAO',
]
