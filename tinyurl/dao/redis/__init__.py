from tinyurl.dao.redis.mixins import RedisClientMixin
from tinyurl.dao.redis.short_url_redis_dao import ShortURLRedisDAO


__all__ = [
    'RedisClientMixin',
    'ShortURLRedisDAO',
]
