"""Redis mixin providing shared client initialization.

Records are stored as hashes and read back as str, so every client a Redis
DAO talks through must decode responses. Clients built here always do; a
pre-initialized client that doesn't is rejected up front instead of failing
later inside ShortURLModel.from_item() on bytes values.

Classes:
    - RedisClientMixin: Base mixin to inject key management and a verified client.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLRedisDAO(redis_host='redis', prefix='tinyurl:prod')
        >>> dao.keys.short_code_key('2e3lqf3')
        'tinyurl:prod:tinyURL#2e3lqf3'
"""

from typing import Optional

import redis

from tinyurl.constants import Defaults
from tinyurl.dao.key_schema import KeySchema
from tinyurl.dao.redis.helpers import handle_redis_connection_error
from tinyurl.exceptions import BadConfigurationError


class RedisClientMixin:
    """Mixin Redis client setup for Redis-backed DAOs.

    Attributes:
        redis (redis.Redis):
            Decoding Redis client used by subclasses. Reachable at construction time.

        keys (KeySchema):
            Helper class for generating namespaced Redis key names.
    """

    def __init__(
        self,
        redis_host: str = 'localhost',
        redis_port: int = Defaults.REDIS_PORT,
        redis_db: int = Defaults.REDIS_DB,
        redis_username: Optional[str] = None,
        redis_password: Optional[str] = None,
        redis_client: Optional[redis.Redis] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize a Redis-based DAO

        Either wraps a pre-initialized client or builds one from the connection
        parameters, then PINGs it once.

        Args:
            redis_host (str):
                Hostname of the Redis server. Defaults to 'localhost'.

            redis_port (int):
                Redis server port. Defaults to 6379.

            redis_db (int):
                Redis database index. Defaults to 0.

            redis_username (Optional[str]):
                Username for Redis ACL authentication.

            redis_password (Optional[str]):
                Password for Redis authentication.

            redis_client (Optional[redis.Redis]):
                Pre-initialized client created with decode_responses=True.
                Connection parameters are ignored when it is given.

            prefix (Optional[str]):
                Namespace prefix for all Redis keys, e.g. 'app:env'.

        Raises:
            BadConfigurationError:
                If the port or database index isn't a valid integer, or the
                given client doesn't decode responses.
            DataStoreError:
                If Redis doesn't answer the PING.
        """
        if redis_client is None:
            redis_client = redis.Redis(
                host=redis_host,
                port=_checked_int('redis_port', redis_port, minimum=1),
                db=_checked_int('redis_db', redis_db, minimum=0),
                decode_responses=True,
                username=redis_username,
                password=redis_password,
            )
        elif not redis_client.connection_pool.connection_kwargs.get('decode_responses'):
            raise BadConfigurationError('Redis client must be created with decode_responses=True.')

        self.redis = redis_client
        self.keys = KeySchema(prefix=prefix)

        self._ping()

    @handle_redis_connection_error
    def _ping(self) -> None:
        self.redis.ping()


def _checked_int(name: str, value: int, minimum: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < minimum:
        raise BadConfigurationError(f'{name} must be an integer >= {minimum} (given value: {value!r}).')
    return value
