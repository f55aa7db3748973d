"""Data Access Object (DAO) implementation for managing shortened URLs in Redis

This module provides a Redis-based implementation of ShortURLBaseDAO.

Each key projection is a Redis hash holding the full record:

    <prefix>:fullURL#<long url>   -> {fullURL, tinyURL, created}
    <prefix>:tinyURL#<short code> -> {fullURL, tinyURL, created}

Redis has no conditional multi-key write, so the atomic dual insert is built
from an optimistic transaction (WATCH both keys, check them, MULTI/EXEC both
HSETs). EXEC aborts if either watched key changed after the check.

Classes:
    ShortURLRedisDAO:
        DAO for storing and retrieving ShortURLModel in a Redis datastore.

Example:
    >>> from tinyurl.models import ShortURLModel
    >>> from tinyurl.dao.redis import ShortURLRedisDAO

    >>> dao = ShortURLRedisDAO(prefix="tinyurl:dev")

    >>> dao.insert(ShortURLModel(target="https://example.com/page", shortcode="2e3lqf3")).status
    <InsertStatus.SUCCESS: 'success'>

    >>> dao.get("2e3lqf3").target
    'https://example.com/page'
"""

import logging

import redis
from beartype import beartype

from tinyurl.constants import Defaults
from tinyurl.models import ShortURLModel, InsertOutcome
from tinyurl.dao.base import ShortURLBaseDAO
from tinyurl.dao.redis.mixins import RedisClientMixin
from tinyurl.dao.redis.helpers import handle_redis_connection_error
from tinyurl.dao.exceptions import DataStoreError, ShortURLNotFoundError


logger = logging.getLogger(__name__)


class ShortURLRedisDAO(RedisClientMixin, ShortURLBaseDAO):
    """Redis-based Data Access Object (DAO) for managing short URL mappings

    This class implements the ShortURLBaseDAO interface using Redis as a data store.

    Attributes (see RedisClientMixin):
        redis (redis.Redis):
            Redis client used to communicate with the Redis datastore.
        keys (KeySchema):
            Key schema helper for generating namespaced Redis keys.

    Methods:
        insert(short_url: ShortURLModel, **kwargs) -> InsertOutcome:
            Atomically store both key projections of a record.
            Raises DataStoreError on connectivity issues or persistent contention.

        get(shortcode: str, **kwargs) -> ShortURLModel:
            Retrieve a short URL record by shortcode.
            Raises ShortURLNotFoundError when the shortcode doesn't exist.
            Raises DataStoreError on connectivity issues with Redis.
    """

    watch_retries = Defaults.REDIS_WATCH_RETRIES

    @handle_redis_connection_error
    @beartype
    def insert(self, short_url: ShortURLModel, **kwargs) -> InsertOutcome:
        """Atomically insert both key projections of a short URL record

        NOTE: A WatchError means another client wrote one of the two keys
              between our check and EXEC, e.g.:

              (lambda 1): WATCH fullURL#<url> tinyURL#<code>
                          HGETALL fullURL#<url>  => {}
                          EXISTS tinyURL#<code>  => 0
                          ... interruption
              (lambda 2): (same URL) MULTI, HSET x2, EXEC  => OK
              (lambda 1): MULTI, HSET x2, EXEC  => WatchError (nothing written)

              The check is simply repeated; this time lambda 1 observes the
              record written by lambda 2 and reports LONG_URL_EXISTS.

        Args:
            short_url (ShortURLModel):
                Candidate record.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            InsertOutcome: see ShortURLBaseDAO.insert().

        Raises:
            DataStoreError:
                On connectivity issues, or if the keys kept changing under
                us for `watch_retries` consecutive attempts.
        """
        long_url_key = self.keys.long_url_key(short_url.target)
        short_code_key = self.keys.short_code_key(short_url.shortcode)
        record = short_url.to_item()

        # Leaving the pipeline context resets it, which also UNWATCHes the keys
        with self.redis.pipeline(transaction=True) as pipe:
            for _ in range(self.watch_retries):
                try:
                    pipe.watch(long_url_key, short_code_key)

                    existing = pipe.hgetall(long_url_key)
                    if existing:
                        return InsertOutcome.long_url_exists(ShortURLModel.from_item(existing))
                    if pipe.exists(short_code_key):
                        return InsertOutcome.short_code_exists()

                    pipe.multi()
                    pipe.hset(long_url_key, mapping=record)
                    pipe.hset(short_code_key, mapping=record)
                    pipe.execute()
                except redis.exceptions.WatchError:
                    logger.debug(
                        'Watched key changed during dual insert. Re-checking.',
                        extra={'shortcode': short_url.shortcode},
                    )
                    continue
                except redis.exceptions.DataError as e:
                    return InsertOutcome.invalid(str(e))
                else:
                    return InsertOutcome.success()

        raise DataStoreError(
            f"Dual insert for short code '{short_url.shortcode}' kept conflicting after {self.watch_retries} attempts."
        )

    @handle_redis_connection_error
    @beartype
    def get(self, shortcode: str, **kwargs) -> ShortURLModel:
        """Retrieve a stored short URL record by shortcode

        Args:
            shortcode (str):
                The shortcode identifier for the shortened URL.
            **kwargs:
                Optional keyword arguments (for future use).

        Returns:
            ShortURLModel: The stored record.

        Raises:
            ShortURLNotFoundError:
                If the short URL does not exist in Redis.
            DataStoreError:
                If Redis connectivity issues occur.

        Example:
            >>> dao.get('2e3lqf3')
            ShortURLModel(target='https://example.com', shortcode='2e3lqf3', ...)
        """
        item = self.redis.hgetall(self.keys.short_code_key(shortcode))
        if not item:
            raise ShortURLNotFoundError(f"Short URL with code '{shortcode}' not found.")

        return ShortURLModel.from_item(item)
