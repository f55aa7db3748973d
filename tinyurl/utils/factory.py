"""Construction of the process-wide shortener and its record store.

Lambda execution environments are reused across invocations, so the store
client (and its connection pool) is built once per configuration and then
shared by every invocation served by this process.

Functions:
    build_short_url_dao(config: AppConfig) -> ShortURLBaseDAO
        Build the DAO for the configured backend.
    build_shortener(config: AppConfig) -> URLShortener
        Return the cached URLShortener for a configuration.

Example:
    >>> shortener = build_shortener(load_config())
    >>> shortener is build_shortener(load_config())
    True
"""

import functools
import logging

from tinyurl.constants import Backend
from tinyurl.dao.base import ShortURLBaseDAO
from tinyurl.exceptions import BadConfigurationError
from tinyurl.shortener import URLShortener
from tinyurl.utils.config import AppConfig


logger = logging.getLogger(__name__)


def build_short_url_dao(config: AppConfig) -> ShortURLBaseDAO:
    if config.active_backend == Backend.DYNAMODB:
        from tinyurl.dao.dynamodb import ShortURLDynamoDBDAO

        return ShortURLDynamoDBDAO(
            table_name=config.table_name,
            region_name=config.region_name,
            endpoint_url=config.endpoint_url,
            max_attempts=config.dynamodb_max_attempts,
            prefix=config.prefix,
        )

    if config.active_backend == Backend.REDIS:
        from tinyurl.dao.redis import ShortURLRedisDAO

        return ShortURLRedisDAO(
            redis_host=config.redis_host,
            redis_port=config.redis_port,
            redis_db=config.redis_db,
            redis_username=config.redis_username,
            redis_password=config.redis_password,
            prefix=config.prefix,
        )

    raise BadConfigurationError(f'Unsupported backend {config.active_backend!r}.')


@functools.cache
def build_shortener(config: AppConfig) -> URLShortener:
    logger.debug('Building URL shortener.', extra={'backend': str(config.active_backend)})
    return URLShortener(build_short_url_dao(config), max_attempts=config.max_encode_attempts)
