"""URL shortening service: encode long URLs, decode short codes.

Encoding is a bounded retry loop around the record store's atomic dual
insert. Each attempt derives a candidate code from the long URL with the
attempt number as hash seed:

    attempt 1: code = generate_shortcode(url, 1) -> dao.insert(...)
        SUCCESS            -> done, candidate is the new record
        LONG_URL_EXISTS    -> done, return the record registered earlier
        SHORT_CODE_EXISTS  -> another URL owns this code, try seed 2
        INVALID            -> BackendRejectedError
    ...
    attempt max_attempts exhausted -> CollisionLimitExceededError

No locks are taken here; concurrent callers are serialized solely by the
store's conditional writes. DataStoreError is never retried at this level.

Classes:
    URLShortener:
        Orchestrates encode/decode over an injected ShortURLBaseDAO.

Example:
    >>> from tinyurl.dao.dynamodb import ShortURLDynamoDBDAO
    >>> shortener = URLShortener(ShortURLDynamoDBDAO(table_name='tinyurl', region_name='eu-west-1'))
    >>> record = shortener.encode('https://example.com/a')
    >>> shortener.encode('https://example.com/a').shortcode == record.shortcode
    True
    >>> shortener.decode(record.shortcode)
    'https://example.com/a'
"""

import logging
from datetime import datetime
from collections.abc import Callable

from tinyurl.constants import Defaults
from tinyurl.models import ShortURLModel, InsertStatus
from tinyurl.dao.base import ShortURLBaseDAO
from tinyurl.exceptions import (
    ValidationError,
    BadConfigurationError,
    BackendRejectedError,
    CollisionLimitExceededError,
)
from tinyurl.utils.helpers import utcnow
from tinyurl.utils.shortener import generate_shortcode


logger = logging.getLogger(__name__)


class URLShortener:
    """Encode long URLs into short codes and decode them back.

    Attributes:
        dao (ShortURLBaseDAO):
            Record store. Owned by the caller; reused across calls.
        max_attempts (int):
            Maximum number of seeds tried before giving up on collisions.
        clock (Callable[[], datetime]):
            Source of record creation timestamps.
    """

    def __init__(
        self,
        dao: ShortURLBaseDAO,
        max_attempts: int = Defaults.MAX_ENCODE_ATTEMPTS,
        clock: Callable[[], datetime] | None = None,
    ):
        if not isinstance(dao, ShortURLBaseDAO):
            raise BadConfigurationError(f'URLShortener requires a ShortURLBaseDAO (given type: {type(dao)}).')
        if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
            raise BadConfigurationError(f'max_attempts must be a positive integer (given value: {max_attempts!r}).')

        self.dao = dao
        self.max_attempts = max_attempts
        self.clock = clock or utcnow

    def encode(self, target: str) -> ShortURLModel:
        """Register a long URL and return its record

        Encoding is idempotent: re-encoding an already registered URL returns
        the original record, never a new code.

        Args:
            target (str): long URL to shorten.

        Returns:
            ShortURLModel: the record now stored for `target`.

        Raises:
            ValidationError:
                If target is missing or empty.
            BackendRejectedError:
                If the store rejected the write (not retried).
            CollisionLimitExceededError:
                If every seed in 1..max_attempts collided with another URL.
            DataStoreError:
                If the store is unavailable (propagated as is).
        """
        if not isinstance(target, str) or not target:
            raise ValidationError('Long URL must be a non-empty string.')

        for attempt in range(1, self.max_attempts + 1):
            candidate = ShortURLModel(
                target=target,
                shortcode=generate_shortcode(target, attempt),
                created_at=self.clock(),
            )
            outcome = self.dao.insert(candidate)

            if outcome.status == InsertStatus.SUCCESS:
                logger.info(
                    'Registered new short URL.',
                    extra={'shortcode': candidate.shortcode, 'attempt': attempt},
                )
                return candidate

            if outcome.status == InsertStatus.LONG_URL_EXISTS:
                logger.info(
                    'Long URL already registered. Returning existing short URL.',
                    extra={'shortcode': outcome.existing.shortcode, 'attempt': attempt},
                )
                return outcome.existing

            if outcome.status == InsertStatus.INVALID:
                raise BackendRejectedError(f'Record store rejected the short URL: {outcome.detail}')

            # SHORT_CODE_EXISTS: a different long URL hashed to the same code.
            logger.warning(
                'Short code collision. Retrying with next seed.',
                extra={'shortcode': candidate.shortcode, 'attempt': attempt},
            )

        raise CollisionLimitExceededError(
            f'Could not find a free short code after {self.max_attempts} attempts.'
        )

    def decode(self, shortcode: str) -> str:
        """Resolve a short code to its long URL

        Args:
            shortcode (str): short code previously returned by encode().

        Returns:
            str: the original long URL.

        Raises:
            ValidationError:
                If shortcode is missing or empty.
            ShortURLNotFoundError:
                If no record exists for the short code.
            DataStoreError:
                If the store is unavailable (propagated as is).
        """
        if not isinstance(shortcode, str) or not shortcode:
            raise ValidationError('Short code must be a non-empty string.')

        return self.dao.get(shortcode).target
