"""Data models shared by the shortener and its record stores.

Classes:
    ShortURLModel:
        A long URL <-> short code mapping. Stored twice, once under each key.

    InsertStatus:
        Which way an atomic dual insert resolved.

    InsertOutcome:
        Result of ShortURLBaseDAO.insert(), carrying the existing record or
        the rejection detail where relevant.

Example:
    >>> from datetime import UTC, datetime
    >>> record = ShortURLModel(
    ...     target='https://example.com/a', shortcode='2e3lqf3', created_at=datetime(2025, 10, 15, tzinfo=UTC)
    ... )
    >>> record.to_item()
    {'fullURL': 'https://example.com/a', 'tinyURL': '2e3lqf3', 'created': '2025-10-15T00:00:00.000Z'}
    >>> InsertOutcome.long_url_exists(record).existing.shortcode
    '2e3lqf3'
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Any

from tinyurl.constants import KeyPrefix
from tinyurl.exceptions import MalformedRecordError
from tinyurl.utils.helpers import utcnow, format_timestamp, parse_timestamp


@dataclass(frozen=True)
class ShortURLModel:
    """Represent a shortened URL mapping.

    Attributes:
        target (str):
            The original long URL that the short code redirects to.
        shortcode (str):
            The short identifier derived from the target URL.
        created_at (datetime):
            Creation time (UTC, millisecond precision). Set once, never updated.
    """

    target: str
    shortcode: str
    created_at: datetime = field(default_factory=utcnow)

    def to_item(self) -> dict[str, str]:
        """Flatten the record into the attribute map stored under both keys."""
        return {
            KeyPrefix.LONG_URL.value: self.target,
            KeyPrefix.SHORT_CODE.value: self.shortcode,
            'created': format_timestamp(self.created_at),
        }

    @classmethod
    def from_item(cls, item: Mapping[str, Any]) -> 'ShortURLModel':
        """Rebuild a record from a stored attribute map.

        Extra attributes (e.g. the partition key) are ignored.

        Raises:
            MalformedRecordError:
                If a field is missing or the creation timestamp can't be parsed.
        """
        try:
            return cls(
                target=item[KeyPrefix.LONG_URL.value],
                shortcode=item[KeyPrefix.SHORT_CODE.value],
                created_at=parse_timestamp(item['created']),
            )
        except (KeyError, TypeError, ValueError) as e:
            raise MalformedRecordError(f'Stored short URL record is malformed ({type(e).__name__}: {e}).') from e


class InsertStatus(StrEnum):
    SUCCESS = 'success'
    LONG_URL_EXISTS = 'long_url_exists'
    SHORT_CODE_EXISTS = 'short_code_exists'
    INVALID = 'invalid'


@dataclass(frozen=True)
class InsertOutcome:
    """Result of an atomic dual insert.

    Attributes:
        status (InsertStatus):
            How the insert resolved. A long URL collision always takes
            precedence over a short code collision.
        existing (ShortURLModel | None):
            The record already registered for the long URL (LONG_URL_EXISTS only).
        detail (str | None):
            Human-readable rejection reason (INVALID only).
    """

    status: InsertStatus
    existing: ShortURLModel | None = None
    detail: str | None = None

    @classmethod
    def success(cls) -> 'InsertOutcome':
        return cls(status=InsertStatus.SUCCESS)

    @classmethod
    def long_url_exists(cls, existing: ShortURLModel) -> 'InsertOutcome':
        return cls(status=InsertStatus.LONG_URL_EXISTS, existing=existing)

    @classmethod
    def short_code_exists(cls) -> 'InsertOutcome':
        return cls(status=InsertStatus.SHORT_CODE_EXISTS)

    @classmethod
    def invalid(cls, detail: str) -> 'InsertOutcome':
        return cls(status=InsertStatus.INVALID, detail=detail)
