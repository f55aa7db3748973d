"""Helper utilities for AWS lambda functions.

Functions:
    get_short_url(shortcode: str, base: str) -> str
        Get string representation of short URL for a given shortcode
    utcnow() -> datetime
        Current UTC time truncated to millisecond precision
    format_timestamp(moment: datetime) -> str
        Render a datetime as an ISO-8601 UTC string with a 'Z' suffix
    parse_timestamp(value: str) -> datetime
        Parse a string produced by format_timestamp() back into a datetime
    require_environment(*names: str) -> Callable
        Decorator: Ensure required environment variables are present
    guarantee_500_response(handler: Callable) -> Callable
        Decorator: Turn unhandled lambda handler exceptions into HTTP 500 responses

Example:
    >>> from tinyurl.utils.helpers import get_short_url
    >>> get_short_url('2e3lqf3', 'https://tiny.example.com/')
    'https://tiny.example.com/2e3lqf3'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from collections.abc import Callable

from tinyurl.constants import UNKNOWN_INTERNAL_SERVER_ERROR
from tinyurl.exceptions import MissingEnvironmentVariableError
from tinyurl.utils.runtime import running_locally


logger = logging.getLogger(__name__)


def get_short_url(shortcode: str, base: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base (str): public base URL of the service

    Returns:
        str: short url string representation
    """
    return f'{base.rstrip("/")}/{shortcode}'


def utcnow() -> datetime:
    """Return the current UTC time truncated to millisecond precision.

    Stored timestamps only keep milliseconds, so truncating up front keeps
    a freshly created record equal to the same record read back from a store.
    """
    now = datetime.now(UTC)
    return now.replace(microsecond=now.microsecond // 1000 * 1000)


def format_timestamp(moment: datetime) -> str:
    """Render a datetime as an ISO-8601 UTC string

    Naive datetimes are assumed to already be in UTC.

    Example:
        >>> format_timestamp(datetime(2025, 10, 15, tzinfo=UTC))
        '2025-10-15T00:00:00.000Z'
    """
    if moment.tzinfo is None:
        moment = moment.replace(tzinfo=UTC)
    # fmt: off
    return moment.astimezone(UTC) \
                 .isoformat(timespec='milliseconds') \
                 .replace('+00:00', 'Z')
    # fmt: on


def parse_timestamp(value: str) -> datetime:
    """Parse an ISO-8601 timestamp into an aware UTC datetime

    Raises:
        TypeError: If value is not a string.
        ValueError: If value is not a valid ISO-8601 timestamp.
    """
    if not isinstance(value, str):
        raise TypeError(f'Timestamp must be of type string (given type: {type(value)}).')
    moment = datetime.fromisoformat(value)
    if moment.tzinfo is None:
        return moment.replace(tzinfo=UTC)
    return moment.astimezone(UTC)


def require_environment(*names: str) -> Callable:
    """Decorator ensuring required environment variables are present.

    Args:
        *names (str):
            Names of required environment variables.

    Raises:
        MissingEnvironmentVariableError:
            If any required environment variable is missing or empty.

    Example:
        >>> @require_environment('BASE_URL', 'TINYURL_TABLE')
        ... def my_function():
        ...     pass
        >>> my_function()
        MissingEnvironmentVariableError: Missing required environment variables: 'BASE_URL', 'TINYURL_TABLE'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            missing = [name for name in names if not os.environ.get(name)]
            if missing:
                missing_list = ', '.join(f"'{name}'" for name in missing)
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {missing_list}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with HTTP 500 when a lambda handler raises

    When running locally the original exception is re-raised instead, so
    `sam local invoke` shows the full traceback.
    """

    @functools.wraps(handler)
    def wrapper(event, context):
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception(
                'Unhandled exception in lambda handler. Responding with 500.',
                extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR},
            )
            return {
                'statusCode': 500,
                'headers': {'Content-Type': 'application/json'},
                'body': json.dumps(
                    {
                        'message': 'Internal Server Error',
                        'errorCode': UNKNOWN_INTERNAL_SERVER_ERROR,
                    }
                ),
            }

    return wrapper
