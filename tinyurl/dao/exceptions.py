"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    ShortURLNotFoundError:
        Raised when no ShortURLModel is stored under the requested short code.

    DataStoreError:
        Raised when the data store can't be reached or fails in an unclassified
        way (connection issues, timeouts, throttling, unknown transaction state).

Example:
    >>> from tinyurl.dao.exceptions import ShortURLNotFoundError
    >>> raise ShortURLNotFoundError("Short URL with code '2e3lqf3' not found.")
    Traceback (most recent call last):
        ...
    tinyurl.dao.exceptions.ShortURLNotFoundError: Short URL with code '2e3lqf3' not found.
"""

from tinyurl.exceptions import TinyURLError


class DAOError(TinyURLError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class ShortURLNotFoundError(DAOError):
    """Raised when a ShortURLModel is not found in the data store."""

    error_code = 'dao:short_url_not_found_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and throttling.
    """

    error_code = 'dao:data_store_error'
