import functools
from collections.abc import Callable
from typing import Any

from botocore.exceptions import BotoCoreError, ClientError

from tinyurl.dao.exceptions import DataStoreError


__all__ = []


def handle_dynamodb_error[F: Callable[..., Any]](method: F) -> F:
    """Wrap DynamoDB-interacting DAO methods to handle backend faults

    Any botocore failure which escapes the DAO method (i.e. one the method did
    not classify itself) is converted to DataStoreError. botocore has already
    retried transient faults according to the client's retry policy by then.

    Args:
        method (Callable[..., Any]):
            DAO method performing DynamoDB requests which may raise
            botocore.exceptions.ClientError or BotoCoreError.

    Returns:
        Callable[..., Any]:
            Wrapped method which raises DataStoreError on backend faults.

    Example:
        >>> @handle_dynamodb_error
        ... def describe(self):
        ...     return self.dynamodb.describe_table(TableName=self.table_name)
    """

    @functools.wraps(method)
    def wrapper(self, *args, **kwargs):
        try:
            return method(self, *args, **kwargs)
        except ClientError as e:
            error_code = e.response.get('Error', {}).get('Code', 'Unknown')
            raise DataStoreError(f"DynamoDB request on table '{self.table_name}' failed ({error_code}).") from e
        except BotoCoreError as e:
            raise DataStoreError(f"Can't reach DynamoDB table '{self.table_name}'.") from e

    return wrapper
