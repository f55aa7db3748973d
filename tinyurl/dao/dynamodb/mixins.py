"""DynamoDB mixin providing shared client initialization.

Responsibilities:
    - Initialize a boto3 DynamoDB client with a bounded retry policy
    - Resolve key names and (de)serialize DynamoDB attribute maps

Classes:
    - DynamoDBClientMixin: Base mixin to inject key management, client setup
      and attribute marshalling.

Example:
    Typical usage with a DAO implementation:

        >>> class ShortURLDynamoDBDAO(DynamoDBClientMixin, ShortURLBaseDAO):
        ...     pass
        ...
        >>> dao = ShortURLDynamoDBDAO(table_name='tinyurl', region_name='eu-west-1')
        >>> dao.keys.short_code_key('2e3lqf3')
        'tinyURL#2e3lqf3'
"""

from typing import Any, Optional

import boto3
from boto3.dynamodb.types import TypeDeserializer, TypeSerializer
from botocore.config import Config

from tinyurl.constants import Defaults
from tinyurl.dao.key_schema import KeySchema
from tinyurl.exceptions import BadConfigurationError
from tinyurl.types import DynamoDBClient, DynamoDBItem


class DynamoDBClientMixin:
    """Mixin DynamoDB client setup for DynamoDB-backed DAOs.

    Attributes:
        dynamodb (BaseClient):
            Low-level boto3 DynamoDB client used by subclasses.

        table_name (str):
            Name of the table holding both key projections.

        keys (KeySchema):
            Helper class for generating namespaced partition key values.
    """

    def __init__(
        self,
        table_name: Optional[str] = None,
        region_name: Optional[str] = None,
        endpoint_url: Optional[str] = None,
        max_attempts: int = Defaults.DYNAMODB_MAX_ATTEMPTS,
        dynamodb_client: Optional[DynamoDBClient] = None,
        prefix: Optional[str] = None,
    ):
        """Initialize a DynamoDB-based DAO

        The option is given to either use an existing boto3 client instance or
        create one via the appropriate connection parameters.

        Args:
            table_name (Optional[str]):
                Name of the DynamoDB table. Required.

            region_name (Optional[str]):
                AWS region of the table. Falls back to the boto3 default chain.

            endpoint_url (Optional[str]):
                Endpoint override, e.g. LocalStack's 'http://localstack:4566'.

            max_attempts (int):
                Total attempts botocore makes for transient network faults
                (throttling, 5xx, connection resets). Defaults to 8.

            dynamodb_client (Optional[BaseClient]):
                Pre-initialized boto3 DynamoDB client. If None, a new client is created.

            prefix (Optional[str]):
                Namespace prefix for all partition keys, e.g. 'app:env'.

        Raises:
            BadConfigurationError:
                If the table name is missing or max_attempts is not a positive integer.
        """
        if not table_name:
            raise BadConfigurationError('DynamoDB table name must be a non-empty string.')

        if dynamodb_client is None:
            if isinstance(max_attempts, bool) or not isinstance(max_attempts, int) or max_attempts < 1:
                raise BadConfigurationError(f'DynamoDB max_attempts must be a positive integer (given value: {max_attempts!r}).')
            dynamodb_client = boto3.client(
                'dynamodb',
                region_name=region_name,
                endpoint_url=endpoint_url,
                config=Config(retries={'max_attempts': max_attempts, 'mode': 'standard'}),
            )

        self.dynamodb = dynamodb_client
        self.table_name = table_name
        self.keys = KeySchema(prefix=prefix)

        self._serializer = TypeSerializer()
        self._deserializer = TypeDeserializer()

    def _marshall(self, data: dict[str, Any]) -> DynamoDBItem:
        return {key: self._serializer.serialize(value) for key, value in data.items()}

    def _unmarshall(self, item: DynamoDBItem) -> dict[str, Any]:
        return {key: self._deserializer.deserialize(value) for key, value in item.items()}
