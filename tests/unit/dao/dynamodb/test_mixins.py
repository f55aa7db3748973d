"""Unit tests for DynamoDB-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Ensures correct initialization with or without a boto3 client.
       - Confirms the retry policy is bounded by max_attempts.
       - Confirms a missing table or a non-integer retry budget raises
         BadConfigurationError before any client is built.
    2. Attribute marshalling
       - Ensures plain dicts are converted to and from DynamoDB attribute maps.
    3. Error handling decorator
       - Ensures botocore failures are converted into DataStoreError.
"""

from unittest.mock import MagicMock, patch

import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from tinyurl.exceptions import BadConfigurationError
from tinyurl.dao.exceptions import DataStoreError
from tinyurl.dao.dynamodb.mixins import DynamoDBClientMixin
from tinyurl.dao.dynamodb.helpers import handle_dynamodb_error


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_dynamodb_client():
    """Ensure the mixin creates a boto3 client when none is provided."""
    with patch('tinyurl.dao.dynamodb.mixins.boto3.client', autospec=True) as client_mock:
        mixin = DynamoDBClientMixin(
            table_name='tinyurl',
            region_name='eu-west-1',
            endpoint_url='http://localstack:4566',
            max_attempts=3,
            prefix='testapp:test',
        )

    client_mock.assert_called_once()
    args, kwargs = client_mock.call_args
    assert args == ('dynamodb',)
    assert kwargs['region_name'] == 'eu-west-1'
    assert kwargs['endpoint_url'] == 'http://localstack:4566'
    assert kwargs['config'].retries == {'max_attempts': 3, 'mode': 'standard'}
    assert mixin.dynamodb is client_mock.return_value
    assert mixin.table_name == 'tinyurl'
    assert mixin.keys.short_code_key('2e3lqf3') == 'testapp:test:tinyURL#2e3lqf3'


def test_initialize_with_dynamodb_client():
    """Ensure the mixin uses a pre-initialized boto3 client."""
    client = MagicMock()
    mixin = DynamoDBClientMixin(table_name='tinyurl', dynamodb_client=client)

    assert mixin.dynamodb is client
    assert mixin.keys.prefix is None


@pytest.mark.parametrize('table_name', [None, ''])
def test_initialize_without_table_name(table_name):
    with pytest.raises(BadConfigurationError):
        DynamoDBClientMixin(table_name=table_name, dynamodb_client=MagicMock())


@pytest.mark.parametrize('max_attempts', [0, -1, None, '3', 2.5, True])
def test_initialize_with_invalid_max_attempts(max_attempts):
    """Ensure only positive integers are accepted as the botocore retry budget."""
    with patch('tinyurl.dao.dynamodb.mixins.boto3.client', autospec=True) as client_mock:
        with pytest.raises(BadConfigurationError, match='max_attempts must be a positive integer'):
            DynamoDBClientMixin(table_name='tinyurl', region_name='eu-west-1', max_attempts=max_attempts)

    client_mock.assert_not_called()


# -------------------------------
# 2. Attribute marshalling
# -------------------------------


def test_marshall_and_unmarshall():
    mixin = DynamoDBClientMixin(table_name='tinyurl', dynamodb_client=MagicMock())
    data = {'fullURL': 'https://example.com', 'tinyURL': '2e3lqf3'}

    item = mixin._marshall(data)

    assert item == {'fullURL': {'S': 'https://example.com'}, 'tinyURL': {'S': '2e3lqf3'}}
    assert mixin._unmarshall(item) == data


# -------------------------------
# 3. Error handling decorator
# -------------------------------


class DummyDAO:
    table_name = 'tinyurl'

    def __init__(self, error=None):
        self.error = error

    @handle_dynamodb_error
    def describe(self):
        """Describe the table."""
        if self.error is not None:
            raise self.error
        return 'ACTIVE'


def test_decorator_allows_normal_execution():
    assert DummyDAO().describe() == 'ACTIVE'


def test_decorator_transforms_client_error():
    error = ClientError({'Error': {'Code': 'InternalServerError', 'Message': 'oops'}}, 'DescribeTable')

    with pytest.raises(DataStoreError, match=r"table 'tinyurl' failed \(InternalServerError\)") as exc_info:
        DummyDAO(error).describe()

    assert exc_info.value.__cause__ is error


def test_decorator_transforms_botocore_error():
    with pytest.raises(DataStoreError, match="Can't reach DynamoDB table 'tinyurl'"):
        DummyDAO(EndpointConnectionError(endpoint_url='https://dynamodb.eu-west-1.amazonaws.com')).describe()


def test_decorator_preserves_metadata():
    assert DummyDAO.describe.__name__ == 'describe'
    assert DummyDAO.describe.__doc__ == 'Describe the table.'
