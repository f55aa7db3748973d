"""Unit tests for Redis-based mixins.

Test coverage includes:
    1. Initialization and configuration
       - Ensures correct initialization with or without a Redis client.
       - Confirms self-built clients always decode responses.
       - Confirms a pre-initialized client that doesn't decode is rejected.
       - Confirms a non-integer port or database index raises BadConfigurationError.
    2. Connectivity check
       - Initialization pings Redis once.
       - Unreachable Redis raises DataStoreError naming the endpoint.
"""

from unittest.mock import MagicMock, patch

import pytest
import redis

from tinyurl.exceptions import BadConfigurationError
from tinyurl.dao.exceptions import DataStoreError
from tinyurl.dao.redis.mixins import RedisClientMixin


# -------------------------------
# Fixtures
# -------------------------------


def make_client(**connection_kwargs):
    _redis_client = MagicMock(
        spec=redis.Redis,
        connection_pool=MagicMock(
            spec=redis.ConnectionPool,
            connection_kwargs={'host': 'redis', 'port': 6379, 'db': 0, 'decode_responses': True, **connection_kwargs},
        ),
    )
    _redis_client.ping.return_value = True
    return _redis_client


@pytest.fixture
def redis_client():
    return make_client()


# -------------------------------
# 1. Initialization and configuration
# -------------------------------


def test_initialize_without_redis_client():
    """Ensure DAO creates a decoding Redis client when none is provided."""
    redis_config = {
        'redis_host': 'redis',
        'redis_port': 6380,
        'redis_db': 2,
        'redis_username': 'default',
        'redis_password': 'password',
    }

    with patch('tinyurl.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        mixin = RedisClientMixin(**redis_config, prefix='testapp:test')

        redis_mock.assert_called_once_with(host='redis', port=6380, db=2, decode_responses=True, username='default', password='password')
        assert mixin.redis is redis_mock_instance
        assert mixin.keys.prefix == 'testapp:test'


def test_initialize_with_defaults():
    with patch('tinyurl.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        RedisClientMixin()

    redis_mock.assert_called_once_with(host='localhost', port=6379, db=0, decode_responses=True, username=None, password=None)


def test_initialize_with_redis_client(redis_client):
    """Ensure DAO correctly uses a pre-initialized Redis client."""
    mixin = RedisClientMixin(redis_client=redis_client, prefix='testapp:test')

    assert mixin.redis is redis_client


@pytest.mark.parametrize('decode_responses', [False, None])
def test_initialize_with_non_decoding_redis_client(decode_responses):
    """Ensure a client returning bytes is refused before it is ever used."""
    client = make_client(decode_responses=decode_responses)

    with pytest.raises(BadConfigurationError, match='decode_responses=True'):
        RedisClientMixin(redis_client=client)

    client.ping.assert_not_called()


def test_initialize_with_real_non_decoding_redis_client():
    client = redis.Redis(host='localhost', port=6379)

    with pytest.raises(BadConfigurationError, match='decode_responses=True'):
        RedisClientMixin(redis_client=client)


@pytest.mark.parametrize(
    'redis_config, message',
    [
        ({'redis_port': None}, 'redis_port must be an integer >= 1'),
        ({'redis_port': '6379'}, 'redis_port must be an integer >= 1'),
        ({'redis_port': 0}, 'redis_port must be an integer >= 1'),
        ({'redis_db': None}, 'redis_db must be an integer >= 0'),
        ({'redis_db': -1}, 'redis_db must be an integer >= 0'),
        ({'redis_db': True}, 'redis_db must be an integer >= 0'),
    ],
)
def test_initialize_with_invalid_connection_parameters(redis_config, message):
    with patch('tinyurl.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        with pytest.raises(BadConfigurationError, match=message):
            RedisClientMixin(**redis_config)

    redis_mock.assert_not_called()


# -------------------------------
# 2. Connectivity check
# -------------------------------


def test_initialize_pings_redis(redis_client):
    RedisClientMixin(redis_client=redis_client, prefix='testapp:test')

    redis_client.ping.assert_called_once_with()


def test_initialize_with_unreachable_redis():
    """Ensure unreachable Redis raises DataStoreError naming the configured endpoint."""
    with patch('tinyurl.dao.redis.mixins.redis.Redis', autospec=True) as redis_mock:
        redis_mock_instance = redis_mock.return_value
        redis_mock_instance.ping.side_effect = redis.exceptions.ConnectionError('Connection error')
        redis_mock_instance.connection_pool = MagicMock()
        redis_mock_instance.connection_pool.connection_kwargs = {'host': '203.0.113.1', 'port': 18000, 'db': 5}

        with pytest.raises(DataStoreError, match="Can't connect to Redis at 203.0.113.1:18000/5."):
            RedisClientMixin(redis_host='203.0.113.1', redis_port=18000, redis_db=5, prefix='testapp:test')


def test_initialize_with_redis_timeout(redis_client):
    redis_client.ping.side_effect = redis.exceptions.TimeoutError('Timeout connecting to server')

    with pytest.raises(DataStoreError, match="Can't connect to Redis at redis:6379/0."):
        RedisClientMixin(redis_client=redis_client)
