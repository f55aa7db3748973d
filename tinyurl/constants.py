from enum import StrEnum


class Defaults:
    """Default tuning values."""

    MAX_ENCODE_ATTEMPTS = 10  # Short code collision retries before giving up
    DYNAMODB_MAX_ATTEMPTS = 8  # botocore retry budget for transient network faults
    DYNAMODB_TRANSACTION_RETRIES = 8  # Re-issues of a dual insert cancelled by a concurrent transaction
    REDIS_WATCH_RETRIES = 16  # WATCH/MULTI restarts before declaring the store too contended
    REDIS_PORT = 6379
    REDIS_DB = 0


class Backend(StrEnum):
    """Supported short URL record stores."""

    DYNAMODB = 'dynamodb'
    REDIS = 'redis'


class KeyPrefix(StrEnum):
    """Tags distinguishing the two key projections of a short URL record."""

    LONG_URL = 'fullURL'
    SHORT_CODE = 'tinyURL'


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        BASE_URL = 'BASE_URL'
        ACTIVE_BACKEND = 'ACTIVE_BACKEND'
        MAX_ENCODE_ATTEMPTS = 'MAX_ENCODE_ATTEMPTS'

    class DynamoDB(StrEnum):
        TABLE = 'TINYURL_TABLE'
        REGION = 'AWS_REGION'
        ENDPOINT = 'DYNAMODB_ENDPOINT'
        MAX_ATTEMPTS = 'DYNAMODB_MAX_ATTEMPTS'

    class Redis(StrEnum):
        HOST = 'REDIS_HOST'
        PORT = 'REDIS_PORT'
        DB = 'REDIS_DB'
        USERNAME = 'REDIS_USERNAME'
        PASSWORD = 'REDIS_PASSWORD'  # noqa: S105

    class LocalStack(StrEnum):
        ENDPOINT = 'LOCALSTACK_ENDPOINT'  # usually http://localstack:4566


# Error codes
INVALID_REQUEST = 'INVALID_REQUEST'
MISSING_SHORTCODE = 'MISSING_SHORTCODE'
SHORT_URL_NOT_FOUND = 'SHORT_URL_NOT_FOUND'
COLLISION_LIMIT_EXCEEDED = 'COLLISION_LIMIT_EXCEEDED'
BACKEND_REJECTED = 'BACKEND_REJECTED'
BACKEND_UNAVAILABLE = 'BACKEND_UNAVAILABLE'
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
