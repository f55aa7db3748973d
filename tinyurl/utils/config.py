"""Utility functions for application configuration management.

Both Lambda functions are configured exclusively through environment
variables injected by the deployment stack. `load_config()` resolves them
once per invocation into an immutable `AppConfig`, failing fast when a value
required by the active backend is missing or malformed.

Environment variables:
    BASE_URL                – Public base URL prepended to generated short codes (required).
    ACTIVE_BACKEND          – 'dynamodb' (default) or 'redis'.
    MAX_ENCODE_ATTEMPTS     – Short code collision retry cap (default: 10).
    APP_NAME / APP_ENV      – Optional key namespace, rendered as '<name>:<env>'.

    TINYURL_TABLE           – DynamoDB table name (required for 'dynamodb').
    AWS_REGION              – DynamoDB region (required for 'dynamodb').
    DYNAMODB_ENDPOINT       – Optional endpoint override.
    DYNAMODB_MAX_ATTEMPTS   – botocore retry budget for transient faults (default: 8).
    LOCALSTACK_ENDPOINT     – Endpoint used when running locally and no override is set.

    REDIS_HOST              – Redis host (required for 'redis').
    REDIS_PORT / REDIS_DB   – Redis port and database index (defaults: 6379, 0).
    REDIS_USERNAME / REDIS_PASSWORD – Optional Redis credentials.

Functions:
    app_env() -> str
        Return the current application environment (`APP_ENV`), defaulting to `'local'`.

    app_name() -> str | None
        Return the application name (`APP_NAME`), or None if not set.

    app_prefix() -> str | None
        Return the key namespace prefix for DAOs, or None if `APP_NAME` is not set.

    load_config() -> AppConfig
        Resolve the full application configuration from the environment.

Example:
    >>> os.environ.update(BASE_URL='https://tiny.example.com', TINYURL_TABLE='tinyurl', AWS_REGION='eu-west-1')
    >>> config = load_config()
    >>> config.active_backend
    <Backend.DYNAMODB: 'dynamodb'>
    >>> config.table_name
    'tinyurl'
"""

import os
import logging
from dataclasses import dataclass, field

from tinyurl.constants import ENV, Backend, Defaults
from tinyurl.exceptions import BadConfigurationError
from tinyurl.utils.helpers import require_environment
from tinyurl.utils.runtime import running_locally


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AppConfig:
    """Resolved application configuration.

    Backend-specific fields are left as None when the other backend is active.
    Instances are hashable so they can key a process-wide cache of clients.
    """

    base_url: str
    active_backend: Backend = Backend.DYNAMODB
    max_encode_attempts: int = Defaults.MAX_ENCODE_ATTEMPTS
    prefix: str | None = None
    # DynamoDB
    table_name: str | None = None
    region_name: str | None = None
    endpoint_url: str | None = None
    dynamodb_max_attempts: int = Defaults.DYNAMODB_MAX_ATTEMPTS
    # Redis
    redis_host: str | None = None
    redis_port: int = Defaults.REDIS_PORT
    redis_db: int = Defaults.REDIS_DB
    redis_username: str | None = None
    redis_password: str | None = field(default=None, repr=False)


def app_env() -> str:
    """Return the current application environment by reading 'APP_ENV'

    Example:
        >>> os.environ['APP_ENV'] = 'dev'
        >>> app_env()
        'dev'
    """
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    """Return the current application name by reading 'APP_NAME'"""
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Return application prefix for DAOs

    Returns:
        str: app prefix as <app name>:<app env>.
             None if APP_NAME is not set.

    Example:
        >>> os.environ['APP_NAME'] = 'tinyurl'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'tinyurl:local'
    """
    return None if app_name() is None else f'{app_name()}:{app_env()}'


def _int_env(name: str, default: int, minimum: int = 0) -> int:
    raw = os.environ.get(name)
    if raw is None or raw == '':
        return default
    try:
        value = int(raw)
    except ValueError as e:
        raise BadConfigurationError(f"Environment variable '{name}' must be an integer (given value: {raw!r}).") from e
    if value < minimum:
        raise BadConfigurationError(f"Environment variable '{name}' must be >= {minimum} (given value: {value}).")
    return value


def _active_backend() -> Backend:
    raw = os.environ.get(ENV.App.ACTIVE_BACKEND) or Backend.DYNAMODB.value
    try:
        return Backend(raw.lower())
    except ValueError as e:
        supported = ', '.join(f"'{backend.value}'" for backend in Backend)
        raise BadConfigurationError(f"Unsupported backend {raw!r} (supported: {supported}).") from e


@require_environment(ENV.DynamoDB.TABLE, ENV.DynamoDB.REGION)
def _dynamodb_settings() -> dict:
    endpoint_url = os.environ.get(ENV.DynamoDB.ENDPOINT) or None
    if endpoint_url is None and running_locally():
        endpoint_url = os.environ.get(ENV.LocalStack.ENDPOINT) or None

    return {
        'table_name': os.environ[ENV.DynamoDB.TABLE],
        'region_name': os.environ[ENV.DynamoDB.REGION],
        'endpoint_url': endpoint_url,
        'dynamodb_max_attempts': _int_env(ENV.DynamoDB.MAX_ATTEMPTS, Defaults.DYNAMODB_MAX_ATTEMPTS, minimum=1),
    }


@require_environment(ENV.Redis.HOST)
def _redis_settings() -> dict:
    return {
        'redis_host': os.environ[ENV.Redis.HOST],
        'redis_port': _int_env(ENV.Redis.PORT, Defaults.REDIS_PORT, minimum=1),
        'redis_db': _int_env(ENV.Redis.DB, Defaults.REDIS_DB),
        'redis_username': os.environ.get(ENV.Redis.USERNAME) or None,
        'redis_password': os.environ.get(ENV.Redis.PASSWORD) or None,
    }


@require_environment(ENV.App.BASE_URL)
def load_config() -> AppConfig:
    """Load the application configuration from environment variables

    Returns:
        AppConfig: resolved, immutable configuration.

    Raises:
        MissingEnvironmentVariableError:
            If BASE_URL or a variable required by the active backend is missing.
        BadConfigurationError:
            If a value is malformed (unknown backend, non-integer number, ...).
    """
    backend = _active_backend()
    if backend == Backend.DYNAMODB:
        settings = _dynamodb_settings()
    else:
        settings = _redis_settings()

    config = AppConfig(
        base_url=os.environ[ENV.App.BASE_URL],
        active_backend=backend,
        max_encode_attempts=_int_env(ENV.App.MAX_ENCODE_ATTEMPTS, Defaults.MAX_ENCODE_ATTEMPTS, minimum=1),
        prefix=app_prefix(),
        **settings,
    )
    logger.debug('Loaded configuration from environment.', extra={'backend': backend.value, 'prefix': config.prefix})
    return config
