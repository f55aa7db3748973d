class TinyURLError(Exception):
    """Base exception for all application-specific errors."""

    error_code = 'app:tinyurl_error'


class ValidationError(TinyURLError):
    """Raised when a caller supplies a missing or empty long URL or short code."""

    error_code = 'app:validation_error'


class CollisionLimitExceededError(TinyURLError):
    """Raised when every allowed seed produced a short code owned by another URL."""

    error_code = 'app:collision_limit_exceeded_error'


class BackendRejectedError(TinyURLError):
    """Raised when the record store rejects a write for a reason other than a key collision."""

    error_code = 'app:backend_rejected_error'


class MalformedRecordError(TinyURLError):
    """Raised when a stored record is missing fields or holds unreadable values."""

    error_code = 'app:malformed_record_error'


class ConfigurationError(TinyURLError):
    """Base exception for all configuration errors."""

    error_code = 'config:configuration_error'


class MissingEnvironmentVariableError(ConfigurationError):
    """Raised when a required environment variable is missing."""

    error_code = 'config:missing_environment_variable_error'


class BadConfigurationError(ConfigurationError):
    """Raised when the application is configured with invalid parameters."""

    error_code = 'config:bad_configuration_error'
