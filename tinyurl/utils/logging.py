"""Application-wide logging initialization

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every line is one JSON object. Fields passed through `extra={...}` are
attached as-is; `service` is stamped on every line when APP_NAME is set:
{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "WARNING",
    "logger": "tinyurl.shortener",
    "message": "Short code collision. Retrying with next seed.",
    "service": "tinyurl:dev",
    "shortcode": "2e3lqf3",
    "attempt": 1
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from tinyurl.constants import ENV
from tinyurl.utils.config import app_prefix
from tinyurl.utils.helpers import format_timestamp


# Whatever the running interpreter puts on a bare LogRecord is not an `extra`
RESERVED_ATTRS = frozenset(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None).__dict__) | {'message', 'asctime'}


class JsonFormatter(logging.Formatter):
    """JSON formatter that includes LogRecord extras

    Args:
        service (str | None):
            Value of the `service` field on every line. Omitted when None.
    """

    def __init__(self, service: str | None = None):
        super().__init__()
        self.service = service

    def format(self, record: logging.LogRecord) -> str:
        log = {
            'timestamp': format_timestamp(datetime.fromtimestamp(record.created, tz=UTC)),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }

        if self.service is not None:
            log['service'] = self.service

        if record.exc_info:
            log['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            log['stack'] = self.formatStack(record.stack_info)

        for key, value in record.__dict__.items():
            if key not in RESERVED_ATTRS and key not in log:
                log[key] = value

        return json.dumps(log, default=str)


def initialize_logging() -> None:
    log_level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'service': app_prefix(),
                }
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'root': {
                'level': log_level,
                'handlers': ['stdout'],
            },
        }
    )
