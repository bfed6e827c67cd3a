"""Structured JSON logging for the Lambda handlers

IMPORTANT: Call `initialize_logging()` in the lambda handler's `__init__.py` file
before any other logging is done.

Every record is written to stdout as a single JSON line, which CloudWatch Logs
Insights can filter on directly (e.g. `filter event = "REDIRECT_SUCCESS"`):

{
    "timestamp": "2025-12-26T12:00:00.000Z",
    "level": "INFO",
    "logger": "shortlinks.lambdas.redirect_url.app",
    "message": "Redirecting client to target URL. Responding with 302.",
    "app": "shortlinks",
    "env": "prod",
    "shortcode": "abc123",
    "event": "REDIRECT_SUCCESS"
}
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC
from typing import Any

from shortlinks.constants import ENV


# Attributes every LogRecord carries; anything else was passed through `extra`
_RECORD_ATTRS = frozenset(logging.LogRecord('', logging.NOTSET, '', 0, '', (), None).__dict__) | {'message', 'asctime'}

# Chatty third-party loggers kept at WARNING unless LOG_LEVEL asks for more
_QUIET_LOGGERS = ('botocore', 'boto3', 'urllib3')


def _utc_timestamp(created: float) -> str:
    return datetime.fromtimestamp(created, tz=UTC).isoformat(timespec='milliseconds').replace('+00:00', 'Z')


class JsonFormatter(logging.Formatter):
    """Render log records as JSON objects

    Args:
        static_fields (dict):
            Fields stamped on every record (e.g. application name and environment).
    """

    def __init__(self, static_fields: dict[str, Any] | None = None):
        super().__init__()
        self.static_fields = {k: v for k, v in (static_fields or {}).items() if v is not None}

    def format(self, record: logging.LogRecord) -> str:
        payload = {
            'timestamp': _utc_timestamp(record.created),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            **self.static_fields,
        }
        payload.update({key: value for key, value in record.__dict__.items() if key not in _RECORD_ATTRS})

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def initialize_logging() -> None:
    level = os.getenv(ENV.App.LOG_LEVEL, 'INFO').upper()
    library_level = level if logging.getLevelName(level) == logging.DEBUG else 'WARNING'

    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {
                'json': {
                    '()': JsonFormatter,
                    'static_fields': {
                        'app': os.getenv(ENV.App.APP_NAME),
                        'env': os.getenv(ENV.App.APP_ENV, 'local').lower(),
                    },
                },
            },
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                },
            },
            'loggers': {name: {'level': library_level} for name in _QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
