"""Small helpers shared by the Lambda handlers and services

* `base_url(event)` works out the public origin that short URLs are built on.
* `get_short_url(shortcode, base)` joins that origin with a shortcode.
* `parse_datetime(value)` reads ISO 8601 timestamps from request bodies.
* `require_environment(*names)` and `guarantee_500_response` are decorators
  for functions that need environment variables and for handlers that must
  always answer API Gateway.

Example:
    >>> base_url({'requestContext': {'domainName': 'sho.rt', 'stage': 'Prod'}})
    'https://sho.rt'
    >>> get_short_url('abc123', 'https://sho.rt')
    'https://sho.rt/abc123'
"""

import os
import json
import logging
import functools
from datetime import datetime, UTC
from typing import Any
from collections.abc import Callable

from shortlinks.constants import ENV, UNKNOWN_INTERNAL_SERVER_ERROR
from shortlinks.exceptions import MissingEnvironmentVariableError
from shortlinks.utils.runtime import running_locally


logger = logging.getLogger(__name__)

LOCAL_BASE_URL = 'http://localhost:3000'


def base_url(event: dict[str, Any] | None = None) -> str:
    """Public origin of the service, without a trailing slash

    Resolution order:
        1. `BASE_URL` environment variable.
        2. API Gateway request context. The default `execute-api` hostname
           only routes with the stage path; custom domains map the stage
           themselves.
        3. `sam local start-api` address.

    Example:
        >>> base_url({'requestContext': {'domainName': 'abc123.execute-api.us-east-1.amazonaws.com', 'stage': 'Prod'}})
        'https://abc123.execute-api.us-east-1.amazonaws.com/Prod'
    """
    configured = os.environ.get(ENV.App.BASE_URL)
    if configured:
        return configured.rstrip('/')

    context = (event or {}).get('requestContext') or {}
    domain = context.get('domainName')
    if not domain:
        return LOCAL_BASE_URL
    if 'execute-api' in domain:
        return f"https://{domain}/{context.get('stage', '')}"
    return f'https://{domain}'


def get_short_url(shortcode: str, base: str) -> str:
    """Get string representation of shortened URL

    Args:
        shortcode (str): shortcode
        base (str): public base URL of the service

    Returns:
        str: short url string representation
    """
    return f'{base.rstrip("/")}/{shortcode}'


def parse_datetime(value: str | None) -> datetime | None:
    """Parse an ISO 8601 timestamp into an aware UTC datetime.

    Naive timestamps are interpreted as UTC. A trailing 'Z' is accepted.

    Raises:
        ValueError: If the value is not a valid ISO 8601 timestamp.

    Example:
        >>> parse_datetime('2025-12-31T23:59:59Z')
        datetime.datetime(2025, 12, 31, 23, 59, 59, tzinfo=datetime.timezone.utc)
        >>> parse_datetime(None) is None
        True
    """
    if value is None or value == '':
        return None
    if not isinstance(value, str):
        raise ValueError(f'Expected an ISO 8601 string (given type: {type(value)}).')

    parsed = datetime.fromisoformat(value.replace('Z', '+00:00'))
    if parsed.tzinfo is None:
        return parsed.replace(tzinfo=UTC)
    return parsed.astimezone(UTC)


def require_environment(*names: str) -> Callable:
    """Decorator: fail fast with MissingEnvironmentVariableError when any of
    `names` is unset or empty at call time. All missing names are reported.

    Example:
        >>> @require_environment('APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID')
        ... def fetch():
        ...     ...
        >>> fetch()
        MissingEnvironmentVariableError: Missing required environment variables: 'APPCONFIG_APP_ID', 'APPCONFIG_ENV_ID'
    """

    def decorator(func: Callable) -> Callable:
        @functools.wraps(func)
        def wrapper(*args, **kwargs):
            unset = ', '.join(f"'{name}'" for name in names if not os.environ.get(name))
            if unset:
                raise MissingEnvironmentVariableError(f'Missing required environment variables: {unset}')
            return func(*args, **kwargs)

        return wrapper

    return decorator


def guarantee_500_response(handler: Callable) -> Callable:
    """Decorator: respond with HTTP 500 instead of crashing the Lambda invocation.

    When running locally the original exception is re-raised to ease debugging.
    """

    @functools.wraps(handler)
    def wrapper(event: dict, context: Any) -> dict:
        try:
            return handler(event, context)
        except Exception:
            if running_locally():
                raise
            logger.exception('Unhandled exception in Lambda handler. Responding with 500.', extra={'event': UNKNOWN_INTERNAL_SERVER_ERROR})
            return {
                'statusCode': 500,
                'body': json.dumps({'message': 'Internal Server Error', 'error_code': UNKNOWN_INTERNAL_SERVER_ERROR}),
            }

    return wrapper
