"""Runtime settings for the shortlinks Lambdas

Two sources feed a Lambda's settings:

* Plain environment variables (see `shortlinks.constants.ENV`) for values that
  every function shares: application name and environment, public base URL,
  analytics timezone, cleanup secret.
* An **AWS AppConfig** JSON document for data store connection parameters. The
  document is deployed per `APP_ENV` and holds one section per Lambda, keyed
  by backend name:

      {
          "build": 17,
          "active_backend": "redis",
          "configs": {
              "shorten_url":  {"redis": {"host": "...", "port": 6379, "db": 0}},
              "redirect_url": {"redis": {"host": "...", "port": 6379, "db": 0}}
          }
      }

`load_config('shorten_url')` returns only `{"redis": {...}}`, i.e. the section
of the active backend for that Lambda.

Under `sam local` the document is served by the AppConfig Agent container
instead of the AppConfig data plane. Set `APPCONFIG_AGENT_URL` to use it.
"""

import os
import json
import logging
import urllib.parse
import urllib.request
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import boto3

from shortlinks.types import LambdaConfiguration
from shortlinks.constants import ENV
from shortlinks.utils.helpers import require_environment
from shortlinks.utils.runtime import running_locally
from shortlinks.exceptions import BadConfigurationError


logger = logging.getLogger(__name__)

# Where the AppConfig Agent may live during local development
_AGENT_HOSTS = frozenset({'localhost', '127.0.0.1', 'host.docker.internal', 'appconfig-agent'})
_AGENT_PORTS = frozenset({2772, None})

_DEFAULT_PROFILE = 'backend-config'


def app_env() -> str:
    return os.environ.get(ENV.App.APP_ENV, 'local').lower()


def app_name() -> str | None:
    return os.environ.get(ENV.App.APP_NAME)


def app_prefix() -> str | None:
    """Key prefix shared by all DAOs of this deployment

    Returns:
        str: "<APP_NAME>:<APP_ENV>", or None when APP_NAME is unset.

    Example:
        >>> os.environ['APP_NAME'] = 'shortlinks'
        >>> os.environ['APP_ENV'] = 'local'
        >>> app_prefix()
        'shortlinks:local'
    """
    name = app_name()
    return None if name is None else f'{name}:{app_env()}'


def analytics_timezone() -> ZoneInfo:
    """Timezone whose calendar days bound the analytics periods

    Raises:
        BadConfigurationError:
            If `ANALYTICS_TIMEZONE` is not a known IANA timezone name.

    Example:
        >>> os.environ['ANALYTICS_TIMEZONE'] = 'Europe/Sofia'
        >>> analytics_timezone()
        zoneinfo.ZoneInfo(key='Europe/Sofia')
    """
    name = os.environ.get(ENV.App.ANALYTICS_TIMEZONE) or 'UTC'
    try:
        return ZoneInfo(name)
    except (ZoneInfoNotFoundError, ValueError) as e:
        raise BadConfigurationError(f"Unknown analytics timezone '{name}'.") from e


def cleanup_secret() -> str | None:
    return os.environ.get(ENV.App.CLEANUP_SECRET) or None


def load_config(lambda_name: str) -> LambdaConfiguration:
    """Return the active backend section of `lambda_name` (e.g. 'redirect_url')

    Raises:
        MissingEnvironmentVariableError:
            If the AppConfig identifiers are not set (deployed runs only).
        BadConfigurationError:
            If the document has no section for this Lambda, or the agent URL
            does not point at a local AppConfig Agent.
        botocore.exceptions.ClientError:
            If AppConfig rejects the request.
    """
    agent_url = _local_agent_url() if running_locally() else None
    if agent_url:
        document = _fetch_from_agent(agent_url)
        source = 'agent'
    else:
        document = _fetch_from_appconfig()
        source = 'appconfig'

    section = _lambda_section(document, lambda_name)
    logger.debug('Loaded backend configuration.', extra={'lambdaName': lambda_name, 'source': source, 'build': document.get('build')})
    return section


def _lambda_section(document: dict, lambda_name: str) -> LambdaConfiguration:
    try:
        backend = document['active_backend']
        return {backend: document['configs'][lambda_name][backend]}
    except KeyError as e:
        raise BadConfigurationError(f"AppConfig document has no backend configuration for '{lambda_name}'.") from e


def _local_agent_url() -> str | None:
    url = os.getenv(ENV.AppConfig.AGENT_URL)
    if not url:
        return None

    parts = urllib.parse.urlparse(url)
    if parts.scheme not in ('http', 'https') or parts.hostname not in _AGENT_HOSTS or parts.port not in _AGENT_PORTS:
        raise BadConfigurationError(f'{ENV.AppConfig.AGENT_URL} must point at a local AppConfig Agent (given: {url}).')
    return url.rstrip('/')


def _fetch_from_agent(agent_url: str) -> dict:  # pragma: no cover
    profile = os.getenv(ENV.AppConfig.PROFILE_NAME, _DEFAULT_PROFILE)
    url = f'{agent_url}/applications/{app_name()}/environments/{app_env()}/configurations/{profile}'

    logger.debug('Requesting configuration from AppConfig Agent.', extra={'agentUrl': url})
    with urllib.request.urlopen(url, timeout=5) as r:  # noqa: S310
        return json.load(r)


@require_environment(ENV.AppConfig.APP_ID, ENV.AppConfig.ENV_ID, ENV.AppConfig.PROFILE_ID)
def _fetch_from_appconfig() -> dict:
    client = boto3.client('appconfigdata')

    token = client.start_configuration_session(
        ApplicationIdentifier=os.environ[ENV.AppConfig.APP_ID],
        EnvironmentIdentifier=os.environ[ENV.AppConfig.ENV_ID],
        ConfigurationProfileIdentifier=os.environ[ENV.AppConfig.PROFILE_ID],
    )['InitialConfigurationToken']

    # A fresh session always yields the full document on its first poll
    body = client.get_latest_configuration(ConfigurationToken=token)['Configuration']
    return json.loads(body.read().decode('utf-8'))
