from shortlinks.utils.config import app_env, app_name, app_prefix, analytics_timezone, cleanup_secret, load_config
from shortlinks.utils.helpers import base_url, get_short_url, parse_datetime, require_environment, guarantee_500_response
from shortlinks.utils.shortener import generate_shortcode
from shortlinks.utils.validators import normalize_url, validate_url, validate_shortcode, validate_link_id
from shortlinks.utils.logging import initialize_logging


__all__ = [
    'generate_shortcode',
    'normalize_url',
    'validate_url',
    'validate_shortcode',
    'validate_link_id',
    'app_env',
    'app_name',
    'app_prefix',
    'analytics_timezone',
    'cleanup_secret',
    'load_config',
    'base_url',
    'get_short_url',
    'parse_datetime',
    'require_environment',
    'guarantee_500_response',
    'initialize_logging',
]
