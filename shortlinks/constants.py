from enum import StrEnum


class Shortcode:
    """Short code generation and validation bounds."""

    LENGTH = 6  # Length of newly generated short codes
    MIN_LENGTH = 4  # Shorter codes are rejected without a store round trip
    MAX_LENGTH = 8
    MAX_ATTEMPTS = 10  # Insert attempts before giving up on a fresh code


class Analytics:
    """Default analytics window sizes."""

    TIMELINE_DAYS = 7
    POPULAR_LINKS = 5
    RECENT_CLICKS = 10
    LINK_RECENT_CLICKS = 50
    WEEK_DAYS = 7
    MONTH_DAYS = 30


class ENV:
    """Environment variable names."""

    class App(StrEnum):
        APP_ENV = 'APP_ENV'
        APP_NAME = 'APP_NAME'
        AWS_SAM_LOCAL = 'AWS_SAM_LOCAL'
        LOG_LEVEL = 'LOG_LEVEL'
        BASE_URL = 'BASE_URL'
        ANALYTICS_TIMEZONE = 'ANALYTICS_TIMEZONE'
        CLEANUP_SECRET = 'CLEANUP_SECRET'  # noqa: S105

    class AppConfig(StrEnum):
        APP_ID = 'APPCONFIG_APP_ID'
        ENV_ID = 'APPCONFIG_ENV_ID'
        PROFILE_ID = 'APPCONFIG_PROFILE_ID'
        AGENT_URL = 'APPCONFIG_AGENT_URL'
        PROFILE_NAME = 'APPCONFIG_PROFILE_NAME'


class ErrorCode(StrEnum):
    """Machine-readable error codes attached to failed results."""

    INVALID_URL = 'INVALID_URL'
    INVALID_SHORTCODE = 'INVALID_SHORTCODE'
    INVALID_LINK_ID = 'INVALID_LINK_ID'
    INVALID_OWNER_ID = 'INVALID_OWNER_ID'
    LINK_NOT_FOUND = 'LINK_NOT_FOUND'
    LINK_EXPIRED = 'LINK_EXPIRED'
    GENERATION_EXHAUSTED = 'GENERATION_EXHAUSTED'
    DATA_STORE_ERROR = 'DATA_STORE_ERROR'


# Error codes
UNKNOWN_INTERNAL_SERVER_ERROR = 'UNKNOWN_INTERNAL_SERVER_ERROR'
