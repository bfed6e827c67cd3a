"""URL and identifier normalization & validation

All functions in this module are pure: no I/O, and validators never raise.
They return a ValidationResult carrying a human-readable reason on failure.

Functions:
    normalize_url(raw: str) -> str
        Trim whitespace and default the scheme to https.
    validate_url(url: str) -> ValidationResult
        Accept only well-formed absolute http/https URLs.
    validate_shortcode(shortcode: str) -> ValidationResult
        Accept 4-8 character alphanumeric codes.
    validate_link_id(link_id: str) -> ValidationResult
        Accept UUID strings.

Example:
    >>> normalize_url('  example.com/path ')
    'https://example.com/path'
    >>> validate_url('ftp://example.com')
    ValidationResult(valid=False, error='URL must use http or https protocol')
"""

import re
import uuid
from urllib.parse import urlsplit

from shortlinks.constants import Shortcode
from shortlinks.models import ValidationResult


URL_REQUIRED = 'URL is required'
INVALID_URL = 'Please enter a valid URL'
INVALID_URL_FORMAT = 'Invalid URL format'
INVALID_URL_PROTOCOL = 'URL must use http or https protocol'
INVALID_SHORTCODE = 'Invalid short code'
INVALID_LINK_ID = 'Invalid link ID'

ALLOWED_SCHEMES = frozenset({'http', 'https'})

_SCHEME_RE = re.compile(r'^[A-Za-z][A-Za-z0-9+.-]*:')
_SHORTCODE_RE = re.compile(rf'^[A-Za-z0-9]{{{Shortcode.MIN_LENGTH},{Shortcode.MAX_LENGTH}}}$')


def normalize_url(raw: str) -> str:
    """Canonicalize a user-supplied URL

    Strips surrounding whitespace and prepends `https://` when the string does
    not start with `http://` or `https://`.

    Example:
        >>> normalize_url('example.com')
        'https://example.com'
        >>> normalize_url('http://x.com')
        'http://x.com'
    """
    url = raw.strip()
    if not url.startswith(('http://', 'https://')):
        return f'https://{url}'
    return url


def validate_url(url: str) -> ValidationResult:
    """Validate that `url` is an absolute http/https URL with a host"""
    if not isinstance(url, str) or not url.strip():
        return ValidationResult(valid=False, error=URL_REQUIRED)

    if any(ch.isspace() for ch in url) or not _SCHEME_RE.match(url):
        return ValidationResult(valid=False, error=INVALID_URL)

    try:
        parts = urlsplit(url)
        hostname = parts.hostname
        parts.port  # noqa: B018 raises ValueError on out-of-range or non-numeric ports
    except ValueError:
        return ValidationResult(valid=False, error=INVALID_URL_FORMAT)

    if parts.scheme.lower() not in ALLOWED_SCHEMES:
        return ValidationResult(valid=False, error=INVALID_URL_PROTOCOL)

    # e.g. 'https://ftp://host' parses with netloc 'ftp:' and an empty port
    if not hostname or parts.netloc.endswith(':') or not _valid_hostname(hostname):
        return ValidationResult(valid=False, error=INVALID_URL_FORMAT)

    return ValidationResult(valid=True)


def validate_shortcode(shortcode: str) -> ValidationResult:
    if isinstance(shortcode, str) and _SHORTCODE_RE.match(shortcode):
        return ValidationResult(valid=True)
    return ValidationResult(valid=False, error=INVALID_SHORTCODE)


def validate_link_id(link_id: str) -> ValidationResult:
    try:
        uuid.UUID(str(link_id))
    except ValueError:
        return ValidationResult(valid=False, error=INVALID_LINK_ID)
    return ValidationResult(valid=True)


def _valid_hostname(hostname: str) -> bool:
    if ':' in hostname:  # IPv6 literal, already validated by urlsplit
        return True
    labels = hostname.rstrip('.').split('.')
    return all(label and all(ch.isalnum() or ch in '-_' for ch in label) for label in labels)
