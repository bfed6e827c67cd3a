"""Shortcode generation utility

This module provides a helper function for generating random, fixed-length
Base62 short codes. Codes carry no uniqueness guarantee on their own: callers
insert them into the link store and retry with a fresh code on conflict.

Functions:
    generate_shortcode(length=6):
        Generate a random short code suitable for use as a URL slug.

Example:
    >>> from shortlinks.utils import generate_shortcode
    >>> generate_shortcode()
    'q7ZxK2'
"""

import secrets
import string

from shortlinks.constants import Shortcode


ALPHABET = string.ascii_lowercase + string.ascii_uppercase + string.digits
BASE = len(ALPHABET)  # 26 lowercase + 26 uppercase + 10 digits


def generate_shortcode(length: int = Shortcode.LENGTH) -> str:
    """Generate a random Base62 short code.

    Each character is drawn uniformly and independently from [a-zA-Z0-9]
    using the operating system's CSPRNG (`secrets`), so separate processes
    never replay the same sequence of codes after a restart.

    With the default length there are 62**6 (about 5.7e10) possible codes.

    Args:
        length (int, optional):
            Number of characters in the code. Defaults to 6.

    Returns:
        str: A random alphanumeric code of exactly `length` characters.

    Raises:
        TypeError: If `length` is not an integer.
        ValueError: If `length` is not positive.

    Example:
        >>> code = generate_shortcode(8)
        >>> len(code), code.isalnum()
        (8, True)
    """
    if not isinstance(length, int) or isinstance(length, bool):
        raise TypeError(f'Length must be of type integer (given type: {type(length)}).')
    if length <= 0:
        raise ValueError(f'Length must be a positive integer (given value: {length}).')

    return ''.join(secrets.choice(ALPHABET) for _ in range(length))
