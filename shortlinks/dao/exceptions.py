"""Exceptions related to Data Access Objects (DAO) operations.

Classes:
    DAOError:
        Generic base class for DAO-related exceptions.

    LinkNotFoundError:
        Raised when a LinkModel is not found in the data store.

    LinkAlreadyExistsError:
        Raised when attempting to insert a LinkModel whose short code is taken.

    DataStoreError:
        Raised when there is an error in the data store (e.g., connection issues, timeouts, OOM, etc.).

Example:
    >>> from shortlinks.dao.exceptions import LinkNotFoundError
    >>> raise LinkNotFoundError("Link with code 'abc123' not found.")
    Traceback (most recent call last):
        ...
    shortlinks.dao.exceptions.LinkNotFoundError: Link with code 'abc123' not found.
"""

from shortlinks.exceptions import ShortLinksError


class DAOError(ShortLinksError):
    """Generic base class for DAO-related exceptions."""

    error_code = 'dao:dao_error'


class LinkNotFoundError(DAOError):
    """Raised when a LinkModel is not found in the data store."""

    error_code = 'dao:link_not_found_error'


class LinkAlreadyExistsError(DAOError):
    """Raised when inserting a LinkModel whose short code already exists in the data store."""

    error_code = 'dao:link_already_exists_error'


class DataStoreError(DAOError):
    """Raised when the data store encounters an error.

    Examples include connection issues, timeouts, and out-of-memory failures.
    """

    error_code = 'dao:data_store_error'
