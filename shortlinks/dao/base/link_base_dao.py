"""Abstract base class for Link data access objects (DAOs).

This class establishes a consistent contract for all Link DAO implementations,
regardless of the underlying storage mechanism (e.g., Redis, DynamoDB, PostgreSQL).

Responsibilities:
    - Provide an interface for inserting, retrieving and deleting LinkModel objects.
    - Enforce short code uniqueness and atomic click counting in the data store.
    - Standardize error handling across multiple data store implementations.

Example:
    Typical usage with a datastore-specific implementation:

        >>> from shortlinks.models import LinkModel
        >>> from shortlinks.dao import LinkRedisDAO

        >>> dao = LinkRedisDAO(...)

        >>> link = LinkModel(
        ...     id='2f1c4a0e-6c1f-4f7a-9a55-1b0b8f9f2d11',
        ...     shortcode='a1b2c3',
        ...     target='https://example.com/blog/article-123',
        ...     created_at=datetime.now(UTC),
        ... )
        >>> dao.insert(link)

        >>> dao.increment_clicks('a1b2c3').clicks
        1

        >>> dao.delete('a1b2c3')
        >>> dao.get('a1b2c3')
        Traceback (most recent call last):
            ...
        shortlinks.dao.exceptions.LinkNotFoundError: Link with code 'a1b2c3' not found.
"""

from abc import ABC, abstractmethod
from datetime import datetime

from shortlinks.models import LinkModel


class LinkBaseDAO(ABC):
    """Interface for Link data access objects (DAOs).

    Methods:
        find_by_target(target: str) -> LinkModel | None:
            Retrieve the link pointing at an exact (normalized) target URL, if any.

        get(shortcode: str) -> LinkModel:
            Retrieve a link by short code.
            Raises LinkNotFoundError if the link does not exist.

        insert(link: LinkModel) -> LinkModel:
            Insert a new link.
            Raises LinkAlreadyExistsError if the short code is taken.

        increment_clicks(shortcode: str) -> LinkModel:
            Atomically add one click and return the updated link.
            Raises LinkNotFoundError if the link does not exist.

        list_all() -> list[LinkModel]:
            All links, newest first.

        list_by_owner(owner_id: str) -> list[LinkModel]:
            Links of one owner, newest first.

        delete(shortcode: str) -> None:
        delete_by_id(link_id: str) -> None:
            Permanently remove a link.
            Raise LinkNotFoundError if the link does not exist.

        delete_expired(now: datetime) -> int:
            Remove all links with an expiry strictly before `now`.

    All methods raise DataStoreError on connection, read or write failures.

    Subclassing:
        Datastore-specific implementations (e.g., LinkRedisDAO) must extend
        this class and implement all abstract methods. Uniqueness of short
        codes and click increments must be enforced by the data store itself,
        not by read-then-write sequences in the client.
    """

    @abstractmethod
    def find_by_target(self, target: str, **kwargs) -> LinkModel | None:
        """Retrieve the link whose target URL exactly matches `target`.

        Args:
            target (str):
                Normalized destination URL.

        Returns:
            LinkModel | None: The link if found, otherwise None.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def get(self, shortcode: str, **kwargs) -> LinkModel:
        """Retrieve a link by its short code.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def insert(self, link: LinkModel, **kwargs) -> LinkModel:
        """Insert a new link into the data store.

        Args:
            link (LinkModel):
                The link to be inserted.

            **kwargs:
                Additional keyword arguments, used by data store.

        Returns:
            LinkModel: the inserted link.

        Raises:
            LinkAlreadyExistsError:
                If a link with the same short code already exists. Two concurrent
                inserts of the same code must result in exactly one winner.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def increment_clicks(self, shortcode: str, **kwargs) -> LinkModel:
        """Atomically increment the click counter of a link by one.

        Returns:
            LinkModel: the link with its updated click counter.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists (e.g. deleted concurrently).

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def list_all(self, **kwargs) -> list[LinkModel]:
        """Retrieve all links ordered by creation time, newest first."""
        pass

    @abstractmethod
    def list_by_owner(self, owner_id: str, **kwargs) -> list[LinkModel]:
        """Retrieve all links of an owner ordered by creation time, newest first."""
        pass

    @abstractmethod
    def delete(self, shortcode: str, **kwargs) -> None:
        """Permanently delete a link by short code.

        Raises:
            LinkNotFoundError:
                If no link with the given short code exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete_by_id(self, link_id: str, **kwargs) -> None:
        """Permanently delete a link by id.

        Raises:
            LinkNotFoundError:
                If no link with the given id exists.

            DataStoreError:
                If there is an error in the data store.
        """
        pass

    @abstractmethod
    def delete_expired(self, now: datetime, **kwargs) -> int:
        """Delete every link whose expiry is strictly before `now`.

        Links without an expiry are never deleted. Concurrent calls must not
        count the same link twice.

        Returns:
            int: number of links deleted by this call.

        Raises:
            DataStoreError:
                If there is an error in the data store.
        """
        pass
