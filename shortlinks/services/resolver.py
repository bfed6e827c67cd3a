"""Link creation and redirect resolution

The resolver is the hot path of the service: it turns a short code into a
destination URL, enforces expiry and accounts for the click.

Redirect procedure:
    - Step 1: Reject codes which cannot exist (too short) without touching the store
    - Step 2: Fetch the link record
    - Step 3: Refuse expired links (no click is counted)
    - Step 4: Atomically increment the link's click counter
    - Step 5: Record a click event (best effort: failures are logged and discarded)
    - Step 6: Return the destination URL

Example:
    >>> resolver = LinkResolver(link_dao, click_dao, base_url='https://sho.rt')
    >>> created = resolver.create_short_link('example.com/docs')
    >>> created.data.short_url
    'https://sho.rt/q7ZxK2'
    >>> resolver.resolve_and_record('q7ZxK2').original_url
    'https://example.com/docs'
"""

import logging
from datetime import datetime, UTC
from uuid import uuid4
from collections.abc import Callable

from shortlinks.constants import Shortcode, ErrorCode
from shortlinks.exceptions import ShortcodeGenerationExhaustedError
from shortlinks.models import LinkModel, LinkSummary, LinkResult, RedirectResult
from shortlinks.dao.base import LinkBaseDAO, ClickEventBaseDAO
from shortlinks.dao.exceptions import LinkAlreadyExistsError, LinkNotFoundError, DataStoreError
from shortlinks.utils.helpers import get_short_url
from shortlinks.utils.shortener import generate_shortcode
from shortlinks.utils.validators import normalize_url, validate_url, validate_shortcode


logger = logging.getLogger(__name__)

URL_NOT_FOUND = 'URL not found'
LINK_EXPIRED = 'This link has expired'
REDIRECT_FAILED = 'Failed to process redirect'
CREATE_FAILED = 'Failed to create short URL'
GENERATION_EXHAUSTED = 'Failed to generate unique short code. Please try again.'
FETCH_FAILED = 'Failed to fetch URL info'


class LinkResolver:
    """Create short links and resolve short codes into destination URLs

    Attributes:
        link_dao (LinkBaseDAO):
            Link store.
        click_dao (ClickEventBaseDAO):
            Click event log. Failures to append are never surfaced to callers.
        base_url (str):
            Public base URL used to render short URLs.
        shortcode_length (int):
            Length of newly generated codes.
        max_attempts (int):
            Number of codes tried before giving up on creation.
    """

    def __init__(
        self,
        link_dao: LinkBaseDAO,
        click_dao: ClickEventBaseDAO,
        base_url: str,
        shortcode_length: int = Shortcode.LENGTH,
        max_attempts: int = Shortcode.MAX_ATTEMPTS,
        generate: Callable[[int], str] = generate_shortcode,
    ):
        self.link_dao = link_dao
        self.click_dao = click_dao
        self.base_url = base_url
        self.shortcode_length = shortcode_length
        self.max_attempts = max_attempts
        self._generate = generate

    def create_short_link(self, raw_url: str, expires_at: datetime | None = None, owner_id: str | None = None) -> LinkResult:
        """Create (or reuse) a short link for a user supplied URL

        An existing link with the same normalized destination is returned as is,
        regardless of the requested expiry or owner.

        Returns:
            LinkResult:
                success with the stored link, or a failure carrying an error message
                (INVALID_URL, GENERATION_EXHAUSTED or DATA_STORE_ERROR).
        """
        if not isinstance(raw_url, str) or not raw_url.strip():
            validation = validate_url('')
            return LinkResult(success=False, error=validation.error, error_code=ErrorCode.INVALID_URL)

        target = normalize_url(raw_url)
        validation = validate_url(target)
        if not validation.valid:
            logger.info('Rejected invalid URL.', extra={'target': target, 'reason': validation.error})
            return LinkResult(success=False, error=validation.error, error_code=ErrorCode.INVALID_URL)

        if expires_at is not None and expires_at.tzinfo is None:
            expires_at = expires_at.replace(tzinfo=UTC)

        try:
            existing = self.link_dao.find_by_target(target)
            if existing is not None:
                logger.debug('Reusing existing link for target URL.', extra={'shortcode': existing.shortcode})
                return LinkResult(success=True, data=self._summary(existing))

            link = self._insert_with_fresh_code(target, expires_at, owner_id or None)
        except ShortcodeGenerationExhaustedError:
            logger.error('Gave up generating a unique shortcode.', extra={'attempts': self.max_attempts})
            return LinkResult(success=False, error=GENERATION_EXHAUSTED, error_code=ErrorCode.GENERATION_EXHAUSTED)
        except DataStoreError as e:
            logger.exception('Failed to create short link.')
            return LinkResult(success=False, error=f'{CREATE_FAILED}: {e}', error_code=ErrorCode.DATA_STORE_ERROR)

        logger.info('Created short link.', extra={'shortcode': link.shortcode})
        return LinkResult(success=True, data=self._summary(link))

    def resolve_and_record(self, shortcode: str, referrer: str | None = None, user_agent: str | None = None) -> RedirectResult:
        """Resolve a short code to its destination and count the click

        Example:
            >>> resolver.resolve_and_record('nope')
            RedirectResult(success=False, not_found=True, error='URL not found', ...)
        """
        if not isinstance(shortcode, str) or len(shortcode) < Shortcode.MIN_LENGTH:
            return RedirectResult(success=False, not_found=True, error=URL_NOT_FOUND, error_code=ErrorCode.LINK_NOT_FOUND)

        try:
            link = self.link_dao.get(shortcode)
            if link.is_expired():
                logger.info('Refused redirect through expired link.', extra={'shortcode': shortcode})
                return RedirectResult(success=False, expired=True, error=LINK_EXPIRED, error_code=ErrorCode.LINK_EXPIRED)

            link = self.link_dao.increment_clicks(shortcode)
        except LinkNotFoundError:
            logger.debug('Short link not found.', extra={'shortcode': shortcode})
            return RedirectResult(success=False, not_found=True, error=URL_NOT_FOUND, error_code=ErrorCode.LINK_NOT_FOUND)
        except DataStoreError:
            logger.exception('Failed to resolve short link.', extra={'shortcode': shortcode})
            return RedirectResult(success=False, error=REDIRECT_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)

        self._record_click(link, referrer, user_agent)
        return RedirectResult(success=True, original_url=link.target)

    def get_info(self, shortcode: str) -> LinkResult:
        """Read a link by short code without counting a click"""
        validation = validate_shortcode(shortcode)
        if not validation.valid:
            return LinkResult(success=False, error=validation.error, error_code=ErrorCode.INVALID_SHORTCODE)

        try:
            link = self.link_dao.get(shortcode)
        except LinkNotFoundError:
            return LinkResult(success=False, error=URL_NOT_FOUND, error_code=ErrorCode.LINK_NOT_FOUND)
        except DataStoreError:
            logger.exception('Failed to fetch link info.', extra={'shortcode': shortcode})
            return LinkResult(success=False, error=FETCH_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)
        return LinkResult(success=True, data=self._summary(link))

    def _insert_with_fresh_code(self, target: str, expires_at: datetime | None, owner_id: str | None) -> LinkModel:
        for attempt in range(1, self.max_attempts + 1):
            link = LinkModel(
                id=str(uuid4()),
                shortcode=self._generate(self.shortcode_length),
                target=target,
                created_at=datetime.now(UTC),
                expires_at=expires_at,
                owner_id=owner_id,
            )
            try:
                return self.link_dao.insert(link)
            except LinkAlreadyExistsError:
                logger.debug('Shortcode collision. Retrying with a fresh code.', extra={'shortcode': link.shortcode, 'attempt': attempt})

        raise ShortcodeGenerationExhaustedError(f'No unique shortcode found after {self.max_attempts} attempts.')

    def _record_click(self, link: LinkModel, referrer: str | None, user_agent: str | None) -> None:
        try:
            self.click_dao.append(link.id, referrer=referrer, user_agent=user_agent)
        except Exception:
            # Counter already incremented; the event log is best effort
            logger.warning('Failed to record click event.', exc_info=True, extra={'shortcode': link.shortcode})

    def _summary(self, link: LinkModel) -> LinkSummary:
        return LinkSummary(link=link, short_url=get_short_url(link.shortcode, self.base_url))
