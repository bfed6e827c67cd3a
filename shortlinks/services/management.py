"""Link management entry points: listing and deletion"""

import logging

from shortlinks.constants import ErrorCode
from shortlinks.models import LinkModel, LinkSummary, LinkListResult, DeleteResult
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import LinkNotFoundError, DataStoreError
from shortlinks.utils.helpers import get_short_url
from shortlinks.utils.validators import validate_shortcode, validate_link_id


logger = logging.getLogger(__name__)

URL_NOT_FOUND = 'URL not found'
OWNER_REQUIRED = 'User ID is required'
LIST_FAILED = 'Failed to fetch URLs'
DELETE_FAILED = 'Failed to delete URL'


class LinkManager:
    """List and delete links

    Listings are ordered newest first and include expired links which have
    not been swept yet.

    Example:
        >>> manager = LinkManager(link_dao, base_url='https://sho.rt')
        >>> [item.link.shortcode for item in manager.list_all().data]
        ['q7ZxK2', 'Ab12Cd']
        >>> manager.delete_by_code('q7ZxK2').success
        True
    """

    def __init__(self, link_dao: LinkBaseDAO, base_url: str):
        self.link_dao = link_dao
        self.base_url = base_url

    def list_all(self) -> LinkListResult:
        try:
            links = self.link_dao.list_all()
        except DataStoreError:
            logger.exception('Failed to list links.')
            return LinkListResult(success=False, error=LIST_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)
        return LinkListResult(success=True, data=self._summaries(links))

    def list_by_owner(self, owner_id: str) -> LinkListResult:
        if not isinstance(owner_id, str) or not owner_id.strip():
            return LinkListResult(success=False, error=OWNER_REQUIRED, error_code=ErrorCode.INVALID_OWNER_ID)

        try:
            links = self.link_dao.list_by_owner(owner_id)
        except DataStoreError:
            logger.exception('Failed to list links of owner.', extra={'owner_id': owner_id})
            return LinkListResult(success=False, error=LIST_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)
        return LinkListResult(success=True, data=self._summaries(links))

    def delete_by_id(self, link_id: str) -> DeleteResult:
        validation = validate_link_id(link_id)
        if not validation.valid:
            return DeleteResult(success=False, error=validation.error, error_code=ErrorCode.INVALID_LINK_ID)
        return self._delete(self.link_dao.delete_by_id, link_id, extra={'link_id': link_id})

    def delete_by_code(self, shortcode: str) -> DeleteResult:
        validation = validate_shortcode(shortcode)
        if not validation.valid:
            return DeleteResult(success=False, error=validation.error, error_code=ErrorCode.INVALID_SHORTCODE)
        return self._delete(self.link_dao.delete, shortcode, extra={'shortcode': shortcode})

    def _delete(self, delete, key: str, extra: dict) -> DeleteResult:
        try:
            delete(key)
        except LinkNotFoundError:
            logger.info('Link to delete not found.', extra=extra)
            return DeleteResult(success=False, not_found=True, error=URL_NOT_FOUND, error_code=ErrorCode.LINK_NOT_FOUND)
        except DataStoreError:
            logger.exception('Failed to delete link.', extra=extra)
            return DeleteResult(success=False, error=DELETE_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)

        logger.info('Deleted link.', extra=extra)
        return DeleteResult(success=True)

    def _summaries(self, links: list[LinkModel]) -> list[LinkSummary]:
        return [LinkSummary(link=link, short_url=get_short_url(link.shortcode, self.base_url)) for link in links]
