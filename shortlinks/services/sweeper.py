"""Retention sweeper: bulk deletion of expired links

Run periodically (EventBridge schedule or the secret-gated HTTP route). Safe
to run concurrently with itself and with live traffic: each expired link is
removed by exactly one store transaction and counted once.
"""

import logging
from datetime import datetime, UTC

from shortlinks.constants import ErrorCode
from shortlinks.models import SweepResult
from shortlinks.dao.base import LinkBaseDAO
from shortlinks.dao.exceptions import DataStoreError


logger = logging.getLogger(__name__)

SWEEP_FAILED = 'Failed to cleanup expired URLs'


class RetentionSweeper:
    def __init__(self, link_dao: LinkBaseDAO):
        self.link_dao = link_dao

    def sweep(self, now: datetime | None = None) -> SweepResult:
        """Delete every link whose expiry is strictly before `now`

        Example:
            >>> RetentionSweeper(link_dao).sweep()
            SweepResult(success=True, deleted_count=3, error=None, error_code=None)
        """
        now = now or datetime.now(UTC)
        try:
            deleted = self.link_dao.delete_expired(now)
        except DataStoreError:
            logger.exception('Failed to sweep expired links.')
            return SweepResult(success=False, error=SWEEP_FAILED, error_code=ErrorCode.DATA_STORE_ERROR)

        logger.info('Swept expired links.', extra={'deleted_count': deleted, 'cutoff': now.isoformat()})
        return SweepResult(success=True, deleted_count=deleted)
