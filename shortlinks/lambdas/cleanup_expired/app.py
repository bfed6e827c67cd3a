import hmac
import logging
from datetime import datetime, UTC

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import LinkRedisDAO
from shortlinks.services import RetentionSweeper
from shortlinks.utils import load_config, app_prefix, cleanup_secret
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response
from shortlinks.lambdas.cleanup_expired.constants import UNAUTHORIZED, CLEANUP_SUCCESS, CLEANUP_FAILED


logger = logging.getLogger(__name__)


def _scheduled(event: LambdaEvent) -> bool:
    return event.get('source') == 'aws.events' and event.get('detail-type') == 'Scheduled Event'


def _authorized(event: LambdaEvent) -> bool:
    """Check the request secret (`?secret=` or `Authorization: Bearer <secret>`)"""
    expected = cleanup_secret()
    if expected is None:
        return False

    query = event.get('queryStringParameters') or {}
    headers = {k.lower(): v for k, v in (event.get('headers') or {}).items()}
    authorization = headers.get('authorization') or ''

    candidates = [query.get('secret')]
    if authorization.startswith('Bearer '):
        candidates.append(authorization.removeprefix('Bearer '))

    return any(candidate and hmac.compare_digest(candidate.encode(), expected.encode()) for candidate in candidates)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Delete expired links

    Triggered by an EventBridge schedule or by an HTTP request carrying the
    cleanup secret (`CLEANUP_SECRET`).

    HTTP responses:
        200: Cleanup completed
            success: true
            message: Cleanup completed. Deleted <N> expired URLs.
            deletedCount: <N>
            timestamp: <ISO 8601 time of the sweep>
        401: Missing or wrong secret
        500: Cleanup failed
    """
    # 0- Authorize the caller
    if not _scheduled(event) and not _authorized(event):
        logger.warning('Unauthorized cleanup attempt. Responding with 401.', extra={'event': UNAUTHORIZED})
        return response(401, {'error': 'Unauthorized'})

    # 1- Get application's config
    app_config = load_config('cleanup_expired')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 2- Sweep expired links
    now = datetime.now(UTC)
    with LinkRedisDAO(**redis_config, prefix=app_prefix()) as link_dao:
        result = RetentionSweeper(link_dao).sweep(now)

    if not result.success:
        logger.error('Cleanup failed. Responding with 500.', extra={'event': CLEANUP_FAILED, 'reason': result.error})
        return response(500, {'success': False, 'error': result.error})

    logger.info('Cleanup completed.', extra={'event': CLEANUP_SUCCESS, 'deleted_count': result.deleted_count})
    return response(
        200,
        {
            'success': True,
            'message': f'Cleanup completed. Deleted {result.deleted_count} expired URLs.',
            'deletedCount': result.deleted_count,
            'timestamp': now.isoformat(),
        },
    )
