import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.constants import ErrorCode
from shortlinks.dao.redis import LinkRedisDAO, ClickEventRedisDAO
from shortlinks.services import LinkAnalytics
from shortlinks.utils import load_config, app_prefix, base_url, analytics_timezone
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response, response_400, response_404, response_500
from shortlinks.lambdas.analytics.constants import (
    ANALYTICS_SUCCESS,
    LINK_NOT_FOUND,
    INVALID_SHORTCODE,
    ANALYTICS_FAILED,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Serve click analytics

    Routes:
        GET /analytics               totals, popular links, recent clicks, 7-day timeline
        GET /analytics/{shortcode}   one link with its recent clicks and 7-day timeline

    HTTP responses:
        200: Analytics report
        400: Invalid shortcode
        404: Link not found
        500: Internal server error
    """
    # 0- Get application's config
    app_config = load_config('analytics')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}
    timezone = analytics_timezone()

    shortcode = (event.get('pathParameters') or {}).get('shortcode')

    # 1- Build the report
    link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
    click_dao = ClickEventRedisDAO(redis_client=link_dao.redis, prefix=app_prefix())
    try:
        analytics = LinkAnalytics(link_dao, click_dao, base_url=base_url(event), timezone=timezone)
        result = analytics.overview() if shortcode is None else analytics.link_overview(shortcode)
    finally:
        click_dao.close()
        link_dao.close()

    # 2- Respond
    if result.error_code == ErrorCode.LINK_NOT_FOUND:
        logger.info('Link not found. Responding with 404.', extra={'shortcode': shortcode, 'event': LINK_NOT_FOUND})
        return response_404(message=result.error, error_code=result.error_code)
    if result.error_code == ErrorCode.INVALID_SHORTCODE:
        logger.info('Invalid shortcode. Responding with 400.', extra={'shortcode': shortcode, 'event': INVALID_SHORTCODE})
        return response_400(message=result.error, error_code=result.error_code)
    if not result.success:
        logger.error('Failed to build analytics. Responding with 500.', extra={'shortcode': shortcode, 'event': ANALYTICS_FAILED})
        return response_500(message=result.error, error_code=result.error_code)

    logger.info('Served analytics report.', extra={'shortcode': shortcode, 'event': ANALYTICS_SUCCESS})
    return response(200, result.to_dict())
