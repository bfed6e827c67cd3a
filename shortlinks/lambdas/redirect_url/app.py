import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.dao.redis import LinkRedisDAO, ClickEventRedisDAO
from shortlinks.services import LinkResolver
from shortlinks.utils import load_config, app_prefix, base_url
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response_302, response_400, response_404, response_410, response_500
from shortlinks.lambdas.redirect_url.constants import (
    MISSING_SHORTCODE,
    SHORT_URL_NOT_FOUND,
    SHORT_URL_EXPIRED,
    REDIRECT_FAILED,
    REDIRECT_SUCCESS,
)


logger = logging.getLogger(__name__)


def _header(event: LambdaEvent, name: str) -> str | None:
    headers = event.get('headers') or {}
    for key, value in headers.items():
        if key.lower() == name.lower():
            return value
    return None


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to redirect short URLs

    This Lambda handler follows this procedure to redirect URLs:
    - Step 1: Extract shortcode from request path
    - Step 2: Resolve the shortcode and record the click
    - Step 3: Redirect client to target URL

    HTTP responses:
        302: Successful redirect
            headers:
                Location: target URL destination
        400: Bad client request
            message: missing shortcode in path parameters
        404: Short URL doesn't exist
        410: Short URL has expired
        500: Internal server error
            message: server experienced an internal error

    Example:
        >>> event = {'pathParameters': {'shortcode': 'Gh71TC'}}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        302
        >>> response['headers']['Location']
        'https://example.com/my-page'
    """
    # 0- Get application's config
    app_config = load_config('redirect_url')
    logger.debug('Assuming Redis as the backend database for links')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract shortcode from request's path
    shortcode = (event.get('pathParameters') or {}).get('shortcode')
    if shortcode is None:
        logger.info('Missing "shortcode" in path. Responding with 400.', extra={'event': MISSING_SHORTCODE})
        return response_400(message="missing 'shortcode' in path", error_code=MISSING_SHORTCODE)

    # 2- Resolve shortcode and record the click
    link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
    click_dao = ClickEventRedisDAO(redis_client=link_dao.redis, prefix=app_prefix())
    try:
        resolver = LinkResolver(link_dao, click_dao, base_url=base_url(event))
        result = resolver.resolve_and_record(
            shortcode,
            referrer=_header(event, 'Referer'),
            user_agent=_header(event, 'User-Agent'),
        )
    finally:
        click_dao.close()
        link_dao.close()

    if result.not_found:
        logger.info('Short URL not found. Responding with 404.', extra={'shortcode': shortcode, 'event': SHORT_URL_NOT_FOUND})
        return response_404(message=result.error, error_code=SHORT_URL_NOT_FOUND)
    if result.expired:
        logger.info('Short URL expired. Responding with 410.', extra={'shortcode': shortcode, 'event': SHORT_URL_EXPIRED})
        return response_410(message=result.error, error_code=SHORT_URL_EXPIRED)
    if not result.success:
        logger.error('Failed to redirect. Responding with 500.', extra={'shortcode': shortcode, 'event': REDIRECT_FAILED})
        return response_500(message=result.error, error_code=REDIRECT_FAILED)

    # 3- Redirect client to target URL
    logger.info('Redirecting client to target URL. Responding with 302.', extra={'shortcode': shortcode, 'event': REDIRECT_SUCCESS})
    return response_302(location=result.original_url)
