import json
import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.constants import ErrorCode
from shortlinks.dao.redis import LinkRedisDAO, ClickEventRedisDAO
from shortlinks.services import LinkResolver
from shortlinks.utils import load_config, app_prefix, base_url, parse_datetime
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response, response_400, response_500
from shortlinks.lambdas.shorten_url.constants import (
    INVALID_JSON_BODY,
    MISSING_TARGET_URL,
    INVALID_EXPIRES_AT,
    INVALID_TARGET_URL,
    SHORTEN_FAILED,
    SHORTEN_SUCCESS,
)


logger = logging.getLogger(__name__)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle incoming API Gateway requests to shorten URLs

    This Lambda handler follows this procedure to shorten URLs:
    - Step 1: Extract target URL, expiry and owner from request
    - Step 2: Create (or reuse) the short link via LinkResolver
    - Step 3: Respond with the stored link

    HTTP responses:
        201: Short link created (or an existing one reused)
            success: true
            data: {id, originalUrl, shortCode, shortUrl, clicks, createdAt, expiresAt}
        400: Bad client request
            message: invalid JSON, missing target_url, invalid expires_at or invalid URL
        500: Internal server error
            message: server experienced an internal error

    Args:
        event (LambdaEvent):
            API Gateway event payload in Lambda Proxy format.
        context (LambdaContext):
            AWS Lambda context object (not used directly).

    Example:
        >>> event = {'body': '{"target_url": "example.com"}'}
        >>> response = lambda_handler(event, None)
        >>> response['statusCode']
        201
        >>> json.loads(response['body'])['data']['originalUrl']
        'https://example.com'
    """
    # 0- Get application's config
    app_config = load_config('shorten_url')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    # 1- Extract request parameters
    try:
        request_body = json.loads(event.get('body') or '{}')
    except json.JSONDecodeError:
        logger.info('Invalid JSON body. Responding with 400.', extra={'event': INVALID_JSON_BODY})
        return response_400(message='invalid JSON body', error_code=INVALID_JSON_BODY)

    target_url = request_body.get('target_url') if isinstance(request_body, dict) else None
    if not target_url or not isinstance(target_url, str):
        logger.info("Missing 'target_url' in body. Responding with 400.", extra={'event': MISSING_TARGET_URL})
        return response_400(message="missing 'target_url' in JSON body", error_code=MISSING_TARGET_URL)

    try:
        expires_at = parse_datetime(request_body.get('expires_at'))
    except ValueError:
        logger.info('Invalid expiry timestamp. Responding with 400.', extra={'event': INVALID_EXPIRES_AT})
        return response_400(message="'expires_at' must be an ISO 8601 timestamp", error_code=INVALID_EXPIRES_AT)

    claims = ((event.get('requestContext') or {}).get('authorizer') or {}).get('claims') or {}
    owner_id = request_body.get('owner_id') or claims.get('sub')
    owner_id = None if owner_id is None else str(owner_id)

    # 2- Create the short link
    link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
    click_dao = ClickEventRedisDAO(redis_client=link_dao.redis, prefix=app_prefix())
    try:
        resolver = LinkResolver(link_dao, click_dao, base_url=base_url(event))
        result = resolver.create_short_link(target_url, expires_at=expires_at, owner_id=owner_id)
    finally:
        click_dao.close()
        link_dao.close()

    if not result.success:
        if result.error_code == ErrorCode.INVALID_URL:
            logger.info('Invalid target URL. Responding with 400.', extra={'event': INVALID_TARGET_URL, 'reason': result.error})
            return response_400(message=result.error, error_code=result.error_code)
        logger.error('Failed to shorten URL. Responding with 500.', extra={'event': SHORTEN_FAILED, 'reason': result.error})
        return response_500(message=result.error, error_code=result.error_code)

    # 3- Respond with the stored link
    logger.info(
        'Shortened URL. Responding with 201.',
        extra={'shortcode': result.data.link.shortcode, 'event': SHORTEN_SUCCESS},
    )
    return response(201, result.to_dict())
