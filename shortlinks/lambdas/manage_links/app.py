import logging

from shortlinks.types import LambdaEvent, LambdaContext, LambdaResponse
from shortlinks.constants import ErrorCode
from shortlinks.dao.redis import LinkRedisDAO, ClickEventRedisDAO
from shortlinks.services import LinkManager, LinkResolver
from shortlinks.utils import load_config, app_prefix, base_url
from shortlinks.utils.helpers import guarantee_500_response
from shortlinks.utils.responses import response, response_400, response_404, response_500
from shortlinks.lambdas.manage_links.constants import (
    UNSUPPORTED_ROUTE,
    LINKS_LISTED,
    LINK_FETCHED,
    LINK_DELETED,
    LINK_NOT_FOUND,
    INVALID_REQUEST,
    MANAGEMENT_FAILED,
)


logger = logging.getLogger(__name__)

INVALID_INPUT_CODES = frozenset({ErrorCode.INVALID_SHORTCODE, ErrorCode.INVALID_LINK_ID, ErrorCode.INVALID_OWNER_ID})


def _respond(result, success_status: int = 200) -> LambdaResponse:
    """Map a service result onto an HTTP response"""
    if result.success:
        return response(success_status, result.to_dict())
    if getattr(result, 'not_found', False) or result.error_code == ErrorCode.LINK_NOT_FOUND:
        logger.info('Link not found. Responding with 404.', extra={'event': LINK_NOT_FOUND})
        return response_404(message=result.error, error_code=result.error_code)
    if result.error_code in INVALID_INPUT_CODES:
        logger.info('Invalid request. Responding with 400.', extra={'event': INVALID_REQUEST, 'reason': result.error})
        return response_400(message=result.error, error_code=result.error_code)
    logger.error('Link management failed. Responding with 500.', extra={'event': MANAGEMENT_FAILED, 'reason': result.error})
    return response_500(message=result.error, error_code=result.error_code)


@guarantee_500_response
def lambda_handler(event: LambdaEvent, context: LambdaContext) -> LambdaResponse:
    """Handle link management requests

    Routes:
        GET    /links                 list every link (or one owner's links with ?owner_id=)
        GET    /links/{shortcode}     link info (no click is counted)
        DELETE /links/{shortcode}     delete a link by shortcode
        DELETE /links/id/{link_id}    delete a link by id

    HTTP responses:
        200: Success
        400: Invalid shortcode, link id or owner id
        404: Link not found (or unsupported route)
        500: Internal server error

    Example:
        >>> event = {'httpMethod': 'GET', 'resource': '/links', 'queryStringParameters': {'owner_id': 'u-1'}}
        >>> json.loads(lambda_handler(event, None)['body'])['data'][0]['userId']
        'u-1'
    """
    # 0- Get application's config
    app_config = load_config('manage_links')
    redis_config = {f'redis_{k}': v for k, v in app_config['redis'].items()}

    method = (event.get('httpMethod') or 'GET').upper()
    resource = event.get('resource') or ''
    params = event.get('pathParameters') or {}
    query = event.get('queryStringParameters') or {}

    link_dao = LinkRedisDAO(**redis_config, prefix=app_prefix())
    try:
        manager = LinkManager(link_dao, base_url=base_url(event))

        # 1- Route the request
        if method == 'GET' and resource == '/links':
            owner_id = query.get('owner_id')
            result = manager.list_all() if owner_id is None else manager.list_by_owner(owner_id)
            event_code = LINKS_LISTED
        elif method == 'GET' and resource == '/links/{shortcode}':
            click_dao = ClickEventRedisDAO(redis_client=link_dao.redis, prefix=app_prefix())
            result = LinkResolver(link_dao, click_dao, base_url=base_url(event)).get_info(params.get('shortcode'))
            event_code = LINK_FETCHED
        elif method == 'DELETE' and resource == '/links/{shortcode}':
            result = manager.delete_by_code(params.get('shortcode'))
            event_code = LINK_DELETED
        elif method == 'DELETE' and resource == '/links/id/{link_id}':
            result = manager.delete_by_id(params.get('link_id'))
            event_code = LINK_DELETED
        else:
            logger.info('Unsupported route. Responding with 404.', extra={'event': UNSUPPORTED_ROUTE, 'method': method, 'resource': resource})
            return response_404(message=f'unsupported route {method} {resource}', error_code=UNSUPPORTED_ROUTE)
    finally:
        link_dao.close()

    # 2- Respond
    if result.success:
        logger.info('Link management request served.', extra={'event': event_code, 'method': method, 'resource': resource})
    return _respond(result)
