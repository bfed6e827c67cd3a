"""API Gateway (Lambda Proxy) response builders shared by the HTTP handlers

Functions:
    response(status, body, headers=None) -> LambdaResponse
    response_302(location) -> LambdaResponse
    response_400(message=None, error_code=None) -> LambdaResponse
    response_404(message=None, error_code=None) -> LambdaResponse
    response_410(message=None, error_code=None) -> LambdaResponse
    response_500(message=None, error_code=None) -> LambdaResponse
"""

import json
from typing import Any

from shortlinks.types import LambdaResponse


CORS_HEADERS = {
    'Access-Control-Allow-Origin': '*',
    'Access-Control-Allow-Headers': 'Content-Type,Authorization',
    'Access-Control-Allow-Methods': 'OPTIONS,POST,GET,DELETE',
}


def response(status: int, body: dict[str, Any], headers: dict[str, str] | None = None) -> LambdaResponse:
    return {
        'statusCode': status,
        'headers': {'Content-Type': 'application/json', **CORS_HEADERS, **(headers or {})},
        'body': json.dumps(body),
    }


def _error(status: int, base: str, message: str | None, error_code: str | None) -> LambdaResponse:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = str(error_code)
    return response(status, body)


def response_302(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 302,
        'headers': {'Location': location, **CORS_HEADERS},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(400, 'Bad Request', message, error_code)


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(404, 'Not Found', message, error_code)


def response_410(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(410, 'Gone', message, error_code)


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return _error(500, 'Internal Server Error', message, error_code)
