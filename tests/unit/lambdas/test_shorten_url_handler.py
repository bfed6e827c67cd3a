"""Unit tests for the shorten_url AWS Lambda handler.

Test coverage includes:

1. Successful shortening
   - Ensures a new link is stored and returned with HTTP 201.
   - Ensures existing links for the same URL are reused.
   - Ensures expiry and owner are taken from the body or the Cognito claims.

2. Invalid requests
   - Ensures malformed JSON, missing target_url, invalid expiry and invalid URLs return HTTP 400.

3. Server errors
   - Ensures store failures and configuration errors return HTTP 500.
"""

import json
from datetime import datetime, UTC
from typing import cast

import pytest
from pytest import MonkeyPatch

from shortlinks.types import LambdaEvent
from shortlinks.lambdas.shorten_url import app
from shortlinks.models import LinkModel
from shortlinks.dao.exceptions import DataStoreError
from shortlinks.exceptions import MissingEnvironmentVariableError


def _event(body: str | None, claims: dict | None = None) -> LambdaEvent:
    request_context = {'domainName': 'sho.rt', 'stage': 'Prod'}
    if claims is not None:
        request_context['authorizer'] = {'claims': claims}
    return cast(LambdaEvent, {
        'resource': '/shorten',
        'httpMethod': 'POST',
        'path': '/shorten',
        'body': body,
        'requestContext': request_context,
    })


@pytest.fixture(autouse=True)
def setup(monkeypatch: MonkeyPatch, config, link_dao, click_dao) -> None:
    monkeypatch.setattr(app, 'load_config', lambda *a, **kw: config)
    monkeypatch.setattr(app, 'LinkRedisDAO', lambda *a, **kw: link_dao)
    monkeypatch.setattr(app, 'ClickEventRedisDAO', lambda *a, **kw: click_dao)
    link_dao.find_by_target.return_value = None
    link_dao.insert.side_effect = lambda link: link


# -------------------------------
# 1. Successful shortening
# -------------------------------


def test_lambda_handler(context, link_dao, click_dao):
    response = app.lambda_handler(_event('{"target_url": "example.com/docs"}'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 201
    assert response['headers']['Access-Control-Allow-Origin'] == '*'
    assert body['success'] is True
    assert body['data']['originalUrl'] == 'https://example.com/docs'
    assert body['data']['clicks'] == 0
    assert body['data']['expiresAt'] is None
    assert body['data']['shortUrl'] == f"https://sho.rt/{body['data']['shortCode']}"

    link_dao.find_by_target.assert_called_once_with('https://example.com/docs')
    link_dao.insert.assert_called_once()
    link_dao.close.assert_called_once()
    click_dao.close.assert_called_once()


def test_lambda_handler_reuses_existing_link(context, link_dao):
    link_dao.find_by_target.return_value = LinkModel(
        id='0b7c3c1e-3c51-4d0f-9a51-8d6f7f0c2a11',
        shortcode='abc123',
        target='https://example.com/docs',
        created_at=datetime(2025, 10, 15, 12, tzinfo=UTC),
        clicks=42,
    )

    response = app.lambda_handler(_event('{"target_url": "https://example.com/docs"}'), context)
    body = json.loads(response['body'])

    assert response['statusCode'] == 201
    assert body['data']['shortCode'] == 'abc123'
    assert body['data']['clicks'] == 42
    link_dao.insert.assert_not_called()


def test_lambda_handler_with_expiry_and_owner(context, link_dao):
    body = json.dumps({'target_url': 'https://example.com', 'expires_at': '2030-01-01T00:00:00Z', 'owner_id': 'user-1'})

    response = app.lambda_handler(_event(body), context)

    stored = link_dao.insert.call_args.args[0]
    assert response['statusCode'] == 201
    assert stored.expires_at == datetime(2030, 1, 1, tzinfo=UTC)
    assert stored.owner_id == 'user-1'
    assert json.loads(response['body'])['data']['expiresAt'] == '2030-01-01T00:00:00+00:00'


def test_lambda_handler_takes_owner_from_claims(context, link_dao):
    response = app.lambda_handler(_event('{"target_url": "https://example.com"}', claims={'sub': 'cognito-user'}), context)

    assert response['statusCode'] == 201
    assert link_dao.insert.call_args.args[0].owner_id == 'cognito-user'


# -------------------------------
# 2. Invalid requests
# -------------------------------


@pytest.mark.parametrize(
    'body, message, error_code',
    [
        ('{not json', 'Bad Request (invalid JSON body)', 'INVALID_JSON_BODY'),
        (None, "Bad Request (missing 'target_url' in JSON body)", 'MISSING_TARGET_URL'),
        ('{"url": "https://example.com"}', "Bad Request (missing 'target_url' in JSON body)", 'MISSING_TARGET_URL'),
        ('{"target_url": 42}', "Bad Request (missing 'target_url' in JSON body)", 'MISSING_TARGET_URL'),
        ('["https://example.com"]', "Bad Request (missing 'target_url' in JSON body)", 'MISSING_TARGET_URL'),
        (
            '{"target_url": "https://example.com", "expires_at": "next week"}',
            "Bad Request ('expires_at' must be an ISO 8601 timestamp)",
            'INVALID_EXPIRES_AT',
        ),
        ('{"target_url": "ftp://example.com"}', 'Bad Request (URL must use http or https protocol)', 'INVALID_URL'),
    ],
)
def test_lambda_handler_with_invalid_request(context, link_dao, body, message, error_code):
    response = app.lambda_handler(_event(body), context)
    payload = json.loads(response['body'])

    assert response['statusCode'] == 400
    assert payload == {'message': message, 'errorCode': error_code}
    link_dao.insert.assert_not_called()


# -------------------------------
# 3. Server errors
# -------------------------------


def test_lambda_handler_with_store_failure(context, link_dao):
    link_dao.find_by_target.side_effect = DataStoreError("Can't connect to Redis at redis.test:6379/0.")

    response = app.lambda_handler(_event('{"target_url": "https://example.com"}'), context)
    payload = json.loads(response['body'])

    assert response['statusCode'] == 500
    assert payload['errorCode'] == 'DATA_STORE_ERROR'
    assert payload['message'].startswith('Internal Server Error (Failed to create short URL: ')
    link_dao.close.assert_called_once()


def test_lambda_handler_with_missing_configuration(monkeypatch: MonkeyPatch, context):
    def _raise(*args, **kwargs):
        raise MissingEnvironmentVariableError("Missing required environment variables: 'APPCONFIG_APP_ID'")

    monkeypatch.setattr(app, 'load_config', _raise)

    response = app.lambda_handler(_event('{"target_url": "https://example.com"}'), context)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['message'] == 'Internal Server Error'
