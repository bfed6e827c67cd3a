from datetime import datetime, UTC
from unittest.mock import MagicMock

import pytest
import redis

from shortlinks.models import LinkModel


@pytest.fixture
def app_prefix() -> str:
    return 'testapp:test'


@pytest.fixture
def redis_client() -> redis.Redis:
    """Mock a Redis pipeline-compatible client.

    `transaction()` mirrors redis-py: the callable runs against the pipeline,
    then EXEC runs; the callable's return value is passed through only with
    `value_from_callable=True`.
    """
    client = MagicMock(spec=redis.client.Pipeline)
    client.connection_pool = MagicMock(
        spec=redis.ConnectionPool,
        connection_kwargs={'host': 'redis.test', 'port': 6379, 'db': 0},
    )
    client.exists.return_value = False
    client.hgetall.return_value = {}
    client.hget.return_value = None
    client.get.return_value = None
    client.pipeline.return_value = client
    client.__enter__.return_value = client
    client.__exit__.return_value = None

    def _transaction(func, *watches, value_from_callable=False, **kwargs):
        func_value = func(client)
        exec_value = client.execute()
        return func_value if value_from_callable else exec_value

    client.transaction.side_effect = _transaction
    return client


@pytest.fixture
def link() -> LinkModel:
    return LinkModel(
        id='0b7c3c1e-3c51-4d0f-9a51-8d6f7f0c2a11',
        shortcode='abc123',
        target='https://example.com/blog/post',
        created_at=datetime(2025, 10, 15, 12, 0, tzinfo=UTC),
        expires_at=datetime(2025, 11, 15, 12, 0, tzinfo=UTC),
        owner_id='user-1',
    )


@pytest.fixture
def link_hash() -> dict[str, str]:
    return {
        'id': '0b7c3c1e-3c51-4d0f-9a51-8d6f7f0c2a11',
        'shortcode': 'abc123',
        'target': 'https://example.com/blog/post',
        'clicks': '0',
        'created_at': '2025-10-15T12:00:00+00:00',
        'expires_at': '2025-11-15T12:00:00+00:00',
        'owner_id': 'user-1',
    }
