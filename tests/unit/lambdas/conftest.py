from typing import cast
from unittest.mock import MagicMock

import pytest
from pytest import MonkeyPatch

from shortlinks.types import LambdaContext, LambdaConfiguration
from shortlinks.dao.redis import LinkRedisDAO, ClickEventRedisDAO


@pytest.fixture(autouse=True)
def _env(monkeypatch: MonkeyPatch) -> None:
    monkeypatch.setenv('APP_ENV', 'test')
    monkeypatch.setenv('APP_NAME', 'shortlinks')
    monkeypatch.delenv('AWS_SAM_LOCAL', raising=False)
    monkeypatch.delenv('BASE_URL', raising=False)


@pytest.fixture
def context() -> LambdaContext:
    return cast(LambdaContext, {'function_name': 'test_function'})


@pytest.fixture
def config() -> LambdaConfiguration:
    return cast(LambdaConfiguration, {'redis': {'host': 'redis.test', 'port': 6379, 'db': 0}})


@pytest.fixture
def link_dao() -> LinkRedisDAO:
    dao = MagicMock(spec=LinkRedisDAO)
    dao.redis = MagicMock()
    dao.__enter__.return_value = dao
    dao.__exit__.return_value = False
    return dao


@pytest.fixture
def click_dao() -> ClickEventRedisDAO:
    return MagicMock(spec=ClickEventRedisDAO)
