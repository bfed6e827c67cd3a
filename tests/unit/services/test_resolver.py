"""Unit tests for LinkResolver.

Test coverage includes:

1. Link creation
   - Ensures URLs are normalized and stored with a 6 character alphanumeric code.
   - Ensures the same destination is de-duplicated into a single link.
   - Ensures invalid URLs and store failures are reported as failed results.
   - Ensures shortcode collisions are retried and exhaustion is reported.

2. Redirect resolution
   - Ensures successful redirects count the click and record an event.
   - Ensures unknown, too short and expired codes never change a counter.
   - Ensures click event failures never fail the redirect.
   - Ensures concurrent redirects lose no updates.

3. Link info
   - Ensures info lookups validate the code and never count clicks.
"""

import re
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime, timedelta, UTC
from itertools import cycle

import pytest
from freezegun import freeze_time

from shortlinks.constants import ErrorCode
from shortlinks.services import LinkResolver


@pytest.fixture
def resolver(link_dao, click_dao, base) -> LinkResolver:
    return LinkResolver(link_dao, click_dao, base_url=base)


def _sequence(*codes):
    """Shortcode generator replaying `codes` in a loop."""
    it = cycle(codes)
    return lambda length: next(it)


# -------------------------------
# 1. Link creation
# -------------------------------


def test_create_short_link(resolver, link_dao):
    result = resolver.create_short_link('https://example.com/a/very/long/path')

    assert result.success is True
    assert re.fullmatch(r'[A-Za-z0-9]{6}', result.data.link.shortcode)
    assert result.data.link.clicks == 0
    assert result.data.link.expires_at is None
    assert result.data.short_url == f'https://sho.rt/{result.data.link.shortcode}'
    assert link_dao.get(result.data.link.shortcode) == result.data.link


def test_create_short_link_normalizes_url(resolver):
    result = resolver.create_short_link('  example.com/docs ')

    assert result.success is True
    assert result.data.link.target == 'https://example.com/docs'


def test_create_short_link_deduplicates_target(resolver, link_dao):
    first = resolver.create_short_link('https://example.com/page')
    second = resolver.create_short_link('example.com/page', owner_id='user-2')

    assert first.data.link.shortcode == second.data.link.shortcode
    assert second.data.link.owner_id is None
    assert len(link_dao.list_all()) == 1


def test_create_short_link_with_expiry_and_owner(resolver):
    expires_at = datetime(2030, 1, 1, 12)

    result = resolver.create_short_link('https://example.com', expires_at=expires_at, owner_id='user-1')

    assert result.data.link.expires_at == datetime(2030, 1, 1, 12, tzinfo=UTC)
    assert result.data.link.owner_id == 'user-1'


def test_create_short_link_with_empty_owner(resolver):
    assert resolver.create_short_link('https://example.com', owner_id='').data.link.owner_id is None


@pytest.mark.parametrize(
    'raw_url, error',
    [
        ('', 'URL is required'),
        ('   ', 'URL is required'),
        (None, 'URL is required'),
        ('ftp://example.com', 'URL must use http or https protocol'),
        ('https://exa mple.com', 'Please enter a valid URL'),
    ],
)
def test_create_short_link_with_invalid_url(resolver, link_dao, raw_url, error):
    result = resolver.create_short_link(raw_url)

    assert result.success is False
    assert result.error == error
    assert result.error_code == ErrorCode.INVALID_URL
    assert link_dao.list_all() == []


def test_create_short_link_retries_on_collision(link_dao, click_dao, base, new_link):
    link_dao.put(new_link('taken1', datetime.now(UTC)))
    resolver = LinkResolver(link_dao, click_dao, base_url=base, generate=_sequence('taken1', 'taken1', 'fresh1'))

    result = resolver.create_short_link('https://example.com/new')

    assert result.success is True
    assert result.data.link.shortcode == 'fresh1'
    assert link_dao.insert_attempts == 3


def test_create_short_link_gives_up_after_max_attempts(link_dao, click_dao, base, new_link):
    link_dao.put(new_link('taken1', datetime.now(UTC)))
    resolver = LinkResolver(link_dao, click_dao, base_url=base, max_attempts=4, generate=_sequence('taken1'))

    result = resolver.create_short_link('https://example.com/new')

    assert result.success is False
    assert result.error == 'Failed to generate unique short code. Please try again.'
    assert result.error_code == ErrorCode.GENERATION_EXHAUSTED
    assert link_dao.insert_attempts == 4


def test_create_short_link_with_store_failure(resolver, link_dao):
    link_dao.fail = True

    result = resolver.create_short_link('https://example.com')

    assert result.success is False
    assert result.error.startswith('Failed to create short URL: ')
    assert result.error_code == ErrorCode.DATA_STORE_ERROR


def test_concurrent_creations_claim_unique_codes(resolver, link_dao):
    with ThreadPoolExecutor(max_workers=8) as pool:
        results = list(pool.map(resolver.create_short_link, [f'https://example.com/{i}' for i in range(50)]))

    codes = {result.data.link.shortcode for result in results}
    assert all(result.success for result in results)
    assert len(codes) == 50
    assert len(link_dao.list_all()) == 50


# -------------------------------
# 2. Redirect resolution
# -------------------------------


def test_resolve_and_record(resolver, link_dao, click_dao):
    code = resolver.create_short_link('https://example.com/a/very/long/path').data.link.shortcode

    results = [resolver.resolve_and_record(code, referrer='https://news.ycombinator.com', user_agent='curl/8.0') for _ in range(3)]

    assert all(result.success for result in results)
    assert {result.original_url for result in results} == {'https://example.com/a/very/long/path'}
    assert link_dao.get(code).clicks == 3
    assert len(click_dao.events) == 3
    assert click_dao.events[0].link_id == link_dao.get(code).id
    assert click_dao.events[0].referrer == 'https://news.ycombinator.com'
    assert click_dao.events[0].user_agent == 'curl/8.0'


def test_resolve_unknown_code(resolver, link_dao, new_link):
    link = link_dao.put(new_link('abc123', datetime.now(UTC), clicks=7))

    result = resolver.resolve_and_record('zzz999')

    assert result.success is False
    assert result.not_found is True
    assert result.error == 'URL not found'
    assert link_dao.get(link.shortcode).clicks == 7


@pytest.mark.parametrize('shortcode', ['', 'abc', None, 1234])
def test_resolve_too_short_code_skips_store(resolver, link_dao, shortcode):
    link_dao.fail = True

    result = resolver.resolve_and_record(shortcode)

    assert result.not_found is True
    assert result.error_code == ErrorCode.LINK_NOT_FOUND


@freeze_time('2025-10-15 12:00:00')
def test_resolve_expired_link(resolver, link_dao, click_dao, new_link):
    link_dao.put(new_link('old123', datetime(2025, 9, 1, tzinfo=UTC), clicks=4, expires_at=datetime(2025, 10, 15, 11, 59, tzinfo=UTC)))

    result = resolver.resolve_and_record('old123')

    assert result.success is False
    assert result.expired is True
    assert result.error == 'This link has expired'
    assert link_dao.get('old123').clicks == 4
    assert click_dao.events == []


@freeze_time('2025-10-15 12:00:00')
def test_resolve_link_expiring_now_still_redirects(resolver, link_dao, new_link):
    link_dao.put(new_link('edge12', datetime(2025, 9, 1, tzinfo=UTC), expires_at=datetime(2025, 10, 15, 12, tzinfo=UTC)))

    assert resolver.resolve_and_record('edge12').success is True


def test_resolve_with_failing_click_log(resolver, link_dao, click_dao, new_link, caplog):
    link_dao.put(new_link('abc123', datetime.now(UTC)))
    click_dao.fail_append = True

    result = resolver.resolve_and_record('abc123')

    assert result.success is True
    assert result.original_url == 'https://example.com/abc123'
    assert link_dao.get('abc123').clicks == 1
    assert 'Failed to record click event.' in caplog.text


def test_resolve_with_store_failure(resolver, link_dao):
    link_dao.fail = True

    result = resolver.resolve_and_record('abc123')

    assert result.success is False
    assert result.not_found is False
    assert result.error == 'Failed to process redirect'
    assert result.error_code == ErrorCode.DATA_STORE_ERROR


def test_concurrent_redirects_count_every_click(resolver, link_dao, click_dao):
    code = resolver.create_short_link('https://example.com/hot').data.link.shortcode

    with ThreadPoolExecutor(max_workers=16) as pool:
        results = list(pool.map(lambda _: resolver.resolve_and_record(code), range(200)))

    assert sum(result.success for result in results) == 200
    assert link_dao.get(code).clicks == 200
    assert len(click_dao.events) == 200


# -------------------------------
# 3. Link info
# -------------------------------


def test_get_info(resolver, link_dao, new_link):
    link_dao.put(new_link('abc123', datetime.now(UTC), clicks=5))

    result = resolver.get_info('abc123')

    assert result.success is True
    assert result.data.link.clicks == 5
    assert result.data.short_url == 'https://sho.rt/abc123'
    assert link_dao.get('abc123').clicks == 5


@pytest.mark.parametrize(
    'shortcode, error_code',
    [
        ('ab!', ErrorCode.INVALID_SHORTCODE),
        ('abcdefghi', ErrorCode.INVALID_SHORTCODE),
        ('nope12', ErrorCode.LINK_NOT_FOUND),
    ],
)
def test_get_info_failures(resolver, shortcode, error_code):
    result = resolver.get_info(shortcode)

    assert result.success is False
    assert result.error_code == error_code


def test_get_info_with_store_failure(resolver, link_dao):
    link_dao.fail = True

    result = resolver.get_info('abc123')

    assert result.error == 'Failed to fetch URL info'
    assert result.error_code == ErrorCode.DATA_STORE_ERROR


def test_get_info_does_not_expire_links(resolver, link_dao, new_link):
    link_dao.put(new_link('old123', datetime.now(UTC), expires_at=datetime.now(UTC) - timedelta(days=1)))

    assert resolver.get_info('old123').success is True
