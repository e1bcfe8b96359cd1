from __future__ import annotations

import pytest

from newsboard.news.domain.exceptions import InvariantViolation, NotFoundError
from newsboard.news.domain.models import Cursor, NewsItem, SourceKind
from newsboard.news.infra import redis as news_store
from newsboard.news.infra.redis import RedisIndexStore, RedisVoteSource
from newsboard.news.services.listing import IndexPageSource, NewsListing, default_cursor, index_for
from newsboard.news.workers.rank_updater import RankUpdater
from newsboard.settings import settings
from tests.conftest import NOW


def _ids(item: NewsItem) -> int:
    return item.id


class _CountingStore(RedisIndexStore):
    def __init__(self) -> None:
        super().__init__()
        self.range_calls = 0

    async def sorted_index_range(self, index_name, start, count, *, descending=True):
        self.range_calls += 1
        return await super().sorted_index_range(index_name, start, count, descending=descending)


def _cursor(start: int = 0, page_size: int = 10) -> Cursor:
    return Cursor(start=start, page_size=page_size, link_template="/x/$")


@pytest.mark.asyncio
async def test_latest_and_top_diverge_on_votes(seed_news):
    same_ctime = int(NOW.timestamp()) - 7200
    await seed_news(1, ctime=same_ctime, up=10)
    await seed_news(2, ctime=same_ctime, up=1)
    store = RedisIndexStore()
    await RankUpdater(store=store, votes=RedisVoteSource()).run_once(now=NOW)
    listing = NewsListing(store, _ids)

    latest = await listing.list_page(SourceKind.LATEST, _cursor())
    top = await listing.list_page(SourceKind.TOP, _cursor())

    assert top.items == [1, 2]
    assert latest.items == [2, 1]


@pytest.mark.asyncio
async def test_fresh_unvoted_items_tie_by_id(seed_news):
    same_ctime = int(NOW.timestamp()) - 600
    for news_id in (9, 10, 11):
        await seed_news(news_id, ctime=same_ctime)
    store = RedisIndexStore()
    await RankUpdater(store=store, votes=RedisVoteSource()).run_once(now=NOW)
    listing = NewsListing(store, _ids)

    top = await listing.list_page(SourceKind.TOP, _cursor())
    latest = await listing.list_page(SourceKind.LATEST, _cursor())
    second_page = await listing.list_page(SourceKind.TOP, _cursor(start=1, page_size=1))

    assert top.items == [11, 10, 9]
    assert latest.items == [11, 10, 9]
    assert second_page.items == [10]


@pytest.mark.asyncio
async def test_latest_lists_newest_first_with_more_link(seed_news):
    for news_id in range(1, 6):
        await seed_news(news_id)
    listing = NewsListing(RedisIndexStore(), _ids)

    page = await listing.list_page(SourceKind.LATEST, _cursor(page_size=2))

    assert page.items == [5, 4]
    assert page.total == 5
    assert page.more_link == "/x/2"


@pytest.mark.asyncio
async def test_by_user_and_saved_indices(seed_news, fake_redis):
    await seed_news(1, user_id=7)
    await seed_news(2, user_id=8)
    await seed_news(3, user_id=7)
    await fake_redis.zadd(news_store.user_saved_index(8), {news_store.index_member(1): 100, news_store.index_member(3): 50})
    listing = NewsListing(RedisIndexStore(), _ids)

    posted = await listing.list_page(SourceKind.BY_USER, _cursor(), user_id=7)
    saved = await listing.list_page(SourceKind.SAVED, _cursor(), user_id=8)

    assert posted.items == [3, 1]
    assert saved.items == [1, 3]


@pytest.mark.asyncio
async def test_user_kinds_require_user_id():
    store = _CountingStore()
    listing = NewsListing(store, _ids)

    with pytest.raises(InvariantViolation):
        await listing.list_page(SourceKind.SAVED, _cursor())
    assert store.range_calls == 0


@pytest.mark.asyncio
async def test_tombstones_are_passed_to_renderer(seed_news):
    await seed_news(1, deleted=True)
    await seed_news(2)
    listing = NewsListing(RedisIndexStore(), lambda item: (item.id, item.deleted))

    page = await listing.list_page(SourceKind.LATEST, _cursor())

    assert page.items == [(2, False), (1, True)]


@pytest.mark.asyncio
async def test_index_page_source_reads_index_once(seed_news):
    for news_id in range(1, 4):
        await seed_news(news_id)
    store = _CountingStore()
    source = IndexPageSource(store, news_store.LATEST_INDEX, _ids)

    items, total = await source.fetch(1, 5)

    assert [item.id for item in items] == [2, 1]
    assert total == 3
    assert store.range_calls == 1
    assert source.render(items[0]) == 2


@pytest.mark.asyncio
async def test_get_news_by_id_and_username(seed_news, fake_redis):
    await seed_news(1)
    await fake_redis.set(news_store.username_key("carol"), 12)
    listing = NewsListing(RedisIndexStore(), _ids)

    assert (await listing.get_news_by_id(1)).id == 1
    assert await listing.resolve_username("Carol") == 12
    with pytest.raises(NotFoundError):
        await listing.get_news_by_id(2)
    with pytest.raises(NotFoundError):
        await listing.resolve_username("dave")


def test_index_for_kinds():
    assert index_for(SourceKind.TOP) == "news.top"
    assert index_for(SourceKind.LATEST) == "news.cron"
    assert index_for(SourceKind.BY_USER, 3) == "user.posted:3"
    assert index_for(SourceKind.SAVED, 3) == "user.saved:3"


def test_default_cursor_uses_configured_sizes():
    assert default_cursor(SourceKind.LATEST, 5) == Cursor(
        start=5, page_size=settings.latest_news_per_page, link_template="/latest/$"
    )
    assert default_cursor(SourceKind.BY_USER, username="a b").link_template == "/usernews/a%20b/$"
    with pytest.raises(InvariantViolation):
        default_cursor(SourceKind.BY_USER)
