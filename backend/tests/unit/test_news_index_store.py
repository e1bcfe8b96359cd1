from __future__ import annotations

import pytest
from redis.exceptions import ConnectionError as RedisConnectionError

from newsboard.news.domain.exceptions import InvariantViolation, NotFoundError, TransientStoreError
from newsboard.news.infra import redis as news_store
from newsboard.news.infra.redis import RedisIndexStore, RedisVoteSource


class _DownClient:
    """Client whose every command fails like an unreachable server."""

    def __getattr__(self, item):
        async def _fail(*args, **kwargs):
            raise RedisConnectionError("connection refused")

        return _fail


@pytest.mark.asyncio
async def test_get_item_returns_none_for_absent(seed_news):
    await seed_news(1)
    store = RedisIndexStore()

    item = await store.get_item(1)
    assert item is not None and item.id == 1 and item.title == "News 1"
    assert await store.get_item(2) is None


@pytest.mark.asyncio
async def test_get_items_preserves_order_and_drops_missing(seed_news):
    await seed_news(1)
    await seed_news(3)
    store = RedisIndexStore()

    items = await store.get_items([3, 2, 1])
    assert [item.id for item in items] == [3, 1]


@pytest.mark.asyncio
async def test_put_item_fields_updates_existing(seed_news, fake_redis):
    await seed_news(1)
    store = RedisIndexStore()

    assert await store.put_item_fields(1, {"score": 2.5, "rank": 0.125}) is True
    stored = await fake_redis.hmget(news_store.news_key(1), "score", "rank", "title")
    assert [float(stored[0]), float(stored[1]), stored[2]] == [2.5, 0.125, "News 1"]


@pytest.mark.asyncio
async def test_put_item_fields_does_not_resurrect_missing(fake_redis):
    store = RedisIndexStore()

    assert await store.put_item_fields(42, {"score": 1.0, "rank": 1.0}) is False
    assert await fake_redis.exists(news_store.news_key(42)) == 0


@pytest.mark.asyncio
async def test_put_item_fields_rejects_non_derived_fields(seed_news):
    await seed_news(1)
    with pytest.raises(ValueError):
        await RedisIndexStore().put_item_fields(1, {"up": 3})


@pytest.mark.asyncio
async def test_sorted_index_range_directions_and_total(fake_redis):
    members = {news_store.index_member(news_id): key for news_id, key in ((1, 10), (2, 30), (3, 20))}
    await fake_redis.zadd("idx", members)
    store = RedisIndexStore()

    assert await store.sorted_index_range("idx", 0, 2) == ([2, 3], 3)
    assert await store.sorted_index_range("idx", 0, 2, descending=False) == ([1, 3], 3)
    assert await store.sorted_index_range("idx", 2, 5) == ([1], 3)
    assert await store.sorted_index_range("idx", 0, 0) == ([], 3)
    assert await store.sorted_index_range("missing", 0, 10) == ([], 0)


@pytest.mark.asyncio
async def test_sorted_index_upsert_rekeys(fake_redis):
    store = RedisIndexStore()
    await store.sorted_index_upsert(news_store.TOP_INDEX, 5, 1.0)
    await store.sorted_index_upsert(news_store.TOP_INDEX, 5, 3.5)

    assert await fake_redis.zscore(news_store.TOP_INDEX, news_store.index_member(5)) == 3.5
    assert await fake_redis.zcard(news_store.TOP_INDEX) == 1


@pytest.mark.asyncio
async def test_top_index_ties_order_by_numeric_id(seed_news):
    for news_id in (9, 10, 11):
        await seed_news(news_id, rank=0.0)
    await seed_news(12, rank=1.5)
    store = RedisIndexStore()

    for news_id in (9, 10, 11):
        await store.sorted_index_upsert(news_store.TOP_INDEX, news_id, 0.0)

    assert await store.sorted_index_range(news_store.TOP_INDEX, 0, 10) == ([12, 11, 10, 9], 4)
    assert await store.sorted_index_range(news_store.TOP_INDEX, 1, 2) == ([11, 10], 4)


@pytest.mark.asyncio
async def test_latest_index_ties_order_by_numeric_id(seed_news):
    for news_id in (9, 10, 11):
        await seed_news(news_id, ctime=1_700_000_000)
    store = RedisIndexStore()

    newest_first, total = await store.sorted_index_range(news_store.LATEST_INDEX, 0, 10)
    oldest_first, _ = await store.sorted_index_range(news_store.LATEST_INDEX, 0, 10, descending=False)

    assert (newest_first, total) == ([11, 10, 9], 3)
    assert oldest_first == [9, 10, 11]


@pytest.mark.asyncio
async def test_counter_existence_and_username(seed_news, fake_redis):
    store = RedisIndexStore()
    assert await store.counter_get(news_store.NEWS_COUNTER) == 0

    await seed_news(4)
    await fake_redis.set(news_store.username_key("Alice"), 9)

    assert await store.counter_get(news_store.NEWS_COUNTER) == 4
    assert await store.existence_check(4) is True
    assert await store.existence_check(3) is False
    assert await store.lookup_user_id("alice") == 9
    assert await store.lookup_user_id("nobody") is None


@pytest.mark.asyncio
async def test_vote_source_reads_net_votes(seed_news):
    await seed_news(1, up=7, down=2)
    assert await RedisVoteSource().get_net_votes(1) == 5


@pytest.mark.asyncio
async def test_vote_source_missing_item():
    with pytest.raises(NotFoundError):
        await RedisVoteSource().get_net_votes(404)


@pytest.mark.asyncio
async def test_vote_source_rejects_malformed_votes(seed_news, fake_redis):
    await seed_news(1)
    await fake_redis.hset(news_store.news_key(1), "up", "many")

    with pytest.raises(InvariantViolation):
        await RedisVoteSource().get_net_votes(1)


@pytest.mark.asyncio
async def test_store_unavailable_is_transient():
    store = RedisIndexStore(client=_DownClient())  # type: ignore[arg-type]

    with pytest.raises(TransientStoreError):
        await store.get_item(1)
    with pytest.raises(TransientStoreError):
        await store.existence_check(1)
