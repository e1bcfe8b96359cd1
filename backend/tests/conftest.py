import os
import sys
from datetime import datetime, timezone
from pathlib import Path

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from fakeredis.aioredis import FakeRedis

# Ensure backend package is importable when tests run from repo root
BACKEND_ROOT = Path(__file__).resolve().parents[1]
if str(BACKEND_ROOT) not in sys.path:
	sys.path.insert(0, str(BACKEND_ROOT))

# Keep the JSON log handler off the root logger so caplog keeps working
os.environ.setdefault("OBS_ENABLED", "false")

from newsboard.infra.redis import redis_client, set_redis_client
from newsboard.news.infra import redis as news_store
from newsboard.settings import settings

NOW = datetime(2026, 1, 15, 12, 0, tzinfo=timezone.utc)


@pytest_asyncio.fixture(autouse=True)
async def fake_redis():
	original = redis_client.client
	client = FakeRedis(decode_responses=True)
	set_redis_client(client)
	try:
		yield client
	finally:
		set_redis_client(original)
		await client.flushall()


@pytest.fixture(autouse=True)
def force_test_settings():
	original_token = settings.admin_token
	original_obs = settings.obs_enabled
	settings.admin_token = "test-admin-token"
	settings.obs_enabled = False
	try:
		yield
	finally:
		settings.admin_token = original_token
		settings.obs_enabled = original_obs


@pytest.fixture
def seed_news(fake_redis):
	"""Insert a news record with its indices the way the submit flow does."""

	async def _seed(
		news_id: int,
		*,
		ctime: int | None = None,
		user_id: int = 1,
		up: int = 0,
		down: int = 0,
		url: str | None = None,
		text: str | None = None,
		deleted: bool = False,
		rank: float = 0.0,
	) -> None:
		ctime = ctime if ctime is not None else int(NOW.timestamp()) - 3600 + news_id
		await fake_redis.hset(
			news_store.news_key(news_id),
			mapping={
				"id": news_id,
				"title": f"News {news_id}",
				"url": url if url is not None else (f"https://example.com/{news_id}" if text is None else ""),
				"text": text or "",
				"user_id": user_id,
				"ctime": ctime,
				"score": 0,
				"rank": rank,
				"up": up,
				"down": down,
				"del": 1 if deleted else 0,
			},
		)
		await fake_redis.zadd(news_store.LATEST_INDEX, {news_store.index_member(news_id): ctime})
		await fake_redis.zadd(news_store.TOP_INDEX, {news_store.index_member(news_id): rank})
		await fake_redis.zadd(news_store.user_posted_index(user_id), {news_store.index_member(news_id): ctime})
		current = int(await fake_redis.get(news_store.NEWS_COUNTER) or 0)
		if news_id > current:
			await fake_redis.set(news_store.NEWS_COUNTER, news_id)

	return _seed


@pytest_asyncio.fixture
async def api_client():
	from newsboard.main import app

	transport = ASGITransport(app=app)
	async with AsyncClient(transport=transport, base_url="http://testserver") as client:
		yield client
