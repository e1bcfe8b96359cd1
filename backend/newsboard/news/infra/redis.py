"""Redis-backed index store and vote source for news items."""

from __future__ import annotations

from contextlib import contextmanager
from typing import Iterator, Mapping, Optional, Sequence

from redis.exceptions import RedisError

from newsboard.infra.redis import RedisProxy, redis_client
from newsboard.news.domain.exceptions import InvariantViolation, NotFoundError, TransientStoreError
from newsboard.news.domain.models import NewsItem

TOP_INDEX = "news.top"
LATEST_INDEX = "news.cron"
NEWS_COUNTER = "news.count"

_NEWS_KEY = "news:{news_id}"
_USER_POSTED_KEY = "user.posted:{user_id}"
_USER_SAVED_KEY = "user.saved:{user_id}"
_USERNAME_KEY = "username.to.id:{username}"

_WRITABLE_FIELDS = frozenset({"score", "rank"})


def index_member(news_id: int) -> str:
	"""Fixed-width sorted set member so equal scores order by numeric id."""

	return f"{news_id:012d}"


def news_key(news_id: int) -> str:
	return _NEWS_KEY.format(news_id=news_id)


def user_posted_index(user_id: int) -> str:
	return _USER_POSTED_KEY.format(user_id=user_id)


def user_saved_index(user_id: int) -> str:
	return _USER_SAVED_KEY.format(user_id=user_id)


def username_key(username: str) -> str:
	return _USERNAME_KEY.format(username=username.lower())


@contextmanager
def _store_errors(operation: str) -> Iterator[None]:
	try:
		yield
	except RedisError as exc:
		raise TransientStoreError(f"store_unavailable:{operation}") from exc


def _item_from_hash(news_id: int, mapping: Mapping[str, str]) -> Optional[NewsItem]:
	if not mapping:
		return None
	data = dict(mapping)
	data.setdefault("id", str(news_id))
	return NewsItem.from_mapping(data)


class RedisIndexStore:
	"""Reads and writes news hashes and the sorted indices built over them."""

	def __init__(self, client: RedisProxy | None = None) -> None:
		self._redis = client if client is not None else redis_client

	async def get_item(self, news_id: int) -> Optional[NewsItem]:
		with _store_errors("get_item"):
			mapping = await self._redis.hgetall(news_key(news_id))
		return _item_from_hash(news_id, mapping)

	async def get_items(self, news_ids: Sequence[int]) -> list[NewsItem]:
		"""Hydrate ids in order with a single pipeline; absent ids are dropped."""

		if not news_ids:
			return []
		with _store_errors("get_items"):
			pipe = self._redis.pipeline(transaction=False)
			for news_id in news_ids:
				pipe.hgetall(news_key(news_id))
			rows = await pipe.execute()
		items: list[NewsItem] = []
		for news_id, mapping in zip(news_ids, rows):
			item = _item_from_hash(news_id, mapping)
			if item is not None:
				items.append(item)
		return items

	async def put_item_fields(self, news_id: int, fields: Mapping[str, float]) -> bool:
		"""Atomically update derived fields of an existing item.

		Returns False without writing when the item hash is gone.
		"""

		unknown = set(fields) - _WRITABLE_FIELDS
		if unknown:
			raise ValueError(f"fields not writable: {sorted(unknown)}")
		key = news_key(news_id)
		payload = {name: repr(float(value)) for name, value in fields.items()}
		with _store_errors("put_item_fields"):
			async with self._redis.pipeline(transaction=True) as pipe:
				await pipe.watch(key)
				if not await pipe.exists(key):
					await pipe.unwatch()
					return False
				pipe.multi()
				pipe.hset(key, mapping=payload)
				await pipe.execute()
		return True

	async def sorted_index_upsert(self, index_name: str, news_id: int, key: float) -> bool:
		with _store_errors("sorted_index_upsert"):
			await self._redis.zadd(index_name, {index_member(news_id): float(key)})
		return True

	async def sorted_index_range(
		self,
		index_name: str,
		start: int,
		count: int,
		*,
		descending: bool = True,
	) -> tuple[list[int], int]:
		"""Return ids at positions [start, start + count) and the index size."""

		with _store_errors("sorted_index_range"):
			if count <= 0:
				total = await self._redis.zcard(index_name)
				return [], int(total)
			stop = start + count - 1
			pipe = self._redis.pipeline(transaction=False)
			if descending:
				pipe.zrevrange(index_name, start, stop)
			else:
				pipe.zrange(index_name, start, stop)
			pipe.zcard(index_name)
			members, total = await pipe.execute()
		return [int(member) for member in members], int(total)

	async def counter_get(self, name: str) -> int:
		with _store_errors("counter_get"):
			raw = await self._redis.get(name)
		return int(raw) if raw else 0

	async def existence_check(self, news_id: int) -> bool:
		with _store_errors("existence_check"):
			found = await self._redis.exists(news_key(news_id))
		return bool(found)

	async def lookup_user_id(self, username: str) -> Optional[int]:
		with _store_errors("lookup_user_id"):
			raw = await self._redis.get(username_key(username))
		return int(raw) if raw else None


class RedisVoteSource:
	"""Reads vote totals the voting subsystem keeps on the news hash."""

	def __init__(self, client: RedisProxy | None = None) -> None:
		self._redis = client if client is not None else redis_client

	async def get_net_votes(self, news_id: int) -> int:
		key = news_key(news_id)
		with _store_errors("get_net_votes"):
			pipe = self._redis.pipeline(transaction=False)
			pipe.exists(key)
			pipe.hmget(key, "up", "down")
			exists, (up, down) = await pipe.execute()
		if not exists:
			raise NotFoundError("news_not_found")
		try:
			return int(up or 0) - int(down or 0)
		except ValueError as exc:
			raise InvariantViolation("news_votes_malformed") from exc


__all__ = [
	"LATEST_INDEX",
	"NEWS_COUNTER",
	"RedisIndexStore",
	"RedisVoteSource",
	"TOP_INDEX",
	"index_member",
	"news_key",
	"user_posted_index",
	"user_saved_index",
	"username_key",
]
