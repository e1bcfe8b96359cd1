"""Recompute score and rank for every news item from the command line."""

from __future__ import annotations

import argparse
import asyncio

from newsboard.infra.redis import redis_client
from newsboard.news.infra.redis import RedisIndexStore, RedisVoteSource
from newsboard.news.workers.rank_updater import RankUpdater
from newsboard.obs import logging as obs_logging


def _parse_args() -> argparse.Namespace:
	parser = argparse.ArgumentParser(description="Recompute news score and rank")
	parser.add_argument("--start", type=int, default=0, help="Offset in the creation index to resume from")
	parser.add_argument("--batch-size", type=int, default=None, help="Ids read from the creation index per round trip")
	return parser.parse_args()


async def recompute(start: int, batch_size: int | None) -> int:
	updater = RankUpdater(store=RedisIndexStore(), votes=RedisVoteSource(), batch_size=batch_size)
	try:
		return await updater.run_once(start=start)
	finally:
		await redis_client.aclose()


def main() -> None:
	args = _parse_args()
	obs_logging.configure_logging()
	updated = asyncio.run(recompute(args.start, args.batch_size))
	print(f"Done. {updated} news items updated.")


if __name__ == "__main__":
	main()
