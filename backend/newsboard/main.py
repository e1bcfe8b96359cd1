"""FastAPI application entrypoint."""

from __future__ import annotations

import asyncio
import logging
from contextlib import asynccontextmanager, suppress

from fastapi import FastAPI

from newsboard import __version__
from newsboard.api import ops
from newsboard.api.errors import install_error_handlers
from newsboard.infra.redis import redis_client
from newsboard.news import router as news_router
from newsboard.news.infra.redis import RedisIndexStore, RedisVoteSource
from newsboard.news.workers.rank_updater import RankUpdater
from newsboard.obs import init as obs_init
from newsboard.settings import settings

_LOG = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
	updater: RankUpdater | None = None
	task: asyncio.Task | None = None
	if settings.rank_workers_enabled:
		updater = RankUpdater(store=RedisIndexStore(), votes=RedisVoteSource())
		task = asyncio.create_task(updater.run_forever())
		_LOG.info("rank_updater.started", extra={"interval": updater.interval_seconds})
	try:
		yield
	finally:
		if updater is not None and task is not None:
			updater.stop()
			task.cancel()
			with suppress(asyncio.CancelledError):
				await task
		await redis_client.aclose()


app = FastAPI(title=settings.site_name, version=__version__, lifespan=lifespan)
install_error_handlers(app)
obs_init(app)

app.include_router(news_router)
app.include_router(ops.router)
