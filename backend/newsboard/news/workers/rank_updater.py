"""Score and rank recompute job for every indexed news item."""

from __future__ import annotations

import asyncio
import logging
import time
from datetime import datetime, timezone

from newsboard.news.domain.exceptions import NewsError
from newsboard.news.domain.protocols import IndexStore, VoteSource
from newsboard.news.infra import redis as news_store
from newsboard.news.services import ranker
from newsboard.obs import metrics as obs_metrics
from newsboard.settings import settings

_LOG = logging.getLogger(__name__)


class RankUpdater:
    """Walks the creation index and rewrites score/rank for each item.

    Each item is read, scored and written back on its own, so a run can be
    resumed from any offset and a failure on one item only skips that item.
    """

    def __init__(
        self,
        *,
        store: IndexStore,
        votes: VoteSource,
        batch_size: int | None = None,
        interval_seconds: int | None = None,
    ) -> None:
        self.store = store
        self.votes = votes
        self.batch_size = batch_size or settings.recompute_batch_size
        self.interval_seconds = interval_seconds or settings.recompute_interval_seconds
        self._running = False

    async def run_forever(self) -> None:
        self._running = True
        while self._running:
            try:
                await self.run_once()
            except Exception:  # pragma: no cover - keep the loop alive
                _LOG.exception("rank_updater.run_once_failed")
            await asyncio.sleep(self.interval_seconds)

    def stop(self) -> None:
        self._running = False

    async def run_once(self, *, start: int = 0, now: datetime | None = None) -> int:
        """Recompute every item from `start` on and return how many were updated.

        `now` is fixed for the whole run; the same `now` and unchanged votes
        always produce the same score and rank.
        """

        started = time.perf_counter()
        now = now or datetime.now(timezone.utc)
        offset = max(start, 0)
        updated = 0
        while True:
            news_ids, total = await self.store.sorted_index_range(
                news_store.LATEST_INDEX,
                offset,
                self.batch_size,
                descending=False,
            )
            for news_id in news_ids:
                if await self._recompute_one(news_id, now):
                    updated += 1
            offset += len(news_ids)
            if not news_ids or offset >= total:
                break
        duration = time.perf_counter() - started
        obs_metrics.RANK_RECOMPUTE_DURATION.observe(duration)
        _LOG.info(
            "rank_updater.recompute",
            extra={"start": start, "walked": offset - max(start, 0), "updated": updated, "duration": duration},
        )
        return updated

    async def _recompute_one(self, news_id: int, now: datetime) -> bool:
        try:
            item = await self.store.get_item(news_id)
            if item is None:
                return self._skip(news_id, "missing")
            net_votes = await self.votes.get_net_votes(news_id)
            score, rank = ranker.score_item(item, net_votes, now=now)
            if not await self.store.put_item_fields(news_id, {"score": score, "rank": rank}):
                return self._skip(news_id, "missing")
            await self.store.sorted_index_upsert(news_store.TOP_INDEX, news_id, rank)
        except NewsError as exc:
            _LOG.warning(
                "rank_updater.item_failed",
                extra={"news_id": news_id, "error": exc.detail},
            )
            obs_metrics.recompute_skipped(type(exc).__name__)
            return False
        obs_metrics.RANK_RECOMPUTE_UPDATED.inc()
        return True

    def _skip(self, news_id: int, reason: str) -> bool:
        _LOG.warning("rank_updater.item_skipped", extra={"news_id": news_id, "reason": reason})
        obs_metrics.recompute_skipped(reason)
        return False


__all__ = ["RankUpdater"]
