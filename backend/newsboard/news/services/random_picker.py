"""Pick a random existing news item."""

from __future__ import annotations

import logging
import random

from newsboard.news.domain.exceptions import InvariantViolation
from newsboard.news.domain.protocols import IndexStore
from newsboard.news.infra import redis as news_store
from newsboard.obs import metrics as obs_metrics

_LOG = logging.getLogger(__name__)


class RandomPicker:
    """Draws an id uniformly from [1, news.count] and checks it exists.

    A miss returns the newest id instead of drawing again, so latency stays
    bounded at the cost of favouring the newest item when ids are sparse.
    """

    def __init__(self, store: IndexStore, *, rng: random.Random | None = None) -> None:
        self.store = store
        self.rng = rng or random.Random()

    async def pick(self) -> int:
        counter = await self.store.counter_get(news_store.NEWS_COUNTER)
        if counter <= 0:
            raise InvariantViolation("news_counter_not_positive")
        drawn = self.rng.randint(1, counter)
        if await self.store.existence_check(drawn):
            obs_metrics.random_pick("hit")
            return drawn
        _LOG.debug("random_picker.fallback", extra={"drawn": drawn, "counter": counter})
        obs_metrics.random_pick("fallback")
        return counter


__all__ = ["RandomPicker"]
