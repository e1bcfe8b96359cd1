"""Score and rank helpers for news items."""

from __future__ import annotations

import math
from datetime import datetime, timezone

from newsboard.news.domain import models

# Hours for a vote's weight in the score to drop by a factor of e.
SCORE_DECAY_HOURS = 48.0
# Added to the age so brand new items do not divide by ~0.
NEWS_AGE_PADDING = 3600 * 8
RANK_AGING_FACTOR = 2.2
# Items older than this are pushed below every fresh item.
TOP_NEWS_AGE_LIMIT = 3600 * 24 * 30


def compute_score(net_votes: int, age_seconds: float) -> float:
    """Compute the popularity score from net votes and age.

    Negative net votes count as zero, so the score never drops below 0.0.
    Each vote loses weight exponentially with the item's age.
    """

    age_hours = max(age_seconds, 0.0) / 3600.0
    decay = math.exp(-age_hours / SCORE_DECAY_HOURS)
    return float(max(net_votes, 0)) * decay


def compute_rank(score: float, age_seconds: float) -> float:
    """Compute the "hot" ordering key for the top news index.

    The score is divided by a power of the padded age, so an item with no new
    votes keeps sliding down. Past TOP_NEWS_AGE_LIMIT the rank is the negated
    age, which orders expired items after all live ones, oldest last.
    """

    age = max(age_seconds, 0.0)
    if age > TOP_NEWS_AGE_LIMIT:
        return -age
    return (score * 1_000_000) / ((age + NEWS_AGE_PADDING) ** RANK_AGING_FACTOR)


def score_item(item: models.NewsItem, net_votes: int, *, now: datetime | None = None) -> tuple[float, float]:
    """Return the recomputed (score, rank) pair for an item."""

    current_time = now or datetime.now(timezone.utc)
    age = item.age_seconds(current_time)
    score = compute_score(net_votes, age)
    return score, compute_rank(score, age)


__all__ = ["compute_rank", "compute_score", "score_item"]
