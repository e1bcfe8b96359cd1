"""Central registry for Prometheus metrics used across the backend."""

from __future__ import annotations

from prometheus_client import Counter, Histogram


REQUEST_COUNTER = Counter(
	"newsboard_http_requests_total",
	"Total HTTP requests processed",
	["route", "method", "status"],
)

REQUEST_LATENCY = Histogram(
	"newsboard_http_request_duration_seconds",
	"HTTP request latency in seconds",
	["route", "method"],
	buckets=(0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0),
)

RANK_RECOMPUTE_DURATION = Histogram(
	"newsboard_rank_recompute_duration_seconds",
	"Duration of news score/rank recompute runs",
	buckets=(0.05, 0.1, 0.25, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0),
)

RANK_RECOMPUTE_UPDATED = Counter(
	"newsboard_rank_recompute_updated_total",
	"News items whose score and rank were rewritten",
)

RANK_RECOMPUTE_SKIPPED = Counter(
	"newsboard_rank_recompute_skipped_total",
	"News items skipped during recompute",
	["reason"],
)

NEWS_PAGES_SERVED = Counter(
	"newsboard_news_pages_total",
	"News list pages served",
	["kind"],
)

NEWS_PAGE_ITEMS = Histogram(
	"newsboard_news_page_items",
	"Items rendered per news list page",
	buckets=(0, 1, 5, 10, 30, 50, 100),
)

RANDOM_PICKS = Counter(
	"newsboard_random_picks_total",
	"Random news picks",
	["outcome"],
)


def observe_request(route: str, method: str, status: int, elapsed_seconds: float) -> None:
	REQUEST_COUNTER.labels(route=route, method=method, status=str(status)).inc()
	REQUEST_LATENCY.labels(route=route, method=method).observe(elapsed_seconds)


def page_served(kind: str, item_count: int) -> None:
	NEWS_PAGES_SERVED.labels(kind=kind).inc()
	NEWS_PAGE_ITEMS.observe(item_count)


def recompute_skipped(reason: str) -> None:
	RANK_RECOMPUTE_SKIPPED.labels(reason=reason).inc()


def random_pick(outcome: str) -> None:
	RANDOM_PICKS.labels(outcome=outcome).inc()
