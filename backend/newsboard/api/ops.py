"""Operations endpoints providing metrics and admin controls."""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Response, status
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

from newsboard.news.api._errors import to_http_error
from newsboard.news.api.news import get_store
from newsboard.news.domain.exceptions import NewsError
from newsboard.news.infra import redis as news_store
from newsboard.news.infra.redis import RedisIndexStore, RedisVoteSource
from newsboard.news.schemas import dto
from newsboard.news.workers.rank_updater import RankUpdater
from newsboard.settings import settings

router = APIRouter(prefix="", tags=["ops"])


def _resolve_token(x_admin_token: Optional[str], authorization: Optional[str]) -> Optional[str]:
	if x_admin_token:
		return x_admin_token
	if authorization and authorization.lower().startswith("bearer "):
		return authorization.split(" ", 1)[1]
	return None


async def require_admin(
	x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
	authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> None:
	token = settings.admin_token
	if not token:
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="admin_token_not_configured")
	if _resolve_token(x_admin_token, authorization) != token:
		raise HTTPException(status.HTTP_403_FORBIDDEN, detail="forbidden")


async def require_metrics_access(
	x_admin_token: Optional[str] = Header(default=None, alias="X-Admin-Token"),
	authorization: Optional[str] = Header(default=None, alias="Authorization"),
) -> None:
	if settings.obs_metrics_public:
		return
	await require_admin(x_admin_token=x_admin_token, authorization=authorization)


@router.get("/metrics")
async def prometheus_metrics(_: None = Depends(require_metrics_access)) -> Response:
	payload = generate_latest()
	return Response(content=payload, media_type=CONTENT_TYPE_LATEST)


@router.post("/admin/recompute", response_model=dto.RecomputeResponse)
async def recompute_endpoint(
	_: None = Depends(require_admin),
	store: RedisIndexStore = Depends(get_store),
) -> dto.RecomputeResponse:
	updater = RankUpdater(store=store, votes=RedisVoteSource())
	try:
		updated = await updater.run_once()
	except NewsError as exc:
		raise to_http_error(exc) from exc
	return dto.RecomputeResponse(updated=updated)


@router.get("/admin/stats", response_model=dto.AdminStatsResponse)
async def stats_endpoint(
	_: None = Depends(require_admin),
	store: RedisIndexStore = Depends(get_store),
) -> dto.AdminStatsResponse:
	try:
		news_count = (await store.sorted_index_range(news_store.LATEST_INDEX, 0, 0))[1]
		last_news_id = await store.counter_get(news_store.NEWS_COUNTER)
	except NewsError as exc:
		raise to_http_error(exc) from exc
	return dto.AdminStatsResponse(news_count=news_count, last_news_id=last_news_id)
