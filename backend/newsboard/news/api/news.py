"""News listing endpoints."""

from __future__ import annotations

from typing import Optional
from urllib.parse import urlparse

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status
from fastapi.responses import RedirectResponse

from newsboard.news.api._errors import to_http_error
from newsboard.news.domain.exceptions import NewsError
from newsboard.news.domain.models import NewsItem, Page, SourceKind
from newsboard.news.infra.redis import RedisIndexStore
from newsboard.news.schemas import dto
from newsboard.news.services.listing import NewsListing, default_cursor
from newsboard.news.services.random_picker import RandomPicker

router = APIRouter(tags=["news"])


def render_news(item: NewsItem) -> dto.NewsItemOut:
    """JSON representation of an item; deleted items render as tombstones."""

    if item.deleted:
        return dto.NewsItemOut(
            id=item.id,
            title="[deleted news]",
            author_id=item.author_id,
            created_at=item.created_at,
            deleted=True,
        )
    domain = urlparse(item.url).hostname if item.url else None
    return dto.NewsItemOut(
        id=item.id,
        title=item.title,
        url=item.url,
        domain=domain,
        text=item.text,
        author_id=item.author_id,
        created_at=item.created_at,
        up=item.up,
        down=item.down,
        score=item.score,
        rank=item.rank,
    )


def get_store() -> RedisIndexStore:
    return RedisIndexStore()


def get_listing(store: RedisIndexStore = Depends(get_store)) -> NewsListing[dto.NewsItemOut]:
    return NewsListing(store, render_news)


def _page_response(title: str, page: Page[dto.NewsItemOut]) -> dto.NewsPageResponse:
    return dto.NewsPageResponse(
        title=title,
        items=page.items,
        more=page.more_link,
        next_start=page.next_cursor.start if page.has_more else None,
    )


@router.get("/", response_model=dto.NewsPageResponse)
async def top_news_endpoint(
    start: int = Query(default=0),
    listing: NewsListing[dto.NewsItemOut] = Depends(get_listing),
) -> dto.NewsPageResponse:
    try:
        page = await listing.list_page(SourceKind.TOP, default_cursor(SourceKind.TOP, start))
    except NewsError as exc:
        raise to_http_error(exc) from exc
    return _page_response("Top News", page)


@router.get("/latest")
async def latest_redirect_endpoint() -> RedirectResponse:
    return RedirectResponse(url="/latest/0", status_code=status.HTTP_302_FOUND)


@router.get("/latest/{start}", response_model=dto.NewsPageResponse)
async def latest_news_endpoint(
    start: int,
    listing: NewsListing[dto.NewsItemOut] = Depends(get_listing),
) -> dto.NewsPageResponse:
    try:
        page = await listing.list_page(SourceKind.LATEST, default_cursor(SourceKind.LATEST, start))
    except NewsError as exc:
        raise to_http_error(exc) from exc
    return _page_response("Latest News", page)


@router.get("/usernews/{username}/{start}", response_model=dto.NewsPageResponse)
async def user_news_endpoint(
    username: str,
    start: int,
    listing: NewsListing[dto.NewsItemOut] = Depends(get_listing),
) -> dto.NewsPageResponse:
    try:
        user_id = await listing.resolve_username(username)
        cursor = default_cursor(SourceKind.BY_USER, start, username=username)
        page = await listing.list_page(SourceKind.BY_USER, cursor, user_id=user_id)
    except NewsError as exc:
        raise to_http_error(exc) from exc
    return _page_response(f"News posted by {username}", page)


@router.get("/saved/{start}", response_model=dto.NewsPageResponse)
async def saved_news_endpoint(
    start: int,
    x_user_id: Optional[int] = Header(default=None, alias="X-User-Id"),
    listing: NewsListing[dto.NewsItemOut] = Depends(get_listing),
) -> dto.NewsPageResponse:
    if x_user_id is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="login_required")
    try:
        page = await listing.list_page(SourceKind.SAVED, default_cursor(SourceKind.SAVED, start), user_id=x_user_id)
    except NewsError as exc:
        raise to_http_error(exc) from exc
    return _page_response("Your saved news", page)


@router.get("/random")
async def random_news_endpoint(store: RedisIndexStore = Depends(get_store)) -> RedirectResponse:
    try:
        news_id = await RandomPicker(store).pick()
    except NewsError as exc:
        raise to_http_error(exc) from exc
    return RedirectResponse(url=f"/news/{news_id}", status_code=status.HTTP_302_FOUND)


@router.get("/news/{news_id}", response_model=dto.NewsItemOut)
async def news_item_endpoint(
    news_id: int,
    listing: NewsListing[dto.NewsItemOut] = Depends(get_listing),
) -> dto.NewsItemOut:
    try:
        item = await listing.get_news_by_id(news_id)
    except NewsError as exc:
        raise to_http_error(exc) from exc
    return render_news(item)


__all__ = ["get_listing", "get_store", "render_news", "router"]
