"""News list queries served through show-more pagination."""

from __future__ import annotations

from typing import Generic, Optional, Sequence, TypeVar
from urllib.parse import quote

from newsboard.news.domain.exceptions import InvariantViolation, NotFoundError
from newsboard.news.domain.models import Cursor, NewsItem, Page, SourceKind
from newsboard.news.domain.protocols import IndexStore, Renderer
from newsboard.news.infra import redis as news_store
from newsboard.news.services.paginator import list_items
from newsboard.obs import metrics as obs_metrics
from newsboard.settings import settings

R = TypeVar("R")


class IndexPageSource(Generic[R]):
    """Page source reading one sorted index, newest or highest ranked first."""

    def __init__(self, store: IndexStore, index_name: str, renderer: Renderer[R]) -> None:
        self.store = store
        self.index_name = index_name
        self.renderer = renderer

    async def fetch(self, offset: int, count: int) -> tuple[Sequence[NewsItem], int]:
        news_ids, total = await self.store.sorted_index_range(self.index_name, offset, count)
        items = await self.store.get_items(news_ids)
        return items, total

    def render(self, item: NewsItem) -> R:
        return self.renderer(item)


def index_for(kind: SourceKind, user_id: Optional[int] = None) -> str:
    """Map a source kind to the sorted index backing it."""

    if kind is SourceKind.TOP:
        return news_store.TOP_INDEX
    if kind is SourceKind.LATEST:
        return news_store.LATEST_INDEX
    if user_id is None:
        raise InvariantViolation("user_id_required")
    if kind is SourceKind.BY_USER:
        return news_store.user_posted_index(user_id)
    return news_store.user_saved_index(user_id)


def default_cursor(kind: SourceKind, start: int = 0, *, username: Optional[str] = None) -> Cursor:
    """Cursor with the configured page size and link layout for a kind."""

    if kind is SourceKind.TOP:
        return Cursor(start=start, page_size=settings.top_news_per_page, link_template="/?start=$")
    if kind is SourceKind.LATEST:
        return Cursor(start=start, page_size=settings.latest_news_per_page, link_template="/latest/$")
    if kind is SourceKind.SAVED:
        return Cursor(start=start, page_size=settings.saved_news_per_page, link_template="/saved/$")
    if not username:
        raise InvariantViolation("username_required")
    return Cursor(
        start=start,
        page_size=settings.saved_news_per_page,
        link_template=f"/usernews/{quote(username, safe='')}/$",
    )


class NewsListing(Generic[R]):
    """Serves top, latest, by-user and saved pages with a bound renderer."""

    def __init__(self, store: IndexStore, renderer: Renderer[R]) -> None:
        self.store = store
        self.renderer = renderer

    async def list_page(
        self,
        kind: SourceKind,
        cursor: Cursor,
        *,
        user_id: Optional[int] = None,
    ) -> Page[R]:
        source = IndexPageSource(self.store, index_for(kind, user_id), self.renderer)
        page = await list_items(source, cursor)
        obs_metrics.page_served(kind.value, len(page.items))
        return page

    async def get_news_by_id(self, news_id: int) -> NewsItem:
        item = await self.store.get_item(news_id)
        if item is None:
            raise NotFoundError("news_not_found")
        return item

    async def resolve_username(self, username: str) -> int:
        user_id = await self.store.lookup_user_id(username)
        if user_id is None:
            raise NotFoundError("user_not_found")
        return user_id


__all__ = ["IndexPageSource", "NewsListing", "default_cursor", "index_for"]
