"""Capability interfaces consumed by the ranking and listing services."""

from __future__ import annotations

from typing import Mapping, Optional, Protocol, Sequence, TypeVar

from newsboard.news.domain.models import NewsItem

T = TypeVar("T")
R_co = TypeVar("R_co", covariant=True)


class VoteSource(Protocol):
    async def get_net_votes(self, news_id: int) -> int:
        ...


class IndexStore(Protocol):
    """Key-value plus sorted-set store holding news records and indices."""

    async def get_item(self, news_id: int) -> Optional[NewsItem]:
        ...

    async def get_items(self, news_ids: Sequence[int]) -> list[NewsItem]:
        ...

    async def put_item_fields(self, news_id: int, fields: Mapping[str, float]) -> bool:
        ...

    async def sorted_index_upsert(self, index_name: str, news_id: int, key: float) -> bool:
        ...

    async def sorted_index_range(
        self,
        index_name: str,
        start: int,
        count: int,
        *,
        descending: bool = True,
    ) -> tuple[list[int], int]:
        ...

    async def counter_get(self, name: str) -> int:
        ...

    async def existence_check(self, news_id: int) -> bool:
        ...

    async def lookup_user_id(self, username: str) -> Optional[int]:
        ...


class PageSource(Protocol[T, R_co]):
    """Fetch/render pair driving one "show more" list.

    `fetch` returns the requested window and the size of the whole collection;
    `render` turns one fetched element into whatever the caller displays.
    """

    async def fetch(self, offset: int, count: int) -> tuple[Sequence[T], int]:
        ...

    def render(self, item: T) -> R_co:
        ...


class Renderer(Protocol[R_co]):
    def __call__(self, item: NewsItem) -> R_co:
        ...


__all__ = ["IndexStore", "PageSource", "Renderer", "VoteSource"]
