"""Show-more pagination over any ordered collection."""

from __future__ import annotations

import logging
from typing import TypeVar

from newsboard.news.domain.models import Cursor, Page
from newsboard.news.domain.protocols import PageSource

_LOG = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")


async def list_items(source: PageSource[T, R], cursor: Cursor) -> Page[R]:
    """Render one page of `source` starting at `cursor.start`.

    The source is fetched exactly once with (start, page_size). When items
    remain past this window the page carries a "more" link built from the
    cursor's link template, plus the cursor for that next window. The total
    comes from the same fetch, so the link reflects the collection as of this
    call only.
    """

    cursor = cursor.validate()
    items, total = await source.fetch(cursor.start, cursor.page_size)
    rendered = [source.render(item) for item in items]

    page: Page[R] = Page(items=rendered, total=int(total))
    next_offset = cursor.start + cursor.page_size
    if next_offset < total:
        page.more_link = cursor.link_for(next_offset)
        page.next_cursor = Cursor(
            start=next_offset,
            page_size=cursor.page_size,
            link_template=cursor.link_template,
        )
    _LOG.debug(
        "paginator.page",
        extra={"start": cursor.start, "page_size": cursor.page_size, "total": total, "rendered": len(rendered)},
    )
    return page


__all__ = ["list_items"]
