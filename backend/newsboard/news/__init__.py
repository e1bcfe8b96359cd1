"""News ranking and listing package."""

from fastapi import APIRouter

from newsboard.news.api import news

router = APIRouter()
router.include_router(news.router)

__all__ = ["router"]
