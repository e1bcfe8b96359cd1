"""Error translation helpers for the news API."""

from __future__ import annotations

from fastapi import HTTPException

from newsboard.news.domain import exceptions


def to_http_error(exc: exceptions.NewsError) -> HTTPException:
	"""Translate domain exceptions to FastAPI HTTP errors."""
	return HTTPException(status_code=exc.status_code, detail=exc.detail)
